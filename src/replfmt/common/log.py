# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root
# for license information.

import functools
import io
import os
import platform
import sys
import threading
import time
import traceback

from replfmt.common import options


LEVELS = ("debug", "info", "warning", "error")
"""Logging levels, lowest to highest importance.
"""

stderr = sys.__stderr__

stderr_levels = {"warning", "error"}
"""What should be logged to stderr.
"""

file_levels = set(LEVELS)
"""What should be logged to file, when it is not None.
"""

file = None
"""If not None, which file to log to.

This can be automatically set by to_file().
"""

timestamp_format = "09.3f"
"""Format spec used for timestamps. Can be changed to dial precision up or down.
"""


_lock = threading.Lock()
_timestamp_zero = time.monotonic()


def _is_logged(level):
    return level in stderr_levels or bool(file and level in file_levels)


def write(level, text):
    assert level in LEVELS

    t = time.monotonic() - _timestamp_zero
    prefix = ("{0}+{1:" + timestamp_format + "}: ").format(level[0].upper(), t)

    indent = "\n" + (" " * len(prefix))
    output = indent.join(text.split("\n"))
    output = prefix + output + "\n\n"

    with _lock:
        if level in stderr_levels and stderr is not None:
            try:
                stderr.write(output)
            except Exception:
                pass

        if file and level in file_levels:
            try:
                file.write(output)
                file.flush()
            except Exception:
                pass

    return text


def write_format(level, format_string, *args, **kwargs):
    # Don't spend time formatting messages that nobody is going to see.
    if level != "error" and not _is_logged(level):
        return format_string

    try:
        text = format_string.format(*args, **kwargs)
    except Exception:
        exception()
        raise
    return write(level, text)


debug = functools.partial(write_format, "debug")
info = functools.partial(write_format, "info")
warning = functools.partial(write_format, "warning")


def error(*args, **kwargs):
    """Logs an error.

    Returns the output wrapped in AssertionError. Thus, the following::

        raise log.error(...)

    has the same effect as::

        log.error(...)
        assert False, ...
    """
    return AssertionError(write_format("error", *args, **kwargs))


def exception(format_string="", *args, **kwargs):
    """Logs an exception with full traceback.

    If format_string is specified, it is formatted with str.format(*args, **kwargs),
    and prepended to the exception traceback on a separate line.

    If exc_info is specified, the exception it describes will be logged. Otherwise,
    sys.exc_info() - i.e. the exception being handled currently - will be logged.

    If level is specified, the exception will be logged as a message of that level.
    The default is "error".

    Returns the exception object, for convenient re-raising::

        try:
            ...
        except Exception:
            raise log.exception()  # log it and re-raise
    """

    level = kwargs.pop("level", "error")
    exc_info = kwargs.pop("exc_info", sys.exc_info())
    if not _is_logged(level):
        return exc_info[1]

    if format_string:
        format_string += "\n\n"
    format_string += "{exception}"

    exception = "".join(traceback.format_exception(*exc_info))
    write_format(level, format_string, *args, exception=exception, **kwargs)

    return exc_info[1]


def swallow_exception(format_string="", *args, **kwargs):
    """Logs an exception that is being handled and will not be re-raised.

    Same as exception(), but defaults to the "debug" level, since swallowed
    exceptions are expected in the normal course of formatting user values.
    """
    kwargs.setdefault("level", "debug")
    exception(format_string, *args, **kwargs)


def to_file(filename=None):
    global file
    if file is not None:
        return

    if filename is None:
        if options.log_dir is None:
            warning(
                "replfmt.log.to_file() cannot generate log file name - "
                "REPLFMT_LOG_DIR is not set"
            )
            return
        filename = "{0}/replfmt-{1}.log".format(options.log_dir, os.getpid())

    file = io.open(filename, "w", encoding="utf-8")

    import replfmt

    info(
        "{0} {1}\n{2} {3} ({4}-bit)\nreplfmt {5}",
        platform.platform(),
        platform.machine(),
        platform.python_implementation(),
        platform.python_version(),
        64 if sys.maxsize > 2**32 else 32,
        replfmt.__version__,
    )
