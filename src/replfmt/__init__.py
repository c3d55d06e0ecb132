# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root
# for license information.

"""Pretty-printing of values and unhandled exceptions for interactive consoles.
"""

__all__ = [
    "CapturedFailure",
    "MemberDisplayFormat",
    "NumberRadix",
    "ObjectFormatter",
    "PrintOptions",
    "format_object",
    "format_unhandled_error",
]

__version__ = "0.1.0"

from replfmt.frames import CapturedFailure
from replfmt.inspect import MemberDisplayFormat, NumberRadix, PrintOptions
from replfmt.formatter import ObjectFormatter, default_formatter


def format_object(value, options):
    """Formats value as bounded, human-readable text.

    Raises ValueError if options is None. Never raises for any value: failures inside
    the value are rendered inline as <error: ...> placeholders.
    """
    return default_formatter.format_object(value, options)


def format_unhandled_error(error):
    """Formats an exception's message followed by its filtered stack trace.

    Raises ValueError if error is None, and never raises otherwise.
    """
    return default_formatter.format_unhandled_error(error)
