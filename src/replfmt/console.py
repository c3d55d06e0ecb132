# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root
# for license information.

"""An interactive console that displays results and errors with ObjectFormatter."""

import code
import os
import sys
from typing import Optional, TextIO

from replfmt.frames import CapturedFrame
from replfmt.formatter import ObjectFormatter
from replfmt.inspect import PrintOptions
from replfmt.inspect.filter import ObjectFilter


class ConsoleObjectFilter(ObjectFilter):
    """Hides the frames of the console driver itself, in addition to generated ones."""

    def __init__(self):
        self._ignore_files = {
            self._normalize(code.__file__),
            self._normalize(__file__),
        }

    @staticmethod
    def _normalize(path: str) -> str:
        return os.path.normcase(os.path.abspath(path))

    def is_internal_path(self, path: str) -> bool:
        return self._normalize(path) in self._ignore_files

    def is_visible(self, frame: CapturedFrame) -> bool:
        if not super().is_visible(frame):
            return False
        return frame.file_name is None or not self.is_internal_path(frame.file_name)


class ConsoleFormatter(ObjectFormatter):
    filter = ConsoleObjectFilter()


class ReplConsole(code.InteractiveConsole):
    print_options: PrintOptions
    formatter: ObjectFormatter
    output: TextIO

    def __init__(
        self,
        print_options: Optional[PrintOptions] = None,
        formatter: Optional[ObjectFormatter] = None,
        output: Optional[TextIO] = None,
        locals: Optional[dict] = None,
    ):
        super().__init__(locals=locals)
        self.print_options = PrintOptions() if print_options is None else print_options
        self.formatter = ConsoleFormatter() if formatter is None else formatter
        self.output = sys.stdout if output is None else output

    def write(self, data: str) -> None:
        self.output.write(data)

    def display(self, value: object) -> None:
        """Replacement for sys.displayhook while user code is running."""
        if value is None:
            return
        self.locals["_"] = value
        self.write(self.formatter.format_object(value, self.print_options))
        self.write("\n")

    def runcode(self, code) -> None:
        displayhook = sys.displayhook
        sys.displayhook = self.display
        try:
            super().runcode(code)
        finally:
            sys.displayhook = displayhook

    def showtraceback(self) -> None:
        _, error, _ = sys.exc_info()
        self.write(self.formatter.format_unhandled_error(error))
