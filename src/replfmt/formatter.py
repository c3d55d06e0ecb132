# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root
# for license information.

"""Object pretty printer."""

from typing import Optional

from replfmt.common import buffers, log
from replfmt.frames import (
    CapturedFailure,
    CapturedFrame,
    FrameMethod,
    FrameParameter,
    capture,
)
from replfmt.inspect import (
    BuilderOptions,
    NumberRadix,
    PrimitiveFormatterOptions,
    PrintOptions,
    TypeNameFormatterOptions,
)
from replfmt.inspect.filter import ObjectFilter
from replfmt.inspect.primitives import PrimitiveFormatter
from replfmt.inspect.repr import Visitor
from replfmt.inspect.typenames import TypeNameFormatter


class ObjectFormatter:
    """
    Formats values and unhandled exceptions for display in an interactive console.

    Defaults are chosen by overriding the class attributes and the get_*_options()
    methods in a derived class; instances hold no per-call state, and can be shared
    between threads.
    """

    filter = ObjectFilter()

    primitive_formatter = PrimitiveFormatter()

    type_name_formatter = TypeNameFormatter(primitive_formatter)

    indentation = "  "

    newline = "\n"

    at_file_line = " at {0}:{1}"
    """Appended to a stack frame line when its location is known."""

    at_file = " at {0}"
    """Appended to a stack frame line when only its file is known."""

    unprintable_message = "<unprintable message>"

    def format_object(self, value: object, options: PrintOptions) -> str:
        if options is None:
            # We could easily recover by using default options, but it makes more
            # sense for the host to choose the defaults, so we require them.
            raise ValueError("options must not be None")

        visitor = Visitor(
            self,
            self.get_builder_options(options),
            self.get_primitive_options(options),
            self.get_type_name_options(options),
            options.member_display_format,
        )
        return visitor.format_object(value)

    def get_builder_options(self, print_options: PrintOptions) -> BuilderOptions:
        return BuilderOptions(
            indentation=self.indentation,
            newline=self.newline,
            ellipsis=print_options.ellipsis,
            maximum_line_length=None,
            maximum_output_length=print_options.maximum_output_length,
            maximum_depth=print_options.maximum_depth,
        )

    def get_primitive_options(
        self, print_options: PrintOptions
    ) -> PrimitiveFormatterOptions:
        return PrimitiveFormatterOptions(
            use_hexadecimal_numbers=print_options.number_radix
            == NumberRadix.HEXADECIMAL,
            include_code_points=print_options.escape_non_printable_characters,
            omit_string_quotes=False,
        )

    def get_type_name_options(
        self, print_options: PrintOptions
    ) -> TypeNameFormatterOptions:
        return TypeNameFormatterOptions(
            use_hexadecimal_array_bounds=print_options.number_radix
            == NumberRadix.HEXADECIMAL,
            show_namespaces=False,
        )

    def format_unhandled_error(self, error: object) -> str:
        """
        Formats the message of error, followed by its stack trace, one line per frame.

        error is usually an exception, but can also be a CapturedFailure supplied by
        the host. Apart from error being None, this never raises: anything that cannot
        be formatted is left out of the report.
        """
        if error is None:
            raise ValueError("error must not be None")

        with buffers.pool.acquire() as output:
            try:
                failure = self._capture(error)
            except Exception:
                log.swallow_exception("Error capturing {0}", type(error).__qualname__)
                failure = CapturedFailure(self.unprintable_message)
            output.write(self._format_message(failure))
            output.write(self.newline)

            try:
                frames = tuple(failure.frames or ())
            except Exception:
                log.swallow_exception("Error retrieving stack frames.")
                frames = ()

            for frame in frames:
                try:
                    if not self.filter.is_visible(frame):
                        continue
                    line = self.format_frame(frame)
                except Exception:
                    log.swallow_exception("Error formatting stack frame.")
                    continue
                if line is not None:
                    output.write(line)
                    output.write(self.newline)

            return output.getvalue()

    def _capture(self, error: object) -> CapturedFailure:
        if isinstance(error, CapturedFailure):
            return error
        if isinstance(error, BaseException):
            return capture(error)
        try:
            message = str(error)
        except Exception:
            message = self.unprintable_message
        return CapturedFailure(message)

    def _format_message(self, failure: CapturedFailure) -> str:
        try:
            message = failure.message
            return self.unprintable_message if message is None else str(message)
        except Exception:
            return self.unprintable_message

    def format_frame(self, frame: CapturedFrame) -> Optional[str]:
        """
        Returns the line for frame in the stack trace, without the line terminator, or
        None if the frame is not shown.
        """
        signature = self.format_method_signature(frame.method)
        if not signature:
            return None

        line = "  + " + signature
        if frame.file_name is not None:
            if frame.line is not None:
                line += self.at_file_line.format(frame.file_name, frame.line)
            else:
                line += self.at_file.format(frame.file_name)
        return line

    def format_method_signature(self, method: FrameMethod) -> Optional[str]:
        """
        Returns a method signature display string. Used to display stack frames.

        Returns None if the method is a compiler generated method that shouldn't be
        displayed to the user.
        """
        if method.is_generated:
            return None

        type_names = self.type_name_formatter
        options = TypeNameFormatterOptions(
            use_hexadecimal_array_bounds=False, show_namespaces=True
        )

        signature = ""
        if method.declaring_type is not None:
            signature = type_names.format_type_name(method.declaring_type, options)
            signature += "."
        signature += method.name
        signature += type_names.format_type_arguments(method.type_arguments, options)

        parameters = ", ".join(
            self.format_ref_kind(parameter)
            + type_names.format_type_name(parameter.type, options)
            for parameter in method.parameters
        )
        return f"{signature}({parameters})"

    def format_ref_kind(self, parameter: FrameParameter) -> str:
        return parameter.kind.value


default_formatter = ObjectFormatter()
