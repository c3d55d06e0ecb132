# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root
# for license information.

import io
from collections.abc import Iterable
from typing import TYPE_CHECKING, Optional

from replfmt.common import buffers, log
from replfmt.inspect import (
    BuilderOptions,
    MemberDisplayFormat,
    PrimitiveFormatterOptions,
    TypeNameFormatterOptions,
)
from replfmt.inspect.children import (
    MemberAccessError,
    NamedChildObject,
    ObjectInspector,
    ValueKind,
    classify,
    inspect_children,
)
from replfmt.inspect.primitives import EscapeSequence

if TYPE_CHECKING:
    from replfmt.formatter import ObjectFormatter


class ReprTooLongError(Exception):
    pass


class ReprBuilder:
    output: io.StringIO

    options: BuilderOptions

    level: int
    """Nesting level of the value currently being rendered; wrapped lines are indented
    by this many indentation units."""

    def __init__(self, output: io.StringIO, options: BuilderOptions):
        self.output = output
        self.options = options
        self.level = 0
        self.truncated = False
        self._length = 0
        self._line_length = 0
        self._cut: Optional[int] = None

    def __str__(self) -> str:
        return self.output.getvalue()

    def __len__(self) -> int:
        return self._length

    @property
    def chars_remaining(self) -> Optional[int]:
        """
        How many more characters are allowed in the output, or None if unlimited.

        Formatters can use this to optimize by appending larger chunks if there is enough
        space left for them. However, this is just a hint, and formatters aren't required
        to truncate their output - the ReprBuilder will take care of that automatically.
        """
        limit = self.options.maximum_output_length
        return None if limit is None else limit - self._length

    def append_text(self, text: str) -> None:
        """Appends text that can be split anywhere when it needs to be wrapped or cut."""
        if self.options.maximum_line_length is None:
            self._write(text)
            return

        lines = text.split("\n")
        last = len(lines) - 1
        for i, line in enumerate(lines):
            if i == last:
                self._fold(line)
            elif line.endswith("\r"):
                # "\r\n" is a single line break, and does not count toward the line.
                self._fold(line[:-1])
                self._write("\r\n", indivisible=True)
            else:
                self._fold(line)
                self._write("\n", indivisible=True)

    def append_token(self, text: str) -> None:
        """
        Appends text that must never be split, such as an escape sequence.

        Text that is too long to fit on any line, such as a long ellipsis or cycle
        marker, is folded like plain text instead.
        """
        max_line = self.options.maximum_line_length
        if max_line is not None:
            indentation = len(self._indentation())
            if len(text) > max_line - indentation:
                self.append_text(text)
                return
            if (
                self._line_length + len(text) > max_line
                and self._line_length > indentation
            ):
                self.wrap()
        self._write(text, indivisible=True)

    def wrap(self) -> None:
        self._write(self.options.newline, indivisible=True)
        self._write(self._indentation())

    def _indentation(self) -> str:
        indentation = self.options.indentation * self.level
        max_line = self.options.maximum_line_length
        if max_line is not None:
            indentation = indentation[: max_line // 2]
        return indentation

    def _fold(self, line: str) -> None:
        max_line = self.options.maximum_line_length
        while self._line_length + len(line) > max_line:
            room = max_line - self._line_length
            if room > 0:
                self._write(line[:room])
                line = line[room:]
            self.wrap()
        if line:
            self._write(line)

    def _write(self, text: str, indivisible: bool = False) -> None:
        if self.truncated:
            raise ReprTooLongError

        limit = self.options.maximum_output_length
        start = self._length
        end = start + len(text)
        if limit is not None and end > limit:
            self._truncate(text, indivisible)

        self.output.write(text)
        self._length = end

        newline = text.rfind("\n")
        if newline < 0:
            self._line_length += len(text)
        else:
            self._line_length = len(text) - newline - 1

        if limit is not None and indivisible and self._cut is None:
            cut = limit - len(self.options.ellipsis)
            if start < cut < end:
                self._cut = start

    def _truncate(self, text: str, indivisible: bool):
        limit = self.options.maximum_output_length
        ellipsis = self.options.ellipsis[:limit]
        start = self._length

        cut = limit - len(ellipsis)
        if self._cut is not None:
            # An indivisible piece written earlier straddles the cut point.
            cut = self._cut
        elif indivisible and start < cut:
            cut = start

        if cut <= start:
            self.output.seek(cut)
            self.output.truncate()
        else:
            self.output.write(text[: cut - start])
        self.output.write(ellipsis)
        self._length = cut + len(ellipsis)
        self.truncated = True
        raise ReprTooLongError


class Visitor:
    """
    Renders a single value, recursively, into a pooled buffer.

    A new Visitor is created for every formatting call; the ObjectFormatter that
    creates it supplies the filter and the primitive and type name formatters.
    """

    formatter: "ObjectFormatter"

    path: list[object]
    """
    Path to the current object being inspected, starting from the root object, with
    each new element corresponding to a single nested compound value.
    """

    builder: ReprBuilder

    def __init__(
        self,
        formatter: "ObjectFormatter",
        builder_options: BuilderOptions,
        primitive_options: PrimitiveFormatterOptions,
        type_name_options: TypeNameFormatterOptions,
        member_format: MemberDisplayFormat,
    ):
        self.formatter = formatter
        self.builder_options = builder_options
        self.primitive_options = primitive_options
        self.type_name_options = type_name_options
        self.member_format = member_format
        self.path = []

    def format_object(self, value: object) -> str:
        if value is None:
            # The null literal is never truncated.
            return self.formatter.primitive_formatter.null_literal

        with buffers.pool.acquire() as output:
            self.builder = ReprBuilder(output, self.builder_options)
            try:
                self.append_object(value)
            except ReprTooLongError:
                pass
            except Exception as exc:
                log.swallow_exception("Error formatting {0}", type(value).__qualname__)
                try:
                    self.builder.append_text(self.format_error(exc))
                except ReprTooLongError:
                    pass
            return str(self.builder)

    def format_error(self, exc: BaseException) -> str:
        name = type(exc).__qualname__
        try:
            message = str(exc)
        except Exception:
            message = ""
        if message:
            return f"<error: {name}: {message}>"
        return f"<error: {name}>"

    def append_object(self, value: object) -> None:
        builder = self.builder
        if isinstance(value, MemberAccessError):
            builder.append_text(self.format_error(value.exception))
            return

        try:
            kind = classify(value)
        except Exception as exc:
            builder.append_text(self.format_error(exc))
            return

        if kind is ValueKind.SCALAR:
            self.append_primitive(value)
            return

        if any(x is value for x in self.path):
            builder.append_token(self.builder_options.cycle_marker)
            return

        inspector = inspect_children(
            value, self.member_format, self.formatter.filter, kind=kind
        )
        self.path.append(value)
        builder.level = len(self.path)
        try:
            self.append_compound(inspector)
        finally:
            self.path.pop()
            builder.level = len(self.path)

    def append_piece(self, piece: str) -> None:
        if isinstance(piece, EscapeSequence):
            self.builder.append_token(piece)
        else:
            self.builder.append_text(piece)

    def append_primitive(self, value: object) -> None:
        pieces = self.formatter.primitive_formatter.iter_primitive_tokens(
            value, self.primitive_options
        )
        for piece in self._iter_safely(pieces):
            if isinstance(piece, MemberAccessError):
                self.append_object(piece)
            else:
                self.append_piece(piece)

    def append_compound(self, inspector: ObjectInspector) -> None:
        builder = self.builder
        kind = inspector.kind
        if kind is ValueKind.OPAQUE:
            try:
                text = inspector.repr()
            except Exception as exc:
                text = self.format_error(exc)
            builder.append_text(text)
            return

        builder.append_text(self.format_header(inspector))
        if kind is ValueKind.RECORD and self.member_format is MemberDisplayFormat.NONE:
            return

        if len(self.path) > self.builder_options.maximum_depth:
            builder.append_text(" { ")
            builder.append_token(self.builder_options.ellipsis)
            builder.append_text(" }")
            return

        any_children = False
        for child in self._iter_safely(inspector.children()):
            builder.append_text(", " if any_children else " { ")
            any_children = True
            self.append_child(kind, child)
        builder.append_text(" }" if any_children else " { }")

    def append_child(self, kind: ValueKind, child: object) -> None:
        builder = self.builder
        if isinstance(child, MemberAccessError):
            self.append_object(child)
        elif isinstance(child, NamedChildObject):
            builder.append_text(child.name + "=")
            self.append_object(child.value)
        elif kind is ValueKind.MAPPING and not isinstance(
            child.key, MemberAccessError
        ):
            self.append_object(child.key)
            builder.append_text(": ")
            self.append_object(child.value)
        else:
            self.append_object(child.value)

    def format_header(self, inspector: ObjectInspector) -> str:
        type_names = self.formatter.type_name_formatter
        try:
            value_type = inspector.value_type()
            if inspector.kind is ValueKind.RECORD:
                return type_names.format_type_name(value_type, self.type_name_options)
            try:
                bounds = inspector.bounds()
            except Exception:
                log.swallow_exception("Error retrieving bounds.")
                return type_names.format_type_name(value_type, self.type_name_options)
            return type_names.format_array_type_name(
                value_type, bounds, self.type_name_options
            )
        except Exception as exc:
            return self.format_error(exc)

    def _iter_safely(self, items: Optional[Iterable[object]]) -> Iterable[object]:
        """
        Yields from items, turning a failure to produce the next item into a final
        MemberAccessError item. Only the iteration itself is guarded; whatever the
        caller does with the items is not.
        """
        if items is None:
            return
        try:
            it = iter(items)
        except Exception as exc:
            yield MemberAccessError(exc)
            return
        while True:
            try:
                item = next(it)
            except StopIteration:
                return
            except Exception as exc:
                log.swallow_exception("Error retrieving next item.")
                yield MemberAccessError(exc)
                return
            yield item
