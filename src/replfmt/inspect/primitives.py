# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root
# for license information.

"""Rendering of scalar values: numbers, strings, bytes, booleans and None."""

from collections.abc import Iterable, Iterator
from typing import Callable, Optional

from replfmt.inspect import PrimitiveFormatterOptions


class EscapeSequence(str):
    """
    A piece of formatted text that must be kept whole: when output is truncated or
    wrapped, it can only be cut before or after it, never in the middle.
    """


HEX_WIDTHS = (8, 16, 32)
"""
Zero-padded widths, in hex digits, of hexadecimal integers: 32-bit, 64-bit and 128-bit.
Larger values are padded to a multiple of 8 digits.
"""

RUN_LENGTH = 256
"""Maximum length of an unescaped run of characters yielded as a single piece."""

_SHORT_ESCAPES = {
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\\": "\\\\",
}


def choose_quote(text: str | bytes | bytearray) -> str:
    # Same choice as repr(): single quotes unless that would require escaping and
    # double quotes would not.
    single, double = ("'", '"') if isinstance(text, str) else (b"'", b'"')
    if single in text and double not in text:
        return '"'
    return "'"


class PrimitiveFormatter:
    """
    Formats scalar values.

    Only exact types are handled here; subclasses of int, str etc may have their own
    repr, and are rendered as regular objects instead.
    """

    null_literal = "None"

    def format_primitive(
        self, value: object, options: PrimitiveFormatterOptions
    ) -> Optional[str]:
        """Returns the formatted value, or None if value is not a primitive."""
        pieces = self.iter_primitive_tokens(value, options)
        if pieces is None:
            return None
        return "".join(pieces)

    def iter_primitive_tokens(
        self, value: object, options: PrimitiveFormatterOptions
    ) -> Optional[Iterator[str]]:
        """
        Like format_primitive(), but returns the output as a sequence of pieces, so that
        the caller can stop consuming them as soon as it runs out of space. Pieces that
        are EscapeSequence instances must not be split.
        """
        if value is None:
            return iter((self.null_literal,))
        if value is ... or value is NotImplemented:
            return iter((repr(value),))
        formatter = self.formatters.get(type(value))
        if formatter is None:
            return None
        return formatter(self, value, options)

    def format_int(self, value: int, options: PrimitiveFormatterOptions) -> str:
        if not options.use_hexadecimal_numbers:
            return str(value)

        digits = format(abs(value), "x")
        for width in HEX_WIDTHS:
            if len(digits) <= width:
                break
        else:
            width = -(-len(digits) // 8) * 8
        sign = "-" if value < 0 else ""
        return f"{sign}0x{digits.zfill(width)}"

    def format_char(self, ch: str, quote: str, options: PrimitiveFormatterOptions):
        """
        Returns the escape sequence for ch inside a string literal delimited by quote,
        or None if it can be rendered as is.
        """
        escape = _SHORT_ESCAPES.get(ch)
        if escape is not None:
            return escape
        if ch == quote:
            return "\\" + ch
        if ch.isprintable():
            return None

        code = ord(ch)
        if options.include_code_points:
            return f"\\u{{{code:04X}}}"
        if code < 0x100:
            return f"\\x{code:02x}"
        if code < 0x10000:
            return f"\\u{code:04x}"
        return f"\\U{code:08x}"

    def format_byte(self, byte: int, quote: str) -> Optional[str]:
        ch = chr(byte)
        escape = _SHORT_ESCAPES.get(ch)
        if escape is not None:
            return escape
        if ch == quote:
            return "\\" + ch
        if 0x20 <= byte < 0x7F:
            return None
        return f"\\x{byte:02x}"

    def _iter_escaped(
        self, chars: Iterable[str], escape: Callable[[str], Optional[str]]
    ) -> Iterator[str]:
        run = []
        for ch in chars:
            escaped = escape(ch)
            if escaped is None:
                run.append(ch)
                if len(run) < RUN_LENGTH:
                    continue
            if run:
                yield "".join(run)
                run.clear()
            if escaped is not None:
                yield EscapeSequence(escaped)
        if run:
            yield "".join(run)

    def _iter_int(self, value: int, options: PrimitiveFormatterOptions):
        yield self.format_int(value, options)

    def _iter_bool(self, value: bool, options: PrimitiveFormatterOptions):
        yield "True" if value else "False"

    def _iter_repr(self, value: object, options: PrimitiveFormatterOptions):
        yield repr(value)

    def _iter_str(self, value: str, options: PrimitiveFormatterOptions):
        # Without quotes there is no delimiter to escape, but non-printable
        # characters are still escaped.
        quote = "" if options.omit_string_quotes else choose_quote(value)
        if quote:
            yield quote
        yield from self._iter_escaped(
            value, lambda ch: self.format_char(ch, quote, options)
        )
        if quote:
            yield quote

    def _iter_bytes(self, value: bytes | bytearray, prefix: str, suffix: str):
        quote = choose_quote(value)
        yield prefix + quote
        yield from self._iter_escaped(
            (chr(byte) for byte in value),
            lambda ch: self.format_byte(ord(ch), quote),
        )
        yield quote + suffix

    formatters: dict[type, Callable] = {
        bool: _iter_bool,
        int: _iter_int,
        float: _iter_repr,
        complex: _iter_repr,
        str: _iter_str,
        bytes: lambda self, value, options: self._iter_bytes(value, "b", ""),
        bytearray: lambda self, value, options: self._iter_bytes(
            value, "bytearray(b", ")"
        ),
    }
    """Maps exact types to functions that yield the pieces of their formatted value."""
