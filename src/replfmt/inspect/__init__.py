# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root
# for license information.

"""
Object inspection: rendering values, enumerating children etc.

This module defines the options that drive formatting. PrintOptions is what the host
passes in; the other option classes are derived from it by ObjectFormatter for each
call, one set per component that consumes them.
"""

import enum
from dataclasses import dataclass
from typing import Optional


class NumberRadix(enum.Enum):
    DECIMAL = 10
    HEXADECIMAL = 16


class MemberDisplayFormat(enum.Enum):
    """Which members of a record-like value are shown."""

    NONE = "none"
    PUBLIC = "public"
    ALL = "all"


def _check_length(name: str, value: Optional[int], minimum: int) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise ValueError(f"{name} must be None or an int >= {minimum}, not {value!r}")


@dataclass(frozen=True)
class PrintOptions:
    ellipsis: str = "..."
    """Text appended to the output when it is truncated."""

    maximum_output_length: Optional[int] = 1024
    """
    Maximum length of the whole output, including the ellipsis. None means that
    output is never truncated.
    """

    number_radix: NumberRadix = NumberRadix.DECIMAL

    escape_non_printable_characters: bool = True
    """
    Whether non-printable characters in strings are shown as explicit code points
    rather than as the usual Python escapes.
    """

    member_display_format: MemberDisplayFormat = MemberDisplayFormat.PUBLIC

    maximum_depth: int = 32
    """How many compound values can be nested before their contents are elided."""

    def __post_init__(self):
        if not isinstance(self.ellipsis, str):
            raise ValueError(f"ellipsis must be a str, not {self.ellipsis!r}")
        _check_length("maximum_output_length", self.maximum_output_length, 1)
        _check_length("maximum_depth", self.maximum_depth, 1)
        if not isinstance(self.number_radix, NumberRadix):
            raise ValueError(f"invalid number_radix {self.number_radix!r}")
        if not isinstance(self.member_display_format, MemberDisplayFormat):
            raise ValueError(
                f"invalid member_display_format {self.member_display_format!r}"
            )


@dataclass(frozen=True)
class BuilderOptions:
    indentation: str = "  "
    """Indentation added for every nesting level when output wraps to a new line."""

    newline: str = "\n"

    ellipsis: str = "..."

    maximum_line_length: Optional[int] = None
    """
    Maximum length of a single line of output. None means that lines are never
    wrapped. Must leave room for the longest escape sequence.
    """

    maximum_output_length: Optional[int] = None

    maximum_depth: int = 32

    cycle_marker: str = "<cycle>"
    """Rendered in place of a value that is already being rendered further up."""

    def __post_init__(self):
        _check_length("maximum_output_length", self.maximum_output_length, 0)
        _check_length("maximum_line_length", self.maximum_line_length, 24)
        _check_length("maximum_depth", self.maximum_depth, 1)


@dataclass(frozen=True)
class PrimitiveFormatterOptions:
    use_hexadecimal_numbers: bool = False

    include_code_points: bool = False
    """Render non-printable characters as \\u{XXXX} code points."""

    omit_string_quotes: bool = False
    """Render strings without surrounding quotes. Non-printable characters and
    backslashes are still escaped; quote characters are not."""


@dataclass(frozen=True)
class TypeNameFormatterOptions:
    use_hexadecimal_array_bounds: bool = False

    show_namespaces: bool = False
    """Whether type names are qualified with the name of their module."""
