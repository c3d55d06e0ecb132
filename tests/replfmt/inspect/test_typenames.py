import collections.abc
import sys
import typing
from dataclasses import dataclass

import pytest

from replfmt.inspect import TypeNameFormatterOptions
from replfmt.inspect.primitives import PrimitiveFormatter
from replfmt.inspect.typenames import TypeNameFormatter


T = typing.TypeVar("T")


class Widget:
    class Part:
        pass


@dataclass
class Box(typing.Generic[T]):
    item: T


type_names = TypeNameFormatter(PrimitiveFormatter())
short = TypeNameFormatterOptions()
qualified = TypeNameFormatterOptions(show_namespaces=True)
hex_bounds = TypeNameFormatterOptions(use_hexadecimal_array_bounds=True)


@pytest.mark.parametrize(
    "type_, expected",
    [
        (int, "int"),
        (type(None), "None"),
        (None, "None"),
        (Widget, "Widget"),
        (Widget.Part, "Widget.Part"),
        (list[int], "list[int]"),
        (dict[str, list[int]], "dict[str, list[int]]"),
        (typing.Dict[str, int], "dict[str, int]"),
        (typing.List[Widget], "list[Widget]"),
        (tuple[int, ...], "tuple[int, ...]"),
        (typing.Optional[int], "int | None"),
        (int | str, "int | str"),
        (typing.Literal["a", 1], "Literal['a', 1]"),
        (collections.abc.Callable[[int, str], bool], "Callable[[int, str], bool]"),
        (T, "T"),
        (Box[int], "Box[int]"),
        (Box, "Box"),
        (sys, "sys"),
        ("Demo.Widget", "Demo.Widget"),
    ],
)
def test_type_name(type_, expected):
    assert type_names.format_type_name(type_, short) == expected


@pytest.mark.parametrize(
    "type_, expected",
    [
        (int, "int"),
        (Widget, f"{__name__}.Widget"),
        (Widget.Part, f"{__name__}.Widget.Part"),
        (list[Widget], f"list[{__name__}.Widget]"),
        (
            collections.abc.Callable[[int], None],
            "collections.abc.Callable[[int], None]",
        ),
    ],
)
def test_type_name_with_namespaces(type_, expected):
    assert type_names.format_type_name(type_, qualified) == expected


def test_local_class():
    class Local:
        pass

    assert type_names.format_type_name(Local, short) == "Local"
    assert type_names.format_type_name(Local, qualified) == f"{__name__}.Local"


def test_type_arguments():
    assert type_names.format_type_arguments((), short) == ""
    assert type_names.format_type_arguments((int, str), short) == "[int, str]"
    assert type_names.format_type_arguments([Widget], qualified) == (
        f"[{__name__}.Widget]"
    )


@pytest.mark.parametrize(
    "type_, bounds, options, expected",
    [
        (list, (3,), short, "list(3)"),
        (list, (0,), short, "list(0)"),
        (list, (3,), hex_bounds, "list(0x00000003)"),
        (Widget, (2, 3), short, "Widget(2, 3)"),
        (Widget, (2, 3), hex_bounds, "Widget(0x00000002, 0x00000003)"),
        (Box[int], (2,), short, "Box[int](2)"),
        (Box[int], (2,), qualified, f"{__name__}.Box[int](2)"),
    ],
)
def test_array_type_name(type_, bounds, options, expected):
    assert type_names.format_array_type_name(type_, bounds, options) == expected
