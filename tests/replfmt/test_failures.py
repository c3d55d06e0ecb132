# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root
# for license information.

import pytest

import replfmt
from replfmt.formatter import ObjectFormatter
from replfmt.frames import (
    CapturedFailure,
    CapturedFrame,
    FrameMethod,
    FrameParameter,
    ParameterKind,
)
from replfmt.inspect.filter import ObjectFilter


# A type from a host runtime, as it would be described to the formatter.
Widget = type("Widget", (), {"__module__": "Demo"})

render = FrameMethod(
    Widget, "Render", parameters=(FrameParameter("value", int, ParameterKind.REF),)
)


class Printer:
    def render(self, count):
        raise ValueError("boom")


def test_captured_failure():
    failure = CapturedFailure(
        "message", (CapturedFrame(render, file_name="widget.src", line=42),)
    )
    assert replfmt.format_unhandled_error(failure) == (
        "message\n  + Demo.Widget.Render(ref int) at widget.src:42\n"
    )


@pytest.mark.parametrize(
    "frame, expected",
    [
        (CapturedFrame(render), "  + Demo.Widget.Render(ref int)"),
        (
            CapturedFrame(render, file_name="widget.src"),
            "  + Demo.Widget.Render(ref int) at widget.src",
        ),
        (
            CapturedFrame(FrameMethod(None, "main")),
            "  + main()",
        ),
        (
            CapturedFrame(FrameMethod("Demo.Program", "Main", type_arguments=(int, str))),
            "  + Demo.Program.Main[int, str]()",
        ),
        (
            CapturedFrame(
                FrameMethod(
                    Widget,
                    "Update",
                    parameters=(
                        FrameParameter("a", list[int]),
                        FrameParameter("b", str, ParameterKind.OUT),
                        FrameParameter("c", Widget, ParameterKind.IN),
                    ),
                )
            ),
            "  + Demo.Widget.Update(list[int], out str, in Demo.Widget)",
        ),
        (
            CapturedFrame(
                FrameMethod(
                    None,
                    "call",
                    parameters=(
                        FrameParameter("args", tuple, ParameterKind.VAR_POSITIONAL),
                        FrameParameter("kwargs", dict, ParameterKind.VAR_KEYWORD),
                    ),
                )
            ),
            "  + call(*tuple, **dict)",
        ),
    ],
)
def test_format_frame(frame, expected):
    assert ObjectFormatter().format_frame(frame) == expected


def test_generated_method_suppressed():
    generated = FrameMethod(Widget, "<genexpr>", is_generated=True)
    failure = CapturedFailure(
        "message",
        (
            CapturedFrame(generated, "widget.src", 1),
            CapturedFrame(render, "widget.src", 2),
        ),
    )
    assert replfmt.format_unhandled_error(failure) == (
        "message\n  + Demo.Widget.Render(ref int) at widget.src:2\n"
    )


def test_generated_frame_filtered():
    failure = CapturedFailure(
        "message",
        (
            CapturedFrame(render, "widget.src", 1, is_generated=True),
            CapturedFrame(render, "widget.src", 2),
        ),
    )
    assert replfmt.format_unhandled_error(failure) == (
        "message\n  + Demo.Widget.Render(ref int) at widget.src:2\n"
    )


def test_custom_filter():
    class HideWidgetSource(ObjectFilter):
        def is_visible(self, frame):
            return super().is_visible(frame) and frame.file_name != "widget.src"

    class HostFormatter(ObjectFormatter):
        filter = HideWidgetSource()

    failure = CapturedFailure(
        "message",
        (
            CapturedFrame(render, "widget.src", 1),
            CapturedFrame(render, "host.src", 2),
        ),
    )
    assert HostFormatter().format_unhandled_error(failure) == (
        "message\n  + Demo.Widget.Render(ref int) at host.src:2\n"
    )


def test_raised_exception():
    try:
        Printer().render(3)
    except ValueError as exc:
        error = exc

    code = Printer.render.__code__
    lines = replfmt.format_unhandled_error(error).splitlines()
    assert lines[0] == "ValueError: boom"
    assert lines[1] == (
        f"  + {__name__}.Printer.render(int) at "
        f"{code.co_filename}:{code.co_firstlineno + 1}"
    )
    assert lines[2].startswith(f"  + {__name__}.test_raised_exception() at ")
    assert len(lines) == 3


def test_generator_expression_frame_omitted():
    try:
        sum(1 // x for x in [0])
    except ZeroDivisionError as exc:
        error = exc

    lines = replfmt.format_unhandled_error(error).splitlines()
    assert lines[0].startswith("ZeroDivisionError: ")
    assert len(lines) == 2
    assert "<genexpr>" not in lines[1]


def test_hidden_frame_omitted():
    def hidden():
        __tracebackhide__ = True
        raise ValueError("hidden")

    try:
        hidden()
    except ValueError as exc:
        error = exc

    lines = replfmt.format_unhandled_error(error).splitlines()
    assert len(lines) == 2
    assert lines[1].startswith(f"  + {__name__}.test_hidden_frame_omitted() at ")


def test_requires_error():
    with pytest.raises(ValueError):
        replfmt.format_unhandled_error(None)


class BadStr:
    def __str__(self):
        raise RuntimeError("no str")


class BadError(Exception):
    def __str__(self):
        raise RuntimeError("no str")


class BadClass:
    @property
    def __class__(self):
        raise RuntimeError("no class")


@pytest.mark.parametrize(
    "error, expected",
    [
        ("plain text", "plain text\n"),
        (BadStr(), "<unprintable message>\n"),
        (CapturedFailure(None), "<unprintable message>\n"),
        (CapturedFailure(BadStr()), "<unprintable message>\n"),
        (CapturedFailure("message", None), "message\n"),
        (CapturedFailure("message", (object(), None, 42)), "message\n"),
        (
            CapturedFailure(
                "message", (CapturedFrame(FrameMethod(BadStr(), "Run")),)
            ),
            "message\n",
        ),
        (CapturedFailure("message", 42), "message\n"),
    ],
)
def test_malformed(error, expected):
    assert replfmt.format_unhandled_error(error) == expected


def test_failing_class_lookup():
    assert replfmt.format_unhandled_error(BadClass()) == "<unprintable message>\n"


def test_unprintable_exception():
    # Like tracebacks, the message qualifies the exception type with its module.
    assert replfmt.format_unhandled_error(BadError()) == (
        f"{__name__}.BadError: <exception str() failed>\n"
    )
