# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root
# for license information.

"""
Captured failures: the message and the call frames of an exception, described in
terms of declaring types, methods and parameters.

Hosts with their own runtime can build CapturedFailure directly; for Python exceptions,
capture() derives it from the traceback.
"""

import enum
import inspect
import sys
import traceback
from dataclasses import dataclass
from types import CodeType, FrameType
from typing import Iterator, Optional

from replfmt.common import log


class ParameterKind(enum.Enum):
    """How an argument is passed. The value is the prefix shown before its type."""

    VALUE = ""
    REF = "ref "
    OUT = "out "
    IN = "in "
    VAR_POSITIONAL = "*"
    VAR_KEYWORD = "**"


@dataclass(frozen=True)
class FrameParameter:
    name: str
    type: object
    kind: ParameterKind = ParameterKind.VALUE


@dataclass(frozen=True)
class FrameMethod:
    declaring_type: object
    """A class, a module, a string naming either, or None."""

    name: str

    parameters: tuple[FrameParameter, ...] = ()

    type_arguments: tuple[object, ...] = ()

    is_generated: bool = False
    """Whether the method was synthesized by the compiler rather than written by the
    user, e.g. the code object of a generator expression."""


@dataclass(frozen=True)
class CapturedFrame:
    method: FrameMethod

    file_name: Optional[str] = None

    line: Optional[int] = None

    is_generated: bool = False
    """Whether the frame runs in a context that asked to be hidden from tracebacks."""


@dataclass(frozen=True)
class CapturedFailure:
    message: str

    frames: tuple[CapturedFrame, ...] = ()
    """Innermost frame first."""


GENERATED_CODE_NAMES = frozenset({"<genexpr>", "<listcomp>", "<setcomp>", "<dictcomp>"})

HIDE_MARKER = "__tracebackhide__"
"""Frames that define this name, locally or globally, with a true value are hidden."""

RECEIVER_NAMES = ("self", "cls")


def capture(error: BaseException) -> CapturedFailure:
    message = format_message(error)

    try:
        entries = list(traceback.walk_tb(error.__traceback__))
    except Exception:
        log.swallow_exception("Error walking traceback of {0}", type(error).__qualname__)
        entries = []

    frames = []
    for frame_object, line in reversed(entries):
        try:
            frames.append(capture_frame(frame_object, line))
        except Exception:
            log.swallow_exception("Error capturing frame.")
    return CapturedFailure(message, tuple(frames))


def format_message(error: BaseException) -> str:
    try:
        lines = traceback.format_exception_only(type(error), error)
        return "".join(lines).rstrip("\n")
    except Exception:
        log.swallow_exception("Error formatting exception message.")
        return type(error).__qualname__


def capture_frame(frame: FrameType, line: Optional[int]) -> CapturedFrame:
    code = frame.f_code
    f_locals = frame.f_locals

    hidden = f_locals.get(HIDE_MARKER, frame.f_globals.get(HIDE_MARKER, False))

    parameters = list(_parameters(code, f_locals))
    declaring_type, has_receiver = _declaring_type(frame, code, parameters)
    if has_receiver:
        del parameters[0]

    method = FrameMethod(
        declaring_type,
        code.co_name,
        parameters=tuple(parameters),
        is_generated=code.co_name in GENERATED_CODE_NAMES,
    )
    return CapturedFrame(
        method,
        file_name=code.co_filename,
        line=line,
        is_generated=bool(hidden),
    )


def _parameters(code: CodeType, f_locals) -> Iterator[FrameParameter]:
    # co_varnames lists positional, then keyword-only, then *args, then **kwargs;
    # they are reported in declaration order instead.
    names = code.co_varnames
    positional = code.co_argcount
    count = positional + code.co_kwonlyargcount
    kinds = [(name, ParameterKind.VALUE) for name in names[:positional]]
    if code.co_flags & inspect.CO_VARARGS:
        kinds.append((names[count], ParameterKind.VAR_POSITIONAL))
    kinds += [(name, ParameterKind.VALUE) for name in names[positional:count]]
    if code.co_flags & inspect.CO_VARARGS:
        count += 1
    if code.co_flags & inspect.CO_VARKEYWORDS:
        kinds.append((names[count], ParameterKind.VAR_KEYWORD))

    for name, kind in kinds:
        try:
            type_ = type(f_locals[name])
        except KeyError:
            # Deleted before the exception was raised.
            type_ = object
        yield FrameParameter(name, type_, kind)


def _declaring_type(
    frame: FrameType, code: CodeType, parameters: list[FrameParameter]
) -> tuple[object, bool]:
    """
    Returns the declaring type of the code running in frame, and whether the first
    parameter is the receiver (self or cls) of a method of that type.
    """
    qualname = getattr(code, "co_qualname", code.co_name)
    owner, _, _ = qualname.rpartition(".")
    module_name = frame.f_globals.get("__name__")

    if not owner:
        module = sys.modules.get(module_name) if module_name else None
        if module is not None and vars(module) is frame.f_globals:
            return module, False
        return module_name, False

    if code.co_argcount and parameters and parameters[0].name in RECEIVER_NAMES:
        receiver = frame.f_locals.get(parameters[0].name)
        candidates = list(type(receiver).__mro__)
        if isinstance(receiver, type):
            candidates[:0] = receiver.__mro__
        for cls in candidates:
            if getattr(cls, "__qualname__", None) == owner:
                return cls, True

    first, *rest = owner.split(".")
    cls = frame.f_globals.get(first)
    try:
        for part in rest:
            cls = getattr(cls, part, None)
    except Exception:
        cls = None
    if isinstance(cls, type):
        return cls, False

    return (f"{module_name}.{owner}" if module_name else owner), False
