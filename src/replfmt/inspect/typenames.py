# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root
# for license information.

"""Rendering of type names, including generic arguments and collection bounds."""

import types
import typing
from collections.abc import Sequence

from replfmt.inspect import PrimitiveFormatterOptions, TypeNameFormatterOptions
from replfmt.inspect.primitives import PrimitiveFormatter


_UNION_TYPES = (typing.Union, types.UnionType)


class TypeNameFormatter:
    primitive_formatter: PrimitiveFormatter

    def __init__(self, primitive_formatter: PrimitiveFormatter):
        self.primitive_formatter = primitive_formatter

    def format_type_name(self, type_: object, options: TypeNameFormatterOptions) -> str:
        """
        Formats a type: a class, a parameterized generic such as list[int] or
        typing.Dict[str, int], a union, a TypeVar, a module, or a string naming a type.
        """
        if type_ is None or type_ is type(None):
            return "None"
        if type_ is ...:
            return "..."
        if isinstance(type_, str):
            return type_
        if isinstance(type_, types.ModuleType):
            return type_.__name__
        if isinstance(type_, typing.TypeVar):
            return type_.__name__
        if isinstance(type_, list):
            # Parameter list of Callable[[...], ...].
            return "[" + self._format_arguments(type_, options) + "]"

        origin = typing.get_origin(type_)
        if origin is not None:
            return self.format_generic_type_name(type_, origin, options)

        if isinstance(type_, type):
            return self.format_class_name(type_, options)
        return str(type_)

    def format_class_name(self, cls: type, options: TypeNameFormatterOptions) -> str:
        name = getattr(cls, "__qualname__", None) or cls.__name__
        # Classes defined inside functions are shown by their local name.
        _, _, name = name.rpartition("<locals>.")
        if options.show_namespaces:
            module = getattr(cls, "__module__", None)
            if module and module != "builtins":
                name = module + "." + name
        return name

    def format_generic_type_name(
        self, type_: object, origin: object, options: TypeNameFormatterOptions
    ) -> str:
        args = typing.get_args(type_)
        if origin in _UNION_TYPES:
            return " | ".join(self.format_type_name(arg, options) for arg in args)
        if origin is typing.Literal:
            return "Literal[" + ", ".join(repr(arg) for arg in args) + "]"
        return self.format_type_name(origin, options) + self.format_type_arguments(
            args, options
        )

    def format_type_arguments(
        self, arguments: Sequence[object], options: TypeNameFormatterOptions
    ) -> str:
        """Formats generic arguments as "[A, B]", or "" if there are none."""
        if not arguments:
            return ""
        return "[" + self._format_arguments(arguments, options) + "]"

    def _format_arguments(
        self, arguments: Sequence[object], options: TypeNameFormatterOptions
    ) -> str:
        return ", ".join(self.format_type_name(arg, options) for arg in arguments)

    def format_array_bound(self, bound: int, options: TypeNameFormatterOptions) -> str:
        primitive_options = PrimitiveFormatterOptions(
            use_hexadecimal_numbers=options.use_hexadecimal_array_bounds
        )
        return self.primitive_formatter.format_int(bound, primitive_options)

    def format_array_type_name(
        self,
        type_: object,
        bounds: Sequence[int],
        options: TypeNameFormatterOptions,
    ) -> str:
        """
        Formats the type of a sized collection together with its bounds, e.g. "list(3)"
        or "ndarray(2, 3)". Bounds are independent of generic arguments, so a
        parameterized type renders as "Stack[int](2)".
        """
        name = self.format_type_name(type_, options)
        bounds = ", ".join(self.format_array_bound(bound, options) for bound in bounds)
        return f"{name}({bounds})"
