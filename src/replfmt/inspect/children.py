# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root
# for license information.

"""
Classification of values, and enumeration of their children: items of collections,
and members of record-like objects.
"""

import dataclasses
import enum
from collections.abc import Collection, Iterable, Mapping
from itertools import count
from typing import Optional

from replfmt.common import log
from replfmt.inspect import MemberDisplayFormat
from replfmt.inspect.filter import ObjectFilter
from replfmt.inspect.primitives import PrimitiveFormatter


class ValueKind(enum.Enum):
    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    RECORD = "record"
    OPAQUE = "opaque"


class MemberAccessError:
    """
    Stands in for the value of a child that could not be retrieved, because the
    accessor, the lookup or the iteration step that was supposed to produce it raised.
    """

    exception: Exception

    def __init__(self, exception: Exception):
        self.exception = exception

    def __repr__(self):
        return f"MemberAccessError({self.exception!r})"

    def __eq__(self, other):
        return (
            isinstance(other, MemberAccessError) and self.exception is other.exception
        )


@dataclasses.dataclass
class NamedChildObject:
    """Child object that is retrieved by name, e.g. an attribute or a field."""

    name: str
    value: object


@dataclasses.dataclass
class IndexedChildObject:
    """Child object that is retrieved by key or by position."""

    key: object
    value: object


_TEXT_TYPES = (str, bytes, bytearray, memoryview)


def _has_slots(cls: type) -> bool:
    return any("__slots__" in vars(base) for base in cls.__mro__)


def classify(value: object) -> ValueKind:
    cls = type(value)
    if value is None or value is ... or value is NotImplemented:
        return ValueKind.SCALAR
    if cls in PrimitiveFormatter.formatters:
        return ValueKind.SCALAR
    if isinstance(value, type):
        return ValueKind.OPAQUE
    if dataclasses.is_dataclass(value):
        return ValueKind.RECORD
    if isinstance(value, tuple) and hasattr(cls, "_fields"):
        return ValueKind.RECORD
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    if isinstance(value, Collection) and not isinstance(value, _TEXT_TYPES):
        return ValueKind.SEQUENCE
    if cls.__repr__ is not object.__repr__:
        return ValueKind.OPAQUE
    if hasattr(value, "__dict__") or _has_slots(cls):
        return ValueKind.RECORD
    return ValueKind.OPAQUE


class ObjectInspector:
    """
    Inspects a generic object, providing access to its children (attributes, items etc).

    The base class has no children, and is used for opaque values that are rendered
    with their own repr().
    """

    kind = ValueKind.OPAQUE

    value: object
    member_format: MemberDisplayFormat
    filter: ObjectFilter

    def __init__(
        self,
        value: object,
        member_format: MemberDisplayFormat = MemberDisplayFormat.PUBLIC,
        filter: Optional[ObjectFilter] = None,
    ):
        self.value = value
        self.member_format = member_format
        self.filter = ObjectFilter() if filter is None else filter

    def value_type(self) -> object:
        """
        Type of the value for display purposes. For instances of parameterized user
        generics, this is the parameterized type, e.g. Box[int] rather than Box.
        """
        try:
            orig_class = getattr(self.value, "__orig_class__", None)
        except Exception:
            orig_class = None
        return type(self.value) if orig_class is None else orig_class

    def repr(self) -> str:
        return repr(self.value)

    def children(self) -> Iterable[NamedChildObject | IndexedChildObject]:
        yield from self.named_children()
        yield from self.indexed_children()

    def named_children(self) -> Iterable[NamedChildObject]:
        return ()

    def indexed_children(self) -> Iterable[IndexedChildObject]:
        return ()


class RecordInspector(ObjectInspector):
    """
    Inspects record-like objects: dataclasses, named tuples, and plain objects that
    keep their state in __dict__ or __slots__.
    """

    kind = ValueKind.RECORD

    def is_visible_member(self, name: str) -> bool:
        match self.member_format:
            case MemberDisplayFormat.NONE:
                return False
            case MemberDisplayFormat.PUBLIC:
                if name.startswith("_"):
                    return False
        return self.filter.is_visible_member(self.value, name)

    def named_children(self) -> Iterable[NamedChildObject]:
        if self.member_format is MemberDisplayFormat.NONE:
            return

        cls = type(self.value)
        if dataclasses.is_dataclass(self.value):
            names = self._field_names()
        elif isinstance(self.value, tuple) and hasattr(cls, "_fields"):
            names = list(cls._fields)
        else:
            yield from self._attributes()
            names = self._property_names()

        for name in names:
            if not self.is_visible_member(name):
                continue
            try:
                value = getattr(self.value, name)
            except Exception as exc:
                log.swallow_exception(
                    "Error retrieving {0}.{1}", cls.__qualname__, name
                )
                value = MemberAccessError(exc)
            yield NamedChildObject(name, value)

    def _field_names(self) -> list[str]:
        show_hidden = self.member_format is MemberDisplayFormat.ALL
        return [
            field.name
            for field in dataclasses.fields(self.value)
            if field.repr or show_hidden
        ]

    def _attributes(self) -> Iterable[NamedChildObject]:
        seen = set()

        try:
            attrs = list(vars(self.value).items())
        except TypeError:
            attrs = []
        for name, value in attrs:
            seen.add(name)
            if isinstance(name, str) and self.is_visible_member(name):
                yield NamedChildObject(name, value)

        cls = type(self.value)
        for base in reversed(cls.__mro__):
            slots = vars(base).get("__slots__", ())
            if isinstance(slots, str):
                slots = (slots,)
            for name in slots:
                if name in ("__dict__", "__weakref__") or name in seen:
                    continue
                seen.add(name)
                if not self.is_visible_member(name):
                    continue
                attr = name
                if name.startswith("__") and not name.endswith("__"):
                    attr = "_" + base.__name__.lstrip("_") + name
                try:
                    value = getattr(self.value, attr)
                except AttributeError:
                    # Slot that was never assigned.
                    continue
                except Exception as exc:
                    value = MemberAccessError(exc)
                yield NamedChildObject(name, value)

    def _property_names(self) -> list[str]:
        names = set()
        for base in type(self.value).__mro__:
            for name, attr in vars(base).items():
                if isinstance(attr, property):
                    names.add(name)
        return sorted(names)


class IterableInspector(ObjectInspector):
    value: Collection

    kind = ValueKind.SEQUENCE

    def bounds(self) -> tuple[int, ...]:
        """
        Dimensions of the collection: its shape if it is a multidimensional array,
        otherwise its length.
        """
        try:
            shape = getattr(self.value, "shape", None)
        except Exception:
            shape = None
        if (
            isinstance(shape, tuple)
            and shape
            and all(type(n) is int for n in shape)
        ):
            return shape
        return (len(self.value),)

    def indexed_children(self) -> Iterable[IndexedChildObject]:
        yield from super().indexed_children()
        try:
            it = iter(self.value)
        except Exception as exc:
            yield IndexedChildObject(0, MemberAccessError(exc))
            return
        for i in count():
            try:
                item = next(it)
            except StopIteration:
                break
            except Exception as exc:
                log.swallow_exception("Error retrieving next item.")
                yield IndexedChildObject(i, MemberAccessError(exc))
                break
            yield IndexedChildObject(i, item)


class MappingInspector(IterableInspector):
    value: Mapping

    kind = ValueKind.MAPPING

    def bounds(self) -> tuple[int, ...]:
        return (len(self.value),)

    def indexed_children(self) -> Iterable[IndexedChildObject]:
        try:
            it = iter(self.value.keys())
        except Exception as exc:
            error = MemberAccessError(exc)
            yield IndexedChildObject(error, error)
            return
        while True:
            try:
                key = next(it)
            except StopIteration:
                break
            except Exception as exc:
                log.swallow_exception("Error retrieving next key.")
                error = MemberAccessError(exc)
                yield IndexedChildObject(error, error)
                break
            try:
                value = self.value[key]
            except Exception as exc:
                value = MemberAccessError(exc)
            yield IndexedChildObject(key, value)


def inspect_children(
    value: object,
    member_format: MemberDisplayFormat = MemberDisplayFormat.PUBLIC,
    filter: Optional[ObjectFilter] = None,
    kind: Optional[ValueKind] = None,
) -> ObjectInspector:
    # TODO: proper extensible registry with public API for host-specific inspectors.
    if kind is None:
        kind = classify(value)
    match kind:
        case ValueKind.MAPPING:
            inspector = MappingInspector
        case ValueKind.SEQUENCE:
            inspector = IterableInspector
        case ValueKind.RECORD:
            inspector = RecordInspector
        case _:
            inspector = ObjectInspector
    return inspector(value, member_format, filter)
