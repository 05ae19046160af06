"""
deepclone Kind constants (closed, dispatch-table keys).
"""

from __future__ import annotations

from enum import Enum


class Kind(str, Enum):
    # === Shared as-is ===
    PRIMITIVE = "primitive"  # None, numbers, text, bytes, enum members, classes
    ATOMIC = "atomic"  # instances of caller-listed atomic types

    # === Value-like built-ins (no recursion) ===
    DATE = "date"  # datetime / date / time
    PATTERN = "pattern"  # compiled re.Pattern
    BUFFER = "buffer"  # bytearray
    TYPED_VIEW = "typed_view"  # numpy.ndarray, array.array, memoryview

    # === Containers ===
    MAPPING = "mapping"  # dict and subclasses
    SET = "set"  # set / frozenset
    SEQUENCE = "sequence"  # list, tuple, deque

    # === Behaviour ===
    CALLABLE = "callable"  # functions, methods, partials

    # === Objects ===
    NATIVE = "native"  # implements __deepcopy__ or a custom __reduce__
    STRUCTURE = "structure"  # __dict__ / __slots__ instances

    # === Refused (or shared in lenient mode) ===
    OPAQUE = "opaque"  # files, sockets, locks, modules, generators

    @classmethod
    def all_kinds(cls) -> list[Kind]:
        """Enumerate all kinds (for validation and docs)."""
        return list(cls)

    @classmethod
    def shared_kinds(cls) -> frozenset[Kind]:
        """Kinds whose values are returned by reference without cloning."""
        return frozenset({cls.PRIMITIVE, cls.ATOMIC})

    @classmethod
    def container_kinds(cls) -> frozenset[Kind]:
        """Kinds whose values hold other values and recurse."""
        return frozenset({cls.MAPPING, cls.SET, cls.SEQUENCE, cls.STRUCTURE})


KIND_DESCRIPTIONS: dict[Kind, str] = {
    Kind.PRIMITIVE: "immutable scalar, returned as-is",
    Kind.ATOMIC: "instance of a caller-listed atomic type, returned as-is",
    Kind.DATE: "new instance with the same instant",
    Kind.PATTERN: "recompiled from the same source text and flags",
    Kind.BUFFER: "byte-for-byte copy of identical length",
    Kind.TYPED_VIEW: "new buffer plus a view with the same dtype, shape and offset",
    Kind.MAPPING: "same mapping class, keys and values cloned in insertion order",
    Kind.SET: "same set class, elements cloned in iteration order",
    Kind.SEQUENCE: "same sequence class, items cloned in order",
    Kind.CALLABLE: "shared, copied, or rebuilt by a caller factory",
    Kind.NATIVE: "delegated to the type's own __deepcopy__/__reduce__",
    Kind.STRUCTURE: "same class, attributes cloned with their descriptors",
    Kind.OPAQUE: "host resource, rejected (or shared in lenient mode)",
}
