"""
Key-value and unique-value collection cloners.
"""

from __future__ import annotations

from collections import Counter, OrderedDict, defaultdict
from typing import Any

from deepclone.core.context import (
    CloneContext,
    attr_segment,
    key_segment,
    mapping_key_segment,
    member_segment,
    render_path,
)
from deepclone.core.errors import StructuralCloneError
from deepclone.core.interfaces import ICloner
from deepclone.core.tracker import MISSING

from .structural import clone_attributes

# Nearest built-in base decides construction and insertion
MAPPING_BASES: tuple[type, ...] = (OrderedDict, defaultdict, Counter, dict)


def builtin_base(cls: type, bases: tuple[type, ...]) -> type:
    """Return the first class of ``bases`` found in ``cls.__mro__``."""
    for klass in cls.__mro__:
        if klass in bases:
            return klass
    raise TypeError(f"{cls.__qualname__} does not derive from any of {bases}")


class MappingCloner(ICloner):
    """
    Cloner for ``dict`` and its subclasses (kind: 'mapping').

    The clone is an empty instance of the same class, registered before any
    key or value is visited. Pairs are then cloned in insertion order (key
    first, then value, both through the transform hook) and inserted with the
    built-in base's ``__setitem__``, so subclass overrides do not run while
    the clone is being assembled.

    Note:
        ``defaultdict`` factories are cloned through the callable strategy,
        which shares them by default.
    """

    def clone(self, value: dict, ctx: CloneContext) -> dict:
        cls = type(value)
        base = builtin_base(cls, MAPPING_BASES)
        result = {} if cls is dict else base.__new__(cls)
        if base is OrderedDict:
            OrderedDict.__init__(result)
        ctx.register(value, result)

        if base is defaultdict:
            result.default_factory = ctx.clone_child(
                value.default_factory, attr_segment("default_factory")
            )

        setitem = base.__setitem__
        for key, item in list(base.items(value)):
            new_key = ctx.clone_child(key, mapping_key_segment(key))
            new_item = ctx.clone_child(item, key_segment(key))
            try:
                setitem(result, new_key, new_item)
            except TypeError as e:
                raise StructuralCloneError(
                    render_path(ctx.segments + [mapping_key_segment(key)]), e
                ) from e

        clone_attributes(value, result, ctx)
        return result


class SetCloner(ICloner):
    """
    Cloner for ``set`` and ``frozenset`` (kind: 'set').

    Elements are cloned in iteration order. If two distinct elements clone to
    equal values the clone holds fewer elements than the source; that is the
    set doing its job, not data loss.
    """

    def clone(self, value: Any, ctx: CloneContext) -> Any:
        if isinstance(value, frozenset):
            return self._clone_frozenset(value, ctx)

        cls = type(value)
        result = set() if cls is set else set.__new__(cls)
        ctx.register(value, result)
        for i, item in enumerate(set.__iter__(value)):
            segment = member_segment(i)
            new_item = ctx.clone_child(item, segment)
            try:
                set.add(result, new_item)
            except TypeError as e:
                raise StructuralCloneError(render_path(ctx.segments + [segment]), e) from e
        clone_attributes(value, result, ctx)
        return result

    def _clone_frozenset(self, value: frozenset, ctx: CloneContext) -> frozenset:
        cls = type(value)
        items = [
            ctx.clone_child(item, member_segment(i))
            for i, item in enumerate(frozenset.__iter__(value))
        ]
        hit = ctx.lookup(value)
        if hit is not MISSING:
            return hit
        try:
            result = frozenset(items) if cls is frozenset else frozenset.__new__(cls, items)
        except TypeError as e:
            raise StructuralCloneError(ctx.path, e) from e
        ctx.register(value, result)
        clone_attributes(value, result, ctx)
        return result
