"""
Structural cloners: class instances and array-like sequences.
"""

from __future__ import annotations

from collections import deque
from typing import Any

from deepclone.core.classifier import PRIMITIVE_TYPES
from deepclone.core.context import CloneContext, attr_segment, index_segment, render_path
from deepclone.core.descriptors import define_property, own_descriptors
from deepclone.core.errors import StructuralCloneError
from deepclone.core.interfaces import ICloner
from deepclone.core.options import AccessorMode
from deepclone.core.tracker import MISSING

PLAIN_CONTAINERS: frozenset[type] = frozenset(
    {list, tuple, deque, dict, set, frozenset, bytearray}
)


def clone_attributes(source: Any, target: Any, ctx: CloneContext) -> None:
    """
    Clone the instance state of ``source`` onto ``target``.

    Each attribute is cloned through the engine (so the transform hook and the
    identity tracker apply) and installed with the same storage as on the
    source. With ``accessors="live"`` values cached by class-level accessors
    are left out so the clone recomputes them from its own state.

    Raises:
        StructuralCloneError: If the object model refuses an attribute write;
            the path names the attribute
    """
    if type(source) in PLAIN_CONTAINERS:
        return
    opts = ctx.options
    for desc in own_descriptors(source, extended=opts.extended_fidelity):
        if desc.is_accessor and opts.accessors is AccessorMode.LIVE:
            continue
        segment = attr_segment(desc.name)
        value = ctx.clone_child(desc.value, segment)
        try:
            define_property(target, desc, value)
        except (AttributeError, TypeError) as e:
            raise StructuralCloneError(render_path(ctx.segments + [segment]), e) from e


def new_args(value: Any) -> tuple:
    """
    Arguments ``cls.__new__`` needs to rebuild ``value``.

    Taken from ``__getnewargs__`` when the class defines it. Subclasses of
    immutable built-ins without it (``Decimal``, ``timedelta``, ``Fraction``)
    fall back to the arguments their ``__reduce__`` passes to the class.
    """
    cls = type(value)
    getnewargs = getattr(cls, "__getnewargs__", None)
    if callable(getnewargs):
        return tuple(getnewargs(value))
    if isinstance(value, PRIMITIVE_TYPES):
        reduced = value.__reduce_ex__(4)
        if isinstance(reduced, tuple) and len(reduced) >= 2 and reduced[0] is cls:
            return tuple(reduced[1])
    return ()


class StructureCloner(ICloner):
    """
    Cloner for plain class instances (kind: 'structure').

    The clone is created with ``cls.__new__`` so it is an instance of the same
    class (``isinstance`` checks and class-level properties keep working)
    without running ``__init__``. Constructor arguments (see ``new_args``) are
    cloned and passed along for classes whose ``__new__`` needs them, such as
    ``str`` or ``Decimal`` subclasses carrying attributes.
    """

    def clone(self, value: Any, ctx: CloneContext) -> Any:
        cls = type(value)
        args = new_args(value)
        if args:
            args = ctx.clone_child(args, attr_segment("__getnewargs__"))
            hit = ctx.lookup(value)
            if hit is not MISSING:
                return hit
        try:
            result = cls.__new__(cls, *args)
        except TypeError as e:
            raise StructuralCloneError(ctx.path, e) from e

        ctx.register(value, result)
        clone_attributes(value, result, ctx)
        return result


class SequenceCloner(ICloner):
    """
    Cloner for array-like sequences (kind: 'sequence').

    ``list`` and ``deque`` clones are registered before their items are
    visited. ``tuple`` clones can only be built once every item is cloned; if
    an item cycles back to the tuple through a mutable container, the tuple is
    cloned once more on the inner visit and the outer visit then returns that
    registered clone, so identity still holds.

    A plain ``tuple`` whose items all clone to themselves is returned as-is.
    Subclass instance attributes (namedtuple subclasses with a ``__dict__``,
    list subclasses used as property bags) are carried along.
    """

    def clone(self, value: Any, ctx: CloneContext) -> Any:
        if isinstance(value, tuple):
            return self._clone_tuple(value, ctx)
        if isinstance(value, deque):
            return self._clone_deque(value, ctx)
        return self._clone_list(value, ctx)

    def _clone_list(self, value: list, ctx: CloneContext) -> list:
        cls = type(value)
        result = [] if cls is list else list.__new__(cls)
        ctx.register(value, result)
        for i, item in enumerate(list.__iter__(value)):
            list.append(result, ctx.clone_child(item, index_segment(i)))
        clone_attributes(value, result, ctx)
        return result

    def _clone_deque(self, value: deque, ctx: CloneContext) -> deque:
        cls = type(value)
        result = deque.__new__(cls)
        deque.__init__(result, (), value.maxlen)
        ctx.register(value, result)
        for i, item in enumerate(deque.__iter__(value)):
            deque.append(result, ctx.clone_child(item, index_segment(i)))
        clone_attributes(value, result, ctx)
        return result

    def _clone_tuple(self, value: tuple, ctx: CloneContext) -> tuple:
        cls = type(value)
        items = [
            ctx.clone_child(item, index_segment(i))
            for i, item in enumerate(tuple.__iter__(value))
        ]
        hit = ctx.lookup(value)
        if hit is not MISSING:
            return hit

        if cls is tuple:
            if all(new is old for new, old in zip(items, value)):
                result = value
            else:
                result = tuple(items)
        else:
            result = tuple.__new__(cls, items)
        ctx.register(value, result)
        clone_attributes(value, result, ctx)
        return result
