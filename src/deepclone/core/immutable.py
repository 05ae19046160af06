"""
Copy-on-write facades over cloned values.

``wrap(value)`` returns a facade that reads like ``value`` but never writes to
it. Nested containers and instances are wrapped lazily on first access and
cached per facade, so reading the same path twice yields the same facade.

The first mutation on a branch makes that branch private: every facade from
the root down to the mutated node shallow-clones its backing value with the
clone engine (``max_depth=0``), re-links the fresh copy into its parent's
(already private) copy, and then applies the mutation. Unmodified branches
stay shared with the original backing, and facades handed out earlier for
other branches keep seeing the original values.

**Example Usage:**
    ```python
    from deepclone import clone, unwrap, wrap

    state = {"user": {"name": "ada"}, "tags": ["a"]}
    view = wrap(state)
    tags = view["tags"]

    view["user"]["name"] = "grace"
    assert state["user"]["name"] == "ada"
    assert unwrap(view)["user"]["name"] == "grace"
    assert tags is view["tags"]
    ```

Note:
    A value reachable under two paths of the backing graph is copied
    separately for each path that gets written, so aliases diverge once one
    of them is modified through the facade.
"""

from __future__ import annotations

import types
from collections import defaultdict
from collections.abc import Iterable, Iterator, Mapping, Sequence, Set
from typing import Any

import numpy as np

from .classifier import classify, iter_slot_names
from .descriptors import class_accessor
from .kinds import Kind
from .tracker import MISSING

# Kinds returned as-is on read
RAW_KINDS = frozenset(
    {
        Kind.PRIMITIVE,
        Kind.ATOMIC,
        Kind.DATE,
        Kind.PATTERN,
        Kind.CALLABLE,
        Kind.NATIVE,
        Kind.OPAQUE,
    }
)


class _Node:
    """
    Backing state of one facade.

    Attributes:
        backing: The value the facade currently reads from
        owned: True once ``backing`` is a private copy that may be written
        parent: Node whose backing holds ``backing`` (``None`` for roots and
            detached facades)
        slot: ``("attr", name)`` or ``("item", key)`` locating ``backing``
            inside the parent's backing
        children: Cached child facades by slot
        atomic: Types whose instances are never wrapped
    """

    __slots__ = ("backing", "owned", "parent", "slot", "children", "atomic")

    def __init__(self, backing, atomic, parent=None, slot=None):
        self.backing = backing
        self.owned = False
        self.parent = parent
        self.slot = slot
        self.children: dict[tuple, _Facade] = {}
        self.atomic = atomic


def _shallow_copy(value: Any) -> Any:
    from .engine import clone

    return clone(value, max_depth=0, extended_fidelity=True, accessors="snapshot")


def _own(node: _Node) -> Any:
    """Make ``node.backing`` private (copying its ancestors first) and return it."""
    if node.owned:
        return node.backing
    parent = node.parent
    if parent is not None:
        _own(parent)
    node.backing = _shallow_copy(node.backing)
    node.owned = True
    if parent is not None:
        _store(parent, node.slot, node.backing)
    return node.backing


def _store(node: _Node, slot: tuple, value: Any) -> None:
    """Re-link ``value`` into the (private) backing of ``node``."""
    backing = node.backing
    where, key = slot
    if where == "attr":
        object.__setattr__(backing, key, value)
    elif isinstance(backing, tuple):
        items = list(backing)
        items[key] = value
        _rebind(node, _rebuild_tuple(backing, items))
    else:
        backing[key] = value


def _rebuild_tuple(old: tuple, items: list) -> tuple:
    cls = type(old)
    result = tuple(items) if cls is tuple else tuple.__new__(cls, items)
    if hasattr(old, "__dict__"):
        result.__dict__.update(old.__dict__)
    return result


def _rebind(node: _Node, backing: Any) -> None:
    node.backing = backing
    if node.parent is not None:
        _store(node.parent, node.slot, backing)


def _disown(node: _Node) -> None:
    node.owned = False
    for child in node.children.values():
        _disown(child._node)


def _detach(node: _Node, slot: tuple) -> _Facade | None:
    """Drop the cached child at ``slot``; it keeps its backing, unlinked."""
    child = node.children.pop(slot, None)
    if child is not None:
        child._node.parent = None
        _disown(child._node)
    return child


def _detach_all(node: _Node) -> None:
    for slot in list(node.children):
        _detach(node, slot)


def _detach_shifted(node: _Node, backing: Any) -> None:
    # A bounded deque drops items from the far end, renumbering every index
    if getattr(backing, "maxlen", None) is not None:
        _detach_all(node)


def _require(backing: Any, method: str) -> None:
    """Fail before copying when the backing type cannot perform ``method``."""
    if hasattr(type(backing), method):
        return
    name = type(backing).__name__
    if method == "__setitem__":
        raise TypeError(f"{name!r} object does not support item assignment")
    if method == "__delitem__":
        raise TypeError(f"{name!r} object does not support item deletion")
    raise AttributeError(f"{name!r} object has no attribute {method!r}")


def _present(value: Any, atomic: frozenset, parent: _Node | None, slot: tuple | None) -> Any:
    """Return what a read of ``value`` hands out: raw, read-only view or facade."""
    kind = classify(value, atomic)
    if kind in RAW_KINDS:
        return value
    if kind is Kind.BUFFER:
        return memoryview(value).toreadonly()
    if kind is Kind.TYPED_VIEW:
        if isinstance(value, np.ndarray):
            view = value.view()
            view.flags.writeable = False
            return view
        return memoryview(value).toreadonly()
    facade_cls = FACADE_TYPES[kind]
    return facade_cls(_Node(value, atomic, parent, slot))


def _child(node: _Node, slot: tuple, value: Any) -> Any:
    cached = node.children.get(slot)
    if cached is not None and cached._node.backing is value:
        return cached
    result = _present(value, node.atomic, node, slot)
    if isinstance(result, _Facade):
        node.children[slot] = result
    return result


def _released(node: _Node, slot: tuple, value: Any) -> Any:
    """Value removed from ``node`` by a mutation, handed back detached."""
    child = _detach(node, slot)
    if child is not None:
        return child
    return _present(value, node.atomic, None, None)


class _Facade:
    __slots__ = ("_node",)

    def __init__(self, node: _Node):
        object.__setattr__(self, "_node", node)

    def __eq__(self, other):
        return self._node.backing == unwrap(other)

    __hash__ = None

    def __repr__(self):
        return f"{type(self).__name__}({self._node.backing!r})"


class StructureFacade(_Facade):
    """
    Facade over a class instance.

    Attribute reads return facades for reference values stored on the
    instance. ``isinstance`` checks see the backing class, and methods are
    bound to the facade so that writes they make go through copy-on-write.
    """

    __slots__ = ()

    @property
    def __class__(self):
        return type(self._node.backing)

    def __getattr__(self, name):
        node = self._node
        backing = node.backing
        if _stores_attribute(backing, name):
            return _child(node, ("attr", name), getattr(backing, name))

        accessor = class_accessor(type(backing), name)
        if accessor is not None:
            # Compute without caching onto the shared backing
            return _present(accessor.func(self), node.atomic, None, None)

        value = getattr(backing, name)
        if isinstance(value, types.MethodType) and value.__self__ is backing:
            return types.MethodType(value.__func__, self)
        return _present(value, node.atomic, None, None)

    def __setattr__(self, name, value):
        node = self._node
        backing = _own(node)
        setattr(backing, name, unwrap(value))
        _detach(node, ("attr", name))

    def __delattr__(self, name):
        node = self._node
        backing = _own(node)
        delattr(backing, name)
        _detach(node, ("attr", name))

    def __dir__(self):
        return dir(self._node.backing)


def _stores_attribute(backing: Any, name: str) -> bool:
    instance_dict = getattr(backing, "__dict__", None)
    if isinstance(instance_dict, dict) and name in instance_dict:
        return True
    return name in iter_slot_names(type(backing)) and hasattr(backing, name)


class MappingFacade(_Facade, Mapping):
    """Facade over a ``dict`` (including ``OrderedDict``/``defaultdict``/``Counter``)."""

    __slots__ = ()

    def __getitem__(self, key):
        node = self._node
        backing = node.backing
        if key in backing:
            return _child(node, ("item", key), dict.__getitem__(backing, key))
        if isinstance(backing, defaultdict) and backing.default_factory is not None:
            # Missing-key reads insert into a defaultdict; treat them as writes
            backing = _own(node)
            return _child(node, ("item", key), backing[key])
        return backing[key]

    def __iter__(self) -> Iterator:
        return iter(self._node.backing)

    def __len__(self) -> int:
        return len(self._node.backing)

    def __contains__(self, key) -> bool:
        return key in self._node.backing

    def get(self, key, default=None):
        if key in self._node.backing:
            return self[key]
        return default

    def __eq__(self, other):
        return self._node.backing == unwrap(other)

    __hash__ = None

    def __setitem__(self, key, value):
        node = self._node
        backing = _own(node)
        backing[key] = unwrap(value)
        _detach(node, ("item", key))

    def __delitem__(self, key):
        node = self._node
        backing = _own(node)
        del backing[key]
        _detach(node, ("item", key))

    def pop(self, key, default=MISSING):
        node = self._node
        if key not in node.backing:
            if default is MISSING:
                raise KeyError(key)
            return default
        backing = _own(node)
        return _released(node, ("item", key), backing.pop(key))

    def popitem(self):
        node = self._node
        if not node.backing:
            raise KeyError("popitem(): dictionary is empty")
        backing = _own(node)
        key, value = backing.popitem()
        return key, _released(node, ("item", key), value)

    def setdefault(self, key, default=None):
        if key not in self._node.backing:
            self[key] = default
        return self[key]

    def update(self, other=(), /, **kwargs):
        node = self._node
        backing = _own(node)
        items = other.items() if isinstance(other, Mapping) else other
        for key, value in items:
            backing[key] = unwrap(value)
            _detach(node, ("item", key))
        for key, value in kwargs.items():
            backing[key] = unwrap(value)
            _detach(node, ("item", key))

    def clear(self):
        node = self._node
        backing = _own(node)
        backing.clear()
        _detach_all(node)

    def __ior__(self, other):
        self.update(other)
        return self


class SequenceFacade(_Facade, Sequence):
    """Facade over a ``list``, ``tuple`` or ``deque``."""

    __slots__ = ()

    def __getitem__(self, index):
        node = self._node
        backing = node.backing
        if isinstance(index, slice):
            return _present(backing[index], node.atomic, None, None)
        value = backing[index]
        if index < 0:
            index += len(backing)
        return _child(node, ("item", index), value)

    def __iter__(self) -> Iterator:
        for i in range(len(self._node.backing)):
            yield self[i]

    def __len__(self) -> int:
        return len(self._node.backing)

    def __eq__(self, other):
        return self._node.backing == unwrap(other)

    __hash__ = None

    def _writable(self, method: str) -> tuple[_Node, Any]:
        node = self._node
        _require(node.backing, method)
        return node, _own(node)

    def __setitem__(self, index, value):
        node, backing = self._writable("__setitem__")
        if isinstance(index, slice):
            backing[index] = [unwrap(v) for v in value]
            _detach_all(node)
            return
        if index < 0:
            index += len(backing)
        backing[index] = unwrap(value)
        _detach(node, ("item", index))

    def __delitem__(self, index):
        node, backing = self._writable("__delitem__")
        del backing[index]
        _detach_all(node)

    def append(self, value):
        node, backing = self._writable("append")
        backing.append(unwrap(value))
        _detach_shifted(node, backing)

    def extend(self, values: Iterable):
        node, backing = self._writable("extend")
        backing.extend([unwrap(v) for v in values])
        _detach_shifted(node, backing)

    def __iadd__(self, values):
        self.extend(values)
        return self

    def insert(self, index, value):
        node, backing = self._writable("insert")
        backing.insert(index, unwrap(value))
        _detach_all(node)

    def pop(self, index=-1):
        node = self._node
        _require(node.backing, "pop")
        if not node.backing:
            raise IndexError("pop from empty sequence")
        if index < 0:
            index += len(node.backing)
        backing = _own(node)
        value = backing[index]
        del backing[index]
        released = _released(node, ("item", index), value)
        _detach_all(node)
        return released

    def remove(self, value):
        node, backing = self._writable("remove")
        backing.remove(unwrap(value))
        _detach_all(node)

    def clear(self):
        node, backing = self._writable("clear")
        backing.clear()
        _detach_all(node)

    def sort(self, *, key=None, reverse=False):
        node, backing = self._writable("sort")
        backing.sort(key=key, reverse=reverse)
        _detach_all(node)

    def reverse(self):
        node, backing = self._writable("reverse")
        backing.reverse()
        _detach_all(node)


class SetFacade(_Facade, Set):
    """
    Facade over a ``set`` or ``frozenset``.

    Elements are handed out as detached facades: they are not linked back
    into the set, which could not re-hash them after a write anyway.
    """

    __slots__ = ()

    @classmethod
    def _from_iterable(cls, it):
        return {unwrap(v) for v in it}

    def __contains__(self, value) -> bool:
        return unwrap(value) in self._node.backing

    def __iter__(self) -> Iterator:
        atomic = self._node.atomic
        for item in self._node.backing:
            yield _present(item, atomic, None, None)

    def __len__(self) -> int:
        return len(self._node.backing)

    def __eq__(self, other):
        return self._node.backing == unwrap(other)

    __hash__ = None

    def _writable(self, method: str) -> Any:
        _require(self._node.backing, method)
        return _own(self._node)

    def add(self, value):
        self._writable("add").add(unwrap(value))

    def discard(self, value):
        self._writable("discard").discard(unwrap(value))

    def remove(self, value):
        self._writable("remove").remove(unwrap(value))

    def pop(self):
        _require(self._node.backing, "pop")
        if not self._node.backing:
            raise KeyError("pop from an empty set")
        value = self._writable("pop").pop()
        return _present(value, self._node.atomic, None, None)

    def clear(self):
        self._writable("clear").clear()

    def update(self, *others):
        backing = self._writable("update")
        for other in others:
            backing.update(unwrap(v) for v in other)

    def __ior__(self, other):
        self.update(other)
        return self


FACADE_TYPES: dict[Kind, type[_Facade]] = {
    Kind.STRUCTURE: StructureFacade,
    Kind.MAPPING: MappingFacade,
    Kind.SEQUENCE: SequenceFacade,
    Kind.SET: SetFacade,
}


def wrap(value: Any, atomic_types: Iterable[type] = ()) -> Any:
    """
    Wrap ``value`` in a copy-on-write facade.

    Containers and class instances get a facade; buffers and typed views come
    back as read-only views; everything else (primitives, dates, patterns,
    callables, atomic and self-copying values) is returned unchanged.
    """
    if is_facade(value):
        return value
    return _present(value, frozenset(atomic_types), None, None)


def unwrap(value: Any) -> Any:
    """Return the current backing value of a facade (other values unchanged)."""
    if is_facade(value):
        return value._node.backing
    return value


def is_facade(value: Any) -> bool:
    # type() rather than isinstance(): StructureFacade reports its backing class
    return issubclass(type(value), _Facade)
