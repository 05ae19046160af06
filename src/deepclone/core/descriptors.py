"""
Attribute descriptors for structural cloning.

Python stores instance state either in the instance ``__dict__`` or in
``__slots__`` members declared on the class. This module describes each piece
of state as a ``Descriptor`` (where it lives, whether it is visible to plain
enumeration, whether the class lets callers rebind or delete it, and whether
it is the cached value of a class-level accessor) and reinstalls it on a
clone without going through ``__setattr__`` overrides.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import Any

from .classifier import iter_slot_names

STORAGE_DICT = "dict"
STORAGE_SLOT = "slot"


@dataclass(frozen=True, slots=True)
class Descriptor:
    """
    One piece of instance state.

    Attributes:
        name: Attribute name; non-``str`` keys only occur in ``__dict__``
        value: The stored value
        storage: ``"dict"`` or ``"slot"``
        enumerable: Visible to plain enumeration (dunder names are not)
        writable: The class allows rebinding (``False`` on frozen dataclasses)
        configurable: The class allows deletion (``False`` on frozen dataclasses)
        accessor: Class-level cached accessor this value was computed by, if any
    """

    name: Any
    value: Any
    storage: str = STORAGE_DICT
    enumerable: bool = True
    writable: bool = True
    configurable: bool = True
    accessor: Any = None

    @property
    def is_accessor(self) -> bool:
        return self.accessor is not None

    @property
    def symbol_keyed(self) -> bool:
        return not isinstance(self.name, str)

    def flags(self) -> tuple[Any, str, bool, bool, bool, bool]:
        """Metadata without the value, for fidelity comparisons."""
        return (
            self.name,
            self.storage,
            self.enumerable,
            self.writable,
            self.configurable,
            self.is_accessor,
        )


def is_dunder(name: Any) -> bool:
    return (
        isinstance(name, str)
        and len(name) > 4
        and name.startswith("__")
        and name.endswith("__")
    )


def is_frozen_class(cls: type) -> bool:
    """Instances reject attribute assignment (frozen dataclasses)."""
    params = getattr(cls, "__dataclass_params__", None)
    return bool(getattr(params, "frozen", False))


def class_accessor(cls: type, name: Any) -> Any:
    """Return the cached accessor named ``name`` on ``cls``, if there is one."""
    if not isinstance(name, str):
        return None
    for base in cls.__mro__:
        if name in base.__dict__:
            attr = base.__dict__[name]
            return attr if isinstance(attr, cached_property) else None
    return None


def own_descriptors(obj: Any, *, extended: bool = False) -> list[Descriptor]:
    """
    Describe the instance state of ``obj``.

    Args:
        obj: Instance to inspect
        extended: Include non-enumerable (dunder-named) and non-``str``-keyed
            ``__dict__`` entries

    Returns:
        Descriptors in storage order: ``__dict__`` insertion order, then slots
        in MRO order
    """
    cls = type(obj)
    frozen = is_frozen_class(cls)
    found: list[Descriptor] = []

    try:
        namespace = object.__getattribute__(obj, "__dict__")
    except AttributeError:
        namespace = None
    if namespace is not None:
        for name, value in namespace.items():
            desc = Descriptor(
                name=name,
                value=value,
                storage=STORAGE_DICT,
                enumerable=isinstance(name, str) and not is_dunder(name),
                writable=not frozen,
                configurable=not frozen,
                accessor=class_accessor(cls, name),
            )
            if extended or (desc.enumerable and not desc.symbol_keyed):
                found.append(desc)

    for name in iter_slot_names(cls):
        try:
            value = object.__getattribute__(obj, name)
        except AttributeError:
            continue  # declared but never assigned
        found.append(
            Descriptor(
                name=name,
                value=value,
                storage=STORAGE_SLOT,
                writable=not frozen,
                configurable=not frozen,
            )
        )
    return found


def define_property(target: Any, descriptor: Descriptor, value: Any) -> None:
    """
    Install ``value`` on ``target`` in the place ``descriptor`` describes.

    Writes bypass ``__setattr__`` so read-only classes can be rebuilt; the
    class keeps enforcing its rules on the finished clone.

    Raises:
        AttributeError, TypeError: If the object model rejects the write
    """
    if descriptor.storage == STORAGE_DICT:
        object.__getattribute__(target, "__dict__")[descriptor.name] = value
    else:
        object.__setattr__(target, descriptor.name, value)
