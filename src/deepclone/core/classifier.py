"""
Type classification for the clone engine.

``classify`` maps a value to exactly one ``Kind``. It is a pure function of the
value's runtime type (and the caller's atomic types); it never consults the
identity tracker, which the engine checks separately before classifying.
"""

from __future__ import annotations

import array
import datetime as dt
import io
import mmap
import re
import socket
import sys
import threading
import types
import uuid
from collections import deque
from collections.abc import Callable, Iterable
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from functools import partial
from pathlib import PurePath
from typing import Any

import numpy as np
import pandas as pd

from .kinds import Kind

PRIMITIVE_TYPES: tuple[type, ...] = (
    type(None),
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    Decimal,
    Fraction,
    range,
    slice,
    type(Ellipsis),
    type(NotImplemented),
    dt.timedelta,  # includes pd.Timedelta
    dt.tzinfo,
    uuid.UUID,
    PurePath,
    Enum,
    type,
    np.generic,  # numpy scalars, including datetime64
    np.dtype,
    pd.Period,
    pd.Interval,
    type(pd.NaT),
)

DATE_TYPES: tuple[type, ...] = (dt.datetime, dt.date, dt.time)

CALLABLE_TYPES: tuple[type, ...] = (
    types.FunctionType,
    types.MethodType,
    types.BuiltinFunctionType,
    types.BuiltinMethodType,
    types.MethodWrapperType,
    types.WrapperDescriptorType,
    types.MethodDescriptorType,
    partial,
)

OPAQUE_TYPES: tuple[type, ...] = (
    io.IOBase,
    socket.socket,
    mmap.mmap,
    types.ModuleType,
    types.GeneratorType,
    types.CoroutineType,
    types.AsyncGeneratorType,
    types.FrameType,
    types.TracebackType,
    type(threading.Lock()),
    type(threading.RLock()),
    threading.Thread,
)

SEQUENCE_TYPES: tuple[type, ...] = (list, tuple, deque)
TYPED_VIEW_TYPES: tuple[type, ...] = (np.ndarray, array.array, memoryview)


SCALAR_TYPES: frozenset[type] = frozenset({type(None), bool, int, float, complex, str, bytes})


def is_primitive(value: Any) -> bool:
    """Immutable, identity-transparent values that never need cloning."""
    if type(value) in SCALAR_TYPES:
        return True
    # NaT subclasses datetime, so the primitive check must run before is_date.
    return isinstance(value, PRIMITIVE_TYPES) and not has_own_state(value)


def is_library_class(cls: type) -> bool:
    """Classes of the standard library or of the primitive table."""
    package = (cls.__module__ or "").partition(".")[0]
    return package in sys.stdlib_module_names or cls in PRIMITIVE_TYPES


def has_own_state(value: Any) -> bool:
    """
    Check whether an instance of an immutable built-in subclass holds attributes.

    Counts a non-empty instance ``__dict__`` and assigned ``__slots__`` declared
    by classes outside the standard library. Enum members and classes never
    count: their namespaces are part of the definition, not instance state.
    """
    if isinstance(value, (Enum, type)):
        return False
    namespace = getattr(value, "__dict__", None)
    if isinstance(namespace, dict) and namespace:
        return True
    for name in iter_slot_names(type(value), stop=is_library_class):
        try:
            object.__getattribute__(value, name)
        except AttributeError:
            continue
        return True
    return False


def is_date(value: Any) -> bool:
    return isinstance(value, DATE_TYPES)


def is_pattern(value: Any) -> bool:
    return isinstance(value, re.Pattern)


def is_mapping(value: Any) -> bool:
    return isinstance(value, dict)


def is_set(value: Any) -> bool:
    return isinstance(value, (set, frozenset))


def is_buffer(value: Any) -> bool:
    return isinstance(value, bytearray)


def is_typed_view(value: Any) -> bool:
    return isinstance(value, TYPED_VIEW_TYPES)


def is_callable(value: Any) -> bool:
    return isinstance(value, CALLABLE_TYPES)


def is_opaque(value: Any) -> bool:
    """Host resources that must never be deep-copied."""
    return isinstance(value, OPAQUE_TYPES)


def is_sequence(value: Any) -> bool:
    return isinstance(value, SEQUENCE_TYPES)


def has_native_protocol(value: Any) -> bool:
    """
    Check whether the class defines its own copy protocol.

    A class counts when it implements ``__deepcopy__`` or ``__setstate__``.
    Overriding ``__reduce_ex__``/``__reduce__`` only counts for values without
    attribute state; instances with ``__dict__``/``__slots__`` (such as
    ``SimpleNamespace``) are cloned structurally.
    """
    cls = type(value)
    if callable(getattr(cls, "__deepcopy__", None)):
        return True
    if callable(getattr(cls, "__setstate__", None)):
        return True
    if is_structure(value):
        return False
    if getattr(cls, "__reduce_ex__", None) is not object.__reduce_ex__:
        return True
    return getattr(cls, "__reduce__", None) is not object.__reduce__


def is_structure(value: Any) -> bool:
    """Instances carrying attribute state in ``__dict__`` or ``__slots__``."""
    if hasattr(value, "__dict__"):
        return True
    return any(True for _ in iter_slot_names(type(value)))


def iter_slot_names(
    cls: type, stop: Callable[[type], bool] | None = None
) -> Iterable[str]:
    """
    Yield the attribute names of every ``__slots__`` entry across the MRO.

    With ``stop`` the walk ends at the first class it accepts.

    Private slot names are returned mangled (``__x`` on class ``C`` becomes
    ``_C__x``) so they can be used with ``getattr``/``setattr``.
    """
    seen: set[str] = set()
    for base in cls.__mro__:
        if stop is not None and stop(base):
            break
        slots = base.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name in ("__dict__", "__weakref__"):
                continue
            if name.startswith("__") and not name.endswith("__"):
                name = f"_{base.__name__.lstrip('_')}{name}"
            if name in seen:
                continue
            seen.add(name)
            yield name


def classify(value: Any, atomic_types: Iterable[type] = ()) -> Kind:
    """
    Determine which cloning policy applies to ``value``.

    Decision order (first match wins):
        1. primitive
        2. atomic type (exact ``type(value)`` match)
        3. subclass of a primitive type holding instance attributes: structure
        4. date, pattern, mapping, set, buffer, typed view
        5. callable
        6. opaque host resource
        7. sequence
        8. native copy protocol
        9. structure
        10. opaque (nothing else applies)

    Subclasses of built-ins classify by their fundamental kind: a
    ``pandas.Timestamp`` is a ``DATE`` and an ``OrderedDict`` a ``MAPPING``.

    Args:
        value: Any Python value
        atomic_types: Classes whose exact instances are shared by reference

    Returns:
        The ``Kind`` that selects the cloner
    """
    if is_primitive(value):
        return Kind.PRIMITIVE
    if type(value) in atomic_types:
        return Kind.ATOMIC
    if isinstance(value, PRIMITIVE_TYPES):
        # Immutable built-in subclass carrying attributes of its own
        return Kind.STRUCTURE
    if is_date(value):
        return Kind.DATE
    if is_pattern(value):
        return Kind.PATTERN
    if is_mapping(value):
        return Kind.MAPPING
    if is_set(value):
        return Kind.SET
    if is_buffer(value):
        return Kind.BUFFER
    if is_typed_view(value):
        return Kind.TYPED_VIEW
    if is_callable(value):
        return Kind.CALLABLE
    if is_opaque(value):
        return Kind.OPAQUE
    if is_sequence(value):
        return Kind.SEQUENCE
    if has_native_protocol(value):
        return Kind.NATIVE
    if is_structure(value):
        return Kind.STRUCTURE
    return Kind.OPAQUE


def type_name(value: Any) -> str:
    """Qualified name of the runtime type, for diagnostics."""
    cls = type(value)
    module = cls.__module__
    if module in (None, "builtins"):
        return cls.__qualname__
    return f"{module}.{cls.__qualname__}"
