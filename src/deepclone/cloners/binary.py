"""
Binary buffer and typed numeric view cloners.
"""

from __future__ import annotations

import array
from typing import Any

import numpy as np

from deepclone.core.context import CloneContext, attr_segment, index_segment
from deepclone.core.errors import StructuralCloneError
from deepclone.core.interfaces import ICloner

from .structural import clone_attributes


class BufferCloner(ICloner):
    """
    Cloner for ``bytearray`` (kind: 'buffer').

    Bytes are copied verbatim into a new buffer of identical length; buffers
    hold no references, so nothing recurses.
    """

    def clone(self, value: bytearray, ctx: CloneContext) -> bytearray:
        cls = type(value)
        if cls is bytearray:
            result = bytearray(value)
        else:
            result = bytearray.__new__(cls)
            bytearray.__init__(result, value)
        ctx.register(value, result)
        clone_attributes(value, result, ctx)
        return result


# Buffer owners a view can be rebuilt over
VIEW_OWNER_TYPES: tuple[type, ...] = (np.ndarray, bytearray, array.array, memoryview)


def _is_contiguous(buffer: Any) -> bool:
    if isinstance(buffer, np.ndarray):
        return buffer.flags.c_contiguous
    if isinstance(buffer, memoryview):
        return buffer.c_contiguous
    return True


def _nbytes(buffer: Any) -> int:
    if isinstance(buffer, (np.ndarray, memoryview)):
        return buffer.nbytes
    return memoryview(buffer).nbytes


def _address(buffer: Any) -> int:
    """Address of the first byte exposed by a contiguous buffer."""
    if not isinstance(buffer, np.ndarray):
        buffer = np.frombuffer(buffer, dtype=np.uint8)
    return buffer.__array_interface__["data"][0]


class TypedViewCloner(ICloner):
    """
    Cloner for typed numeric views (kind: 'typed_view').

    Handles three families:
    - ``numpy.ndarray``: owning arrays are copied with their memory layout;
      views over a contiguous buffer owner (another array, a ``bytearray``,
      an ``array.array``) are rebuilt with the same dtype, shape, strides and
      byte offset over the *clone* of that owner, so two views sharing one
      buffer in the source still share one in the clone. Object arrays clone
      every element.
    - ``array.array``: new array with the same typecode (element width).
    - ``memoryview``: rebuilt over the clone of its exporting object when that
      is a contiguous buffer owner, otherwise over a new ``bytearray`` holding
      the viewed bytes; format, shape and read-only flag are kept.

    The owner is visited as a child node at ``.base`` (arrays) or ``.obj``
    (memoryviews), the attribute that exposes it. When it comes back as the
    source owner itself (shared below ``max_depth`` or returned unchanged by
    the transform hook) the view is copied instead, so the clone never
    aliases source memory.
    """

    def clone(self, value: Any, ctx: CloneContext) -> Any:
        if isinstance(value, np.ndarray):
            return self._clone_ndarray(value, ctx)
        if isinstance(value, array.array):
            return self._clone_array(value, ctx)
        return self._clone_memoryview(value, ctx)

    def _clone_owner(self, owner: Any, ctx: CloneContext, segment: str) -> Any:
        """Clone the buffer owner of a view; ``None`` when the view must be copied."""
        if not (isinstance(owner, VIEW_OWNER_TYPES) and _is_contiguous(owner)):
            return None
        if not _nbytes(owner):
            return None
        new_owner = ctx.clone_child(owner, segment)
        if new_owner is owner:
            return None
        if not (isinstance(new_owner, VIEW_OWNER_TYPES) and _is_contiguous(new_owner)):
            return None
        if _nbytes(new_owner) != _nbytes(owner):
            return None
        return new_owner

    def _clone_ndarray(self, value: np.ndarray, ctx: CloneContext) -> np.ndarray:
        base = value.base
        if base is not None and not value.dtype.hasobject:
            new_base = self._clone_owner(base, ctx, attr_segment("base"))
            if new_base is not None:
                result = self._rebuild_view(value, base, new_base)
                ctx.register(value, result)
                return result

        result = value.copy(order="K")
        ctx.register(value, result)
        if value.dtype == object:
            for index in np.ndindex(value.shape):
                result[index] = ctx.clone_child(value[index], index_segment(index))
        if not value.flags.writeable:
            result.flags.writeable = False
        return result

    @staticmethod
    def _rebuild_view(value: np.ndarray, base: Any, new_base: Any) -> np.ndarray:
        offset = _address(value) - _address(base)
        result = np.ndarray(
            value.shape,
            dtype=value.dtype,
            buffer=new_base,
            offset=offset,
            strides=value.strides,
        )
        if type(value) is not np.ndarray:
            result = result.view(type(value))
        if not value.flags.writeable:
            result.flags.writeable = False
        return result

    def _clone_array(self, value: array.array, ctx: CloneContext) -> array.array:
        cls = type(value)
        if cls is array.array:
            result = array.array(value.typecode, value)
        else:
            result = array.array.__new__(cls, value.typecode, value)
        ctx.register(value, result)
        clone_attributes(value, result, ctx)
        return result

    def _clone_memoryview(self, value: memoryview, ctx: CloneContext) -> memoryview:
        owner = value.obj
        new_owner = None
        if value.c_contiguous and value.nbytes:
            new_owner = self._clone_owner(owner, ctx, attr_segment("obj"))
        try:
            if new_owner is not None:
                start = _address(value) - _address(owner)
                raw = memoryview(new_owner).cast("B")
                data = raw[start : start + value.nbytes]
            else:
                data = memoryview(bytearray(value.tobytes()))
            result = data.cast(value.format, value.shape)
        except (TypeError, ValueError) as e:
            raise StructuralCloneError(ctx.path, e) from e
        if value.readonly:
            result = result.toreadonly()
        ctx.register(value, result)
        return result
