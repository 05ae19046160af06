"""
Cloner for types that implement their own copy protocol.
"""

from __future__ import annotations

import copy
from typing import Any

from deepclone.core.context import CloneContext
from deepclone.core.interfaces import ICloner


class NativeCloner(ICloner):
    """
    Delegate to the type's ``__deepcopy__``/``__reduce__`` (kind: 'native').

    Used for objects that know how to copy themselves, such as pandas
    ``DataFrame``/``Series``/``Index`` or classes with ``__setstate__``. The
    engine's memo is passed through, so anything already cloned in this call
    is reused and anything the native copy creates is visible to the rest of
    the traversal.

    Note:
        The transform hook does not see values inside a native copy.
    """

    def clone(self, value: Any, ctx: CloneContext) -> Any:
        return copy.deepcopy(value, ctx.tracker.memo)
