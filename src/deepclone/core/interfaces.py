"""
Cloner interface protocol for deepclone.
Defines the contract every per-kind cloner must satisfy.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .context import CloneContext


@runtime_checkable
class ICloner(Protocol):
    """
    Contract for per-kind cloners.
    Responsibilities: build the clone of one value of a single ``Kind``.
    """

    def clone(self, value: Any, ctx: CloneContext) -> Any:
        """
        Produce the clone of ``value``.

        Container cloners must call ``ctx.register(value, clone)`` before
        cloning any child through ``ctx.clone_child`` so cycles resolve to the
        clone under construction. Immutable containers, which can only be
        built after their children, re-check ``ctx.lookup(value)`` before
        registering.
        """
        ...
