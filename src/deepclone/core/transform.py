"""
Transform hook dispatch.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .errors import TransformAbort, TransformError

if TYPE_CHECKING:
    from .context import CloneContext


class _NoOverride:
    """Sentinel type: the hook declines to override the current node."""

    _instance: _NoOverride | None = None

    def __new__(cls) -> _NoOverride:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_OVERRIDE"

    def __reduce__(self) -> str:
        return "NO_OVERRIDE"

    def __bool__(self) -> bool:
        return False


NO_OVERRIDE = _NoOverride()


def apply_transform(value: Any, ctx: CloneContext) -> Any:
    """
    Run the caller's transform hook for the current node.

    Returns:
        The hook's replacement, or ``NO_OVERRIDE`` when default cloning should
        continue (no hook, explicit sentinel, or the input returned unchanged
        while ``identity_continues`` is set)

    Raises:
        TransformError: If the hook raises ``TransformAbort`` or any other exception
    """
    hook = ctx.options.transform
    if hook is None:
        return NO_OVERRIDE

    path = ctx.path
    try:
        result = hook(value, path)
    except TransformAbort as abort:
        raise TransformError(path, abort.payload) from abort
    except (MemoryError, RecursionError):
        raise
    except Exception as e:
        raise TransformError(path, e) from e

    if result is NO_OVERRIDE:
        return NO_OVERRIDE
    if result is value and ctx.options.identity_continues:
        return NO_OVERRIDE
    return result
