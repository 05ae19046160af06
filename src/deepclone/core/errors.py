"""
Error classes for deepclone.

This module defines the exceptions surfaced by the clone engine. Every failure
of a top-level ``clone()`` call is reported through one of them; a failed call
never returns a partially built clone.
"""

from __future__ import annotations

from typing import Any


class ConfigError(ValueError):
    """
    Invalid clone options or options file.

    Raised while building ``CloneOptions`` or loading an options file, before
    any traversal starts.

    **Common Causes:**
    - Unknown ``clone_function`` or ``accessors`` strategy name
    - ``atomic_types`` entries that are not classes
    - Negative ``max_depth``
    - Dotted import paths that cannot be resolved
    """


class CloneError(Exception):
    """
    Base class for failures during a clone traversal.

    Attributes:
        path: Rendered path of the node being cloned when the failure happened
            (``""`` is the root value)
    """

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(self._fmt(message))

    def _fmt(self, msg: str) -> str:
        """Prefix the message with the failing path."""
        where = self.path if self.path else "<root>"
        return f"[{where}] {msg}"


class StructuralCloneError(CloneError):
    """
    The object model rejected an operation needed to build the clone.

    Typical triggers are classes whose ``__new__`` requires arguments, slot
    writes refused by a C extension type, or a cloned mapping key that is no
    longer hashable.

    Attributes:
        path: Path of the offending node
        cause: The original exception raised by the object model
    """

    def __init__(self, path: str, cause: BaseException):
        self.cause = cause
        super().__init__(path, f"structural clone failed: {type(cause).__name__}: {cause}")


class TransformAbort(Exception):
    """
    Raised by a transform hook to abort the whole clone call.

    The payload is handed back to the caller on the resulting
    ``TransformError``.

    **Example Usage:**
        ```python
        from deepclone import TransformAbort, clone

        def refuse_secrets(value, path):
            if path.endswith(".password"):
                raise TransformAbort({"reason": "secret", "path": path})
            return value

        clone(config, transform=refuse_secrets)
        ```
    """

    def __init__(self, payload: Any = None):
        self.payload = payload
        super().__init__(payload)


class TransformError(CloneError):
    """
    The caller's transform hook aborted the clone.

    Attributes:
        path: Path of the node the hook was invoked for
        payload: ``TransformAbort.payload``, or the exception the hook raised
    """

    def __init__(self, path: str, payload: Any):
        self.payload = payload
        super().__init__(path, f"transform aborted: {payload!r}")


class UnsupportedTypeError(CloneError):
    """
    A reference value matched none of the recognized kinds.

    Pass ``lenient=True`` to share such values by reference instead, or list
    the class in ``atomic_types``.

    Attributes:
        path: Path of the offending node
        type_name: Qualified name of the value's runtime type
    """

    def __init__(self, path: str, type_name: str):
        self.type_name = type_name
        super().__init__(path, f"cannot clone value of type {type_name}")
