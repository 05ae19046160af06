"""
Identity tracking for a single clone call.
"""

from __future__ import annotations

from typing import Any

MISSING: Any = object()


class IdentityTracker:
    """
    Map already-visited source references to their clones.

    The tracker is what makes shared references and cycles work: every
    container registers its (still empty) clone before its children are
    visited, so a child that points back at an ancestor resolves to the
    ancestor's clone instead of recursing forever.

    Lookups are keyed by ``id(source)``. Most containers (``dict``, ``list``)
    cannot be weakly referenced, so instead of a ``WeakKeyDictionary`` the
    tracker keeps each registered source alive in the memo for as long as the
    tracker exists. That prevents ids from being recycled mid-traversal, and
    the whole memo is dropped together with the clone context at the end of
    the top-level call.

    ``memo`` follows the layout of the ``copy`` module (``memo[id(memo)]``
    holds the keep-alive list), so it can be handed to ``__deepcopy__``
    implementations directly.
    """

    __slots__ = ("memo",)

    def __init__(self) -> None:
        self.memo: dict[int, Any] = {}

    def register(self, source: Any, clone: Any) -> None:
        """Record ``clone`` as the clone of ``source``."""
        self.memo[id(source)] = clone
        self._keep_alive(source)

    def lookup(self, source: Any, default: Any = MISSING) -> Any:
        """Return the registered clone of ``source``, or ``default``."""
        return self.memo.get(id(source), default)

    def _keep_alive(self, source: Any) -> None:
        try:
            self.memo[id(self.memo)].append(source)
        except KeyError:
            self.memo[id(self.memo)] = [source]

    def __contains__(self, source: Any) -> bool:
        return id(source) in self.memo

    def __len__(self) -> int:
        """Number of registered sources (the keep-alive slot is not counted)."""
        return len(self.memo) - (1 if id(self.memo) in self.memo else 0)

    def __repr__(self) -> str:
        return f"IdentityTracker(entries={len(self)})"
