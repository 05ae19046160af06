"""
Per-call clone context and path rendering.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from .options import CloneOptions
from .report import CloneReport
from .tracker import MISSING, IdentityTracker


def attr_segment(name: Any) -> str:
    """Path segment for an attribute (non-``str`` keys render as subscripts)."""
    if isinstance(name, str):
        return f".{name}"
    return f"[{name!r}]"


def index_segment(index: Any) -> str:
    """Path segment for a sequence position or array index tuple."""
    if isinstance(index, tuple):
        return f"[{', '.join(str(i) for i in index)}]"
    return f"[{index}]"


def key_segment(key: Any) -> str:
    """Path segment for the value stored under a mapping key."""
    return f"[{key!r}]"


def mapping_key_segment(key: Any) -> str:
    """Path segment for a mapping key itself."""
    return f"<key {key!r}>"


def member_segment(position: int) -> str:
    """Path segment for a set element (by iteration position)."""
    return f"{{{position}}}"


def render_path(segments: list[str]) -> str:
    """Join segments into the path string handed to hooks and errors."""
    return "".join(segments).lstrip(".")


@dataclass
class CloneContext:
    """
    State of one top-level clone call.

    A context is created by the engine at the start of ``clone()`` and dropped
    when it returns. Nothing in it is shared between calls, so a transform
    hook that itself calls ``clone()`` gets an unrelated context.

    Attributes:
        options: Resolved options of the call
        visit: Engine callback cloning one node in this context
        tracker: Source-to-clone identity map
        report: Statistics collected during the traversal
        segments: Rendered path segments from the root to the current node
    """

    options: CloneOptions
    visit: Callable[[Any, CloneContext], Any]
    tracker: IdentityTracker = field(default_factory=IdentityTracker)
    report: CloneReport = field(default_factory=CloneReport)
    segments: list[str] = field(default_factory=list)

    @property
    def path(self) -> str:
        return render_path(self.segments)

    @property
    def depth(self) -> int:
        return len(self.segments)

    def register(self, source: Any, clone: Any) -> None:
        self.tracker.register(source, clone)

    def lookup(self, source: Any) -> Any:
        return self.tracker.lookup(source, MISSING)

    def clone_child(self, value: Any, segment: str) -> Any:
        """Clone ``value`` one level below the current node."""
        self.segments.append(segment)
        try:
            return self.visit(value, self)
        finally:
            self.segments.pop()
