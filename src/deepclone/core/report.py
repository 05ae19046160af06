"""
Statistics collected during a clone call.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any

from .kinds import Kind


@dataclass
class CloneReport:
    """
    Structured summary of one clone traversal.

    Returned by ``clone_with_report`` and printed by the ``deepclone`` CLI.

    Attributes:
        kinds: Number of visited nodes per ``Kind`` value
        shared_hits: Nodes resolved through the identity tracker (shared references and cycles)
        transformed: Nodes whose clone was replaced by the transform hook
        degraded: Paths of unsupported values shared by reference in lenient mode
        depth_limited: Nodes shared because they sit below ``max_depth``
    """

    kinds: Counter = field(default_factory=Counter)
    shared_hits: int = 0
    transformed: int = 0
    degraded: list[str] = field(default_factory=list)
    depth_limited: int = 0

    def record(self, kind: Kind) -> None:
        self.kinds[kind.value] += 1

    @property
    def nodes(self) -> int:
        """Total number of classified nodes."""
        return sum(self.kinds.values())

    def has_degradations(self) -> bool:
        return bool(self.degraded)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "nodes": self.nodes,
            "kinds": dict(sorted(self.kinds.items())),
            "shared_hits": self.shared_hits,
            "transformed": self.transformed,
            "depth_limited": self.depth_limited,
            "degraded": list(self.degraded),
        }

    def __str__(self) -> str:
        """Human-readable string representation."""
        lines = [f"Cloned {self.nodes} nodes"]
        for kind, count in sorted(self.kinds.items()):
            lines.append(f"  {kind}: {count}")
        if self.shared_hits:
            lines.append(f"Shared references resolved: {self.shared_hits}")
        if self.transformed:
            lines.append(f"Transform overrides: {self.transformed}")
        if self.depth_limited:
            lines.append(f"Shared below max_depth: {self.depth_limited}")
        if self.degraded:
            lines.append(f"Shared by reference (lenient): {', '.join(self.degraded)}")
        return "\n".join(lines)
