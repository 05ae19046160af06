"""
Clone engine: traversal, dispatch and the public entry points.
"""

from __future__ import annotations

import logging
from typing import Any

from .classifier import classify, is_primitive, type_name
from .context import CloneContext
from .errors import CloneError, ConfigError, StructuralCloneError, UnsupportedTypeError
from .immutable import unwrap, wrap
from .interfaces import ICloner
from .kinds import Kind
from .options import CloneOptions
from .report import CloneReport
from .tracker import MISSING
from .transform import NO_OVERRIDE, apply_transform

logger = logging.getLogger(__name__)

# Global registry mapping kinds to cloner implementations
ClonerRegistry: dict[Kind, ICloner] = {}


class CloneEngine:
    """
    Orchestrates one or more independent clone calls with fixed options.

    For every node the engine:
    1. Resolves already-cloned references through the identity tracker
    2. Shares values nested deeper than ``max_depth``
    3. Offers the node to the transform hook
    4. Classifies the value and hands it to the cloner registered for its kind

    Each ``run()`` builds a fresh ``CloneContext``; the engine itself holds no
    per-call state and can be reused, including from inside a transform hook.

    **Example Usage:**
        ```python
        from deepclone.core.engine import CloneEngine
        from deepclone.core.options import CloneOptions

        engine = CloneEngine(CloneOptions(extended_fidelity=True))
        copy_a, report = engine.run(graph)
        print(report)
        ```
    """

    def __init__(
        self,
        options: CloneOptions | None = None,
        registry: dict[Kind, ICloner] | None = None,
    ):
        self.options = options if options is not None else CloneOptions()
        self.registry = registry if registry is not None else ClonerRegistry

    def run(self, value: Any) -> tuple[Any, CloneReport]:
        """
        Clone ``value`` and return the clone with the traversal report.

        Raises:
            StructuralCloneError: If the object model rejects part of the clone
            TransformError: If the transform hook aborts
            UnsupportedTypeError: If a value cannot be cloned and lenient mode is off
        """
        ctx = CloneContext(options=self.options, visit=self._visit)
        logger.debug("Cloning %s", type_name(value))
        result = self._visit(value, ctx)
        logger.debug(
            "Cloned %d nodes (%d shared references)",
            ctx.report.nodes,
            ctx.report.shared_hits,
        )

        if self.options.immutable:
            result = wrap(result, atomic_types=self.options.atomic_types)
        return result, ctx.report

    def _visit(self, value: Any, ctx: CloneContext) -> Any:
        # Facades clone what they currently read from
        value = unwrap(value)
        primitive = is_primitive(value)
        if not primitive:
            hit = ctx.lookup(value)
            if hit is not MISSING:
                ctx.report.shared_hits += 1
                return hit

        limit = ctx.options.max_depth
        if limit is not None and ctx.depth > limit:
            ctx.report.depth_limited += 1
            return value

        override = apply_transform(value, ctx)
        if override is not NO_OVERRIDE:
            ctx.report.transformed += 1
            if not primitive:
                ctx.register(value, override)
            return override

        kind = classify(value, ctx.options.atomic_set)
        ctx.report.record(kind)
        if kind in Kind.shared_kinds():
            return value
        if kind is Kind.OPAQUE:
            return self._unsupported(value, ctx)

        cloner = self.registry.get(kind)
        if cloner is None:
            raise UnsupportedTypeError(ctx.path, f"{type_name(value)} (no cloner for {kind.value})")
        try:
            return cloner.clone(value, ctx)
        except (CloneError, MemoryError, RecursionError):
            raise
        except Exception as e:
            raise StructuralCloneError(ctx.path, e) from e

    def _unsupported(self, value: Any, ctx: CloneContext) -> Any:
        name = type_name(value)
        if not ctx.options.lenient:
            raise UnsupportedTypeError(ctx.path, name)
        logger.warning(
            "Sharing unsupported %s at %s by reference", name, ctx.path or "<root>"
        )
        ctx.report.degraded.append(ctx.path)
        ctx.register(value, value)
        return value


def _resolve_options(
    options: CloneOptions | dict[str, Any] | None, overrides: dict[str, Any]
) -> CloneOptions:
    if options is None:
        options = CloneOptions()
    elif isinstance(options, dict):
        options = CloneOptions.from_dict(options)
    elif not isinstance(options, CloneOptions):
        raise ConfigError(
            f"options must be CloneOptions, a mapping or None, got {type(options).__name__}"
        )
    return options.with_overrides(**overrides)


def clone(
    value: Any, options: CloneOptions | dict[str, Any] | None = None, **overrides: Any
) -> Any:
    """
    Return an independent deep clone of ``value``.

    Args:
        value: Any Python value
        options: ``CloneOptions``, a mapping of option names, or ``None`` for defaults
        **overrides: Individual option fields overriding ``options``

    Returns:
        The clone, or a copy-on-write facade over it when ``immutable`` is set

    **Example:**
        ```python
        from deepclone import clone

        a = {"x": [1, 2]}
        a["self"] = a
        b = clone(a)
        assert b["self"] is b and b["x"] is not a["x"]
        ```
    """
    result, _ = CloneEngine(_resolve_options(options, overrides)).run(value)
    return result


def clone_with_report(
    value: Any, options: CloneOptions | dict[str, Any] | None = None, **overrides: Any
) -> tuple[Any, CloneReport]:
    """Like ``clone`` but also return the traversal ``CloneReport``."""
    return CloneEngine(_resolve_options(options, overrides)).run(value)
