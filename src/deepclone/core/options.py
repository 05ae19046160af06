"""
Clone options and options-file loading.

``CloneOptions`` is the resolved, validated configuration of one clone call.
Options files are YAML or JSON mappings whose keys mirror the dataclass
fields; classes and callables are referenced by dotted import path.
"""

from __future__ import annotations

import importlib
import json
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError

__all__ = [
    "AccessorMode",
    "CloneOptions",
    "FunctionStrategy",
    "load_options",
    "resolve_object",
]


class FunctionStrategy(str, Enum):
    """Built-in strategies for cloning callables."""

    KEEP = "keep"  # share the callable
    COPY = "copy"  # rebuild function objects where the host allows it


class AccessorMode(str, Enum):
    """How attributes produced by cached accessors are carried over."""

    LIVE = "live"  # drop cached values, the clone recomputes them
    SNAPSHOT = "snapshot"  # clone cached values as plain state


Transform = Callable[[Any, str], Any]
FunctionFactory = Callable[[Any, str], Any]


@dataclass(frozen=True)
class CloneOptions:
    """
    Configuration of a single clone call.

    Attributes:
        immutable: Wrap the result in a copy-on-write facade
        atomic_types: Classes whose exact instances are shared by reference
        transform: Hook ``(value, path) -> replacement | NO_OVERRIDE`` run at every node
        clone_function: ``"keep"``, ``"copy"`` or a factory ``(fn, path) -> clone``
        extended_fidelity: Also carry dunder-named and non-``str``-keyed attributes
        lenient: Share unsupported values by reference instead of failing
        accessors: ``"live"`` or ``"snapshot"`` for cached accessor values
        identity_continues: A hook returning its input continues default cloning
        max_depth: Share values nested deeper than this many path segments

    **Example Usage:**
        ```python
        from deepclone import CloneOptions, clone

        opts = CloneOptions(atomic_types=[BigImmutableTable], extended_fidelity=True)
        copy_a = clone(state_a, opts)
        copy_b = clone(state_b, opts, immutable=True)  # per-call override
        ```
    """

    immutable: bool = False
    atomic_types: tuple[type, ...] = ()
    transform: Transform | None = None
    clone_function: FunctionStrategy | FunctionFactory = FunctionStrategy.KEEP
    extended_fidelity: bool = False
    lenient: bool = False
    accessors: AccessorMode = AccessorMode.LIVE
    identity_continues: bool = True
    max_depth: int | None = None
    _atomic_set: frozenset[type] = field(
        default=frozenset(), init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        """Normalise enum-like fields and validate everything else."""
        atomic = tuple(self.atomic_types or ())
        for cls in atomic:
            if not isinstance(cls, type):
                raise ConfigError(f"atomic_types entries must be classes, got {cls!r}")
        object.__setattr__(self, "atomic_types", atomic)
        object.__setattr__(self, "_atomic_set", frozenset(atomic))

        if self.transform is not None and not callable(self.transform):
            raise ConfigError("transform must be callable or None")

        strategy = self.clone_function
        if isinstance(strategy, str):
            try:
                strategy = FunctionStrategy(strategy)
            except ValueError:
                raise ConfigError(
                    f"Unknown clone_function strategy '{strategy}' "
                    f"(expected one of {[s.value for s in FunctionStrategy]} or a callable)"
                ) from None
        elif not callable(strategy):
            raise ConfigError("clone_function must be a strategy name or a callable")
        object.__setattr__(self, "clone_function", strategy)

        try:
            object.__setattr__(self, "accessors", AccessorMode(self.accessors))
        except ValueError:
            raise ConfigError(
                f"Unknown accessors mode '{self.accessors}' "
                f"(expected one of {[m.value for m in AccessorMode]})"
            ) from None

        if self.max_depth is not None:
            if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
                raise ConfigError("max_depth must be an integer or None")
            if self.max_depth < 0:
                raise ConfigError("max_depth must be >= 0")

    @property
    def atomic_set(self) -> frozenset[type]:
        """Atomic types as a frozenset for O(1) membership checks."""
        return self._atomic_set

    def with_overrides(self, **overrides: Any) -> CloneOptions:
        """Return a copy with the given fields replaced (re-validated)."""
        if not overrides:
            return self
        unknown = set(overrides) - _option_names()
        if unknown:
            raise ConfigError(f"Unknown clone options: {sorted(unknown)}")
        return replace(self, **overrides)

    @classmethod
    def from_dict(cls, data: dict[str, Any], *, label: str = "<mapping>") -> CloneOptions:
        """
        Build options from a plain mapping (as read from an options file).

        ``atomic_types`` entries, ``transform`` and a non-builtin
        ``clone_function`` may be given as dotted import paths.
        """
        if not isinstance(data, dict):
            raise ConfigError(f"{label}: options root must be a mapping")
        unknown = set(data) - _option_names()
        if unknown:
            raise ConfigError(f"{label}: unknown option keys {sorted(unknown)}")

        kwargs = dict(data)
        if "atomic_types" in kwargs:
            entries = kwargs["atomic_types"] or []
            if isinstance(entries, str) or not isinstance(entries, Iterable):
                raise ConfigError(f"{label}: atomic_types must be a list")
            kwargs["atomic_types"] = tuple(
                resolve_object(e, f"{label}::atomic_types[{i}]") if isinstance(e, str) else e
                for i, e in enumerate(entries)
            )
        if isinstance(kwargs.get("transform"), str):
            kwargs["transform"] = resolve_object(kwargs["transform"], f"{label}::transform")
        strategy = kwargs.get("clone_function")
        if isinstance(strategy, str) and strategy not in {s.value for s in FunctionStrategy}:
            kwargs["clone_function"] = resolve_object(strategy, f"{label}::clone_function")
        return cls(**kwargs)


def _option_names() -> set[str]:
    return {f.name for f in fields(CloneOptions) if f.init}


def resolve_object(dotted: str, ctx: str = "<option>") -> Any:
    """
    Import an object from ``"package.module:Name"`` or ``"package.module.Name"``.

    Raises:
        ConfigError: If the module or attribute cannot be found
    """
    if ":" in dotted:
        module_name, _, attr_path = dotted.partition(":")
    else:
        module_name, _, attr_path = dotted.rpartition(".")
    if not module_name or not attr_path:
        raise ConfigError(f"{ctx}: '{dotted}' is not a dotted import path")
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigError(f"{ctx}: cannot import module '{module_name}': {e}") from e
    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise ConfigError(
                f"{ctx}: module '{module_name}' has no attribute '{attr_path}'"
            ) from None
    return obj


def load_options(source: str | Path, *, format: str | None = None) -> CloneOptions:
    """
    Load ``CloneOptions`` from a YAML or JSON file.

    Example file:
        ```yaml
        extended_fidelity: true
        clone_function: copy
        atomic_types:
          - decimal:Context
          - myapp.models:Catalog
        ```

    Args:
        source: Path to the options file
        format: Force ``"yaml"`` or ``"json"`` instead of using the suffix

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigError: If the file cannot be parsed or holds invalid options
    """
    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(path)

    fmt = (format or path.suffix.lstrip(".")).lower()
    text = path.read_text(encoding="utf-8")
    try:
        if fmt in {"yaml", "yml", ""}:
            data = yaml.safe_load(text)
        elif fmt == "json":
            data = json.loads(text)
        else:
            raise ConfigError(f"Unsupported options format '{fmt}' for {path}")
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"{path}: cannot parse options: {e}") from e

    if data is None:
        data = {}
    return CloneOptions.from_dict(data, label=str(path))
