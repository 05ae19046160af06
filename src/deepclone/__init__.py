"""
deepclone - Identity-Preserving Deep Copy Engine

deepclone produces fully independent copies of arbitrary Python object graphs.
Shared references stay shared and cycles stay cycles in the clone, while
no mutable storage is shared between the clone and its source.

Key Features:
- **Identity Preservation**: Two paths to one object in the source lead to one object in the clone
- **Cycle Safety**: Self-referencing graphs terminate and point at their own clones
- **Type Fidelity**: Clones keep their classes, container flavours, slots and frozen dataclass flags
- **Transform Hook**: Replace any node by path during the traversal
- **Atomic Types**: Opt whole types out of cloning (shared by reference)
- **Copy-on-Write Facades**: Read-only views that privately copy a branch on first write

Architecture Overview:
- **Kind**: Discriminator selecting the cloning policy for a value
- **Classifier**: Maps every value to exactly one Kind
- **Identity Tracker**: Source-to-clone memo for one call (``copy`` module compatible)
- **Cloner Registry**: Maps kinds to cloner implementations
- **Clone Engine**: Orchestrates tracking, transform, classification and dispatch
- **Facades**: Copy-on-write wrappers over finished clones

Quick Start:
    ```python
    from deepclone import TransformAbort, clone

    config = {"limits": [1, 2, 3]}
    config["self"] = config

    copy_ = clone(config)
    assert copy_["self"] is copy_
    assert copy_["limits"] is not config["limits"]

    doubled = clone({"a": 2, "b": [3, 4]}, transform=lambda v, path: v * 2 if isinstance(v, int) else v)
    assert doubled == {"a": 4, "b": [6, 8]}
    ```

Cloning Policies:
    Shared as-is:
        - 'primitive': numbers, strings, bytes, enums, types, numpy scalars
        - 'atomic': exact instances of caller-listed types

    Per-type cloners:
        - 'date', 'pattern', 'buffer', 'typed_view'
        - 'mapping', 'set', 'sequence', 'structure'
        - 'callable': kept, copied or built by a factory
        - 'native': the type's own ``__deepcopy__``/``__reduce__``

    Rejected (or shared in lenient mode):
        - 'opaque': files, sockets, locks, modules, generators

Extending the System:
    To change how a kind of value is cloned:
    1. Create a class implementing ``ICloner``
    2. Assign it to ``ClonerRegistry[Kind.<KIND>]``, or pass a registry to ``CloneEngine``
"""

# Version information
__version__ = "0.1.0"
__author__ = "deepclone Team"
__description__ = "Identity-preserving deep copy engine"

# Register default cloners
import deepclone.cloners

from .core import (
    KIND_DESCRIPTIONS,
    NO_OVERRIDE,
    AccessorMode,
    ClonerRegistry,
    CloneEngine,
    CloneError,
    CloneOptions,
    CloneReport,
    ConfigError,
    Descriptor,
    FunctionStrategy,
    ICloner,
    IdentityTracker,
    Kind,
    MappingFacade,
    SequenceFacade,
    SetFacade,
    StructuralCloneError,
    StructureFacade,
    TransformAbort,
    TransformError,
    UnsupportedTypeError,
    classify,
    clone,
    clone_with_report,
    is_facade,
    load_options,
    own_descriptors,
    unwrap,
    wrap,
)

__all__ = [
    # Entry points
    "clone",
    "clone_with_report",
    "CloneEngine",
    # Options
    "CloneOptions",
    "FunctionStrategy",
    "AccessorMode",
    "load_options",
    "NO_OVERRIDE",
    # Errors
    "CloneError",
    "ConfigError",
    "StructuralCloneError",
    "TransformAbort",
    "TransformError",
    "UnsupportedTypeError",
    # Classification
    "Kind",
    "KIND_DESCRIPTIONS",
    "classify",
    # Extension points
    "ICloner",
    "ClonerRegistry",
    # Reporting and internals
    "CloneReport",
    "IdentityTracker",
    "Descriptor",
    "own_descriptors",
    # Facades
    "wrap",
    "unwrap",
    "is_facade",
    "StructureFacade",
    "MappingFacade",
    "SequenceFacade",
    "SetFacade",
]
