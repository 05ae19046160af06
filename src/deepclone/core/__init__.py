"""
Core module for deepclone.

This module contains the clone engine and the pieces it is built from: value
classification, the identity tracker, descriptor handling, the transform hook
and the copy-on-write facades.
"""

from .classifier import classify, type_name
from .context import CloneContext, render_path
from .descriptors import Descriptor, define_property, own_descriptors
from .engine import ClonerRegistry, CloneEngine, clone, clone_with_report
from .errors import (
    CloneError,
    ConfigError,
    StructuralCloneError,
    TransformAbort,
    TransformError,
    UnsupportedTypeError,
)
from .immutable import (
    MappingFacade,
    SequenceFacade,
    SetFacade,
    StructureFacade,
    is_facade,
    unwrap,
    wrap,
)
from .interfaces import ICloner
from .kinds import KIND_DESCRIPTIONS, Kind
from .options import AccessorMode, CloneOptions, FunctionStrategy, load_options
from .report import CloneReport
from .tracker import IdentityTracker
from .transform import NO_OVERRIDE

__all__ = [
    # Errors
    "ConfigError",
    "CloneError",
    "StructuralCloneError",
    "TransformAbort",
    "TransformError",
    "UnsupportedTypeError",
    # Kinds and classification
    "Kind",
    "KIND_DESCRIPTIONS",
    "classify",
    "type_name",
    # Options and reporting
    "CloneOptions",
    "FunctionStrategy",
    "AccessorMode",
    "load_options",
    "CloneReport",
    # Traversal state
    "IdentityTracker",
    "CloneContext",
    "render_path",
    # Descriptors
    "Descriptor",
    "own_descriptors",
    "define_property",
    # Transform hook
    "NO_OVERRIDE",
    # Interfaces and registry
    "ICloner",
    "ClonerRegistry",
    # Engine
    "CloneEngine",
    "clone",
    "clone_with_report",
    # Facades
    "StructureFacade",
    "MappingFacade",
    "SequenceFacade",
    "SetFacade",
    "wrap",
    "unwrap",
    "is_facade",
]
