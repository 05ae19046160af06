"""
Cloner implementations for deepclone.

One cloner per recognized kind of value. Cloners build the clone of a single
value and recurse into its children through the clone context, which routes
every child back through the engine (identity tracker, transform hook,
classification).

Registry System:
The module registers all default cloners in the global registry when it is
imported, making them available to every ``CloneEngine``.
"""

from .binary import BufferCloner, TypedViewCloner
from .callables import CallableCloner
from .containers import MappingCloner, SetCloner
from .native import NativeCloner
from .registry import register_defaults
from .structural import SequenceCloner, StructureCloner, clone_attributes
from .temporal import DateCloner, PatternCloner

# Register all default cloners when module is imported
register_defaults()

__all__ = [
    # Value-like cloners
    "DateCloner",
    "PatternCloner",
    "BufferCloner",
    "TypedViewCloner",
    # Container cloners
    "MappingCloner",
    "SetCloner",
    "SequenceCloner",
    "StructureCloner",
    # Other cloners
    "CallableCloner",
    "NativeCloner",
    # Helpers
    "clone_attributes",
    # Registry
    "register_defaults",
]
