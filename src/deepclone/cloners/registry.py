"""
Cloner registry setup for deepclone.
"""

from deepclone.core.engine import ClonerRegistry
from deepclone.core.kinds import Kind

from .binary import BufferCloner, TypedViewCloner
from .callables import CallableCloner
from .containers import MappingCloner, SetCloner
from .native import NativeCloner
from .structural import SequenceCloner, StructureCloner
from .temporal import DateCloner, PatternCloner


def register_defaults():
    """
    Register all default cloner implementations in the global registry.

    Registered Cloners:
        Value-like:
            - 'date': DateCloner
            - 'pattern': PatternCloner
            - 'buffer': BufferCloner
            - 'typed_view': TypedViewCloner

        Containers:
            - 'mapping': MappingCloner
            - 'set': SetCloner
            - 'sequence': SequenceCloner
            - 'structure': StructureCloner

        Other:
            - 'callable': CallableCloner
            - 'native': NativeCloner

    Note:
        'primitive', 'atomic' and 'opaque' values are resolved by the engine
        itself and never reach a cloner. This function is called when
        ``deepclone.cloners`` is imported; custom cloners can replace entries
        by assigning to ``ClonerRegistry`` directly.
    """
    # Value-like built-ins
    ClonerRegistry[Kind.DATE] = DateCloner()
    ClonerRegistry[Kind.PATTERN] = PatternCloner()
    ClonerRegistry[Kind.BUFFER] = BufferCloner()
    ClonerRegistry[Kind.TYPED_VIEW] = TypedViewCloner()

    # Containers
    ClonerRegistry[Kind.MAPPING] = MappingCloner()
    ClonerRegistry[Kind.SET] = SetCloner()
    ClonerRegistry[Kind.SEQUENCE] = SequenceCloner()
    ClonerRegistry[Kind.STRUCTURE] = StructureCloner()

    # Behaviour and self-copying objects
    ClonerRegistry[Kind.CALLABLE] = CallableCloner()
    ClonerRegistry[Kind.NATIVE] = NativeCloner()
