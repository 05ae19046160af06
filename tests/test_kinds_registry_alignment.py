"""
Tests for kind taxonomy and registry alignment.
"""

from deepclone.core.engine import ClonerRegistry
from deepclone.core.interfaces import ICloner
from deepclone.core.kinds import KIND_DESCRIPTIONS, Kind


def test_registry_keys_are_current():
    """Ensure all registered keys belong to the taxonomy."""
    ok = set(Kind.all_kinds())
    for k in ClonerRegistry.keys():
        assert k in ok, f"Registry key not in Kind: {k}"


def test_engine_handled_kinds_not_registered():
    """Shared and opaque values never reach a cloner."""
    for k in Kind.shared_kinds() | {Kind.OPAQUE}:
        assert k not in ClonerRegistry, f"Engine-handled kind registered: {k}"


def test_every_other_kind_has_a_cloner():
    expected = set(Kind.all_kinds()) - Kind.shared_kinds() - {Kind.OPAQUE}
    assert set(ClonerRegistry) == expected


def test_registered_cloners_satisfy_protocol():
    for kind, cloner in ClonerRegistry.items():
        assert isinstance(cloner, ICloner), f"{kind} cloner does not implement ICloner"


def test_container_kinds_are_registered():
    assert Kind.container_kinds() <= set(ClonerRegistry)


def test_all_kinds_completeness():
    """Test that all_kinds() returns expected kinds."""
    expected_kinds = [
        # Shared as-is
        "primitive",
        "atomic",
        # Value-like built-ins
        "date",
        "pattern",
        "buffer",
        "typed_view",
        # Containers
        "mapping",
        "set",
        "sequence",
        # Behaviour
        "callable",
        # Objects
        "native",
        "structure",
        # Refused
        "opaque",
    ]

    actual_kinds = Kind.all_kinds()
    assert [k.value for k in actual_kinds] == expected_kinds
    assert set(KIND_DESCRIPTIONS) == set(actual_kinds)


def test_kinds_are_strings():
    assert Kind.MAPPING == "mapping"
    assert Kind("typed_view") is Kind.TYPED_VIEW
