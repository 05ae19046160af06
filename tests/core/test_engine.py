"""
Tests for the clone engine: identity, cycles, independence and dispatch.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict

import pytest

from deepclone import (
    CloneEngine,
    CloneOptions,
    ConfigError,
    StructuralCloneError,
    UnsupportedTypeError,
    clone,
    clone_with_report,
    is_facade,
)
from deepclone.core.engine import ClonerRegistry
from deepclone.core.kinds import Kind
from deepclone.core.transform import NO_OVERRIDE


class Account:
    def __init__(self, owner, balance):
        self.owner = owner
        self.balance = balance
        self.history = []


class Frozenish:
    __slots__ = ("value",)

    def __init__(self, value):
        self.value = value


class TestIdentityPreservation:
    """Shared references in the source stay shared in the clone."""

    def test_two_properties_pointing_at_same_object(self):
        shared = {"limit": 10}
        source = {"a": shared, "b": shared}

        result = clone(source)

        assert result["a"] is result["b"]
        assert result["a"] is not shared

    def test_shared_across_containers_and_attributes(self):
        owner = {"name": "ada"}
        first, second = Account(owner, 1), Account(owner, 2)

        result = clone([first, second, owner])

        assert result[0].owner is result[1].owner is result[2]

    def test_repeated_object_in_list(self):
        item = [0]
        result = clone([item, item, item])

        assert result[0] is result[1] is result[2]
        assert result[0] is not item


class TestCycles:
    """Cyclic graphs terminate and point at their own clones."""

    def test_self_referencing_dict(self):
        source = {"name": "root"}
        source["self"] = source

        result = clone(source)

        assert result["self"] is result
        assert result is not source

    def test_self_referencing_list(self):
        source = [1]
        source.append(source)

        result = clone(source)

        assert result[1] is result

    def test_object_cycle_through_attributes(self):
        acc = Account("ada", 1)
        acc.history.append(acc)

        result = clone(acc)

        assert result.history[0] is result
        assert result.history is not acc.history

    def test_tuple_cycle_through_list(self):
        inner = []
        source = (inner,)
        inner.append(source)

        result = clone(source)

        assert result[0][0] is result
        assert result is not source

    def test_slotted_cycle(self):
        source = Frozenish(None)
        source.value = source

        result = clone(source)

        assert result.value is result


class TestIndependence:
    """Mutating the clone never touches the source (and vice versa)."""

    def test_nested_mutation(self):
        source = {"accounts": [Account("ada", 10)], "meta": {"tags": {"x"}}}
        result = clone(source)

        result["accounts"][0].balance = 99
        result["accounts"][0].history.append("deposit")
        result["meta"]["tags"].add("y")

        assert source["accounts"][0].balance == 10
        assert source["accounts"][0].history == []
        assert source["meta"]["tags"] == {"x"}

        source["accounts"].append("later")
        assert len(result["accounts"]) == 1

    def test_plain_tuple_of_primitives_is_returned_as_is(self):
        source = (1, "a", None)
        assert clone(source) is source

    def test_tuple_with_mutable_items_is_rebuilt(self):
        source = (1, [2])
        result = clone(source)

        assert result == source
        assert result is not source
        assert result[1] is not source[1]


class TestOrderPreservation:
    def test_dict_insertion_order(self):
        source = {"b": 1, "a": 2, "c": 3}
        assert list(clone(source)) == ["b", "a", "c"]

    def test_ordered_dict_order(self):
        source = OrderedDict([("b", 1), ("a", 2), ("c", 3)])
        result = clone(source)

        assert list(result) == ["b", "a", "c"]
        assert type(result) is OrderedDict


class TestAtomicTypes:
    def test_atomic_instances_are_shared(self):
        catalog = Account("catalog", 0)
        source = {"catalog": catalog, "other": Account("x", 1)}

        result = clone(source, atomic_types=[Account])

        assert result["catalog"] is catalog
        assert result["other"] is source["other"]

    def test_atomic_root(self):
        root = Account("root", 0)
        assert clone(root, atomic_types=[Account]) is root

    def test_atomic_check_is_exact_type(self):
        class Savings(Account):
            pass

        source = Savings("ada", 1)
        assert clone(source, atomic_types=[Account]) is not source


class TestUnsupportedValues:
    def test_unsupported_type_raises_with_path(self):
        with pytest.raises(UnsupportedTypeError) as exc_info:
            clone({"lock": threading.Lock()})

        assert exc_info.value.path == "['lock']"
        assert exc_info.value.type_name.endswith("lock")

    def test_lenient_mode_shares_and_warns(self, caplog):
        lock = threading.Lock()

        with caplog.at_level(logging.WARNING, logger="deepclone.core.engine"):
            result, report = clone_with_report({"lock": lock, "n": [1]}, lenient=True)

        assert result["lock"] is lock
        assert result["n"] == [1]
        assert report.degraded == ["['lock']"]
        assert "Sharing unsupported" in caplog.text

    def test_lenient_shared_value_keeps_identity(self):
        lock = threading.Lock()
        result = clone([lock, lock], lenient=True)

        assert result[0] is result[1] is lock

    def test_missing_cloner_is_unsupported(self):
        engine = CloneEngine(registry={})
        with pytest.raises(UnsupportedTypeError, match="no cloner for mapping"):
            engine.run({"a": 1})


class TestStructuralErrors:
    def test_constructor_requiring_arguments(self):
        class NeedsArgs:
            def __new__(cls, required):
                return super().__new__(cls)

            def __init__(self, required):
                self.required = required

        with pytest.raises(StructuralCloneError) as exc_info:
            clone({"x": NeedsArgs(1)})

        assert exc_info.value.path == "['x']"
        assert isinstance(exc_info.value.cause, TypeError)

    def test_unhashable_cloned_key(self):
        def listify_key(value, path):
            return [value] if path == "<key 'k'>" else NO_OVERRIDE

        with pytest.raises(StructuralCloneError) as exc_info:
            clone({"k": 1}, transform=listify_key)

        assert exc_info.value.path == "<key 'k'>"

    def test_unexpected_exception_is_wrapped(self):
        class Exploding:
            def __getnewargs__(self):
                raise ValueError("nope")

        with pytest.raises(StructuralCloneError) as exc_info:
            clone(Exploding())

        assert exc_info.value.path == ""
        assert isinstance(exc_info.value.cause, ValueError)


class TestMaxDepth:
    def test_values_below_limit_are_shared(self):
        source = {"a": {"b": [1]}}
        result, report = clone_with_report(source, max_depth=1)

        assert result["a"] is not source["a"]
        assert result["a"]["b"] is source["a"]["b"]
        assert report.depth_limited == 2

    def test_zero_depth_is_shallow(self):
        source = [[1], [2]]
        result = clone(source, max_depth=0)

        assert result is not source
        assert result[0] is source[0]


class TestEntryPoints:
    def test_options_mapping(self):
        lock = threading.Lock()
        assert clone([lock], {"lenient": True})[0] is lock

    def test_overrides_apply_on_top_of_options(self):
        opts = CloneOptions(lenient=False)
        lock = threading.Lock()

        assert clone([lock], opts, lenient=True)[0] is lock

    def test_invalid_options_type(self):
        with pytest.raises(ConfigError, match="options must be"):
            clone([], options=42)

    def test_immutable_option_wraps_result(self):
        result = clone({"a": [1]}, immutable=True)

        assert is_facade(result)
        assert result["a"][0] == 1

    def test_report_counts(self):
        shared = [1]
        _, report = clone_with_report({"a": shared, "b": shared})

        assert report.kinds[Kind.MAPPING.value] == 1
        assert report.kinds[Kind.SEQUENCE.value] == 1
        assert report.shared_hits == 1

    def test_engine_is_reusable(self):
        engine = CloneEngine(CloneOptions())
        source = {"x": [1]}

        first, _ = engine.run(source)
        second, _ = engine.run(source)

        assert first == second
        assert first["x"] is not second["x"]

    def test_debug_logging(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="deepclone.core.engine"):
            clone({"a": 1})

        assert "Cloning dict" in caplog.text
        assert "Cloned" in caplog.text

    def test_default_registry_covers_cloned_kinds(self):
        handled_by_engine = Kind.shared_kinds() | {Kind.OPAQUE}
        for kind in Kind.all_kinds():
            if kind not in handled_by_engine:
                assert kind in ClonerRegistry, kind
