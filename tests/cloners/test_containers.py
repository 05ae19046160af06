"""
Tests for mapping and set cloning.
"""

from __future__ import annotations

from collections import Counter, OrderedDict, defaultdict
from dataclasses import dataclass

import pytest

from deepclone import StructuralCloneError, clone
from deepclone.cloners.containers import MAPPING_BASES, builtin_base
from deepclone.core.transform import NO_OVERRIDE


class Key:
    """Hashed by identity."""

    def __init__(self, name):
        self.name = name


@dataclass(frozen=True)
class Tag:
    label: str


class LoudDict(dict):
    writes = 0

    def __setitem__(self, key, value):
        type(self).writes += 1
        super().__setitem__(key, value)


class TestMappingCloner:
    def test_plain_dict(self):
        source = {"a": [1], "b": {"c": 2}}
        result = clone(source)

        assert result == source
        assert result["a"] is not source["a"]
        assert result["b"] is not source["b"]

    def test_ordered_dict(self):
        source = OrderedDict([("z", 1), ("a", [2])])
        result = clone(source)

        assert type(result) is OrderedDict
        assert list(result) == ["z", "a"]
        result.move_to_end("z")
        assert list(source) == ["z", "a"]

    def test_defaultdict_keeps_factory(self):
        source = defaultdict(list, {"a": [1]})
        result = clone(source)

        assert type(result) is defaultdict
        assert result.default_factory is list
        assert result["a"] is not source["a"]
        result["new"].append(1)
        assert "new" not in source

    def test_counter(self):
        source = Counter("abca")
        result = clone(source)

        assert type(result) is Counter
        assert result == source
        assert result.most_common(1) == [("a", 2)]

    def test_subclass_setitem_not_called_while_building(self):
        LoudDict.writes = 0
        source = LoudDict()
        dict.__setitem__(source, "a", 1)
        source.note = "x"

        result = clone(source)

        assert LoudDict.writes == 0
        assert type(result) is LoudDict
        assert result == {"a": 1}
        assert result.note == "x"

    def test_object_keys_keep_identity(self):
        key = Key("k")
        source = {key: key}

        result = clone(source)
        new_key = next(iter(result))

        assert new_key is not key
        assert new_key.name == "k"
        assert result[new_key] is new_key

    def test_key_that_clones_unhashable_fails_with_path(self):
        def listify(value, path):
            return [value] if path == "['outer']<key 'k'>" else NO_OVERRIDE

        with pytest.raises(StructuralCloneError) as exc_info:
            clone({"outer": {"k": 1}}, transform=listify)

        assert exc_info.value.path == "['outer']<key 'k'>"

    def test_insertion_order(self):
        source = {}
        for key in ("b", "a", "c"):
            source[key] = key.upper()

        assert list(clone(source).items()) == [("b", "B"), ("a", "A"), ("c", "C")]


class TestSetCloner:
    def test_set_of_hashable_objects(self):
        source = {Tag("x"), Tag("y")}
        result = clone(source)

        assert result == source
        assert result is not source

    def test_frozenset(self):
        source = frozenset({Tag("x"), 1})
        result = clone(source)

        assert type(result) is frozenset
        assert result == source

    def test_set_inside_graph_keeps_identity(self):
        tags = {1, 2}
        result = clone({"a": tags, "b": tags})

        assert result["a"] is result["b"]
        assert result["a"] is not tags

    def test_set_member_paths(self):
        seen = []

        def record(value, path):
            seen.append(path)
            return NO_OVERRIDE

        clone({"only"}, transform=record)

        assert seen == ["", "{0}"]

    def test_elements_collapsing_to_equal_values(self):
        source = {1, 2}
        result = clone(source, transform=lambda v, p: 0 if p else NO_OVERRIDE)

        assert result == {0}


class TestBuiltinBase:
    def test_nearest_base(self):
        class Sub(OrderedDict):
            pass

        assert builtin_base(Sub, MAPPING_BASES) is OrderedDict
        assert builtin_base(LoudDict, MAPPING_BASES) is dict

    def test_unrelated_class(self):
        with pytest.raises(TypeError):
            builtin_base(list, MAPPING_BASES)
