"""
Tests for clone options and options files.
"""

from __future__ import annotations

from collections import OrderedDict
from pathlib import Path

import pytest

from deepclone.core.errors import ConfigError
from deepclone.core.options import (
    AccessorMode,
    CloneOptions,
    FunctionStrategy,
    load_options,
    resolve_object,
)


def upper_hook(value, path):
    return value


class TestCloneOptions:
    """Defaults, normalisation and validation."""

    def test_defaults(self):
        opts = CloneOptions()

        assert opts.immutable is False
        assert opts.atomic_types == ()
        assert opts.transform is None
        assert opts.clone_function is FunctionStrategy.KEEP
        assert opts.extended_fidelity is False
        assert opts.lenient is False
        assert opts.accessors is AccessorMode.LIVE
        assert opts.identity_continues is True
        assert opts.max_depth is None

    def test_strategy_names_are_normalised(self):
        opts = CloneOptions(clone_function="copy", accessors="snapshot")

        assert opts.clone_function is FunctionStrategy.COPY
        assert opts.accessors is AccessorMode.SNAPSHOT

    def test_factory_strategy_kept_as_is(self):
        factory = lambda fn, path: fn  # noqa: E731
        assert CloneOptions(clone_function=factory).clone_function is factory

    def test_atomic_types_become_tuple_and_set(self):
        opts = CloneOptions(atomic_types=[OrderedDict])

        assert opts.atomic_types == (OrderedDict,)
        assert opts.atomic_set == frozenset({OrderedDict})

    @pytest.mark.parametrize(
        "kwargs, message",
        [
            ({"atomic_types": ["not a class"]}, "must be classes"),
            ({"transform": 42}, "transform must be callable"),
            ({"clone_function": "deep"}, "Unknown clone_function"),
            ({"clone_function": 3}, "strategy name or a callable"),
            ({"accessors": "lazy"}, "Unknown accessors mode"),
            ({"max_depth": -1}, ">= 0"),
            ({"max_depth": True}, "integer"),
        ],
    )
    def test_invalid_values_raise(self, kwargs, message):
        with pytest.raises(ConfigError, match=message):
            CloneOptions(**kwargs)

    def test_with_overrides(self):
        base = CloneOptions(lenient=True)
        derived = base.with_overrides(immutable=True)

        assert derived.immutable is True
        assert derived.lenient is True
        assert base.immutable is False
        assert base.with_overrides() is base

    def test_with_overrides_rejects_unknown_keys(self):
        with pytest.raises(ConfigError, match="Unknown clone options"):
            CloneOptions().with_overrides(deep=True)

    def test_options_are_frozen(self):
        with pytest.raises(AttributeError):
            CloneOptions().immutable = True


class TestFromDict:
    def test_dotted_paths_are_resolved(self):
        opts = CloneOptions.from_dict(
            {
                "atomic_types": ["collections:OrderedDict", "decimal.Decimal"],
                "transform": f"{__name__}:upper_hook",
                "clone_function": "keep",
            }
        )

        from decimal import Decimal

        assert opts.atomic_types == (OrderedDict, Decimal)
        assert opts.transform is upper_hook
        assert opts.clone_function is FunctionStrategy.KEEP

    def test_unknown_keys_raise(self):
        with pytest.raises(ConfigError, match="unknown option keys"):
            CloneOptions.from_dict({"shallow": True}, label="opts.yaml")

    def test_root_must_be_mapping(self):
        with pytest.raises(ConfigError, match="must be a mapping"):
            CloneOptions.from_dict(["lenient"])

    def test_atomic_types_must_be_list(self):
        with pytest.raises(ConfigError, match="atomic_types must be a list"):
            CloneOptions.from_dict({"atomic_types": "collections:OrderedDict"})


class TestResolveObject:
    def test_colon_and_dot_forms(self):
        assert resolve_object("collections:OrderedDict") is OrderedDict
        assert resolve_object("collections.OrderedDict") is OrderedDict
        assert resolve_object("os.path:join").__name__ == "join"

    def test_missing_module(self):
        with pytest.raises(ConfigError, match="cannot import module"):
            resolve_object("no_such_module_xyz:Thing")

    def test_missing_attribute(self):
        with pytest.raises(ConfigError, match="has no attribute"):
            resolve_object("collections:NoSuchThing")

    def test_not_a_path(self):
        with pytest.raises(ConfigError, match="not a dotted import path"):
            resolve_object("OrderedDict")


class TestLoadOptions:
    def test_yaml_file(self, tmp_path: Path):
        path = tmp_path / "opts.yaml"
        path.write_text(
            "extended_fidelity: true\n"
            "clone_function: copy\n"
            "max_depth: 3\n"
            "atomic_types:\n"
            "  - collections:OrderedDict\n",
            encoding="utf-8",
        )

        opts = load_options(path)

        assert opts.extended_fidelity is True
        assert opts.clone_function is FunctionStrategy.COPY
        assert opts.max_depth == 3
        assert opts.atomic_types == (OrderedDict,)

    def test_json_file(self, tmp_path: Path):
        path = tmp_path / "opts.json"
        path.write_text('{"lenient": true, "accessors": "snapshot"}', encoding="utf-8")

        opts = load_options(path)

        assert opts.lenient is True
        assert opts.accessors is AccessorMode.SNAPSHOT

    def test_empty_yaml_gives_defaults(self, tmp_path: Path):
        path = tmp_path / "opts.yml"
        path.write_text("", encoding="utf-8")

        assert load_options(path) == CloneOptions()

    def test_forced_format(self, tmp_path: Path):
        path = tmp_path / "opts.txt"
        path.write_text("lenient: true\n", encoding="utf-8")

        assert load_options(path, format="yaml").lenient is True

    def test_invalid_yaml_raises(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("lenient: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="cannot parse options"):
            load_options(path)

    def test_unsupported_suffix(self, tmp_path: Path):
        path = tmp_path / "opts.toml"
        path.write_text("lenient = true\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="Unsupported options format"):
            load_options(path)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_options(tmp_path / "missing.yaml")

    def test_invalid_option_value_names_file(self, tmp_path: Path):
        path = tmp_path / "opts.yaml"
        path.write_text("surprise: 1\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="opts.yaml"):
            load_options(path)
