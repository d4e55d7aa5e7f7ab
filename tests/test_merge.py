"""Tests for Slicer.merge."""

import dataclasses as _dataclasses
import typing as _typing

import pydantic as _pydantic
import pytest as _pytest

import config_slicer.errors as errors
import config_slicer.slicer as slicer
import config_slicer.targets as targets


@_dataclasses.dataclass(frozen=True)
class FrozenPlugger:
    plugin_name: str = "FrozenPlugger"
    title: str = ""


class ModelPlugger(_pydantic.BaseModel):
    plugin_name: str = "Modeled"
    names: list[str] = []
    title: str = ""


class RecordingTarget(targets.MergeTarget):
    """MergeTarget backed by a dict that records assignments."""

    def __init__(self, shapes: dict[str, targets.FieldShape]) -> None:
        self.shapes = shapes
        self.values: dict[str, _typing.Any] = {}

    def has(self, name: str) -> bool:
        return name in self.shapes

    def get(self, name: str) -> _typing.Any:
        return self.values.get(name)

    def set(self, name: str, value: _typing.Any) -> None:
        self.values[name] = value

    def shape_of(self, name: str) -> targets.FieldShape:
        return self.shapes[name]


class TestMergeIntoMapping:
    """Tests for merging into a plugin spec's config dict."""

    def test_keeps_unrelated_keys(self) -> None:
        """Only sliced keys are added or combined."""
        spec = ["Foo", "Foo", {"keep": 1, "a": "old"}]
        config = {"Foo.a": "new", "Foo.b[]": "x", "Bar.keep": 2}
        result = slicer.Slicer(config).merge(spec)
        assert result is spec
        assert spec[2] == {"keep": 1, "a": "new", "b": ["x"]}

    def test_appends_to_existing_list(self) -> None:
        """Existing list values are extended."""
        defaults = ["default"]
        spec = ["Baz", "Baz", {"quux": defaults}]
        config = {"Baz.quux[0]": "part 1", "Baz.quux[1]": "part 2"}
        slicer.Slicer(config).merge(spec)
        assert spec[2]["quux"] is defaults
        assert defaults == ["default", "part 1", "part 2"]

    def test_existing_scalar_joins_list(self) -> None:
        """A sliced list turns a previous scalar into a list."""
        spec = ["Baz", "Baz", {"quux": "first"}]
        slicer.Slicer({"Baz.quux[]": "second"}).merge(spec)
        assert spec[2] == {"quux": ["first", "second"]}

    def test_explicit_slice(self) -> None:
        """A supplied slice is merged instead of slicing the parent."""
        spec = ["Foo", "Foo", {}]
        slicer.Slicer({"Foo.a": "ignored"}).merge(spec, slice={"b": 2})
        assert spec[2] == {"b": 2}

    def test_empty_slice_merges_nothing(self) -> None:
        """An explicitly empty slice is honored."""
        spec = ["Foo", "Foo", {}]
        slicer.Slicer({"Foo.a": "ignored"}).merge(spec, slice={})
        assert spec[2] == {}


class TestMergeIntoObject:
    """Tests for merging into objects with writable fields."""

    def test_unset_sequence_field_wraps_scalar(self, plugger) -> None:
        """A scalar assigned to an empty list field becomes a list."""
        slicer.Slicer({"Plugger.names": "one"}).merge(plugger)
        assert plugger.names == ["one"]

    def test_existing_list_appended(self, plugger) -> None:
        """Non-empty list fields are appended to."""
        plugger.names = ["zero"]
        config = {"Plugger.names": "one", "Plugger.names[]": "two"}
        result = slicer.Slicer(config).merge(plugger)
        assert result is plugger
        assert plugger.names == ["zero", "one", "two"]

    def test_existing_tuple_appended(self, plugger) -> None:
        """Tuple fields are extended into a list."""
        plugger.tags = ("a",)
        slicer.Slicer({"Plugger.tags": "b"}).merge(plugger)
        assert plugger.tags == ["a", "b"]

    def test_scalar_then_list(self, plugger) -> None:
        """A previous scalar is prepended to a new list."""
        plugger.title = "first"
        slicer.Slicer({"Plugger.title[0]": "second"}).merge(plugger)
        assert plugger.title == ["first", "second"]

    def test_overwrite_scalar(self, plugger) -> None:
        """Without join, scalars are overwritten."""
        plugger.title = "first"
        slicer.Slicer({"Plugger.title": "second"}).merge(plugger)
        assert plugger.title == "second"

    def test_join_text(self, plugger) -> None:
        """join concatenates text fields."""
        plugger.title = "first"
        slicer.Slicer({"Plugger.title": "second"}).merge(plugger, join=" ")
        assert plugger.title == "first second"

    def test_join_default_from_slicer(self, plugger) -> None:
        """The slicer's join setting applies when merge gets none."""
        plugger.title = "first"
        slicer.Slicer({"Plugger.title": "second"}, join=", ").merge(plugger)
        assert plugger.title == "first, second"

    def test_join_ignores_non_text(self, plugger) -> None:
        """join only applies to text fields."""
        plugger.count = 5
        slicer.Slicer({"Plugger.count": 7}).merge(plugger, join=" ")
        assert plugger.count == 7

    def test_falsy_previous_is_unset(self, plugger) -> None:
        """Empty strings and zero count as no previous value."""
        plugger.title = ""
        plugger.count = 0
        s = slicer.Slicer({"Plugger.title": "second", "Plugger.count": 3})
        s.merge(plugger, join=" ")
        assert plugger.title == "second"
        assert plugger.count == 3

    def test_missing_attribute(self, plugger) -> None:
        """Unknown attributes abort the merge."""
        with _pytest.raises(errors.AttributeNotFoundError) as exc_info:
            slicer.Slicer({"Plugger.bogus": 1}).merge(plugger)
        err = exc_info.value
        assert err.plugin_name == "Plugger"
        assert err.plugin_class == "Plugger"
        assert err.attribute == "bogus"
        assert "Attribute 'bogus' not found on Plugger/Plugger" in str(err)

    def test_missing_attribute_is_not_transactional(self, plugger) -> None:
        """Fields merged before the failure stay merged."""
        with _pytest.raises(errors.AttributeNotFoundError):
            slicer.Slicer({}).merge(plugger, slice={"title": "set", "bogus": 1, "count": 9})
        assert plugger.title == "set"
        assert plugger.count == 0

    def test_frozen_object(self) -> None:
        """Fields that cannot be written count as missing."""
        with _pytest.raises(AttributeError):
            slicer.Slicer({"FrozenPlugger.title": "x"}).merge(FrozenPlugger())

    def test_pydantic_model(self) -> None:
        """pydantic models merge through their fields."""
        plugin = ModelPlugger(names=["a"])
        config = {"Modeled.names": "b", "Modeled.title": "t"}
        slicer.Slicer(config).merge(plugin)
        assert plugin.names == ["a", "b"]
        assert plugin.title == "t"

    def test_object_inside_triple(self, plugger) -> None:
        """A triple may carry an object as its config."""
        spec = ["Name", "Pkg::Name", plugger]
        result = slicer.Slicer({"Name.title": "hello"}).merge(spec)
        assert result is spec
        assert plugger.title == "hello"

    def test_custom_merge_target(self) -> None:
        """Objects implementing MergeTarget are used directly."""
        target = RecordingTarget(
            {"items": targets.FieldShape.SEQUENCE, "name": targets.FieldShape.TEXT}
        )
        spec = ["T", "T", target]
        slicer.Slicer({"T.items": "a", "T.name": "n"}).merge(spec)
        assert target.values == {"items": ["a"], "name": "n"}


class ClassDefaultPlugin:
    """Plugin whose list default lives on the class."""

    plugin_name = "P"
    items: list = ["default"]


class TestMergeLeavesInputsAlone:
    """Tests that merge only changes the target it is given."""

    def test_class_default_list_not_mutated(self) -> None:
        """Appending to a class-level default rebinds the instance field."""
        a = ClassDefaultPlugin()
        b = ClassDefaultPlugin()
        slicer.Slicer({"P.items": "x"}).merge(a)
        assert a.items == ["default", "x"]
        assert b.items == ["default"]
        assert ClassDefaultPlugin.items == ["default"]

    def test_existing_list_replaced_not_extended(self) -> None:
        """A list held elsewhere is not changed by the merge."""
        held = ["a"]
        plugin = ModelPlugger(names=held)
        plugin.names = held
        slicer.Slicer({"Modeled.names": "b"}).merge(plugin)
        assert plugin.names == ["a", "b"]
        assert held == ["a"]

    def test_shared_slice_not_aliased(self) -> None:
        """Targets merged from one slice do not share its lists."""
        shared = {"names": ["x"]}
        a = ModelPlugger()
        b = ModelPlugger()
        s = slicer.Slicer({})
        s.merge(a, slice=shared)
        s.merge(b, slice=shared)
        s.merge(a, slice={"names": "y"})
        assert a.names == ["x", "y"]
        assert b.names == ["x"]
        assert shared == {"names": ["x"]}

    def test_shared_slice_into_mappings(self) -> None:
        """Config dicts merged from one slice do not share its lists."""
        shared = {"quux": ["x"]}
        first = ["Baz", "Baz", {}]
        second = ["Baz", "Baz", {}]
        s = slicer.Slicer({})
        s.merge(first, slice=shared)
        s.merge(second, slice=shared)
        s.merge(first, slice={"quux": "y"})
        assert first[2] == {"quux": ["x", "y"]}
        assert second[2] == {"quux": ["x"]}
        assert shared == {"quux": ["x"]}

    def test_parent_config_not_mutated(self) -> None:
        """Merging leaves the parent config untouched."""
        config = {"Modeled.names": ["p", "q"], "Modeled.title": "t"}
        plugin = ModelPlugger()
        slicer.Slicer(config).merge(plugin)
        slicer.Slicer(config).merge(plugin)
        assert plugin.names == ["p", "q", "p", "q"]
        assert config == {"Modeled.names": ["p", "q"], "Modeled.title": "t"}
