"""Tests for OptionValue: name normalization and the kind/payload contract."""

import pytest

from nodeopts.options.value import OptionKind, OptionScope, OptionValue, normalize_name


class TestNormalizeName:

    def test_lowercases(self):
        assert normalize_name("Planner.Slice_Target") == "planner.slice_target"

    def test_canonical_name_unchanged(self):
        assert normalize_name("planner.slice_target") == "planner.slice_target"


class TestConstruction:

    def test_name_is_normalized(self):
        value = OptionValue("PLANNER.SLICE_TARGET", OptionKind.INTEGER, 10)
        assert value.name == "planner.slice_target"

    def test_scope_defaults_to_system(self):
        value = OptionValue("a.b", OptionKind.BOOLEAN, True)
        assert value.scope is OptionScope.SYSTEM

    def test_kind_and_scope_accept_strings(self):
        value = OptionValue("a.b", "string", "x", "SESSION")
        assert value.kind is OptionKind.STRING
        assert value.scope is OptionScope.SESSION

    def test_float_widens_int(self):
        value = OptionValue("a.b", OptionKind.FLOAT, 2)
        assert value.value == 2.0
        assert isinstance(value.value, float)

    @pytest.mark.parametrize(
        "kind,payload",
        [
            (OptionKind.BOOLEAN, 1),
            (OptionKind.BOOLEAN, "true"),
            (OptionKind.INTEGER, True),
            (OptionKind.INTEGER, 1.5),
            (OptionKind.FLOAT, False),
            (OptionKind.FLOAT, "1.0"),
            (OptionKind.STRING, 3),
        ],
    )
    def test_payload_must_match_kind(self, kind, payload):
        with pytest.raises(TypeError):
            OptionValue("a.b", kind, payload)

    def test_values_compare_by_content(self):
        assert OptionValue("A.b", OptionKind.INTEGER, 1) == OptionValue("a.B", OptionKind.INTEGER, 1)
        assert OptionValue("a.b", OptionKind.INTEGER, 1) != OptionValue("a.b", OptionKind.INTEGER, 2)
        assert OptionValue("a.b", OptionKind.INTEGER, 1) != OptionValue(
            "a.b", OptionKind.INTEGER, 1, OptionScope.SESSION
        )

    def test_is_immutable(self):
        value = OptionValue("a.b", OptionKind.INTEGER, 1)
        with pytest.raises(AttributeError):
            value.value = 2


class TestAccessors:

    def test_matching_accessors(self):
        assert OptionValue("a", OptionKind.BOOLEAN, False).as_bool() is False
        assert OptionValue("a", OptionKind.FLOAT, 1.5).as_float() == 1.5
        assert OptionValue("a", OptionKind.INTEGER, 7).as_int() == 7
        assert OptionValue("a", OptionKind.STRING, "x").as_str() == "x"

    def test_mismatched_accessor_raises(self):
        value = OptionValue("a", OptionKind.INTEGER, 7)
        with pytest.raises(TypeError, match="integer, not boolean"):
            value.as_bool()
        with pytest.raises(TypeError):
            value.as_float()
        with pytest.raises(TypeError):
            value.as_str()

    def test_with_scope(self):
        value = OptionValue("a", OptionKind.INTEGER, 7).with_scope(OptionScope.SESSION)
        assert value.scope is OptionScope.SESSION
        assert value.value == 7


class TestDictConversion:

    def test_to_dict(self):
        value = OptionValue("Planner.Affinity_Factor", OptionKind.FLOAT, 1.5)
        assert value.to_dict() == {
            "name": "planner.affinity_factor",
            "kind": "float",
            "value": 1.5,
            "scope": "SYSTEM",
        }

    def test_from_dict_defaults_scope(self):
        value = OptionValue.from_dict({"name": "x", "kind": "boolean", "value": True})
        assert value == OptionValue("x", OptionKind.BOOLEAN, True, OptionScope.SYSTEM)

    def test_from_dict_rejects_bad_payload(self):
        with pytest.raises(TypeError):
            OptionValue.from_dict({"name": "x", "kind": "integer", "value": "ten"})
