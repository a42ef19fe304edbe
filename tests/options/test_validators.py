"""Tests for option descriptors: defaults, validation rules, parsing."""

import pytest

from nodeopts.config import BootConfig, ConfigMissingError, ConfigWrongTypeError
from nodeopts.options.errors import OptionValidationError
from nodeopts.options.validators import (
    BooleanValidator,
    EnumeratedStringValidator,
    FloatValidator,
    IntegerValidator,
    PositiveIntegerValidator,
    PowerOfTwoIntegerValidator,
    RangeFloatValidator,
    RangeIntegerValidator,
    StringValidator,
)
from nodeopts.options.value import OptionKind, OptionScope, OptionValue


def _int(name, payload):
    return OptionValue(name, OptionKind.INTEGER, payload)


# ============================================================================
# Construction
# ============================================================================


class TestConstruction:

    def test_name_is_normalized(self):
        v = IntegerValidator("Planner.Slice_Target", 10)
        assert v.name == "planner.slice_target"

    def test_default_is_system_option_value(self):
        v = FloatValidator("planner.affinity_factor", 1.2)
        assert v.default == OptionValue("planner.affinity_factor", OptionKind.FLOAT, 1.2, OptionScope.SYSTEM)
        assert v.kind is OptionKind.FLOAT

    def test_int_default_widens_for_float(self):
        v = FloatValidator("x", 2)
        assert v.default_value == 2.0

    def test_default_of_wrong_type_raises(self):
        with pytest.raises(TypeError):
            BooleanValidator("x", "yes")

    def test_default_violating_rule_raises(self):
        with pytest.raises(OptionValidationError, match="above maximum"):
            RangeIntegerValidator("x", 500, min_value=1, max_value=100)

    def test_internal_and_description(self):
        v = StringValidator("mock.prop", "b", internal=True, description="Mock")
        assert v.internal is True
        assert v.description == "Mock"

    def test_external_by_default(self):
        assert BooleanValidator("x", True).internal is False

    def test_is_immutable(self):
        v = BooleanValidator("x", True)
        with pytest.raises(AttributeError):
            v.default_value = False

    def test_with_default_returns_copy(self):
        v = RangeIntegerValidator("x", 10, min_value=1, max_value=100, internal=True)
        replaced = v.with_default(30)
        assert replaced.default_value == 30
        assert replaced.internal is True
        assert replaced.max_value == 100
        assert v.default_value == 10

    def test_with_default_validates(self):
        v = RangeIntegerValidator("x", 10, min_value=1, max_value=100)
        with pytest.raises(OptionValidationError):
            v.with_default(0)


# ============================================================================
# Validation rules
# ============================================================================


class TestValidate:

    def test_kind_mismatch_rejected(self):
        v = IntegerValidator("x", 1)
        with pytest.raises(OptionValidationError, match="expected integer value, got string") as exc:
            v.validate(OptionValue("x", OptionKind.STRING, "1"))
        assert exc.value.name == "x"

    def test_integer_bounds(self):
        v = IntegerValidator("x", 1)
        v.validate(_int("x", 2**63 - 1))
        with pytest.raises(OptionValidationError, match="64-bit"):
            v.validate(_int("x", 2**63))

    def test_positive(self):
        v = PositiveIntegerValidator("x", 5, max_value=10)
        v.validate(_int("x", 1))
        v.validate(_int("x", 10))
        with pytest.raises(OptionValidationError, match="must be positive"):
            v.validate(_int("x", 0))
        with pytest.raises(OptionValidationError, match="above maximum 10"):
            v.validate(_int("x", 11))

    def test_power_of_two(self):
        v = PowerOfTwoIntegerValidator("x", 64, max_value=2048)
        v.validate(_int("x", 1))
        v.validate(_int("x", 2048))
        with pytest.raises(OptionValidationError, match="not a power of two"):
            v.validate(_int("x", 96))
        with pytest.raises(OptionValidationError, match="not a power of two"):
            v.validate(_int("x", 0))
        with pytest.raises(OptionValidationError, match="above maximum"):
            v.validate(_int("x", 4096))

    def test_range_integer(self):
        v = RangeIntegerValidator("x", 10, min_value=1, max_value=1000)
        with pytest.raises(OptionValidationError, match="below minimum 1"):
            v.validate(_int("x", 0))
        with pytest.raises(OptionValidationError, match="above maximum 1000"):
            v.validate(_int("x", 1001))

    def test_range_float(self):
        v = RangeFloatValidator("x", 0.5, min_value=0.0, max_value=1.0)
        v.validate(OptionValue("x", OptionKind.FLOAT, 1.0))
        with pytest.raises(OptionValidationError, match="outside range"):
            v.validate(OptionValue("x", OptionKind.FLOAT, 1.01))
        with pytest.raises(OptionValidationError, match="outside range"):
            v.validate(OptionValue("x", OptionKind.FLOAT, float("nan")))

    def test_enumerated_string_case_insensitive(self):
        v = EnumeratedStringValidator("x", "jdk", choices=("JDK", "JANINO", "DEFAULT"))
        assert v.choices == ("jdk", "janino", "default")
        v.validate(OptionValue("x", OptionKind.STRING, "Janino"))
        with pytest.raises(OptionValidationError, match="not in choices"):
            v.validate(OptionValue("x", OptionKind.STRING, "javac"))


# ============================================================================
# Parsing
# ============================================================================


class TestParse:

    @pytest.mark.parametrize("text,expected", [("true", True), ("ON", True), ("0", False), (" no ", False)])
    def test_boolean(self, text, expected):
        assert BooleanValidator("x", True).parse(text).value is expected

    def test_boolean_rejects_garbage(self):
        with pytest.raises(OptionValidationError, match="expected a boolean"):
            BooleanValidator("x", True).parse("maybe")

    def test_integer(self):
        value = PositiveIntegerValidator("planner.slice_target", 100000).parse("20")
        assert value == OptionValue("planner.slice_target", OptionKind.INTEGER, 20)

    def test_integer_rejects_fraction(self):
        with pytest.raises(OptionValidationError, match="expected an integer"):
            IntegerValidator("x", 1).parse("1.5")

    def test_parse_applies_rule(self):
        with pytest.raises(OptionValidationError, match="must be positive"):
            PositiveIntegerValidator("x", 1).parse("-3")

    def test_float(self):
        assert FloatValidator("x", 1.2).parse("1.5").value == 1.5

    def test_float_rejects_garbage(self):
        with pytest.raises(OptionValidationError, match="expected a number"):
            FloatValidator("x", 1.2).parse("fast")

    def test_string_with_scope(self):
        value = StringValidator("x", "a").parse("hello", OptionScope.SESSION)
        assert value.value == "hello"
        assert value.scope is OptionScope.SESSION


# ============================================================================
# Boot config defaults
# ============================================================================


class TestLoadConfigDefault:

    def test_reads_namespaced_key(self):
        boot = BootConfig({"exec": {"options": {"planner": {"slice_target": 30}}}})
        v = PositiveIntegerValidator("planner.slice_target", 100000)
        assert v.load_config_default(boot, "exec.options.") == 30

    def test_uses_kind_specific_getter(self):
        boot = BootConfig({"p": {"x": 2}})
        assert FloatValidator("x", 1.0).load_config_default(boot, "p.") == 2.0

    def test_missing_key(self):
        with pytest.raises(ConfigMissingError):
            BooleanValidator("x", True).load_config_default(BootConfig({}), "p.")

    def test_wrong_type(self):
        boot = BootConfig({"p": {"x": "thirty"}})
        with pytest.raises(ConfigWrongTypeError):
            IntegerValidator("x", 1).load_config_default(boot, "p.")
