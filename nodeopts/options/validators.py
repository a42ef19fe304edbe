"""Option descriptors: name, kind, compiled-in default and validation rule.

Each descriptor doubles as the typed accessor for its option; passing a
BooleanValidator to BaseOptionManager.get_bool() resolves that option.
Descriptors are frozen. Boot-config folding produces a copy with a new
default via with_default() instead of mutating the catalog entry.
"""

import dataclasses
from dataclasses import dataclass, field
from typing import Any, ClassVar

from nodeopts.config import BootConfig
from nodeopts.options.constants import INTEGER_MAX, INTEGER_MIN
from nodeopts.options.errors import OptionValidationError
from nodeopts.options.value import (
    OptionKind,
    OptionScope,
    OptionValue,
    coerce_payload,
    normalize_name,
)

_TRUE_STRINGS = ("true", "1", "yes", "on")
_FALSE_STRINGS = ("false", "0", "no", "off")


@dataclass(frozen=True)
class OptionValidator:
    """Base descriptor. Subclasses fix KIND and add constraints."""

    KIND: ClassVar[OptionKind]

    name: str
    default_value: Any
    internal: bool = field(default=False, kw_only=True)
    description: str = field(default="", kw_only=True)

    def __post_init__(self):
        object.__setattr__(self, "name", normalize_name(self.name))
        object.__setattr__(self, "default_value", coerce_payload(self.KIND, self.default_value))
        # A catalog entry whose default breaks its own rule is a build error
        self.validate(self.default)

    @property
    def kind(self) -> OptionKind:
        return self.KIND

    @property
    def default(self) -> OptionValue:
        return OptionValue(self.name, self.KIND, self.default_value, OptionScope.SYSTEM)

    def validate(self, value: OptionValue) -> None:
        """Raise OptionValidationError if value is not acceptable for this option."""
        if value.kind is not self.KIND:
            self._reject(f"expected {self.KIND.value} value, got {value.kind.value}")
        self._check(value.value)

    def _check(self, payload: Any) -> None:
        pass

    def _reject(self, reason: str) -> None:
        raise OptionValidationError(self.name, reason)

    def parse(self, text: str, scope: OptionScope = OptionScope.SYSTEM) -> OptionValue:
        """Convert a textual value into a validated OptionValue for this option."""
        value = OptionValue(self.name, self.KIND, self._parse_payload(text.strip()), scope)
        self.validate(value)
        return value

    def _parse_payload(self, text: str) -> Any:
        raise NotImplementedError

    def load_config_default(self, boot_config: BootConfig, prefix: str) -> Any:
        """Read this option's default from boot configuration at prefix + name.

        Raises ConfigMissingError when the key is absent; any other
        BootConfigError means the configured value is unusable.
        """
        getters = {
            OptionKind.BOOLEAN: boot_config.get_boolean,
            OptionKind.INTEGER: boot_config.get_int,
            OptionKind.FLOAT: boot_config.get_float,
            OptionKind.STRING: boot_config.get_string,
        }
        return getters[self.KIND](prefix + self.name)

    def with_default(self, default_value: Any) -> "OptionValidator":
        return dataclasses.replace(self, default_value=default_value)


# ============================================================================
# Base kinds
# ============================================================================


@dataclass(frozen=True)
class BooleanValidator(OptionValidator):
    KIND: ClassVar[OptionKind] = OptionKind.BOOLEAN

    def _parse_payload(self, text: str) -> bool:
        lowered = text.lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
        self._reject(f"expected a boolean, got: {text}")


@dataclass(frozen=True)
class IntegerValidator(OptionValidator):
    KIND: ClassVar[OptionKind] = OptionKind.INTEGER

    def _check(self, payload: int) -> None:
        if not INTEGER_MIN <= payload <= INTEGER_MAX:
            self._reject(f"value {payload} does not fit a 64-bit integer")

    def _parse_payload(self, text: str) -> int:
        try:
            return int(text)
        except ValueError:
            self._reject(f"expected an integer, got: {text}")


@dataclass(frozen=True)
class FloatValidator(OptionValidator):
    KIND: ClassVar[OptionKind] = OptionKind.FLOAT

    def _parse_payload(self, text: str) -> float:
        try:
            return float(text)
        except ValueError:
            self._reject(f"expected a number, got: {text}")


@dataclass(frozen=True)
class StringValidator(OptionValidator):
    KIND: ClassVar[OptionKind] = OptionKind.STRING

    def _parse_payload(self, text: str) -> str:
        return text


# ============================================================================
# Constrained kinds
# ============================================================================


@dataclass(frozen=True)
class PositiveIntegerValidator(IntegerValidator):
    """Integer in [1, max_value]."""

    max_value: int = field(default=INTEGER_MAX, kw_only=True)

    def _check(self, payload: int) -> None:
        super()._check(payload)
        if payload > self.max_value:
            self._reject(f"value {payload} above maximum {self.max_value}")
        if payload <= 0:
            self._reject(f"value {payload} must be positive")


@dataclass(frozen=True)
class PowerOfTwoIntegerValidator(IntegerValidator):
    """Positive power of two no greater than max_value."""

    max_value: int = field(default=INTEGER_MAX, kw_only=True)

    def _check(self, payload: int) -> None:
        super()._check(payload)
        if payload > self.max_value:
            self._reject(f"value {payload} above maximum {self.max_value}")
        if payload <= 0 or payload & (payload - 1):
            self._reject(f"value {payload} is not a power of two")


@dataclass(frozen=True)
class RangeIntegerValidator(IntegerValidator):
    min_value: int = field(kw_only=True)
    max_value: int = field(kw_only=True)

    def _check(self, payload: int) -> None:
        super()._check(payload)
        if payload < self.min_value:
            self._reject(f"value {payload} below minimum {self.min_value}")
        if payload > self.max_value:
            self._reject(f"value {payload} above maximum {self.max_value}")


@dataclass(frozen=True)
class RangeFloatValidator(FloatValidator):
    min_value: float = field(kw_only=True)
    max_value: float = field(kw_only=True)

    def _check(self, payload: float) -> None:
        if not self.min_value <= payload <= self.max_value:
            self._reject(
                f"value {payload} outside range [{self.min_value}, {self.max_value}]"
            )


@dataclass(frozen=True)
class EnumeratedStringValidator(StringValidator):
    """String restricted to a fixed set of choices, compared case-insensitively."""

    choices: tuple[str, ...] = field(kw_only=True)

    def __post_init__(self):
        object.__setattr__(self, "choices", tuple(c.lower() for c in self.choices))
        super().__post_init__()

    def _check(self, payload: str) -> None:
        if payload.lower() not in self.choices:
            self._reject(f"value '{payload}' not in choices: {list(self.choices)}")


# Catalog "validator" field -> descriptor class
VALIDATOR_TYPES: dict[str, type[OptionValidator]] = {
    "boolean": BooleanValidator,
    "integer": IntegerValidator,
    "float": FloatValidator,
    "string": StringValidator,
    "positive_integer": PositiveIntegerValidator,
    "power_of_two_integer": PowerOfTwoIntegerValidator,
    "range_integer": RangeIntegerValidator,
    "range_float": RangeFloatValidator,
    "enumerated_string": EnumeratedStringValidator,
}
