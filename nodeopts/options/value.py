"""Option values: a named, scoped, single-typed datum.

An OptionValue carries exactly one payload whose Python type matches its
kind tag. Names are normalized to lowercase on construction, which makes
the value constructor the one place where option identity is decided.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class OptionKind(str, Enum):
    BOOLEAN = "boolean"
    FLOAT = "float"
    INTEGER = "integer"
    STRING = "string"


class OptionScope(str, Enum):
    SYSTEM = "SYSTEM"
    SESSION = "SESSION"


def normalize_name(name: str) -> str:
    """Return the canonical (lowercase) form of an option name."""
    return name.lower()


def coerce_payload(kind: OptionKind, value: Any) -> Any:
    """Return the payload coerced for its kind, or raise TypeError."""
    if kind is OptionKind.BOOLEAN:
        if isinstance(value, bool):
            return value
    elif kind is OptionKind.INTEGER:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    elif kind is OptionKind.FLOAT:
        if isinstance(value, float):
            return value
        # Integers widen to float; booleans do not
        if isinstance(value, int) and not isinstance(value, bool):
            return float(value)
    elif kind is OptionKind.STRING:
        if isinstance(value, str):
            return value
    raise TypeError(f"{kind.value} option cannot hold {type(value).__name__} value {value!r}")


@dataclass(frozen=True)
class OptionValue:
    """A resolved option value."""

    name: str
    kind: OptionKind
    value: Any
    scope: OptionScope = OptionScope.SYSTEM

    def __post_init__(self):
        object.__setattr__(self, "name", normalize_name(self.name))
        object.__setattr__(self, "kind", OptionKind(self.kind))
        object.__setattr__(self, "scope", OptionScope(self.scope))
        object.__setattr__(self, "value", coerce_payload(self.kind, self.value))

    def _expect(self, kind: OptionKind) -> Any:
        if self.kind is not kind:
            raise TypeError(
                f"Option '{self.name}' is of kind {self.kind.value}, not {kind.value}"
            )
        return self.value

    def as_bool(self) -> bool:
        return self._expect(OptionKind.BOOLEAN)

    def as_float(self) -> float:
        return self._expect(OptionKind.FLOAT)

    def as_int(self) -> int:
        return self._expect(OptionKind.INTEGER)

    def as_str(self) -> str:
        return self._expect(OptionKind.STRING)

    def with_scope(self, scope: OptionScope) -> "OptionValue":
        return OptionValue(self.name, self.kind, self.value, scope)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind.value,
            "value": self.value,
            "scope": self.scope.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OptionValue":
        return cls(
            name=data["name"],
            kind=OptionKind(data["kind"]),
            value=data["value"],
            scope=OptionScope(data.get("scope", OptionScope.SYSTEM.value)),
        )
