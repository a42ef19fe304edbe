"""Shared base for option managers: typed accessors and option listings."""

from abc import ABC, abstractmethod
from typing import Any

from nodeopts.options.validators import (
    BooleanValidator,
    FloatValidator,
    IntegerValidator,
    OptionValidator,
    StringValidator,
)
from nodeopts.options.value import OptionValue


class BaseOptionManager(ABC):
    """Typed option access on top of get_option() and iterate().

    Subclasses decide where values come from (durable store, session state);
    this layer only projects resolved values and partitions listings.
    """

    @abstractmethod
    async def get_option(self, name: str) -> OptionValue:
        """Return the effective value of the named option."""

    @abstractmethod
    async def iterate(self) -> list[OptionValue]:
        """Return every currently effective option value."""

    @abstractmethod
    def get_option_validator(self, name: str) -> OptionValidator:
        """Return the descriptor for name; unknown names raise UnknownOptionError."""

    async def _get_option_safe(self, validator: OptionValidator) -> OptionValue:
        value = await self.get_option(validator.name)
        return validator.default if value is None else value

    async def get_bool(self, validator: BooleanValidator) -> bool:
        return (await self._get_option_safe(validator)).as_bool()

    async def get_float(self, validator: FloatValidator) -> float:
        return (await self._get_option_safe(validator)).as_float()

    async def get_int(self, validator: IntegerValidator) -> int:
        return (await self._get_option_safe(validator)).as_int()

    async def get_str(self, validator: StringValidator) -> str:
        return (await self._get_option_safe(validator)).as_str()

    async def get_option_value(self, validator: OptionValidator) -> Any:
        """Native payload of the option, whatever its kind."""
        return (await self._get_option_safe(validator)).value

    async def get_option_list(self) -> list[OptionValue]:
        return await self.iterate()

    async def get_internal_option_list(self) -> list[OptionValue]:
        return await self._get_all_option_list(internal=True)

    async def get_external_option_list(self) -> list[OptionValue]:
        return await self._get_all_option_list(internal=False)

    async def _get_all_option_list(self, internal: bool) -> list[OptionValue]:
        return [
            value
            for value in await self.iterate()
            if self.get_option_validator(value.name).internal == internal
        ]
