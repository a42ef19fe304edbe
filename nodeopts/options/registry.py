"""Option registry: immutable, case-insensitive name -> descriptor mapping."""

import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from nodeopts.config import BootConfig, ConfigMissingError
from nodeopts.options.constants import OPTIONS_NAMESPACE
from nodeopts.options.validators import OptionValidator
from nodeopts.options.value import normalize_name

logger = logging.getLogger(__name__)


class OptionRegistry(Mapping):
    """Read-only mapping of canonical option name to its descriptor.

    Lookups normalize the requested name, so ``registry["Planner.Slice_Target"]``
    and ``registry["planner.slice_target"]`` resolve to the same descriptor.
    A registry is never mutated after construction; folding boot configuration
    returns a new registry.
    """

    def __init__(self, validators: Mapping[str, OptionValidator]):
        self._validators = MappingProxyType(dict(validators))

    @classmethod
    def build(cls, validators: Iterable[OptionValidator]) -> "OptionRegistry":
        """Aggregate descriptors into a registry.

        Raises:
            ValueError: Two descriptors share a canonical name.
        """
        by_name: dict[str, OptionValidator] = {}
        for validator in validators:
            if validator.name in by_name:
                raise ValueError(f"Duplicate option name in catalog: {validator.name}")
            by_name[validator.name] = validator
        return cls(by_name)

    def __getitem__(self, name: str) -> OptionValidator:
        return self._validators[normalize_name(name)]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_name(name) in self._validators

    def __iter__(self) -> Iterator[str]:
        return iter(self._validators)

    def __len__(self) -> int:
        return len(self._validators)

    def fold_boot_config(
        self, boot_config: BootConfig, prefix: str = OPTIONS_NAMESPACE
    ) -> "OptionRegistry":
        """Return a registry whose defaults are overridden by boot configuration.

        For each option, ``prefix + name`` is read from boot_config. A missing
        key keeps the compiled-in default. Any other failure (wrong type, a
        value the option's rule rejects) propagates and aborts startup.
        """
        folded: dict[str, OptionValidator] = {}
        overridden = 0
        for name, validator in self._validators.items():
            try:
                value = validator.load_config_default(boot_config, prefix)
            except ConfigMissingError as e:
                logger.debug("No boot config for option %s: %s", name, e)
                folded[name] = validator
                continue
            folded[name] = validator.with_default(value)
            overridden += 1

        if overridden:
            logger.info("Boot config overrides %d option default(s)", overridden)
        return OptionRegistry(folded)
