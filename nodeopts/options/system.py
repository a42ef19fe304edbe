"""Node-wide option manager.

Options set at SYSTEM scope affect every session on the node and persist
across restarts. Effective values are resolved in this order:

    persisted override (durable store)
    boot configuration, folded into each descriptor's default at startup
    compiled-in default from the option catalog

The store only ever holds deviations from default: writing the default value
for an option that has no stored entry is a no-op.
"""

import asyncio
import logging
from collections import defaultdict
from pathlib import Path

from nodeopts.config import BootConfig
from nodeopts.options.base import BaseOptionManager
from nodeopts.options.catalog import create_default_registry
from nodeopts.options.constants import OPTIONS_NAMESPACE
from nodeopts.options.errors import OptionScopeError, UnknownOptionError
from nodeopts.options.registry import OptionRegistry
from nodeopts.options.store import OptionStore
from nodeopts.options.validators import OptionValidator
from nodeopts.options.value import OptionScope, OptionValue, normalize_name

logger = logging.getLogger(__name__)


class SystemOptionManager(BaseOptionManager):
    """Owns the durable option store and the option registry for one node."""

    scope = OptionScope.SYSTEM

    def __init__(self, store: OptionStore, registry: OptionRegistry):
        """Initialize option manager.

        Args:
            store: Durable store for overridden options (opened by init())
            registry: Immutable descriptor registry, shared by reference
        """
        self.store = store
        self.registry = registry
        self._initialized = False
        # Serializes set_option's check-then-write per canonical name
        self._write_locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    @classmethod
    def create(
        cls,
        db_path: str | Path,
        boot_config: BootConfig | None = None,
        registry: OptionRegistry | None = None,
        prefix: str = OPTIONS_NAMESPACE,
    ) -> "SystemOptionManager":
        """Build a manager over the default catalog, folding boot config if given."""
        if registry is None:
            registry = create_default_registry()
        if boot_config is not None:
            registry = registry.fold_boot_config(boot_config, prefix)
        return cls(OptionStore(str(db_path)), registry)

    async def init(self) -> "SystemOptionManager":
        """Open the store and migrate stored entries to the current registry.

        Entries with no descriptor are deprecated options and are deleted.
        Entries stored under a non-canonical key are moved to the canonical
        key. The store is closed if anything here fails.
        """
        try:
            await self.store.initialize()
            for name, value in await self.store.get_all():
                validator = self.registry.get(name)
                if validator is None:
                    await self.store.delete(name)
                    logger.warning("Deleting deprecated option `%s`", name)
                elif name != validator.name:
                    logger.warning("Changing option name to lower case `%s`", name)
                    await self.store.delete(name)
                    await self.store.put(validator.name, value)
        except BaseException:
            await self.store.close()
            raise

        self._initialized = True
        return self

    async def close(self):
        """Release the store handle."""
        self._initialized = False
        await self.store.close()

    async def __aenter__(self) -> "SystemOptionManager":
        return await self.init()

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    def _check_initialized(self):
        if not self._initialized:
            raise RuntimeError("Option manager not initialized. Call init() first.")

    def _check_scope(self, scope: OptionScope):
        if scope is not self.scope:
            raise OptionScopeError(f"OptionScope must be {self.scope.value}, got {scope.value}.")

    def get_option_validator(self, name: str) -> OptionValidator:
        validator = self.registry.get(name)
        if validator is None:
            raise UnknownOptionError(name)
        return validator

    async def get_option(self, name: str) -> OptionValue:
        """Return the persisted override for name, or the option's default.

        Raises:
            UnknownOptionError: name matches no option.
        """
        self._check_initialized()
        value = await self.store.get(normalize_name(name))
        if value is not None:
            return value
        return self.get_option_validator(name).default

    async def set_option(self, value: OptionValue) -> None:
        """Validate and persist a SYSTEM option value.

        Raises:
            OptionScopeError: value is not SYSTEM scoped.
            UnknownOptionError: value names no option.
            OptionValidationError: the option's rule rejects the value.
        """
        self._check_initialized()
        self._check_scope(value.scope)
        name = value.name
        validator = self.get_option_validator(name)
        validator.validate(value)

        async with self._write_locks[name]:
            if await self.store.get(name) is None and value == validator.default:
                logger.debug("Option %s set to its default; nothing to persist", name)
                return
            await self.store.put(name, value)
        logger.info("Set option %s = %r", name, value.value)

    async def delete_option(self, name: str, scope: OptionScope) -> None:
        """Revert an option to its default. Deleting an unset option is a no-op."""
        self._check_initialized()
        self._check_scope(scope)
        validator = self.get_option_validator(name)
        async with self._write_locks[validator.name]:
            deleted = await self.store.delete(validator.name)
        if deleted:
            logger.info("Reset option %s to default", validator.name)

    async def delete_all_options(self, scope: OptionScope) -> None:
        """Revert every option to its default."""
        self._check_initialized()
        self._check_scope(scope)
        names = [name for name, _ in await self.store.get_all()]
        for name in names:
            await self.store.delete(name)
        logger.info("Reset %d option(s) to default", len(names))

    async def iterate(self) -> list[OptionValue]:
        """Every effective option: registry defaults overlaid by stored values."""
        self._check_initialized()
        effective = {name: validator.default for name, validator in self.registry.items()}
        for name, value in await self.store.get_all():
            effective[normalize_name(name)] = value
        return [effective[name] for name in sorted(effective)]
