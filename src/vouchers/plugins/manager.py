"""Plugin discovery and the code generator registry.

Discovery: the built-in generators, then ``vouchers.plugins`` entry points
(pip-installed) via pluggy's setuptools loader. Each plugin's
``register_code_generators`` hook contributes named factories.

INVARIANT: A broken plugin is logged and skipped, never fatal.
The first plugin to claim a generator name keeps it.
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING

import pluggy

from vouchers.plugins.builtins.generators import BuiltinGeneratorsPlugin
from vouchers.plugins.hookspecs import VouchersHookSpec

if TYPE_CHECKING:
    from vouchers.config.models import CodesConfig
    from vouchers.domain.codes import CodeGenerator
    from vouchers.plugins.hookspecs import GeneratorFactory

PROJECT_NAME = "vouchers"
ENTRY_POINT_GROUP = "vouchers.plugins"
BUILTIN_PLUGIN_NAME = "builtin-generators"

logger = logging.getLogger(__name__)


class UnknownGeneratorError(LookupError):
    """No plugin registered a generator under the requested name."""

    def __init__(self, name: str, available: list[str]) -> None:
        super().__init__(f"Unknown code generator {name!r} (available: {', '.join(available)})")
        self.name = name
        self.available = available


class PluginManager:
    """Manages plugin loading and the generator registry."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(VouchersHookSpec)
        self._pm.register(BuiltinGeneratorsPlugin(), name=BUILTIN_PLUGIN_NAME)
        self._generators: dict[str, GeneratorFactory] = {}
        self._loaded = False

    def discover_and_load(self, *, entry_points: bool = True) -> list[str]:
        """Optionally load entry points, then rebuild the generator registry.

        Returns the names of all registered plugins.
        """
        if entry_points:
            count = self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
            logger.debug("Loaded %d entry-point plugins", count)
        self._generators.clear()
        for _name, plugin in self._pm.list_name_plugin():
            self._collect_generators(plugin)
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        if self._loaded:
            self._collect_generators(plugin)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        """Unregister a plugin and drop the generators it contributed."""
        self._pm.unregister(plugin)
        if self._loaded:
            self.discover_and_load(entry_points=False)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def list_plugin_names(self) -> list[str]:
        return [name for name, _plugin in self._pm.list_name_plugin()]

    # ------------------------------------------------------------------
    # Generator registry
    # ------------------------------------------------------------------

    def generator_names(self) -> list[str]:
        return sorted(self._generators)

    def build_generator(
        self,
        config: CodesConfig,
        rng: random.Random | None = None,
    ) -> CodeGenerator:
        """Instantiate the generator named by ``config.generator``.

        Raises:
            UnknownGeneratorError: if no plugin registered that name.
        """
        if not self._loaded:
            self.discover_and_load()
        factory = self._generators.get(config.generator)
        if factory is None:
            raise UnknownGeneratorError(config.generator, self.generator_names())
        return factory(config, rng)

    def _collect_generators(self, plugin: object) -> None:
        plugin_name = self._pm.get_name(plugin) or plugin.__class__.__name__
        hook = getattr(plugin, "register_code_generators", None)
        if hook is None:
            return

        try:
            factories = hook()
        except Exception:
            logger.warning(
                "Failed to collect code generators from plugin %s", plugin_name, exc_info=True
            )
            return

        if factories is None:
            return
        if not isinstance(factories, dict):
            logger.warning("Plugin %s returned non-dict generator registrations", plugin_name)
            return

        for name, factory in factories.items():
            if name in self._generators:
                logger.warning(
                    "Skipping generator %r from plugin %s: name already registered",
                    name,
                    plugin_name,
                )
                continue
            if not callable(factory):
                logger.warning(
                    "Skipping generator %r from plugin %s: factory is not callable",
                    name,
                    plugin_name,
                )
                continue
            self._generators[name] = factory
