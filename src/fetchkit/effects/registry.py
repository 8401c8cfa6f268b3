"""Named effects -- discovery and lookup.

:class:`EffectRegistry` maps names to zero-argument effect factories so that
profiles and the CLI can refer to effects by name. Factories are registered
explicitly with :meth:`EffectRegistry.register` or discovered from the
``fetchkit.effects`` entry-point group. Third-party packages register
effects by declaring an entry point in their ``pyproject.toml``::

    [project.entry-points."fetchkit.effects"]
    trace = "my_package.effects:trace_effect"
"""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Callable, Iterable

from fetchkit.effects.base import compose_effects
from fetchkit.effects.log import log_calls
from fetchkit.exceptions import EffectError
from fetchkit.types import Effect

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "fetchkit.effects"
"""The entry-point group name used for effect discovery."""

EffectFactory = Callable[[], Effect]


class EffectRegistry:
    """Registry of named, argument-free effect factories.

    The built-in ``log`` effect is always registered.

    Example::

        registry = EffectRegistry()
        registry.discover()
        effect = registry.load(["log", "trace"])
    """

    def __init__(self) -> None:
        self._factories: dict[str, EffectFactory] = {"log": log_calls}

    def register(self, name: str, factory: EffectFactory) -> None:
        """Register *factory* under *name*.

        Raises:
            EffectError: If *name* is already registered.
        """
        if name in self._factories:
            raise EffectError(f"Effect '{name}' is already registered")
        self._factories[name] = factory
        logger.debug("Registered effect '%s'", name)

    def discover(self) -> list[str]:
        """Register every effect factory in the ``fetchkit.effects`` group.

        Returns:
            Names registered by this call. Entry points that fail to load, or
            whose name is already taken, are logged and skipped.
        """
        loaded: list[str] = []
        for ep in importlib.metadata.entry_points(group=ENTRY_POINT_GROUP):
            if ep.name in self._factories:
                logger.debug("Effect '%s' already registered, skipping", ep.name)
                continue
            try:
                self.register(ep.name, ep.load())
                loaded.append(ep.name)
            except Exception as exc:
                logger.warning("Failed to load effect '%s': %s", ep.name, exc)
        return loaded

    def names(self) -> list[str]:
        """Return all registered effect names, sorted."""
        return sorted(self._factories)

    def get(self, name: str) -> Effect:
        """Instantiate the effect registered under *name*.

        Raises:
            EffectError: If no effect with that name is registered, or its
                factory fails.
        """
        try:
            factory = self._factories[name]
        except KeyError:
            raise EffectError(
                f"Unknown effect '{name}' (available: {', '.join(self.names())})"
            ) from None
        try:
            return factory()
        except Exception as exc:
            raise EffectError(f"Effect '{name}' failed to initialise: {exc}") from exc

    def load(self, names: Iterable[str]) -> Effect:
        """Instantiate and compose the named effects, in order."""
        return compose_effects(*(self.get(name) for name in names))
