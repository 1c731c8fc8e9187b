"""
Module Registry - The configured, enabled module instances.

Modules are kept in configured order, which doubles as the ranking
tie-break. The registry is built once at startup and only read afterwards,
so worker threads may read it without locking.
"""

from typing import Iterable, Iterator, Optional

from loguru import logger

from keylaunch.search.module import DEFAULT_MIN_LENGTH, SearchModule
from keylaunch.utils.helpers import module_config


class ModuleRegistry:
    """Ordered mapping of module name to live module instance."""

    def __init__(self, history=None):
        self._modules: dict[str, SearchModule] = {}
        self.history = history  # usage store modules may consult for ranking

    def register(self, module: SearchModule) -> None:
        """Append a module; names must be unique."""
        if module.name in self._modules:
            raise ValueError(f"Module '{module.name}' is already registered")
        self._modules[module.name] = module

    @classmethod
    def from_settings(cls, settings: dict,
                      available: Iterable[type[SearchModule]],
                      history=None) -> "ModuleRegistry":
        """
        Set up every configured module in settings order.

        Args:
            settings: Merged launcher settings
            available: Module classes that can be configured
            history: Usage store handed to modules through attach()

        Returns:
            Registry holding only the modules whose setup() succeeded.
        """
        classes = {module_cls.name: module_cls for module_cls in available}
        min_length = settings.get("search", {}).get("min_prefixed_length", DEFAULT_MIN_LENGTH)
        registry = cls(history=history)

        for name in settings.get("modules", {}):
            module_cls = classes.get(name)
            if module_cls is None:
                logger.warning(f"Unknown module '{name}' in settings, skipping")
                continue

            block = module_config(settings, name)
            if block is not None and module_cls.default_min_length is None:
                block = {"min_length": min_length, **block}

            module = module_cls.setup(block)
            if module is None:
                logger.debug(f"Module '{name}' is disabled")
                continue
            registry.register(module)

        for module in registry:
            module.attach(registry)

        logger.debug(f"Registry set up with modules: {registry.names()}")
        return registry

    def get(self, name: str) -> Optional[SearchModule]:
        return self._modules.get(name)

    def names(self) -> list[str]:
        return list(self._modules)

    def eligible(self, term: str, pinned: Optional[str] = None) -> list[SearchModule]:
        """
        Modules that should receive the term, in configured order.

        A pinned module runs alone and does not need its prefix typed.
        Otherwise switcher-exclusive modules are left out and the rest are
        filtered by their prefix rules.
        """
        if pinned is not None:
            module = self._modules.get(pinned)
            if module is None:
                logger.warning(f"Pinned module '{pinned}' is not registered")
                return []
            return [module] if module.accepts(module.with_prefix(term)) else []

        return [
            module for module in self._modules.values()
            if not module.switcher_exclusive and module.accepts(term)
        ]

    def __iter__(self) -> Iterator[SearchModule]:
        return iter(self._modules.values())

    def __len__(self) -> int:
        return len(self._modules)

    def __contains__(self, name: str) -> bool:
        return name in self._modules
