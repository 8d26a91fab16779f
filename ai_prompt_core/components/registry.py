"""Tag-to-component registry with on-demand loading of namespaced sources.

Last registration for a tag wins. This lets a project override a built-in
or remotely sourced component by registering its own class under the same
tag. Components loaded from a source never replace a tag that is already
registered, so a local override stays in place after its namespace loads.
"""

import asyncio
from functools import cache

from ai_prompt_core.exceptions import ModuleCacheError, UnknownComponentError
from ai_prompt_core.logging import get_logger
from ai_prompt_core.module_cache import ModuleCache
from ai_prompt_core.settings import settings

from .base import Component
from .builtin import BUILTIN_COMPONENTS
from .loader import ComponentLoadError, load_components

logger = get_logger(__name__)

REGISTRY_SOURCE = "registry"


class ComponentRegistry:
    """Maps tags to component classes.

    A tag that is not registered and has a namespace (``acme`` in
    ``acme.Greeting``) is looked up by resolving the namespace through the
    module cache: either the source registered with ``register_source`` or,
    without one, the installed package of the same name.
    """

    def __init__(self, *, module_cache: ModuleCache | None = None) -> None:
        self._components: dict[str, type[Component]] = {}
        self._sources: dict[str, str] = {}
        self._loaded: set[str] = set()
        self._locks: dict[str, asyncio.Lock] = {}
        self._module_cache = module_cache

    @property
    def module_cache(self) -> ModuleCache | None:
        return self._module_cache

    def register(self, tag: str, component: type[Component]) -> None:
        """Register ``component`` under ``tag``, replacing any earlier registration."""
        if not (isinstance(component, type) and issubclass(component, Component)):
            raise TypeError(f"Cannot register {component!r} for <{tag}>: not a Component subclass")
        previous = self._components.get(tag)
        if previous is not None and previous is not component:
            logger.debug("Overriding <%s>: %s replaces %s", tag, component.__qualname__, previous.__qualname__)
        self._components[tag] = component

    def register_all(self, components: tuple[type[Component], ...] | list[type[Component]]) -> None:
        for component in components:
            self.register(component.tag, component)

    def register_source(self, namespace: str, source_ref: str) -> None:
        """Resolve tags in ``namespace`` from ``source_ref`` instead of the package of the same name."""
        self._sources[namespace] = source_ref
        self._loaded.discard(namespace)

    def tags(self) -> list[str]:
        return sorted(self._components)

    def __contains__(self, tag: object) -> bool:
        return tag in self._components

    async def resolve(self, tag: str) -> type[Component]:
        """Return the component class for ``tag``.

        Raises:
            UnknownComponentError: If no registration or source provides the tag.
        """
        if (component := self._components.get(tag)) is not None:
            return component

        namespace, dot, _ = tag.rpartition(".")
        if not dot or self._module_cache is None:
            raise UnknownComponentError(tag, [REGISTRY_SOURCE])

        source_ref = self._sources.get(namespace, namespace)
        attempted = [REGISTRY_SOURCE, source_ref]
        try:
            await self._load_namespace(namespace, source_ref)
        except (ModuleCacheError, ComponentLoadError) as exc:
            raise UnknownComponentError(tag, attempted) from exc

        if (component := self._components.get(tag)) is None:
            raise UnknownComponentError(tag, attempted)
        return component

    async def _load_namespace(self, namespace: str, source_ref: str) -> None:
        assert self._module_cache is not None
        lock = self._locks.setdefault(namespace, asyncio.Lock())
        async with lock:
            if namespace in self._loaded:
                return
            logger.info("Resolving components for namespace '%s' from %s", namespace, source_ref)
            directory = await self._module_cache.resolve(source_ref)
            try:
                loaded = await asyncio.to_thread(load_components, directory, namespace)
            except ComponentLoadError:
                raise
            except Exception as exc:
                logger.warning("Failed to import components for '%s' from %s: %s", namespace, source_ref, exc)
                raise ComponentLoadError(f"Cannot import components from {source_ref}: {exc}") from exc
            for tag, component in loaded.items():
                self._components.setdefault(tag, component)
            self._loaded.add(namespace)


def create_default_registry(*, module_cache: ModuleCache | None = None) -> ComponentRegistry:
    """New registry holding every built-in component."""
    registry = ComponentRegistry(module_cache=module_cache)
    registry.register_all(BUILTIN_COMPONENTS)
    return registry


@cache
def default_registry() -> ComponentRegistry:
    """Process-wide registry of built-in components, created on first use.

    Namespaced tags are loaded through a module cache rooted at
    ``settings.cache_dir``.
    """
    return create_default_registry(module_cache=ModuleCache(settings.cache_dir))


__all__ = ["REGISTRY_SOURCE", "ComponentRegistry", "create_default_registry", "default_registry"]
