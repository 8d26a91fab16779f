"""Tests for the component registry and namespace loading."""

import asyncio
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pytest

from ai_prompt_core.components import Component, ComponentRegistry, create_default_registry, default_registry
from ai_prompt_core.exceptions import PackageNotFoundError, UnknownComponentError
from ai_prompt_core.module_cache import ModuleCache
from ai_prompt_core.parser import parse
from ai_prompt_core.render import RenderContext, RenderEngine
from tests.support.helpers import text_of

GREETING_MODULE = """
from ai_prompt_core.components import Component


class Greeting(Component):
    def render(self, props, value, context):
        return f"Hello, {props.get('name', 'world')}!"


class Farewell(Component):
    def render(self, props, value, context):
        return "Goodbye."
"""


class LocalGreeting(Component):
    tag = "acme.Greeting"

    def render(self, props: Mapping[str, Any], value: Any, context: RenderContext) -> str:
        return "Local hello"


class RecordingResolver:
    """Package resolver backed by a name -> directory mapping."""

    def __init__(self, packages: dict[str, Path]) -> None:
        self.packages = packages
        self.calls: list[str] = []

    def __call__(self, name: str) -> Path | None:
        self.calls.append(name)
        return self.packages.get(name)


@pytest.fixture
def acme_package(tmp_path: Path) -> Path:
    package = tmp_path / "site" / "acme"
    package.mkdir(parents=True)
    (package / "components.py").write_text(GREETING_MODULE, encoding="utf-8")
    return package


@pytest.fixture
def resolver(acme_package: Path) -> RecordingResolver:
    return RecordingResolver({"acme": acme_package})


@pytest.fixture
def remote_registry(tmp_path: Path, resolver: RecordingResolver) -> ComponentRegistry:
    return create_default_registry(module_cache=ModuleCache(tmp_path / "cache", package_resolver=resolver))


class TestRegistration:
    @pytest.mark.asyncio
    async def test_builtins_are_registered(self, registry: ComponentRegistry):
        assert "Prompt" in registry
        assert "Ask.Text" in registry
        assert registry.tags() == sorted(registry.tags())
        assert (await registry.resolve("Task")).tag == "Task"

    @pytest.mark.asyncio
    async def test_last_registration_wins(self, registry: ComponentRegistry):
        class CustomTask(Component):
            tag = "Task"

        registry.register("Task", CustomTask)
        assert await registry.resolve("Task") is CustomTask

    def test_register_rejects_non_components(self, registry: ComponentRegistry):
        with pytest.raises(TypeError, match="not a Component subclass"):
            registry.register("Bad", object)  # type: ignore[arg-type]

    @pytest.mark.asyncio
    async def test_unknown_tag(self, registry: ComponentRegistry):
        with pytest.raises(UnknownComponentError) as exc_info:
            await registry.resolve("Nope")
        assert exc_info.value.tag == "Nope"
        assert exc_info.value.attempted_sources == ("registry",)

    @pytest.mark.asyncio
    async def test_namespaced_tag_without_module_cache(self, registry: ComponentRegistry):
        with pytest.raises(UnknownComponentError):
            await registry.resolve("acme.Greeting")

    def test_default_registry_is_shared(self):
        assert default_registry() is default_registry()
        assert "Prompt" in default_registry()


class TestNamespaceLoading:
    @pytest.mark.asyncio
    async def test_loads_namespace_from_package(self, remote_registry: ComponentRegistry, resolver: RecordingResolver):
        greeting = await remote_registry.resolve("acme.Greeting")
        assert greeting.__name__ == "Greeting"
        assert "acme.Farewell" in remote_registry
        assert resolver.calls == ["acme"]

    @pytest.mark.asyncio
    async def test_renders_loaded_component(self, remote_registry: ComponentRegistry, env):
        element = parse('<Prompt bare><acme.Greeting name="Ada"/> <acme.Farewell/></Prompt>')
        outcome = await RenderEngine(remote_registry).render(element, RenderContext(env=env))
        assert text_of(outcome) == "Hello, Ada! Goodbye."

    @pytest.mark.asyncio
    async def test_namespace_loads_once_under_concurrency(self, remote_registry: ComponentRegistry, resolver: RecordingResolver):
        greeting, farewell = await asyncio.gather(remote_registry.resolve("acme.Greeting"), remote_registry.resolve("acme.Farewell"))
        assert greeting.__name__ == "Greeting"
        assert farewell.__name__ == "Farewell"
        assert resolver.calls == ["acme"]

    @pytest.mark.asyncio
    async def test_local_override_is_not_displaced(self, remote_registry: ComponentRegistry):
        remote_registry.register("acme.Greeting", LocalGreeting)
        await remote_registry.resolve("acme.Farewell")
        assert await remote_registry.resolve("acme.Greeting") is LocalGreeting

    @pytest.mark.asyncio
    async def test_missing_tag_in_loaded_namespace(self, remote_registry: ComponentRegistry):
        with pytest.raises(UnknownComponentError) as exc_info:
            await remote_registry.resolve("acme.Missing")
        assert exc_info.value.attempted_sources == ("registry", "acme")

    @pytest.mark.asyncio
    async def test_register_source_redirects_namespace(self, tmp_path: Path, acme_package: Path):
        resolver = RecordingResolver({"acme_prompts": acme_package})
        registry = create_default_registry(module_cache=ModuleCache(tmp_path / "cache", package_resolver=resolver))
        registry.register_source("acme", "acme_prompts")

        assert (await registry.resolve("acme.Greeting")).__name__ == "Greeting"
        assert resolver.calls == ["acme_prompts"]

    @pytest.mark.asyncio
    async def test_uninstalled_package_is_unknown_component(self, tmp_path: Path):
        registry = create_default_registry(module_cache=ModuleCache(tmp_path / "cache", package_resolver=lambda name: None))
        with pytest.raises(UnknownComponentError) as exc_info:
            await registry.resolve("ghost.Widget")
        assert exc_info.value.attempted_sources == ("registry", "ghost")
        assert isinstance(exc_info.value.__cause__, PackageNotFoundError)

    @pytest.mark.asyncio
    async def test_unknown_component_fails_render(self, tmp_path: Path, env):
        registry = create_default_registry(module_cache=ModuleCache(tmp_path / "cache", package_resolver=lambda name: None))
        element = parse("<Prompt bare><Task>x</Task><ghost.Widget/></Prompt>")
        outcome = await RenderEngine(registry).render(element, RenderContext(env=env))
        assert not outcome.ok
        assert outcome.error.code == "unknown_component"
        assert outcome.error.component == "ghost.Widget"
        assert outcome.text == ""
