"""Common test fixtures for prompt rendering tests."""

from pathlib import Path

import pytest

from ai_prompt_core.components import ComponentRegistry, create_default_registry
from ai_prompt_core.parser import parse
from ai_prompt_core.render import EnvironmentInfo, RenderContext, RenderEngine
from tests.support.helpers import FIXED_NOW


@pytest.fixture
def env(tmp_path: Path) -> EnvironmentInfo:
    """Deterministic environment rooted at a temporary working directory."""
    return EnvironmentInfo(
        runtime="python",
        runtime_version="3.12.0",
        platform="linux",
        hostname="test-host",
        username="tester",
        cwd=str(tmp_path),
        now=FIXED_NOW,
        delimiter="xml",
        role="assistant",
    )


@pytest.fixture
def registry() -> ComponentRegistry:
    """Fresh registry with the built-in components, isolated per test."""
    return create_default_registry()


@pytest.fixture
def render_source(env: EnvironmentInfo, registry: ComponentRegistry):
    """Parse and render a template with the built-in components; returns the RenderResult or PendingInput."""

    async def _render(source: str, inputs: dict | None = None, *, root_tag: str | None = "Prompt"):
        element = parse(source, "test.prompt", root_tag=root_tag)
        context = RenderContext(env=env, inputs=dict(inputs or {}))
        return await RenderEngine(registry).render(element, context)

    return _render
