"""Entry points for compiling, rendering and running prompt templates.

@public

Typical use:
    >>> element = create_from_source('<Prompt bare><Task>Summarise.</Task></Prompt>')
    >>> result = await render(element)
    >>> result.text
    '<task>\\nSummarise.\\n</task>'

Templates with inputs are driven through ``run_prompt`` (values supplied up
front) or through ``create_input_iterator`` and ``collect_inputs`` when a UI
answers one requirement at a time.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ai_prompt_core.components import ComponentRegistry, default_registry
from ai_prompt_core.elements import Element
from ai_prompt_core.exceptions import InputIteratorStateError, PromptSyntaxError
from ai_prompt_core.inputs import InputIterator, InputPrompter, PendingInput, collect_inputs
from ai_prompt_core.logging import get_logger
from ai_prompt_core.parser import parse
from ai_prompt_core.render import EnvironmentInfo, RenderContext, RenderEngine, RenderIssue, RenderResult

logger = get_logger(__name__)

MISSING_INPUT = "missing_input"


def create_from_source(source: str, filename: str = "<string>") -> Element:
    """Parse template source into an element tree.

    Raises:
        PromptSyntaxError: If the source is malformed.
    """
    return parse(source, filename)


def create_from_file(path: Path | str) -> Element:
    """Read and parse a ``.prompt`` file."""
    path = Path(path)
    return parse(path.read_text(encoding="utf-8"), str(path))


def _context(inputs: Mapping[str, Any] | None, env: EnvironmentInfo | None) -> RenderContext:
    return RenderContext(env=env or EnvironmentInfo.from_host(), inputs=dict(inputs or {}))


def _missing_input(pending: PendingInput) -> RenderIssue:
    requirement = pending.requirement
    return RenderIssue(
        code=MISSING_INPUT,
        message=f"Missing value for input '{requirement.name}'",
        component=requirement.component,
        path=pending.path,
    )


async def render(
    element: Element,
    *,
    inputs: Mapping[str, Any] | None = None,
    env: EnvironmentInfo | None = None,
    registry: ComponentRegistry | None = None,
) -> RenderResult:
    """Render a template in one pass.

    Input values are taken as given. A template that still needs an input
    fails with code ``missing_input`` naming the first missing one; use
    ``run_prompt`` or ``create_input_iterator`` to collect inputs instead.
    """
    engine = RenderEngine(registry or default_registry())
    outcome = await engine.render(element, _context(inputs, env))
    if isinstance(outcome, PendingInput):
        return RenderResult.failure(_missing_input(outcome))
    return outcome


async def render_source(
    source: str,
    filename: str = "<string>",
    *,
    inputs: Mapping[str, Any] | None = None,
    env: EnvironmentInfo | None = None,
    registry: ComponentRegistry | None = None,
) -> RenderResult:
    """Parse and render; syntax errors come back as a failed result instead of raising."""
    try:
        element = create_from_source(source, filename)
    except PromptSyntaxError as exc:
        logger.warning("Cannot parse %s: %s", filename, exc.message)
        return RenderResult.failure(RenderIssue.from_error(exc))
    return await render(element, inputs=inputs, env=env, registry=registry)


def create_input_iterator(
    element: Element,
    *,
    values: Mapping[str, Any] | None = None,
    env: EnvironmentInfo | None = None,
    registry: ComponentRegistry | None = None,
) -> InputIterator:
    """Iterator over the inputs ``element`` needs, in document order.

    ``values`` are treated as already committed. Each step re-renders the
    template with a fresh context holding the committed values; once the
    iterator is done, ``iterator.result`` is the final ``RenderResult``.
    """
    engine = RenderEngine(registry or default_registry())
    base = _context(None, env)

    async def step(current: Mapping[str, Any]) -> RenderResult | PendingInput:
        return await engine.render(element, base.fork(dict(current)))

    iterator = InputIterator(step, values=values)
    base.iterator = iterator
    return iterator


async def run_prompt(
    element: Element,
    inputs: Mapping[str, Any] | None = None,
    *,
    non_interactive: bool = True,
    prompter: InputPrompter | None = None,
    text_values: bool = False,
    env: EnvironmentInfo | None = None,
    registry: ComponentRegistry | None = None,
) -> RenderResult:
    """Collect every input the template needs, then return the final render.

    Supplied ``inputs`` are validated like any other answer when their
    requirement comes up. Non-interactively, a missing or invalid value
    raises ``ValidationFailureError`` after a single attempt. With
    ``text_values``, string inputs are raw text (as typed on a command line)
    and are converted to each requirement's type first.
    """
    iterator = create_input_iterator(element, env=env, registry=registry)
    await collect_inputs(iterator, non_interactive, prompter=prompter, values=inputs, text_values=text_values)
    result = iterator.result
    if not isinstance(result, RenderResult):
        raise InputIteratorStateError(f"Input collection finished without a render result: {result!r}")
    return result


__all__ = [
    "MISSING_INPUT",
    "collect_inputs",
    "create_from_file",
    "create_from_source",
    "create_input_iterator",
    "render",
    "render_source",
    "run_prompt",
]
