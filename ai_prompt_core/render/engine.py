"""Depth-first render of an element tree into text.

Each element is resolved to its component, its props are validated, and
the component's output is rendered recursively in document order. The
first element whose input is missing stops the whole render: the engine
unwinds and returns a ``PendingInput`` describing it. Resuming is a fresh
render with that value supplied.
"""

import inspect
from collections import Counter
from collections.abc import Iterable
from typing import Any

from ai_prompt_core.components import Component, ComponentRegistry
from ai_prompt_core.elements import Element, Node
from ai_prompt_core.exceptions import ComponentRenderError, PromptCoreError, PropValidationError
from ai_prompt_core.inputs import PendingInput
from ai_prompt_core.logging import get_logger
from ai_prompt_core.schema import CHILDREN_PROP, apply_schema, validate

from .context import RenderContext
from .result import RenderIssue, RenderResult

logger = get_logger(__name__)


class _PendingHalt(Exception):
    """Unwinds the render when an element needs an input that is not supplied."""

    def __init__(self, pending: PendingInput) -> None:
        super().__init__(pending.requirement.name)
        self.pending = pending


async def _settle(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class _RenderSession:
    """State of one top-level render: resolved components and the current element path."""

    def __init__(self, registry: ComponentRegistry, context: RenderContext) -> None:
        self._registry = registry
        self._context = context
        self._components: dict[str, type[Component]] = {}
        self._path: list[str] = []
        self._siblings: list[Counter[str]] = [Counter()]

    @property
    def current_path(self) -> tuple[str, ...]:
        return tuple(self._path)

    async def render_node(self, node: Node) -> str:
        if node is None or isinstance(node, bool):
            return ""
        if isinstance(node, str):
            return node
        if isinstance(node, Element):
            return await self._render_element(node)
        if isinstance(node, int | float):
            return str(node)
        if isinstance(node, Iterable):
            parts = [await self.render_node(item) for item in node]
            return "".join(parts)
        raise TypeError(f"Cannot render value of type {type(node).__name__}")

    async def _component_class(self, tag: str) -> type[Component]:
        if (cls := self._components.get(tag)) is None:
            cls = await self._registry.resolve(tag)
            self._components[tag] = cls
        return cls

    def _segment(self, tag: str) -> str:
        siblings = self._siblings[-1]
        index = siblings[tag]
        siblings[tag] += 1
        return tag if index == 0 else f"{tag}[{index}]"

    def _prepare_props(self, component_cls: type[Component], element: Element) -> dict[str, Any]:
        schema = component_cls.schema
        if schema is not None:
            result = validate(schema, element.props)
            if not result.valid:
                raise PropValidationError(element.tag, result.errors, self.current_path)
        props = apply_schema(schema, element.props)
        props[CHILDREN_PROP] = element.children
        return props

    async def _render_element(self, element: Element) -> str:
        self._path.append(self._segment(element.tag))
        self._siblings.append(Counter())
        try:
            component_cls = await self._component_class(element.tag)
            props = self._prepare_props(component_cls, element)
            context = self._context
            try:
                component = component_cls()
                requirement = component.requirement(props, context)
                if requirement is not None and requirement.name not in context.inputs:
                    logger.debug("Render halted at %s: input '%s' is missing", " > ".join(self._path), requirement.name)
                    raise _PendingHalt(PendingInput(requirement, component.validate_value, self.current_path))
                value = await _settle(component.resolve(props, context))
                node = await _settle(component.render(props, value, context))
                return await self.render_node(node)
            except (PromptCoreError, _PendingHalt):
                raise
            except Exception as exc:
                raise ComponentRenderError(element.tag, self.current_path, exc) from exc
        finally:
            self._siblings.pop()
            self._path.pop()


class RenderEngine:
    """Renders element trees with components from a registry.

    Example:
        >>> engine = RenderEngine(create_default_registry())
        >>> outcome = await engine.render(parse(source), RenderContext())
        >>> outcome.text if isinstance(outcome, RenderResult) else outcome.requirement.name
    """

    def __init__(self, registry: ComponentRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> ComponentRegistry:
        return self._registry

    async def render(self, element: Element, context: RenderContext) -> RenderResult | PendingInput:
        """Render ``element`` to text, or stop at the first missing input.

        Unknown components, invalid props and component failures abort the
        render and come back as a failed ``RenderResult``; nothing of the
        partial output is returned. Warnings recorded before the failure are
        kept.
        """
        session = _RenderSession(self._registry, context)
        context.session = session
        first_warning = len(context.warnings)
        try:
            text = await session.render_node(element)
        except _PendingHalt as halt:
            return halt.pending
        except PromptCoreError as exc:
            logger.warning("Render failed: %s", exc.message)
            return RenderResult.failure(RenderIssue.from_error(exc), tuple(context.warnings[first_warning:]))
        finally:
            context.session = None
        return RenderResult(ok=True, text=text.strip(), warnings=tuple(context.warnings[first_warning:]))


__all__ = ["RenderEngine"]
