"""Conditional rendering."""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ai_prompt_core.elements import Node
from ai_prompt_core.schema import Field, Schema

from ..base import Component

if TYPE_CHECKING:
    from ai_prompt_core.render.context import RenderContext

_FALSY_STRINGS = frozenset({"", "false", "0", "no", "off"})


def _truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in _FALSY_STRINGS
    return bool(value)


class If(Component):
    """Render children only when a condition holds.

    Either ``when`` is tested for truthiness, or the collected input named by
    ``input`` is compared with ``equals`` / ``notEquals`` (or tested for
    truthiness when neither is given). Only literal checks are supported;
    there is no expression language.

    Example:
        <If input="audience" equals="experts">Skip the basics.</If>
    """

    schema = Schema(
        {
            "when": Field(type="any"),
            "input": Field(type="string"),
            "equals": Field(type="any"),
            "notEquals": Field(type="any"),
        }
    )

    def resolve(self, props: Mapping[str, Any], context: "RenderContext") -> bool:
        if name := props.get("input"):
            current = context.inputs.get(name)
            if "equals" in props:
                return current == props["equals"]
            if "notEquals" in props:
                return current != props["notEquals"]
            return _truthy(current)
        return _truthy(props.get("when"))

    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        return props["children"] if value else None


CONTROL_COMPONENTS: tuple[type[Component], ...] = (If,)

__all__ = ["CONTROL_COMPONENTS", "If"]
