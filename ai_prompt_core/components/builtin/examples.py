"""Few-shot example components."""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ai_prompt_core.elements import Node
from ai_prompt_core.schema import Field, Schema

from ..base import DELIMITER_FIELD, Component
from ..delimiters import wrap_with_delimiter

if TYPE_CHECKING:
    from ai_prompt_core.render.context import RenderContext


class Examples(Component):
    schema = Schema({"delimiter": DELIMITER_FIELD})

    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        return wrap_with_delimiter(props["children"], "examples", self.delimiter(props, context))


class Example(Component):
    """One example; an optional ``label`` is printed above its content."""

    schema = Schema({"label": Field(type="string"), "delimiter": DELIMITER_FIELD})

    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        content: list[Node] = []
        if label := props.get("label"):
            content.append(f"{label}\n")
        content.append(props["children"])
        return wrap_with_delimiter(content, "example", self.delimiter(props, context))


class ExampleInput(Component):
    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        return ["Input: ", props["children"], "\n"]


class ExampleOutput(Component):
    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        return ["Output: ", props["children"], "\n"]


EXAMPLE_COMPONENTS: tuple[type[Component], ...] = (Examples, Example, ExampleInput, ExampleOutput)

__all__ = ["EXAMPLE_COMPONENTS", "Example", "ExampleInput", "ExampleOutput", "Examples"]
