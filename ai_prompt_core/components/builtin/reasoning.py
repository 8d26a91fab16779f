"""Step-by-step reasoning components."""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ai_prompt_core.elements import Element, Node, iter_nodes
from ai_prompt_core.schema import Field, Schema

from ..base import Component
from ..presets import STEP_STYLES

if TYPE_CHECKING:
    from ai_prompt_core.render.context import RenderContext

_FLAG = Field(type="boolean", coerce=True)


class Steps(Component):
    """Numbered reasoning steps preceded by a style instruction.

    Step children without an explicit ``number`` are numbered in order; an
    explicit number restarts the count after it.
    """

    schema = Schema(
        {
            "style": Field(type="string", enum=tuple(STEP_STYLES), default="step-by-step"),
            "verify": _FLAG,
            "selfCritique": _FLAG,
            "showReasoning": _FLAG,
        }
    )

    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        sections: list[Node] = [STEP_STYLES[props["style"]], "\n\n<steps>\n", self._number_steps(props["children"]), "</steps>\n"]
        if props.get("verify"):
            sections.append("\nVerify your answer is correct before finalizing.\n")
        if props.get("selfCritique"):
            sections.append("\nReview your response and identify any potential issues or improvements.\n")
        if props.get("showReasoning"):
            sections.append("\nShow your reasoning process in the output.\n")
        return sections

    @staticmethod
    def _number_steps(children: Node) -> list[Element | str]:
        numbered: list[Element | str] = []
        next_number = 1
        for child in iter_nodes(children):
            if isinstance(child, Element) and child.tag == "Step":
                explicit = child.get("number")
                if explicit is None:
                    child = Element(child.tag, {**child.props, "number": next_number}, child.children, child.position)
                    next_number += 1
                else:
                    next_number = int(explicit) + 1
            numbered.append(child)
        return numbered


class Step(Component):
    schema = Schema({"number": Field(type="integer", coerce=True)})

    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        number = props.get("number")
        prefix = f"{number}. " if number is not None else "- "
        return [prefix, props["children"], "\n"]


REASONING_COMPONENTS: tuple[type[Component], ...] = (Steps, Step)

__all__ = ["REASONING_COMPONENTS", "Step", "Steps"]
