"""Base classes for template components.

A component turns one element into a ``Node``. It may declare a prop
``schema`` (validated by the render engine before anything else runs), an
input ``requirement`` (the engine halts the render until a value for it is
supplied), a ``resolve`` step producing a value, and a ``render`` step.
``resolve`` and ``render`` may be plain or ``async`` methods.

Components are stateless: the engine creates a fresh instance per element
and never shares instances across renders.
"""

import re
from collections.abc import Awaitable, Mapping
from typing import TYPE_CHECKING, Any, ClassVar

from ai_prompt_core.elements import Node, has_content
from ai_prompt_core.inputs import InputRequirement, InputType, validate_input_value
from ai_prompt_core.schema import Field, Schema, ValidationResult
from ai_prompt_core.settings import DelimiterStyle

if TYPE_CHECKING:
    from ai_prompt_core.render.context import RenderContext

DELIMITER_STYLES: tuple[DelimiterStyle, ...] = ("xml", "markdown", "none")

_TAG_RE = re.compile(r"^[A-Za-z_][\w\-]*(?:\.[A-Za-z_][\w\-]*)*$")


def _require_tag(cls: type["Component"]) -> None:
    """Default the tag to the class name and validate it."""
    if "tag" not in cls.__dict__:
        cls.tag = cls.__name__
    if not isinstance(cls.tag, str) or not _TAG_RE.match(cls.tag):
        raise TypeError(f"Component '{cls.__name__}' has invalid tag {cls.tag!r}")


def _require_schema(cls: type["Component"]) -> None:
    schema = cls.__dict__.get("schema")
    if schema is not None and not isinstance(schema, Schema):
        raise TypeError(f"Component '{cls.__name__}' schema must be a Schema instance, got {type(schema).__name__}")


class Component:
    """Base class for every built-in and externally supplied component.

    Subclasses override ``render``; everything else is optional. ``tag``
    defaults to the class name.
    """

    tag: ClassVar[str]
    schema: ClassVar[Schema | None] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        _require_tag(cls)
        _require_schema(cls)

    def requirement(self, props: Mapping[str, Any], context: "RenderContext") -> InputRequirement | None:
        """Input this element needs before it can render, if any."""
        return None

    def validate_value(self, requirement: InputRequirement, value: Any) -> ValidationResult | Awaitable[ValidationResult]:
        return ValidationResult.success()

    def resolve(self, props: Mapping[str, Any], context: "RenderContext") -> Any:
        return None

    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node | Awaitable[Node]:
        return props.get("children")

    @staticmethod
    def has_content(children: Node) -> bool:
        return has_content(children)

    @staticmethod
    def delimiter(props: Mapping[str, Any], context: "RenderContext") -> DelimiterStyle:
        """Delimiter style from the ``delimiter`` prop, falling back to the environment default."""
        return props.get("delimiter") or context.env.delimiter


DELIMITER_FIELD = Field(type="string", enum=DELIMITER_STYLES)

ASK_BASE_SCHEMA = Schema(
    {
        "name": Field(type="string", required=True),
        "label": Field(type="string"),
        "description": Field(type="string"),
        "required": Field(type="boolean", coerce=True),
        "placeholder": Field(type="string"),
    }
)


class InputComponent(Component):
    """Base class for components that ask the user for a value.

    The value is looked up by the ``name`` prop in the render context's
    inputs. Subclasses set ``input_type`` and may add constraint fields via
    ``requirement_fields`` and change how the value is rendered via
    ``format_value``.
    """

    tag = "Ask.Input"
    input_type: ClassVar[InputType] = "string"
    schema = ASK_BASE_SCHEMA.extend({"default": Field(type="string")})

    def default_value(self, props: Mapping[str, Any]) -> Any:
        return props.get("default")

    def requirement_fields(self, props: Mapping[str, Any], context: "RenderContext") -> dict[str, Any]:
        return {}

    def requirement(self, props: Mapping[str, Any], context: "RenderContext") -> InputRequirement:
        name = props["name"]
        label = props.get("label") or name
        return InputRequirement(
            name=name,
            label=label,
            type=self.input_type,
            description=props.get("description") or "",
            required=props.get("required", False),
            default=self.default_value(props),
            placeholder=props.get("placeholder"),
            component=self.tag,
            **self.requirement_fields(props, context),
        )

    def validate_value(self, requirement: InputRequirement, value: Any) -> ValidationResult:
        return validate_input_value(requirement, value)

    def resolve(self, props: Mapping[str, Any], context: "RenderContext") -> Any:
        return context.inputs.get(props["name"])

    def format_value(self, value: Any, props: Mapping[str, Any], context: "RenderContext") -> str:
        return str(value)

    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        if value is None:
            return ""
        return self.format_value(value, props, context)


__all__ = [
    "ASK_BASE_SCHEMA",
    "DELIMITER_FIELD",
    "DELIMITER_STYLES",
    "Component",
    "DelimiterStyle",
    "InputComponent",
]
