"""Input components (``Ask.*``): each declares one value the user must supply.

The rendered text is the collected value; the engine halts the render at
the first of these whose value has not been collected yet.
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ai_prompt_core.elements import Element, Node, find_children_of_type, text_content
from ai_prompt_core.inputs import SelectOption
from ai_prompt_core.schema import Field, Schema

from ..base import ASK_BASE_SCHEMA, Component, InputComponent

if TYPE_CHECKING:
    from ai_prompt_core.render.context import RenderContext

_FLAG = Field(type="boolean", coerce=True)
_NUMBER = Field(type="number", coerce=True)


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(item) for item in value]


class AskText(InputComponent):
    tag = "Ask.Text"
    input_type = "string"


class AskEditor(InputComponent):
    """Multi-line text, typically entered in an external editor."""

    tag = "Ask.Editor"
    input_type = "editor"
    schema = ASK_BASE_SCHEMA.extend({"default": Field(type="string"), "language": Field(type="string")})


class AskSecret(InputComponent):
    tag = "Ask.Secret"
    input_type = "secret"


class AskNumber(InputComponent):
    tag = "Ask.Number"
    input_type = "number"
    schema = ASK_BASE_SCHEMA.extend({"default": _NUMBER, "min": _NUMBER, "max": _NUMBER})

    def requirement_fields(self, props: Mapping[str, Any], context: "RenderContext") -> dict[str, Any]:
        return {"minimum": props.get("min"), "maximum": props.get("max")}


class AskRating(InputComponent):
    """Whole-number rating on a ``min``..``max`` scale (1 to 5 by default)."""

    tag = "Ask.Rating"
    input_type = "rating"
    schema = ASK_BASE_SCHEMA.extend(
        {
            "default": _NUMBER,
            "min": Field(type="integer", coerce=True, default=1),
            "max": Field(type="integer", coerce=True, default=5),
        }
    )

    def requirement_fields(self, props: Mapping[str, Any], context: "RenderContext") -> dict[str, Any]:
        return {"minimum": props["min"], "maximum": props["max"]}


class AskConfirm(InputComponent):
    """Yes/no question; renders ``yes`` or ``no``."""

    tag = "Ask.Confirm"
    input_type = "confirm"
    schema = ASK_BASE_SCHEMA.extend({"default": Field(type="boolean", coerce=True)})

    def format_value(self, value: Any, props: Mapping[str, Any], context: "RenderContext") -> str:
        return "yes" if value else "no"


class AskOption(Component):
    """Choice inside Ask.Select / Ask.MultiSelect. Renders nothing on its own."""

    tag = "Ask.Option"
    schema = Schema({"value": Field(type="string", required=True), "label": Field(type="string")})

    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        return None


def _option_from_element(element: Element) -> SelectOption:
    value = str(element.get("value", ""))
    child_text = text_content(element.children).strip() or None
    label = element.get("label") or child_text or value
    return SelectOption(value=value, label=label, text=child_text or label)


def _option_from_prop(option: Any) -> SelectOption:
    if isinstance(option, Mapping):
        value = str(option.get("value", ""))
        label = option.get("label") or value
        return SelectOption(value=value, label=label, text=option.get("text") or label)
    return SelectOption(value=str(option), label=str(option))


class AskSelect(InputComponent):
    """Single choice among Ask.Option children and/or an ``options`` prop.

    Renders the chosen option's text (its element content, else its label).
    """

    tag = "Ask.Select"
    input_type = "select"
    schema = ASK_BASE_SCHEMA.extend({"default": Field(type="string"), "options": Field(type="array")})

    @staticmethod
    def collect_options(props: Mapping[str, Any]) -> tuple[SelectOption, ...]:
        from_children = [_option_from_element(el) for el in find_children_of_type(props.get("children"), AskOption.tag)]
        from_props = [_option_from_prop(option) for option in props.get("options") or ()]
        return tuple(from_children + from_props)

    def requirement_fields(self, props: Mapping[str, Any], context: "RenderContext") -> dict[str, Any]:
        return {"options": self.collect_options(props)}

    def format_value(self, value: Any, props: Mapping[str, Any], context: "RenderContext") -> str:
        for option in self.collect_options(props):
            if option.value == value:
                return option.rendered_text
        return str(value)


class AskMultiSelect(AskSelect):
    tag = "Ask.MultiSelect"
    input_type = "multiselect"
    schema = ASK_BASE_SCHEMA.extend({"default": Field(type="any"), "options": Field(type="array")})

    def default_value(self, props: Mapping[str, Any]) -> Any:
        default = props.get("default")
        return None if default is None else _as_list(default)

    def format_value(self, value: Any, props: Mapping[str, Any], context: "RenderContext") -> str:
        texts = {option.value: option.rendered_text for option in self.collect_options(props)}
        return ", ".join(texts.get(item, str(item)) for item in value)


class AskFile(InputComponent):
    """Path to an existing or new file, optionally restricted to ``extensions``."""

    tag = "Ask.File"
    input_type = "file"
    schema = ASK_BASE_SCHEMA.extend(
        {
            "default": Field(type="any"),
            "extensions": Field(type="any"),
            "mustExist": _FLAG,
            "multiple": _FLAG,
        }
    )

    def requirement_fields(self, props: Mapping[str, Any], context: "RenderContext") -> dict[str, Any]:
        return {
            "extensions": tuple(_as_list(props.get("extensions"))),
            "must_exist": bool(props.get("mustExist")),
            "multiple": bool(props.get("multiple")),
            "base_dir": context.env.cwd or None,
        }

    def format_value(self, value: Any, props: Mapping[str, Any], context: "RenderContext") -> str:
        return ", ".join(value) if isinstance(value, list | tuple) else str(value)


class AskPath(InputComponent):
    tag = "Ask.Path"
    input_type = "path"
    schema = ASK_BASE_SCHEMA.extend({"default": Field(type="string"), "mustExist": _FLAG, "mustBeDirectory": _FLAG})

    def requirement_fields(self, props: Mapping[str, Any], context: "RenderContext") -> dict[str, Any]:
        return {
            "must_exist": bool(props.get("mustExist")),
            "must_be_directory": bool(props.get("mustBeDirectory")),
            "base_dir": context.env.cwd or None,
        }


class AskDate(InputComponent):
    """ISO date; ``minDate`` / ``maxDate`` accept a date or ``today``."""

    tag = "Ask.Date"
    input_type = "date"
    schema = ASK_BASE_SCHEMA.extend({"default": Field(type="string"), "minDate": Field(type="string"), "maxDate": Field(type="string")})

    def requirement_fields(self, props: Mapping[str, Any], context: "RenderContext") -> dict[str, Any]:
        return {"min_date": props.get("minDate"), "max_date": props.get("maxDate")}


ASK_COMPONENTS: tuple[type[Component], ...] = (
    AskText,
    AskEditor,
    AskSecret,
    AskNumber,
    AskRating,
    AskConfirm,
    AskOption,
    AskSelect,
    AskMultiSelect,
    AskFile,
    AskPath,
    AskDate,
)

__all__ = [
    "ASK_COMPONENTS",
    "AskConfirm",
    "AskDate",
    "AskEditor",
    "AskFile",
    "AskMultiSelect",
    "AskNumber",
    "AskOption",
    "AskPath",
    "AskRating",
    "AskSecret",
    "AskSelect",
    "AskText",
]
