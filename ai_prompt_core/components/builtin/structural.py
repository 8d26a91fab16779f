"""Structural components: the prompt skeleton and its named sections."""

import json
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ai_prompt_core.elements import Node, find_children_of_type
from ai_prompt_core.schema import Field, Schema

from ..base import DELIMITER_FIELD, Component
from ..delimiters import wrap_with_delimiter
from ..presets import (
    AUDIENCE_GUIDANCE,
    DEFAULT_CONSTRAINTS,
    DEFAULT_FORMAT,
    EXPERIENCE_PREFIXES,
    ROLE_PREFIX,
    ROLE_PRESETS,
    TONE_DESCRIPTIONS,
    UNCERTAINTY_ACTIONS,
)

if TYPE_CHECKING:
    from ai_prompt_core.render.context import RenderContext

_FLAG = Field(type="boolean", coerce=True)
_STRING_LIST = Field(type="any")


def _as_list(value: Any) -> list[str]:
    """Accept either a list or a comma-separated string."""
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(item) for item in value]


class Prompt(Component):
    """Root of a template.

    Unless ``bare`` is set (or ``defaults="none"``), a default role section is
    placed before the children and default format and constraint sections
    after them, each skipped when the children already provide one.
    """

    schema = Schema(
        {
            "name": Field(type="string"),
            "title": Field(type="string"),
            "version": Field(type="string"),
            "description": Field(type="string"),
            "bare": _FLAG,
            "defaults": Field(type="string", enum=("all", "none")),
            "noRole": _FLAG,
            "noFormat": _FLAG,
            "noConstraints": _FLAG,
            "role": Field(type="string"),
            "expertise": _STRING_LIST,
            "delimiter": DELIMITER_FIELD,
        }
    )

    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        children = props["children"]
        if props.get("bare") or props.get("defaults") == "none":
            return children

        if not find_children_of_type(children, "Task"):
            context.warn(
                "warn_missing_task",
                "Prompt has no Task child. Consider adding a <Task> element to define the objective.",
                component=self.tag,
            )

        delimiter = self.delimiter(props, context)
        sections: list[Node] = []

        if not props.get("noRole") and not find_children_of_type(children, "Role"):
            sections.append(self._default_role(props, context, delimiter))

        sections.append(children)

        if not props.get("noFormat") and not find_children_of_type(children, "Format"):
            sections.append(wrap_with_delimiter(f"Output format: {DEFAULT_FORMAT}", "format", delimiter))

        containers = find_children_of_type(children, "Constraints")
        if not props.get("noConstraints"):
            if containers:
                container = containers[0]
                if container.get("extend") is True:
                    sections.append(self._default_constraints(delimiter, _as_list(container.get("exclude"))))
            elif not find_children_of_type(children, "Constraint"):
                sections.append(self._default_constraints(delimiter, []))
        return sections

    @staticmethod
    def _default_role(props: Mapping[str, Any], context: "RenderContext", delimiter: str) -> Node:
        preset_key = props.get("role") or context.env.role
        preset = ROLE_PRESETS.get(preset_key)
        title = preset.title if preset else preset_key
        parts = [f"{ROLE_PREFIX}a helpful {title}."]
        expertise = _as_list(props.get("expertise")) or (list(preset.expertise) if preset else [])
        if expertise:
            parts.append(f"You have expertise in {', '.join(expertise)}.")
        return wrap_with_delimiter(" ".join(parts), "role", delimiter)

    @staticmethod
    def _default_constraints(delimiter: str, exclude: list[str]) -> Node:
        constraints = [text for text in DEFAULT_CONSTRAINTS if not any(ex.lower() in text.lower() for ex in exclude)]
        return wrap_with_delimiter("\n".join(f"- {text}" for text in constraints), "constraints", delimiter)


class Role(Component):
    """Who the model should be, from a preset, explicit props, or free text."""

    schema = Schema(
        {
            "preset": Field(type="string"),
            "title": Field(type="string"),
            "expertise": _STRING_LIST,
            "experience": Field(type="string", enum=tuple(EXPERIENCE_PREFIXES)),
            "traits": _STRING_LIST,
            "domain": Field(type="string"),
            "delimiter": DELIMITER_FIELD,
        }
    )

    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        children = props["children"]
        delimiter = self.delimiter(props, context)
        expertise = _as_list(props.get("expertise"))
        domain = props.get("domain")

        if self.has_content(children):
            content: list[Node] = [children]
            if expertise:
                content.append(f"\nwith expertise in {', '.join(expertise)}")
            if domain:
                content.append(f"\nspecializing in the {domain} domain")
            return wrap_with_delimiter(content, "role", delimiter)

        preset = ROLE_PRESETS.get(props.get("preset") or "")
        title = props.get("title") or (preset.title if preset else "Assistant")
        experience = props.get("experience") or (preset.experience if preset else None)
        prefix = EXPERIENCE_PREFIXES.get(experience or "", "")

        for item in preset.expertise if preset else ():
            if not any(existing.lower() == item.lower() for existing in expertise):
                expertise.append(item)

        first = f"{ROLE_PREFIX}{prefix}{title}"
        if expertise:
            first += f" with expertise in {', '.join(expertise)}"
        parts = [first + "."]

        traits = _as_list(props.get("traits")) or (list(preset.traits) if preset else [])
        if traits:
            parts.append(f"You are {', '.join(traits)}.")
        if domain:
            parts.append(f"Specializing in the {domain} domain.")
        return wrap_with_delimiter(" ".join(parts), "role", delimiter)


class _Section(Component):
    """Wraps its children in a section named ``section_name``."""

    tag = "_Section"
    section_name = "section"
    schema = Schema({"delimiter": DELIMITER_FIELD})

    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        return wrap_with_delimiter(props["children"], self.section_name, self.delimiter(props, context))


class Task(_Section):
    section_name = "task"


class Context(_Section):
    section_name = "context"


class Section(Component):
    """Generic named section: ``<Section name="notes">...</Section>``."""

    schema = Schema({"name": Field(type="string"), "delimiter": DELIMITER_FIELD})

    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        return wrap_with_delimiter(props["children"], props.get("name") or "section", self.delimiter(props, context))


_CONSTRAINT_PREFIXES = {"must": "MUST: ", "should": "SHOULD: ", "must-not": "MUST NOT: ", "may": "MAY: "}


class Constraint(Component):
    """One rule, optionally prefixed by its strength (``type="must"``)."""

    schema = Schema({"type": Field(type="string", enum=tuple(_CONSTRAINT_PREFIXES)), "delimiter": DELIMITER_FIELD})

    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        prefix = _CONSTRAINT_PREFIXES.get(props.get("type") or "", "")
        return wrap_with_delimiter([prefix, props["children"]], "constraint", self.delimiter(props, context))


class Constraints(Component):
    """Container for Constraint children.

    Replaces the Prompt's default constraints, or adds to them with ``extend``
    (minus any default mentioning a word listed in ``exclude``).
    """

    schema = Schema({"extend": _FLAG, "exclude": _STRING_LIST, "delimiter": DELIMITER_FIELD})

    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        return wrap_with_delimiter(props["children"], "constraints", self.delimiter(props, context))


_FORMAT_TYPES = ("json", "markdown", "xml", "text", "code", "yaml", "csv", "list", "table")


class Format(Component):
    """Output format instructions."""

    schema = Schema(
        {
            "type": Field(type="string", enum=_FORMAT_TYPES),
            "language": Field(type="string"),
            "schema": Field(type="any"),
            "template": Field(type="string"),
            "example": Field(type="string"),
            "strict": _FLAG,
            "validate": _FLAG,
            "maxLength": Field(type="number", coerce=True),
            "minLength": Field(type="number", coerce=True),
            "delimiter": DELIMITER_FIELD,
        }
    )

    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        children = props["children"]
        delimiter = self.delimiter(props, context)
        format_type = props.get("type")
        if self.has_content(children) and not format_type:
            return wrap_with_delimiter(children, "format", delimiter)

        description = format_type or DEFAULT_FORMAT
        if language := props.get("language"):
            description = f"{description} ({language})"
        sections: list[Node] = [f"Output format: {description}"]

        if (schema := props.get("schema")) is not None:
            schema_text = schema if isinstance(schema, str) else json.dumps(schema, indent=2)
            sections.append(f"\n\nSchema:\n```json\n{schema_text}\n```")
        if template := props.get("template"):
            sections.append(f"\n\nFollow this structure:\n{template}")
        if example := props.get("example"):
            sections.append(f"\n\nExample output:\n{example}")
        if max_length := props.get("maxLength"):
            sections.append(f"\n\nMaximum length: {max_length} characters.")
        if min_length := props.get("minLength"):
            sections.append(f"\n\nMinimum length: {min_length} characters.")
        if props.get("strict"):
            sections.append("\n\nReturn ONLY the formatted output with no additional text or explanation.")
        if props.get("validate"):
            sections.append("\n\nValidate your output matches the specified format before responding.")
        if self.has_content(children):
            sections.extend(["\n\n", children])
        return wrap_with_delimiter(sections, "format", delimiter)


class Audience(Component):
    """Who the answer is for."""

    schema = Schema(
        {
            "level": Field(type="string", enum=tuple(AUDIENCE_GUIDANCE)),
            "type": Field(type="string"),
            "description": Field(type="string"),
            "knowledgeLevel": Field(type="string"),
            "goals": _STRING_LIST,
            "delimiter": DELIMITER_FIELD,
        }
    )

    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        children = props["children"]
        delimiter = self.delimiter(props, context)
        if self.has_content(children):
            return wrap_with_delimiter(children, "audience", delimiter)

        lines: list[str] = []
        level, kind = props.get("level"), props.get("type")
        if level or kind:
            lines.append(f"Target audience: {' '.join(part for part in (level, kind) if part)} users")
        if description := props.get("description"):
            lines.append(description)
        if knowledge := props.get("knowledgeLevel"):
            lines.append(f"Assume they know: {knowledge}")
        if goals := _as_list(props.get("goals")):
            lines.append(f"Their goals: {', '.join(goals)}")
        if guidance := AUDIENCE_GUIDANCE.get(level or ""):
            lines.extend(["", guidance])
        return wrap_with_delimiter("\n".join(lines), "audience", delimiter)


class Tone(Component):
    """Voice and register of the answer."""

    schema = Schema(
        {
            "type": Field(type="string"),
            "formality": Field(type="string"),
            "energy": Field(type="string"),
            "warmth": Field(type="string"),
            "brandVoice": Field(type="string"),
            "avoidTones": _STRING_LIST,
            "delimiter": DELIMITER_FIELD,
        }
    )

    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        children = props["children"]
        delimiter = self.delimiter(props, context)
        if self.has_content(children):
            return wrap_with_delimiter(children, "tone", delimiter)

        lines: list[str] = []
        if tone := props.get("type"):
            lines.append(f"Tone: {tone}")
            if description := TONE_DESCRIPTIONS.get(tone):
                lines.append(description)
        characteristics = [f"{key}: {props[key]}" for key in ("formality", "energy", "warmth") if props.get(key)]
        if characteristics:
            lines.append(f"Voice characteristics: {', '.join(characteristics)}")
        if brand := props.get("brandVoice"):
            lines.append(f"Match the {brand} brand voice.")
        if avoid := _as_list(props.get("avoidTones")):
            lines.append(f"Avoid these tones: {', '.join(avoid)}")
        return wrap_with_delimiter("\n".join(lines), "tone", delimiter)


class WhenUncertain(Component):
    """How to behave when the request is ambiguous (default: ask clarifying questions)."""

    schema = Schema(
        {
            "action": Field(type="string", enum=tuple(UNCERTAINTY_ACTIONS), default="ask"),
            "delimiter": DELIMITER_FIELD,
        }
    )

    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        content: list[Node] = [UNCERTAINTY_ACTIONS[props["action"]]]
        if self.has_content(props["children"]):
            content.extend(["\n", props["children"]])
        return wrap_with_delimiter(content, "uncertainty-handling", self.delimiter(props, context))


class SuccessCriteria(Component):
    """Container for Criterion children."""

    schema = Schema({"delimiter": DELIMITER_FIELD})

    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        return wrap_with_delimiter(props["children"], "success-criteria", self.delimiter(props, context))


class Criterion(Component):
    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        return ["- ", props["children"], "\n"]


STRUCTURAL_COMPONENTS: tuple[type[Component], ...] = (
    Prompt,
    Role,
    Task,
    Context,
    Section,
    Constraint,
    Constraints,
    Format,
    Audience,
    Tone,
    WhenUncertain,
    SuccessCriteria,
    Criterion,
)

__all__ = [
    "STRUCTURAL_COMPONENTS",
    "Audience",
    "Constraint",
    "Constraints",
    "Context",
    "Criterion",
    "Format",
    "Prompt",
    "Role",
    "Section",
    "SuccessCriteria",
    "Task",
    "Tone",
    "WhenUncertain",
]
