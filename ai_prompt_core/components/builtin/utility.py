"""Components that print facts about the render environment."""

import uuid
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ai_prompt_core.elements import Node
from ai_prompt_core.schema import Field, Schema

from ..base import Component

if TYPE_CHECKING:
    from ai_prompt_core.render.context import RenderContext


class Timestamp(Component):
    """Unix timestamp (seconds) of the render."""

    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        return str(context.env.timestamp)


class DateTime(Component):
    """Render time, ISO 8601 by default or formatted with a strftime ``format``."""

    schema = Schema({"format": Field(type="string")})

    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        if fmt := props.get("format"):
            return context.env.now.strftime(fmt)
        return context.env.now.isoformat(timespec="seconds")


class UUID(Component):
    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        return str(uuid.uuid4())


class Hostname(Component):
    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        return context.env.hostname


class Username(Component):
    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        return context.env.username


class Cwd(Component):
    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        return context.env.cwd


UTILITY_COMPONENTS: tuple[type[Component], ...] = (Timestamp, DateTime, UUID, Hostname, Username, Cwd)

__all__ = ["UTILITY_COMPONENTS", "UUID", "Cwd", "DateTime", "Hostname", "Timestamp", "Username"]
