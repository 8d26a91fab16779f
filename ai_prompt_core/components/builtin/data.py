"""Components that embed code, data and file contents."""

import asyncio
import json
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ai_prompt_core.elements import Node
from ai_prompt_core.schema import Field, Schema

from ..base import DELIMITER_FIELD, Component
from ..delimiters import wrap_with_delimiter

if TYPE_CHECKING:
    from ai_prompt_core.render.context import RenderContext

EXTENSION_TO_LANGUAGE: dict[str, str] = {
    ".ts": "typescript",
    ".tsx": "typescript",
    ".js": "javascript",
    ".jsx": "javascript",
    ".json": "json",
    ".md": "markdown",
    ".py": "python",
    ".rb": "ruby",
    ".go": "go",
    ".rs": "rust",
    ".java": "java",
    ".c": "c",
    ".cpp": "cpp",
    ".h": "c",
    ".hpp": "cpp",
    ".css": "css",
    ".scss": "scss",
    ".html": "html",
    ".xml": "xml",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".sh": "bash",
    ".sql": "sql",
    ".toml": "toml",
}


class Code(Component):
    """Fenced code block; ``filename`` adds a comment line above it."""

    schema = Schema({"language": Field(type="string"), "filename": Field(type="string")})

    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        content: list[Node] = []
        if filename := props.get("filename"):
            content.append(f"<!-- {filename} -->\n")
        content.extend([f"```{props.get('language') or ''}\n", props["children"], "\n```\n"])
        return content


class Data(Component):
    """Raw data block named by ``name``."""

    schema = Schema({"name": Field(type="string"), "format": Field(type="string"), "delimiter": DELIMITER_FIELD})

    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        return wrap_with_delimiter(props["children"], props.get("name") or "data", self.delimiter(props, context))


class Json(Component):
    """Pretty-printed JSON of the ``value`` prop in a fenced block."""

    schema = Schema({"value": Field(type="any", required=True), "indent": Field(type="integer", coerce=True, default=2)})

    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        text = json.dumps(props["value"], indent=props["indent"] or None, ensure_ascii=False)
        return ["```json\n", text, "\n```\n"]


class File(Component):
    """Contents of a file as a fenced code block.

    Relative paths resolve against the render environment's working
    directory. An unreadable file renders an inline error note and records a
    ``warn_file_unreadable`` warning.
    """

    schema = Schema(
        {
            "path": Field(type="string", required=True),
            "language": Field(type="string"),
            "encoding": Field(type="string", default="utf-8"),
        }
    )

    async def resolve(self, props: Mapping[str, Any], context: "RenderContext") -> str | OSError:
        path = Path(props["path"]).expanduser()
        if not path.is_absolute():
            path = Path(context.env.cwd) / path
        try:
            return await asyncio.to_thread(path.read_text, encoding=props["encoding"])
        except (OSError, UnicodeDecodeError) as exc:
            return OSError(str(exc))

    def render(self, props: Mapping[str, Any], value: Any, context: "RenderContext") -> Node:
        raw_path = props["path"]
        if isinstance(value, OSError):
            context.warn("warn_file_unreadable", f"Cannot read file {raw_path}: {value}", component=self.tag)
            return f"[Error reading file: {value}]"
        language = props.get("language") or EXTENSION_TO_LANGUAGE.get(Path(raw_path).suffix.lower(), "")
        return [f"<!-- {Path(raw_path).name} -->\n", f"```{language}\n", value, "\n```\n"]


DATA_COMPONENTS: tuple[type[Component], ...] = (Code, Data, Json, File)

__all__ = ["DATA_COMPONENTS", "EXTENSION_TO_LANGUAGE", "Code", "Data", "File", "Json"]
