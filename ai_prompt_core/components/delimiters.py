"""Section wrapping shared by structural components."""

from ai_prompt_core.elements import Node
from ai_prompt_core.settings import DelimiterStyle


def wrap_with_delimiter(content: Node, tag: str, style: DelimiterStyle) -> Node:
    """Wrap content as a named section.

    ``xml`` produces ``<tag>`` ... ``</tag>``, ``markdown`` a ``## tag``
    heading, ``none`` emits the content followed by a newline. The content is kept as a
    node so nested sections render in document order inside the wrapper.
    """
    match style:
        case "xml":
            return [f"<{tag}>\n", content, f"\n</{tag}>\n"]
        case "markdown":
            return [f"## {tag}\n\n", content, "\n\n"]
        case "none":
            return [content, "\n"]
        case _:
            raise ValueError(f"Unknown delimiter style: {style!r}")


__all__ = ["wrap_with_delimiter"]
