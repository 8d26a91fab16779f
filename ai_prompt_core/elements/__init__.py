"""Element model: the immutable tree between parser and render engine."""

from .element import (
    Element,
    Node,
    SourcePosition,
    create_element,
    find_children_of_type,
    has_content,
    iter_nodes,
    text_content,
    thaw,
)

__all__ = [
    "Element",
    "Node",
    "SourcePosition",
    "create_element",
    "find_children_of_type",
    "has_content",
    "iter_nodes",
    "text_content",
    "thaw",
]
