"""Immutable element tree produced by the parser and consumed by the render engine."""

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Union


@dataclass(frozen=True, slots=True)
class SourcePosition:
    """Location of an element's opening tag in its source file."""

    filename: str = "<string>"
    line: int = 1
    column: int = 1

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"


def _freeze(value: Any) -> Any:
    """Recursively convert JSON-like containers into immutable equivalents."""
    if isinstance(value, Mapping):
        return MappingProxyType({str(k): _freeze(v) for k, v in value.items()})
    if isinstance(value, list | tuple):
        return tuple(_freeze(v) for v in value)
    return value


def thaw(value: Any) -> Any:
    """Inverse of the freezing applied to props: mapping proxies become dicts, tuples become lists."""
    if isinstance(value, Mapping):
        return {k: thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [thaw(v) for v in value]
    return value


@dataclass(frozen=True, slots=True, eq=False)
class Element:
    """One template tag with its props and children.

    Elements are never mutated after creation. Props are stored as a read-only
    mapping in document order; children keep document order and are either
    nested elements or verbatim strings.

    Equality is identity-based, so two structurally equal subtrees are still
    distinct nodes. The parser gives every element exactly one parent;
    elements built in code (``create_element``, component output) may share
    a subtree between parents.
    """

    tag: str
    props: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    children: tuple["Element | str", ...] = ()
    position: SourcePosition = field(default_factory=SourcePosition)

    def __post_init__(self) -> None:
        if not self.tag:
            raise ValueError("Element tag must be a non-empty string")
        object.__setattr__(self, "props", MappingProxyType({str(k): _freeze(v) for k, v in self.props.items()}))
        children = tuple(self.children)
        for child in children:
            if not isinstance(child, Element | str):
                raise TypeError(f"Element <{self.tag}> child must be an Element or str, got {type(child).__name__}")
        object.__setattr__(self, "children", children)

    @property
    def namespace(self) -> str | None:
        """Namespace prefix of a dotted tag (``acme`` for ``acme.Greeting``)."""
        prefix, dot, _ = self.tag.rpartition(".")
        return prefix if dot else None

    def get(self, key: str, default: Any = None) -> Any:
        return self.props.get(key, default)

    def iter_elements(self) -> Iterator["Element"]:
        """Yield this element and all descendant elements in document (pre-)order."""
        yield self
        for child in self.children:
            if isinstance(child, Element):
                yield from child.iter_elements()

    def __repr__(self) -> str:
        return f"Element(tag={self.tag!r}, props={dict(self.props)!r}, children={len(self.children)}, position={self.position})"


def create_element(tag: str, props: Mapping[str, Any] | None = None, *children: "Element | str", position: SourcePosition | None = None) -> Element:
    """Convenience constructor used by pre-compiled templates and tests."""
    return Element(tag=tag, props=props or {}, children=tuple(children), position=position or SourcePosition())


Node = Union[str, Element, Sequence["Node"], None]
"""Anything a component render function may return."""


def iter_nodes(node: Node) -> Iterator["Element | str"]:
    """Flatten a node into its elements and strings, skipping None and empty sequences."""
    if node is None:
        return
    if isinstance(node, str | Element):
        yield node
        return
    for item in node:
        yield from iter_nodes(item)


def find_children_of_type(children: Iterable["Element | str"] | Node, tag: str) -> list[Element]:
    """Direct children with the given tag."""
    return [child for child in iter_nodes(children) if isinstance(child, Element) and child.tag == tag]


def has_content(children: Node) -> bool:
    """Whether children contain any element or non-blank text."""
    for child in iter_nodes(children):
        if isinstance(child, Element) or child.strip():
            return True
    return False


def text_content(children: Node) -> str:
    """Concatenated static text of a subtree, ignoring component semantics."""
    parts: list[str] = []
    for child in iter_nodes(children):
        if isinstance(child, Element):
            parts.append(text_content(child.children))
        else:
            parts.append(child)
    return "".join(parts)


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
