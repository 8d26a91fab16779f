"""Recursive-descent parser for the tag-based prompt template grammar.

Grammar (informal)::

    document   := misc* element misc*
    element    := '<' NAME attribute* ( '/>' | '>' content* '</' NAME '>' )
    attribute  := ATTR_NAME ( '=' ( QUOTED | '{' EXPR '}' ) )?
    content    := element | comment | '{' EXPR '}' | TEXT
    comment    := '<!--' ... '-->' | '{/*' ... '*/}'

``NAME`` may be dotted (``Ask.Text``, ``acme.Greeting``). ``EXPR`` is a JSON
literal (``{5}``, ``{true}``, ``{["a", "b"]}``) or a single-quoted string.
A bare attribute (``<Prompt bare>``) has the value ``True``.
"""

import html
import json
import re
from typing import Any

from ai_prompt_core.elements import Element, SourcePosition
from ai_prompt_core.exceptions import PromptSyntaxError

from ._text import normalize_text

_NAME_RE = re.compile(r"[A-Za-z_][\w\-]*(?:\.[A-Za-z_][\w\-]*)*")
_ATTR_NAME_RE = re.compile(r"[A-Za-z_][\w\-:]*")
_SINGLE_QUOTED_RE = re.compile(r"'((?:[^'\\]|\\.)*)'", re.DOTALL)

_RAW = "raw"
_EXPR = "expr"


class _Parser:
    """Single-use cursor over one source text."""

    def __init__(self, source: str, filename: str) -> None:
        self.source = source
        self.filename = filename
        self.pos = 0
        self.length = len(source)

    # -- positions and errors -------------------------------------------------

    def position_at(self, pos: int) -> SourcePosition:
        line = self.source.count("\n", 0, pos) + 1
        line_start = self.source.rfind("\n", 0, pos) + 1
        return SourcePosition(self.filename, line, pos - line_start + 1)

    def error(self, message: str, pos: int | None = None) -> PromptSyntaxError:
        where = self.position_at(self.pos if pos is None else pos)
        return PromptSyntaxError(message, filename=where.filename, line=where.line, column=where.column)

    # -- low-level scanning ---------------------------------------------------

    def at_end(self) -> bool:
        return self.pos >= self.length

    def startswith(self, token: str) -> bool:
        return self.source.startswith(token, self.pos)

    def skip_whitespace(self) -> None:
        while self.pos < self.length and self.source[self.pos].isspace():
            self.pos += 1

    def skip_comment(self) -> bool:
        """Skip an HTML or JSX comment at the cursor; return whether one was found."""
        for opener, closer in (("<!--", "-->"), ("{/*", "*/}")):
            if self.startswith(opener):
                end = self.source.find(closer, self.pos + len(opener))
                if end < 0:
                    raise self.error("unterminated comment")
                self.pos = end + len(closer)
                return True
        return False

    def read_name(self, pattern: re.Pattern[str], what: str) -> str:
        match = pattern.match(self.source, self.pos)
        if not match:
            found = self.source[self.pos] if not self.at_end() else "end of input"
            raise self.error(f"expected {what}, found {found!r}")
        self.pos = match.end()
        return match.group(0)

    # -- document -------------------------------------------------------------

    def parse_document(self) -> Element:
        roots: list[Element] = []
        while True:
            self.skip_whitespace()
            if self.at_end():
                break
            if self.skip_comment():
                continue
            if self.startswith("<"):
                start = self.pos
                element = self.parse_element()
                if roots:
                    raise self.error("ambiguous root: more than one top-level element", start)
                roots.append(element)
                continue
            raise self.error("unexpected text outside the root element")
        if not roots:
            raise self.error("missing root element", 0)
        return roots[0]

    # -- elements -------------------------------------------------------------

    def parse_element(self) -> Element:
        start = self.pos
        self.pos += 1  # '<'
        if self.startswith("/"):
            raise self.error("unexpected closing tag", start)
        tag = self.read_name(_NAME_RE, "tag name")
        props = self.parse_attributes(tag)

        if self.startswith("/>"):
            self.pos += 2
            return Element(tag=tag, props=props, children=(), position=self.position_at(start))
        if not self.startswith(">"):
            raise self.error(f"malformed attribute in <{tag}>")
        self.pos += 1

        children = self.parse_children(tag, start)
        return Element(tag=tag, props=props, children=children, position=self.position_at(start))

    def parse_attributes(self, tag: str) -> dict[str, Any]:
        props: dict[str, Any] = {}
        while True:
            had_space = self.pos < self.length and self.source[self.pos].isspace()
            self.skip_whitespace()
            if self.at_end():
                raise self.error(f"unclosed tag <{tag}>")
            if self.startswith("/>") or self.startswith(">"):
                return props
            if not had_space:
                raise self.error(f"malformed attribute in <{tag}>")
            attr_start = self.pos
            if not _ATTR_NAME_RE.match(self.source, self.pos):
                raise self.error(f"malformed attribute in <{tag}>")
            name = self.read_name(_ATTR_NAME_RE, "attribute name")
            if name in props:
                raise self.error(f"duplicate attribute '{name}' in <{tag}>", attr_start)
            if self.startswith("="):
                self.pos += 1
                props[name] = self.parse_attribute_value(tag, name)
            else:
                props[name] = True

    def parse_attribute_value(self, tag: str, name: str) -> Any:
        if self.startswith('"') or self.startswith("'"):
            quote = self.source[self.pos]
            end = self.source.find(quote, self.pos + 1)
            if end < 0:
                raise self.error(f"unterminated value for attribute '{name}' in <{tag}>")
            raw = self.source[self.pos + 1 : end]
            self.pos = end + 1
            return html.unescape(raw)
        if self.startswith("{"):
            return self.parse_expression()
        raise self.error(f"malformed attribute '{name}' in <{tag}>: expected a quoted value or {{expression}}")

    def parse_expression(self) -> Any:
        """Parse ``{...}`` at the cursor and return its literal value."""
        start = self.pos
        depth = 0
        quote: str | None = None
        index = self.pos
        while index < self.length:
            char = self.source[index]
            if quote:
                if char == "\\":
                    index += 2
                    continue
                if char == quote:
                    quote = None
            elif char in "\"'":
                quote = char
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    break
            index += 1
        else:
            raise self.error("unterminated expression", start)

        body = self.source[start + 1 : index].strip()
        self.pos = index + 1
        if not body:
            raise self.error("empty expression", start)
        try:
            return json.loads(body)
        except json.JSONDecodeError:
            pass
        match = _SINGLE_QUOTED_RE.fullmatch(body)
        if match:
            return match.group(1).replace("\\'", "'")
        raise self.error(f"unsupported expression {{{body}}}: only literal values are allowed", start)

    def parse_children(self, tag: str, start: int) -> tuple[Element | str, ...]:
        parts: list[tuple[str, Any]] = []
        text_start = self.pos
        while True:
            if self.at_end():
                raise self.error(f"unclosed tag <{tag}>", start)
            if self.startswith("<!--") or self.startswith("{/*"):
                self._flush_text(parts, text_start)
                self.skip_comment()
                text_start = self.pos
                continue
            if self.startswith("</"):
                self._flush_text(parts, text_start)
                close_start = self.pos
                self.pos += 2
                closing = self.read_name(_NAME_RE, "closing tag name")
                self.skip_whitespace()
                if not self.startswith(">"):
                    raise self.error(f"malformed closing tag </{closing}>")
                self.pos += 1
                if closing != tag:
                    raise self.error(f"mismatched closing tag </{closing}>, expected </{tag}>", close_start)
                return self._finish_children(parts)
            if self.startswith("<"):
                self._flush_text(parts, text_start)
                parts.append(("element", self.parse_element()))
                text_start = self.pos
                continue
            if self.startswith("{"):
                self._flush_text(parts, text_start)
                parts.append((_EXPR, self.parse_expression()))
                text_start = self.pos
                continue
            self.pos += 1

    def _flush_text(self, parts: list[tuple[str, Any]], text_start: int) -> None:
        if self.pos > text_start:
            parts.append((_RAW, self.source[text_start : self.pos]))

    @staticmethod
    def _finish_children(parts: list[tuple[str, Any]]) -> tuple[Element | str, ...]:
        children: list[Element | str] = []
        last_index = len(parts) - 1
        for index, (kind, value) in enumerate(parts):
            if kind == _RAW:
                text = normalize_text(value, is_first=index == 0, is_last=index == last_index)
                if text is not None:
                    children.append(html.unescape(text))
            elif kind == _EXPR:
                rendered = _expression_text(value)
                if rendered:
                    children.append(rendered)
            else:
                children.append(value)
        return tuple(children)


def _expression_text(value: Any) -> str:
    """Text produced by an expression child; booleans and null render nothing."""
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, int | float):
        return str(value)
    return json.dumps(value)


def parse(source: str, filename: str = "<string>", *, root_tag: str | None = "Prompt") -> Element:
    """Parse template source text into an element tree.

    Args:
        source: Template text.
        filename: Name used in positions and error messages.
        root_tag: Required tag of the single root element, or None to accept any tag.

    Raises:
        PromptSyntaxError: On unclosed or mismatched tags, malformed attributes,
            unsupported expressions, or a missing, ambiguous or unexpected root.
    """
    parser = _Parser(source, filename)
    root = parser.parse_document()
    if root_tag is not None and root.tag != root_tag:
        raise PromptSyntaxError(
            f"expected root element <{root_tag}>, found <{root.tag}>",
            filename=root.position.filename,
            line=root.position.line,
            column=root.position.column,
        )
    return root


__all__ = ["parse"]
