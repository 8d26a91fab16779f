"""Tests for the template parser."""

import pytest

from ai_prompt_core.elements import Element
from ai_prompt_core.exceptions import PromptSyntaxError
from ai_prompt_core.parser import parse


def _shape(node: Element | str) -> object:
    """Structural form of a tree for equality checks (elements compare by identity)."""
    if isinstance(node, str):
        return node
    return (node.tag, dict(node.props), [_shape(child) for child in node.children])


class TestElements:
    def test_bare_root_with_child(self):
        root = parse("<Prompt bare><Task>Answer questions.</Task></Prompt>")
        assert root.tag == "Prompt"
        assert root.props == {"bare": True}
        (task,) = root.children
        assert isinstance(task, Element)
        assert task.tag == "Task"
        assert task.children == ("Answer questions.",)

    def test_self_closing_and_dotted_tags(self):
        root = parse('<Prompt><Ask.Text name="topic"/><acme.Greeting /></Prompt>')
        assert [child.tag for child in root.children] == ["Ask.Text", "acme.Greeting"]
        assert root.children[0].namespace == "Ask"
        assert root.children[1].namespace == "acme"

    def test_positions_are_recorded(self):
        root = parse("<Prompt>\n  <Task>x</Task>\n</Prompt>", "p.prompt")
        (task,) = root.children
        assert task.position.filename == "p.prompt"
        assert (task.position.line, task.position.column) == (2, 3)
        assert str(root.position) == "p.prompt:1:1"

    def test_comments_are_skipped(self):
        root = parse("<!-- header --><Prompt><!-- note --><Task>x</Task>{/* jsx comment */}</Prompt>")
        assert [_shape(child) for child in root.children] == [("Task", {}, ["x"])]

    def test_parsing_is_deterministic(self):
        source = '<Prompt name="p">\n  <Task>Do <b>it</b> {2}</Task>\n  <Format type="json"/>\n</Prompt>'
        assert _shape(parse(source, root_tag=None)) == _shape(parse(source, root_tag=None))

    def test_parsed_elements_have_one_parent(self):
        root = parse("<Prompt><Task>a</Task><Task>a</Task><Section><Task>a</Task></Section></Prompt>")
        elements = list(root.iter_elements())
        assert len(elements) == 5
        assert len({id(element) for element in elements}) == 5

    def test_any_root_when_root_tag_is_none(self):
        root = parse("<Task>x</Task>", root_tag=None)
        assert root.tag == "Task"


class TestAttributes:
    def test_quoted_values_are_unescaped(self):
        root = parse("<Prompt title=\"a &amp; b\" note='single'/>")
        assert root.props == {"title": "a & b", "note": "single"}

    def test_expression_values_are_json_literals(self):
        root = parse('<Prompt count={3} ratio={0.5} on={true} off={false} nothing={null} tags={["a", "b"]} meta={{"k": 1}}/>')
        assert root.props["count"] == 3
        assert root.props["ratio"] == 0.5
        assert root.props["on"] is True
        assert root.props["off"] is False
        assert root.props["nothing"] is None
        assert root.props["tags"] == ("a", "b")
        assert root.props["meta"] == {"k": 1}

    def test_single_quoted_expression(self):
        root = parse("<Prompt label={'it\\'s'}/>")
        assert root.props["label"] == "it's"

    def test_attribute_order_is_preserved(self):
        root = parse('<Prompt z="1" a="2" m="3"/>')
        assert list(root.props) == ["z", "a", "m"]


class TestText:
    def test_inline_text_is_kept_verbatim(self):
        root = parse("<Task>Say <b>hi</b> to  them</Task>", root_tag=None)
        assert _shape(root)[2] == ["Say ", ("b", {}, ["hi"]), " to  them"]

    def test_indentation_is_removed(self):
        source = "<Task>\n    Line one\n      indented\n    Line three\n  </Task>"
        root = parse(source, root_tag=None)
        assert root.children == ("Line one\n  indented\nLine three",)

    def test_whitespace_between_tags_is_dropped(self):
        root = parse("<Prompt>\n  <Task>a</Task>\n\n  <Task>b</Task>\n</Prompt>")
        assert [child.tag for child in root.children] == ["Task", "Task"]

    def test_expression_children(self):
        root = parse("<Task>Count: {3} {\"x\"}{null}{true}</Task>", root_tag=None)
        assert root.children == ("Count: ", "3", " ", "x")

    def test_entities_in_text(self):
        root = parse("<Task>a &lt; b</Task>", root_tag=None)
        assert root.children == ("a < b",)


class TestErrors:
    @pytest.mark.parametrize(
        ("source", "message"),
        [
            ("", "missing root element"),
            ("   \n  ", "missing root element"),
            ("<Prompt/><Prompt/>", "ambiguous root"),
            ("hello <Prompt/>", "unexpected text outside the root element"),
            ("<Prompt a=\"1\"b=\"2\"/>", "malformed attribute in <Prompt>"),
            ("<Prompt name=value/>", "malformed attribute 'name' in <Prompt>"),
            ('<Prompt a="1" a="2"/>', "duplicate attribute 'a'"),
            ("<Prompt x={a + b}/>", "unsupported expression"),
            ("<Prompt x={}/>", "empty expression"),
            ("<Prompt><!-- open</Prompt>", "unterminated comment"),
            ("</Prompt>", "unexpected closing tag"),
        ],
    )
    def test_syntax_errors(self, source: str, message: str):
        with pytest.raises(PromptSyntaxError) as exc_info:
            parse(source)
        assert message in exc_info.value.reason

    def test_unclosed_tag_reports_opening_position(self):
        with pytest.raises(PromptSyntaxError) as exc_info:
            parse("<Prompt><Task>x", "t.prompt")
        error = exc_info.value
        assert error.reason == "unclosed tag <Task>"
        assert (error.line, error.column) == (1, 9)
        assert str(error).startswith("t.prompt:1:9: ")
        assert error.code == "syntax_error"

    def test_mismatched_closing_tag(self):
        with pytest.raises(PromptSyntaxError) as exc_info:
            parse("<Prompt><Task>x</Prompt>")
        assert exc_info.value.reason == "mismatched closing tag </Prompt>, expected </Task>"
        assert exc_info.value.column == 16

    def test_error_line_numbers_count_newlines(self):
        with pytest.raises(PromptSyntaxError) as exc_info:
            parse("<Prompt>\n\n  <Task a=\"1\" a=\"2\">x</Task>\n</Prompt>")
        assert exc_info.value.line == 3

    def test_wrong_root_tag(self):
        with pytest.raises(PromptSyntaxError, match=r"expected root element <Prompt>, found <Task>"):
            parse("<Task>x</Task>")
