#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for rendering tree nodes and HTML serialization."""

import pytest

from notepress.exceptions import RenderingError
from notepress.hast.nodes import Comment, Element, Raw, Root, Text, iter_elements, text_content
from notepress.hast.serialize import serialize_properties, to_html


@pytest.mark.unit
class TestSerializeProperties:
    """Test attribute rendering."""

    def test_values(self) -> None:
        """Test strings, lists, booleans and omitted values."""
        props = {"class": ["a", "b"], "checked": True, "disabled": False, "title": None, "id": "x"}
        assert serialize_properties(props) == ' class="a b" checked id="x"'

    def test_escaping(self) -> None:
        """Test that attribute values are escaped."""
        assert serialize_properties({"title": 'say "hi" & <go>'}) == ' title="say &quot;hi&quot; &amp; &lt;go&gt;"'

    def test_empty_list_omitted(self) -> None:
        """Test that an empty class list renders nothing."""
        assert serialize_properties({"class": []}) == ""


@pytest.mark.unit
class TestToHtml:
    """Test tree serialization."""

    def test_text_escaped(self) -> None:
        """Test that text is escaped but quotes are kept."""
        assert to_html(Text(value='a < b & "c"')) == 'a &lt; b &amp; "c"'

    def test_nested_elements(self) -> None:
        """Test nested elements under a root."""
        tree = Root(children=[Element(tag_name="p", children=[Element(tag_name="em", children=[Text(value="x")])])])
        assert to_html(tree) == "<p><em>x</em></p>"

    def test_void_elements(self) -> None:
        """Test that void elements have no closing tag."""
        tree = Root(children=[Element(tag_name="img", properties={"src": "a.png", "alt": ""}), Element(tag_name="br")])
        assert to_html(tree) == '<img src="a.png" alt=""><br>'

    def test_comment(self) -> None:
        """Test comments."""
        assert to_html(Comment(value=" note ")) == "<!-- note -->"

    def test_raw(self) -> None:
        """Test raw fragments with and without dangerous HTML."""
        tree = Root(children=[Raw(value="<b>x</b>"), Text(value="y")])
        assert to_html(tree) == "<b>x</b>y"
        assert to_html(tree, allow_dangerous_html=False) == "y"

    def test_foreign_object_rejected(self) -> None:
        """Test that non-rendering nodes raise."""
        with pytest.raises(RenderingError, match="Cannot serialize str"):
            to_html(Root(children=["text"]))


@pytest.mark.unit
class TestNodeHelpers:
    """Test element helpers and traversal."""

    def test_class_list(self) -> None:
        """Test class lists given as lists or strings."""
        assert Element(tag_name="p", properties={"class": "a b"}).class_list() == ["a", "b"]
        assert Element(tag_name="p", properties={"class": ["a"]}).has_class("a")
        assert Element(tag_name="p").class_list() == []

    def test_iter_elements(self) -> None:
        """Test document-order traversal with a tag filter."""
        tree = Root(
            children=[
                Element(tag_name="h1", children=[Text(value="A")]),
                Element(tag_name="div", children=[Element(tag_name="h2", children=[Text(value="B")])]),
            ]
        )
        assert [e.tag_name for e in iter_elements(tree)] == ["h1", "div", "h2"]
        assert [text_content(e) for e in iter_elements(tree, {"h1", "h2"})] == ["A", "B"]

    def test_node_types(self) -> None:
        """Test the node type tags."""
        assert [n.type for n in (Root(), Element(tag_name="p"), Text(value=""), Raw(value=""), Comment(value=""))] == [
            "root",
            "element",
            "text",
            "raw",
            "comment",
        ]
