#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for rendering the syntax tree back to note markdown."""

import pytest

from notepress.ast.nodes import (
    BlockAnchor,
    BlockQuote,
    Code,
    CodeBlock,
    Document,
    Emphasis,
    Extension,
    FootnoteDefinition,
    FootnoteReference,
    HashTag,
    Heading,
    Image,
    LineBreak,
    Link,
    List,
    ListItem,
    MathBlock,
    MathInline,
    NoteRef,
    Paragraph,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
    UserTag,
    WikiLink,
    Yaml,
)
from notepress.renderers.markdown import MarkdownRenderer, render_markdown


def _md(*children, **kwargs) -> str:
    return MarkdownRenderer(**kwargs).render_to_string(Document(children=list(children)))


def _para(*inline) -> Paragraph:
    return Paragraph(children=list(inline))


def _item(text: str, **kwargs) -> ListItem:
    return ListItem(children=[_para(Text(value=text))], **kwargs)


@pytest.mark.unit
class TestBlocks:
    """Test block rendering."""

    def test_empty_document(self) -> None:
        """Test that an empty document renders to nothing."""
        assert render_markdown(Document()) == ""

    def test_blocks_separated_by_blank_lines(self) -> None:
        """Test block separation and the single trailing newline."""
        result = _md(Heading(level=2, children=[Text(value="Title")]), _para(Text(value="Body")))
        assert result == "## Title\n\nBody\n"

    def test_frontmatter(self) -> None:
        """Test that frontmatter keeps its fences."""
        assert _md(Yaml(value="title: Hi"), _para(Text(value="x"))) == "---\ntitle: Hi\n---\n\nx\n"

    def test_code_block_fence_grows(self) -> None:
        """Test that the fence is longer than any backtick run inside."""
        assert _md(CodeBlock(value="a ``` b", lang="md", meta="x")) == "````md x\na ``` b\n````\n"

    def test_empty_code_block(self) -> None:
        """Test an empty fenced block."""
        assert _md(CodeBlock(value="")) == "```\n```\n"

    def test_block_quote(self) -> None:
        """Test quoting of nested blocks, blank lines included."""
        quote = BlockQuote(children=[_para(Text(value="a")), _para(Text(value="b"))])
        assert _md(quote) == "> a\n>\n> b\n"

    def test_tight_list_with_defaults(self) -> None:
        """Test that lists without their own bullet use the renderer's."""
        assert _md(List(children=[_item("one"), _item("two")])) == "- one\n- two\n"
        assert _md(List(children=[_item("one")]), bullet="*", list_item_indent=3) == "*   one\n"

    def test_list_bullet_and_indent_from_node(self) -> None:
        """Test that list-format settings on the node win."""
        node = List(children=[_item("one")], bullet="+", list_item_indent=2)
        assert _md(node) == "+  one\n"

    def test_ordered_loose_list(self) -> None:
        """Test numbering from the start value and loose spacing."""
        node = List(ordered=True, start=3, tight=False, children=[_item("c"), _item("d")])
        assert _md(node) == "3. c\n\n4. d\n"

    def test_nested_list_indented(self) -> None:
        """Test that item content is indented under the marker."""
        inner = List(children=[_item("child")])
        outer = List(children=[ListItem(children=[_para(Text(value="parent")), inner])])
        assert _md(outer) == "- parent\n  - child\n"

    def test_task_items(self) -> None:
        """Test task checkboxes."""
        node = List(children=[_item("done", checked=True), _item("open", checked=False)])
        assert _md(node) == "- [x] done\n- [ ] open\n"

    def test_table(self) -> None:
        """Test table rows, alignment markers and pipe escaping."""
        rows = [
            TableRow(children=[TableCell(children=[Text(value="a")]), TableCell(children=[Text(value="b")])]),
            TableRow(children=[TableCell(children=[Text(value="x|y")])]),
        ]
        assert _md(Table(align=["left", "right"], children=rows)) == "| a | b |\n| :-- | --: |\n| x\\|y |  |\n"

    def test_misc_blocks(self) -> None:
        """Test thematic breaks, display math and footnote definitions."""
        definition = FootnoteDefinition(identifier="n", children=[_para(Text(value="Source."))])
        assert _md(ThematicBreak(), MathBlock(value="y = 1"), definition) == "***\n\n$$\ny = 1\n$$\n\n[^n]: Source.\n"


@pytest.mark.unit
class TestInline:
    """Test inline rendering."""

    def test_formatting(self) -> None:
        """Test emphasis, strong and code."""
        node = _para(Emphasis(children=[Text(value="a")]), Text(value=" "), Strong(children=[Text(value="b")]))
        assert _md(node) == "*a* **b**\n"
        assert _md(_para(Code(value="x ` y"))) == "``x ` y``\n"
        assert _md(_para(Code(value="`tick"))) == "`` `tick ``\n"

    def test_links_and_images(self) -> None:
        """Test link and image syntax."""
        link = Link(url="https://example.com", title="T", children=[Text(value="ex")])
        image = Image(url="a.png", alt="A [b]")
        assert _md(_para(link, Text(value=" "), image)) == '[ex](https://example.com "T") ![A \\[b\\]](a.png)\n'

    def test_image_props(self) -> None:
        """Test that extended image properties are written back."""
        image = Image(url="a.png", data={"props": {"width": "50%"}})
        assert _md(_para(image)) == "![](a.png){width: 50%}\n"

    def test_line_break(self) -> None:
        """Test hard line breaks."""
        assert _md(_para(Text(value="a"), LineBreak(), Text(value="b"))) == "a\\\nb\n"

    def test_math_and_footnote_reference(self) -> None:
        """Test inline math and footnote references."""
        assert _md(_para(MathInline(value="x"), FootnoteReference(identifier="n"))) == "$x$[^n]\n"


@pytest.mark.unit
class TestDialect:
    """Test that dialect nodes are written back as dialect syntax."""

    def test_wikilinks(self) -> None:
        """Test wikilinks with alias, vault and anchor."""
        node = WikiLink(value="projects", alias="All", vault_name="main", anchor_header="usage")
        assert _md(_para(node)) == "[[All|dendron://main/projects#usage]]\n"

    def test_note_ref(self) -> None:
        """Test that references are written as their source, even when expanded."""
        ref = NoteRef(value="projects", anchor="^b", children=[_para(Text(value="expanded"))])
        assert _md(ref) == "![[projects#^b]]\n"

    def test_tags(self) -> None:
        """Test hashtags and user tags."""
        node = _para(HashTag(value="#idea", fname="tags.idea"), Text(value=" "), UserTag(value="@kim", fname="user.kim"))
        assert _md(node) == "#idea @kim\n"

    def test_block_anchor_spacing(self) -> None:
        """Test that block anchors are separated from the preceding text."""
        assert _md(_para(Text(value="text"), BlockAnchor(value="a"))) == "text ^a\n"
        assert _md(_para(Text(value="text "), BlockAnchor(value="a"))) == "text ^a\n"

    def test_extension_fallback(self) -> None:
        """Test that unknown nodes render their content."""
        literal = Extension(kind="custom", value="lit")
        block = Extension(kind="box", children=[_para(Text(value="a")), _para(Text(value="b"))])
        assert _md(_para(literal)) == "lit\n"
        assert _md(block) == "a\n\nb\n"
