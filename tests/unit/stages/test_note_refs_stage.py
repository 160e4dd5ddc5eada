#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for note reference expansion."""

import pytest

from notepress.ast.nodes import (
    BlockAnchor,
    Document,
    Extension,
    HashTag,
    Heading,
    Link,
    NoteRef,
    Paragraph,
    Text,
    WikiLink,
)
from notepress.ast.utils import extract_text, find_all
from notepress.config import NotepressConfig
from notepress.pipeline.context import PipelineContext
from notepress.stages.note_refs import NoteRefsStage, extract_section, format_note_ref
from notepress.stages.tags import HashtagsStage


def _refs(document: Document) -> list[NoteRef]:
    return find_all(document, NoteRef)


@pytest.mark.unit
class TestRecognition:
    """Test which paragraphs become references."""

    def test_reference_only_paragraph(self, parse, context) -> None:
        """Test that a reference-only paragraph is replaced."""
        result = NoteRefsStage().run(parse("![[projects]]\n"), context)
        assert find_all(result, Paragraph) == []
        ref = _refs(result)[0]
        assert (ref.value, ref.anchor, ref.vault_name) == ("projects", None, None)
        assert ref.data["h_name"] == "div"
        assert ref.data["h_properties"] == {"class": ["portal-container"]}

    def test_several_references(self, parse, context) -> None:
        """Test that each reference in the paragraph becomes a node."""
        result = NoteRefsStage().run(parse("![[a]] ![[dendron://other/b#^x]]\n"), context)
        refs = _refs(result)
        assert [r.value for r in refs] == ["a", "b"]
        assert (refs[1].vault_name, refs[1].anchor) == ("other", "^x")

    def test_mixed_paragraph_untouched(self, parse, context) -> None:
        """Test that references inside prose stay text."""
        result = NoteRefsStage().run(parse("See ![[projects]] here.\n"), context)
        assert _refs(result) == []
        assert extract_text(result) == "See ![[projects]] here."

    def test_unexpanded_without_notes(self, parse, context) -> None:
        """Test that nothing is expanded without notes."""
        ref = _refs(NoteRefsStage().run(parse("![[projects]]\n"), context))[0]
        assert ref.children == []
        assert context.diagnostics == []

    def test_format_note_ref(self) -> None:
        """Test rebuilding the source of a reference."""
        assert format_note_ref(NoteRef(value="p", anchor="h", vault_name="v")) == "![[dendron://v/p#h]]"


@pytest.mark.unit
class TestExpansion:
    """Test expansion of references against the sample notes."""

    def test_whole_note(self, parse, note_context) -> None:
        """Test that a whole note is expanded behind a title."""
        ref = _refs(NoteRefsStage().run(parse("![[projects.alpha]]\n"), note_context))[0]
        title, content = ref.children

        assert isinstance(title, Extension) and title.kind == "note_ref_title"
        assert title.data["h_properties"] == {"class": ["portal-head"]}
        link = title.children[0]
        assert isinstance(link, WikiLink)
        assert (link.value, link.alias) == ("projects.alpha", "Alpha")

        assert content.kind == "note_ref_content"
        assert content.data["processed"] is True
        assert content.data["h_properties"] == {"class": ["portal-body"]}
        assert extract_text(content) == "Alpha links to projects."

    def test_nested_content_fully_processed(self, parse, note_context) -> None:
        """Test that the referenced body ran through a FULL pipeline."""
        ref = _refs(NoteRefsStage().run(parse("![[projects.alpha]]\n"), note_context))[0]
        links = find_all(ref.children[1], Link)
        assert len(links) == 1
        assert links[0].data["wikilink"]["fname"] == "projects"
        assert find_all(ref.children[1], Heading) == []

    def test_heading_section(self, parse, note_context) -> None:
        """Test that a heading anchor selects the heading's section."""
        ref = _refs(NoteRefsStage().run(parse("![[projects#usage]]\n"), note_context))[0]
        content = ref.children[1]
        assert isinstance(content.children[0], Heading)
        assert extract_text(content.children[0]) == "Usage"
        assert len(content.children) == 2
        assert "Not yet." not in extract_text(content)

    def test_block_section(self, parse, note_context) -> None:
        """Test that a block anchor selects the block holding it."""
        ref = _refs(NoteRefsStage().run(parse("![[projects#^usage-block]]\n"), note_context))[0]
        content = ref.children[1]
        assert len(content.children) == 1
        assert find_all(content, BlockAnchor)[0].value == "usage-block"

    def test_without_pretty_refs(self, parse, note_context) -> None:
        """Test that the title container can be disabled."""
        note_context.config = NotepressConfig(enable_pretty_refs=False)
        ref = _refs(NoteRefsStage().run(parse("![[projects.beta]]\n"), note_context))[0]
        assert [child.kind for child in ref.children] == ["note_ref_content"]

    def test_no_data_expansion(self, parse, engine) -> None:
        """Test expansion from notes alone, without an engine."""
        context = PipelineContext(notes=engine.notes)
        ref = _refs(NoteRefsStage().run(parse("![[projects.alpha]]\n"), context))[0]
        content = ref.children[1]
        assert find_all(content, WikiLink)[0].value == "projects"
        assert find_all(content, Link) == []

    def test_case_insensitive_lookup(self, parse, note_context) -> None:
        """Test that references match note names case-insensitively."""
        ref = _refs(NoteRefsStage().run(parse("![[Projects.Beta]]\n"), note_context))[0]
        assert "error" not in ref.data


@pytest.mark.unit
class TestErrors:
    """Test references that cannot be expanded."""

    def test_missing_note(self, parse, note_context) -> None:
        """Test a reference to an unknown note."""
        ref = _refs(NoteRefsStage().run(parse("![[nowhere]]\n"), note_context))[0]
        assert ref.data["error"] == "Referenced note not found: nowhere"
        assert ref.data["h_properties"] == {"class": ["portal-container", "portal-error"]}
        assert ref.children == [Paragraph(children=[Text(value="Referenced note not found: nowhere")])]
        assert note_context.diagnostics[0].stage == "note-refs"

    def test_missing_anchor(self, parse, note_context) -> None:
        """Test a reference to an unknown section."""
        ref = _refs(NoteRefsStage().run(parse("![[projects#nothing]]\n"), note_context))[0]
        assert ref.data["error"] == "Anchor #nothing not found in projects"

    def test_self_reference_stops(self, parse, note_context) -> None:
        """Test that a note referencing itself stops at the depth limit."""
        ref = _refs(NoteRefsStage().run(parse("![[loop]]\n"), note_context))[0]
        assert "error" not in ref.data
        messages = [d.message for d in note_context.diagnostics]
        assert "Too many nested note references at loop (max depth 3)" in messages

    def test_depth_limit(self, parse, note_context) -> None:
        """Test that the current level is compared with max_depth."""
        note_context.note_ref_level = 1
        ref = _refs(NoteRefsStage(max_depth=1).run(parse("![[projects.beta]]\n"), note_context))[0]
        assert ref.data["error"] == "Too many nested note references at projects.beta (max depth 1)"


@pytest.mark.unit
class TestProcessedContent:
    """Test that expanded content is left alone by later stages."""

    def test_processed_subtree_skipped(self, context) -> None:
        """Test that outer stages do not rewrite processed content."""
        content = Extension(
            kind="note_ref_content",
            children=[Paragraph(children=[Text(value="#inner")])],
            data={"processed": True},
        )
        tree = Document(children=[content, Paragraph(children=[Text(value="#outer")])])
        result = HashtagsStage().run(tree, context)
        assert [tag.value for tag in find_all(result, HashTag)] == ["#outer"]


@pytest.mark.unit
class TestExtractSection:
    """Test section extraction from a processed document."""

    def _document(self) -> Document:
        return Document(
            children=[
                Heading(level=1, children=[Text(value="Top")]),
                Heading(level=2, children=[Text(value="First Part")]),
                Paragraph(children=[Text(value="one")]),
                Heading(level=3, children=[Text(value="Sub")]),
                Paragraph(children=[Text(value="two"), BlockAnchor(value="b2")]),
                Heading(level=2, children=[Text(value="Second")]),
            ]
        )

    def test_heading_includes_subsections(self) -> None:
        """Test that a section runs until a heading of the same level."""
        section = extract_section(self._document(), "First Part")
        assert [extract_text(node) for node in section] == ["First Part", "one", "Sub", "two"]

    def test_heading_matched_by_slug(self) -> None:
        """Test that the anchor may be given as a slug."""
        assert extract_section(self._document(), "first-part") is not None

    def test_block_anchor(self) -> None:
        """Test block anchor lookup."""
        section = extract_section(self._document(), "^b2")
        assert extract_text(section) == "two"

    def test_not_found(self) -> None:
        """Test unknown anchors."""
        assert extract_section(self._document(), "missing") is None
        assert extract_section(self._document(), "^missing") is None
