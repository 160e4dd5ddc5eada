#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the stages that recognize the note dialect."""

import re

import pytest

from notepress.ast.nodes import (
    Abbr,
    BlockAnchor,
    Document,
    Extension,
    FootnoteDefinition,
    FootnoteReference,
    HashTag,
    Highlight,
    Image,
    Link,
    List,
    Paragraph,
    Text,
    UserTag,
    WikiLink,
)
from notepress.ast.transforms import TextPatternTransformer
from notepress.ast.utils import extract_text, find_all
from notepress.pipeline.options import BacklinkHoverOptions
from notepress.stages.abbreviations import AbbreviationsStage
from notepress.stages.backlinks_hover import BacklinksHoverStage
from notepress.stages.block_anchors import BlockAnchorsStage
from notepress.stages.extended_image import ExtendedImageStage, props_to_style
from notepress.stages.footnotes import FootnotesStage
from notepress.stages.frontmatter import FrontmatterStage
from notepress.stages.list_format import ListFormatStage
from notepress.stages.tags import HashtagsStage, UserTagsStage
from notepress.stages.variables import VariablesStage, lookup_variable
from notepress.stages.wikilinks import WikiLinksStage, format_wikilink, wikilink_href


def _first_paragraph(document: Document) -> Paragraph:
    return find_all(document, Paragraph)[0]


@pytest.mark.unit
class TestFrontmatterStage:
    """Test YAML frontmatter loading."""

    def test_frontmatter_loaded(self, parse, context) -> None:
        """Test that frontmatter is stored on the document and the context."""
        tree = parse("---\ntitle: Hello\ntags: [a, b]\n---\nBody\n", "frontmatter")
        result = FrontmatterStage().run(tree, context)
        assert result.data["frontmatter"] == {"title": "Hello", "tags": ["a", "b"]}
        assert context.fm == {"title": "Hello", "tags": ["a", "b"]}

    def test_existing_context_fm_kept(self, parse, context) -> None:
        """Test that frontmatter resolved by the builder is not replaced."""
        context.fm = {"title": "From engine"}
        FrontmatterStage().run(parse("---\ntitle: Local\n---\nBody\n", "frontmatter"), context)
        assert context.fm == {"title": "From engine"}

    def test_invalid_yaml_is_diagnostic(self, parse, context) -> None:
        """Test that invalid YAML is recorded, not raised."""
        result = FrontmatterStage().run(parse("---\ntitle: [unclosed\n---\nBody\n", "frontmatter"), context)
        assert "frontmatter" not in result.data
        assert len(context.diagnostics) == 1
        assert context.diagnostics[0].stage == "frontmatter"

    def test_non_mapping_is_diagnostic(self, parse, context) -> None:
        """Test that a YAML list is rejected."""
        FrontmatterStage().run(parse("---\n- a\n- b\n---\nBody\n", "frontmatter"), context)
        assert "must be a mapping" in context.diagnostics[0].message
        assert context.fm is None

    def test_input_not_mutated(self, parse, context) -> None:
        """Test that the stage returns a new tree."""
        tree = parse("---\ntitle: Hello\n---\nBody\n", "frontmatter")
        FrontmatterStage().run(tree, context)
        assert tree.data == {}


@pytest.mark.unit
class TestAbbreviationsStage:
    """Test abbreviation definitions and occurrences."""

    def test_definition_removed_and_occurrence_marked(self, parse, context) -> None:
        """Test that definition paragraphs disappear and uses become Abbr nodes."""
        tree = parse("*[HTML]: Hyper Text Markup Language\n\nWrite HTML daily.\n")
        result = AbbreviationsStage().run(tree, context)

        paragraphs = find_all(result, Paragraph)
        assert len(paragraphs) == 1
        abbr = find_all(result, Abbr)[0]
        assert abbr.value == "HTML"
        assert abbr.title == "Hyper Text Markup Language"
        assert extract_text(paragraphs[0]) == "Write HTML daily."

    def test_definition_inside_paragraph(self, parse, context) -> None:
        """Test that definition lines are removed from mixed paragraphs."""
        result = AbbreviationsStage().run(parse("*[API]: Application Interface\nThe API works.\n"), context)
        assert extract_text(_first_paragraph(result)) == "The API works."
        assert len(find_all(result, Abbr)) == 1

    def test_whole_words_only(self, parse, context) -> None:
        """Test that partial words are not marked."""
        result = AbbreviationsStage().run(parse("*[API]: Application Interface\n\nAPIs and API.\n"), context)
        assert [a.value for a in find_all(result, Abbr)] == ["API"]

    def test_longest_name_wins(self, parse, context) -> None:
        """Test that overlapping names prefer the longer one."""
        text = "*[HTML]: Markup\n*[HTML5]: Markup version 5\n\nUse HTML5.\n"
        result = AbbreviationsStage().run(parse(text), context)
        assert [a.value for a in find_all(result, Abbr)] == ["HTML5"]

    def test_no_definitions(self, parse, context) -> None:
        """Test that documents without definitions pass through."""
        result = AbbreviationsStage().run(parse("Plain HTML.\n"), context)
        assert find_all(result, Abbr) == []


@pytest.mark.unit
class TestListFormatStage:
    """Test list formatting options."""

    def test_defaults(self, parse, context) -> None:
        """Test that the default bullet and indent are stamped on lists."""
        result = ListFormatStage().run(parse("* a\n* b\n"), context)
        lst = find_all(result, List)[0]
        assert lst.bullet == "-"
        assert lst.list_item_indent == 1

    def test_custom(self, parse, context) -> None:
        """Test custom formatting."""
        result = ListFormatStage(bullet="+", list_item_indent=2).run(parse("- a\n"), context)
        lst = find_all(result, List)[0]
        assert (lst.bullet, lst.list_item_indent) == ("+", 2)


@pytest.mark.unit
class TestTextPatternTransformer:
    """Test the shared text pattern base."""

    def test_replace_match_required(self) -> None:
        """Test that a pattern transformer must define its replacement."""

        class PatternOnly(TextPatternTransformer):
            pattern = re.compile(r"x")

        with pytest.raises(TypeError, match="replace_match"):
            PatternOnly()

    def test_unmatched_text_copied(self) -> None:
        """Test that text without matches comes back unchanged."""

        class Shout(TextPatternTransformer):
            pattern = re.compile(r"!+")

            def replace_match(self, match):
                return Highlight(children=[Text(value=match.group(0))])

        document = Document(children=[Paragraph(children=[Text(value="calm"), Text(value="now!!")])])
        result = Shout().transform(document)
        assert result.children[0].children == [
            Text(value="calm"),
            Text(value="now"),
            Highlight(children=[Text(value="!!")]),
        ]


@pytest.mark.unit
class TestBlockAnchorsStage:
    """Test block anchor recognition."""

    def test_trailing_anchor(self, parse, context) -> None:
        """Test that a trailing anchor consumes the whitespace before it."""
        result = BlockAnchorsStage().run(parse("Run it daily. ^usage-block\n"), context)
        assert _first_paragraph(result).children == [Text(value="Run it daily."), BlockAnchor(value="usage-block")]

    def test_anchor_on_own_line(self, parse, context) -> None:
        """Test an anchor on the last line of a paragraph."""
        result = BlockAnchorsStage().run(parse("First line\n^block\n"), context)
        assert isinstance(_first_paragraph(result).children[-1], BlockAnchor)

    def test_anchor_in_middle_ignored(self, parse, context) -> None:
        """Test that a caret word in the middle of text is not an anchor."""
        result = BlockAnchorsStage().run(parse("x ^not here\n"), context)
        assert find_all(result, BlockAnchor) == []


@pytest.mark.unit
class TestTagStages:
    """Test hashtags and user tags."""

    def test_hashtag(self, parse, context) -> None:
        """Test dotted hashtags."""
        result = HashtagsStage().run(parse("Ideas #ml.python here.\n"), context)
        tag = find_all(result, HashTag)[0]
        assert tag.value == "#ml.python"
        assert tag.fname == "tags.ml.python"
        assert extract_text(result) == "Ideas #ml.python here."

    def test_hashtag_custom_prefix(self, parse, context) -> None:
        """Test the hierarchy prefix parameter."""
        result = HashtagsStage(prefix="topics.").run(parse("#idea\n"), context)
        assert find_all(result, HashTag)[0].fname == "topics.idea"

    @pytest.mark.parametrize("text", ["Issue #12", "a#b", "&#123;", "[[note#heading]]", "##double"])
    def test_not_hashtags(self, parse, context, text) -> None:
        """Test text that looks like a hashtag but is not one."""
        assert find_all(HashtagsStage().run(parse(text), context), HashTag) == []

    def test_hashtag_inside_link_ignored(self, parse, context) -> None:
        """Test that link labels are left alone."""
        result = HashtagsStage().run(parse("[#tag](https://example.com)\n"), context)
        assert find_all(result, HashTag) == []
        assert len(find_all(result, Link)) == 1

    def test_user_tag(self, parse, context) -> None:
        """Test user tags."""
        result = UserTagsStage().run(parse("Ask @kim.lee.\n"), context)
        tag = find_all(result, UserTag)[0]
        assert tag.value == "@kim.lee"
        assert tag.fname == "user.kim.lee"

    def test_user_tag_not_in_address(self, parse, context) -> None:
        """Test that the at sign of an address is not a user tag."""
        assert find_all(UserTagsStage().run(parse("kim@host\n"), context), UserTag) == []


@pytest.mark.unit
class TestExtendedImageStage:
    """Test image properties."""

    def test_props_attached(self, parse, context) -> None:
        """Test that properties become data and a style hint."""
        result = ExtendedImageStage().run(parse("![A](a.png){width: 50%}\n"), context)
        image = find_all(result, Image)[0]
        assert image.data["props"] == {"width": "50%"}
        assert image.data["h_properties"] == {"style": "width: 50%"}
        assert find_all(result, Text) == []

    def test_remaining_text_kept(self, parse, context) -> None:
        """Test that text after the properties stays."""
        result = ExtendedImageStage().run(parse("![A](a.png){width: 50%, height: 10px} caption\n"), context)
        image = find_all(result, Image)[0]
        assert image.data["props"] == {"width": "50%", "height": "10px"}
        assert extract_text(_first_paragraph(result)) == " caption"

    def test_separated_braces_ignored(self, parse, context) -> None:
        """Test that braces after a space are plain text."""
        result = ExtendedImageStage().run(parse("![A](a.png) {width: 50%}\n"), context)
        assert "props" not in find_all(result, Image)[0].data

    def test_invalid_props_is_diagnostic(self, parse, context) -> None:
        """Test that unparsable properties are kept as text and recorded."""
        result = ExtendedImageStage().run(parse("![A](a.png){a: [}\n"), context)
        assert "props" not in find_all(result, Image)[0].data
        assert context.diagnostics[0].stage == "extended-image"

    def test_props_to_style(self) -> None:
        """Test style rendering."""
        assert props_to_style({"width": "50%", "float": "left"}) == "width: 50%; float: left"


@pytest.mark.unit
class TestFootnotesStage:
    """Test footnote numbering and collection."""

    def test_definitions_ordered_by_reference(self, parse, context) -> None:
        """Test that definitions follow first-reference order."""
        text = "One[^b] two[^a] three[^b].\n\n[^a]: Alpha\n\n[^b]: Beta\n"
        result = FootnotesStage().run(parse(text, "footnotes"), context)

        refs = find_all(result, FootnoteReference)
        assert [(r.identifier, r.data["index"]) for r in refs] == [("b", 1), ("a", 2), ("b", 1)]

        section = result.children[-1]
        assert isinstance(section, Extension)
        assert section.kind == "footnotes"
        assert section.data["h_name"] == "section"
        footnote_list = section.children[0]
        assert footnote_list.data["h_name"] == "ol"
        assert [d.identifier for d in footnote_list.children] == ["b", "a"]
        assert [d.data["index"] for d in footnote_list.children] == [1, 2]

    def test_unreferenced_definitions_follow(self, context) -> None:
        """Test that definitions never referenced come last."""
        tree = Document(
            children=[
                FootnoteDefinition(identifier="extra", children=[Paragraph(children=[Text(value="E")])]),
                Paragraph(children=[Text(value="x"), FootnoteReference(identifier="used")]),
                FootnoteDefinition(identifier="used", children=[Paragraph(children=[Text(value="U")])]),
            ]
        )
        result = FootnotesStage().run(tree, context)
        definitions = result.children[-1].children[0].children
        assert [d.identifier for d in definitions] == ["used", "extra"]

    def test_missing_definition_is_diagnostic(self, context) -> None:
        """Test that a reference without a definition is recorded."""
        tree = Document(children=[Paragraph(children=[FootnoteReference(identifier="zz")])])
        result = FootnotesStage().run(tree, context)
        assert context.diagnostics[0].message == "Footnote reference [^zz] has no definition"
        assert len(result.children) == 1

    def test_no_footnotes(self, parse, context) -> None:
        """Test that documents without footnotes are unchanged in shape."""
        result = FootnotesStage().run(parse("Plain.\n", "footnotes"), context)
        assert len(result.children) == 1


@pytest.mark.unit
class TestVariablesStage:
    """Test frontmatter variable substitution."""

    def test_substitution(self, parse, context) -> None:
        """Test plain and nested keys and the unknown-key fallback."""
        context.fm = {"title": "Hello", "author": {"name": "Kim"}}
        result = VariablesStage().run(parse("By {{fm.author.name}} on {{ fm.title }} {{fm.nope}}\n"), context)

        assert extract_text(result) == "By Kim on Hello {{fm.nope}}"
        assert [d.message for d in context.diagnostics] == ["Unknown frontmatter variable: nope"]
        assert context.diagnostics[0].stage == "variables"

    def test_without_frontmatter(self, parse, context) -> None:
        """Test that every variable is unknown without frontmatter."""
        result = VariablesStage().run(parse("{{fm.title}}\n"), context)
        assert extract_text(result) == "{{fm.title}}"
        assert len(context.diagnostics) == 1

    def test_none_value_renders_empty(self, parse, context) -> None:
        """Test that a null value becomes empty text."""
        context.fm = {"desc": None}
        assert extract_text(VariablesStage().run(parse("[{{fm.desc}}]\n"), context)) == "[]"

    def test_lookup_variable(self) -> None:
        """Test dotted lookup."""
        assert lookup_variable({"a": {"b": 1}}, "a.b") == 1
        assert lookup_variable({"a": {"b": None}}, "a.b") is None


@pytest.mark.unit
class TestBacklinksHoverStage:
    """Test highlighting of hovered link text."""

    def test_occurrences_highlighted(self, parse, context) -> None:
        """Test that each occurrence becomes a highlight."""
        stage = BacklinksHoverStage(BacklinkHoverOptions(link_text="[[projects]]"))
        result = stage.run(parse("See [[projects]] and [[projects]].\n"), context)

        highlights = find_all(result, Highlight)
        assert len(highlights) == 2
        assert highlights[0].children == [Text(value="[[projects]]")]
        assert highlights[0].data == {"h_name": "mark", "h_properties": {"class": ["backlink-focus"]}}

    def test_without_options_identity(self, parse, context) -> None:
        """Test that the stage does nothing without options."""
        tree = parse("See [[projects]].\n")
        assert BacklinksHoverStage().run(tree, context) is tree


@pytest.mark.unit
class TestWikiLinksStage:
    """Test wikilink recognition."""

    def test_full_syntax(self, parse, context) -> None:
        """Test alias, target and anchor."""
        result = WikiLinksStage().run(parse("See [[Alpha|projects.alpha#usage]].\n"), context)
        link = find_all(result, WikiLink)[0]
        assert (link.value, link.alias, link.anchor_header) == ("projects.alpha", "Alpha", "usage")
        assert link.data["href"] == "projects.alpha#usage"

    def test_prefix(self, parse, context) -> None:
        """Test the href prefix."""
        result = WikiLinksStage(prefix="/n/").run(parse("[[projects]]\n"), context)
        assert find_all(result, WikiLink)[0].data["href"] == "/n/projects"

    def test_use_id(self, parse, note_context) -> None:
        """Test linking by note id when the target is known."""
        stage = WikiLinksStage(use_id=True)
        result = stage.run(parse("[[projects.alpha]] [[unknown]]\n"), note_context)
        known, unknown = find_all(result, WikiLink)
        assert known.data["href"] == "alpha-id"
        assert unknown.data["href"] == "unknown"

    def test_cross_vault(self, parse, context) -> None:
        """Test the vault scheme."""
        result = WikiLinksStage().run(parse("[[dendron://private/journal.2024]]\n"), context)
        link = find_all(result, WikiLink)[0]
        assert (link.vault_name, link.value) == ("private", "journal.2024")

    def test_same_note_anchor(self, parse, note_context) -> None:
        """Test that an empty target points at the current note."""
        result = WikiLinksStage().run(parse("[[#usage]]\n"), note_context)
        link = find_all(result, WikiLink)[0]
        assert link.value == "projects"
        assert link.data["href"] == "projects#usage"

    def test_same_note_anchor_without_fname(self, parse, context) -> None:
        """Test that an empty target without a current note stays text."""
        result = WikiLinksStage().run(parse("[[#usage]]\n"), context)
        assert find_all(result, WikiLink) == []

    def test_note_ref_syntax_ignored(self, parse, context) -> None:
        """Test that references are not links."""
        assert find_all(WikiLinksStage().run(parse("x ![[projects]]\n"), context), WikiLink) == []

    def test_format_wikilink(self) -> None:
        """Test rebuilding the source of a link."""
        link = WikiLink(value="journal", alias="J", anchor_header="top", vault_name="private")
        assert format_wikilink(link) == "[[J|dendron://private/journal#top]]"

    def test_wikilink_href(self) -> None:
        """Test href construction."""
        assert wikilink_href("projects", "usage", prefix="/notes/") == "/notes/projects#usage"
        assert wikilink_href("projects", note_id="p-id") == "p-id"
