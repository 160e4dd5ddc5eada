#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for stage selection and ordering in the pipeline builder."""

import dataclasses

import pytest

from notepress.config import NotepressConfig, PublishingConfig
from notepress.exceptions import ConfigurationError, ContractViolation
from notepress.pipeline.builder import PipelineBuilder, build_parsing_pipeline, build_rendering_pipeline
from notepress.pipeline.options import (
    BacklinkHoverOptions,
    Destination,
    PipelineData,
    PipelineOptions,
    ProcFlavor,
    ProcMode,
    PublishOptions,
    WikiLinksOptions,
)

BASE_STAGES = [
    "frontmatter",
    "abbreviations",
    "list-format",
    "note-refs",
    "block-anchors",
    "hashtags",
    "user-tags",
    "extended-image",
    "footnotes",
    "variables",
    "backlinks-hover",
    "wikilinks",
]


def _stages_named(pipeline, name):
    return [stage for stage in pipeline.stages if stage.name == name]


@pytest.mark.unit
class TestNoDataPipelines:
    """Test pipelines built without surrounding data."""

    def test_base_stage_order(self) -> None:
        """Test that a NO_DATA pipeline holds exactly the base stages, in order."""
        pipeline = build_parsing_pipeline(PipelineOptions(), {"dest": Destination.MARKDOWN})
        assert pipeline.stage_names == BASE_STAGES

    def test_no_validation_without_data(self) -> None:
        """Test that NO_DATA accepts empty data."""
        pipeline = build_parsing_pipeline(PipelineOptions(mode=ProcMode.NO_DATA), None)
        assert pipeline.context.mode == ProcMode.NO_DATA
        assert pipeline.context.config is None
        assert pipeline.context.notes is None

    def test_convert_links_false_drops_wikilinks(self) -> None:
        """Test that wikilinks is omitted only when convert_links is exactly False."""
        data = PipelineData(wiki_links_opts=WikiLinksOptions(convert_links=False))
        pipeline = build_parsing_pipeline(PipelineOptions(), data)
        assert "wikilinks" not in pipeline.stage_names
        assert pipeline.stage_names == BASE_STAGES[:-1]

    def test_convert_links_none_keeps_wikilinks(self) -> None:
        """Test that an unset convert_links still converts links."""
        data = PipelineData(wiki_links_opts=WikiLinksOptions(prefix="/n/", use_id=True))
        pipeline = build_parsing_pipeline(PipelineOptions(), data)
        wikilinks = _stages_named(pipeline, "wikilinks")[0]
        assert wikilinks.prefix == "/n/"
        assert wikilinks.use_id is True

    def test_backlink_hover_options_passed(self) -> None:
        """Test that hover options reach the backlinks-hover stage."""
        options = BacklinkHoverOptions(link_text="projects")
        pipeline = build_parsing_pipeline(PipelineOptions(), PipelineData(backlink_hover_opts=options))
        assert _stages_named(pipeline, "backlinks-hover")[0].options is options

    def test_flavor_none_normalized(self) -> None:
        """Test that a None flavor becomes REGULAR."""
        pipeline = build_parsing_pipeline(PipelineOptions(flavor=None), None)
        assert pipeline.context.flavor == ProcFlavor.REGULAR

    def test_mapping_data_accepted(self) -> None:
        """Test that plain mappings are accepted as data."""
        pipeline = build_parsing_pipeline(PipelineOptions(), {"dest": "html"})
        assert pipeline.context.dest == Destination.HTML


@pytest.mark.unit
class TestFullPipelines:
    """Test FULL mode stage selection."""

    def test_regular_html(self, full_data) -> None:
        """Test the FULL sequence for HTML output."""
        pipeline = build_parsing_pipeline(PipelineOptions(mode=ProcMode.FULL), full_data)
        assert pipeline.stage_names == BASE_STAGES + ["hierarchies", "backlinks", "publish", "math", "mermaid"]

    def test_markdown_destination_skips_navigation(self, full_data) -> None:
        """Test that navigation stages need an HTML destination."""
        data = dataclasses.replace(full_data, dest=Destination.MARKDOWN)
        pipeline = build_parsing_pipeline(PipelineOptions(mode=ProcMode.FULL), data)
        assert "hierarchies" not in pipeline.stage_names
        assert "backlinks" not in pipeline.stage_names
        assert "publish" in pipeline.stage_names

    def test_no_navigation_without_link_conversion(self, full_data) -> None:
        """Test that disabling link conversion also drops navigation."""
        data = dataclasses.replace(full_data, wiki_links_opts=WikiLinksOptions(convert_links=False))
        pipeline = build_parsing_pipeline(PipelineOptions(mode=ProcMode.FULL), data)
        assert "wikilinks" not in pipeline.stage_names
        assert "hierarchies" not in pipeline.stage_names

    @pytest.mark.parametrize("flavor", [ProcFlavor.HOVER_PREVIEW, ProcFlavor.BACKLINKS_PANEL_HOVER])
    def test_hover_flavors_add_hover_preview(self, full_data, flavor) -> None:
        """Test that hover flavors get hover-preview before publish."""
        pipeline = build_parsing_pipeline(PipelineOptions(mode=ProcMode.FULL, flavor=flavor), full_data)
        names = pipeline.stage_names
        assert names.index("backlinks") < names.index("hover-preview") < names.index("publish")

    def test_preview_has_no_hover_preview(self, full_data) -> None:
        """Test that the plain preview flavor does not rewrite images."""
        pipeline = build_parsing_pipeline(PipelineOptions(mode=ProcMode.FULL, flavor=ProcFlavor.PREVIEW), full_data)
        assert "hover-preview" not in pipeline.stage_names

    def test_publishing_adds_second_publish(self, full_data) -> None:
        """Test that publishing ends with a publish pass using the default prefix."""
        pipeline = build_parsing_pipeline(PipelineOptions(mode=ProcMode.FULL, flavor=ProcFlavor.PUBLISHING), full_data)
        assert pipeline.stage_names[-4:] == ["publish", "math", "mermaid", "publish"]
        first, second = _stages_named(pipeline, "publish")
        assert first.transform_no_publish is True
        assert first.wikilink_prefix is None
        assert second.wikilink_prefix == "/notes/"

    def test_publishing_prefix_uses_assets_prefix(self, full_data, engine) -> None:
        """Test that the second publish pass uses the configured assets prefix."""
        config = NotepressConfig(publishing=PublishingConfig(assets_prefix="/site/"))
        data = dataclasses.replace(full_data, config=config)
        pipeline = build_parsing_pipeline(PipelineOptions(mode=ProcMode.FULL, flavor=ProcFlavor.PUBLISHING), data)
        assert _stages_named(pipeline, "publish")[-1].wikilink_prefix == "/site/notes/"

    def test_insert_title_follows_config(self, full_data) -> None:
        """Test that insert_title comes from enable_fm_title."""
        pipeline = build_parsing_pipeline(PipelineOptions(mode=ProcMode.FULL), full_data)
        assert _stages_named(pipeline, "publish")[0].insert_title is True

        data = dataclasses.replace(full_data, config=NotepressConfig(enable_fm_title=False))
        pipeline = build_parsing_pipeline(PipelineOptions(mode=ProcMode.FULL), data)
        assert _stages_named(pipeline, "publish")[0].insert_title is False

    def test_insert_title_publishing_override(self, full_data) -> None:
        """Test that the publishing override wins under publishing rules."""
        config = NotepressConfig(enable_fm_title=True, publishing=PublishingConfig(enable_fm_title=False))
        data = dataclasses.replace(full_data, config=config)

        regular = build_parsing_pipeline(PipelineOptions(mode=ProcMode.FULL), data)
        publishing = build_parsing_pipeline(PipelineOptions(mode=ProcMode.FULL, flavor=ProcFlavor.PUBLISHING), data)
        assert _stages_named(regular, "publish")[0].insert_title is True
        assert _stages_named(publishing, "publish")[0].insert_title is False

    def test_no_title_inside_note_ref(self, full_data) -> None:
        """Test that nested reference pipelines never insert a title."""
        data = dataclasses.replace(full_data, note_ref_level=1)
        pipeline = build_parsing_pipeline(PipelineOptions(mode=ProcMode.FULL), data)
        assert _stages_named(pipeline, "publish")[0].insert_title is False
        assert pipeline.context.inside_note_ref is True

    def test_no_title_when_flagged_inside_note_ref(self, full_data) -> None:
        """Test that the inside_note_ref flag alone suppresses the title."""
        data = dataclasses.replace(full_data, inside_note_ref=True)
        pipeline = build_parsing_pipeline(PipelineOptions(mode=ProcMode.FULL), data)
        assert data.note_ref_level is None
        assert _stages_named(pipeline, "publish")[0].insert_title is False

    def test_no_title_for_backlinks_panel(self, full_data) -> None:
        """Test that the backlinks panel flavor never inserts a title."""
        options = PipelineOptions(mode=ProcMode.FULL, flavor=ProcFlavor.BACKLINKS_PANEL_HOVER)
        pipeline = build_parsing_pipeline(options, full_data)
        assert _stages_named(pipeline, "publish")[0].insert_title is False

    def test_publish_options_merged(self, full_data) -> None:
        """Test that caller publish options override the builder's choices."""
        data = dataclasses.replace(
            full_data, publish_opts=PublishOptions(insert_title=False, assets_prefix="/static")
        )
        pipeline = build_parsing_pipeline(PipelineOptions(mode=ProcMode.FULL), data)
        publish = _stages_named(pipeline, "publish")[0]
        assert publish.insert_title is False
        assert publish.assets_prefix == "/static"

    def test_math_and_mermaid_follow_config(self, full_data) -> None:
        """Test that render feature stages follow the configuration."""
        data = dataclasses.replace(full_data, config=NotepressConfig(enable_math=False, enable_mermaid=False))
        pipeline = build_parsing_pipeline(PipelineOptions(mode=ProcMode.FULL), data)
        assert "math" not in pipeline.stage_names
        assert "mermaid" not in pipeline.stage_names

    def test_context_populated(self, full_data, engine) -> None:
        """Test that config, root, notes and frontmatter are resolved from the engine."""
        pipeline = build_parsing_pipeline(PipelineOptions(mode=ProcMode.FULL), full_data)
        context = pipeline.context
        assert context.config is engine.config
        assert context.ws_root == engine.ws_root
        assert context.notes is engine.notes
        assert context.fm == {
            "owner": "kim",
            "id": "projects-id",
            "title": "Projects",
            "desc": "All projects",
            "created": 0,
            "updated": 0,
        }

    def test_supplied_values_win(self, full_data) -> None:
        """Test that supplied config, root and fm are not replaced."""
        config = NotepressConfig(enable_math=False)
        data = dataclasses.replace(full_data, config=config, ws_root="/other", fm={"title": "Given"})
        context = build_parsing_pipeline(PipelineOptions(mode=ProcMode.FULL), data).context
        assert context.config is config
        assert context.ws_root == "/other"
        assert context.fm == {"title": "Given"}

    def test_missing_fields_listed(self) -> None:
        """Test that every missing field is reported at once."""
        with pytest.raises(ConfigurationError) as exc_info:
            build_parsing_pipeline(PipelineOptions(mode=ProcMode.FULL), {"dest": Destination.HTML})
        assert exc_info.value.missing_fields == ["vault", "engine", "fname"]
        assert str(exc_info.value) == "missing required fields in data. vault ,engine ,fname missing"

    def test_all_fields_missing(self) -> None:
        """Test the message when nothing is supplied."""
        with pytest.raises(ConfigurationError, match="vault ,engine ,fname ,dest missing"):
            build_parsing_pipeline(PipelineOptions(mode=ProcMode.FULL), None)


@pytest.mark.unit
class TestImportPipelines:
    """Test IMPORT mode stage selection."""

    def test_import_sequence(self, engine, vault) -> None:
        """Test that IMPORT adds only the render feature stages."""
        data = PipelineData(vault=vault, engine=engine, dest=Destination.MARKDOWN)
        pipeline = build_parsing_pipeline(PipelineOptions(mode=ProcMode.IMPORT), data)
        assert pipeline.stage_names == BASE_STAGES + ["math", "mermaid"]
        assert pipeline.context.notes is engine.notes
        assert pipeline.context.fm is None

    def test_import_does_not_need_fname(self, engine, vault) -> None:
        """Test that IMPORT requires vault, engine and dest only."""
        with pytest.raises(ConfigurationError) as exc_info:
            build_parsing_pipeline(PipelineOptions(mode=ProcMode.IMPORT), {"engine": engine})
        assert exc_info.value.missing_fields == ["vault", "dest"]


@pytest.mark.unit
class TestModeValidation:
    """Test rejection of unknown modes."""

    def test_unknown_mode(self) -> None:
        """Test that an unknown mode is a contract violation."""
        with pytest.raises(ContractViolation):
            build_parsing_pipeline(PipelineOptions(mode="SOMETHING"), None)

    def test_mode_string_accepted(self) -> None:
        """Test that a mode given by value is accepted."""
        pipeline = build_parsing_pipeline(PipelineOptions(mode="NO_DATA"), None)
        assert pipeline.context.mode == ProcMode.NO_DATA


@pytest.mark.unit
class TestRenderingPipelines:
    """Test the stages appended for HTML rendering."""

    def test_rendering_stages_no_data(self) -> None:
        """Test the rendering tail of a NO_DATA pipeline."""
        pipeline = build_rendering_pipeline(PipelineOptions(), None)
        assert pipeline.stage_names == BASE_STAGES + ["to-hast", "highlight", "raw", "slug", "katex", "stringify"]
        assert pipeline.context.dest == Destination.HTML
        assert pipeline.has_serializer

    def test_destination_forced_to_html(self, full_data) -> None:
        """Test that a markdown destination is overridden."""
        data = dataclasses.replace(full_data, dest=Destination.MARKDOWN)
        pipeline = build_rendering_pipeline(PipelineOptions(mode=ProcMode.FULL), data)
        assert pipeline.context.dest == Destination.HTML
        assert "hierarchies" in pipeline.stage_names

    def test_parse_only_omits_serializer(self) -> None:
        """Test that parse_only leaves the rendering tree as the result."""
        pipeline = build_rendering_pipeline(PipelineOptions(parse_only=True), None)
        assert pipeline.stage_names[-1] == "katex"
        assert "stringify" not in pipeline.stage_names
        assert not pipeline.has_serializer

    def test_katex_follows_math_config(self) -> None:
        """Test that katex is omitted when math is disabled."""
        data = PipelineData(config=NotepressConfig(enable_math=False))
        pipeline = build_rendering_pipeline(PipelineOptions(), data)
        assert "katex" not in pipeline.stage_names

    def test_publishing_adds_autolink_headings(self, full_data) -> None:
        """Test that heading anchors are only added under publishing rules."""
        publishing = build_rendering_pipeline(
            PipelineOptions(mode=ProcMode.FULL, flavor=ProcFlavor.PUBLISHING), full_data
        )
        regular = build_rendering_pipeline(PipelineOptions(mode=ProcMode.FULL), full_data)
        assert publishing.stage_names[-3:] == ["katex", "autolink-headings", "stringify"]
        assert "autolink-headings" not in regular.stage_names

    def test_rendering_stage_parameters(self) -> None:
        """Test that raw HTML is allowed and missing languages are ignored."""
        pipeline = build_rendering_pipeline(PipelineOptions(), None)
        assert _stages_named(pipeline, "to-hast")[0].allow_dangerous_html is True
        assert _stages_named(pipeline, "highlight")[0].ignore_missing is True


@pytest.mark.unit
class TestDeterminism:
    """Test that identical inputs give identical sequences."""

    @pytest.mark.parametrize("flavor", list(ProcFlavor))
    def test_rebuild_same_sequence(self, full_data, flavor) -> None:
        """Test that building twice yields the same stage sequence."""
        options = PipelineOptions(mode=ProcMode.FULL, flavor=flavor)
        first = PipelineBuilder().build_rendering(options, full_data)
        second = PipelineBuilder().build_rendering(options, full_data)
        assert first.stage_names == second.stage_names

    def test_each_build_gets_its_own_context(self) -> None:
        """Test that pipelines never share a context."""
        first = build_parsing_pipeline(PipelineOptions(), None)
        second = build_parsing_pipeline(PipelineOptions(), None)
        assert first.context is not second.context
        assert first.context.diagnostics is not second.context.diagnostics
