#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Pytest configuration and shared fixtures for the notepress test suite.

The fixtures build a small in-memory workspace: a ``projects`` hierarchy
with two children, a note that links back to its parent, an unpublished
note and a note that references itself.
"""

from typing import Generator

import pytest

from notepress.ast.nodes import Document
from notepress.config import NotepressConfig, PublishingConfig
from notepress.engine import InMemoryEngine, NoteProps, Vault
from notepress.parsers.markdown import MarkdownParser
from notepress.pipeline.context import PipelineContext
from notepress.pipeline.options import Destination, PipelineData
from notepress.stages.registry import stage_registry

WS_ROOT = "/ws"


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")


@pytest.fixture
def vault() -> Vault:
    """Provide the vault every sample note lives in."""
    return Vault(fs_path="vault")


@pytest.fixture
def sample_notes(vault: Vault) -> list[NoteProps]:
    """Provide the sample notes.

    Returns
    -------
    list of NoteProps
        ``projects`` with children ``projects.alpha`` and ``projects.beta``,
        plus ``secret`` (unpublished) and ``loop`` (references itself)

    """
    return [
        NoteProps(
            id="projects-id",
            fname="projects",
            vault=vault,
            title="Projects",
            desc="All projects",
            custom={"owner": "kim"},
            body="# Projects\n\nAll projects live here.\n\n## Usage\n\nRun it daily. ^usage-block\n\n## Later\n\nNot yet.\n",
        ),
        NoteProps(
            id="alpha-id",
            fname="projects.alpha",
            vault=vault,
            title="Alpha",
            custom={"nav_order": 2},
            body="Alpha links to [[projects]].\n",
            links=["projects"],
        ),
        NoteProps(
            id="beta-id",
            fname="projects.beta",
            vault=vault,
            title="Beta",
            custom={"nav_order": 1},
            body="Beta body.\n",
        ),
        NoteProps(
            id="secret-id",
            fname="secret",
            vault=vault,
            title="Secret",
            custom={"published": False},
            body="Hidden things.\n",
            links=["projects"],
        ),
        NoteProps(id="loop-id", fname="loop", vault=vault, title="Loop", body="![[loop]]\n"),
    ]


@pytest.fixture
def config() -> NotepressConfig:
    """Provide a configuration with every feature enabled."""
    return NotepressConfig(enable_mermaid=True)


@pytest.fixture
def publishing_config() -> NotepressConfig:
    """Provide a configuration with an assets prefix for publishing."""
    return NotepressConfig(enable_mermaid=True, publishing=PublishingConfig(assets_prefix="/site"))


@pytest.fixture
def engine(sample_notes: list[NoteProps], config: NotepressConfig) -> InMemoryEngine:
    """Provide an in-memory engine over the sample notes."""
    return InMemoryEngine(sample_notes, config=config, ws_root=WS_ROOT)


@pytest.fixture
def full_data(engine: InMemoryEngine, vault: Vault) -> PipelineData:
    """Provide FULL-mode data for the ``projects`` note rendered to HTML."""
    return PipelineData(fname="projects", vault=vault, engine=engine, dest=Destination.HTML)


@pytest.fixture
def context() -> PipelineContext:
    """Provide an empty context, as used by a NO_DATA pipeline."""
    return PipelineContext()


@pytest.fixture
def note_context(engine: InMemoryEngine, vault: Vault) -> PipelineContext:
    """Provide a populated context for the ``projects`` note."""
    return PipelineContext(
        dest=Destination.HTML,
        fname="projects",
        vault=vault,
        engine=engine,
        config=engine.config,
        ws_root=WS_ROOT,
        notes=engine.notes,
    )


@pytest.fixture
def parse():
    """Provide a parser function accepting optional syntax features."""

    def _parse(text: str, *features: str) -> Document:
        return MarkdownParser(features=features).parse(text)

    return _parse


@pytest.fixture
def clean_registry() -> Generator[None, None, None]:
    """Reset the global stage registry after the test."""
    try:
        yield
    finally:
        stage_registry.clear()
