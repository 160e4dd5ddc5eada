#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for optional dependency checks and the debug timer."""

import logging

import pytest

from notepress.exceptions import DependencyError
from notepress.utils.decorators import (
    check_dependencies,
    debug_timer,
    installed_version,
    probe_requirement,
    requires_dependencies,
    satisfies,
)

ABSENT = ("notepress-absent-package", "notepress_absent_package", ">=1.0")


@pytest.fixture(autouse=True)
def clear_probe_cache():
    """Forget cached dependency checks between tests."""
    probe_requirement.cache_clear()
    yield
    probe_requirement.cache_clear()


@pytest.mark.unit
class TestVersionChecks:
    """Test installed version lookups."""

    def test_installed_version(self) -> None:
        """Test that installed distributions report a version and absent ones do not."""
        assert installed_version("PyYAML")
        assert installed_version("notepress-absent-package") is None

    @pytest.mark.parametrize(
        "install_name,version_spec,expected",
        [
            ("PyYAML", ">=1.0", True),
            ("PyYAML", "<1.0", False),
            ("PyYAML", "not a specifier", False),
            ("notepress-absent-package", ">=1.0", False),
        ],
    )
    def test_satisfies(self, install_name, version_spec, expected) -> None:
        """Test specifier matching against the installed version."""
        assert satisfies(install_name, version_spec) is expected


@pytest.mark.unit
class TestCheckDependencies:
    """Test requirement probing."""

    def test_installed_package(self) -> None:
        """Test that an installed package passes."""
        check_dependencies("frontmatter", [("PyYAML", "yaml", ">=5.1")])

    def test_missing_package(self) -> None:
        """Test that a missing package is reported with an install hint."""
        with pytest.raises(DependencyError) as exc_info:
            check_dependencies("raw", [ABSENT])

        error = exc_info.value
        assert error.component_name == "raw"
        assert error.missing_packages == [("notepress-absent-package", ">=1.0")]
        assert isinstance(error.original_error, ImportError)
        assert str(error) == (
            "raw requires: notepress-absent-package>=1.0\n"
            'Install with: pip install --upgrade "notepress-absent-package>=1.0"'
        )

    def test_version_mismatch(self) -> None:
        """Test that a too old package is reported with its installed version."""
        with pytest.raises(DependencyError) as exc_info:
            check_dependencies("frontmatter", [("PyYAML", "yaml", ">=999")])

        (name, required, installed), = exc_info.value.version_mismatches
        assert (name, required) == ("PyYAML", ">=999")
        assert f"frontmatter requires PyYAML>=999, found {installed}" in str(exc_info.value)

    def test_results_cached(self) -> None:
        """Test that each requirement is probed once."""
        check_dependencies("frontmatter", [("PyYAML", "yaml", "")])
        check_dependencies("frontmatter", [("PyYAML", "yaml", "")])
        assert probe_requirement.cache_info().hits == 1


@pytest.mark.unit
class TestRequiresDependencies:
    """Test the decorator."""

    def test_passes_through(self) -> None:
        """Test that the wrapped function runs when requirements are met."""

        @requires_dependencies("frontmatter", [("PyYAML", "yaml", "")])
        def load(value):
            return value * 2

        assert load(21) == 42
        assert load.__name__ == "load"

    def test_blocks_call(self) -> None:
        """Test that the wrapped function is not called when a package is missing."""
        calls = []

        @requires_dependencies("raw", [ABSENT])
        def render():
            calls.append(True)

        with pytest.raises(DependencyError):
            render()
        assert calls == []


@pytest.mark.unit
class TestDebugTimer:
    """Test the timing context manager."""

    def test_logs_when_debug(self, caplog) -> None:
        """Test that elapsed time is logged at DEBUG."""
        logger = logging.getLogger("notepress.tests.timer")
        with caplog.at_level(logging.DEBUG, logger="notepress.tests.timer"):
            with debug_timer(logger, "Stage 'wikilinks'"):
                pass
        assert "Stage 'wikilinks' completed in" in caplog.text

    def test_silent_otherwise(self, caplog) -> None:
        """Test that nothing is logged above DEBUG."""
        logger = logging.getLogger("notepress.tests.timer")
        with caplog.at_level(logging.INFO, logger="notepress.tests.timer"):
            with debug_timer(logger, "Parsing"):
                pass
        assert caplog.text == ""
