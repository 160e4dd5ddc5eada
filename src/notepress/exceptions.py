#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the notepress library.

This module defines specialized exception classes for the error conditions
that can occur while building and running a note-processing pipeline.

Exception Hierarchy
-------------------
- NotepressError (base exception)

  - ValidationError (parameter/option validation)
    - ConfigurationError (missing required pipeline data, bad config files)

  - ContractViolation (programming errors, e.g. unknown processing mode)

  - ParsingError (source text parsing failures)

  - StageError (fatal failures inside a transformation stage)

  - RenderingError (rendering tree construction and serialization failures)

  - DependencyError (missing/incompatible packages)

"""

from typing import Any, Iterable


class NotepressError(Exception):
    """Base exception class for all notepress-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(NotepressError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class ConfigurationError(ValidationError):
    """Exception raised when the data supplied to a pipeline build is incomplete.

    The message names every missing field so the caller can fix all of them
    in one pass.

    Parameters
    ----------
    missing_fields : iterable of str, optional
        Names of the required fields that were not supplied
    message : str, optional
        Custom error message. If not provided, one is generated from
        ``missing_fields``
    original_error : Exception, optional
        The original exception that caused this error

    Attributes
    ----------
    missing_fields : list[str]
        The missing field names, in the order they were checked

    """

    def __init__(
        self,
        missing_fields: Iterable[str] | None = None,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the configuration error."""
        self.missing_fields = list(missing_fields or [])
        if message is None:
            message = f"missing required fields in data. {' ,'.join(self.missing_fields)} missing"
        super().__init__(
            message,
            parameter_name="data",
            parameter_value=self.missing_fields,
            original_error=original_error,
        )


class ContractViolation(NotepressError):
    """Exception raised when a value outside a closed set reaches a dispatch point.

    This always indicates a programming error in the caller and is never
    recoverable by retrying with the same inputs.
    """


class ParsingError(NotepressError):
    """Exception raised when source text cannot be parsed.

    Parameters
    ----------
    message : str
        Description of the parsing failure
    parsing_stage : str, optional
        The stage of parsing where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the parsing failure

    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the parsing error."""
        super().__init__(message, original_error)
        self.parsing_stage = parsing_stage


class StageError(NotepressError):
    """Exception raised when a transformation stage hits a fatal condition.

    Non-fatal conditions should be recorded as diagnostics on the pipeline
    context instead of raised.

    Parameters
    ----------
    message : str
        Description of the stage failure
    stage_name : str, optional
        Name of the stage that failed
    original_error : Exception, optional
        The underlying exception that caused the failure

    """

    def __init__(self, message: str, stage_name: str | None = None, original_error: Exception | None = None):
        """Initialize the stage error."""
        super().__init__(message, original_error)
        self.stage_name = stage_name


class RenderingError(NotepressError):
    """Exception raised when rendering tree construction or serialization fails.

    Parameters
    ----------
    message : str
        Description of the rendering failure
    rendering_stage : str, optional
        The stage of rendering where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the rendering failure

    """

    def __init__(self, message: str, rendering_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the rendering error."""
        super().__init__(message, original_error)
        self.rendering_stage = rendering_stage


def format_requirement(name: str, spec: str) -> str:
    """Return ``name`` with its version specifier, as pip accepts it."""
    return f"{name}{spec}" if spec else name


class DependencyError(NotepressError):
    """Exception raised when a parser or stage lacks a third-party package.

    Parameters
    ----------
    component_name : str
        Parser or stage that needs the packages
    missing_packages : list[tuple[str, str]]
        ``(install_name, version_spec)`` of packages that cannot be imported
    version_mismatches : list[tuple[str, str, str]], optional
        ``(install_name, required, installed)`` of packages that are too old
        or too new
    original_error : ImportError, optional
        The first import error raised while probing

    Examples
    --------
    >>> str(DependencyError("highlight", [("pygments", ">=2.15.0")]))
    'highlight requires: pygments>=2.15.0\\nInstall with: pip install --upgrade "pygments>=2.15.0"'

    """

    def __init__(
        self,
        component_name: str,
        missing_packages: list[tuple[str, str]],
        version_mismatches: list[tuple[str, str, str]] | None = None,
        original_error: Exception | None = None,
    ):
        """Build the message from the missing and mismatched packages."""
        self.component_name = component_name
        self.missing_packages = list(missing_packages)
        self.version_mismatches = list(version_mismatches or [])

        lines = []
        if self.missing_packages:
            names = ", ".join(format_requirement(name, spec) for name, spec in self.missing_packages)
            lines.append(f"{component_name} requires: {names}")
        for name, required, installed in self.version_mismatches:
            lines.append(f"{component_name} requires {format_requirement(name, required)}, found {installed}")

        upgrades = self.missing_packages + [(name, required) for name, required, _ in self.version_mismatches]
        if upgrades:
            quoted = " ".join(f'"{format_requirement(name, spec)}"' for name, spec in upgrades)
            lines.append(f"Install with: pip install --upgrade {quoted}")

        super().__init__("\n".join(lines), original_error)


__all__ = [
    "NotepressError",
    "ValidationError",
    "ConfigurationError",
    "ContractViolation",
    "ParsingError",
    "StageError",
    "RenderingError",
    "DependencyError",
]
