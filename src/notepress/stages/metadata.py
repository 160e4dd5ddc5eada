#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/stages/metadata.py
"""Metadata classes for pipeline stages.

Stage metadata describes a stage for registration, parameter validation and
plugin discovery through entry points.

Examples
--------
Define a stage with metadata:

    >>> from notepress.stages import StageMetadata, ParameterSpec
    >>> from notepress.pipeline.stage import TreeStage
    >>>
    >>> class ShoutStage(TreeStage):
    ...     name = "shout"
    ...     def __init__(self, suffix: str = "!"):
    ...         self.suffix = suffix
    ...
    >>> METADATA = StageMetadata(
    ...     name="shout",
    ...     description="Append a suffix to every paragraph",
    ...     stage_class=ShoutStage,
    ...     parameters={
    ...         'suffix': ParameterSpec(type=str, default="!", help="Text to append")
    ...     }
    ... )

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Type, Union

from notepress.exceptions import ValidationError
from notepress.pipeline.stage import Stage

logger = logging.getLogger(__name__)


@dataclass
class ParameterSpec:
    """Specification for a stage parameter.

    Parameters
    ----------
    type : type or tuple of type
        Python type(s) accepted for the parameter
    default : Any, optional
        Default value if parameter is not provided
    help : str, optional
        Help text describing the parameter
    required : bool, default = False
        Whether this parameter is required
    allow_none : bool, default = False
        Whether None is accepted as an explicit value
    choices : list, optional
        List of valid choices for this parameter
    validator : callable, optional
        Custom validation function: takes value, returns bool or raises ValueError

    Examples
    --------
    Simple parameter:
        >>> param = ParameterSpec(type=int, default=3, help="Maximum nesting depth")

    Parameter with choices:
        >>> param = ParameterSpec(type=str, default="-", choices=["-", "*", "+"], help="Bullet character")

    """

    type: Union[Type, tuple[Type, ...]]
    default: Any = None
    help: str = ""
    required: bool = False
    allow_none: bool = False
    choices: Optional[list[Any]] = None
    validator: Optional[Callable[[Any], bool]] = None

    def validate(self, value: Any, param_name: str = "value") -> bool:
        """Validate a parameter value.

        Parameters
        ----------
        value : Any
            Value to validate
        param_name : str, default "value"
            Name used in error messages

        Returns
        -------
        bool
            True if valid

        Raises
        ------
        ValidationError
            If value is invalid

        """
        if value is None and self.allow_none:
            return True

        if not isinstance(value, self.type):
            expected = (
                " or ".join(t.__name__ for t in self.type) if isinstance(self.type, tuple) else self.type.__name__
            )
            raise ValidationError(
                f"{param_name}: expected type {expected}, got {type(value).__name__}",
                parameter_name=param_name,
                parameter_value=value,
            )

        if self.choices is not None and value not in self.choices:
            raise ValidationError(
                f"{param_name}: value must be one of {self.choices}, got {value}",
                parameter_name=param_name,
                parameter_value=value,
            )

        if self.validator is not None:
            try:
                valid = self.validator(value)
            except ValueError as e:
                raise ValidationError(
                    f"{param_name}: {e}", parameter_name=param_name, parameter_value=value, original_error=e
                ) from e
            if not valid:
                raise ValidationError(
                    f"{param_name}: validation failed for value: {value}",
                    parameter_name=param_name,
                    parameter_value=value,
                )

        return True


@dataclass
class StageMetadata:
    """Metadata for a stage.

    Parameters
    ----------
    name : str
        Unique identifier for the stage (e.g., "wikilinks")
    description : str
        Human-readable description of what the stage does
    stage_class : type[Stage]
        The stage class
    parameters : dict[str, ParameterSpec], default = empty dict
        Parameters accepted by the stage constructor
    run_after : list[str], default = empty list
        Stages that must come earlier when both are in a pipeline
    tags : list[str], default = empty list
        Tags for categorization (e.g., ["links", "html"])

    Examples
    --------
    >>> metadata = StageMetadata(
    ...     name="autolink-headings",
    ...     description="Append anchor links to headings",
    ...     stage_class=AutolinkHeadingsStage,
    ...     run_after=["slug"],
    ... )

    """

    name: str
    description: str
    stage_class: Type[Stage]
    parameters: dict[str, ParameterSpec] = field(default_factory=dict)
    run_after: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate metadata after initialization."""
        if not self.name:
            raise ValidationError("Stage name cannot be empty", parameter_name="name", parameter_value=self.name)

        if not (isinstance(self.stage_class, type) and issubclass(self.stage_class, Stage)):
            raise ValidationError(
                f"stage_class must inherit from Stage, got {getattr(self.stage_class, '__name__', self.stage_class)}",
                parameter_name="stage_class",
                parameter_value=self.stage_class,
            )

    def create_instance(self, strict: bool = False, **kwargs: Any) -> Stage:
        """Create an instance of the stage with given parameters.

        Parameters
        ----------
        strict : bool, default = False
            If True, unknown parameters raise instead of being ignored
        **kwargs
            Parameters to pass to the stage constructor

        Returns
        -------
        Stage
            Stage instance

        Raises
        ------
        ValidationError
            If required parameters are missing or validation fails

        """
        validated_params = {}

        for param_name, param_spec in self.parameters.items():
            if param_name in kwargs:
                value = kwargs[param_name]
                param_spec.validate(value, param_name)
                validated_params[param_name] = value
            elif param_spec.required:
                raise ValidationError(
                    f"Required parameter '{param_name}' not provided for stage '{self.name}'",
                    parameter_name=param_name,
                )
            elif param_spec.default is not None:
                validated_params[param_name] = param_spec.default

        unknown_params = set(kwargs.keys()) - set(self.parameters.keys())
        if unknown_params:
            message = (
                f"Stage '{self.name}' received unknown parameter(s): {', '.join(sorted(unknown_params))}. "
                f"Valid parameters are: {', '.join(sorted(self.parameters.keys()))}"
            )
            if strict:
                raise ValidationError(message, parameter_name=sorted(unknown_params)[0])
            logger.warning(message)

        try:
            return self.stage_class(**validated_params)
        except TypeError as e:
            raise ValidationError(
                f"Failed to create stage '{self.name}': {e}", parameter_name="parameters", original_error=e
            ) from e


__all__ = [
    "ParameterSpec",
    "StageMetadata",
]
