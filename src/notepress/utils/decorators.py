#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/utils/decorators.py
"""Decorators for optional dependencies and debug timing.

The parser and the highlight and raw stages rely on third-party packages.
Guarding their entry points with :func:`requires_dependencies` turns a
missing or outdated package into a :class:`DependencyError` that names the
component and the install command. A pipeline runs its stages on every
document, so the result of each dependency check is cached.
"""

from __future__ import annotations

import importlib
import logging
import time
from contextlib import contextmanager
from functools import lru_cache, wraps
from importlib import metadata
from typing import Any, Callable, Generator, Iterable, Optional

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version

from notepress.exceptions import DependencyError

# (install name, import name, version specifier)
Requirement = tuple[str, str, str]


def installed_version(install_name: str) -> Optional[str]:
    """Return the installed version of a distribution, or None."""
    try:
        return metadata.version(install_name)
    except metadata.PackageNotFoundError:
        return None


def satisfies(install_name: str, version_spec: str) -> bool:
    """Return True if the installed ``install_name`` matches ``version_spec``.

    A distribution that is not installed, an unparsable installed version and
    an invalid specifier all count as not matching.
    """
    found = installed_version(install_name)
    if found is None:
        return False
    try:
        return Version(found) in SpecifierSet(version_spec)
    except (InvalidSpecifier, InvalidVersion):
        return False


@lru_cache(maxsize=None)
def probe_requirement(requirement: Requirement) -> tuple[Optional[str], Optional[ImportError]]:
    """Check one requirement.

    Returns
    -------
    tuple
        ``(problem, import_error)``. ``problem`` is None when the package is
        importable and satisfies the specifier, ``"missing"`` when it cannot
        be imported, and the installed version (or ``"unknown"``) when the
        version does not match.

    """
    install_name, import_name, version_spec = requirement
    try:
        # nosemgrep: python.lang.security.audit.non-literal-import.non-literal-import
        importlib.import_module(import_name)
    except ImportError as e:
        return "missing", e

    if version_spec and not satisfies(install_name, version_spec):
        return installed_version(install_name) or "unknown", None
    return None, None


def check_dependencies(component_name: str, packages: Iterable[Requirement]) -> None:
    """Raise DependencyError if any of ``packages`` is missing or too old.

    Parameters
    ----------
    component_name : str
        Parser or stage needing the packages, used in the error message
    packages : iterable of (install_name, import_name, version_spec)
        Requirements to check

    Raises
    ------
    DependencyError
        Listing every missing package and every version mismatch

    """
    missing: list[tuple[str, str]] = []
    version_mismatches: list[tuple[str, str, str]] = []
    import_error: Optional[ImportError] = None

    for requirement in packages:
        problem, error = probe_requirement(tuple(requirement))
        if problem is None:
            continue
        install_name, _import_name, version_spec = requirement
        if problem == "missing":
            missing.append((install_name, version_spec))
            import_error = import_error or error
        else:
            version_mismatches.append((install_name, version_spec, problem))

    if missing or version_mismatches:
        raise DependencyError(
            component_name=component_name,
            missing_packages=missing,
            version_mismatches=version_mismatches,
            original_error=import_error,
        ) from import_error


def requires_dependencies(component_name: str, packages: Iterable[Requirement]) -> Callable:
    """Check ``packages`` before each call of the decorated function.

    Parameters
    ----------
    component_name : str
        Name of the parser or stage (e.g., "markdown", "highlight")
    packages : iterable of tuple
        ``(install_name, import_name, version_spec)`` requirements, for
        example ``("beautifulsoup4", "bs4", ">=4.12.0")``

    Examples
    --------
    >>> @requires_dependencies("highlight", (("pygments", "pygments", ">=2.15"),))
    ... def run(self, tree, context):
    ...     import pygments

    """
    requirements = tuple(tuple(requirement) for requirement in packages)

    def decorator(method: Callable) -> Callable:
        @wraps(method)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            check_dependencies(component_name, requirements)
            return method(*args, **kwargs)

        return wrapper

    return decorator


@contextmanager
def debug_timer(logger: logging.Logger, operation: str) -> Generator[None, None, None]:
    """Log how long the block took at DEBUG level.

    Nothing is measured when ``logger`` is not enabled for DEBUG.
    """
    if not logger.isEnabledFor(logging.DEBUG):
        yield
        return

    start_time = time.perf_counter()
    yield
    logger.debug(f"{operation} completed in {time.perf_counter() - start_time:.3f}s")
