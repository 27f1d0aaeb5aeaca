"""Validation levels and the reporter that applies them.

A configuration declares how strictly each reference check is enforced, using
the same vocabulary MkDocs does::

    validation:
      omitted_files: warn
      absolute_links: warn
      unrecognized_links: warn

:class:`ValidationReporter` receives every problem found during resolution
together with the level configured for its check and either raises it,
records and logs it, or drops it.

Examples
--------
>>> from docsite.errors import BrokenNavLinkError
>>> reporter = ValidationReporter()
>>> reporter.report("nav.not_found", ValidationLevel.WARN,
...                 BrokenNavLinkError("reference/missing.md"))
>>> reporter.warnings
1
"""

from __future__ import annotations

import dataclasses as dc
import enum
import logging
import typing as typ

if typ.TYPE_CHECKING:
    from .errors import SiteBuildError

logger = logging.getLogger(__name__)


class ValidationLevel(enum.StrEnum):
    """How a failed reference check is handled."""

    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    IGNORE = "ignore"


@dc.dataclass(frozen=True, slots=True)
class ValidationConfig:
    """Per-check validation levels for a site build."""

    nav_omitted_files: ValidationLevel = ValidationLevel.INFO
    nav_not_found: ValidationLevel = ValidationLevel.WARN
    links_not_found: ValidationLevel = ValidationLevel.WARN
    absolute_links: ValidationLevel = ValidationLevel.INFO
    unrecognized_links: ValidationLevel = ValidationLevel.INFO


@dc.dataclass(frozen=True, slots=True)
class ValidationIssue:
    """A reference problem that was downgraded instead of aborting the build."""

    check: str
    level: ValidationLevel
    message: str


class ValidationReporter:
    """Apply validation levels to problems found while resolving a site."""

    def __init__(self) -> None:
        self.issues: list[ValidationIssue] = []

    def report(
        self, check: str, level: ValidationLevel, error: SiteBuildError
    ) -> None:
        """Raise, log or drop ``error`` according to ``level``.

        Parameters
        ----------
        check : str
            Dotted name of the check that failed, e.g. ``"nav.not_found"``.
        level : ValidationLevel
            Level configured for the check.
        error : SiteBuildError
            The problem found. It is raised unchanged for
            :attr:`ValidationLevel.ERROR`.

        Raises
        ------
        SiteBuildError
            When ``level`` is :attr:`ValidationLevel.ERROR`.
        """
        match level:
            case ValidationLevel.ERROR:
                raise error
            case ValidationLevel.IGNORE:
                return
            case ValidationLevel.WARN:
                logger.warning("%s", error)
            case ValidationLevel.INFO:
                logger.info("%s", error)
        self.issues.append(ValidationIssue(check=check, level=level, message=str(error)))

    @property
    def warnings(self) -> int:
        """Number of issues recorded at warning level."""
        return sum(1 for issue in self.issues if issue.level is ValidationLevel.WARN)


__all__ = [
    "ValidationConfig",
    "ValidationIssue",
    "ValidationLevel",
    "ValidationReporter",
]
