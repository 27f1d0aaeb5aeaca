"""Exception hierarchy raised while resolving a documentation site.

Every error derives from :class:`SiteBuildError` (itself a ``ValueError``) so
callers can abort a build with a single ``except`` clause. Reference errors
(:class:`MissingDocumentError`, :class:`UnrecognizedLinkError` and
:class:`OmittedFilesError`) may be downgraded to log records by
:class:`docsite.validation.ValidationReporter`; structural errors always abort.
"""

from __future__ import annotations


class SiteBuildError(ValueError):
    """Base class for every configuration or validation failure."""


class MalformedConfigError(SiteBuildError):
    """Raised when the configuration is structurally invalid or mistyped."""


class MissingDocumentError(SiteBuildError):
    """Raised when a reference points at a document that does not exist."""

    def __init__(self, path: str, *, referrer: str) -> None:
        self.path = path
        self.referrer = referrer
        super().__init__(
            f"{referrer} references '{path}', which does not exist in the docs "
            "directory."
        )


class BrokenNavLinkError(MissingDocumentError):
    """Raised when a navigation entry references a missing document."""

    def __init__(self, path: str, *, title: str | None = None) -> None:
        self.title = title
        referrer = f"Navigation entry '{title}'" if title else "Navigation entry"
        super().__init__(path, referrer=referrer)


class BrokenRedirectTargetError(MissingDocumentError):
    """Raised when a redirect points at neither a document nor a redirect."""

    def __init__(self, old_path: str, new_path: str) -> None:
        self.old_path = old_path
        self.new_path = new_path
        super().__init__(new_path, referrer=f"Redirect '{old_path}'")


class UnrecognizedLinkError(SiteBuildError):
    """Raised for navigation links that are absolute or not Markdown."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Navigation link '{path}' {reason}.")


class OmittedFilesError(SiteBuildError):
    """Raised when documents exist that no navigation entry reaches."""

    def __init__(self, paths: tuple[str, ...]) -> None:
        self.paths = paths
        listing = "\n".join(f"  - {path}" for path in paths)
        super().__init__(
            "The following pages exist in the docs directory, but are not "
            f"included in the nav:\n{listing}"
        )


class RedirectCollisionError(SiteBuildError):
    """Raised when a redirect source shadows a live navigation page."""

    def __init__(self, old_path: str) -> None:
        self.old_path = old_path
        super().__init__(
            f"Redirect source '{old_path}' collides with a page in the navigation."
        )


class RedirectCycleError(SiteBuildError):
    """Raised when following a redirect chain revisits a path."""

    def __init__(self, chain: tuple[str, ...], message: str | None = None) -> None:
        self.chain = chain
        super().__init__(message or f"Redirect cycle detected: {' -> '.join(chain)}")


class RedirectHopLimitError(RedirectCycleError):
    """Raised when a redirect chain does not terminate within the hop limit."""

    def __init__(self, chain: tuple[str, ...], hop_limit: int) -> None:
        self.hop_limit = hop_limit
        super().__init__(
            chain,
            f"Redirect chain exceeds {hop_limit} hop(s): {' -> '.join(chain)}",
        )


class StrictModeError(SiteBuildError):
    """Raised after resolution when strict mode saw at least one warning."""

    def __init__(self, warnings: int) -> None:
        self.warnings = warnings
        super().__init__(f"Aborted with {warnings} warning(s) in strict mode.")


__all__ = [
    "BrokenNavLinkError",
    "BrokenRedirectTargetError",
    "MalformedConfigError",
    "MissingDocumentError",
    "OmittedFilesError",
    "RedirectCollisionError",
    "RedirectCycleError",
    "RedirectHopLimitError",
    "SiteBuildError",
    "StrictModeError",
    "UnrecognizedLinkError",
]
