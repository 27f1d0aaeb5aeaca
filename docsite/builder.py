"""Resolve a site configuration into the structures a renderer consumes.

:class:`SiteBuilder` runs the single validation pass over a loaded
:class:`~docsite.config.SiteConfig`:

1. resolve the navigation (declared, or generated from ``docs_dir``) and
   check every leaf against the docs tree;
2. build the redirect table, checking collisions, cycles and targets;
3. report documents the navigation does not reach.

Problems that the configured validation levels downgrade are logged and
collected on :attr:`ResolvedSite.issues`. Strict mode turns any warning into
a :class:`~docsite.errors.StrictModeError` once the pass completes.

Examples
--------
>>> from pathlib import Path
>>> from docsite.config import load_site_config
>>> from docsite.builder import SiteBuilder
>>> site = SiteBuilder(load_site_config(Path("mkdocs.yml"))).build()  # doctest: +SKIP
>>> site.redirects.resolve("guides/publish.md")  # doctest: +SKIP
'guides/package.md'
"""

from __future__ import annotations

import dataclasses as dc
import logging
import posixpath
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .config import dump_site_config
from .errors import MalformedConfigError, StrictModeError
from .nav import (
    NavNode,
    auto_nav,
    discover_documents,
    dump_nav,
    is_external_url,
    leaf_paths,
    page_url,
    report_omitted_files,
    resolve_nav,
)
from .redirects import RedirectTable
from .validation import ValidationIssue, ValidationReporter

if typ.TYPE_CHECKING:
    from .config import SiteConfig

logger = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class ResolvedSite:
    """A validated site ready to hand to a renderer."""

    config: SiteConfig
    nav: tuple[NavNode, ...]
    redirects: RedirectTable
    documents: frozenset[str]
    issues: tuple[ValidationIssue, ...] = ()
    nav_declared: bool = True

    def to_builtins(self) -> dict[str, typ.Any]:
        """Return a JSON-ready mapping describing the resolved site."""
        return {
            "config": dump_site_config(self.config),
            "nav": dump_nav(self.nav),
            "nav_declared": self.nav_declared,
            "documents": sorted(self.documents),
            "redirects": {
                entry.old_path: self.redirects.resolve(entry.old_path)
                for entry in self.redirects
            },
            "issues": [
                {"check": issue.check, "level": issue.level.value, "message": issue.message}
                for issue in self.issues
            ],
        }


class SiteBuilder:
    """Validate a site configuration against its docs tree."""

    def __init__(
        self,
        config: SiteConfig,
        *,
        strict: bool = False,
        hop_limit: int | None = None,
    ) -> None:
        """Initialize the builder.

        Parameters
        ----------
        config : SiteConfig
            Parsed configuration, typically from
            :func:`docsite.config.load_site_config`.
        strict : bool, optional
            Abort with :class:`StrictModeError` when any warning is recorded.
        hop_limit : int, optional
            Maximum redirect chain length; defaults to the table size.
        """
        self.config = config
        self.strict = strict
        self.hop_limit = hop_limit

    def build(self) -> ResolvedSite:
        """Run the validation pass and return the resolved site.

        Raises
        ------
        MalformedConfigError
            If ``docs_dir`` is not an existing directory or the redirect map
            is mistyped.
        SiteBuildError
            Any reference error whose level is ``error``, redirect collisions
            and cycles, and :class:`StrictModeError` in strict mode.
        """
        docs_dir = self.config.docs_path
        if not docs_dir.is_dir():
            msg = f"The docs directory '{docs_dir}' does not exist."
            raise MalformedConfigError(msg)

        validation = self.config.validation
        reporter = ValidationReporter()
        documents = discover_documents(docs_dir)

        nav_declared = self.config.nav is not None
        nav = self.config.nav if self.config.nav is not None else auto_nav(docs_dir)
        nav = resolve_nav(nav, docs_dir, validation=validation, reporter=reporter)

        redirects = RedirectTable.build(
            self.config.redirect_maps,
            live_paths=leaf_paths(nav),
            documents=documents,
            hop_limit=self.hop_limit,
            validation=validation,
            reporter=reporter,
        )
        report_omitted_files(
            documents,
            nav,
            exclude=[entry.old_path for entry in redirects],
            validation=validation,
            reporter=reporter,
        )

        if self.strict and reporter.warnings:
            raise StrictModeError(reporter.warnings)
        logger.info(
            "Resolved %d document(s), %d redirect(s) and %d issue(s) for %s",
            len(documents),
            len(redirects),
            len(reporter.issues),
            self.config.site_name,
        )
        return ResolvedSite(
            config=self.config,
            nav=nav,
            redirects=redirects,
            documents=documents,
            issues=tuple(reporter.issues),
            nav_declared=nav_declared,
        )


class RedirectPageWriter:
    """Render an HTML stub at every redirect source that forwards readers."""

    def __init__(self, *, templates_dir: Path | None = None) -> None:
        """Initialize the writer and its Jinja environment."""
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template("redirect.jinja")

    def run(self, site: ResolvedSite, output_dir: Path) -> list[Path]:
        """Write one stub per redirect under ``output_dir`` and return the paths."""
        use_directory_urls = site.config.use_directory_urls
        root = output_dir.resolve()
        written: list[Path] = []
        for entry in site.redirects:
            source_url = page_url(entry.old_path, use_directory_urls=use_directory_urls)
            target = site.redirects.resolve(entry.old_path)
            href = _redirect_href(
                source_url,
                target,
                site_url=site.config.site_url,
                use_directory_urls=use_directory_urls,
            )
            output_path = output_dir / _stub_file(source_url)
            if not output_path.resolve().is_relative_to(root):
                msg = (
                    f"Redirect source '{entry.old_path}' would be written outside "
                    f"'{output_dir}'."
                )
                raise MalformedConfigError(msg)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            html = self.template.render(href=href, source=entry.old_path)
            if not html.endswith("\n"):
                html += "\n"
            output_path.write_text(html, encoding="utf-8")
            logger.debug("Wrote redirect %s -> %s", output_path, href)
            written.append(output_path)
        return written


def write_redirect_pages(site: ResolvedSite, output_dir: Path) -> list[Path]:
    """Write redirect stub pages for ``site`` into ``output_dir``."""
    return RedirectPageWriter().run(site, output_dir)


def _stub_file(source_url: str) -> str:
    """Return the file a source URL is served from, relative to the site root."""
    if not source_url or source_url.endswith("/"):
        return f"{source_url}index.html"
    return source_url


def _redirect_href(
    source_url: str,
    target: str,
    *,
    site_url: str | None,
    use_directory_urls: bool,
) -> str:
    """Return the link a stub at ``source_url`` forwards to."""
    if is_external_url(target):
        return target
    target_url = page_url(target, use_directory_urls=use_directory_urls)
    if site_url:
        return f"{site_url}{target_url}"
    target_path, sep, fragment = target_url.partition("#")
    source_dir = posixpath.dirname(_stub_file(source_url)) or "."
    relative = posixpath.relpath(target_path or ".", start=source_dir)
    if target_path.endswith("/") or not target_path:
        relative = f"{relative}/"
    return f"{relative}{sep}{fragment}"


__all__ = [
    "RedirectPageWriter",
    "ResolvedSite",
    "SiteBuilder",
    "write_redirect_pages",
]
