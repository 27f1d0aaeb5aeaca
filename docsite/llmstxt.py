"""Render an ``llms.txt`` index from the ``llmstxt`` plugin options.

The plugin block lists documentation sections in the order they should be
presented to language models::

    plugins:
      - llmstxt:
          markdown_description: |
            uv is an extremely fast Python package manager.
          sections:
            Getting started:
              - getting-started/installation.md
              - getting-started/first-steps.md

Each entry is a document path, a glob over document paths, or a single-key
``{path: description}`` mapping. Titles come from the navigation, falling
back to one derived from the file name.
"""

from __future__ import annotations

import collections.abc as cabc
import fnmatch
import typing as typ
from pathlib import Path

from ._constants import LLMSTXT_PLUGIN
from .errors import MalformedConfigError, MissingDocumentError
from .nav import find_title, normalize_doc_path, page_url, title_from_path

if typ.TYPE_CHECKING:
    from .builder import ResolvedSite
    from .validation import ValidationReporter

_GLOB_CHARS = frozenset("*?[")


def build_llms_txt(
    site: ResolvedSite, *, reporter: ValidationReporter | None = None
) -> str:
    """Return the ``llms.txt`` document for ``site``.

    Parameters
    ----------
    site : ResolvedSite
        Resolved site whose ``llmstxt`` plugin options describe the sections.
    reporter : ValidationReporter, optional
        Receives section entries that name missing documents at the
        ``links.not_found`` level. Without one, missing entries are skipped.

    Returns
    -------
    str
        Markdown text ending with a newline.

    Raises
    ------
    MalformedConfigError
        If the plugin is not enabled or its options have the wrong shape.
    """
    options = site.config.llmstxt_options
    if options is None:
        msg = f"The '{LLMSTXT_PLUGIN}' plugin is not enabled in the configuration."
        raise MalformedConfigError(msg)

    config = site.config
    lines = [f"# {config.site_name}", ""]
    if config.site_description:
        lines.extend([f"> {config.site_description}", ""])
    description = options.get("markdown_description")
    if description is not None and not isinstance(description, str):
        msg = f"Plugin '{LLMSTXT_PLUGIN}' option 'markdown_description' must be text."
        raise MalformedConfigError(msg)
    if description and description.strip():
        lines.extend([description.strip(), ""])

    for title, entries in _sections(options.get("sections")).items():
        links = [
            _format_link(site, path, note)
            for path, note in _expand_entries(site, title, entries, reporter)
        ]
        if not links:
            continue
        lines.extend([f"## {title}", "", *links, ""])

    return "\n".join(lines).rstrip("\n") + "\n"


def write_llms_txt(
    site: ResolvedSite,
    output: Path,
    *,
    reporter: ValidationReporter | None = None,
) -> Path:
    """Render ``llms.txt`` for ``site`` into ``output`` and return the path."""
    text = build_llms_txt(site, reporter=reporter)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    return output


def _sections(value: object) -> dict[str, list[typ.Any]]:
    if value is None:
        return {}
    if not isinstance(value, cabc.Mapping):
        msg = f"Plugin '{LLMSTXT_PLUGIN}' option 'sections' must be a mapping."
        raise MalformedConfigError(msg)
    sections: dict[str, list[typ.Any]] = {}
    for title, entries in value.items():
        if not isinstance(entries, list):
            msg = f"llms.txt section '{title}' must be a list of documents."
            raise MalformedConfigError(msg)
        sections[str(title)] = entries
    return sections


def _expand_entries(
    site: ResolvedSite,
    section: str,
    entries: list[typ.Any],
    reporter: ValidationReporter | None,
) -> cabc.Iterator[tuple[str, str | None]]:
    for entry in entries:
        match entry:
            case str():
                path, note = entry, None
            case cabc.Mapping() if len(entry) == 1:
                ((path, note),) = entry.items()
                if not isinstance(path, str) or not (note is None or isinstance(note, str)):
                    msg = f"llms.txt section '{section}' has an invalid entry {entry!r}."
                    raise MalformedConfigError(msg)
            case _:
                msg = f"llms.txt section '{section}' has an invalid entry {entry!r}."
                raise MalformedConfigError(msg)

        path = normalize_doc_path(path.strip())
        if _GLOB_CHARS & set(path):
            for found in sorted(fnmatch.filter(site.documents, path)):
                yield found, note
            continue
        if path in site.documents:
            yield path, note
            continue
        if reporter is not None:
            reporter.report(
                "links.not_found",
                site.config.validation.links_not_found,
                MissingDocumentError(path, referrer=f"llms.txt section '{section}'"),
            )


def _format_link(site: ResolvedSite, path: str, note: str | None) -> str:
    title = find_title(site.nav, path) or title_from_path(path)
    url = page_url(path, use_directory_urls=site.config.use_directory_urls)
    if site.config.site_url:
        url = f"{site.config.site_url}{url}"
    link = f"- [{title}]({url})"
    return f"{link}: {note.strip()}" if note and note.strip() else link


__all__ = ["build_llms_txt", "write_llms_txt"]
