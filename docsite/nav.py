"""Parse, validate and walk the site navigation tree.

The declared ``nav`` block is a nested list in which every entry is one of:

* a bare document path (``- guides/index.md``), usually a section index;
* a single-key mapping from title to path (``- Installation: install.md``);
* a single-key mapping from title to a nested list (a group).

:func:`parse_nav` turns that list into a tree of :class:`NavLeaf` and
:class:`NavGroup` nodes without reordering anything: the declared order is the
sidebar order. :func:`resolve_nav` then checks every document leaf against
the docs directory, reporting problems at the configured validation levels.

Examples
--------
>>> nodes = parse_nav([
...     {"Introduction": "index.md"},
...     {"Guides": ["guides/index.md", {"Tools": "guides/tools.md"}]},
... ])
>>> [leaf.path for leaf in iter_leaves(nodes)]
['index.md', 'guides/index.md', 'guides/tools.md']
>>> find_title(nodes, "guides/index.md")
'Guides'
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import posixpath
import typing as typ
from pathlib import Path
from urllib.parse import urlsplit

from ._constants import INDEX_STEMS, MARKDOWN_SUFFIXES
from .errors import (
    BrokenNavLinkError,
    MalformedConfigError,
    OmittedFilesError,
    UnrecognizedLinkError,
)

if typ.TYPE_CHECKING:
    from .validation import ValidationConfig, ValidationReporter


@dc.dataclass(frozen=True, slots=True)
class NavLeaf:
    """A navigation entry pointing directly at a document or external URL."""

    path: str
    title: str | None = None

    @property
    def is_external(self) -> bool:
        """Return True when the leaf links outside the documentation tree."""
        return is_external_url(self.path)

    @property
    def display_title(self) -> str:
        """Return the declared title or one derived from the file name."""
        return self.title or title_from_path(self.path)


@dc.dataclass(frozen=True, slots=True)
class NavGroup:
    """A titled navigation section containing nested entries."""

    title: str
    children: tuple[NavNode, ...] = ()


NavNode = NavLeaf | NavGroup


def parse_nav(raw: object) -> tuple[NavNode, ...]:
    """Build a navigation tree from the declared ``nav`` list.

    Parameters
    ----------
    raw : object
        The ``nav`` value as loaded from YAML.

    Returns
    -------
    tuple[NavNode, ...]
        Top-level nodes in declared order.

    Raises
    ------
    MalformedConfigError
        If ``raw`` is not a list, an entry is neither a path nor a single-key
        mapping, or the structure refers back to itself through YAML aliases.
    """
    if not isinstance(raw, list):
        msg = f"'nav' must be a list of entries, got {type(raw).__name__}."
        raise MalformedConfigError(msg)
    return _parse_entries(raw, location="nav", ancestors=frozenset({id(raw)}))


def _parse_entries(
    entries: list[typ.Any], *, location: str, ancestors: frozenset[int]
) -> tuple[NavNode, ...]:
    return tuple(
        _parse_entry(entry, location=f"{location}[{index}]", ancestors=ancestors)
        for index, entry in enumerate(entries)
    )


def _parse_entry(
    entry: object, *, location: str, ancestors: frozenset[int]
) -> NavNode:
    match entry:
        case str() as path:
            return NavLeaf(path=_clean_path(path, location))
        case cabc.Mapping() if len(entry) == 1:
            ((title, value),) = entry.items()
            if not isinstance(title, str) or not title.strip():
                msg = f"{location}: navigation titles must be non-empty strings."
                raise MalformedConfigError(msg)
            match value:
                case str() as path:
                    return NavLeaf(path=_clean_path(path, location), title=title)
                case list() as children:
                    if id(children) in ancestors:
                        msg = f"{location}: navigation group '{title}' contains itself."
                        raise MalformedConfigError(msg)
                    return NavGroup(
                        title=title,
                        children=_parse_entries(
                            children,
                            location=f"{location}.{title}",
                            ancestors=ancestors | {id(children)},
                        ),
                    )
                case _:
                    msg = (
                        f"{location}: entry '{title}' must map to a path or a list, "
                        f"got {type(value).__name__}."
                    )
                    raise MalformedConfigError(msg)
        case cabc.Mapping():
            msg = f"{location}: navigation mappings must have exactly one key."
            raise MalformedConfigError(msg)
        case _:
            msg = (
                f"{location}: expected a path or a single-key mapping, "
                f"got {type(entry).__name__}."
            )
            raise MalformedConfigError(msg)


def _clean_path(path: str, location: str) -> str:
    text = path.strip()
    if not text:
        msg = f"{location}: navigation paths must not be empty."
        raise MalformedConfigError(msg)
    if is_external_url(text) or text.startswith("/"):
        return text
    normalized = normalize_doc_path(text)
    if escapes_docs_dir(normalized):
        msg = (
            f"{location}: navigation path '{text}' points outside the docs "
            "directory."
        )
        raise MalformedConfigError(msg)
    return normalized


def dump_nav(nodes: cabc.Iterable[NavNode]) -> list[typ.Any]:
    """Return the declared-list form of a navigation tree."""
    dumped: list[typ.Any] = []
    for node in nodes:
        match node:
            case NavLeaf(path=path, title=None):
                dumped.append(path)
            case NavLeaf(path=path, title=title):
                dumped.append({title: path})
            case NavGroup(title=title, children=children):
                dumped.append({title: dump_nav(children)})
    return dumped


def iter_leaves(nodes: cabc.Iterable[NavNode]) -> cabc.Iterator[NavLeaf]:
    """Yield every leaf depth-first in declared order."""
    for node in nodes:
        if isinstance(node, NavGroup):
            yield from iter_leaves(node.children)
        else:
            yield node


def leaf_paths(nodes: cabc.Iterable[NavNode]) -> list[str]:
    """Return the document paths of every internal leaf, in declared order."""
    return [
        strip_fragment(leaf.path)
        for leaf in iter_leaves(nodes)
        if not leaf.is_external and not leaf.path.startswith("/")
    ]


def find_title(
    nodes: cabc.Iterable[NavNode], path: str, *, section_title: str | None = None
) -> str | None:
    """Return the navigation title of ``path``.

    Bare entries inside a group inherit the group's title, which is how
    section index pages are labelled. Returns ``None`` when the path is not in
    the navigation or carries no title at all.
    """
    for node in nodes:
        match node:
            case NavLeaf(path=leaf_path, title=title) if leaf_path == path:
                return title or section_title
            case NavGroup(title=title, children=children):
                found = find_title(children, path, section_title=title)
                if found:
                    return found
    return None


def resolve_nav(
    nodes: tuple[NavNode, ...],
    docs_dir: Path,
    *,
    validation: ValidationConfig,
    reporter: ValidationReporter,
) -> tuple[NavNode, ...]:
    """Check every leaf of ``nodes`` against ``docs_dir``.

    Missing documents are reported as :class:`BrokenNavLinkError` at the
    ``nav.not_found`` level, absolute links at ``links.absolute_links`` and
    links that are neither Markdown documents nor URLs at
    ``links.unrecognized_links``. The tree is returned unchanged so the
    sidebar keeps its declared order.

    Raises
    ------
    BrokenNavLinkError
        If a document is missing and ``nav.not_found`` is ``error``.
    UnrecognizedLinkError
        If a link is absolute or unrecognized and the matching level is
        ``error``.
    """
    for leaf in iter_leaves(nodes):
        if leaf.is_external:
            continue
        if leaf.path.startswith("/"):
            reporter.report(
                "links.absolute_links",
                validation.absolute_links,
                UnrecognizedLinkError(leaf.path, "is an absolute link"),
            )
            continue
        path = strip_fragment(leaf.path)
        if not path.endswith(MARKDOWN_SUFFIXES):
            reporter.report(
                "links.unrecognized_links",
                validation.unrecognized_links,
                UnrecognizedLinkError(leaf.path, "is not a Markdown document"),
            )
            continue
        if not (docs_dir / path).is_file():
            reporter.report(
                "nav.not_found",
                validation.nav_not_found,
                BrokenNavLinkError(path, title=leaf.title),
            )
    return nodes


def auto_nav(docs_dir: Path) -> tuple[NavNode, ...]:
    """Build a navigation tree from the docs directory layout.

    Index pages come first, then the remaining documents alphabetically, then
    one group per subdirectory. Hidden files and directories are skipped.
    """
    return _auto_nav_level(docs_dir, docs_dir)


def _auto_nav_level(root: Path, directory: Path) -> tuple[NavNode, ...]:
    entries = sorted(
        (entry for entry in directory.iterdir() if not entry.name.startswith(".")),
        key=lambda entry: entry.name,
    )
    documents = sorted(
        (entry for entry in entries if entry.is_file() and _is_markdown(entry)),
        key=lambda entry: (entry.stem not in INDEX_STEMS, entry.name),
    )
    nodes: list[NavNode] = [
        NavLeaf(path=entry.relative_to(root).as_posix()) for entry in documents
    ]
    for entry in entries:
        if not entry.is_dir():
            continue
        children = _auto_nav_level(root, entry)
        if children:
            nodes.append(NavGroup(title=_humanize(entry.name), children=children))
    return tuple(nodes)


def discover_documents(docs_dir: Path) -> frozenset[str]:
    """Return the POSIX paths of every Markdown document under ``docs_dir``."""
    found: set[str] = set()
    for candidate in docs_dir.rglob("*"):
        relative = candidate.relative_to(docs_dir)
        if any(part.startswith(".") for part in relative.parts):
            continue
        if candidate.is_file() and _is_markdown(candidate):
            found.add(relative.as_posix())
    return frozenset(found)


def find_omitted_files(
    documents: cabc.Iterable[str],
    nodes: cabc.Iterable[NavNode],
    *,
    exclude: cabc.Iterable[str] = (),
) -> tuple[str, ...]:
    """Return documents reached by neither the navigation nor ``exclude``."""
    reachable = set(leaf_paths(nodes)) | set(exclude)
    return tuple(sorted(path for path in documents if path not in reachable))


def report_omitted_files(
    documents: cabc.Iterable[str],
    nodes: cabc.Iterable[NavNode],
    *,
    exclude: cabc.Iterable[str],
    validation: ValidationConfig,
    reporter: ValidationReporter,
) -> tuple[str, ...]:
    """Report documents outside the navigation at ``nav.omitted_files``."""
    omitted = find_omitted_files(documents, nodes, exclude=exclude)
    if omitted:
        reporter.report(
            "nav.omitted_files",
            validation.nav_omitted_files,
            OmittedFilesError(omitted),
        )
    return omitted


def page_url(path: str, *, use_directory_urls: bool = True) -> str:
    """Return the site-relative URL a document is served from.

    >>> page_url("guides/package.md")
    'guides/package/'
    >>> page_url("guides/index.md")
    'guides/'
    >>> page_url("guides/package.md", use_directory_urls=False)
    'guides/package.html'
    """
    document, _, fragment = path.partition("#")
    parent, name = posixpath.split(document)
    stem = name.rsplit(".", 1)[0]
    if stem in INDEX_STEMS:
        url = f"{parent}/" if parent else ""
        if not use_directory_urls:
            url = f"{url}index.html"
    elif use_directory_urls:
        url = posixpath.join(parent, stem) + "/"
    else:
        url = posixpath.join(parent, f"{stem}.html")
    return f"{url}#{fragment}" if fragment else url


def normalize_doc_path(path: str) -> str:
    """Return a POSIX document path without ``./`` segments or backslashes.

    A trailing slash is kept so directory-style paths stay recognisable.

    >>> normalize_doc_path("./guides//tools.md")
    'guides/tools.md'
    >>> normalize_doc_path("guides/")
    'guides/'
    """
    document, sep, fragment = path.replace("\\", "/").partition("#")
    normalized = posixpath.normpath(document) if document else document
    if normalized == ".":
        normalized = ""
    elif document.endswith("/") and not normalized.endswith("/"):
        normalized = f"{normalized}/"
    return f"{normalized}{sep}{fragment}"


def escapes_docs_dir(path: str) -> bool:
    """Return True when a normalized document path climbs above the docs root."""
    document = strip_fragment(path)
    return document == ".." or document.startswith("../")


def strip_fragment(path: str) -> str:
    """Drop a trailing ``#anchor`` from a document path."""
    return path.partition("#")[0]


def is_external_url(path: str) -> bool:
    """Return True when ``path`` has a URL scheme or is protocol-relative."""
    return bool(urlsplit(path).scheme) or path.startswith("//")


def title_from_path(path: str) -> str:
    """Derive a readable title from a document path.

    >>> title_from_path("guides/integration/pre-commit.md")
    'Pre commit'
    >>> title_from_path("reference/policies/index.md")
    'Policies'
    """
    document = strip_fragment(path).rstrip("/")
    parent, name = posixpath.split(document)
    stem = name.rsplit(".", 1)[0]
    if stem in INDEX_STEMS:
        stem = posixpath.basename(parent) or "Home"
    return _humanize(stem)


def _humanize(name: str) -> str:
    text = name.replace("-", " ").replace("_", " ").strip()
    return text[:1].upper() + text[1:]


def _is_markdown(path: Path) -> bool:
    return path.suffix in MARKDOWN_SUFFIXES


__all__ = [
    "NavGroup",
    "NavLeaf",
    "NavNode",
    "auto_nav",
    "discover_documents",
    "dump_nav",
    "escapes_docs_dir",
    "find_omitted_files",
    "find_title",
    "is_external_url",
    "iter_leaves",
    "leaf_paths",
    "normalize_doc_path",
    "page_url",
    "parse_nav",
    "report_omitted_files",
    "resolve_nav",
    "strip_fragment",
    "title_from_path",
]
