"""Cyclopts CLI entrypoint for validating and compiling documentation sites.

The ``docsite`` console script loads a MkDocs-style ``mkdocs.yml``, resolves
its navigation and redirect table against the docs tree, and emits the
artifacts a renderer needs: redirect stub pages, ``llms.txt`` and a dump of
the resolved configuration. Typical usage is ``docsite check --strict`` in CI
before the site is rendered.

Examples
--------
Validate the configuration in the current directory:

>>> from docsite.cli import main
>>> main()  # doctest: +SKIP

Write redirect stubs into the built site:

>>> from docsite.cli import app
>>> app(["redirects", "--output-dir", "site"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import os
import sys
import typing as typ
from pathlib import Path

import cyclopts
import msgspec.json as msgspec_json
from cyclopts import App, Parameter

from ._constants import DEFAULT_CONFIG_FILE
from .builder import ResolvedSite, SiteBuilder, write_redirect_pages
from .config import emit_site_config, load_site_config, write_site_config
from .errors import SiteBuildError
from .llmstxt import build_llms_txt, write_llms_txt
from .nav import NavGroup, NavNode, iter_leaves
from .validation import ValidationReporter

DEFAULT_CONFIG = Path(DEFAULT_CONFIG_FILE)
LOG_FORMAT = "%(levelname)-7s -  %(message)s"

logger = logging.getLogger(__name__)

app = App(name="docsite", config=cyclopts.config.Env("DOCSITE_", command=False))  # type: ignore[unknown-argument]

ConfigOption = typ.Annotated[
    Path, Parameter(help="Path to the site config", env_var="DOCSITE_CONFIG")
]
HopLimitOption = typ.Annotated[
    int | None,
    Parameter(help="Maximum redirect chain length (defaults to the table size)"),
]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _resolve(
    config: Path, *, strict: bool = False, hop_limit: int | None = None
) -> ResolvedSite:
    site_config = load_site_config(config)
    return SiteBuilder(site_config, strict=strict, hop_limit=hop_limit).build()


@app.command(help="Validate the site config against the docs tree.")
def check(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    strict: typ.Annotated[
        bool, Parameter(help="Abort when any warning is reported")
    ] = False,
    hop_limit: HopLimitOption = None,
) -> None:
    """Resolve the site and print a one-line summary.

    Parameters
    ----------
    config : Path, optional
        Path to ``mkdocs.yml`` (overridable via ``DOCSITE_CONFIG``).
    strict : bool, optional
        Turn recorded warnings into a :class:`~docsite.errors.StrictModeError`.
    hop_limit : int or None, optional
        Maximum redirect chain length.

    Raises
    ------
    SiteBuildError
        If the configuration is malformed or a check configured as ``error``
        fails.
    """
    site = _resolve(config, strict=strict, hop_limit=hop_limit)
    pages = sum(1 for leaf in iter_leaves(site.nav) if not leaf.is_external)
    print(
        f"{site.config.site_name}: {pages} nav page(s), "
        f"{len(site.documents)} document(s), {len(site.redirects)} redirect(s), "
        f"{len(site.issues)} issue(s)"
    )


@app.command(help="Print the resolved navigation in sidebar order.")
def nav(*, config: ConfigOption = DEFAULT_CONFIG) -> None:
    """Print the navigation tree, one entry per line."""
    site = _resolve(config)
    for line in _nav_lines(site.nav, depth=0):
        print(line)


def _nav_lines(nodes: tuple[NavNode, ...], *, depth: int) -> typ.Iterator[str]:
    indent = "  " * depth
    for node in nodes:
        if isinstance(node, NavGroup):
            yield f"{indent}- {node.title}"
            yield from _nav_lines(node.children, depth=depth + 1)
        else:
            yield f"{indent}- {node.display_title} ({node.path})"


@app.command(help="Print the redirect table or write redirect stub pages.")
def redirects(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    output_dir: typ.Annotated[
        Path | None, Parameter(help="Write HTML stubs into this folder")
    ] = None,
    hop_limit: HopLimitOption = None,
) -> None:
    """Print ``old -> final`` pairs, or write stubs when ``output_dir`` is set."""
    site = _resolve(config, hop_limit=hop_limit)
    if output_dir is None:
        for entry in site.redirects:
            print(f"{entry.old_path} -> {site.redirects.resolve(entry.old_path)}")
        return
    for path in write_redirect_pages(site, output_dir):
        print(f"wrote {_format_path(path)}")


@app.command(help="Render llms.txt from the llmstxt plugin options.")
def llmstxt(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    output: typ.Annotated[
        Path | None, Parameter(help="Write llms.txt here instead of stdout")
    ] = None,
) -> None:
    """Render ``llms.txt`` and print it or write it to ``output``."""
    site = _resolve(config)
    reporter = ValidationReporter()
    if output is None:
        sys.stdout.write(build_llms_txt(site, reporter=reporter))
        return
    path = write_llms_txt(site, output, reporter=reporter)
    print(f"wrote {_format_path(path)}")


@app.command(help="Dump the loaded config as YAML or the resolved site as JSON.")
def dump(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    fmt: typ.Annotated[
        typ.Literal["yaml", "json"],
        Parameter(name="--format", help="Output format"),
    ] = "yaml",
    output: typ.Annotated[
        Path | None, Parameter(help="Write to this file instead of stdout")
    ] = None,
) -> None:
    """Serialize the configuration.

    ``yaml`` round-trips the loaded configuration; ``json`` exports the
    resolved site (navigation, redirects and issues included).
    """
    if fmt == "yaml":
        site_config = load_site_config(config)
        if output is None:
            emit_site_config(site_config, sys.stdout)
            return
        write_site_config(site_config, output)
        print(f"wrote {_format_path(output)}")
        return

    site = _resolve(config)
    payload = msgspec_json.format(msgspec_json.encode(site.to_builtins()), indent=2)
    if output is None:
        sys.stdout.write(payload.decode("utf-8") + "\n")
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(payload + b"\n")
    print(f"wrote {_format_path(output)}")


def _configure_logging() -> None:
    level = os.getenv("DOCSITE_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)


def main() -> None:
    """Invoke the Cyclopts application that powers the ``docsite`` command.

    Build failures are logged and turned into exit status 1.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    _configure_logging()
    try:
        app()
    except (SiteBuildError, FileNotFoundError) as exc:
        logger.error("%s", exc)
        raise SystemExit(1) from exc


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
