"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import collections.abc as cabc
import logging
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .._constants import DEFAULT_DOCS_DIR, DEFAULT_PLUGINS, DEFAULT_SITE_DIR
from ..errors import MalformedConfigError
from ..nav import parse_nav
from .helpers import (
    _build_option_bags,
    _build_theme_config,
    _build_validation_config,
    _expect_mapping,
    _normalize_site_url,
    _optional_bool,
    _optional_str,
    _require_str,
    _str_list,
)
from .models import OptionBag, SiteConfig

logger = logging.getLogger(__name__)


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML configuration describing a documentation site.

    Parameters
    ----------
    path : Path
        Filesystem path to the configuration file (for example,
        ``mkdocs.yml``). Relative settings such as ``docs_dir`` are resolved
        against its parent directory.

    Returns
    -------
    SiteConfig
        Parsed site configuration including theme, extensions, plugin option
        bags, the declared navigation tree and validation levels.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    MalformedConfigError
        If the top-level structure is not a mapping, required settings are
        missing, a setting has the wrong type, or the file is not valid YAML.

    Examples
    --------
    >>> from pathlib import Path
    >>> from docsite.config import load_site_config
    >>> config = load_site_config(Path("mkdocs.yml"))  # doctest: +SKIP
    >>> config.redirect_maps["guides/publish.md"]  # doctest: +SKIP
    'guides/package.md'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        try:
            loaded = loader.load(handle)
        except YAMLError as exc:
            msg = f"Configuration file '{path}' is not valid YAML: {exc}"
            raise MalformedConfigError(msg) from exc
    logger.debug("Loaded configuration from %s", path)
    return parse_site_config(loaded, config_dir=path.resolve().parent)


def parse_site_config(
    raw: object, *, config_dir: Path | None = None
) -> SiteConfig:
    """Build a :class:`SiteConfig` from an already-loaded mapping.

    Parameters
    ----------
    raw : object
        Top-level configuration value, normally the result of a YAML load.
    config_dir : Path, optional
        Directory that relative paths such as ``docs_dir`` are resolved
        against. Defaults to the working directory at use time.

    Returns
    -------
    SiteConfig
        The parsed configuration.

    Raises
    ------
    MalformedConfigError
        If ``raw`` is not a mapping or any setting is missing or mistyped.
    """
    if not isinstance(raw, cabc.Mapping):
        msg = "Top-level configuration must be a mapping."
        raise MalformedConfigError(msg)
    payload: dict[str, typ.Any] = dict(raw)

    plugins_raw = payload.get("plugins", list(DEFAULT_PLUGINS))
    nav_raw = payload.get("nav")

    return SiteConfig(
        site_name=_require_str(payload, "site_name"),
        site_url=_normalize_site_url(_optional_str(payload, "site_url")),
        site_description=_optional_str(payload, "site_description"),
        site_author=_optional_str(payload, "site_author"),
        repo_url=_optional_str(payload, "repo_url"),
        repo_name=_optional_str(payload, "repo_name"),
        docs_dir=_optional_str(payload, "docs_dir") or DEFAULT_DOCS_DIR,
        site_dir=_optional_str(payload, "site_dir") or DEFAULT_SITE_DIR,
        use_directory_urls=_optional_bool(payload, "use_directory_urls", default=True),
        theme=_build_theme_config(payload.get("theme")),
        markdown_extensions=_build_option_bags(
            payload.get("markdown_extensions"), "markdown_extensions"
        ),
        plugins=_build_option_bags(plugins_raw, "plugins"),
        extra_css=_str_list(payload.get("extra_css"), "'extra_css'"),
        extra_javascript=_build_scripts(payload.get("extra_javascript")),
        extra=_expect_mapping(payload.get("extra"), "'extra'"),
        nav=parse_nav(nav_raw) if nav_raw is not None else None,
        validation=_build_validation_config(payload.get("validation")),
        config_dir=config_dir,
    )


def _build_scripts(value: object) -> tuple[str | OptionBag, ...]:
    """Accept script paths or ``{path: ..., type: ...}`` mappings."""
    if value is None:
        return ()
    if not isinstance(value, list):
        msg = f"'extra_javascript' must be a list, got {type(value).__name__}."
        raise MalformedConfigError(msg)
    scripts: list[str | OptionBag] = []
    for entry in value:
        match entry:
            case str():
                scripts.append(entry)
            case cabc.Mapping() if isinstance(entry.get("path"), str):
                scripts.append(dict(entry))
            case _:
                msg = (
                    "Each 'extra_javascript' entry must be a path or a mapping "
                    f"with a 'path' key, got {entry!r}."
                )
                raise MalformedConfigError(msg)
    return tuple(scripts)


__all__ = ["load_site_config", "parse_site_config"]
