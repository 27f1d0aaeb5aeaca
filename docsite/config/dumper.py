"""Serialize a :class:`SiteConfig` back to its source form.

:func:`dump_site_config` is the inverse of
:func:`docsite.config.parse_site_config`: reloading its output yields an equal
configuration. Empty option bags are written as bare names and the validation
block is always written in its long ``nav``/``links`` form.
"""

from __future__ import annotations

import typing as typ

from ruamel.yaml import YAML

from ..nav import dump_nav

if typ.TYPE_CHECKING:
    from pathlib import Path

    from ..validation import ValidationConfig
    from .models import OptionBag, PaletteVariant, SiteConfig, ThemeConfig


def dump_site_config(config: SiteConfig) -> dict[str, typ.Any]:
    """Return the plain mapping form of ``config``, omitting unset values."""
    document: dict[str, typ.Any] = {"site_name": config.site_name}
    for key in (
        "site_url",
        "site_description",
        "site_author",
        "repo_url",
        "repo_name",
    ):
        value = getattr(config, key)
        if value is not None:
            document[key] = value
    document["docs_dir"] = config.docs_dir
    document["site_dir"] = config.site_dir
    document["use_directory_urls"] = config.use_directory_urls
    document["theme"] = _dump_theme(config.theme)
    if config.markdown_extensions:
        document["markdown_extensions"] = _dump_option_bags(config.markdown_extensions)
    document["plugins"] = _dump_option_bags(config.plugins)
    if config.extra_css:
        document["extra_css"] = list(config.extra_css)
    if config.extra_javascript:
        document["extra_javascript"] = [
            dict(script) if isinstance(script, dict) else script
            for script in config.extra_javascript
        ]
    if config.extra:
        document["extra"] = dict(config.extra)
    if config.nav is not None:
        document["nav"] = dump_nav(config.nav)
    document["validation"] = _dump_validation(config.validation)
    return document


def write_site_config(config: SiteConfig, path: Path) -> Path:
    """Write ``config`` to ``path`` as YAML and return the path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        emit_site_config(config, handle)
    return path


def emit_site_config(config: SiteConfig, stream: typ.TextIO) -> None:
    """Write ``config`` as YAML to an open text stream."""
    _build_roundtrip_yaml().dump(dump_site_config(config), stream)


def _build_roundtrip_yaml() -> YAML:
    yaml = YAML()
    yaml.width = 120
    yaml.indent(mapping=2, sequence=4, offset=2)
    return yaml


def _dump_theme(theme: ThemeConfig) -> dict[str, typ.Any]:
    payload: dict[str, typ.Any] = {"name": theme.name}
    for key in ("logo", "favicon", "custom_dir"):
        value = getattr(theme, key)
        if value is not None:
            payload[key] = value
    if theme.features:
        payload["features"] = list(theme.features)
    if theme.palette:
        payload["palette"] = [_dump_palette_variant(variant) for variant in theme.palette]
    payload.update(theme.options)
    return payload


def _dump_palette_variant(variant: PaletteVariant) -> dict[str, typ.Any]:
    payload: dict[str, typ.Any] = {}
    for key in ("media", "scheme", "primary", "accent"):
        value = getattr(variant, key)
        if value is not None:
            payload[key] = value
    toggle: dict[str, str] = {}
    if variant.toggle_icon is not None:
        toggle["icon"] = variant.toggle_icon
    if variant.toggle_label is not None:
        toggle["name"] = variant.toggle_label
    if toggle:
        payload["toggle"] = toggle
    return payload


def _dump_option_bags(bags: dict[str, OptionBag]) -> list[typ.Any]:
    return [{name: dict(options)} if options else name for name, options in bags.items()]


def _dump_validation(validation: ValidationConfig) -> dict[str, dict[str, str]]:
    return {
        "nav": {
            "omitted_files": validation.nav_omitted_files.value,
            "not_found": validation.nav_not_found.value,
        },
        "links": {
            "not_found": validation.links_not_found.value,
            "absolute_links": validation.absolute_links.value,
            "unrecognized_links": validation.unrecognized_links.value,
        },
    }


__all__ = ["dump_site_config", "emit_site_config", "write_site_config"]
