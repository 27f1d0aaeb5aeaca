"""Typed dataclasses describing a documentation site configuration."""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

from .._constants import (
    DEFAULT_DOCS_DIR,
    DEFAULT_SITE_DIR,
    DEFAULT_THEME,
    LLMSTXT_PLUGIN,
    REDIRECTS_PLUGIN,
)
from ..errors import MalformedConfigError
from ..validation import ValidationConfig

if typ.TYPE_CHECKING:
    from ..nav import NavNode

OptionBag = dict[str, typ.Any]


@dc.dataclass(frozen=True, slots=True)
class PaletteVariant:
    """One colour palette the reader can toggle to."""

    media: str | None = None
    scheme: str | None = None
    primary: str | None = None
    accent: str | None = None
    toggle_icon: str | None = None
    toggle_label: str | None = None


@dc.dataclass(frozen=True, slots=True)
class ThemeConfig:
    """Theme selection, branding assets and UI feature flags."""

    name: str = DEFAULT_THEME
    logo: str | None = None
    favicon: str | None = None
    custom_dir: str | None = None
    features: tuple[str, ...] = ()
    palette: tuple[PaletteVariant, ...] = ()
    options: OptionBag = dc.field(default_factory=dict)

    def has_feature(self, feature: str) -> bool:
        """Return True when ``feature`` is enabled for the theme."""
        return feature in self.features


@dc.dataclass(frozen=True, slots=True)
class SiteConfig:
    """A fully parsed site configuration.

    ``markdown_extensions`` and ``plugins`` map names to option bags in
    declared order. The bags are opaque here and passed through unchanged.
    """

    site_name: str
    site_url: str | None = None
    site_description: str | None = None
    site_author: str | None = None
    repo_url: str | None = None
    repo_name: str | None = None
    docs_dir: str = DEFAULT_DOCS_DIR
    site_dir: str = DEFAULT_SITE_DIR
    use_directory_urls: bool = True
    theme: ThemeConfig = dc.field(default_factory=ThemeConfig)
    markdown_extensions: dict[str, OptionBag] = dc.field(default_factory=dict)
    plugins: dict[str, OptionBag] = dc.field(default_factory=dict)
    extra_css: tuple[str, ...] = ()
    extra_javascript: tuple[str | OptionBag, ...] = ()
    extra: OptionBag = dc.field(default_factory=dict)
    nav: tuple[NavNode, ...] | None = None
    validation: ValidationConfig = dc.field(default_factory=ValidationConfig)
    config_dir: Path | None = dc.field(default=None, compare=False)

    @property
    def docs_path(self) -> Path:
        """Return the docs directory resolved against the config file location."""
        base = self.config_dir if self.config_dir is not None else Path.cwd()
        return base / self.docs_dir

    def plugin_options(self, name: str) -> OptionBag | None:
        """Return the option bag for plugin ``name`` or None when not enabled."""
        return self.plugins.get(name)

    @property
    def redirect_maps(self) -> dict[str, str]:
        """Return the ``redirects`` plugin's ``redirect_maps`` option."""
        options = self.plugin_options(REDIRECTS_PLUGIN) or {}
        maps = options.get("redirect_maps") or {}
        if not isinstance(maps, dict):
            msg = (
                f"Plugin '{REDIRECTS_PLUGIN}' option 'redirect_maps' must be a "
                f"mapping, got {type(maps).__name__}."
            )
            raise MalformedConfigError(msg)
        return maps

    @property
    def llmstxt_options(self) -> OptionBag | None:
        """Return the ``llmstxt`` plugin options when the plugin is enabled."""
        return self.plugin_options(LLMSTXT_PLUGIN)


__all__ = [
    "OptionBag",
    "PaletteVariant",
    "SiteConfig",
    "ThemeConfig",
]
