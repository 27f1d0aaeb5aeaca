"""Load and validate MkDocs-style site configuration YAML.

This subpackage parses a project's ``mkdocs.yml``, checks every setting's
shape and produces immutable dataclasses (:class:`SiteConfig`,
:class:`ThemeConfig`, :class:`PaletteVariant`) that the navigation resolver,
redirect table and site builder consume. The primary entry point is
:func:`load_site_config`; :func:`dump_site_config` and
:func:`write_site_config` serialize a configuration back to its source form.

Examples
--------
>>> from pathlib import Path
>>> from docsite.config import load_site_config
>>> site = load_site_config(Path("mkdocs.yml"))  # doctest: +SKIP
>>> site.theme.has_feature("navigation.sections")  # doctest: +SKIP
True
"""

from .dumper import dump_site_config, emit_site_config, write_site_config
from .loader import load_site_config, parse_site_config
from .models import OptionBag, PaletteVariant, SiteConfig, ThemeConfig

__all__ = [
    "OptionBag",
    "PaletteVariant",
    "SiteConfig",
    "ThemeConfig",
    "dump_site_config",
    "emit_site_config",
    "load_site_config",
    "parse_site_config",
    "write_site_config",
]
