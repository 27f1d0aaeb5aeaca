"""Unit tests for loading, validating and dumping site configuration.

The fixture under ``tests/data/uv-mkdocs.yml`` is a full production-style
configuration (theme palette, markdown extensions with and without options,
plugin option bags, redirect maps and a shorthand validation block). The
remaining tests build small configurations inline to exercise each
``MalformedConfigError`` path.

Usage
-----
Run ``pytest tests/test_config_loader.py -v``.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path
from textwrap import dedent

import pytest

from docsite.config import (
    PaletteVariant,
    dump_site_config,
    load_site_config,
    parse_site_config,
    write_site_config,
)
from docsite.errors import MalformedConfigError
from docsite.nav import NavGroup, NavLeaf
from docsite.validation import ValidationLevel

DATA_DIR = Path(__file__).resolve().parent / "data"
UV_CONFIG = DATA_DIR / "uv-mkdocs.yml"


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "mkdocs.yml"
    path.write_text(dedent(text).strip() + "\n", encoding="utf-8")
    return path


def test_loads_site_metadata_and_theme() -> None:
    """Site metadata, theme assets and feature flags are parsed."""
    config = load_site_config(UV_CONFIG)

    assert config.site_name == "uv"
    assert config.site_url == "https://docs.astral.sh/uv/"
    assert config.site_author == "charliermarsh"
    assert config.site_dir == "site/uv"
    assert config.config_dir == DATA_DIR
    assert config.docs_path == DATA_DIR / "docs"
    assert config.theme.name == "material"
    assert config.theme.logo == "assets/logo-letter.svg"
    assert config.theme.custom_dir == "docs/.overrides"
    assert config.theme.has_feature("navigation.sections"), (
        "expected navigation.sections to be enabled"
    )
    assert not config.theme.has_feature("navigation.tabs")
    assert config.theme.options == {}, (
        f"expected no unrecognised theme keys, got {config.theme.options!r}"
    )


def test_palette_variants_keep_declared_order() -> None:
    """Palette variants are parsed in order with toggle metadata."""
    palette = load_site_config(UV_CONFIG).theme.palette

    assert [variant.media for variant in palette] == [
        "(prefers-color-scheme)",
        "(prefers-color-scheme: light)",
        "(prefers-color-scheme: dark)",
    ]
    assert palette[0] == PaletteVariant(
        media="(prefers-color-scheme)",
        toggle_icon="material/brightness-auto",
        toggle_label="Switch to light mode",
    )
    assert palette[1].scheme == "astral-light"
    assert palette[2].toggle_label == "Switch to system preference"


def test_extension_and_plugin_option_bags() -> None:
    """Bare names and null options become empty bags; options pass through."""
    config = load_site_config(UV_CONFIG)

    assert config.markdown_extensions["admonition"] == {}
    assert config.markdown_extensions["pymdownx.snippets"] == {}, (
        "expected 'pymdownx.snippets:' with a null value to yield an empty bag"
    )
    assert config.markdown_extensions["toc"] == {
        "anchorlink": True,
        "anchorlink_class": "toclink",
    }
    assert list(config.plugins) == [
        "search",
        "git-revision-date-localized",
        "redirects",
        "llmstxt",
    ]
    assert config.plugins["git-revision-date-localized"] == {"timezone": "UTC"}
    assert config.redirect_maps["guides/publish.md"] == "guides/package.md"
    assert len(config.redirect_maps) == 12


def test_validation_shorthand_sets_levels() -> None:
    """Shorthand validation keys apply while unspecified checks keep defaults."""
    validation = load_site_config(UV_CONFIG).validation

    assert validation.nav_omitted_files is ValidationLevel.WARN
    assert validation.absolute_links is ValidationLevel.WARN
    assert validation.unrecognized_links is ValidationLevel.WARN
    assert validation.nav_not_found is ValidationLevel.WARN
    assert validation.links_not_found is ValidationLevel.WARN


def test_nav_is_parsed_as_tree() -> None:
    """The declared nav becomes leaves and groups in declared order."""
    nav = load_site_config(UV_CONFIG).nav

    assert nav is not None
    assert nav[0] == NavLeaf(path="index.md", title="Introduction")
    getting_started = nav[1]
    assert isinstance(getting_started, NavGroup)
    assert getting_started.title == "Getting started"
    assert getting_started.children[0] == NavLeaf(path="getting-started/index.md")
    assert [node.title for node in nav] == [
        "Introduction",
        "Getting started",
        "Guides",
        "Concepts",
        "Reference",
    ]


def test_round_trip_yields_identical_config(tmp_path: Path) -> None:
    """Dumping then reloading a configuration reproduces it exactly."""
    original = load_site_config(UV_CONFIG)
    written = write_site_config(original, tmp_path / "out" / "mkdocs.yml")
    reloaded = load_site_config(written)

    assert reloaded == original, "expected reloaded config to equal the original"
    assert dump_site_config(reloaded) == dump_site_config(original)


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_site_config(tmp_path / "absent.yml")


def test_top_level_must_be_mapping(tmp_path: Path) -> None:
    path = _write(tmp_path, "- just\n- a list")
    with pytest.raises(MalformedConfigError, match="Top-level"):
        load_site_config(path)


def test_empty_file_is_malformed(tmp_path: Path) -> None:
    path = tmp_path / "mkdocs.yml"
    path.write_text("", encoding="utf-8")
    with pytest.raises(MalformedConfigError):
        load_site_config(path)


def test_site_name_is_required() -> None:
    with pytest.raises(MalformedConfigError, match="site_name"):
        parse_site_config({"site_url": "https://example.invalid/"})


def test_site_name_must_be_text() -> None:
    with pytest.raises(MalformedConfigError, match="must be a string"):
        parse_site_config({"site_name": ["not", "text"]})


@pytest.mark.parametrize(
    ("plugins", "message"),
    [
        ([{"redirects": "redirect_maps"}], "options must be a mapping"),
        ([{"search": {}}, "search"], "more than once"),
        ([42], "name or a single-key mapping"),
        ("search", "must be a list or mapping"),
    ],
)
def test_plugin_option_bags_are_validated(plugins: object, message: str) -> None:
    """Scalar option bags, duplicates and odd entries are rejected."""
    with pytest.raises(MalformedConfigError, match=message):
        parse_site_config({"site_name": "Demo", "plugins": plugins})


def test_plugins_may_be_declared_as_mapping() -> None:
    config = parse_site_config(
        {"site_name": "Demo", "plugins": {"search": None, "tags": {"listings": True}}}
    )
    assert config.plugins == {"search": {}, "tags": {"listings": True}}


def test_default_plugins_when_absent() -> None:
    config = parse_site_config({"site_name": "Demo"})
    assert config.plugins == {"search": {}}
    assert config.redirect_maps == {}


def test_redirect_maps_must_be_mapping() -> None:
    config = parse_site_config(
        {"site_name": "Demo", "plugins": [{"redirects": {"redirect_maps": ["a.md"]}}]}
    )
    with pytest.raises(MalformedConfigError, match="redirect_maps"):
        _ = config.redirect_maps


def test_theme_may_be_a_name() -> None:
    config = parse_site_config({"site_name": "Demo", "theme": "readthedocs"})
    assert config.theme.name == "readthedocs"
    assert config.theme.features == ()


def test_theme_features_must_be_strings() -> None:
    with pytest.raises(MalformedConfigError, match="theme.features"):
        parse_site_config(
            {"site_name": "Demo", "theme": {"name": "material", "features": [1, 2]}}
        )


def test_theme_features_are_deduplicated_in_order() -> None:
    config = parse_site_config(
        {
            "site_name": "Demo",
            "theme": {
                "name": "material",
                "features": ["toc.follow", "navigation.top", "toc.follow"],
            },
        }
    )
    assert config.theme.features == ("toc.follow", "navigation.top")


def test_single_palette_mapping_and_extra_theme_options() -> None:
    config = parse_site_config(
        {
            "site_name": "Demo",
            "theme": {
                "name": "material",
                "language": "fr",
                "palette": {"scheme": "slate", "primary": "indigo"},
            },
        }
    )
    assert config.theme.palette == (PaletteVariant(scheme="slate", primary="indigo"),)
    assert config.theme.options == {"language": "fr"}


def test_palette_entries_must_be_mappings() -> None:
    with pytest.raises(MalformedConfigError, match=r"theme.palette\[1\]"):
        parse_site_config(
            {
                "site_name": "Demo",
                "theme": {"name": "material", "palette": [{"scheme": "default"}, "dark"]},
            }
        )


def test_site_url_gains_trailing_slash() -> None:
    config = parse_site_config({"site_name": "Demo", "site_url": "https://example.invalid"})
    assert config.site_url == "https://example.invalid/"


def test_use_directory_urls_must_be_boolean() -> None:
    with pytest.raises(MalformedConfigError, match="use_directory_urls"):
        parse_site_config({"site_name": "Demo", "use_directory_urls": "no"})


def test_extra_javascript_accepts_paths_and_mappings() -> None:
    config = parse_site_config(
        {
            "site_name": "Demo",
            "extra_javascript": ["js/extra.js", {"path": "js/module.mjs", "type": "module"}],
        }
    )
    assert config.extra_javascript == (
        "js/extra.js",
        {"path": "js/module.mjs", "type": "module"},
    )
    with pytest.raises(MalformedConfigError, match="extra_javascript"):
        parse_site_config({"site_name": "Demo", "extra_javascript": [{"type": "module"}]})


def test_validation_sections_override_shorthand() -> None:
    """``nav``/``links`` sections win over shorthand keys in any order."""
    config = parse_site_config(
        {
            "site_name": "Demo",
            "validation": {
                "links": {"not_found": "error"},
                "not_found": "info",
                "nav": {"omitted_files": "ignore"},
            },
        }
    )
    validation = config.validation
    assert validation.nav_not_found is ValidationLevel.INFO
    assert validation.links_not_found is ValidationLevel.ERROR
    assert validation.nav_omitted_files is ValidationLevel.IGNORE


@pytest.mark.parametrize(
    "validation",
    [
        {"omitted_files": "loud"},
        {"nav": {"not_found": 3}},
        {"nav": "warn"},
        {"spelling": "warn"},
    ],
)
def test_invalid_validation_blocks_are_rejected(validation: dict[str, typ.Any]) -> None:
    with pytest.raises(MalformedConfigError):
        parse_site_config({"site_name": "Demo", "validation": validation})


def test_renderer_checks_are_accepted() -> None:
    """Anchor and absent-link checks are valid but handled downstream."""
    config = parse_site_config(
        {
            "site_name": "Demo",
            "validation": {"anchors": "warn", "nav": {"absent_link": "info"}},
        }
    )
    assert config.validation == parse_site_config({"site_name": "Demo"}).validation


def test_nav_type_errors_surface_as_malformed_config() -> None:
    with pytest.raises(MalformedConfigError, match="'nav' must be a list"):
        parse_site_config({"site_name": "Demo", "nav": {"Home": "index.md"}})


def test_invalid_yaml_is_malformed(tmp_path: Path) -> None:
    """Unparsable files raise the same error as mistyped settings."""
    path = _write(tmp_path, "site_name: Demo\nnav: [index.md, {Guides: guides.md}")
    with pytest.raises(MalformedConfigError, match="not valid YAML"):
        load_site_config(path)
