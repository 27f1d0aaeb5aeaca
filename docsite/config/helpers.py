"""Utility helpers shared by the configuration loader."""

from __future__ import annotations

import collections.abc as cabc
import logging
import typing as typ

from .._constants import DEFAULT_THEME
from ..errors import MalformedConfigError
from ..validation import ValidationConfig, ValidationLevel
from .models import OptionBag, PaletteVariant, ThemeConfig

logger = logging.getLogger(__name__)

_THEME_KEYS = frozenset({"name", "logo", "favicon", "custom_dir", "features", "palette"})

# Shorthand keys accepted directly under ``validation`` and the fields they set.
_SHORTHAND_FIELDS: dict[str, tuple[str, ...]] = {
    "omitted_files": ("nav_omitted_files",),
    "not_found": ("nav_not_found", "links_not_found"),
    "absolute_links": ("absolute_links",),
    "unrecognized_links": ("unrecognized_links",),
}
_SECTION_FIELDS: dict[str, dict[str, str]] = {
    "nav": {"omitted_files": "nav_omitted_files", "not_found": "nav_not_found"},
    "links": {
        "not_found": "links_not_found",
        "absolute_links": "absolute_links",
        "unrecognized_links": "unrecognized_links",
    },
}
# Checks on rendered page content; they belong to the renderer.
_RENDERER_CHECKS = frozenset({"absent_link", "anchors"})


def _optional_str(payload: cabc.Mapping[str, typ.Any], key: str) -> str | None:
    """Return ``payload[key]`` as a stripped string, or None when unset."""
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        msg = f"'{key}' must be a string, got {type(value).__name__}."
        raise MalformedConfigError(msg)
    return value.strip() or None


def _require_str(payload: cabc.Mapping[str, typ.Any], key: str) -> str:
    value = _optional_str(payload, key)
    if value is None:
        msg = f"Required setting '{key}' is missing."
        raise MalformedConfigError(msg)
    return value


def _optional_bool(
    payload: cabc.Mapping[str, typ.Any], key: str, *, default: bool
) -> bool:
    value = payload.get(key, default)
    if not isinstance(value, bool):
        msg = f"'{key}' must be true or false, got {value!r}."
        raise MalformedConfigError(msg)
    return value


def _expect_mapping(value: object, label: str) -> dict[str, typ.Any]:
    """Return ``value`` as a dict, treating None as empty."""
    if value is None:
        return {}
    if not isinstance(value, cabc.Mapping):
        msg = f"{label} must be a mapping, got {type(value).__name__}."
        raise MalformedConfigError(msg)
    return dict(value)


def _str_list(value: object, label: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        msg = f"{label} must be a list of strings."
        raise MalformedConfigError(msg)
    return tuple(value)


def _normalize_site_url(url: str | None) -> str | None:
    """Ensure a configured site URL ends with a slash."""
    if url is None or url.endswith("/"):
        return url
    return f"{url}/"


def _build_option_bags(value: object, label: str) -> dict[str, OptionBag]:
    """Normalize a plugin or extension list into ``{name: options}``.

    Entries may be bare names, ``{name: None}`` or ``{name: {...}}``; the
    whole block may also be a mapping of names to options.
    """
    match value:
        case None:
            return {}
        case cabc.Mapping():
            items = list(value.items())
        case list():
            items = []
            for entry in value:
                match entry:
                    case str():
                        items.append((entry, None))
                    case cabc.Mapping() if len(entry) == 1:
                        items.extend(entry.items())
                    case _:
                        msg = (
                            f"Each {label} entry must be a name or a single-key "
                            f"mapping, got {entry!r}."
                        )
                        raise MalformedConfigError(msg)
        case _:
            msg = f"'{label}' must be a list or mapping, got {type(value).__name__}."
            raise MalformedConfigError(msg)

    bags: dict[str, OptionBag] = {}
    for name, options in items:
        if not isinstance(name, str) or not name.strip():
            msg = f"{label} names must be non-empty strings, got {name!r}."
            raise MalformedConfigError(msg)
        if name in bags:
            msg = f"{label} '{name}' is declared more than once."
            raise MalformedConfigError(msg)
        bags[name] = _expect_mapping(options, f"{label} '{name}' options")
    return bags


def _build_palette_variant(payload: object, index: int) -> PaletteVariant:
    entry = _expect_mapping(payload, f"theme.palette[{index}]")
    toggle = _expect_mapping(entry.get("toggle"), f"theme.palette[{index}].toggle")
    return PaletteVariant(
        media=_optional_str(entry, "media"),
        scheme=_optional_str(entry, "scheme"),
        primary=_optional_str(entry, "primary"),
        accent=_optional_str(entry, "accent"),
        toggle_icon=_optional_str(toggle, "icon"),
        toggle_label=_optional_str(toggle, "name"),
    )


def _build_palette(value: object) -> tuple[PaletteVariant, ...]:
    match value:
        case None:
            return ()
        case cabc.Mapping():
            return (_build_palette_variant(value, 0),)
        case list():
            return tuple(
                _build_palette_variant(entry, index) for index, entry in enumerate(value)
            )
        case _:
            msg = f"theme.palette must be a mapping or list, got {type(value).__name__}."
            raise MalformedConfigError(msg)


def _build_theme_config(value: object) -> ThemeConfig:
    """Build a ThemeConfig from a theme name or a theme mapping."""
    match value:
        case None:
            return ThemeConfig()
        case str():
            return ThemeConfig(name=value.strip() or DEFAULT_THEME)
        case cabc.Mapping():
            payload = dict(value)
        case _:
            msg = f"'theme' must be a name or a mapping, got {type(value).__name__}."
            raise MalformedConfigError(msg)

    features = _str_list(payload.get("features"), "theme.features")
    return ThemeConfig(
        name=_optional_str(payload, "name") or DEFAULT_THEME,
        logo=_optional_str(payload, "logo"),
        favicon=_optional_str(payload, "favicon"),
        custom_dir=_optional_str(payload, "custom_dir"),
        features=tuple(dict.fromkeys(features)),
        palette=_build_palette(payload.get("palette")),
        options={key: val for key, val in payload.items() if key not in _THEME_KEYS},
    )


def _parse_level(value: object, key: str) -> ValidationLevel:
    try:
        return ValidationLevel(value)
    except ValueError as exc:
        allowed = ", ".join(level.value for level in ValidationLevel)
        msg = f"validation.{key} must be one of {allowed}; got {value!r}."
        raise MalformedConfigError(msg) from exc


def _build_validation_config(value: object) -> ValidationConfig:
    """Build a ValidationConfig from shorthand and ``nav``/``links`` sections."""
    payload = _expect_mapping(value, "'validation'")
    overrides: dict[str, ValidationLevel] = {}
    for key, raw in payload.items():
        if key in _SECTION_FIELDS:
            section = _expect_mapping(raw, f"validation.{key}")
            for sub_key, sub_raw in section.items():
                dotted = f"{key}.{sub_key}"
                level = _parse_level(sub_raw, dotted)
                field = _SECTION_FIELDS[key].get(sub_key)
                if field is None:
                    _skip_unknown_check(dotted)
                    continue
                overrides[field] = level
        elif key in _SHORTHAND_FIELDS:
            level = _parse_level(raw, key)
            for field in _SHORTHAND_FIELDS[key]:
                overrides.setdefault(field, level)
        else:
            _parse_level(raw, key)
            _skip_unknown_check(key)
    return ValidationConfig(**overrides)


def _skip_unknown_check(key: str) -> None:
    name = key.rsplit(".", 1)[-1]
    if name not in _RENDERER_CHECKS:
        msg = f"Unknown validation check '{key}'."
        raise MalformedConfigError(msg)
    logger.debug("Validation check '%s' is applied by the renderer; skipping.", key)


__all__ = [
    "_build_option_bags",
    "_build_theme_config",
    "_build_validation_config",
    "_expect_mapping",
    "_normalize_site_url",
    "_optional_bool",
    "_optional_str",
    "_require_str",
    "_str_list",
]
