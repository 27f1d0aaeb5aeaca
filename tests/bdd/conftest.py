"""Shared pytest-bdd steps for building a site from scenario state.

Scenarios describe a docs tree, an optional declared navigation, redirects
and validation levels. The ``When I build the site`` step turns that state
into a configuration, runs :class:`docsite.builder.SiteBuilder` and records
either the resolved site or the error it raised.
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

import pytest
from pytest_bdd import given, parsers, when

from docsite.builder import SiteBuilder
from docsite.config import parse_site_config
from docsite.errors import SiteBuildError

ScenarioState = dict[str, typ.Any]


@pytest.fixture
def scenario_state(tmp_path: Path) -> ScenarioState:
    """Share mutable scenario data across pytest-bdd steps."""
    return {
        "root": tmp_path,
        "nav": [],
        "redirects": {},
        "validation": {},
    }


def _split(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@given(parsers.parse('a docs tree containing "{paths}"'))
def given_docs_tree(scenario_state: ScenarioState, paths: str) -> None:
    """Create each listed Markdown document under ``docs/``."""
    docs = scenario_state["root"] / "docs"
    for path in _split(paths):
        target = docs / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(f"# {path}\n", encoding="utf-8")


@given(parsers.parse('a nav that links "{title}" to "{path}"'))
def given_nav_link(scenario_state: ScenarioState, title: str, path: str) -> None:
    """Append a titled navigation entry in declared order."""
    scenario_state["nav"].append({title: path})


@given(parsers.parse('nav not_found validation set to "{level}"'))
def given_nav_validation(scenario_state: ScenarioState, level: str) -> None:
    """Set the level for navigation entries pointing at missing pages."""
    scenario_state["validation"]["nav"] = {"not_found": level}


@given(parsers.parse('a redirect from "{old_path}" to "{new_path}"'))
def given_redirect(scenario_state: ScenarioState, old_path: str, new_path: str) -> None:
    """Record a redirect map entry."""
    scenario_state["redirects"][old_path] = new_path


@when("I build the site")
def when_build_site(
    scenario_state: ScenarioState, caplog: pytest.LogCaptureFixture
) -> None:
    """Build the site, storing the result or the raised error."""
    payload: dict[str, typ.Any] = {
        "site_name": "Demo",
        "validation": scenario_state["validation"],
        "plugins": [
            "search",
            {"redirects": {"redirect_maps": scenario_state["redirects"]}},
        ],
    }
    if scenario_state["nav"]:
        payload["nav"] = scenario_state["nav"]
    config = parse_site_config(payload, config_dir=scenario_state["root"])

    caplog.set_level(logging.INFO, logger="docsite")
    try:
        scenario_state["site"] = SiteBuilder(config).build()
    except SiteBuildError as exc:
        scenario_state["error"] = exc
