"""Tests for the ``docsite`` command-line entrypoint."""

from __future__ import annotations

import sys
import typing as typ
from pathlib import Path
from textwrap import dedent

import msgspec.json as msgspec_json
import pytest

from docsite import cli
from docsite.config import load_site_config

if typ.TYPE_CHECKING:
    from pytest_mock import MockerFixture

CONFIG = """
site_name: Demo
site_url: https://docs.example.invalid/
nav:
  - Introduction: index.md
  - Guides:
      - guides/index.md
      - Publishing packages: guides/package.md
  - Commands: reference/cli.md
plugins:
  - search
  - redirects:
      redirect_maps:
        guides/publish.md: guides/package.md
  - llmstxt:
      sections:
        Guides:
          - guides/*.md
"""


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """Write a small site under ``tmp_path`` and return its config path."""
    for path in ("index.md", "guides/index.md", "guides/package.md", "reference/cli.md"):
        target = tmp_path / "docs" / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(f"# {path}\n", encoding="utf-8")
    path = tmp_path / "mkdocs.yml"
    path.write_text(CONFIG.lstrip(), encoding="utf-8")
    return path


def test_check_prints_summary(
    config_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.check(config=config_path)
    out = capsys.readouterr().out
    assert out == (
        "Demo: 4 nav page(s), 4 document(s), 1 redirect(s), 0 issue(s)\n"
    ), f"unexpected summary: {out!r}"


def test_check_passes_strict_and_hop_limit(
    config_path: Path, mocker: MockerFixture
) -> None:
    builder = mocker.patch.object(cli, "SiteBuilder", wraps=cli.SiteBuilder)
    cli.check(config=config_path, strict=True, hop_limit=5)

    builder.assert_called_once()
    assert builder.call_args.kwargs == {"strict": True, "hop_limit": 5}


def test_nav_prints_sidebar_order(
    config_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.nav(config=config_path)
    assert capsys.readouterr().out == dedent(
        """\
        - Introduction (index.md)
        - Guides
          - Guides (guides/index.md)
          - Publishing packages (guides/package.md)
        - Commands (reference/cli.md)
        """
    )


def test_redirects_prints_final_targets(
    config_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.redirects(config=config_path)
    assert capsys.readouterr().out == "guides/publish.md -> guides/package.md\n"


def test_redirects_writes_stub_pages(
    config_path: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    output_dir = tmp_path / "site"
    cli.redirects(config=config_path, output_dir=output_dir)

    stub = output_dir / "guides" / "publish" / "index.html"
    assert stub.exists(), "expected a redirect stub for guides/publish.md"
    assert "https://docs.example.invalid/guides/package/" in stub.read_text(
        encoding="utf-8"
    )
    assert capsys.readouterr().out.startswith("wrote ")


def test_llmstxt_writes_to_stdout(
    config_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.llmstxt(config=config_path)
    assert capsys.readouterr().out == dedent(
        """\
        # Demo

        ## Guides

        - [Guides](https://docs.example.invalid/guides/)
        - [Publishing packages](https://docs.example.invalid/guides/package/)
        """
    )


def test_llmstxt_writes_to_file(config_path: Path, tmp_path: Path) -> None:
    output = tmp_path / "site" / "llms.txt"
    cli.llmstxt(config=config_path, output=output)
    assert output.read_text(encoding="utf-8").startswith("# Demo\n")


def test_dump_yaml_round_trips(config_path: Path, tmp_path: Path) -> None:
    output = tmp_path / "out" / "mkdocs.yml"
    cli.dump(config=config_path, output=output)
    assert load_site_config(output) == load_site_config(config_path)


def test_dump_yaml_to_stdout(
    config_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.dump(config=config_path)
    out = capsys.readouterr().out
    assert out.startswith("site_name: Demo\n"), f"unexpected dump: {out[:80]!r}"
    assert "guides/publish.md: guides/package.md" in out


def test_dump_json_exports_resolved_site(
    config_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.dump(config=config_path, fmt="json")
    payload = msgspec_json.decode(capsys.readouterr().out)

    assert payload["nav_declared"] is True
    assert payload["redirects"] == {"guides/publish.md": "guides/package.md"}
    assert payload["documents"] == [
        "guides/index.md",
        "guides/package.md",
        "index.md",
        "reference/cli.md",
    ]
    assert payload["config"]["site_url"] == "https://docs.example.invalid/"


def test_main_exits_non_zero_on_build_errors(
    config_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    config_path.write_text(
        CONFIG.lstrip() + "validation:\n  nav:\n    not_found: error\n"
        "  omitted_files: ignore\n",
        encoding="utf-8",
    )
    (config_path.parent / "docs" / "reference" / "cli.md").unlink()
    monkeypatch.setattr(sys, "argv", ["docsite", "check", "--config", str(config_path)])

    with pytest.raises(SystemExit) as excinfo:
        cli.main()
    assert excinfo.value.code == 1


def test_main_exits_non_zero_on_missing_config(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    missing = tmp_path / "absent.yml"
    monkeypatch.setattr(sys, "argv", ["docsite", "nav", "--config", str(missing)])

    with pytest.raises(SystemExit) as excinfo:
        cli.main()
    assert excinfo.value.code == 1


def test_main_exits_non_zero_on_invalid_yaml(
    config_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    config_path.write_text("site_name: [Demo\n", encoding="utf-8")
    monkeypatch.setattr(sys, "argv", ["docsite", "check", "--config", str(config_path)])

    with pytest.raises(SystemExit) as excinfo:
        cli.main()
    assert excinfo.value.code == 1
