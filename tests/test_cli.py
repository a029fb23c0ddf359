"""CLI behaviour tests."""

from __future__ import annotations

import pytest

from pagesmith.cli import build_parser, main
from tests._fixtures.site_builder import SiteBuilder, entry_source


def test_parser_accepts_global_options() -> None:
    args = build_parser().parse_args(["--verbose", "--config", "site.yaml", "build"])

    assert args.verbose is True
    assert args.config == "site.yaml"
    assert args.command == "build"


def test_parser_serve_defaults() -> None:
    args = build_parser().parse_args(["serve"])

    assert args.port == 3000
    assert args.build is True


def test_build_command_succeeds(site: SiteBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    site.write({"content/blog/first.md": entry_source()})
    path = site.write_config([site.blog_page()])

    assert main(["--config", str(path), "build"]) == 0

    assert "Build completed" in capsys.readouterr().out
    assert (site.root / "dist" / "blog" / "first" / "index.html").exists()


def test_build_command_fails_with_non_zero_exit(site: SiteBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    site.write({"content/blog/first.md": "---\ncreated_at: 2024-06-29T17:29:00Z\ntags: []\n---\n"})
    path = site.write_config([site.blog_page()])

    assert main(["--config", str(path), "build"]) == 1

    err = capsys.readouterr().err
    assert "Build failed" in err
    assert "first.md" in err


def test_missing_config_fails(tmp_path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--config", str(tmp_path / "nope.yaml"), "build"]) == 1
    assert "config file not found" in capsys.readouterr().err
