"""Tests for pagesmith.config."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from pagesmith.config import load_config
from pagesmith.errors import ConfigError
from tests._fixtures.site_builder import SiteBuilder


def test_load_config_parses_pages(site: SiteBuilder) -> None:
    path = site.write_config(
        [
            {"name": "about", "template_path": "about.html"},
            {
                "name": "blog",
                "template_path": "blog.html",
                "description": "Posts",
                "rss": True,
                "rss_name": "Feed",
                "entries": [
                    {"source_dir": "content/blog", "template_path": "post.html"},
                    {"markdown_path": "extra/pinned.md", "template_path": "post.html"},
                ],
            },
        ],
        base_url="https://example.com",
        highlight_code=False,
        workers=3,
    )

    config = load_config(path)

    root = path.parent.resolve()
    assert config.root == root
    assert config.templates_dir == root / "templates"
    assert config.dest_dir == root / "dist"
    assert config.base_url == "https://example.com"
    assert config.highlight_code is False
    assert config.workers == 3
    assert [page.name for page in config.pages] == ["about", "blog"]
    about, blog = config.pages
    assert about.entries == ()
    assert blog.rss is True
    assert blog.rss_name == "Feed"
    assert blog.entries[0].source_dir == root / "content/blog"
    assert blog.entries[1].file_path == root / "extra/pinned.md"


def test_load_config_accepts_json_and_toml(tmp_path: Path) -> None:
    json_path = tmp_path / "site.json"
    json_path.write_text(
        json.dumps({"templates_dir": "t", "dest_dir": "d", "pages": [{"name": "a", "template_path": "a.html"}]}),
        encoding="utf-8",
    )
    toml_path = tmp_path / "site.toml"
    toml_path.write_text(
        'templates_dir = "t"\ndest_dir = "d"\n\n[[pages]]\nname = "a"\ntemplate_path = "a.html"\n',
        encoding="utf-8",
    )

    assert load_config(json_path).pages[0].name == "a"
    assert load_config(toml_path).pages[0].template_path == "a.html"


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path / "pagesmith.yaml")


@pytest.mark.parametrize(
    "document",
    [
        "- just\n- a list\n",
        "templates_dir: t\npages: []\n",
        "templates_dir: t\ndest_dir: d\npages: {}\n",
        "templates_dir: t\ndest_dir: d\npages:\n  - {name: a, template_path: a.html, entries: {}}\n",
        "templates_dir: t\ndest_dir: d\npages: \"\"\n",
        "templates_dir: t\ndest_dir: d\npages:\n  - name: a\n",
        "templates_dir: t\ndest_dir: d\npages:\n  - {name: a, template_path: a.html}\n  - {name: a, template_path: b.html}\n",
        "templates_dir: t\ndest_dir: d\npages:\n  - name: a\n    template_path: a.html\n    entries:\n      - {template_path: p.html}\n",
        "templates_dir: t\ndest_dir: d\npages:\n  - name: a\n    template_path: a.html\n    entries:\n"
        "      - {source_dir: c, file_path: c/x.md, template_path: p.html}\n",
        "templates_dir: t\ndest_dir: d\npages:\n  - {name: a/b, template_path: a.html}\n",
        "templates_dir: [unclosed\n",
    ],
)
def test_invalid_configs(tmp_path: Path, document: str) -> None:
    path = tmp_path / "pagesmith.yaml"
    path.write_text(document, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(path)
