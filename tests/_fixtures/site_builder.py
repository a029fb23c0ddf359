"""Helper for writing throwaway sites in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping

import yaml

from pagesmith.config import SiteConfig, load_config

BASE_TEMPLATE = """\
<!DOCTYPE html>
<html>
<head><title>{% block title %}site{% endblock %}</title></head>
<body>{% block content %}{% endblock %}</body>
</html>
"""

POST_TEMPLATE = """\
{% extends "base.html" %}
{% block title %}{{ metadata.title }}{% endblock %}
"""

BLOG_TEMPLATE = """\
{% extends "base.html" %}
{% block content %}<ul>{% for entry in sections["blog"] %}<li>{{ entry.created_at | date("short") }} {{ entry.title }}</li>{% endfor %}</ul>{% endblock %}
"""

ABOUT_TEMPLATE = """\
{% extends "base.html" %}
{% block content %}<p>About</p>{% if "notes" in sections %}{{ sections["notes"] | length }}{% else %}no notes{% endif %}{% endblock %}
"""


def entry_source(
    title: str = "First post",
    created_at: str = "2024-06-29T17:29:00Z",
    tags: str = '["hello", "world"]',
    body: str = "# First post\n\nHello, world!",
    extra: str = "",
) -> str:
    lines = ["---", f'title: "{title}"', f"created_at: {created_at}", f"tags: {tags}"]
    if extra:
        lines.append(extra.rstrip("\n"))
    lines.append("---")
    return "\n".join(lines) + "\n" + body + "\n"


class SiteBuilder:
    """Writes templates, entries and a config file under a temporary root."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "site"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(content), encoding="utf-8")

    def write_default_templates(self) -> None:
        self.write(
            {
                "templates/base.html": BASE_TEMPLATE,
                "templates/post.html": POST_TEMPLATE,
                "templates/blog.html": BLOG_TEMPLATE,
                "templates/about.html": ABOUT_TEMPLATE,
            }
        )

    def write_config(self, pages: list[dict], **options: object) -> Path:
        data = {"templates_dir": "templates", "dest_dir": "dist", **options, "pages": pages}
        path = self.root / "pagesmith.yaml"
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        return path

    def config(self, pages: list[dict], **options: object) -> SiteConfig:
        return load_config(self.write_config(pages, **options))

    def blog_page(self) -> dict:
        return {
            "name": "blog",
            "template_path": "blog.html",
            "entries": [{"source_dir": "content/blog", "template_path": "post.html"}],
        }

    def read_output(self, relative: str) -> str:
        return (self.root / "dist" / relative).read_text(encoding="utf-8")


__all__ = ["SiteBuilder", "entry_source"]
