"""Tests for section aggregation."""

from __future__ import annotations

import pytest

from pagesmith.config import EntrySource, PageSpec
from pagesmith.entries import load_entries
from pagesmith.render import render_entry
from pagesmith.site import build_site_context
from pagesmith.templates import TemplateAdapter
from tests._fixtures.site_builder import SiteBuilder, entry_source


def _pages(site: SiteBuilder) -> list[PageSpec]:
    return [
        PageSpec(
            name="blog",
            template_path="blog.html",
            entries=(EntrySource(template_path="post.html", source_dir=site.root / "content/blog"),),
        ),
        PageSpec(name="about", template_path="about.html"),
    ]


def _rendered(site: SiteBuilder, adapter: TemplateAdapter, pages: list[PageSpec]) -> dict:
    return {
        page.name: [render_entry(entry, adapter) for entry in load_entries(page, site.root)]
        for page in pages
        if page.has_entries
    }


def test_sections_hold_entries_in_discovery_order(site: SiteBuilder, adapter: TemplateAdapter) -> None:
    site.write(
        {
            "content/blog/b.md": entry_source(title="Second", created_at="2024-01-01T00:00:00Z"),
            "content/blog/a.md": entry_source(title="First", created_at="2024-05-01T00:00:00Z"),
        }
    )
    pages = _pages(site)
    entries = _rendered(site, adapter, pages)

    context = build_site_context(pages, entries)

    assert list(context) == ["blog"]
    assert "about" not in context
    assert [entry.metadata.title for entry in context["blog"]] == ["First", "Second"]
    assert list(context["blog"].entries) == entries["blog"]


def test_template_view_exposes_metadata_and_rendered_content(site: SiteBuilder, adapter: TemplateAdapter) -> None:
    site.write({"content/blog/first.md": entry_source()})
    pages = _pages(site)

    view = build_site_context(pages, _rendered(site, adapter, pages)).as_template_context()
    entry = view["blog"][0]

    assert entry["title"] == "First post"
    assert entry["metadata"]["tags"] == ["hello", "world"]
    assert entry["slug"] == "first"
    assert entry["url"] == "/blog/first/"
    assert "<h1>First post</h1>" in entry["content"]
    assert "body" not in entry


def test_site_context_is_read_only(site: SiteBuilder, adapter: TemplateAdapter) -> None:
    site.write({"content/blog/first.md": entry_source()})
    pages = _pages(site)
    context = build_site_context(pages, _rendered(site, adapter, pages))
    view = context.as_template_context()

    with pytest.raises(TypeError):
        view["blog"] = ()
    with pytest.raises(TypeError):
        view["blog"][0]["title"] = "changed"
    with pytest.raises(AttributeError):
        context["blog"].entries.append(None)


def test_page_with_sources_but_no_files_has_an_empty_section(site: SiteBuilder, adapter: TemplateAdapter) -> None:
    (site.root / "content/blog").mkdir(parents=True)
    pages = _pages(site)

    context = build_site_context(pages, _rendered(site, adapter, pages))

    assert len(context["blog"]) == 0
