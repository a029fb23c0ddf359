from __future__ import annotations

from dataclasses import replace

from .entries import Entry
from .errors import PagesmithError
from .markup import convert_markdown, page_url
from .templates import TemplateAdapter


def entry_url(entry: Entry, base_url: str = "") -> str:
    return page_url(base_url, entry.page, entry.slug) or f"/{entry.page}/{entry.slug}/"


def site_context(base_url: str) -> dict:
    return {"base_url": base_url}


def render_entry(entry: Entry, adapter: TemplateAdapter, *, highlight: bool = True, base_url: str = "") -> Entry:
    content = convert_markdown(entry.body, highlight=highlight, url=page_url(base_url, entry.page, entry.slug))
    context = {
        "metadata": entry.metadata.as_dict(),
        "entry": {"slug": entry.slug, "url": entry_url(entry, base_url), "page": entry.page},
        "page": entry.page,
        "site": site_context(base_url),
    }
    try:
        html = adapter.render_entry(entry.template_path, content, context)
    except PagesmithError as exc:
        exc.page = exc.page or entry.page
        raise
    return replace(entry, content=content, html=html)
