from __future__ import annotations

import datetime as dt
import html
from pathlib import Path
from typing import Sequence

from .config import PageSpec
from .entries import Entry
from .output import alias_target
from .render import entry_url
from .utils import join_url, rfc822_date


def build_rss(page: PageSpec, entries: Sequence[Entry], base_url: str) -> str:
    site_url = base_url.rstrip("/")
    items = []
    for entry in entries:
        meta = entry.metadata
        link = html.escape(entry_url(entry, site_url))
        lines = [
            "<item>",
            f"<title>{html.escape(meta.title)}</title>",
            f"<link>{link}</link>",
            f'<guid isPermaLink="false">{link}</guid>',
            f"<pubDate>{rfc822_date(meta.created_at)}</pubDate>",
        ]
        if meta.author_email:
            lines.append(f"<author>{html.escape(meta.author_email)}</author>")
        if meta.summary:
            lines.append(f"<description>{html.escape(meta.summary)}</description>")
        lines.append(f"<content:encoded><![CDATA[{entry.content}]]></content:encoded>")
        lines.append("</item>")
        items.append("\n".join(lines))

    dates = [entry.metadata.created_at for entry in entries]
    last_build = rfc822_date(max(dates)) if dates else rfc822_date(dt.datetime.now(dt.timezone.utc))
    feed_url = html.escape(join_url(site_url, f"{page.name}.rss"))
    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom"'
            ' xmlns:content="http://purl.org/rss/1.0/modules/content/">',
            "<channel>",
            f"<title>{html.escape(page.rss_name or page.name)}</title>",
            f"<link>{html.escape(site_url)}/</link>",
            f"<description>{html.escape(page.description or '')}</description>",
            "<language>en</language>",
            f'<atom:link href="{feed_url}" rel="self" type="application/rss+xml" />',
            f"<lastBuildDate>{last_build}</lastBuildDate>",
            "\n".join(items),
            "</channel>",
            "</rss>",
        ]
    )


def rss_target(dest_dir: Path, page: PageSpec) -> Path:
    return dest_dir / f"{page.name}.rss"


def build_redirect(title: str, url: str) -> str:
    title = html.escape(title)
    url = html.escape(url)
    return f"""<!DOCTYPE html>
<html>
  <head>
    <title>{title}</title>
    <link rel="canonical" href="{url}"/>
    <meta http-equiv="content-type" content="text/html; charset=utf-8"/>
    <meta http-equiv="refresh" content="0; url={url}"/>
  </head>
  <body>
    If you aren't redirected, you can manually click this link:
    <a href="{url}">{url}</a>.
  </body>
</html>
"""


def build_alias_redirects(dest_dir: Path, entry: Entry, base_url: str = "") -> list[tuple[str, Path, str]]:
    url = entry_url(entry, base_url)
    return [
        (alias, alias_target(dest_dir, entry.page, alias), build_redirect(entry.metadata.title, url))
        for alias in entry.metadata.aliases
    ]
