"""Filters registered on the page and entry template environment."""

from __future__ import annotations

import datetime as dt
from collections.abc import Mapping

from markupsafe import Markup, escape

from .content import parse_timestamp
from .errors import MetadataParseError
from .utils import iso_date, rfc822_date, slugify, to_utc

DATE_PRESETS = {
    "short": "%Y-%m-%d",
    "long": "%B %d, %Y",
    "datetime": "%Y-%m-%d %H:%M",
}


def format_date(value: object, preset: str = "short") -> str:
    """Format a timestamp with a named preset (``short``, ``long``, ``datetime``,
    ``iso``, ``rfc2822``) or a raw strftime pattern."""
    if value is None or value == "":
        return ""
    if isinstance(value, str):
        try:
            value = parse_timestamp(value, "value")
        except MetadataParseError:
            return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = dt.datetime.fromtimestamp(value, tz=dt.timezone.utc)
    if isinstance(value, dt.date) and not isinstance(value, dt.datetime):
        value = dt.datetime.combine(value, dt.time(), tzinfo=dt.timezone.utc)
    if not isinstance(value, dt.datetime):
        return str(value)
    if preset == "iso":
        return iso_date(value)
    if preset == "rfc2822":
        return rfc822_date(value)
    return to_utc(value).strftime(DATE_PRESETS.get(preset, preset))


def mapping_items(value: object) -> list[tuple]:
    if value is None:
        return []
    if not isinstance(value, Mapping):
        raise TypeError(f"items filter expects a mapping, got {type(value).__name__}")
    return list(value.items())


def published_on(value: object, preset: str = "long") -> Markup:
    if value is None or value == "":
        return Markup("")
    shown = escape(format_date(value, preset))
    stamp = escape(format_date(value, "iso"))
    return Markup(f'Published on <time datetime="{stamp}">{shown} UTC</time>')


FILTERS = {
    "date": format_date,
    "items": mapping_items,
    "published_on": published_on,
    "slugify": slugify,
}
