from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Sequence

from markupsafe import Markup

from .config import PageSpec
from .entries import Entry
from .render import entry_url


@dataclass(frozen=True)
class Section:
    name: str
    entries: tuple[Entry, ...]

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


class SiteContext(Mapping):
    """Read-only page name -> Section mapping shared by every page render."""

    def __init__(self, sections: Sequence[Section], base_url: str = "") -> None:
        self._sections = MappingProxyType({section.name: section for section in sections})
        self.base_url = base_url
        self._template_view = MappingProxyType(
            {
                section.name: tuple(entry_context(entry, base_url) for entry in section)
                for section in sections
            }
        )

    def __getitem__(self, name: str) -> Section:
        return self._sections[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._sections)

    def __len__(self) -> int:
        return len(self._sections)

    def as_template_context(self) -> Mapping:
        return self._template_view


def entry_context(entry: Entry, base_url: str = "") -> Mapping:
    metadata = MappingProxyType(entry.metadata.as_dict())
    return MappingProxyType({
        **metadata,
        "metadata": metadata,
        "slug": entry.slug,
        "url": entry_url(entry, base_url),
        "content": Markup(entry.content),
    })


def build_site_context(pages: Sequence[PageSpec], entries: Mapping[str, Sequence[Entry]], base_url: str = "") -> SiteContext:
    sections = [
        Section(name=page.name, entries=tuple(entries.get(page.name, ())))
        for page in pages
        if page.has_entries
    ]
    return SiteContext(sections, base_url)
