from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import EntrySource, PageSpec
from .content import EntryMetadata, parse_document
from .errors import DuplicateSlugError, EntryLoadError
from .log import get_logger

MARKDOWN_SUFFIXES = {".md", ".markdown"}

logger = get_logger("entries")


@dataclass(frozen=True)
class Entry:
    page: str
    slug: str
    metadata: EntryMetadata
    body: str
    source_path: Path
    sort_key: str
    template_path: str
    content: str = ""
    html: str = ""


def entry_slug(path: Path) -> str:
    return path.stem.lower()


def list_markdown_files(root: Path) -> list[Path]:
    if not root.is_dir():
        raise EntryLoadError("entry source directory not found", path=root)
    files = [path for path in root.rglob("*") if path.is_file() and path.suffix.lower() in MARKDOWN_SUFFIXES]
    return sorted(files, key=lambda p: p.as_posix())


def source_files(source: EntrySource) -> list[Path]:
    if source.source_dir is not None:
        return list_markdown_files(source.source_dir)
    if not source.file_path.is_file():
        raise EntryLoadError("entry file not found", path=source.file_path)
    return [source.file_path]


def load_entry(path: Path, page: PageSpec, template_path: str, root: Optional[Path] = None) -> Entry:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise EntryLoadError(f"cannot read entry: {exc}", path=path, page=page.name) from exc
    metadata, body = parse_document(text, path)
    sort_key = path.as_posix()
    if root is not None:
        try:
            sort_key = path.relative_to(root).as_posix()
        except ValueError:
            pass
    return Entry(
        page=page.name,
        slug=entry_slug(path),
        metadata=metadata,
        body=body,
        source_path=path,
        sort_key=sort_key,
        template_path=template_path,
    )


def load_entries(page: PageSpec, root: Optional[Path] = None) -> list[Entry]:
    """Load every entry of ``page`` in discovery order.

    Sources are visited in declared order and files lexically within a
    directory source. Slugs must be unique across all sources of the page.
    """
    entries = []
    seen: dict[str, Path] = {}
    for source in page.entries:
        for path in source_files(source):
            entry = load_entry(path, page, source.template_path, root)
            if entry.slug in seen:
                raise DuplicateSlugError(
                    f"slug '{entry.slug}' already used by {seen[entry.slug]}", path=path, page=page.name
                )
            seen[entry.slug] = path
            entries.append(entry)
    logger.debug("Loaded %d entries for page '%s'", len(entries), page.name)
    return entries
