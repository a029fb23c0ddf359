from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from .errors import MetadataParseError, MissingFrontMatterError
from .utils import iso_date, to_utc

DELIMITER = "---"


@dataclass(frozen=True)
class EntryMetadata:
    title: str
    created_at: dt.datetime
    tags: tuple[str, ...] = ()
    summary: Optional[str] = None
    cover: Optional[str] = None
    updated_at: Optional[dt.datetime] = None
    aliases: tuple[str, ...] = ()
    author_email: Optional[str] = None
    custom: dict = field(default_factory=dict)

    @property
    def unix_created_at(self) -> int:
        return int(self.created_at.timestamp())

    @property
    def unix_updated_at(self) -> Optional[int]:
        return int(self.updated_at.timestamp()) if self.updated_at else None

    def as_dict(self) -> dict:
        return {
            "title": self.title,
            "summary": self.summary,
            "cover": self.cover,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "unix_created_at": self.unix_created_at,
            "unix_updated_at": self.unix_updated_at,
            "tags": list(self.tags),
            "aliases": list(self.aliases),
            "author_email": self.author_email,
            "custom": dict(self.custom),
        }


def split_front_matter(text: str, path: Optional[Path] = None) -> tuple[str, str]:
    clean_text = text.lstrip("\ufeff")
    lines = clean_text.splitlines()
    if not lines or lines[0].strip() != DELIMITER:
        raise MissingFrontMatterError("document does not start with a '---' front-matter block", path=path)

    end = None
    for i in range(1, len(lines)):
        if lines[i].strip() == DELIMITER:
            end = i
            break
    if end is None:
        raise MissingFrontMatterError("front-matter block is not closed with '---'", path=path)

    meta = "\n".join(lines[1:end])
    body = "\n".join(lines[end + 1 :]).strip("\n")
    return meta, body


def parse_timestamp(value: object, key: str, path: Optional[Path] = None) -> dt.datetime:
    if isinstance(value, dt.datetime):
        return to_utc(value)
    if isinstance(value, dt.date):
        return dt.datetime.combine(value, dt.time(), tzinfo=dt.timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return to_utc(dt.datetime.fromisoformat(text))
        except ValueError as exc:
            raise MetadataParseError(f"'{key}' is not an RFC 3339 timestamp: {value!r}", path=path) from exc
    raise MetadataParseError(f"'{key}' must be a timestamp", path=path)


def _optional_str(meta: dict, key: str, path: Optional[Path]) -> Optional[str]:
    value = meta.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise MetadataParseError(f"'{key}' must be a string", path=path)
    return value


def _str_list(meta: dict, key: str, path: Optional[Path]) -> tuple[str, ...]:
    value = meta.get(key)
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise MetadataParseError(f"'{key}' must be a list of strings", path=path)
    return tuple(value)


def parse_metadata(meta: dict, path: Optional[Path] = None) -> EntryMetadata:
    title = meta.get("title")
    if not isinstance(title, str) or not title.strip():
        raise MetadataParseError("missing required field 'title'", path=path)
    if meta.get("created_at") is None:
        raise MetadataParseError("missing required field 'created_at'", path=path)
    if "tags" not in meta:
        raise MetadataParseError("missing required field 'tags'", path=path)

    updated_value = meta.get("updated_at")
    if isinstance(updated_value, str) and not updated_value.strip():
        updated_value = None

    aliases = _str_list(meta, "aliases", path) if meta.get("aliases") is not None else ()
    custom = meta.get("custom") or {}
    if not isinstance(custom, dict):
        raise MetadataParseError("'custom' must be a mapping", path=path)

    return EntryMetadata(
        title=title,
        created_at=parse_timestamp(meta["created_at"], "created_at", path),
        tags=_str_list(meta, "tags", path),
        summary=_optional_str(meta, "summary", path),
        cover=_optional_str(meta, "cover", path),
        updated_at=parse_timestamp(updated_value, "updated_at", path) if updated_value is not None else None,
        aliases=aliases,
        author_email=_optional_str(meta, "author_email", path),
        custom={str(key): str(value) for key, value in custom.items()},
    )


def parse_document(text: str, path: Optional[Path] = None) -> tuple[EntryMetadata, str]:
    """Split a markdown source into its metadata and body. No I/O; ``path`` is only used in errors."""
    raw_meta, body = split_front_matter(text, path)
    try:
        meta = yaml.safe_load(raw_meta)
    except yaml.YAMLError as exc:
        raise MetadataParseError(f"invalid YAML front-matter: {exc}", path=path) from exc
    if not isinstance(meta, dict):
        raise MetadataParseError("front-matter must be a mapping", path=path)
    return parse_metadata(meta, path), body


def dump_front_matter(metadata: EntryMetadata, body: str = "") -> str:
    data = {
        "title": metadata.title,
        "created_at": iso_date(metadata.created_at),
        "tags": list(metadata.tags),
    }
    if metadata.summary is not None:
        data["summary"] = metadata.summary
    if metadata.cover is not None:
        data["cover"] = metadata.cover
    if metadata.updated_at is not None:
        data["updated_at"] = iso_date(metadata.updated_at)
    if metadata.aliases:
        data["aliases"] = list(metadata.aliases)
    if metadata.author_email is not None:
        data["author_email"] = metadata.author_email
    if metadata.custom:
        data["custom"] = dict(metadata.custom)
    meta = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    return f"{DELIMITER}\n{meta}{DELIMITER}\n{body}"
