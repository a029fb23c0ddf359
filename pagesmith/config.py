from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from .errors import ConfigError
from .utils import parse_bool, parse_int

DEFAULT_CONFIG_NAMES = ("pagesmith.yaml", "pagesmith.yml")


@dataclass(frozen=True)
class EntrySource:
    template_path: str
    source_dir: Optional[Path] = None
    file_path: Optional[Path] = None


@dataclass(frozen=True)
class PageSpec:
    name: str
    template_path: str
    entries: tuple[EntrySource, ...] = ()
    description: Optional[str] = None
    rss: bool = False
    rss_name: Optional[str] = None

    @property
    def has_entries(self) -> bool:
        return bool(self.entries)


@dataclass(frozen=True)
class SiteConfig:
    root: Path
    templates_dir: Path
    dest_dir: Path
    pages: tuple[PageSpec, ...] = field(default_factory=tuple)
    base_url: str = ""
    highlight_code: bool = True
    workers: int = 0


def find_config(path: Optional[Path] = None) -> Path:
    if path is not None:
        return path
    for name in DEFAULT_CONFIG_NAMES:
        candidate = Path(name)
        if candidate.exists():
            return candidate
    return Path(DEFAULT_CONFIG_NAMES[0])


def read_config_file(path: Path) -> dict:
    if not path.exists():
        raise ConfigError("config file not found", path=path)
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix == ".toml":
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"invalid TOML: {exc}", path=path) from exc
    elif suffix in {".yml", ".yaml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"invalid YAML: {exc}", path=path) from exc
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"invalid JSON: {exc}", path=path) from exc
    if not isinstance(data, dict):
        raise ConfigError("config must be a mapping", path=path)
    return data


def _require_str(data: dict, key: str, where: str, path: Path) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{where}: '{key}' must be a non-empty string", path=path)
    return value.strip()


def _optional_str(data: dict, key: str, where: str, path: Path) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"{where}: '{key}' must be a string", path=path)
    return value


def _parse_entry_source(data: object, where: str, root: Path, path: Path) -> EntrySource:
    if not isinstance(data, dict):
        raise ConfigError(f"{where}: entry must be a mapping", path=path)
    template_path = _require_str(data, "template_path", where, path)
    source_dir = data.get("source_dir")
    file_path = data.get("file_path", data.get("markdown_path"))
    if (source_dir is None) == (file_path is None):
        raise ConfigError(f"{where}: entry needs exactly one of 'source_dir' or 'file_path'", path=path)
    if source_dir is not None:
        return EntrySource(template_path=template_path, source_dir=root / _require_str(data, "source_dir", where, path))
    key = "file_path" if "file_path" in data else "markdown_path"
    return EntrySource(template_path=template_path, file_path=root / _require_str(data, key, where, path))


def _parse_page(data: object, index: int, root: Path, path: Path) -> PageSpec:
    where = f"pages[{index}]"
    if not isinstance(data, dict):
        raise ConfigError(f"{where}: page must be a mapping", path=path)
    name = _require_str(data, "name", where, path)
    if "/" in name or "\\" in name or name in {".", ".."}:
        raise ConfigError(f"{where}: page name '{name}' is not a valid path segment", path=path)
    where = f"page '{name}'"
    raw_entries = data.get("entries")
    if raw_entries is None:
        raw_entries = []
    if not isinstance(raw_entries, list):
        raise ConfigError(f"{where}: 'entries' must be a list", path=path)
    entries = tuple(
        _parse_entry_source(item, f"{where} entries[{i}]", root, path) for i, item in enumerate(raw_entries)
    )
    return PageSpec(
        name=name,
        template_path=_require_str(data, "template_path", where, path),
        entries=entries,
        description=_optional_str(data, "description", where, path),
        rss=parse_bool(data.get("rss")),
        rss_name=_optional_str(data, "rss_name", where, path),
    )


def parse_config(data: dict, root: Path, path: Path) -> SiteConfig:
    raw_pages = data.get("pages")
    if raw_pages is None:
        raw_pages = []
    if not isinstance(raw_pages, list):
        raise ConfigError("'pages' must be a list", path=path)
    pages = tuple(_parse_page(item, i, root, path) for i, item in enumerate(raw_pages))
    seen = set()
    for page in pages:
        if page.name in seen:
            raise ConfigError(f"duplicate page name '{page.name}'", path=path)
        seen.add(page.name)
    base_url = _optional_str(data, "base_url", "site", path) or ""
    highlight = data.get("highlight_code")
    return SiteConfig(
        root=root,
        templates_dir=root / _require_str(data, "templates_dir", "site", path),
        dest_dir=root / _require_str(data, "dest_dir", "site", path),
        pages=pages,
        base_url=base_url.strip(),
        highlight_code=True if highlight is None else parse_bool(highlight),
        workers=parse_int(data.get("workers"), 0),
    )


def load_config(path: Optional[Path] = None) -> SiteConfig:
    config_path = find_config(path).resolve()
    data = read_config_file(config_path)
    return parse_config(data, config_path.parent, config_path)
