from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Optional

from .errors import OutputWriteError

INDEX_FILE = "index.html"


def target(dest_dir: Path, page: str, slug: Optional[str] = None) -> Path:
    directory = dest_dir / page
    if slug is not None:
        directory = directory / slug
    return directory / INDEX_FILE


def alias_target(dest_dir: Path, page: str, alias: str) -> Path:
    parts = [part for part in PurePosixPath(alias).parts if part not in {"/", ".", ".."}]
    return dest_dir.joinpath(page, *parts, INDEX_FILE)


def write_text(path: Path, text: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise OutputWriteError(f"cannot write output: {exc.strerror or exc}", path=path) from exc
