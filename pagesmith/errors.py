"""Build errors. Every one of them aborts the build."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class PagesmithError(Exception):
    """Base class for all build failures."""

    def __init__(self, message: str, path: Optional[Path] = None, page: Optional[str] = None) -> None:
        self.message = message
        self.path = path
        self.page = page
        super().__init__(str(self))

    def __str__(self) -> str:
        parts = []
        if self.page:
            parts.append(f"page '{self.page}'")
        if self.path is not None:
            parts.append(str(self.path))
        prefix = ": ".join(parts)
        return f"{prefix}: {self.message}" if prefix else self.message


class ConfigError(PagesmithError):
    """The site description is missing or malformed."""


class MetadataParseError(PagesmithError):
    """Front-matter YAML is malformed or a required field is absent."""


class MissingFrontMatterError(PagesmithError):
    """No delimited front-matter block was found."""


class DuplicateSlugError(PagesmithError):
    """Two entries of the same page derive the same slug."""


class EntryLoadError(PagesmithError):
    """An entry file or source directory could not be read."""


class MissingContentBlockError(PagesmithError):
    """An entry template does not define the content block."""


class TemplateNotFoundError(PagesmithError):
    """A template path does not exist under the templates directory."""


class TemplateRenderError(PagesmithError):
    """The template engine rejected or failed to render a template."""


class OutputWriteError(PagesmithError):
    """A rendered file could not be written."""
