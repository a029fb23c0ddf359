"""Build orchestration.

A build walks through the stages of ``BuildStage`` in order. Every stage
finishes for the whole site before the next one starts: page templates may
read any page's section, so all entries are rendered and the site context is
frozen before the first page renders. Rendered output is kept in memory until
the ``WRITTEN`` stage, which means a failure while loading or rendering leaves
the destination directory untouched.
"""

from __future__ import annotations

import enum
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Optional, TypeVar

from .config import PageSpec, SiteConfig
from .entries import Entry, load_entries
from .errors import ConfigError, DuplicateSlugError, PagesmithError
from .log import get_logger
from .output import target, write_text
from .pages import build_alias_redirects, build_rss, rss_target
from .render import render_entry, site_context
from .site import SiteContext, build_site_context
from .templates import TemplateAdapter
from .utils import resolve_workers

T = TypeVar("T")
R = TypeVar("R")

logger = get_logger("pipeline")


class BuildStage(enum.Enum):
    INIT = "init"
    ENTRIES_LOADED = "entries_loaded"
    ENTRIES_RENDERED = "entries_rendered"
    CONTEXT_BUILT = "context_built"
    PAGES_RENDERED = "pages_rendered"
    WRITTEN = "written"
    DONE = "done"


@dataclass
class BuildResult:
    stage: BuildStage = BuildStage.INIT
    entries: dict[str, list[Entry]] = field(default_factory=dict)
    context: Optional[SiteContext] = None
    outputs: dict[Path, str] = field(default_factory=dict)
    written: list[Path] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def entry_count(self) -> int:
        return sum(len(items) for items in self.entries.values())


def run_tasks(func: Callable[[T], R], items: Iterable[T], workers: int) -> list[R]:
    items = list(items)
    if workers <= 1 or len(items) <= 1:
        return [func(item) for item in items]
    with ThreadPoolExecutor(max_workers=min(workers, len(items))) as executor:
        return list(executor.map(func, items))


class Builder:
    def __init__(self, config: SiteConfig, adapter: Optional[TemplateAdapter] = None) -> None:
        self.config = config
        self.adapter = adapter
        self.workers = resolve_workers(config.workers)
        self.result = BuildResult()

    def _advance(self, stage: BuildStage) -> None:
        self.result.stage = stage
        logger.debug("Stage: %s", stage.value)

    def check_config(self) -> None:
        if not self.config.base_url and any(page.rss for page in self.config.pages):
            raise ConfigError("'base_url' is required when a page enables rss")

    def load(self) -> None:
        pages = [page for page in self.config.pages if page.has_entries]
        loaded = run_tasks(lambda page: load_entries(page, self.config.root), pages, self.workers)
        self.result.entries = {page.name: entries for page, entries in zip(pages, loaded)}
        logger.info("Loaded %d entries from %d pages", self.result.entry_count, len(pages))
        self._advance(BuildStage.ENTRIES_LOADED)

    def render_entries(self) -> None:
        flat = [entry for entries in self.result.entries.values() for entry in entries]
        rendered = run_tasks(
            lambda entry: render_entry(
                entry, self.adapter, highlight=self.config.highlight_code, base_url=self.config.base_url
            ),
            flat,
            self.workers,
        )
        by_page: dict[str, list[Entry]] = {name: [] for name in self.result.entries}
        for entry in rendered:
            by_page[entry.page].append(entry)
        self.result.entries = by_page
        self._advance(BuildStage.ENTRIES_RENDERED)

    def build_context(self) -> None:
        self.result.context = build_site_context(self.config.pages, self.result.entries, self.config.base_url)
        self._advance(BuildStage.CONTEXT_BUILT)

    def render_page(self, page: PageSpec) -> str:
        context = {
            "sections": self.result.context.as_template_context(),
            "page": page.name,
            "site": site_context(self.config.base_url),
        }
        try:
            return self.adapter.render_page(page.template_path, context)
        except PagesmithError as exc:
            exc.page = exc.page or page.name
            raise

    def render_pages(self) -> None:
        dest = self.config.dest_dir
        pages = list(self.config.pages)
        rendered = run_tasks(self.render_page, pages, self.workers)
        outputs = self.result.outputs
        for page, html in zip(pages, rendered):
            outputs[target(dest, page.name)] = html
            for entry in self.result.entries.get(page.name, []):
                outputs[target(dest, page.name, entry.slug)] = entry.html
            if page.rss:
                outputs[rss_target(dest, page)] = build_rss(
                    page, self.result.entries.get(page.name, []), self.config.base_url
                )
        # an alias may not take a path already used by a page, entry or alias
        for entries in self.result.entries.values():
            for entry in entries:
                for alias, path, redirect in build_alias_redirects(dest, entry, self.config.base_url):
                    if path in outputs:
                        raise DuplicateSlugError(
                            f"alias '{alias}' of entry '{entry.slug}' collides with {path}",
                            path=entry.source_path,
                            page=entry.page,
                        )
                    outputs[path] = redirect
        self._advance(BuildStage.PAGES_RENDERED)

    def write(self) -> None:
        items = list(self.result.outputs.items())
        run_tasks(lambda item: write_text(*item), items, self.workers)
        self.result.written = [path for path, _ in items]
        logger.info("Wrote %d files to %s", len(items), self.config.dest_dir)
        self._advance(BuildStage.WRITTEN)

    def run(self) -> BuildResult:
        start = time.perf_counter()
        self.check_config()
        if self.adapter is None:
            self.adapter = TemplateAdapter(self.config.templates_dir)
        self.load()
        self.render_entries()
        self.build_context()
        self.render_pages()
        self.write()
        self.result.elapsed = time.perf_counter() - start
        self._advance(BuildStage.DONE)
        return self.result


def build_site(config: SiteConfig) -> BuildResult:
    return Builder(config).run()
