from __future__ import annotations

import uuid
from pathlib import Path
from typing import Optional

from jinja2 import (
    Environment,
    FileSystemLoader,
    Template,
    TemplateError,
    TemplateNotFound,
    TemplateSyntaxError,
    nodes,
    select_autoescape,
)
from markupsafe import Markup

from . import filters
from .errors import ConfigError, MissingContentBlockError, TemplateNotFoundError, TemplateRenderError
from .log import get_logger

CONTENT_BLOCK = "content"
TEMPLATE_EXTENSIONS = ("html", "htm", "xml", "jinja", "j2")

logger = get_logger("templates")


class TemplateAdapter:
    """Jinja2 environment over the templates directory.

    Every template is compiled once when the adapter is created. After that the
    adapter is only read, so worker threads can render through it concurrently.
    """

    def __init__(self, templates_dir: Path) -> None:
        if not templates_dir.is_dir():
            raise ConfigError("templates directory not found", path=templates_dir)
        self.templates_dir = templates_dir
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html", "htm", "xml"]),
            cache_size=-1,
            keep_trailing_newline=True,
        )
        self._register_filters()
        names = self.env.list_templates(extensions=TEMPLATE_EXTENSIONS)
        for name in names:
            self.load(name)
        self._content_blocks = {name: self.defines_block(name) for name in names}
        logger.debug("Loaded templates from %s", templates_dir)

    def _register_filters(self) -> None:
        for name, func in filters.FILTERS.items():
            self.env.filters[name] = func

    def load(self, template_path: str) -> Template:
        try:
            return self.env.get_template(template_path)
        except TemplateNotFound as exc:
            raise TemplateNotFoundError(
                f"template '{exc.name}' not found", path=self.templates_dir / template_path
            ) from exc
        except TemplateSyntaxError as exc:
            raise TemplateRenderError(
                f"line {exc.lineno}: {exc.message}", path=self.templates_dir / (exc.name or template_path)
            ) from exc

    def _parse(self, template_path: str) -> nodes.Template:
        self.load(template_path)
        source, _, _ = self.env.loader.get_source(self.env, template_path)
        return self.env.parse(source, name=template_path)

    def defines_block(self, template_path: str, block: str = CONTENT_BLOCK) -> bool:
        seen = set()
        current: Optional[str] = template_path
        while current is not None and current not in seen:
            seen.add(current)
            ast = self._parse(current)
            if any(node.name == block for node in ast.find_all(nodes.Block)):
                return True
            parent = next(iter(ast.find_all(nodes.Extends)), None)
            if parent is None or not isinstance(parent.template, nodes.Const):
                current = None
            else:
                current = parent.template.value
        return False

    def has_content_block(self, template_path: str) -> bool:
        if template_path in self._content_blocks:
            return self._content_blocks[template_path]
        return self.defines_block(template_path)

    def _render(self, template: Template, context: dict, template_path: str) -> str:
        try:
            return template.render(**context)
        except TemplateNotFound as exc:
            raise TemplateNotFoundError(
                f"template '{exc.name}' not found", path=self.templates_dir / str(exc.name)
            ) from exc
        except TemplateError as exc:
            raise TemplateRenderError(str(exc), path=self.templates_dir / template_path) from exc
        except (ArithmeticError, AttributeError, LookupError, TypeError, ValueError) as exc:
            raise TemplateRenderError(f"{type(exc).__name__}: {exc}", path=self.templates_dir / template_path) from exc

    def render_page(self, template_path: str, context: dict) -> str:
        return self._render(self.load(template_path), context, template_path)

    def render_entry(self, template_path: str, content: str, context: dict) -> str:
        """Render ``content`` into the ``content`` block of an entry template."""
        if not self.has_content_block(template_path):
            raise MissingContentBlockError(
                f"entry template must define '{{% block {CONTENT_BLOCK} %}}'",
                path=self.templates_dir / template_path,
            )
        # a parent may define the block inside another block the child overrides
        marker = Markup(f"<!--{CONTENT_BLOCK}:{uuid.uuid4().hex}-->")
        wrapper = (
            f"{{% extends {template_path!r} %}}"
            f"{{% block {CONTENT_BLOCK} %}}{{{{ content_marker }}}}{{{{ content }}}}{{% endblock %}}"
        )
        try:
            template = self.env.from_string(wrapper)
        except TemplateSyntaxError as exc:
            raise TemplateRenderError(exc.message, path=self.templates_dir / template_path) from exc
        html = self._render(
            template, {**context, "content": Markup(content), "content_marker": marker}, template_path
        )
        if marker not in html:
            raise MissingContentBlockError(
                f"entry template never renders its '{{% block {CONTENT_BLOCK} %}}'",
                path=self.templates_dir / template_path,
            )
        return html.replace(marker, "")
