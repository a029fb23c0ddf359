from __future__ import annotations

import xml.etree.ElementTree as etree

import markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from .utils import join_url, slugify

ANCHORED_HEADINGS = ("h2", "h3", "h4", "h5", "h6")
BASE_EXTENSIONS = ["fenced_code", "tables", "footnotes", "sane_lists", "smarty"]


class HeadingAnchorProcessor(Treeprocessor):
    def __init__(self, md, page_url: str):
        super().__init__(md)
        self.page_url = page_url

    def run(self, root):
        used = set()
        headings = [el for el in root.iter() if el.tag in ANCHORED_HEADINGS]
        for el in headings:
            slug = slugify("".join(el.itertext())) or "section"
            candidate = slug
            counter = 2
            while candidate in used:
                candidate = f"{slug}-{counter}"
                counter += 1
            used.add(candidate)

            link = etree.Element("a")
            link.set("href", f"{self.page_url}#{candidate}")
            link.text = el.text
            for child in list(el):
                el.remove(child)
                link.append(child)
            el.text = None
            el.set("id", candidate)
            el.append(link)


class HeadingAnchorExtension(Extension):
    def __init__(self, page_url: str = "", **kwargs):
        super().__init__(**kwargs)
        self.page_url = page_url

    def extendMarkdown(self, md):
        # after "inline" (20) so heading text is final
        md.treeprocessors.register(HeadingAnchorProcessor(md, self.page_url), "heading_anchor", 15)


def page_url(base_url: str, page_name: str, slug: str) -> str:
    if not base_url:
        return ""
    return join_url(base_url, f"{page_name}/{slug}/")


def convert_markdown(body: str, *, highlight: bool = True, url: str = "") -> str:
    extensions = list(BASE_EXTENSIONS)
    extension_configs = {}
    if highlight:
        extensions.append("codehilite")
        extension_configs["codehilite"] = {"css_class": "codehilite", "guess_lang": False}
    extensions.append(HeadingAnchorExtension(page_url=url))
    md = markdown.Markdown(extensions=extensions, extension_configs=extension_configs)
    return md.convert(body)
