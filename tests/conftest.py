from __future__ import annotations

from pathlib import Path

import pytest

from pagesmith.templates import TemplateAdapter
from tests._fixtures.site_builder import SiteBuilder


@pytest.fixture
def site(tmp_path: Path) -> SiteBuilder:
    """Provide a site with the default templates written."""
    builder = SiteBuilder(tmp_path)
    builder.write_default_templates()
    return builder


@pytest.fixture
def adapter(site: SiteBuilder) -> TemplateAdapter:
    return TemplateAdapter(site.root / "templates")
