"""Render the --list-tools report.

Takes a built catalog, groups its tools by tag and renders
templates/tool_list.txt.j2.
"""

from __future__ import annotations

from pathlib import Path

import jinja2

from .catalog import Catalog, group_by_tag

TEMPLATE_DIR = Path(__file__).parent / "templates"
DOCS_URL = "https://warpmetrics.com/docs/mcp"


def render_tool_list(catalog: Catalog) -> str:
    """Render the catalog as a plain-text listing grouped by tag."""
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    template = env.get_template("tool_list.txt.j2")
    return template.render(groups=group_by_tag(catalog), docs_url=DOCS_URL)
