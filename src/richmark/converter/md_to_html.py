"""Markdown to editor HTML.

:class:`MarkdownRenderer` turns a Markdown document into the block-level
HTML the rich-text widget is mounted with.  Each line is classified by
:func:`~richmark.converter.blocks.classify_line`; the renderer's only job
beyond that is wrapping contiguous runs of bullet or numbered items in a
single ``<ul>`` / ``<ol>``.  A run ends at any other kind of line, at a
blank line, or at end of input.

Usage::

    from richmark.converter.md_to_html import render

    render("- [ ] buy milk")
    # '<p><input type="checkbox"> buy milk</p>'
"""

from __future__ import annotations

import sys

from richmark.config import EditorConfig
from richmark.converter.blocks import classify_line
from richmark.converter.inline import escape_html, format_inline
from richmark.models import (
    Block,
    BulletItem,
    Heading,
    Image,
    NumberedItem,
    Paragraph,
    TaskItem,
)
from richmark.observability import resolve_metrics

EMPTY_DOCUMENT_HTML = "<p><br></p>"
"""Placeholder for an empty document; keeps a valid insertion point."""


def _escape_attr(value: str) -> str:
    return escape_html(value).replace('"', "&quot;")


def _list_tag(block: Block) -> str | None:
    if isinstance(block, BulletItem):
        return "ul"
    if isinstance(block, NumberedItem):
        return "ol"
    return None


def render_block(block: Block) -> str:
    """Render a single block to HTML (list items without their container)."""
    if isinstance(block, Heading):
        return f"<h{block.level}>{format_inline(block.text)}</h{block.level}>"
    if isinstance(block, TaskItem):
        checked = " checked" if block.checked else ""
        return f'<p><input type="checkbox"{checked}> {format_inline(block.text)}</p>'
    if isinstance(block, Image):
        return f'<p><img src="{_escape_attr(block.url)}" alt="{_escape_attr(block.alt)}"></p>'
    if isinstance(block, (BulletItem, NumberedItem)):
        return f"<li>{format_inline(block.text)}</li>"
    if isinstance(block, Paragraph):
        return f"<p>{format_inline(block.text)}</p>"
    raise TypeError(f"not a block: {block!r}")


class MarkdownRenderer:
    """Render the Markdown dialect to editor HTML.

    Parameters
    ----------
    config:
        Editor configuration; only ``metrics`` and ``debug_dump_html`` are
        consulted.
    """

    def __init__(self, config: EditorConfig | None = None) -> None:
        self._config = config or EditorConfig()
        self._metrics = resolve_metrics(self._config.metrics)

    def render(self, markdown: str) -> str:
        """Render *markdown* to HTML.

        Empty or whitespace-only input renders to :data:`EMPTY_DOCUMENT_HTML`,
        never to an empty string.
        """
        parts: list[str] = []
        open_list: str | None = None

        for line in (markdown or "").split("\n"):
            blocks = classify_line(line)
            if not blocks:
                # Blank lines separate blocks and end any list run.
                if open_list:
                    parts.append(f"</{open_list}>")
                    open_list = None
                continue

            for block in blocks:
                tag = _list_tag(block)
                if tag != open_list:
                    if open_list:
                        parts.append(f"</{open_list}>")
                    if tag:
                        parts.append(f"<{tag}>")
                    open_list = tag
                parts.append(render_block(block))

        if open_list:
            parts.append(f"</{open_list}>")

        html = "".join(parts) or EMPTY_DOCUMENT_HTML
        self._metrics.increment("richmark.render_total")

        if self._config.debug_dump_html:
            print("[richmark] Rendered HTML:", html, file=sys.stderr)

        return html


_default_renderer = MarkdownRenderer()


def render(markdown: str) -> str:
    """Render *markdown* with the default configuration."""
    return _default_renderer.render(markdown)
