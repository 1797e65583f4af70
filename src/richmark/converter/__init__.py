"""Markdown <-> editor HTML conversion.

Public API:

- :func:`render` / :class:`MarkdownRenderer`: Markdown -> editor HTML.
- :func:`serialize` / :class:`MarkdownSerializer`: editor HTML -> Markdown.
- :func:`format_inline`: one text run's emphasis markers -> inline HTML.
- :func:`parse_blocks`: Markdown -> flat block list.
- :func:`normalize_markdown`: cleanup pass applied after serialization.

Public helpers for callers that work with the block model directly; the
editor's own render/serialize path does not use them:

- :func:`blocks_to_markdown` and each block's ``to_markdown()``: write
  blocks back out as canonical dialect lines, renumbering numbered runs.
- :func:`classify_line`: the block(s) a single line parses to.
"""

from richmark.converter.blocks import blocks_to_markdown, classify_line, parse_blocks
from richmark.converter.html_to_md import MarkdownSerializer, serialize
from richmark.converter.inline import format_inline
from richmark.converter.md_to_html import EMPTY_DOCUMENT_HTML, MarkdownRenderer, render
from richmark.converter.normalize import normalize_markdown

__all__ = [
    "EMPTY_DOCUMENT_HTML",
    "MarkdownRenderer",
    "MarkdownSerializer",
    "blocks_to_markdown",
    "classify_line",
    "format_inline",
    "normalize_markdown",
    "parse_blocks",
    "render",
    "serialize",
]
