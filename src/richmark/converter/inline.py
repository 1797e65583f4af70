"""Inline formatting: emphasis-delimited Markdown to inline HTML.

Handles a single text run with no block awareness.  Supported markers::

    **bold**   -> <strong>bold</strong>
    *italic*   -> <em>italic</em>
    `code`     -> <code>code</code>

Code spans are resolved first and their contents are shielded from the
emphasis patterns, so ``a*b*c`` inside backticks stays literal.  The run is
HTML-escaped before any tag is introduced.  The reverse direction (inline
HTML to Markdown) is handled by the serializer's markdownify rules.
"""

from __future__ import annotations

import re

_CODE_RE = re.compile(r"`(.*?)`")
_BOLD_RE = re.compile(r"\*\*(.*?)\*\*")
_ITALIC_RE = re.compile(r"\*(.*?)\*")

# Private-use sentinels marking stashed code spans.
_SLOT_OPEN = "\ue000"
_SLOT_CLOSE = "\ue001"
_SLOT_RE = re.compile(_SLOT_OPEN + r"(\d+)" + _SLOT_CLOSE)


def escape_html(text: str) -> str:
    """Escape ``&``, ``<`` and ``>`` so *text* parses back as the same string."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def format_inline(text: str) -> str:
    """Convert one Markdown text run to inline HTML.

    Parameters
    ----------
    text:
        The run, without any block marker (``# ``, ``- ``, ...).

    Returns
    -------
    str
        HTML safe to embed inside a block element.
    """
    if not text:
        return ""

    # The sentinels must not occur in the run itself.
    text = text.replace(_SLOT_OPEN, "").replace(_SLOT_CLOSE, "")
    spans: list[str] = []

    def _stash(match: re.Match[str]) -> str:
        spans.append(match.group(1))
        return f"{_SLOT_OPEN}{len(spans) - 1}{_SLOT_CLOSE}"

    html = _CODE_RE.sub(_stash, escape_html(text))
    html = _BOLD_RE.sub(r"<strong>\1</strong>", html)
    html = _ITALIC_RE.sub(r"<em>\1</em>", html)

    if spans:
        html = _SLOT_RE.sub(lambda m: f"<code>{spans[int(m.group(1))]}</code>", html)
    return html
