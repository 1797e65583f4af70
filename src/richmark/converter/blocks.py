"""Line classification for the Markdown dialect.

The dialect is strictly line-oriented: every non-empty line becomes
exactly one block (an image line with trailing text becomes two), and
lists are flat runs of same-kind items rather than containers.  Matching
order decides ambiguous lines::

    1. "# text" / "## text"             -> Heading
    2. "- [ ] text", "[x] text", ...    -> TaskItem  (x is case-insensitive)
    3. "![alt](url)..."                 -> Image     (alt defaults to "image")
    4. "- text"                         -> BulletItem
    5. "12. text"                       -> NumberedItem
    6. anything else                    -> Paragraph

Nothing in here raises: unknown syntax is a paragraph.
"""

from __future__ import annotations

import re

from richmark.models import (
    Block,
    BulletItem,
    Heading,
    Image,
    NumberedItem,
    Paragraph,
    TaskItem,
)

DEFAULT_IMAGE_ALT = "image"

_TASK_RE = re.compile(r"^(?:- )?\[( |x|X)\]\s*(.*)$")
_IMAGE_RE = re.compile(r"^!\[([^\]]*)\]\(([^)\s]*)\)\s*(.*)$")
_NUMBERED_RE = re.compile(r"^\d+\.\s+(.*)$")


def classify_line(line: str) -> list[Block]:
    """Classify one line of Markdown.

    Returns an empty list for blank lines, a single block for most lines,
    and two blocks for an image followed by trailing text.
    """
    trimmed = line.strip()
    if not trimmed:
        return []

    if trimmed.startswith("# "):
        return [Heading(level=1, text=trimmed[2:].strip())]
    if trimmed.startswith("## "):
        return [Heading(level=2, text=trimmed[3:].strip())]

    m = _TASK_RE.match(trimmed)
    if m:
        return [TaskItem(checked=m.group(1) in "xX", text=m.group(2).strip())]

    m = _IMAGE_RE.match(trimmed)
    if m:
        alt, url, rest = m.groups()
        blocks: list[Block] = [Image(alt=alt.strip() or DEFAULT_IMAGE_ALT, url=url)]
        if rest:
            blocks.append(Paragraph(text=rest))
        return blocks

    if trimmed.startswith("- "):
        return [BulletItem(text=trimmed[2:].strip())]

    m = _NUMBERED_RE.match(trimmed)
    if m:
        return [NumberedItem(text=m.group(1))]

    return [Paragraph(text=trimmed)]


def parse_blocks(markdown: str) -> list[Block]:
    """Parse a Markdown document into its flat block sequence."""
    blocks: list[Block] = []
    for line in (markdown or "").split("\n"):
        blocks.extend(classify_line(line))
    return blocks


def blocks_to_markdown(blocks: list[Block]) -> str:
    """Write *blocks* back out, one line per block.

    Consecutive numbered items are renumbered from 1; any other block
    resets the count.
    """
    lines: list[str] = []
    counter = 0
    for block in blocks:
        if isinstance(block, NumberedItem):
            counter += 1
            lines.append(f"{counter}. {block.text}")
        else:
            counter = 0
            lines.append(block.to_markdown())
    return "\n".join(lines)
