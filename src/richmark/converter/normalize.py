"""Post-conversion cleanup of serialized Markdown.

The generic HTML-to-Markdown pass escapes characters the dialect uses
literally, moves whitespace from inside emphasis to outside its markers,
and the rich-text widget auto-numbers lines that start with a bracket.
:func:`normalize_markdown` repairs all of these, in this order:

1. un-escape ``\\[``, ``\\]``, ``\\!`` and ``\\-``;
2. collapse three or more newlines to exactly two;
3. ``[]`` becomes ``[ ]``;
4. ``[X]`` becomes ``[x]``;
5. a checkbox behind a list number (``2. [ ]``, ``2. - [x]``) becomes the
   plain task form ``- [ ]`` / ``- [x]``;
6. runs of spaces between two non-space characters on a line become one
   space; leading indentation and trailing spaces are kept;

and finally trims the result.
"""

from __future__ import annotations

import re

_ESCAPED_RE = re.compile(r"\\([\[\]!\-])")
_BLANK_RUN_RE = re.compile(r"\n{3,}")
_EMPTY_BOX_RE = re.compile(r"\[\]")
_CHECKED_BOX_RE = re.compile(r"\[[xX]\]")
_NUMBERED_BOX_RE = re.compile(r"^([ \t]*)\d+\.\s*(?:-\s*)?\[( |x)\]", re.MULTILINE)
_INNER_SPACES_RE = re.compile(r"(?<=\S)[ \t]{2,}(?=\S)")


def normalize_markdown(markdown: str) -> str:
    """Apply the cleanup passes to *markdown* and trim it."""
    text = _ESCAPED_RE.sub(r"\1", markdown)
    text = _BLANK_RUN_RE.sub("\n\n", text)
    text = _EMPTY_BOX_RE.sub("[ ]", text)
    text = _CHECKED_BOX_RE.sub("[x]", text)
    text = _NUMBERED_BOX_RE.sub(r"\1- [\2]", text)
    text = _INNER_SPACES_RE.sub(" ", text)
    return text.strip()
