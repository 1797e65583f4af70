"""Editor HTML to Markdown.

:class:`MarkdownSerializer` walks the live editor tree with a
:class:`markdownify.MarkdownConverter` subclass.  markdownify dispatches
on ``convert_<tag>`` methods, so the dialect's extensions are plain method
overrides, checked most specific first:

* a ``<p>`` or ``<li>`` directly holding a checkbox ``<input>`` becomes
  ``- [x] text`` / ``- [ ] text``; the control itself emits nothing;
* a checkbox anywhere else becomes a bare ``[x]`` / ``[ ]`` marker;
* ``<img>`` becomes ``![<image_alt>](src)``; the original alt text is not
  kept.

Headings, paragraphs, lists, emphasis and code use markdownify's own
rules.  The converted text is then passed through
:func:`~richmark.converter.normalize.normalize_markdown`.
"""

from __future__ import annotations

import sys
from typing import Any

from bs4 import BeautifulSoup, Tag
from markdownify import ATX, MarkdownConverter

from richmark.config import EditorConfig
from richmark.converter.normalize import normalize_markdown
from richmark.observability import resolve_metrics

_TASK_CONTAINERS = ("p", "li")


def _is_checkbox(el: Tag) -> bool:
    return el.name == "input" and (el.get("type") or "").lower() == "checkbox"


def task_checkbox(el: Tag) -> Tag | None:
    """Return the checkbox that makes *el* a task item, if any.

    A checkbox belongs to its nearest ``<p>``/``<li>`` ancestor only, so an
    ``<li>`` wrapping a task ``<p>`` is not itself a task.
    """
    for box in el.find_all("input"):
        if _is_checkbox(box) and box.find_parent(_TASK_CONTAINERS) is el:
            return box
    return None


class EditorMarkdownConverter(MarkdownConverter):
    """markdownify converter with the task-list and image rules."""

    def __init__(self, image_alt: str = "image", **options: Any) -> None:
        self.image_alt = image_alt
        super().__init__(**options)

    def convert_p(self, el, text, parent_tags):
        box = task_checkbox(el)
        if box is None:
            return super().convert_p(el, text, parent_tags)
        return "\n" + self._task_line(box, text)

    def convert_li(self, el, text, parent_tags):
        box = task_checkbox(el)
        if box is None:
            return super().convert_li(el, text, parent_tags)
        return self._task_line(box, text)

    def convert_input(self, el, text, parent_tags):
        if not _is_checkbox(el):
            return ""
        if el.find_parent(_TASK_CONTAINERS) is not None:
            return ""
        return "[x]" if el.has_attr("checked") else "[ ]"

    def convert_img(self, el, text, parent_tags):
        src = el.get("src") or ""
        if not src:
            return ""
        return f"![{self.image_alt}]({src})"

    @staticmethod
    def _task_line(box: Tag, text: str) -> str:
        mark = "x" if box.has_attr("checked") else " "
        body = " ".join(text.split())
        return f"- [{mark}] {body}".rstrip() + "\n"


class MarkdownSerializer:
    """Serialize the live editor tree to the Markdown dialect.

    Parameters
    ----------
    config:
        Editor configuration; ``image_alt``, ``metrics`` and
        ``debug_dump_markdown`` are consulted.
    """

    def __init__(self, config: EditorConfig | None = None) -> None:
        self._config = config or EditorConfig()
        self._metrics = resolve_metrics(self._config.metrics)
        self._converter = EditorMarkdownConverter(
            image_alt=self._config.image_alt,
            heading_style=ATX,
            bullets="-",
            strong_em_symbol="*",
            escape_asterisks=False,
            escape_underscores=False,
            escape_misc=False,
        )

    def serialize(self, root: Any) -> str:
        """Convert *root* to Markdown.

        Parameters
        ----------
        root:
            A BeautifulSoup tree or tag, an object exposing one as ``.root``
            (such as :class:`~richmark.editor.document.LiveDocument`), or an
            HTML string.

        Returns
        -------
        str
            Normalized Markdown; ``""`` for an empty document.
        """
        markdown = normalize_markdown(self._converter.convert_soup(_as_tree(root)))
        self._metrics.increment("richmark.serialize_total")

        if self._config.debug_dump_markdown:
            print("[richmark] Serialized Markdown:", repr(markdown), file=sys.stderr)

        return markdown


def _as_tree(root: Any) -> Tag:
    if isinstance(root, Tag):
        return root
    if isinstance(root, str):
        return BeautifulSoup(root, "html.parser")
    return root.root


_default_serializer = MarkdownSerializer()


def serialize(root: Any) -> str:
    """Serialize *root* with the default configuration."""
    return _default_serializer.serialize(root)
