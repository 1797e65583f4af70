"""The editor's live document.

:class:`LiveDocument` holds the rich-text widget's HTML as a BeautifulSoup
tree.  Positions in the document use the widget's linear offset model:
every leaf block (a top-level ``<p>``/``<hN>``, or one ``<li>`` of a
``<ul>``/``<ol>``) contributes its text followed by one newline.  For
``<p>one</p><ul><li>two</li></ul>`` offset 0 is before ``o``, offset 4 is
before ``t`` and :attr:`LiveDocument.length` is 8.  An embedded ``<img>``
counts as one character, so the offsets before and after an image differ.

Text inserted with :meth:`LiveDocument.insert_text` may end in a newline,
which splits the block at that point the way pressing Enter would.
"""

from __future__ import annotations

from collections.abc import Iterator

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from richmark.converter.md_to_html import EMPTY_DOCUMENT_HTML

_LIST_TAGS = ("ul", "ol")


def _text_nodes(block: Tag) -> list[NavigableString]:
    return [
        node
        for node in block.descendants
        if isinstance(node, NavigableString) and not isinstance(node, Comment)
    ]


def _leaves(block: Tag) -> list[NavigableString | Tag]:
    """Text nodes and images of *block* in document order."""
    return [
        node
        for node in block.descendants
        if (isinstance(node, NavigableString) and not isinstance(node, Comment))
        or (isinstance(node, Tag) and node.name == "img")
    ]


def _leaf_length(node: NavigableString | Tag) -> int:
    return 1 if isinstance(node, Tag) else len(node)


def _block_text_length(block: Tag) -> int:
    return sum(_leaf_length(node) for node in _leaves(block))


class LiveDocument:
    """Mutable HTML tree of the editor content.

    Parameters
    ----------
    html:
        Initial HTML.  Empty input loads the placeholder paragraph.
    """

    def __init__(self, html: str = EMPTY_DOCUMENT_HTML) -> None:
        self.root: BeautifulSoup = BeautifulSoup("", "html.parser")
        self.revision = 0
        self.load(html)

    # ------------------------------------------------------------------
    # Whole-document operations
    # ------------------------------------------------------------------

    def load(self, html: str) -> None:
        """Replace the whole content with *html*."""
        self.root = BeautifulSoup(html or EMPTY_DOCUMENT_HTML, "html.parser")
        self._normalize()
        self.revision += 1

    def clear(self) -> None:
        """Reset to the empty placeholder paragraph."""
        self.load(EMPTY_DOCUMENT_HTML)

    @property
    def html(self) -> str:
        return str(self.root)

    @property
    def is_empty(self) -> bool:
        return not self.root.get_text().strip() and self.root.find("img") is None

    def _normalize(self) -> None:
        # Stray top-level text is wrapped in a paragraph.
        for node in list(self.root.children):
            if isinstance(node, Comment):
                continue
            if isinstance(node, NavigableString):
                if node.strip():
                    p = self.root.new_tag("p")
                    node.wrap(p)
                else:
                    node.extract()
        if next(self.lines(), None) is None:
            self.root = BeautifulSoup(EMPTY_DOCUMENT_HTML, "html.parser")

    # ------------------------------------------------------------------
    # Offset model
    # ------------------------------------------------------------------

    def lines(self) -> Iterator[Tag]:
        """Yield the leaf blocks in document order."""
        for child in self.root.children:
            if not isinstance(child, Tag):
                continue
            if child.name in _LIST_TAGS:
                yield from child.find_all("li", recursive=False)
            else:
                yield child

    @property
    def length(self) -> int:
        return sum(_block_text_length(line) + 1 for line in self.lines())

    def locate(self, index: int) -> tuple[Tag, int, int]:
        """Map a document offset to ``(block, block start, offset within block)``.

        Offsets outside the document are clamped to its start or to the end
        of the last block.
        """
        lines = list(self.lines())
        start = 0
        index = max(0, index)
        for line in lines:
            size = _block_text_length(line)
            if index <= start + size:
                return line, start, index - start
            start += size + 1
        last = lines[-1]
        size = _block_text_length(last)
        return last, start - size - 1, size

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def insert_text(self, index: int, text: str) -> int:
        """Insert *text* at *index* and return the offset just past it.

        A trailing newline in *text* splits the target block after the
        inserted text.  Newlines elsewhere in *text* are kept as literal
        characters.
        """
        split = text.endswith("\n")
        content = text[:-1] if split else text
        block, start, offset = self.locate(index)
        leaves = _leaves(block)

        if not _text_nodes(block) and split:
            # Placeholder or image-only block: the text becomes its own line,
            # after the block when the offset is past its image.
            new_block = self.root.new_tag("li" if block.name == "li" else "p")
            new_block.string = content
            if offset > 0:
                block.insert_after(new_block)
            else:
                block.insert_before(new_block)
        elif not leaves:
            for br in block.find_all("br"):
                br.decompose()
            block.append(NavigableString(content))
        else:
            node, pos = self._find_node(leaves, offset)
            if isinstance(node, Tag):
                anchor = NavigableString("")
                if pos == 0:
                    node.insert_before(anchor)
                else:
                    node.insert_after(anchor)
                node, pos = anchor, 0
            head = NavigableString(node[:pos] + content)
            tail = NavigableString(node[pos:])
            node.replace_with(head)
            head.insert_after(tail)
            if split:
                self._split_block(block, tail)

        self.revision += 1
        return start + offset + len(text)

    @staticmethod
    def _find_node(
        nodes: list[NavigableString | Tag], offset: int
    ) -> tuple[NavigableString | Tag, int]:
        seen = 0
        for node in nodes:
            size = _leaf_length(node)
            if offset <= seen + size:
                return node, offset - seen
            seen += size
        return nodes[-1], _leaf_length(nodes[-1])

    def _split_block(self, block: Tag, tail: NavigableString) -> None:
        """Move *tail* and everything after it in *block* into a new sibling block."""
        node: Tag | NavigableString = tail
        while True:
            parent = node.parent
            clone = self.root.new_tag(parent.name, attrs=dict(parent.attrs))
            moving = [node, *node.next_siblings]
            for item in moving:
                clone.append(item.extract())
            parent.insert_after(clone)
            if parent is block:
                break
            node = clone

        # A split at the very end leaves an empty line behind.
        if not clone.get_text() and clone.find("img") is None:
            clone.clear()
            clone.append(self.root.new_tag("br"))
