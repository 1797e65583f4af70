"""Tests for the Markdown serializer and its markdownify rules."""

from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from richmark.config import EditorConfig
from richmark.converter.html_to_md import MarkdownSerializer, serialize, task_checkbox
from richmark.converter.md_to_html import render
from richmark.editor.document import LiveDocument


class TestTaskRules:
    def test_checked_paragraph_task(self):
        assert serialize('<p><input type="checkbox" checked> done</p>') == "- [x] done"

    def test_unchecked_paragraph_task(self):
        assert serialize('<p><input type="checkbox"> open</p>') == "- [ ] open"

    def test_consecutive_tasks_on_adjacent_lines(self):
        html = (
            '<p><input type="checkbox" checked> a</p>'
            '<p><input type="checkbox"> b</p>'
        )
        assert serialize(html) == "- [x] a\n- [ ] b"

    def test_list_item_task(self):
        assert serialize('<ul><li><input type="checkbox"> a</li></ul>') == "- [ ] a"

    def test_ordered_list_item_task_is_not_numbered(self):
        assert serialize('<ol><li><input type="checkbox" checked> a</li></ol>') == "- [x] a"

    def test_task_keeps_inline_formatting(self):
        html = '<p><input type="checkbox"> buy <strong>milk</strong></p>'
        assert serialize(html) == "- [ ] buy **milk**"

    def test_empty_task(self):
        assert serialize('<p><input type="checkbox"></p>') == "- [ ]"

    def test_bare_checkbox_marker(self):
        assert serialize('<input type="checkbox" checked> loose') == "[x] loose"
        assert serialize('<input type="checkbox"> loose') == "[ ] loose"

    def test_non_checkbox_input_dropped(self):
        assert serialize('<p>a<input type="text">b</p>') == "ab"

    def test_task_checkbox_belongs_to_nearest_container(self):
        soup = BeautifulSoup(
            '<ul><li><p><input type="checkbox"> x</p></li></ul>', "html.parser"
        )
        assert task_checkbox(soup.find("li")) is None
        assert task_checkbox(soup.find("p")) is soup.find("input")


class TestImageRule:
    def test_alt_replaced_with_configured_text(self):
        assert serialize('<p><img src="https://x.test/c.png" alt="cat"></p>') == (
            "![image](https://x.test/c.png)"
        )

    def test_custom_alt(self):
        serializer = MarkdownSerializer(EditorConfig(image_alt="figure"))
        assert serializer.serialize('<p><img src="u.png"></p>') == "![figure](u.png)"

    def test_image_without_src_dropped(self):
        assert serialize('<p><img alt="x"></p>') == ""


class TestGenericRules:
    def test_headings_atx(self):
        assert serialize("<h1>Title</h1><h2>Sub</h2>") == "# Title\n\n## Sub"

    def test_inline_markup(self):
        html = "<p>Body <strong>bold</strong> <em>it</em> <code>c</code></p>"
        assert serialize(html) == "Body **bold** *it* `c`"

    def test_bullet_list(self):
        assert serialize("<ul><li>a</li><li>b</li></ul>") == "- a\n- b"

    def test_ordered_list(self):
        assert serialize("<ol><li>a</li><li>b</li></ol>") == "1. a\n2. b"

    def test_blank_paragraphs_collapse(self):
        assert serialize("<p>a</p><p><br></p><p><br></p><p>b</p>") == "a\n\nb"

    def test_no_markdown_escaping(self):
        assert serialize("<p>a_b *c* [d]</p>") == "a_b *c* [d]"

    def test_entities_decoded(self):
        assert serialize("<p>a &lt; b &amp; c</p>") == "a < b & c"

    @pytest.mark.parametrize(
        "html, expected",
        [
            ("<p>a <strong> b</strong> c</p>", "a **b** c"),
            ("<p>3 <em> 4 </em> 5</p>", "3 *4* 5"),
            ("<ul><li>x <code> y </code> z</li></ul>", "- x `y` z"),
        ],
    )
    def test_whitespace_inside_emphasis_is_a_fixed_point(self, html, expected):
        once = serialize(html)
        assert once == expected
        assert serialize(render(once)) == once


class TestSerializer:
    def test_placeholder_is_empty(self):
        assert serialize("<p><br></p>") == ""

    def test_accepts_live_document(self):
        doc = LiveDocument("<p>hello</p>")
        assert serialize(doc) == "hello"

    def test_accepts_soup(self):
        assert serialize(BeautifulSoup("<p>hi</p>", "html.parser")) == "hi"

    def test_serialize_metric(self, metrics):
        MarkdownSerializer(EditorConfig(metrics=metrics)).serialize("<p>a</p>")
        assert metrics.names() == ["richmark.serialize_total"]

    def test_debug_dump(self, capsys):
        MarkdownSerializer(EditorConfig(debug_dump_markdown=True)).serialize("<p>a</p>")
        assert "[richmark] Serialized Markdown: 'a'" in capsys.readouterr().err
