"""Tests for the live document tree and its offset model."""

from __future__ import annotations

from richmark.editor.document import LiveDocument


class TestLoad:
    def test_default_is_placeholder(self):
        doc = LiveDocument()
        assert doc.html == "<p><br/></p>"
        assert doc.is_empty
        assert doc.length == 1

    def test_empty_html_loads_placeholder(self):
        assert LiveDocument("").html == "<p><br/></p>"

    def test_stray_text_wrapped(self):
        assert LiveDocument("stray text").html == "<p>stray text</p>"

    def test_whitespace_between_blocks_dropped(self):
        assert LiveDocument("<p>a</p>\n  <p>b</p>").html == "<p>a</p><p>b</p>"

    def test_empty_list_falls_back_to_placeholder(self):
        assert LiveDocument("<ul></ul>").html == "<p><br/></p>"

    def test_image_is_not_empty(self):
        assert not LiveDocument('<p><img src="u"></p>').is_empty

    def test_revision_increments(self):
        doc = LiveDocument()
        before = doc.revision
        doc.load("<p>x</p>")
        doc.clear()
        assert doc.revision == before + 2


class TestOffsets:
    def test_lines_flatten_lists(self):
        doc = LiveDocument("<p>one</p><ul><li>two</li><li>3</li></ul>")
        assert [line.name for line in doc.lines()] == ["p", "li", "li"]

    def test_length_counts_one_newline_per_block(self):
        doc = LiveDocument("<p>one</p><ul><li>two</li></ul>")
        assert doc.length == 8

    def test_locate(self):
        doc = LiveDocument("<p>one</p><ul><li>two</li></ul>")
        block, start, offset = doc.locate(4)
        assert block.name == "li"
        assert (start, offset) == (4, 0)

    def test_locate_end_of_block(self):
        doc = LiveDocument("<p>one</p><p>two</p>")
        block, start, offset = doc.locate(3)
        assert block.get_text() == "one"
        assert (start, offset) == (0, 3)

    def test_image_counts_as_one_character(self):
        doc = LiveDocument('<p>intro</p><p><img src="a.png"/></p>')
        assert doc.length == 8
        block, start, offset = doc.locate(7)
        assert block.find("img") is not None
        assert (start, offset) == (6, 1)

    def test_locate_clamps(self):
        doc = LiveDocument("<p>one</p><p>two</p>")
        assert doc.locate(-5)[1:] == (0, 0)
        block, start, offset = doc.locate(100)
        assert block.get_text() == "two"
        assert (start, offset) == (4, 3)


class TestInsertText:
    def test_inline_insert(self):
        doc = LiveDocument("<p>hello world</p>")
        assert doc.insert_text(5, ",") == 6
        assert doc.html == "<p>hello, world</p>"

    def test_trailing_newline_splits_block(self):
        doc = LiveDocument("<p>hello world</p>")
        assert doc.insert_text(6, "X\n") == 8
        assert doc.html == "<p>hello X</p><p>world</p>"

    def test_split_at_end_leaves_empty_line(self):
        doc = LiveDocument("<p>ab</p>")
        doc.insert_text(2, "!\n")
        assert doc.html == "<p>ab!</p><p><br/></p>"

    def test_split_inside_inline_markup(self):
        doc = LiveDocument("<p>a<strong>bc</strong>d</p>")
        assert doc.insert_text(2, "\n") == 3
        assert doc.html == "<p>a<strong>b</strong></p><p><strong>c</strong>d</p>"

    def test_split_list_item(self):
        doc = LiveDocument("<ul><li>ab</li></ul>")
        doc.insert_text(1, "\n")
        assert doc.html == "<ul><li>a</li><li>b</li></ul>"

    def test_insert_into_placeholder(self):
        doc = LiveDocument()
        assert doc.insert_text(0, "hi") == 2
        assert doc.html == "<p>hi</p>"

    def test_insert_line_into_placeholder(self):
        doc = LiveDocument()
        doc.insert_text(0, "![image](u)\n")
        assert doc.html == "<p>![image](u)</p><p><br/></p>"

    def test_insert_line_before_image_block(self):
        doc = LiveDocument('<p><img src="u"/></p>')
        doc.insert_text(0, "x\n")
        assert doc.html == '<p>x</p><p><img src="u"/></p>'

    def test_insert_line_after_image_block(self):
        doc = LiveDocument('<p><img src="u"/></p>')
        assert doc.insert_text(1, "x\n") == 3
        assert doc.html == '<p><img src="u"/></p><p>x</p>'

    def test_inline_insert_after_image(self):
        doc = LiveDocument('<p>a<img src="u"/>b</p>')
        doc.insert_text(2, "!")
        assert doc.html == '<p>a<img src="u"/>!b</p>'

    def test_second_block(self):
        doc = LiveDocument("<p>one</p><p>two</p>")
        doc.insert_text(5, "-")
        assert doc.html == "<p>one</p><p>t-wo</p>"

    def test_out_of_range_appends_to_last_block(self):
        doc = LiveDocument("<p>one</p>")
        doc.insert_text(99, "!")
        assert doc.html == "<p>one!</p>"

    def test_revision_bumped(self):
        doc = LiveDocument("<p>a</p>")
        before = doc.revision
        doc.insert_text(0, "b")
        assert doc.revision == before + 1
