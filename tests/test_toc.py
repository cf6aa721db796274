"""Tests for TOC labels, TOC lines and the TOC page dry run."""

import pytest

from renderers.pdf.document import LinkOp
from renderers.pdf.page_writer import PAGE_NUMBER_PADDING, PAGE_NUMBER_SAMPLE
from renderers.pdf.text_layout import ELLIPSIS
from renderers.pdf.toc import TocEntry, count_toc_pages, draw_toc, toc_label

LONG_LABEL = (
    "class Widget AcmeWidgetsConfigurationBuilderFactoryProviderRegistryServiceLocatorProxyManagerImpl "
    "— Builds immutable configuration snapshots from layered sources and validates them"
)


def page_column(theme):
    font = theme.font_normal
    return font.width(PAGE_NUMBER_SAMPLE) + PAGE_NUMBER_PADDING


class TestTocLabel:

    def test_title_only(self):
        assert toc_label("class Widget") == "class Widget"
        assert toc_label("class Widget", "  ", "") == "class Widget"

    def test_all_parts(self):
        label = toc_label("class Widget", "public class Widget", "Draws things. And more.")
        assert label == "class Widget — public class Widget — Draws things."

    def test_parts_are_capped(self):
        entry = TocEntry(
            title="class Widget",
            page_number=2,
            page=None,
            y=72,
            signature="public " * 30,
            description="word " * 60 + ".",
        )
        title, signature, description = entry.label().split(" — ")

        assert title == "class Widget"
        assert len(signature) <= 60 and signature.endswith(ELLIPSIS)
        assert len(description) <= 90 and description.endswith(ELLIPSIS)


class TestTocLines:

    def test_single_line_is_ellipsized(self, writer, theme):
        rect = writer.draw_toc_line("Very long title " * 20, 12)
        ops = writer.page.text_ops()

        title_op, number_op = ops
        assert number_op.text == "12"
        assert number_op.align == "right"
        assert number_op.x == writer.right
        assert ELLIPSIS in title_op.text
        assert theme.font_normal.width(title_op.text) <= writer.content_width - page_column(theme)
        assert rect.height == theme.line_height(theme.font_normal)

    def test_short_line_gets_dot_leaders(self, writer):
        writer.draw_toc_line("class Widget", 2)
        title_op = writer.page.text_ops()[0]
        assert title_op.text.startswith("class Widget..")

    def test_wrapped_line_leaders_on_first_line_only(self, writer, theme):
        lh = theme.line_height(theme.font_normal)
        rect = writer.draw_toc_line_wrapped(LONG_LABEL, 7)
        ops = writer.page.text_ops()

        number_ops = [op for op in ops if op.align == "right"]
        lines = [op for op in ops if op.align != "right"]

        assert len(lines) > 1
        assert [op.text for op in number_ops] == ["7"]
        assert number_ops[0].y == lines[0].y
        assert lines[0].text.endswith("..")
        assert all(".." not in op.text for op in lines[1:])
        assert all(op.x == writer.left + 10 for op in lines[1:])
        assert rect.height == pytest.approx(len(lines) * lh)
        assert writer.y == pytest.approx(rect.y + len(lines) * lh + 2)

    def test_wrapped_line_keeps_all_words(self, writer):
        writer.draw_toc_line_wrapped(LONG_LABEL, 7)
        lines = [op.text for op in writer.page.text_ops() if op.align != "right"]
        lines[0] = lines[0].rstrip(".")
        assert " ".join(lines) == " ".join(LONG_LABEL.split())

    def test_wrapped_lines_fit_available_width(self, writer, theme):
        writer.draw_toc_line_wrapped(LONG_LABEL, 7)
        available = writer.content_width - page_column(theme)
        for op in writer.page.text_ops():
            if op.align != "right":
                assert op.x + theme.font_normal.width(op.text) <= writer.left + available + 1e-6


class TestDrawToc:

    def test_links_point_at_recorded_locations(self, writer, document):
        targets = [document.add_page(), document.add_page()]
        entries = [
            TocEntry("class A", 2, targets[0], 72.0),
            TocEntry("class B", 3, targets[1], 300.0, signature="public class B"),
        ]

        rects = draw_toc(writer, entries)

        links = writer.page.links()
        assert len(links) == len(rects) == 2
        for link, entry in zip(links, entries):
            dest = next(d for d in entry.page.destinations() if d.key == link.destination)
            assert dest.y == entry.y
        assert writer.page.destinations() == []

    def test_existing_destination_is_reused(self, writer, document):
        target = document.add_page()
        key = document.add_destination(target, 100.0)
        draw_toc(writer, [TocEntry("class A", 2, target, 100.0, destination=key)])

        assert [link.destination for link in writer.page.links()] == [key]
        assert len(target.destinations()) == 1

    def test_without_links(self, writer, document):
        target = document.add_page()
        draw_toc(writer, [TocEntry("class A", 2, target, 100.0)], link=False)
        assert not any(isinstance(op, LinkOp) for op in writer.page.ops)


class TestCountTocPages:

    def test_small_toc_fits_one_page(self, theme):
        assert count_toc_pages(theme, ["class A", "class B"]) == 1
        assert count_toc_pages(theme, []) == 1

    def test_large_toc_needs_more_pages(self, theme):
        labels = [f"class Type{i} — public class Type{i}" for i in range(120)]
        assert count_toc_pages(theme, labels) > 1
