"""End-to-end tests for rendering a TypeDoc tree to PDF."""

import io

import pdfplumber
import pytest

from renderers.pdf.document import OutlineOp
from renderers.pdf.type_doc_pdf import TypeDocPdfRenderer, heading_title, render_document, render_to_file
from renderers.pdf.toc import TOC_HEADING


def page_count(data: bytes) -> int:
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        return len(pdf.pages)


def page_text(data: bytes, index: int) -> str:
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        return pdf.pages[index].extract_text() or ""


@pytest.fixture
def tree(type_factory):
    """Root with nested types deep enough to span several pages."""
    root = type_factory("Root", methods=40, signature="public class Root")
    first = type_factory("First", methods=60, signature="public class First")
    root.add_nested(first)
    first.add_nested(type_factory("Inner", kind="enum", methods=5, summary="Innermost. Second sentence."))
    root.add_nested(type_factory("Second", kind="struct", methods=70, summary=""))
    return root


class TestScenarios:

    def test_small_type_is_toc_plus_one_page(self, type_factory, theme):
        root = type_factory("Widget", methods=3)
        renderer = TypeDocPdfRenderer(root, theme=theme)
        doc = renderer.layout()

        assert doc.page_count == 2
        assert len(renderer.toc_entries) == 1
        assert renderer.toc_entries[0].page_number == 2
        assert page_count(renderer.render()) == 2

    def test_long_type_records_heading_page(self, type_factory, theme):
        root = type_factory("Widget", methods=150, summary="Long. " * 200)
        renderer = TypeDocPdfRenderer(root, theme=theme)
        doc = renderer.layout()

        assert doc.page_count >= 5
        assert renderer.toc_entries[0].page_number == 2
        assert page_count(renderer.render()) == doc.page_count


class TestTocResolution:

    def test_entries_follow_preorder(self, tree, theme):
        renderer = TypeDocPdfRenderer(tree, theme=theme)
        renderer.layout()

        assert [e.title for e in renderer.toc_entries] == [heading_title(t) for t in tree.flatten_nested()]
        assert [e.level for e in renderer.toc_entries] == [0, 1, 2, 1]

    def test_page_numbers_match_heading_pages(self, tree, theme):
        renderer = TypeDocPdfRenderer(tree, theme=theme)
        doc = renderer.layout()

        assert doc.page_count > 4
        for entry in renderer.toc_entries:
            assert doc.pages[entry.page_number - 1] is entry.page
            headings = [op for op in entry.page.text_ops() if op.y == entry.y]
            assert [op.text for op in headings] == [entry.title]

    def test_links_target_recorded_locations(self, tree, theme):
        renderer = TypeDocPdfRenderer(tree, theme=theme)
        doc = renderer.layout()
        toc_page = doc.pages[0]

        links = toc_page.links()
        assert len(links) == len(renderer.toc_entries)
        for link, entry in zip(links, renderer.toc_entries):
            assert entry.page is not toc_page
            dest = [d for d in entry.page.destinations() if d.key == link.destination]
            assert len(dest) == 1
            assert dest[0].y == entry.y

    def test_toc_page_content(self, tree, theme):
        data = TypeDocPdfRenderer(tree, theme=theme).render()
        text = page_text(data, 0)

        assert TOC_HEADING in text
        assert "class Root" in text
        assert "enum Root.First.Inner" in text

    def test_large_toc_spans_leading_pages(self, type_factory, theme):
        nested = [type_factory(f"Part{i}", methods=1) for i in range(90)]
        root = type_factory("Root", methods=1, nested=nested)
        renderer = TypeDocPdfRenderer(root, theme=theme)
        doc = renderer.layout()

        toc_pages = [p for p in doc.pages if p.links()]
        assert len(toc_pages) > 1
        assert [p.number for p in toc_pages] == list(range(1, len(toc_pages) + 1))
        assert renderer.toc_entries[0].page_number == len(toc_pages) + 1

    def test_outline_levels_follow_depth(self, tree, theme):
        doc = TypeDocPdfRenderer(tree, theme=theme).layout()
        outline = [op for page in doc.pages for op in page.ops if isinstance(op, OutlineOp)]

        assert [(op.title, op.level) for op in outline] == [
            (TOC_HEADING, 0),
            ("Root", 0),
            ("Root.First", 1),
            ("Root.First.Inner", 2),
            ("Root.Second", 1),
        ]


class TestSections:

    def test_section_blocks(self, type_factory, theme):
        root = type_factory("Widget", methods=2, file_path="src/Widget.cs", base_types=["Control", "IDisposable"])
        doc = TypeDocPdfRenderer(root, theme=theme).layout()
        texts = [op.text for op in doc.pages[1].text_ops()]

        for expected in ("class Widget", "Overview", "Description", "Methods", "Signature", "Base types",
                         "Control, IDisposable", "src/Widget.cs", "Acme.Ui"):
            assert expected in texts

    def test_empty_summary_has_no_description(self, type_factory, theme):
        root = type_factory("Widget", methods=1, summary="")
        doc = TypeDocPdfRenderer(root, theme=theme).layout()
        assert "Description" not in [op.text for op in doc.pages[1].text_ops()]

    def test_header_shows_section_or_override(self, type_factory, theme):
        root = type_factory("Widget", methods=1)
        doc = TypeDocPdfRenderer(root, theme=theme).layout()
        assert doc.pages[1].text_ops("header")[0].text == "Widget"

        doc = TypeDocPdfRenderer(root, theme=theme, header_override="Acme SDK").layout()
        assert doc.pages[1].text_ops("header")[0].text == "Acme SDK"

    def test_toc_page_has_no_header_or_footer(self, type_factory, theme):
        root = type_factory("Widget", methods=1)
        doc = TypeDocPdfRenderer(root, theme=theme, header_override="Acme SDK").layout()

        assert doc.pages[0].text_ops("header") == []
        assert doc.pages[0].text_ops("footer") == []
        assert doc.pages[1].text_ops("footer")[0].text == "2"


class TestDeterminism:

    def test_rerender_is_identical(self, tree, theme):
        first = TypeDocPdfRenderer(tree, theme=theme)
        second = TypeDocPdfRenderer(tree, theme=theme)

        assert first.render() == second.render()
        assert [(e.title, e.page_number) for e in first.toc_entries] == [
            (e.title, e.page_number) for e in second.toc_entries
        ]

    def test_module_functions(self, tree, theme, tmp_path):
        data = render_document(tree, theme=theme)
        path = render_to_file(tree, tmp_path / "pdf" / "Root.pdf", theme=theme)

        with open(path, "rb") as f:
            assert f.read() == data
        assert data.startswith(b"%PDF")
