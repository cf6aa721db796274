"""Shared fixtures for the xyDoc test suite."""

import json

import pytest

from models.type_doc import MemberDoc, TypeDoc
from renderers.pdf.document import PdfDocument
from renderers.pdf.page_writer import PageWriter, RenderContext
from renderers.pdf.theme import PdfTheme


@pytest.fixture
def theme():
    """Default theme on the PDF standard fonts."""
    return PdfTheme()


@pytest.fixture
def document(theme):
    return PdfDocument(title="Sample", page_size=theme.page_size)


@pytest.fixture
def ctx(document, theme):
    return RenderContext(document, theme)


@pytest.fixture
def writer(ctx, document):
    return PageWriter(ctx, document.add_page())


def make_type(name="Widget", kind="class", methods=0, summary="A widget.", nested=None, **kwargs):
    """Build a TypeDoc with *methods* generated method members."""
    type_doc = TypeDoc(kind=kind, name=name, namespace="Acme.Ui", modifiers="public", summary=summary, **kwargs)
    for i in range(methods):
        type_doc.add_member(
            MemberDoc(
                kind="method",
                signature=f"public void Method{i}(int value{i})",
                modifiers="public",
                summary=f"Does thing number {i}.",
            )
        )
    for child in nested or []:
        type_doc.add_nested(child)
    return type_doc


@pytest.fixture
def type_factory():
    return make_type


@pytest.fixture
def model_file(tmp_path):
    """JSON model with two top-level types, one of them nested."""
    payload = {
        "types": [
            {
                "Kind": "class",
                "Name": "Alpha",
                "Namespace": "Acme",
                "Modifiers": "public",
                "Summary": "First type. More details follow.",
                "FilePath": "src/Alpha.cs",
                "Methods": [
                    {"Signature": "public void Run()", "Modifiers": "public", "Summary": "Runs."},
                ],
                "NestedTypes": [
                    {"Kind": "enum", "Name": "Mode", "Fields": [{"Signature": "Fast", "Summary": "Fast mode."}]},
                ],
            },
            {
                "kind": "struct",
                "name": "Beta",
                "namespace": "Acme",
                "members": [
                    {"kind": "property", "signature": "public int Size { get; }", "summary": "Size."},
                ],
            },
        ]
    }
    path = tmp_path / "model.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path
