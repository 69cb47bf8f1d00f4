"""Tests for markup wrapping and rendering with xhtml2pdf."""

import pytest

from conftest import read_pdf
from stamping.engine.markup_renderer import ensure_html, render_markup
from stamping.engine.pdf_document import extract_links


class TestEnsureHtml:
    def test_fragment_wrapped(self):
        out = ensure_html("  <p>hi</p> ")
        assert out.startswith("<!DOCTYPE html>")
        assert "<body>\n<p>hi</p>\n</body>" in out

    @pytest.mark.parametrize("doc", ["<!doctype html><p>x</p>", "<HTML><body>x</body></HTML>"])
    def test_documents_untouched(self, doc):
        assert ensure_html(doc) == doc


class TestRenderMarkup:
    def test_explicit_page_size(self):
        data = render_markup(ensure_html("<p>Hello stamp</p>"), (300, 200))
        page = read_pdf(data).pages[0]
        assert float(page.mediabox.width) == pytest.approx(300, abs=1)
        assert float(page.mediabox.height) == pytest.approx(200, abs=1)
        assert "Hello stamp" in page.extract_text()

    def test_anchor_becomes_uri_link(self):
        data = render_markup(ensure_html('<a href="https://example.org/x">go</a>'), (300, 200))
        links = extract_links(read_pdf(data).pages[0])
        assert [link.uri for link in links] == ["https://example.org/x"]
