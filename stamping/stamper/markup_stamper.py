# stamping/stamper/markup_stamper.py
from __future__ import annotations

from typing import Optional

from stamping.engine.markup_renderer import ensure_html, render_markup
from stamping.errors import InvalidContentError
from stamping.models import StampSpec
from stamping.stamper.base import MarkupRenderer, require_content, stamping_failures
from stamping.stamper.document_stamper import DocumentStamper, explicit_box


class MarkupStamper(DocumentStamper):
    """
    HTML stamp: render once, then overlay the rendered page like a PDF stamp,
    carrying its hyperlinks across.
    """

    def __init__(self, renderer: MarkupRenderer = render_markup):
        self.renderer = renderer

    def stamp(self, pdf_bytes: bytes, spec: StampSpec, content: Optional[bytes]) -> bytes:
        raw = require_content(content, "HTML")
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidContentError(f"HTML content is not valid UTF-8: {e}", cause=e) from e

        with stamping_failures("HTML"):
            html = ensure_html(text)
            box = explicit_box(spec)
            rendered = self.renderer(html, box)
            return self.overlay(pdf_bytes, rendered, spec, box=box, transfer_links=True)
