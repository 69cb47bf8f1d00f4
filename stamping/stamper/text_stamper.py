# stamping/stamper/text_stamper.py
from __future__ import annotations

import logging
from typing import Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.styles import ParagraphStyle
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph

from stamping.engine.pdf_document import (
    canvas_page,
    editable_document,
    merge_overlay,
    page_geometry,
    write_bytes,
)
from stamping.errors import InvalidContentError
from stamping.models import StampSpec
from stamping.stamper.base import place_on_page, stamping_failures
from stamping.stamper.page_selector import parse_pages
from stamping.stamper.placement import DEFAULT_MARGIN
from stamping.stamper.transform import Affine

logger = logging.getLogger(__name__)

FONT_NAME = "Helvetica-Bold"
LEADING_RATIO = 1.2


def parse_color(value: str | None, alpha: float = 1.0) -> colors.Color:
    """'#RRGGBB' (or 'RRGGBB') to a colour carrying `alpha`; anything unparsable is black."""
    raw = (value or "").strip().lstrip("#")
    base = colors.black
    if raw:
        try:
            base = colors.HexColor("#" + raw)
        except (ValueError, TypeError):
            logger.debug("Unparsable font colour %r, using black", value)
    return colors.Color(base.red, base.green, base.blue, alpha=alpha)


def _paragraph(spec: StampSpec) -> Paragraph:
    style = ParagraphStyle(
        "stamp",
        fontName=FONT_NAME,
        fontSize=spec.font_size,
        leading=spec.font_size * LEADING_RATIO,
        textColor=parse_color(spec.font_color, spec.opacity),
    )
    markup = escape(spec.text or "").replace("\n", "<br/>")
    return Paragraph(markup, style)


class TextStamper:
    """Wrapped bold paragraph drawn through a per-page overlay."""

    def stamp(self, pdf_bytes: bytes, spec: StampSpec, content: Optional[bytes] = None) -> bytes:
        if not (spec.text or "").strip():
            raise InvalidContentError("Text content is required for TEXT stamp type")

        with stamping_failures("text"):
            with editable_document(pdf_bytes) as writer:
                targets = parse_pages(spec.pages, len(writer.pages))
                for idx in sorted(targets):
                    page = writer.pages[idx]
                    geo = page_geometry(page)

                    para = _paragraph(spec)
                    max_w = spec.content_width or (geo.width - 2 * DEFAULT_MARGIN)
                    box_w, box_h = para.wrap(max_w, geo.height)
                    pos = place_on_page(spec, geo, box_w, box_h)

                    def draw(c: canvas.Canvas) -> None:
                        c.saveState()
                        if spec.opacity < 1.0:
                            c.setFillAlpha(spec.opacity)
                            c.setStrokeAlpha(spec.opacity)
                        if spec.normalized_rotation:
                            rot = Affine.rotation(spec.rotation, pos.x + box_w / 2, pos.y + box_h / 2)
                            c.transform(*rot.ctm)
                        para.drawOn(c, pos.x, pos.y)
                        c.restoreState()

                    merge_overlay(page, canvas_page(geo, draw))

                logger.debug("Text stamp drawn on %d page(s)", len(targets))
                return write_bytes(writer)
