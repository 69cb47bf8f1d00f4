# stamping/stamper/image_stamper.py
from __future__ import annotations

import io
from typing import Optional

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from stamping.engine.pdf_document import (
    canvas_page,
    editable_document,
    merge_overlay,
    page_geometry,
    write_bytes,
)
from stamping.models import StampSpec
from stamping.stamper.base import place_on_page, require_content, stamping_failures
from stamping.stamper.page_selector import parse_pages
from stamping.stamper.transform import stamp_transform


class ImageStamper:
    def stamp(self, pdf_bytes: bytes, spec: StampSpec, content: Optional[bytes]) -> bytes:
        data = require_content(content, "Image")

        with stamping_failures("image"):
            img = ImageReader(io.BytesIO(data))
            img_w, img_h = (float(v) for v in img.getSize())

            with editable_document(pdf_bytes) as writer:
                for idx in sorted(parse_pages(spec.pages, len(writer.pages))):
                    page = writer.pages[idx]
                    geo = page_geometry(page)
                    pos = place_on_page(spec, geo, img_w * spec.scale, img_h * spec.scale)
                    matrix = stamp_transform(pos.x, pos.y, spec.scale, spec.rotation, img_w, img_h)

                    def draw(c: canvas.Canvas) -> None:
                        c.saveState()
                        if spec.opacity < 1.0:
                            c.setFillAlpha(spec.opacity)
                            c.setStrokeAlpha(spec.opacity)
                        c.transform(*matrix.ctm)
                        c.drawImage(img, 0, 0, width=img_w, height=img_h, mask="auto")
                        c.restoreState()

                    merge_overlay(page, canvas_page(geo, draw))

                return write_bytes(writer)
