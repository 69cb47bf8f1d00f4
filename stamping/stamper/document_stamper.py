# stamping/stamper/document_stamper.py
from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from stamping.engine.pdf_document import (
    LinkTarget,
    add_link,
    draw_form,
    editable_document,
    extract_links,
    make_form,
    open_document,
    page_geometry,
    write_bytes,
)
from stamping.errors import StampingFailedError
from stamping.models import StampSpec
from stamping.stamper.base import place_on_page, require_content, stamping_failures
from stamping.stamper.page_selector import parse_pages
from stamping.stamper.transform import Affine, stamp_transform

logger = logging.getLogger(__name__)


def explicit_box(spec: StampSpec) -> Tuple[float, float] | None:
    if spec.content_width and spec.content_height:
        return spec.content_width, spec.content_height
    return None


class DocumentStamper:
    """
    Draws the first page of another PDF onto every target page as a form.

    The same matrix that positions the form also remaps any carried-over
    link rectangles, so links stay on top of what they point at.
    """

    def stamp(self, pdf_bytes: bytes, spec: StampSpec, content: Optional[bytes]) -> bytes:
        overlay = require_content(content, "PDF")
        with stamping_failures("PDF"):
            return self.overlay(pdf_bytes, overlay, spec, box=explicit_box(spec))

    def overlay(
        self,
        pdf_bytes: bytes,
        overlay_pdf: bytes,
        spec: StampSpec,
        *,
        box: Tuple[float, float] | None = None,
        transfer_links: bool = False,
    ) -> bytes:
        with open_document(overlay_pdf) as src:
            if not src.pages:
                raise StampingFailedError("Stamp document has no pages")
            first = src.pages[0]
            src_geo = page_geometry(first)
            links: List[LinkTarget] = extract_links(first) if transfer_links else []
            form = make_form(first, spec.opacity)

        # content-local space: the form's own box, origin at (0, 0)
        fit = Affine.translation(-src_geo.left, -src_geo.bottom)
        width, height = src_geo.width, src_geo.height
        if box is not None and (box[0], box[1]) != (width, height):
            fit = fit.then(Affine.scaling(box[0] / width, box[1] / height))
            width, height = box

        with editable_document(pdf_bytes) as writer:
            for idx in sorted(parse_pages(spec.pages, len(writer.pages))):
                geo = page_geometry(writer.pages[idx])
                pos = place_on_page(spec, geo, width * spec.scale, height * spec.scale)
                matrix = fit.then(stamp_transform(pos.x, pos.y, spec.scale, spec.rotation, width, height))
                draw_form(writer.pages[idx], form, matrix)
                self._relink(writer, idx, links, matrix, spec.normalized_rotation)

            return write_bytes(writer)

    @staticmethod
    def _relink(writer, page_index: int, links: Sequence[LinkTarget], matrix: Affine, rotation: float) -> None:
        for link in links:
            add_link(writer, page_index, matrix.map_rect(link.rect), link.uri, rotation)
        if links:
            logger.debug("Carried %d link(s) onto page %d", len(links), page_index + 1)
