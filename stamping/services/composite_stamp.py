# stamping/services/composite_stamp.py
from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from stamping.engine.markup_renderer import render_markup
from stamping.engine.pdf_document import first_page_size, prepend_pages
from stamping.errors import CompositionError, InvalidRequestError, StampingError, StampingFailedError
from stamping.models import CompositeBlockConfig, StampKind, StampPosition, StampSpec
from stamping.services.ad_stamp_service import INLINE_AD, AdFetchService, absolutize_ad_links, first_markup
from stamping.services.html_templates import doi_url, long_date, render_html, text_lines
from stamping.services.stamp_service import StampService
from stamping.settings import Settings, get_settings
from stamping.stamper.base import MarkupRenderer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OverlayLayout:
    rotation: float
    width: float
    height: float
    h_align: str
    v_align: str
    padding: str


def overlay_layout(position: str | None, page_w: float, page_h: float) -> OverlayLayout:
    """
    Frame geometry for an overlay block. The frame always covers the page;
    margin positions turn it on its side so its top edge meets that margin.
    """
    pos = (position or "CENTER").strip().upper()

    h_align, v_align = "center", "middle"
    padding = "10px" if pos in ("HEADER", "FOOTER", "CENTER") else "50px"

    if "LEFT" in pos:
        h_align = "left"
    if "RIGHT" in pos:
        h_align = "right"
    if pos == "HEADER" or "TOP" in pos:
        v_align = "top"
    if pos == "FOOTER" or "BOTTOM" in pos:
        v_align = "bottom"

    if pos == "LEFT_MARGIN":
        return OverlayLayout(90.0, page_h, page_w, "center", "top", padding)
    if pos == "RIGHT_MARGIN":
        return OverlayLayout(270.0, page_h, page_w, "center", "top", padding)
    return OverlayLayout(0.0, page_w, page_h, h_align, v_align, padding)


def logo_data_uri(logo: bytes, filename: str | None) -> str:
    name = (filename or "").lower()
    mime = "image/jpeg" if name.endswith((".jpg", ".jpeg")) else "image/png"
    return f"data:{mime};base64,{base64.b64encode(logo).decode('ascii')}"


class CompositeStampService:
    """
    One combined block (logo, text, markup, DOI, date, header ad) applied
    in a single pass: either as a new first page or as one overlay stamp.
    """

    def __init__(
        self,
        stamp_service: Optional[StampService] = None,
        fetcher: Optional[AdFetchService] = None,
        renderer: MarkupRenderer = render_markup,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.stamp_service = stamp_service or StampService()
        self.fetcher = fetcher or AdFetchService(timeout=self.settings.ad_fetch_timeout_seconds)
        self.renderer = renderer

    def build_block(
        self,
        config: CompositeBlockConfig,
        logo: Optional[bytes] = None,
        logo_filename: Optional[str] = None,
        today: Optional[date] = None,
    ) -> str:
        doi = None
        if config.add_doi:
            doi = doi_url(config.doi_value, self.settings.doi_resolver_base)
            if doi is None and (config.jcode or "").strip():
                doi = self.settings.doi_resolver_base + config.jcode

        ctx = {
            "logo_data_uri": logo_data_uri(logo, logo_filename) if config.add_logo and logo else None,
            "text_lines": text_lines(config.text_content) if config.add_text else [],
            "html_fragment": config.html_content if config.add_html and (config.html_content or "").strip() else None,
            "doi_url": doi,
            "generated_date": long_date(today or date.today()) if config.add_date else None,
            "ad_fragment": self._header_ad(config),
        }
        return render_html("composite_block.html", ctx)

    def _header_ad(self, config: CompositeBlockConfig) -> str | None:
        if not (config.is_ad and (config.ad_link or "").strip()):
            return None
        ads = self.fetcher.fetch_ads(config.ad_link)
        html = first_markup(loc for loc in ads.locations() if loc.is_position(INLINE_AD))
        if html is None:
            logger.info("No '%s' ad found at %s for the stamp block", INLINE_AD, config.ad_link)
            return None
        return absolutize_ad_links(html, self.settings.ad_asset_base_url)

    def apply(
        self,
        pdf_bytes: bytes,
        config: CompositeBlockConfig,
        logo: Optional[bytes] = None,
        logo_filename: Optional[str] = None,
        today: Optional[date] = None,
    ) -> bytes:
        if not pdf_bytes:
            raise InvalidRequestError("PDF file is empty")

        block = self.build_block(config, logo=logo, logo_filename=logo_filename, today=today)
        try:
            page_w, page_h = first_page_size(pdf_bytes)
        except Exception as e:
            raise StampingFailedError(f"Cannot read PDF: {e}", cause=e) from e

        if config.is_new_page:
            logger.info("Prepending stamp block as a new page")
            html = render_html("new_page.html", {"block": block})
            try:
                page = self.renderer(html, (page_w, page_h))
                return prepend_pages(pdf_bytes, page)
            except StampingError as e:
                raise CompositionError(f"Failed to prepend stamp page: {e.message}", cause=e) from e
            except Exception as e:
                raise CompositionError(f"Failed to prepend stamp page: {e}", cause=e) from e

        layout = overlay_layout(config.position, page_w, page_h)
        logger.info("Overlaying stamp block: position=%s rotation=%s", config.position, layout.rotation)
        html = render_html("overlay_frame.html", {"block": block, "layout": layout})
        spec = StampSpec(
            kind=StampKind.MARKUP,
            position=StampPosition.CENTER,
            opacity=1.0,
            rotation=layout.rotation,
            scale=1.0,
            pages="ALL",
            content_width=layout.width,
            content_height=layout.height,
        )
        return self.stamp_service.apply_stamp(pdf_bytes, spec, html.encode("utf-8"))
