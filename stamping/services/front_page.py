# stamping/services/front_page.py
from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from stamping.engine.markup_renderer import render_markup
from stamping.engine.pdf_document import first_page_size, prepend_pages
from stamping.errors import CompositionError, InvalidRequestError, StampingError
from stamping.models import CoverPageFields
from stamping.services.html_templates import doi_url, long_date, render_html, text_lines
from stamping.settings import get_settings
from stamping.stamper.base import MarkupRenderer

logger = logging.getLogger(__name__)


def _present(value: str | None) -> str | None:
    return value if value and value.strip() else None


def build_front_page_html(
    fields: CoverPageFields,
    today: Optional[date] = None,
    doi_resolver_base: Optional[str] = None,
) -> str:
    """
    Cover page markup: logo | title on the first row,
    date | authors, citation, DOI and link on the second.
    """
    resolver = doi_resolver_base or get_settings().doi_resolver_base
    ctx = {
        "logo_url": _present(fields.logo_url),
        "logo_text": _present(fields.logo_text),
        "title_lines": text_lines(fields.article_title),
        "current_date": long_date(today or date.today()) if fields.add_current_date else None,
        "authors": _present(fields.authors),
        "citation_text": _present(fields.citation_text),
        "doi_url": doi_url(fields.doi, resolver) if fields.add_doi else None,
        "additional_link": _present(fields.additional_link),
    }
    return render_html("front_page.html", ctx)


class MetadataFrontPageService:
    def __init__(self, renderer: MarkupRenderer = render_markup):
        self.renderer = renderer

    def prepend_metadata_page(
        self,
        pdf_bytes: bytes,
        fields: CoverPageFields,
        today: Optional[date] = None,
    ) -> bytes:
        if not pdf_bytes:
            raise InvalidRequestError("PDF file is required")

        logger.info("Building metadata front page: title=%r", fields.article_title)
        try:
            html = build_front_page_html(fields, today=today)
            page = self.renderer(html, first_page_size(pdf_bytes))
            return prepend_pages(pdf_bytes, page)
        except StampingError as e:
            raise CompositionError(f"Failed to prepend metadata page: {e.message}", cause=e) from e
        except Exception as e:
            raise CompositionError(f"Failed to prepend metadata page: {e}", cause=e) from e
