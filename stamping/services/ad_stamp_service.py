# stamping/services/ad_stamp_service.py
from __future__ import annotations

import logging
from typing import Iterable, Optional

import httpx

from stamping.engine.markup_renderer import ensure_html, render_markup
from stamping.engine.pdf_document import first_page_size, prepend_pages
from stamping.errors import CompositionError, InvalidRequestError, StampingError
from stamping.models import StampKind, StampPosition, StampSpec
from stamping.services.ad_models import AdLocation, AdResponse
from stamping.settings import Settings, get_settings
from stamping.stamper.base import MarkupRenderer, Stamper
from stamping.stamper.markup_stamper import MarkupStamper

logger = logging.getLogger(__name__)

INLINE_AD = "header"
FULL_PAGE_AD = "pdf ad one"
ALL_ADS = "all"

HEADER_AD_SPEC = StampSpec(kind=StampKind.MARKUP, position=StampPosition.TOP_RIGHT)


def absolutize_ad_links(html: str, base_url: str) -> str:
    """Point root-relative src/href attributes at the ad server."""
    return html.replace('src="/', f'src="{base_url}').replace('href="/', f'href="{base_url}')


def first_markup(locations: Iterable[AdLocation]) -> str | None:
    """First non-empty adHtml across the given locations, in order."""
    for loc in locations:
        for ad in loc.ad_data:
            if ad.ad_html:
                return ad.ad_html
    return None


class AdFetchService:
    def __init__(self, timeout: float | None = None, client: httpx.Client | None = None):
        self.timeout = timeout if timeout is not None else get_settings().ad_fetch_timeout_seconds
        self._client = client

    def fetch_ads(self, url: str) -> AdResponse:
        logger.info("Fetching ads from URL: %s", url)
        try:
            if self._client is not None:
                resp = self._client.get(url)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    resp = client.get(url)
            resp.raise_for_status()
            data = resp.json()
        except Exception as e:
            logger.exception("Error fetching ads from URL: %s", url)
            raise CompositionError(f"Failed to fetch ads: {e}", cause=e) from e

        if not isinstance(data, dict):
            raise CompositionError("Failed to fetch ads: response is not a JSON object")
        return AdResponse.from_dict(data)


class AdStampService:
    """
    Applies a publisher's ad feed to a document:
      - "header" ads are stamped into the top-right of every page
      - the first "pdf ad one" ad becomes a new first page
    """

    def __init__(
        self,
        fetcher: Optional[AdFetchService] = None,
        stamper: Optional[Stamper] = None,
        renderer: MarkupRenderer = render_markup,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.fetcher = fetcher or AdFetchService(timeout=self.settings.ad_fetch_timeout_seconds)
        self.renderer = renderer
        self.stamper = stamper or MarkupStamper(renderer=renderer)

    def process_ad_json(self, pdf_bytes: bytes, ad_json_url: str, ad_type: str | None = ALL_ADS) -> bytes:
        if not pdf_bytes:
            raise InvalidRequestError("PDF file is required")
        if not (ad_json_url or "").strip():
            raise InvalidRequestError("Ad JSON URL is required")

        ad_response = self.fetcher.fetch_ads(ad_json_url)
        return self.compose(pdf_bytes, ad_response, ad_type)

    def compose(self, pdf_bytes: bytes, ad_response: AdResponse, ad_type: str | None = ALL_ADS) -> bytes:
        wanted = (ad_type or ALL_ADS).strip().lower()
        want_inline = wanted in (ALL_ADS, INLINE_AD)
        want_full_page = wanted in (ALL_ADS, FULL_PAGE_AD)

        current = pdf_bytes
        full_page_html: str | None = None

        for loc in ad_response.locations():
            if want_inline and loc.is_position(INLINE_AD):
                for ad in loc.ad_data:
                    if not ad.ad_html:
                        continue
                    logger.info("Applying header ad stamp: id=%s", ad.ad_id)
                    html = absolutize_ad_links(ad.ad_html, self.settings.ad_asset_base_url)
                    current = self.stamper.stamp(current, HEADER_AD_SPEC, html.encode("utf-8"))

            if want_full_page and full_page_html is None and loc.is_position(FULL_PAGE_AD):
                full_page_html = first_markup([loc])

        if full_page_html:
            current = self._prepend_ad_page(current, full_page_html)
        elif want_full_page:
            logger.info("No '%s' HTML content found, skipping page prepend.", FULL_PAGE_AD)

        return current

    def _prepend_ad_page(self, pdf_bytes: bytes, html: str) -> bytes:
        html = ensure_html(absolutize_ad_links(html, self.settings.ad_asset_base_url))
        try:
            page = self.renderer(html, first_page_size(pdf_bytes))
            return prepend_pages(pdf_bytes, page)
        except StampingError as e:
            raise CompositionError(f"Failed to prepend {FULL_PAGE_AD} page: {e.message}", cause=e) from e
        except Exception as e:
            raise CompositionError(f"Failed to prepend {FULL_PAGE_AD} page: {e}", cause=e) from e
