"""Tests for ad feed parsing and ad composition."""

import httpx
import pytest

from conftest import FakeRenderer, make_pdf, read_pdf
from stamping.errors import CompositionError, InvalidRequestError
from stamping.models import StampKind, StampPosition
from stamping.services.ad_models import AdResponse
from stamping.services.ad_stamp_service import (
    AdFetchService,
    AdStampService,
    absolutize_ad_links,
    first_markup,
)


def feed(*locations):
    return {
        "publisherId": "cshl",
        "journlcode": "genome",
        "section": [{"sectionId": "s1", "sectionPath": ["/"], "adLocation": list(locations)}],
    }


def location(name, *htmls):
    return {
        "positionId": name,
        "positionName": name,
        "adData": [{"adId": f"ad-{i}", "adHtml": h} for i, h in enumerate(htmls)],
    }


class CountingStamper:
    def __init__(self):
        self.calls = []

    def stamp(self, pdf_bytes, spec, content):
        self.calls.append((spec, content.decode("utf-8")))
        return pdf_bytes


class StubFetcher:
    def __init__(self, data):
        self.data = data
        self.urls = []

    def fetch_ads(self, url):
        self.urls.append(url)
        return AdResponse.from_dict(self.data)


@pytest.fixture
def stamper():
    return CountingStamper()


def service(settings, stamper, data=None, renderer=None):
    return AdStampService(
        fetcher=StubFetcher(data or feed()),
        stamper=stamper,
        renderer=renderer or FakeRenderer(link_rect=None),
        settings=settings,
    )


class TestAdModels:
    def test_from_dict(self):
        resp = AdResponse.from_dict(feed(location("header", "<p>a</p>")))
        assert resp.publisher_id == "cshl"
        assert resp.journal_code == "genome"
        loc = resp.locations()[0]
        assert loc.position_name == "header"
        assert loc.ad_data[0].ad_html == "<p>a</p>"
        assert loc.ad_data[0].ad_id == "ad-0"

    def test_missing_lists_are_empty(self):
        resp = AdResponse.from_dict({"section": [{"sectionId": "x"}]})
        assert resp.sections[0].ad_location == []
        assert resp.locations() == []
        assert AdResponse.from_dict({}).sections == []


class TestHelpers:
    def test_absolutize(self):
        html = '<a href="/click"><img src="/img/a.png"/></a><img src="https://cdn/x.png"/>'
        out = absolutize_ad_links(html, "https://ads/")
        assert '<a href="https://ads/click">' in out
        assert 'src="https://ads/img/a.png"' in out
        assert 'src="https://cdn/x.png"' in out

    def test_first_markup_skips_empty(self):
        resp = AdResponse.from_dict(feed(location("x", "", None), location("y", "<b>1</b>", "<b>2</b>")))
        assert first_markup(resp.locations()) == "<b>1</b>"


class TestCompose:
    def test_header_ad_stamped_inline(self, settings, stamper, pdf3):
        """One header ad: exactly one inline stamp, page count unchanged."""
        svc = service(settings, stamper)
        resp = AdResponse.from_dict(feed(location("header", '<img src="/banner.png"/>')))
        out = svc.compose(pdf3, resp, "all")

        assert len(stamper.calls) == 1
        spec, html = stamper.calls[0]
        assert spec.kind is StampKind.MARKUP
        assert spec.position is StampPosition.TOP_RIGHT
        assert (spec.scale, spec.rotation, spec.opacity, spec.pages) == (1.0, 0.0, 1.0, "ALL")
        assert 'src="https://ads.example.org/adsystem/banner.png"' in html
        assert len(read_pdf(out).pages) == 3

    def test_each_header_ad_folded(self, settings, stamper, pdf3):
        resp = AdResponse.from_dict(feed(location("HEADER", "<p>1</p>", "", "<p>2</p>")))
        service(settings, stamper).compose(pdf3, resp, "header")
        assert [html for _, html in stamper.calls] == ["<p>1</p>", "<p>2</p>"]

    def test_full_page_ad_prepended(self, settings, stamper):
        """Full-page ad adds one page at index 0, rendered at the first page size."""
        pdf = make_pdf(2, size=(500, 700))
        renderer = FakeRenderer(link_rect=None)
        svc = service(settings, stamper, renderer=renderer)
        resp = AdResponse.from_dict(feed(location("pdf ad one", '<a href="/go">ad</a>')))
        out = svc.compose(pdf, resp, "all")

        reader = read_pdf(out)
        assert len(reader.pages) == 3
        assert "RENDERED" in reader.pages[0].extract_text()
        assert "Page 1" in reader.pages[1].extract_text()
        assert "Page 2" in reader.pages[2].extract_text()
        html, size = renderer.calls[0]
        assert size == (500, 700)
        assert html.lower().startswith("<!doctype html>")
        assert 'href="https://ads.example.org/adsystem/go"' in html
        assert stamper.calls == []

    def test_first_full_page_candidate_wins(self, settings, stamper, pdf3):
        renderer = FakeRenderer(link_rect=None)
        resp = AdResponse.from_dict(
            feed(location("pdf ad one", "", "<p>first</p>", "<p>second</p>"), location("pdf ad one", "<p>third</p>"))
        )
        out = service(settings, stamper, renderer=renderer).compose(pdf3, resp, "all")
        assert len(renderer.calls) == 1
        assert "<p>first</p>" in renderer.calls[0][0]
        assert len(read_pdf(out).pages) == 4

    def test_filter_header_ignores_full_page(self, settings, stamper, pdf3):
        renderer = FakeRenderer(link_rect=None)
        resp = AdResponse.from_dict(feed(location("header", "<p>h</p>"), location("pdf ad one", "<p>p</p>")))
        out = service(settings, stamper, renderer=renderer).compose(pdf3, resp, "Header")
        assert len(stamper.calls) == 1
        assert renderer.calls == []
        assert len(read_pdf(out).pages) == 3

    def test_filter_full_page_ignores_header(self, settings, stamper, pdf3):
        resp = AdResponse.from_dict(feed(location("header", "<p>h</p>"), location("pdf ad one", "<p>p</p>")))
        out = service(settings, stamper).compose(pdf3, resp, "PDF AD ONE")
        assert stamper.calls == []
        assert len(read_pdf(out).pages) == 4

    def test_no_matching_ads_returns_input(self, settings, stamper, pdf3):
        resp = AdResponse.from_dict(feed(location("sidebar", "<p>x</p>"), location("header")))
        assert service(settings, stamper).compose(pdf3, resp, "all") is pdf3
        assert stamper.calls == []

    def test_render_failure_is_composition_error(self, settings, stamper, pdf3):
        def broken(html, page_size=None, *, margin=0.0):
            raise RuntimeError("no layout")

        resp = AdResponse.from_dict(feed(location("pdf ad one", "<p>p</p>")))
        with pytest.raises(CompositionError):
            service(settings, stamper, renderer=broken).compose(pdf3, resp, "all")


class TestProcessAdJson:
    def test_fetches_once_then_composes(self, settings, stamper, pdf3):
        svc = service(settings, stamper, data=feed(location("header", "<p>h</p>")))
        svc.process_ad_json(pdf3, "https://ads/feed.json", "all")
        assert svc.fetcher.urls == ["https://ads/feed.json"]
        assert len(stamper.calls) == 1

    def test_empty_document_rejected(self, settings, stamper):
        with pytest.raises(InvalidRequestError):
            service(settings, stamper).process_ad_json(b"", "https://ads/feed.json")


class TestAdFetchService:
    def test_decodes_feed(self):
        def handler(request):
            assert request.url == "https://ads.example.org/feed.json"
            return httpx.Response(200, json=feed(location("header", "<p>h</p>")))

        client = httpx.Client(transport=httpx.MockTransport(handler))
        resp = AdFetchService(timeout=1, client=client).fetch_ads("https://ads.example.org/feed.json")
        assert resp.locations()[0].ad_data[0].ad_html == "<p>h</p>"

    def test_http_error_is_composition_error(self):
        client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(500)))
        with pytest.raises(CompositionError):
            AdFetchService(timeout=1, client=client).fetch_ads("https://ads.example.org/feed.json")

    def test_non_object_body_rejected(self):
        client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200, json=[1, 2])))
        with pytest.raises(CompositionError):
            AdFetchService(timeout=1, client=client).fetch_ads("https://ads.example.org/feed.json")
