"""Shared fixtures: small PDFs and images generated in memory."""

import io
from typing import Dict, List, Optional, Tuple

import pytest
from PIL import Image
from pypdf import PdfReader
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from stamping.settings import Settings


def make_pdf(pages: int = 3, size: Tuple[float, float] = letter, label: str = "Page") -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=size)
    for i in range(pages):
        c.setFont("Helvetica", 12)
        c.drawString(72, size[1] - 72, f"{label} {i + 1}")
        c.showPage()
    c.save()
    return buf.getvalue()


def read_pdf(data: bytes) -> PdfReader:
    return PdfReader(io.BytesIO(data))


def link_rects(data: bytes, page_index: int) -> List[Tuple[Tuple[float, ...], Dict]]:
    """(rect, annotation) for every /Link on a page."""
    page = read_pdf(data).pages[page_index]
    out = []
    for ref in page.get("/Annots") or []:
        annot = ref.get_object()
        if annot.get("/Subtype") == "/Link":
            out.append((tuple(float(v) for v in annot["/Rect"]), annot))
    return out


class FakeRenderer:
    """
    Stands in for the markup renderer: one page of the requested size
    (200 x 100 by default) carrying a label and a single URI link.
    """

    def __init__(self, link_rect=(10, 10, 60, 30), uri="https://example.org/ad"):
        self.link_rect = link_rect
        self.uri = uri
        self.calls: List[Tuple[str, Optional[Tuple[float, float]]]] = []

    def __call__(self, html, page_size=None, *, margin=0.0):
        self.calls.append((html, page_size))
        w, h = page_size or (200, 100)
        buf = io.BytesIO()
        c = canvas.Canvas(buf, pagesize=(w, h))
        c.drawString(5, 5, "RENDERED")
        if self.link_rect is not None:
            c.linkURL(self.uri, self.link_rect, relative=0, thickness=0)
        c.showPage()
        c.save()
        return buf.getvalue()


@pytest.fixture
def pdf3() -> bytes:
    return make_pdf(3)


@pytest.fixture
def png_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (40, 20), "red").save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def fake_renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        ad_asset_base_url="https://ads.example.org/adsystem/",
        ad_fetch_timeout_seconds=5,
        doi_resolver_base="https://doi.org/",
        cors_origins=["*"],
        log_level="INFO",
        output_root=None,
    )
