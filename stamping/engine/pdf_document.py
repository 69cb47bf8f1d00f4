# stamping/engine/pdf_document.py
from __future__ import annotations

import io
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, List, Tuple

from pypdf import PageObject, PdfReader, PdfWriter, Transformation
from pypdf.annotations import Link
from pypdf.generic import ArrayObject, DictionaryObject, FloatObject, NameObject, NumberObject
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from stamping.stamper.transform import Affine, Rect, bounding_box

ALPHA_STATE = NameObject("/StampAlpha")


@dataclass(frozen=True)
class PageGeometry:
    left: float
    bottom: float
    width: float
    height: float


@dataclass(frozen=True)
class LinkTarget:
    """A URI link lifted off a rendered page: rect in that page's space."""
    rect: Rect
    uri: str


# =========================
# Sessions
# =========================

@contextmanager
def open_document(data: bytes) -> Iterator[PdfReader]:
    buf = io.BytesIO(data)
    try:
        yield PdfReader(buf)
    finally:
        buf.close()


@contextmanager
def editable_document(data: bytes) -> Iterator[PdfWriter]:
    """Writer holding a full copy of `data`; serialize before leaving the block."""
    with open_document(data) as reader:
        yield PdfWriter(clone_from=reader)


def write_bytes(writer: PdfWriter) -> bytes:
    out = io.BytesIO()
    writer.write(out)
    return out.getvalue()


# =========================
# Geometry
# =========================

def page_geometry(page: PageObject) -> PageGeometry:
    box = page.mediabox
    return PageGeometry(
        left=float(box.left),
        bottom=float(box.bottom),
        width=float(box.width),
        height=float(box.height),
    )


def page_count(data: bytes) -> int:
    with open_document(data) as reader:
        return len(reader.pages)


def first_page_size(data: bytes) -> Tuple[float, float]:
    with open_document(data) as reader:
        if not reader.pages:
            w, h = letter
            return float(w), float(h)
        geo = page_geometry(reader.pages[0])
        return geo.width, geo.height


# =========================
# Forms (a page reused as a drawable)
# =========================

def extract_links(page: PageObject) -> List[LinkTarget]:
    """URI link annotations of a page; any other action is skipped."""
    annots = page.get("/Annots")
    if annots is None:
        return []

    links: List[LinkTarget] = []
    for ref in annots.get_object():
        annot = ref.get_object()
        if annot.get("/Subtype") != "/Link":
            continue
        action = annot.get("/A")
        action = action.get_object() if action is not None else None
        if not isinstance(action, DictionaryObject):
            continue
        if action.get("/S") != "/URI" or "/URI" not in action:
            continue
        x0, y0, x1, y1 = (float(v) for v in annot["/Rect"])
        links.append(LinkTarget(rect=bounding_box([(x0, y0), (x1, y1)]), uri=str(action["/URI"])))
    return links


def _bake_opacity(form: PageObject, opacity: float) -> None:
    res = form.get("/Resources")
    if res is None:
        res = DictionaryObject()
        form[NameObject("/Resources")] = res
    else:
        res = res.get_object()

    ext = res.get("/ExtGState")
    if ext is None:
        ext = DictionaryObject()
        res[NameObject("/ExtGState")] = ext
    else:
        ext = ext.get_object()

    ext[ALPHA_STATE] = DictionaryObject(
        {
            NameObject("/Type"): NameObject("/ExtGState"),
            NameObject("/ca"): FloatObject(opacity),
            NameObject("/CA"): FloatObject(opacity),
        }
    )

    content = form.get_contents()
    if content is None:
        return
    ops = content.operations
    ops.insert(0, ([ALPHA_STATE], b"gs"))
    content.operations = ops
    form.replace_contents(content)


def make_form(page: PageObject, opacity: float = 1.0) -> PageObject:
    """
    Detached copy of `page` to draw onto other pages:
    annotations dropped, uniform alpha applied to fill and stroke when opacity < 1.
    """
    holder = PdfWriter()
    form = holder.add_page(page)
    if "/Annots" in form:
        del form[NameObject("/Annots")]
    if opacity < 1.0:
        _bake_opacity(form, opacity)
    return form


def draw_form(target: PageObject, form: PageObject, matrix: Affine) -> None:
    target.merge_transformed_page(form, Transformation(matrix.ctm))


def add_link(writer: PdfWriter, page_index: int, rect: Rect, uri: str, rotation: float = 0.0) -> None:
    """Invisible URI link: zero-width border, white highlight colour."""
    link = Link(rect=rect, url=uri, border=[0, 0, 0])
    link[NameObject("/C")] = ArrayObject([FloatObject(1), FloatObject(1), FloatObject(1)])
    if rotation:
        link[NameObject("/Rotate")] = NumberObject(int(rotation))
    writer.add_annotation(page_number=page_index, annotation=link)


# =========================
# Composition
# =========================

def prepend_pages(original: bytes, front: bytes) -> bytes:
    """All pages of `front`, then all pages of `original` in their order."""
    writer = PdfWriter()
    with open_document(front) as front_reader, open_document(original) as original_reader:
        for page in front_reader.pages:
            writer.add_page(page)
        for page in original_reader.pages:
            writer.add_page(page)
        return write_bytes(writer)


# =========================
# Canvas overlays
# =========================

def canvas_page(geo: PageGeometry, draw: Callable[[canvas.Canvas], None]) -> bytes:
    """One-page PDF covering `geo`, drawn by `draw` in the target page's coordinates."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=(geo.left + geo.width, geo.bottom + geo.height))
    draw(c)
    c.showPage()
    c.save()
    return buf.getvalue()


def merge_overlay(target: PageObject, overlay_pdf: bytes) -> None:
    with open_document(overlay_pdf) as overlay:
        target.merge_page(overlay.pages[0])
