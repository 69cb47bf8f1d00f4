# stamping/engine/markup_renderer.py
from __future__ import annotations

import io
import logging
import re
from typing import Tuple

from xhtml2pdf import pisa

from stamping.errors import StampingFailedError

logger = logging.getLogger(__name__)

_HEAD_RE = re.compile(r"<head[^>]*>", re.IGNORECASE)
_HTML_RE = re.compile(r"<html[^>]*>", re.IGNORECASE)

STANDALONE_TEMPLATE = (
    "<!DOCTYPE html>\n<html>\n<head><meta charset=\"UTF-8\"/></head>\n"
    "<body>\n{body}\n</body>\n</html>"
)


def ensure_html(markup: str) -> str:
    """Wrap a fragment into a minimal standalone document unless it already has a root."""
    trimmed = markup.strip()
    lowered = trimmed.lower()
    if lowered.startswith("<!doctype") or lowered.startswith("<html"):
        return trimmed
    return STANDALONE_TEMPLATE.format(body=trimmed)


def _page_rule(width: float, height: float, margin: float) -> str:
    return (
        "<style>@page { "
        f"size: {width:.2f}pt {height:.2f}pt; margin: {margin:.2f}pt; "
        "}</style>"
    )


def _inject_page_rule(html: str, rule: str) -> str:
    m = _HEAD_RE.search(html) or _HTML_RE.search(html)
    if m is None:
        return rule + html
    return html[: m.end()] + rule + html[m.end():]


def render_markup(
    html: str,
    page_size: Tuple[float, float] | None = None,
    *,
    margin: float = 0.0,
) -> bytes:
    """
    Render markup into a PDF. With page_size every page is exactly that size;
    without it the renderer's default page is used. <a href> links come out
    as native URI link annotations.
    """
    if page_size is not None:
        html = _inject_page_rule(html, _page_rule(page_size[0], page_size[1], margin))

    out = io.BytesIO()
    try:
        result = pisa.CreatePDF(src=html, dest=out, encoding="utf-8")
    except Exception as e:
        raise StampingFailedError(f"Failed to render markup to PDF: {e}", cause=e) from e

    if result.err:
        raise StampingFailedError(f"Failed to render markup to PDF ({result.err} errors)")

    data = out.getvalue()
    logger.debug("Rendered markup to PDF: %d bytes", len(data))
    return data
