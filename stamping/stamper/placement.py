# stamping/stamper/placement.py
from __future__ import annotations

from stamping.models import Placement, StampPosition

# Fixed gap (points) between a stamp and the page edge it is anchored to
DEFAULT_MARGIN = 20.0


def calculate_position(
    position: StampPosition | None,
    page_w: float,
    page_h: float,
    content_w: float,
    content_h: float,
    *,
    x: float | None = None,
    y: float | None = None,
    margin: float = DEFAULT_MARGIN,
) -> Placement:
    """
    Bottom-left corner of a content_w x content_h box on a page_w x page_h page
    (origin bottom-left). CUSTOM returns the given x/y, 0 when unset.
    """
    pos = position or StampPosition.CENTER

    left = margin
    right = page_w - margin - content_w
    h_center = (page_w - content_w) / 2
    top = page_h - margin - content_h
    bottom = margin
    v_center = (page_h - content_h) / 2

    if pos is StampPosition.TOP_LEFT:
        return Placement(left, top)
    if pos is StampPosition.TOP_RIGHT:
        return Placement(right, top)
    if pos is StampPosition.BOTTOM_LEFT:
        return Placement(left, bottom)
    if pos is StampPosition.BOTTOM_RIGHT:
        return Placement(right, bottom)
    if pos is StampPosition.HEADER:
        return Placement(h_center, top)
    if pos is StampPosition.FOOTER:
        return Placement(h_center, bottom)
    if pos is StampPosition.LEFT_MARGIN:
        return Placement(left, v_center)
    if pos is StampPosition.RIGHT_MARGIN:
        return Placement(right, v_center)
    if pos is StampPosition.CUSTOM:
        return Placement(x if x is not None else 0.0, y if y is not None else 0.0)
    return Placement(h_center, v_center)
