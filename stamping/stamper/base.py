# stamping/stamper/base.py

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional, Protocol, Tuple

from stamping.engine.pdf_document import PageGeometry
from stamping.errors import InvalidContentError, StampingError, StampingFailedError
from stamping.models import Placement, StampPosition, StampSpec
from stamping.stamper.placement import calculate_position


class Stamper(Protocol):
    def stamp(self, pdf_bytes: bytes, spec: StampSpec, content: Optional[bytes]) -> bytes:
        ...


class MarkupRenderer(Protocol):
    def __call__(
        self,
        html: str,
        page_size: Tuple[float, float] | None = None,
        *,
        margin: float = 0.0,
    ) -> bytes:
        ...


def require_content(content: Optional[bytes], label: str) -> bytes:
    if not content:
        raise InvalidContentError(f"{label} content is required for {label.upper()} stamp type")
    return content


@contextmanager
def stamping_failures(label: str) -> Iterator[None]:
    """Re-raise engine failures as StampingFailedError; our own errors pass through."""
    try:
        yield
    except StampingError:
        raise
    except Exception as e:
        raise StampingFailedError(f"Failed to apply {label} stamp: {e}", cause=e) from e


def place_on_page(spec: StampSpec, geo: PageGeometry, width: float, height: float) -> Placement:
    """Placement of a width x height box in the page's own coordinate space."""
    pos = calculate_position(spec.position, geo.width, geo.height, width, height, x=spec.x, y=spec.y)
    if spec.position is StampPosition.CUSTOM:
        return pos
    return Placement(geo.left + pos.x, geo.bottom + pos.y)
