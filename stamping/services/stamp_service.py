# stamping/services/stamp_service.py
from __future__ import annotations

import logging
import time
from typing import Dict, Optional

from stamping.errors import InvalidRequestError
from stamping.models import StampKind, StampSpec
from stamping.stamper.base import Stamper
from stamping.stamper.document_stamper import DocumentStamper
from stamping.stamper.image_stamper import ImageStamper
from stamping.stamper.markup_stamper import MarkupStamper
from stamping.stamper.text_stamper import TextStamper

logger = logging.getLogger(__name__)


def default_stampers() -> Dict[StampKind, Stamper]:
    return {
        StampKind.TEXT: TextStamper(),
        StampKind.IMAGE: ImageStamper(),
        StampKind.MARKUP: MarkupStamper(),
        StampKind.DOCUMENT: DocumentStamper(),
    }


class StampService:
    """
    Single entry point for every stamp call:
      service.apply_stamp(pdf_bytes, spec, content)
    """

    def __init__(self, stampers: Optional[Dict[StampKind, Stamper]] = None):
        self._stampers = stampers if stampers is not None else default_stampers()

    def _pick_stamper(self, kind: StampKind | None) -> Stamper:
        if kind is None:
            raise InvalidRequestError("Stamp type is required")
        stamper = self._stampers.get(kind)
        if stamper is None:
            raise InvalidRequestError(f"No stamper configured for stamp type {kind.value}")
        return stamper

    def apply_stamp(self, pdf_bytes: bytes, spec: StampSpec, content: Optional[bytes] = None) -> bytes:
        if not pdf_bytes:
            raise InvalidRequestError("PDF document is required")
        stamper = self._pick_stamper(spec.kind)

        logger.info(
            "Applying %s stamp: position=%s opacity=%s rotation=%s pages=%s",
            spec.kind.value,
            spec.position.value,
            spec.opacity,
            spec.rotation,
            spec.pages,
        )
        started = time.perf_counter()
        out = stamper.stamp(pdf_bytes, spec, content)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("Stamp applied in %.0f ms, output %d bytes", elapsed_ms, len(out))
        return out
