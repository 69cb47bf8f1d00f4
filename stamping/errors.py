# stamping/errors.py
from __future__ import annotations


class StampingError(Exception):
    """Base exception for stamping and composition errors."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class InvalidRequestError(StampingError):
    """Missing document, missing kind, or an invalid stamp configuration."""


class InvalidContentError(InvalidRequestError):
    """Required payload missing or empty for the stamp kind."""


class PageSelectionError(StampingError):
    """Page selector expression could not be resolved."""


class PageRangeError(PageSelectionError):
    def __init__(self, token: str, page_count: int) -> None:
        super().__init__(f"Invalid page range: {token} (document has {page_count} pages)")
        self.token = token
        self.page_count = page_count


class PageNumberError(PageSelectionError):
    def __init__(self, number: int | str, page_count: int) -> None:
        super().__init__(f"Invalid page number: {number} (document has {page_count} pages)")
        self.number = number
        self.page_count = page_count


class StampingFailedError(StampingError):
    """Wraps any drawing, layout or merge failure from the document engine."""


class CompositionError(StampingError):
    """Ad fetch or merge failure while composing a document."""
