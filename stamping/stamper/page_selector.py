# stamping/stamper/page_selector.py
from __future__ import annotations

from typing import FrozenSet, Set

from stamping.errors import PageNumberError, PageRangeError


def _all_pages(total_pages: int) -> FrozenSet[int]:
    return frozenset(range(max(total_pages, 0)))


def parse_pages(expression: str | None, total_pages: int) -> FrozenSet[int]:
    """
    Resolve a page selection expression into 0-based page indices.

      "ALL" / blank   -> every page
      "FIRST"         -> {0}
      "LAST"          -> {total_pages - 1}
      "1,3,5-7"       -> one-based numbers and inclusive ranges

    Keywords on an empty document resolve to no pages.
    """
    expr = (expression or "").strip()
    keyword = expr.upper()

    if not expr or keyword == "ALL":
        return _all_pages(total_pages)
    if keyword == "FIRST":
        return frozenset({0}) if total_pages > 0 else frozenset()
    if keyword == "LAST":
        return frozenset({total_pages - 1}) if total_pages > 0 else frozenset()

    pages: Set[int] = set()
    for raw in expr.split(","):
        part = raw.strip()
        if not part:
            continue

        if "-" in part:
            bounds = [b.strip() for b in part.split("-")]
            if len(bounds) != 2 or not all(b.isdecimal() for b in bounds):
                raise PageRangeError(part, total_pages)
            start, end = int(bounds[0]), int(bounds[1])
            if start < 1 or end > total_pages or start > end:
                raise PageRangeError(part, total_pages)
            pages.update(range(start - 1, end))
            continue

        if not part.isdecimal():
            raise PageNumberError(part, total_pages)
        page = int(part)
        if page < 1 or page > total_pages:
            raise PageNumberError(page, total_pages)
        pages.add(page - 1)

    return frozenset(pages)
