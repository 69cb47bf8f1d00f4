"""Tests for page selection expressions."""

import pytest

from stamping.errors import PageNumberError, PageRangeError, PageSelectionError
from stamping.stamper.page_selector import parse_pages


class TestKeywords:
    def test_all_and_blank(self):
        """ALL, None and blank all select every page."""
        assert parse_pages("ALL", 4) == {0, 1, 2, 3}
        assert parse_pages(None, 4) == {0, 1, 2, 3}
        assert parse_pages("  ", 2) == {0, 1}

    def test_first_last_case_insensitive(self):
        """FIRST/LAST select single pages, in any case."""
        assert parse_pages("first", 5) == {0}
        assert parse_pages("Last", 5) == {4}

    def test_keywords_on_empty_document(self):
        """Keywords on a zero-page document select nothing."""
        assert parse_pages("ALL", 0) == frozenset()
        assert parse_pages("LAST", 0) == frozenset()


class TestLists:
    def test_numbers_and_ranges(self):
        """One-based numbers and inclusive ranges, whitespace ignored."""
        assert parse_pages("1, 3 ,5-7", 10) == {0, 2, 4, 5, 6}

    def test_trailing_comma_skipped(self):
        assert parse_pages("2,", 3) == {1}

    def test_duplicates_collapse(self):
        assert parse_pages("1,1-2,2", 3) == {0, 1}

    def test_single_page_range(self):
        assert parse_pages("3-3", 3) == {2}


class TestErrors:
    @pytest.mark.parametrize("expr", ["0-2", "2-5", "3-1", "1-2-3", "a-b", "-2", "1-²"])
    def test_bad_ranges(self, expr):
        """Ranges outside the document or malformed raise PageRangeError."""
        with pytest.raises(PageRangeError) as exc:
            parse_pages(expr, 4)
        assert expr in exc.value.message
        assert "4 pages" in exc.value.message

    @pytest.mark.parametrize("expr", ["0", "5", "x", "²"])
    def test_bad_numbers(self, expr):
        with pytest.raises(PageNumberError):
            parse_pages(expr, 4)

    def test_errors_share_a_base(self):
        with pytest.raises(PageSelectionError):
            parse_pages("9", 2)
