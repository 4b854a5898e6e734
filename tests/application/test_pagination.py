"""Unit tests for page/limit parsing."""

import pytest

from rms.application.pagination import Page, Pagination


class TestPagination:

    def test_defaults(self):
        p = Pagination.from_raw()
        assert (p.page, p.limit, p.offset) == (1, 10, 0)

    def test_offset(self):
        assert Pagination.from_raw(page=3, limit=20).offset == 40

    @pytest.mark.parametrize("raw", ["abc", "", None, "1.5"])
    def test_junk_page_falls_back_to_first(self, raw):
        assert Pagination.from_raw(page=raw).page == 1

    def test_non_positive_values_are_clamped(self):
        p = Pagination.from_raw(page="-2", limit="0")
        assert (p.page, p.limit) == (1, 1)

    def test_limit_is_capped(self):
        assert Pagination.from_raw(limit="5000").limit == 100
        assert Pagination.from_raw(limit="5000", max_limit=50).limit == 50

    def test_custom_default_limit(self):
        assert Pagination.from_raw(default_limit=25).limit == 25


class TestPage:

    def test_navigation_flags(self):
        page = Page(items=[], total=25, page=2, limit=10)
        assert page.total_pages == 3
        assert page.has_next_page
        assert page.has_previous_page

    def test_last_page(self):
        page = Page(items=[], total=20, page=2, limit=10)
        assert not page.has_next_page

    def test_empty_result(self):
        page = Page(items=[], total=0, page=1, limit=10)
        assert page.total_pages == 0
        assert not page.has_next_page
        assert not page.has_previous_page
