"""
Tests for the paginated fetcher.
"""

from unittest.mock import Mock, call

import pytest

from issue_transfer.pagination import PER_PAGE, fetch_all_pages


@pytest.mark.unit
class TestFetchAllPages:
    """Test fetch_all_pages."""

    def test_accumulates_pages_in_order(self) -> None:
        fetch_page = Mock(side_effect=[[1, 2], [3], []])

        assert fetch_all_pages(fetch_page) == [1, 2, 3]
        assert fetch_page.call_args_list == [call(1, PER_PAGE), call(2, PER_PAGE), call(3, PER_PAGE)]

    def test_empty_first_page(self) -> None:
        fetch_page = Mock(return_value=[])

        assert fetch_all_pages(fetch_page) == []
        fetch_page.assert_called_once_with(1, PER_PAGE)

    def test_missing_page_stops(self) -> None:
        fetch_page = Mock(side_effect=[["a"], None])

        assert fetch_all_pages(fetch_page) == ["a"]

    def test_full_pages_are_not_capped(self) -> None:
        pages = [list(range(i * 100, (i + 1) * 100)) for i in range(3)] + [list(range(300, 342)), []]
        fetch_page = Mock(side_effect=pages)

        items = fetch_all_pages(fetch_page)

        assert len(items) == 342
        assert items == list(range(342))

    def test_custom_page_size(self) -> None:
        fetch_page = Mock(side_effect=[["a"], []])

        fetch_all_pages(fetch_page, per_page=10)

        fetch_page.assert_any_call(1, 10)
