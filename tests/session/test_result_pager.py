"""
Unit tests for paging and cell formatting.
"""

import pytest

from querybench.domain.models import ResultGrid
from querybench.errors import ValidationError
from querybench.session.presenter.pager import ResultSetPager, format_cell, paginate


def numbered_grid(rows: int) -> ResultGrid:
    return ResultGrid(columns=("n",), rows=tuple((i,) for i in range(rows)))


class TestPaginate:
    """Tests for the pure paginate() function."""

    def test_ninety_seven_rows_by_twenty_five(self):
        """Should split 97 rows into four pages of 25."""
        grid = numbered_grid(97)

        view = paginate(grid, 4, 25)
        assert view.total_pages == 4
        assert view.start_index == 75
        assert view.end_index == 97
        assert len(view.rows) == 22
        assert view.rows[0] == (75,)

    def test_page_index_clamped_high(self):
        """Should clamp a page index past the end to the last page."""
        view = paginate(numbered_grid(97), 10, 25)
        assert view.page_index == 4

    @pytest.mark.parametrize("requested", [0, -3])
    def test_page_index_clamped_low(self, requested):
        """Should clamp a page index below one to the first page."""
        view = paginate(numbered_grid(97), requested, 25)
        assert view.page_index == 1
        assert view.rows[0] == (0,)

    def test_exact_multiple(self):
        """Should not add an empty trailing page."""
        view = paginate(numbered_grid(50), 2, 25)
        assert view.total_pages == 2
        assert len(view.rows) == 25
        assert view.has_next is False
        assert view.has_previous is True

    def test_empty_grid_is_distinct_state(self):
        """Should report an empty grid as one empty page."""
        view = paginate(ResultGrid(columns=("a", "b")), 3, 10)
        assert view.is_empty is True
        assert view.total_pages == 1
        assert view.page_index == 1
        assert view.rows == ()

    def test_unsupported_page_size(self):
        """Should reject page sizes outside the allowed set."""
        with pytest.raises(ValidationError):
            paginate(numbered_grid(5), 1, 7)


class TestResultSetPager:
    """Tests for the stateful pager."""

    def test_no_grid(self):
        """Should return None from every view before a grid is set."""
        pager = ResultSetPager()
        assert pager.view() is None
        assert pager.next() is None
        assert pager.last() is None

    def test_navigation(self):
        """Should move between pages and stop at the ends."""
        pager = ResultSetPager(numbered_grid(97), page_size=25)

        assert pager.last().page_index == 4
        assert pager.next().page_index == 4
        assert pager.previous().page_index == 3
        assert pager.first().page_index == 1
        assert pager.previous().page_index == 1

    def test_page_size_change_resets_to_first_page(self):
        """Should return to page one when the page size changes."""
        pager = ResultSetPager(numbered_grid(97), page_size=10)
        pager.go_to(5)

        pager.set_page_size(50)
        view = pager.view()
        assert view.page_index == 1
        assert view.page_size == 50
        assert view.total_pages == 2

    def test_new_grid_resets_to_first_page(self):
        """Should return to page one when a new grid arrives."""
        pager = ResultSetPager(numbered_grid(97), page_size=10)
        pager.go_to(7)

        pager.set_grid(numbered_grid(30))
        assert pager.page_index == 1

    def test_rejects_unsupported_page_size(self):
        """Should keep the current page size when given an unsupported one."""
        pager = ResultSetPager(numbered_grid(10))
        with pytest.raises(ValidationError):
            pager.set_page_size(20)
        assert pager.page_size == 10


class TestFormatCell:
    """Display formatting never mutates the grid value."""

    def test_null_marker(self):
        """Should render None as the flagged null marker."""
        cell = format_cell(None)
        assert cell.text == "NULL"
        assert cell.is_null is True

    def test_string_null_is_not_marker(self):
        """Should treat the string NULL as ordinary text."""
        assert format_cell("NULL").is_null is False

    @pytest.mark.parametrize("value,text", [
        (True, "true"),
        (False, "false"),
        (0, "0"),
        (1234567, "1,234,567"),
        (-9876, "-9,876"),
        (1234.5, "1,234.5"),
        (1234.56789, "1,234.568"),
        (2000.0, "2,000"),
        ("1,234", "1,234"),
        ("user1@example.com", "user1@example.com"),
    ])
    def test_formatting(self, value, text):
        """Should format cells for display."""
        assert format_cell(value).text == text

    def test_formatted_rows(self):
        """Should format every cell of the current page."""
        grid = ResultGrid(columns=("a", "b"), rows=((None, 1000),))
        cells = paginate(grid, 1, 10).formatted_rows()
        assert [c.text for c in cells[0]] == ["NULL", "1,000"]
        assert grid.rows[0] == (None, 1000)
