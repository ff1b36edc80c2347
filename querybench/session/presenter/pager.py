"""
Result Set Pager - Windows a ResultGrid into pages for display.

Paging is deterministic: the page index is always clamped into
[1, total_pages] and changing the page size resets to page 1. Cell
formatting is display-only and never touches the grid.
"""
import math
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from querybench.core.constants import DEFAULT_PAGE_SIZE, PAGE_SIZES
from querybench.domain.models import Cell, ResultGrid
from querybench.errors import ValidationError

NULL_MARKER = "NULL"


@dataclass(frozen=True)
class DisplayCell:
    """Formatted cell text. is_null lets renderers style the NULL marker."""
    text: str
    is_null: bool = False

    def to_dict(self) -> dict:
        return {"text": self.text, "isNull": self.is_null}


def _format_number(value: float) -> str:
    """Thousands-grouped number with at most three fraction digits."""
    if isinstance(value, int):
        return f"{value:,}"
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "∞" if value > 0 else "-∞"
    if value.is_integer():
        return f"{int(value):,}"
    text = f"{value:,.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def format_cell(value: Any) -> DisplayCell:
    """Format a cell value for display."""
    if value is None:
        return DisplayCell(NULL_MARKER, is_null=True)
    elif isinstance(value, bool):
        return DisplayCell("true" if value else "false")
    elif isinstance(value, (int, float)):
        return DisplayCell(_format_number(value))
    return DisplayCell(str(value))


@dataclass(frozen=True)
class PageView:
    """One window over a result grid."""
    page_index: int
    page_size: int
    total_pages: int
    start_index: int
    end_index: int
    total_rows: int
    rows: Tuple[Tuple[Cell, ...], ...]

    @property
    def is_empty(self) -> bool:
        return self.total_rows == 0

    @property
    def has_previous(self) -> bool:
        return self.page_index > 1

    @property
    def has_next(self) -> bool:
        return self.page_index < self.total_pages

    def formatted_rows(self) -> List[List[DisplayCell]]:
        return [[format_cell(cell) for cell in row] for row in self.rows]


def _check_page_size(page_size: int) -> int:
    if page_size not in PAGE_SIZES:
        raise ValidationError(
            f"Unsupported page size {page_size}; expected one of {list(PAGE_SIZES)}"
        )
    return page_size


def paginate(grid: ResultGrid, page_index: int, page_size: int) -> PageView:
    """
    Window grid rows for one page.

    total_pages is ceil(row_count / page_size) with a floor of 1, and
    page_index is clamped into [1, total_pages].
    """
    _check_page_size(page_size)
    total_rows = grid.row_count
    total_pages = max(1, math.ceil(total_rows / page_size))
    page_index = max(1, min(page_index, total_pages))

    start = (page_index - 1) * page_size
    end = min(page_index * page_size, total_rows)
    return PageView(
        page_index=page_index,
        page_size=page_size,
        total_pages=total_pages,
        start_index=start,
        end_index=end,
        total_rows=total_rows,
        rows=grid.rows[start:end],
    )


class ResultSetPager:
    """
    Stateful pager bound to the grid currently on display.

    Rebinding the grid or changing the page size always returns to page 1.
    """

    def __init__(self, grid: Optional[ResultGrid] = None, page_size: int = DEFAULT_PAGE_SIZE):
        self._grid = grid
        self._page_size = _check_page_size(page_size)
        self._page_index = 1

    @property
    def grid(self) -> Optional[ResultGrid]:
        return self._grid

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def page_index(self) -> int:
        return self._page_index

    def set_grid(self, grid: Optional[ResultGrid]) -> None:
        self._grid = grid
        self._page_index = 1

    def set_page_size(self, page_size: int) -> None:
        self._page_size = _check_page_size(page_size)
        self._page_index = 1

    def go_to(self, page_index: int) -> Optional[PageView]:
        if self._grid is None:
            return None
        view = paginate(self._grid, page_index, self._page_size)
        self._page_index = view.page_index
        return view

    def view(self) -> Optional[PageView]:
        """Current page, or None when no grid is bound."""
        return self.go_to(self._page_index)

    def first(self) -> Optional[PageView]:
        return self.go_to(1)

    def previous(self) -> Optional[PageView]:
        return self.go_to(self._page_index - 1)

    def next(self) -> Optional[PageView]:
        return self.go_to(self._page_index + 1)

    def last(self) -> Optional[PageView]:
        if self._grid is None:
            return None
        return self.go_to(math.ceil(self._grid.row_count / self._page_size))
