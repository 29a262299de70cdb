"""Record Pipeline - sort, summarize, filter and paginate monitoring records.

This module turns a fetched record list into what the dashboard shows:
the records newest first, the last-run summary, the selectable sources,
and the visible page of the current source selection.

Example:
    >>> view = build_view(records, source="Greene Tax", page=1, page_size=5)
    >>> print(view.summary.total_records, view.page.label)
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, Iterable, Sequence, TypeVar

from scrapewatch.dashboard.models import MonitoringRecord, PageInfo, RunSummary

T = TypeVar("T")

ALL_SOURCES = "All Sources"
PLACEHOLDER = "N/A"
DEFAULT_PAGE_SIZE = 5
PAGE_SIZE_OPTIONS = (5, 10, 20, 50)


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def format_run_date(value: datetime) -> str:
    """Format a run timestamp as MM/DD/YYYY."""
    return f"{value.month:02d}/{value.day:02d}/{value.year}"


def format_table_datetime(value: datetime) -> str:
    """Format a run timestamp for the records table (M/D/YYYY HH:MM)."""
    return f"{value.month}/{value.day}/{value.year} {value.hour:02d}:{value.minute:02d}"


def format_clock(value: datetime) -> str:
    """Format the dashboard clock (e.g. "May 12, 2025 14:00:49")."""
    return f"{value:%b} {value.day}, {value.year} {value:%H:%M:%S}"


# ---------------------------------------------------------------------------
# Derivation
# ---------------------------------------------------------------------------


def sort_records(records: Iterable[MonitoringRecord]) -> list[MonitoringRecord]:
    """Sort records newest first.

    The sort is stable: records with equal timestamps keep their input order.
    """
    return sorted(records, key=lambda record: record.sort_key, reverse=True)


def summarize(records: Sequence[MonitoringRecord]) -> RunSummary:
    """Derive the last-run summary and the total record count.

    Args:
        records: Records in any order

    Returns:
        RunSummary; placeholder values ("N/A", False, 0) when empty
    """
    if not records:
        return RunSummary(last_run_success=False, last_run_date=PLACEHOLDER, total_records=0, record_count=0)

    ordered = sort_records(records)
    last_run = ordered[0]
    return RunSummary(
        last_run_success=last_run.success_status,
        last_run_date=format_run_date(last_run.timestamp),
        total_records=sum(record.total_records for record in ordered),
        record_count=len(ordered),
    )


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------


def list_sources(records: Iterable[MonitoringRecord]) -> list[str]:
    """Selectable sources: the sentinel, then each source in order of first appearance."""
    seen: dict[str, None] = {}
    for record in records:
        seen.setdefault(record.source, None)
    return [ALL_SOURCES, *seen]


def filter_by_source(records: Sequence[MonitoringRecord], source: str) -> list[MonitoringRecord]:
    """Narrow records to one source, or pass all through for ALL_SOURCES."""
    if source == ALL_SOURCES:
        return list(records)
    return [record for record in records if record.source == source]


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------


def total_pages_for(count: int, page_size: int) -> int:
    """Number of pages for `count` items, never less than 1."""
    if page_size < 1:
        raise ValueError(f"page_size must be at least 1, got {page_size}")
    return max(1, math.ceil(count / page_size))


def clamp_page(page: int, total_pages: int) -> int:
    """Clamp a requested page into [1, total_pages]."""
    return min(max(page, 1), max(total_pages, 1))


@dataclass
class Page(Generic[T]):
    """One visible slice of a list.

    Attributes:
        items: The items on this page
        number: 1-based page number (already clamped)
        page_size: Maximum items per page
        total_pages: Number of pages, at least 1
        total_items: Length of the paginated list
    """
    items: list[T]
    number: int
    page_size: int
    total_pages: int
    total_items: int

    @property
    def has_previous(self) -> bool:
        return self.number > 1

    @property
    def has_next(self) -> bool:
        return self.number < self.total_pages

    @property
    def start_index(self) -> int:
        """1-based position of the first item, 0 when empty."""
        if self.total_items == 0:
            return 0
        return (self.number - 1) * self.page_size + 1

    @property
    def end_index(self) -> int:
        """1-based position of the last item, 0 when empty."""
        return min(self.number * self.page_size, self.total_items)

    @property
    def label(self) -> str:
        if self.total_items == 0:
            return "0 of 0"
        return f"{self.start_index}-{self.end_index} of {self.total_items}"

    def info(self) -> PageInfo:
        """Pagination state without the items."""
        return PageInfo(
            number=self.number,
            page_size=self.page_size,
            total_pages=self.total_pages,
            total_items=self.total_items,
            has_previous=self.has_previous,
            has_next=self.has_next,
            label=self.label,
        )


def paginate(items: Sequence[T], page_size: int, page: int = 1) -> Page[T]:
    """Slice `items` into the requested page.

    Args:
        items: The (filtered) list to paginate
        page_size: Items per page, at least 1
        page: Requested 1-based page; clamped into the valid range

    Returns:
        Page holding items[(page-1)*page_size : page*page_size]

    Raises:
        ValueError: If page_size is less than 1
    """
    total_pages = total_pages_for(len(items), page_size)
    number = clamp_page(page, total_pages)
    start = (number - 1) * page_size
    return Page(
        items=list(items[start:start + page_size]),
        number=number,
        page_size=page_size,
        total_pages=total_pages,
        total_items=len(items),
    )


class Paginator(Generic[T]):
    """Stateful page navigation over a list.

    Replacing the list or changing the page size goes back to page 1.
    Moving past either end is a no-op.

    Example:
        >>> paginator = Paginator(records, page_size=5)
        >>> paginator.next()
        True
        >>> paginator.current().label
        '6-10 of 12'
    """

    def __init__(self, items: Sequence[T] = (), page_size: int = DEFAULT_PAGE_SIZE, page: int = 1) -> None:
        total_pages_for(0, page_size)
        self._items = list(items)
        self._page_size = page_size
        self._page = page

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def total_pages(self) -> int:
        return total_pages_for(len(self._items), self._page_size)

    @property
    def page(self) -> int:
        """Current page, clamped against the current total."""
        return clamp_page(self._page, self.total_pages)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def set_items(self, items: Sequence[T]) -> None:
        """Replace the list (e.g. a new source filter) and go back to page 1."""
        self._items = list(items)
        self._page = 1

    def set_page_size(self, page_size: int) -> None:
        """Change the page size and go back to page 1."""
        total_pages_for(0, page_size)
        self._page_size = page_size
        self._page = 1

    def go_to(self, page: int) -> int:
        """Jump to a page, clamped into range. Returns the page landed on."""
        self._page = clamp_page(page, self.total_pages)
        return self._page

    def next(self) -> bool:
        """Advance one page. Returns False when already on the last page."""
        if not self.has_next:
            return False
        self._page = self.page + 1
        return True

    def previous(self) -> bool:
        """Go back one page. Returns False when already on the first page."""
        if not self.has_previous:
            return False
        self._page = self.page - 1
        return True

    def current(self) -> Page[T]:
        """The visible page."""
        return paginate(self._items, self._page_size, self._page)


# ---------------------------------------------------------------------------
# Dashboard view
# ---------------------------------------------------------------------------


@dataclass
class DashboardView:
    """Everything the dashboard renders for one selection.

    Attributes:
        records: All records, newest first
        summary: Last-run summary over all records
        sources: Selectable sources, sentinel first
        selected_source: The active source selection
        page: Visible page of the filtered records
    """
    records: list[MonitoringRecord]
    summary: RunSummary
    sources: list[str]
    selected_source: str
    page: Page[MonitoringRecord]
    filtered: list[MonitoringRecord] = field(default_factory=list)


def build_view(
    records: Iterable[MonitoringRecord],
    source: str = ALL_SOURCES,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> DashboardView:
    """Run sort, summarize, source listing, filter and paginate in order."""
    ordered = sort_records(records)
    filtered = filter_by_source(ordered, source)
    return DashboardView(
        records=ordered,
        summary=summarize(ordered),
        sources=list_sources(ordered),
        selected_source=source,
        page=paginate(filtered, page_size, page),
        filtered=filtered,
    )


__all__ = [
    "ALL_SOURCES",
    "DEFAULT_PAGE_SIZE",
    "DashboardView",
    "PAGE_SIZE_OPTIONS",
    "PLACEHOLDER",
    "Page",
    "Paginator",
    "build_view",
    "clamp_page",
    "filter_by_source",
    "format_clock",
    "format_run_date",
    "format_table_datetime",
    "list_sources",
    "paginate",
    "sort_records",
    "summarize",
    "total_pages_for",
]
