"""
Fixed-size pages over a filtered ledger, with per-page, prefix and
cumulative totals. Pages are 1-based. The default page is always the last
one, so a freshly loaded or re-filtered ledger opens on its newest activity.
"""

import math
from decimal import Decimal
from typing import Sequence

from . import settings
from .errors import InvalidPage
from .schemas import LedgerEntry, PageTotals, PrefixTotals


def resolve_page_size(page_size: int | None = None) -> int:
    """The configured page size when none is given. Sizes below 1 are rejected."""
    size = settings.PAGE_SIZE if page_size is None else page_size
    if size < 1:
        raise ValueError(f"page size must be positive, got {size}")
    return size


def total_pages(count: int, page_size: int | None = None) -> int:
    """Number of pages for `count` entries; an empty ledger still has one (empty) page."""
    return max(1, math.ceil(count / resolve_page_size(page_size)))


def default_page(count: int, page_size: int | None = None) -> int:
    return total_pages(count, page_size)


def paginate(entries: Sequence[LedgerEntry], page_size: int | None = None) -> list[list[LedgerEntry]]:
    """Splits the list into contiguous pages, preserving order."""
    size = resolve_page_size(page_size)
    return [list(entries[start:start + size]) for start in range(0, len(entries), size)]


def get_page(entries: Sequence[LedgerEntry], page: int, page_size: int | None = None) -> list[LedgerEntry]:
    size = resolve_page_size(page_size)
    check_page(page, total_pages(len(entries), size))
    start = (page - 1) * size
    return list(entries[start:start + size])


def check_page(page: int, pages: int) -> int:
    if not 1 <= page <= pages:
        raise InvalidPage(f"Page {page} is out of range; enter a page between 1 and {pages}.")
    return page


def parse_page_number(raw, pages: int) -> int:
    """Validates a page number typed by a user."""
    try:
        page = int(str(raw).strip())
    except (TypeError, ValueError):
        raise InvalidPage(f"{raw!r} is not a page number.") from None
    return check_page(page, pages)


def page_totals(page_entries: Sequence[LedgerEntry], page: int) -> PageTotals:
    """Totals for the entries on one page, overall and per vendor."""
    totals = PageTotals(page=page)
    for entry in page_entries:
        totals.total_out += entry.qty_out
        totals.total_in += entry.qty_in
        totals.labour_charges += entry.labour_charges
        labour = totals.vendor_labour.get(entry.vendor, Decimal(0))
        totals.vendor_labour[entry.vendor] = labour + entry.labour_charges
        totals.final_balances[entry.vendor] = entry.display_balance
    return totals


def _running_totals(entries: Sequence[LedgerEntry]) -> PrefixTotals:
    return PrefixTotals(
        total_out=sum((entry.qty_out for entry in entries), Decimal(0)),
        total_in=sum((entry.qty_in for entry in entries), Decimal(0)),
        last_balance=entries[-1].display_balance if entries else Decimal(0),
    )


def prefix_totals(
    entries: Sequence[LedgerEntry], page: int, page_size: int | None = None
) -> PrefixTotals | None:
    """
    Totals over every page before `page`. Returns None on the first page,
    where there is nothing to carry forward.
    """
    size = resolve_page_size(page_size)
    check_page(page, total_pages(len(entries), size))
    if page == 1:
        return None
    return _running_totals(entries[: (page - 1) * size])


def cumulative_totals(entries: Sequence[LedgerEntry], page: int, page_size: int | None = None) -> PrefixTotals:
    """Totals over every page up to and including `page`."""
    size = resolve_page_size(page_size)
    check_page(page, total_pages(len(entries), size))
    return _running_totals(entries[: page * size])
