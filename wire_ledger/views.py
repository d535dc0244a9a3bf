"""
Read-only views over a computed `LedgerState`.

Building a view never re-runs the matcher: filtering and pagination only
slice the ledger (and, for a wire filter, attach a wire-scoped balance to
copies of the entries).
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from .aging import build_aging_summary
from .filters import LedgerFilter, apply_filters
from .pagination import (
    check_page,
    cumulative_totals,
    default_page,
    get_page,
    page_totals,
    prefix_totals,
    resolve_page_size,
    total_pages,
)
from .pricing import labour_charges
from .schemas import AgingRecord, LedgerEntry, LedgerState, PageTotals, PrefixTotals, Vendor


class LedgerView(BaseModel):
    """What the rendering layer needs for one screen of the ledger."""

    ledger_filter: LedgerFilter
    page: int
    total_pages: int
    page_size: int
    filtered_count: int
    entries: list[LedgerEntry]
    totals: PageTotals
    prefix: Optional[PrefixTotals] = None
    # Every page up to and including this one.
    cumulative: PrefixTotals
    labour: dict[int, Decimal] = Field(default_factory=dict)
    aging: list[AgingRecord] = Field(default_factory=list)

    @property
    def selected_balance(self) -> Optional[Decimal]:
        """Final balance on this page for the selected vendor, if one is selected."""
        if not self.ledger_filter.vendor:
            return None
        return self.totals.final_balance(self.ledger_filter.vendor)


def build_ledger_view(
    state: LedgerState,
    ledger_filter: LedgerFilter | None = None,
    page: int | None = None,
    page_size: int | None = None,
    vendors: Iterable[Vendor] = (),
    now: datetime | None = None,
) -> LedgerView:
    """
    Filters and paginates the ledger. `page` defaults to the last page.
    The aging summary is included only when a vendor is selected.
    """
    ledger_filter = ledger_filter or LedgerFilter()
    size = resolve_page_size(page_size)

    filtered = apply_filters(state.entries, ledger_filter)
    pages = total_pages(len(filtered), size)
    current = check_page(page, pages) if page is not None else default_page(len(filtered), size)
    current_entries = get_page(filtered, current, size)

    aging = []
    if ledger_filter.vendor:
        aging = build_aging_summary(state.entries, ledger_filter.vendor, now=now)

    return LedgerView(
        ledger_filter=ledger_filter,
        page=current,
        total_pages=pages,
        page_size=size,
        filtered_count=len(filtered),
        entries=current_entries,
        totals=page_totals(current_entries, current),
        prefix=prefix_totals(filtered, current, size),
        cumulative=cumulative_totals(filtered, current, size),
        labour=labour_charges(current_entries, vendors),
        aging=aging,
    )
