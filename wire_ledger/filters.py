import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, model_validator

from .schemas import LedgerEntry

logger = logging.getLogger(__name__)


class LedgerFilter(BaseModel):
    """
    The filters a ledger view can apply. Every field is optional; an empty
    filter shows the whole ledger. Date bounds are inclusive calendar days.
    """

    vendor: Optional[str] = None
    wire: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None

    @model_validator(mode="after")
    def _check_range(self):
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise ValueError(f"date_from {self.date_from} is after date_to {self.date_to}")
        return self

    @property
    def is_empty(self) -> bool:
        return not (self.vendor or self.wire or self.date_from or self.date_to)


def recompute_wire_balances(entries: list[LedgerEntry]) -> list[LedgerEntry]:
    """
    Returns copies of `entries` with `wire_balance` recomputed from zero per
    (vendor, wire). The vendor-level `balance` is left as it was.
    """
    running: dict[tuple[str, str], Decimal] = {}
    scoped = []
    for entry in entries:
        key = (entry.vendor, entry.wire)
        balance = running.get(key, Decimal(0)) + entry.qty_out - entry.qty_in
        running[key] = balance
        scoped.append(entry.model_copy(update={"wire_balance": balance}))
    return scoped


def apply_filters(entries: list[LedgerEntry], ledger_filter: LedgerFilter | None = None) -> list[LedgerEntry]:
    """
    Applies vendor, wire and date filters to the ordered ledger.

    Vendor and date filters only slice. A wire filter also recomputes a
    wire-scoped balance over the vendor/wire subset; the date filter runs
    after that, so balances inside a date window include earlier activity.
    """
    if ledger_filter is None or ledger_filter.is_empty:
        return list(entries)

    filtered = list(entries)

    if ledger_filter.vendor:
        filtered = [entry for entry in filtered if entry.vendor == ledger_filter.vendor]

    if ledger_filter.wire:
        needle = ledger_filter.wire.lower()
        filtered = recompute_wire_balances(
            [entry for entry in filtered if needle in entry.wire.lower()]
        )

    if ledger_filter.date_from or ledger_filter.date_to:
        filtered = [
            entry
            for entry in filtered
            if (ledger_filter.date_from is None or entry.day >= ledger_filter.date_from)
            and (ledger_filter.date_to is None or entry.day <= ledger_filter.date_to)
        ]

    logger.debug(f"Filter {ledger_filter.model_dump(exclude_none=True)} kept {len(filtered)} of {len(entries)} entries.")
    return filtered
