from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .utils import calendar_day, parse_timestamp

Direction = Literal["OUT", "IN"]
BatchStatus = Literal["pending", "completed"]
EntryStatus = Literal["pending", "completed", "partial"]


class Transaction(BaseModel):
    """
    A raw transaction exactly as the transaction store returns it.
    Field aliases match the store's camelCase JSON.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: Optional[str | int] = None
    vendor: str
    item: str
    payal_type: Optional[str] = Field(default=None, alias="payalType")
    qty: Decimal = Field(..., ge=0)
    type: Direction
    in_date: Optional[datetime] = Field(default=None, alias="inDate")
    out_date: Optional[datetime] = Field(default=None, alias="outDate")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    price: Optional[Decimal] = None

    @field_validator("in_date", "out_date", "created_at", mode="before")
    @classmethod
    def _parse_dates(cls, value):
        return parse_timestamp(value)


class BatchMatch(BaseModel):
    """One deduction an IN entry made against an OUT batch."""

    batch_id: str
    qty: Decimal


class LedgerEntry(BaseModel):
    """
    A normalized transaction enriched with its ledger position.
    `balance` is always the vendor-level running balance; `wire_balance`
    is only set on copies produced by a wire-filtered view.
    """

    seq: int
    transaction_id: Optional[str | int] = None
    vendor: str
    wire: str
    design: str = ""
    direction: Direction
    qty_out: Decimal = Decimal(0)
    qty_in: Decimal = Decimal(0)
    date: datetime
    created_at: Optional[datetime] = None
    labour_charges: Decimal = Decimal(0)
    balance: Decimal = Decimal(0)
    wire_balance: Optional[Decimal] = None
    batch_id: Optional[str] = None
    matches: list[BatchMatch] = Field(default_factory=list)
    status: Optional[EntryStatus] = None
    unmatched_qty: Decimal = Decimal(0)

    @property
    def day(self) -> date:
        return calendar_day(self.date)

    @property
    def quantity(self) -> Decimal:
        return self.qty_out if self.direction == "OUT" else self.qty_in

    @property
    def display_balance(self) -> Decimal:
        return self.wire_balance if self.wire_balance is not None else self.balance

    @property
    def batch_ids(self) -> list[str]:
        if self.direction == "OUT":
            return [self.batch_id] if self.batch_id else []
        return [match.batch_id for match in self.matches]


class Batch(BaseModel):
    batch_id: str
    vendor: str
    wire: str
    seq: int
    out_date: datetime
    original_qty: Decimal
    remaining_qty: Decimal
    status: BatchStatus = "pending"

    @property
    def matched_qty(self) -> Decimal:
        return self.original_qty - self.remaining_qty


class UnmatchedReturn(BaseModel):
    """IN quantity that found no open batch for its (vendor, wire)."""

    seq: int
    vendor: str
    wire: str
    qty: Decimal


class LedgerState(BaseModel):
    """Everything derived from one transaction snapshot."""

    entries: list[LedgerEntry] = Field(default_factory=list)
    batches: dict[str, Batch] = Field(default_factory=dict)
    balances: dict[str, Decimal] = Field(default_factory=dict)
    unmatched_returns: list[UnmatchedReturn] = Field(default_factory=list)

    def batches_for(self, vendor: str, wire: str) -> list[Batch]:
        """Batches of one (vendor, wire) in creation order."""
        return sorted(
            (b for b in self.batches.values() if b.vendor == vendor and b.wire == wire),
            key=lambda b: b.seq,
        )


class PageTotals(BaseModel):
    page: int
    total_out: Decimal = Decimal(0)
    total_in: Decimal = Decimal(0)
    labour_charges: Decimal = Decimal(0)
    vendor_labour: dict[str, Decimal] = Field(default_factory=dict)
    # Last displayed balance per vendor on this page.
    final_balances: dict[str, Decimal] = Field(default_factory=dict)

    def final_balance(self, vendor: str) -> Optional[Decimal]:
        return self.final_balances.get(vendor)


class PrefixTotals(BaseModel):
    """Running totals over the leading entries of a filtered ledger."""

    total_out: Decimal = Decimal(0)
    total_in: Decimal = Decimal(0)
    last_balance: Decimal = Decimal(0)

    @property
    def balance(self) -> Decimal:
        return self.total_out - self.total_in


class AgingRecord(BaseModel):
    batch_id: str
    seq: int
    wire: str
    remaining_qty: Decimal
    out_date: datetime
    days: int


# --- External collaborators ---


class WireAssignment(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    wire_name: str = Field(..., alias="wireName")
    payal_type: Optional[str] = Field(default=None, alias="payalType")
    price_per_kg: Optional[Decimal] = Field(default=None, alias="pricePerKg")


class Vendor(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    assigned_wires: list[WireAssignment] = Field(default_factory=list, alias="assignedWires")


class PrintStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    vendor_name: str = Field(..., alias="vendorName")
    page_number: int = Field(..., ge=1, alias="pageNumber")


class LedgerSnapshot(BaseModel):
    """One consistent read of all external collaborators."""

    model_config = ConfigDict(populate_by_name=True)

    # Raw rows; the normalizer validates each one so a bad row raises InvalidTransaction.
    transactions: list[dict[str, Any]] = Field(default_factory=list)
    vendors: list[Vendor] = Field(default_factory=list)
    print_statuses: list[PrintStatus] = Field(default_factory=list, alias="printStatuses")
    loaded_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
