"""
Chronological ordering, FIFO batch matching and vendor balances.

`compute_ledger` is the single entry point: it turns a transaction snapshot
into a `LedgerState` in one pass. Nothing is cached between calls, so the same
snapshot always yields the same sequence numbers, batch ids and balances.
"""

import logging
from decimal import Decimal
from typing import Any, Iterable

from .normalizer import normalize_transactions
from .schemas import Batch, BatchMatch, LedgerEntry, LedgerState, Transaction, UnmatchedReturn
from .utils import format_batch_id

logger = logging.getLogger(__name__)


def _chronological_key(entry: LedgerEntry):
    # Same-day entries are ordered by creation time only.
    return (entry.day, entry.created_at or entry.date)


def sort_entries(entries: Iterable[LedgerEntry]) -> list[LedgerEntry]:
    """
    Sorts entries by (calendar day, creation timestamp) and reassigns
    sequence numbers 1..N. `sorted` is stable, so input order breaks any
    remaining tie.
    """
    ordered = sorted(entries, key=_chronological_key)
    return [entry.model_copy(update={"seq": seq}) for seq, entry in enumerate(ordered, start=1)]


class BatchQueue:
    """
    Open OUT batches for one (vendor, wire), oldest first.

    Batches are only ever appended. `_head` points at the oldest batch that
    may still have quantity left, so exhausted batches are never rescanned.
    """

    def __init__(self):
        self._batches: list[Batch] = []
        self._head = 0

    def open(self, batch: Batch) -> None:
        self._batches.append(batch)

    def consume(self, qty: Decimal) -> tuple[list[BatchMatch], Decimal]:
        """
        Deducts `qty` from the oldest open batches.
        Returns the deductions made and any quantity left without a batch.
        """
        need = qty
        matches = []
        while need > 0 and self._head < len(self._batches):
            batch = self._batches[self._head]
            if batch.remaining_qty > 0:
                deduction = min(batch.remaining_qty, need)
                batch.remaining_qty -= deduction
                need -= deduction
                matches.append(BatchMatch(batch_id=batch.batch_id, qty=deduction))
                if batch.remaining_qty == 0:
                    batch.status = "completed"
            if batch.remaining_qty == 0:
                self._head += 1
        return matches, need

    @property
    def open_batches(self) -> list[Batch]:
        return [batch for batch in self._batches[self._head:] if batch.remaining_qty > 0]


def open_batch(entry: LedgerEntry) -> Batch:
    """Creates the batch an OUT entry opens. A zero-quantity batch is born completed."""
    return Batch(
        batch_id=format_batch_id(entry.seq),
        vendor=entry.vendor,
        wire=entry.wire,
        seq=entry.seq,
        out_date=entry.date,
        original_qty=entry.qty_out,
        remaining_qty=entry.qty_out,
        status="pending" if entry.qty_out > 0 else "completed",
    )


def replay_batches(entries: Iterable[LedgerEntry]) -> dict[tuple[str, str], BatchQueue]:
    """
    Runs FIFO matching over already-sorted entries without touching them.
    Used by views that need batch state for a subset of the ledger.
    """
    queues: dict[tuple[str, str], BatchQueue] = {}
    for entry in entries:
        queue = queues.setdefault((entry.vendor, entry.wire), BatchQueue())
        if entry.direction == "OUT":
            queue.open(open_batch(entry))
        else:
            queue.consume(entry.qty_in)
    return queues


def compute_ledger(transactions: Iterable[Transaction | dict[str, Any]]) -> LedgerState:
    """
    Builds the full ledger from a transaction snapshot.

    Raises InvalidTransaction if any transaction cannot be normalized.
    Excess IN quantity never raises: it still lowers the vendor balance, is
    recorded on the entry as `unmatched_qty` and collected in
    `LedgerState.unmatched_returns`.
    """
    entries = sort_entries(normalize_transactions(transactions))

    queues: dict[tuple[str, str], BatchQueue] = {}
    batches: dict[str, Batch] = {}
    balances: dict[str, Decimal] = {}
    unmatched: list[UnmatchedReturn] = []

    for entry in entries:
        queue = queues.setdefault((entry.vendor, entry.wire), BatchQueue())
        balance = balances.get(entry.vendor, Decimal(0))

        if entry.direction == "OUT":
            batch = open_batch(entry)
            queue.open(batch)
            batches[batch.batch_id] = batch
            entry.batch_id = batch.batch_id
            balance += entry.qty_out
        else:
            matches, leftover = queue.consume(entry.qty_in)
            entry.matches = matches
            # Status as of this return; later returns do not rewrite it.
            entry.status = (
                "completed"
                if matches and all(batches[m.batch_id].status == "completed" for m in matches)
                else "partial"
            )
            if leftover > 0:
                entry.unmatched_qty = leftover
                unmatched.append(
                    UnmatchedReturn(seq=entry.seq, vendor=entry.vendor, wire=entry.wire, qty=leftover)
                )
                logger.warning(
                    f"⚠️ Sr.No {entry.seq}: {leftover} of {entry.qty_in} returned for "
                    f"{entry.vendor} / {entry.wire} has no open batch."
                )
            balance -= entry.qty_in

        balances[entry.vendor] = balance
        entry.balance = balance

    # OUT rows show where their batch ended up after every return.
    for entry in entries:
        if entry.direction == "OUT":
            entry.status = batches[entry.batch_id].status

    logger.info(
        f"Ledger computed: {len(entries)} entries, {len(batches)} batches, "
        f"{len(balances)} vendors, {len(unmatched)} unmatched returns."
    )
    return LedgerState(
        entries=entries,
        batches=batches,
        balances=balances,
        unmatched_returns=unmatched,
    )
