import logging
from datetime import datetime, timezone

from .matching import replay_batches
from .schemas import AgingRecord, LedgerEntry
from .utils import days_between

logger = logging.getLogger(__name__)


def build_aging_summary(
    entries: list[LedgerEntry], vendor: str, now: datetime | None = None
) -> list[AgingRecord]:
    """
    Outstanding OUT batches for one vendor, newest OUT first.

    FIFO matching is replayed over the vendor's own entries. Batch ids come
    from the global sequence numbers, so they match the ids in the main ledger.
    """
    now = now or datetime.now(timezone.utc)
    vendor_entries = [entry for entry in entries if entry.vendor == vendor]
    queues = replay_batches(vendor_entries)

    records = [
        AgingRecord(
            batch_id=batch.batch_id,
            seq=batch.seq,
            wire=batch.wire,
            remaining_qty=batch.remaining_qty,
            out_date=batch.out_date,
            days=days_between(now, batch.out_date),
        )
        for queue in queues.values()
        for batch in queue.open_batches
    ]
    records.sort(key=lambda record: (record.out_date, record.seq), reverse=True)

    logger.debug(f"Aging summary for {vendor}: {len(records)} outstanding batches.")
    return records
