import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from wire_ledger import utils
from wire_ledger.aging import build_aging_summary
from wire_ledger.pipeline import ReportPipeline
from wire_ledger.schemas import AgingRecord, LedgerState

logger = logging.getLogger(__name__)


class AgingReportPipeline(ReportPipeline):
    """Outstanding OUT batches for one vendor, newest first."""

    def __init__(
        self,
        vendor: str,
        now: Optional[datetime] = None,
        snapshot_path: Optional[Path] = None,
        test_mode: bool = False,
    ):
        super().__init__("aging", snapshot_path=snapshot_path, test_mode=test_mode)
        self.vendor = vendor
        self.now = now

    def transform(self, state: LedgerState) -> list[AgingRecord]:
        logger.info(f"--- Replaying batches for {self.vendor} ---")
        if self.vendor not in state.balances:
            logger.warning(f"⚠️ No transactions found for vendor '{self.vendor}'.")
        return build_aging_summary(state.entries, self.vendor, now=self.now)

    def load(self, records: list[AgingRecord]):
        if not records:
            logger.info(f"✅ {self.vendor} has no outstanding batches.")
            return

        logger.info(f"\n--- Wire Summary: {self.vendor} ---")
        logger.info(utils.aging_to_frame(records).to_string(index=False))

        outstanding = sum(record.remaining_qty for record in records)
        oldest = max(record.days for record in records)
        logger.info(
            f"{len(records)} open batches, {utils.format_qty(outstanding)} outstanding, "
            f"oldest {oldest} days."
        )
