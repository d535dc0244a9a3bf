import logging
from pathlib import Path
from typing import Optional

from wire_ledger import data_handler, utils
from wire_ledger.filters import LedgerFilter
from wire_ledger.pipeline import ReportPipeline
from wire_ledger.print_status import PrintRegistry
from wire_ledger.schemas import LedgerState
from wire_ledger.views import LedgerView, build_ledger_view

logger = logging.getLogger(__name__)


class LedgerReportPipeline(ReportPipeline):
    def __init__(
        self,
        ledger_filter: Optional[LedgerFilter] = None,
        page: Optional[int] = None,
        mark_printed: bool = False,
        snapshot_path: Optional[Path] = None,
        test_mode: bool = False,
    ):
        super().__init__("ledger", snapshot_path=snapshot_path, test_mode=test_mode)
        self.ledger_filter = ledger_filter or LedgerFilter()
        # None opens the last page.
        self.page = page
        self.mark_printed = mark_printed
        self.print_registry = PrintRegistry()

    def transform(self, state: LedgerState) -> LedgerView:
        logger.info("--- Building Ledger View ---")
        self.print_registry = PrintRegistry(self.snapshot.print_statuses)
        view = build_ledger_view(
            state,
            self.ledger_filter,
            page=self.page,
            vendors=self.snapshot.vendors,
        )
        logger.info(
            f"Filter kept {view.filtered_count} of {len(state.entries)} entries "
            f"({view.total_pages} pages of {view.page_size})."
        )
        return view

    def load(self, view: LedgerView):
        vendor = view.ledger_filter.vendor
        badge = ""
        if vendor and self.print_registry.is_printed(vendor, view.page):
            badge = " 🖨️ printed"
        logger.info(f"\n--- Page {view.page} of {view.total_pages}{badge} ---")

        if view.prefix is not None:
            logger.info(
                f"Previous pages: Out {utils.format_qty(view.prefix.total_out)} | "
                f"In {utils.format_qty(view.prefix.total_in)} | "
                f"Balance {utils.format_qty(view.prefix.balance)}"
            )

        if view.entries:
            logger.info(utils.entries_to_frame(view.entries, view.labour).to_string(index=False))
        else:
            logger.warning("⚠️ No transactions match the current filters.")

        logger.info(
            f"Page totals: Out {utils.format_qty(view.totals.total_out)} | "
            f"In {utils.format_qty(view.totals.total_in)} | "
            f"Labour {view.totals.labour_charges:.0f}"
        )
        if vendor:
            for name, balance in view.totals.final_balances.items():
                status = "✓ Done" if self.print_registry.is_printed(name, view.page) else "Pending"
                logger.info(
                    f"{name}: Total Labour {view.totals.vendor_labour.get(name, 0):.0f} | "
                    f"Balance {utils.format_qty(balance)} | {status}"
                )
        elif view.entries:
            logger.info(
                f"TOTAL: Out {utils.format_qty(view.cumulative.total_out)} | "
                f"In {utils.format_qty(view.cumulative.total_in)} | "
                f"Balance {utils.format_qty(view.cumulative.balance)}"
            )

        if self.state.unmatched_returns:
            logger.warning(f"⚠️ {len(self.state.unmatched_returns)} returns exceed the open OUT batches.")

        if self.mark_printed:
            self._mark_printed(view)

    def _mark_printed(self, view: LedgerView):
        vendor = view.ledger_filter.vendor
        if not vendor:
            logger.warning("⚠️ Select a vendor to record a printed page.")
            return
        if self.test_mode:
            logger.info("🧪 Test Mode: Skipping print-status update.")
            return
        if data_handler.mark_page_as_printed(vendor, view.page):
            self.print_registry.mark(vendor, view.page, view.total_pages)
