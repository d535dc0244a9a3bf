import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from . import data_handler
from .matching import compute_ledger
from .schemas import LedgerSnapshot, LedgerState

logger = logging.getLogger(__name__)


class ReportPipeline(ABC):
    """
    Abstract base class for ledger reports (main ledger, aging summary).
    Follows an Extract -> Transform -> Load pattern: load a snapshot,
    derive a view from it, then render it.
    """

    def __init__(self, report_type: str, snapshot_path: Optional[Path] = None, test_mode: bool = False):
        self.report_type = report_type
        # A local snapshot file replaces the API when given.
        self.snapshot_path = snapshot_path
        self.test_mode = test_mode
        self.snapshot: LedgerSnapshot | None = None
        self.state: LedgerState | None = None

    def run(self) -> Any:
        """
        Orchestrates the pipeline execution. LoadFailure and InvalidTransaction
        propagate to the caller; nothing is rendered from a partial snapshot.
        """
        logger.info(f"🚀 STEP: {self.report_type.upper()} REPORT")
        logger.info("-" * 30)

        # --- 1. EXTRACT ---
        self.snapshot = self.extract()
        self.state = compute_ledger(self.snapshot.transactions)

        # --- 2. TRANSFORM ---
        view = self.transform(self.state)

        # --- 3. LOAD ---
        self.load(view)

        logger.info(f"✅ {self.report_type.capitalize()} Report Finished.\n")
        logger.info("=" * 60)
        return view

    def extract(self) -> LedgerSnapshot:
        """Reads the full snapshot, either from a file or from the API."""
        if self.snapshot_path is not None:
            return data_handler.load_snapshot_file(self.snapshot_path)
        return data_handler.load_snapshot()

    @abstractmethod
    def transform(self, state: LedgerState) -> Any:
        """
        Derives the report's view from the computed ledger.
        Must not modify `state`.
        """
        pass

    @abstractmethod
    def load(self, view: Any):
        """Renders the view."""
        pass
