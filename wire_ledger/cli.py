import argparse
import logging
from datetime import date
from pathlib import Path

from pydantic import ValidationError

from wire_ledger import data_handler
from wire_ledger.errors import InvalidPage, LedgerError
from wire_ledger.filters import LedgerFilter, apply_filters
from wire_ledger.logger import setup_logger
from wire_ledger.matching import compute_ledger
from wire_ledger.pagination import parse_page_number, total_pages
from wire_ledger.pipelines.aging_report import AgingReportPipeline
from wire_ledger.pipelines.ledger_report import LedgerReportPipeline
from wire_ledger.print_status import PrintRegistry

logger = logging.getLogger("wire_ledger")


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wire-ledger",
        description="Reconcile vendor wire OUT/IN transactions into a FIFO batch ledger.",
    )
    parser.add_argument("--snapshot", type=Path, help="Read a JSON snapshot instead of calling the API.")
    parser.add_argument("--test-mode", action="store_true", help="Never write to the print-status store.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    ledger = subparsers.add_parser("ledger", help="Show one page of the ledger.")
    ledger.add_argument("--vendor")
    ledger.add_argument("--wire", help="Case-insensitive substring of the wire name.")
    ledger.add_argument("--from", dest="date_from", type=_parse_date)
    ledger.add_argument("--to", dest="date_to", type=_parse_date)
    ledger.add_argument("--page", help="Page number (defaults to the last page).")
    ledger.add_argument("--mark-printed", action="store_true", help="Record this page as printed.")

    aging = subparsers.add_parser("aging", help="Outstanding batches for one vendor.")
    aging.add_argument("vendor")

    clear = subparsers.add_parser("clear-print", help="Clear print history.")
    clear.add_argument("vendor", nargs="?")
    clear.add_argument("page", nargs="?")
    clear.add_argument("--all", action="store_true", help="Clear every print record.")

    return parser


def _run_ledger(args) -> None:
    ledger_filter = LedgerFilter(
        vendor=args.vendor, wire=args.wire, date_from=args.date_from, date_to=args.date_to
    )
    page = None
    if args.page is not None:
        # Validated against the real page count once the ledger is built.
        try:
            page = int(args.page)
        except ValueError:
            raise InvalidPage(f"{args.page!r} is not a page number.") from None
    LedgerReportPipeline(
        ledger_filter,
        page=page,
        mark_printed=args.mark_printed,
        snapshot_path=args.snapshot,
        test_mode=args.test_mode,
    ).run()


def _run_clear_print(args) -> None:
    if args.all:
        if not args.test_mode:
            data_handler.clear_all_print_statuses()
        return

    if not args.vendor or args.page is None:
        raise LedgerError("Select a vendor and a page number, or pass --all.")

    if args.snapshot is not None:
        snapshot = data_handler.load_snapshot_file(args.snapshot)
    else:
        snapshot = data_handler.load_snapshot()
    state = compute_ledger(snapshot.transactions)
    pages = total_pages(len(apply_filters(state.entries, LedgerFilter(vendor=args.vendor))))
    page = parse_page_number(args.page, pages)

    registry = PrintRegistry(snapshot.print_statuses)
    registry.clear(args.vendor, page, pages)
    if args.test_mode:
        logger.info("🧪 Test Mode: Skipping print-status update.")
        return
    data_handler.clear_page_print_status(args.vendor, page)


def main(argv: list[str] | None = None) -> int:
    setup_logger("wire_ledger")
    args = build_parser().parse_args(argv)

    try:
        if args.command == "ledger":
            _run_ledger(args)
        elif args.command == "aging":
            AgingReportPipeline(args.vendor, snapshot_path=args.snapshot, test_mode=args.test_mode).run()
        elif args.command == "clear-print":
            _run_clear_print(args)
    except ValidationError as e:
        logger.error("❌ Invalid filter!")
        logger.error(e)
        return 2
    except LedgerError as e:
        logger.error(f"❌ {e}")
        return 1
    return 0
