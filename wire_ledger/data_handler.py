import json
import logging
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from pathlib import Path
from typing import Any
from urllib.parse import quote

import requests
from pydantic import ValidationError

from . import settings
from .errors import LoadFailure
from .schemas import LedgerSnapshot

logger = logging.getLogger(__name__)


def _url(endpoint: str) -> str:
    return f"{settings.API_BASE_URL.rstrip('/')}{endpoint}"


def _get(endpoint: str) -> Any:
    response = requests.get(_url(endpoint), timeout=settings.REQUEST_TIMEOUT)
    response.raise_for_status()
    return response.json()


def fetch_transactions(direction: str) -> list[dict[str, Any]]:
    """The transaction store only exposes one query per direction."""
    return _get(f"/items/transactions/{direction}")


def fetch_vendors() -> list[dict[str, Any]]:
    return _get("/vendors")


def fetch_print_statuses() -> list[dict[str, Any]]:
    return _get("/print-status")


def build_snapshot(
    in_transactions: list, out_transactions: list, vendors: list, print_statuses: list
) -> LedgerSnapshot:
    """Merges both transaction lists (IN first, then OUT) and validates the directories."""
    try:
        return LedgerSnapshot(
            transactions=[*in_transactions, *out_transactions],
            vendors=vendors,
            print_statuses=print_statuses,
        )
    except ValidationError as e:
        logger.error("❌ Snapshot validation failed!")
        logger.error(e)
        raise LoadFailure(f"Failed to load data: malformed collaborator response ({e.error_count()} errors)") from e


def load_snapshot() -> LedgerSnapshot:
    """
    Fetches every collaborator at once and waits for all of them.
    Any single failure fails the whole reload with one LoadFailure.
    """
    fetchers = {
        "IN transactions": partial(fetch_transactions, "IN"),
        "OUT transactions": partial(fetch_transactions, "OUT"),
        "vendors": fetch_vendors,
        "print statuses": fetch_print_statuses,
    }

    logger.info(f"🚀 Loading snapshot from {settings.API_BASE_URL}")
    results = {}
    failures = []
    with ThreadPoolExecutor(max_workers=len(fetchers)) as pool:
        futures = {name: pool.submit(fetch) for name, fetch in fetchers.items()}
        for name, future in futures.items():
            try:
                results[name] = future.result()
            except requests.exceptions.RequestException as e:
                logger.error(f"❌ Error loading {name}: {e}")
                failures.append((name, e))

    if failures:
        summary = "; ".join(f"{name}: {error}" for name, error in failures)
        raise LoadFailure(f"Failed to load data: {summary}") from failures[0][1]

    snapshot = build_snapshot(
        results["IN transactions"],
        results["OUT transactions"],
        results["vendors"],
        results["print statuses"],
    )
    logger.info(
        f"✅ Loaded {len(snapshot.transactions)} transactions, "
        f"{len(snapshot.vendors)} vendors, {len(snapshot.print_statuses)} print records."
    )
    return snapshot


def load_snapshot_file(path: Path) -> LedgerSnapshot:
    """
    Reads a snapshot saved as JSON:
    {"transactions": [...], "vendors": [...], "printStatuses": [...]}
    """
    try:
        with open(path, encoding="utf-8-sig") as f:
            payload = json.load(f)
    except FileNotFoundError as e:
        raise LoadFailure(f"Snapshot not found at {path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise LoadFailure(f"Could not read snapshot {Path(path).name}: {e}") from e

    if not isinstance(payload, dict):
        raise LoadFailure(f"Snapshot {Path(path).name} must be a JSON object")

    logger.info(f"Loaded snapshot file: {Path(path).name}")
    return build_snapshot(
        [],
        payload.get("transactions", []),
        payload.get("vendors", []),
        payload.get("printStatuses", []),
    )


def mark_page_as_printed(vendor: str, page: int) -> bool:
    """Records a printed page in the print-status store."""
    try:
        response = requests.post(
            _url("/print-status/mark-printed"),
            json={"vendorName": vendor, "pageNumber": page},
            timeout=settings.REQUEST_TIMEOUT,
        )
        response.raise_for_status()
        logger.info(f"✅ Page {page} for {vendor} marked as printed.")
        return True
    except requests.exceptions.RequestException as e:
        logger.error(f"❌ Failed to save print status: {e}")
        return False


def clear_page_print_status(vendor: str, page: int) -> bool:
    try:
        response = requests.delete(
            _url(f"/print-status/{quote(vendor, safe='')}/{page}"),
            timeout=settings.REQUEST_TIMEOUT,
        )
        response.raise_for_status()
        logger.info(f"✅ Print history cleared for {vendor} page {page}.")
        return True
    except requests.exceptions.RequestException as e:
        logger.error(f"❌ Failed to clear page history: {e}")
        return False


def clear_all_print_statuses() -> bool:
    try:
        response = requests.delete(_url("/print-status/clear/all"), timeout=settings.REQUEST_TIMEOUT)
        response.raise_for_status()
        logger.info("✅ Print history cleared.")
        return True
    except requests.exceptions.RequestException as e:
        logger.error(f"❌ Failed to clear print history: {e}")
        return False
