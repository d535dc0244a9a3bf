import itertools
import json
from datetime import datetime, timedelta, timezone

import pytest

from wire_ledger import settings

CREATED_BASE = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _isolated_logs(tmp_path, monkeypatch):
    """Keep rotating log files out of the working tree."""
    monkeypatch.setattr(settings, "LOG_DIR", tmp_path / "logs")


@pytest.fixture
def txn():
    """
    Factory for raw transaction rows as the store returns them.
    Each call gets a later createdAt, so same-day rows sort in call order.
    """
    counter = itertools.count(1)

    def _make(type_, qty, vendor="Ravi", item="20 Gauge", day="2024-01-10", design="Kada", **extra):
        n = next(counter)
        row = {
            "id": f"t{n}",
            "vendor": vendor,
            "item": item,
            "payalType": design,
            "qty": qty,
            "type": type_,
            "createdAt": (CREATED_BASE + timedelta(minutes=n)).isoformat(),
        }
        row["outDate" if type_ == "OUT" else "inDate"] = day
        row.update(extra)
        return row

    return _make


@pytest.fixture
def vendors():
    return [
        {
            "name": "Ravi",
            "assignedWires": [
                {"wireName": "20 Gauge", "payalType": "Kada", "pricePerKg": 150},
                {"wireName": "18 Gauge", "payalType": "Chain", "pricePerKg": 200},
            ],
        },
        {"name": "Meena", "assignedWires": []},
    ]


@pytest.fixture
def snapshot_file(tmp_path, txn, vendors):
    """A small snapshot on disk, usable with --snapshot."""
    rows = [
        txn("OUT", 10),
        txn("IN", 4, price=600),
        txn("OUT", 5, vendor="Meena", item="18 Gauge"),
        txn("OUT", 3, day="2024-01-12"),
    ]
    path = tmp_path / "snapshot.json"
    path.write_text(
        json.dumps(
            {
                "transactions": rows,
                "vendors": vendors,
                "printStatuses": [{"vendorName": "Ravi", "pageNumber": 1}],
            }
        ),
        encoding="utf-8",
    )
    return path
