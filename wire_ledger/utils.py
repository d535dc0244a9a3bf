import math
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Iterable

import pandas as pd

from . import settings

SECONDS_PER_DAY = 24 * 60 * 60


def parse_timestamp(value) -> datetime | None:
    """
    Parses a store timestamp into an aware UTC datetime.
    Empty values mean "absent". Anything unparseable raises ValueError;
    there is no fallback date.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            raise ValueError(f"unparseable date {value!r}") from None
    else:
        raise ValueError(f"unsupported date value {value!r}")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def calendar_day(moment: datetime) -> date:
    """The UTC calendar day of a timestamp, ignoring time of day."""
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(timezone.utc).date()


def days_between(now: datetime, then: datetime) -> int:
    """Whole days between two moments, rounded up."""
    elapsed = abs((now - then).total_seconds())
    return math.ceil(elapsed / SECONDS_PER_DAY)


def format_batch_id(seq: int) -> str:
    """Returns the batch id for an OUT entry, e.g. 7 -> 'S-000007'."""
    return f"{settings.BATCH_ID_PREFIX}{seq:0{settings.BATCH_ID_WIDTH}d}"


def format_qty(value: Decimal | None) -> str:
    if value is None:
        return ""
    return f"{value:.3f}"


def entries_to_frame(entries: Iterable, labour: dict[int, Decimal] | None = None) -> pd.DataFrame:
    """
    Builds the console table for a ledger page.
    `labour` maps sequence numbers to computed labour charges, when known.
    """
    labour = labour or {}
    rows = [
        {
            "Sr.No": entry.seq,
            "Date": entry.day.isoformat(),
            "Vendor": entry.vendor,
            "Wire": entry.wire,
            "Design": entry.design,
            "Out": format_qty(entry.qty_out) if entry.qty_out else "",
            "In": format_qty(entry.qty_in) if entry.qty_in else "",
            "Balance": format_qty(entry.display_balance),
            "Wire ID": ", ".join(entry.batch_ids),
            "Status": entry.status or "",
            "Labour": f"{labour[entry.seq]:.0f}" if entry.seq in labour else "",
        }
        for entry in entries
    ]
    return pd.DataFrame(rows, columns=settings.LEDGER_COLUMNS)


def aging_to_frame(records: Iterable) -> pd.DataFrame:
    rows = [
        {
            "Wire ID": record.batch_id,
            "Wire": record.wire,
            "Out Date": calendar_day(record.out_date).isoformat(),
            "Remaining": format_qty(record.remaining_qty),
            "Days": record.days,
        }
        for record in records
    ]
    return pd.DataFrame(rows, columns=settings.AGING_COLUMNS)
