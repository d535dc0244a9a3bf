import logging
from decimal import Decimal
from typing import Any, Iterable

from pydantic import ValidationError

from .errors import InvalidTransaction
from .schemas import LedgerEntry, Transaction

logger = logging.getLogger(__name__)


def _canonical_date(transaction: Transaction):
    """First present of the type-specific date, the other movement date, then createdAt."""
    if transaction.type == "IN":
        candidates = (transaction.in_date, transaction.out_date, transaction.created_at)
    else:
        candidates = (transaction.out_date, transaction.in_date, transaction.created_at)
    return next((value for value in candidates if value is not None), None)


def normalize_transaction(raw: Transaction | dict[str, Any], position: int) -> LedgerEntry:
    """
    Maps one raw transaction to a ledger entry with zeroed derived fields.
    The sequence number is provisional (position + 1) until the entries are sorted.
    """
    if isinstance(raw, Transaction):
        transaction = raw
    else:
        try:
            transaction = Transaction.model_validate(raw)
        except ValidationError as e:
            raise InvalidTransaction(
                "; ".join(
                    f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                    for err in e.errors()
                ),
                position=position,
                transaction_id=raw.get("id") if isinstance(raw, dict) else None,
            ) from e

    occurred_at = _canonical_date(transaction)
    if occurred_at is None:
        raise InvalidTransaction(
            "no inDate, outDate or createdAt", position=position, transaction_id=transaction.id
        )

    is_out = transaction.type == "OUT"
    return LedgerEntry(
        seq=position + 1,
        transaction_id=transaction.id,
        vendor=transaction.vendor,
        wire=transaction.item,
        design=transaction.payal_type or "",
        direction=transaction.type,
        qty_out=transaction.qty if is_out else Decimal(0),
        qty_in=Decimal(0) if is_out else transaction.qty,
        date=occurred_at,
        created_at=transaction.created_at,
        labour_charges=Decimal(0) if is_out else (transaction.price or Decimal(0)),
    )


def normalize_transactions(transactions: Iterable[Transaction | dict[str, Any]]) -> list[LedgerEntry]:
    """Normalizes a full snapshot. The first invalid transaction aborts the whole batch."""
    entries = [normalize_transaction(raw, position) for position, raw in enumerate(transactions)]
    logger.debug(f"Normalized {len(entries)} transactions.")
    return entries
