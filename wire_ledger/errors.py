"""
Exception types raised by the wire ledger.

Matching itself never raises on well-formed input. Errors are raised at the
edges: while normalizing raw transactions, while loading a snapshot from the
external stores, and while validating user input such as page numbers.
"""


class LedgerError(Exception):
    """Base class for all wire ledger errors."""


class InvalidTransaction(LedgerError, ValueError):
    """
    A raw transaction could not be normalized.

    Raised for negative quantities, unknown directions, and missing or
    unparseable dates. ``position`` is the 0-based index of the offending
    transaction in the merged input list.
    """

    def __init__(self, message: str, position: int | None = None, transaction_id=None):
        self.position = position
        self.transaction_id = transaction_id
        prefix = f"Transaction #{position + 1}" if position is not None else "Transaction"
        if transaction_id is not None:
            prefix += f" (id={transaction_id})"
        super().__init__(f"{prefix}: {message}")


class LoadFailure(LedgerError):
    """
    A snapshot reload failed.

    One aggregate error for any collaborator failure (transaction store,
    vendor directory, print-status store). No ledger is computed from a
    partial snapshot.
    """


class InvalidPage(LedgerError, ValueError):
    """A page number outside 1..total_pages or not a number."""


class PrintRecordNotFound(LedgerError, KeyError):
    """Clearing a print record that does not exist."""
