from typing import Iterable

from .errors import PrintRecordNotFound
from .pagination import check_page
from .schemas import PrintStatus


class PrintRegistry:
    """
    Which (vendor, page) pairs have been printed.
    Display bookkeeping only; it never feeds into ledger computation.
    """

    def __init__(self, statuses: Iterable[PrintStatus] = ()):
        self._printed = {(status.vendor_name, status.page_number) for status in statuses}

    def __len__(self):
        return len(self._printed)

    def __contains__(self, key):
        return key in self._printed

    def is_printed(self, vendor: str, page: int) -> bool:
        return (vendor, page) in self._printed

    def mark(self, vendor: str, page: int, pages: int) -> None:
        check_page(page, pages)
        self._printed.add((vendor, page))

    def clear(self, vendor: str, page: int, pages: int) -> None:
        check_page(page, pages)
        if (vendor, page) not in self._printed:
            raise PrintRecordNotFound(f"Page {page} for {vendor} has no print record.")
        self._printed.discard((vendor, page))

    def clear_vendor(self, vendor: str) -> int:
        """Drops every record for one vendor and returns how many were removed."""
        removed = {key for key in self._printed if key[0] == vendor}
        self._printed -= removed
        return len(removed)

    def clear_all(self) -> None:
        self._printed.clear()

    def pages_for(self, vendor: str) -> list[int]:
        return sorted(page for name, page in self._printed if name == vendor)
