from decimal import Decimal
from typing import Iterable, Optional

from .schemas import LedgerEntry, Vendor


def build_price_index(vendors: Iterable[Vendor]) -> dict[tuple[str, str, str], Decimal]:
    """Maps (vendor, wire, design) to the vendor's assigned price per kg."""
    index = {}
    for vendor in vendors:
        for assignment in vendor.assigned_wires:
            if assignment.price_per_kg is None:
                continue
            key = (vendor.name, assignment.wire_name, assignment.payal_type or "")
            index[key] = assignment.price_per_kg
    return index


def labour_charge(entry: LedgerEntry, price_index: dict[tuple[str, str, str], Decimal]) -> Optional[Decimal]:
    """
    Labour charge for a returned (IN) quantity: qty_in x price per kg.
    Returns None for OUT entries and when the vendor has no price for this
    exact wire and design.
    """
    if entry.direction != "IN":
        return None
    price = price_index.get((entry.vendor, entry.wire, entry.design))
    if not price:
        return None
    return entry.qty_in * price


def labour_charges(entries: Iterable[LedgerEntry], vendors: Iterable[Vendor]) -> dict[int, Decimal]:
    """Computed charges by sequence number, for the entries that have one."""
    index = build_price_index(vendors)
    charges = {}
    for entry in entries:
        charge = labour_charge(entry, index)
        if charge is not None:
            charges[entry.seq] = charge
    return charges
