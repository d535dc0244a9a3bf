from decimal import Decimal

from wire_ledger.matching import compute_ledger
from wire_ledger.pricing import build_price_index, labour_charge, labour_charges
from wire_ledger.schemas import Vendor


def _vendors(raw):
    return [Vendor.model_validate(v) for v in raw]


def test_price_index_keys_by_vendor_wire_and_design(vendors):
    index = build_price_index(_vendors(vendors))
    assert index == {
        ("Ravi", "20 Gauge", "Kada"): Decimal(150),
        ("Ravi", "18 Gauge", "Chain"): Decimal(200),
    }


def test_charge_is_returned_qty_times_price(txn, vendors):
    state = compute_ledger([txn("OUT", 10), txn("IN", "2.5")])
    index = build_price_index(_vendors(vendors))

    assert labour_charge(state.entries[1], index) == Decimal("375.0")
    assert labour_charge(state.entries[0], index) is None


def test_no_charge_without_exact_design_match(txn, vendors):
    state = compute_ledger([txn("OUT", 10, design="Chain"), txn("IN", 2, design="Chain")])
    index = build_price_index(_vendors(vendors))

    assert labour_charge(state.entries[1], index) is None


def test_charges_by_sequence_number(txn, vendors):
    state = compute_ledger(
        [
            txn("OUT", 10),
            txn("IN", 2),
            txn("IN", 1, vendor="Meena"),
            txn("IN", 1, item="18 Gauge", design="Chain"),
        ]
    )
    assert labour_charges(state.entries, _vendors(vendors)) == {2: Decimal(300), 4: Decimal(200)}
