"""
Property checks over generated transaction snapshots.
"""

from collections import defaultdict
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from hypothesis import HealthCheck, given, settings as hypothesis_settings, strategies as st

from wire_ledger.filters import LedgerFilter, apply_filters
from wire_ledger.matching import compute_ledger
from wire_ledger.pagination import paginate, prefix_totals

CREATED_BASE = datetime(2024, 1, 1, tzinfo=timezone.utc)

movements = st.lists(
    st.tuples(
        st.sampled_from(["Ravi", "Meena"]),
        st.sampled_from(["20 Gauge", "18 Gauge", "Silver 22"]),
        st.sampled_from(["OUT", "IN"]),
        st.integers(min_value=0, max_value=25),
        st.integers(min_value=0, max_value=40),
    ),
    max_size=60,
)


def _rows(moves):
    rows = []
    for n, (vendor, item, type_, qty, day_offset) in enumerate(moves):
        day = (date(2024, 1, 1) + timedelta(days=day_offset)).isoformat()
        rows.append(
            {
                "id": n,
                "vendor": vendor,
                "item": item,
                "qty": qty,
                "type": type_,
                "outDate" if type_ == "OUT" else "inDate": day,
                "createdAt": (CREATED_BASE + timedelta(seconds=n)).isoformat(),
            }
        )
    return rows


@hypothesis_settings(max_examples=75, deadline=None, suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(movements)
def test_batch_conservation(moves):
    state = compute_ledger(_rows(moves))

    matched_by_key = defaultdict(Decimal)
    issued_by_key = defaultdict(Decimal)
    for entry in state.entries:
        key = (entry.vendor, entry.wire)
        matched_by_key[key] += sum((m.qty for m in entry.matches), Decimal(0))
        issued_by_key[key] += entry.qty_out

    for key in issued_by_key:
        batches = state.batches_for(*key)
        assert all(batch.remaining_qty >= 0 for batch in batches)
        assert sum((b.matched_qty for b in batches), Decimal(0)) == matched_by_key[key]
        assert matched_by_key[key] <= issued_by_key[key]

    for batch in state.batches.values():
        assert (batch.status == "completed") == (batch.remaining_qty == 0)


@hypothesis_settings(max_examples=75, deadline=None, suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(movements)
def test_oldest_batch_depleted_first(moves):
    state = compute_ledger(_rows(moves))

    keys = {(b.vendor, b.wire) for b in state.batches.values()}
    for key in keys:
        batches = state.batches_for(*key)
        for older, newer in zip(batches, batches[1:]):
            if older.remaining_qty > 0:
                assert newer.remaining_qty == newer.original_qty


@hypothesis_settings(max_examples=50, deadline=None, suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(movements)
def test_recompute_is_idempotent(moves):
    rows = _rows(moves)
    first = compute_ledger(rows)
    second = compute_ledger(rows)

    assert [e.model_dump() for e in first.entries] == [e.model_dump() for e in second.entries]
    assert {k: b.model_dump() for k, b in first.batches.items()} == {
        k: b.model_dump() for k, b in second.batches.items()
    }
    assert first.balances == second.balances


@hypothesis_settings(max_examples=50, deadline=None, suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(movements)
def test_vendor_balance_equals_cumulative_out_minus_in(moves):
    state = compute_ledger(_rows(moves))

    running = defaultdict(Decimal)
    for entry in state.entries:
        running[entry.vendor] += entry.qty_out - entry.qty_in
        assert entry.balance == running[entry.vendor]


@hypothesis_settings(max_examples=50, deadline=None, suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(
    movements,
    st.integers(min_value=1, max_value=7),
    st.sampled_from([None, "Ravi"]),
    st.sampled_from([None, "gauge"]),
)
def test_pages_reassemble_the_filtered_ledger(moves, page_size, vendor, wire):
    state = compute_ledger(_rows(moves))
    filtered = apply_filters(state.entries, LedgerFilter(vendor=vendor, wire=wire))
    pages = paginate(filtered, page_size)

    assert [e for page in pages for e in page] == filtered
    assert all(0 < len(page) <= page_size for page in pages)

    for number in range(2, len(pages) + 1):
        before = [e for page in pages[: number - 1] for e in page]
        prefix = prefix_totals(filtered, number, page_size)
        assert prefix.total_out == sum((e.qty_out for e in before), Decimal(0))
        assert prefix.total_in == sum((e.qty_in for e in before), Decimal(0))
        assert prefix.balance == prefix.total_out - prefix.total_in
