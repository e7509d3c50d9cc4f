from datetime import datetime, timedelta, timezone
from decimal import Decimal

from src.academic_ledger.academic_ledger.core.enums import FeeKind, FeeStatus
from src.academic_ledger.academic_ledger.fees.model import FeeTransaction, fold_fee_totals
from src.academic_ledger.academic_ledger.fees.reconciler import FeeReconciler


def _tx(period, total_due, paid, paid_at=None, kind=FeeKind.TUITION, person_id="KCSE202101"):
    return FeeTransaction(
        person_id=person_id,
        period=period,
        kind=kind,
        total_due=Decimal(str(total_due)),
        amount_paid=Decimal(str(paid)),
        timestamp=paid_at,
    )


def test_inconsistent_totals_use_largest_and_walk_in_time_order():
    txs = [
        _tx("2023-2024", 70000, 20000, datetime(2023, 11, 1)),
        _tx("2023-2024", 75000, 40000, datetime(2023, 8, 1)),
    ]

    ledger = FeeReconciler().reconcile(txs, kind=FeeKind.TUITION)

    latest = ledger.latest_rows()
    assert len(latest) == 1
    assert latest[0].total_due == Decimal("75000")
    assert latest[0].running_paid == Decimal("60000")
    assert latest[0].due_balance == Decimal("15000")
    assert latest[0].status == FeeStatus.PARTIAL
    assert ledger.status == FeeStatus.PARTIAL


def test_running_balance_never_increases_and_stays_non_negative():
    txs = [
        _tx("2023-2024", 50000, 20000, datetime(2023, 8, 1)),
        _tx("2023-2024", 50000, 20000, datetime(2023, 9, 1)),
        _tx("2023-2024", 50000, 20000, datetime(2023, 10, 1)),
    ]

    ledger = FeeReconciler().reconcile(txs, kind=FeeKind.TUITION)
    walked = sorted(ledger.rows, key=lambda r: r.sequence)

    dues = [r.due_balance for r in walked]
    assert dues == sorted(dues, reverse=True)
    assert all(d >= 0 for d in dues)
    assert walked[-1].status == FeeStatus.PAID


def test_status_matches_balance():
    txs = [
        _tx("2022-2023", 10000, 0),
        _tx("2023-2024", 10000, 4000, datetime(2023, 8, 1)),
        _tx("2024-2025", 10000, 10000, datetime(2024, 8, 1)),
    ]

    ledger = FeeReconciler().reconcile(txs, kind=FeeKind.TUITION)

    for r in ledger.rows:
        assert (r.status == FeeStatus.PAID) == (r.due_balance == 0)
        if r.due_balance > 0:
            assert (r.status == FeeStatus.DUE) == (r.running_paid == 0)


def test_rows_without_timestamp_are_walked_first():
    txs = [
        _tx("2023-2024", 30000, 10000, datetime(2023, 9, 1)),
        _tx("2023-2024", 30000, 5000),
    ]

    ledger = FeeReconciler().reconcile(txs, kind=FeeKind.TUITION)
    walked = sorted(ledger.rows, key=lambda r: r.sequence)

    assert walked[0].timestamp is None
    assert walked[0].running_paid == Decimal("5000")
    assert walked[1].running_paid == Decimal("15000")


def test_missing_scheduled_year_is_gap_filled_as_due():
    ledger = FeeReconciler().reconcile(
        [],
        kind=FeeKind.TUITION,
        person_id="KECE202201",
        expected_periods=["2022-2023"],
        schedule_amount=Decimal("70000"),
    )

    assert len(ledger.rows) == 1
    row = ledger.rows[0]
    assert row.synthetic
    assert row.amount_paid == 0
    assert row.due_balance == Decimal("70000")
    assert row.status == FeeStatus.DUE


def test_exam_fees_are_never_gap_filled():
    ledger = FeeReconciler().reconcile(
        [],
        kind=FeeKind.EXAM,
        person_id="KCSE202101",
        expected_periods=["2021-2022"],
        schedule_amount=Decimal("1500"),
    )

    assert ledger.rows == ()


def test_other_fee_kinds_are_ignored_and_malformed_counted():
    txs = [
        _tx("2023-2024", 30000, 30000, datetime(2023, 9, 1)),
        _tx("2023-2024", 1200, 0, kind=FeeKind.EXAM),
        _tx(None, 30000, 100),
        _tx("  ", 30000, 100),
    ]

    ledger = FeeReconciler().reconcile(txs, kind=FeeKind.TUITION)

    assert len(ledger.rows) == 1
    assert ledger.skipped == 2


def test_totals_use_latest_row_per_period():
    txs = [
        _tx("2023-2024", 30000, 10000, datetime(2023, 8, 1)),
        _tx("2023-2024", 30000, 10000, datetime(2023, 9, 1)),
    ]

    totals = FeeReconciler().reconcile(txs, kind=FeeKind.TUITION).totals()

    assert totals.total_fees == Decimal("30000")
    assert totals.paid_amount == Decimal("20000")
    assert totals.due_amount == Decimal("10000")
    assert totals.partial_count == 1


def test_fold_counts_each_person_once():
    reconciler = FeeReconciler()
    paid = reconciler.reconcile([_tx("2023-2024", 100, 100, datetime(2023, 8, 1))], kind=FeeKind.TUITION)
    due = reconciler.reconcile([_tx("2023-2024", 100, 0, person_id="KCSE202102")], kind=FeeKind.TUITION)

    totals = fold_fee_totals([paid, due])

    assert (totals.paid_count, totals.partial_count, totals.due_count) == (1, 0, 1)
    assert totals.due_amount == Decimal("100")


def test_offset_aware_and_naive_payments_share_a_period():
    ist = timezone(timedelta(hours=5, minutes=30))
    txs = [
        _tx("2023-2024", 50000, 30000, datetime(2023, 9, 2, 10)),
        _tx("2023-2024", 50000, 10000, datetime(2023, 9, 1, 10, tzinfo=ist)),
    ]

    ledger = FeeReconciler().reconcile(txs, kind=FeeKind.TUITION)
    walked = sorted(ledger.rows, key=lambda r: r.sequence)

    assert [r.amount_paid for r in walked] == [Decimal("10000"), Decimal("30000")]
    assert walked[-1].due_balance == Decimal("10000")
