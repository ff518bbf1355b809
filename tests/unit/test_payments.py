"""Unit tests for payment application against the SQL record store"""

import pytest
from datetime import date, datetime
from decimal import Decimal
from budget_tracker.domain.bills import BillForm, bill_from_record, build_bill_record
from budget_tracker.domain.exceptions import BillNotFoundError, NotAnInstallmentBillError, RecordStoreError
from budget_tracker.domain.payments import apply_payment, schedule_payment
from budget_tracker.infrastructure.database.repositories import SqlRecordStore


async def fetch_bill(store: SqlRecordStore, bill_id: int):
    rows = await store.select("bills", filters={"id": bill_id})
    return bill_from_record(rows[0])


async def test_apply_payment_appends_history(store: SqlRecordStore, installment_bill_id: int):
    """Test a payment decrements the balance and appends date + amount"""
    bill = await apply_payment(
        store,
        installment_bill_id,
        amount=Decimal("50"),
        payment_date=date(2024, 3, 1),
        remaining_balance=Decimal("200"),
    )

    assert bill.remaining_balance == Decimal("150")
    assert bill.payment_dates == ["2024-03-01T00:00:00.000Z"]
    assert bill.payment_amounts == [Decimal("50")]

    stored = await fetch_bill(store, installment_bill_id)
    assert stored.remaining_balance == Decimal("150")
    assert stored.payment_dates == bill.payment_dates


async def test_sequential_payments_reconcile(store: SqlRecordStore, installment_bill_id: int):
    """Test N payments leave total_owed - sum(amounts) and parallel history lists"""
    amounts = [Decimal("50"), Decimal("30"), Decimal("20.50")]
    bill = await fetch_bill(store, installment_bill_id)

    for day, amount in enumerate(amounts, start=1):
        bill = await apply_payment(
            store,
            installment_bill_id,
            amount=amount,
            payment_date=date(2024, 3, day),
            remaining_balance=bill.remaining_balance,
        )

    assert bill.remaining_balance == Decimal("200") - sum(amounts)
    assert len(bill.payment_dates) == len(bill.payment_amounts) == len(amounts)
    assert bill.payment_amounts == amounts
    assert bill.payment_dates[-1] == "2024-03-03T00:00:00.000Z"


async def test_overpayment_goes_negative(store: SqlRecordStore):
    """Test payments larger than the balance are not rejected"""
    rows = await store.insert(
        "bills",
        [build_bill_record(BillForm(name="Store Card", amount="10", due_date="2024-03-10", total_owed="30"))],
    )

    bill = await apply_payment(
        store,
        rows[0]["id"],
        amount=Decimal("50"),
        payment_date=date(2024, 3, 1),
        remaining_balance=Decimal("30"),
    )

    assert bill.remaining_balance == Decimal("-20")


async def test_stale_caller_balance_is_trusted(store: SqlRecordStore, installment_bill_id: int):
    """Test the new balance comes from the caller's value, not the fresh read"""
    for _ in range(2):
        bill = await apply_payment(
            store,
            installment_bill_id,
            amount=Decimal("50"),
            payment_date=date(2024, 3, 1),
            remaining_balance=Decimal("200"),
        )

    assert bill.remaining_balance == Decimal("150")
    assert len(bill.payment_amounts) == 2


async def test_omitted_balance_uses_stored_value(store: SqlRecordStore, installment_bill_id: int):
    """Test the stored remaining_balance is used when the caller sends none"""
    await apply_payment(store, installment_bill_id, amount=Decimal("50"), payment_date=date(2024, 3, 1))
    bill = await apply_payment(store, installment_bill_id, amount=Decimal("50"), payment_date=date(2024, 3, 2))

    assert bill.remaining_balance == Decimal("100")


async def test_apply_payment_requires_installment_bill(store: SqlRecordStore):
    """Test plain bills cannot take immediate payments"""
    rows = await store.insert("bills", [build_bill_record(BillForm(name="Rent", amount="1200", due_date="2024-03-01"))])

    with pytest.raises(NotAnInstallmentBillError):
        await apply_payment(store, rows[0]["id"], amount=Decimal("100"), payment_date=date(2024, 3, 1))


async def test_apply_payment_missing_bill(store: SqlRecordStore):
    with pytest.raises(BillNotFoundError):
        await apply_payment(store, 999, amount=Decimal("10"), payment_date=date(2024, 3, 1))


async def test_read_modify_write_loses_concurrent_payment(db, installment_bill_id: int):
    """Test a payment landing between the read and the write is overwritten"""

    class InterleavingStore(SqlRecordStore):
        """Lets a competing payment commit between the read and the write"""

        raced = False

        async def update(self, table, values, filters):
            if not self.raced:
                self.raced = True
                await apply_payment(
                    SqlRecordStore(self.db),
                    filters["id"],
                    amount=Decimal("10"),
                    payment_date=date(2024, 3, 2),
                    remaining_balance=Decimal("200"),
                )
            return await super().update(table, values, filters)

    bill = await apply_payment(
        InterleavingStore(db),
        installment_bill_id,
        amount=Decimal("20"),
        payment_date=date(2024, 3, 1),
        remaining_balance=Decimal("200"),
    )

    # Last writer wins: the competing $10 payment is gone
    assert bill.payment_amounts == [Decimal("20")]
    assert bill.remaining_balance == Decimal("180")


async def test_atomic_payments_use_stored_balance(store: SqlRecordStore, installment_bill_id: int):
    """Test atomic mode derives the balance from the row, ignoring stale input"""
    for day in (1, 2):
        bill = await apply_payment(
            store,
            installment_bill_id,
            amount=Decimal("50"),
            payment_date=date(2024, 3, day),
            remaining_balance=Decimal("200"),
            atomic=True,
        )

    assert bill.remaining_balance == Decimal("100")
    assert bill.payment_dates == ["2024-03-01T00:00:00.000Z", "2024-03-02T00:00:00.000Z"]
    assert bill.payment_amounts == [Decimal("50"), Decimal("50")]


async def test_atomic_payment_missing_bill(store: SqlRecordStore):
    with pytest.raises(BillNotFoundError):
        await apply_payment(store, 999, amount=Decimal("10"), payment_date=date(2024, 3, 1), atomic=True)


async def test_schedule_payment_leaves_bill_untouched(store: SqlRecordStore, installment_bill_id: int):
    """Test scheduling inserts a row and never mutates the bill"""
    before = await fetch_bill(store, installment_bill_id)

    scheduled = await schedule_payment(
        store,
        installment_bill_id,
        amount=Decimal("75"),
        due_date=datetime(2024, 4, 1, 15, 45),
    )

    assert scheduled.id is not None
    assert scheduled.bill_id == installment_bill_id
    assert scheduled.amount == Decimal("75")
    assert scheduled.due_date == date(2024, 4, 1)

    rows = await store.select("scheduled_payments", filters={"bill_id": installment_bill_id})
    assert rows[0]["due_date"] == "2024-04-01"

    after = await fetch_bill(store, installment_bill_id)
    assert after.remaining_balance == before.remaining_balance
    assert after.payment_dates == before.payment_dates
    assert after.payment_amounts == before.payment_amounts


async def test_read_failure_aborts_before_write():
    """Test a failed read skips the write step"""

    class UnavailableStore:
        updates = 0

        async def select(self, table, filters=None, order_by=None, ascending=True, columns=None):
            raise RecordStoreError("connection refused", table=table, operation="select")

        async def update(self, table, values, filters):
            self.updates += 1
            return []

    unavailable = UnavailableStore()
    with pytest.raises(RecordStoreError):
        await apply_payment(unavailable, 1, amount=Decimal("10"), payment_date=date(2024, 3, 1))

    assert unavailable.updates == 0


async def test_delete_bill_keeps_other_histories(store: SqlRecordStore, installment_bill_id: int):
    """Test deleting one bill leaves the others and their payment history intact"""
    other = await store.insert(
        "bills",
        [build_bill_record(BillForm(name="Laptop", amount="100", due_date="2024-03-20", total_owed="900"))],
    )
    other_id = other[0]["id"]
    await apply_payment(store, other_id, amount=Decimal("100"), payment_date=date(2024, 3, 1))
    await schedule_payment(store, installment_bill_id, amount=Decimal("50"), due_date=date(2024, 4, 1))

    await store.delete("bills", filters={"id": installment_bill_id})

    remaining = await store.select("bills")
    assert [r["id"] for r in remaining] == [other_id]
    survivor = bill_from_record(remaining[0])
    assert survivor.payment_amounts == [Decimal("100")]
    assert survivor.remaining_balance == Decimal("800")
    assert await store.select("scheduled_payments", filters={"bill_id": installment_bill_id}) == []


async def test_schedule_payment_missing_bill(store: SqlRecordStore):
    """Test scheduling against an unknown bill inserts nothing"""
    with pytest.raises(BillNotFoundError):
        await schedule_payment(store, 999, amount=Decimal("50"), due_date=date(2024, 4, 1))

    assert await store.select("scheduled_payments") == []
