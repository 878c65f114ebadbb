import pytest

from conftest import OWNER
from models.transaction import Recurrence


def test_add_single_expense_is_stored_negative(tx_service, tx_dao):
    records = tx_service.add_entry(OWNER, "expense", "Food", "250", "2024-03-10", note=" lunch ")

    assert len(records) == 1
    rec = records[0]
    assert rec.id is not None
    assert rec.amount == -250.0
    assert rec.note == "lunch"
    assert rec.recurrence is None
    assert rec.created_at
    assert tx_dao.list_active(OWNER) == records


def test_income_is_stored_positive(tx_service):
    (rec,) = tx_service.add_entry(OWNER, "income", "Salary", 50000, "2024-03-01")

    assert rec.amount == 50000.0
    assert rec.kind == "income"


def test_recurring_entry_is_expanded_and_persisted(tx_service, tx_dao):
    records = tx_service.add_entry(
        OWNER, "expense", "Bills", 499, "2024-01-31",
        frequency="Monthly", end_date="2024-04-30",
    )

    assert [r.date for r in records] == ["2024-01-31", "2024-02-29", "2024-03-29", "2024-04-29"]
    assert {r.recurrence for r in records} == {Recurrence("monthly", "2024-04-30")}
    assert len({r.id for r in records}) == 4
    assert len(tx_dao.list_active(OWNER)) == 4


def test_recurring_without_end_date_stores_anchor(tx_service):
    records = tx_service.add_entry(OWNER, "income", "Salary", 100, "2024-03-10", frequency="weekly")

    assert len(records) == 1
    assert records[0].recurrence == Recurrence("weekly", None)


@pytest.mark.parametrize(
    "kind, category, amount, date, message",
    [
        ("expense", "", "10", "2024-03-10", "Category is required."),
        ("expense", "   ", "10", "2024-03-10", "Category is required."),
        ("expense", "Food", "", "2024-03-10", "Amount is required."),
        ("expense", "Food", None, "2024-03-10", "Amount is required."),
        ("expense", "Food", "abc", "2024-03-10", "Amount must be a positive number."),
        ("expense", "Food", "0", "2024-03-10", "Amount must be a positive number."),
        ("expense", "Food", -5, "2024-03-10", "Amount must be a positive number."),
        ("expense", "Food", "nan", "2024-03-10", "Amount must be a positive number."),
        ("expense", "Food", "10", "", "Date is required."),
        ("expense", "Food", "10", "10th March", "Invalid date."),
        ("transfer", "Food", "10", "2024-03-10", "Type must be income or expense."),
    ],
)
def test_validation_messages(tx_service, tx_dao, kind, category, amount, date, message):
    with pytest.raises(ValueError, match=message):
        tx_service.add_entry(OWNER, kind, category, amount, date)
    assert tx_dao.list_active(OWNER) == []


def test_invalid_frequency_rejected(tx_service):
    with pytest.raises(ValueError, match="Invalid frequency"):
        tx_service.add_entry(OWNER, "expense", "Food", 1, "2024-03-10", frequency="hourly")


def test_invalid_end_date_rejected(tx_service):
    with pytest.raises(ValueError, match="Invalid end date"):
        tx_service.add_entry(OWNER, "expense", "Food", 1, "2024-03-10", frequency="daily", end_date="soon")


def test_delete(tx_service, tx_dao):
    (rec,) = tx_service.add_entry(OWNER, "expense", "Food", 1, "2024-03-10")

    tx_service.delete(OWNER, rec.id)

    assert tx_dao.list_active(OWNER) == []


def test_delete_missing_or_foreign_raises(tx_service):
    (rec,) = tx_service.add_entry(OWNER, "expense", "Food", 1, "2024-03-10")

    with pytest.raises(ValueError, match="not found"):
        tx_service.delete("someone-else", rec.id)
    with pytest.raises(ValueError, match="not found"):
        tx_service.delete(OWNER, rec.id + 100)
