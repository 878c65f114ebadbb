import sqlite3

import pytest

from conftest import OWNER, make_record


def test_settings_are_seeded(db):
    assert db.get_setting("currency_symbol") == "₹"
    assert db.get_setting("rollover_atomic") == "0"
    assert db.get_setting("missing", "x") == "x"


def test_set_setting(db):
    db.set_setting("rollover_atomic", "1")

    assert db.get_setting("rollover_atomic") == "1"


def test_initialize_is_idempotent(db):
    db.set_setting("currency_symbol", "$")
    db.initialize()

    assert db.get_setting("currency_symbol") == "$"


def test_transaction_rolls_back_on_error(db, tx_dao):
    with pytest.raises(RuntimeError):
        with db.transaction():
            tx_dao.insert(OWNER, make_record("2024-03-01"))
            raise RuntimeError("boom")

    assert tx_dao.list_active(OWNER) == []


def test_insert_many_is_all_or_nothing(tx_dao):
    good = make_record("2024-03-01")
    bad = make_record("2024-03-02", category="")

    with pytest.raises(sqlite3.IntegrityError):
        tx_dao.insert_many(OWNER, [good, bad])

    assert tx_dao.list_active(OWNER) == []


def test_file_database(tmp_path):
    from database.db_manager import DatabaseManager

    path = tmp_path / "budget.db"
    db = DatabaseManager.open(str(path))
    db.set_setting("currency_symbol", "$")
    db.close()

    reopened = DatabaseManager.open(str(path))
    assert reopened.get_setting("currency_symbol") == "$"
    reopened.close()
