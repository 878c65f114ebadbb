"""Shared fixtures: a fresh in-memory database, DAOs and services per test.

The pre-DB config directory is redirected to the test's tmp_path so tests never
read or write ~/.budget_tracker, and the package logger is reset after each
test so CLI runs (which configure logging) do not leak into other tests.
"""

from __future__ import annotations

import logging

import pytest

import utils.logging_setup as logging_setup
from database.archive_dao import ArchiveDAO
from database.category_dao import CategoryDAO
from database.db_manager import DatabaseManager
from database.rollover_dao import RolloverDAO
from database.transaction_dao import TransactionDAO
from models.transaction import TransactionRecord, signed_amount
from services.category_service import CategoryService
from services.history_service import HistoryService
from services.rollover_service import MonthlyRolloverPolicy
from services.summary_service import SummaryService
from services.transaction_service import TransactionService
from utils.constants import LOGGER_NAME

OWNER = "user-1"


@pytest.fixture(autouse=True)
def _isolate_config(tmp_path, monkeypatch):
    monkeypatch.setenv("BUDGET_TRACKER_HOME", str(tmp_path / "config"))
    monkeypatch.delenv("BUDGET_TRACKER_DB", raising=False)
    monkeypatch.delenv("BUDGET_TRACKER_LOG_LEVEL", raising=False)
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    logging_setup._CONFIGURED = False


@pytest.fixture
def db():
    manager = DatabaseManager.open(":memory:")
    yield manager
    manager.close()


@pytest.fixture
def tx_dao(db):
    return TransactionDAO(db)


@pytest.fixture
def archive_dao(db):
    return ArchiveDAO(db)


@pytest.fixture
def rollover_dao(db):
    return RolloverDAO(db)


@pytest.fixture
def category_dao(db):
    return CategoryDAO(db)


@pytest.fixture
def tx_service(tx_dao):
    return TransactionService(tx_dao)


@pytest.fixture
def history_service(tx_dao, archive_dao):
    return HistoryService(tx_dao, archive_dao)


@pytest.fixture
def summary_service(tx_dao, archive_dao):
    return SummaryService(tx_dao, archive_dao)


@pytest.fixture
def category_service(category_dao):
    return CategoryService(category_dao)


@pytest.fixture
def policy(db, tx_dao, archive_dao, rollover_dao):
    return MonthlyRolloverPolicy(db, tx_dao, archive_dao, rollover_dao)


def make_record(
    date: str,
    amount: float = 10.0,
    kind: str = "expense",
    category: str = "Food",
    note: str = "",
    owner_id: str = OWNER,
) -> TransactionRecord:
    return TransactionRecord(
        id=None,
        owner_id=owner_id,
        kind=kind,
        category=category,
        amount=signed_amount(kind, amount),
        date=date,
        note=note,
    )


@pytest.fixture
def seed(tx_dao):
    """Insert records for OWNER (or another owner) and return the stored copies."""

    def _seed(*records: TransactionRecord) -> list[TransactionRecord]:
        return [tx_dao.insert(r.owner_id, r) for r in records]

    return _seed
