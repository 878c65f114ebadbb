import sqlite3
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime
from database.db_manager import DatabaseManager
from database.transaction_dao import TransactionDAO
from database.archive_dao import ArchiveDAO
from database.rollover_dao import RolloverDAO
from models.rollover import RolloverResult
from models.transaction import TransactionRecord
from utils.constants import ROLLOVER_MAX_WORKERS
from utils.date_helpers import month_key
from utils.logging_setup import get_logger

logger = get_logger("budget_tracker.rollover")


class RolloverError(RuntimeError):
    """The rollover marker could not be written, or an atomic rollover was rolled back."""


class MonthlyRolloverPolicy:
    """Archives and clears an owner's active set once per calendar month.

    Default mode keeps at-least-once semantics: each record's copy+delete is an
    independent job on a thread pool, failures are logged and collected, and
    the marker is written afterwards regardless. A record whose delete failed
    stays in the active set and also exists in the archive; a failed marker
    write means the next call archives again.

    ``atomic=True`` instead runs every copy, delete and the marker write inside
    one database transaction: all of it happens or none of it does.

    Concurrent calls for the same owner are not excluded from each other.
    """

    def __init__(
        self,
        db: DatabaseManager,
        tx_dao: TransactionDAO,
        archive_dao: ArchiveDAO,
        rollover_dao: RolloverDAO,
        atomic: bool = False,
        max_workers: int = ROLLOVER_MAX_WORKERS,
    ):
        self._db = db
        self._tx_dao = tx_dao
        self._archive_dao = archive_dao
        self._rollover_dao = rollover_dao
        self._atomic = atomic
        self._max_workers = max(1, max_workers)

    def maybe_rollover(self, owner_id: str, now: date | datetime) -> RolloverResult:
        current = month_key(now)
        last = self._read_marker(owner_id)
        if last == current:
            return RolloverResult(rolled_over=False, moved_count=0, month=current)

        active = self._tx_dao.list_active(owner_id)
        logger.info(
            "rolling over %d transaction(s) for %s (last=%s, current=%s)",
            len(active), owner_id, last, current,
        )
        if self._atomic:
            self._archive_atomically(owner_id, active, current)
            failed: list[int] = []
        else:
            failed = self._archive_concurrently(owner_id, active)
            self._write_marker(owner_id, current)

        if failed:
            logger.warning(
                "rollover for %s finished with %d failed record(s): %s",
                owner_id, len(failed), failed,
            )
        return RolloverResult(
            rolled_over=True, moved_count=len(active), month=current, failed_ids=failed
        )

    def _read_marker(self, owner_id: str) -> str | None:
        try:
            return self._rollover_dao.get_marker(owner_id)
        except sqlite3.Error:
            logger.warning("could not read rollover marker for %s; treating as never rolled over",
                           owner_id, exc_info=True)
            return None

    def _write_marker(self, owner_id: str, month: str) -> None:
        try:
            self._rollover_dao.set_marker(owner_id, month)
        except sqlite3.Error as e:
            logger.error("could not write rollover marker %s for %s", month, owner_id)
            raise RolloverError(f"Failed to record rollover for {month}: {e}") from e

    def _archive_concurrently(self, owner_id: str, records: list[TransactionRecord]) -> list[int]:
        if not records:
            return []
        workers = min(self._max_workers, len(records))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [pool.submit(self._move_one, owner_id, r) for r in records]
            outcomes = [f.result() for f in futures]
        return [r.id for r, ok in zip(records, outcomes) if not ok]

    def _move_one(self, owner_id: str, record: TransactionRecord) -> bool:
        try:
            self._archive_dao.append(owner_id, record)
        except sqlite3.Error:
            logger.warning("archive copy failed for transaction %s", record.id, exc_info=True)
            return False
        try:
            deleted = self._tx_dao.delete(owner_id, record.id)
        except sqlite3.Error:
            logger.warning("delete failed for archived transaction %s", record.id, exc_info=True)
            return False
        if not deleted:
            logger.warning("transaction %s vanished before it could be deleted", record.id)
        return True

    def _archive_atomically(
        self, owner_id: str, records: list[TransactionRecord], month: str
    ) -> None:
        try:
            with self._db.transaction():
                for record in records:
                    self._archive_dao.append(owner_id, record)
                    if not self._tx_dao.delete(owner_id, record.id):
                        raise sqlite3.IntegrityError(f"transaction {record.id} not found")
                self._rollover_dao.set_marker(owner_id, month)
        except sqlite3.Error as e:
            logger.error("atomic rollover for %s rolled back", owner_id)
            raise RolloverError(f"Rollover for {month} rolled back: {e}") from e
