from typing import Optional
from database.db_manager import DatabaseManager
from models.transaction import Recurrence, TransactionRecord
from utils.date_helpers import now_iso


def recurrence_from_row(row) -> Optional[Recurrence]:
    if not row["recurrence_frequency"]:
        return None
    return Recurrence(
        frequency=row["recurrence_frequency"],
        end_date=row["recurrence_end_date"],
    )


def recurrence_params(recurrence: Optional[Recurrence]) -> tuple:
    if recurrence is None:
        return (None, None)
    return (recurrence.frequency, recurrence.end_date)


class TransactionDAO:
    """Active transaction set, scoped by owner_id."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> TransactionRecord:
        return TransactionRecord(
            id=row["id"],
            owner_id=row["owner_id"],
            kind=row["kind"],
            category=row["category"],
            amount=row["amount"],
            date=row["date"],
            note=row["note"],
            recurrence=recurrence_from_row(row),
            created_at=row["created_at"],
        )

    def list_active(self, owner_id: str) -> list[TransactionRecord]:
        rows = self._db.query(
            "SELECT * FROM transactions WHERE owner_id = ? ORDER BY date ASC, id ASC",
            (owner_id,),
        )
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, owner_id: str, tx_id: int) -> Optional[TransactionRecord]:
        row = self._db.query_one(
            "SELECT * FROM transactions WHERE owner_id = ? AND id = ?",
            (owner_id, tx_id),
        )
        return self._row_to_model(row) if row else None

    def insert(self, owner_id: str, record: TransactionRecord) -> TransactionRecord:
        created_at = now_iso()
        with self._db.transaction() as conn:
            cursor = conn.execute(
                """INSERT INTO transactions
                   (owner_id, kind, category, amount, date, note,
                    recurrence_frequency, recurrence_end_date, created_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    owner_id, record.kind, record.category, record.amount,
                    record.date, record.note,
                    *recurrence_params(record.recurrence),
                    created_at,
                ),
            )
        return TransactionRecord(
            id=cursor.lastrowid,
            owner_id=owner_id,
            kind=record.kind,
            category=record.category,
            amount=record.amount,
            date=record.date,
            note=record.note,
            recurrence=record.recurrence,
            created_at=created_at,
        )

    def insert_many(
        self, owner_id: str, records: list[TransactionRecord]
    ) -> list[TransactionRecord]:
        """Insert all records in one transaction; none are stored if any insert fails."""
        with self._db.transaction():
            return [self.insert(owner_id, r) for r in records]

    def delete(self, owner_id: str, tx_id: int) -> bool:
        with self._db.transaction() as conn:
            cursor = conn.execute(
                "DELETE FROM transactions WHERE owner_id = ? AND id = ?",
                (owner_id, tx_id),
            )
        return cursor.rowcount > 0

    def count(self, owner_id: str) -> int:
        row = self._db.query_one(
            "SELECT COUNT(*) AS n FROM transactions WHERE owner_id = ?", (owner_id,)
        )
        return row["n"]
