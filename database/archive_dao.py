from database.db_manager import DatabaseManager
from database.transaction_dao import recurrence_from_row, recurrence_params
from models.archive import ArchivedTransaction
from models.transaction import TransactionRecord
from utils.date_helpers import month_of, now_iso


class ArchiveDAO:
    """Append-only archive partitions keyed by (owner_id, archive_month).

    The month is taken from each record's own date, so a backdated entry
    archived by a later rollover joins an already written partition. Partitions
    are append-only, not write-once.
    """

    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> ArchivedTransaction:
        return ArchivedTransaction(
            id=row["id"],
            source_id=row["source_id"],
            owner_id=row["owner_id"],
            archive_month=row["archive_month"],
            kind=row["kind"],
            category=row["category"],
            amount=row["amount"],
            date=row["date"],
            note=row["note"],
            recurrence=recurrence_from_row(row),
            created_at=row["created_at"],
            archived_at=row["archived_at"],
        )

    def append(self, owner_id: str, record: TransactionRecord) -> ArchivedTransaction:
        """Copy record into the partition for the month of its date."""
        archive_month = month_of(record.date)
        archived_at = now_iso()
        with self._db.transaction() as conn:
            cursor = conn.execute(
                """INSERT INTO archived_transactions
                   (source_id, owner_id, archive_month, kind, category, amount,
                    date, note, recurrence_frequency, recurrence_end_date,
                    created_at, archived_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    record.id, owner_id, archive_month, record.kind,
                    record.category, record.amount, record.date, record.note,
                    *recurrence_params(record.recurrence),
                    record.created_at, archived_at,
                ),
            )
        return ArchivedTransaction(
            id=cursor.lastrowid,
            source_id=record.id,
            owner_id=owner_id,
            archive_month=archive_month,
            kind=record.kind,
            category=record.category,
            amount=record.amount,
            date=record.date,
            note=record.note,
            recurrence=record.recurrence,
            created_at=record.created_at,
            archived_at=archived_at,
        )

    def get_partition(self, owner_id: str, month: str) -> list[ArchivedTransaction]:
        rows = self._db.query(
            """SELECT * FROM archived_transactions
               WHERE owner_id = ? AND archive_month = ?
               ORDER BY date ASC, id ASC""",
            (owner_id, month),
        )
        return [self._row_to_model(r) for r in rows]

    def list_all(self, owner_id: str) -> list[ArchivedTransaction]:
        rows = self._db.query(
            "SELECT * FROM archived_transactions WHERE owner_id = ? ORDER BY date ASC, id ASC",
            (owner_id,),
        )
        return [self._row_to_model(r) for r in rows]

    def list_months(self, owner_id: str) -> list[str]:
        rows = self._db.query(
            """SELECT DISTINCT archive_month FROM archived_transactions
               WHERE owner_id = ? ORDER BY archive_month DESC""",
            (owner_id,),
        )
        return [r["archive_month"] for r in rows]
