from database.db_manager import DatabaseManager


class RolloverDAO:
    """Per-owner last_reset_month marker."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    def get_marker(self, owner_id: str) -> str | None:
        row = self._db.query_one(
            "SELECT last_reset_month FROM rollover_markers WHERE owner_id = ?",
            (owner_id,),
        )
        return row["last_reset_month"] if row else None

    def set_marker(self, owner_id: str, month: str) -> None:
        with self._db.transaction() as conn:
            conn.execute(
                """INSERT INTO rollover_markers(owner_id, last_reset_month)
                   VALUES (?, ?)
                   ON CONFLICT(owner_id)
                   DO UPDATE SET last_reset_month = excluded.last_reset_month""",
                (owner_id, month),
            )
