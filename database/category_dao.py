from typing import Optional
from database.db_manager import DatabaseManager
from models.category import Category


class CategoryDAO:
    """User-defined categories; the built-in lists live in utils.constants."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Category:
        return Category(id=row["id"], name=row["name"], kind="both", is_custom=True)

    def get_custom(self, owner_id: str) -> list[Category]:
        rows = self._db.query(
            "SELECT * FROM custom_categories WHERE owner_id = ? ORDER BY id",
            (owner_id,),
        )
        return [self._row_to_model(r) for r in rows]

    def get_by_name(self, owner_id: str, name: str) -> Optional[Category]:
        row = self._db.query_one(
            "SELECT * FROM custom_categories WHERE owner_id = ? AND name = ?",
            (owner_id, name),
        )
        return self._row_to_model(row) if row else None

    def create(self, owner_id: str, name: str) -> Category:
        with self._db.transaction() as conn:
            cursor = conn.execute(
                "INSERT INTO custom_categories(owner_id, name) VALUES (?, ?)",
                (owner_id, name),
            )
        return Category(id=cursor.lastrowid, name=name, kind="both", is_custom=True)

    def delete(self, owner_id: str, name: str) -> bool:
        with self._db.transaction() as conn:
            cursor = conn.execute(
                "DELETE FROM custom_categories WHERE owner_id = ? AND name = ?",
                (owner_id, name),
            )
        return cursor.rowcount > 0
