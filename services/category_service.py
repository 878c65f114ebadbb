from database.category_dao import CategoryDAO
from models.category import Category
from utils.constants import DEFAULT_EXPENSE_CATEGORIES, DEFAULT_INCOME_CATEGORIES


class CategoryService:
    def __init__(self, category_dao: CategoryDAO):
        self._dao = category_dao

    def defaults(self, kind: str) -> list[Category]:
        names = DEFAULT_INCOME_CATEGORIES if kind == "income" else DEFAULT_EXPENSE_CATEGORIES
        return [Category(name=n, kind=kind) for n in names]

    def get_custom(self, owner_id: str) -> list[Category]:
        return self._dao.get_custom(owner_id)

    def for_kind(self, owner_id: str, kind: str) -> list[Category]:
        """Built-in categories for the kind, then the owner's custom ones."""
        return self.defaults(kind) + self._dao.get_custom(owner_id)

    def add_custom(self, owner_id: str, name: str) -> Category:
        name = (name or "").strip()
        if not name:
            raise ValueError("Category name cannot be empty.")
        existing = set(DEFAULT_EXPENSE_CATEGORIES) | set(DEFAULT_INCOME_CATEGORIES)
        existing |= {c.name for c in self._dao.get_custom(owner_id)}
        if name in existing:
            raise ValueError(f"A category named '{name}' already exists.")
        return self._dao.create(owner_id, name)

    def remove_custom(self, owner_id: str, name: str):
        if not self._dao.delete(owner_id, name.strip()):
            raise ValueError(f"No custom category named '{name}'.")
