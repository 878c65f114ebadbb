from dataclasses import dataclass, field

from models.transaction import TransactionRecord


@dataclass
class Summary:
    income: float = 0.0
    expenses: float = 0.0   # magnitude, always >= 0

    @property
    def balance(self) -> float:
        return self.income - self.expenses


@dataclass
class TransactionPage:
    items: list[TransactionRecord]
    page: int
    total_pages: int
    total_count: int
    summary: Summary
    viewing_archived: bool = False
    archive_month: str | None = None
    categories: list[str] = field(default_factory=list)
