from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Recurrence:
    frequency: str              # 'daily' | 'weekly' | 'monthly' | 'yearly'
    end_date: Optional[str] = None   # 'YYYY-MM-DD', inclusive


@dataclass(frozen=True)
class TransactionTemplate:
    """User-entered fields shared by every record of one entry."""
    owner_id: str
    kind: str               # 'expense' | 'income'
    category: str
    amount: float           # signed: negative for expenses
    note: str = ""


@dataclass
class TransactionRecord:
    id: Optional[int]
    owner_id: str
    kind: str               # 'expense' | 'income'
    category: str
    amount: float           # signed: negative for expenses
    date: str               # 'YYYY-MM-DD'
    note: str = ""
    recurrence: Optional[Recurrence] = None
    created_at: str = ""

    @property
    def is_expense(self) -> bool:
        return self.amount < 0

    @property
    def month(self) -> str:
        return self.date[:7]


def signed_amount(kind: str, magnitude: float) -> float:
    """Expenses are stored negative, income positive."""
    return -abs(magnitude) if kind == "expense" else abs(magnitude)
