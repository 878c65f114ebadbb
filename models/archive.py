from dataclasses import dataclass
from typing import Optional

from models.transaction import Recurrence, TransactionRecord


@dataclass(frozen=True)
class ArchivedTransaction:
    """Write-once copy of an active record, keyed by (owner_id, archive_month)."""
    id: int
    source_id: Optional[int]
    owner_id: str
    archive_month: str      # 'YYYY-MM'
    kind: str
    category: str
    amount: float
    date: str
    note: str = ""
    recurrence: Optional[Recurrence] = None
    created_at: str = ""
    archived_at: str = ""

    def to_record(self) -> TransactionRecord:
        return TransactionRecord(
            id=self.source_id,
            owner_id=self.owner_id,
            kind=self.kind,
            category=self.category,
            amount=self.amount,
            date=self.date,
            note=self.note,
            recurrence=self.recurrence,
            created_at=self.created_at,
        )
