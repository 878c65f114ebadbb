import math

from database.archive_dao import ArchiveDAO
from database.transaction_dao import TransactionDAO
from models.summary import TransactionPage
from models.transaction import TransactionRecord
from services.summary_service import summarize
from utils.constants import HISTORY_PAGE_SIZE, HISTORY_SORT_KEYS
from utils.date_helpers import current_month_str, format_date, month_of, parse_date

_SORT_KEYS = {
    "date": lambda tx: tx.date or "",
    "amount": lambda tx: tx.amount,
    "category": lambda tx: tx.category or "",
}


class HistoryService:
    """Filter / search / sort / paginate an owner's transaction history.

    A date range that starts and ends inside the same month, other than the
    current month, is read from that month's archive partition instead of the
    active set.
    """

    def __init__(self, tx_dao: TransactionDAO, archive_dao: ArchiveDAO):
        self._tx_dao = tx_dao
        self._archive_dao = archive_dao

    def categories(self, owner_id: str) -> list[str]:
        return sorted({tx.category for tx in self._tx_dao.list_active(owner_id)})

    def archive_month_for(
        self, start_date: str | None, end_date: str | None, current_month: str | None = None
    ) -> str | None:
        if not start_date or not end_date:
            return None
        current = current_month or current_month_str()
        start_m, end_m = month_of(start_date), month_of(end_date)
        if start_m == end_m and start_m != current:
            return start_m
        return None

    def query(
        self,
        owner_id: str,
        category: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        search: str = "",
        sort_by: str = "date",
        sort_dir: str = "desc",
        page: int = 1,
        page_size: int = HISTORY_PAGE_SIZE,
        current_month: str | None = None,
    ) -> TransactionPage:
        if sort_by not in HISTORY_SORT_KEYS:
            raise ValueError(f"Cannot sort by '{sort_by}'.")
        if sort_dir not in ("asc", "desc"):
            raise ValueError("Sort direction must be asc or desc.")
        if page_size < 1:
            raise ValueError("Page size must be positive.")
        start_date = self._normalize_bound(start_date)
        end_date = self._normalize_bound(end_date)

        archive_month = self.archive_month_for(start_date, end_date, current_month)
        if archive_month:
            source = [a.to_record() for a in self._archive_dao.get_partition(owner_id, archive_month)]
        else:
            source = self._tx_dao.list_active(owner_id)

        filtered = self.filter(source, category, start_date, end_date, search)
        filtered = self.sort(filtered, sort_by, sort_dir)

        total_pages = math.ceil(len(filtered) / page_size) or 1
        page = min(max(page, 1), total_pages)
        start = (page - 1) * page_size
        return TransactionPage(
            items=filtered[start:start + page_size],
            page=page,
            total_pages=total_pages,
            total_count=len(filtered),
            summary=summarize(filtered),
            viewing_archived=archive_month is not None,
            archive_month=archive_month,
            categories=sorted({tx.category for tx in source}),
        )

    @staticmethod
    def _normalize_bound(value: str | None) -> str | None:
        if not value or not str(value).strip():
            return None
        parsed = parse_date(str(value).strip())
        if parsed is None:
            raise ValueError("Invalid date.")
        return format_date(parsed)

    @staticmethod
    def filter(
        records: list[TransactionRecord],
        category: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        search: str = "",
    ) -> list[TransactionRecord]:
        data = list(records)
        if category:
            data = [tx for tx in data if tx.category == category]
        if start_date:
            data = [tx for tx in data if tx.date >= start_date]
        if end_date:
            data = [tx for tx in data if tx.date <= end_date]
        q = (search or "").strip().lower()
        if q:
            data = [
                tx for tx in data
                if q in (tx.note or "").lower() or q in (tx.category or "").lower()
            ]
        return data

    @staticmethod
    def sort(records: list[TransactionRecord], sort_by: str, sort_dir: str) -> list[TransactionRecord]:
        return sorted(records, key=_SORT_KEYS[sort_by], reverse=(sort_dir == "desc"))
