from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable

from database.archive_dao import ArchiveDAO
from database.transaction_dao import TransactionDAO
from models.summary import Summary
from models.transaction import TransactionRecord
from utils.constants import WEEKLY_TREND_WEEKS
from utils.date_helpers import current_month_str, format_date, parse_date, today, week_start


def summarize(records: Iterable[TransactionRecord]) -> Summary:
    summary = Summary()
    for tx in records:
        if tx.amount < 0:
            summary.expenses += abs(tx.amount)
        else:
            summary.income += tx.amount
    return summary


class SummaryService:
    def __init__(self, tx_dao: TransactionDAO, archive_dao: ArchiveDAO):
        self._tx_dao = tx_dao
        self._archive_dao = archive_dao

    def overview(self, owner_id: str) -> Summary:
        """Income, expenses and balance over the active set."""
        return summarize(self._tx_dao.list_active(owner_id))

    def category_totals(self, owner_id: str, month: str | None = None) -> list[dict]:
        """Return [{category, total}, ...] of expense magnitudes for the month, largest first."""
        m = month or current_month_str()
        totals: dict[str, float] = defaultdict(float)
        for tx in self._tx_dao.list_active(owner_id):
            if tx.is_expense and tx.month == m:
                totals[tx.category] += abs(tx.amount)
        return [
            {"category": name, "total": total}
            for name, total in sorted(totals.items(), key=lambda kv: (-kv[1], kv[0]))
        ]

    def weekly_trend(
        self, owner_id: str, ref: date | None = None, weeks: int = WEEKLY_TREND_WEEKS
    ) -> list[dict]:
        """Return [{week_start, total}, ...] of expenses for the last `weeks` Sunday-based
        weeks, oldest first. Weeks without expenses report 0."""
        anchor = week_start(ref or today())
        starts = [anchor - timedelta(days=7 * i) for i in range(weeks - 1, -1, -1)]
        totals = {format_date(s): 0.0 for s in starts}
        for tx in self._tx_dao.list_active(owner_id):
            if not tx.is_expense:
                continue
            d = parse_date(tx.date)
            if d is None:
                continue
            key = format_date(week_start(d))
            if key in totals:
                totals[key] += abs(tx.amount)
        return [{"week_start": k, "total": v} for k, v in totals.items()]

    def monthly_totals(self, owner_id: str) -> list[dict]:
        """Return [{month, income, expense, net}, ...] across archive and active set."""
        records = [a.to_record() for a in self._archive_dao.list_all(owner_id)]
        records.extend(self._tx_dao.list_active(owner_id))
        by_month: dict[str, list[TransactionRecord]] = defaultdict(list)
        for tx in records:
            by_month[tx.month].append(tx)
        rows = []
        for month in sorted(by_month):
            s = summarize(by_month[month])
            rows.append({
                "month": month,
                "income": s.income,
                "expense": s.expenses,
                "net": s.balance,
            })
        return rows
