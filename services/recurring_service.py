from datetime import date, timedelta
from models.transaction import Recurrence, TransactionRecord, TransactionTemplate
from utils.date_helpers import parse_date, format_date, add_months, add_years
from utils.constants import DAY_INTERVALS


class RecurrenceExpander:
    """Turns one entry plus an optional recurrence rule into dated records.

    Pure: no persistence, no clock. Input is assumed to be validated by the
    caller (see TransactionService).

    - No rule: one record at ``start_date``.
    - Rule without end date: one anchor record carrying the rule; nothing
      further is generated.
    - Rule with end date: ``start_date`` and every ``next_date`` step while
      ``<= end_date``. An end date before the start still yields the anchor.
    """

    def expand(
        self,
        template: TransactionTemplate,
        start_date: str,
        recurring: Recurrence | None = None,
    ) -> list[TransactionRecord]:
        if recurring is None:
            return [self._record(template, start_date, None)]

        rule = Recurrence(frequency=recurring.frequency, end_date=recurring.end_date or None)
        if rule.end_date is None:
            return [self._record(template, start_date, rule)]

        return [
            self._record(template, format_date(d), rule)
            for d in self.due_dates(parse_date(start_date), parse_date(rule.end_date), rule.frequency)
        ]

    def due_dates(self, start: date, end: date, frequency: str) -> list[date]:
        """start, next(start), ... up to and including end; at least [start]."""
        result = [start]
        current = self.step(start, frequency)
        while current <= end:
            result.append(current)
            current = self.step(current, frequency)
        return result

    def next_date(self, date_str: str, frequency: str) -> str:
        return format_date(self.step(parse_date(date_str), frequency))

    def step(self, d: date, frequency: str) -> date:
        """Advance one period. Month/year steps clamp to the end of the target month
        and are taken from ``d`` itself, so a clamped day carries forward."""
        if frequency in DAY_INTERVALS:
            return d + timedelta(days=DAY_INTERVALS[frequency])
        if frequency == "monthly":
            return add_months(d, 1)
        if frequency == "yearly":
            return add_years(d, 1)
        raise ValueError(f"Unknown frequency: {frequency}")

    def _record(
        self, template: TransactionTemplate, date_str: str, rule: Recurrence | None
    ) -> TransactionRecord:
        return TransactionRecord(
            id=None,
            owner_id=template.owner_id,
            kind=template.kind,
            category=template.category,
            amount=template.amount,
            date=date_str,
            note=template.note,
            recurrence=rule,
        )


_default_expander = RecurrenceExpander()


def expand(
    template: TransactionTemplate,
    start_date: str,
    recurring: Recurrence | None = None,
) -> list[TransactionRecord]:
    return _default_expander.expand(template, start_date, recurring)
