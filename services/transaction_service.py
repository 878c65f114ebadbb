from database.transaction_dao import TransactionDAO
from models.transaction import Recurrence, TransactionRecord, TransactionTemplate, signed_amount
from services.recurring_service import RecurrenceExpander
from utils.constants import FREQUENCIES, TRANSACTION_KINDS
from utils.date_helpers import parse_date, format_date
from utils.logging_setup import get_logger

logger = get_logger("budget_tracker.transactions")


class TransactionService:
    def __init__(self, tx_dao: TransactionDAO, expander: RecurrenceExpander | None = None):
        self._dao = tx_dao
        self._expander = expander or RecurrenceExpander()

    def get_active(self, owner_id: str) -> list[TransactionRecord]:
        return self._dao.list_active(owner_id)

    def add_entry(
        self,
        owner_id: str,
        kind: str,
        category: str,
        amount,
        date: str,
        note: str = "",
        frequency: str | None = None,
        end_date: str | None = None,
    ) -> list[TransactionRecord]:
        """Validate a submitted entry, expand any recurrence and store every record.

        Returns the stored records (ids assigned), in date order.
        """
        magnitude = self._validate(kind, category, amount, date)
        start = format_date(parse_date(str(date).strip()))

        recurring = None
        if frequency:
            frequency = frequency.strip().lower()
            if frequency not in FREQUENCIES:
                raise ValueError("Invalid frequency.")
            end = None
            if end_date:
                parsed_end = parse_date(end_date)
                if parsed_end is None:
                    raise ValueError("Invalid end date.")
                end = format_date(parsed_end)
            recurring = Recurrence(frequency=frequency, end_date=end)

        template = TransactionTemplate(
            owner_id=owner_id,
            kind=kind,
            category=category.strip(),
            amount=signed_amount(kind, magnitude),
            note=(note or "").strip(),
        )
        records = self._expander.expand(template, start, recurring)
        stored = self._dao.insert_many(owner_id, records)
        logger.info("stored %d %s record(s) for %s", len(stored), kind, owner_id)
        return stored

    def delete(self, owner_id: str, tx_id: int):
        if not self._dao.delete(owner_id, tx_id):
            raise ValueError(f"Transaction {tx_id} not found.")

    def _validate(self, kind, category, amount, date) -> float:
        if kind not in TRANSACTION_KINDS:
            raise ValueError("Type must be income or expense.")
        if not category or not category.strip():
            raise ValueError("Category is required.")
        if amount is None or (isinstance(amount, str) and not amount.strip()):
            raise ValueError("Amount is required.")
        try:
            magnitude = float(amount)
        except (TypeError, ValueError):
            raise ValueError("Amount must be a positive number.")
        if not magnitude > 0 or magnitude == float("inf"):
            raise ValueError("Amount must be a positive number.")
        if not date or not str(date).strip():
            raise ValueError("Date is required.")
        if parse_date(str(date).strip()) is None:
            raise ValueError("Invalid date.")
        return magnitude
