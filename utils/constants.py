APP_NAME = "Budget Tracker"
DB_FILE = "budget_tracker.db"
LOGGER_NAME = "budget_tracker"

DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"
DEFAULT_CURRENCY_SYMBOL = "₹"

TRANSACTION_KINDS = ("expense", "income")
FREQUENCIES = ("daily", "weekly", "monthly", "yearly")

# Fixed-length steps; monthly/yearly are calendar steps handled in date_helpers.
DAY_INTERVALS = {
    "daily": 1,
    "weekly": 7,
}

DEFAULT_EXPENSE_CATEGORIES = [
    "Food",
    "Transport",
    "Shopping",
    "Bills",
    "Entertainment",
    "Other",
]
DEFAULT_INCOME_CATEGORIES = [
    "Salary",
    "Business",
    "Investments",
    "Gifts",
    "Other Income",
]

HISTORY_PAGE_SIZE = 10
HISTORY_SORT_KEYS = ("date", "amount", "category")
WEEKLY_TREND_WEEKS = 8
ROLLOVER_MAX_WORKERS = 8
