"""Command-line entry point.

Wires DAOs and services the same way for every command, runs the monthly
rollover check at session start, then dispatches to the subcommand. Business
logic lives in ``services``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import NoReturn, Optional

import typer
from dotenv import load_dotenv

from database.db_manager import DatabaseManager
from database.transaction_dao import TransactionDAO
from database.archive_dao import ArchiveDAO
from database.rollover_dao import RolloverDAO
from database.category_dao import CategoryDAO

from services.transaction_service import TransactionService
from services.history_service import HistoryService
from services.summary_service import SummaryService
from services.category_service import CategoryService
from services.rollover_service import MonthlyRolloverPolicy, RolloverError

from utils.app_config import get_default_owner, resolve_db_path, set_db_folder, set_default_owner
from utils.constants import APP_NAME, FREQUENCIES, HISTORY_PAGE_SIZE
from utils.currency import format_currency, format_signed
from utils.date_helpers import friendly_month, today_str
from utils.logging_setup import configure_logging, get_logger

logger = get_logger("budget_tracker.cli")


@dataclass
class AppContext:
    owner_id: str
    db: DatabaseManager
    tx_service: TransactionService
    history_service: HistoryService
    summary_service: SummaryService
    category_service: CategoryService
    rollover_policy: MonthlyRolloverPolicy
    archive_dao: ArchiveDAO
    currency: str


def build_context(db_path: str, owner_id: str) -> AppContext:
    # ── Database ─────────────────────────────────────────────────────────────
    db = DatabaseManager.open(db_path)

    # ── DAOs ─────────────────────────────────────────────────────────────────
    tx_dao = TransactionDAO(db)
    archive_dao = ArchiveDAO(db)
    rollover_dao = RolloverDAO(db)
    category_dao = CategoryDAO(db)

    # ── Services ─────────────────────────────────────────────────────────────
    atomic = db.get_setting("rollover_atomic", "0") == "1"
    return AppContext(
        owner_id=owner_id,
        db=db,
        tx_service=TransactionService(tx_dao),
        history_service=HistoryService(tx_dao, archive_dao),
        summary_service=SummaryService(tx_dao, archive_dao),
        category_service=CategoryService(category_dao),
        rollover_policy=MonthlyRolloverPolicy(db, tx_dao, archive_dao, rollover_dao, atomic=atomic),
        archive_dao=archive_dao,
        currency=db.get_setting("currency_symbol", "₹"),
    )


def run_session_start(ctx: AppContext, now: datetime | None = None) -> None:
    """Monthly archive check; a marker failure is reported but does not block the command."""
    try:
        result = ctx.rollover_policy.maybe_rollover(ctx.owner_id, now or datetime.now())
    except RolloverError as e:
        typer.secho(f"Warning: {e}. Rollover will be retried next time.", fg=typer.colors.YELLOW, err=True)
        return
    if result.rolled_over and result.moved_count:
        typer.echo(f"Archived {result.moved_count} transaction(s) for the start of {friendly_month(result.month)}.")
        if result.failed_ids:
            typer.secho(
                f"Warning: {len(result.failed_ids)} transaction(s) could not be archived cleanly.",
                fg=typer.colors.YELLOW, err=True,
            )


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help=f"{APP_NAME}: record income and expenses, browse history, monthly archive.",
)


@app.callback()
def _root(
    ctx: typer.Context,
    owner: Optional[str] = typer.Option(None, help="Owner id (defaults to the configured owner)."),
    db: Optional[str] = typer.Option(None, help="Database file (overrides BUDGET_TRACKER_DB)."),
    log_level: Optional[str] = typer.Option(None, help="Logging level, e.g. DEBUG."),
    skip_rollover: bool = typer.Option(False, help="Do not run the monthly archive check."),
) -> None:
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level)

    if ctx.invoked_subcommand == "config":
        return
    db_path = resolve_db_path(db)
    owner_id = owner or get_default_owner()
    logger.debug("opening %s for owner %s", db_path, owner_id)
    app_ctx = build_context(db_path, owner_id)
    ctx.obj = app_ctx
    ctx.call_on_close(app_ctx.db.close)
    if not skip_rollover:
        run_session_start(app_ctx)


def _fail(message: str) -> NoReturn:
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(1)


@app.command("add")
def cmd_add(
    ctx: typer.Context,
    amount: str = typer.Argument(..., help="Positive amount."),
    category: str = typer.Argument(..., help="Category name."),
    income: bool = typer.Option(False, "--income", help="Record income instead of an expense."),
    date: Optional[str] = typer.Option(None, help="YYYY-MM-DD, defaults to today."),
    note: str = typer.Option("", help="Free-form note."),
    frequency: Optional[str] = typer.Option(None, help=f"Recurring: one of {', '.join(FREQUENCIES)}."),
    end_date: Optional[str] = typer.Option(None, help="Last date (inclusive) of a recurring entry."),
) -> None:
    """Add an expense or income entry, optionally recurring."""
    app_ctx: AppContext = ctx.obj
    try:
        records = app_ctx.tx_service.add_entry(
            app_ctx.owner_id,
            "income" if income else "expense",
            category,
            amount,
            date or today_str(),
            note=note,
            frequency=frequency,
            end_date=end_date,
        )
    except ValueError as e:
        _fail(str(e))
    for tx in records:
        typer.echo(f"#{tx.id}  {tx.date}  {tx.category:<15} {format_signed(tx.amount, app_ctx.currency)}")
    typer.echo(f"Added {len(records)} transaction(s).")


@app.command("delete")
def cmd_delete(ctx: typer.Context, tx_id: int = typer.Argument(..., help="Transaction id.")) -> None:
    """Delete one active transaction."""
    app_ctx: AppContext = ctx.obj
    try:
        app_ctx.tx_service.delete(app_ctx.owner_id, tx_id)
    except ValueError as e:
        _fail(str(e))
    typer.echo(f"Deleted transaction {tx_id}.")


@app.command("history")
def cmd_history(
    ctx: typer.Context,
    category: Optional[str] = typer.Option(None, help="Only this category."),
    start: Optional[str] = typer.Option(None, help="From date, YYYY-MM-DD."),
    end: Optional[str] = typer.Option(None, help="To date, YYYY-MM-DD."),
    search: str = typer.Option("", help="Search notes and categories."),
    sort_by: str = typer.Option("date", help="date, amount or category."),
    ascending: bool = typer.Option(False, "--asc", help="Sort ascending."),
    page: int = typer.Option(1, help="Page number."),
    page_size: int = typer.Option(HISTORY_PAGE_SIZE, help="Rows per page."),
) -> None:
    """List transactions with filters, sorting and pagination."""
    app_ctx: AppContext = ctx.obj
    try:
        result = app_ctx.history_service.query(
            app_ctx.owner_id,
            category=category,
            start_date=start,
            end_date=end,
            search=search,
            sort_by=sort_by,
            sort_dir="asc" if ascending else "desc",
            page=page,
            page_size=page_size,
        )
    except ValueError as e:
        _fail(str(e))
    if result.viewing_archived:
        typer.echo(f"Showing archived transactions for {result.archive_month}")
    if not result.items:
        typer.echo("No transactions found.")
    for tx in result.items:
        typer.echo(
            f"#{tx.id}  {tx.date}  {tx.category:<15} "
            f"{format_signed(tx.amount, app_ctx.currency):>14}  {tx.note or '-'}"
        )
    s = result.summary
    typer.echo(
        f"Page {result.page}/{result.total_pages} ({result.total_count} total)  "
        f"income {format_currency(s.income, app_ctx.currency)}  "
        f"expenses {format_currency(s.expenses, app_ctx.currency)}  "
        f"balance {format_signed(s.balance, app_ctx.currency)}"
    )


@app.command("summary")
def cmd_summary(ctx: typer.Context, month: Optional[str] = typer.Option(None, help="YYYY-MM.")) -> None:
    """Totals, this month's spending by category and the weekly trend."""
    app_ctx: AppContext = ctx.obj
    svc = app_ctx.summary_service
    cur = app_ctx.currency
    s = svc.overview(app_ctx.owner_id)
    typer.echo(f"Income:   {format_currency(s.income, cur)}")
    typer.echo(f"Expenses: {format_currency(s.expenses, cur)}")
    typer.echo(f"Balance:  {format_signed(s.balance, cur)}")

    typer.echo("\nSpending by category:")
    rows = svc.category_totals(app_ctx.owner_id, month)
    if not rows:
        typer.echo("  (none)")
    for row in rows:
        typer.echo(f"  {row['category']:<15} {format_currency(row['total'], cur)}")

    typer.echo("\nWeekly expenses:")
    for row in svc.weekly_trend(app_ctx.owner_id):
        typer.echo(f"  {row['week_start']}  {format_currency(row['total'], cur)}")


@app.command("categories")
def cmd_categories(ctx: typer.Context, income: bool = typer.Option(False, "--income")) -> None:
    """List categories available for new entries."""
    app_ctx: AppContext = ctx.obj
    kind = "income" if income else "expense"
    for cat in app_ctx.category_service.for_kind(app_ctx.owner_id, kind):
        typer.echo(f"{cat.name}{' (custom)' if cat.is_custom else ''}")


@app.command("add-category")
def cmd_add_category(ctx: typer.Context, name: str = typer.Argument(...)) -> None:
    """Add a custom category."""
    app_ctx: AppContext = ctx.obj
    try:
        cat = app_ctx.category_service.add_custom(app_ctx.owner_id, name)
    except ValueError as e:
        _fail(str(e))
    typer.echo(f"Added category '{cat.name}'.")


@app.command("archives")
def cmd_archives(ctx: typer.Context) -> None:
    """List archived months (archiving itself runs at session start)."""
    app_ctx: AppContext = ctx.obj
    months = app_ctx.archive_dao.list_months(app_ctx.owner_id)
    typer.echo(f"Archived months: {', '.join(months) if months else 'none'}")


@app.command("archive")
def cmd_archive(ctx: typer.Context, month: str = typer.Argument(..., help="YYYY-MM.")) -> None:
    """Show one archived month."""
    app_ctx: AppContext = ctx.obj
    rows = app_ctx.archive_dao.get_partition(app_ctx.owner_id, month)
    typer.echo(f"{friendly_month(month)}: {len(rows)} archived transaction(s)")
    for a in rows:
        typer.echo(f"  {a.date}  {a.category:<15} {format_signed(a.amount, app_ctx.currency)}  {a.note or '-'}")


@app.command("config")
def cmd_config(
    owner: Optional[str] = typer.Option(None, "--set-owner", help="Default owner id."),
    db_folder: Optional[str] = typer.Option(None, "--set-db-folder", help="Folder holding the database."),
) -> None:
    """Update the pre-database configuration file."""
    if owner:
        set_default_owner(owner)
        typer.echo(f"Default owner set to '{owner}'.")
    if db_folder:
        set_db_folder(db_folder)
        typer.echo(f"Database folder set to '{db_folder}'.")
    if not owner and not db_folder:
        typer.echo(f"owner={get_default_owner()} db={resolve_db_path()}")


def main():
    app()


if __name__ == "__main__":
    main()
