# ruff: noqa: I001
"""CLI for the ``freelance_ledger`` package.

A Typer console interface over :mod:`freelance_ledger.api`. Environment
variables (notably ``DATABASE_URL``) are loaded from a local ``.env`` with
``python-dotenv`` before any command runs; already-set variables win. Each
command opens one ``session_scope`` and commits on success.

Caller-visible failures (unknown entry, no ledger data, invalid input) print
``Error: ...`` to stderr and exit with status 1.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, time
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Annotated, Any

import typer
from dotenv import load_dotenv
from pydantic import TypeAdapter
from sqlalchemy.orm import Session

from . import api
from .errors import LedgerError
from .logging_setup import configure_logging
from .models import (
    EntryFilters,
    LedgerEntry,
    MilestoneDescriptor,
    ProjectHistory,
    TransactionKind,
)

_FEE_ENV_VAR = "FREELANCE_LEDGER_PLATFORM_FEE_PERCENT"

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Import freelance platform transaction exports into the ledger, "
        "summarize them, and reconcile them against projects."
    ),
)


# ---- Small module-level helpers ---------------------------------------------


def _fail(message: str) -> typer.Exit:
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(1)


def _parse_bound(value: str | None, *, end: bool = False) -> datetime | None:
    """Parse an ISO date/datetime; a bare end date covers the whole day."""

    if value is None:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise _fail(f"invalid date {value!r}; expected YYYY-MM-DD[THH:MM]") from e
    if end and len(value.strip()) == 10:
        return datetime.combine(parsed.date(), time.max)
    return parsed


def _parse_decimal(value: str | None, *, name: str) -> Decimal | None:
    if value is None:
        return None
    try:
        return Decimal(value)
    except InvalidOperation as e:
        raise _fail(f"invalid {name} {value!r}") from e


@contextmanager
def _session(ctx: typer.Context) -> Iterator[Session]:
    """Open a committed session scope, mapping ledger errors to exit code 1."""

    from db.client import session_scope

    database_url = (ctx.obj or {}).get("database_url")
    try:
        with session_scope(database_url=database_url) as session:
            yield session
    except LedgerError as e:
        raise _fail(str(e)) from e


def _echo_rows(rows: list[list[Any]]) -> None:
    for row in rows:
        typer.echo("\t".join("" if v is None else str(v) for v in row))


def _run(ctx: typer.Context, fn: Callable[[Session], Any]) -> Any:
    with _session(ctx) as session:
        return fn(session)


# ---- Commands -----------------------------------------------------------------


CSV_PATH_OPTION = typer.Option(
    ...,
    "--csv-path",
    help="Path to a platform transaction export (CSV).",
    dir_okay=False,
    file_okay=True,
    exists=False,  # the handler reports a friendly error instead
)


@app.command("import-export")
def import_export_cmd(
    ctx: typer.Context,
    csv_path: Annotated[Path, CSV_PATH_OPTION],
    encoding: str = typer.Option("utf-8", help="Text encoding of the export file."),
) -> None:
    """Import an export file; prints imported/skipped/discarded counts."""

    try:
        text = csv_path.read_text(encoding=encoding)
    except FileNotFoundError as e:
        raise _fail(f"File not found: {csv_path}") from e
    except (PermissionError, UnicodeDecodeError) as e:
        raise _fail(f"cannot read {csv_path}: {e}") from e

    result = _run(ctx, lambda s: api.import_from_export(s, text))
    typer.echo(f"imported\t{result.imported}")
    typer.echo(f"skipped\t{result.skipped}")
    typer.echo(f"discarded\t{result.discarded}")


@app.command("summary")
def summary_cmd(
    ctx: typer.Context,
    start: str | None = typer.Option(None, help="Inclusive start date (YYYY-MM-DD)."),
    end: str | None = typer.Option(None, help="Inclusive end date (YYYY-MM-DD)."),
) -> None:
    """Print earnings/fees/withdrawals and breakdowns as JSON."""

    start_dt = _parse_bound(start)
    end_dt = _parse_bound(end, end=True)
    summary = _run(ctx, lambda s: api.get_summary(s, start=start_dt, end=end_dt))
    typer.echo(summary.model_dump_json(indent=2))


@app.command("list-entries")
def list_entries_cmd(
    ctx: typer.Context,
    kind: TransactionKind | None = typer.Option(None, "--type", help="Filter by kind."),
    currency: str | None = typer.Option(None, help="Filter by currency code."),
    project: str | None = typer.Option(None, help="Project name substring."),
    start: str | None = typer.Option(None, help="Inclusive start date."),
    end: str | None = typer.Option(None, help="Inclusive end date."),
    search: str | None = typer.Option(None, help="Search description/project/client."),
    page: int = typer.Option(1, min=1),
    limit: int = typer.Option(50, min=1),
) -> None:
    """List entries newest first as tab-separated rows."""

    filters = EntryFilters(
        type=kind,
        currency=currency,
        project_name=project,
        start=_parse_bound(start),
        end=_parse_bound(end, end=True),
        search=search,
    )
    result = _run(ctx, lambda s: api.list_entries(s, filters, page=page, limit=limit))
    _echo_rows(
        [
            [e.id, e.date.isoformat(timespec="minutes"), e.type.value, e.amount, e.currency,
             e.description]
            for e in result.items
        ]
    )
    typer.echo(f"# page {result.page}/{result.total_pages} total={result.total}", err=True)


@app.command("show-entry")
def show_entry_cmd(ctx: typer.Context, entry_id: int) -> None:
    """Print one entry as JSON."""

    entry = _run(ctx, lambda s: api.get_entry(s, entry_id))
    typer.echo(entry.model_dump_json(indent=2))


@app.command("add-entry")
def add_entry_cmd(
    ctx: typer.Context,
    description: str = typer.Option(...),
    kind: TransactionKind = typer.Option(..., "--type"),
    amount: str = typer.Option(..., help="Signed amount; negative for outflows."),
    currency: str = typer.Option(...),
    date: str | None = typer.Option(None, help="Entry date; defaults to now."),
    gst: str | None = typer.Option(None),
    project_name: str | None = typer.Option(None),
    client_name: str | None = typer.Option(None),
    notes: str | None = typer.Option(None),
) -> None:
    """Create a ledger entry manually; prints the new id."""

    data = {
        "date": _parse_bound(date),
        "description": description,
        "type": kind,
        "amount": _parse_decimal(amount, name="amount"),
        "currency": currency,
        "gst": _parse_decimal(gst, name="gst"),
        "project_name": project_name,
        "client_name": client_name,
        "notes": notes,
    }
    entry = _run(ctx, lambda s: api.create_manual_entry(s, data))
    typer.echo(str(entry.id))


@app.command("update-entry")
def update_entry_cmd(
    ctx: typer.Context,
    entry_id: int,
    description: str | None = typer.Option(None),
    kind: TransactionKind | None = typer.Option(None, "--type"),
    amount: str | None = typer.Option(None),
    currency: str | None = typer.Option(None),
    date: str | None = typer.Option(None),
    gst: str | None = typer.Option(None),
    project_name: str | None = typer.Option(None),
    client_name: str | None = typer.Option(None),
    notes: str | None = typer.Option(None),
) -> None:
    """Correct fields of an entry; only the options given are changed."""

    candidates: dict[str, Any] = {
        "description": description,
        "type": kind,
        "amount": _parse_decimal(amount, name="amount"),
        "currency": currency,
        "date": _parse_bound(date),
        "gst": _parse_decimal(gst, name="gst"),
        "project_name": project_name,
        "client_name": client_name,
        "notes": notes,
    }
    changes = {k: v for k, v in candidates.items() if v is not None}
    entry = _run(ctx, lambda s: api.update_entry(s, entry_id, changes))
    typer.echo(entry.model_dump_json(indent=2))


@app.command("delete-entry")
def delete_entry_cmd(ctx: typer.Context, entry_id: int) -> None:
    """Delete an entry by id."""

    _run(ctx, lambda s: api.delete_entry(s, entry_id))
    typer.echo(f"deleted\t{entry_id}")


@app.command("projects")
def projects_cmd(ctx: typer.Context) -> None:
    """List projects seen in milestone payments (latest payment first)."""

    projects: list[ProjectHistory] = _run(ctx, api.list_distinct_projects)
    _echo_rows(
        [
            [p.name, p.client, p.total_earned, p.currency, p.payment_count,
             p.first_payment_date.date().isoformat(), p.last_payment_date.date().isoformat()]
            for p in projects
        ]
    )


@app.command("backfill-project")
def backfill_project_cmd(
    ctx: typer.Context,
    project_name: str = typer.Option(..., help="Project name as it appears in the ledger."),
    client_name: str | None = typer.Option(None, help="Client to attach the project to."),
) -> None:
    """Create a completed project and milestones from ledger payments.

    Not idempotent: running it twice creates a second project.
    """

    project = _run(
        ctx, lambda s: api.create_project_from_ledger_history(s, project_name, client_name)
    )
    typer.echo(project.model_dump_json(indent=2))


@app.command("release-milestone")
def release_milestone_cmd(
    ctx: typer.Context,
    milestone_id: int = typer.Option(...),
    title: str = typer.Option(...),
    amount: str = typer.Option(..., help="Gross milestone amount."),
    project_name: str = typer.Option(...),
    project_id: int | None = typer.Option(None),
    client_name: str | None = typer.Option(None),
    currency: str = typer.Option("USD"),
    fee_percent: str | None = typer.Option(
        None, help=f"Platform fee percent (defaults to ${_FEE_ENV_VAR} or 0)."
    ),
) -> None:
    """Record the ledger entries for a released milestone (idempotent)."""

    fee_raw = fee_percent if fee_percent is not None else os.getenv(_FEE_ENV_VAR, "0")
    descriptor = MilestoneDescriptor(
        id=milestone_id,
        title=title,
        amount=_parse_decimal(amount, name="amount"),
        currency=currency,
        project_id=project_id,
        project_name=project_name,
        client_name=client_name,
        platform_fee_percent=_parse_decimal(fee_raw, name="fee percent"),
    )
    created = _run(ctx, lambda s: api.on_milestone_released(s, descriptor))
    typer.echo(TypeAdapter(list[LedgerEntry]).dump_json(created, indent=2).decode())


@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    *,
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
    log_level: str | None = typer.Option(
        None, help="Log level (falls back to FREELANCE_LEDGER_LOG_LEVEL, then INFO)."
    ),
) -> None:
    """Root command: load ``.env`` and configure logging before any subcommand."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level)
    ctx.obj = {"database_url": database_url}

    if ctx.invoked_subcommand is None:
        typer.echo("No subcommand provided. Use --help to see available commands.")
        raise typer.Exit(1)


if __name__ == "__main__":  # pragma: no cover
    app()
