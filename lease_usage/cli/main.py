"""
CLI interface for the lease usage ledger.

Provides command-line access to writing and querying usage records.
"""

import logging
import sys
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from lease_usage.config.loader import load_storage_config
from lease_usage.core.window import align_to_day, format_epoch, parse_start_date
from lease_usage.storage.models import UsageRecord
from lease_usage.storage.repository import UsageStore, get_repository, summarize_costs

app = typer.Typer()
console = Console()

EXIT_CODE_PASS = 0
EXIT_CODE_FAIL = 1


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to YAML storage configuration"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log every DynamoDB page fetched"
    )
):
    """Lease usage ledger CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    ctx.obj = {"config": config}
    if ctx.invoked_subcommand is None:
        console.print("Lease Usage Ledger - Use --help to see available commands")


def _load_config(ctx: typer.Context):
    path = ctx.obj.get("config") if ctx.obj else None
    return load_storage_config(path)


def _get_store(ctx: typer.Context) -> UsageStore:
    """Resolve the usage store for the configured table."""
    return get_repository(_load_config(ctx))


@app.command()
def status(ctx: typer.Context):
    """Show the resolved storage configuration."""
    try:
        config = _load_config(ctx)
    except Exception as e:
        console.print(f"[red]Invalid configuration:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)

    console.print(f"Table: [bold]{config.table_name}[/]")
    console.print(f"Index: {config.index_name or '(table key)'}")
    console.print(f"Region: {config.region or '(default)'}")
    console.print(f"Endpoint: {config.endpoint_url or '(default)'}")


@app.command()
def put(
    ctx: typer.Context,
    principal_id: str = typer.Option(..., "--principal-id", help="Acting principal"),
    account_id: str = typer.Option(..., "--account-id", help="Billed account"),
    start_date: str = typer.Option(..., "--start-date", help="Epoch seconds or YYYY-MM-DD"),
    end_date: int = typer.Option(..., "--end-date", help="Period end, epoch seconds"),
    cost_amount: float = typer.Option(..., "--cost-amount", help="Cost for the period"),
    cost_currency: str = typer.Option("USD", "--cost-currency", help="Currency code"),
    time_to_exist: int = typer.Option(..., "--ttl", help="Expiry, epoch seconds")
):
    """Write one usage record for a billing period."""
    try:
        record = UsageRecord(
            principal_id=principal_id,
            account_id=account_id,
            start_date=parse_start_date(start_date),
            end_date=end_date,
            cost_amount=cost_amount,
            cost_currency=cost_currency,
            time_to_exist=time_to_exist
        )
        repository = _get_store(ctx)
        repository.put_usage(record)
    except Exception as e:
        console.print(f"[red]Error writing usage:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)

    console.print(
        f"[green]✓[/] Stored usage for account {account_id} "
        f"starting {format_epoch(record.start_date)}"
    )


@app.command()
def query(
    ctx: typer.Context,
    start_date: str = typer.Argument(..., help="Epoch seconds or YYYY-MM-DD"),
    days: int = typer.Option(1, "--days", "-d", help="Number of days to include")
):
    """
    List usage records whose start date falls in a window of days.

    The window starts at the UTC day containing START_DATE.
    """
    try:
        start = parse_start_date(start_date)
        repository = _get_store(ctx)
        records = repository.get_usage_by_date_range(start, days)
    except Exception as e:
        console.print(f"[red]Error querying usage:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)

    if not records:
        console.print("\n[bold yellow]No usage records found[/]\n")
        return

    _display_records(records)


def _format_amount(amount: float, currency: str) -> str:
    """Format a cost amount with its currency."""
    return f"{amount:,.2f} {currency}"


def _display_records(records: List[UsageRecord]):
    """Render records and per-currency totals."""
    table = Table(title="Lease Usage")
    table.add_column("Day")
    table.add_column("Account")
    table.add_column("Principal")
    table.add_column("Cost", justify="right")
    table.add_column("Expires")

    for record in records:
        table.add_row(
            format_epoch(align_to_day(record.start_date))[:10],
            record.account_id,
            record.principal_id,
            _format_amount(record.cost_amount, record.cost_currency),
            format_epoch(record.time_to_exist)[:10]
        )
    console.print(table)

    for currency, total in summarize_costs(records).items():
        console.print(f"[bold]Total:[/bold] {_format_amount(total, currency)}")


if __name__ == "__main__":
    app()
