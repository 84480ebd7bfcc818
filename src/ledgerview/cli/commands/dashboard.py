"""Dashboard commands."""

import click

from ledgerview.cli.date_filters import (
    period_flags_from,
    period_options,
    resolve_cli_date_range,
)
from ledgerview.cli.error_handling import handle_domain_error
from ledgerview.cli.output import abbreviate_amount, format_currency
from ledgerview.domain.dashboard import DashboardService
from ledgerview.domain.errors import DomainError
from ledgerview.sources.base import BILLS, CASH_ACCOUNTS, INVOICES, JOURNALS
from ledgerview.utils.date_parser import get_date_range


def _echo_ranked(title: str, ranked) -> None:
    if not ranked:
        return
    click.echo(f"\n{title}")
    for item in ranked:
        click.echo(f"  {item.name[:40]:<40} {format_currency(item.total):>20}")


@click.command("dashboard")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@period_options
@click.option("--full", is_flag=True, help="Show full amounts instead of abbreviated ones")
@click.pass_context
def dashboard(ctx, start_date: str | None, end_date: str | None, full: bool, **period_kwargs):
    """Show the accounting dashboard (defaults to the current month)."""
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags_from(period_kwargs),
        default_range=get_date_range("this-month"),
    )

    source = ctx.obj["source"]
    service = DashboardService()

    try:
        view = service.build_view(
            invoices=source.fetch_optional(INVOICES),
            bills=source.fetch_optional(BILLS),
            journals=source.fetch_optional(JOURNALS),
            cash_accounts=source.fetch_optional(CASH_ACCOUNTS),
            start_date=start,
            end_date=end,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    amount = format_currency if full else abbreviate_amount
    overview = view.overview

    click.echo(f"Dashboard {start or '...'} to {end or '...'}")
    click.echo("=" * 60)
    click.echo(f"{'Income':<30} {amount(overview.total_income):>20}")
    click.echo(f"{'Expenses':<30} {amount(overview.total_expenses):>20}")
    click.echo(f"{'Net income':<30} {amount(overview.net_income):>20}")
    click.echo(f"{'Cash balance':<30} {amount(overview.cash_balance):>20}")
    click.echo(f"{'Accounts receivable':<30} {amount(overview.accounts_receivable):>20}")
    click.echo(f"{'Accounts payable':<30} {amount(overview.accounts_payable):>20}")
    click.echo(f"{'Journal entries':<30} {overview.total_journal_entries:>20}")

    if view.monthly:
        click.echo("\nMonthly")
        for month in view.monthly:
            click.echo(f"  {month.month:<10} income {amount(month.income):>14}  expenses {amount(month.expenses):>14}")

    _echo_ranked("Top income accounts", view.top_income_accounts)
    _echo_ranked("Top expense accounts", view.top_expense_accounts)
    _echo_ranked("Top clients", view.top_clients)
    _echo_ranked("Top suppliers", view.top_suppliers)

    alerts = view.alerts
    alert_lines = [
        (len(alerts.overdue_invoices), "overdue invoice(s)"),
        (len(alerts.overdue_bills), "overdue bill(s)"),
        (len(alerts.low_cash_accounts), "cash account(s) below ₱10,000"),
        (len(alerts.unbalanced_entries), "unbalanced journal entr(ies)"),
    ]
    if any(count for count, _ in alert_lines):
        click.echo("\nAlerts")
        for count, label in alert_lines:
            if count:
                click.echo(f"  {count} {label}")


def register_commands(cli):
    """Register dashboard command with main CLI."""
    cli.add_command(dashboard)
