"""Chart of accounts commands."""

import click

from ledgerview.cli.error_handling import handle_domain_error
from ledgerview.cli.output import export_rows, format_currency
from ledgerview.domain.chart_of_accounts import ALL_TYPES, ChartOfAccountsService
from ledgerview.domain.errors import DomainError
from ledgerview.sources.base import ACCOUNT_TYPES, ACCOUNTS

EXPORT_COLUMNS = ("account_code", "account_name", "account_type", "normal_balance", "balance")


@click.command("accounts")
@click.option("--type", "type_code", default=ALL_TYPES, show_default=True, help="Account type code (e.g. ASSETS)")
@click.option("--search", help="Search by account code or name")
@click.option("--export", "export_path", type=click.Path(dir_okay=False), help="Write the listed accounts to a CSV file")
@click.pass_context
def chart_of_accounts(ctx, type_code: str, search: str | None, export_path: str | None):
    """Show the chart of accounts grouped by account type."""
    source = ctx.obj["source"]

    try:
        accounts = source.fetch(ACCOUNTS)
        service = ChartOfAccountsService(source.fetch_optional(ACCOUNT_TYPES))
        view = service.build_view(accounts, type_code=type_code, search=search)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not view.groups:
        click.echo("No accounts found.")
        return

    for group in view.groups:
        click.echo()
        click.echo(f"{group.label} ({group.count})")
        click.echo("-" * 80)
        for account in group.accounts:
            code = str(account.get("account_code") or "")
            name = str(account.get("account_name") or "")[:40]
            click.echo(f"  {code:<10} {name:<40} {format_currency(account.get('balance')):>20}")
        click.echo(f"  {'Total':<51} {format_currency(group.total):>20}")

    click.echo()
    click.echo(f"Grand total: {format_currency(view.grand_total)}")
    if view.dropped_count:
        click.echo(
            f"Warning: {view.dropped_count} account(s) have no matching account type and are not shown.",
            err=True,
        )

    if export_path:
        rows = [account for group in view.groups for account in group.accounts]
        export_rows(rows, export_path, columns=EXPORT_COLUMNS)


def register_commands(cli):
    """Register accounts command with main CLI."""
    cli.add_command(chart_of_accounts)
