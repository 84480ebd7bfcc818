"""Activity log commands."""

import click

from ledgerview.cli.date_filters import (
    period_flags_from,
    period_options,
    resolve_cli_date_range,
)
from ledgerview.cli.error_handling import handle_domain_error
from ledgerview.cli.output import echo_pager, export_rows
from ledgerview.domain.activity_log import (
    DEFAULT_PAGE_SIZE,
    ActivityLogService,
    subject_type_description,
)
from ledgerview.domain.errors import DomainError
from ledgerview.sources.base import ACTIVITY_LOGS

EXPORT_COLUMNS = ("created_at", "user_id", "user_name", "action", "subject_type", "subject_id", "ip_address")


@click.command("activity")
@click.option("--user", "user_id", help="Actor user ID")
@click.option("--action", help="Action contains (e.g. created, login)")
@click.option("--subject", "subject_type", help="Subject type contains (e.g. invoice, journal entry)")
@click.option("--start-date", help="First day included (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="Last day included (YYYY-MM-DD or relative like 'today')")
@period_options
@click.option("--page", type=int, default=1, show_default=True)
@click.option("--page-size", type=int, default=DEFAULT_PAGE_SIZE, show_default=True)
@click.option("--export", "export_path", type=click.Path(dir_okay=False), help="Write the current page to a CSV file")
@click.pass_context
def activity_log(
    ctx,
    user_id: str | None,
    action: str | None,
    subject_type: str | None,
    start_date: str | None,
    end_date: str | None,
    page: int,
    page_size: int,
    export_path: str | None,
    **period_kwargs,
):
    """Show the personnel activity log."""
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags_from(period_kwargs),
    )

    source = ctx.obj["source"]
    service = ActivityLogService()

    try:
        view = service.build_view(
            source.fetch(ACTIVITY_LOGS),
            user_id=user_id,
            action=action,
            subject_type=subject_type,
            date_from=start,
            date_to=end,
            page=page,
            page_size=page_size,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not view.page.items:
        click.echo("No activity found.")
        return

    click.echo(f"\nFound {view.filtered_count} entr{'y' if view.filtered_count == 1 else 'ies'}:")
    click.echo("-" * 100)
    click.echo(f"{'When':<22} {'User':<24} {'Activity':<36} {'IP':<16}")
    click.echo("-" * 100)
    for entry in view.page.items:
        description = subject_type_description(entry.get("subject_type"), entry.get("action"))
        click.echo(
            f"{str(entry.get('created_at') or '')[:22]:<22} {str(entry.get('user_name') or '')[:24]:<24} "
            f"{description[:36]:<36} {str(entry.get('ip_address') or ''):<16}"
        )
    echo_pager(view.page)

    if export_path:
        export_rows(view.page.items, export_path, columns=EXPORT_COLUMNS)


def register_commands(cli):
    """Register activity command with main CLI."""
    cli.add_command(activity_log)
