"""Personnel list commands."""

import click

from ledgerview.cli.error_handling import handle_domain_error
from ledgerview.cli.output import echo_pager, export_rows
from ledgerview.domain.entities import SortDirection
from ledgerview.domain.errors import DomainError
from ledgerview.domain.personnel import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_SORT_FIELD,
    STATUSES,
    PersonnelService,
    full_name,
    is_active,
)
from ledgerview.sources.base import PERSONNEL

EXPORT_COLUMNS = ("id", "username", "first_name", "last_name", "phone", "is_active", "created_at")


@click.command("personnel")
@click.option("--search", help="Search by name, username or phone")
@click.option("--status", type=click.Choice(STATUSES), default="all", show_default=True)
@click.option("--sort", "sort_field", default=DEFAULT_SORT_FIELD, show_default=True, help="Field to sort by")
@click.option("--asc", "ascending", is_flag=True, help="Sort ascending (default is descending)")
@click.option("--page", type=int, default=1, show_default=True)
@click.option("--page-size", type=int, default=DEFAULT_PAGE_SIZE, show_default=True)
@click.option("--export", "export_path", type=click.Path(dir_okay=False), help="Write the current page to a CSV file")
@click.pass_context
def list_personnel(
    ctx,
    search: str | None,
    status: str,
    sort_field: str,
    ascending: bool,
    page: int,
    page_size: int,
    export_path: str | None,
):
    """List personnel with search, status filter, sorting and paging."""
    source = ctx.obj["source"]
    service = PersonnelService()

    try:
        view = service.build_view(
            source.fetch(PERSONNEL),
            search=search,
            status=status,
            sort_field=sort_field,
            sort_direction=SortDirection.ASC if ascending else SortDirection.DESC,
            page=page,
            page_size=page_size,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(
        f"Total: {view.total_count}  Active: {view.active_count}  "
        f"Found: {view.filtered_count}{' after filtering' if view.has_active_filters else ''}"
    )

    if not view.page.items:
        click.echo("No personnel found.")
        return

    click.echo("-" * 90)
    click.echo(f"{'Name':<30} {'Username':<20} {'Phone':<18} {'Status':<10}")
    click.echo("-" * 90)
    for person in view.page.items:
        click.echo(
            f"{full_name(person)[:30]:<30} {str(person.get('username') or '')[:20]:<20} "
            f"{str(person.get('phone') or '')[:18]:<18} {'Active' if is_active(person) else 'Inactive':<10}"
        )
    echo_pager(view.page)

    if export_path:
        export_rows(view.page.items, export_path, columns=EXPORT_COLUMNS)


def register_commands(cli):
    """Register personnel command with main CLI."""
    cli.add_command(list_personnel)
