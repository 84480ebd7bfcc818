"""Main CLI entry point."""

import logging

import click
from ledgerview.sources.factories import create_snapshot_source

# Import and register all commands at module level
from ledgerview.cli.commands import (
    accounts,
    personnel,
    activity,
    dashboard,
)


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False),
    help="Directory of JSON snapshots (overrides LEDGERVIEW_DATA_DIR environment variable)",
    envvar="LEDGERVIEW_DATA_DIR",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, data_dir: str | None, verbose: bool):
    """Ledgerview - Back-office list and report views.

    Reads JSON snapshots of the accounting API's collections and renders the
    chart of accounts, personnel list, activity log and dashboard.
    """
    ctx.ensure_object(dict)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if ctx.invoked_subcommand is not None:
        ctx.obj["source"] = create_snapshot_source(data_dir=data_dir)


# Register all commands
accounts.register_commands(cli)
personnel.register_commands(cli)
activity.register_commands(cli)
dashboard.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
