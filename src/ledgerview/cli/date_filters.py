"""CLI helpers for date range resolution."""

from datetime import date

import click

from ledgerview.utils.date_parser import PERIODS, get_date_range, parse_date

PERIOD_FLAGS_HELP = ", ".join(f"--{period}" for period in PERIODS)


def period_options(command):
    """Attach one boolean flag per named period to a command."""
    for period in reversed(PERIODS):
        label = period.replace("-", " ")
        command = click.option(f"--{period}", is_flag=True, help=f"Filter to {label}")(command)
    return command


def period_flags_from(kwargs: dict) -> dict[str, bool]:
    """Pop period flags from command kwargs, keyed by period name."""
    return {period: kwargs.pop(period.replace("-", "_"), False) for period in PERIODS}


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    default_range: tuple[date, date] | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates."""
    period_count = sum(1 for is_set in period_flags.values() if is_set)

    if period_count > 1:
        click.echo(
            f"Error: Only one period option ({PERIOD_FLAGS_HELP}) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if period_count > 0 and (start_date or end_date):
        click.echo(
            "Error: Period options (--this-month, --this-year, etc.) cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    start = None
    end = None

    if period_count == 1:
        for period, is_set in period_flags.items():
            if is_set:
                start, end = get_date_range(period)
                break
    else:
        if start_date:
            try:
                start = parse_date(start_date)
            except ValueError as e:
                click.echo(f"Error: Invalid start date: {e}", err=True)
                ctx.exit(1)

        if end_date:
            try:
                end = parse_date(end_date)
            except ValueError as e:
                click.echo(f"Error: Invalid end date: {e}", err=True)
                ctx.exit(1)

        if start is None and end is None and default_range is not None:
            start, end = default_range

    return start, end
