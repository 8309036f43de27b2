"""Analytics commands."""

import click
from renqing.cli.date_filters import period_options, resolve_cli_date_range
from renqing.cli.formatting import OCCASION_CHOICES, format_amount, format_signed
from renqing.cli.person_resolution import resolve_person_or_exit
from renqing.database.mappers import parse_occasion
from renqing.domain.analytics import AnalyticsService, DEFAULT_TOP_N
from renqing.domain.entities import AnalyticsFilter, AnalyticsReport, Archetype
from renqing.domain.ledger import LedgerService

ARCHETYPE_DESCRIPTIONS = {
    Archetype.DORMANT: "No gifts in the past year",
    Archetype.BALANCED: "Gifts given and received are roughly even",
    Archetype.INFLOW: "You receive noticeably more than you give",
    Archetype.OUTFLOW: "You give noticeably more than you receive",
}


def _display_report(report: AnalyticsReport, show: int) -> None:
    click.echo(f"\nArchetype: {report.archetype.value} - {ARCHETYPE_DESCRIPTIONS[report.archetype]}")
    click.echo(
        f"Core concentration: {report.concentration}% of volume comes from the "
        f"top {report.top_n} contacts"
    )

    click.echo(f"\nTransactions: {len(report.transactions)}")
    click.echo(f"  Given:    {format_amount(report.totals.given):>14}")
    click.echo(f"  Received: {format_amount(report.totals.received):>14}")
    click.echo(f"  Net:      {format_signed(report.totals.net):>14}")

    if report.rankings:
        click.echo("\nTop contacts (by total amount):")
        for rank, aggregate in enumerate(report.rankings[:show], start=1):
            click.echo(
                f"  {rank:>2}. {aggregate.name[:20]:<20} {format_amount(aggregate.total):>12}  "
                f"(given {format_amount(aggregate.given)}, received {format_amount(aggregate.received)})"
            )

    if report.occasions:
        click.echo("\nBy occasion:")
        for occasion, total in report.occasions:
            click.echo(f"  {occasion.value:<10} {format_amount(total):>12}")


@click.command("stats")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today', 'this month')")
@period_options
@click.option("--person", help="Only gifts with this contact (name or ID)")
@click.option("--occasion", type=click.Choice(OCCASION_CHOICES, case_sensitive=False), help="Only this occasion")
@click.option("--tag", help="Only gifts carrying this tag")
@click.option("--top", type=click.IntRange(min=1), default=DEFAULT_TOP_N, show_default=True, help="Size of the core circle for concentration")
@click.option("--show", type=click.IntRange(min=0), default=5, show_default=True, help="Number of top contacts to list")
@click.pass_context
def stats(
    ctx,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    this_year: bool,
    this_week: bool,
    last_month: bool,
    last_year: bool,
    last_week: bool,
    person: str | None,
    occasion: str | None,
    tag: str | None,
    top: int,
    show: int,
):
    """Show rankings, concentration and occasion breakdown."""
    storage = ctx.obj["storage"]

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-month": this_month,
            "this-year": this_year,
            "this-week": this_week,
            "last-month": last_month,
            "last-year": last_year,
            "last-week": last_week,
        },
    )

    person_id = None
    if person:
        person_id = resolve_person_or_exit(ctx, LedgerService(storage), person).id

    filters = AnalyticsFilter(
        start_date=start,
        end_date=end,
        person_id=person_id,
        occasion=parse_occasion(occasion) if occasion else None,
        tag=tag,
    )
    report = AnalyticsService(storage).build_report(filters, top_n=top)

    if not report.transactions:
        click.echo("No transactions found.")
        return

    _display_report(report, show)


def register_commands(cli):
    """Register stats command with main CLI."""
    cli.add_command(stats)
