"""Markets subcommand: list Polymarket and Kalshi markets with search, filter, sort."""

from __future__ import annotations

import typer

from predboard.catalog.events import group_by_event
from predboard.catalog.query import MarketQuery, paginate, parse_sort_key
from predboard.ingestion import UpstreamError
from predboard.ingestion.kalshi import KalshiConnector
from predboard.ingestion.polymarket import PolymarketConnector
from predboard.models import Market

app = typer.Typer(help="Fetch and browse markets")


def format_amount(value: float) -> str:
    if value >= 1_000_000_000:
        return f"${value / 1_000_000_000:.1f}B"
    if value >= 1_000_000:
        return f"${value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"${value / 1_000:.1f}K"
    return f"${value:.0f}"


def _line(m: Market) -> str:
    lead = ""
    if m.outcomes and m.outcome_prices:
        lead = f"{m.outcomes[0]} {m.outcome_prices[0] * 100:.0f}%"
    new = " [new]" if m.is_new else ""
    return f"  {format_amount(m.volume):>8}  {format_amount(m.liquidity):>8}  {m.category[:12]:<12} {lead:<10} {m.title[:60]}{new}"


def _query(search: str, categories: list[str] | None, sort: str, show: int, page_size: int) -> MarketQuery:
    return MarketQuery(
        search=search,
        categories=frozenset(categories or ()),
        sort=parse_sort_key(sort),
        page_size=page_size,
        visible=show or page_size,
    )


@app.command("polymarket")
def polymarket(
    ctx: typer.Context,
    search: str = typer.Option("", "--search", "-s", help="Substring match on title, question, category"),
    category: list[str] | None = typer.Option(None, "--category", "-c", help="Category filter (repeatable)"),
    sort: str = typer.Option("volume", "--sort", help="volume or liquidity"),
    show: int = typer.Option(0, "--show", "-n", help="Rows to show (default: display page size)"),
) -> None:
    """Fetch active Polymarket markets and list them."""
    settings = ctx.obj["settings"]
    with PolymarketConnector(
        settings.gamma_api_base,
        page_size=settings.polymarket_page_size,
        max_pages=settings.polymarket_max_pages,
        timeout=settings.http_timeout,
    ) as connector:
        try:
            result = connector.discover_markets()
        except UpstreamError as e:
            typer.echo(f"Error retrieving market data: {e}", err=True)
            raise typer.Exit(code=1)
    view = _query(search, category, sort, show, settings.display_page_size).apply(result.markets)
    for m in view.items:
        typer.echo(_line(m))
    typer.echo(
        f"Showing {len(view.items)} of {view.total} markets"
        f" ({result.duplicates_skipped} duplicates skipped)"
        + (" - use --show for more" if view.has_more else "")
    )


@app.command("kalshi")
def kalshi(
    ctx: typer.Context,
    search: str = typer.Option("", "--search", "-s", help="Substring match on title, question, category, event"),
    category: list[str] | None = typer.Option(None, "--category", "-c", help="Category filter (repeatable)"),
    sort: str = typer.Option("volume", "--sort", help="volume or liquidity"),
    offset: int = typer.Option(0, "--offset", help="Skip this many markets"),
    show: int = typer.Option(0, "--show", "-n", help="Rows to show (default: display page size)"),
    grouped: bool = typer.Option(False, "--grouped", "-g", help="Group markets by event"),
) -> None:
    """Fetch Kalshi markets and list them, optionally grouped by event."""
    settings = ctx.obj["settings"]
    with KalshiConnector(
        settings.kalshi_api_base,
        events_limit=settings.kalshi_events_limit,
        timeout=settings.http_timeout,
    ) as connector:
        try:
            markets = connector.discover_markets().markets
        except UpstreamError as e:
            typer.echo(f"Failed to fetch Kalshi markets: {e}", err=True)
            raise typer.Exit(code=1)
    query = _query(search, category, sort, show, settings.display_page_size)
    matching = query.matching(markets)
    if grouped:
        groups = group_by_event(matching, sort=query.sort)
        for g in paginate(groups, offset, query.visible):
            best = g.most_likely()
            pick = f"{best.option_name or best.title} ({best.yes_bid:.2f})" if best and best.yes_bid else "-"
            typer.echo(
                f"  {format_amount(g.total_volume):>8}  {format_amount(g.total_liquidity):>8}"
                f"  {len(g.markets):>3} mkts  {g.event_title[:50]:<50}  {pick}"
            )
        typer.echo(f"Total: {len(groups)} events")
        return
    for m in paginate(matching, offset, query.visible):
        typer.echo(_line(m))
    typer.echo(f"Total: {len(matching)} markets")
