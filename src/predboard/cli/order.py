"""Order subcommand: place a limit order through the CLOB SDK."""

from __future__ import annotations

import json

import typer
from pydantic import ValidationError

from predboard.models import OrderRequest, validation_details
from predboard.trading import TradingClient, TradingError

app = typer.Typer(help="Order placement (requires PRIVATE_KEY, API_KEY, API_SECRET, PASSPHRASE)")


@app.command("place")
def place(
    ctx: typer.Context,
    token_id: str = typer.Argument(..., help="Outcome token ID"),
    side: str = typer.Option(..., "--side", help="BUY or SELL"),
    price: float = typer.Option(..., "--price", help="Limit price (probability, 0-1)"),
    size: float = typer.Option(..., "--size", help="Number of shares"),
    order_type: str = typer.Option("GTC", "--type", help="GTC, GTD or FOK"),
    expiration: int | None = typer.Option(None, "--expiration", help="Unix timestamp (GTD only)"),
    fee_rate_bps: int | None = typer.Option(None, "--fee-rate-bps", help="Fee in basis points"),
) -> None:
    """Validate and submit an order; prints the SDK response as JSON."""
    settings = ctx.obj["settings"]
    try:
        order = OrderRequest(
            token_id=token_id,
            side=side.upper(),
            price=price,
            size=size,
            order_type=order_type.upper(),
            expiration=expiration,
            fee_rate_bps=fee_rate_bps if fee_rate_bps is not None else settings.default_fee_rate_bps,
        )
    except ValidationError as e:
        for field, messages in validation_details(e).items():
            typer.echo(f"{field}: {'; '.join(messages)}", err=True)
        raise typer.Exit(code=2)
    if order.missing_expiration:
        typer.echo("Expiration timestamp is required for GTD orders", err=True)
        raise typer.Exit(code=2)
    client = TradingClient(settings.trading_credentials, host=settings.clob_host, chain_id=settings.chain_id)
    try:
        response = client.place_order(order)
    except TradingError as e:
        typer.echo(f"{e.error_type.value}: {e.message}", err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(response, indent=2, default=str))
