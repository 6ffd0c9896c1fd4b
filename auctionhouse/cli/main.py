"""
Auction House CLI

Main entry point for all CLI commands.
"""

import json
import logging

import click

from auctionhouse.core.config import load_config
from auctionhouse.utils.logger import AuctionHouseLogger, setup_logging


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--log-file", is_flag=True, help="Also write logs to AUCTIONHOUSE_LOG_DIR")
@click.version_option(version="0.1.0")
@click.pass_context
def cli(ctx, debug, log_file):
    """Auction House - escrowed auction engine"""
    try:
        cfg = load_config()
    except ValueError as exc:
        raise click.ClickException(str(exc))

    level = logging.DEBUG if debug else logging.getLevelName(cfg.log_level.upper())
    if not isinstance(level, int):
        raise click.ClickException(f"Unknown log level: {cfg.log_level}")

    AuctionHouseLogger.reset()
    setup_logging(level=level, log_dir=str(cfg.log_dir), log_to_file=log_file)

    ctx.ensure_object(dict)
    ctx.obj["config"] = cfg


# =============================================================================
# Config Command
# =============================================================================


@cli.command("config")
@click.option("--env-file", default=None, type=click.Path(dir_okay=False), help=".env file to load")
def show_config(env_file):
    """Show the effective engine configuration"""
    from dataclasses import asdict

    try:
        cfg = load_config(env_file)
    except ValueError as exc:
        raise click.ClickException(str(exc))

    data = {k: str(v) if not isinstance(v, (int, str)) else v for k, v in asdict(cfg).items()}
    click.echo(json.dumps(data, indent=2))


# =============================================================================
# Demo Command
# =============================================================================


def _print_auction(engine, auction_id):
    auction = engine.get_auction(auction_id)
    click.echo(f"  Auction #{auction_id} [{auction.state.name}]")
    click.echo(f"    highest bid: {auction.highest_bid} by {auction.highest_bidder}")
    click.echo(f"    end time:    {auction.end_time} (+{auction.additional_time}s extensions)")
    if auction.winner:
        click.echo(f"    winner:      {auction.winner}")


@cli.command("demo")
@click.option(
    "--scenario",
    default="basic",
    type=click.Choice(["basic", "snipe", "failed-transfer"]),
    help="Demo scenario to run",
)
@click.pass_context
def demo(ctx, scenario):
    """Run an in-memory auction scenario"""
    from auctionhouse.core.clock import ManualClock
    from auctionhouse.core.engine import AuctionEngine
    from auctionhouse.core.transfer import InMemoryTransferGateway

    clock = ManualClock()
    gateway = InMemoryTransferGateway()
    engine = AuctionEngine(owner="operator", config=ctx.obj["config"], gateway=gateway, clock=clock)

    click.echo("=" * 60)
    click.echo(f"  AUCTION HOUSE DEMO - {scenario}")
    click.echo("=" * 60)

    for identity in ("seller", "alice", "bob"):
        engine.register_identity(identity)
    click.echo("✓ Registered seller, alice, bob")

    auction_id = engine.create_auction("seller", "Lamp", "Brass desk lamp", 3600, 100)
    click.echo(f"✓ Auction #{auction_id} created: reserve=100, duration=1h")

    if scenario == "snipe":
        clock.advance(3600 - 300)
        engine.place_bid(auction_id, "alice", 150)
        click.echo("✓ alice bids 150 with 5 minutes left")
        clock.advance(299)
        engine.place_bid(auction_id, "bob", 200)
        click.echo("✓ bob bids 200 with 1 second left")
    else:
        engine.place_bid(auction_id, "alice", 150)
        click.echo("✓ alice bids 150")
        engine.place_bid(auction_id, "bob", 200)
        click.echo("✓ bob bids 200")

    _print_auction(engine, auction_id)
    click.echo(f"  escrow[alice] = {engine.escrow_balance(auction_id, 'alice')}")

    if scenario == "failed-transfer":
        gateway.fail_for("seller")

    clock.set(engine.get_auction(auction_id).end_time)
    result = engine.settle(auction_id, "bob")
    if result.success:
        click.echo(f"✓ Settled: paid {result.amount} to {result.recipient}")
    else:
        click.echo(f"✗ Settlement payout failed ({result.error}); {engine.proceeds_owed(auction_id)} still owed")
        gateway.recover("seller")
        result = engine.retry_settlement(auction_id, "seller")
        click.echo(f"✓ Retry paid {result.amount} to {result.recipient}")

    result = engine.withdraw(auction_id, "alice")
    click.echo(f"✓ alice withdrew {result.amount}")

    _print_auction(engine, auction_id)
    click.echo()
    click.echo(f"  paid out: {dict(gateway.paid)}")
    click.echo(f"  funds conserved: {engine.check_conservation()}")
    click.echo(json.dumps(engine.stats()["global"], indent=2))


if __name__ == "__main__":
    cli()
