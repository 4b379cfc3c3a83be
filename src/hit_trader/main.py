from __future__ import annotations

import random
from typing import Optional

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from hit_trader.core.config_loader import load_engine_config
from hit_trader.core.exceptions import SwapError
from hit_trader.core.logger import setup_logger
from hit_trader.engine import TradingEngine
from hit_trader.paper.wallet_types import Asset
from hit_trader.session.runner import run_session
from hit_trader.staking.stake_controller import expected_multiplier

app = typer.Typer(help="$HIT Coin Trader Pro simulation engine", add_completion=False)
console = Console()


def _load_config(profile: str, overrides: Optional[dict] = None):
    load_dotenv()
    try:
        return load_engine_config(profile, cli_overrides=overrides)
    except ValidationError as e:
        console.print(f"[red]Invalid configuration:[/red]\n{e}")
        raise typer.Exit(code=2)


@app.command(help="Run a timed simulation session")
def run(
    duration: float = typer.Option(30.0, help="Session length in seconds"),
    profile: str = typer.Option("base", help="Config profile under config/profiles"),
    auto_trade: Optional[bool] = typer.Option(
        None, "--auto-trade/--no-auto-trade", help="Override auto-trading"
    ),
    proportion: Optional[float] = typer.Option(
        None, help="Share of the source balance per auto-trade (0-1)"
    ),
    stake: bool = typer.Option(False, "--stake", help="Stake coins when the session starts"),
    seed: Optional[int] = typer.Option(None, help="Random seed for a reproducible run"),
    log_dir: Optional[str] = typer.Option(None, help="Also write JSON logs here"),
):
    if log_dir:
        setup_logger(log_dir=log_dir)
    overrides: dict = {}
    if auto_trade is not None:
        overrides.setdefault("auto_trade", {})["enabled"] = auto_trade
    if proportion is not None:
        overrides.setdefault("auto_trade", {})["proportion"] = proportion
    config = _load_config(profile, overrides)

    result = run_session(config, duration_sec=duration, seed=seed, stake_on_start=stake)

    table = Table(title=f"Session ({result.stopped_reason})")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    for asset, balance in (result.ending_wallet or {}).items():
        table.add_row(asset, f"{balance:,.8f}" if asset == Asset.HIT.value else f"{balance:,.2f}")
    table.add_row("Final price", f"{result.ending_price:,.4f}")
    table.add_row("Value (FauxUSD)", f"{result.starting_value:,.2f} -> {result.ending_value:,.2f}")
    table.add_row("Price ticks", str(result.price_ticks))
    table.add_row("Auto trades", str(result.auto_trades))
    table.add_row("Stakes resolved", f"{result.stakes_resolved}/{result.stakes_started}")
    table.add_row("Drains", str(result.drains))
    table.add_row("Duration", f"{result.duration_sec:.1f}s")
    console.print(table)
    if result.errors:
        raise typer.Exit(code=1)


@app.command(help="Preview a swap at a freshly seeded price")
def quote(
    from_asset: str = typer.Argument(..., help="$HIT or FauxUSD"),
    to_asset: str = typer.Argument(..., help="$HIT or FauxUSD"),
    amount: str = typer.Argument(..., help="Amount to spend"),
    profile: str = typer.Option("base"),
    seed: Optional[int] = typer.Option(None),
):
    config = _load_config(profile)
    engine = TradingEngine(config, rng=random.Random(seed))
    try:
        received = engine.quote(from_asset, to_asset, amount)
    except SwapError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)
    dst = Asset.parse(to_asset)
    console.print(
        f"price {engine.market.current_price:.4f}: "
        f"{amount} {Asset.parse(from_asset).value} -> "
        f"[bold]{received:.{dst.precision}f} {dst.value}[/bold]"
    )


@app.command("show-config", help="Print the resolved configuration")
def show_config(profile: str = typer.Option("base")):
    config = _load_config(profile)
    console.print_json(config.model_dump_json())


@app.command(help="Show the stake reward table")
def odds(profile: str = typer.Option("base")):
    cfg = _load_config(profile).stake
    win_share = (1.0 - cfg.failure_probability) / len(cfg.tiers)
    table = Table(title="Stake outcomes")
    table.add_column("Outcome")
    table.add_column("Chance", justify="right")
    table.add_column("Multiplier", justify="right")
    table.add_column("Lock", justify="right")
    table.add_row(
        "[red]failure[/red]",
        f"{cfg.failure_probability:.1%}",
        f"x{cfg.failure_multiplier}",
        f"{cfg.failure_lock_seconds}s",
    )
    for i, tier in enumerate(cfg.tiers, start=1):
        table.add_row(f"tier {i}", f"{win_share:.1%}", f"x{tier.multiplier}", f"{tier.lock_seconds}s")
    console.print(table)
    console.print(f"Expected multiplier: x{expected_multiplier(cfg):.4f}")


if __name__ == "__main__":
    app()
