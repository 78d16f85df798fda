"""Click-based CLI for elpris.

Thin wrapper around library modules. No business logic: fetching goes
through PriceRepository, numbers come from StatisticsEngine and
WindowOptimizer. This module only parses options and formats öre.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from datetime import datetime, time
from decimal import ROUND_HALF_UP, Decimal
from zoneinfo import ZoneInfo

import click
from rich.console import Console
from rich.table import Table

from elpris.core.models import PriceRecord, PriceZone

console = Console(stderr=True)

# Next-day prices are published around 13:00; after that, past hours are noise
_PUBLISH_CUTOFF = time(13, 0)
_LOCAL_TZ = ZoneInfo("Europe/Stockholm")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run_async(coro):
    """Run an async coroutine from synchronous Click code."""
    return asyncio.run(coro)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _load_config(ctx: click.Context):
    """Load config lazily, caching on first call."""
    if "config" not in ctx.obj:
        from elpris.core import load_config

        ctx.obj["config"] = load_config(config_path=ctx.obj.get("config_path"))
    return ctx.obj["config"]


def _now() -> datetime:
    return datetime.now(_LOCAL_TZ)


def _create_repository(config, fetcher, use_cache: bool = True):
    """Wire cache tiers and fetcher into a PriceRepository from config."""
    from elpris.cache import CacheStore, create_disk_cache
    from elpris.repository import PriceRepository

    cache = CacheStore(
        disk=create_disk_cache(config.cache),
        enabled=config.cache.enabled and use_cache,
    )
    return PriceRepository(fetcher, cache=cache, timeout=config.feed.total_timeout)


def _parse_hours(ctx: click.Context, param: click.Parameter, value: str | None) -> int | None:
    """Accept ``4`` or ``4h`` for the charging duration."""
    if value is None:
        return None
    text = value.strip().lower().removesuffix("h")
    try:
        hours = int(text)
    except ValueError:
        raise click.BadParameter(f"expected a number of hours like 4 or 4h, got {value!r}")
    if hours < 1:
        raise click.BadParameter("must be at least 1 hour")
    return hours


def _resolve_zone(zone: str | None, config) -> PriceZone:
    if zone:
        return PriceZone(zone.upper())
    if config.default_zone is not None:
        return config.default_zone
    raise click.UsageError("--zone is required (SE1, SE2, SE3 or SE4)")


def format_ore(sek_per_kwh: Decimal) -> str:
    """SEK/kWh as öre with two decimals and a decimal comma: ``0.1 -> "10,00"``."""
    ore = (sek_per_kwh * 100).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{ore:.2f}".replace(".", ",")


def format_interval(record: PriceRecord) -> str:
    """``"01-02"`` for whole hours, ``"01:15-01:30"`` otherwise."""
    start, end = record.time_start, record.time_end
    if start.minute == 0 and end.minute == 0:
        return f"{start.hour:02d}-{end.hour % 24:02d}"
    return f"{start:%H:%M}-{end:%H:%M}"


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    envvar="ELPRIS_CONFIG",
    default=None,
    help="Path to elpris.yml config file.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output.",
)
@click.version_option(package_name="elpris")
@click.pass_context
def cli(ctx: click.Context, config: str | None, verbose: bool) -> None:
    """Elpris: Swedish spot prices and the cheapest hours to charge."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose
    _configure_logging(verbose)


# ---------------------------------------------------------------------------
# prices
# ---------------------------------------------------------------------------


@cli.command()
@click.option(
    "--zone",
    "-z",
    type=click.Choice([z.value for z in PriceZone], case_sensitive=False),
    default=None,
    help="Price zone. Falls back to default_zone from config.",
)
@click.option(
    "--date",
    "-d",
    "price_date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Day to show (YYYY-MM-DD). Default: today.",
)
@click.option(
    "--sorted",
    "--sort",
    "sort_by_price",
    is_flag=True,
    default=False,
    help="List prices from most to least expensive.",
)
@click.option(
    "--charging",
    "--hours",
    "charging",
    type=str,
    default=None,
    callback=_parse_hours,
    help="Find the cheapest window of this many hours (e.g. 4 or 4h).",
)
@click.option(
    "--no-wrap",
    is_flag=True,
    default=False,
    help="Never let the window wrap from the last interval back to the first.",
)
@click.option(
    "--no-cache",
    is_flag=True,
    default=False,
    help="Bypass memory and disk caches.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@click.pass_context
def prices(
    ctx: click.Context,
    zone: str | None,
    price_date: datetime | None,
    sort_by_price: bool,
    charging: int | None,
    no_wrap: bool,
    no_cache: bool,
    output_format: str,
) -> None:
    """Show spot prices, hourly statistics and the cheapest charging window."""
    from elpris.analysis import (
        StatisticsEngine,
        WindowOptimizer,
        drop_elapsed,
        sort_by_price as by_price,
        sort_chronologically,
    )

    config = _load_config(ctx)
    price_zone = _resolve_zone(zone, config)
    now = _now()
    day = price_date.date() if price_date else now.date()

    async def _run() -> list[PriceRecord]:
        from elpris.feed import FeedClient

        async with FeedClient(config.feed) as client:
            repo = _create_repository(config, client, use_cache=not no_cache)
            return await repo.get_prices_with_next_day(price_zone, day)

    records = _run_async(_run())

    if day == now.date() and now.time() > _PUBLISH_CUTOFF:
        records = drop_elapsed(records, now)

    if not records:
        console.print(f"[yellow]No prices found for {price_zone} {day}.[/yellow]")
        raise SystemExit(1)

    summary = StatisticsEngine().summarize(records)
    allow_wrap = config.window.allow_wrap and not no_wrap
    window = None
    if charging is not None:
        window = WindowOptimizer(allow_wrap=allow_wrap).plan(records, charging)

    listing = by_price(records) if sort_by_price else sort_chronologically(records)

    if output_format == "json":
        _output_prices_json(price_zone, day, listing, summary, window)
    else:
        _output_prices_table(price_zone, day, listing, summary, charging, window)


def _output_prices_table(zone, day, listing, summary, charging, window) -> None:
    """Render prices, statistics and the charging window with Rich."""
    console.print(f"[bold]Spot prices {zone} {day}[/bold] ({len(listing)} intervals)")
    table = Table()
    table.add_column("Time", style="bold")
    table.add_column("öre/kWh", justify="right")
    for record in listing:
        table.add_row(format_interval(record), format_ore(record.sek_per_kwh))
    console.print(table)

    console.print(
        f"Lowest price: {format_ore(summary.min_hourly.price)} öre "
        f"({summary.min_hourly.label})"
    )
    console.print(
        f"Highest price: {format_ore(summary.max_hourly.price)} öre "
        f"({summary.max_hourly.label})"
    )
    console.print(f"Mean price: {format_ore(summary.mean)} öre")

    if charging is None:
        return
    if window is None:
        console.print(
            f"[yellow]Not enough prices for a {charging}-hour charging window.[/yellow]"
        )
        return

    console.print()
    console.print(f"[bold]Start charging in the cheapest {charging}-hour window:[/bold]")
    for record in window.records:
        console.print(f"kl {record.time_start:%H:%M} {format_ore(record.sek_per_kwh)} öre")
    console.print(f"Window mean: {format_ore(window.average)} öre")


def _output_prices_json(zone, day, listing, summary, window) -> None:
    """Write prices, statistics and the charging window as JSON to stdout."""
    output = {
        "zone": str(zone),
        "date": day.isoformat(),
        "prices": [r.model_dump(mode="json") for r in listing],
        "summary": summary.model_dump(mode="json"),
        "charging_window": (
            {
                "start": window.start.isoformat(),
                "end": window.end.isoformat(),
                "hours": window.hours,
                "average_sek_per_kwh": str(window.average),
                "wraps": window.wraps,
                "prices": [r.model_dump(mode="json") for r in window.records],
            }
            if window is not None
            else None
        ),
    }
    click.echo(json.dumps(output, indent=2, default=str))


# ---------------------------------------------------------------------------
# clear-cache
# ---------------------------------------------------------------------------


@cli.command("clear-cache")
@click.pass_context
def clear_cache(ctx: click.Context) -> None:
    """Delete every cached day payload from the disk cache."""
    from elpris.cache import create_disk_cache

    config = _load_config(ctx)
    disk = create_disk_cache(config.cache)
    removed = _run_async(disk.clear())
    console.print(f"[green]✓[/green] Removed {removed} cached price files")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
