"""Command-line interface for kline-signals."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .aggregation import aggregate_for_interval, to_display_time
from .analysis import IndicatorBundle, ScreenCondition, compute_indicators, screen_universe
from .config import get_config, get_screener_config
from .data import CandleLoadError, load_candles
from .models import Interval, PressureSignal, SignalDirection

console = Console()

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format=get_config().log_format,
)


def setup_logging(verbose: bool):
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else get_config().log_level.upper()
    logging.getLogger("kline_signals").setLevel(level)


def format_time(time_ms: int, interval: str) -> str:
    """Render a bar's display time in UTC."""
    shown = to_display_time(time_ms, interval)
    dt = datetime.fromtimestamp(shown / 1000, tz=timezone.utc)
    try:
        intraday = Interval(interval).is_intraday
    except ValueError:
        intraday = False
    return dt.strftime("%Y-%m-%d %H:%M" if intraday else "%Y-%m-%d")


def format_direction(direction: SignalDirection) -> Text:
    """Format signal direction with color coding."""
    color = "green" if direction is SignalDirection.BUY else "red"
    return Text(direction.value.upper(), style=f"bold {color}")


def display_bundle(symbol: str, bundle: IndicatorBundle, interval: str):
    """Display the latest indicator values and recent events."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Label", style="dim")
    table.add_column("Value")

    last = bundle.candles[-1]
    table.add_row("Bars", str(len(bundle.candles)))
    table.add_row("Last close", f"{last.close:.2f} @ {format_time(last.time, interval)}")

    if not bundle.macd.is_empty:
        diff = bundle.macd.diff.iloc[-1]
        dea = bundle.macd.signal_line.iloc[-1]
        hist = bundle.macd.histogram.iloc[-1]
        hist_color = "green" if hist > 0 else "red"
        table.add_row(
            "MACD",
            Text(f"diff {diff:.4f}  dea {dea:.4f}  hist {hist:+.4f}", style=hist_color),
        )

    if bundle.pressure:
        point = bundle.pressure[-1]
        text = Text(f"{point.pressure:+.2f} ({point.change_rate:+.1f}%)")
        if point.signal is PressureSignal.STRONG_UP:
            text.append("  strong up", style="bold green")
        elif point.signal is PressureSignal.STRONG_DOWN:
            text.append("  strong down", style="bold red")
        table.add_row("Pressure", text)

    if bundle.ladder:
        level = bundle.ladder[-1]
        table.add_row("Blue band", f"{level.blue_lower:.2f} - {level.blue_upper:.2f}")
        table.add_row("Yellow band", f"{level.yellow_lower:.2f} - {level.yellow_upper:.2f}")
        table.add_row(
            "Ladder",
            Text("STRONG", style="bold green") if bundle.ladder_strong else Text("-", style="dim"),
        )

    console.print(Panel(table, title=Text(symbol, style="bold white"), border_style="blue"))

    events = Table(title="Recent Events")
    events.add_column("Time")
    events.add_column("Source")
    events.add_column("Side", justify="center")
    events.add_column("Label")

    rows = [(s.time, "CD", s.direction, s.label) for s in bundle.cd_signals]
    rows += [(s.time, "NX", s.direction, s.label) for s in bundle.nx_signals]
    for time_ms, source, direction, label in sorted(rows, key=lambda r: r[0])[-15:]:
        events.add_row(format_time(time_ms, interval), source, format_direction(direction), label)

    console.print(events)


def bundle_to_dict(symbol: str, bundle: IndicatorBundle) -> dict:
    """JSON-friendly view of an indicator bundle."""
    return {
        "symbol": symbol,
        "bars": len(bundle.candles),
        "macd": {
            "diff": bundle.macd.diff.tolist(),
            "signal_line": bundle.macd.signal_line.tolist(),
            "histogram": bundle.macd.histogram.tolist(),
        },
        "cd_signals": [s.model_dump(mode="json") for s in bundle.cd_signals],
        "nx_signals": [s.model_dump(mode="json") for s in bundle.nx_signals],
        "pressure": [p.model_dump(mode="json") for p in bundle.pressure],
        "ladder": [level.model_dump(mode="json") for level in bundle.ladder],
        "ladder_strong": bundle.ladder_strong,
    }


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging")
@click.pass_context
def main(ctx, verbose):
    """kline-signals - CD, pressure, ladder and NX signals from candle files."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging(verbose)


@main.command()
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--interval", "-i", default="1d", help="Bar interval of the output (e.g. 1h, 4h, 1d, 1mo)")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def analyze(ctx, path: Path, interval: str, json_output: bool):
    """Compute all indicators for one candle file."""
    try:
        candles = aggregate_for_interval(load_candles(path), interval)
    except CandleLoadError as e:
        console.print(f"[red]Error:[/red] {e}")
        ctx.exit(1)

    if not candles:
        console.print(f"[yellow]No candles in {path}[/yellow]")
        ctx.exit(1)

    bundle = compute_indicators(candles)
    symbol = path.stem.upper()

    if json_output:
        console.print_json(json.dumps(bundle_to_dict(symbol, bundle)))
    else:
        display_bundle(symbol, bundle, interval)


@main.command()
@click.argument("paths", nargs=-1, type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--condition",
    "-c",
    "conditions",
    multiple=True,
    type=click.Choice([c.value for c in ScreenCondition]),
    help="Condition to screen for (repeatable, evaluated in order)",
)
@click.option("--interval", "-i", default=None, help="Bar interval of the screened candles")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def screen(ctx, paths: tuple[Path, ...], conditions: tuple[str, ...], interval: str | None, json_output: bool):
    """Screen candle files (one symbol per file) for signal conditions."""
    if not paths:
        console.print("[red]Error:[/red] No candle files provided")
        ctx.exit(1)

    cfg = get_screener_config()
    interval = interval or cfg.default_interval
    conditions = conditions or tuple(cfg.default_conditions)

    universe = {}
    load_errors = []
    for path in paths:
        try:
            universe[path.stem.upper()] = aggregate_for_interval(load_candles(path), interval)
        except CandleLoadError as e:
            load_errors.append({"symbol": path.stem.upper(), "error": str(e)})

    result = screen_universe(universe, conditions, cfg)
    result.errors = load_errors + result.errors

    if json_output:
        console.print_json(
            json.dumps(
                {
                    "hits": [h.model_dump(mode="json") for h in result.hits],
                    "screened": result.screened,
                    "skipped": result.skipped,
                    "errors": result.errors,
                }
            )
        )
        return

    summary_text = (
        f"Screened: {result.screened} | "
        f"Hits: {len(result.hits)} | "
        f"Skipped: {len(result.skipped)} | "
        f"Time: {result.duration_seconds:.2f}s"
    )
    console.print(Panel(summary_text, title="Screen Summary", border_style="blue"))

    table = Table(title="Screener Hits", show_lines=True)
    table.add_column("Symbol", style="bold")
    table.add_column("Condition", style="cyan")
    table.add_column("Detail")
    table.add_column("Time")
    for hit in result.hits:
        table.add_row(
            hit.symbol,
            hit.condition.value,
            hit.detail,
            format_time(hit.time, interval) if hit.time is not None else "-",
        )
    console.print(table)

    if result.errors:
        console.print("\n[red]Errors:[/red]")
        for err in result.errors:
            console.print(f"  {err['symbol']}: {err['error']}")


@main.command()
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--interval", "-i", required=True, help="Target interval (4h or 1mo aggregate)")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Output file path")
@click.pass_context
def aggregate(ctx, path: Path, interval: str, output: Path | None):
    """Aggregate a candle file into coarser bars and write JSON."""
    try:
        candles = load_candles(path)
    except CandleLoadError as e:
        console.print(f"[red]Error:[/red] {e}")
        ctx.exit(1)

    aggregated = aggregate_for_interval(candles, interval)
    payload = json.dumps([c.model_dump() for c in aggregated], indent=2)

    if output:
        output.write_text(payload)
        console.print(f"[green]Wrote {len(aggregated)} candles to:[/green] {output}")
    else:
        click.echo(payload)


if __name__ == "__main__":
    main()
