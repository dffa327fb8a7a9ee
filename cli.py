# cli.py
import json
import logging
from dataclasses import asdict
from datetime import datetime, timezone

import typer

from chart_digitizer.config import DigitizerConfig, load_config
from chart_digitizer.errors import ChartDigitizerError
from chart_digitizer.pipeline import analyze, trace_series
from chart_digitizer.types import DateRange, PriceRange

app = typer.Typer(help="Digitize a line chart image and forecast its price.")


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def parse_date(value: str) -> float:
    """ISO date or datetime to POSIX seconds; naive values are UTC."""
    try:
        dt = datetime.fromisoformat(value.strip())
    except ValueError as e:
        raise typer.BadParameter(f"Not an ISO date: {value!r}") from e
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


def _iso(ts: float | None) -> str | None:
    if ts is None:
        return None
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat()


def _load(config: str | None) -> DigitizerConfig:
    return load_config(config) if config else DigitizerConfig()


def _fail(e: Exception) -> None:
    typer.echo(f"Error: {e}", err=True)
    raise typer.Exit(code=1)


@app.command()
def forecast(
    path: str,
    forecast_at: str = typer.Option(..., "--at", help="Date to predict, e.g. 2026-02-26 14:00"),
    date_start: str = typer.Option(..., help="Date at the left edge of the plot"),
    date_end: str = typer.Option(..., help="Date at the right edge of the plot"),
    price_min: float = typer.Option(..., help="Price at the bottom edge of the plot"),
    price_max: float = typer.Option(..., help="Price at the top edge of the plot"),
    query: str | None = typer.Option(None, help="Date to look up on the chart"),
    config: str | None = typer.Option(None, help="JSON config file"),
    debug_save: str | None = typer.Option(None, help="Save annotated image here"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    _setup_logging(verbose)
    try:
        report = analyze(
            path,
            DateRange(parse_date(date_start), parse_date(date_end)),
            PriceRange(price_min, price_max),
            forecast_at=parse_date(forecast_at),
            query_at=parse_date(query) if query else None,
            config=_load(config),
            debug_save=debug_save,
        )
    except (ChartDigitizerError, FileNotFoundError, ValueError) as e:
        _fail(e)

    pred = report.prediction
    out = {
        "color": report.color,
        "bounds": asdict(report.bounds),
        "points": len(report.points),
        "query": _iso(report.query_timestamp),
        "query_price": None if report.query_price is None else round(report.query_price, 2),
        "forecast": _iso(report.forecast_timestamp),
        "prediction": round(pred.ensemble, 2),
        "per_model": {k: round(v, 2) for k, v in pred.per_model.items()},
        "confidence": round(pred.confidence, 2),
        "std_dev": round(pred.std_dev, 4),
    }
    print(json.dumps(out, indent=2, ensure_ascii=False))


@app.command()
def trace(
    path: str,
    date_start: str = typer.Option(..., help="Date at the left edge of the plot"),
    date_end: str = typer.Option(..., help="Date at the right edge of the plot"),
    price_min: float = typer.Option(..., help="Price at the bottom edge of the plot"),
    price_max: float = typer.Option(..., help="Price at the top edge of the plot"),
    config: str | None = typer.Option(None, help="JSON config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Print the recovered pixel trace and (timestamp, price) series."""
    _setup_logging(verbose)
    try:
        _, tr, series = trace_series(
            path,
            DateRange(parse_date(date_start), parse_date(date_end)),
            PriceRange(price_min, price_max),
            config=_load(config),
        )
    except (ChartDigitizerError, FileNotFoundError, ValueError) as e:
        _fail(e)

    out = {
        "color": tr.color,
        "bounds": asdict(tr.bounds),
        "raw_points": tr.raw_count,
        "points": [asdict(p) for p in tr.points],
        "series": [{"date": _iso(p.timestamp), "price": round(p.price, 4)} for p in series],
    }
    print(json.dumps(out, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    app()
