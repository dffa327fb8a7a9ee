# chart_digitizer/pipeline.py
import logging
from pathlib import Path

import numpy as np

from .analyzer import ChartAnalyzer
from .config import DigitizerConfig
from .forecast import ForecastEngine
from .loaders import load_image
from .mapper import CoordinateMapper, lookup
from .render import save_annotated
from .types import ChartReport, ChartTrace, DateRange, DomainPoint, PriceRange, RasterImage
from .validators import validate_config, validate_ranges

logger = logging.getLogger(__name__)


def trace_series(
    image: str | Path | bytes | np.ndarray | RasterImage,
    date_range: DateRange,
    price_range: PriceRange,
    config: DigitizerConfig | None = None,
) -> tuple[RasterImage, ChartTrace, list[DomainPoint]]:
    """Decode, trace and map a chart; no forecasting."""
    cfg = validate_config(config or DigitizerConfig())
    validate_ranges(date_range, price_range)

    img = load_image(image)
    trace = ChartAnalyzer(cfg.analyzer).trace(img)
    series = CoordinateMapper(trace.bounds, date_range, price_range).to_series(trace.points)
    return img, trace, series


def analyze(
    image: str | Path | bytes | np.ndarray | RasterImage,
    date_range: DateRange,
    price_range: PriceRange,
    forecast_at: float,
    query_at: float | None = None,
    config: DigitizerConfig | None = None,
    debug_save: str | Path | None = None,
) -> ChartReport:
    """
    Run trace → map → (lookup) → forecast on one chart image.

    Parameters
    ----------
    image : str | Path | bytes | np.ndarray | RasterImage
        Input image path, encoded bytes, OpenCV array or decoded image.
    date_range, price_range
        Axis values at the edges of the plot rectangle.
    forecast_at : float
        Target timestamp (POSIX seconds) for the prediction.
    query_at : float | None
        Optional timestamp to look up on the recovered series.
    config : DigitizerConfig | None
        Analyzer and forecast settings.
    debug_save : str | Path | None
        If set, save the image annotated with bounds and trace to this path.
    """
    cfg = config or DigitizerConfig()
    img, trace, series = trace_series(image, date_range, price_range, cfg)

    if debug_save:
        save_annotated(debug_save, img, trace.bounds, trace.points)

    query_price = lookup(series, query_at) if query_at is not None else None
    prediction = ForecastEngine(cfg.forecast).predict(series, forecast_at)

    return ChartReport(
        bounds=trace.bounds,
        color=trace.color,
        points=trace.points,
        series=series,
        query_timestamp=query_at,
        query_price=query_price,
        forecast_timestamp=forecast_at,
        prediction=prediction,
        meta={
            "raw_points": trace.raw_count,
            "date_range": [date_range.start, date_range.end],
            "price_range": [price_range.min, price_range.max],
        },
    )
