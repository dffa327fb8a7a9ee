# chart_digitizer/validators.py
import math

from .config import AnalyzerConfig, DigitizerConfig, ForecastConfig
from .types import ChartBounds, DateRange, PriceRange, RasterImage


def validate_bounds(bounds: ChartBounds, image: RasterImage) -> ChartBounds:
    if bounds.width <= 0 or bounds.height <= 0:
        raise ValueError(f"Chart bounds must have positive size: {bounds}")
    if (
        bounds.x < 0
        or bounds.y < 0
        or bounds.right > image.width
        or bounds.bottom > image.height
    ):
        raise ValueError(
            f"Chart bounds {bounds} exceed image size {image.width}x{image.height}"
        )
    return bounds


def validate_ranges(date_range: DateRange, price_range: PriceRange) -> None:
    values = (date_range.start, date_range.end, price_range.min, price_range.max)
    if not all(math.isfinite(v) for v in values):
        raise ValueError(f"Axis ranges must be finite: {date_range}, {price_range}")
    if date_range.end < date_range.start:
        raise ValueError(f"Date range ends before it starts: {date_range}")
    if price_range.max < price_range.min:
        raise ValueError(f"Price range max below min: {price_range}")


def validate_weights(weights: dict[str, float]) -> dict[str, float]:
    if any(w < 0 for w in weights.values()):
        raise ValueError(f"Ensemble weights must be non-negative: {weights}")
    total = sum(weights.values())
    if not math.isclose(total, 1.0, rel_tol=0.0, abs_tol=1e-9):
        raise ValueError(f"Ensemble weights must sum to 1, got {total}")
    return weights


def _validate_analyzer(cfg: AnalyzerConfig) -> None:
    if not 0 <= cfg.margin < 0.5:
        raise ValueError(f"margin must be in [0, 0.5), got {cfg.margin}")
    if cfg.sample_stride < 1 or cfg.scan_stride < 1:
        raise ValueError("strides must be >= 1")
    if cfg.smoothing_window < 1:
        raise ValueError("smoothing_window must be >= 1")
    if cfg.z_threshold <= 0:
        raise ValueError("z_threshold must be positive")
    if cfg.min_trace_points < 1 or cfg.min_outlier_points < 1:
        raise ValueError("minimum point counts must be >= 1")
    if not cfg.profiles:
        raise ValueError("at least one color profile is required")
    names = [p.name for p in cfg.profiles]
    if len(set(names)) != len(names):
        raise ValueError(f"duplicate color profile names: {names}")
    for name in (cfg.default_color, cfg.color):
        if name is not None and name not in names:
            raise ValueError(f"color '{name}' is not in the profile registry {names}")


def _validate_forecast(cfg: ForecastConfig) -> None:
    if cfg.polynomial_degree < 1:
        raise ValueError("polynomial_degree must be >= 1")
    if cfg.recent_window < 2:
        raise ValueError("recent_window must be >= 2")
    validate_weights(cfg.weights)


def validate_config(cfg: DigitizerConfig) -> DigitizerConfig:
    _validate_analyzer(cfg.analyzer)
    _validate_forecast(cfg.forecast)
    return cfg
