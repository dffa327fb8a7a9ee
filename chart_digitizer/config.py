# chart_digitizer/config.py
import json
from dataclasses import dataclass, field, fields
from pathlib import Path

from .colors import DEFAULT_PROFILES
from .types import ChartBounds, ColorProfile

# ---------- Defaults ----------
DEFAULT_WEIGHTS = {"linear": 0.3, "polynomial": 0.4, "moving_average": 0.3}


@dataclass
class AnalyzerConfig:
    """Settings for turning an image into a pixel trace."""

    margin: float = 0.10  # fraction trimmed from each edge when bounds is None
    sample_stride: int = 10  # dominant-color probe grid
    scan_stride: int = 1  # column step of the trace scan
    z_threshold: float = 2.5
    min_outlier_points: int = 10
    smoothing_window: int = 5
    min_trace_points: int = 10
    default_color: str = "blue"
    color: str | None = None  # force a profile, skip detection
    bounds: ChartBounds | None = None  # explicit plot rectangle, skip margin trim
    profiles: tuple[ColorProfile, ...] = DEFAULT_PROFILES


@dataclass
class ForecastConfig:
    """Settings for the regression ensemble."""

    polynomial_degree: int = 2
    recent_window: int = 30
    weights: dict[str, float] = field(default_factory=lambda: dict(DEFAULT_WEIGHTS))


@dataclass
class DigitizerConfig:
    analyzer: AnalyzerConfig = field(default_factory=AnalyzerConfig)
    forecast: ForecastConfig = field(default_factory=ForecastConfig)


def _profile_from_dict(d: dict) -> ColorProfile:
    return ColorProfile(
        name=d["name"], r=tuple(d["r"]), g=tuple(d["g"]), b=tuple(d["b"])
    )


def _build(cls, data: dict):
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} keys: {sorted(unknown)}")
    return cls(**data)


def config_from_dict(data: dict) -> DigitizerConfig:
    """Build a config from plain JSON-style data; missing keys keep defaults."""
    unknown = set(data) - {"analyzer", "forecast"}
    if unknown:
        raise ValueError(f"Unknown config sections: {sorted(unknown)}")

    analyzer = dict(data.get("analyzer", {}))
    if "profiles" in analyzer:
        analyzer["profiles"] = tuple(_profile_from_dict(p) for p in analyzer["profiles"])
    if analyzer.get("bounds") is not None:
        analyzer["bounds"] = ChartBounds(**analyzer["bounds"])

    return DigitizerConfig(
        analyzer=_build(AnalyzerConfig, analyzer),
        forecast=_build(ForecastConfig, dict(data.get("forecast", {}))),
    )


def load_config(path: str | Path) -> DigitizerConfig:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)
    with p.open(encoding="utf-8") as fh:
        return config_from_dict(json.load(fh))
