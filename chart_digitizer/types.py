# chart_digitizer/types.py
from dataclasses import dataclass, field

import cv2
import numpy as np


@dataclass(frozen=True, eq=False)
class RasterImage:
    """Decoded image with random pixel access.

    Attributes
    ----------
    pixels : np.ndarray
        ``(height, width, 4)`` uint8 array in RGBA order. Never mutated.
    """

    pixels: np.ndarray

    def __post_init__(self):
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 4:
            raise ValueError(f"Expected (H, W, 4) RGBA array, got {self.pixels.shape}")

    @classmethod
    def from_rgba(cls, arr: np.ndarray) -> "RasterImage":
        return cls(np.ascontiguousarray(arr, dtype=np.uint8))

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "RasterImage":
        """Wrap an OpenCV array (gray, BGR or BGRA)."""
        if arr.dtype == np.uint16:
            arr = (arr >> 8).astype(np.uint8)
        if arr.ndim == 2:
            rgba = cv2.cvtColor(arr, cv2.COLOR_GRAY2RGBA)
        elif arr.shape[2] == 3:
            rgba = cv2.cvtColor(arr, cv2.COLOR_BGR2RGBA)
        elif arr.shape[2] == 4:
            rgba = cv2.cvtColor(arr, cv2.COLOR_BGRA2RGBA)
        else:
            raise ValueError(f"Unsupported channel count: {arr.shape[2]}")
        return cls.from_rgba(rgba)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def rgb(self) -> np.ndarray:
        return self.pixels[:, :, :3]

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        r, g, b, a = self.pixels[y, x]
        return int(r), int(g), int(b), int(a)


@dataclass(frozen=True)
class ChartBounds:
    """Plot rectangle inside the image; ``right``/``bottom`` are exclusive."""

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height


@dataclass(frozen=True)
class ColorProfile:
    """Named inclusive RGB ranges used to classify line pixels."""

    name: str
    r: tuple[int, int]
    g: tuple[int, int]
    b: tuple[int, int]


@dataclass(frozen=True)
class PixelPoint:
    x: int
    y: float


@dataclass(frozen=True)
class DateRange:
    start: float  # POSIX seconds
    end: float


@dataclass(frozen=True)
class PriceRange:
    min: float
    max: float


@dataclass(frozen=True)
class DomainPoint:
    timestamp: float
    price: float


@dataclass
class PredictionResult:
    """Ensemble forecast for a single target timestamp.

    Attributes
    ----------
    ensemble : float
        Weighted average of the per-model predictions.
    per_model : dict[str, float]
        Prediction of each model, keyed by model name, in registry order.
    confidence : float
        ``max(0, 100 - std_dev)``; a disagreement measure, not a probability.
    std_dev : float
        Population standard deviation of the model predictions around
        ``ensemble``.
    """

    ensemble: float
    per_model: dict[str, float]
    confidence: float
    std_dev: float


@dataclass
class ChartTrace:
    """Output of one analyzer pass: where it looked and what it found."""

    bounds: ChartBounds
    color: str
    raw_count: int
    points: list[PixelPoint]


@dataclass
class ChartReport:
    """Structured output for a single chart image.

    Attributes
    ----------
    bounds : ChartBounds
        Plot rectangle used for scanning and mapping.
    color : str
        Name of the color profile the line was traced with.
    points : list[PixelPoint]
        Cleaned pixel-space trace.
    series : list[DomainPoint]
        Trace converted to (timestamp, price).
    query_timestamp, query_price : float | None
        Point lookup, when a query timestamp was supplied.
    forecast_timestamp : float
        Target of the prediction.
    prediction : PredictionResult
        Ensemble forecast at ``forecast_timestamp``.
    meta : dict
        Extra facts (raw point count, ranges used).
    """

    bounds: ChartBounds
    color: str
    points: list[PixelPoint]
    series: list[DomainPoint]
    query_timestamp: float | None
    query_price: float | None
    forecast_timestamp: float
    prediction: PredictionResult
    meta: dict = field(default_factory=dict)
