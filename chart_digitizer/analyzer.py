# chart_digitizer/analyzer.py
import logging

import numpy as np

from .colors import get_profile, profile_mask
from .config import AnalyzerConfig
from .detectors.heuristic import detect_bounds, detect_dominant_color
from .errors import InsufficientDataError
from .types import ChartBounds, ChartTrace, ColorProfile, PixelPoint, RasterImage
from .validators import validate_bounds

logger = logging.getLogger(__name__)


# ---------- Trace stages ----------
def extract_trace(
    image: RasterImage, bounds: ChartBounds, profile: ColorProfile, stride: int = 1
) -> list[PixelPoint]:
    """One point per matching column, ``y`` = median of the matching rows.

    Columns without a match are skipped, not interpolated.
    """
    region = image.rgb[bounds.y : bounds.bottom, bounds.x : bounds.right]
    mask = profile_mask(region, profile)
    points: list[PixelPoint] = []
    for col in range(0, bounds.width, stride):
        rows = np.flatnonzero(mask[:, col])
        if rows.size:
            points.append(
                PixelPoint(x=bounds.x + col, y=bounds.y + float(np.median(rows)))
            )
    return points


def reject_outliers(
    points: list[PixelPoint], z_threshold: float = 2.5, min_points: int = 10
) -> list[PixelPoint]:
    """Single-pass z-score filter on ``y``.

    Short series and zero-variance series are returned unchanged.
    """
    if len(points) < min_points:
        return list(points)
    ys = np.array([p.y for p in points], dtype=np.float64)
    mean = ys.mean()
    std = ys.std()
    if std == 0:
        return list(points)
    z = np.abs(ys - mean) / std
    return [p for p, score in zip(points, z) if score <= z_threshold]


def smooth(points: list[PixelPoint], window: int = 5) -> list[PixelPoint]:
    """Centered moving average of ``y``; windows are truncated at the edges."""
    n = len(points)
    if window <= 1 or n < window:
        return list(points)
    half = window // 2
    ys = np.array([p.y for p in points], dtype=np.float64)
    out: list[PixelPoint] = []
    for i, p in enumerate(points):
        lo = max(0, i - half)
        hi = min(n, i + half + 1)
        out.append(PixelPoint(x=p.x, y=float(ys[lo:hi].mean())))
    return out


# ---------- Analyzer ----------
class ChartAnalyzer:
    """
    Recovers the plotted line of a single-series chart as pixel points.

    Parameters
    ----------
    config : AnalyzerConfig | None
        Bounds margin, color registry, strides and cleaning thresholds.
        Defaults to ``AnalyzerConfig()``.
    """

    def __init__(self, config: AnalyzerConfig | None = None):
        self.config = config or AnalyzerConfig()

    def detect_bounds(self, image: RasterImage) -> ChartBounds:
        if self.config.bounds is not None:
            return validate_bounds(self.config.bounds, image)
        return validate_bounds(detect_bounds(image, self.config.margin), image)

    def detect_color(self, image: RasterImage, bounds: ChartBounds) -> str:
        if self.config.color is not None:
            return self.config.color
        return detect_dominant_color(
            image,
            bounds,
            self.config.profiles,
            stride=self.config.sample_stride,
            default=self.config.default_color,
        )

    def trace(self, image: RasterImage) -> ChartTrace:
        """
        Run bounds → color → extract → reject outliers → smooth.

        Raises
        ------
        InsufficientDataError
            If extraction yields fewer than ``min_trace_points`` points.
        """
        cfg = self.config
        bounds = self.detect_bounds(image)
        color = self.detect_color(image, bounds)
        profile = get_profile(color, cfg.profiles)

        raw = extract_trace(image, bounds, profile, stride=cfg.scan_stride)
        if len(raw) < cfg.min_trace_points:
            raise InsufficientDataError(len(raw), cfg.min_trace_points, color)

        kept = reject_outliers(raw, cfg.z_threshold, cfg.min_outlier_points)
        points = smooth(kept, cfg.smoothing_window)
        logger.info(
            "Traced %s line in %s: %d points, %d dropped as outliers",
            color,
            bounds,
            len(raw),
            len(raw) - len(kept),
        )
        return ChartTrace(bounds=bounds, color=color, raw_count=len(raw), points=points)

    def analyze(self, image: RasterImage) -> list[PixelPoint]:
        return self.trace(image).points
