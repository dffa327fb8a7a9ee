# chart_digitizer/detectors/heuristic.py
import logging

from ..colors import profile_mask
from ..types import ChartBounds, ColorProfile, RasterImage

logger = logging.getLogger(__name__)


def detect_bounds(image: RasterImage, margin: float = 0.10) -> ChartBounds:
    """Trim ``margin`` of the width/height from every edge.

    Not content aware: axis labels and legends are assumed to live in the
    trimmed strips.
    """
    w, h = image.width, image.height
    mx = int(w * margin)
    my = int(h * margin)
    bounds = ChartBounds(x=mx, y=my, width=w - 2 * mx, height=h - 2 * my)
    logger.debug("Bounds from %.0f%% margin: %s", margin * 100, bounds)
    return bounds


def detect_dominant_color(
    image: RasterImage,
    bounds: ChartBounds,
    profiles: tuple[ColorProfile, ...] | list[ColorProfile],
    stride: int = 10,
    default: str = "blue",
) -> str:
    """Sample the bounds on a coarse grid and return the best-matching profile.

    Ties go to the profile declared first. If nothing matches (thin lines
    can fall between grid samples) ``default`` is returned.
    """
    grid = image.rgb[bounds.y : bounds.bottom : stride, bounds.x : bounds.right : stride]
    counts = {p.name: int(profile_mask(grid, p).sum()) for p in profiles}

    best, best_count = None, 0
    for p in profiles:
        if counts[p.name] > best_count:
            best, best_count = p.name, counts[p.name]

    if best is None:
        logger.warning(
            "No color profile matched %d sampled pixels; falling back to '%s'",
            grid.shape[0] * grid.shape[1],
            default,
        )
        return default
    logger.info("Dominant line color: %s (counts=%s)", best, counts)
    return best
