# chart_digitizer/mapper.py
import logging

from .errors import InsufficientSeriesError
from .types import ChartBounds, DateRange, DomainPoint, PixelPoint, PriceRange

logger = logging.getLogger(__name__)


class CoordinateMapper:
    """
    Linear pixel <-> (timestamp, price) conversion for one chart.

    Pixel ``y`` grows downward and price grows upward, so the vertical
    axis is inverted. A zero-size bounds axis maps to the range's lower
    bound instead of dividing by zero.

    Parameters
    ----------
    bounds : ChartBounds
        Plot rectangle, in image pixels.
    date_range : DateRange
        Timestamps at the left and right edges of ``bounds``.
    price_range : PriceRange
        Prices at the bottom and top edges of ``bounds``.
    """

    def __init__(self, bounds: ChartBounds, date_range: DateRange, price_range: PriceRange):
        self.bounds = bounds
        self.date_range = date_range
        self.price_range = price_range

    def pixel_to_domain(self, point: PixelPoint) -> DomainPoint:
        b, dr, pr = self.bounds, self.date_range, self.price_range
        if b.width == 0:
            timestamp = dr.start
        else:
            nx = (point.x - b.x) / b.width
            timestamp = dr.start + nx * (dr.end - dr.start)
        if b.height == 0:
            price = pr.min
        else:
            ny = (point.y - b.y) / b.height
            price = pr.min + (1.0 - ny) * (pr.max - pr.min)
        return DomainPoint(timestamp=timestamp, price=price)

    def domain_to_pixel(self, point: DomainPoint) -> PixelPoint:
        """Inverse of ``pixel_to_domain``; ``x`` is rounded to a column."""
        b, dr, pr = self.bounds, self.date_range, self.price_range
        span_t = dr.end - dr.start
        span_p = pr.max - pr.min
        nx = 0.0 if span_t == 0 else (point.timestamp - dr.start) / span_t
        ny = 0.0 if span_p == 0 else (point.price - pr.min) / span_p
        return PixelPoint(
            x=int(round(b.x + nx * b.width)), y=b.y + (1.0 - ny) * b.height
        )

    def to_series(self, points: list[PixelPoint]) -> list[DomainPoint]:
        return [self.pixel_to_domain(p) for p in points]

    @staticmethod
    def lookup(series: list[DomainPoint], target: float) -> float:
        return lookup(series, target)


def lookup(series: list[DomainPoint], target: float) -> float:
    """
    Price at ``target``.

    The nearest point is found first (first one wins on a tie). For an
    interior nearest point bracketed by its predecessor and successor, the
    price is interpolated between those two neighbours. An endpoint nearest
    point is interpolated with its only neighbour while the target stays
    inside the series. Anything else returns the nearest point's price.
    """
    if not series:
        raise InsufficientSeriesError(0, 1)

    nearest, best = 0, abs(series[0].timestamp - target)
    for i, p in enumerate(series[1:], start=1):
        d = abs(p.timestamp - target)
        if d < best:
            nearest, best = i, d

    here = series[nearest]
    last = len(series) - 1
    if 0 < nearest < last:
        lo, hi = series[nearest - 1], series[nearest + 1]
    elif nearest == 0 and last > 0 and target > here.timestamp:
        lo, hi = here, series[1]
    elif nearest == last and last > 0 and target < here.timestamp:
        lo, hi = series[last - 1], here
    else:
        logger.debug("Lookup %s outside observed span; using nearest point", target)
        return here.price

    if not lo.timestamp <= target <= hi.timestamp or hi.timestamp == lo.timestamp:
        return here.price
    frac = (target - lo.timestamp) / (hi.timestamp - lo.timestamp)
    return lo.price + frac * (hi.price - lo.price)
