import pytest

from chart_digitizer.errors import InsufficientSeriesError
from chart_digitizer.mapper import CoordinateMapper, lookup
from chart_digitizer.types import ChartBounds, DateRange, DomainPoint, PixelPoint, PriceRange


@pytest.fixture
def mapper():
    return CoordinateMapper(ChartBounds(x=0, y=0, width=100, height=10), DateRange(0, 100), PriceRange(0, 10))


def _series(*pairs):
    return [DomainPoint(timestamp=t, price=p) for t, p in pairs]


# ---------- pixel_to_domain ----------
def test_center_pixel_maps_to_center_value(mapper):
    assert mapper.pixel_to_domain(PixelPoint(x=50, y=5)) == DomainPoint(timestamp=50, price=5)


def test_vertical_axis_is_inverted(mapper):
    assert mapper.pixel_to_domain(PixelPoint(x=0, y=0)).price == 10
    assert mapper.pixel_to_domain(PixelPoint(x=0, y=10)).price == 0
    assert mapper.pixel_to_domain(PixelPoint(x=0, y=2.5)).price == pytest.approx(7.5)


def test_offset_bounds_are_subtracted():
    m = CoordinateMapper(ChartBounds(x=20, y=10, width=80, height=40), DateRange(1000, 1800), PriceRange(100, 200))
    dp = m.pixel_to_domain(PixelPoint(x=60, y=20))
    assert dp.timestamp == pytest.approx(1400)
    assert dp.price == pytest.approx(175)


def test_zero_size_bounds_map_to_lower_bound():
    m = CoordinateMapper(ChartBounds(x=5, y=5, width=0, height=0), DateRange(10, 20), PriceRange(1, 2))
    assert m.pixel_to_domain(PixelPoint(x=7, y=9)) == DomainPoint(timestamp=10, price=1)


def test_domain_to_pixel_inverts_mapping(mapper):
    assert mapper.domain_to_pixel(DomainPoint(timestamp=50, price=5)) == PixelPoint(x=50, y=5.0)
    assert mapper.domain_to_pixel(DomainPoint(timestamp=0, price=10)) == PixelPoint(x=0, y=0.0)


def test_domain_to_pixel_zero_span_maps_to_bottom_left():
    m = CoordinateMapper(ChartBounds(x=4, y=6, width=20, height=10), DateRange(5, 5), PriceRange(3, 3))
    assert m.domain_to_pixel(DomainPoint(timestamp=5, price=3)) == PixelPoint(x=4, y=16.0)
    assert m.domain_to_pixel(DomainPoint(timestamp=99, price=-1)) == PixelPoint(x=4, y=16.0)


def test_to_series_keeps_order(mapper):
    series = mapper.to_series([PixelPoint(0, 10.0), PixelPoint(40, 6.0), PixelPoint(90, 1.0)])
    assert [p.timestamp for p in series] == [0, 40, 90]
    assert [p.price for p in series] == pytest.approx([0, 4, 9])


# ---------- lookup ----------
def test_lookup_interpolates_between_bracketing_points():
    assert lookup(_series((0, 10), (10, 20)), 5) == pytest.approx(15)


def test_lookup_outside_span_returns_nearest_endpoint():
    series = _series((0, 10), (10, 20))
    assert lookup(series, -5) == 10
    assert lookup(series, 25) == 20


def test_lookup_interior_interpolates_between_neighbours():
    series = _series((0, 10), (10, 20), (20, 5))
    assert lookup(series, 10) == pytest.approx(7.5)
    assert lookup(series, 11) == pytest.approx(7.25)


def test_lookup_interior_skips_nearest_point_price():
    series = _series((0, 0), (10, 10), (20, 40))
    assert lookup(series, 12) == pytest.approx(24)
    assert lookup(series, 8) == pytest.approx(16)


def test_lookup_endpoint_exact_timestamp():
    series = _series((0, 10), (10, 20), (20, 5))
    assert lookup(series, 0) == 10
    assert lookup(series, 20) == 5


def test_lookup_single_point():
    assert lookup(_series((3, 42)), 100) == 42


def test_lookup_is_available_on_mapper(mapper):
    assert mapper.lookup(_series((0, 10), (10, 20)), 2.5) == pytest.approx(12.5)


def test_lookup_empty_series_raises():
    with pytest.raises(InsufficientSeriesError):
        lookup([], 5)
