import cv2
import numpy as np
import pytest

from chart_digitizer.types import RasterImage

WHITE = (255, 255, 255, 255)
BLUE = (0, 0, 255, 255)
RED = (255, 0, 0, 255)


def blank_rgba(width: int, height: int) -> np.ndarray:
    arr = np.empty((height, width, 4), dtype=np.uint8)
    arr[:] = WHITE
    return arr


@pytest.fixture
def diagonal_rgba():
    """100x50 chart with a 1px blue diagonal from (0, 49) to (99, 0)."""
    arr = blank_rgba(100, 50)
    cv2.line(arr, (0, 49), (99, 0), BLUE, 1)
    return arr


@pytest.fixture
def diagonal_image(diagonal_rgba):
    return RasterImage.from_rgba(diagonal_rgba)


@pytest.fixture
def diagonal_png(tmp_path, diagonal_rgba):
    path = tmp_path / "chart.png"
    cv2.imwrite(str(path), cv2.cvtColor(diagonal_rgba, cv2.COLOR_RGBA2BGR))
    return path


@pytest.fixture
def blank_png(tmp_path):
    path = tmp_path / "blank.png"
    cv2.imwrite(str(path), cv2.cvtColor(blank_rgba(100, 50), cv2.COLOR_RGBA2BGR))
    return path
