# chart_digitizer/render.py
from pathlib import Path

import cv2
import numpy as np

from .types import ChartBounds, PixelPoint, RasterImage

BOUNDS_COLOR = (0, 200, 255)  # BGR
TRACE_COLOR = (255, 0, 255)


def annotate(
    image: RasterImage, bounds: ChartBounds, points: list[PixelPoint]
) -> np.ndarray:
    """BGR copy of ``image`` with the plot rectangle and trace drawn on top."""
    out = cv2.cvtColor(image.pixels, cv2.COLOR_RGBA2BGR)
    cv2.rectangle(
        out, (bounds.x, bounds.y), (bounds.right - 1, bounds.bottom - 1), BOUNDS_COLOR, 1
    )
    if points:
        pts = np.array([[p.x, int(round(p.y))] for p in points], dtype=np.int32)
        cv2.polylines(out, [pts.reshape(-1, 1, 2)], False, TRACE_COLOR, 1)
    return out


def save_annotated(
    path: str | Path, image: RasterImage, bounds: ChartBounds, points: list[PixelPoint]
) -> Path:
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(out_path), annotate(image, bounds, points)):
        raise ValueError(f"Failed to write image: {out_path}")
    return out_path
