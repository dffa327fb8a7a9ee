# chart_digitizer/loaders.py
from pathlib import Path

import cv2
import numpy as np

from .errors import ImageDecodeError
from .types import RasterImage


def load_image(img: str | Path | bytes | np.ndarray | RasterImage) -> RasterImage:
    """Decode a path, encoded bytes or OpenCV array into a RasterImage."""
    if isinstance(img, RasterImage):
        return img
    if isinstance(img, np.ndarray):
        return RasterImage.from_array(img)
    if isinstance(img, (bytes, bytearray)):
        buf = np.frombuffer(bytes(img), dtype=np.uint8)
        im = cv2.imdecode(buf, cv2.IMREAD_UNCHANGED) if buf.size else None
        if im is None:
            raise ImageDecodeError("Failed to decode image bytes")
        return RasterImage.from_array(im)

    p = Path(img)
    if not p.exists():
        raise FileNotFoundError(p)
    im = cv2.imread(str(p), cv2.IMREAD_UNCHANGED)
    if im is None:
        raise ImageDecodeError(f"Failed to read image: {p}")
    return RasterImage.from_array(im)
