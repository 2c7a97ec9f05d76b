"""Quantize rasters to the 6-color palette.

Both functions work in place on a numpy uint8 raster of shape (h, w, 3) or
(h, w, 4) and return the same array. After either pass every pixel is an
exact palette color and alpha, if present, is 255.
"""

import logging
import time

import numpy as np

from .errors import ConversionError
from .palette import PALETTE, nearest_index

logger = logging.getLogger(__name__)

# Floyd-Steinberg weights
RIGHT = 7 / 16
BELOW_LEFT = 3 / 16
BELOW = 5 / 16
BELOW_RIGHT = 1 / 16


def _check_raster(raster):
    if not isinstance(raster, np.ndarray) or raster.dtype != np.uint8:
        raise ConversionError("Raster must be a numpy uint8 array")
    if raster.ndim != 3 or raster.shape[2] not in (3, 4):
        raise ConversionError(f"Raster must have shape (height, width, 3 or 4), got {raster.shape}")
    return raster.shape


def _clamp(value):
    return 0.0 if value < 0 else (255.0 if value > 255 else value)


def _spread(buf, x, er, eg, eb, weight):
    # Sums are taken in double precision, then stored as float32
    buf[x, 0] = float(buf[x, 0]) + er * weight
    buf[x, 1] = float(buf[x, 1]) + eg * weight
    buf[x, 2] = float(buf[x, 2]) + eb * weight


def floyd_steinberg_dither(raster, palette=PALETTE):
    """Apply Floyd-Steinberg dithering to convert to palette colors.

    Error is carried in two float32 row buffers (this row, next row) that
    are swapped and cleared after each row; targets outside the raster are
    dropped.
    """
    height, width, channels = _check_raster(raster)
    colors = list(palette.values())
    started = time.perf_counter()

    err = np.zeros((width, 3), dtype=np.float32)
    next_err = np.zeros((width, 3), dtype=np.float32)

    for y in range(height):
        row = raster[y]
        has_next = y + 1 < height
        for x in range(width):
            r = _clamp(float(row[x, 0]) + float(err[x, 0]))
            g = _clamp(float(row[x, 1]) + float(err[x, 1]))
            b = _clamp(float(row[x, 2]) + float(err[x, 2]))
            new = colors[nearest_index(r, g, b, colors)]
            row[x, :3] = new
            if channels == 4:
                row[x, 3] = 255

            er = r - new[0]
            eg = g - new[1]
            eb = b - new[2]
            if x + 1 < width:
                _spread(err, x + 1, er, eg, eb, RIGHT)
            if has_next:
                if x > 0:
                    _spread(next_err, x - 1, er, eg, eb, BELOW_LEFT)
                _spread(next_err, x, er, eg, eb, BELOW)
                if x + 1 < width:
                    _spread(next_err, x + 1, er, eg, eb, BELOW_RIGHT)

        # Move down a row
        err, next_err = next_err, err
        next_err.fill(0)

    logger.debug("Dithered %dx%d raster in %.2fs", width, height, time.perf_counter() - started)
    return raster


def simple_quantize(raster, palette=PALETTE):
    """Simple nearest-color quantization without dithering."""
    _, _, channels = _check_raster(raster)
    colors = np.array(list(palette.values()), dtype=np.int32)

    rgb = raster[:, :, :3].astype(np.int32)
    dist = ((rgb[:, :, np.newaxis, :] - colors) ** 2).sum(axis=3)
    # argmin returns the first minimum, so ties keep declaration order
    raster[:, :, :3] = colors[dist.argmin(axis=2)].astype(np.uint8)
    if channels == 4:
        raster[:, :, 3] = 255

    return raster
