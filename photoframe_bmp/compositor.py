"""Draw a source image onto a white, target-sized canvas.

Two strategies are supported:

    fill  center-crop the source to the target aspect ratio, then scale the
          crop so it covers the whole canvas
    fit   scale the whole source to fit inside the canvas and center it,
          leaving white margins

Sources are always flattened onto opaque white first, so transparent pixels
come out white. Results are RGB rasters (numpy uint8, shape (h, w, 3)) of
exactly the requested size.
"""

import logging
import math

import numpy as np
from PIL import Image

from .errors import CompositingError, ConversionError
from .palette import WHITE

logger = logging.getLogger(__name__)

# Clockwise rotation in degrees -> Pillow transpose (which rotates counter-clockwise)
_ROTATIONS = {
    90: Image.Transpose.ROTATE_270,
    180: Image.Transpose.ROTATE_180,
    270: Image.Transpose.ROTATE_90,
}


def _round(value):
    """Round half up (Python's round() rounds half to even)."""
    return int(math.floor(value + 0.5))


def center_crop_box(src_width, src_height, dst_width, dst_height):
    """Source rectangle (sx, sy, sw, sh) matching the target aspect ratio."""
    target_aspect = dst_width / dst_height
    src_aspect = src_width / src_height

    sx, sy, sw, sh = 0, 0, src_width, src_height
    if src_aspect > target_aspect:
        # Source is wider: crop width
        sw = max(1, _round(src_height * target_aspect))
        sx = _round((src_width - sw) / 2)
    else:
        # Source is taller: crop height
        sh = max(1, _round(src_width / target_aspect))
        sy = _round((src_height - sh) / 2)
    return sx, sy, sw, sh


def fit_box(src_width, src_height, dst_width, dst_height):
    """Destination rectangle (dx, dy, dw, dh) that letterboxes the source."""
    scale = min(dst_width / src_width, dst_height / src_height)
    dw = max(1, _round(src_width * scale))
    dh = max(1, _round(src_height * scale))
    dx = _round((dst_width - dw) / 2)
    dy = _round((dst_height - dh) / 2)
    return dx, dy, dw, dh


def flatten(image):
    """Composite an image of any mode onto opaque white and return it as RGB."""
    if image.width < 1 or image.height < 1:
        raise CompositingError(f"Source image has no pixels ({image.width}x{image.height})")
    rgba = image.convert('RGBA')
    background = Image.new('RGBA', rgba.size, WHITE + (255,))
    return Image.alpha_composite(background, rgba).convert('RGB')


def rotate(image, degrees):
    """Rotate an image clockwise about its center by a multiple of 90 degrees."""
    try:
        value = float(degrees)
    except (TypeError, ValueError) as exc:
        raise ConversionError(f"Rotation must be a number of degrees, got {degrees!r}") from exc
    if not value.is_integer():
        raise ConversionError(f"Rotation must be 0, 90, 180 or 270 degrees, got {degrees!r}")

    degrees = int(value) % 360
    if degrees == 0:
        return image
    if degrees not in _ROTATIONS:
        raise ConversionError(f"Rotation must be 0, 90, 180 or 270 degrees, got {degrees}")
    return image.transpose(_ROTATIONS[degrees])


def _new_canvas(width, height):
    if width < 1 or height < 1:
        raise CompositingError(f"Canvas size must be at least 1x1, got {width}x{height}")
    try:
        return Image.new('RGB', (width, height), WHITE)
    except (ValueError, MemoryError) as exc:
        raise CompositingError(f"Failed to create a {width}x{height} canvas") from exc


def fill(image, width, height):
    """Center-crop and scale the source so it covers the whole canvas."""
    canvas = _new_canvas(width, height)
    source = flatten(image)

    sx, sy, sw, sh = center_crop_box(source.width, source.height, width, height)
    logger.debug("fill: crop (%d, %d, %d, %d) of %dx%d -> %dx%d",
                 sx, sy, sw, sh, source.width, source.height, width, height)

    scaled = source.resize((width, height), Image.Resampling.LANCZOS,
                           box=(sx, sy, sx + sw, sy + sh))
    canvas.paste(scaled, (0, 0))
    return np.array(canvas, dtype=np.uint8)


def fit(image, width, height):
    """Scale the whole source into the canvas, leaving white margins."""
    canvas = _new_canvas(width, height)
    source = flatten(image)

    dx, dy, dw, dh = fit_box(source.width, source.height, width, height)
    logger.debug("fit: %dx%d -> %dx%d at (%d, %d) on %dx%d",
                 source.width, source.height, dw, dh, dx, dy, width, height)

    scaled = source.resize((dw, dh), Image.Resampling.LANCZOS)
    canvas.paste(scaled, (dx, dy))
    return np.array(canvas, dtype=np.uint8)


def compose(image, width, height, strategy='fill'):
    """Produce a width x height RGB raster using the given strategy."""
    if strategy == 'fill':
        return fill(image, width, height)
    if strategy == 'fit':
        return fit(image, width, height)
    raise ConversionError(f"Unknown strategy '{strategy}'. Use 'fill' or 'fit'.")
