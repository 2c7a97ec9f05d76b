"""Photo to device-ready BMP pipeline.

    resolve target size -> rotate source -> fill/fit -> quantize -> encode
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image, ImageOps

from .bmp import encode_bmp
from .compositor import compose, rotate
from .dither import floyd_steinberg_dither, simple_quantize
from .errors import ConversionError
from .geometry import DEFAULT_ROTATION, resolve

logger = logging.getLogger(__name__)


@dataclass
class ConvertOptions:
    """Options for one conversion run."""

    target: Union[int, str] = DEFAULT_ROTATION  # device rotation or orientation name
    strategy: str = 'fill'  # fill, fit
    source_rotation: int = 0  # clockwise pre-rotation of the source
    dither: bool = True


@dataclass(frozen=True)
class ConversionResult:
    raster: np.ndarray
    bitmap: bytes

    @property
    def width(self):
        return self.raster.shape[1]

    @property
    def height(self):
        return self.raster.shape[0]

    def preview(self):
        """The quantized raster as a Pillow image."""
        return Image.fromarray(self.raster)


def convert_image(image, options=None):
    """Convert a decoded Pillow image into a quantized raster and BMP bytes."""
    options = options or ConvertOptions()

    width, height = resolve(options.target)
    logger.debug("Target %r resolved to %dx%d", options.target, width, height)

    source = rotate(image, options.source_rotation)
    raster = compose(source, width, height, options.strategy)

    if options.dither:
        floyd_steinberg_dither(raster)
    else:
        simple_quantize(raster)

    return ConversionResult(raster=raster, bitmap=encode_bmp(raster))


def load_image(path):
    """Decode an image file, applying its EXIF orientation."""
    path = Path(path)
    try:
        with Image.open(path) as img:
            img = ImageOps.exif_transpose(img)
            img.load()
            return img.copy()
    except FileNotFoundError as exc:
        raise ConversionError(f"Input file not found: {path}") from exc
    except (OSError, Image.DecompressionBombError) as exc:
        raise ConversionError(f"Failed to read image: {path}") from exc


def convert_file(path, options=None):
    return convert_image(load_image(path), options)
