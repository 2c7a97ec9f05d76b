"""Convert photos into 6-color, 24-bit BMP files for an 800x480 e-paper frame.

Typical use::

    from photoframe_bmp import ConvertOptions, convert_file

    result = convert_file("photo.jpg", ConvertOptions(target=90, strategy="fit"))
    Path("photo.bmp").write_bytes(result.bitmap)
"""

from .bmp import decode_bmp, encode_bmp, row_stride
from .compositor import compose, fill, fit, rotate
from .dither import floyd_steinberg_dither, simple_quantize
from .errors import CompositingError, ConversionError, EncodingError
from .geometry import normalize_rotation, orientation_from_dimensions, resolve
from .palette import PALETTE, PALETTE_INDICES, nearest_color, to_device_indices
from .pipeline import ConversionResult, ConvertOptions, convert_file, convert_image, load_image

__version__ = "0.1.0"

__all__ = [
    "PALETTE",
    "PALETTE_INDICES",
    "CompositingError",
    "ConversionError",
    "ConversionResult",
    "ConvertOptions",
    "EncodingError",
    "compose",
    "convert_file",
    "convert_image",
    "decode_bmp",
    "encode_bmp",
    "fill",
    "fit",
    "floyd_steinberg_dither",
    "load_image",
    "nearest_color",
    "normalize_rotation",
    "orientation_from_dimensions",
    "resolve",
    "rotate",
    "row_stride",
    "simple_quantize",
    "to_device_indices",
]
