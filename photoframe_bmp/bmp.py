"""Uncompressed 24-bit BMP encoding for the photo frame.

Layout (all fields little-endian):

    0   'BM'                    26  planes = 1
    2   file size               28  bits per pixel = 24
    6   reserved = 0            30  compression = 0
    10  pixel offset = 54       34  pixel data size
    14  info header size = 40   38  x pixels per meter = 2835
    18  width                   42  y pixels per meter = 2835
    22  height (> 0, bottom-up) 46  colors used = 0
                                50  important colors = 0

Pixel rows follow at offset 54, last raster row first, each pixel stored as
B, G, R and each row zero-padded to a multiple of 4 bytes.
"""

import logging
import struct

import numpy as np

from .errors import EncodingError

logger = logging.getLogger(__name__)

FILE_HEADER_SIZE = 14
INFO_HEADER_SIZE = 40
PIXEL_OFFSET = FILE_HEADER_SIZE + INFO_HEADER_SIZE
BITS_PER_PIXEL = 24
PIXELS_PER_METER = 2835  # 72 DPI

_FILE_HEADER = struct.Struct('<2sIII')
_INFO_HEADER = struct.Struct('<IiiHHIIiiII')


def row_stride(width):
    """Bytes per stored row: 3 per pixel, padded to a multiple of 4."""
    return (width * 3 + 3) & ~3


def encode_bmp(raster):
    """Encode an RGB or RGBA uint8 raster as a bottom-up 24-bit BMP."""
    if not isinstance(raster, np.ndarray) or raster.dtype != np.uint8:
        raise EncodingError("Raster must be a numpy uint8 array")
    if raster.ndim != 3 or raster.shape[2] not in (3, 4):
        raise EncodingError(f"Raster must have shape (height, width, 3 or 4), got {raster.shape}")

    height, width = raster.shape[:2]
    if width < 1 or height < 1:
        raise EncodingError(f"Cannot encode an empty {width}x{height} raster")

    stride = row_stride(width)
    pixel_bytes = stride * height
    file_size = PIXEL_OFFSET + pixel_bytes

    header = _FILE_HEADER.pack(b'BM', file_size, 0, PIXEL_OFFSET)
    header += _INFO_HEADER.pack(
        INFO_HEADER_SIZE,
        width,
        height,  # positive = bottom-up
        1,
        BITS_PER_PIXEL,
        0,
        pixel_bytes,
        PIXELS_PER_METER,
        PIXELS_PER_METER,
        0,
        0,
    )

    # Bottom row first, RGB -> BGR, padding bytes stay zero
    rows = np.zeros((height, stride), dtype=np.uint8)
    rows[:, :width * 3] = raster[::-1, :, 2::-1].reshape(height, width * 3)

    logger.debug("Encoded %dx%d BMP (%d bytes)", width, height, file_size)
    return header + rows.tobytes()


def decode_bmp(data):
    """Read an uncompressed 24-bit BMP back into an RGB uint8 raster.

    Accepts both bottom-up (positive height) and top-down files.
    """
    data = bytes(data)
    if len(data) < PIXEL_OFFSET:
        raise EncodingError(f"BMP data too short: {len(data)} bytes")

    signature, _file_size, _reserved, offset = _FILE_HEADER.unpack_from(data, 0)
    if signature != b'BM':
        raise EncodingError(f"Not a BMP file (signature {signature!r})")

    (info_size, width, height, _planes, bit_count,
     compression, *_rest) = _INFO_HEADER.unpack_from(data, FILE_HEADER_SIZE)
    if info_size < INFO_HEADER_SIZE:
        raise EncodingError(f"Unsupported BMP info header size {info_size}")
    if bit_count != BITS_PER_PIXEL:
        raise EncodingError(f"BMP is not a 24-bit bitmap ({bit_count} bpp)")
    if compression != 0:
        raise EncodingError(f"Compressed BMP data is not supported (compression {compression})")
    if width < 1 or height == 0:
        raise EncodingError(f"Invalid BMP dimensions {width}x{height}")

    top_down = height < 0
    height = abs(height)
    stride = row_stride(width)
    if len(data) < offset + stride * height:
        raise EncodingError("BMP pixel data is truncated")

    rows = np.frombuffer(data, dtype=np.uint8, count=stride * height, offset=offset)
    pixels = rows.reshape(height, stride)[:, :width * 3].reshape(height, width, 3)[:, :, ::-1]
    if not top_down:
        pixels = pixels[::-1]
    return pixels.copy()
