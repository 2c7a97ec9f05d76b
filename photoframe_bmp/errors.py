"""Exceptions raised by the photo frame conversion pipeline."""


class ConversionError(Exception):
    """Base error for anything that stops an image from being converted."""


class CompositingError(ConversionError):
    """The source could not be drawn onto a target-sized canvas."""


class EncodingError(ConversionError):
    """A raster could not be encoded, or BMP data could not be read back."""
