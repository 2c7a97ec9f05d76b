#!/usr/bin/env python3
"""
Convert images to 24-bit BMP format for the 6-color e-paper photo frame.

The image is cropped (or letterboxed) to the display size, dithered to the
black/white/yellow/red/blue/green palette and written as a bottom-up BMP.

Usage:
    python convert_to_bmp.py input.jpg output.bmp
    python convert_to_bmp.py input.jpg output.bmp --fit
    python convert_to_bmp.py input.jpg output.bmp --rotation 90
    python convert_to_bmp.py input.png output.bmp --orientation square
    python convert_to_bmp.py input.jpg output.bmp --rotate 270 --no-dither
    python convert_to_bmp.py input.jpg output.bmp --preview preview.png
    python convert_to_bmp.py test output.bmp  # Create test pattern

Options:
    --fit               Letterbox the whole image on white instead of cropping
    --rotation DEG      Device rotation: 0/180 = 800x480, 90/270 = 480x800 (default 180)
    --orientation NAME  landscape, portrait or square (overrides --rotation)
    --rotate DEG        Rotate the source clockwise by 90/180/270 first
    --no-dither         Nearest-color mapping without Floyd-Steinberg dithering
    --preview PATH      Also save the quantized image (e.g. as PNG)
    --verbose           Print debug logging
"""

import logging
import sys
from pathlib import Path

try:
    import numpy as np

    from photoframe_bmp import (
        PALETTE,
        ConversionError,
        ConvertOptions,
        convert_file,
        encode_bmp,
        resolve,
    )
except ImportError:
    print("Please install the package first: pip install -e .")
    sys.exit(1)

VALUE_OPTIONS = ('--rotation', '--orientation', '--rotate', '--preview')
FLAG_OPTIONS = ('--fit', '--no-dither', '--verbose')


class UsageError(Exception):
    pass


def parse_args(argv):
    """Parse command line arguments (without the program name)."""
    positional = []
    values = {}
    flags = set()

    args = iter(argv)
    for arg in args:
        if arg in VALUE_OPTIONS:
            value = next(args, None)
            if value is None:
                raise UsageError(f"Option {arg} needs a value")
            values[arg] = value
        elif arg in FLAG_OPTIONS:
            flags.add(arg)
        elif arg.startswith('--'):
            raise UsageError(f"Unknown option: {arg}")
        else:
            positional.append(arg)

    if len(positional) != 2:
        raise UsageError("Expected an input image (or 'test') and an output path")

    options = ConvertOptions(
        strategy='fit' if '--fit' in flags else 'fill',
        dither='--no-dither' not in flags,
    )
    if '--orientation' in values:
        options.target = values['--orientation']
    elif '--rotation' in values:
        options.target = values['--rotation']
    if '--rotate' in values:
        try:
            options.source_rotation = int(values['--rotate'])
        except ValueError:
            raise UsageError(f"Invalid --rotate value: {values['--rotate']}")

    return {
        'input': positional[0],
        'output': Path(positional[1]),
        'options': options,
        'preview': values.get('--preview'),
        'verbose': '--verbose' in flags,
    }


def create_test_pattern(output_path, target=180):
    """Create a test pattern image with one horizontal stripe per palette color."""
    width, height = resolve(target)
    raster = np.zeros((height, width, 3), dtype=np.uint8)

    colors = list(PALETTE.values())
    stripe_height = height // len(colors)
    print(f"Creating {width}x{height} test pattern ({len(colors)} colors)...")

    for y in range(height):
        raster[y, :] = colors[min(y // stripe_height, len(colors) - 1)]

    output_path.write_bytes(encode_bmp(raster))
    print(f"Created test pattern: {output_path}")


def convert_image(input_path, output_path, options, preview_path=None):
    """Convert an image file to a device-ready BMP."""
    method = "Floyd-Steinberg dithering" if options.dither else "simple quantization"
    print(f"Applying {options.strategy} + {method} (6-color)...")

    result = convert_file(input_path, options)
    output_path.write_bytes(result.bitmap)
    print(f"Converted {input_path} -> {output_path} ({result.width}x{result.height}, {len(result.bitmap)} bytes)")

    if preview_path:
        result.preview().save(preview_path)
        print(f"Saved preview: {preview_path}")


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    try:
        args = parse_args(argv)
    except UsageError as exc:
        print(f"Error: {exc}")
        print(__doc__)
        return 1

    if args['verbose']:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        if args['input'] == 'test':
            create_test_pattern(args['output'], args['options'].target)
        else:
            convert_image(args['input'], args['output'], args['options'], args['preview'])
    except (ConversionError, OSError, ValueError) as exc:
        print(f"Error: {exc}")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
