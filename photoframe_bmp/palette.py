"""Fixed 6-color palette of the e-paper photo frame."""

import numpy as np

from .errors import ConversionError

# Declaration order is significant: ties in nearest_color go to the first entry.
PALETTE = {
    'black':  (0, 0, 0),
    'white':  (255, 255, 255),
    'yellow': (255, 255, 0),
    'red':    (255, 0, 0),
    'blue':   (0, 0, 255),
    'green':  (0, 255, 0),
}

# Color codes understood by the panel driver (4 is the unused orange slot)
PALETTE_INDICES = {
    'black':  0,
    'white':  1,
    'yellow': 2,
    'red':    3,
    'blue':   5,
    'green':  6,
}

WHITE = PALETTE['white']


def nearest_index(r, g, b, colors):
    """Index of the color in colors closest to (r, g, b) by squared distance.

    The first minimum wins, so ties go to the earlier color.
    """
    best = 0
    best_dist = float('inf')
    for i, color in enumerate(colors):
        dr = r - color[0]
        dg = g - color[1]
        db = b - color[2]
        dist = dr * dr + dg * dg + db * db
        if dist < best_dist:
            best_dist = dist
            best = i
    return best


def nearest_color(rgb, palette=PALETTE):
    """Find the name of the nearest palette color to the given RGB value."""
    names = list(palette)
    return names[nearest_index(rgb[0], rgb[1], rgb[2], list(palette.values()))]


def to_device_indices(raster):
    """Map a quantized raster to the panel's per-pixel color codes.

    Every pixel must already be an exact palette color; anything else raises
    ConversionError with the coordinates of the first offending pixel.
    """
    rgb = np.asarray(raster)[:, :, :3]
    height, width = rgb.shape[:2]
    output = np.zeros((height, width), dtype=np.uint8)
    matched = np.zeros((height, width), dtype=bool)

    for name, color in PALETTE.items():
        mask = np.all(rgb == np.array(color, dtype=rgb.dtype), axis=2)
        output[mask] = PALETTE_INDICES[name]
        matched |= mask

    if not matched.all():
        y, x = np.argwhere(~matched)[0]
        raise ConversionError(
            f"Pixel ({x}, {y}) = {tuple(int(v) for v in rgb[y, x])} is not a palette color"
        )
    return output
