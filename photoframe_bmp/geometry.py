"""Target canvas size for a device rotation or image orientation."""

DEVICE_WIDTH = 800
DEVICE_HEIGHT = 480

ROTATIONS = (0, 90, 180, 270)
DEFAULT_ROTATION = 180

ORIENTATIONS = {
    'landscape': (DEVICE_WIDTH, DEVICE_HEIGHT),
    'portrait':  (DEVICE_HEIGHT, DEVICE_WIDTH),
    'square':    (DEVICE_HEIGHT, DEVICE_HEIGHT),
}


def normalize_rotation(value):
    """Return value as one of 0/90/180/270, falling back to 180."""
    if isinstance(value, bool):
        return DEFAULT_ROTATION
    try:
        degrees = float(value)
    except (TypeError, ValueError):
        return DEFAULT_ROTATION
    if degrees in ROTATIONS:
        return int(degrees)
    return DEFAULT_ROTATION


def target_dimensions(rotation):
    """Canvas (width, height) for a device rotation in degrees."""
    if normalize_rotation(rotation) in (90, 270):
        return DEVICE_HEIGHT, DEVICE_WIDTH
    return DEVICE_WIDTH, DEVICE_HEIGHT


def target_dimensions_for_orientation(orientation):
    """Canvas (width, height) for a named orientation."""
    return ORIENTATIONS.get(orientation, target_dimensions(DEFAULT_ROTATION))


def orientation_from_dimensions(width, height):
    if width == height:
        return 'square'
    return 'landscape' if width > height else 'portrait'


def resolve(value):
    """Resolve a rotation or orientation name to a canvas (width, height).

    Unrecognized input never raises; it resolves like the default rotation.
    """
    if isinstance(value, str):
        name = value.strip().lower()
        if name in ORIENTATIONS:
            return ORIENTATIONS[name]
    return target_dimensions(value)
