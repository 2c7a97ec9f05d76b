import pytest

from photoframe_bmp.geometry import (
    normalize_rotation,
    orientation_from_dimensions,
    resolve,
    target_dimensions_for_orientation,
)


@pytest.mark.parametrize("rotation, expected", [
    (0, (800, 480)),
    (90, (480, 800)),
    (180, (800, 480)),
    (270, (480, 800)),
])
def test_supported_rotations(rotation, expected):
    assert resolve(rotation) == expected


@pytest.mark.parametrize("rotation", [45, -90, 360, 1.5, 91, float('nan')])
def test_unsupported_rotation_uses_default(rotation):
    assert resolve(rotation) == (800, 480)
    assert normalize_rotation(rotation) == 180


def test_numeric_strings_are_rotations():
    assert resolve("90") == (480, 800)
    assert resolve(" 270 ") == (480, 800)
    assert normalize_rotation("0") == 0


@pytest.mark.parametrize("name, expected", [
    ("landscape", (800, 480)),
    ("portrait", (480, 800)),
    ("square", (480, 480)),
    ("Portrait", (480, 800)),
])
def test_named_orientations(name, expected):
    assert resolve(name) == expected


@pytest.mark.parametrize("value", ["diagonal", "", None, True, object()])
def test_garbage_never_raises(value):
    assert resolve(value) == (800, 480)


def test_unknown_orientation_name_falls_back():
    assert target_dimensions_for_orientation("panorama") == (800, 480)


def test_orientation_from_dimensions():
    assert orientation_from_dimensions(800, 480) == "landscape"
    assert orientation_from_dimensions(480, 800) == "portrait"
    assert orientation_from_dimensions(300, 300) == "square"
