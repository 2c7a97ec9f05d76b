import numpy as np
import pytest
from PIL import Image

from photoframe_bmp import ConversionError, ConvertOptions, convert_file, convert_image, load_image
from photoframe_bmp.bmp import decode_bmp
from photoframe_bmp.palette import to_device_indices


def _gradient(width, height):
    x = np.linspace(0, 255, width, dtype=np.float32)
    y = np.linspace(0, 255, height, dtype=np.float32)
    raster = np.zeros((height, width, 3), dtype=np.uint8)
    raster[:, :, 0] = x[np.newaxis, :].astype(np.uint8)
    raster[:, :, 1] = y[:, np.newaxis].astype(np.uint8)
    raster[:, :, 2] = 128
    return Image.fromarray(raster)


def test_default_conversion_is_landscape_and_dithered():
    result = convert_image(_gradient(64, 48))

    assert (result.width, result.height) == (800, 480)
    assert len(result.bitmap) == 54 + 2400 * 480
    to_device_indices(result.raster)
    assert np.array_equal(decode_bmp(result.bitmap), result.raster)


def test_rotation_selects_portrait_canvas():
    result = convert_image(_gradient(64, 48), ConvertOptions(target=90, dither=False))
    assert result.raster.shape == (800, 480, 3)
    assert len(result.bitmap) == 54 + 1440 * 800


def test_orientation_name_selects_square_canvas():
    result = convert_image(_gradient(30, 60), ConvertOptions(target='square', strategy='fit'))
    assert result.raster.shape == (480, 480, 3)
    # Letterbox margins quantize to white
    assert (result.raster[:, :100] == 255).all()
    to_device_indices(result.raster)


def test_source_rotation_happens_before_fit():
    image = Image.new('RGB', (200, 100), (0, 0, 0))

    plain = convert_image(image, ConvertOptions(target='portrait', strategy='fit', dither=False))
    # 480x240 band centered vertically
    assert plain.raster[0, 240].tolist() == [255, 255, 255]
    assert plain.raster[400, 240].tolist() == [0, 0, 0]

    rotated = convert_image(image, ConvertOptions(target='portrait', strategy='fit',
                                                  source_rotation=90, dither=False))
    # 400x800 band centered horizontally
    assert rotated.raster[0, 240].tolist() == [0, 0, 0]
    assert rotated.raster[400, 10].tolist() == [255, 255, 255]


def test_invalid_rotation_target_uses_default():
    result = convert_image(_gradient(10, 10), ConvertOptions(target=45, dither=False))
    assert result.raster.shape == (480, 800, 3)


def test_non_numeric_source_rotation_is_an_error():
    with pytest.raises(ConversionError):
        convert_image(_gradient(10, 10), ConvertOptions(source_rotation='left'))


def test_unknown_strategy_is_an_error():
    with pytest.raises(ConversionError):
        convert_image(_gradient(10, 10), ConvertOptions(strategy='stretch'))


def test_conversions_do_not_share_state():
    image = _gradient(40, 30)
    options = ConvertOptions(target='square')
    first = convert_image(image, options)
    second = convert_image(image, options)
    assert first.bitmap == second.bitmap
    assert first.raster is not second.raster


def test_preview_matches_raster():
    result = convert_image(_gradient(10, 10), ConvertOptions(dither=False))
    preview = result.preview()
    assert preview.size == (800, 480)
    assert np.array_equal(np.array(preview), result.raster)


def test_convert_file(tmp_path):
    path = tmp_path / 'photo.png'
    Image.new('RGBA', (120, 90), (0, 0, 255, 255)).save(path)

    result = convert_file(path, ConvertOptions(dither=False))
    assert (result.raster == np.array([0, 0, 255], dtype=np.uint8)).all()


def test_load_image_applies_exif_orientation(tmp_path):
    path = tmp_path / 'rotated.jpg'
    exif = Image.Exif()
    exif[0x0112] = 6  # rotate 90 degrees clockwise on display
    Image.new('RGB', (40, 20), (255, 255, 255)).save(path, exif=exif)

    assert load_image(path).size == (20, 40)


def test_missing_file_is_a_conversion_error(tmp_path):
    with pytest.raises(ConversionError, match="not found"):
        convert_file(tmp_path / 'missing.png')


def test_unreadable_file_is_a_conversion_error(tmp_path):
    path = tmp_path / 'notes.png'
    path.write_text("not an image")
    with pytest.raises(ConversionError, match="Failed to read"):
        convert_file(path)


def test_oversized_file_is_a_conversion_error(tmp_path, monkeypatch):
    path = tmp_path / 'huge.png'
    Image.new('RGB', (10, 10)).save(path)
    # Pillow refuses images over twice this many pixels
    monkeypatch.setattr(Image, 'MAX_IMAGE_PIXELS', 10)
    with pytest.raises(ConversionError, match="Failed to read"):
        convert_file(path)
