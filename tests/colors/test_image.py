import numpy as np
import pytest
from PIL import Image as PILImage

from lesscolors.libs.colors import (
    Color,
    ColorPalette,
    Image,
    ImageModifier,
    UnsupportedFormatError,
    resolve_format,
)

BLACK = (0, 0, 0, 255)
WHITE = (255, 255, 255, 255)


def _image(rows):
    return Image(np.array(rows, dtype=np.uint8))


def test_dimensions_and_pixels():
    image = _image([[BLACK, WHITE, BLACK]])
    assert (image.width, image.height) == (3, 1)
    assert image.get_pixel(1, 0) == Color.from_rgb_ints(255, 255, 255)

    image.set_pixel(Color.from_rgb_ints(1, 2, 3, 4), 2, 0)
    assert image.array[0, 2].tolist() == [1, 2, 3, 4]


def test_pixel_access_out_of_bounds():
    image = _image([[BLACK]])
    with pytest.raises(IndexError):
        image.get_pixel(1, 0)
    with pytest.raises(IndexError):
        image.set_pixel(Color.from_rgb_ints(0, 0, 0), 0, -1)


def test_rejects_non_rgba_arrays():
    with pytest.raises(ValueError):
        Image(np.zeros((2, 2, 3), dtype=np.uint8))


def test_convert_colors_by_palette_maps_every_pixel():
    image = _image(
        [
            [(20, 20, 20, 255), (240, 240, 240, 255)],
            [(90, 90, 90, 255), (180, 170, 175, 255)],
        ]
    )
    palette = ColorPalette([Color.from_rgb_ints(0, 0, 0), Color.from_rgb_ints(255, 255, 255)])

    image.convert_colors_by_palette(palette)

    assert image.array[0, 0].tolist() == list(BLACK)
    assert image.array[0, 1].tolist() == list(WHITE)
    assert image.array[1, 0].tolist() == list(BLACK)
    assert image.array[1, 1].tolist() == list(WHITE)


def test_palette_alpha_replaces_pixel_alpha():
    image = _image([[(200, 0, 0, 255)]])
    palette = ColorPalette([Color.from_rgb_ints(255, 0, 0, 64)])
    image.convert_colors_by_palette(palette)
    assert image.array[0, 0].tolist() == [255, 0, 0, 64]


def test_image_made_of_palette_colours_is_unchanged():
    rng = np.random.default_rng(5)
    rgb = rng.integers(0, 256, size=(6, 7, 3))
    array = np.dstack([rgb, np.full((6, 7), 255)]).astype(np.uint8)
    image = Image(array)
    palette = ColorPalette.from_image(image)

    ImageModifier(image).reduce_colors_by_palette(palette)

    np.testing.assert_array_equal(image.array, array)


def test_image_modifier_accepts_palette_image():
    palette_image = _image([[BLACK, WHITE]])
    modifier = ImageModifier(_image([[(30, 30, 30, 255)]]))

    result = modifier.reduce_colors_by_palette(palette_image)

    assert result is modifier
    assert modifier.image.array[0, 0].tolist() == list(BLACK)


def test_save_and_open_round_trip(tmp_path):
    image = _image([[(10, 20, 30, 128), WHITE]])
    path = image.save(tmp_path / "out.png", "png")

    reopened = Image.open(path)
    np.testing.assert_array_equal(reopened.array, image.array)


def test_save_jpeg_drops_alpha(tmp_path):
    image = _image([[(10, 20, 30, 128)]])
    path = image.save(tmp_path / "out.jpg", "jpg")
    with PILImage.open(path) as handle:
        assert handle.format == "JPEG"
        assert handle.mode == "RGB"


def test_resolve_format():
    assert resolve_format("png") == "PNG"
    assert resolve_format("JPG") == "JPEG"
    assert resolve_format(".webp") == "WEBP"
    with pytest.raises(UnsupportedFormatError):
        resolve_format("definitely-not-a-format")
    with pytest.raises(UnsupportedFormatError):
        resolve_format("")
