import pytest

from lesscolors.libs.colors import (
    Color,
    ColorSpace,
    lab_distance,
    oklab_distance,
    rgb_distance,
    xyz_distance,
)


def test_color_space_transitions():
    color = Color.from_rgba(1.0, 1.0, 1.0, 1.0)
    assert color.color_space is ColorSpace.RGB

    color = color.to_color_space(ColorSpace.RGB)
    assert color.color_space is ColorSpace.RGB

    color = color.to_color_space(ColorSpace.LAB)
    assert color.color_space is ColorSpace.LAB

    color = color.to_color_space(ColorSpace.OKLAB)
    assert color.color_space is ColorSpace.OKLAB

    color = color.to_color_space(ColorSpace.XYZ)
    assert color.color_space is ColorSpace.XYZ


def test_to_same_space_returns_self():
    color = Color.from_rgb_ints(10, 20, 30)
    assert color.to_color_space("rgb") is color


def test_to_color_space_rejects_none():
    with pytest.raises(ValueError):
        Color.from_rgb_ints(1, 2, 3).to_color_space(None)


def test_argb_packing_round_trip():
    color = Color.from_argb_int(0x80FF4010)
    assert color.to_rgba_ints() == (0xFF, 0x40, 0x10, 0x80)
    assert color.to_argb_int() == 0x80FF4010


def test_from_argb_accepts_signed_values():
    # 0xFF102030 as a signed 32-bit int
    color = Color.from_argb_int(0xFF102030 - (1 << 32))
    assert color.to_rgba_ints() == (0x10, 0x20, 0x30, 0xFF)


def test_lab_color_packs_back_to_rgb():
    color = Color.from_rgb_ints(178, 123, 99).to_color_space(ColorSpace.LAB)
    assert color.to_rgba_ints() == (178, 123, 99, 255)


def test_alpha_survives_conversion():
    color = Color.from_rgb_ints(90, 10, 200, 51).to_color_space(ColorSpace.OKLAB)
    assert color.alpha == pytest.approx(0.2)


def test_distance_uses_own_space_by_default():
    a = Color.from_rgb_ints(255, 0, 0)
    b = Color.from_rgb_ints(0, 0, 255)
    assert a.distance(b) == pytest.approx(rgb_distance(a, b))
    assert a.to_color_space("lab").distance(b) == pytest.approx(lab_distance(a, b))
    assert a.distance(b, ColorSpace.OKLAB) == pytest.approx(oklab_distance(a, b))
    assert a.distance(b, "xyz") == pytest.approx(xyz_distance(a, b))


def test_rgb_distance_between_black_and_white():
    black = Color.from_rgb_ints(0, 0, 0)
    white = Color.from_rgb_ints(255, 255, 255)
    assert rgb_distance(black, white) == pytest.approx(3**0.5)
    assert lab_distance(black, white) == pytest.approx(100.0, abs=0.01)


def test_distance_ignores_alpha():
    opaque = Color.from_rgb_ints(40, 80, 120, 255)
    clear = Color.from_rgb_ints(40, 80, 120, 0)
    assert lab_distance(opaque, clear) == 0.0
    assert opaque != clear


def test_distance_requires_both_colours():
    color = Color.from_rgb_ints(1, 2, 3)
    with pytest.raises(TypeError):
        lab_distance(color, None)
    with pytest.raises(TypeError):
        color.distance(None)


def test_equality_and_hash():
    assert Color.from_rgb_ints(1, 2, 3) == Color.from_rgba(1 / 255, 2 / 255, 3 / 255)
    assert len({Color.from_rgb_ints(1, 2, 3), Color.from_rgb_ints(1, 2, 3)}) == 1
    assert Color.from_rgb_ints(1, 2, 3) != Color.from_rgb_ints(1, 2, 3).to_color_space("lab")


def test_color_space_parse():
    assert ColorSpace.parse("OkLab") is ColorSpace.OKLAB
    with pytest.raises(ValueError):
        ColorSpace.parse("hsv")
