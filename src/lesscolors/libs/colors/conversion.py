"""Colour space conversions on numpy arrays.

All array helpers take and return float arrays shaped ``(..., 3)``. sRGB
components are in ``[0, 1]``; CIE XYZ and L*a*b* use the D65 white point;
Oklab follows Björn Ottosson's reference matrices. XYZ is the hub: every
conversion between two non-sRGB spaces passes through it without clipping.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

from .space import ColorSpace

# D65 reference white, 2° observer
D65_WHITE = np.array([0.95047, 1.0, 1.08883], dtype=np.float64)

_LAB_EPSILON = 216.0 / 24389.0
_LAB_KAPPA = 24389.0 / 27.0

_LINEAR_SRGB_TO_XYZ = np.array(
    [
        [0.4124564, 0.3575761, 0.1804375],
        [0.2126729, 0.7151522, 0.0721750],
        [0.0193339, 0.1191920, 0.9503041],
    ],
    dtype=np.float64,
)
_XYZ_TO_LINEAR_SRGB = np.linalg.inv(_LINEAR_SRGB_TO_XYZ)

_OKLAB_M1 = np.array(
    [
        [0.4122214708, 0.5363325363, 0.0514459929],
        [0.2119034982, 0.6806995451, 0.1073969566],
        [0.0883024619, 0.2817188376, 0.6299787005],
    ],
    dtype=np.float64,
)
_OKLAB_M2 = np.array(
    [
        [0.2104542553, 0.7936177850, -0.0040720468],
        [1.9779984951, -2.4285922050, 0.4505937099],
        [0.0259040371, 0.7827717662, -0.8086757660],
    ],
    dtype=np.float64,
)
_OKLAB_M2_INV = np.array(
    [
        [1.0, 0.3963377774, 0.2158037573],
        [1.0, -0.1055613458, -0.0638541728],
        [1.0, -0.0894841775, -1.2914855480],
    ],
    dtype=np.float64,
)
_OKLAB_M1_INV = np.array(
    [
        [4.0767416621, -3.3077115913, 0.2309699292],
        [-1.2684380046, 2.6097574011, -0.3413193965],
        [-0.0041960863, -0.7034186147, 1.7076147010],
    ],
    dtype=np.float64,
)


def _as_float(values) -> np.ndarray:
    return np.asarray(values, dtype=np.float64)


def srgb_to_linear(rgb) -> np.ndarray:
    """Undo the sRGB transfer curve."""
    c = _as_float(rgb)
    magnitude = np.abs(c)
    curve = np.sign(c) * ((magnitude + 0.055) / 1.055) ** 2.4
    return np.where(magnitude <= 0.04045, c / 12.92, curve)


def linear_to_srgb(linear) -> np.ndarray:
    """Apply the sRGB transfer curve. Out-of-gamut values keep their sign."""
    c = _as_float(linear)
    magnitude = np.abs(c)
    curve = np.sign(c) * (1.055 * magnitude ** (1.0 / 2.4) - 0.055)
    return np.where(magnitude <= 0.0031308, c * 12.92, curve)


def srgb_to_xyz(rgb) -> np.ndarray:
    return srgb_to_linear(rgb) @ _LINEAR_SRGB_TO_XYZ.T


def xyz_to_srgb(xyz) -> np.ndarray:
    return linear_to_srgb(_as_float(xyz) @ _XYZ_TO_LINEAR_SRGB.T)


def xyz_to_lab(xyz) -> np.ndarray:
    ratio = _as_float(xyz) / D65_WHITE
    f = np.where(
        ratio > _LAB_EPSILON,
        np.cbrt(ratio),
        (_LAB_KAPPA * ratio + 16.0) / 116.0,
    )
    fx, fy, fz = f[..., 0], f[..., 1], f[..., 2]
    return np.stack(
        [116.0 * fy - 16.0, 500.0 * (fx - fy), 200.0 * (fy - fz)], axis=-1
    )


def lab_to_xyz(lab) -> np.ndarray:
    lab = _as_float(lab)
    lightness = lab[..., 0]
    fy = (lightness + 16.0) / 116.0
    fx = fy + lab[..., 1] / 500.0
    fz = fy - lab[..., 2] / 200.0

    fx3 = fx**3
    fz3 = fz**3
    xr = np.where(fx3 > _LAB_EPSILON, fx3, (116.0 * fx - 16.0) / _LAB_KAPPA)
    yr = np.where(
        lightness > _LAB_KAPPA * _LAB_EPSILON, fy**3, lightness / _LAB_KAPPA
    )
    zr = np.where(fz3 > _LAB_EPSILON, fz3, (116.0 * fz - 16.0) / _LAB_KAPPA)
    return np.stack([xr, yr, zr], axis=-1) * D65_WHITE


def srgb_to_lab(rgb) -> np.ndarray:
    return xyz_to_lab(srgb_to_xyz(rgb))


def lab_to_srgb(lab) -> np.ndarray:
    return xyz_to_srgb(lab_to_xyz(lab))


def srgb_to_oklab(rgb) -> np.ndarray:
    lms = srgb_to_linear(rgb) @ _OKLAB_M1.T
    return np.cbrt(lms) @ _OKLAB_M2.T


def oklab_to_srgb(oklab) -> np.ndarray:
    lms = (_as_float(oklab) @ _OKLAB_M2_INV.T) ** 3
    return linear_to_srgb(lms @ _OKLAB_M1_INV.T)


def xyz_to_oklab(xyz) -> np.ndarray:
    lms = (_as_float(xyz) @ _XYZ_TO_LINEAR_SRGB.T) @ _OKLAB_M1.T
    return np.cbrt(lms) @ _OKLAB_M2.T


def oklab_to_xyz(oklab) -> np.ndarray:
    lms = (_as_float(oklab) @ _OKLAB_M2_INV.T) ** 3
    return (lms @ _OKLAB_M1_INV.T) @ _LINEAR_SRGB_TO_XYZ.T


_TO_XYZ = {
    ColorSpace.RGB: srgb_to_xyz,
    ColorSpace.LAB: lab_to_xyz,
    ColorSpace.OKLAB: oklab_to_xyz,
    ColorSpace.XYZ: _as_float,
}
_FROM_XYZ = {
    ColorSpace.RGB: xyz_to_srgb,
    ColorSpace.LAB: xyz_to_lab,
    ColorSpace.OKLAB: xyz_to_oklab,
    ColorSpace.XYZ: _as_float,
}
# Shortcuts that skip the hub (and its rounding) for the common paths
_DIRECT = {
    (ColorSpace.RGB, ColorSpace.LAB): srgb_to_lab,
    (ColorSpace.LAB, ColorSpace.RGB): lab_to_srgb,
    (ColorSpace.RGB, ColorSpace.OKLAB): srgb_to_oklab,
    (ColorSpace.OKLAB, ColorSpace.RGB): oklab_to_srgb,
}


def convert(values, source: ColorSpace, target: ColorSpace) -> np.ndarray:
    """Convert ``(..., 3)`` components from *source* to *target* space."""

    if source == target:
        return _as_float(values)
    direct = _DIRECT.get((source, target))
    if direct is not None:
        return direct(values)
    return _FROM_XYZ[target](_TO_XYZ[source](values))


def srgb_u8_to_float(rgb_u8) -> np.ndarray:
    return np.asarray(rgb_u8, dtype=np.float64) / 255.0


def srgb_float_to_u8(rgb) -> np.ndarray:
    """Round sRGB floats to 8-bit channels, clamping to ``0..255``."""
    scaled = np.rint(_as_float(rgb) * 255.0)
    return np.clip(scaled, 0, 255).astype(np.uint8)


def rgb_to_lab(r: int, g: int, b: int, alpha: int = 255) -> Tuple[float, float, float, float]:
    """Convert 8-bit RGBA channels to ``(L, a, b, alpha)`` with alpha in [0, 1]."""

    lab = srgb_to_lab(srgb_u8_to_float([r, g, b]))
    return float(lab[0]), float(lab[1]), float(lab[2]), alpha / 255.0


def lab_to_rgb(l: float, a: float, b: float, alpha: float = 1.0) -> Tuple[int, int, int, int]:
    """Convert L*a*b* plus a [0, 1] alpha to 8-bit RGBA channels."""

    rgb = srgb_float_to_u8(lab_to_srgb([l, a, b]))
    alpha_u8 = int(np.clip(np.rint(alpha * 255.0), 0, 255))
    return int(rgb[0]), int(rgb[1]), int(rgb[2]), alpha_u8
