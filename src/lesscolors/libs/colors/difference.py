"""Colour difference formulas on broadcastable ``(..., 3)`` arrays."""

from __future__ import annotations

from typing import Callable

import numpy as np

from .space import ColorSpace

_POW25_7 = 25.0**7


def euclidean(v1, v2) -> np.ndarray:
    """Straight-line distance between component triples."""
    diff = np.asarray(v1, dtype=np.float64) - np.asarray(v2, dtype=np.float64)
    return np.sqrt(np.sum(diff * diff, axis=-1))


def ciede2000(lab1, lab2) -> np.ndarray:
    """CIEDE2000 colour difference (ΔE00) between L*a*b* triples.

    Implements Sharma, Wu & Dalal (2005) with unit weighting factors.
    Inputs broadcast against each other, so a ``(N, 1, 3)`` and a
    ``(1, P, 3)`` array yield an ``(N, P)`` matrix.
    """

    lab1 = np.asarray(lab1, dtype=np.float64)
    lab2 = np.asarray(lab2, dtype=np.float64)
    l1, a1, b1 = lab1[..., 0], lab1[..., 1], lab1[..., 2]
    l2, a2, b2 = lab2[..., 0], lab2[..., 1], lab2[..., 2]

    c1 = np.hypot(a1, b1)
    c2 = np.hypot(a2, b2)
    c_bar7 = ((c1 + c2) / 2.0) ** 7
    g = 0.5 * (1.0 - np.sqrt(c_bar7 / (c_bar7 + _POW25_7)))

    a1p = (1.0 + g) * a1
    a2p = (1.0 + g) * a2
    c1p = np.hypot(a1p, b1)
    c2p = np.hypot(a2p, b2)
    h1p = np.degrees(np.arctan2(b1, a1p)) % 360.0
    h2p = np.degrees(np.arctan2(b2, a2p)) % 360.0

    chroma_product = c1p * c2p
    achromatic = chroma_product == 0

    dlp = l2 - l1
    dcp = c2p - c1p

    dh = h2p - h1p
    dh = np.where(dh > 180.0, dh - 360.0, dh)
    dh = np.where(dh < -180.0, dh + 360.0, dh)
    dh = np.where(achromatic, 0.0, dh)
    dhp = 2.0 * np.sqrt(chroma_product) * np.sin(np.radians(dh) / 2.0)

    lp_bar = (l1 + l2) / 2.0
    cp_bar = (c1p + c2p) / 2.0

    h_sum = h1p + h2p
    hp_bar = np.where(
        np.abs(h1p - h2p) <= 180.0,
        h_sum / 2.0,
        np.where(h_sum < 360.0, (h_sum + 360.0) / 2.0, (h_sum - 360.0) / 2.0),
    )
    hp_bar = np.where(achromatic, h_sum, hp_bar)

    t = (
        1.0
        - 0.17 * np.cos(np.radians(hp_bar - 30.0))
        + 0.24 * np.cos(np.radians(2.0 * hp_bar))
        + 0.32 * np.cos(np.radians(3.0 * hp_bar + 6.0))
        - 0.20 * np.cos(np.radians(4.0 * hp_bar - 63.0))
    )

    lp_offset = (lp_bar - 50.0) ** 2
    s_l = 1.0 + (0.015 * lp_offset) / np.sqrt(20.0 + lp_offset)
    s_c = 1.0 + 0.045 * cp_bar
    s_h = 1.0 + 0.015 * cp_bar * t

    delta_theta = 30.0 * np.exp(-(((hp_bar - 275.0) / 25.0) ** 2))
    cp_bar7 = cp_bar**7
    r_c = 2.0 * np.sqrt(cp_bar7 / (cp_bar7 + _POW25_7))
    r_t = -r_c * np.sin(np.radians(2.0 * delta_theta))

    tl = dlp / s_l
    tc = dcp / s_c
    th = dhp / s_h
    # Rounding can push the radicand a hair below zero for identical colours
    return np.sqrt(np.maximum(tl * tl + tc * tc + th * th + r_t * tc * th, 0.0))


DistanceFunction = Callable[[np.ndarray, np.ndarray], np.ndarray]

_METRICS = {
    ColorSpace.RGB: euclidean,
    ColorSpace.LAB: ciede2000,
    ColorSpace.OKLAB: euclidean,
    ColorSpace.XYZ: euclidean,
}


def metric_for(space: ColorSpace) -> DistanceFunction:
    """Return the difference formula used when comparing colours in *space*."""
    return _METRICS[ColorSpace.parse(space)]
