"""Hex math utilities: geometry functions for hexagonal grids.

All functions operate on HexCoord (axial coordinates) and are unbounded:
board limits are applied by :class:`hexclash.models.board.HexBoard`.

Reference: https://www.redblobgames.com/grids/hexagons/
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from hexclash.models.hex import HexCoord

SQRT3 = math.sqrt(3.0)


@dataclass(frozen=True)
class HexLayout:
    """Flat-top pixel projection parameters.

    Attributes:
        hex_size: Distance from hex center to a corner, in pixels.
        origin_x: Pixel x of the hex ``(0, 0)``.
        origin_y: Pixel y of the hex ``(0, 0)``.
    """

    hex_size: float = 32.0
    origin_x: float = 375.0
    origin_y: float = 375.0

    def __post_init__(self) -> None:
        if self.hex_size <= 0:
            raise ValueError(f"hex_size must be positive, got {self.hex_size}")


def hex_distance(a: HexCoord, b: HexCoord) -> int:
    """Compute the hex grid distance between two coordinates."""
    return a.distance_to(b)


def hex_ring(center: HexCoord, radius: int) -> list[HexCoord]:
    """Return all hexes at exactly `radius` distance from center."""
    return center.ring(radius)


def hex_disk(center: HexCoord, radius: int) -> set[HexCoord]:
    """Return all hexes within `radius` distance from center (inclusive)."""
    return center.disk(radius)


def hex_neighbors(coord: HexCoord) -> list[HexCoord]:
    """Return the 6 neighbors of a hex coordinate."""
    return coord.neighbors()


def hex_to_pixel(coord: HexCoord, layout: HexLayout) -> tuple[float, float]:
    """Project a hex center to pixel space (flat-top orientation).

    ``x = size * 3/2 * q``, ``y = size * sqrt(3) * (r + q/2)``, offset by
    the layout origin. No rounding is applied.
    """
    size = layout.hex_size
    x = size * 1.5 * coord.q
    y = size * SQRT3 * (coord.r + coord.q / 2.0)
    return x + layout.origin_x, y + layout.origin_y


def pixel_to_hex(x: float, y: float, layout: HexLayout) -> HexCoord:
    """Return the hex containing the pixel ``(x, y)``.

    Inverse of :func:`hex_to_pixel` followed by cube rounding.
    """
    rel_x = x - layout.origin_x
    rel_y = y - layout.origin_y
    fq = (2.0 / 3.0 * rel_x) / layout.hex_size
    fr = (-1.0 / 3.0 * rel_x + SQRT3 / 3.0 * rel_y) / layout.hex_size
    return _cube_round(fq, fr, -fq - fr)


def _cube_round(fq: float, fr: float, fs: float) -> HexCoord:
    """Round fractional cube coordinates to the nearest hex."""
    q = round(fq)
    r = round(fr)
    s = round(fs)

    q_diff = abs(q - fq)
    r_diff = abs(r - fr)
    s_diff = abs(s - fs)

    if q_diff > r_diff and q_diff > s_diff:
        q = -r - s
    elif r_diff > s_diff:
        r = -q - s
    # else: s = -q - r (implicit, not stored)

    return HexCoord(int(q), int(r))
