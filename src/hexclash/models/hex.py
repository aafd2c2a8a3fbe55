"""Hexagonal coordinate system using axial coordinates (q, r).

Axial coordinates define position on a hex grid where:
- q axis runs roughly east
- r axis runs roughly south-east
- s = -q - r is the implicit third cube coordinate

The canonical string form ``"q{q}r{r}"`` is used only when talking to the
outside world (persisted documents, REST payloads).

Reference: https://www.redblobgames.com/grids/hexagons/
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_KEY_PATTERN = re.compile(r"^q(-?\d+)r(-?\d+)$")


@dataclass(frozen=True, order=True)
class HexCoord:
    """Immutable axial hex coordinate.

    Attributes:
        q: Column coordinate (east axis).
        r: Row coordinate (south-east axis).
    """

    q: int
    r: int

    # -- Cube coordinate -------------------------------------------------

    @property
    def s(self) -> int:
        """Implicit cube coordinate: s = -q - r."""
        return -self.q - self.r

    # -- Arithmetic ------------------------------------------------------

    def __add__(self, other: HexCoord) -> HexCoord:
        return HexCoord(self.q + other.q, self.r + other.r)

    def __sub__(self, other: HexCoord) -> HexCoord:
        return HexCoord(self.q - other.q, self.r - other.r)

    # -- Geometry --------------------------------------------------------

    def distance_to(self, other: HexCoord) -> int:
        """Hex grid distance (number of steps along hex edges)."""
        dq = self.q - other.q
        dr = self.r - other.r
        return (abs(dq) + abs(dr) + abs(dq + dr)) // 2

    def neighbors(self) -> list[HexCoord]:
        """Return the 6 adjacent hex coordinates (unbounded grid)."""
        return [HexCoord(self.q + dq, self.r + dr) for dq, dr in DIRECTIONS]

    def ring(self, radius: int) -> list[HexCoord]:
        """Return all hexes at exactly `radius` steps away.

        Radius 0 is the hex itself; negative radii give an empty list.
        """
        if radius < 0:
            return []
        if radius == 0:
            return [self]
        results: list[HexCoord] = []
        # Start at the south-west corner of the ring
        h = HexCoord(self.q - radius, self.r + radius)
        for dq, dr in DIRECTIONS:
            for _ in range(radius):
                results.append(h)
                h = HexCoord(h.q + dq, h.r + dr)
        return results

    def disk(self, radius: int) -> set[HexCoord]:
        """Return all hexes within `radius` steps (inclusive)."""
        results: set[HexCoord] = set()
        for dq in range(-radius, radius + 1):
            for dr in range(max(-radius, -dq - radius), min(radius, -dq + radius) + 1):
                results.add(HexCoord(self.q + dq, self.r + dr))
        return results

    # -- Serialization ---------------------------------------------------

    def key(self) -> str:
        """Canonical document key, e.g. ``q2r-4``."""
        return f"q{self.q}r{self.r}"

    @classmethod
    def from_key(cls, key: str) -> HexCoord:
        """Parse a canonical ``q{q}r{r}`` key.

        Raises:
            ValueError: If the key is not in canonical form.
        """
        m = _KEY_PATTERN.match(key.strip())
        if m is None:
            raise ValueError(f"Malformed hex key: {key!r}")
        return cls(int(m.group(1)), int(m.group(2)))

    def __repr__(self) -> str:
        return f"Hex({self.q},{self.r})"


# The 6 axial direction vectors (flat-top layout)
DIRECTIONS: list[tuple[int, int]] = [
    (1, 0),   # E
    (1, -1),  # NE
    (0, -1),  # NW
    (-1, 0),  # W
    (-1, 1),  # SW
    (0, 1),   # SE
]
