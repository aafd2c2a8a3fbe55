"""Hexagonal board model.

A fixed-radius hex board: which coordinates exist, how they neighbor
each other, how each is classified and what it is worth.  Everything here
is a pure function of the coordinate; the board holds no occupancy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from hexclash.models.hex import HexCoord
from hexclash.util import constants
from hexclash.util.hex_math import HexLayout, hex_to_pixel, pixel_to_hex


class HexType(Enum):
    """Classification of a board hex."""

    NORMAL = "normal"
    STARTING_LOCATION = "starting-location"
    HIGH_VALUE = "high-value"
    CENTER = "center"


@dataclass(frozen=True)
class HexBoard:
    """A radius-bounded hex board with its landmark hexes.

    Attributes:
        radius: Board radius N; valid hexes satisfy |q|, |r|, |q+r| <= N.
        starting_locations: Hexes where a team's first plate may go.
        high_value_locations: Heart hexes worth double.
        center: The center heart hex.
    """

    radius: int = constants.BOARD_RADIUS
    starting_locations: frozenset[HexCoord] = field(
        default_factory=lambda: frozenset(constants.STARTING_LOCATIONS))
    high_value_locations: frozenset[HexCoord] = field(
        default_factory=lambda: frozenset(constants.HIGH_VALUE_LOCATIONS))
    center: HexCoord = constants.CENTER_LOCATION

    def __post_init__(self) -> None:
        landmarks = sorted(self.starting_locations | self.high_value_locations | {self.center})
        off_board = [h for h in landmarks if not self.is_valid(h)]
        if off_board:
            raise ValueError(
                f"Landmark hexes {', '.join(h.key() for h in off_board)} "
                f"lie outside a radius-{self.radius} board")

    # -- Coordinates -----------------------------------------------------

    def all_coordinates(self) -> Iterator[HexCoord]:
        """Yield every valid hex, by increasing q then increasing r."""
        n = self.radius
        for q in range(-n, n + 1):
            for r in range(max(-n, -q - n), min(n, -q + n) + 1):
                yield HexCoord(q, r)

    def __len__(self) -> int:
        n = self.radius
        return 3 * n * (n + 1) + 1

    def is_valid(self, coord: HexCoord) -> bool:
        """True if the hex lies on the board."""
        n = self.radius
        return abs(coord.q) <= n and abs(coord.r) <= n and abs(coord.q + coord.r) <= n

    def __contains__(self, coord: object) -> bool:
        return isinstance(coord, HexCoord) and self.is_valid(coord)

    # -- Queries ---------------------------------------------------------

    def neighbors(self, coord: HexCoord) -> list[HexCoord]:
        """On-board neighbors of a hex (3 to 6 of them)."""
        return [n for n in coord.neighbors() if self.is_valid(n)]

    def ring(self, center: HexCoord, radius: int) -> list[HexCoord]:
        """On-board hexes at exactly `radius` steps from center."""
        return [h for h in center.ring(radius) if self.is_valid(h)]

    @staticmethod
    def distance(a: HexCoord, b: HexCoord) -> int:
        return a.distance_to(b)

    # -- Classification --------------------------------------------------

    def classify(self, coord: HexCoord) -> HexType:
        if coord in self.starting_locations:
            return HexType.STARTING_LOCATION
        if coord in self.high_value_locations:
            return HexType.HIGH_VALUE
        if coord == self.center:
            return HexType.CENTER
        return HexType.NORMAL

    def is_heart(self, coord: HexCoord) -> bool:
        """Heart hexes are the high-value hexes plus the center."""
        return coord == self.center or coord in self.high_value_locations

    def heart_hexes(self) -> list[HexCoord]:
        return sorted(self.high_value_locations) + [self.center]

    def hex_value(self, coord: HexCoord) -> int:
        """Points a team earns for owning this hex."""
        if self.is_heart(coord):
            return constants.HIGH_VALUE_HEX_VALUE
        return constants.NORMAL_HEX_VALUE

    def control_bonus(self, coord: HexCoord) -> int:
        """Extra points for controlling a heart hex (0 for other hexes)."""
        if coord == self.center:
            return constants.CENTER_CONTROL_BONUS
        if coord in self.high_value_locations:
            return constants.HEART_CONTROL_BONUS
        return 0

    # -- Pixel projection ------------------------------------------------

    @staticmethod
    def to_pixel(coord: HexCoord, layout: HexLayout) -> tuple[float, float]:
        return hex_to_pixel(coord, layout)

    @staticmethod
    def to_axial(x: float, y: float, layout: HexLayout) -> HexCoord:
        """Hex under a pixel; may lie off the board (check ``is_valid``)."""
        return pixel_to_hex(x, y, layout)
