"""Game constants: board layout, scoring and scheduling defaults.

Tunable values are also exposed through ``GameConfig``; the values here
are the reference defaults and the fixed board landmarks.
"""

from hexclash.models.hex import HexCoord

# -- Board ---------------------------------------------------------------

BOARD_RADIUS: int = 5
"""Board radius; a radius-5 board holds 91 hexes."""

STARTING_LOCATIONS: tuple[HexCoord, ...] = (
    HexCoord(0, -5),
    HexCoord(5, -5),
    HexCoord(5, 0),
    HexCoord(0, 5),
    HexCoord(-5, 5),
    HexCoord(-5, 0),
)
"""Outer corners; a team's first plate must go on one of these."""

HIGH_VALUE_LOCATIONS: tuple[HexCoord, ...] = (
    HexCoord(2, -4),
    HexCoord(4, -2),
    HexCoord(2, 2),
    HexCoord(-2, 4),
    HexCoord(-4, 2),
    HexCoord(-2, -2),
)

CENTER_LOCATION: HexCoord = HexCoord(0, 0)

# -- Scoring -------------------------------------------------------------

NORMAL_HEX_VALUE: int = 1
HIGH_VALUE_HEX_VALUE: int = 2
HEART_CONTROL_BONUS: int = 1
CENTER_CONTROL_BONUS: int = 2

DEFAULT_WIN_CONDITION: int = 50

# -- Projection ----------------------------------------------------------

DEFAULT_HEX_SIZE: float = 32.0
DEFAULT_ORIGIN: tuple[float, float] = (375.0, 375.0)

# -- Scheduling ----------------------------------------------------------

DEFAULT_MAX_CONSECUTIVE_GAMES: int = 3
MIN_SCHEDULE_TEAMS: int = 3
MIN_SPLIT_TEAM_PLAYERS: int = 2

DEFAULT_GAME_TYPES: tuple[str, ...] = ("CS2", "Dota2", "Valorant", "StarCraft2", "Predecessor")
DEFAULT_PLAY_TYPES: tuple[str, ...] = ("1v1", "2v2", "3v3", "5v5")

# -- Team colors ---------------------------------------------------------

TEAM_COLORS: tuple[str, ...] = (
    "#ff4444",
    "#44ff44",
    "#4444ff",
    "#ffff44",
    "#ff44ff",
    "#44ffff",
    "#ff8844",
    "#8844ff",
)
DEFAULT_COLOR: str = "#888888"
