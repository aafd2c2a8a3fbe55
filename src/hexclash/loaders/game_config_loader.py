"""Game configuration: loads tunable constants from config/game.yaml.

Provides a single ``GameConfig`` dataclass that is loaded once at startup
and then passed wherever constants are needed.  The game core never reads
configuration itself; it receives the values as arguments.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import yaml

from hexclash.util import constants
from hexclash.util.hex_math import HexLayout

log = logging.getLogger(__name__)

DEFAULT_GAME_CONFIG_PATH = "config/game.yaml"


@dataclass
class GameConfig:
    """All tunable tournament constants.

    Loaded from ``config/game.yaml``.  Every field has a sensible default
    so the server can start even without the file.
    """

    # -- Board -------------------------------------------------------
    board_radius: int = constants.BOARD_RADIUS
    hex_size: float = constants.DEFAULT_HEX_SIZE
    origin_x: float = constants.DEFAULT_ORIGIN[0]
    origin_y: float = constants.DEFAULT_ORIGIN[1]

    # -- Scoring -----------------------------------------------------
    win_condition: int = constants.DEFAULT_WIN_CONDITION

    # -- Scheduling --------------------------------------------------
    max_consecutive_games: int = constants.DEFAULT_MAX_CONSECUTIVE_GAMES
    game_types: List[str] = field(default_factory=lambda: list(constants.DEFAULT_GAME_TYPES))
    play_types: List[str] = field(default_factory=lambda: list(constants.DEFAULT_PLAY_TYPES))

    # -- Teams -------------------------------------------------------
    team_colors: List[str] = field(default_factory=lambda: list(constants.TEAM_COLORS))
    default_color: str = constants.DEFAULT_COLOR

    # -- Server ------------------------------------------------------
    rest_port: int = 8080
    state_file: str = "state.yaml"

    def __post_init__(self) -> None:
        if self.board_radius < constants.BOARD_RADIUS:
            raise ValueError(
                f"board_radius must be at least {constants.BOARD_RADIUS} to hold the "
                f"starting and heart hexes, got {self.board_radius}")

    @property
    def layout(self) -> HexLayout:
        return HexLayout(hex_size=self.hex_size, origin_x=self.origin_x, origin_y=self.origin_y)

    def team_color(self, index: int) -> str:
        """Default color for the team at 0-based position ``index``."""
        if index < 0 or not self.team_colors:
            return self.default_color
        return self.team_colors[index % len(self.team_colors)]


def load_game_config(path: str = DEFAULT_GAME_CONFIG_PATH) -> GameConfig:
    """Load game configuration from a YAML file.

    Missing keys fall back to dataclass defaults, unknown keys are ignored.
    If the file does not exist, a warning is logged and pure defaults are
    returned.

    Raises:
        ValueError: A value is out of range (e.g. a board too small for the
            starting and heart hexes).
    """
    p = Path(path)
    if not p.exists():
        log.warning("Game config not found at %s, using defaults", p)
        return GameConfig()

    with p.open() as f:
        raw = yaml.safe_load(f) or {}

    log.info("Loaded game config from %s (%d keys)", p, len(raw))

    unknown = sorted(k for k in raw if k not in GameConfig.__dataclass_fields__)
    if unknown:
        log.warning("Ignoring unknown game config keys: %s", ", ".join(unknown))

    return GameConfig(**{
        k: v for k, v in raw.items()
        if k in GameConfig.__dataclass_fields__
    })
