"""Game state model: the territory game document held by the orchestrator.

The core engine never keeps a reference to a ``GameState``: it receives one,
works on a copy, and hands the copy back.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from hexclash.models.hex import HexCoord
from hexclash.models.team import Team
from hexclash.util import constants


class GamePhase(Enum):
    """Lifecycle of a territory game."""

    SETUP = "setup"
    PLAYING = "playing"
    FINISHED = "finished"


@dataclass(frozen=True)
class Turn:
    """The single window in which one team may place a plate.

    Attributes:
        team_id: Team allowed to place.
        needs_placement: True until the plate is placed.
        game_result_id: Result that opened the turn, if any.
    """

    team_id: int
    needs_placement: bool = True
    game_result_id: Optional[int] = None


@dataclass(frozen=True)
class GameResult:
    """A recorded match outcome.

    Attributes:
        result_id: 1-based position in the game history.
        game: Game type label (e.g. ``"CS2"``).
        play_type: Format label (e.g. ``"2v2"``).
        winning_team_id: Team that earned the placement turn.
        notes: Free text.
        match_id: Scheduled match this result finalizes, if any.
    """

    result_id: int
    game: str
    play_type: str
    winning_team_id: int
    notes: str = ""
    match_id: Optional[int] = None


@dataclass
class GameState:
    """Complete state of one territory game.

    Attributes:
        game_id: External document identifier.
        teams: Teams in their fixed iteration order (tie-breaks use it).
        board: Occupancy, hex → owning team ID.
        heart_hex_control: Heart hex → controlling team ID.
        current_turn: Active turn or None.
        win_condition: Points needed to win.
        games_played: Number of recorded match results.
        current_round: ceil(games_played / team count).
        game_history: Recorded results, oldest first.
        phase: Setup / playing / finished.
        winner_id: Winning team once finished.
    """

    game_id: str = ""
    teams: list[Team] = field(default_factory=list)
    board: dict[HexCoord, int] = field(default_factory=dict)
    heart_hex_control: dict[HexCoord, int] = field(default_factory=dict)
    current_turn: Optional[Turn] = None
    win_condition: int = constants.DEFAULT_WIN_CONDITION
    games_played: int = 0
    current_round: int = 0
    game_history: list[GameResult] = field(default_factory=list)
    phase: GamePhase = GamePhase.SETUP
    winner_id: Optional[int] = None

    # -- Queries ---------------------------------------------------------

    def get_team(self, tid: int) -> Optional[Team]:
        for team in self.teams:
            if team.tid == tid:
                return team
        return None

    def plates_of(self, tid: int) -> list[HexCoord]:
        """Hexes owned by a team, in placement order."""
        return [coord for coord, owner in self.board.items() if owner == tid]

    # -- Copying ---------------------------------------------------------

    def copy(self) -> GameState:
        """Independent copy; mutating it never touches this state."""
        return dataclasses.replace(
            self,
            teams=[dataclasses.replace(t, players=list(t.players)) for t in self.teams],
            board=dict(self.board),
            heart_hex_control=dict(self.heart_hex_control),
            game_history=list(self.game_history),
        )
