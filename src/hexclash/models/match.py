"""Match model: scheduled matches produced by the match scheduler.

A match pits side A against side B.  Each side is a set of whole teams
plus exactly one player borrowed from the match's split team.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MatchStatus(Enum):
    WAITING = "waiting"
    COMPLETED = "completed"


@dataclass(frozen=True)
class TeamRef:
    """Lightweight reference to a team inside a match."""

    tid: int
    name: str = ""
    color: str = ""


@dataclass(frozen=True)
class MatchSide:
    """One side of a match.

    Attributes:
        name: ``"TEAM_A"`` or ``"TEAM_B"``.
        teams: Whole teams playing on this side.
        players: All players on this side, whole-team players first.
        split_player: The player contributed by the split team.
    """

    name: str
    teams: tuple[TeamRef, ...] = ()
    players: tuple[str, ...] = ()
    split_player: Optional[str] = None

    @property
    def team_ids(self) -> list[int]:
        return [t.tid for t in self.teams]


@dataclass
class Match:
    """A single scheduled match.

    Attributes:
        match_id: 1-based ID, in generation order.
        round: 1-based round; one round splits every team once.
        sub_round: 1-based position inside the round.
        game: Game type label.
        game_sequence: 1-based position inside the current run of ``game``.
        split_team: Team whose two players sit on opposite sides.
        side_a: First side (``TEAM_A``).
        side_b: Second side (``TEAM_B``).
        status: Waiting until a result is recorded.
        winner: Winner label supplied with the result.
        timestamp: ISO time the result was recorded.
    """

    match_id: int
    round: int
    sub_round: int
    game: str
    game_sequence: int
    split_team: Optional[TeamRef]
    side_a: MatchSide
    side_b: MatchSide
    status: MatchStatus = MatchStatus.WAITING
    winner: Optional[str] = None
    timestamp: Optional[str] = None


@dataclass
class PairingMatch:
    """A head-to-head round-robin match between two whole teams."""

    match_id: int
    game: str
    team1: TeamRef
    team2: TeamRef
    status: MatchStatus = MatchStatus.WAITING
    winner: Optional[str] = None
    timestamp: Optional[str] = None
