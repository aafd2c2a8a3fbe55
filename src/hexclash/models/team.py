"""Team model: a tournament team and its running score."""

from __future__ import annotations

from dataclasses import dataclass, field

from hexclash.util import constants


@dataclass
class Team:
    """A team taking part in the tournament.

    Attributes:
        tid: Stable positive team ID; never reused.
        name: Display name (mutable metadata).
        color: Display color (mutable metadata).
        players: Ordered opaque player references.
        points: Current board score, recomputed after every placement.
        games_won: Number of recorded match results won.
    """

    tid: int
    name: str = ""
    color: str = constants.DEFAULT_COLOR
    players: list[str] = field(default_factory=list)
    points: int = 0
    games_won: int = 0

    def __post_init__(self) -> None:
        if not self.name:
            self.name = f"Team {self.tid}"
