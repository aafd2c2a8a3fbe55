"""Exception types raised by the game core and the scheduler."""

from __future__ import annotations

from typing import Optional

from hexclash.models.hex import HexCoord


class HexclashError(Exception):
    """Base class for all domain errors."""
    pass


class InvalidInputError(HexclashError, ValueError):
    """Input is malformed or violates a structural precondition."""
    pass


class IllegalMoveError(HexclashError, ValueError):
    """A plate cannot be placed there; the state was left untouched."""

    def __init__(self, message: str, coord: Optional[HexCoord] = None,
                 team_id: Optional[int] = None):
        self.message = message
        self.coord = coord
        self.team_id = team_id
        super().__init__(message)


class TurnStateError(HexclashError):
    """Turn state machine misuse (caller bug)."""
    pass
