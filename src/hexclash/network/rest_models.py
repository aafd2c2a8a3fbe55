"""Pydantic request models for the REST API.

These models define the HTTP request bodies.  Responses are plain dicts
built from the persisted document shape so the API and ``state.yaml``
agree on field names.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


# ===================================================================
# Game setup
# ===================================================================


class TeamSpec(BaseModel):
    id: int = Field(gt=0)
    name: str = ""
    color: str = ""
    players: List[str] = Field(default_factory=list)


class CreateGameRequest(BaseModel):
    game_id: str
    teams: List[TeamSpec]
    win_condition: Optional[int] = Field(default=None, gt=0)


# ===================================================================
# Results & placements
# ===================================================================


class MatchResultRequest(BaseModel):
    match_id: Optional[int] = None
    game: str = ""
    play_type: str
    winning_team_id: int
    notes: str = ""


class PlacementRequest(BaseModel):
    q: int
    r: int
    team_id: Optional[int] = None


# ===================================================================
# Schedule
# ===================================================================


class ScheduleRequest(BaseModel):
    games: Optional[List[str]] = None
    max_consecutive_games: Optional[int] = Field(default=None, ge=1)
    start_from_team: Optional[int] = Field(default=None, ge=0)
    total_matches: Optional[int] = Field(default=None, ge=0)
