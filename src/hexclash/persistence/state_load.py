"""State load: restores the tournament document from a YAML dump.

Reconstructs the game state and the match schedule from a file written by
:func:`hexclash.persistence.state_save.save_state`.  Coordinate keys are
parsed back into :class:`HexCoord` values here and nowhere else.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from hexclash.models.game import GamePhase, GameResult, GameState, Turn
from hexclash.models.hex import HexCoord
from hexclash.models.match import Match, MatchSide, MatchStatus, TeamRef
from hexclash.models.team import Team
from hexclash.persistence.state_save import DEFAULT_STATE_PATH
from hexclash.util import constants

log = logging.getLogger(__name__)


# ===================================================================
# Result container
# ===================================================================

@dataclass
class RestoredState:
    """Container for all data restored from a YAML state file.

    Attributes:
        game: Restored game state.
        matches: Restored scheduled matches.
        games: Game type rotation of the schedule.
        max_consecutive_games: Run limit of the schedule.
        meta: Metadata from the save file (version, save timestamp).
    """

    game: GameState = field(default_factory=GameState)
    matches: list[Match] = field(default_factory=list)
    games: list[str] = field(default_factory=list)
    max_consecutive_games: int = constants.DEFAULT_MAX_CONSECUTIVE_GAMES
    meta: dict[str, Any] = field(default_factory=dict)


# ===================================================================
# Public API
# ===================================================================


async def load_state(path: str = DEFAULT_STATE_PATH) -> Optional[RestoredState]:
    """Load the tournament document from a YAML file.

    Returns None if the file does not exist or cannot be parsed.
    """
    state_file = Path(path)
    if not state_file.exists():
        log.info("No state file found at %s", path)
        return None

    try:
        raw = yaml.safe_load(state_file.read_text(encoding="utf-8"))
    except yaml.YAMLError:
        log.exception("Failed to parse state file %s", path)
        return None

    if not isinstance(raw, dict):
        log.warning("State file %s has unexpected format (not a dict)", path)
        return None

    try:
        result = parse_document(raw)
    except (KeyError, TypeError, ValueError):
        log.exception("State file %s is missing required fields", path)
        return None

    log.info("Restored state from %s (saved at %s, version %s): %d teams, %d plates, %d matches",
             path, result.meta.get("saved_at", "?"), result.meta.get("version", "?"),
             len(result.game.teams), len(result.game.board), len(result.matches))
    return result


def parse_document(raw: dict[str, Any]) -> RestoredState:
    """Build a :class:`RestoredState` from a plain-data document."""
    result = RestoredState()
    result.meta = dict(raw.get("meta", {}))
    result.game = deserialize_game(raw.get("game", {}))

    schedule = raw.get("schedule", {}) or {}
    result.games = list(schedule.get("games", []))
    result.max_consecutive_games = schedule.get(
        "max_consecutive_games", constants.DEFAULT_MAX_CONSECUTIVE_GAMES)
    for match_dict in schedule.get("matches", []):
        try:
            result.matches.append(deserialize_match(match_dict))
        except (KeyError, TypeError, ValueError):
            log.exception("Failed to restore match: %s", match_dict.get("id", "?"))
    return result


# ===================================================================
# Game
# ===================================================================

def deserialize_game(d: dict[str, Any]) -> GameState:
    turn_dict = d.get("current_turn")
    return GameState(
        game_id=d.get("game_id", ""),
        teams=[_deserialize_team(t) for t in d.get("teams", [])],
        board=_to_hex_map(d.get("board", {})),
        heart_hex_control=_to_hex_map(d.get("heart_hex_control", {})),
        current_turn=_deserialize_turn(turn_dict) if turn_dict else None,
        win_condition=d.get("win_condition", constants.DEFAULT_WIN_CONDITION),
        games_played=d.get("games_played", 0),
        current_round=d.get("current_round", 0),
        game_history=[_deserialize_result(r) for r in d.get("game_history", [])],
        phase=GamePhase(d.get("phase", GamePhase.SETUP.value)),
        winner_id=d.get("winner_id"),
    )


def _to_hex_map(d: dict[str, Any]) -> dict[HexCoord, int]:
    return {HexCoord.from_key(key): int(tid) for key, tid in d.items()}


def _deserialize_team(d: dict[str, Any]) -> Team:
    return Team(
        tid=d["id"],
        name=d.get("name", ""),
        color=d.get("color", constants.DEFAULT_COLOR),
        players=[str(p) for p in d.get("players", [])],
        points=d.get("points", 0),
        games_won=d.get("games_won", 0),
    )


def _deserialize_turn(d: dict[str, Any]) -> Turn:
    return Turn(
        team_id=d["team_id"],
        needs_placement=d.get("needs_placement", True),
        game_result_id=d.get("game_result_id"),
    )


def _deserialize_result(d: dict[str, Any]) -> GameResult:
    return GameResult(
        result_id=d["id"],
        game=d["game"],
        play_type=d["play_type"],
        winning_team_id=d["winning_team_id"],
        notes=d.get("notes", ""),
        match_id=d.get("match_id"),
    )


# ===================================================================
# Schedule
# ===================================================================

def deserialize_match(d: dict[str, Any]) -> Match:
    split = d.get("split_team")
    return Match(
        match_id=d["id"],
        round=d["round"],
        sub_round=d["sub_round"],
        game=d["game"],
        game_sequence=d.get("game_sequence", 1),
        split_team=_deserialize_team_ref(split) if split else None,
        side_a=_deserialize_side(d["side_a"]),
        side_b=_deserialize_side(d["side_b"]),
        status=MatchStatus(d.get("status", MatchStatus.WAITING.value)),
        winner=d.get("winner"),
        timestamp=d.get("timestamp"),
    )


def _deserialize_team_ref(d: dict[str, Any]) -> TeamRef:
    return TeamRef(tid=d["id"], name=d.get("name", ""), color=d.get("color", ""))


def _deserialize_side(d: dict[str, Any]) -> MatchSide:
    return MatchSide(
        name=d["name"],
        teams=tuple(_deserialize_team_ref(t) for t in d.get("teams", [])),
        players=tuple(str(p) for p in d.get("players", [])),
        split_player=d.get("split_player"),
    )
