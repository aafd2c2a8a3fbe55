"""State save: serializes the tournament document to YAML.

The document mirrors what the browser client stored in its hosted
document database: coordinates become ``"q{q}r{r}"`` keys and ``None``
values are stripped before writing.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Optional

import yaml

from hexclash.models.game import GameResult, GameState, Turn
from hexclash.models.match import Match, MatchSide, TeamRef
from hexclash.models.team import Team

log = logging.getLogger(__name__)

# Default path for the state file (relative to working directory)
DEFAULT_STATE_PATH = "state.yaml"
STATE_VERSION = 1


# ===================================================================
# Public API
# ===================================================================


async def save_state(
    game: GameState,
    matches: Optional[list[Match]] = None,
    games: Optional[list[str]] = None,
    max_consecutive_games: Optional[int] = None,
    path: str = DEFAULT_STATE_PATH,
) -> None:
    """Serialize the game and its schedule to a YAML file.

    Args:
        game: Current game state.
        matches: Scheduled matches (may be empty).
        games: Game type rotation the schedule was generated from.
        max_consecutive_games: Run limit the schedule was generated with.
        path: Output file path.
    """
    document = build_document(game, matches, games, max_consecutive_games)

    out = Path(path)
    tmp = out.with_suffix(".yaml.tmp")
    try:
        tmp.write_text(
            yaml.dump(document, default_flow_style=False, allow_unicode=True, sort_keys=False),
            encoding="utf-8",
        )
        tmp.replace(out)
        log.info("Game state saved to %s (%d teams, %d plates, %d matches)",
                 path, len(game.teams), len(game.board), len(matches or []))
    except Exception:
        log.exception("Failed to save game state to %s", path)
        if tmp.exists():
            tmp.unlink(missing_ok=True)
        raise


def build_document(
    game: GameState,
    matches: Optional[list[Match]] = None,
    games: Optional[list[str]] = None,
    max_consecutive_games: Optional[int] = None,
) -> dict[str, Any]:
    """Plain-data document for ``game`` and its schedule."""
    return sanitize({
        "meta": _serialize_meta(),
        "game": serialize_game(game),
        "schedule": {
            "games": list(games or []),
            "max_consecutive_games": max_consecutive_games,
            "matches": [serialize_match(m) for m in (matches or [])],
        },
    })


def sanitize(value: Any) -> Any:
    """Drop ``None`` values from nested dicts (lists keep their length)."""
    if isinstance(value, dict):
        return {str(k): sanitize(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [sanitize(v) for v in value]
    return value


# ===================================================================
# Meta
# ===================================================================

def _serialize_meta() -> dict[str, Any]:
    return {
        "version": STATE_VERSION,
        "saved_at": time.strftime("%Y-%m-%dT%H:%M:%S"),
        "saved_at_unix": time.time(),
    }


# ===================================================================
# Game
# ===================================================================

def serialize_game(game: GameState) -> dict[str, Any]:
    return {
        "game_id": game.game_id,
        "teams": [_serialize_team(t) for t in game.teams],
        "board": {coord.key(): tid for coord, tid in sorted(game.board.items())},
        "heart_hex_control": {
            coord.key(): tid for coord, tid in sorted(game.heart_hex_control.items())
        },
        "current_turn": _serialize_turn(game.current_turn) if game.current_turn else None,
        "win_condition": game.win_condition,
        "games_played": game.games_played,
        "current_round": game.current_round,
        "game_history": [_serialize_result(r) for r in game.game_history],
        "phase": game.phase.value,
        "winner_id": game.winner_id,
    }


def _serialize_team(team: Team) -> dict[str, Any]:
    return {
        "id": team.tid,
        "name": team.name,
        "color": team.color,
        "players": list(team.players),
        "points": team.points,
        "games_won": team.games_won,
    }


def _serialize_turn(turn: Turn) -> dict[str, Any]:
    return {
        "team_id": turn.team_id,
        "needs_placement": turn.needs_placement,
        "game_result_id": turn.game_result_id,
    }


def _serialize_result(result: GameResult) -> dict[str, Any]:
    return {
        "id": result.result_id,
        "game": result.game,
        "play_type": result.play_type,
        "winning_team_id": result.winning_team_id,
        "notes": result.notes,
        "match_id": result.match_id,
    }


# ===================================================================
# Schedule
# ===================================================================

def serialize_match(match: Match) -> dict[str, Any]:
    return {
        "id": match.match_id,
        "round": match.round,
        "sub_round": match.sub_round,
        "game": match.game,
        "game_sequence": match.game_sequence,
        "split_team": _serialize_team_ref(match.split_team) if match.split_team else None,
        "side_a": _serialize_side(match.side_a),
        "side_b": _serialize_side(match.side_b),
        "status": match.status.value,
        "winner": match.winner,
        "timestamp": match.timestamp,
    }


def _serialize_team_ref(ref: TeamRef) -> dict[str, Any]:
    return {"id": ref.tid, "name": ref.name, "color": ref.color}


def _serialize_side(side: MatchSide) -> dict[str, Any]:
    return {
        "name": side.name,
        "teams": [_serialize_team_ref(t) for t in side.teams],
        "players": list(side.players),
        "split_player": side.split_player,
    }
