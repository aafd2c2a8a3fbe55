"""Statistics service: rankings, game summaries, state sanity checks.

Read-only views over a :class:`GameState`; nothing here changes state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from hexclash.models.game import GameResult, GameState
    from hexclash.models.team import Team


@dataclass
class StateCheck:
    """Outcome of :meth:`StatisticsService.validate_game_state`."""

    valid: bool = True
    errors: list[str] = field(default_factory=list)


class StatisticsService:
    """Service for scoring summaries and leaderboard queries."""

    def team_rankings(self, state: GameState) -> list[Team]:
        """Teams by points, highest first; ties keep team order."""
        return sorted(state.teams, key=lambda t: t.points, reverse=True)

    def leading_team(self, state: GameState) -> Optional[Team]:
        rankings = self.team_rankings(state)
        return rankings[0] if rankings else None

    def game_stats(self, state: GameState) -> dict[str, Any]:
        leader = self.leading_team(state)
        return {
            "games_played": state.games_played,
            "current_round": state.current_round,
            "total_teams": len(state.teams),
            "total_players": sum(len(t.players) for t in state.teams),
            "leading_team": leader.tid if leader else None,
            "game_phase": state.phase.value,
            "active_turns": 1 if state.current_turn is not None else 0,
            "win_condition": state.win_condition,
            "plates_placed": len(state.board),
            "hearts_controlled": len(state.heart_hex_control),
        }

    def recent_games(self, state: GameState, limit: int = 5) -> list[GameResult]:
        """Most recent results first."""
        if limit <= 0:
            return []
        return list(reversed(state.game_history[-limit:]))

    def validate_game_state(self, state: GameState) -> StateCheck:
        """Sanity-check a loaded document before it is used."""
        check = StateCheck()
        if not state.game_id:
            check.errors.append("Missing game ID")
        if not state.teams:
            check.errors.append("No teams defined")
        for team in state.teams:
            if not team.players:
                check.errors.append(f"Team {team.tid} has no players")
        known = {t.tid for t in state.teams}
        for coord, tid in state.board.items():
            if tid not in known:
                check.errors.append(f"Invalid team {tid} on board at {coord.key()}")
        for coord, tid in state.heart_hex_control.items():
            if tid not in known:
                check.errors.append(f"Invalid team {tid} controlling {coord.key()}")
        if state.current_turn is not None and state.current_turn.team_id not in known:
            check.errors.append(f"Active turn for unknown team {state.current_turn.team_id}")
        check.valid = not check.errors
        return check
