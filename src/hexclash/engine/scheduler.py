"""Match scheduler: rotating split-team match generation.

One team is always split between the two sides: its first player joins
TEAM_A, its second joins TEAM_B.  The split team rotates backwards through
the team list after every match, so every team is split once per round.

Pattern for 5 teams (split pointer starts at the last team):

    Match 1: Team5 splits → TEAM_A: [1, 2, 5a]  TEAM_B: [3, 4, 5b]
    Match 2: Team4 splits → TEAM_A: [1, 2, 4a]  TEAM_B: [3, 5, 4b]
    Match 3: Team3 splits → TEAM_A: [1, 2, 3a]  TEAM_B: [4, 5, 3b]
    Match 4: Team2 splits → TEAM_A: [1, 2a]     TEAM_B: [3, 4, 5, 2b]
    Match 5: Team1 splits → TEAM_A: [2, 1a]     TEAM_B: [3, 4, 5, 1b]

Game types repeat for at most ``max_consecutive_games`` matches in a row
before moving on to the next one (wrapping):
CS2, CS2, CS2, Dota2, Dota2, Dota2, Valorant, ...

Fairness is checked by :meth:`MatchScheduler.validate`, not enforced.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from hexclash.errors import InvalidInputError
from hexclash.models.match import Match, MatchSide, MatchStatus, PairingMatch, TeamRef
from hexclash.models.team import Team
from hexclash.util import constants
from hexclash.util.types import format_percent


@dataclass
class RotationCheck:
    """Outcome of a consecutive-game check."""

    valid: bool
    violations: list[dict[str, Any]] = field(default_factory=list)
    message: str = ""


@dataclass
class ScheduleValidation:
    """Outcome of :meth:`MatchScheduler.validate`.

    Attributes:
        valid: False only for hard errors (an empty schedule).
        errors: Hard errors.
        warnings: Fairness deviations; the schedule is still usable.
        stats: Split distribution, appearances, game distribution, ...
    """

    valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    stats: dict[str, Any] = field(default_factory=dict)


def _ref(team: Team) -> TeamRef:
    return TeamRef(tid=team.tid, name=team.name, color=team.color)


class MatchScheduler:
    """Generates and tracks a tournament's match queue.

    Args:
        teams: Teams in their fixed order.
        games: Game type labels in rotation order.
        max_consecutive_games: Longest allowed run of one game type.
    """

    def __init__(self, teams: Sequence[Team], games: Sequence[str],
                 max_consecutive_games: int = constants.DEFAULT_MAX_CONSECUTIVE_GAMES) -> None:
        self._teams: list[Team] = list(teams)
        self._games: list[str] = list(games)
        self._max_consecutive = max_consecutive_games
        self.matches: list[Match] = []
        self.pairings: list[PairingMatch] = []

    @property
    def teams(self) -> list[Team]:
        return list(self._teams)

    @property
    def games(self) -> list[str]:
        return list(self._games)

    @property
    def max_consecutive_games(self) -> int:
        return self._max_consecutive

    # -- Generation ------------------------------------------------------

    def generate_rotating_split_team(self, max_consecutive_games: Optional[int] = None,
                                     start_from_team: Optional[int] = None,
                                     total_matches: Optional[int] = None) -> list[Match]:
        """Generate the rotating split-team schedule.

        Args:
            max_consecutive_games: Overrides the scheduler's run limit.
            start_from_team: Index of the first split team (default: last).
            total_matches: Number of matches; default is
                ``teams * games * max_consecutive_games``.

        Returns:
            The generated matches (also kept on ``self.matches``).

        Raises:
            InvalidInputError: Fewer than 3 teams, no games, a team with
                fewer than 2 players, or bad options.
        """
        if max_consecutive_games is not None:
            self._max_consecutive = max_consecutive_games
        max_run = self._max_consecutive
        n = len(self._teams)

        if n < constants.MIN_SCHEDULE_TEAMS:
            raise InvalidInputError(
                f"Need at least {constants.MIN_SCHEDULE_TEAMS} teams for the "
                f"rotating split-team system, got {n}")
        if not self._games:
            raise InvalidInputError("Need at least 1 game")
        if max_run < 1:
            raise InvalidInputError(f"max_consecutive_games must be >= 1, got {max_run}")
        for team in self._teams:
            if len(team.players) < constants.MIN_SPLIT_TEAM_PLAYERS:
                raise InvalidInputError(
                    f"Team {team.name} must have at least "
                    f"{constants.MIN_SPLIT_TEAM_PLAYERS} players")
        if start_from_team is not None and not 0 <= start_from_team < n:
            raise InvalidInputError(
                f"start_from_team must be in [0, {n - 1}], got {start_from_team}")
        if total_matches is not None and total_matches < 0:
            raise InvalidInputError(f"total_matches must be >= 0, got {total_matches}")

        match_count = (total_matches if total_matches is not None
                       else n * len(self._games) * max_run)
        split_index = start_from_team if start_from_team is not None else n - 1
        game_index = 0
        run_length = 0

        matches: list[Match] = []
        for i in range(match_count):
            split_team = self._teams[split_index]
            player_a, player_b = split_team.players[0], split_team.players[1]

            matches.append(Match(
                match_id=i + 1,
                round=i // n + 1,
                sub_round=i % n + 1,
                game=self._games[game_index],
                game_sequence=run_length + 1,
                split_team=_ref(split_team),
                side_a=self._build_side("TEAM_A", 0, self._half_point(), split_index, player_a),
                side_b=self._build_side("TEAM_B", self._half_point(), n, split_index, player_b),
            ))

            # Rotate split team backwards through the team list
            split_index = (split_index - 1) % n

            run_length += 1
            if run_length >= max_run:
                game_index = (game_index + 1) % len(self._games)
                run_length = 0

        self.matches = matches
        return matches

    def _half_point(self) -> int:
        return math.ceil(len(self._teams) / 2) - 1

    def _build_side(self, name: str, start: int, stop: int,
                    split_index: int, split_player: str) -> MatchSide:
        """Whole teams at indices [start, stop) minus the split team, plus one split player."""
        refs: list[TeamRef] = []
        players: list[str] = []
        for i in range(start, stop):
            if i == split_index:
                continue
            team = self._teams[i]
            refs.append(_ref(team))
            players.extend(team.players)
        players.append(split_player)
        return MatchSide(name=name, teams=tuple(refs), players=tuple(players),
                         split_player=split_player)

    def generate_round_robin(self) -> list[PairingMatch]:
        """Every pair of teams meets once per game type."""
        if len(self._teams) < 2:
            raise InvalidInputError("Need at least 2 teams for a round robin")
        if not self._games:
            raise InvalidInputError("Need at least 1 game")
        pairings: list[PairingMatch] = []
        for game in self._games:
            for i, first in enumerate(self._teams):
                for second in self._teams[i + 1:]:
                    pairings.append(PairingMatch(
                        match_id=len(pairings) + 1, game=game,
                        team1=_ref(first), team2=_ref(second)))
        self.pairings = pairings
        return pairings

    # -- Validation ------------------------------------------------------

    def validate_game_rotation(self, max_consecutive: Optional[int] = None) -> RotationCheck:
        """Find runs of one game type longer than ``max_consecutive``."""
        limit = max_consecutive if max_consecutive is not None else self._max_consecutive
        current_game: Optional[str] = None
        count = 0
        violations: list[dict[str, Any]] = []

        for position, match in enumerate(self.matches, start=1):
            if match.game == current_game:
                count += 1
                if count > limit:
                    violations.append({
                        "match_id": match.match_id,
                        "game": match.game,
                        "consecutive_count": count,
                        "position": position,
                    })
            else:
                current_game = match.game
                count = 1

        if violations:
            message = f"Found {len(violations)} violations of max {limit} consecutive games"
        else:
            message = "Game rotation is valid"
        return RotationCheck(valid=not violations, violations=violations, message=message)

    def validate(self) -> ScheduleValidation:
        """Check the current schedule for fairness and report statistics."""
        result = ScheduleValidation()
        if not self.matches:
            result.valid = False
            result.errors.append("No matches generated")
            return result

        rotation = self.validate_game_rotation()
        if not rotation.valid:
            result.warnings.append(rotation.message)

        split_counts = {team.tid: 0 for team in self._teams}
        appearances = {team.tid: 0 for team in self._teams}
        game_distribution: dict[str, int] = {}
        for match in self.matches:
            if match.split_team is not None:
                split_counts[match.split_team.tid] = split_counts.get(match.split_team.tid, 0) + 1
            for side in (match.side_a, match.side_b):
                for tid in side.team_ids:
                    appearances[tid] = appearances.get(tid, 0) + 1
            game_distribution[match.game] = game_distribution.get(match.game, 0) + 1

        if split_counts:
            low, high = min(split_counts.values()), max(split_counts.values())
            if high - low > 1:
                result.warnings.append(
                    f"Uneven split distribution: {low}-{high} splits per team")

        result.stats = {
            "total_matches": len(self.matches),
            "total_rounds": max(m.round for m in self.matches),
            "split_distribution": split_counts,
            "appearances": appearances,
            "game_distribution": game_distribution,
            "game_rotation_pattern": self.game_rotation_pattern(),
        }
        if not rotation.valid:
            result.stats["game_rotation_violations"] = rotation.violations
        return result

    def game_rotation_pattern(self) -> dict[str, Any]:
        """Match-by-match game sequence plus match IDs per game type."""
        sequence = []
        distribution: dict[str, list[int]] = {}
        for match in self.matches:
            sequence.append({
                "match_id": match.match_id,
                "game": match.game,
                "game_sequence": match.game_sequence,
            })
            distribution.setdefault(match.game, []).append(match.match_id)
        return {"sequence": sequence, "distribution": distribution}

    # -- Queries ---------------------------------------------------------

    def get_match(self, match_id: int) -> Optional[Match]:
        for match in self.matches:
            if match.match_id == match_id:
                return match
        return None

    def matches_for_round(self, round_number: int) -> list[Match]:
        return [m for m in self.matches if m.round == round_number]

    def next_match(self) -> Optional[Match]:
        """First match still waiting for a result."""
        for match in self.matches:
            if match.status == MatchStatus.WAITING:
                return match
        return None

    def current_round(self) -> int:
        upcoming = self.next_match()
        if upcoming is not None:
            return upcoming.round
        return max((m.round for m in self.matches), default=0)

    def stats(self) -> dict[str, Any]:
        total = len(self.matches)
        completed = sum(1 for m in self.matches if m.status == MatchStatus.COMPLETED)
        return {
            "total_matches": total,
            "completed": completed,
            "remaining": total - completed,
            "progress": format_percent(completed / total) if total else format_percent(0.0),
            "current_round": self.current_round(),
        }

    # -- Results ---------------------------------------------------------

    def record_match_result(self, match_id: int, winner: str,
                            timestamp: Optional[str] = None) -> Match:
        """Mark a match completed.

        Raises:
            InvalidInputError: No match with that ID.
        """
        match = self.get_match(match_id)
        if match is None:
            raise InvalidInputError(f"Match {match_id} not found")
        match.status = MatchStatus.COMPLETED
        match.winner = winner
        match.timestamp = timestamp or time.strftime("%Y-%m-%dT%H:%M:%S")
        return match

    # -- Presentation ----------------------------------------------------

    def preview(self) -> str:
        """Plain-text rendering of the schedule, grouped by round."""
        lines = ["=== MATCH SCHEDULE ===", ""]
        lines.append(f"Total Matches: {len(self.matches)}")
        lines.append(f"Game Rotation: Max {self._max_consecutive} consecutive games")
        lines.append("")

        rounds = sorted({m.round for m in self.matches})
        for round_number in rounds:
            lines.append(f"ROUND {round_number}")
            lines.append("-" * 50)
            for match in self.matches_for_round(round_number):
                lines.append(f"Match {match.match_id}: {match.game} (#{match.game_sequence})")
                if match.split_team is not None:
                    lines.append(f"  Split Team: {match.split_team.name}")
                for side in (match.side_a, match.side_b):
                    names = [t.name for t in side.teams] + ["Split Player"]
                    lines.append(f"  {side.name}: {' + '.join(names)}")
                lines.append("")
        return "\n".join(lines)
