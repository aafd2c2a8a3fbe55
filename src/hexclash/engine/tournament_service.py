"""Tournament service: owns the current game and its match queue.

Responsibilities:
- Holding the single current ``GameState`` and the match scheduler
- Turning match results into placement turns
- Applying placements and skips through the territory rules engine
- Publishing the resulting events on the event bus
- Snapshotting state for persistence

The rules live in :mod:`hexclash.engine.territory` and
:mod:`hexclash.engine.scheduler`; this service only sequences them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Optional, Sequence

if TYPE_CHECKING:
    from hexclash.loaders.game_config_loader import GameConfig
    from hexclash.persistence.state_load import RestoredState
    from hexclash.util.events import EventBus

from hexclash.engine.scheduler import MatchScheduler, ScheduleValidation
from hexclash.engine.statistics import StatisticsService
from hexclash.engine.territory import Placement, TerritoryGame, Transition
from hexclash.errors import InvalidInputError, TurnStateError
from hexclash.models.board import HexBoard
from hexclash.models.game import GameState
from hexclash.models.hex import HexCoord
from hexclash.models.match import Match, MatchStatus
from hexclash.models.team import Team
from hexclash.persistence.state_save import save_state
from hexclash.util import constants

log = logging.getLogger(__name__)


class TournamentService:
    """Service for the running tournament.

    Args:
        event_bus: Bus the game events are published on.
        game_config: Tournament configuration (defaults when omitted).
    """

    def __init__(self, event_bus: EventBus,
                 game_config: GameConfig | None = None) -> None:
        self._events = event_bus
        self._config = game_config
        radius = game_config.board_radius if game_config else constants.BOARD_RADIUS
        self._territory = TerritoryGame(HexBoard(radius=radius))
        self._statistics = StatisticsService()
        self._state = GameState()
        self._scheduler = MatchScheduler([], [], self._default_max_consecutive())

    def _default_max_consecutive(self) -> int:
        if self._config is not None:
            return self._config.max_consecutive_games
        return constants.DEFAULT_MAX_CONSECUTIVE_GAMES

    # -- Accessors -------------------------------------------------------

    @property
    def state(self) -> GameState:
        """Current game state.  Treat as read-only; use the service methods to change it."""
        return self._state

    @property
    def territory(self) -> TerritoryGame:
        return self._territory

    @property
    def statistics(self) -> StatisticsService:
        return self._statistics

    @property
    def scheduler(self) -> MatchScheduler:
        return self._scheduler

    @property
    def matches(self) -> list[Match]:
        return self._scheduler.matches

    # -- Setup -----------------------------------------------------------

    def create_game(self, game_id: str, teams: Iterable[Team],
                    win_condition: Optional[int] = None) -> GameState:
        """Start a new game, replacing the current one and its schedule."""
        if win_condition is None:
            win_condition = (self._config.win_condition if self._config
                             else constants.DEFAULT_WIN_CONDITION)

        self._state = self._territory.new_game(game_id, teams, win_condition)
        if self._config is not None:
            for index, team in enumerate(self._state.teams):
                if team.color == constants.DEFAULT_COLOR:
                    team.color = self._config.team_color(index)
        self._scheduler = MatchScheduler(self._state.teams, [], self._default_max_consecutive())
        log.info("Game %r created: %d teams, win condition %d",
                 game_id, len(self._state.teams), win_condition)
        return self._state

    def restore(self, restored: RestoredState) -> None:
        """Adopt a state loaded from disk."""
        check = self._statistics.validate_game_state(restored.game)
        if not check.valid:
            for error in check.errors:
                log.warning("Restored game %r: %s", restored.game.game_id, error)
        self._state = restored.game
        self._scheduler = MatchScheduler(restored.game.teams, restored.games,
                                         restored.max_consecutive_games)
        self._scheduler.matches = list(restored.matches)
        log.info("Game %r restored (%s, %d matches queued)",
                 self._state.game_id, self._state.phase.value, len(restored.matches))

    # -- Schedule --------------------------------------------------------

    def generate_schedule(self, games: Optional[Sequence[str]] = None,
                          max_consecutive_games: Optional[int] = None,
                          start_from_team: Optional[int] = None,
                          total_matches: Optional[int] = None) -> list[Match]:
        """Replace the match queue with a fresh rotating split-team schedule."""
        if games is None:
            games = self._config.game_types if self._config else constants.DEFAULT_GAME_TYPES
        if max_consecutive_games is None:
            max_consecutive_games = self._default_max_consecutive()

        scheduler = MatchScheduler(self._state.teams, games, max_consecutive_games)
        matches = scheduler.generate_rotating_split_team(
            start_from_team=start_from_team, total_matches=total_matches)
        self._scheduler = scheduler

        validation = scheduler.validate()
        for warning in validation.warnings:
            log.warning("Schedule: %s", warning)
        log.info("Schedule generated: %d matches over %d game types",
                 len(matches), len(scheduler.games))
        return matches

    def validate_schedule(self) -> ScheduleValidation:
        return self._scheduler.validate()

    # -- Results & turns -------------------------------------------------

    def record_match_result(self, match_id: int, winning_team_id: int,
                            play_type: str, notes: str = "") -> Match:
        """Finalize a scheduled match and open the winner's placement turn."""
        self._check_play_type(play_type)
        match = self._scheduler.get_match(match_id)
        if match is None:
            raise InvalidInputError(f"Match {match_id} not found")
        if match.status == MatchStatus.COMPLETED:
            raise InvalidInputError(f"Match {match_id} is already completed")

        transition = self._territory.add_game_result(
            self._state, match.game, play_type, winning_team_id, notes, match_id=match_id)
        winner = transition.state.get_team(winning_team_id)
        self._scheduler.record_match_result(match_id, winner.name)
        self._apply(transition)
        log.info("Match %d (%s) won by team %d", match_id, match.game, winning_team_id)
        return match

    def add_game_result(self, game: str, play_type: str, winning_team_id: int,
                        notes: str = "") -> GameState:
        """Record an unscheduled result and open the winner's placement turn."""
        self._check_play_type(play_type)
        self._apply(self._territory.add_game_result(
            self._state, game, play_type, winning_team_id, notes))
        log.info("Result recorded: %s %s won by team %d", game, play_type, winning_team_id)
        return self._state

    def place_plate(self, coord: HexCoord, team_id: Optional[int] = None) -> GameState:
        """Place a plate for the team whose turn is active.

        Raises:
            TurnStateError: No active turn, or ``team_id`` is not the active team.
            IllegalMoveError: The hex is not a legal placement.
        """
        turn = self._state.current_turn
        if turn is None:
            raise TurnStateError("No active turn. Record a match result first.")
        if team_id is not None and team_id != turn.team_id:
            raise TurnStateError(f"It is team {turn.team_id}'s turn, not team {team_id}'s")

        self._apply(self._territory.place_plate(coord, turn.team_id, self._state))
        log.info("Team %d placed a plate at %s", turn.team_id, coord.key())
        if self._state.winner_id is not None:
            log.info("Game %r over: team %d wins", self._state.game_id, self._state.winner_id)
        return self._state

    def skip_turn(self) -> GameState:
        team_id = self._state.current_turn.team_id if self._state.current_turn else None
        self._apply(self._territory.skip_turn(self._state))
        log.info("Team %d skipped its placement", team_id)
        return self._state

    def valid_placements(self, team_id: int) -> list[Placement]:
        if self._state.get_team(team_id) is None:
            raise InvalidInputError(f"Unknown team {team_id}")
        return list(self._territory.valid_placements(team_id, self._state.board))

    # -- Persistence -----------------------------------------------------

    async def save(self, path: str) -> None:
        await save_state(
            self._state,
            matches=self._scheduler.matches,
            games=self._scheduler.games,
            max_consecutive_games=self._scheduler.max_consecutive_games,
            path=path,
        )

    # -- Internal --------------------------------------------------------

    def _check_play_type(self, play_type: str) -> None:
        """Reject play types missing from the configured list (if one is set)."""
        if self._config is None or not self._config.play_types:
            return
        if play_type not in self._config.play_types:
            raise InvalidInputError(
                f"Unknown play type {play_type!r}; expected one of "
                f"{', '.join(self._config.play_types)}")

    def _apply(self, transition: Transition) -> None:
        """Adopt the new state, then publish its events."""
        self._state = transition.state
        self._events.emit_all(transition.events)
