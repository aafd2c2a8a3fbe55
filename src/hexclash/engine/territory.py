"""Territory game: plate placement, heart hexes, scoring and turns.

Rules:
- A team's first plate must go on one of the six starting corners.
- Every later plate must touch a hex the team already owns.
- Owning a hex is worth 1 point, 2 for heart hexes (high-value + center).
- Controlling a heart hex adds a bonus: 1, or 2 for the center.  An owned
  center therefore counts twice.
- The first team (in team order) at or above the win condition wins.

Every method takes the state it works on and returns a new state plus the
events that describe the change.  Inputs are never mutated, and nothing
here does I/O or logging.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping, Optional

from hexclash.errors import IllegalMoveError, InvalidInputError, TurnStateError
from hexclash.models.board import HexBoard
from hexclash.models.game import GamePhase, GameResult, GameState, Turn
from hexclash.models.hex import HexCoord
from hexclash.models.team import Team
from hexclash.util import constants
from hexclash.util.events import (
    GameEnded,
    GameResultAdded,
    HeartHexCaptured,
    PlatePlaced,
    PointsCalculated,
    TurnCompleted,
    TurnSkipped,
    TurnStarted,
)


@dataclass(frozen=True)
class Placement:
    """A legal placement and the points the hex is worth."""
    coord: HexCoord
    value: int


@dataclass(frozen=True)
class Transition:
    """Result of a state-changing call: the new state and what happened."""
    state: GameState
    events: tuple[object, ...] = ()


class TerritoryGame:
    """Rules engine for the hex territory game.

    Args:
        board: Board geometry; defaults to the standard radius-5 board.
    """

    def __init__(self, board: Optional[HexBoard] = None) -> None:
        self._board = board if board is not None else HexBoard()

    @property
    def board(self) -> HexBoard:
        return self._board

    # -- Setup -----------------------------------------------------------

    def new_game(self, game_id: str, teams: Iterable[Team],
                 win_condition: int = constants.DEFAULT_WIN_CONDITION) -> GameState:
        """Create a fresh game in the playing phase.

        Raises:
            InvalidInputError: Fewer than two teams, bad or duplicate team
                IDs, or a non-positive win condition.
        """
        team_list = list(teams)
        if len(team_list) < 2:
            raise InvalidInputError(f"Need at least 2 teams, got {len(team_list)}")
        seen: set[int] = set()
        for team in team_list:
            if team.tid <= 0:
                raise InvalidInputError(f"Team IDs must be positive, got {team.tid}")
            if team.tid in seen:
                raise InvalidInputError(f"Duplicate team ID {team.tid}")
            seen.add(team.tid)
        if win_condition <= 0:
            raise InvalidInputError(f"Win condition must be positive, got {win_condition}")

        state = GameState(
            game_id=game_id,
            teams=team_list,
            win_condition=win_condition,
            phase=GamePhase.PLAYING,
        ).copy()
        for team in state.teams:
            team.points = 0
        return state

    # -- Placement rules -------------------------------------------------

    def placement_error(self, coord: HexCoord, team_id: int,
                        occupancy: Mapping[HexCoord, int]) -> Optional[str]:
        """Why ``team_id`` may not place at ``coord``, or None if it may."""
        if not self._board.is_valid(coord):
            return f"{coord.key()} is not on the board"
        if coord in occupancy:
            return f"{coord.key()} is already occupied by team {occupancy[coord]}"

        owned = {c for c, owner in occupancy.items() if owner == team_id}
        if not owned:
            if coord in self._board.starting_locations:
                return None
            return f"First plate of team {team_id} must be on a starting location"

        if any(n in owned for n in self._board.neighbors(coord)):
            return None
        return f"{coord.key()} is not adjacent to territory of team {team_id}"

    def can_place_at(self, coord: HexCoord, team_id: int,
                     occupancy: Mapping[HexCoord, int]) -> bool:
        return self.placement_error(coord, team_id, occupancy) is None

    def valid_placements(self, team_id: int,
                         occupancy: Mapping[HexCoord, int]) -> Iterator[Placement]:
        """Lazily yield every legal placement, in board order."""
        for coord in self._board.all_coordinates():
            if self.can_place_at(coord, team_id, occupancy):
                yield Placement(coord=coord, value=self._board.hex_value(coord))

    # -- Scoring ---------------------------------------------------------

    def calculate_points(self, state: GameState) -> dict[int, int]:
        """Score every team from scratch.  Returns team ID → points."""
        points = {team.tid: 0 for team in state.teams}
        for coord, owner in state.board.items():
            if owner in points:
                points[owner] += self._board.hex_value(coord)
        for coord, controller in state.heart_hex_control.items():
            if controller in points:
                points[controller] += self._board.control_bonus(coord)
        return points

    def find_winner(self, state: GameState) -> Optional[Team]:
        """First team in team order whose points reach the win condition."""
        for team in state.teams:
            if team.points >= state.win_condition:
                return team
        return None

    # -- Plate placement -------------------------------------------------

    def place_plate(self, coord: HexCoord, team_id: int, state: GameState) -> Transition:
        """Place a plate, capture hearts, rescore, check for a winner, end the turn.

        Raises:
            IllegalMoveError: The placement breaks the rules; ``state`` is
                untouched.
        """
        if state.phase == GamePhase.FINISHED:
            raise IllegalMoveError("Game is already finished", coord, team_id)
        reason = self.placement_error(coord, team_id, state.board)
        if reason is not None:
            raise IllegalMoveError(reason, coord, team_id)

        new = state.copy()
        events: list[object] = []

        new.board[coord] = team_id
        events.append(PlatePlaced(team_id=team_id, coord=coord))

        if self._board.is_heart(coord):
            previous = new.heart_hex_control.get(coord)
            new.heart_hex_control[coord] = team_id
            events.append(HeartHexCaptured(team_id=team_id, coord=coord,
                                           previous_owner=previous))

        events.append(self._apply_points(new))

        if new.current_turn is not None:
            events.append(TurnCompleted(team_id=new.current_turn.team_id))
            new.current_turn = None

        winner = self.find_winner(new)
        if winner is not None:
            new.phase = GamePhase.FINISHED
            new.winner_id = winner.tid
            events.append(GameEnded(winner_id=winner.tid, points=winner.points))

        return Transition(state=new, events=tuple(events))

    def _apply_points(self, state: GameState) -> PointsCalculated:
        points = self.calculate_points(state)
        for team in state.teams:
            team.points = points[team.tid]
        return PointsCalculated(points=tuple((t.tid, t.points) for t in state.teams))

    # -- Turns -----------------------------------------------------------

    def start_turn(self, state: GameState, team_id: int,
                   game_result_id: Optional[int] = None) -> Transition:
        """Open a placement turn for ``team_id``.

        Raises:
            TurnStateError: A turn is already active or the game is not playing.
            InvalidInputError: Unknown team.
        """
        if state.phase != GamePhase.PLAYING:
            raise TurnStateError(f"Game is not in playing phase ({state.phase.value})")
        if state.current_turn is not None:
            raise TurnStateError(
                f"Team {state.current_turn.team_id} already has an active turn")
        if state.get_team(team_id) is None:
            raise InvalidInputError(f"Unknown team {team_id}")

        new = state.copy()
        new.current_turn = Turn(team_id=team_id, needs_placement=True,
                                game_result_id=game_result_id)
        return Transition(state=new, events=(
            TurnStarted(team_id=team_id, game_result_id=game_result_id),))

    def complete_turn(self, state: GameState) -> Transition:
        """Close the active turn without placing (placement does this itself)."""
        if state.current_turn is None:
            raise TurnStateError("No active turn to complete")
        new = state.copy()
        new.current_turn = None
        return Transition(state=new, events=(
            TurnCompleted(team_id=state.current_turn.team_id),))

    def skip_turn(self, state: GameState) -> Transition:
        if state.current_turn is None:
            raise TurnStateError("No active turn to skip")
        new = state.copy()
        new.current_turn = None
        return Transition(state=new, events=(
            TurnSkipped(team_id=state.current_turn.team_id),))

    # -- Match results ---------------------------------------------------

    def add_game_result(self, state: GameState, game: str, play_type: str,
                        winning_team_id: int, notes: str = "",
                        match_id: Optional[int] = None) -> Transition:
        """Record a match result and open the winner's placement turn.

        Raises:
            InvalidInputError: Missing game / play type or unknown team.
            TurnStateError: A turn is still active or the game is over.
        """
        if not game or not play_type:
            raise InvalidInputError("Game result needs a game and a play type")
        if state.get_team(winning_team_id) is None:
            raise InvalidInputError(f"Unknown team {winning_team_id}")

        new = state.copy()
        result = GameResult(
            result_id=len(new.game_history) + 1,
            game=game,
            play_type=play_type,
            winning_team_id=winning_team_id,
            notes=notes,
            match_id=match_id,
        )
        new.game_history.append(result)
        new.games_played += 1
        new.current_round = math.ceil(new.games_played / len(new.teams))
        winner = new.get_team(winning_team_id)
        winner.games_won += 1

        turn = self.start_turn(new, winning_team_id, result.result_id)
        events = (GameResultAdded(result_id=result.result_id,
                                  winning_team_id=winning_team_id),) + turn.events
        return Transition(state=turn.state, events=events)
