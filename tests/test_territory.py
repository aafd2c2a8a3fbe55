"""Tests for the territory rules engine: placement, scoring, turns, results."""

import pytest

from hexclash.engine.territory import Placement, TerritoryGame
from hexclash.errors import IllegalMoveError, InvalidInputError, TurnStateError
from hexclash.models.game import GamePhase
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


def _teams(n=3):
    return [Team(tid=i, players=[f"p{i}a", f"p{i}b"]) for i in range(1, n + 1)]


@pytest.fixture
def game():
    return TerritoryGame()


@pytest.fixture
def state(game):
    return game.new_game("g1", _teams())


def _types(events):
    return [type(e) for e in events]


class TestNewGame:
    def test_starts_playing(self, state):
        assert state.phase == GamePhase.PLAYING
        assert state.board == {}
        assert state.current_turn is None
        assert state.win_condition == constants.DEFAULT_WIN_CONDITION
        assert [t.tid for t in state.teams] == [1, 2, 3]

    def test_points_are_reset(self, game):
        teams = _teams(2)
        teams[0].points = 17
        state = game.new_game("g", teams)
        assert state.teams[0].points == 0
        assert teams[0].points == 17

    def test_needs_two_teams(self, game):
        with pytest.raises(InvalidInputError):
            game.new_game("g", _teams(1))

    def test_rejects_duplicate_ids(self, game):
        with pytest.raises(InvalidInputError):
            game.new_game("g", [Team(tid=1), Team(tid=1)])

    def test_rejects_non_positive_id(self, game):
        with pytest.raises(InvalidInputError):
            game.new_game("g", [Team(tid=0), Team(tid=1)])

    def test_rejects_non_positive_win_condition(self, game):
        with pytest.raises(InvalidInputError):
            game.new_game("g", _teams(), win_condition=0)


class TestPlacementRules:
    def test_first_plate_must_be_starting_location(self, game, state):
        assert not game.can_place_at(HexCoord(1, 1), 1, state.board)
        for corner in constants.STARTING_LOCATIONS:
            assert game.can_place_at(corner, 1, state.board)

    def test_later_plates_must_be_adjacent(self, game, state):
        board = {HexCoord(0, -5): 1}
        assert game.can_place_at(HexCoord(1, -5), 1, board)
        assert game.can_place_at(HexCoord(0, -4), 1, board)
        assert not game.can_place_at(HexCoord(0, 0), 1, board)
        # once a team owns a plate, other corners are no longer free picks
        assert not game.can_place_at(HexCoord(5, -5), 1, board)

    def test_occupied_hex_rejected(self, game):
        board = {HexCoord(0, -5): 2}
        assert not game.can_place_at(HexCoord(0, -5), 1, board)
        assert "occupied" in game.placement_error(HexCoord(0, -5), 1, board)

    def test_off_board_rejected(self, game):
        assert "not on the board" in game.placement_error(HexCoord(6, -5), 1, {})

    def test_valid_placements_on_empty_board(self, game, state):
        placements = list(game.valid_placements(1, state.board))
        assert {p.coord for p in placements} == set(constants.STARTING_LOCATIONS)
        assert all(p.value == 1 for p in placements)

    def test_valid_placements_grow_from_territory(self, game):
        board = {HexCoord(1, -4): 1, HexCoord(0, -4): 2}
        placements = list(game.valid_placements(1, board))
        assert Placement(HexCoord(2, -4), 2) in placements
        assert all(HexCoord(1, -4).distance_to(p.coord) == 1 for p in placements)
        assert HexCoord(0, -4) not in {p.coord for p in placements}


class TestPlacePlate:
    def test_first_placement(self, game, state):
        t = game.place_plate(HexCoord(0, -5), 1, state)
        assert t.state.board == {HexCoord(0, -5): 1}
        assert t.state.get_team(1).points == 1
        assert _types(t.events) == [PlatePlaced, PointsCalculated]
        assert t.events[1].points == ((1, 1), (2, 0), (3, 0))

    def test_input_state_untouched(self, game, state):
        game.place_plate(HexCoord(0, -5), 1, state)
        assert state.board == {}
        assert state.get_team(1).points == 0

    def test_illegal_move_carries_context(self, game, state):
        with pytest.raises(IllegalMoveError) as info:
            game.place_plate(HexCoord(0, 0), 2, state)
        assert info.value.coord == HexCoord(0, 0)
        assert info.value.team_id == 2
        assert state.board == {}

    def test_capture_high_value_hex(self, game, state):
        state.board[HexCoord(1, -4)] = 1
        t = game.place_plate(HexCoord(2, -4), 1, state)
        assert t.state.heart_hex_control == {HexCoord(2, -4): 1}
        assert t.state.get_team(1).points == 1 + 2 + 1
        assert _types(t.events) == [PlatePlaced, HeartHexCaptured, PointsCalculated]
        assert t.events[1].previous_owner is None

    def test_center_counts_twice(self, game, state):
        state.board[HexCoord(0, -1)] = 2
        t = game.place_plate(HexCoord(0, 0), 2, state)
        assert t.state.get_team(2).points == 1 + 2 + 2

    def test_placement_completes_active_turn(self, game, state):
        opened = game.start_turn(state, 1).state
        t = game.place_plate(HexCoord(5, 0), 1, opened)
        assert t.state.current_turn is None
        assert _types(t.events)[-1] is TurnCompleted

    def test_reaching_win_condition_ends_game(self, game):
        state = game.new_game("g", _teams(), win_condition=3)
        state.board[HexCoord(1, -4)] = 1
        t = game.place_plate(HexCoord(2, -4), 1, state)
        assert t.state.phase == GamePhase.FINISHED
        assert t.state.winner_id == 1
        assert isinstance(t.events[-1], GameEnded)
        assert t.events[-1].points == 4

    def test_no_placement_after_game_over(self, game):
        state = game.new_game("g", _teams(), win_condition=1)
        finished = game.place_plate(HexCoord(0, -5), 1, state).state
        with pytest.raises(IllegalMoveError):
            game.place_plate(HexCoord(0, 5), 2, finished)


class TestScoring:
    def test_points_from_scratch(self, game, state):
        state.board.update({
            HexCoord(0, -5): 1,
            HexCoord(1, -5): 1,
            HexCoord(2, -4): 1,
            HexCoord(0, 0): 2,
        })
        state.heart_hex_control.update({HexCoord(2, -4): 1, HexCoord(0, 0): 2})
        assert game.calculate_points(state) == {1: 1 + 1 + 2 + 1, 2: 2 + 2, 3: 0}

    def test_unknown_owner_ignored(self, game, state):
        state.board[HexCoord(0, -5)] = 99
        assert game.calculate_points(state) == {1: 0, 2: 0, 3: 0}

    def test_winner_tie_break_uses_team_order(self, game):
        state = game.new_game("g", [Team(tid=2), Team(tid=1)], win_condition=5)
        state.teams[0].points = 5
        state.teams[1].points = 9
        assert game.find_winner(state).tid == 2

    def test_no_winner_below_condition(self, game, state):
        state.teams[0].points = state.win_condition - 1
        assert game.find_winner(state) is None


class TestTurns:
    def test_start_turn(self, game, state):
        t = game.start_turn(state, 2, game_result_id=7)
        assert t.state.current_turn.team_id == 2
        assert t.state.current_turn.needs_placement
        assert t.events == (TurnStarted(team_id=2, game_result_id=7),)
        assert state.current_turn is None

    def test_only_one_active_turn(self, game, state):
        opened = game.start_turn(state, 1).state
        with pytest.raises(TurnStateError):
            game.start_turn(opened, 2)

    def test_unknown_team(self, game, state):
        with pytest.raises(InvalidInputError):
            game.start_turn(state, 42)

    def test_no_turn_once_finished(self, game):
        state = game.new_game("g", _teams(), win_condition=1)
        finished = game.place_plate(HexCoord(0, -5), 1, state).state
        with pytest.raises(TurnStateError):
            game.start_turn(finished, 2)

    def test_skip_turn(self, game, state):
        opened = game.start_turn(state, 3).state
        t = game.skip_turn(opened)
        assert t.state.current_turn is None
        assert t.events == (TurnSkipped(team_id=3),)

    def test_skip_without_turn(self, game, state):
        with pytest.raises(TurnStateError):
            game.skip_turn(state)

    def test_complete_turn(self, game, state):
        opened = game.start_turn(state, 1).state
        t = game.complete_turn(opened)
        assert t.state.current_turn is None
        assert t.events == (TurnCompleted(team_id=1),)

    def test_complete_without_turn(self, game, state):
        with pytest.raises(TurnStateError):
            game.complete_turn(state)


class TestGameResults:
    def test_result_opens_winner_turn(self, game, state):
        t = game.add_game_result(state, "CS2", "2v2", 2, notes="close one")
        new = t.state
        assert new.games_played == 1
        assert new.current_round == 1
        assert new.get_team(2).games_won == 1
        assert new.current_turn.team_id == 2
        assert new.current_turn.game_result_id == 1
        assert new.game_history[0].notes == "close one"
        assert _types(t.events) == [GameResultAdded, TurnStarted]
        assert state.games_played == 0

    def test_round_follows_games_played(self, game, state):
        for winner in (1, 2, 3, 1):
            state = game.add_game_result(state, "CS2", "1v1", winner).state
            state = game.skip_turn(state).state
        assert state.games_played == 4
        assert state.current_round == 2
        assert [r.result_id for r in state.game_history] == [1, 2, 3, 4]

    def test_result_rejected_while_turn_active(self, game, state):
        opened = game.add_game_result(state, "CS2", "1v1", 1).state
        with pytest.raises(TurnStateError):
            game.add_game_result(opened, "CS2", "1v1", 2)

    def test_result_needs_labels(self, game, state):
        with pytest.raises(InvalidInputError):
            game.add_game_result(state, "", "1v1", 1)
        with pytest.raises(InvalidInputError):
            game.add_game_result(state, "CS2", "", 1)

    def test_result_unknown_team(self, game, state):
        with pytest.raises(InvalidInputError):
            game.add_game_result(state, "CS2", "1v1", 9)

    def test_match_id_recorded(self, game, state):
        new = game.add_game_result(state, "CS2", "1v1", 1, match_id=4).state
        assert new.game_history[0].match_id == 4


class TestBoardProperties:
    def test_opening_move_only_on_starting_locations(self, game):
        allowed = [c for c in game.board.all_coordinates() if game.can_place_at(c, 1, {})]
        assert sorted(allowed) == sorted(constants.STARTING_LOCATIONS)
        assert len(game.board) - len(allowed) == 85

    def test_growth_from_center(self, game):
        board = {HexCoord(0, 0): 1, HexCoord(1, 0): 2}
        allowed = {c for c in game.board.all_coordinates() if game.can_place_at(c, 1, board)}
        assert allowed == set(HexCoord(0, 0).neighbors()) - {HexCoord(1, 0)}

    def test_scoring_examples(self, game, state):
        state.board[HexCoord(0, -5)] = 1
        state.board[HexCoord(0, 0)] = 2
        assert game.calculate_points(state)[1] == 1
        assert game.calculate_points(state)[2] == 2
        state.heart_hex_control[HexCoord(0, 0)] = 2
        assert game.calculate_points(state)[2] == 4

    def test_repeated_placement_is_rejected(self, game, state):
        after = game.place_plate(HexCoord(0, -5), 1, state).state
        snapshot = after.copy()
        with pytest.raises(IllegalMoveError):
            game.place_plate(HexCoord(0, -5), 1, after)
        assert after == snapshot
