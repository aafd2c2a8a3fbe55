"""Tests for state_save and state_load round-trip persistence."""

from __future__ import annotations

import asyncio
from pathlib import Path

import yaml

from hexclash.engine.scheduler import MatchScheduler
from hexclash.engine.territory import TerritoryGame
from hexclash.models.game import GamePhase, GameState
from hexclash.models.hex import HexCoord
from hexclash.models.match import MatchStatus
from hexclash.models.team import Team
from hexclash.persistence.state_load import load_state, parse_document
from hexclash.persistence.state_save import build_document, sanitize, save_state


# -------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------

def _make_teams() -> list[Team]:
    return [
        Team(tid=1, name="Red", color="#ff4444", players=["ann", "bob"]),
        Team(tid=2, name="Blue", color="#4444ff", players=["cat", "dan"]),
        Team(tid=3, name="Green", color="#44ff44", players=["eve", "fay"]),
    ]


def _make_game() -> GameState:
    """A game mid-tournament: two results, one plate, one open turn."""
    game = TerritoryGame()
    state = game.new_game("cup-2024", _make_teams(), win_condition=30)
    state = game.add_game_result(state, "CS2", "2v2", 1, notes="overtime").state
    state = game.place_plate(HexCoord(0, -5), 1, state).state
    state = game.add_game_result(state, "Dota2", "5v5", 2, match_id=2).state
    return state


def _make_scheduler() -> MatchScheduler:
    scheduler = MatchScheduler(_make_teams(), ["CS2", "Dota2"], 2)
    scheduler.generate_rotating_split_team(total_matches=4)
    scheduler.record_match_result(1, "Red", timestamp="2024-05-01T12:00:00")
    return scheduler


# -------------------------------------------------------------------
# Tests
# -------------------------------------------------------------------

class TestSaveLoad:
    """Round-trip serialization / deserialization tests."""

    def _run(self, coro):
        return asyncio.run(coro)

    def _save_and_load(self, tmp_path: Path):
        path = str(tmp_path / "state.yaml")
        scheduler = _make_scheduler()
        self._run(save_state(_make_game(), matches=scheduler.matches,
                             games=scheduler.games,
                             max_consecutive_games=scheduler.max_consecutive_games,
                             path=path))
        return self._run(load_state(path))

    def test_save_creates_file(self, tmp_path: Path) -> None:
        path = str(tmp_path / "state.yaml")
        self._run(save_state(_make_game(), path=path))
        assert Path(path).exists()
        assert not Path(path).with_suffix(".yaml.tmp").exists()

    def test_load_nonexistent_returns_none(self, tmp_path: Path) -> None:
        assert self._run(load_state(str(tmp_path / "nope.yaml"))) is None

    def test_load_garbage_returns_none(self, tmp_path: Path) -> None:
        path = tmp_path / "state.yaml"
        path.write_text("game: [unclosed", encoding="utf-8")
        assert self._run(load_state(str(path))) is None

    def test_load_non_mapping_returns_none(self, tmp_path: Path) -> None:
        path = tmp_path / "state.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        assert self._run(load_state(str(path))) is None

    def test_load_team_without_id_returns_none(self, tmp_path: Path) -> None:
        path = tmp_path / "state.yaml"
        path.write_text(
            "game:\n  game_id: cup\n  teams:\n    - name: Nameless\n",
            encoding="utf-8",
        )
        assert self._run(load_state(str(path))) is None

    def test_load_bad_phase_returns_none(self, tmp_path: Path) -> None:
        path = tmp_path / "state.yaml"
        path.write_text("game:\n  phase: halftime\n", encoding="utf-8")
        assert self._run(load_state(str(path))) is None

    def test_round_trip_meta(self, tmp_path: Path) -> None:
        restored = self._save_and_load(tmp_path)
        assert restored.meta["version"] == 1
        assert "saved_at" in restored.meta

    def test_round_trip_game(self, tmp_path: Path) -> None:
        src = _make_game()
        game = self._save_and_load(tmp_path).game
        assert game.game_id == "cup-2024"
        assert game.win_condition == 30
        assert game.games_played == 2
        assert game.current_round == 1
        assert game.phase == GamePhase.PLAYING
        assert game.winner_id is None
        assert game.board == src.board
        assert game.heart_hex_control == {}
        assert game.current_turn == src.current_turn

    def test_round_trip_teams(self, tmp_path: Path) -> None:
        teams = self._save_and_load(tmp_path).game.teams
        assert [t.tid for t in teams] == [1, 2, 3]
        assert teams[0].name == "Red"
        assert teams[0].color == "#ff4444"
        assert teams[0].players == ["ann", "bob"]
        assert teams[0].points == 1
        assert teams[1].games_won == 1

    def test_round_trip_history(self, tmp_path: Path) -> None:
        history = self._save_and_load(tmp_path).game.game_history
        assert history == _make_game().game_history
        assert history[0].match_id is None
        assert history[1].match_id == 2

    def test_round_trip_schedule(self, tmp_path: Path) -> None:
        restored = self._save_and_load(tmp_path)
        src = _make_scheduler().matches
        assert restored.games == ["CS2", "Dota2"]
        assert restored.max_consecutive_games == 2
        assert len(restored.matches) == 4
        first = restored.matches[0]
        assert first.status == MatchStatus.COMPLETED
        assert first.winner == "Red"
        assert first.timestamp == "2024-05-01T12:00:00"
        assert restored.matches[1].status == MatchStatus.WAITING
        for loaded, original in zip(restored.matches, src):
            assert loaded.split_team == original.split_team
            assert loaded.side_a == original.side_a
            assert loaded.side_b == original.side_b
            assert loaded.game_sequence == original.game_sequence


class TestDocument:
    def test_board_uses_coordinate_keys(self):
        doc = build_document(_make_game())
        assert doc["game"]["board"] == {"q0r-5": 1}

    def test_none_values_stripped(self):
        doc = build_document(_make_game())
        assert "winner_id" not in doc["game"]
        assert "match_id" not in doc["game"]["game_history"][0]
        assert "max_consecutive_games" not in doc["schedule"]

    def test_sanitize_keeps_list_length(self):
        assert sanitize({"a": [1, None, {"b": None}], "c": None}) == {"a": [1, None, {}]}

    def test_document_is_plain_yaml(self):
        text = yaml.safe_dump(build_document(_make_game(), _make_scheduler().matches))
        assert "HexCoord" not in text
        assert "!!python" not in text

    def test_parse_document_defaults(self):
        restored = parse_document({"game": {"game_id": "x"}})
        assert restored.game.game_id == "x"
        assert restored.game.phase == GamePhase.SETUP
        assert restored.matches == []
        assert restored.max_consecutive_games == 3

    def test_bad_match_is_skipped(self):
        doc = build_document(_make_game(), _make_scheduler().matches)
        del doc["schedule"]["matches"][0]["side_a"]
        restored = parse_document(doc)
        assert [m.match_id for m in restored.matches] == [2, 3, 4]
