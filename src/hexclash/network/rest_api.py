"""REST API: FastAPI application for the tournament console.

Every operator action (recording results, placing plates, generating the
schedule) goes through these endpoints.  Responses reuse the persisted
document shape, so a ``GET /api/game`` body matches the ``game`` section
of ``state.yaml``.

Usage::

    from hexclash.network.rest_api import create_app

    app = create_app(services)
    # Serve with uvicorn
"""

from __future__ import annotations

import logging
from typing import Any, TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hexclash.errors import HexclashError, TurnStateError
from hexclash.models.hex import HexCoord
from hexclash.models.team import Team
from hexclash.network.rest_models import (
    CreateGameRequest,
    MatchResultRequest,
    PlacementRequest,
    ScheduleRequest,
)
from hexclash.persistence.state_save import sanitize, serialize_game, serialize_match
from hexclash.util import constants

if TYPE_CHECKING:
    from hexclash.main import Services

log = logging.getLogger(__name__)


def create_app(services: "Services") -> FastAPI:
    """Factory: create and return a configured FastAPI application.

    The ``services`` reference is captured by closure so every endpoint
    can reach the tournament without global state.
    """
    app = FastAPI(title="Hexclash REST API", version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(HexclashError)
    async def domain_error(request: Request, exc: HexclashError) -> JSONResponse:
        status = 409 if isinstance(exc, TurnStateError) else 400
        log.info("%s %s rejected (%d): %s", request.method, request.url.path, status, exc)
        return JSONResponse(status_code=status, content={"success": False, "error": str(exc)})

    def _tournament():
        return services.tournament_service

    def _game() -> dict[str, Any]:
        return sanitize(serialize_game(_tournament().state))

    # ==================================================================
    # Game
    # ==================================================================

    @app.post("/api/game")
    async def create_game(body: CreateGameRequest) -> dict[str, Any]:
        teams = [
            Team(
                tid=spec.id,
                name=spec.name,
                color=spec.color or constants.DEFAULT_COLOR,
                players=list(spec.players),
            )
            for spec in body.teams
        ]
        _tournament().create_game(body.game_id, teams, body.win_condition)
        return {"success": True, "game": _game()}

    @app.get("/api/game")
    async def get_game() -> dict[str, Any]:
        return _game()

    @app.get("/api/board")
    async def get_board() -> dict[str, Any]:
        tournament = _tournament()
        board = tournament.territory.board
        state = tournament.state
        layout = services.game_config.layout
        hexes = []
        for coord in board.all_coordinates():
            x, y = board.to_pixel(coord, layout)
            hexes.append({
                "key": coord.key(),
                "q": coord.q,
                "r": coord.r,
                "type": board.classify(coord).value,
                "value": board.hex_value(coord),
                "owner": state.board.get(coord),
                "controller": state.heart_hex_control.get(coord),
                "x": round(x, 3),
                "y": round(y, 3),
            })
        return sanitize({"radius": board.radius, "hexes": hexes})

    @app.get("/api/teams/{team_id}/placements")
    async def get_placements(team_id: int) -> dict[str, Any]:
        placements = _tournament().valid_placements(team_id)
        return {
            "team_id": team_id,
            "placements": [
                {"key": p.coord.key(), "q": p.coord.q, "r": p.coord.r, "value": p.value}
                for p in placements
            ],
        }

    # ==================================================================
    # Results & turns
    # ==================================================================

    @app.post("/api/game/results")
    async def post_result(body: MatchResultRequest) -> dict[str, Any]:
        tournament = _tournament()
        if body.match_id is not None:
            match = tournament.record_match_result(
                body.match_id, body.winning_team_id, body.play_type, body.notes)
            return {"success": True, "match": sanitize(serialize_match(match)), "game": _game()}
        tournament.add_game_result(body.game, body.play_type, body.winning_team_id, body.notes)
        return {"success": True, "game": _game()}

    @app.post("/api/game/placements")
    async def post_placement(body: PlacementRequest) -> dict[str, Any]:
        state = _tournament().place_plate(HexCoord(body.q, body.r), body.team_id)
        return {"success": True, "winner_id": state.winner_id, "game": _game()}

    @app.post("/api/game/turn/skip")
    async def post_skip() -> dict[str, Any]:
        _tournament().skip_turn()
        return {"success": True, "game": _game()}

    # ==================================================================
    # Schedule
    # ==================================================================

    @app.post("/api/schedule")
    async def post_schedule(body: ScheduleRequest) -> dict[str, Any]:
        matches = _tournament().generate_schedule(
            games=body.games,
            max_consecutive_games=body.max_consecutive_games,
            start_from_team=body.start_from_team,
            total_matches=body.total_matches,
        )
        return {"success": True, "matches": [sanitize(serialize_match(m)) for m in matches]}

    @app.get("/api/schedule")
    async def get_schedule() -> dict[str, Any]:
        scheduler = _tournament().scheduler
        next_match = scheduler.next_match()
        return {
            "games": scheduler.games,
            "max_consecutive_games": scheduler.max_consecutive_games,
            "matches": [sanitize(serialize_match(m)) for m in scheduler.matches],
            "next_match_id": next_match.match_id if next_match else None,
            "stats": scheduler.stats(),
        }

    @app.get("/api/schedule/validation")
    async def get_schedule_validation() -> dict[str, Any]:
        result = _tournament().validate_schedule()
        return {
            "valid": result.valid,
            "errors": result.errors,
            "warnings": result.warnings,
            "stats": result.stats,
        }

    @app.get("/api/schedule/preview")
    async def get_schedule_preview() -> dict[str, Any]:
        return {"preview": _tournament().scheduler.preview()}

    # ==================================================================
    # Statistics
    # ==================================================================

    @app.get("/api/stats")
    async def get_stats() -> dict[str, Any]:
        tournament = _tournament()
        state = tournament.state
        statistics = tournament.statistics
        return sanitize({
            "game": statistics.game_stats(state),
            "rankings": [
                {"id": t.tid, "name": t.name, "points": t.points, "games_won": t.games_won}
                for t in statistics.team_rankings(state)
            ],
            "recent_games": [
                {
                    "id": r.result_id,
                    "game": r.game,
                    "play_type": r.play_type,
                    "winning_team_id": r.winning_team_id,
                    "match_id": r.match_id,
                }
                for r in statistics.recent_games(state)
            ],
        })

    return app
