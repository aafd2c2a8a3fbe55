"""Tournament server entry point.

Initializes all components and serves the REST API:
1. Load configuration (config/game.yaml)
2. Restore the previous tournament document, if any
3. Create services (event bus, tournament service)
4. Wire event handlers
5. Serve the REST API until shutdown, then save state

Usage:
    python -m hexclash.main
    # or via entry point:
    hexclash --preview
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional

from hexclash.engine.tournament_service import TournamentService
from hexclash.loaders.game_config_loader import (
    DEFAULT_GAME_CONFIG_PATH,
    GameConfig,
    load_game_config,
)
from hexclash.models.team import Team
from hexclash.persistence.state_load import RestoredState, load_state
from hexclash.util.events import (
    EventBus,
    GameEnded,
    GameResultAdded,
    HeartHexCaptured,
    PlatePlaced,
    TurnSkipped,
    TurnStarted,
)
from hexclash.util.types import format_standings

log = logging.getLogger(__name__)

DEMO_GAME_ID = "demo"

# ---------------------------------------------------------------------------
# Container for all loaded configuration
# ---------------------------------------------------------------------------


@dataclass
class Configuration:
    """Holds all data loaded from config files."""

    game: GameConfig = field(default_factory=GameConfig)


# ---------------------------------------------------------------------------
# Container for all services (makes passing around easier)
# ---------------------------------------------------------------------------


@dataclass
class Services:
    """Holds references to all services."""

    game_config: GameConfig = field(default_factory=GameConfig)
    event_bus: Optional[EventBus] = None
    tournament_service: Optional[TournamentService] = None
    state_file: str = "state.yaml"


# ===================================================================
# 1. Load configuration
# ===================================================================


def load_configuration(config_path: str = DEFAULT_GAME_CONFIG_PATH) -> Configuration:
    log.info("Loading configuration …")
    game_cfg = load_game_config(config_path)
    log.info("  game_config:  radius %d, win condition %d, %d game types",
             game_cfg.board_radius, game_cfg.win_condition, len(game_cfg.game_types))
    return Configuration(game=game_cfg)


# ===================================================================
# 2. Create services
# ===================================================================


def create_services(config: Configuration, state_file: Optional[str] = None) -> Services:
    """Instantiate the event bus and the tournament service.

    Args:
        config: Loaded configuration.
        state_file: State YAML path; defaults to the configured one.
    """
    log.info("Creating services …")
    gc = config.game
    event_bus = EventBus()
    tournament = TournamentService(event_bus, gc)
    log.info("  all services created")
    return Services(
        game_config=gc,
        event_bus=event_bus,
        tournament_service=tournament,
        state_file=state_file or gc.state_file,
    )


# ===================================================================
# 3. Wire up event handlers
# ===================================================================


def wire_events(services: Services) -> None:
    """Register event handlers on the EventBus.

    The rules engine stays silent; announcing what happened on the board
    is done here.
    """
    log.info("Wiring event handlers …")
    bus = services.event_bus

    bus.on(GameResultAdded, lambda evt: log.info(
        "Result #%d recorded for team %d", evt.result_id, evt.winning_team_id))
    bus.on(TurnStarted, lambda evt: log.info("Team %d may place a plate", evt.team_id))
    bus.on(TurnSkipped, lambda evt: log.info("Team %d passed its turn", evt.team_id))
    bus.on(PlatePlaced, lambda evt: log.debug("Plate at %s for team %d",
                                              evt.coord.key(), evt.team_id))
    bus.on(HeartHexCaptured, lambda evt: log.info(
        "Heart hex %s captured by team %d (from %s)",
        evt.coord.key(), evt.team_id, evt.previous_owner or "nobody"))
    bus.on(GameEnded, lambda evt: log.info("Game over, team %d wins", evt.winner_id))

    log.info("  event handlers registered")


# ===================================================================
# 4. Restore or seed the tournament
# ===================================================================


def restore_or_seed(services: Services, saved: Optional[RestoredState]) -> None:
    tournament = services.tournament_service
    if saved is not None and saved.game.teams:
        tournament.restore(saved)
        return
    _add_demo_game(services)


def _add_demo_game(services: Services) -> None:
    """Seed a demo tournament so a fresh server has something to show."""
    teams = [
        Team(tid=tid, players=[f"Player {tid}-{n}" for n in (1, 2)])
        for tid in range(1, 6)
    ]
    tournament = services.tournament_service
    tournament.create_game(DEMO_GAME_ID, teams)
    tournament.generate_schedule()
    log.info("Demo game registered: %d teams, %d matches",
             len(teams), len(tournament.matches))


# ===================================================================
# 5. Serve
# ===================================================================


async def serve(services: Services, port: Optional[int] = None) -> None:
    """Run the REST API until uvicorn exits, then persist the tournament."""
    from hexclash.network.rest_api import create_app
    import uvicorn

    rest_app = create_app(services)
    rest_port = port or services.game_config.rest_port
    config = uvicorn.Config(
        rest_app,
        host="0.0.0.0",
        port=rest_port,
        log_level="info",
        access_log=False,
    )
    log.info("  REST API listening on http://0.0.0.0:%d", rest_port)
    await uvicorn.Server(config).serve()

    log.info("Shutting down …")
    try:
        await services.tournament_service.save(services.state_file)
    except Exception:
        log.exception("State save failed, continuing shutdown")
    log.info("  goodbye")


# ===================================================================
# Entry points
# ===================================================================


async def _start(config_path: str, state_file: Optional[str],
                 port: Optional[int], preview: bool) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    log.info("=== Hexclash starting ===")

    config = load_configuration(config_path)
    services = create_services(config, state_file)
    wire_events(services)

    saved = await load_state(path=services.state_file)
    restore_or_seed(services, saved)

    if preview:
        tournament = services.tournament_service
        print(tournament.scheduler.preview())
        print()
        print(format_standings(tournament.state.teams))
        return

    await serve(services, port)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hexclash",
                                     description="Hex territory tournament server")
    parser.add_argument("--config", default=DEFAULT_GAME_CONFIG_PATH,
                        help="game config YAML (default: %(default)s)")
    parser.add_argument("--state_file", default=None,
                        help="state YAML to restore from and save to")
    parser.add_argument("--port", type=int, default=None, help="REST API port")
    parser.add_argument("--preview", action="store_true",
                        help="print the schedule and standings, then exit")
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the tournament server."""
    args = build_parser().parse_args(argv)
    asyncio.run(_start(args.config, args.state_file, args.port, args.preview))


if __name__ == "__main__":
    main()
