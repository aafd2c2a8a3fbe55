"""Typed event bus: decoupled notification of game changes.

The game core returns these events as plain values; the tournament
service publishes them on an :class:`EventBus` for whoever subscribed.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, TypeVar, Type

from hexclash.models.hex import HexCoord

T = TypeVar("T")


# -- Board events --------------------------------------------------------

@dataclass(frozen=True)
class PlatePlaced:
    """A team placed a plate."""
    team_id: int
    coord: HexCoord


@dataclass(frozen=True)
class HeartHexCaptured:
    """A team placed on a heart hex and now controls it."""
    team_id: int
    coord: HexCoord
    previous_owner: Optional[int]


@dataclass(frozen=True)
class PointsCalculated:
    """Scores were recomputed from the board."""
    points: tuple[tuple[int, int], ...]  # (team_id, points) in team order


# -- Turn events ---------------------------------------------------------

@dataclass(frozen=True)
class TurnStarted:
    """A team may now place a plate."""
    team_id: int
    game_result_id: Optional[int]


@dataclass(frozen=True)
class TurnCompleted:
    """The active turn was closed after a placement."""
    team_id: int


@dataclass(frozen=True)
class TurnSkipped:
    """The active turn was closed without a placement."""
    team_id: int


# -- Game events ---------------------------------------------------------

@dataclass(frozen=True)
class GameResultAdded:
    """A match result was recorded."""
    result_id: int
    winning_team_id: int


@dataclass(frozen=True)
class GameEnded:
    """A team reached the win condition."""
    winner_id: int
    points: int


# -- Event Bus -----------------------------------------------------------

class EventBus:
    """Simple synchronous event bus with typed events.

    Usage:
        bus = EventBus()
        bus.on(PlatePlaced, lambda e: print(e.coord))
        bus.emit(PlatePlaced(team_id=1, coord=HexCoord(0, -5)))
    """

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable[[Any], None]]] = defaultdict(list)

    def on(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        """Register a handler for an event type."""
        self._handlers[event_type].append(handler)

    def off(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        """Unregister a handler."""
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: object) -> None:
        """Emit an event to all registered handlers."""
        for handler in list(self._handlers.get(type(event), [])):
            handler(event)

    def emit_all(self, events: Iterable[object]) -> None:
        """Emit a batch of events in order."""
        for event in events:
            self.emit(event)

    def clear(self) -> None:
        """Remove all handlers."""
        self._handlers.clear()
