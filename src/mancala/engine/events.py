# src/mancala/engine/events.py
# Structured engine events for a UI layer (redraw, turn banner, take-back button).

from __future__ import annotations
import logging
from typing import Any, Callable, Dict, List, Optional

from mancala.engine.board import Player

logger = logging.getLogger(__name__)

Event = Dict[str, Any]
Listener = Callable[[Event], None]

SLOT_CHANGED = "slot_changed"
TURN_CHANGED = "turn_changed"
GAME_STARTED = "game_started"
GAME_ENDED = "game_ended"
UNDO_AVAILABILITY_CHANGED = "undo_availability_changed"


class EngineEvents:
    """Event factory; every event is a plain dict with a "type" key."""

    def slot_changed(self, slot: int, count: int) -> Event:
        return {"type": SLOT_CHANGED, "slot": slot, "count": count}

    def turn_changed(self, player: Player) -> Event:
        return {"type": TURN_CHANGED, "player": player}

    def game_started(self, stones_per_pit: int, counts: List[int]) -> Event:
        return {"type": GAME_STARTED, "stones_per_pit": stones_per_pit, "counts": counts}

    def game_ended(self, result) -> Event:
        return {"type": GAME_ENDED, "result": result}

    def undo_availability_changed(self, available: bool, remaining: int) -> Event:
        return {"type": UNDO_AVAILABILITY_CHANGED, "available": available, "remaining": remaining}


class EventBus:
    def __init__(self) -> None:
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Listener:
        if listener not in self._listeners:
            self._listeners.append(listener)
        return listener

    def unsubscribe(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def emit(self, event: Optional[Event]) -> None:
        if event is None:
            return
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                # listener errors never propagate into engine operations
                logger.exception("Listener %r failed on %s event", listener, event["type"])
