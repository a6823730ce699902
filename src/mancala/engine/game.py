# src/mancala/engine/game.py
# Stateful engine owned by one UI/session. Wraps the pure rules in core.py
# with turn bookkeeping, the single take-back snapshot and event dispatch.

from __future__ import annotations
import logging
import threading
from typing import Dict, List, Optional, Tuple

from mancala.engine.board import Board, Player
from mancala.engine.core import (
    GameResult,
    MoveOutcome,
    apply_move as resolve_move,
    evaluate_result,
    legal_moves,
    to_state,
    validate_move,
)
from mancala.engine.errors import InvalidCount, NotAllowed
from mancala.engine.events import EngineEvents, EventBus, Listener
from mancala.engine.turn import MAX_TAKE_BACKS_PER_TURN, TurnState, UndoManager

logger = logging.getLogger(__name__)

DEFAULT_STONES_PER_PIT = 4


class MancalaEngine:
    """
    Two-player Kalah game.

    All mutating operations hold a re-entrant lock for their whole duration,
    so overlapping calls (double clicks, threaded request handlers) are
    applied one after another. Listeners run inside the lock and may call
    the read accessors.

    Attributes:
        stones_per_pit (int): Starting stones of the current game.
        events (EngineEvents): Event factory.
    """

    def __init__(self, stones_per_pit: int = DEFAULT_STONES_PER_PIT,
                 max_take_backs: int = MAX_TAKE_BACKS_PER_TURN) -> None:
        self._lock = threading.RLock()
        self._board = Board()
        self._turn = TurnState()
        self._undo = UndoManager(max_take_backs)
        self._bus = EventBus()
        self._replaying = False
        self.events = EngineEvents()
        self.stones_per_pit = 0
        self.new_game(stones_per_pit)

    # ---------- Listeners ----------
    def subscribe(self, listener: Listener) -> Listener:
        return self._bus.subscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self._bus.unsubscribe(listener)

    # ---------- Game lifecycle ----------
    def new_game(self, stones_per_pit: int) -> None:
        """Fill every pit with `stones_per_pit`, empty both stores, player one to move."""
        if isinstance(stones_per_pit, bool) or not isinstance(stones_per_pit, int) or stones_per_pit <= 0:
            raise InvalidCount(stones_per_pit, "starting stones per pit must be a positive integer")

        with self._lock:
            self._board = Board.initial(stones_per_pit)
            self._turn = TurnState()
            self._undo.clear()
            self._replaying = False
            self.stones_per_pit = stones_per_pit
            logger.info("New game with %d stones per pit", stones_per_pit)

            self._bus.emit(self.events.game_started(stones_per_pit, self._board.as_list()))
            self._bus.emit(self.events.turn_changed(self._turn.active_player))
            self._bus.emit(self.events.undo_availability_changed(False, self.take_backs_remaining()))

    def apply_move(self, start_pit: int, acting_player) -> MoveOutcome:
        """
        Sow `start_pit` for `acting_player`.

        Raises:
            GameOver, InvalidSlot, IllegitimateSelection, EmptyPit: the move
                was rejected and nothing changed.
        """
        with self._lock:
            # reject before touching the stored snapshot
            validate_move(self._board, self._turn, start_pit, acting_player)

            could_undo = self.undo_available()
            # a genuine move opens a new turn: the snapshot carries that turn's count
            self._turn.begin_turn_side_effects(genuine=not self._replaying)
            self._replaying = False
            self._undo.record(self._board, self._turn)
            outcome = resolve_move(self._board, self._turn, start_pit, acting_player)

            logger.info("%s played pit %d, last stone in slot %d", outcome.player, outcome.start_pit, outcome.last_slot)
            for slot in sorted(outcome.changed_slots):
                self._bus.emit(self.events.slot_changed(slot, self._board.stone_count(slot)))
            if outcome.turn_passed:
                self._bus.emit(self.events.turn_changed(outcome.next_player))
            if outcome.result is not None:
                logger.info("Game over: %s (%d-%d)", outcome.result.result.value,
                            outcome.result.player_one_score, outcome.result.player_two_score)
                self._bus.emit(self.events.game_ended(outcome.result))
            if self.undo_available() != could_undo:
                self._bus.emit(self.events.undo_availability_changed(self.undo_available(), self.take_backs_remaining()))
            return outcome

    def request_undo(self) -> bool:
        """Take back the last move. Returns False (and changes nothing) when not allowed."""
        with self._lock:
            before = self._board.counts()
            previous_player = self._turn.active_player
            try:
                self._undo.undo(self._board, self._turn)
            except NotAllowed as exc:
                logger.debug("%s", exc)
                return False
            self._replaying = True
            logger.info("Take back %d of %d", self._turn.take_backs_used, self._undo.max_take_backs)

            for slot, count in enumerate(self._board.counts()):
                if count != before[slot]:
                    self._bus.emit(self.events.slot_changed(slot, count))
            if self._turn.active_player != previous_player:
                self._bus.emit(self.events.turn_changed(self._turn.active_player))
            self._bus.emit(self.events.undo_availability_changed(False, self.take_backs_remaining()))
            return True

    # ---------- Read accessors ----------
    def stone_count(self, slot: int) -> int:
        with self._lock:
            return self._board.stone_count(slot)

    def board_counts(self) -> Tuple[int, ...]:
        with self._lock:
            return self._board.counts()

    def active_player(self) -> Player:
        with self._lock:
            return self._turn.active_player

    def is_game_finished(self) -> bool:
        with self._lock:
            return self._turn.game_finished

    def take_backs_remaining(self) -> int:
        with self._lock:
            return max(0, self._undo.max_take_backs - self._turn.take_backs_used)

    def undo_available(self) -> bool:
        with self._lock:
            return self._undo.available(self._turn)

    def legal_moves(self) -> List[int]:
        with self._lock:
            if self._turn.game_finished:
                return []
            return legal_moves(self._board, self._turn.active_player)

    def result(self) -> Optional[GameResult]:
        with self._lock:
            if not self._turn.game_finished:
                return None
            return evaluate_result(self._board)

    def state(self) -> Dict:
        with self._lock:
            state = to_state(self._board, self._turn)
            state["stones_per_pit"] = self.stones_per_pit
            state["take_backs_remaining"] = self.take_backs_remaining()
            state["undo_available"] = self.undo_available()
            result = self.result()
            state["result"] = None if result is None else result.to_dict()
            return state
