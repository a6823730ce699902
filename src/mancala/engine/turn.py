# src/mancala/engine/turn.py
# Turn bookkeeping and the single-slot take-back ("undo") store.

from __future__ import annotations
import logging
from dataclasses import dataclass, replace
from typing import Optional

from mancala.engine.board import Board, Player
from mancala.engine.errors import NotAllowed

logger = logging.getLogger(__name__)

MAX_TAKE_BACKS_PER_TURN = 3


@dataclass
class TurnState:
    active_player: Player = Player.PLAYER_ONE
    game_finished: bool = False
    take_backs_used: int = 0

    def copy(self) -> "TurnState":
        return replace(self)

    def begin_turn_side_effects(self, genuine: bool = True) -> None:
        """Turn bookkeeping for a validated move, before its snapshot is taken."""
        if genuine:
            self.take_backs_used = 0

    @property
    def take_backs_remaining(self) -> int:
        return max(0, MAX_TAKE_BACKS_PER_TURN - self.take_backs_used)


@dataclass(frozen=True)
class Snapshot:
    """Position right before a move: board counts plus turn state."""
    counts: tuple
    active_player: Player
    game_finished: bool
    take_backs_used: int

    @classmethod
    def capture(cls, board: Board, turn: TurnState) -> "Snapshot":
        return cls(
            counts=board.counts(),
            active_player=turn.active_player,
            game_finished=turn.game_finished,
            take_backs_used=turn.take_backs_used,
        )

    def board(self) -> Board:
        return Board(self.counts)


class UndoManager:
    """
    Holds at most one prior position.

    A take back restores the snapshot and consumes it. The number of take
    backs is carried inside the turn state, so a replayed move followed by
    another take back keeps counting towards the same cap.
    """

    def __init__(self, max_take_backs: int = MAX_TAKE_BACKS_PER_TURN) -> None:
        self.max_take_backs = max_take_backs
        self.snapshot: Optional[Snapshot] = None

    def record(self, board: Board, turn: TurnState) -> None:
        # any earlier, unconsumed snapshot is dropped here
        self.snapshot = Snapshot.capture(board, turn)

    def clear(self) -> None:
        self.snapshot = None

    def available(self, turn: TurnState) -> bool:
        return self.snapshot is not None and turn.take_backs_used < self.max_take_backs

    def undo(self, board: Board, turn: TurnState) -> Snapshot:
        """
        Restore `board` and `turn` in place from the stored snapshot.

        Raises:
            NotAllowed: no snapshot is stored or the take-back cap is used up.
        """
        if self.snapshot is None:
            raise NotAllowed("no previous position")
        if turn.take_backs_used >= self.max_take_backs:
            raise NotAllowed(f"limit of {self.max_take_backs} take backs reached")

        snapshot = self.snapshot
        board.load(snapshot.board())
        turn.active_player = snapshot.active_player
        turn.game_finished = False
        turn.take_backs_used = snapshot.take_backs_used + 1
        self.snapshot = None
        logger.debug("Restored previous position; take backs used: %d", turn.take_backs_used)
        return snapshot
