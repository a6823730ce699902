from mancala.engine.board import NUM_PITS, NUM_SLOTS, PLAYER_ONE_STORE, PLAYER_TWO_STORE, Board, Player
from mancala.engine.core import Capture, GameResult, MoveOutcome, Result, apply_move, legal_moves, resolve_sowing
from mancala.engine.errors import (
    EmptyPit,
    GameOver,
    IllegitimateSelection,
    InvalidCount,
    InvalidSlot,
    MancalaError,
    NotAllowed,
)
from mancala.engine.game import MancalaEngine
from mancala.engine.turn import MAX_TAKE_BACKS_PER_TURN, Snapshot, TurnState, UndoManager
