# Mancala core engine (move resolution)
# Public state shape used by the HTTP layer:
# {
#   "pits": [[int]*6, [int]*6],   # row 0 = player_1, row 1 = player_2
#   "stores": [int, int],         # stores[0] = player_1 store, stores[1] = player_2 store
#   "current_player": 0 | 1,      # 0 = player_1 turn, 1 = player_2 turn
#   "finished": bool
# }

from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from mancala.engine.board import NUM_SLOTS, Board, Player, check_slot, opposite_pit
from mancala.engine.errors import EmptyPit, GameOver, IllegitimateSelection
from mancala.engine.turn import TurnState

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------

class Result(str, Enum):
    PLAYER_ONE_WINS = "player_1_wins"
    PLAYER_TWO_WINS = "player_2_wins"
    TIE = "tie"


@dataclass(frozen=True)
class GameResult:
    result: Result
    player_one_score: int
    player_two_score: int

    @property
    def winner(self) -> Optional[Player]:
        if self.result is Result.PLAYER_ONE_WINS:
            return Player.PLAYER_ONE
        if self.result is Result.PLAYER_TWO_WINS:
            return Player.PLAYER_TWO
        return None

    def to_dict(self) -> Dict:
        return {
            "result": self.result.value,
            "scores": [self.player_one_score, self.player_two_score],
        }


@dataclass(frozen=True)
class Capture:
    landing_pit: int
    opposite_pit: int
    stones: int  # landing stone + opposite pit, all moved into the store


@dataclass(frozen=True)
class Sowing:
    """Pure result of sowing one pit: post-move counts plus the decision flags."""
    counts: Tuple[int, ...]
    path: Tuple[int, ...]
    last_slot: int
    capture: Optional[Capture]
    extra_turn: bool


@dataclass(frozen=True)
class MoveOutcome:
    player: Player
    start_pit: int
    path: Tuple[int, ...]
    last_slot: int
    changed_slots: FrozenSet[int]
    capture: Optional[Capture]
    turn_passed: bool
    next_player: Player
    result: Optional[GameResult] = None

    @property
    def game_ended(self) -> bool:
        return self.result is not None

    def to_dict(self) -> Dict:
        return {
            "player": int(self.player),
            "start_pit": self.start_pit,
            "path": list(self.path),
            "last_slot": self.last_slot,
            "changed_slots": sorted(self.changed_slots),
            "capture": None if self.capture is None else {
                "landing_pit": self.capture.landing_pit,
                "opposite_pit": self.capture.opposite_pit,
                "stones": self.capture.stones,
            },
            "turn_passed": self.turn_passed,
            "next_player": int(self.next_player),
            "result": None if self.result is None else self.result.to_dict(),
        }

# ---------------------------------------------------------------------
# Pure rule primitives (count tuples in, count tuples out)
# ---------------------------------------------------------------------

def sowing_path(start_pit: int, stones: int, player: Player) -> Tuple[int, ...]:
    """Slots receiving one stone each, in order. The opponent's store is skipped."""
    skip = player.other.store
    path: List[int] = []
    cursor = start_pit
    while len(path) < stones:
        cursor = (cursor + 1) % NUM_SLOTS
        if cursor == skip:
            continue
        path.append(cursor)
    return tuple(path)


def resolve_sowing(counts: Sequence[int], start_pit: int, player: Player) -> Sowing:
    slots = list(counts)
    stones = slots[start_pit]
    slots[start_pit] = 0

    path = sowing_path(start_pit, stones, player)
    for slot in path:
        slots[slot] += 1
    last_slot = path[-1]

    # capture: last stone made an empty own pit hold exactly one
    capture = None
    if player.owns_pit(last_slot) and slots[last_slot] == 1:
        facing = opposite_pit(last_slot)
        taken = slots[last_slot] + slots[facing]
        slots[player.store] += taken
        slots[last_slot] = 0
        slots[facing] = 0
        capture = Capture(last_slot, facing, taken)

    extra_turn = last_slot == player.store
    return Sowing(tuple(slots), path, last_slot, capture, extra_turn)


def evaluate_result(board: Board) -> GameResult:
    one = board.store_count(Player.PLAYER_ONE)
    two = board.store_count(Player.PLAYER_TWO)
    if one > two:
        result = Result.PLAYER_ONE_WINS
    elif two > one:
        result = Result.PLAYER_TWO_WINS
    else:
        result = Result.TIE
    return GameResult(result, one, two)


def is_terminal(board: Board) -> bool:
    return board.is_player_side_empty(Player.PLAYER_ONE) or board.is_player_side_empty(Player.PLAYER_TWO)


def legal_moves(board: Board, player: Player) -> List[int]:
    return [pit for pit in player.pits if board.stone_count(pit) > 0]

# ---------------------------------------------------------------------
# Move application
# ---------------------------------------------------------------------

def validate_move(board: Board, turn: TurnState, start_pit: int, acting_player) -> Player:
    """Check move preconditions in order; returns the acting player as a `Player`."""
    if turn.game_finished:
        raise GameOver()
    start_pit = check_slot(start_pit)
    try:
        player = Player(acting_player)
    except ValueError:
        raise IllegitimateSelection(start_pit, acting_player) from None
    if player != turn.active_player or not player.owns_pit(start_pit):
        raise IllegitimateSelection(start_pit, player)
    if board.stone_count(start_pit) == 0:
        raise EmptyPit(start_pit)
    return player


def apply_move(board: Board, turn: TurnState, start_pit: int, acting_player) -> MoveOutcome:
    """
    Play `start_pit` for `acting_player`, mutating `board` and `turn` in place.
    Nothing is mutated when a precondition fails.
    """
    player = validate_move(board, turn, start_pit, acting_player)
    start_pit = int(start_pit)

    before = board.counts()
    sown = resolve_sowing(before, start_pit, player)
    board.load(Board(sown.counts))
    if sown.capture is not None:
        logger.debug("%s captured %d stones at pit %d", player, sown.capture.stones, sown.capture.landing_pit)

    next_player = player if sown.extra_turn else player.other
    turn.active_player = next_player

    result = None
    if is_terminal(board):
        for side in Player:
            if not board.is_player_side_empty(side):
                board.sweep_remainder_to_store(side)
        turn.game_finished = True
        result = evaluate_result(board)

    changed = frozenset(slot for slot in range(NUM_SLOTS) if before[slot] != board.stone_count(slot))
    return MoveOutcome(
        player=player,
        start_pit=start_pit,
        path=sown.path,
        last_slot=sown.last_slot,
        changed_slots=changed,
        capture=sown.capture,
        turn_passed=not sown.extra_turn,
        next_player=next_player,
        result=result,
    )

# ---------------------------------------------------------------------
# Conversions between board/turn and the public state dict
# ---------------------------------------------------------------------

def to_state(board: Board, turn: TurnState) -> Dict:
    counts = board.as_list()
    return {
        "pits":   [counts[0:6], counts[7:13]],
        "stores": [counts[6], counts[13]],
        "current_player": int(turn.active_player),
        "finished": turn.game_finished,
    }
