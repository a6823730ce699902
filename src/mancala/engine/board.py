# src/mancala/engine/board.py
# Board layout (flat, circular, 14 slots):
#
#   13 | 12 11 10  9  8  7 |        <- player_2 pits, sown right to left
#      |  0  1  2  3  4  5 | 6      <- player_1 pits, sown left to right
#
# 0..5 = player_1 pits, 6 = player_1 store, 7..12 = player_2 pits, 13 = player_2 store.

from __future__ import annotations
from enum import IntEnum
from typing import Iterable, List, Tuple

import numpy as np

from mancala.engine.errors import InvalidCount, InvalidSlot

NUM_PITS = 6
NUM_SLOTS = (NUM_PITS + 1) * 2
PLAYER_ONE_STORE = NUM_PITS
PLAYER_TWO_STORE = NUM_SLOTS - 1

# ---------------------------------------------------------------------
# Players and slot ownership
# ---------------------------------------------------------------------

class Player(IntEnum):
    PLAYER_ONE = 0
    PLAYER_TWO = 1

    @property
    def other(self) -> "Player":
        return Player(1 - self.value)

    @property
    def store(self) -> int:
        return PLAYER_ONE_STORE if self is Player.PLAYER_ONE else PLAYER_TWO_STORE

    @property
    def pits(self) -> range:
        first = 0 if self is Player.PLAYER_ONE else PLAYER_ONE_STORE + 1
        return range(first, first + NUM_PITS)

    @property
    def key(self) -> str:
        return "player_1" if self is Player.PLAYER_ONE else "player_2"

    def owns_pit(self, slot: int) -> bool:
        return slot in self.pits

    def __str__(self) -> str:
        return self.key


def check_slot(slot) -> int:
    if isinstance(slot, bool) or not isinstance(slot, (int, np.integer)):
        raise InvalidSlot(slot)
    if not 0 <= slot < NUM_SLOTS:
        raise InvalidSlot(slot)
    return int(slot)


def _check_count(n) -> int:
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)):
        raise InvalidCount(n, "stone count must be an integer")
    if n < 0:
        raise InvalidCount(n)
    return int(n)


def is_store(slot: int) -> bool:
    return check_slot(slot) in (PLAYER_ONE_STORE, PLAYER_TWO_STORE)


def opposite_pit(slot: int) -> int:
    """Pit facing `slot` across the board. Stores have no opposite."""
    if is_store(slot):
        raise InvalidSlot(slot)
    return (NUM_SLOTS - 2) - slot

# ---------------------------------------------------------------------
# Board
# ---------------------------------------------------------------------

class Board:
    """
    Stone counts for the 14 slots.

    The total across all slots only changes on setup; sowing, captures and
    the end-of-game sweep move stones between slots.
    """

    __slots__ = ("_slots",)

    def __init__(self, counts: Iterable[int] | None = None):
        self._slots: np.ndarray = np.zeros(NUM_SLOTS, dtype=np.int64)
        if counts is not None:
            counts = list(counts)
            if len(counts) != NUM_SLOTS:
                raise ValueError(f"Expected {NUM_SLOTS} slot counts, got {len(counts)}")
            for slot, n in enumerate(counts):
                self._slots[slot] = _check_count(n)

    @classmethod
    def initial(cls, stones_per_pit: int) -> "Board":
        n = _check_count(stones_per_pit)
        board = cls()
        for player in Player:
            board._slots[player.pits.start:player.pits.stop] = n
        return board

    # ---------- Single-slot access ----------
    def stone_count(self, slot: int) -> int:
        return int(self._slots[check_slot(slot)])

    def set_stone_count(self, slot: int, n: int) -> None:
        slot = check_slot(slot)
        self._slots[slot] = _check_count(n)

    def add_stones(self, slot: int, n: int) -> None:
        slot = check_slot(slot)
        self._slots[slot] += _check_count(n)

    def remove_all_stones(self, slot: int) -> int:
        slot = check_slot(slot)
        previous = int(self._slots[slot])
        self._slots[slot] = 0
        return previous

    # ---------- Player-side queries ----------
    def store_count(self, player: Player) -> int:
        return int(self._slots[player.store])

    def pit_counts(self, player: Player) -> List[int]:
        return [int(n) for n in self._slots[player.pits.start:player.pits.stop]]

    def is_player_side_empty(self, player: Player) -> bool:
        return not self._slots[player.pits.start:player.pits.stop].any()

    def sweep_remainder_to_store(self, player: Player) -> int:
        """
        Move every stone left in `player`'s pits into `player`'s own store.
        Called for the side that still has stones once the other side is empty.
        Returns the number of stones moved.
        """
        pits = self._slots[player.pits.start:player.pits.stop]
        moved = int(pits.sum())
        self._slots[player.store] += moved
        pits[:] = 0
        return moved

    # ---------- Whole-board helpers ----------
    def total(self) -> int:
        return int(self._slots.sum())

    def counts(self) -> Tuple[int, ...]:
        return tuple(int(n) for n in self._slots)

    def as_list(self) -> List[int]:
        return list(self.counts())

    def copy(self) -> "Board":
        clone = Board()
        clone._slots = self._slots.copy()
        return clone

    def load(self, other: "Board") -> None:
        """Overwrite this board in place with another board's counts."""
        self._slots[:] = other._slots

    def __len__(self) -> int:
        return NUM_SLOTS

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return np.array_equal(self._slots, other._slots)

    def __repr__(self) -> str:
        return f"Board({self.as_list()})"
