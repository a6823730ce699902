# src/mancala/engine/errors.py
# Engine error taxonomy. Every error is raised before any state is touched,
# so a caller can simply ignore the attempted action.


class MancalaError(Exception):
    """Base class for all engine errors."""


class InvalidSlot(MancalaError, IndexError):
    def __init__(self, slot):
        super().__init__(f"Slot {slot!r} is not in 0..13")
        self.slot = slot


class InvalidCount(MancalaError, ValueError):
    def __init__(self, count, reason: str = "stone count must be non-negative"):
        super().__init__(f"Invalid count {count!r}: {reason}")
        self.count = count


class GameOver(MancalaError):
    def __init__(self):
        super().__init__("The game is finished; start a new game to keep playing")


class IllegitimateSelection(MancalaError):
    def __init__(self, pit, player):
        super().__init__(f"Pit {pit} cannot be played by {player}")
        self.pit = pit
        self.player = player


class EmptyPit(MancalaError):
    def __init__(self, pit):
        super().__init__(f"Pit {pit} has no stones")
        self.pit = pit


class NotAllowed(MancalaError):
    def __init__(self, reason: str = "no take back available"):
        super().__init__(f"Take back not allowed: {reason}")
        self.reason = reason
