# tests/test_engine.py
import threading

import pytest

from mancala.engine import (
    EmptyPit,
    GameOver,
    IllegitimateSelection,
    InvalidCount,
    MancalaEngine,
    MancalaError,
    Player,
)
from mancala.engine.events import (
    GAME_ENDED,
    GAME_STARTED,
    SLOT_CHANGED,
    TURN_CHANGED,
    UNDO_AVAILABILITY_CHANGED,
)


def _types(events):
    return [e["type"] for e in events]


def test_new_game_layout():
    engine = MancalaEngine(3)
    assert engine.board_counts() == (3, 3, 3, 3, 3, 3, 0, 3, 3, 3, 3, 3, 3, 0)
    assert engine.active_player() is Player.PLAYER_ONE
    assert not engine.is_game_finished()
    assert engine.take_backs_remaining() == 3
    assert engine.legal_moves() == [0, 1, 2, 3, 4, 5]


@pytest.mark.parametrize("stones", [0, -1, "4", True, 2.5])
def test_new_game_rejects_bad_stone_count(engine, stones):
    with pytest.raises(InvalidCount):
        engine.new_game(stones)
    assert engine.board_counts()[0] == 4


def test_new_game_events(engine, events):
    engine.new_game(3)
    assert _types(events) == [GAME_STARTED, TURN_CHANGED, UNDO_AVAILABILITY_CHANGED]
    assert events[0]["stones_per_pit"] == 3
    assert events[1]["player"] is Player.PLAYER_ONE
    assert events[2]["available"] is False


def test_move_events(engine, events):
    engine.apply_move(0, Player.PLAYER_ONE)
    slots = [e["slot"] for e in events if e["type"] == SLOT_CHANGED]
    assert slots == [0, 1, 2, 3, 4]
    assert {"type": TURN_CHANGED, "player": Player.PLAYER_TWO} in events
    assert events[-1] == {"type": UNDO_AVAILABILITY_CHANGED, "available": True, "remaining": 3}


def test_extra_turn_does_not_emit_turn_change(engine, events):
    engine.apply_move(2, Player.PLAYER_ONE)  # 4 stones: 3, 4, 5, 6
    assert engine.active_player() is Player.PLAYER_ONE
    assert TURN_CHANGED not in _types(events)


def test_undo_events(engine, events):
    engine.apply_move(0, Player.PLAYER_ONE)
    events.clear()
    assert engine.request_undo()
    assert [e["slot"] for e in events if e["type"] == SLOT_CHANGED] == [0, 1, 2, 3, 4]
    assert {"type": TURN_CHANGED, "player": Player.PLAYER_ONE} in events
    assert events[-1]["type"] == UNDO_AVAILABILITY_CHANGED
    assert events[-1]["available"] is False


def test_game_end_event():
    engine = MancalaEngine(1)
    received = []
    engine.subscribe(received.append)
    for pit, player in [(5, 0), (4, 0), (12, 1), (11, 1), (3, 0), (10, 1), (2, 0)]:
        engine.apply_move(pit, player)
    ended = [e for e in received if e["type"] == GAME_ENDED]
    assert len(ended) == 1
    assert ended[0]["result"].winner is Player.PLAYER_ONE
    assert engine.is_game_finished()
    assert engine.legal_moves() == []
    assert engine.state()["result"] == {"result": "player_1_wins", "scores": [7, 5]}
    with pytest.raises(GameOver):
        engine.apply_move(0, Player.PLAYER_ONE)


def test_rejected_move_keeps_snapshot(engine):
    engine.apply_move(0, Player.PLAYER_ONE)
    with pytest.raises(IllegitimateSelection):
        engine.apply_move(1, Player.PLAYER_ONE)
    engine.apply_move(7, Player.PLAYER_TWO)
    before = engine.board_counts()
    with pytest.raises(EmptyPit):
        engine.apply_move(0, Player.PLAYER_ONE)
    assert engine.board_counts() == before
    assert engine.undo_available()
    assert engine.request_undo()
    assert engine.active_player() is Player.PLAYER_TWO
    assert engine.stone_count(7) == 4


def test_broken_listener_does_not_abort_move(engine):
    def boom(event):
        raise RuntimeError("view crashed")

    engine.subscribe(boom)
    outcome = engine.apply_move(0, Player.PLAYER_ONE)
    assert outcome.turn_passed
    assert engine.active_player() is Player.PLAYER_TWO


def test_unsubscribe(engine, events):
    engine.unsubscribe(events.append)
    engine.apply_move(0, Player.PLAYER_ONE)
    assert events == []


def test_player_accepts_plain_ints(engine):
    outcome = engine.apply_move(1, 0)
    assert outcome.player is Player.PLAYER_ONE
    with pytest.raises(IllegitimateSelection):
        engine.apply_move(8, 5)


def test_state_dict(engine):
    engine.apply_move(0, Player.PLAYER_ONE)
    state = engine.state()
    assert state["pits"] == [[0, 5, 5, 5, 5, 4], [4, 4, 4, 4, 4, 4]]
    assert state["stores"] == [0, 0]
    assert state["current_player"] == 1
    assert state["finished"] is False
    assert state["undo_available"] is True
    assert state["result"] is None


def test_concurrent_moves_are_serialized():
    engine = MancalaEngine(4)
    errors = []
    barrier = threading.Barrier(8)

    def worker():
        barrier.wait()
        for _ in range(200):
            if engine.is_game_finished():
                return
            moves = engine.legal_moves()
            if not moves:
                continue
            try:
                engine.apply_move(moves[0], engine.active_player())
                assert sum(engine.board_counts()) == 48
            except MancalaError:
                pass  # stale read from another thread's move
            except Exception as exc:
                errors.append(exc)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert sum(engine.board_counts()) == 48


@pytest.mark.parametrize("accessor", [
    "active_player", "is_game_finished", "take_backs_remaining", "undo_available", "result",
])
def test_accessors_wait_for_running_operation(engine, accessor):
    held, release = threading.Event(), threading.Event()

    def hold_lock():
        with engine._lock:
            held.set()
            release.wait(5)

    owner = threading.Thread(target=hold_lock)
    owner.start()
    held.wait(5)

    answers = []
    reader = threading.Thread(target=lambda: answers.append(getattr(engine, accessor)()))
    reader.start()
    reader.join(0.2)
    assert reader.is_alive()
    assert answers == []

    release.set()
    owner.join(5)
    reader.join(5)
    assert len(answers) == 1
