from __future__ import annotations

import random

import pytest

from memorymatch.engine.actions import ResolveAction, RevealAction
from memorymatch.engine.match import GameState, MatchConfig
from memorymatch.engine.session import GameSession
from memorymatch.engine.timers import DeferredScheduler
from memorymatch.engine.types import Theme, ThemeCatalog, Token
from memorymatch.paths import get_paths
from memorymatch.services.content import ContentService
from memorymatch.services.telemetry import TelemetryService


def _load_catalog() -> ThemeCatalog:
    paths = get_paths()
    content = ContentService(paths.data_dir, paths.schema_dir)
    return content.load_themes()


def _positions_of(state: GameState, kind: str) -> list[int]:
    return [s.position for s in state.board if s.kind == kind]


def _mismatch(state: GameState) -> tuple[int, int]:
    first = state.board[0]
    other = next(s for s in state.board if s.kind != first.kind)
    return first.position, other.position


def _session(**kwargs) -> GameSession:
    return GameSession(_load_catalog(), rng=random.Random(5), **kwargs)


def test_defaults_from_config() -> None:
    session = _session()
    assert session.theme_id == "fruits"
    assert session.pair_count == 2
    assert len(session.state.board) == 4


def test_deferred_resolution_after_delay() -> None:
    session = _session(config=MatchConfig(reveal_delay=1.0))
    a, b = _mismatch(session.state)
    session.reveal(a)
    session.reveal(b)
    assert session.state.input_locked

    assert session.advance(0.5) == 0
    assert session.state.revealed == (a, b)
    assert session.advance(0.5) == 1
    assert session.state.revealed == ()
    assert not session.state.input_locked
    assert session.state.move_count == 1


def test_third_tap_during_display_is_ignored() -> None:
    session = _session(pair_count=3)
    a, b = _mismatch(session.state)
    session.reveal(a)
    session.reveal(b)
    third = next(p for p in range(6) if p not in (a, b))
    res = session.reveal(third)
    assert not res.ok
    assert session.state.revealed == (a, b)
    assert len(session.scheduler.pending) == 1


def test_configure_cancels_pending_resolution() -> None:
    session = _session(pair_count=4)
    a, b = _mismatch(session.state)
    session.reveal(a)
    session.reveal(b)
    old_generation = session.state.generation

    session.configure(theme_id="animals")
    assert session.scheduler.pending == []
    state = session.state
    assert state.generation == old_generation + 1
    assert state.revealed == ()
    assert state.matched_kinds == frozenset()
    assert state.move_count == 0
    assert {s.kind for s in state.board} <= {t.kind for t in _load_catalog().get("animals").tokens}

    c, d = _mismatch(state)
    session.reveal(c)
    assert session.advance(5.0) == 0
    assert session.state.revealed == (c,)


def test_stale_callback_cannot_touch_new_game() -> None:
    # Bypass cancellation: the generation tag alone must protect the new board.
    session = _session(pair_count=3)
    a, b = _mismatch(session.state)
    session.reveal(a)
    session.reveal(b)
    stale = session.scheduler.pending[0]

    session.restart()
    x, y = _mismatch(session.state)
    session.reveal(x)
    session.reveal(y)
    stale.callback()
    assert session.state.revealed == (x, y)
    assert session.state.input_locked


def test_completion_signal_fires_once() -> None:
    seen: list[GameState] = []
    session = _session(on_complete=seen.append)
    state = session.state
    kinds = sorted({s.kind for s in state.board})
    for i, kind in enumerate(kinds):
        p, q = _positions_of(state, kind)
        session.reveal(p)
        session.reveal(q)
        if i < len(kinds) - 1:
            session.advance(1.0)

    assert session.state.is_complete
    assert session.state.move_count == 2
    assert session.celebrating
    assert len(seen) == 1

    session.advance(1.0)
    assert session.state.revealed == ()
    assert session.state.is_complete
    assert len(seen) == 1

    session.finish_celebration()
    assert not session.celebrating
    assert session.state.is_complete


def test_pair_count_is_clamped() -> None:
    session = _session()
    session.configure(pair_count=20)
    assert session.pair_count == 8
    assert len(session.state.board) == 16
    session.configure(pair_count=1)
    assert session.pair_count == 2


def test_pair_count_clamped_to_small_theme() -> None:
    tokens = tuple(Token(kind=f"t{i}", display_value=str(i)) for i in range(3))
    catalog = ThemeCatalog(themes={"tiny": Theme(id="tiny", label="Tiny", tokens=tokens)})
    session = GameSession(catalog, rng=random.Random(1), pair_count=8)
    assert session.theme_id == "tiny"
    assert session.pair_count == 3


def test_unknown_theme_refused() -> None:
    session = _session()
    before = session.state
    with pytest.raises(ValueError):
        session.configure(theme_id="vegetables")
    assert session.state is before
    with pytest.raises(ValueError):
        _session(theme_id="vegetables")


def test_restart_keeps_configuration() -> None:
    session = _session(theme_id="monsters", pair_count=5)
    a, b = _mismatch(session.state)
    session.reveal(a)
    session.reveal(b)
    session.advance(1.0)
    session.restart()
    assert session.theme_id == "monsters"
    assert session.pair_count == 5
    assert session.state.move_count == 0
    assert not session.celebrating


def test_session_events_logged(tmp_path) -> None:
    telemetry = TelemetryService(tmp_path / "telemetry.jsonl")
    session = _session(telemetry=telemetry)
    state = session.state
    expected_actions: list[dict[str, object]] = []
    for kind in sorted({s.kind for s in state.board}):
        p, q = _positions_of(state, kind)
        session.reveal(p)
        session.reveal(q)
        expected_actions += [{"type": "reveal", "position": p}, {"type": "reveal", "position": q}]
        session.advance(1.0)
        expected_actions.append({"type": "resolve", "generation": 1})
    session.restart()

    types = [r["type"] for r in telemetry.read()]
    assert types == ["game_started", "move", "move", "game_completed", "game_restarted", "game_started"]
    records = telemetry.read()
    assert records[0]["payload"] == {"theme": "fruits", "pairs": 2, "generation": 1}
    # the last pair is still on display when the win is logged
    assert records[3]["payload"] == {"moves": 2, "pairs": 2, "actions": expected_actions[:-1]}


def test_scheduler_fires_in_due_order() -> None:
    scheduler = DeferredScheduler()
    fired: list[str] = []
    scheduler.schedule(2.0, 0, lambda: fired.append("late"))
    scheduler.schedule(1.0, 0, lambda: fired.append("early"))
    cancelled = scheduler.schedule(1.5, 0, lambda: fired.append("cancelled"))
    cancelled.cancel()
    assert scheduler.advance(3.0) == 2
    assert fired == ["early", "late"]
    assert scheduler.advance(3.0) == 0
    with pytest.raises(ValueError):
        scheduler.schedule(-1.0, 0, lambda: None)


def _win(session: GameSession) -> None:
    state = session.state
    kinds = sorted({s.kind for s in state.board})
    for i, kind in enumerate(kinds):
        p, q = _positions_of(state, kind)
        session.reveal(p)
        session.reveal(q)
        if i < len(kinds) - 1:
            session.advance(1.0)


def test_new_board_clears_celebration() -> None:
    session = _session()
    _win(session)
    assert session.celebrating
    assert len(session.scheduler.pending) == 1

    session.configure(pair_count=3)
    assert not session.celebrating
    assert session.scheduler.pending == []
    assert session.state.move_count == 0
    assert session.state.matched_kinds == frozenset()
    assert session.action_log == []

    _win(session)
    assert session.celebrating
    assert session.state.move_count == 3

    session.restart()
    assert not session.celebrating
    assert session.scheduler.pending == []
    assert session.state.move_count == 0
    assert session.action_log == []
    assert session.pair_count == 3


def test_action_log_records_accepted_actions() -> None:
    session = _session()
    a, b = _mismatch(session.state)
    session.reveal(a)
    session.reveal(a)  # ignored: already revealed
    session.reveal(b)
    session.advance(1.0)
    generation = session.state.generation
    assert session.action_log == [
        RevealAction(position=a),
        RevealAction(position=b),
        ResolveAction(generation=generation),
    ]


def test_cancel_stale_keeps_current_generation() -> None:
    scheduler = DeferredScheduler()
    fired: list[int] = []
    scheduler.schedule(1.0, 1, lambda: fired.append(1))
    scheduler.schedule(1.0, 2, lambda: fired.append(2))
    scheduler.schedule(1.0, 3, lambda: fired.append(3))
    assert scheduler.cancel_stale(3) == 2
    assert [t.generation for t in scheduler.pending] == [3]
    assert scheduler.advance(1.0) == 1
    assert fired == [3]


def test_pair_choices_capped_by_smallest_theme() -> None:
    small = tuple(Token(kind=f"s{i}", display_value=str(i)) for i in range(4))
    big = tuple(Token(kind=f"b{i}", display_value=str(i)) for i in range(10))
    catalog = ThemeCatalog(
        themes={
            "big": Theme(id="big", label="Big", tokens=big),
            "small": Theme(id="small", label="Small", tokens=small),
        }
    )
    assert catalog.smallest_size() == 4
    session = GameSession(catalog, rng=random.Random(2), theme_id="big", pair_count=8)
    assert session.max_pairs("big") == 4
    assert session.pair_count == 4
    assert len(session.state.board) == 8
