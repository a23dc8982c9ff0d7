from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Sequence

from .actions import Action, ResolveAction, RevealAction
from .types import BoardSlot, Kind

Event = dict[str, object]

PLACEHOLDER = "?"


@dataclass(frozen=True)
class MatchConfig:
    reveal_delay: float = 1.0
    min_pairs: int = 2
    max_pairs: int = 8
    default_theme: str = "fruits"
    default_pairs: int = 2
    columns: int = 4


@dataclass(frozen=True)
class GameState:
    board: tuple[BoardSlot, ...]
    revealed: tuple[int, ...] = ()
    matched_kinds: frozenset[Kind] = frozenset()
    move_count: int = 0
    input_locked: bool = False
    generation: int = 0

    @property
    def pair_count(self) -> int:
        return len(self.board) // 2

    @property
    def is_complete(self) -> bool:
        return len(self.matched_kinds) == self.pair_count

    def kind_at(self, position: int) -> Kind:
        return self.board[position].kind


@dataclass(frozen=True)
class StepResult:
    state: GameState
    ok: bool
    events: list[Event] = field(default_factory=list)
    reason: str | None = None
    needs_resolution: bool = False


def _check_position(state: GameState, position: int) -> None:
    if position < 0 or position >= len(state.board):
        raise IndexError(f"Position {position} outside board of {len(state.board)} slots.")


def reset(board: Sequence[BoardSlot], generation: int = 0) -> GameState:
    return GameState(board=tuple(board), generation=generation)


def reveal(state: GameState, position: int) -> StepResult:
    """Reveal the slot at `position`.

    Never mutates `state`. Reveals that the rules ignore return the same
    state with ``ok=False``; an out-of-range position raises IndexError.
    """
    _check_position(state, position)

    if state.input_locked:
        return StepResult(state=state, ok=False, reason="Input locked.")
    if position in state.revealed:
        return StepResult(state=state, ok=False, reason="Already revealed.")
    kind = state.kind_at(position)
    if kind in state.matched_kinds:
        return StepResult(state=state, ok=False, reason="Already matched.")

    revealed = state.revealed + (position,)
    events: list[Event] = [{"type": "CARD_REVEALED", "position": position, "kind": kind}]
    if len(revealed) < 2:
        return StepResult(state=replace(state, revealed=revealed), ok=True, events=events)

    first, second = revealed
    move_count = state.move_count + 1
    matched = state.kind_at(first) == state.kind_at(second)
    matched_kinds = state.matched_kinds | {kind} if matched else state.matched_kinds

    new_state = replace(
        state,
        revealed=revealed,
        matched_kinds=matched_kinds,
        move_count=move_count,
        input_locked=True,
    )
    events.append({"type": "MOVE_COMPLETED", "move": move_count, "matched": matched})
    if matched:
        events.append({"type": "PAIR_MATCHED", "kind": kind, "positions": [first, second]})
        if new_state.is_complete:
            events.append({"type": "GAME_COMPLETED", "moves": move_count})
    else:
        events.append({"type": "PAIR_MISSED", "positions": [first, second]})
    return StepResult(state=new_state, ok=True, events=events, needs_resolution=True)


def resolve(state: GameState, generation: int) -> StepResult:
    """Deferred half of a move: hide the shown pair and unlock input."""
    if generation != state.generation:
        return StepResult(state=state, ok=False, reason="Stale resolution.")
    if not state.input_locked:
        return StepResult(state=state, ok=False, reason="Nothing to resolve.")
    hidden = list(state.revealed)
    new_state = replace(state, revealed=(), input_locked=False)
    return StepResult(state=new_state, ok=True, events=[{"type": "PAIR_HIDDEN", "positions": hidden}])


def step(state: GameState, action: Action) -> StepResult:
    if isinstance(action, RevealAction):
        return reveal(state, action.position)
    if isinstance(action, ResolveAction):
        return resolve(state, action.generation)
    return StepResult(state=state, ok=False, reason="Unknown action.")


def is_face_up(state: GameState, position: int) -> bool:
    _check_position(state, position)
    return position in state.revealed or state.kind_at(position) in state.matched_kinds


def face_value(state: GameState, position: int) -> str:
    if is_face_up(state, position):
        return state.board[position].display_value
    return PLACEHOLDER


def replay(board: Sequence[BoardSlot], positions: Iterable[int], generation: int = 0) -> GameState:
    """Replay reveals from a fresh state, resolving every shown pair at once."""
    state = reset(board, generation)
    for position in positions:
        res = reveal(state, position)
        state = res.state
        if res.needs_resolution:
            state = resolve(state, state.generation).state
        if state.is_complete:
            break
    return state
