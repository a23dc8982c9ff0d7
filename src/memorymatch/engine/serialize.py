from __future__ import annotations


from .actions import Action, ResolveAction, RevealAction
from .match import GameState
from .types import BoardSlot


def action_to_dict(a: Action) -> dict[str, object]:
    if isinstance(a, RevealAction):
        return {"type": "reveal", "position": a.position}
    if isinstance(a, ResolveAction):
        return {"type": "resolve", "generation": a.generation}
    raise TypeError(f"Unsupported action: {a!r}")


def _slot_to_dict(s: BoardSlot) -> dict[str, object]:
    return {"position": s.position, "kind": s.kind, "display_value": s.display_value}


def snapshot(state: GameState) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the current game state."""
    return {
        "generation": state.generation,
        "board": [_slot_to_dict(s) for s in state.board],
        "revealed": list(state.revealed),
        "matched_kinds": sorted(state.matched_kinds),
        "move_count": state.move_count,
        "input_locked": state.input_locked,
        "is_complete": state.is_complete,
    }
