from __future__ import annotations

import random
from typing import Callable, Mapping, Protocol

from .actions import Action, ResolveAction, RevealAction
from .deck import build_board
from .match import GameState, MatchConfig, StepResult, reset, step
from .serialize import action_to_dict
from .timers import DeferredScheduler
from .types import ThemeCatalog


class EventSink(Protocol):
    def log(self, event_type: str, payload: Mapping[str, object]) -> None: ...


CompletionHandler = Callable[[GameState], None]


class GameSession:
    """Configuration and reset glue around the match engine.

    Owns the selected theme and pair count, rebuilds the board on every
    change, and makes sure a resolution scheduled for an old board can
    never touch a newer one (tasks are cancelled and generation-tagged).
    """

    def __init__(
        self,
        catalog: ThemeCatalog,
        *,
        config: MatchConfig | None = None,
        rng: random.Random | None = None,
        scheduler: DeferredScheduler | None = None,
        telemetry: EventSink | None = None,
        on_complete: CompletionHandler | None = None,
        theme_id: str | None = None,
        pair_count: int | None = None,
    ) -> None:
        if not catalog.themes:
            raise ValueError("Theme catalog is empty.")
        self.catalog = catalog
        self.config = config or MatchConfig()
        self.rng = rng or random.Random()
        self.scheduler = scheduler or DeferredScheduler()
        self.telemetry = telemetry
        self.on_complete = on_complete

        self.celebrating = False
        self.action_log: list[Action] = []
        self._generation = 0

        default_theme = self.config.default_theme
        if default_theme not in catalog.themes:
            default_theme = catalog.default_theme or catalog.all_ids()[0]
        self.theme_id = self._check_theme(theme_id if theme_id is not None else default_theme)
        self.pair_count = self.clamp_pairs(
            self.theme_id, pair_count if pair_count is not None else self.config.default_pairs
        )
        self.state = self._new_game()

    def _log(self, event_type: str, payload: Mapping[str, object]) -> None:
        if self.telemetry is not None:
            self.telemetry.log(event_type, payload)

    def _check_theme(self, theme_id: str) -> str:
        if theme_id not in self.catalog.themes:
            known = ", ".join(self.catalog.all_ids())
            raise ValueError(f"Unknown theme {theme_id!r} (known: {known}).")
        return theme_id

    def max_pairs(self, theme_id: str) -> int:
        # pair choices are capped by the smallest theme in the catalog
        return min(self.config.max_pairs, self.catalog.smallest_size(), self.catalog.get(theme_id).size)

    def clamp_pairs(self, theme_id: str, pair_count: int) -> int:
        upper = self.max_pairs(theme_id)
        lower = min(self.config.min_pairs, upper)
        return max(lower, min(upper, pair_count))

    def _new_game(self) -> GameState:
        self._generation += 1
        self.scheduler.cancel_stale(self._generation)
        self.celebrating = False
        self.action_log = []
        board = build_board(self.catalog.get(self.theme_id), self.pair_count, self.rng)
        state = reset(board, generation=self._generation)
        self._log(
            "game_started",
            {"theme": self.theme_id, "pairs": self.pair_count, "generation": self._generation},
        )
        return state

    def configure(self, *, theme_id: str | None = None, pair_count: int | None = None) -> GameState:
        """Apply a theme and/or pair-count change and start a new game."""
        new_theme = self._check_theme(theme_id) if theme_id is not None else self.theme_id
        requested = pair_count if pair_count is not None else self.pair_count
        self.theme_id = new_theme
        self.pair_count = self.clamp_pairs(new_theme, requested)
        self.state = self._new_game()
        return self.state

    def restart(self) -> GameState:
        self._log("game_restarted", {"generation": self._generation, "moves": self.state.move_count})
        self.state = self._new_game()
        return self.state

    def reveal(self, position: int) -> StepResult:
        was_complete = self.state.is_complete
        action = RevealAction(position=position)
        res = step(self.state, action)
        if not res.ok:
            return res
        self.state = res.state
        self.action_log.append(action)
        if res.needs_resolution:
            matched = any(ev.get("type") == "PAIR_MATCHED" for ev in res.events)
            self._log("move", {"move": self.state.move_count, "matched": matched})
            generation = self.state.generation
            self.scheduler.schedule(
                self.config.reveal_delay, generation, lambda: self._apply_resolution(generation)
            )
        if self.state.is_complete and not was_complete:
            self.celebrating = True
            self._log(
                "game_completed",
                {
                    "moves": self.state.move_count,
                    "pairs": self.pair_count,
                    "actions": [action_to_dict(a) for a in self.action_log],
                },
            )
            if self.on_complete is not None:
                self.on_complete(self.state)
        return res

    def _apply_resolution(self, generation: int) -> None:
        action = ResolveAction(generation=generation)
        res = step(self.state, action)
        if res.ok:
            self.state = res.state
            self.action_log.append(action)

    def advance(self, dt: float) -> int:
        return self.scheduler.advance(dt)

    def finish_celebration(self) -> None:
        """Playback of the win animation ended; game state is left alone."""
        self.celebrating = False
