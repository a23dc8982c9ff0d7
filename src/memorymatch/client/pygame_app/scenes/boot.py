from __future__ import annotations

import random
import traceback

import pygame  # type: ignore[import-not-found]

from memorymatch.engine.session import GameSession
from ..app import GameContext, SceneTransition
from ..ui import Button, draw_text
from .game import GameScene


class BootScene:
    def __init__(self, ctx: GameContext) -> None:
        self.ctx = ctx
        self._did_boot = False
        self._error: str | None = None
        self._quit_button: Button | None = None

    def handle_event(self, event: pygame.event.Event) -> None:
        if self._quit_button is not None:
            self._quit_button.handle_event(event)

    def update(self, dt: float) -> SceneTransition | None:
        if self._did_boot:
            return None
        self._did_boot = True
        try:
            self.ctx.catalog = self.ctx.content.load_themes()
            self.ctx.session = GameSession(
                self.ctx.catalog,
                config=self.ctx.config,
                rng=random.Random(self.ctx.seed),
                telemetry=self.ctx.telemetry,
                theme_id=self.ctx.theme_id,
                pair_count=self.ctx.pair_count,
            )
            self.ctx.telemetry.log("boot", {"ok": True, "themes": list(self.ctx.catalog.all_ids())})
            return SceneTransition(GameScene(self.ctx))
        except Exception as e:
            tb = traceback.format_exc(limit=8)
            self._error = f"{e}\n\n{tb}"
            self.ctx.telemetry.log("boot", {"ok": False, "error": str(e)})
            # Offer quit button
            self._quit_button = Button(
                rect=pygame.Rect(20, self.ctx.screen.get_height() - 64, 140, 44),
                text="Quit",
                on_click=lambda: pygame.event.post(pygame.event.Event(pygame.QUIT)),
            )
            return None

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((240, 240, 240))
        font = self.ctx.assets.fonts.big
        draw_text(screen, font, "Memory Matching Game", (20, 20))

        font2 = self.ctx.assets.fonts.ui
        if self._error is None:
            draw_text(screen, font2, "Loading themes...", (20, 80))
        else:
            draw_text(screen, font2, "BOOT ERROR", (20, 80), color=(200, 40, 40))
            y = 120
            for line in self._error.splitlines()[:22]:
                draw_text(screen, self.ctx.assets.fonts.small, line[:120], (20, y))
                y += 18
            if self._quit_button is not None:
                self._quit_button.draw(screen, font2)
