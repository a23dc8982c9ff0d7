from __future__ import annotations

import pygame  # type: ignore[import-not-found]

from memorymatch.engine.match import face_value, is_face_up
from memorymatch.engine.session import GameSession

from ..app import GameContext, SceneTransition
from ..celebration_player import CelebrationPlayer
from ..ui import Button, Picker, draw_text

FLIP_TIME = 0.3
TOP = 200
MARGIN = 10


class GameScene:
    def __init__(self, ctx: GameContext) -> None:
        assert ctx.session is not None and ctx.catalog is not None
        self.ctx = ctx
        self.session: GameSession = ctx.session
        self._celebration: CelebrationPlayer | None = None
        # position -> seconds since it turned face-up, for the flip animation
        self._flips: dict[int, float] = {}
        self._last_generation = self.session.state.generation

        catalog = ctx.catalog
        theme_options = [(catalog.get(tid).label, tid) for tid in catalog.all_ids()]
        self.theme_picker: Picker[str] = Picker(
            rect=pygame.Rect(20, 70, 380, 36),
            label="Theme:",
            options=theme_options,
            index=0,
            on_change=self._on_theme,
        )
        self.theme_picker.select(self.session.theme_id)

        pair_options = self._pair_options()
        self.pair_picker: Picker[int] = Picker(
            rect=pygame.Rect(20, 114, 380, 36),
            label="Card pairs:",
            options=pair_options,
            index=0,
            on_change=self._on_pairs,
        )
        self.pair_picker.select(self.session.pair_count)

        w, h = ctx.screen.get_size()
        self.btn_restart = Button(
            rect=pygame.Rect(w // 2 - 100, h - 70, 200, 50),
            text="Restart Game",
            on_click=self._on_restart,
        )

    def _pair_options(self) -> list[tuple[str, int]]:
        theme_id = self.session.theme_id
        upper = self.session.max_pairs(theme_id)
        lower = self.session.clamp_pairs(theme_id, self.ctx.config.min_pairs)
        return [(str(n), n) for n in range(lower, upper + 1)]

    def _on_theme(self, theme_id: str) -> None:
        self.session.configure(theme_id=theme_id)
        self.pair_picker.options = self._pair_options()
        self.pair_picker.select(self.session.pair_count)

    def _on_pairs(self, pair_count: int) -> None:
        self.session.configure(pair_count=pair_count)

    def _on_restart(self) -> None:
        self.session.restart()

    def _slot_rects(self) -> list[pygame.Rect]:
        w, h = self.ctx.screen.get_size()
        cols = self.ctx.config.columns
        n = len(self.session.state.board)
        rows = (n + cols - 1) // cols
        avail_h = h - TOP - 90
        side = min((w - MARGIN * (cols + 1)) // cols, (avail_h - MARGIN * (rows - 1)) // max(1, rows))
        left = (w - (cols * side + (cols - 1) * MARGIN)) // 2
        rects: list[pygame.Rect] = []
        for i in range(n):
            r, c = divmod(i, cols)
            rects.append(pygame.Rect(left + c * (side + MARGIN), TOP + r * (side + MARGIN), side, side))
        return rects

    def handle_event(self, event: pygame.event.Event) -> None:
        if self._celebration is not None:
            self._celebration.handle_event(event)
            return

        self.theme_picker.handle_event(event)
        self.pair_picker.handle_event(event)
        self.btn_restart.handle_event(event)

        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            for pos, rect in enumerate(self._slot_rects()):
                if rect.collidepoint(event.pos):
                    self.session.reveal(pos)
                    break

    def update(self, dt: float) -> SceneTransition | None:
        self.session.advance(dt)

        state = self.session.state
        if state.generation != self._last_generation:
            self._last_generation = state.generation
            self._flips.clear()
            self._celebration = None
        for pos in range(len(state.board)):
            if is_face_up(state, pos):
                self._flips[pos] = self._flips.get(pos, 0.0) + dt
            else:
                self._flips.pop(pos, None)

        if self.session.celebrating and self._celebration is None:
            self._celebration = CelebrationPlayer(self.ctx.assets, size=self.ctx.screen.get_size())
        if self._celebration is not None:
            self._celebration.update(dt)
            if self._celebration.done:
                self._celebration = None
                self.session.finish_celebration()
        return None

    def _draw_slot(self, screen: pygame.Surface, pos: int, rect: pygame.Rect) -> None:
        state = self.session.state
        face_up = is_face_up(state, pos)
        width = rect.w
        if face_up:
            t = min(1.0, self._flips.get(pos, FLIP_TIME) / FLIP_TIME)
            width = max(2, int(rect.w * abs(2 * t - 1)))
            # first half of the flip still shows the back
            face_up = t >= 0.5
        card = pygame.Rect(0, 0, width, rect.h)
        card.center = rect.center
        bg = (221, 221, 221) if face_up else (255, 255, 255)
        pygame.draw.rect(screen, bg, card, border_radius=10)
        pygame.draw.rect(screen, (180, 180, 180), card, width=1, border_radius=10)
        if width < rect.w // 3:
            return
        if face_up:
            img = self.ctx.assets.get_token(face_value(state, pos), int(rect.h * 0.5))
        else:
            img = self.ctx.assets.fonts.big.render(face_value(state, pos), True, (90, 90, 90))
        screen.blit(img, img.get_rect(center=card.center).topleft)

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((240, 240, 240))
        fonts = self.ctx.assets.fonts
        draw_text(screen, fonts.big, "Memory Matching Game", (20, 20))
        self.theme_picker.draw(screen, fonts.ui)
        self.pair_picker.draw(screen, fonts.ui)
        draw_text(screen, fonts.ui, f"Moves: {self.session.state.move_count}", (20, 162))

        for pos, rect in enumerate(self._slot_rects()):
            self._draw_slot(screen, pos, rect)

        self.btn_restart.draw(screen, fonts.ui)

        if self._celebration is not None:
            self._celebration.render(screen)
