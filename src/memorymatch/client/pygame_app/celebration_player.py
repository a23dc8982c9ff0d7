from __future__ import annotations

import math
import random
from dataclasses import dataclass, field

import pygame  # type: ignore[import-not-found]

from .asset_manager import AssetManager

Color = tuple[int, int, int]

PALETTE: tuple[Color, ...] = (
    (255, 87, 34),
    (255, 193, 7),
    (76, 175, 80),
    (33, 150, 243),
    (156, 39, 176),
)


@dataclass
class Particle:
    x: float
    y: float
    vx: float
    vy: float
    color: Color
    born: float


@dataclass
class CelebrationPlayer:
    """One-shot fireworks overlay shown when a game is won.

    `done` flips to True once the playback ends or the player skips it.
    """

    assets: AssetManager
    size: tuple[int, int]
    duration: float = 3.0
    bursts: int = 6
    rng: random.Random = field(default_factory=random.Random)
    elapsed: float = 0.0
    done: bool = False
    _particles: list[Particle] = field(default_factory=list)
    _next_burst: int = 0

    def _burst(self) -> None:
        w, h = self.size
        cx = self.rng.uniform(w * 0.2, w * 0.8)
        cy = self.rng.uniform(h * 0.15, h * 0.5)
        color = self.rng.choice(PALETTE)
        for i in range(36):
            angle = 2 * math.pi * i / 36
            speed = self.rng.uniform(90, 220)
            self._particles.append(
                Particle(cx, cy, math.cos(angle) * speed, math.sin(angle) * speed, color, self.elapsed)
            )

    def handle_event(self, event: pygame.event.Event) -> None:
        if self.done:
            return
        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            self.done = True
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self.done = True

    def update(self, dt: float) -> None:
        if self.done:
            return
        self.elapsed += dt
        interval = self.duration / max(1, self.bursts)
        while self._next_burst < self.bursts and self.elapsed >= self._next_burst * interval:
            self._burst()
            self._next_burst += 1
        for p in self._particles:
            p.x += p.vx * dt
            p.y += p.vy * dt
            p.vy += 160 * dt
        self._particles = [p for p in self._particles if self.elapsed - p.born < 1.4]
        if self.elapsed >= self.duration:
            self.done = True

    def render(self, screen: pygame.Surface) -> None:
        overlay = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 90))
        screen.blit(overlay, (0, 0))

        for p in self._particles:
            fade = max(0.0, 1.0 - (self.elapsed - p.born) / 1.4)
            radius = max(1, int(4 * fade))
            pygame.draw.circle(screen, p.color, (int(p.x), int(p.y)), radius)

        w, h = screen.get_size()
        title = self.assets.fonts.big.render("You win!", True, (255, 255, 255))
        screen.blit(title, title.get_rect(center=(w // 2, h // 2)).topleft)

        # UI hint
        hint = self.assets.fonts.small.render("Click / ESC to skip", True, (240, 240, 240))
        screen.blit(hint, (20, h - 40))
