from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Sequence, TypeVar

import pygame  # type: ignore[import-not-found]


Color = tuple[int, int, int]
T = TypeVar("T")


def draw_text(
    screen: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    pos: tuple[int, int],
    color: Color = (40, 40, 40),
) -> None:
    img = font.render(text, True, color)
    screen.blit(img, pos)


@dataclass
class Button:
    rect: pygame.Rect
    text: str
    on_click: Callable[[], None]
    enabled: bool = True

    def handle_event(self, event: pygame.event.Event) -> bool:
        if not self.enabled:
            return False
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.on_click()
                return True
        return False

    def draw(self, screen: pygame.Surface, font: pygame.font.Font) -> None:
        bg = (33, 150, 243) if self.enabled else (160, 160, 160)
        pygame.draw.rect(screen, bg, self.rect, border_radius=8)
        img = font.render(self.text, True, (255, 255, 255))
        r = img.get_rect(center=self.rect.center)
        screen.blit(img, r.topleft)


@dataclass
class Picker(Generic[T]):
    """Label plus a value cycled with left/right arrows."""

    rect: pygame.Rect
    label: str
    options: Sequence[tuple[str, T]]
    index: int
    on_change: Callable[[T], None]

    @property
    def value(self) -> T:
        return self.options[self.index][1]

    def _left(self) -> pygame.Rect:
        return pygame.Rect(self.rect.right - 190, self.rect.y, 36, self.rect.h)

    def _right(self) -> pygame.Rect:
        return pygame.Rect(self.rect.right - 36, self.rect.y, 36, self.rect.h)

    def select(self, value: T) -> None:
        for i, (_, v) in enumerate(self.options):
            if v == value:
                self.index = i
                return
        self.index = 0

    def handle_event(self, event: pygame.event.Event) -> bool:
        if event.type != pygame.MOUSEBUTTONDOWN or event.button != 1:
            return False
        if self._left().collidepoint(event.pos):
            step = -1
        elif self._right().collidepoint(event.pos):
            step = 1
        else:
            return False
        self.index = (self.index + step) % len(self.options)
        self.on_change(self.value)
        return True

    def draw(self, screen: pygame.Surface, font: pygame.font.Font) -> None:
        draw_text(screen, font, self.label, (self.rect.x, self.rect.y + 8))
        for r, glyph in ((self._left(), "<"), (self._right(), ">")):
            pygame.draw.rect(screen, (220, 220, 220), r, border_radius=6)
            img = font.render(glyph, True, (40, 40, 40))
            screen.blit(img, img.get_rect(center=r.center).topleft)
        text = font.render(self.options[self.index][0], True, (40, 40, 40))
        mid = pygame.Rect(self._left().right, self.rect.y, self._right().x - self._left().right, self.rect.h)
        screen.blit(text, text.get_rect(center=mid.center).topleft)
