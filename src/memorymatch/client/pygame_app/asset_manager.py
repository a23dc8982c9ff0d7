from __future__ import annotations

from dataclasses import dataclass

import pygame  # type: ignore[import-not-found]

EMOJI_FONTS = "notocoloremoji,segoeuiemoji,applecoloremoji,symbola"


@dataclass
class Fonts:
    ui: pygame.font.Font
    small: pygame.font.Font
    big: pygame.font.Font


class AssetManager:
    def __init__(self) -> None:
        self._cache: dict[tuple[str, int], pygame.Surface] = {}
        self._emoji_fonts: dict[int, pygame.font.Font] = {}

        pygame.font.init()
        self.fonts = Fonts(
            ui=pygame.font.SysFont(None, 26),
            small=pygame.font.SysFont(None, 20),
            big=pygame.font.SysFont(None, 40),
        )

    def _emoji_font(self, size: int) -> pygame.font.Font:
        font = self._emoji_fonts.get(size)
        if font is None:
            font = pygame.font.SysFont(EMOJI_FONTS, size)
            self._emoji_fonts[size] = font
        return font

    def get_token(self, display_value: str, size: int) -> pygame.Surface:
        """Rendered glyph for a token face, cached per (value, size)."""
        key = (display_value, size)
        if key in self._cache:
            return self._cache[key]
        try:
            img = self._emoji_font(size).render(display_value, True, (20, 20, 20))
        except pygame.error:
            # Fallback placeholder
            img = pygame.Surface((size, size))
            img.fill((200, 40, 200))
        self._cache[key] = img
        return img
