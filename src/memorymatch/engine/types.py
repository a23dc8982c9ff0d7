from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

Kind = str


@dataclass(frozen=True)
class Token:
    kind: Kind
    display_value: str


@dataclass(frozen=True)
class Theme:
    id: str
    label: str
    tokens: tuple[Token, ...]

    @property
    def size(self) -> int:
        return len(self.tokens)


@dataclass(frozen=True)
class ThemeCatalog:
    """Immutable theme catalog used by the engine."""

    themes: dict[str, Theme]
    default_theme: str | None = None

    def get(self, theme_id: str) -> Theme:
        return self.themes[theme_id]

    def all_ids(self) -> Sequence[str]:
        return list(self.themes.keys())

    def smallest_size(self) -> int:
        return min((t.size for t in self.themes.values()), default=0)


@dataclass(frozen=True)
class BoardSlot:
    position: int
    kind: Kind
    display_value: str
