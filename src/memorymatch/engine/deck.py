from __future__ import annotations

import random

from .types import BoardSlot, Theme, Token


def _shuffle(rng: random.Random, items: list[Token]) -> None:
    rng.shuffle(items)


def select_tokens(theme: Theme, pair_count: int) -> tuple[Token, ...]:
    """First `pair_count` tokens of the theme, in catalog order."""
    if pair_count < 1:
        raise ValueError("pair_count must be positive.")
    if pair_count > theme.size:
        raise ValueError(f"Theme {theme.id!r} only has {theme.size} tokens (asked for {pair_count}).")
    return theme.tokens[:pair_count]


def build_board(theme: Theme, pair_count: int, rng: random.Random) -> tuple[BoardSlot, ...]:
    """Duplicate the selected tokens and lay them out in a uniformly random order."""
    chosen = select_tokens(theme, pair_count)
    pool: list[Token] = []
    for token in chosen:
        pool.append(token)
        pool.append(token)
    _shuffle(rng, pool)
    return tuple(
        BoardSlot(position=i, kind=token.kind, display_value=token.display_value)
        for i, token in enumerate(pool)
    )
