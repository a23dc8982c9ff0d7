from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RevealAction:
    position: int


@dataclass(frozen=True)
class ResolveAction:
    generation: int


Action = RevealAction | ResolveAction
