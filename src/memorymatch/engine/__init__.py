"""Deterministic, headless rules engine for the memory match game.

IMPORTANT: This package must never import pygame.
"""

from .actions import ResolveAction, RevealAction
from .deck import build_board
from .match import GameState, MatchConfig, StepResult, face_value, is_face_up, reset, resolve, reveal, step
from .session import GameSession
from .timers import DeferredScheduler
from .types import BoardSlot, Theme, ThemeCatalog, Token

__all__ = [
    "BoardSlot",
    "DeferredScheduler",
    "GameSession",
    "GameState",
    "MatchConfig",
    "ResolveAction",
    "RevealAction",
    "StepResult",
    "Theme",
    "ThemeCatalog",
    "Token",
    "build_board",
    "face_value",
    "is_face_up",
    "reset",
    "resolve",
    "reveal",
    "step",
]
