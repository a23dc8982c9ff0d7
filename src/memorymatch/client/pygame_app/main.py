from __future__ import annotations

import argparse

import pygame  # type: ignore[import-not-found]

from memorymatch.engine.match import MatchConfig
from memorymatch.paths import get_paths
from memorymatch.services.content import ContentService
from memorymatch.services.telemetry import TelemetryService

from .app import App, GameContext
from .asset_manager import AssetManager
from .scenes.boot import BootScene


def main() -> int:
    defaults = MatchConfig()
    parser = argparse.ArgumentParser(prog="memorymatch")
    parser.add_argument("--width", type=int, default=480)
    parser.add_argument("--height", type=int, default=800)
    parser.add_argument("--theme", default=None, help="theme id from themes.json")
    parser.add_argument("--pairs", type=int, default=None, help="number of pairs (clamped to the theme)")
    parser.add_argument("--seed", type=int, default=None, help="seed the deck shuffle")
    parser.add_argument("--delay", type=float, default=defaults.reveal_delay, help="seconds a pair stays shown")
    parser.add_argument("--no-telemetry", action="store_true")
    args = parser.parse_args()

    pygame.init()
    screen = pygame.display.set_mode((args.width, args.height))
    pygame.display.set_caption("Memory Matching Game")

    clock = pygame.time.Clock()
    paths = get_paths()

    ctx = GameContext(
        screen=screen,
        clock=clock,
        paths=paths,
        assets=AssetManager(),
        content=ContentService(data_dir=paths.data_dir, schema_dir=paths.schema_dir),
        telemetry=TelemetryService(paths.telemetry_path, enabled=not args.no_telemetry),
        config=MatchConfig(reveal_delay=args.delay),
        theme_id=args.theme,
        pair_count=args.pairs,
        seed=args.seed,
    )

    app = App(ctx, BootScene(ctx))
    try:
        return app.run()
    finally:
        pygame.quit()


if __name__ == "__main__":
    raise SystemExit(main())
