from __future__ import annotations

import argparse
import logging
from typing import Callable, Dict

import pygame

from falling_blocks.game import FallingBlocksGame, GameConfig, TimerScheduler
from falling_blocks.leaderboard import HighScoreTable
from .renderer import Renderer


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Falling Blocks with the keyboard")
    p.add_argument("--large", action="store_true", help="Use the 15x30 board")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--player", type=str, default="Player")
    p.add_argument("--cell-size", type=int, default=28)
    return p


def key_bindings(game: FallingBlocksGame) -> Dict[int, Callable[[], object]]:
    return {
        pygame.K_LEFT: game.move_left,
        pygame.K_RIGHT: game.move_right,
        pygame.K_UP: game.rotate,
        pygame.K_p: game.toggle_pause,
        pygame.K_r: game.reset,
        pygame.K_RETURN: game.start,
        pygame.K_SPACE: game.start,
    }


def run(argv=None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="[FALLING_BLOCKS] %(asctime)s - %(message)s")

    if args.large:
        config = GameConfig.large(random_seed=args.seed, player_name=args.player)
    else:
        config = GameConfig(random_seed=args.seed, player_name=args.player)

    pygame.init()
    try:
        clock = pygame.time.Clock()
        scheduler = TimerScheduler(pygame.time.get_ticks)
        game = FallingBlocksGame(scheduler, config)
        high_scores = HighScoreTable()
        game.add_game_over_listener(high_scores.record)

        renderer = Renderer(cell_size=args.cell_size)
        screen = pygame.display.set_mode(renderer.window_size(config.width, config.height))
        pygame.display.set_caption("Falling Blocks")
        bindings = key_bindings(game)

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_DOWN:
                        game.set_fast_drop(True)
                    else:
                        command = bindings.get(event.key)
                        if command is not None:
                            command()
                elif event.type == pygame.KEYUP and event.key == pygame.K_DOWN:
                    game.set_fast_drop(False)

            scheduler.run_due()
            renderer.draw(screen, game.snapshot())
            clock.tick(60)

        for rank, result in enumerate(high_scores.top(), start=1):
            logger.info("%d. %s: %d", rank, result.player_name, result.score)
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    run()
