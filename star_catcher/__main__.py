from __future__ import annotations

import argparse
import os
from concurrent.futures import ThreadPoolExecutor

from star_catcher.config import load_config
from star_catcher.log import get_logger, setup_logging
from star_catcher.relay import PendingMessage, TextRelay, build_prompt, fetch_message
from star_catcher.session import Status
from star_catcher.storage import HighScoreStore

logger = get_logger("main")


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="star_catcher", description="Catch the falling stars.")
    parser.add_argument("--catcher-speed", type=float, default=None, help="Basket speed in px/frame.")
    parser.add_argument("--star-speed", type=float, default=None, help="Base fall speed in px/frame.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the item spawner.")
    parser.add_argument("--relay-url", default=None, help="Text-generation relay endpoint.")
    parser.add_argument("--log-level", default=None, help="debug, info, warning, error.")
    parser.add_argument("--log-file", default=None, help="Also write NDJSON logs to this file.")
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = _parse_args(argv)
    config = load_config()
    setup_logging(args.log_level or config.LOG_LEVEL, args.log_file)

    # Needs a real window for human play
    os.environ['SDL_VIDEODRIVER'] = os.environ.get('STAR_CATCHER_VIDEODRIVER', 'x11')

    import pygame
    import numpy as np

    from star_catcher.env import GameEnv

    env = GameEnv(render_mode="rgb_array", config=config, store=HighScoreStore(config.HIGH_SCORE_PATH))
    if args.catcher_speed is not None:
        env.session.set_catcher_speed(args.catcher_speed)
    if args.star_speed is not None:
        env.session.set_star_speed(args.star_speed)
    obs, info = env.reset(seed=args.seed)

    relay = TextRelay(args.relay_url or config.RELAY_URL, timeout_s=config.RELAY_TIMEOUT_S)
    pool = ThreadPoolExecutor(max_workers=1)
    pending = None

    pygame.display.set_caption("Star Catcher")
    screen = pygame.display.set_mode((env.SCREEN_WIDTH, env.SCREEN_HEIGHT))
    clock = pygame.time.Clock()

    running = True
    dragging = False
    while running:
        # --- Relay Replies ---
        if pending is not None and pending.poll():
            pending = None

        # --- Human Input ---
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_SPACE and env.session.status is Status.GAME_OVER:
                    obs, info = env.reset()
                elif event.key in (pygame.K_e, pygame.K_f) and pending is None:
                    kind = "encouragement" if event.key == pygame.K_e else "star_fact"
                    env.session.show_message("Loading...")
                    # Runs off the frame loop; the reply is applied here by poll()
                    future = pool.submit(fetch_message, relay, build_prompt(env.session, kind), kind)
                    pending = PendingMessage(env.session, future)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                dragging = True
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                dragging = False
                env.session.end_drag()
            elif event.type == pygame.MOUSEMOTION and dragging:
                env.session.drag(event.rel[0])

        keys = pygame.key.get_pressed()
        action = [0, 0, 0]  # 0: none, 1: up, 2: down, 3: left, 4: right
        if keys[pygame.K_LEFT] or keys[pygame.K_a]:
            action[0] = 3
        elif keys[pygame.K_RIGHT] or keys[pygame.K_d]:
            action[0] = 4

        # --- Environment Step ---
        obs, reward, terminated, truncated, info = env.step(action)

        # --- Render for Human ---
        surf = pygame.surfarray.make_surface(np.transpose(obs, (1, 0, 2)))
        screen.blit(surf, (0, 0))
        pygame.display.flip()

        clock.tick(config.FPS)

    logger.info("Final info: %s", info)
    pool.shutdown(wait=False, cancel_futures=True)
    relay.close()
    env.close()


if __name__ == "__main__":
    main()
