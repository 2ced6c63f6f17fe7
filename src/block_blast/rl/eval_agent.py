from __future__ import annotations

import argparse
import logging

import pygame

from block_blast.rl.train_ppo import make_env
from block_blast.visualization.renderer import Renderer

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--algo", choices=["ppo", "maskable"], default="ppo")
    p.add_argument("--model", type=str, required=True)
    p.add_argument("--steps", type=int, default=500)
    p.add_argument("--fps", type=int, default=10)
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=logging.INFO, format="[BLOCK_BLAST] %(asctime)s - %(message)s")
    if args.algo == "maskable":
        from sb3_contrib import MaskablePPO as Algo
    else:
        from stable_baselines3 import PPO as Algo

    env = make_env(resample=(args.algo == "ppo"))
    model = Algo.load(args.model, device="auto")

    game = env.unwrapped.game
    renderer = Renderer(game.config.grid_size, cell_size=30)

    pygame.init()
    try:
        screen = pygame.display.set_mode(renderer.window_size)
        pygame.display.set_caption("Block Blast - Agent Eval")
        clock = pygame.time.Clock()

        obs, info = env.reset()
        best = 0
        steps = 0
        while steps < args.steps:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    return
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    return

            if args.algo == "maskable":
                action, _ = model.predict(obs, deterministic=True, action_masks=env.get_action_mask())
            else:
                action, _ = model.predict(obs, deterministic=True)

            obs, reward, terminated, truncated, info = env.step(action)
            steps += 1
            best = max(best, info["score"])
            if terminated or truncated:
                logger.info("Episode ended at step %d with score %d", steps, info["score"])
                obs, info = env.reset()

            snapshot = env.unwrapped.game.get_session_snapshot()
            renderer.draw_board(screen, snapshot)
            renderer.draw_tray(screen, snapshot.blocks, selected=-1, dragging=-1)
            renderer.draw_status(screen, snapshot, best)
            pygame.display.flip()
            clock.tick(args.fps)
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    main()
