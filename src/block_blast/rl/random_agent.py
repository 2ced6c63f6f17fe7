from __future__ import annotations

import argparse
import logging
import random

import gymnasium as gym

import block_blast.env  # noqa: F401

logger = logging.getLogger(__name__)


def run_random(steps: int = 200, seed: int | None = None) -> float:
    rng = random.Random(seed)
    env = gym.make("BlockBlast-8x8-v0")
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    episodes = 0
    for _ in range(steps):
        # Prefer valid actions if available
        valid = [tuple(a) for a in zip(*info["action_mask"].nonzero())]
        if valid:
            action = rng.choice(valid)
        else:
            action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            episodes += 1
            logger.info("Episode %d finished: %s", episodes, info.get("stats", {"final_score": info["score"]}))
            obs, info = env.reset()
    env.close()
    logger.info("Random agent total reward: %.2f over %d finished episodes", total_reward, episodes)
    return total_reward


def main() -> None:
    p = argparse.ArgumentParser()
    p.add_argument("--steps", type=int, default=200)
    p.add_argument("--seed", type=int, default=None)
    args = p.parse_args()
    logging.basicConfig(level=logging.INFO, format="[BLOCK_BLAST] %(asctime)s - %(message)s")
    run_random(args.steps, args.seed)


if __name__ == "__main__":  # pragma: no cover
    main()
