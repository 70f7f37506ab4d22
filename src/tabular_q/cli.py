"""
Command-line demo: train a Q-learning agent on GridWorld and replay its policy.

Usage
-----
  # Reference 5x5 setup
  tabular-q

  # Settings from a YAML file, overriding the episode budget
  tabular-q configs/gridworld.yaml --episodes 2000 --plot
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .agent import QLearningAgent
from .config import ExperimentConfig, load_config
from .gridworld import ACTION_NAMES, GridWorld
from .q_table import NO_ACTION
from .training import train_q_learning
from .utils import format_action_values, plot_exploration, plot_learning_curve

logger = logging.getLogger(__name__)


def _non_negative_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {text!r}")
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tabular-q",
        description="Train a tabular Q-learning agent on a grid world.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "config_file",
        type=Path,
        nargs="?",
        default=None,
        help="Path to a .yaml experiment file. Uses the built-in demo when omitted.",
    )
    parser.add_argument("--episodes", type=_non_negative_int, default=None,
                        help="Override the number of training episodes.")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for the agent's exploration RNG.")
    parser.add_argument("--plot", action="store_true",
                        help="Show the learning curve and the replayed path.")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging.")
    return parser


def demonstrate_policy(env: GridWorld, policy, max_steps: int):
    """
    Replay `policy` from a fresh reset, logging every move.

    Returns
    -------
    path : list[tuple[int, int]]
        Visited cells.
    reached_goal : bool
    """
    state = env.reset()
    path = [state]
    logger.info("Start: %s", state)

    for step in range(max_steps):
        action = policy(state, env.available_actions(state))
        if action is NO_ACTION:
            break
        t = env.step(action)
        state = t.next_state
        path.append(state)
        logger.info("Step %d: %s -> %s (reward: %.1f)",
                    step + 1, ACTION_NAMES[action], state, t.reward)
        if t.terminal:
            logger.info("GOAL REACHED!")
            return path, True
    return path, False


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stdout,
        force=True,
    )

    cfg = load_config(args.config_file) if args.config_file else ExperimentConfig.default()
    if args.episodes is not None:
        cfg.episodes = args.episodes
    if args.seed is not None:
        cfg.agent_seed = args.seed

    env = GridWorld(cfg.world)
    agent = QLearningAgent(cfg.agent, seed=cfg.agent_seed)

    logger.info("=== Reinforcement Learning: Grid World Demo ===")
    result = train_q_learning(agent, env, cfg.episodes, cfg.max_steps_per_episode)

    logger.info("=== Learned Policy Demonstration ===")
    path, _ = demonstrate_policy(env, result.policy, cfg.demo_steps)

    start = cfg.world.start
    logger.info("=== Q-Values for Start State %s ===", start)
    for line in format_action_values(result.q_table, start, ACTION_NAMES):
        logger.info(line)

    if args.plot:
        plot_learning_curve(result.episode_rewards)
        plot_exploration(result.exploration_rates)
        env.render(path=path, title="Greedy Policy")

    return 0


if __name__ == "__main__":
    sys.exit(main())
