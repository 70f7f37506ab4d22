"""
training.py - Episode loop driving an Environment with a QLearningAgent.

Each episode:
    1) reset the environment and read the start state
    2) until terminal or `max_steps_per_episode`: choose, step, update
    3) record return / ε / length, then decay ε

After the last episode the agent's greedy policy is returned together with
the per-episode metrics and the trained table.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from .agent import Policy, QLearningAgent
from .environment import Environment
from .q_table import ActionValueTable, NO_ACTION

logger = logging.getLogger(__name__)


@dataclass
class TrainingResult:
    """
    Output of `train_q_learning`.

    Parameters
    ----------
    episode_rewards : list[float]
        Total (undiscounted) reward collected in each episode.
    exploration_rates : list[float]
        ε in effect during each episode (recorded before decay).
    episode_lengths : list[int]
        Number of environment steps taken in each episode.
    q_table : ActionValueTable
        The agent's table (same object, not a copy).
    policy : Policy
        Greedy policy over `q_table`.
    """
    episode_rewards: List[float]
    exploration_rates: List[float]
    episode_lengths: List[int]
    q_table: ActionValueTable
    policy: Policy


def run_episode(agent: QLearningAgent, env: Environment,
                max_steps: int) -> tuple[float, int]:
    """
    Run one learning episode.

    Returns
    -------
    total_reward : float
    steps : int
        Environment steps actually taken (≤ `max_steps`).
    """
    env.reset()
    state = env.current_state()
    total_reward = 0.0
    steps = 0

    while steps < max_steps and not env.is_terminal(state):
        actions = env.available_actions(state)
        action = agent.choose_action(state, actions)
        if action is NO_ACTION:
            # nothing to do from here; end the episode without stepping
            break

        t = env.step(action)
        next_actions = env.available_actions(t.next_state)
        agent.update(state, action, t.reward, t.next_state, next_actions)

        total_reward += t.reward
        state = t.next_state
        steps += 1
        if t.terminal:
            break

    return total_reward, steps


def train_q_learning(agent: QLearningAgent, env: Environment,
                     total_episodes: int, max_steps_per_episode: int) -> TrainingResult:
    """
    Train `agent` on `env` for a fixed number of episodes.

    Parameters
    ----------
    agent : QLearningAgent
    env : Environment
        Anything satisfying the `Environment` protocol.
    total_episodes : int
        Number of episodes to run (≥ 0).
    max_steps_per_episode : int
        Hard cap on steps per episode (≥ 1).

    Returns
    -------
    TrainingResult

    Raises
    ------
    ValueError
        If the episode or step budget is invalid.
    """
    if total_episodes < 0:
        raise ValueError(f"total_episodes must be >= 0, got {total_episodes}")
    if max_steps_per_episode < 1:
        raise ValueError(
            f"max_steps_per_episode must be >= 1, got {max_steps_per_episode}")

    rewards: List[float] = []
    rates: List[float] = []
    lengths: List[int] = []
    report_every = max(1, total_episodes // 10)

    for ep in range(total_episodes):
        total_reward, steps = run_episode(agent, env, max_steps_per_episode)

        rewards.append(total_reward)
        rates.append(agent.exploration_rate)
        lengths.append(steps)

        agent.decay_exploration()

        if (ep + 1) % report_every == 0:
            logger.info("Episode %d: reward=%.2f, exploration=%.3f",
                        ep + 1, total_reward, agent.exploration_rate)

    return TrainingResult(rewards, rates, lengths, agent.table, agent.greedy_policy())
