"""
utils.py - Small, reusable helpers for tabular RL experiments.

Includes:
- Seeding and RNG utilities
- Greedy rollouts and policy evaluation
- Q-value inspection
- Simple moving-average & plotting for learning curves
"""

from __future__ import annotations
from typing import Callable, Hashable, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import matplotlib.pyplot as plt

from .q_table import ActionValueTable, NO_ACTION


# -----------------------------
# Reproducibility / RNG
# -----------------------------

def set_seed(seed: Optional[int] = None) -> np.random.Generator:
    """
    Create a NumPy Generator seeded with `seed`.

    Parameters
    ----------
    seed : int or None
        If None, uses unpredictable entropy; else deterministic.

    Returns
    -------
    np.random.Generator
    """
    return np.random.default_rng(seed)


# -----------------------------
# Rollouts / evaluation
# -----------------------------

def run_greedy_episode(env, policy: Callable, max_steps: int = 1000):
    """
    Roll out one episode following `policy` without learning.

    The rollout stops on a terminal transition, when the policy has no action
    to offer, or after `max_steps` steps.

    Parameters
    ----------
    env : Environment
    policy : callable
        `policy(state, available_actions) -> action`.
    max_steps : int
        Safety cap.

    Returns
    -------
    G : float
        Cumulative return.
    traj : List[state]
        Visited states, starting with the reset state.
    """
    s = env.reset()
    G = 0.0
    traj = [s]
    for _ in range(max_steps):
        if env.is_terminal(s):
            break
        a = policy(s, env.available_actions(s))
        if a is NO_ACTION:
            break
        t = env.step(a)
        G += t.reward
        traj.append(t.next_state)
        s = t.next_state
        if t.terminal:
            break
    return G, traj


def evaluate_policy(env,
                    policy: Callable,
                    episodes: int = 20,
                    max_steps: int = 1000) -> Tuple[float, float]:
    """
    Average return and episode length of `policy` over several rollouts.

    Returns
    -------
    mean_return : float
    mean_length : float
        Mean number of steps taken (trajectory length minus the start state).
    """
    returns = []
    lengths = []
    for _ in range(episodes):
        G, traj = run_greedy_episode(env, policy, max_steps=max_steps)
        returns.append(G)
        lengths.append(len(traj) - 1)
    return float(np.mean(returns)), float(np.mean(lengths))


# -----------------------------
# Inspection
# -----------------------------

def format_action_values(table: ActionValueTable, state: Hashable,
                         names: Optional[Mapping] = None) -> List[str]:
    """
    Printable "action: value" lines for the recorded entries of `state`.

    Parameters
    ----------
    table : ActionValueTable
    state : State
    names : mapping or None
        Optional display name per action (e.g. gridworld.ACTION_NAMES).
    """
    lines = []
    for action, v in table.action_values(state).items():
        label = names.get(action, action) if names else action
        lines.append(f"{label}: {v:.3f}")
    return lines


# -----------------------------
# Smoothing / plotting
# -----------------------------

def rolling(x, k: int = 25) -> np.ndarray:
    """
    Rolling average:
    - uses 'valid' convolution
    - pads the front with the first smoothed value.

    This keeps the length equal to len(x).
    """
    x = np.asarray(x, dtype=float)
    if len(x) == 0:
        return np.array([])
    k = max(1, min(k, len(x)))
    y = np.convolve(x, np.ones(k)/k, mode="valid")
    pad = np.full(k-1, y[0])
    return np.concatenate([pad, y])


def plot_learning_curve(returns: Sequence[float], window: int = 21,
                        title: str = "Learning Curve") -> None:
    """
    Plot raw and smoothed episode returns.
    """
    plt.figure(figsize=(7.5, 4))
    r = np.asarray(returns, dtype=float)
    rs = rolling(r, window)
    plt.plot(r, alpha=0.35, label="Return (raw)")
    plt.plot(rs, linewidth=2.0, label=f"Return (MA{window})")
    plt.xlabel("Episode")
    plt.ylabel("Return")
    plt.title(title)
    plt.legend()
    plt.tight_layout()
    plt.show()


def plot_exploration(rates: Sequence[float], title: str = "Exploration Rate") -> None:
    """
    Plot ε per episode.
    """
    plt.figure(figsize=(7.5, 3))
    plt.plot(np.asarray(rates, dtype=float), linewidth=2.0)
    plt.xlabel("Episode")
    plt.ylabel("ε")
    plt.title(title)
    plt.tight_layout()
    plt.show()
