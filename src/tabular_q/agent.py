"""
agent.py - Epsilon-greedy Q-learning agent over an ActionValueTable.

Implements the off-policy one-step TD update

    Q(s,a) <- Q(s,a) + α [ r + γ max_a' Q(s',a') - Q(s,a) ]

where the max runs over the actions available in s', regardless of which
action the behaviour policy takes next.

This file exposes:
    - ConfigurationError: raised for out-of-range hyperparameters
    - AgentConfig: validated hyperparameters
    - QLearningAgent: action selection, TD update, exploration decay
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Hashable, Optional, Sequence

import numpy as np

from .q_table import ActionValueTable, NO_ACTION
from .utils import set_seed

State = Hashable
Action = Hashable
Policy = Callable[[State, Sequence[Action]], Optional[Action]]


class ConfigurationError(ValueError):
    """Hyperparameters or experiment settings outside their valid range."""


# =====================================================================
# Configuration
# =====================================================================

@dataclass(frozen=True)
class AgentConfig:
    """
    Hyperparameters for `QLearningAgent`. Every field is required.

    Parameters
    ----------
    learning_rate : float
        Step size α ∈ (0, 1].
    discount_factor : float
        Discount γ ∈ [0, 1].
    initial_exploration_rate : float
        Starting ε ∈ [0, 1].
    exploration_decay : float
        Multiplicative per-episode decay of ε, in (0, 1].
    min_exploration_rate : float
        Floor for ε, in [0, initial_exploration_rate].
    initial_q_value : float
        Value reported for (state, action) pairs never updated.

    Raises
    ------
    ConfigurationError
        If any value is outside its range. Nothing is clamped.
    """
    learning_rate: float
    discount_factor: float
    initial_exploration_rate: float
    exploration_decay: float
    min_exploration_rate: float
    initial_q_value: float

    def __post_init__(self) -> None:
        if not 0.0 < self.learning_rate <= 1.0:
            raise ConfigurationError(
                f"learning_rate must be in (0, 1], got {self.learning_rate}")
        if not 0.0 <= self.discount_factor <= 1.0:
            raise ConfigurationError(
                f"discount_factor must be in [0, 1], got {self.discount_factor}")
        if not 0.0 <= self.initial_exploration_rate <= 1.0:
            raise ConfigurationError(
                "initial_exploration_rate must be in [0, 1], "
                f"got {self.initial_exploration_rate}")
        if not 0.0 < self.exploration_decay <= 1.0:
            raise ConfigurationError(
                f"exploration_decay must be in (0, 1], got {self.exploration_decay}")
        if not 0.0 <= self.min_exploration_rate <= self.initial_exploration_rate:
            raise ConfigurationError(
                "min_exploration_rate must be in [0, initial_exploration_rate], "
                f"got {self.min_exploration_rate}")
        if not math.isfinite(self.initial_q_value):
            raise ConfigurationError(
                f"initial_q_value must be finite, got {self.initial_q_value}")


# =====================================================================
# Agent
# =====================================================================

class QLearningAgent:
    """
    Tabular Q-learning with ε-greedy exploration.

    The agent owns its table and its random generator; nothing is shared
    between agents. Knowledge can be pooled explicitly with
    `ActionValueTable.merge`.

    Parameters
    ----------
    config : AgentConfig
        Validated hyperparameters.
    seed : int or None
        Seed for the agent's exploration RNG.
    """

    def __init__(self, config: AgentConfig, seed: Optional[int] = None) -> None:
        self._config = config
        self._table = ActionValueTable(config.initial_q_value)
        self._exploration_rate: float = config.initial_exploration_rate
        self._training_episodes: int = 0
        self.rng: np.random.Generator = set_seed(seed)

    # ---------------------------------------------------------------------
    # Properties
    # ---------------------------------------------------------------------
    @property
    def config(self) -> AgentConfig:
        return self._config

    @property
    def table(self) -> ActionValueTable:
        return self._table

    @property
    def exploration_rate(self) -> float:
        return self._exploration_rate

    @property
    def training_episodes(self) -> int:
        """Number of completed episodes (calls to `decay_exploration`)."""
        return self._training_episodes

    # ---------------------------------------------------------------------
    # Acting & learning
    # ---------------------------------------------------------------------
    def choose_action(self, state: State,
                      available_actions: Sequence[Action]) -> Optional[Action]:
        """
        ε-greedy action selection.

        Returns
        -------
        Action or NO_ACTION
            `NO_ACTION` if `available_actions` is empty. Otherwise a uniformly
            random action with probability ε, else the table's best action.
        """
        if not available_actions:
            return NO_ACTION
        if self.rng.random() < self._exploration_rate:
            return available_actions[int(self.rng.integers(len(available_actions)))]
        return self._table.best_action(state, available_actions)

    def update(self, state: State, action: Action, reward: float,
               next_state: State, next_available_actions: Sequence[Action]) -> None:
        """
        One-step Q-learning update for a single transition.

        The bootstrap term is the greedy max over `next_available_actions`
        (off-policy), so an empty set bootstraps from the table default.
        """
        current = self._table.value(state, action)
        target = reward + self._config.discount_factor * self._table.max_value(
            next_state, next_available_actions)
        new_value = current + self._config.learning_rate * (target - current)
        self._table.set_value(state, action, new_value)

    def decay_exploration(self) -> None:
        """
        End-of-episode decay: ε <- max(ε_min, ε * decay).
        """
        self._training_episodes += 1
        self._exploration_rate = max(
            self._config.min_exploration_rate,
            self._exploration_rate * self._config.exploration_decay,
        )

    def greedy_policy(self) -> Policy:
        """
        Deterministic policy reading the agent's table.

        The returned callable takes `(state, available_actions)` and returns
        the best action, or `NO_ACTION` when none is available. It reads the
        live table, so later training is reflected.
        """
        table = self._table

        def policy(state: State, available_actions: Sequence[Action]) -> Optional[Action]:
            return table.best_action(state, available_actions)

        return policy

    def __repr__(self) -> str:
        return (f"QLearningAgent(epsilon={self._exploration_rate:.4f}, "
                f"episodes={self._training_episodes}, table={self._table!r})")
