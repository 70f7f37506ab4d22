"""
Package init - expose a clean, minimal API for end users.

Usage
-----
from tabular_q import QLearningAgent, AgentConfig, train_q_learning
from tabular_q import GridWorld, WorldSettings
from tabular_q import utils    # Optional: rollouts, evaluation, plots
"""

from .environment import Environment, Transition
from .q_table import ActionValueTable, NO_ACTION
from .agent import AgentConfig, ConfigurationError, QLearningAgent
from .training import TrainingResult, train_q_learning
from .gridworld import GridWorld, WorldSettings

# Expose utils as a module so users can do: from tabular_q import utils
from . import utils

__all__ = [
    "Environment",
    "Transition",
    "ActionValueTable",
    "NO_ACTION",
    "AgentConfig",
    "ConfigurationError",
    "QLearningAgent",
    "TrainingResult",
    "train_q_learning",
    "GridWorld",
    "WorldSettings",
    "utils",
]

__version__ = "0.1.0"
