"""
config.py - YAML experiment configuration.

An experiment file has three sections:

    world:      # WorldSettings fields
      width: 5
      goal: [4, 4]
      obstacles: [[1, 1], [2, 2]]
    agent:      # AgentConfig fields, plus an optional `seed`
      learning_rate: 0.1
      ...
    training:
      episodes: 1000
      max_steps_per_episode: 100
      demo_steps: 20

Omitted `world` and `training` keys fall back to their defaults. The
`agent` section must list every AgentConfig field.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .agent import AgentConfig, ConfigurationError
from .gridworld import WorldSettings

logger = logging.getLogger(__name__)

_CELL_KEYS = ("start", "goal")


@dataclass
class ExperimentConfig:
    """
    Everything needed to build and train one GridWorld experiment.

    Parameters
    ----------
    world : WorldSettings
    agent : AgentConfig
    agent_seed : int or None
        Seed for the agent's exploration RNG.
    episodes : int
        Number of training episodes.
    max_steps_per_episode : int
        Step cap per training episode.
    demo_steps : int
        Step cap for the greedy replay after training.
    """
    agent: AgentConfig
    world: WorldSettings = field(default_factory=WorldSettings)
    agent_seed: Optional[int] = None
    episodes: int = 1000
    max_steps_per_episode: int = 100
    demo_steps: int = 20

    @classmethod
    def default(cls) -> "ExperimentConfig":
        """The reference 5x5 demo setup."""
        return cls(agent=AgentConfig(
            learning_rate=0.1,
            discount_factor=0.9,
            initial_exploration_rate=1.0,
            exploration_decay=0.995,
            min_exploration_rate=0.01,
            initial_q_value=0.0,
        ), world=WorldSettings(random_start=True))


def _check_keys(section: str, data: Dict[str, Any], allowed) -> None:
    unknown = set(data) - set(allowed)
    if unknown:
        raise ConfigurationError(
            f"Unknown key(s) in '{section}': {', '.join(sorted(map(str, unknown)))}")


def _training_from_dict(data: Dict[str, Any]) -> Dict[str, int]:
    _check_keys("training", data, ["episodes", "max_steps_per_episode", "demo_steps"])
    values = {}
    for key, v in data.items():
        # bool is an int subclass; fractional floats would be truncated
        if isinstance(v, bool) or not (
                isinstance(v, int) or (isinstance(v, float) and v.is_integer())):
            raise ConfigurationError(f"Training setting '{key}' must be an integer, got {v!r}")
        values[key] = int(v)
    return values


def _seed_from_dict(data: Dict[str, Any]) -> Optional[int]:
    seed = data.get("seed")
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        raise ConfigurationError(f"Agent seed must be an integer or null, got {seed!r}")
    return seed


def _world_from_dict(data: Dict[str, Any]) -> WorldSettings:
    _check_keys("world", data, [f.name for f in fields(WorldSettings)])
    kwargs = dict(data)
    for key in _CELL_KEYS:
        if key in kwargs:
            kwargs[key] = tuple(kwargs[key])
    if "obstacles" in kwargs:
        kwargs["obstacles"] = tuple(tuple(cell) for cell in kwargs["obstacles"] or ())
    return WorldSettings(**kwargs)


def _agent_from_dict(data: Dict[str, Any]) -> AgentConfig:
    names = [f.name for f in fields(AgentConfig)]
    _check_keys("agent", data, names + ["seed"])
    missing = [n for n in names if n not in data]
    if missing:
        raise ConfigurationError(f"Missing agent setting(s): {', '.join(missing)}")
    try:
        values = {n: float(data[n]) for n in names}
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid agent setting: {exc}") from exc
    return AgentConfig(**values)


def config_from_dict(raw: Optional[Dict[str, Any]]) -> ExperimentConfig:
    """
    Build an ExperimentConfig from an already-parsed mapping.

    Raises
    ------
    ConfigurationError
        On unknown sections/keys, missing agent settings or invalid values.
    """
    raw = raw or {}
    _check_keys("<root>", raw, ["world", "agent", "training"])
    if "agent" not in raw:
        raise ConfigurationError("Missing 'agent' section.")

    agent_data = raw["agent"] or {}
    training = _training_from_dict(raw.get("training") or {})

    try:
        world = _world_from_dict(raw.get("world") or {})
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid world settings: {exc}") from exc

    return ExperimentConfig(
        agent=_agent_from_dict(agent_data),
        world=world,
        agent_seed=_seed_from_dict(agent_data),
        **training,
    )


def load_config(path: Union[str, Path]) -> ExperimentConfig:
    """
    Load and validate a YAML experiment file.

    Parameters
    ----------
    path : str or Path

    Returns
    -------
    ExperimentConfig
    """
    logger.info("Loading configuration from: %s", path)
    with open(path, "r") as f:
        raw = yaml.safe_load(f)
    cfg = config_from_dict(raw)
    logger.debug("Configuration loaded: %s", cfg)
    return cfg
