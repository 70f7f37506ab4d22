"""
environment.py - The contract every environment must satisfy.

The learning core never looks inside an environment: it only calls the five
operations of `Environment`. States and actions are opaque; the only thing
required of them is value equality and a stable hash, so plain tuples, ints,
strings or frozen dataclasses all work.

This file exposes:
    - Transition: the record produced by one environment step
    - Environment: the structural protocol consumed by the training loop
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable, Protocol, Sequence, runtime_checkable

State = Hashable
Action = Hashable


@dataclass(frozen=True)
class Transition:
    """
    Outcome of a single environment step.

    Parameters
    ----------
    state : State
        State the action was taken from.
    action : Action
        Action that was applied.
    reward : float
        Reward received for the transition.
    next_state : State
        State reached after the action.
    terminal : bool
        True iff the episode ended with this transition.
    """
    state: Any
    action: Any
    reward: float
    next_state: Any
    terminal: bool


@runtime_checkable
class Environment(Protocol):
    """
    Capability interface for anything the agent can learn from.

    Notes
    -----
    - `available_actions(state)` must be non-empty for every non-terminal
      state; it may be empty only for a terminal state.
    - `step(action)` applies exactly one transition from the current internal
      state; the returned `next_state` equals `current_state()` afterwards.
    - `is_terminal(state)` is a pure predicate.
    """

    def current_state(self) -> State:
        ...

    def available_actions(self, state: State) -> Sequence[Action]:
        ...

    def step(self, action: Action) -> Transition:
        ...

    def reset(self) -> State:
        ...

    def is_terminal(self, state: State) -> bool:
        ...
