"""
q_table.py - Sparse action-value table keyed by (state, action).

The table stores only the pairs that have been written. Anything else reads
as the configured default, and reading never inserts, so lookups alone cannot
grow the table.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Hashable, Iterator, Mapping, Optional, Sequence, Tuple

State = Hashable
Action = Hashable

# Returned by `best_action` (and the agent) when there is nothing to choose.
NO_ACTION = None


class ActionValueTable:
    """
    Tabular Q(s, a) with a default value for unvisited pairs.

    Parameters
    ----------
    default_value : float
        Value reported for any (state, action) pair never written.
    """

    def __init__(self, default_value: float = 0.0) -> None:
        self._default: float = float(default_value)
        # state -> {action -> value}
        self._table: Dict[State, Dict[Action, float]] = {}

    @property
    def default_value(self) -> float:
        return self._default

    # --------------------------------------------------------
    # Point access
    # --------------------------------------------------------

    def value(self, state: State, action: Action) -> float:
        """
        Stored estimate for (state, action), or the default if unset.
        """
        row = self._table.get(state)
        if row is None:
            return self._default
        return row.get(action, self._default)

    def set_value(self, state: State, action: Action, value: float) -> None:
        """
        Overwrite (or create) the estimate for (state, action).
        """
        self._table.setdefault(state, {})[action] = float(value)

    # --------------------------------------------------------
    # Queries over a candidate set
    # --------------------------------------------------------

    def best_action(self, state: State,
                    candidate_actions: Sequence[Action]) -> Optional[Action]:
        """
        Argmax over `candidate_actions` with first-candidate tie-breaking.

        Parameters
        ----------
        state : State
        candidate_actions : Sequence[Action]
            Actions to choose from, in preference order for ties.

        Returns
        -------
        Action or NO_ACTION
            `NO_ACTION` when `candidate_actions` is empty.
        """
        best = NO_ACTION
        best_value = None
        for action in candidate_actions:
            v = self.value(state, action)
            # strict '>' keeps the earliest candidate on ties
            if best_value is None or v > best_value:
                best, best_value = action, v
        return best

    def max_value(self, state: State, candidate_actions: Sequence[Action]) -> float:
        """
        Largest estimate among `candidate_actions`; the default if empty.
        """
        if not candidate_actions:
            return self._default
        return max(self.value(state, a) for a in candidate_actions)

    def action_values(self, state: State) -> Mapping[Action, float]:
        """
        Read-only snapshot of every recorded entry for `state`.

        Actions that were never written are not included.
        """
        return MappingProxyType(dict(self._table.get(state, {})))

    # --------------------------------------------------------
    # Combining tables
    # --------------------------------------------------------

    def merge(self, other: "ActionValueTable", ratio: float) -> None:
        """
        Blend every entry of `other` into this table.

        For each recorded (s, a) in `other`:
            Q(s, a) <- Q(s, a) * (1 - ratio) + Q_other(s, a) * ratio
        where a missing local entry counts as this table's default.
        """
        for (state, action), incoming in other.items():
            current = self.value(state, action)
            self.set_value(state, action, current * (1.0 - ratio) + incoming * ratio)

    # --------------------------------------------------------
    # Inspection
    # --------------------------------------------------------

    def states(self) -> Iterator[State]:
        return iter(list(self._table))

    def items(self) -> Iterator[Tuple[Tuple[State, Action], float]]:
        for state, row in list(self._table.items()):
            for action, v in list(row.items()):
                yield (state, action), v

    def __len__(self) -> int:
        return sum(len(row) for row in self._table.values())

    def __contains__(self, key: object) -> bool:
        try:
            state, action = key  # type: ignore[misc]
        except (TypeError, ValueError):
            return False
        return action in self._table.get(state, {})

    def __repr__(self) -> str:
        return f"ActionValueTable(entries={len(self)}, default={self._default})"
