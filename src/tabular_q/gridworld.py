"""
GridWorld: a small deterministic 2D environment implementing `Environment`.

- Fixed layout (obstacles, start, goal) with three reward scalars
- Moves off the grid are blocked; moves into an obstacle are penalised
  but still entered
- Optional random start placement on reset
- Coordinates are (row, col) with (0, 0) at the top-left cell.

This file exposes:
    - WorldSettings: dataclass with environment configuration
    - GridWorld: the environment class
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Dict, Iterable, Optional

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.colors import ListedColormap, BoundaryNorm

from .environment import Transition

Cell = Tuple[int, int]

# Possible actions the agent can take in the grid world (↑→↓←)
# Encoded as: 0=Up, 1=Right, 2=Down, 3=Left
MOVES: Dict[int, Tuple[int, int]] = {
    0: (-1, 0),  # Up
    1: (0, 1),   # Right
    2: (1, 0),   # Down
    3: (0, -1)   # Left
}

ACTION_NAMES: Dict[int, str] = {0: "UP", 1: "RIGHT", 2: "DOWN", 3: "LEFT"}


@dataclass(frozen=True)
class WorldSettings:
    """
    WorldSettings
    -------------
    Immutable configuration for the GridWorld environment.

    Parameters
    ----------
    width : int
        Number of columns in the grid.
    height : int
        Number of rows in the grid.
    start : tuple[int, int]
        Start cell (row, col).
    goal : tuple[int, int]
        Goal cell (row, col). Reaching it ends the episode.
    obstacles : tuple[tuple[int, int]], optional
        Cells that cost `obstacle_penalty` to enter.
    goal_reward : float
        Reward for reaching the goal.
    obstacle_penalty : float
        Reward (negative) for entering an obstacle or bumping the border.
    step_penalty : float
        Reward applied for any other move (usually negative).
    random_start : bool
        If True, reset() places the agent on a random cell that is neither
        the goal nor an obstacle; otherwise it returns to `start`.
    seed : int or None
        Seed for the RNG used by the environment.
    """
    width: int = 5
    height: int = 5
    start: Cell = (0, 0)
    goal: Cell = (4, 4)

    obstacles: Tuple[Cell, ...] = ((1, 1), (2, 2), (1, 3))

    goal_reward: float = 10.0
    obstacle_penalty: float = -5.0
    step_penalty: float = -0.1     # small penalty every step
    random_start: bool = False
    seed: Optional[int] = 0


class GridWorld:
    """
    A deterministic 2D grid where an agent moves towards a goal among obstacles.

    The agent moves in one of four directions: up, right, down, or left.
    Only moves that stay on the grid are offered by `available_actions`.
    If a move would still leave the grid the agent stays put and receives
    `obstacle_penalty`. Entering an obstacle cell also costs
    `obstacle_penalty` but the agent does move into it.

    Notes
    -----
    - Coordinate system uses (row, col) with (0, 0) at the top-left.
    - Actions are encoded as: 0=Up, 1=Right, 2=Down, 3=Left.
    - States are (row, col) tuples.
    """

    # ---------------------------------------------------------------------
    # Construction & basic properties
    # ---------------------------------------------------------------------
    def __init__(self, settings: WorldSettings) -> None:
        """
        Initialize a GridWorld instance.

        Parameters
        ----------
        settings : WorldSettings
            Immutable configuration for the environment. See `WorldSettings`.

        Raises
        ------
        ValueError
            If start or goal is off the grid or on an obstacle, or the grid
            has no free cell to start from.
        """
        self.settings: WorldSettings = settings
        self.rng: np.random.Generator = np.random.default_rng(settings.seed)

        self.rows: int = settings.height
        self.cols: int = settings.width

        self.num_states: int = self.rows * self.cols
        self.num_actions: int = len(MOVES)

        # Validate critical cells
        if self.rows < 1 or self.cols < 1:
            raise ValueError(f"Grid must be at least 1x1, got {self.rows}x{self.cols}.")
        for cell in (settings.start, settings.goal):
            self._ensure_in_bounds(cell)
        if settings.start in settings.obstacles:
            raise ValueError("Start cannot be an obstacle.")
        if settings.goal in settings.obstacles:
            raise ValueError("Goal cannot be an obstacle.")

        # Cells reset() may place the agent on when random_start is set
        self._free_cells: Tuple[Cell, ...] = tuple(
            (r, c)
            for r in range(self.rows)
            for c in range(self.cols)
            if (r, c) != settings.goal and (r, c) not in settings.obstacles
        )
        if settings.random_start and not self._free_cells:
            raise ValueError("random_start needs at least one free cell.")

        self.state: Cell = settings.start

    # --------------------------------------------------------
    # Cell helpers
    # --------------------------------------------------------

    def _in_bounds(self, pos: Cell) -> bool:
        r, c = pos
        return 0 <= r < self.rows and 0 <= c < self.cols

    def _ensure_in_bounds(self, pos: Cell) -> None:
        if not self._in_bounds(pos):
            raise ValueError(f"Out-of-bounds position: {pos}")

    def _is_obstacle(self, pos: Cell) -> bool:
        return pos in self.settings.obstacles

    # --------------------------------------------------------
    # Environment API
    # -------------------------------------------------------

    def current_state(self) -> Cell:
        return self.state

    def available_actions(self, state: Cell) -> Tuple[int, ...]:
        """
        Moves that keep the agent on the grid from `state`.

        Returns
        -------
        tuple[int, ...]
            Action codes in fixed order (Up, Right, Down, Left); empty for
            the goal cell.
        """
        if self.is_terminal(state):
            return ()
        return tuple(
            a for a, (dr, dc) in MOVES.items()
            if self._in_bounds((state[0] + dr, state[1] + dc))
        )

    def reset(self) -> Cell:
        """
        Reset the environment and return the new start state.
        """
        if self.settings.random_start:
            self.state = self._free_cells[int(self.rng.integers(len(self._free_cells)))]
        else:
            self.state = self.settings.start
        return self.state

    def step(self, action: int) -> Transition:
        """
        Execute one action in the environment.

        Reward is `step_penalty` by default, `obstacle_penalty` when the move
        leaves the grid (agent stays) or enters an obstacle (agent moves in),
        and `goal_reward` when reaching the goal, which ends the episode.

        Raises
        ------
        ValueError
            If `action` is not one of {0, 1, 2, 3}.
        """
        if action not in MOVES:
            raise ValueError(f"Invalid action: {action}")

        prev = self.state
        dr, dc = MOVES[action]
        candidate = (prev[0] + dr, prev[1] + dc)

        reward: float = self.settings.step_penalty
        terminal: bool = False

        if not self._in_bounds(candidate):
            next_pos = prev
            reward = self.settings.obstacle_penalty
        elif self._is_obstacle(candidate):
            next_pos = candidate
            reward = self.settings.obstacle_penalty
        elif candidate == self.settings.goal:
            next_pos = candidate
            reward = self.settings.goal_reward
            terminal = True
        else:
            next_pos = candidate

        self.state = next_pos
        return Transition(prev, action, reward, next_pos, terminal)

    def is_terminal(self, state: Cell) -> bool:
        """
        True iff `state` is the goal cell.
        """
        return tuple(state) == self.settings.goal

    def sample_action(self) -> int:
        """
        Sample a random action uniformly from {0, 1, 2, 3}.
        """
        return int(self.rng.integers(0, self.num_actions))

    def seed(self, seed: Optional[int] = None) -> None:
        """
        Reseed the environment's RNG.

        Parameters
        ----------
        seed : int or None
            New seed. If None, a random seed is drawn from OS entropy.
        """
        self.rng = np.random.default_rng(seed)

    # ---------------------------------------------------------------------
    # Rendering (matplotlib)
    # ---------------------------------------------------------------------

    def render(self, path: Optional[Iterable[Cell]] = None,
               show_agent: bool = True,
               title: str = "GridWorld Environment") -> None:
        """
        Render the environment with matplotlib.

        Parameters
        ----------
        path : Iterable[tuple[int, int]] or None
            Optional sequence of (row, col) cells to draw as a path.
        show_agent : bool
            If True, draws the current agent position.
        title : str
            Figure title.
        """
        grid = np.zeros((self.rows, self.cols))
        for (r, c) in self.settings.obstacles:
            grid[r, c] = 1
        gr, gc = self.settings.goal
        grid[gr, gc] = 2

        colors = [
            '#eef8ea',  # 0 empty
            '#ef9a9a',  # 1 obstacles
            '#66bb6a',  # 2 goal
        ]
        cmap = ListedColormap(colors)
        norm = BoundaryNorm([0, 1, 2, 3], cmap.N)

        fig, ax = plt.subplots(figsize=(6.5, 6.5))
        ax.imshow(grid, cmap=cmap, norm=norm, origin='lower',
                  extent=[0, self.cols, 0, self.rows], interpolation="none")

        # Put (0, 0) visually at top-left
        ax.invert_yaxis()

        ax.set_xticks(np.arange(0, self.cols + 1, 1))
        ax.set_yticks(np.arange(0, self.rows + 1, 1))
        ax.grid(True, which='major', color='k', linewidth=0.4, alpha=0.15)
        ax.set_xlim(0, self.cols)
        ax.set_ylim(self.rows, 0)
        ax.set_aspect('equal')
        ax.tick_params(axis='both', which='major',
                       labelbottom=False, labelleft=False, length=0)

        sr, sc = self.settings.start
        ax.scatter(sc + 0.5, sr + 0.5, s=180, marker='D',
                   facecolors='#4fc3f7', edgecolors='black', label='Start', zorder=5)

        if show_agent:
            ar, ac = self.state
            ax.scatter(ac + 0.5, ar + 0.5, s=220, marker='o',
                       facecolors='#1565c0', edgecolors='black', label='Agent', zorder=6)

        ax.scatter(gc + 0.5, gr + 0.5, s=180, marker='*',
                   facecolors="#66bb6a", edgecolors='black', label="Goal", zorder=6)

        if path is not None:
            path = list(path)
            if len(path) > 1:
                rows, cols = zip(*path)
                xs = np.asarray(cols, dtype=float) + 0.5
                ys = np.asarray(rows, dtype=float) + 0.5
                ax.plot(xs, ys, linewidth=3.2, label='Path', zorder=4)

        ax.set_title(title, fontsize=16, pad=10)
        ax.legend(bbox_to_anchor=(1.02, 1), borderaxespad=0., labelspacing=1,
                  loc='upper left', frameon=True, fontsize=12)
        plt.tight_layout()
        plt.show()

