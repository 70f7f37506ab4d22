"""
tests/test_gridworld.py

Unit tests for the sample GridWorld environment.

These tests verify:
- Correct handling of dimensions and the default layout
- Validation of start/goal cells
- Available actions near borders and at the goal
- Step dynamics: plain moves, border bumps, obstacle entry, goal
- Reset behaviour with fixed and random start placement
- Seeded reproducibility of the environment RNG
"""

import pytest

from tabular_q import GridWorld, WorldSettings
from tabular_q.environment import Transition


# =====================================================================
# Helper: small clean world
# =====================================================================

def make_world(
    width=3,
    height=3,
    start=(1, 1),
    goal=(0, 0),
    obstacles=(),
    random_start=False,
    seed=0,
) -> GridWorld:
    """
    Construct a small GridWorld with consistent rewards for reproducible tests.
    """
    settings = WorldSettings(
        width=width,
        height=height,
        start=start,
        goal=goal,
        obstacles=obstacles,
        goal_reward=10.0,
        obstacle_penalty=-5.0,
        step_penalty=-0.1,
        random_start=random_start,
        seed=seed,
    )
    return GridWorld(settings)


# =====================================================================
# Basic environment properties
# =====================================================================

def test_default_settings_match_reference_demo():
    settings = WorldSettings()
    env = GridWorld(settings)

    assert (env.rows, env.cols) == (5, 5)
    assert env.num_states == 25
    assert env.num_actions == 4
    assert settings.goal == (4, 4)
    assert set(settings.obstacles) == {(1, 1), (2, 2), (1, 3)}


@pytest.mark.parametrize("kwargs", [
    {"start": (3, 0)},
    {"goal": (0, 5)},
    {"start": (1, 1), "obstacles": ((1, 1),)},
    {"goal": (0, 0), "obstacles": ((0, 0),)},
])
def test_invalid_layout_raises(kwargs):
    with pytest.raises(ValueError):
        make_world(**kwargs)


# =====================================================================
# Available actions
# =====================================================================

def test_available_actions_exclude_off_grid_moves():
    env = make_world(goal=(2, 2))

    assert env.available_actions((0, 0)) == (1, 2)        # Right, Down
    assert env.available_actions((1, 1)) == (0, 1, 2, 3)
    assert env.available_actions((2, 0)) == (0, 1)        # Up, Right


def test_available_actions_empty_at_goal():
    env = make_world(goal=(0, 0))
    assert env.available_actions((0, 0)) == ()


def test_obstacles_remain_enterable():
    env = make_world(start=(1, 0), goal=(0, 0), obstacles=((1, 1),))
    assert 1 in env.available_actions((1, 0))


# =====================================================================
# Step dynamics
# =====================================================================

def test_step_simple_move():
    env = make_world(start=(1, 1), goal=(0, 0))
    env.reset()

    t = env.step(1)  # Right
    assert isinstance(t, Transition)
    assert t == Transition((1, 1), 1, -0.1, (1, 2), False)
    assert env.current_state() == (1, 2)


def test_step_off_grid_stays_with_penalty():
    env = make_world(start=(0, 1), goal=(2, 2))
    env.reset()

    t = env.step(0)  # Up, off the grid
    assert t.next_state == (0, 1)
    assert t.reward == -5.0
    assert t.terminal is False
    assert env.current_state() == (0, 1)


def test_step_into_obstacle_moves_with_penalty():
    env = make_world(start=(1, 0), goal=(0, 0), obstacles=((1, 1),))
    env.reset()

    t = env.step(1)  # Right, into the obstacle
    assert t.next_state == (1, 1)
    assert t.reward == -5.0
    assert t.terminal is False
    assert env.current_state() == (1, 1)


def test_reaching_goal_gives_goal_reward_and_terminates():
    env = make_world(width=3, height=1, start=(0, 0), goal=(0, 1))
    env.reset()

    t = env.step(1)
    assert t.next_state == (0, 1)
    assert t.reward == 10.0
    assert t.terminal is True
    assert env.is_terminal(env.current_state())


def test_invalid_action_raises():
    env = make_world()
    env.reset()
    with pytest.raises(ValueError):
        env.step(7)


def test_is_terminal_only_for_goal():
    env = make_world(goal=(0, 2), obstacles=((1, 2),))
    assert env.is_terminal((0, 2))
    assert env.is_terminal((1, 2)) is False
    assert env.is_terminal((1, 1)) is False


# =====================================================================
# Reset & RNG
# =====================================================================

def test_reset_returns_fixed_start():
    env = make_world(start=(2, 1), goal=(0, 0))
    env.step(0)
    assert env.reset() == (2, 1)
    assert env.current_state() == (2, 1)


def test_random_start_avoids_goal_and_obstacles():
    env = make_world(goal=(0, 0), obstacles=((1, 1), (2, 2)),
                     random_start=True, seed=3)
    seen = {env.reset() for _ in range(300)}

    assert (0, 0) not in seen
    assert (1, 1) not in seen
    assert (2, 2) not in seen
    assert len(seen) == 9 - 3


def test_random_start_is_reproducible_under_seed():
    env1 = make_world(random_start=True, seed=11)
    env2 = make_world(random_start=True, seed=11)

    starts1 = [env1.reset() for _ in range(20)]
    starts2 = [env2.reset() for _ in range(20)]
    assert starts1 == starts2


def test_sample_action_range():
    env = make_world()
    env.seed(123)

    actions = [env.sample_action() for _ in range(100)]
    assert all(0 <= a < 4 for a in actions)
