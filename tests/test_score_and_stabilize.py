import pytest

from match3.systems.board_ops import (
    find_all_matches,
    get_score,
    reset_score,
    stabilize_board,
    tile_grid,
    update_score,
)
from tests.helpers import make_board


def test_update_score_zero_is_noop():
    world = make_board(rows=3, cols=3)
    assert update_score(world, 0) == 0
    assert get_score(world) == 0


def test_update_score_adds_hundred_per_tile():
    world = make_board(rows=3, cols=3)
    update_score(world, 3)
    assert get_score(world) == 300
    update_score(world, 4)
    assert get_score(world) == 700


def test_negative_count_is_ignored():
    world = make_board(rows=3, cols=3)
    update_score(world, 2)
    update_score(world, -5)
    assert get_score(world) == 200


def test_reset_score():
    world = make_board(rows=3, cols=3)
    update_score(world, 5)
    reset_score(world)
    assert get_score(world) == 0


@pytest.mark.parametrize("seed", range(25))
def test_stabilize_small_board_converges(seed):
    world = make_board(rows=4, cols=4, seed=seed)
    stabilize_board(world, max_passes=1000)
    assert find_all_matches(world) == []
    assert get_score(world) == 0


def test_stabilize_full_size_board():
    world = make_board(rows=8, cols=8, seed=42)
    stabilize_board(world, max_passes=1000)
    assert find_all_matches(world) == []


def test_stabilize_rerolls_only_matched_cells():
    grid = [
        [1, 1, 1, 0],
        [0, 2, 3, 1],
        [2, 3, 0, 2],
        [3, 0, 1, 3],
    ]
    world = make_board(grid)
    passes = stabilize_board(world, max_passes=1000)
    assert passes >= 1
    after = tile_grid(world)
    assert after[1:] == grid[1:]


def test_stable_board_needs_no_passes():
    world = make_board([
        [0, 1, 2],
        [1, 2, 0],
        [2, 0, 1],
    ])
    assert stabilize_board(world) == 0


def test_stabilize_pass_cap_raises():
    # A single kind can never be stabilized.
    world = make_board(rows=3, cols=3, kinds=1)
    with pytest.raises(RuntimeError):
        stabilize_board(world, max_passes=5)
