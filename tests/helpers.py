from __future__ import annotations

import random
from typing import Sequence

from esper import World

from match3.events.bus import EVENT_TICK, EventBus
from match3.systems.board import BoardSystem
from match3.systems.board_ops import create_board, load_grid
from match3.systems.match import MatchSystem
from match3.systems.match_resolution import MatchResolutionSystem
from match3.world import create_world


def make_board(
    grid: Sequence[Sequence[int]] | None = None,
    *,
    rows: int | None = None,
    cols: int | None = None,
    kinds: int = 4,
    enforce_adjacent: bool = True,
    seed: int = 1234,
) -> World:
    """Build a world holding a board, optionally loaded from a hand-made grid of rows."""

    if grid is not None:
        rows = len(grid)
        cols = len(grid[0])
    world = create_world(rng=random.Random(seed))
    create_board(world, rows or 8, cols or 8, kinds=kinds, enforce_adjacent=enforce_adjacent)
    if grid is not None:
        load_grid(world, grid)
    return world


def start_session(grid: Sequence[Sequence[int]], *, seed: int = 1234):
    """Wire the board, match and resolution systems around a hand-made grid."""

    bus = EventBus()
    world = create_world(rng=random.Random(seed))
    board = BoardSystem(world, bus, len(grid), len(grid[0]))
    load_grid(world, grid)
    MatchSystem(world, bus)
    resolution = MatchResolutionSystem(world, bus)
    return bus, world, board, resolution


def drive_ticks(bus: EventBus, count: int = 10, dt: float = 0.5) -> None:
    for _ in range(count):
        bus.emit(EVENT_TICK, dt=dt)
