from __future__ import annotations

import logging
import random
from typing import Dict, Iterable, List, Sequence, Set, Tuple

from esper import World

from match3.components.board import Board
from match3.components.board_position import BoardPosition
from match3.components.score import Score
from match3.components.tile import TileKind
from match3.constants import (
    EMPTY_TILE,
    MIN_MATCH_LENGTH,
    POINTS_PER_TILE,
    STABILIZE_MAX_PASSES,
    TILE_KINDS,
)

Position = Tuple[int, int]

logger = logging.getLogger(__name__)


class OutOfBoundsError(ValueError):
    """Raised when a position lies outside [0, rows) x [0, cols)."""

    def __init__(self, pos, rows: int, cols: int):
        super().__init__(f"position {pos!r} outside {rows}x{cols} board")
        self.pos = pos


def get_rng(world: World) -> random.Random:
    rng = getattr(world, "random", None)
    if not isinstance(rng, random.Random):
        rng = random.Random()
        setattr(world, "random", rng)
    return rng


def create_board(
    world: World,
    rows: int,
    cols: int,
    *,
    kinds: int = TILE_KINDS,
    enforce_adjacent: bool = True,
) -> int:
    """Create the board entity plus one tile entity per cell, seeded at random.

    The fresh board may contain matches; stabilize_board is the caller's next step.
    """
    if rows <= 0 or cols <= 0:
        raise ValueError(f"board dimensions must be positive, got {rows}x{cols}")
    if kinds < 1:
        raise ValueError(f"need at least one tile kind, got {kinds}")
    board = Board(rows=rows, cols=cols, kinds=kinds, enforce_adjacent=enforce_adjacent)
    board_entity = world.create_entity(board, Score())
    rng = get_rng(world)
    for row in range(rows):
        for col in range(cols):
            ent = world.create_entity(
                BoardPosition(row=row, col=col),
                TileKind(kind=rng.randrange(kinds)),
            )
            board.cells[(row, col)] = ent
    logger.debug("created %dx%d board with %d kinds", rows, cols, kinds)
    return board_entity


def get_board(world: World) -> Board:
    for _, board in world.get_component(Board):
        return board
    raise RuntimeError("Board not found")


def board_dimensions(world: World) -> Tuple[int, int]:
    board = get_board(world)
    return board.rows, board.cols


def in_bounds(world: World, pos: Position) -> bool:
    board = get_board(world)
    row, col = pos
    return 0 <= row < board.rows and 0 <= col < board.cols


def _check(board: Board, pos: Position) -> None:
    row, col = pos
    if not (0 <= row < board.rows and 0 <= col < board.cols):
        raise OutOfBoundsError(pos, board.rows, board.cols)


def get_entity_at(world: World, row: int, col: int) -> int | None:
    return get_board(world).cells.get((row, col))


def _tile(world: World, board: Board, pos: Position) -> TileKind:
    # Lists such as [row, col] are accepted; the cell index is keyed by tuples.
    pos = tuple(pos)
    _check(board, pos)
    return world.component_for_entity(board.cells[pos], TileKind)


def get_tile(world: World, pos: Position) -> int:
    return _tile(world, get_board(world), pos).kind


def _check_value(board: Board, value: int) -> None:
    if value != EMPTY_TILE and not (0 <= value < board.kinds):
        raise ValueError(f"tile value {value!r} is neither a kind in [0, {board.kinds}) nor empty")


def set_tile(world: World, pos: Position, value: int) -> None:
    board = get_board(world)
    _check_value(board, value)
    _tile(world, board, pos).kind = value


def swap_tiles(world: World, a: Position, b: Position) -> None:
    """Exchange two cells unconditionally. Applying it twice restores the board."""
    board = get_board(world)
    tile_a = _tile(world, board, a)
    tile_b = _tile(world, board, b)
    tile_a.kind, tile_b.kind = tile_b.kind, tile_a.kind


def is_adjacent(a: Position, b: Position) -> bool:
    return abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1


def _collect_runs(values: Sequence[int], to_pos, matched: Set[Position]) -> None:
    """Mark every run of MIN_MATCH_LENGTH or more equal, non-empty values."""
    n = len(values)
    i = 0
    while i <= n - MIN_MATCH_LENGTH:
        value = values[i]
        if value == EMPTY_TILE or any(values[i + k] != value for k in range(1, MIN_MATCH_LENGTH)):
            i += 1
            continue
        end = i + MIN_MATCH_LENGTH
        while end < n and values[end] == value:
            end += 1
        for j in range(i, end):
            matched.add(to_pos(j))
        i = end


def _row_values(world: World, board: Board, row: int) -> List[int]:
    return [world.component_for_entity(board.cells[(row, c)], TileKind).kind for c in range(board.cols)]


def _col_values(world: World, board: Board, col: int) -> List[int]:
    return [world.component_for_entity(board.cells[(r, col)], TileKind).kind for r in range(board.rows)]


def _scan_row(world: World, board: Board, row: int, matched: Set[Position]) -> None:
    _check(board, (row, 0))
    _collect_runs(_row_values(world, board, row), lambda c: (row, c), matched)


def _scan_column(world: World, board: Board, col: int, matched: Set[Position]) -> None:
    _check(board, (0, col))
    _collect_runs(_col_values(world, board, col), lambda r: (r, col), matched)


def scan_row(world: World, row: int) -> List[Position]:
    """Return the matched positions along one row, left to right."""
    matched: Set[Position] = set()
    _scan_row(world, get_board(world), row, matched)
    return sorted(matched)


def scan_column(world: World, col: int) -> List[Position]:
    """Return the matched positions along one column, top to bottom."""
    matched: Set[Position] = set()
    _scan_column(world, get_board(world), col, matched)
    return sorted(matched)


def find_all_matches(world: World) -> List[Position]:
    """Scan every row then every column; positions shared by two runs appear once."""
    board = get_board(world)
    matched: Set[Position] = set()
    for row in range(board.rows):
        _scan_row(world, board, row, matched)
    for col in range(board.cols):
        _scan_column(world, board, col, matched)
    return sorted(matched)


def evaluate_swap(world: World, a: Position, b: Position) -> List[Position]:
    """Return the positions a swap of a and b would match, leaving the board untouched.

    With adjacency enforcement on, pairs that are not direct neighbours yield [] without
    touching the board. Otherwise the swap is applied, the rows and columns through both
    cells are scanned, and the swap is reverted before returning.
    """
    board = get_board(world)
    _check(board, a)
    _check(board, b)
    if board.enforce_adjacent and not is_adjacent(a, b):
        return []
    rows_differ = a[0] != b[0]
    cols_differ = a[1] != b[1]
    matched: Set[Position] = set()
    swap_tiles(world, a, b)
    try:
        _scan_row(world, board, a[0], matched)
        if not board.enforce_adjacent or rows_differ:
            _scan_row(world, board, b[0], matched)
        _scan_column(world, board, a[1], matched)
        if not board.enforce_adjacent or cols_differ:
            _scan_column(world, board, b[1], matched)
    finally:
        swap_tiles(world, a, b)
    return sorted(matched)


def collapse_columns(world: World, positions: Iterable[Position]) -> List[Position]:
    """Remove positions under gravity and return the slots left open at the top.

    Within each column the cleared cells are processed top to bottom, each one pulling
    every cell above it down by one. The top `count` cells of an affected column end up
    EMPTY_TILE and are returned as (0..count-1, col), columns in ascending order.
    Must run before fill_positions for the same match set.
    """
    board = get_board(world)
    by_col: Dict[int, List[int]] = {}
    for pos in {tuple(pos) for pos in positions}:
        _check(board, pos)
        by_col.setdefault(pos[1], []).append(pos[0])
    refill: List[Position] = []
    for col in sorted(by_col):
        cleared = sorted(by_col[col])
        column = [world.component_for_entity(board.cells[(r, col)], TileKind) for r in range(board.rows)]
        for row in cleared:
            for r in range(row, 0, -1):
                column[r].kind = column[r - 1].kind
            column[0].kind = EMPTY_TILE
        refill.extend((r, col) for r in range(len(cleared)))
    logger.debug("collapsed %d columns, %d slots to refill", len(by_col), len(refill))
    return refill


def fill_tile(world: World, pos: Position) -> None:
    board = get_board(world)
    _tile(world, board, pos).kind = get_rng(world).randrange(board.kinds)


def fill_positions(world: World, positions: Iterable[Position]) -> None:
    """Give each position an independent uniformly random kind."""
    board = get_board(world)
    rng = get_rng(world)
    tiles = [_tile(world, board, pos) for pos in positions]
    for tile in tiles:
        tile.kind = rng.randrange(board.kinds)


def fill_board(world: World) -> None:
    board = get_board(world)
    fill_positions(world, list(board.cells))


def stabilize_board(world: World, *, max_passes: int | None = STABILIZE_MAX_PASSES) -> int:
    """Re-roll matched cells in place until the board holds no match.

    No gravity and no scoring. Returns the number of re-roll passes; raises RuntimeError
    when max_passes is set and exceeded.
    """
    passes = 0
    matches = find_all_matches(world)
    while matches:
        if max_passes is not None and passes >= max_passes:
            raise RuntimeError(f"Board still has {len(matches)} matched cells after {passes} passes")
        fill_positions(world, matches)
        passes += 1
        matches = find_all_matches(world)
    logger.debug("board stabilized after %d passes", passes)
    return passes


def _neighbour_swaps(board: Board):
    for row in range(board.rows):
        for col in range(board.cols):
            if col + 1 < board.cols:
                yield (row, col), (row, col + 1)
            if row + 1 < board.rows:
                yield (row, col), (row + 1, col)


def has_possible_moves(world: World) -> bool:
    """True as soon as some right or lower neighbour swap would produce a match."""
    board = get_board(world)
    for a, b in _neighbour_swaps(board):
        if evaluate_swap(world, a, b):
            return True
    return False


def find_valid_swaps(world: World) -> List[Tuple[Position, Position]]:
    """Enumerate adjacent swaps that would produce a match."""
    board = get_board(world)
    return [(a, b) for a, b in _neighbour_swaps(board) if evaluate_swap(world, a, b)]


def get_score(world: World) -> int:
    for _, score in world.get_component(Score):
        return score.value
    raise RuntimeError("Score not found")


def update_score(world: World, match_count: int) -> int:
    """Add POINTS_PER_TILE for each matched position; zero or negative counts do nothing."""
    for _, score in world.get_component(Score):
        if match_count > 0:
            score.value += match_count * POINTS_PER_TILE
        return score.value
    raise RuntimeError("Score not found")


def reset_score(world: World) -> None:
    for _, score in world.get_component(Score):
        score.value = 0


def tile_grid(world: World) -> List[List[int]]:
    """Snapshot of the board as a list of rows."""
    board = get_board(world)
    return [_row_values(world, board, row) for row in range(board.rows)]


def load_grid(world: World, grid: Sequence[Sequence[int]]) -> None:
    """Overwrite every cell from a list of rows matching the board dimensions."""
    board = get_board(world)
    if len(grid) != board.rows or any(len(line) != board.cols for line in grid):
        raise ValueError(f"grid shape does not match {board.rows}x{board.cols} board")
    for line in grid:
        for value in line:
            _check_value(board, value)
    for row, line in enumerate(grid):
        for col, value in enumerate(line):
            _tile(world, board, (row, col)).kind = value
