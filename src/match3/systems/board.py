import logging
from typing import Optional, Tuple

from esper import World

from match3.constants import EMPTY_TILE, GRID_COLS, GRID_ROWS, TILE_KINDS
from match3.events.bus import (
    EventBus,
    EVENT_BOARD_RESET,
    EVENT_TILE_CLICK,
    EVENT_TILE_DESELECTED,
    EVENT_TILE_SELECTED,
    EVENT_TILE_SWAP_REQUEST,
)
from match3.systems import board_ops
from match3.world import get_game_state

logger = logging.getLogger(__name__)


class BoardSystem:
    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        rows: int = GRID_ROWS,
        cols: int = GRID_COLS,
        *,
        kinds: int = TILE_KINDS,
        enforce_adjacent: bool = True,
    ):
        self.world = world
        self.event_bus = event_bus
        # Board entity also carries the Score component.
        self.board_entity = board_ops.create_board(
            world, rows, cols, kinds=kinds, enforce_adjacent=enforce_adjacent
        )
        self.selected: Optional[Tuple[int, int]] = None
        self.event_bus.subscribe(EVENT_TILE_CLICK, self.on_tile_click)
        self.event_bus.subscribe(EVENT_BOARD_RESET, self.on_board_reset)

    def on_tile_click(self, sender, **kwargs):
        row = kwargs.get('row')
        col = kwargs.get('col')
        if row is None or col is None:
            return
        pos = (row, col)
        if not board_ops.in_bounds(self.world, pos):
            return
        state = get_game_state(self.world)
        # Input is locked while a cascade resolves and once the game is over.
        if state.game_over or state.cascade_active:
            return
        if board_ops.get_tile(self.world, pos) == EMPTY_TILE:
            return
        if self.selected is None:
            self.selected = pos
            self.event_bus.emit(EVENT_TILE_SELECTED, row=row, col=col)
            return
        src = self.selected
        self.selected = None
        self.event_bus.emit(EVENT_TILE_DESELECTED, reason='swap', prev_row=src[0], prev_col=src[1])
        logger.debug("swap requested %s -> %s", src, pos)
        self.event_bus.emit(EVENT_TILE_SWAP_REQUEST, src=src, dst=pos)

    def on_board_reset(self, sender, **kwargs):
        prev = self.selected
        if prev is not None:
            self.selected = None
            self.event_bus.emit(EVENT_TILE_DESELECTED, reason='reset', prev_row=prev[0], prev_col=prev[1])

    @staticmethod
    def is_adjacent(a: Tuple[int, int], b: Tuple[int, int]) -> bool:
        return board_ops.is_adjacent(a, b)
