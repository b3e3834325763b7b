import logging
from typing import List, Tuple
from esper import World
from match3.events.bus import (EventBus, EVENT_TILE_SWAP_VALID, EVENT_TILE_SWAP_FINALIZE, EVENT_MATCH_FOUND,
                               EVENT_MATCH_CLEARED, EVENT_GRAVITY_APPLIED, EVENT_REFILL_COMPLETED,
                               EVENT_CASCADE_STEP, EVENT_CASCADE_COMPLETE, EVENT_SCORE_CHANGED,
                               EVENT_GAME_OVER, EVENT_BOARD_RESET, EVENT_TICK)
from match3.systems.board_ops import (collapse_columns, fill_positions, find_all_matches,
                                      get_score, has_possible_moves, swap_tiles, update_score)
from match3.world import get_game_state

logger = logging.getLogger(__name__)


class MatchResolutionSystem:
    """Drives a match from a committed swap through collapse, refill and follow-up cascades.

    Each tick either fills the slots opened by the previous collapse or, when nothing is
    pending, re-scans the board: new matches start another cascade step, a quiet board
    ends the cascade and checks whether any move is left.
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_TILE_SWAP_VALID, self.on_swap_valid)
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)
        self.event_bus.subscribe(EVENT_BOARD_RESET, self.on_board_reset)
        self.pending_refill: List[Tuple[int, int]] = []

    def on_swap_valid(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        positions = kwargs.get('positions') or []
        if not src or not dst or not positions:
            return
        state = get_game_state(self.world)
        if state.game_over or state.cascade_active:
            return
        # evaluate_swap always reverts, so the swap is committed here.
        swap_tiles(self.world, src, dst)
        self.event_bus.emit(EVENT_TILE_SWAP_FINALIZE, src=src, dst=dst)
        self._resolve(positions, reason="swap")

    def on_tick(self, sender, **kwargs):
        if self.pending_refill:
            new_tiles = self.pending_refill
            self.pending_refill = []
            fill_positions(self.world, new_tiles)
            logger.debug("refilled %d tiles", len(new_tiles))
            self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=new_tiles)
            return
        state = get_game_state(self.world)
        matches = find_all_matches(self.world)
        if matches:
            self._resolve(matches, reason="cascade")
            return
        if state.cascade_active:
            depth = state.cascade_depth
            state.cascade_active = False
            state.cascade_depth = 0
            self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=depth)
        if not state.game_over and not has_possible_moves(self.world):
            state.game_over = True
            score = get_score(self.world)
            logger.info("no moves left, game over with score %d", score)
            self.event_bus.emit(EVENT_GAME_OVER, score=score)

    def on_board_reset(self, sender, **kwargs):
        self.pending_refill = []

    def _resolve(self, positions: List[Tuple[int, int]], reason: str):
        positions = sorted(set(positions))
        state = get_game_state(self.world)
        state.cascade_active = True
        state.cascade_depth += 1
        before = get_score(self.world)
        score = update_score(self.world, len(positions))
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=score, delta=score - before)
        self.event_bus.emit(EVENT_MATCH_FOUND, positions=positions, size=len(positions), reason=reason)
        self.event_bus.emit(EVENT_CASCADE_STEP, depth=state.cascade_depth, positions=positions)
        # Collapse strictly before the refill on the next tick.
        refill = collapse_columns(self.world, positions)
        logger.debug("%s cleared %d tiles at depth %d", reason, len(positions), state.cascade_depth)
        self.event_bus.emit(EVENT_MATCH_CLEARED, positions=positions)
        self.event_bus.emit(EVENT_GRAVITY_APPLIED, refill=refill)
        self.pending_refill = refill
