"""High-level coordinator for starting and restarting a session."""
from __future__ import annotations

import logging

from esper import World

from match3.constants import STABILIZE_MAX_PASSES
from match3.events.bus import (
    EVENT_BOARD_RESET,
    EVENT_NEW_GAME_REQUEST,
    EVENT_SCORE_CHANGED,
    EventBus,
)
from match3.systems.board_ops import fill_board, get_score, reset_score, stabilize_board
from match3.world import get_game_state

logger = logging.getLogger(__name__)


class GameFlowSystem:
    """Prepares a match-free board at game start and on every restart request."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        max_passes: int | None = STABILIZE_MAX_PASSES,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.max_passes = max_passes
        self.event_bus.subscribe(EVENT_NEW_GAME_REQUEST, self._on_new_game)

    def start(self) -> int:
        """Stabilize the freshly seeded board without scoring; returns the re-roll passes."""
        return self._prepare_board(reason="start")

    def _on_new_game(self, sender, **kwargs) -> None:
        reason = kwargs.get("reason") or "restart"
        previous = get_score(self.world)
        reset_score(self.world)
        fill_board(self.world)
        if previous:
            self.event_bus.emit(EVENT_SCORE_CHANGED, score=0, delta=-previous)
        self._prepare_board(reason=reason)

    def _prepare_board(self, *, reason: str) -> int:
        passes = stabilize_board(self.world, max_passes=self.max_passes)
        state = get_game_state(self.world)
        state.game_over = False
        state.cascade_active = False
        state.cascade_depth = 0
        logger.info("board ready (%s) after %d re-roll passes", reason, passes)
        self.event_bus.emit(EVENT_BOARD_RESET, passes=passes, reason=reason)
        return passes
