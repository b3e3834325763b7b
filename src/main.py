"""Entry point for a headless match3 session.

Sets up the ECS world, event bus and systems, then lets a random player pick
productive swaps until no moves remain or the move budget runs out.
"""
import logging
import random
import sys

from match3.constants import GRID_COLS, GRID_ROWS
from match3.events.bus import EVENT_TICK, EVENT_TILE_CLICK, EventBus
from match3.systems.board import BoardSystem
from match3.systems.board_ops import find_valid_swaps, get_score, tile_grid
from match3.systems.game_flow_system import GameFlowSystem
from match3.systems.match import MatchSystem
from match3.systems.match_resolution import MatchResolutionSystem
from match3.world import create_world, get_game_state

logger = logging.getLogger("match3")

MAX_MOVES = 50
MAX_SETTLE_TICKS = 500


def settle(world, event_bus: EventBus) -> None:
    """Tick until the cascade finishes and no refill is pending."""
    state = get_game_state(world)
    for _ in range(MAX_SETTLE_TICKS):
        event_bus.emit(EVENT_TICK, dt=0.5)
        if not state.cascade_active:
            return


def main(seed: int | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    rng = random.Random(seed)
    event_bus = EventBus()
    world = create_world(rng=rng)
    BoardSystem(world, event_bus, GRID_ROWS, GRID_COLS)
    MatchSystem(world, event_bus)
    MatchResolutionSystem(world, event_bus)
    flow = GameFlowSystem(world, event_bus)
    flow.start()
    settle(world, event_bus)

    state = get_game_state(world)
    moves = 0
    while not state.game_over and moves < MAX_MOVES:
        swaps = find_valid_swaps(world)
        if not swaps:
            break
        src, dst = rng.choice(swaps)
        event_bus.emit(EVENT_TILE_CLICK, row=src[0], col=src[1])
        event_bus.emit(EVENT_TILE_CLICK, row=dst[0], col=dst[1])
        settle(world, event_bus)
        moves += 1

    for line in tile_grid(world):
        logger.info(" ".join(str(value) for value in line))
    logger.info("%d moves played, score %d", moves, get_score(world))
    return 0


if __name__ == "__main__":
    sys.exit(main(int(sys.argv[1]) if len(sys.argv) > 1 else None))
