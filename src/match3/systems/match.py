from typing import Tuple, List
from match3.events.bus import EventBus, EVENT_TILE_SWAP_REQUEST, EVENT_TILE_SWAP_VALID, EVENT_TILE_SWAP_INVALID
from match3.systems.board_ops import evaluate_swap, in_bounds
from esper import World

class MatchSystem:
    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)

    def on_swap_request(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if not src or not dst:
            return
        positions = self.matches_for_swap(src, dst)
        if positions:
            self.event_bus.emit(EVENT_TILE_SWAP_VALID, src=src, dst=dst, positions=positions)
        else:
            self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst)

    def matches_for_swap(self, a: Tuple[int,int], b: Tuple[int,int]) -> List[Tuple[int,int]]:
        # Off-board requests are answered as invalid rather than raised back into the bus.
        if not (in_bounds(self.world, a) and in_bounds(self.world, b)):
            return []
        return evaluate_swap(self.world, a, b)
