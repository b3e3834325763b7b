import random

from esper import World

from match3.components.game_state import GameState


def create_world(*, rng: random.Random | None = None) -> World:
    """Create an empty world carrying the shared random source and game state.

    The board itself is added by BoardSystem (or board_ops.create_board).
    """
    world = World()
    setattr(world, "random", rng or random.Random())

    # Register the global game state resource.
    state_entity = world.create_entity()
    world.add_component(state_entity, GameState())
    return world


def get_game_state(world: World) -> GameState:
    """Return the shared GameState component, creating it if absent."""
    existing = list(world.get_component(GameState))
    if existing:
        return existing[0][1]
    world.create_entity(GameState())
    return list(world.get_component(GameState))[0][1]
