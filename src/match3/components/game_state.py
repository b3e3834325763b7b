"""Game state resource shared by the controller systems."""
from dataclasses import dataclass


@dataclass
class GameState:
    """Singleton component tracking cascade progress and the game-over flag."""
    game_over: bool = False
    cascade_active: bool = False
    cascade_depth: int = 0
