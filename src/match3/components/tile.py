from dataclasses import dataclass

from match3.constants import EMPTY_TILE

@dataclass(slots=True)
class TileKind:
    """Per-cell tile assignment.

    kind is an integer category in [0, Board.kinds) for a live tile, or EMPTY_TILE
    while the cell waits for a refill. The empty value never takes part in a match.
    """
    kind: int = EMPTY_TILE
