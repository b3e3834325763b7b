from dataclasses import dataclass, field
from typing import Dict, Tuple

@dataclass(slots=True)
class Board:
    rows: int
    cols: int
    kinds: int = 4
    enforce_adjacent: bool = True
    # (row, col) -> tile entity; filled once when the board is created.
    cells: Dict[Tuple[int, int], int] = field(default_factory=dict)
