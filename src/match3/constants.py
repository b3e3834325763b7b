GRID_ROWS = 8
GRID_COLS = 8

# Tile kinds are the integers 0..TILE_KINDS-1; EMPTY_TILE marks a cleared slot awaiting refill.
TILE_KINDS = 4
EMPTY_TILE = -1

# Shortest run along a row or column that counts as a match.
MIN_MATCH_LENGTH = 3
POINTS_PER_TILE = 100

# Upper bound on re-roll passes when stabilizing a fresh board (None = unbounded).
STABILIZE_MAX_PASSES = None
