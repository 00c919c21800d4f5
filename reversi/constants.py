"""
Board geometry and the default positional weight table.
"""

BOARD_SIZE = 8
NUM_CELLS = BOARD_SIZE * BOARD_SIZE

# (d_row, d_col): cardinal first, then diagonal
DIRECTIONS = (
    (-1, 0), (1, 0), (0, -1), (0, 1),
    (-1, -1), (-1, 1), (1, -1), (1, 1),
)

CORNERS = ((0, 0), (0, 7), (7, 0), (7, 7))

# Corners are 500, X-squares (1,1 etc) -500, C-squares (0,1 etc) -100.
INITIAL_WEIGHTS = (
    (500, -100, 50, 10, 10, 50, -100, 500),
    (-100, -500, -10, -5, -5, -10, -500, -100),
    (50, -10, 20, 5, 5, 20, -10, 50),
    (10, -5, 5, 1, 1, 5, -5, 10),
    (10, -5, 5, 1, 1, 5, -5, 10),
    (50, -10, 20, 5, 5, 20, -10, 50),
    (-100, -500, -10, -5, -5, -10, -500, -100),
    (500, -100, 50, 10, 10, 50, -100, 500),
)
