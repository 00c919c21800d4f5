"""
Position Evaluator - Heuristic score of a board for one color.

Three tiers, each large enough to dominate the one below so the search never
trades a decisive or corner advantage for a smaller positional one:

1. Decisive endgame: full board -> disk difference * 10000
2. Corner control:   +/-2000 per corner held by us / the opponent
3. Mobility + position: legal-move difference * 50, plus the learned weight
   of every cell we own minus the weight of every cell the opponent owns
"""

import numpy as np

from reversi.board import EMPTY, Board, Color, legal_moves
from reversi.constants import BOARD_SIZE, CORNERS


ENDGAME_FACTOR = 10000
CORNER_BONUS = 2000
MOBILITY_FACTOR = 50

_CORNER_INDICES = tuple(r * BOARD_SIZE + c for r, c in CORNERS)


def evaluate(board: Board, color: Color, weights: np.ndarray) -> float:
    """Score `board` from `color`'s point of view. Higher is better."""
    cells = board.cells
    sign = int(color)

    if EMPTY not in cells:
        return float(board.count(sign) - board.count(-sign)) * ENDGAME_FACTOR

    score = 0.0
    for idx in _CORNER_INDICES:
        owner = cells[idx]
        if owner == sign:
            score += CORNER_BONUS
        elif owner == -sign:
            score -= CORNER_BONUS

    mobility = len(legal_moves(board, color)) - len(legal_moves(board, color.opponent))
    score += mobility * MOBILITY_FACTOR

    # cells hold +1 (black), -1 (white), 0 (empty); times sign gives ownership
    ownership = np.asarray(cells, dtype=np.float64) * sign
    score += float(np.dot(np.asarray(weights, dtype=np.float64).ravel(), ownership))
    return score
