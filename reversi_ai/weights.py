"""
Weight Adapter - Post-game adjustment of the positional weight matrix.

Every cell played by the winner gains a little value, every cell played by
the loser loses half as much. The whole matrix is clamped to a symmetric
range afterwards so long training runs cannot drift without bound.
"""

from typing import Optional, Sequence

import numpy as np

from reversi.board import Color, Turn
from reversi.constants import INITIAL_WEIGHTS


WIN_DELTA = 0.5
LOSS_DELTA = -0.25
WEIGHT_LIMIT = 600.0


def default_weights() -> np.ndarray:
    """Fresh copy of the built-in corner/edge weight table."""
    return np.array(INITIAL_WEIGHTS, dtype=np.float64)


def adapt(weights: np.ndarray, history: Sequence[Turn], winner: Optional[Color],
          win_delta: float = WIN_DELTA, loss_delta: float = LOSS_DELTA,
          limit: float = WEIGHT_LIMIT) -> np.ndarray:
    """Return an adjusted copy of `weights`; the input is never modified."""
    adapted = np.array(weights, dtype=np.float64, copy=True)
    if winner is None:
        return adapted

    for turn in history:
        row, col = turn.move
        adapted[row, col] += win_delta if turn.color == winner else loss_delta

    np.clip(adapted, -limit, limit, out=adapted)
    return adapted
