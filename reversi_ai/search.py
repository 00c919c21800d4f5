"""
Adversarial Search - Minimax with alpha-beta pruning over Reversi positions.

- Depth follows the game phase (see SearchConfig.depth_for): a shallow
  midgame search, a deeper late-game search and an exact solve once few
  empty cells remain.
- Candidate moves are tried in descending order of their positional weight,
  which makes cutoffs happen earlier.
- A side without moves passes: the same board is searched one ply shallower
  with the turn flipped. When neither side can move the node is terminal
  and scores the true result, scaled above any heuristic value.
- At the root, moves next to an empty corner are skipped when safer moves
  exist and the search is not exact.
- Ties at the root are broken uniformly at random.
"""

import random
from typing import Dict, List, Optional, Sequence

import numpy as np

from reversi.board import EMPTY, Board, Color, Move, apply_move, legal_moves
from reversi.constants import CORNERS
from reversi_ai.config import SearchConfig
from reversi_ai.evaluator import evaluate


TERMINAL_FACTOR = 100000


def is_risky_move(board: Board, move: Move) -> bool:
    """True if `move` touches an empty corner (X- or C-square).

    Taking a corner is never risky.
    """
    move = Move(*move)
    if move.is_corner():
        return False
    row, col = move
    for c_row, c_col in CORNERS:
        if board.at(c_row, c_col) != EMPTY:
            continue
        if max(abs(c_row - row), abs(c_col - col)) == 1:
            return True
    return False


def filter_risky_moves(board: Board, moves: Sequence[Move]) -> List[Move]:
    """Safe moves if any exist, otherwise all of `moves`."""
    safe = [m for m in moves if not is_risky_move(board, m)]
    return safe if safe else list(moves)


def pick_best(scores: Dict[Move, float], rng: random.Random = None) -> Optional[Move]:
    """Uniform random choice among the moves sharing the maximum score."""
    if not scores:
        return None
    rng = rng or random
    best = max(scores.values())
    tied = [move for move, s in scores.items() if s == best]
    return rng.choice(tied)


class AlphaBetaSearch:
    """
    Minimax search with alpha-beta pruning.

    Stateless between calls apart from the node counter; the weight matrix is
    read-only for the lifetime of the search.
    """

    def __init__(self, weights: np.ndarray, config: SearchConfig = None,
                 rng: random.Random = None):
        self.weights = np.asarray(weights, dtype=np.float64)
        self._order = self.weights.tolist()
        self.config = config or SearchConfig()
        self.rng = rng or random.Random()
        self.nodes = 0

    def choose_depth(self, board: Board, midgame_depth: int = None) -> int:
        return self.config.depth_for(board.count(EMPTY), midgame_depth)

    def root_candidates(self, board: Board, color: Color, depth: int) -> List[Move]:
        """Legal root moves after the risk filter."""
        moves = list(legal_moves(board, color))
        exact = self.config.is_exact(board.count(EMPTY))
        if not exact and depth < self.config.risk_filter_max_depth:
            return filter_risky_moves(board, moves)
        return moves

    def root_scores(self, board: Board, color: Color,
                    depth: int = None) -> Dict[Move, float]:
        """Search score of every candidate root move.

        Each root move gets a full window so equal scores are exact, not
        bounds; the tie-break depends on that.
        """
        if depth is None:
            depth = self.choose_depth(board)
        scores = {}
        for move in self.root_candidates(board, color, depth):
            child = apply_move(board, color, move)
            scores[move] = self._minimax(
                child, depth - 1, float('-inf'), float('inf'), False, color)
        return scores

    def choose_move(self, board: Board, color: Color,
                    depth: int = None) -> Optional[Move]:
        """Best move for `color`, or None when it has to pass."""
        self.nodes = 0
        return pick_best(self.root_scores(board, color, depth), self.rng)

    def _ordered(self, moves: Sequence[Move]) -> List[Move]:
        order = self._order
        return sorted(moves, key=lambda m: order[m.row][m.col], reverse=True)

    def _minimax(self, board: Board, depth: int, alpha: float, beta: float,
                 maximizing: bool, root_color: Color) -> float:
        self.nodes += 1
        if depth <= 0:
            return evaluate(board, root_color, self.weights)

        to_move = root_color if maximizing else root_color.opponent
        moves = legal_moves(board, to_move)

        if not moves:
            if not legal_moves(board, to_move.opponent):
                mine = board.count(int(root_color))
                theirs = board.count(int(root_color.opponent))
                return float(mine - theirs) * TERMINAL_FACTOR
            # Pass: same board, one ply consumed
            return self._minimax(board, depth - 1, alpha, beta,
                                 not maximizing, root_color)

        if maximizing:
            best = float('-inf')
            for move in self._ordered(moves):
                child = apply_move(board, to_move, move)
                value = self._minimax(child, depth - 1, alpha, beta, False, root_color)
                best = max(best, value)
                alpha = max(alpha, value)
                if beta <= alpha:
                    break
            return best

        best = float('inf')
        for move in self._ordered(moves):
            child = apply_move(board, to_move, move)
            value = self._minimax(child, depth - 1, alpha, beta, True, root_color)
            best = min(best, value)
            beta = min(beta, value)
            if beta <= alpha:
                break
        return best
