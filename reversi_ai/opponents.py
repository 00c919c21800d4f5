"""
Reversi Opponents — Built-in players for the learning agent to train against.

All implement: get_move(board, color) → Optional[Move] (None = pass)

- RandomPlayer: uniformly random legal move
- GreedyPlayer: flips the most disks, ties broken at random
- SearchPlayer: alpha-beta search with a fixed weight matrix, no memory
- BrainPlayer: the full policy (memory, then search) over a snapshot
"""

import random
from typing import Optional

import numpy as np

from reversi.board import Board, Color, Move, apply_move, legal_moves
from reversi_ai.config import SearchConfig
from reversi_ai.knowledge_store import KnowledgeSnapshot
from reversi_ai.policy import compute_move
from reversi_ai.search import AlphaBetaSearch
from reversi_ai.weights import default_weights


class RandomPlayer:
    """Picks a uniformly random legal move."""

    def __init__(self, rng: random.Random = None):
        self.rng = rng or random.Random()

    def get_move(self, board: Board, color: Color) -> Optional[Move]:
        moves = legal_moves(board, color)
        if not moves:
            return None
        return self.rng.choice(moves)


class GreedyPlayer:
    """Maximises the disks it owns right after the move."""

    def __init__(self, rng: random.Random = None):
        self.rng = rng or random.Random()

    def get_move(self, board: Board, color: Color) -> Optional[Move]:
        moves = legal_moves(board, color)
        if not moves:
            return None
        gains = {m: apply_move(board, color, m).count(int(color)) for m in moves}
        best = max(gains.values())
        return self.rng.choice([m for m, g in gains.items() if g == best])


class SearchPlayer:
    """
    Alpha-beta player with a fixed weight matrix.

    Uses the phase-dependent depth schedule; `depth` only replaces the
    midgame depth.
    """

    def __init__(self, depth: int = 2, weights: np.ndarray = None,
                 config: SearchConfig = None, rng: random.Random = None):
        self.depth = depth
        self.search = AlphaBetaSearch(
            default_weights() if weights is None else weights, config, rng)

    def get_move(self, board: Board, color: Color) -> Optional[Move]:
        depth = self.search.choose_depth(board, self.depth)
        return self.search.choose_move(board, color, depth)


class BrainPlayer:
    """The learning agent's own policy over a knowledge snapshot."""

    def __init__(self, snapshot: KnowledgeSnapshot, config: SearchConfig = None,
                 midgame_depth: int = None, rng: random.Random = None):
        self.snapshot = snapshot
        self.config = config
        self.midgame_depth = midgame_depth
        self.rng = rng or random.Random()

    def get_move(self, board: Board, color: Color) -> Optional[Move]:
        return compute_move(board, color, self.snapshot, self.config,
                            self.midgame_depth, self.rng)


# Lookup for training script; 'self' is built by the agent from its snapshot
REVERSI_OPPONENTS = {
    'random': RandomPlayer,
    'greedy': GreedyPlayer,
    'search1': lambda: SearchPlayer(depth=1),
    'search2': lambda: SearchPlayer(depth=2),
}
