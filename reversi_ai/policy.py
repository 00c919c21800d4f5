"""
Reversi Policy - The two calls the outside world makes into the core.

compute_move: memory first, then alpha-beta search. Reads the snapshot,
never writes it.

apply_outcome: after a finished game, adapt the weight matrix, reinforce
the learning memory and update the statistics. Pure: returns a new
snapshot and leaves persisting it to the caller.
"""

import random
from enum import Enum
from typing import Optional, Sequence

from reversi.board import Board, Color, Move, Turn, legal_moves
from reversi_ai.config import LearningConfig, SearchConfig
from reversi_ai.knowledge_store import KnowledgeSnapshot
from reversi_ai.search import AlphaBetaSearch
from reversi_ai.weights import adapt


class GameMode(Enum):
    TRAINING = "training"              # Agent vs an external move provider
    TRAINING_RANDOM = "training_random"  # Agent vs uniformly random moves
    TRAINING_SELF = "training_self"    # Agent vs itself


def compute_move(board: Board, color: Color, snapshot: KnowledgeSnapshot,
                 config: SearchConfig = None, midgame_depth: int = None,
                 rng: random.Random = None,
                 use_memory: bool = True) -> Optional[Move]:
    """Move for `color`, or None if it has no legal move and must pass."""
    legal = legal_moves(board, color)
    if not legal:
        return None

    if use_memory:
        remembered = snapshot.memory.lookup(board, legal, snapshot.total_games)
        if remembered is not None:
            return remembered

    search = AlphaBetaSearch(snapshot.weights, config, rng)
    depth = search.choose_depth(board, midgame_depth)
    return search.choose_move(board, color, depth)


def apply_outcome(snapshot: KnowledgeSnapshot, history: Sequence[Turn],
                  winner: Optional[Color], agent_color: Color = Color.BLACK,
                  mode: GameMode = GameMode.TRAINING,
                  config: LearningConfig = None,
                  now: float = None) -> KnowledgeSnapshot:
    """
    Learn from one finished game.

    A draw (winner None) only counts the game and the smaller experience
    bonus; weights and memory learn from decided games only. In self-play
    every decided game is a win for the agent, since it played both sides.
    """
    config = config or LearningConfig()
    updated = snapshot.copy()

    if winner is not None:
        updated.weights = adapt(
            updated.weights, history, winner,
            win_delta=config.win_delta,
            loss_delta=config.loss_delta,
            limit=config.weight_limit,
        )
        updated.memory.reinforce(history, winner, now=now)

    updated.total_games += 1
    if winner is None:
        updated.experience += config.draw_experience
        return updated

    updated.experience += config.win_experience
    if mode is GameMode.TRAINING_SELF or winner == agent_color:
        updated.wins += 1
    else:
        updated.losses += 1
    return updated
