"""
External Move Providers - Contract for move sources outside the core.

A provider (for example a remote suggestion service used as a sparring
partner) is offered the exact legal-move set and must answer with one of
those moves. Whatever it does, request_move always returns a legal move:
errors and illegal answers are retried a bounded number of times, then a
uniformly random legal move is played instead.

Backoff and transport details belong to the provider itself.
"""

import logging
import random
from typing import Optional, Protocol, Sequence

from reversi.board import Board, Color, Move, legal_moves

logger = logging.getLogger(__name__)

DEFAULT_ATTEMPTS = 3


class MoveProvider(Protocol):
    def suggest(self, board: Board, color: Color,
                legal: Sequence[Move]) -> Move:
        ...


def request_move(provider: MoveProvider, board: Board, color: Color,
                 max_attempts: int = DEFAULT_ATTEMPTS,
                 rng: random.Random = None) -> Optional[Move]:
    """Ask `provider` for a move; random legal fallback. None means pass."""
    rng = rng or random
    legal = legal_moves(board, color)
    if not legal:
        return None
    if len(legal) == 1:
        return legal[0]

    for attempt in range(1, max_attempts + 1):
        try:
            suggestion = provider.suggest(board, color, legal)
        except Exception as e:
            logger.warning(f"Move provider failed (attempt {attempt}/{max_attempts}): {e}")
            continue
        try:
            move = Move(*suggestion)
        except TypeError:
            move = None
        if move in legal:
            return move
        logger.warning(f"Move provider returned illegal move {suggestion!r} "
                       f"(attempt {attempt}/{max_attempts})")

    logger.warning("Move provider exhausted its attempts, playing a random move")
    return rng.choice(legal)


class ProviderPlayer:
    """Adapts a MoveProvider to the get_move(board, color) player interface."""

    def __init__(self, provider: MoveProvider,
                 max_attempts: int = DEFAULT_ATTEMPTS,
                 rng: random.Random = None):
        self.provider = provider
        self.max_attempts = max_attempts
        self.rng = rng or random.Random()

    def get_move(self, board: Board, color: Color) -> Optional[Move]:
        return request_move(self.provider, board, color,
                            self.max_attempts, self.rng)
