"""
Reversi - Board representation and rules of Reversi/Othello.

The board is an immutable value type; every rule function is pure.
"""

from reversi.board import (
    EMPTY,
    Board,
    Color,
    IllegalMoveError,
    Move,
    Turn,
    apply_move,
    empty_count,
    has_moves,
    is_game_over,
    is_legal_move,
    legal_moves,
    score,
    winner,
)

__all__ = [
    "EMPTY",
    "Board",
    "Color",
    "IllegalMoveError",
    "Move",
    "Turn",
    "apply_move",
    "empty_count",
    "has_moves",
    "is_game_over",
    "is_legal_move",
    "legal_moves",
    "score",
    "winner",
]
