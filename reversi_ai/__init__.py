"""
Reversi AI — A Reversi agent that learns from its own games.

Move choice consults an exact-position learning memory first and falls back
to alpha-beta search over a heuristic evaluator. After each game the
positional weight matrix adapts and winning mid-game moves are memorised.

No neural network. Learning happens through:
- Learning Memory: remembered winning moves, reinforced by repetition
- Weight Adaptation: cells played by winners gain value, losers' cells lose it
"""

from reversi_ai.config import ReversiConfig, SearchConfig, LearningConfig
from reversi_ai.evaluator import evaluate
from reversi_ai.search import AlphaBetaSearch, is_risky_move, pick_best
from reversi_ai.memory import LearnedMove, LearningMemory, fingerprint
from reversi_ai.weights import adapt, default_weights
from reversi_ai.knowledge_store import (
    KnowledgeSnapshot, KnowledgeStore, PersistenceError,
)
from reversi_ai.policy import GameMode, apply_outcome, compute_move
from reversi_ai.providers import MoveProvider, ProviderPlayer, request_move
from reversi_ai.opponents import RandomPlayer, GreedyPlayer, SearchPlayer, BrainPlayer
from reversi_ai.agent import GameRecord, ReversiAgent, play_game

__all__ = [
    "ReversiConfig",
    "SearchConfig",
    "LearningConfig",
    "evaluate",
    "AlphaBetaSearch",
    "is_risky_move",
    "pick_best",
    "LearnedMove",
    "LearningMemory",
    "fingerprint",
    "adapt",
    "default_weights",
    "KnowledgeSnapshot",
    "KnowledgeStore",
    "PersistenceError",
    "GameMode",
    "apply_outcome",
    "compute_move",
    "MoveProvider",
    "ProviderPlayer",
    "request_move",
    "RandomPlayer",
    "GreedyPlayer",
    "SearchPlayer",
    "BrainPlayer",
    "GameRecord",
    "ReversiAgent",
    "play_game",
]
