"""
Reversi Agent — Game loop and training coordinator for the learning agent.

Plays full games of Reversi between the agent's policy and an opponent,
then hands every completed game (history + winner) to the knowledge store,
where the weight matrix and the learning memory are updated.

A game that is abandoned before it ends is never recorded.

Usage:
    python -m reversi_ai.train --episodes 200
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from reversi.board import (
    Board, Color, Turn, apply_move, has_moves, score, winner as board_winner,
)
from reversi_ai.config import ReversiConfig
from reversi_ai.knowledge_store import KnowledgeStore, PersistenceError
from reversi_ai.opponents import BrainPlayer, REVERSI_OPPONENTS
from reversi_ai.policy import GameMode, apply_outcome

logger = logging.getLogger(__name__)

MAX_TURNS = 200


@dataclass
class GameRecord:
    """A finished game."""
    history: List[Turn]
    winner: Optional[Color]
    final_board: Board
    scores: Dict[Color, int] = field(default_factory=dict)

    @property
    def num_moves(self) -> int:
        return len(self.history)


def play_game(black, white, board: Board = None, max_turns: int = MAX_TURNS,
              cancel: threading.Event = None) -> Optional[GameRecord]:
    """
    Play one game between two players (objects with get_move(board, color)).

    Returns None if `cancel` gets set before the game ends.
    """
    board = board or Board.initial()
    players = {Color.BLACK: black, Color.WHITE: white}
    to_move = Color.BLACK
    history: List[Turn] = []
    passes = 0

    for _ in range(max_turns):
        if cancel is not None and cancel.is_set():
            return None
        if not has_moves(board, to_move):
            passes += 1
            if passes >= 2:
                break
            to_move = to_move.opponent
            continue
        passes = 0

        move = players[to_move].get_move(board, to_move)
        history.append(Turn(board, move, to_move))
        board = apply_move(board, to_move, move)
        to_move = to_move.opponent

    return GameRecord(
        history=history,
        winner=board_winner(board),
        final_board=board,
        scores=score(board),
    )


def mode_for_opponent(opponent_name: str) -> GameMode:
    if opponent_name == 'self':
        return GameMode.TRAINING_SELF
    if opponent_name == 'random':
        return GameMode.TRAINING_RANDOM
    return GameMode.TRAINING


class ReversiAgent:
    """
    Training coordinator for the learning Reversi agent.

    Runs full games, feeds outcomes into the KnowledgeStore and tracks
    learning progress.
    """

    def __init__(self, store: KnowledgeStore = None, config: ReversiConfig = None):
        self.config = config or ReversiConfig()
        self.store = store or KnowledgeStore(self.config.store_path,
                                             self.config.learning)

        # Training stats
        self.episodes_completed = 0
        self.win_history: List[float] = []  # 1.0=win, 0.5=draw, 0.0=loss
        self.game_lengths: List[int] = []

    def make_player(self, midgame_depth: int = None) -> BrainPlayer:
        return BrainPlayer(self.store.snapshot, self.config.search, midgame_depth)

    def record_game(self, game: GameRecord, color: Color = Color.BLACK,
                    mode: GameMode = GameMode.TRAINING) -> bool:
        """Learn from a finished game. Returns False if it was not persisted."""
        learning = self.config.learning
        try:
            self.store.update(lambda snapshot: apply_outcome(
                snapshot, game.history, game.winner, color, mode, learning))
        except PersistenceError as e:
            logger.warning(f"Game learned in memory only, not persisted: {e}")
            return False
        return True

    def play_episode(self, opponent, color: Color = Color.BLACK,
                     mode: GameMode = GameMode.TRAINING,
                     max_moves: int = MAX_TURNS,
                     cancel: threading.Event = None) -> Optional[Dict]:
        """
        Play one full game and learn from it.

        Args:
            opponent: object with get_move(board, color) -> Move
            color: which color the agent plays
            max_moves: max plies before the game is cut off

        Returns:
            Dict with game outcome info, or None if the game was cancelled.
        """
        agent = self.make_player()
        if color == Color.BLACK:
            game = play_game(agent, opponent, max_turns=max_moves, cancel=cancel)
        else:
            game = play_game(opponent, agent, max_turns=max_moves, cancel=cancel)
        if game is None:
            return None

        won = game.winner == color
        draw = game.winner is None
        logger.debug(f"Game over after {game.num_moves} moves, "
                     f"winner {game.winner.name if game.winner else 'none'}:\n"
                     f"{game.final_board.render()}")
        persisted = self.record_game(game, color, mode)

        self.episodes_completed += 1
        self.win_history.append(1.0 if won else (0.5 if draw else 0.0))
        self.game_lengths.append(game.num_moves)

        return {
            'won': won,
            'draw': draw,
            'winner': game.winner,
            'num_moves': game.num_moves,
            'black': game.scores[Color.BLACK],
            'white': game.scores[Color.WHITE],
            'persisted': persisted,
        }

    def build_opponent(self, opponent_name: str, opponent_depth: int = 4):
        if opponent_name == 'self':
            return self.make_player(midgame_depth=opponent_depth)
        opp_factory = REVERSI_OPPONENTS.get(opponent_name)
        if opp_factory is None:
            raise ValueError(
                f"Unknown opponent: {opponent_name}. "
                f"Options: {list(REVERSI_OPPONENTS.keys()) + ['self']}")
        return opp_factory()

    def train(self, total_episodes: int = 100,
              opponent_name: str = 'random',
              color: Color = Color.BLACK,
              log_interval: int = 10,
              opponent_depth: int = 4,
              max_moves: int = MAX_TURNS) -> Dict:
        """
        Main training loop. Plays games and learns from outcomes.
        """
        start_time = time.time()
        mode = mode_for_opponent(opponent_name)
        # Validate early; self-play opponents are rebuilt each game
        opponent = self.build_opponent(opponent_name, opponent_depth)

        print(f"Starting Reversi training: {total_episodes} episodes")
        print(f"  Playing as: {color.name.title()}")
        print(f"  Opponent: {opponent_name}")
        print(f"  Games in brain: {self.store.snapshot.total_games}")
        print()

        for ep in range(1, total_episodes + 1):
            if opponent_name == 'self':
                opponent = self.build_opponent(opponent_name, opponent_depth)
            self.play_episode(opponent, color, mode, max_moves)

            if ep % log_interval == 0:
                recent = self.win_history[-100:]
                win_rate = np.mean([1.0 if x == 1.0 else 0.0 for x in recent])
                draw_rate = np.mean([1.0 if x == 0.5 else 0.0 for x in recent])
                avg_moves = np.mean(self.game_lengths[-100:])
                stats = self.store.get_stats()

                print(
                    f"Episode {ep}/{total_episodes} | "
                    f"Win: {win_rate:.1%} | "
                    f"Draw: {draw_rate:.1%} | "
                    f"Avg Moves: {avg_moves:.0f} | "
                    f"Memories: {stats['memory']['entries']} | "
                    f"Games: {stats['total_games']}")

        elapsed = time.time() - start_time
        stats = self.store.get_stats()
        recent = self.win_history[-100:]
        final_win_rate = float(np.mean([1.0 if x == 1.0 else 0.0
                                        for x in recent])) if recent else 0.0

        print(f"\n{'=' * 60}")
        print(f"TRAINING COMPLETE")
        print(f"{'=' * 60}")
        print(f"  Episodes:         {self.episodes_completed}")
        print(f"  Final win rate:   {final_win_rate:.1%}")
        print(f"  Total games:      {stats['total_games']}")
        print(f"  Memories:         {stats['memory']['entries']}")
        print(f"  Experience:       {stats['experience']}")
        print(f"  Elapsed time:     {elapsed:.1f}s")
        print(f"\n  Brain saved to: {self.store.filepath}")

        return {
            'episodes': self.episodes_completed,
            'final_win_rate': final_win_rate,
            'total_games': stats['total_games'],
            'memories': stats['memory']['entries'],
            'elapsed_time': elapsed,
        }
