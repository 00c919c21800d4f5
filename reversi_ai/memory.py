"""
Learning Memory - Exact-position store of remembered winning moves.

Every entry maps a board fingerprint to the move the winning side played
there, with a confidence score that grows each time a won game repeats it.

- Lookup: a remembered move is played only if it is legal now and either the
  brain is still young (few games) or the entry has positive confidence.
- Reinforcement: only the winner's moves from the middle of a game are
  stored. Openings are low-information and the last plies are near-forced.
  Losing moves are never penalised.
- Eviction: the store has a capacity. Pruning runs lazily once the size
  exceeds capacity by a margin, keeping the highest (score, timestamp)
  entries.
"""

import time
from dataclasses import dataclass, asdict, replace
from typing import Dict, List, Optional, Sequence, Tuple

from reversi.board import EMPTY, Board, Color, Move, Turn


_FINGERPRINT_SYMBOLS = {EMPTY: '_', int(Color.BLACK): 'B', int(Color.WHITE): 'W'}


def fingerprint(board: Board) -> str:
    """64-char row-major key of the cell contents; side to move is not encoded."""
    return ''.join(_FINGERPRINT_SYMBOLS[cell] for cell in board.cells)


@dataclass(frozen=True)
class LearnedMove:
    """A remembered move with its confidence and last update time."""
    row: int
    col: int
    score: int = 1
    timestamp: float = 0.0

    @property
    def move(self) -> Move:
        return Move(self.row, self.col)

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> 'LearnedMove':
        return cls(
            row=int(data['row']),
            col=int(data['col']),
            score=int(data.get('score', 1)),
            timestamp=float(data.get('timestamp', 0.0)),
        )


class LearningMemory:
    """
    Fingerprint -> LearnedMove store with capacity-bounded eviction.

    Entries are immutable; updates replace them, so copy() is enough to give
    a caller an independent memory.
    """

    def __init__(self, entries: Dict[str, LearnedMove] = None,
                 limit: int = 5000, prune_margin: float = 1.1,
                 trust_games: int = 50, min_history: int = 20,
                 skip_opening: int = 15, skip_endgame: int = 8):
        self.entries: Dict[str, LearnedMove] = dict(entries or {})
        self.limit = limit
        self.prune_margin = prune_margin
        self.trust_games = trust_games
        self.min_history = min_history
        self.skip_opening = skip_opening
        self.skip_endgame = skip_endgame

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: str) -> bool:
        return key in self.entries

    def get(self, key: str) -> Optional[LearnedMove]:
        return self.entries.get(key)

    def copy(self) -> 'LearningMemory':
        return LearningMemory(
            self.entries, self.limit, self.prune_margin, self.trust_games,
            self.min_history, self.skip_opening, self.skip_endgame)

    def lookup(self, board: Board, legal: Sequence[Move],
               total_games: int) -> Optional[Move]:
        """Remembered move for `board`, if it is legal and trusted."""
        entry = self.entries.get(fingerprint(board))
        if entry is None:
            return None
        move = entry.move
        if move not in legal:
            return None
        if total_games < self.trust_games or entry.score > 0:
            return move
        return None

    def store(self, key: str, entry: LearnedMove):
        self.entries[key] = entry

    def learning_slice(self, history: Sequence[Turn]) -> Sequence[Turn]:
        """Middle of the game used for memorisation (empty for short games)."""
        if len(history) <= self.min_history:
            return []
        return history[self.skip_opening:len(history) - self.skip_endgame]

    def reinforce(self, history: Sequence[Turn], winner: Optional[Color],
                  now: float = None) -> int:
        """
        Remember the winner's mid-game moves.

        A repeated (position, move) pair gains one point of confidence; any
        other winning move for the position replaces the entry with
        confidence 1. Returns the number of entries written.
        """
        if winner is None:
            return 0
        now = time.time() if now is None else now
        written = 0
        for turn in self.learning_slice(history):
            if turn.color != winner:
                continue
            key = fingerprint(turn.board)
            move = Move(*turn.move)
            existing = self.entries.get(key)
            if existing is not None and existing.move == move:
                self.entries[key] = replace(
                    existing, score=existing.score + 1, timestamp=now)
            else:
                self.entries[key] = LearnedMove(move.row, move.col, 1, now)
            written += 1
        self.maybe_prune()
        return written

    def needs_pruning(self) -> bool:
        return len(self.entries) > self.limit * self.prune_margin

    def maybe_prune(self) -> int:
        """Prune only when the size is past the hysteresis threshold."""
        if self.needs_pruning():
            return self.prune()
        return 0

    def ranked(self) -> List[Tuple[str, LearnedMove]]:
        """Entries ordered by confidence, then recency, best first."""
        return sorted(
            self.entries.items(),
            key=lambda kv: (kv[1].score, kv[1].timestamp),
            reverse=True,
        )

    def prune(self, limit: int = None) -> int:
        """Keep the top `limit` ranked entries, in rank order. Returns removed count."""
        limit = self.limit if limit is None else limit
        if len(self.entries) <= limit:
            return 0
        before = len(self.entries)
        self.entries = dict(self.ranked()[:limit])
        return before - len(self.entries)

    def to_dict(self) -> Dict[str, Dict]:
        return {key: entry.to_dict() for key, entry in self.entries.items()}

    def stats(self) -> Dict:
        scores = [e.score for e in self.entries.values()]
        return {
            'entries': len(self.entries),
            'limit': self.limit,
            'avg_score': sum(scores) / max(1, len(scores)),
            'max_score': max(scores) if scores else 0,
        }
