"""
Engine Configuration - Tunable settings for search and learning.

All thresholds of the heuristic search and the learning store live here so
they can be tuned from a JSON file or the environment:
- SearchConfig: depth schedule and the root risk filter
- LearningConfig: memory trust/capacity and weight adaptation
- ReversiConfig: master config plus the on-disk store location
"""

from dataclasses import dataclass, field
from typing import Any, Dict
import os
import json


@dataclass
class SearchConfig:
    """Alpha-beta depth schedule"""
    midgame_depth: int = 4          # More than late_empties empty cells
    late_depth: int = 6
    late_empties: int = 16          # e <= 16 -> late_depth
    exact_empties: int = 12         # e <= 12 -> depth e (solve to the end)
    risk_filter_max_depth: int = 10  # Root risk filter only below this depth

    def depth_for(self, empties: int, midgame_depth: int = None) -> int:
        """Search depth for a position with `empties` empty cells."""
        if empties <= self.exact_empties:
            return empties
        if empties <= self.late_empties:
            return self.late_depth
        return self.midgame_depth if midgame_depth is None else midgame_depth

    def is_exact(self, empties: int) -> bool:
        return empties <= self.exact_empties

    @classmethod
    def from_env(cls) -> 'SearchConfig':
        """Load from environment variables"""
        return cls(
            midgame_depth=int(os.getenv('REVERSI_MIDGAME_DEPTH', 4)),
            late_depth=int(os.getenv('REVERSI_LATE_DEPTH', 6)),
            exact_empties=int(os.getenv('REVERSI_EXACT_EMPTIES', 12)),
        )


@dataclass
class LearningConfig:
    """Learning memory and weight adaptation settings"""
    memory_limit: int = 5000
    prune_margin: float = 1.1       # Prune once size > limit * margin
    trust_games: int = 50           # Memory always trusted below this many games
    min_history: int = 20           # Shorter games are not memorised
    skip_opening: int = 15          # Plies skipped at the start
    skip_endgame: int = 8           # Plies skipped at the end
    win_delta: float = 0.5
    loss_delta: float = -0.25
    weight_limit: float = 600.0
    win_experience: int = 150
    draw_experience: int = 50

    @classmethod
    def from_env(cls) -> 'LearningConfig':
        """Load from environment variables"""
        return cls(
            memory_limit=int(os.getenv('REVERSI_MEMORY_LIMIT', 5000)),
            trust_games=int(os.getenv('REVERSI_TRUST_GAMES', 50)),
        )


@dataclass
class ReversiConfig:
    """Master configuration"""
    store_path: str = "reversi_brain"
    search: SearchConfig = field(default_factory=SearchConfig)
    learning: LearningConfig = field(default_factory=LearningConfig)

    @classmethod
    def from_env(cls) -> 'ReversiConfig':
        return cls(
            store_path=os.getenv('REVERSI_STORE_PATH', 'reversi_brain'),
            search=SearchConfig.from_env(),
            learning=LearningConfig.from_env(),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize configuration"""
        return {
            'store_path': self.store_path,
            'search': {
                'midgame_depth': self.search.midgame_depth,
                'late_depth': self.search.late_depth,
                'late_empties': self.search.late_empties,
                'exact_empties': self.search.exact_empties,
                'risk_filter_max_depth': self.search.risk_filter_max_depth,
            },
            'learning': {
                'memory_limit': self.learning.memory_limit,
                'prune_margin': self.learning.prune_margin,
                'trust_games': self.learning.trust_games,
                'min_history': self.learning.min_history,
                'skip_opening': self.learning.skip_opening,
                'skip_endgame': self.learning.skip_endgame,
                'win_delta': self.learning.win_delta,
                'loss_delta': self.learning.loss_delta,
                'weight_limit': self.learning.weight_limit,
                'win_experience': self.learning.win_experience,
                'draw_experience': self.learning.draw_experience,
            },
        }

    def save(self, filepath: str):
        """Save configuration to file"""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: str) -> 'ReversiConfig':
        """Load configuration from file; unknown keys are ignored."""
        with open(filepath, 'r') as f:
            data = json.load(f)
        search_fields = SearchConfig.__dataclass_fields__
        learning_fields = LearningConfig.__dataclass_fields__
        return cls(
            store_path=data.get('store_path', 'reversi_brain'),
            search=SearchConfig(**{
                k: v for k, v in data.get('search', {}).items()
                if k in search_fields
            }),
            learning=LearningConfig(**{
                k: v for k, v in data.get('learning', {}).items()
                if k in learning_fields
            }),
        )
