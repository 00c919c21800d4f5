"""
Knowledge Store - Persistent storage of everything the agent has learned.

The Knowledge Snapshot bundles the learning memory, the positional weight
matrix and the running statistics. It is loaded (or defaulted) once per
session and replaced as a whole after each completed game.

Persistence is a single JSON document, written atomically so a crash can
never leave a half-written brain on disk. Older or hand-edited documents are
brought up to the current schema by one migration step at load time.
"""

import json
import logging
import math
import os
import tempfile
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict

import numpy as np

from reversi.constants import BOARD_SIZE
from reversi_ai.config import LearningConfig
from reversi_ai.memory import LearnedMove, LearningMemory
from reversi_ai.weights import default_weights

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1
BRAIN_FILENAME = 'brain.json'


class PersistenceError(OSError):
    """The underlying store could not be written."""


def _is_number(value: Any) -> bool:
    """Finite int/float; json parses NaN and Infinity, which cannot become ints."""
    return (isinstance(value, (int, float)) and not isinstance(value, bool)
            and math.isfinite(value))


def _is_weight_matrix(value: Any) -> bool:
    return (
        isinstance(value, (list, tuple))
        and len(value) == BOARD_SIZE
        and all(isinstance(row, (list, tuple)) and len(row) == BOARD_SIZE
                for row in value)
        and all(_is_number(v) for row in value for v in row)
    )


def _as_count(value: Any) -> int:
    if not _is_number(value):
        return 0
    return max(0, int(value))


def migrate(data: Any, config: LearningConfig = None,
            now: float = None) -> Dict[str, Any]:
    """
    Bring a raw snapshot document up to the current schema.

    Missing or malformed sub-fields are replaced by structural defaults;
    memory entries without a score/timestamp get score 1 and `now`, entries
    without a usable move are dropped. Never raises.
    """
    config = config or LearningConfig()
    now = time.time() if now is None else now
    if not isinstance(data, dict):
        data = {}

    weights = data.get('weights')
    if not _is_weight_matrix(weights):
        weights = default_weights().tolist()

    memory = {}
    raw_memory = data.get('memory')
    if isinstance(raw_memory, dict):
        for key, entry in raw_memory.items():
            if not isinstance(entry, dict):
                continue
            try:
                row, col = int(entry['row']), int(entry['col'])
            except (KeyError, TypeError, ValueError, OverflowError):
                continue
            if not (0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE):
                continue
            score = entry.get('score')
            timestamp = entry.get('timestamp')
            memory[key] = {
                'row': row,
                'col': col,
                'score': int(score) if _is_number(score) else 1,
                'timestamp': float(timestamp) if _is_number(timestamp) else now,
            }

    limit = data.get('maxMemoryLimit')
    if not _is_number(limit) or limit <= 0:
        limit = config.memory_limit

    return {
        'schemaVersion': SCHEMA_VERSION,
        'memory': memory,
        'weights': weights,
        'totalGames': _as_count(data.get('totalGames')),
        'wins': _as_count(data.get('wins')),
        'losses': _as_count(data.get('losses')),
        'experience': _as_count(data.get('experience')),
        'maxMemoryLimit': int(limit),
    }


@dataclass
class KnowledgeSnapshot:
    """Memory + weights + statistics, persisted as one unit."""
    memory: LearningMemory = field(default_factory=LearningMemory)
    weights: np.ndarray = field(default_factory=default_weights)
    total_games: int = 0
    wins: int = 0
    losses: int = 0
    experience: int = 0

    @property
    def memory_limit(self) -> int:
        return self.memory.limit

    @classmethod
    def default(cls, config: LearningConfig = None) -> 'KnowledgeSnapshot':
        return cls.from_dict({}, config)

    def copy(self) -> 'KnowledgeSnapshot':
        return KnowledgeSnapshot(
            memory=self.memory.copy(),
            weights=np.array(self.weights, dtype=np.float64, copy=True),
            total_games=self.total_games,
            wins=self.wins,
            losses=self.losses,
            experience=self.experience,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'schemaVersion': SCHEMA_VERSION,
            'memory': self.memory.to_dict(),
            'weights': np.asarray(self.weights).tolist(),
            'totalGames': self.total_games,
            'wins': self.wins,
            'losses': self.losses,
            'experience': self.experience,
            'maxMemoryLimit': self.memory.limit,
        }

    @classmethod
    def from_dict(cls, data: Any, config: LearningConfig = None,
                  now: float = None) -> 'KnowledgeSnapshot':
        """Build from a raw document, running migrate() first."""
        config = config or LearningConfig()
        doc = migrate(data, config, now)
        memory = LearningMemory(
            {key: LearnedMove.from_dict(e) for key, e in doc['memory'].items()},
            limit=doc['maxMemoryLimit'],
            prune_margin=config.prune_margin,
            trust_games=config.trust_games,
            min_history=config.min_history,
            skip_opening=config.skip_opening,
            skip_endgame=config.skip_endgame,
        )
        return cls(
            memory=memory,
            weights=np.array(doc['weights'], dtype=np.float64),
            total_games=doc['totalGames'],
            wins=doc['wins'],
            losses=doc['losses'],
            experience=doc['experience'],
        )

    def stats(self) -> Dict[str, Any]:
        return {
            'total_games': self.total_games,
            'wins': self.wins,
            'losses': self.losses,
            'experience': self.experience,
            'win_rate': self.wins / max(1, self.wins + self.losses),
            'memory': self.memory.stats(),
        }


class KnowledgeStore:
    """
    Durable home of the Knowledge Snapshot.

    All snapshot updates go through update(), which applies them one at a
    time under a lock (load-modify-store), so games finishing concurrently
    never lose each other's learning.
    """

    def __init__(self, store_path: str = "reversi_brain",
                 config: LearningConfig = None):
        self.store_path = store_path
        self.config = config or LearningConfig()
        self.filepath = os.path.join(store_path, BRAIN_FILENAME)
        self._lock = threading.Lock()

        os.makedirs(store_path, exist_ok=True)
        self.snapshot = self.load()

    def load(self) -> KnowledgeSnapshot:
        """Read the stored snapshot; defaults if absent or unreadable."""
        if not os.path.exists(self.filepath):
            return KnowledgeSnapshot.default(self.config)
        try:
            with open(self.filepath, 'r') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Could not read {self.filepath}, starting fresh: {e}")
            return KnowledgeSnapshot.default(self.config)
        if not isinstance(data, dict) or data.get('schemaVersion') != SCHEMA_VERSION:
            logger.info(f"Migrating brain at {self.filepath} to schema v{SCHEMA_VERSION}")
        return KnowledgeSnapshot.from_dict(data, self.config)

    def save(self, snapshot: KnowledgeSnapshot):
        """Prune a copy if past the threshold, then write atomically.

        The caller's snapshot is never modified. Raises PersistenceError if
        the write fails; the previous file is left intact in that case.
        """
        if snapshot.memory.needs_pruning():
            snapshot = snapshot.copy()
        removed = snapshot.memory.maybe_prune()
        if removed:
            logger.info(f"Pruned {removed} memory entries (limit {snapshot.memory.limit})")
        self.snapshot = snapshot
        self._write(snapshot.to_dict())

    def _write(self, data: Dict[str, Any]):
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                prefix='.brain-', suffix='.json', dir=self.store_path)
            with os.fdopen(fd, 'w') as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.filepath)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            logger.error(f"Saving brain to {self.filepath} failed: {e}")
            raise PersistenceError(f"Could not save brain: {e}") from e

    def update(self, transform: Callable[[KnowledgeSnapshot], KnowledgeSnapshot]
               ) -> KnowledgeSnapshot:
        """
        Apply `transform` to the current snapshot and persist the result.

        Serialized across threads. The in-memory snapshot is updated even
        if the write fails, so play continues with the latest learning;
        the PersistenceError is re-raised for the caller to report.
        """
        with self._lock:
            updated = transform(self.snapshot)
            self.save(updated)
            return updated

    def export(self) -> str:
        """Full snapshot as indented JSON."""
        with self._lock:
            return json.dumps(self.snapshot.to_dict(), indent=2)

    def import_snapshot(self, serialized: str) -> bool:
        """
        Replace the stored snapshot with `serialized`.

        Requires totalGames (number), weights (8x8 matrix) and memory
        (mapping). On any validation or write failure the existing state is
        kept and False is returned.
        """
        try:
            data = json.loads(serialized)
        except (TypeError, ValueError) as e:
            logger.error(f"Import failed, not valid JSON: {e}")
            return False

        if not (isinstance(data, dict)
                and _is_number(data.get('totalGames'))
                and _is_weight_matrix(data.get('weights'))
                and isinstance(data.get('memory'), dict)):
            logger.error("Import failed, payload does not look like a brain")
            return False

        size = len(data['memory'])
        limit = data.get('maxMemoryLimit')
        if not _is_number(limit) or limit < size:
            data['maxMemoryLimit'] = max(self.config.memory_limit, size)

        snapshot = KnowledgeSnapshot.from_dict(data, self.config)
        with self._lock:
            previous = self.snapshot
            try:
                self.save(snapshot)
            except PersistenceError:
                self.snapshot = previous
                return False
        logger.info(f"Imported brain with {len(snapshot.memory)} memories, "
                    f"{snapshot.total_games} games")
        return True

    def set_memory_limit(self, limit: int) -> KnowledgeSnapshot:
        """Change the memory capacity, pruning right away if it shrank."""
        if limit <= 0:
            raise ValueError(f"Memory limit must be positive, got {limit}")

        def _resize(snapshot: KnowledgeSnapshot) -> KnowledgeSnapshot:
            resized = snapshot.copy()
            resized.memory.limit = limit
            resized.memory.prune(limit)
            return resized

        return self.update(_resize)

    def reset(self):
        """Forget everything: remove the file and start from defaults."""
        with self._lock:
            if os.path.exists(self.filepath):
                os.remove(self.filepath)
            self.snapshot = KnowledgeSnapshot.default(self.config)

    def get_stats(self) -> Dict[str, Any]:
        return self.snapshot.stats()
