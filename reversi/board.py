"""
Board & Rules - Reversi board representation and the capture rules.

The board is an immutable value: 64 cells in row-major order, each one of
EMPTY, Color.BLACK or Color.WHITE. Every operation that changes the position
(apply_move) returns a new Board, so a game history is just a list of Board
values and can never alias a later position.

Rules:
- A move is legal on an empty cell that, in at least one of the 8 directions,
  sandwiches one or more opponent disks against one of the mover's disks.
- Playing a move flips every sandwiched run in all 8 directions.
- A color without legal moves passes; the game ends when neither color has
  a legal move.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

from reversi.constants import BOARD_SIZE, NUM_CELLS, DIRECTIONS, CORNERS


EMPTY = 0


class Color(IntEnum):
    BLACK = 1
    WHITE = -1

    @property
    def opponent(self) -> 'Color':
        return Color(-self.value)

    @property
    def symbol(self) -> str:
        return 'B' if self is Color.BLACK else 'W'


class Move(NamedTuple):
    row: int
    col: int

    @property
    def index(self) -> int:
        return self.row * BOARD_SIZE + self.col

    @classmethod
    def from_index(cls, index: int) -> 'Move':
        return cls(index // BOARD_SIZE, index % BOARD_SIZE)

    def is_corner(self) -> bool:
        return (self.row, self.col) in CORNERS


class IllegalMoveError(ValueError):
    """Raised when a move outside the current legal-move set is applied."""

    def __init__(self, move: Move, color: Color):
        super().__init__(f"Illegal move {tuple(move)} for {color.name}")
        self.move = move
        self.color = color


def _build_rays() -> Tuple[Tuple[Tuple[int, ...], ...], ...]:
    """For every cell, the cell indices walked in each direction to the edge."""
    rays = []
    for idx in range(NUM_CELLS):
        row, col = divmod(idx, BOARD_SIZE)
        cell_rays = []
        for d_row, d_col in DIRECTIONS:
            r, c = row + d_row, col + d_col
            ray = []
            while 0 <= r < BOARD_SIZE and 0 <= c < BOARD_SIZE:
                ray.append(r * BOARD_SIZE + c)
                r += d_row
                c += d_col
            if len(ray) >= 2:  # need room for at least one capture + anchor
                cell_rays.append(tuple(ray))
        rays.append(tuple(cell_rays))
    return tuple(rays)


RAYS = _build_rays()

_SYMBOLS = {EMPTY: '_', Color.BLACK: 'B', Color.WHITE: 'W'}
_PARSE = {'_': EMPTY, '.': EMPTY, 'B': Color.BLACK, 'W': Color.WHITE}


@dataclass(frozen=True)
class Board:
    """Immutable 8x8 Reversi position."""
    cells: Tuple[int, ...]

    def __post_init__(self):
        if len(self.cells) != NUM_CELLS:
            raise ValueError(f"Board needs {NUM_CELLS} cells, got {len(self.cells)}")

    @classmethod
    def empty(cls) -> 'Board':
        return cls((EMPTY,) * NUM_CELLS)

    @classmethod
    def initial(cls) -> 'Board':
        """Standard opening: White on the main diagonal of the centre."""
        cells = [EMPTY] * NUM_CELLS
        center = BOARD_SIZE // 2
        cells[(center - 1) * BOARD_SIZE + (center - 1)] = int(Color.WHITE)
        cells[center * BOARD_SIZE + center] = int(Color.WHITE)
        cells[(center - 1) * BOARD_SIZE + center] = int(Color.BLACK)
        cells[center * BOARD_SIZE + (center - 1)] = int(Color.BLACK)
        return cls(tuple(cells))

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> 'Board':
        """Parse 8 strings of '_'/'.'/'B'/'W' (whitespace ignored)."""
        cleaned = [''.join(row.split()) for row in rows]
        if len(cleaned) != BOARD_SIZE or any(len(r) != BOARD_SIZE for r in cleaned):
            raise ValueError("Expected 8 rows of 8 cells")
        try:
            cells = tuple(int(_PARSE[ch]) for row in cleaned for ch in row)
        except KeyError as e:
            raise ValueError(f"Unknown cell symbol {e.args[0]!r}") from None
        return cls(cells)

    @classmethod
    def from_grid(cls, grid: Sequence[Sequence[Optional[str]]]) -> 'Board':
        """Build from a nested list of 'Black'/'White'/None values."""
        names = {None: EMPTY, 'Black': Color.BLACK, 'White': Color.WHITE}
        return cls(tuple(int(names[cell]) for row in grid for cell in row))

    def at(self, row: int, col: int) -> int:
        return self.cells[row * BOARD_SIZE + col]

    def to_rows(self) -> List[str]:
        return [
            ''.join(_SYMBOLS[self.cells[r * BOARD_SIZE + c]] for c in range(BOARD_SIZE))
            for r in range(BOARD_SIZE)
        ]

    def render(self) -> str:
        """Multi-line text rendering for logs."""
        header = '  ' + ' '.join(str(c) for c in range(BOARD_SIZE))
        lines = [header]
        for r, row in enumerate(self.to_rows()):
            lines.append(f"{r} " + ' '.join('.' if ch == '_' else ch for ch in row))
        return '\n'.join(lines)

    def count(self, value: int) -> int:
        return self.cells.count(value)


# ── Rules ─────────────────────────────────────────────────────────────────

def _captures(cells: Tuple[int, ...], index: int, color: int) -> List[int]:
    """Indices flipped by `color` playing at `index` (empty if none)."""
    flips = []
    for ray in RAYS[index]:
        run = []
        for idx in ray:
            cell = cells[idx]
            if cell == EMPTY:
                break
            if cell == color:
                if run:
                    flips.extend(run)
                break
            run.append(idx)
    return flips


def _is_legal(cells: Tuple[int, ...], index: int, color: int) -> bool:
    if cells[index] != EMPTY:
        return False
    for ray in RAYS[index]:
        seen_opponent = False
        for idx in ray:
            cell = cells[idx]
            if cell == EMPTY:
                break
            if cell == color:
                if seen_opponent:
                    return True
                break
            seen_opponent = True
    return False


def legal_moves(board: Board, color: Color) -> Tuple[Move, ...]:
    """All legal moves for `color`, in row-major order."""
    cells = board.cells
    return tuple(
        Move.from_index(idx)
        for idx in range(NUM_CELLS)
        if _is_legal(cells, idx, color)
    )


def is_legal_move(board: Board, color: Color, move: Move) -> bool:
    row, col = move
    if not (0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE):
        return False
    return _is_legal(board.cells, row * BOARD_SIZE + col, color)


def apply_move(board: Board, color: Color, move: Move) -> Board:
    """Place a disk for `color` and flip every sandwiched run.

    Raises IllegalMoveError if the move is not legal; `board` is never
    modified either way.
    """
    move = Move(*move)
    if not is_legal_move(board, color, move):
        raise IllegalMoveError(move, color)
    index = move.index
    cells = list(board.cells)
    cells[index] = int(color)
    for idx in _captures(board.cells, index, color):
        cells[idx] = int(color)
    return Board(tuple(cells))


def score(board: Board) -> Dict[Color, int]:
    """Disk counts per color."""
    return {
        Color.BLACK: board.count(Color.BLACK),
        Color.WHITE: board.count(Color.WHITE),
    }


def empty_count(board: Board) -> int:
    return board.count(EMPTY)


def has_moves(board: Board, color: Color) -> bool:
    cells = board.cells
    return any(_is_legal(cells, idx, color) for idx in range(NUM_CELLS))


def is_game_over(board: Board) -> bool:
    return not has_moves(board, Color.BLACK) and not has_moves(board, Color.WHITE)


def winner(board: Board) -> Optional[Color]:
    """Color with more disks, or None on a draw."""
    counts = score(board)
    if counts[Color.BLACK] > counts[Color.WHITE]:
        return Color.BLACK
    if counts[Color.WHITE] > counts[Color.BLACK]:
        return Color.WHITE
    return None


class Turn(NamedTuple):
    """One ply of a game: the position before the move, the move, the mover."""
    board: Board
    move: Move
    color: Color
