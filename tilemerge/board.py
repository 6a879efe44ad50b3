import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)

SIZE = 4
WIN_TILE = 2048
FOUR_PROBABILITY = 0.1

Position = Tuple[int, int]


class Direction(Enum):
    UP = 'up'
    DOWN = 'down'
    LEFT = 'left'
    RIGHT = 'right'

    @classmethod
    def parse(cls, value) -> 'Direction':
        """Accept a Direction or its case-insensitive name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for direction in cls:
                if direction.value == value.strip().lower():
                    return direction
        raise ValueError(
            f"Invalid direction {value!r}. Must be 'up', 'down', 'left', or 'right'")


@dataclass(frozen=True)
class MoveEvent:
    """One tile sliding (and possibly merging) during a move.

    Two merged events sharing a target are the pair that combined into a
    tile of ``value * 2`` at that target.
    """
    from_row: int
    from_col: int
    to_row: int
    to_col: int
    value: int
    merged: bool = False

    @property
    def source(self) -> Position:
        return self.from_row, self.from_col

    @property
    def target(self) -> Position:
        return self.to_row, self.to_col


@dataclass(frozen=True)
class SpawnEvent:
    row: int
    col: int
    value: int

    @property
    def position(self) -> Position:
        return self.row, self.col


@dataclass(frozen=True)
class MoveResult:
    """Outcome of a single call to ``Board.move``; truthy iff the grid changed."""
    moved: bool
    moves: Tuple[MoveEvent, ...] = ()
    spawn: Optional[SpawnEvent] = None
    score_gained: int = 0

    def __bool__(self) -> bool:
        return self.moved

    def merged_tiles(self) -> List[Tuple[int, int, int]]:
        """(row, col, new value) for every tile created by a merge, in scan order."""
        tiles = []
        seen = set()
        for event in self.moves:
            if event.merged and event.target not in seen:
                seen.add(event.target)
                tiles.append((event.to_row, event.to_col, event.value * 2))
        return tiles


NOT_MOVED = MoveResult(moved=False)


def _line_positions(direction: Direction) -> List[List[Position]]:
    # Slot 0 of every line is the cell tiles slide towards.
    if direction is Direction.LEFT:
        return [[(i, k) for k in range(SIZE)] for i in range(SIZE)]
    if direction is Direction.RIGHT:
        return [[(i, SIZE - 1 - k) for k in range(SIZE)] for i in range(SIZE)]
    if direction is Direction.UP:
        return [[(SIZE - 1 - k, i) for k in range(SIZE)] for i in range(SIZE)]
    return [[(k, i) for k in range(SIZE)] for i in range(SIZE)]


LINES = {direction: _line_positions(direction) for direction in Direction}


def compress_and_merge(line: List[int],
                       positions: List[Position]) -> Tuple[List[int], List[MoveEvent], int]:
    """Slide the non-zero values of ``line`` towards index 0, merging equal neighbours once.

    ``positions`` gives the board cell of each slot in the same order as
    ``line``. Returns the new line, the move events and the points scored.
    """
    non_zero = [(value, slot) for slot, value in enumerate(line) if value != 0]
    merged_line = [0] * len(line)
    events = []
    score = 0

    i = 0
    dest = 0
    while i < len(non_zero):
        value, src = non_zero[i]
        to_row, to_col = positions[dest]
        if i + 1 < len(non_zero) and non_zero[i + 1][0] == value:
            other = non_zero[i + 1][1]
            merged_line[dest] = value * 2
            score += value * 2
            # Both halves are reported, even one already sitting on the target
            for slot in (src, other):
                from_row, from_col = positions[slot]
                events.append(MoveEvent(from_row, from_col, to_row, to_col, value, merged=True))
            i += 2
        else:
            merged_line[dest] = value
            if src != dest:
                from_row, from_col = positions[src]
                events.append(MoveEvent(from_row, from_col, to_row, to_col, value))
            i += 1
        dest += 1

    return merged_line, events, score


def _validate_grid(grid) -> np.ndarray:
    values = np.asarray(grid)
    if values.shape != (SIZE, SIZE):
        raise ValueError(f"Board must be {SIZE}x{SIZE}, got shape {values.shape}")
    board = values.astype(np.int64)
    if not np.array_equal(values, board):
        raise ValueError("Tiles must be whole numbers")
    tiles = board[board != 0]
    if np.any(tiles < 2) or np.any(tiles & (tiles - 1)):
        raise ValueError("Tiles must be 0 or a power of two >= 2")
    return board


def _validate_score(score) -> int:
    if isinstance(score, bool) or not isinstance(score, (int, np.integer)):
        raise ValueError(f"Score must be an integer, got {score!r}")
    if score < 0:
        raise ValueError(f"Score must not be negative, got {score}")
    return int(score)


class Board:
    def __init__(self, seed: Optional[int] = None,
                 rng: Optional[np.random.Generator] = None,
                 best: int = 0):
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self._best = best
        self.reset()

    @classmethod
    def from_grid(cls, grid, score: int = 0, seed: Optional[int] = None,
                  rng: Optional[np.random.Generator] = None) -> 'Board':
        """Build a board positioned at ``grid`` instead of a fresh two-tile start."""
        board = cls(seed=seed, rng=rng)
        board.load(grid, score=score)
        return board

    def reset(self):
        """Start a new game: empty grid, zero score, two random tiles."""
        self._grid = np.zeros((SIZE, SIZE), dtype=np.int64)
        self._score = 0
        self._won = False
        self._lost = False
        self._last = NOT_MOVED
        self._add_new_tile()
        self._add_new_tile()
        logger.debug("New game, best score %d", self._best)

    def load(self, grid, score: int = 0):
        """Replace the current position with ``grid``."""
        self._grid = _validate_grid(grid)
        self._score = _validate_score(score)
        self._won = self.max_tile() >= WIN_TILE
        self._lost = not self.can_move()
        self._last = NOT_MOVED

    def _add_new_tile(self) -> Optional[SpawnEvent]:
        """Add a new tile (2 or 4) to a random empty cell."""
        empty_cells = self.empty_cells()
        if not empty_cells:
            return None

        row, col = empty_cells[self.rng.integers(len(empty_cells))]
        # 90% chance for 2, 10% chance for 4
        value = 2 if self.rng.random() < 1 - FOUR_PROBABILITY else 4
        self._grid[row, col] = value
        return SpawnEvent(row, col, value)

    def move(self, direction) -> MoveResult:
        """
        Move tiles in the specified direction.
        The result is truthy if the move resulted in any change.
        """
        direction = Direction.parse(direction)
        if self._lost:
            return NOT_MOVED

        original_board = self._grid
        board = np.zeros_like(original_board)
        moves = []
        score = 0
        for positions in LINES[direction]:
            line = [int(original_board[pos]) for pos in positions]
            merged_line, line_moves, line_score = compress_and_merge(line, positions)
            for pos, value in zip(positions, merged_line):
                board[pos] = value
            moves.extend(line_moves)
            score += line_score

        if np.array_equal(original_board, board):
            self._last = NOT_MOVED
            return NOT_MOVED

        self._grid = board
        self._score += score
        spawn = self._add_new_tile()
        self._best = max(self._best, self._score)
        if not self._won and self.max_tile() >= WIN_TILE:
            self._won = True
            logger.debug("Reached %d with score %d", WIN_TILE, self._score)
        self._lost = not self.can_move()
        if self._lost:
            logger.debug("Game over with score %d", self._score)

        self._last = MoveResult(True, tuple(moves), spawn, score)
        return self._last

    def can_move(self) -> bool:
        """Check if any slide or merge is still possible."""
        if np.any(self._grid == 0):
            return True

        for i in range(SIZE):
            for j in range(SIZE - 1):
                # Horizontal neighbours
                if self._grid[i][j] == self._grid[i][j + 1]:
                    return True
                # Vertical neighbours
                if self._grid[j][i] == self._grid[j + 1][i]:
                    return True
        return False

    def empty_cells(self) -> List[Position]:
        return [(int(r), int(c)) for r, c in zip(*np.where(self._grid == 0))]

    def max_tile(self) -> int:
        return int(self._grid.max())

    @property
    def grid(self) -> np.ndarray:
        """Read-only view of the current grid."""
        view = self._grid.view()
        view.flags.writeable = False
        return view

    @property
    def score(self) -> int:
        return self._score

    @property
    def best(self) -> int:
        return self._best

    @property
    def won(self) -> bool:
        return self._won

    @property
    def lost(self) -> bool:
        return self._lost

    @property
    def last_result(self) -> MoveResult:
        return self._last

    @property
    def last_moves(self) -> Tuple[MoveEvent, ...]:
        return self._last.moves

    @property
    def last_spawn(self) -> Optional[SpawnEvent]:
        return self._last.spawn

    def is_game_over(self) -> bool:
        return self._lost

    def has_won(self) -> bool:
        return self._won

    def get_board(self) -> np.ndarray:
        """Return the current board state."""
        return self._grid.copy()

    def get_score(self) -> int:
        """Return the current score."""
        return self._score
