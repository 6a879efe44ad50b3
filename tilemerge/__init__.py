from tilemerge.board import (
    Board,
    Direction,
    MoveEvent,
    MoveResult,
    SpawnEvent,
    compress_and_merge,
)

__all__ = [
    'Board',
    'Direction',
    'MoveEvent',
    'MoveResult',
    'SpawnEvent',
    'compress_and_merge',
]
