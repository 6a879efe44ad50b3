from main import (
    DIRECTION_KEYS,
    describe_moves,
    direction_from_swipe,
    render_board,
    status_message,
)
from tilemerge.board import Board, Direction, MoveEvent, MoveResult, SpawnEvent


def test_swipe_picks_dominant_axis():
    assert direction_from_swipe(40, 10) is Direction.RIGHT
    assert direction_from_swipe(-40, 10) is Direction.LEFT
    assert direction_from_swipe(5, 30) is Direction.UP
    assert direction_from_swipe(5, -30) is Direction.DOWN


def test_short_swipe_is_ignored():
    assert direction_from_swipe(10, 10) is None
    assert direction_from_swipe(24, 0) is None
    assert direction_from_swipe(25, 0) is Direction.RIGHT


def test_keys_cover_all_directions():
    assert set(DIRECTION_KEYS.values()) == set(Direction)
    assert DIRECTION_KEYS['w'] is Direction.UP


def test_render_board_puts_last_row_on_top():
    grid = [
        [2, 0, 0, 0],
        [0, 0, 0, 0],
        [0, 0, 0, 0],
        [0, 0, 0, 8],
    ]
    lines = render_board(grid).splitlines()
    assert lines[0] == '   .    .    .    8'
    assert lines[-1] == '   2    .    .    .'


def test_describe_moves():
    result = MoveResult(
        True,
        (MoveEvent(0, 1, 0, 0, 2), MoveEvent(0, 3, 0, 1, 4, merged=True)),
        SpawnEvent(2, 2, 4),
        8,
    )
    assert describe_moves(result) == [
        "2 at (0, 1) slides to (0, 0)",
        "4 at (0, 3) merges into (0, 1)",
        "new 4 at (2, 2)",
    ]


def test_status_message():
    assert status_message(Board(seed=0)) is None
    won = Board.from_grid([[2048, 0, 0, 0]] + [[0] * 4] * 3)
    assert status_message(won).startswith("You Win!")
    lost = Board.from_grid([[2, 4, 2, 4], [4, 2, 4, 2]] * 2)
    assert status_message(lost).startswith("Game Over")
