import math
from typing import Optional

from tilemerge.board import Board, Direction, MoveResult, SIZE

MIN_SWIPE = 24.0

# WASD plus the arrow names
DIRECTION_KEYS = {
    'w': Direction.UP,
    's': Direction.DOWN,
    'a': Direction.LEFT,
    'd': Direction.RIGHT,
    'up': Direction.UP,
    'down': Direction.DOWN,
    'left': Direction.LEFT,
    'right': Direction.RIGHT,
}


def direction_from_swipe(dx: float, dy: float, min_swipe: float = MIN_SWIPE) -> Optional[Direction]:
    """Classify a drag by its dominant axis; y grows upwards."""
    if math.hypot(dx, dy) <= min_swipe:
        return None
    if abs(dx) > abs(dy):
        return Direction.RIGHT if dx > 0 else Direction.LEFT
    return Direction.UP if dy > 0 else Direction.DOWN


def render_board(grid) -> str:
    """Format the grid with row 3 on top, so 'up' points up on screen."""
    lines = []
    for row in range(SIZE - 1, -1, -1):
        lines.append(' '.join(f'{cell:4d}' if cell else '   .' for cell in grid[row]))
    return '\n'.join(lines)


def describe_moves(result: MoveResult) -> list:
    lines = []
    for event in result.moves:
        action = 'merges into' if event.merged else 'slides to'
        lines.append(f"{event.value} at {event.source} {action} {event.target}")
    if result.spawn is not None:
        lines.append(f"new {result.spawn.value} at {result.spawn.position}")
    return lines


def status_message(board: Board) -> Optional[str]:
    if board.lost:
        return "Game Over - press r to restart"
    if board.won:
        return "You Win! Keep going or press r to restart"
    return None


def print_board(board: Board):
    """Pretty print the game board."""
    print(render_board(board.grid))
    print(f"Score: {board.score}  Best: {board.best}\n")


def main():
    # Initialize the game
    game = Board()

    print("Welcome to 2048!")
    print("Use 'w' (up), 's' (down), 'a' (left), 'd' (right) to move tiles")
    print("Press 'r' to restart, 'q' to quit\n")

    # Game loop
    while True:
        print_board(game)
        status = status_message(game)
        if status:
            print(status + "\n")

        move = input("Enter your move: ").strip().lower()

        if move == 'q':
            print("Thanks for playing!")
            break

        if move == 'r':
            game.reset()
            continue

        if move not in DIRECTION_KEYS:
            print("Invalid input! Use 'w', 'a', 's', 'd' to move, 'r' to restart, 'q' to quit")
            continue

        if game.lost:
            continue

        result = game.move(DIRECTION_KEYS[move])
        if not result:
            print("Invalid move!")
        for line in describe_moves(result):
            print(line)
        print()


if __name__ == "__main__":
    main()
