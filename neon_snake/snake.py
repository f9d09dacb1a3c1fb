"""Snake body and direction bookkeeping."""

from collections import deque
from typing import Optional

from .constants import MIN_SNAKE_LENGTH
from .models import Cell, Vector


def is_reversal(a: Vector, b: Vector) -> bool:
    return a[0] == -b[0] and a[1] == -b[1]


class SnakeState:
    """
    Cells of the snake from head (index 0) to tail, plus its heading.

    Input only ever writes ``pending``; ``advance`` moves it into
    ``direction`` once per tick, so a tick always sees a settled heading.
    """

    def __init__(self, cells: list[Cell], direction: Vector = (1, 0)):
        if not cells:
            raise ValueError("a snake needs at least one cell")
        self.cells = deque(cells)
        self.direction = direction
        self.pending: Optional[Vector] = None

    @classmethod
    def spawn(cls, head: Cell, length: int, direction: Vector = (1, 0)) -> "SnakeState":
        hx, hy = head
        dx, dy = direction
        return cls([(hx - dx * i, hy - dy * i) for i in range(length)], direction)

    @property
    def head(self) -> Cell:
        return self.cells[0]

    @property
    def tail(self) -> Cell:
        return self.cells[-1]

    def __len__(self):
        return len(self.cells)

    def __contains__(self, cell):
        return cell in self.cells

    def propose(self, direction: Vector) -> bool:
        if is_reversal(direction, self.direction):
            return False
        if self.pending is not None and is_reversal(direction, self.pending):
            return False
        self.pending = direction
        return True

    def advance(self) -> Cell:
        if self.pending is not None:
            self.direction = self.pending
            self.pending = None
        hx, hy = self.head
        dx, dy = self.direction
        return hx + dx, hy + dy

    def hits_body(self, cell: Cell, growing: bool = False) -> bool:
        # The tail moves out of the way this tick unless the snake grows.
        body = list(self.cells)
        if not growing:
            body = body[:-1]
        return cell in body

    def commit(self, head: Cell, grow: bool = False):
        self.cells.appendleft(head)
        if not grow:
            self.cells.pop()

    def shrink(self, min_length: int = MIN_SNAKE_LENGTH) -> int:
        """Halve the snake, keeping at least ``min_length`` cells.

        Returns the number of cells removed (0 when halving would go below
        the minimum).
        """
        length = len(self.cells)
        if length / 2 > length - min_length:
            return 0
        target = max(min_length, length // 2)
        removed = length - target
        for _ in range(removed):
            self.cells.pop()
        return removed
