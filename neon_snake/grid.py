"""Grid bounds and wrap-around."""

from typing import Iterator

from .models import Cell


class GridModel:
    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def center(self) -> Cell:
        return self.width // 2, self.height // 2

    def contains(self, cell: Cell) -> bool:
        x, y = cell
        return 0 <= x < self.width and 0 <= y < self.height

    def wrap(self, cell: Cell) -> Cell:
        x, y = cell
        return x % self.width, y % self.height

    def cells(self) -> Iterator[Cell]:
        for y in range(self.height):
            for x in range(self.width):
                yield x, y

    def __repr__(self):
        return f"<GridModel {self.width}x{self.height}>"
