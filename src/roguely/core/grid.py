from __future__ import annotations

import logging
from typing import Any, Dict, Generator, Iterator, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


class Grid:
    """A dense, bounds-checked 2D container addressed as (row, col).

    Used for map cells, visibility flags and transient search bookkeeping.
    Dimensions are fixed at construction. Every out-of-range access raises
    IndexError, negative indices included, so a swapped (x, y) call site
    fails loudly instead of wrapping around.
    """

    __slots__ = ("_rows", "_cols", "_fill", "_cells")

    def __init__(self, rows: int, cols: int, fill: Any = 0) -> None:
        if rows < 0 or cols < 0:
            raise ValueError(f"Grid dimensions must be non-negative, got {rows}x{cols}")
        self._rows = int(rows)
        self._cols = int(cols)
        self._fill = fill
        self._cells: List[List[Any]] = [[fill for _ in range(self._cols)] for _ in range(self._rows)]
        logger.debug("Grid created: %dx%d fill=%r", self._rows, self._cols, fill)

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def fill_value(self) -> Any:
        return self._fill

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self._rows and 0 <= col < self._cols

    def _check(self, row: int, col: int) -> None:
        if not self.in_bounds(row, col):
            raise IndexError(f"Cell ({row}, {col}) out of bounds for grid {self._rows}x{self._cols}")

    def get(self, row: int, col: int) -> Any:
        self._check(row, col)
        return self._cells[row][col]

    def set(self, row: int, col: int, value: Any) -> None:
        self._check(row, col)
        self._cells[row][col] = value

    def __getitem__(self, key: Tuple[int, int]) -> Any:
        row, col = key
        return self.get(row, col)

    def __setitem__(self, key: Tuple[int, int], value: Any) -> None:
        row, col = key
        self.set(row, col, value)

    def clear(self) -> None:
        """Reset every cell to the fill value given at construction."""
        self.fill(self._fill)

    def fill(self, value: Any) -> None:
        for row in self._cells:
            for c in range(self._cols):
                row[c] = value

    def count(self, value: Any) -> int:
        return sum(1 for row in self._cells for v in row if v == value)

    def iter_cells(self) -> Generator[Tuple[int, int, Any], None, None]:
        for r, row in enumerate(self._cells):
            for c, value in enumerate(row):
                yield r, c, value

    def neighbors4(self, row: int, col: int) -> Generator[Tuple[int, int], None, None]:
        for dr, dc in ((-1, 0), (1, 0), (0, -1), (0, 1)):
            nr, nc = row + dr, col + dc
            if self.in_bounds(nr, nc):
                yield nr, nc

    def copy(self) -> "Grid":
        clone = Grid(self._rows, self._cols, self._fill)
        clone._cells = [row[:] for row in self._cells]
        return clone

    def to_lists(self) -> List[List[Any]]:
        return [row[:] for row in self._cells]

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Any]], fill: Any = 0) -> "Grid":
        """Build a grid from nested row sequences; all rows must share one width."""
        height = len(rows)
        width = len(rows[0]) if height else 0
        for i, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(f"All rows must have equal width; row 0 has {width}, row {i} has {len(row)}")
        grid = cls(height, width, fill)
        grid._cells = [list(row) for row in rows]
        return grid

    @classmethod
    def from_lines(cls, lines: Sequence[str], mapping: Optional[Dict[str, Any]] = None, fill: Any = 0) -> "Grid":
        """Create a grid from an ASCII picture.

        Defaults: '#' -> 0 (wall), '.' -> 1 (floor), ' ' -> 9 (void).
        """
        mapping = mapping or {"#": 0, ".": 1, " ": 9}
        return cls.from_rows([[mapping[ch] for ch in line] for line in lines], fill=fill)

    def to_lines(self, mapping: Optional[Dict[Any, str]] = None) -> List[str]:
        mapping = mapping or {0: "#", 1: ".", 9: " "}
        return ["".join(mapping.get(v, "?") for v in row) for row in self._cells]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self._rows == other._rows and self._cols == other._cols and self._cells == other._cells

    def __iter__(self) -> Iterator[List[Any]]:
        return iter([row[:] for row in self._cells])

    def __repr__(self) -> str:
        return f"Grid(rows={self._rows}, cols={self._cols})"
