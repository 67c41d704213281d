from __future__ import annotations

from typing import Any, Sequence

from contractor.core.models import ValueKind
from contractor.core.registry import solver


Matrix = Sequence[Sequence[Any]]


def _rectangular(mat: Matrix) -> bool:
    return bool(mat) and bool(mat[0]) and all(len(row) == len(mat[0]) for row in mat)


def spiralize(mat: Matrix) -> list[Any] | None:
    if not _rectangular(mat):
        return None

    res: list[Any] = []
    top, left = 0, 0
    bottom, right = len(mat) - 1, len(mat[0]) - 1

    while top <= bottom and left <= right:
        for c in range(left, right + 1):
            res.append(mat[top][c])
        top += 1

        for r in range(top, bottom + 1):
            res.append(mat[r][right])
        right -= 1

        if top <= bottom:
            for c in range(right, left - 1, -1):
                res.append(mat[bottom][c])
            bottom -= 1

        if left <= right:
            for r in range(bottom, top - 1, -1):
                res.append(mat[r][left])
            left += 1

    return res


def min_path_triangle(tri: Matrix) -> int | None:
    if not tri or any(len(row) != i + 1 for i, row in enumerate(tri)):
        return None

    best = list(tri[-1])
    for r in range(len(tri) - 2, -1, -1):
        for i in range(r + 1):
            best[i] = tri[r][i] + min(best[i], best[i + 1])
    return best[0]


def unique_paths_i(data: Sequence[int]) -> int | None:
    """Right/down paths across an ``m`` x ``n`` grid, payload ``[m, n]``."""
    if len(data) != 2:
        return None
    m, n = data
    if not all(isinstance(x, int) and not isinstance(x, bool) for x in (m, n)) or m < 1 or n < 1:
        return None

    row = [1] * n
    for _ in range(1, m):
        for c in range(1, n):
            row[c] += row[c - 1]
    return row[n - 1]


def unique_paths_ii(grid: Matrix) -> int | None:
    """Same walk as ``unique_paths_i``; cells holding 1 are obstacles."""
    if not _rectangular(grid):
        return None

    n = len(grid[0])
    row = [0] * n
    row[0] = 0 if grid[0][0] == 1 else 1

    for cells in grid:
        for c in range(n):
            if cells[c] == 1:
                row[c] = 0
            elif c > 0:
                row[c] += row[c - 1]
    return row[n - 1]


SOLVERS = [
    solver("Spiralize Matrix", spiralize, ValueKind.MATRIX, ValueKind.SEQUENCE),
    solver("Minimum Path Sum in a Triangle", min_path_triangle, ValueKind.MATRIX, ValueKind.NUMBER),
    solver("Unique Paths in a Grid I", unique_paths_i, ValueKind.SEQUENCE, ValueKind.NUMBER),
    solver("Unique Paths in a Grid II", unique_paths_ii, ValueKind.MATRIX, ValueKind.NUMBER),
]
