"""Lower-triangular (symmetric) matrices stored as a flat list."""

from __future__ import annotations

import math
import operator
from dataclasses import dataclass, field
from math import isqrt
from typing import Any, Callable


def triangular_matrix_index(i: int, j: int) -> int:
    """Flat index of cell (i, j); the order of i and j does not matter."""
    small, big = min(i, j), max(i, j)
    return big * (big + 1) // 2 + small


def triangular_matrix_ij(index: int) -> tuple[int, int]:
    """Row and column (row >= column) of a flat index."""
    i = (isqrt(1 + 8 * index) - 1) // 2
    return i, index - triangular_matrix_index(i, 0)


def triangular_matrix_len(n: int) -> int:
    """Number of stored cells of an n x n triangular matrix."""
    return n * (n + 1) // 2


def _safe_div(a: Any, b: Any) -> Any:
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0 or (isinstance(a, float) and math.isnan(a)):
            return math.nan
        return math.copysign(math.inf, a)


@dataclass
class TriangularMatrix:
    """A symmetric matrix holding only its lower triangle, diagonal included."""

    size: int
    vec: list = field(default_factory=list)

    @classmethod
    def fill(cls, n: int, value: Any) -> "TriangularMatrix":
        return cls(n, [value] * triangular_matrix_len(n))

    @classmethod
    def zeros(cls, n: int) -> "TriangularMatrix":
        return cls.fill(n, 0)

    def row(self, index: int) -> list:
        """The full row `index` of the symmetric matrix."""
        return [self.vec[triangular_matrix_index(index, i)] for i in range(self.size)]

    def drop(self, index: int) -> "TriangularMatrix":
        """The cells lying in row or column `index`, in storage order."""
        kept = [
            value
            for idx, value in enumerate(self.vec)
            if index in triangular_matrix_ij(idx)
        ]
        return TriangularMatrix(self.size, kept)

    def map(self, func: Callable[[Any], Any]) -> "TriangularMatrix":
        return TriangularMatrix(self.size, [func(v) for v in self.vec])

    def fillna(self, value: float) -> None:
        """Replace NaN cells with `value`, in place."""
        self.vec = [
            value if isinstance(v, float) and math.isnan(v) else v for v in self.vec
        ]

    def to_dict(self) -> dict:
        return {"size": self.size, "vec": list(self.vec)}

    @classmethod
    def from_dict(cls, data: dict) -> "TriangularMatrix":
        return cls(int(data["size"]), list(data["vec"]))

    def __getitem__(self, key: tuple[int, int]) -> Any:
        i, j = key
        return self.vec[triangular_matrix_index(i, j)]

    def __setitem__(self, key: tuple[int, int], value: Any) -> None:
        i, j = key
        self.vec[triangular_matrix_index(i, j)] = value

    def _combine(self, other: Any, op: Callable[[Any, Any], Any], verb: str) -> "TriangularMatrix":
        if isinstance(other, TriangularMatrix):
            if len(self.vec) != len(other.vec):
                raise ValueError(f"cannot {verb} matrices of different shape")
            return TriangularMatrix(self.size, [op(a, b) for a, b in zip(self.vec, other.vec)])
        return TriangularMatrix(self.size, [op(a, other) for a in self.vec])

    def __neg__(self) -> "TriangularMatrix":
        return TriangularMatrix(self.size, [-v for v in self.vec])

    def __add__(self, other: Any) -> "TriangularMatrix":
        return self._combine(other, operator.add, "add")

    def __radd__(self, other: Any) -> "TriangularMatrix":
        return self._combine(other, lambda a, b: b + a, "add")

    def __sub__(self, other: Any) -> "TriangularMatrix":
        return self._combine(other, operator.sub, "subtract")

    def __mul__(self, other: Any) -> "TriangularMatrix":
        return self._combine(other, operator.mul, "multiply")

    def __truediv__(self, other: Any) -> "TriangularMatrix":
        return self._combine(other, _safe_div, "divide")

    def __str__(self) -> str:
        rows = [[repr(self[i, j]) for j in range(i + 1)] for i in range(self.size)]
        width = max((len(c) for r in rows for c in r), default=0)
        return "\n".join("  ".join(c.rjust(width) for c in r) for r in rows)