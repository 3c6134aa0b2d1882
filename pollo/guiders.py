"""Choice of guiding samples and their weights for each sample."""

from __future__ import annotations

import math
from collections import deque
from typing import Any, Optional

from pollo.distances import CrossCmpTri, Dists
from pollo.triangular import TriangularMatrix, triangular_matrix_ij

PLOIDY = 2

GuiderList = list[tuple[int, float]]
Guider = list[GuiderList]


def deque_insert_replace(deque: deque, value: Any, limit: int) -> None:
    """Push `value` at the front, dropping the back item once `limit` is reached."""
    if len(deque) >= limit and deque:
        deque.pop()
    deque.appendleft(value)


def _best_pair(result: TriangularMatrix, x: int) -> tuple[int, int]:
    best: Optional[tuple[int, int]] = None
    best_value = -math.inf
    for k, value in enumerate(result.vec):
        i, j = triangular_matrix_ij(k)
        if i == x or j == x or i == j:
            continue
        if value > best_value:
            best, best_value = (i, j), value
    if best is None:
        raise ValueError(f"no guiding pair of samples found for sample {x}")
    return best


def sample_guiders(corr: TriangularMatrix, x: int, limit: Optional[int]) -> Guider:
    """Weighted guiders of sample `x` for each of its two haplotypes."""
    cct = CrossCmpTri(corr.size)
    arr_x = corr.row(x)
    arr_xi, arr_xj = cct.get_ij_arrs(arr_x, 1)
    products = TriangularMatrix(corr.size, [a * b for a, b in zip(arr_xi, arr_xj)])
    gi, gj = _best_pair(products / corr, x)

    row_i, row_j = corr.row(gi), corr.row(gj)
    scores = [(a - b) * c for a, b, c in zip(row_i, row_j, arr_x)]

    if limit is not None:
        pos: Any = deque()
        neg: Any = deque()
        add = lambda target, item: deque_insert_replace(target, item, limit)
    else:
        pos, neg = [], []
        add = lambda target, item: target.append(item)

    sum_pos = sum_neg = 0.0
    for s, v in enumerate(scores):
        if s == x:
            continue
        if v > 0.0:
            e = math.exp(v)
            add(pos, (s, e))
            sum_pos += e
        elif v < 0.0:
            e = math.exp(v)
            add(neg, (s, e))
            sum_neg += e

    return [
        [(s, e / sum_pos) for s, e in pos],
        [(s, e / sum_neg) for s, e in neg],
    ]


def gen_guiders(dists: list[Optional[Dists]],
                limit: Optional[int]) -> list[Optional[list[Guider]]]:
    """Guiders for every sample of every contig that has distances."""
    guiders: list[Optional[list[Guider]]] = []
    for d in dists:
        if d is None:
            guiders.append(None)
            continue
        corr = -d.dist.map(float) / (d.cmps.map(float) * float(PLOIDY)) + 1.0
        corr.fillna(0.0)
        guiders.append([sample_guiders(corr, x, limit) for x in range(corr.size)])
    return guiders