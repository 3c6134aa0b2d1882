import math

import pytest

from pollo.triangular import (
    TriangularMatrix,
    triangular_matrix_ij,
    triangular_matrix_index,
    triangular_matrix_len,
)


def test_index_roundtrip():
    for i in range(20):
        for j in range(i + 1):
            assert triangular_matrix_ij(triangular_matrix_index(i, j)) == (i, j)


def test_index_symmetric():
    assert triangular_matrix_index(3, 5) == triangular_matrix_index(5, 3)


def test_len_matches_indices():
    for n in range(1, 10):
        assert triangular_matrix_index(n - 1, n - 1) + 1 == triangular_matrix_len(n)


def test_fill_and_zeros():
    m = TriangularMatrix.fill(4, 7)
    assert m.vec == [7] * triangular_matrix_len(4)
    assert TriangularMatrix.zeros(3).vec == [0] * triangular_matrix_len(3)


def test_getset_symmetric():
    m = TriangularMatrix.zeros(4)
    m[1, 3] = 9
    assert m[3, 1] == 9
    assert m.row(1)[3] == 9 and m.row(3)[1] == 9


def test_row_matches_getitem():
    m = TriangularMatrix(3, list(range(triangular_matrix_len(3))))
    for i in range(3):
        assert m.row(i) == [m[i, j] for j in range(3)]


def test_drop_keeps_cells_touching_index():
    m = TriangularMatrix(3, list(range(triangular_matrix_len(3))))
    dropped = m.drop(1)
    assert sorted(dropped.vec) == sorted({m[1, j] for j in range(3)})


def test_arithmetic_elementwise():
    a = TriangularMatrix(2, [1.0, 2.0, 3.0])
    b = TriangularMatrix(2, [4.0, 5.0, 6.0])
    assert (a + b).vec == [x + y for x, y in zip(a.vec, b.vec)]
    assert (a - b + b).vec == a.vec
    assert (a * 2.0).vec == [x * 2.0 for x in a.vec]
    assert (1.0 + a).vec == (a + 1.0).vec
    assert (-a).vec == [-x for x in a.vec]
    assert (a / a).vec == [1.0, 1.0, 1.0]


def test_shape_mismatch():
    with pytest.raises(ValueError):
        TriangularMatrix(2, [1, 2, 3]) + TriangularMatrix(3, [0] * 6)


def test_division_by_zero_gives_nan_then_fillna():
    m = TriangularMatrix(2, [0.0, 1.0, 2.0]) / TriangularMatrix(2, [0.0, 1.0, 1.0])
    assert math.isnan(m.vec[0])
    m.fillna(0.0)
    assert m.vec == [0.0, 1.0, 2.0]


def test_dict_roundtrip_and_map():
    m = TriangularMatrix(2, [1, 2, 3])
    assert TriangularMatrix.from_dict(m.to_dict()) == m
    assert m.map(float).vec == [1.0, 2.0, 3.0]


def test_str_layout():
    text = str(TriangularMatrix(2, [1, 2, 3]))
    lines = text.split("\n")
    assert len(lines) == 2
    assert lines[1].split() == ["2", "3"]