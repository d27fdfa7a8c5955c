"""
Tests for structural matrix operations.

Validates:
    - Transposition (twice is the identity), conjugate transpose
    - Row and column extraction with ranges and result destinations
    - Row, column, diagonal and block assignment with range checks
    - Insertion, append, stack and diagonal stack
    - Triangles (lower + strictly upper reassembles the matrix)
    - Row and column permutation through inversion sequences
    - Row and column normalization
    - Construction from rows and columns
"""

import numpy as np
import pytest

from pylinalg.core.exceptions import (
    DimensionError,
    DivideByZeroError,
    IndexOutOfRangeError,
    StructurallyUnsupportedError,
    ValidationError,
)
from pylinalg.matrix import (
    DenseMatrix,
    DiagonalMatrix,
    GenericMatrix,
    Matrix,
    SparseMatrix,
    SquareMatrix,
)
from pylinalg.permutation import Permutation
from pylinalg.vector import DenseVector


M = np.arange(1.0, 10.0).reshape(3, 3)


# ═══════════════════════════════════════════════════════════════════════
# Transposition
# ═══════════════════════════════════════════════════════════════════════


class TestTranspose:
    """transpose / conjugate_transpose."""

    def test_transpose(self, make_matrix, rng):
        values = rng.standard_normal((2, 4))
        t = make_matrix(values).transpose()
        assert (t.row_count, t.column_count) == (4, 2)
        np.testing.assert_array_equal(t.to_array(), values.T)

    def test_transpose_twice_is_identity(self, make_matrix, rng):
        a = make_matrix(rng.standard_normal((3, 2)))
        assert a.transpose().transpose() == a

    def test_conjugate_transpose(self):
        values = np.array([[1 + 1j, 2.0], [0.0, 3 - 2j]])
        result = DenseMatrix.of_array(values).conjugate_transpose()
        np.testing.assert_array_equal(result.to_array(), values.conj().T)


# ═══════════════════════════════════════════════════════════════════════
# Rows, columns and diagonals
# ═══════════════════════════════════════════════════════════════════════


class TestRowsAndColumns:
    """Extraction and assignment of single rows and columns."""

    def test_row_and_column(self, make_matrix):
        a = make_matrix(M)
        np.testing.assert_array_equal(a.row(1).to_array(), [4.0, 5.0, 6.0])
        np.testing.assert_array_equal(a.column(2).to_array(), [3.0, 6.0, 9.0])

    def test_partial_row(self, make_matrix):
        a = make_matrix(M)
        np.testing.assert_array_equal(a.row(1, start=1).to_array(), [5.0, 6.0])
        np.testing.assert_array_equal(a.column(0, start=1, length=1).to_array(), [4.0])

    def test_row_into_result(self, make_matrix):
        out = DenseVector.zeros(3)
        assert make_matrix(M).row(2, result=out) is out
        np.testing.assert_array_equal(out.to_array(), [7.0, 8.0, 9.0])

    def test_row_result_wrong_length(self, make_matrix):
        with pytest.raises(DimensionError, match="result"):
            make_matrix(M).row(0, result=DenseVector.zeros(2))

    def test_row_out_of_range(self, make_matrix):
        with pytest.raises(IndexOutOfRangeError):
            make_matrix(M).row(3)

    def test_range_out_of_range(self, make_matrix):
        with pytest.raises(IndexOutOfRangeError):
            make_matrix(M).row(0, start=2, length=2)

    def test_set_row_from_array(self, make_matrix):
        a = make_matrix(M)
        a.set_row(0, [0.0, -1.0, -2.0])
        np.testing.assert_array_equal(a.row(0).to_array(), [0.0, -1.0, -2.0])

    def test_set_column_from_vector(self, make_matrix):
        a = make_matrix(M)
        a.set_column(1, DenseVector.of_array([7.0, 7.0, 7.0]))
        np.testing.assert_array_equal(a.column(1).to_array(), [7.0, 7.0, 7.0])
        assert a[0, 0] == 1.0

    def test_set_row_wrong_length(self, make_matrix):
        with pytest.raises(DimensionError, match="values"):
            make_matrix(M).set_row(0, [1.0, 2.0])

    def test_clear_row_and_column(self, make_matrix):
        a = make_matrix(M)
        a.clear_row(0)
        a.clear_column(2)
        expected = M.copy()
        expected[0, :] = 0
        expected[:, 2] = 0
        np.testing.assert_array_equal(a.to_array(), expected)

    def test_clear_sub_matrix(self, make_matrix):
        a = make_matrix(M)
        a.clear_sub_matrix(1, 2, 1, 2)
        np.testing.assert_array_equal(a.to_array(), [[1, 2, 3], [4, 0, 0], [7, 0, 0]])

    def test_iter_rows_and_columns(self, make_matrix):
        a = make_matrix(M)
        assert [r.to_array().tolist() for r in a.iter_rows()] == M.tolist()
        assert [c.to_array().tolist() for c in a.iter_columns()] == M.T.tolist()

    def test_diagonal(self, make_matrix):
        np.testing.assert_array_equal(make_matrix(M).diagonal().to_array(), [1.0, 5.0, 9.0])

    def test_rectangular_diagonal(self, make_matrix):
        np.testing.assert_array_equal(make_matrix(np.ones((2, 4))).diagonal().to_array(), [1.0, 1.0])

    def test_set_diagonal(self, make_matrix):
        a = make_matrix(M)
        a.set_diagonal([0.0, 0.0, 0.0])
        np.testing.assert_array_equal(a.to_array(), M - np.diag([1.0, 5.0, 9.0]))


# ═══════════════════════════════════════════════════════════════════════
# Sub-matrices
# ═══════════════════════════════════════════════════════════════════════


class TestSubMatrix:
    """sub_matrix / set_sub_matrix."""

    def test_sub_matrix(self, make_matrix):
        block = make_matrix(M).sub_matrix(1, 2, 0, 2)
        np.testing.assert_array_equal(block.to_array(), [[4.0, 5.0], [7.0, 8.0]])

    def test_sub_matrix_into_result(self, make_matrix):
        out = DenseMatrix.of_array(np.full((1, 3), 5.0))
        make_matrix(M).sub_matrix(2, 1, 0, 3, result=out)
        np.testing.assert_array_equal(out.to_array(), [[7.0, 8.0, 9.0]])

    def test_sub_matrix_out_of_range(self, make_matrix):
        with pytest.raises(IndexOutOfRangeError):
            make_matrix(M).sub_matrix(2, 2, 0, 1)

    def test_sub_matrix_zero_count(self, make_matrix):
        with pytest.raises(ValidationError):
            make_matrix(M).sub_matrix(0, 0, 0, 1)

    def test_set_sub_matrix(self, make_matrix):
        a = make_matrix(M)
        a.set_sub_matrix(0, 2, 1, 2, DenseMatrix.of_array([[0.0, -1.0], [-2.0, -3.0]]))
        np.testing.assert_array_equal(a.to_array(), [[1, 0, -1], [4, -2, -3], [7, 8, 9]])

    def test_set_sub_matrix_source_too_small(self, make_matrix):
        with pytest.raises(IndexOutOfRangeError):
            make_matrix(M).set_sub_matrix(0, 2, 0, 2, DenseMatrix.zeros(1, 1))


# ═══════════════════════════════════════════════════════════════════════
# Insertion and concatenation
# ═══════════════════════════════════════════════════════════════════════


class TestInsertion:
    """insert_row / insert_column."""

    def test_insert_row_in_the_middle(self, make_matrix):
        result = make_matrix(M).insert_row(1, [0.0, 0.0, 0.0])
        np.testing.assert_array_equal(result.to_array(), np.insert(M, 1, 0.0, axis=0))

    def test_insert_row_at_end(self, make_matrix):
        result = make_matrix(M).insert_row(3, [-1.0, -1.0, -1.0])
        assert result.row_count == 4
        np.testing.assert_array_equal(result.row(3).to_array(), [-1.0, -1.0, -1.0])

    def test_insert_row_past_end(self, make_matrix):
        with pytest.raises(IndexOutOfRangeError):
            make_matrix(M).insert_row(4, [0.0, 0.0, 0.0])

    def test_insert_column_at_start(self, make_matrix):
        result = make_matrix(M).insert_column(0, DenseVector.of_array([9.0, 9.0, 9.0]))
        np.testing.assert_array_equal(result.to_array(), np.insert(M, 0, 9.0, axis=1))

    def test_insert_wrong_length(self, make_matrix):
        with pytest.raises(DimensionError):
            make_matrix(M).insert_column(0, [1.0])

    def test_original_unchanged(self, make_matrix):
        a = make_matrix(M)
        a.insert_row(0, [0.0, 0.0, 0.0])
        np.testing.assert_array_equal(a.to_array(), M)


class TestConcatenation:
    """append / stack / diagonal_stack."""

    def test_append(self, make_matrix):
        result = make_matrix(M).append(make_matrix(np.ones((3, 1))))
        np.testing.assert_array_equal(result.to_array(), np.hstack([M, np.ones((3, 1))]))

    def test_append_row_mismatch(self, make_matrix):
        with pytest.raises(DimensionError, match="right"):
            make_matrix(M).append(make_matrix(np.ones((2, 1))))

    def test_stack(self, make_matrix):
        result = make_matrix(M).stack(make_matrix(np.ones((1, 3))))
        np.testing.assert_array_equal(result.to_array(), np.vstack([M, np.ones((1, 3))]))

    def test_stack_column_mismatch(self, make_matrix):
        with pytest.raises(DimensionError, match="lower"):
            make_matrix(M).stack(make_matrix(np.ones((1, 2))))

    def test_diagonal_stack(self, make_matrix):
        result = make_matrix(np.ones((1, 2))).diagonal_stack(make_matrix(np.full((2, 1), 2.0)))
        np.testing.assert_array_equal(result.to_array(), [[1, 1, 0], [0, 0, 2], [0, 0, 2]])

    def test_append_into_result(self, make_matrix):
        out = DenseMatrix.of_array(np.full((3, 4), 5.0))
        make_matrix(M).append(make_matrix(np.zeros((3, 1))), result=out)
        np.testing.assert_array_equal(out.to_array(), np.hstack([M, np.zeros((3, 1))]))

    def test_append_result_wrong_shape(self, make_matrix):
        with pytest.raises(DimensionError, match="result"):
            make_matrix(M).append(make_matrix(np.ones((3, 1))), result=DenseMatrix.zeros(3, 3))


# ═══════════════════════════════════════════════════════════════════════
# Triangles
# ═══════════════════════════════════════════════════════════════════════


class TestTriangles:
    """Upper and lower triangles."""

    def test_upper_and_lower(self, make_matrix):
        a = make_matrix(M)
        np.testing.assert_array_equal(a.upper_triangle().to_array(), np.triu(M))
        np.testing.assert_array_equal(a.lower_triangle().to_array(), np.tril(M))
        np.testing.assert_array_equal(a.strictly_upper_triangle().to_array(), np.triu(M, 1))
        np.testing.assert_array_equal(a.strictly_lower_triangle().to_array(), np.tril(M, -1))

    def test_lower_plus_strictly_upper_reassembles(self, make_matrix):
        a = make_matrix(M)
        assert a.lower_triangle() + a.strictly_upper_triangle() == a

    def test_triangle_into_self(self, make_matrix):
        a = make_matrix(M)
        a.upper_triangle(result=a)
        np.testing.assert_array_equal(a.to_array(), np.triu(M))


# ═══════════════════════════════════════════════════════════════════════
# Permutation and normalization
# ═══════════════════════════════════════════════════════════════════════


class TestPermutation:
    """Row i moves to position p[i]."""

    def test_permute_rows(self, make_matrix):
        a = make_matrix(M)
        a.permute_rows(Permutation([1, 2, 0]))
        np.testing.assert_array_equal(a.to_array(), [[7, 8, 9], [1, 2, 3], [4, 5, 6]])

    def test_permute_columns(self, make_matrix):
        a = make_matrix(M)
        a.permute_columns(Permutation([1, 2, 0]))
        np.testing.assert_array_equal(a.to_array(), [[3, 1, 2], [6, 4, 5], [9, 7, 8]])

    def test_inverse_restores(self, make_matrix):
        a = make_matrix(M)
        p = Permutation([2, 0, 1])
        a.permute_rows(p)
        a.permute_rows(p.inverse())
        np.testing.assert_array_equal(a.to_array(), M)

    def test_wrong_dimension(self, make_matrix):
        with pytest.raises(DimensionError, match="permutation"):
            make_matrix(M).permute_rows(Permutation([1, 0]))

    def test_not_a_permutation_object(self, make_matrix):
        with pytest.raises(ValidationError, match="Permutation"):
            make_matrix(M).permute_rows([1, 2, 0])


class TestNormalization:
    """normalize_rows / normalize_columns."""

    def test_normalize_rows_l1(self, make_matrix):
        result = make_matrix(M).normalize_rows(1)
        np.testing.assert_allclose(result.to_array(), M / M.sum(axis=1, keepdims=True))

    def test_normalize_columns_l2(self, make_matrix):
        result = make_matrix(M).normalize_columns(2)
        np.testing.assert_allclose(result.to_array(), M / np.linalg.norm(M, axis=0))

    def test_zero_row(self, make_matrix):
        with pytest.raises(DivideByZeroError):
            make_matrix([[1.0, 2.0], [0.0, 0.0]]).normalize_rows(2)

    def test_invalid_order(self, make_matrix):
        with pytest.raises(ValidationError):
            make_matrix(M).normalize_columns(0)


# ═══════════════════════════════════════════════════════════════════════
# Construction from rows and columns
# ═══════════════════════════════════════════════════════════════════════


class TestFromRowsAndColumns:
    """from_rows / from_columns class methods."""

    def test_from_rows(self):
        a = DenseMatrix.from_rows([[1.0, 2.0], DenseVector.of_array([3.0, 4.0])])
        np.testing.assert_array_equal(a.to_array(), [[1.0, 2.0], [3.0, 4.0]])

    def test_from_columns_sparse(self):
        a = SparseMatrix.from_columns([[1.0, 0.0, 0.0], [0.0, 0.0, 2.0]])
        assert isinstance(a, SparseMatrix)
        assert a.non_zeros_count == 2
        np.testing.assert_array_equal(a.to_array(), [[1, 0], [0, 0], [0, 2]])

    @pytest.mark.parametrize("kind,expected", [
        (DenseMatrix, DenseMatrix),
        (SparseMatrix, SparseMatrix),
        (DiagonalMatrix, DiagonalMatrix),
        (SquareMatrix, SquareMatrix),
        (GenericMatrix, DenseMatrix),
        (Matrix, DenseMatrix),
    ])
    def test_every_kind(self, kind, expected):
        values = [[1.0, 0.0], [0.0, 2.0]]
        by_rows = kind.from_rows(values)
        by_columns = kind.from_columns(values)
        assert type(by_rows) is expected
        assert type(by_columns) is expected
        np.testing.assert_array_equal(by_rows.to_array(), values)
        np.testing.assert_array_equal(by_columns.to_array(), values)

    def test_diagonal_rejects_off_diagonal_rows(self):
        with pytest.raises(StructurallyUnsupportedError):
            DiagonalMatrix.from_rows([[1.0, 5.0], [0.0, 2.0]])

    def test_integers_promote(self):
        assert DenseMatrix.from_rows([[1, 2], [3, 4]]).dtype == np.float64

    def test_complex_rows(self):
        assert DenseMatrix.from_rows([[1.0, 2j]]).dtype == np.complex128

    def test_empty(self):
        with pytest.raises(ValidationError, match="at least one"):
            DenseMatrix.from_rows([])

    def test_ragged(self):
        with pytest.raises(DimensionError, match=r"rows\[1\]"):
            DenseMatrix.from_rows([[1.0, 2.0], [3.0]])
