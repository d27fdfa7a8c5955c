"""
Tests for the pylinalg exception hierarchy.

Validates:
    - Inheritance chain (all exceptions catchable via PyLinalgError)
    - Builtin mix-ins (ValueError, TypeError, IndexError, ZeroDivisionError)
    - Diagnostic attributes and their None defaults
"""

import pytest

from pylinalg.core.exceptions import (
    DimensionError,
    DivideByZeroError,
    IndexOutOfRangeError,
    NotSquareError,
    NotSupportedError,
    NullArgumentError,
    NumericalError,
    ProviderError,
    PyLinalgError,
    SingularMatrixError,
    StructurallyUnsupportedError,
    ValidationError,
)


# ═══════════════════════════════════════════════════════════════════════
# Inheritance hierarchy
# ═══════════════════════════════════════════════════════════════════════


class TestInheritance:
    """Every exception is catchable via PyLinalgError."""

    @pytest.mark.parametrize("exc", [
        ValidationError("x"),
        NullArgumentError("x"),
        DimensionError("x"),
        NotSquareError("x"),
        IndexOutOfRangeError("x"),
        NumericalError("x"),
        DivideByZeroError("x"),
        SingularMatrixError("x"),
        NotSupportedError("x"),
        StructurallyUnsupportedError("x"),
        ProviderError("x"),
    ])
    def test_all_are_pylinalg_errors(self, exc):
        with pytest.raises(PyLinalgError):
            raise exc

    def test_not_square_is_dimension_error(self):
        with pytest.raises(DimensionError):
            raise NotSquareError("not square")

    def test_structural_is_not_supported(self):
        with pytest.raises(NotSupportedError):
            raise StructurallyUnsupportedError("diagonal")

    def test_divide_by_zero_is_numerical(self):
        assert isinstance(DivideByZeroError("x"), NumericalError)

    def test_singular_is_not_validation_error(self):
        assert not isinstance(SingularMatrixError("x"), ValidationError)


class TestBuiltinMixins:
    """Callers catching builtin exception types still see pylinalg errors."""

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            raise ValidationError("bad")

    def test_null_argument_is_type_error(self):
        with pytest.raises(TypeError):
            raise NullArgumentError("other: must not be None", name="other")

    def test_index_out_of_range_is_index_error(self):
        with pytest.raises(IndexError):
            raise IndexOutOfRangeError("index: 5 out of range")

    def test_divide_by_zero_is_zero_division_error(self):
        with pytest.raises(ZeroDivisionError):
            raise DivideByZeroError("scalar: division by zero")

    def test_provider_error_is_runtime_error(self):
        with pytest.raises(RuntimeError):
            raise ProviderError("no gpu", provider="gpu_torch")


# ═══════════════════════════════════════════════════════════════════════
# Diagnostic attributes
# ═══════════════════════════════════════════════════════════════════════


class TestDimensionError:
    """DimensionError carries the parameter name and both shapes."""

    def test_all_attributes(self):
        err = DimensionError("result: wrong shape", name="result",
                             expected=(2, 3), actual=(3, 2))
        assert str(err) == "result: wrong shape"
        assert err.name == "result"
        assert err.expected == (2, 3)
        assert err.actual == (3, 2)

    def test_defaults_are_none(self):
        err = DimensionError("wrong")
        assert err.name is None
        assert err.expected is None
        assert err.actual is None


class TestIndexOutOfRangeError:
    """IndexOutOfRangeError carries the index and bound."""

    def test_all_attributes(self):
        err = IndexOutOfRangeError("row: 4 out of range", name="row", index=4, bound=3)
        assert err.name == "row"
        assert err.index == 4
        assert err.bound == 3


class TestSingularMatrixError:
    """SingularMatrixError carries matrix diagnostic attributes."""

    def test_all_attributes(self):
        err = SingularMatrixError("singular", matrix_name="A", pivot_index=2)
        assert err.matrix_name == "A"
        assert err.pivot_index == 2

    def test_defaults_are_none(self):
        err = SingularMatrixError("singular")
        assert err.matrix_name is None
        assert err.pivot_index is None


class TestStructurallyUnsupportedError:
    """StructurallyUnsupportedError names the storage and missing capability."""

    def test_all_attributes(self):
        err = StructurallyUnsupportedError("no", storage="DiagonalMatrixStorage",
                                           capability="permutable")
        assert err.storage == "DiagonalMatrixStorage"
        assert err.capability == "permutable"

    def test_catchable_with_attributes(self):
        with pytest.raises(StructurallyUnsupportedError) as exc_info:
            raise StructurallyUnsupportedError("no", storage="S")
        assert exc_info.value.storage == "S"
        assert exc_info.value.capability is None
