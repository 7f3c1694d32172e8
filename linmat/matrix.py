# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Dense matrix stored as a single column-major float32 Vector.

Layout
------
A matrix with ``cols`` columns and ``rows`` rows keeps its elements in one
flat Vector of length ``cols * rows``. Column ``c`` is the contiguous run
``[c * rows, (c + 1) * rows)``, i.e. logical ``(row, col)`` lives at
``col * rows + row``.

``transpose()`` only flips a flag. Every accessor reads the buffer through
:meth:`Matrix._view`, which hands back the logical ``(rows(), cols())``
numpy view of the same memory, so no accessor has to know about the flag.
"""

from __future__ import annotations

import itertools
import logging
from typing import Callable, Iterable, Sequence, Tuple, Union

import numpy as np

from .elimination import det_elimination
from .errors import (
    DegenerateMatrix,
    IndexOutOfBounds,
    NotSquare,
    ShapeError,
    SingularMatrix,
)
from .utils import COFACTOR_WARN_SIZE, DTYPE, default_rng
from .vector import ITEM_SIZE, Vector, header_count

logger = logging.getLogger(__name__)

FlatValues = Union[Iterable[float], np.ndarray, Vector]


class Matrix:
    """
    Dense float32 matrix with an O(1) lazy transpose.

    ``Matrix(values)`` takes a sequence of columns:

    >>> m = Matrix([[3, 2, 4], [4, 5, 6]])
    >>> m.cols(), m.rows()
    (2, 3)
    >>> m.col(0).vec(), m.row(0).vec()
    ([3.0, 2.0, 4.0], [3.0, 4.0])
    """

    def __init__(self, values: Sequence[Sequence[float]]):
        columns = list(values)
        if not columns:
            raise ShapeError("a matrix needs at least one column", actual=0)

        rows = len(columns[0])
        for col in columns:
            if len(col) != rows:
                raise ShapeError(
                    f"wrong row shape expected {rows}, got {len(col)}",
                    expected=rows,
                    actual=len(col),
                )

        self._set_storage(
            Vector(list(itertools.chain.from_iterable(columns))), len(columns), rows
        )

    def _set_storage(self, flat: Vector, cols: int, rows: int) -> None:
        if cols < 0 or rows < 0:
            raise ShapeError(
                f"cols and rows have to be non-negative, got cols={cols} rows={rows}"
            )
        if len(flat) != cols * rows:
            raise ShapeError(
                f"cols * rows = {cols * rows} has to be the same len "
                f"as the matrix_flatt = {len(flat)}",
                expected=cols * rows,
                actual=len(flat),
            )
        self._flat = flat
        self._cols = cols
        self._rows = rows
        self._transposed = False

    @classmethod
    def _from_vector(cls, flat: Vector, cols: int, rows: int) -> Matrix:
        matrix = cls.__new__(cls)
        matrix._set_storage(flat, cols, rows)
        return matrix

    # -----------------------------------------------------------------
    # constructors
    # -----------------------------------------------------------------
    @classmethod
    def new_flat(cls, values: FlatValues, cols: int, rows: int) -> Matrix:
        """Build from a column-major flat sequence of ``cols * rows`` values."""
        return cls._from_vector(Vector(values), cols, rows)

    @classmethod
    def new_zero(cls, cols: int, rows: int) -> Matrix:
        return cls._from_vector(Vector.new_zero(cols * rows), cols, rows)

    @classmethod
    def new_random(cls, cols: int, rows: int, rng=None) -> Matrix:
        """
        Uniform values in [0, 1).

        ``rng`` may be a seed or an ``np.random.Generator``; the same seed
        always yields the same matrix.
        """
        return cls._from_vector(
            Vector.new_random(cols * rows, rng=default_rng(rng)), cols, rows
        )

    @classmethod
    def new_outer(cls, vector1: Vector, vector2: Vector) -> Matrix:
        """
        Outer product: entry ``(i, j)`` of the nested input is
        ``vector1[i] * vector2[j]``.

        >>> Matrix.new_outer(Vector([2, 4, 3]), Vector([2, 7, 9])).matrix_flatt().vec()
        [4.0, 14.0, 18.0, 8.0, 28.0, 36.0, 6.0, 21.0, 27.0]
        """
        return cls([[a * b for b in vector2] for a in vector1])

    @classmethod
    def from_bytes(cls, data: bytes) -> Matrix:
        """Inverse of :meth:`bytes`."""
        if len(data) < 2 * ITEM_SIZE or len(data) % ITEM_SIZE:
            raise ShapeError(
                f"byte buffer of length {len(data)} is not a matrix export"
            )
        flat = np.frombuffer(data, dtype=DTYPE)
        rows = header_count(flat[0], "rows")
        cols = header_count(flat[1], "cols")
        if flat.size - 2 != rows * cols:
            raise ShapeError(
                f"cols * rows = {rows * cols} has to be the same len "
                f"as the matrix_flatt = {flat.size - 2}",
                expected=rows * cols,
                actual=flat.size - 2,
            )
        return cls.new_flat(flat[2:], cols, rows)

    def copy(self) -> Matrix:
        out = self._from_vector(Vector(self._flat), self._cols, self._rows)
        out._transposed = self._transposed
        return out

    # -----------------------------------------------------------------
    # orientation / shape
    # -----------------------------------------------------------------
    def _view(self) -> np.ndarray:
        # physical[c, r] is physical column c, row r
        physical = self._flat.array.reshape(self._cols, self._rows)
        return physical if self._transposed else physical.T

    def cols(self) -> int:
        return self._rows if self._transposed else self._cols

    def rows(self) -> int:
        return self._cols if self._transposed else self._rows

    @property
    def shape(self) -> Tuple[int, int]:
        return self.rows(), self.cols()

    def is_square(self) -> bool:
        return self.cols() == self.rows()

    def is_transpose(self) -> bool:
        return self._transposed

    def transpose(self) -> None:
        """Swap rows and cols in O(1); storage is left untouched."""
        self._transposed = not self._transposed

    @property
    def T(self) -> Matrix:
        out = self.copy()
        out.transpose()
        return out

    # -----------------------------------------------------------------
    # element / slice access
    # -----------------------------------------------------------------
    def _check_row(self, row: int) -> None:
        if not 0 <= row < self.rows():
            raise IndexOutOfBounds("row", self.rows() - 1)

    def _check_col(self, col: int) -> None:
        if not 0 <= col < self.cols():
            raise IndexOutOfBounds("col", self.cols() - 1)

    def index(self, row: int, col: int) -> float:
        """
        Element at logical ``(row, col)``.

        Coordinates follow the current orientation, so after ``transpose()``
        the element formerly at ``(r, c)`` is read as ``(c, r)``.

        Raises
        ------
        IndexOutOfBounds : if ``row`` or ``col`` is outside ``[0, n)`` on its
            logical axis; ``max_index`` is the largest valid index there.
        """
        self._check_row(row)
        self._check_col(col)
        return float(self._view()[row, col])

    def set_index(self, row: int, col: int, val: float) -> None:
        """Write ``val`` at logical ``(row, col)``; bounds as in :meth:`index`."""
        self._check_row(row)
        self._check_col(col)
        self._view()[row, col] = val

    def col(self, col: int) -> Vector:
        """Copy of logical column ``col``, ``rows()`` long."""
        self._check_col(col)
        return Vector(self._view()[:, col])

    def row(self, row: int) -> Vector:
        """Copy of logical row ``row``, ``cols()`` long."""
        self._check_row(row)
        return Vector(self._view()[row, :])

    def matrix_flatt(self) -> Vector:
        """
        Column-major flattening of the logical matrix.

        Untransposed this is a copy of the storage; transposed it is
        rebuilt from the logical columns.
        """
        if not self._transposed:
            return Vector(self._flat)
        return Vector(self._view().ravel(order="F"))

    def to_numpy(self) -> np.ndarray:
        """Logical ``(rows(), cols())`` array, copied."""
        return self._view().copy()

    # -----------------------------------------------------------------
    # scalar ops
    # -----------------------------------------------------------------
    def add_scalar(self, scalar: float) -> None:
        self._flat.add_scalar(scalar)

    def sub_scalar(self, scalar: float) -> None:
        self._flat.sub_scalar(scalar)

    def mul_scalar(self, scalar: float) -> None:
        self._flat.mul_scalar(scalar)

    def div_scalar(self, scalar: float) -> None:
        self._flat.div_scalar(scalar)

    def apply_func(self, func: Callable[[float], float]) -> None:
        self._flat.apply_func(func)

    # -----------------------------------------------------------------
    # vector broadcast ops
    # -----------------------------------------------------------------
    def _check_vector(self, vector: Vector) -> None:
        if not isinstance(vector, Vector):
            raise TypeError(f"expected a Vector, got {type(vector).__name__}")
        if len(vector) != self.rows():
            raise ShapeError(
                f"wrong vector shape expected {self.rows()}, got {len(vector)}",
                expected=self.rows(),
                actual=len(vector),
            )

    def _broadcast_vec(self, vector: Vector, ufunc: np.ufunc) -> None:
        # vector[row] meets every element of logical row ``row``
        self._check_vector(vector)
        view = self._view()
        with np.errstate(divide="ignore", invalid="ignore"):
            ufunc(view, vector.array[:, None], out=view)

    def add_vec(self, vector: Vector) -> None:
        """
        >>> m = Matrix([[2, -3, 1], [2, 0, -1]])
        >>> m.add_vec(Vector([2, 4, 6]))
        >>> m.row(1).vec()
        [1.0, 4.0]
        """
        self._broadcast_vec(vector, np.add)

    def sub_vec(self, vector: Vector) -> None:
        self._broadcast_vec(vector, np.subtract)

    def mul_vec(self, vector: Vector) -> None:
        self._broadcast_vec(vector, np.multiply)

    def div_vec(self, vector: Vector) -> None:
        self._broadcast_vec(vector, np.divide)

    def dot_vec(self, vector: Vector) -> Vector:
        """Element ``i`` is column ``i`` dotted with ``vector``."""
        self._check_vector(vector)
        return Vector(vector.array @ self._view())

    # -----------------------------------------------------------------
    # matrix elementwise ops
    # -----------------------------------------------------------------
    def _check_matrix(self, other: Matrix) -> None:
        if not isinstance(other, Matrix):
            raise TypeError(f"expected a Matrix, got {type(other).__name__}")
        if self.rows() != other.rows():
            raise ShapeError(
                f"wrong row shape expected {self.rows()}, got {other.rows()}",
                expected=self.rows(),
                actual=other.rows(),
            )
        if self.cols() != other.cols():
            raise ShapeError(
                f"wrong col shape expected {self.cols()}, got {other.cols()}",
                expected=self.cols(),
                actual=other.cols(),
            )

    def _combine(self, other: Matrix, ufunc: np.ufunc) -> None:
        self._check_matrix(other)
        if self._transposed or other.is_transpose():
            logger.debug(
                f"{ufunc.__name__}: transposed operand, result is stored untransposed"
            )
        with np.errstate(divide="ignore", invalid="ignore"):
            flat = ufunc(self.matrix_flatt().array, other.matrix_flatt().array)
        self._set_storage(Vector(flat), other.cols(), other.rows())

    def add_mat(self, other: Matrix) -> None:
        self._combine(other, np.add)

    def sub_mat(self, other: Matrix) -> None:
        self._combine(other, np.subtract)

    def mul_mat(self, other: Matrix) -> None:
        self._combine(other, np.multiply)

    def div_mat(self, other: Matrix) -> None:
        self._combine(other, np.divide)

    # -----------------------------------------------------------------
    # reductions
    # -----------------------------------------------------------------
    def sum(self) -> float:
        return self._flat.sum()

    def sum_vec(self) -> Vector:
        """Per-row sums, one entry per logical row."""
        return Vector(self._view().sum(axis=1, dtype=DTYPE))

    # -----------------------------------------------------------------
    # determinant
    # -----------------------------------------------------------------
    def _check_square(self) -> None:
        if not self.is_square():
            raise NotSquare("the matrix has to be a square matrix")
        if self.rows() < 2:
            raise DegenerateMatrix("the matrix has to have more than one row")

    def minor(self, row: int, col: int) -> Matrix:
        """The matrix with logical ``row`` and ``col`` removed."""
        self._check_row(row)
        self._check_col(col)
        view = self._view()
        sub = view[np.arange(self.rows()) != row][:, np.arange(self.cols()) != col]
        return Matrix.new_flat(sub.ravel(order="F"), self.cols() - 1, self.rows() - 1)

    def det(self, method: str = "cofactor") -> float:
        """
        Determinant of a square matrix with at least two rows.

        Parameters
        ----------
        method : {"cofactor", "elimination"}
            ``cofactor`` expands along row 0 recursively, O(n!).
            ``elimination`` reduces to upper-triangular form with partial
            pivoting, O(n^3).

        Raises
        ------
        NotSquare, DegenerateMatrix, ValueError (unknown method)
        """
        self._check_square()
        n = self.rows()

        if method == "cofactor":
            if n > COFACTOR_WARN_SIZE:
                logger.warning(f"det(): cofactor expansion on a {n}x{n} matrix – O(n!)")
            return self._det_cofactor()
        if method == "elimination":
            logger.debug(f"det(): elimination on a {n}x{n} matrix")
            return det_elimination(self.to_numpy())
        raise ValueError(f"unknown determinant method {method!r}")

    def _det_cofactor(self) -> float:
        if self.rows() == 2:
            return self.index(0, 0) * self.index(1, 1) - self.index(1, 0) * self.index(0, 1)

        total = 0.0
        sign = 1.0
        for col in range(self.cols()):
            total += sign * self.index(0, col) * self.minor(0, col)._det_cofactor()
            sign = -sign
        return total

    # -----------------------------------------------------------------
    # not implemented
    # -----------------------------------------------------------------
    def dot_mat(self, other: Matrix) -> Matrix:
        self._check_matrix(other)
        raise NotImplementedError("dot_mat() is not implemented")

    def eigen_val(self) -> float:
        self._check_square()
        raise NotImplementedError("eigen_val() is not implemented")

    def eigen_vec(self) -> Vector:
        self._check_square()
        raise NotImplementedError("eigen_vec() is not implemented")

    def inv(self) -> None:
        self._check_square()
        if self.det() == 0:
            raise SingularMatrix("the determinant of the matrix can't be 0")
        raise NotImplementedError("inv() is not implemented")

    # -----------------------------------------------------------------
    # serialization / display
    # -----------------------------------------------------------------
    def bytes(self) -> bytes:
        """
        ``[rows][cols][elements...]``, every word a native-endian float32.

        The elements are the logical column-major flattening; the length
        prefix of the flattened Vector is dropped.
        """
        header = np.array([self.rows(), self.cols()], dtype=DTYPE).tobytes()
        return header + self.matrix_flatt().bytes()[ITEM_SIZE:]

    def __bytes__(self) -> bytes:
        return self.bytes()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return (
            self.cols() == other.cols()
            and self.rows() == other.rows()
            and self.matrix_flatt() == other.matrix_flatt()
        )

    __hash__ = None  # mutable

    def __str__(self) -> str:
        return "\n".join(str(self.col(i)) for i in range(self.cols()))

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(cols={self.cols()}, rows={self.rows()}, "
            f"is_transpose={self._transposed})"
        )


def _build_binary_op(method: str):
    def binary(self: Matrix, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        result = self.copy()
        getattr(result, method)(other)
        return result

    return binary


def _build_inplace_op(method: str):
    def inplace(self: Matrix, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        getattr(self, method)(other)
        return self

    return inplace


for _name, _method in {
    "add": "add_mat",
    "sub": "sub_mat",
    "mul": "mul_mat",
    "truediv": "div_mat",
}.items():
    setattr(Matrix, f"__{_name}__", _build_binary_op(_method))
    setattr(Matrix, f"__i{_name}__", _build_inplace_op(_method))
