# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
1-D float32 container used as the backing store of a Matrix.
"""

from __future__ import annotations

import operator
from typing import Callable, Iterable, Iterator, List, Sequence, Union

import numpy as np

from .errors import IndexOutOfBounds, ShapeError
from .utils import DTYPE, default_rng

ITEM_SIZE: int = np.dtype(DTYPE).itemsize


def header_count(value, name: str) -> int:
    """
    Convert a float32 header word of a binary export into a count.

    Raises
    ------
    ShapeError : if the word is not a finite, non-negative integer.
    """
    if not np.isfinite(value) or value < 0 or value != int(value):
        raise ShapeError(f"invalid {name} header {float(value)!r} in byte buffer")
    return int(value)


class Vector:
    """
    Owned, mutable, fixed-length sequence of float32 values.

    Elementwise operators (``+ - * /``) return a new Vector, the
    ``*_scalar`` methods and ``apply_func`` mutate in place.
    """

    def __init__(self, values: Union[Iterable[float], np.ndarray, "Vector"]):
        if isinstance(values, Vector):
            values = values.array
        elif not isinstance(values, (np.ndarray, Sequence)):
            # generators and other one-shot iterables
            values = list(values)
        data = np.array(values, dtype=DTYPE)
        if data.ndim != 1:
            raise ShapeError(
                f"a vector has to be one dimensional, got {data.ndim} dimensions",
                expected=1,
                actual=data.ndim,
            )
        self._data = data

    @classmethod
    def new_zero(cls, n: int) -> Vector:
        return cls(np.zeros(n, dtype=DTYPE))

    @classmethod
    def new_random(cls, n: int, rng=None) -> Vector:
        """Uniform values in [0, 1), drawn from ``rng`` (seed or Generator)."""
        return cls(default_rng(rng).random(n, dtype=DTYPE))

    @classmethod
    def from_bytes(cls, data: bytes) -> Vector:
        """Inverse of :meth:`bytes`."""
        if len(data) < ITEM_SIZE or len(data) % ITEM_SIZE:
            raise ShapeError(
                f"byte buffer of length {len(data)} is not a sequence of "
                f"{ITEM_SIZE} byte floats"
            )
        flat = np.frombuffer(data, dtype=DTYPE)
        n = header_count(flat[0], "length")
        if n != flat.size - 1:
            raise ShapeError(
                f"wrong vector shape expected {n}, got {flat.size - 1}",
                expected=n,
                actual=flat.size - 1,
            )
        return cls(flat[1:])

    # -----------------------------------------------------------------
    # access
    # -----------------------------------------------------------------
    @property
    def array(self) -> np.ndarray:
        """The backing ndarray. Shares memory with this vector."""
        return self._data

    def to_numpy(self) -> np.ndarray:
        return self._data.copy()

    def vec(self) -> List[float]:
        return self._data.tolist()

    def length(self) -> int:
        return self._data.size

    def __len__(self) -> int:
        return self._data.size

    def __iter__(self) -> Iterator[float]:
        return iter(self._data.tolist())

    def _check_index(self, i: int) -> None:
        if not 0 <= i < self._data.size:
            raise IndexOutOfBounds("index", self._data.size - 1)

    def index(self, i: int) -> float:
        self._check_index(i)
        return float(self._data[i])

    def set_index(self, i: int, val: float) -> None:
        self._check_index(i)
        self._data[i] = val

    def __getitem__(self, i: int) -> float:
        return self.index(i)

    def __setitem__(self, i: int, val: float) -> None:
        self.set_index(i, val)

    # -----------------------------------------------------------------
    # in-place scalar ops
    # -----------------------------------------------------------------
    def add_scalar(self, scalar: float) -> None:
        self._data += DTYPE(scalar)

    def sub_scalar(self, scalar: float) -> None:
        self._data -= DTYPE(scalar)

    def mul_scalar(self, scalar: float) -> None:
        self._data *= DTYPE(scalar)

    def div_scalar(self, scalar: float) -> None:
        with np.errstate(divide="ignore", invalid="ignore"):
            self._data /= DTYPE(scalar)

    def apply_func(self, func: Callable[[float], float]) -> None:
        """Replace every element x by ``func(x)``."""
        self._data[:] = np.fromiter(
            (func(x) for x in self._data.tolist()),
            dtype=DTYPE,
            count=self._data.size,
        )

    # -----------------------------------------------------------------
    # reductions
    # -----------------------------------------------------------------
    def sum(self) -> float:
        return float(self._data.sum(dtype=DTYPE))

    def dot(self, other: Vector) -> float:
        self._check_same_length(other)
        return float(self._data @ other.array)

    def _check_same_length(self, other: Vector) -> None:
        if len(other) != len(self):
            raise ShapeError(
                f"wrong vector shape expected {len(self)}, got {len(other)}",
                expected=len(self),
                actual=len(other),
            )

    # -----------------------------------------------------------------
    # serialization / display
    # -----------------------------------------------------------------
    def bytes(self) -> bytes:
        """
        Native-endian float32 layout: the length (as a float) followed by
        every element.
        """
        header = np.array([self._data.size], dtype=DTYPE)
        return header.tobytes() + self._data.tobytes()

    def __bytes__(self) -> bytes:
        return self.bytes()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return bool(np.array_equal(self._data, other.array))

    __hash__ = None  # mutable

    def __str__(self) -> str:
        return str(self._data)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.vec()})"


def _build_binary_op(op: Callable):
    def binary(self: Vector, other: Vector) -> Vector:
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_same_length(other)
        with np.errstate(divide="ignore", invalid="ignore"):
            return Vector(op(self.array, other.array))

    return binary


for _name, _op in {
    "add": operator.add,
    "sub": operator.sub,
    "mul": operator.mul,
    "truediv": operator.truediv,
}.items():
    setattr(Vector, f"__{_name}__", _build_binary_op(_op))
