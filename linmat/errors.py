# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Exceptions raised by linmat.

Every error also derives from the matching builtin so ``except ValueError``
and ``except IndexError`` keep working for callers that do not know about
this module.
"""

from typing import Optional


class LinmatError(Exception):
    """Base class for all linmat errors."""


class ShapeError(LinmatError, ValueError):
    """Lengths or dimensions of the operands do not line up."""

    def __init__(
        self,
        message: str,
        expected: Optional[int] = None,
        actual: Optional[int] = None,
    ):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class IndexOutOfBounds(LinmatError, IndexError):
    """
    Index outside of the addressed axis.

    ``max_index`` is the largest valid index on ``axis``, not the
    offending one.
    """

    def __init__(self, axis: str, max_index: int):
        super().__init__(f"index out of bounds max {axis} {max_index}")
        self.axis = axis
        self.max_index = max_index


class NotSquare(LinmatError, ValueError):
    pass


class DegenerateMatrix(LinmatError, ValueError):
    pass


class SingularMatrix(LinmatError, ValueError):
    pass
