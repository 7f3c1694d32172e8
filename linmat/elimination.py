# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging
from typing import Tuple

import numpy as np

from .utils import scale_tol

logger = logging.getLogger(__name__)


def forward_eliminate(A: np.ndarray) -> Tuple[np.ndarray, int]:
    """
    Reduce a square matrix to upper-triangular form with partial pivoting.

    Parameters
    ----------
    A : np.ndarray               (n, n)
        Square matrix, left untouched.

    Returns
    -------
    U     : np.ndarray           (n, n)
        Upper-triangular float64 matrix.
    swaps : int
        Number of row interchanges performed.
    """
    if not isinstance(A, np.ndarray):
        raise TypeError("A must be a NumPy ndarray")

    U = A.astype(float, copy=True)
    n = U.shape[0]
    pivot_tol = scale_tol(U)
    logger.debug(f"forward_eliminate(): n={n} pivot_tol={pivot_tol:.3e}")

    swaps = 0
    for col in range(n):
        # Largest magnitude pivot keeps the update stable.
        col_slice = np.abs(U[col:, col])
        max_idx = int(col_slice.argmax())

        if col_slice[max_idx] <= pivot_tol:
            # Numerically zero column, nothing to eliminate below it.
            continue

        pivot_row = col + max_idx
        if pivot_row != col:
            U[[col, pivot_row]] = U[[pivot_row, col]]
            swaps += 1

        factors = U[col + 1 :, col] / U[col, col]
        U[col + 1 :, col:] -= factors[:, None] * U[col, col:]

    return U, swaps


def det_elimination(A: np.ndarray) -> float:
    """Determinant of a square ndarray as the signed product of the pivots."""
    U, swaps = forward_eliminate(A)
    sign = -1.0 if swaps & 1 else 1.0
    return sign * float(np.prod(np.diag(U)))
