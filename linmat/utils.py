# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import numpy as np

# Storage type for every Vector / Matrix element. The binary export
# format depends on this being a 4 byte float.
DTYPE = np.float32

EPS: float = 1e-12

# Cofactor expansion is O(n!); past this size det() logs a warning.
COFACTOR_WARN_SIZE: int = 8


def scale_tol(A: np.ndarray) -> float:
    """Return an absolute tolerance scaled to the matrix magnitude."""
    if A.size == 0:
        return EPS
    return EPS * max(1.0, float(np.linalg.norm(A, ord=np.inf)))


def default_rng(rng=None) -> np.random.Generator:
    """
    Normalise the ``rng`` argument accepted by the random constructors.

    ``None`` draws fresh entropy from the OS, an ``int`` is used as a seed
    and an existing ``np.random.Generator`` is passed through untouched so
    callers can share one stream between several constructions.
    """
    return np.random.default_rng(rng)
