# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
linmat
======

A small dense float32 Vector / Matrix pair whose binary export can be
handed straight to an accelerator backend.

Public API
~~~~~~~~~~
- Containers
    - `Vector`, `Matrix`
- Errors
    - `LinmatError`, `ShapeError`, `IndexOutOfBounds`, `NotSquare`,
      `DegenerateMatrix`, `SingularMatrix`

Matrices are stored column-major and ``Matrix.transpose()`` is O(1): it
flips a flag instead of moving data.

Example
-------
>>> import linmat as lm
>>> m = lm.Matrix([[1, 2], [3, 4]])
>>> m.det()
-2.0
>>> m.transpose(); m.index(0, 1)
2.0
"""

from importlib.metadata import version as _pkg_version

from .errors import (
    DegenerateMatrix,
    IndexOutOfBounds,
    LinmatError,
    NotSquare,
    ShapeError,
    SingularMatrix,
)
from .matrix import Matrix
from .vector import Vector

__all__ = [
    "Vector",
    "Matrix",
    "LinmatError",
    "ShapeError",
    "IndexOutOfBounds",
    "NotSquare",
    "DegenerateMatrix",
    "SingularMatrix",
]

# ---------------------------------------------------------------------
# Version string (helps “pip show linmat”, Sphinx, etc.)
# ---------------------------------------------------------------------
try:  # installed via pip / build backend
    __version__ = _pkg_version(__name__)
except Exception:  # running from a checkout
    __version__ = "0.0.0.dev0"

# ---------------------------------------------------------------------
# Library logging stays silent unless the application configures it.
# ---------------------------------------------------------------------
import logging as _logging

_logging.getLogger(__name__).addHandler(_logging.NullHandler())
