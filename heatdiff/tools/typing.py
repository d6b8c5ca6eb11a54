"""Provides support for mypy type checking of the package."""

from __future__ import annotations

from typing import Any, Literal, Protocol

import numpy as np
from numpy.typing import ArrayLike  # noqa: F401

# types for single numbers:
Real = int | float  # a real number (no complex number allowed)

# array types:
FloatingArray = np.ndarray[Any, np.dtype[np.floating]]
FloatOrArray = float | FloatingArray

# miscellaneous types:
BackendType = Literal["auto", "numpy", "scipy", "numba"]
ShapeType = tuple[int, int]
RGBType = tuple[float, float, float]


class StepperType(Protocol):
    """A function advancing the temperature by a single tick."""

    def __call__(self, current: FloatingArray, out: FloatingArray) -> None:
        """Write the next state computed from `current` into `out`."""
