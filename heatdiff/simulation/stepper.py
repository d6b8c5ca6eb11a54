"""Implementations of a single explicit step of the diffusion scheme.

All steppers share the signature `stepper(current, out)`. They read the temperature
`current` and write the temperature of the next tick into `out`, which must be a
different array. Only interior cells of `out` are written, so the border cells keep
whatever values `out` held before.

.. autosummary::
   :nosignatures:

   get_backend_name
   make_stepper
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from .. import config

if TYPE_CHECKING:
    from ..tools.typing import BackendType, FloatingArray, StepperType

_logger = logging.getLogger(__name__)
""":class:`logging.Logger`: Logger for the steppers."""

BACKENDS = ("numpy", "scipy", "numba")
"""tuple: names of all backends that can advance the simulation"""

# weights of the 5-point stencil approximating the Laplacian
LAPLACE_KERNEL = np.array([[0.0, 1.0, 0.0], [1.0, -4.0, 1.0], [0.0, 1.0, 0.0]])


def get_backend_name(backend: BackendType | str = "auto") -> str:
    """Determine the name of the backend that is actually used.

    Args:
        backend (str):
            The requested backend. The special value `auto` is replaced by the
            configuration value `simulation.default_backend`.

    Returns:
        str: The name of a backend listed in :data:`BACKENDS`
    """
    if backend == "auto":
        backend = config["simulation.default_backend"]
    if backend == "auto":
        backend = "numba"
    if backend not in BACKENDS:
        raise ValueError(f"Backend `{backend}` is not in {BACKENDS}")
    return backend


def _make_stepper_numpy(source_data: FloatingArray, alpha: float) -> StepperType:
    """Create a stepper based on vectorized numpy operations."""
    source_interior = source_data[1:-1, 1:-1]
    mask = source_interior > 0
    source_values = source_interior[mask]

    def stepper(current: FloatingArray, out: FloatingArray) -> None:
        """Write the next temperature into `out`"""
        center = current[1:-1, 1:-1]
        laplacian = (
            current[:-2, 1:-1]
            + current[2:, 1:-1]
            + current[1:-1, :-2]
            + current[1:-1, 2:]
            - 4 * center
        )
        interior = out[1:-1, 1:-1]
        np.multiply(laplacian, alpha, out=interior)
        interior += center
        interior[mask] = source_values

    return stepper


def _make_stepper_scipy(source_data: FloatingArray, alpha: float) -> StepperType:
    """Create a stepper that evaluates the Laplacian with :mod:`scipy.ndimage`"""
    from scipy import ndimage

    mask = source_data[1:-1, 1:-1] > 0
    source_values = source_data[1:-1, 1:-1][mask]
    laplacian = np.empty_like(source_data)

    def stepper(current: FloatingArray, out: FloatingArray) -> None:
        """Write the next temperature into `out`"""
        # the mode only affects border cells, which are never written
        ndimage.correlate(current, LAPLACE_KERNEL, output=laplacian, mode="nearest")
        interior = out[1:-1, 1:-1]
        np.multiply(laplacian[1:-1, 1:-1], alpha, out=interior)
        interior += current[1:-1, 1:-1]
        interior[mask] = source_values

    return stepper


def _make_stepper_numba(source_data: FloatingArray, alpha: float) -> StepperType:
    """Create a stepper based on loops compiled by numba."""
    from ..tools.numba import jit

    width, height = source_data.shape
    source_arr = np.array(source_data, dtype=np.double)  # writeable, contiguous copy

    @jit
    def step_kernel(current: FloatingArray, source: FloatingArray, out: FloatingArray):
        """Compiled loop over all interior cells."""
        for x in range(1, width - 1):
            for y in range(1, height - 1):
                value = source[x, y]
                if value > 0:
                    out[x, y] = value
                else:
                    laplacian = (
                        current[x - 1, y]
                        + current[x + 1, y]
                        + current[x, y - 1]
                        + current[x, y + 1]
                        - 4 * current[x, y]
                    )
                    out[x, y] = current[x, y] + alpha * laplacian

    def stepper(current: FloatingArray, out: FloatingArray) -> None:
        """Write the next temperature into `out`"""
        step_kernel(current, source_arr, out)

    return stepper


def make_stepper(
    source_data: FloatingArray, alpha: float, backend: BackendType | str = "auto"
) -> StepperType:
    """Create a function advancing the temperature by a single tick.

    Interior cells with a positive source value are set to that value. All other
    interior cells are updated using the explicit 5-point scheme
    :math:`T' = T + \\alpha \\nabla^2 T`.

    Args:
        source_data (:class:`~numpy.ndarray`):
            The source value of every cell
        alpha (float):
            The diffusion coefficient
        backend (str):
            The backend implementing the stepper

    Returns:
        A function with signature `(current, out)`
    """
    backend = get_backend_name(backend)
    _logger.info("Create %s stepper with alpha=%g", backend, alpha)
    if backend == "numpy":
        return _make_stepper_numpy(source_data, alpha)
    elif backend == "scipy":
        return _make_stepper_scipy(source_data, alpha)
    elif backend == "numba":
        return _make_stepper_numba(source_data, alpha)
    raise NotImplementedError(f"Backend `{backend}`")
