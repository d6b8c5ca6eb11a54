"""Helper functions for just-in-time compilation with numba.

.. autosummary::
   :nosignatures:

   Counter
   numba_environment
   jit
"""

from __future__ import annotations

import logging
import os
from typing import Any, Callable, TypeVar

import numba as nb
from numba.extending import is_jitted

from .. import config
from .misc import decorator_arguments

_logger = logging.getLogger(__name__)
""":class:`logging.Logger`: Logger for compilation messages."""


class Counter:
    """Mutable integer used for counting compilations.

    A plain integer imported from this module would keep the value it had at import
    time, so the counter is wrapped in a small object that supports reading and
    incrementing.
    """

    def __init__(self, value: int = 0):
        self._counter = value

    def __eq__(self, other):
        return self._counter == other

    def __int__(self):
        return self._counter

    def __iadd__(self, value):
        self._counter += value
        return self

    def increment(self):
        self._counter += 1

    def __repr__(self):
        return str(self._counter)


# global variable counting the number of compilations
JIT_COUNT = Counter()


TFunc = TypeVar("TFunc", bound=Callable)


def numba_environment() -> dict[str, Any]:
    """Return information about the numba setup used.

    Returns:
        (dict) information about the numba setup
    """
    return {
        "version": nb.__version__,
        "fastmath": config["numba.fastmath"],
        "debug": config["numba.debug"],
        "disable_jit": bool(nb.config.DISABLE_JIT),
        "omp_num_threads": os.environ.get("OMP_NUM_THREADS"),
        "num_threads": nb.config.NUMBA_NUM_THREADS,
    }


@decorator_arguments
def jit(function: TFunc, signature=None, **kwargs) -> TFunc:
    """Apply nb.jit with predefined arguments.

    Compiled functions never run in parallel, since each step of the simulation is
    cheap compared to the overhead of spawning threads on the grids considered here.

    Args:
        function: The function which is jitted
        signature: Signature of the function to compile
        **kwargs: Additional arguments to `nb.jit`

    Returns:
        Function that will be compiled using numba
    """
    if is_jitted(function):
        return function

    # prepare the compilation arguments
    kwargs.setdefault("fastmath", config["numba.fastmath"])
    kwargs.setdefault("debug", config["numba.debug"])
    kwargs["parallel"] = False

    name = getattr(function, "__name__", "<anonymous function>")
    _logger.info("Compile `%s`", name)

    # increase the compilation counter by one
    JIT_COUNT.increment()

    return nb.jit(signature, **kwargs)(function)  # type: ignore
