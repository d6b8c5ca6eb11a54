"""Module defining classes for tracking simulations.

The trackers defined in this module are:

.. autosummary::
   :nosignatures:

   CallbackTracker
   ProgressTracker
   ConsistencyTracker
   SteadyStateTracker
   DataTracker
"""

from __future__ import annotations

import inspect
from typing import Any, Callable

import numpy as np

from ..fields.base import Field
from ..tools.docstrings import fill_in_docstring
from ..tools.output import get_progress_bar_class
from .base import FinishedSimulation, InfoDict, TrackerBase


class CallbackTracker(TrackerBase):
    """Tracker calling a function periodically

    Example:
        The callback tracker can be used to check for conditions during the simulation:

        .. code-block:: python

            def check_simulation(field, step):
                if field.data.max() > 1:
                    raise StopIteration

            tracker = CallbackTracker(check_simulation, interrupts=100)

        Adding :code:`tracker` to the simulation checks the temperature every 100
        steps and aborts the simulation once any cell exceeds one.
    """

    @fill_in_docstring
    def __init__(self, func: Callable, interrupts: int = 1):
        """
        Args:
            func:
                The function to call periodically. The function signature should be
                `(field)` or `(field, step)`, where `field` is a read-only view of the
                current temperature and `step` is the number of performed steps. Note
                that the view is only valid until the simulation continues, so a copy
                needs to be made if the data should be stored. The function can
                interrupt the simulation by raising the special exception
                :class:`StopIteration`.
            interrupts (int):
                {ARG_TRACKER_INTERRUPT}
        """
        super().__init__(interrupts=interrupts)
        self._callback = func
        self._num_args = len(inspect.signature(func).parameters)
        if not 0 < self._num_args < 3:
            raise ValueError(
                "`func` must be a function accepting one or two arguments, not "
                f"{self._num_args}"
            )

    def handle(self, field: Field, step: int) -> None:
        if self._num_args == 1:
            self._callback(field)
        else:
            self._callback(field, step)


class ProgressTracker(TrackerBase):
    """Tracker showing the progress of the simulation"""

    name = "progress"

    @fill_in_docstring
    def __init__(self, interrupts: int = 1, *, fancy: bool = True, leave: bool = True):
        """
        Args:
            interrupts (int):
                {ARG_TRACKER_INTERRUPT}
            fancy (bool):
                Flag determining whether a fancy progress bar should be used in jupyter
                notebooks (if :mod:`ipywidgets` is installed)
            leave (bool):
                Whether to leave the progress bar after the simulation has finished
        """
        super().__init__(interrupts=interrupts)
        self.fancy = fancy
        self.leave = leave

    def initialize(self, field: Field, info: InfoDict = None) -> int:
        result = super().initialize(field, info)

        controller_info = {} if info is None else info.get("controller", {})
        steps_start = controller_info.get("steps_start", 0)
        steps_end = controller_info.get("steps_end")

        pb_cls = get_progress_bar_class(self.fancy)
        self.progress_bar = pb_cls(
            total=None if steps_end is None else steps_end - steps_start,
            leave=self.leave,
            unit="step",
        )
        self._steps_start = steps_start
        return result

    def handle(self, field: Field, step: int) -> None:
        self.progress_bar.update(step - self._steps_start - self.progress_bar.n)

    def finalize(self, info: InfoDict = None) -> None:
        """Close the progress bar.

        Args:
            info (dict):
                Extra information from the simulation
        """
        super().finalize(info)
        controller_info = {} if info is None else info.get("controller", {})
        steps_final = controller_info.get("steps_final")
        if steps_final is not None:
            self.handle(None, steps_final)  # type: ignore
        self.progress_bar.close()


class ConsistencyTracker(TrackerBase):
    """Tracker interrupting the simulation when the temperature is not finite.

    Diverging temperatures are typically caused by a diffusion coefficient exceeding
    the stability limit of the explicit scheme.
    """

    name = "consistency"

    @fill_in_docstring
    def __init__(self, interrupts: int = 10):
        """
        Args:
            interrupts (int):
                {ARG_TRACKER_INTERRUPT}
        """
        super().__init__(interrupts=interrupts)

    def handle(self, field: Field, step: int) -> None:
        if not np.all(np.isfinite(field.data)):
            raise StopIteration("Temperature is not finite")


class SteadyStateTracker(TrackerBase):
    """Tracker aborting the simulation once steady state is reached

    The rate of change is estimated by comparing the current temperature `cur` to the
    temperature `prev` handled previously. Steady state is assumed when the absolute
    change per step falls below :code:`atol + rtol * cur` for all cells.
    """

    name = "steady_state"

    @fill_in_docstring
    def __init__(self, interrupts: int = 10, atol: float = 1e-8, rtol: float = 1e-5):
        """
        Args:
            interrupts (int):
                {ARG_TRACKER_INTERRUPT}
            atol (float):
                Absolute tolerance that must be reached to abort the simulation
            rtol (float):
                Relative tolerance that must be reached to abort the simulation
        """
        super().__init__(interrupts=interrupts)
        self.atol = atol
        self.rtol = rtol
        self._last_data: np.ndarray | None = None
        self._last_step: int = 0

    def initialize(self, field: Field, info: InfoDict = None) -> int:
        self._last_data = None
        return super().initialize(field, info)

    def handle(self, field: Field, step: int) -> None:
        if self._last_data is None or step == self._last_step:
            # create storage for the data
            self._last_data = field.data.copy()
            self._last_step = step
            return  # the rate of change is not known yet

        rate = (field.data - self._last_data) / (step - self._last_step)
        self._last_data[...] = field.data
        self._last_step = step

        rate_max = np.max(np.abs(rate) - self.rtol * np.abs(field.data))
        if rate_max <= self.atol:
            raise FinishedSimulation("Reached stationary state")


class DataTracker(CallbackTracker):
    """Tracker storing custom data obtained by calling a function

    Example:
        The data tracker can be used to track the mean temperature:

        .. code-block:: python

            tracker = DataTracker(lambda field: field.data.mean(), interrupts=10)

        After the simulation, the list of mean temperatures is available as
        :code:`tracker.data` and the associated steps as :code:`tracker.times`.

    Attributes:
        times (list):
            The steps at which the data was recorded
        data (list):
            The actually recorded data
    """

    @fill_in_docstring
    def __init__(self, func: Callable, interrupts: int = 1):
        """
        Args:
            func:
                The function to call periodically. The function signature should be
                `(field)` or `(field, step)`. The function should return the data to
                be stored. A copy needs to be made if the whole temperature is stored.
            interrupts (int):
                {ARG_TRACKER_INTERRUPT}
        """
        super().__init__(func=func, interrupts=interrupts)
        self.times: list[int] = []
        self.data: list[Any] = []

    def handle(self, field: Field, step: int) -> None:
        self.times.append(step)
        if self._num_args == 1:
            self.data.append(self._callback(field))
        else:
            self.data.append(self._callback(field, step))

    @property
    def dataframe(self):
        """:class:`pandas.DataFrame`: the data in a dataframe

        The recorded values need to be numbers or dictionaries of numbers.
        """
        import pandas as pd

        df = pd.DataFrame(self.data)
        df.insert(0, "step", self.times)
        return df


__all__ = [
    "CallbackTracker",
    "ProgressTracker",
    "ConsistencyTracker",
    "SteadyStateTracker",
    "DataTracker",
]
