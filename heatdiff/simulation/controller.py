"""Defines a class controlling the simulation of a diffusion grid.

.. autosummary::
   :nosignatures:

   Controller
"""

from __future__ import annotations

import datetime
import logging
import time
from typing import TYPE_CHECKING, Any, Callable

from .. import __version__
from ..tools.numba import JIT_COUNT
from ..trackers.base import (
    FinishedSimulation,
    TrackerCollection,
    TrackerCollectionDataType,
)

if TYPE_CHECKING:
    from ..fields.base import Field
    from .diffusion import DiffusionGrid

_logger = logging.getLogger(__name__)
""":class:`logging.Logger`: Logger for controller."""


class Controller:
    """Class controlling a simulation.

    The controller advances a :class:`~heatdiff.simulation.diffusion.DiffusionGrid` by
    a given number of steps and takes care of trackers that analyze the temperature
    periodically. The controller also handles requests of trackers to stop the
    simulation, as well as user-induced interrupts, e.g., by hitting Ctrl-C to cause a
    :class:`KeyboardInterrupt`. Information about the run is collected in
    :attr:`~Controller.diagnostics`.
    """

    diagnostics: dict[str, Any]
    """dict: diagnostic information (available after simulation finished)"""

    _get_current_time: Callable = time.process_time
    """callable: function to determine the current time for profiling purposes"""

    def __init__(
        self,
        grid: DiffusionGrid,
        steps: int,
        tracker: TrackerCollectionDataType = "auto",
    ):
        """
        Args:
            grid (:class:`~heatdiff.simulation.diffusion.DiffusionGrid`):
                The grid whose temperature is advanced
            steps (int):
                The number of steps performed by :meth:`run`
            tracker:
                Defines trackers that process the temperature at specified steps. A
                tracker is either an instance of
                :class:`~heatdiff.trackers.base.TrackerBase` or a string identifying a
                tracker (possible identifiers can be obtained by calling
                :func:`~heatdiff.trackers.base.get_named_trackers`). Multiple trackers
                can be specified as a list. The default value `auto` displays a
                progress bar (tracker 'progress') and checks the temperature for
                divergences (tracker 'consistency').
        """
        if int(steps) != steps or steps < 0:
            raise ValueError(f"`steps` must be a non-negative integer, not {steps!r}")
        self.grid = grid
        self.steps = int(steps)
        self.trackers = TrackerCollection.from_data(tracker)

        # initialize some diagnostic information
        self.info: dict[str, Any] = {}
        self.diagnostics = {
            "controller": self.info,
            "package_version": __version__,
        }

    def _get_stop_handler(self) -> Callable[[Exception, int], tuple[int, str]]:
        """Return function that handles messaging."""

        def _handle_stop_iteration(err: Exception, step: int) -> tuple[int, str]:
            """Helper function for handling interrupts raised by trackers."""
            if isinstance(err, FinishedSimulation):
                # tracker determined that the simulation finished
                self.info["successful"] = True
                msg = f"Simulation finished at step {step}"
                msg_level = logging.INFO
                if err.value:
                    self.info["stop_reason"] = err.value
                    msg += f" ({err.value})"
                else:
                    self.info["stop_reason"] = "Tracker raised FinishedSimulation"

            else:
                # tracker determined that there was a problem
                self.info["successful"] = False
                msg = f"Simulation aborted at step {step}"
                msg_level = logging.WARNING
                if err.value:
                    self.info["stop_reason"] = err.value
                    msg += f" ({err.value})"
                else:
                    self.info["stop_reason"] = "Tracker raised StopIteration"

            return msg_level, msg

        return _handle_stop_iteration

    def run(self) -> Field:
        """Run the simulation.

        Diagnostic information about the run is available in the :attr:`diagnostics`
        property of the instance after this function has been called.

        Returns:
            :class:`~heatdiff.fields.base.Field`: A copy of the final temperature
        """
        grid = self.grid
        get_time = self._get_current_time

        steps_start = grid.steps
        steps_end = steps_start + self.steps
        self.info["steps_start"] = steps_start
        self.info["steps_end"] = steps_end
        self.diagnostics["grid"] = {
            "shape": grid.shape,
            "alpha": grid.alpha,
            "backend": grid.backend,
        }

        # initialize profilers
        jit_count_base = int(JIT_COUNT)
        profiler = {"solver": 0.0, "tracker": 0.0}
        self.info["profiler"] = profiler
        prof_start_tracker = get_time()
        solver_start = datetime.datetime.now()
        self.info["solver_start"] = str(solver_start)

        # initialize trackers and handlers
        self.trackers.initialize(grid.temperature, info=self.diagnostics)
        handle_stop_iteration = self._get_stop_handler()

        _logger.debug("Start simulation at step %d", steps_start)
        try:
            while grid.steps < steps_end:
                # determine next step with an action
                step_next_action = self.trackers.handle(grid.temperature, grid.steps)
                step_break = min(max(step_next_action, grid.steps + 1), steps_end)

                prof_start_solve = get_time()
                profiler["tracker"] += prof_start_solve - prof_start_tracker

                # advance the temperature to the next break point
                grid.advance(int(step_break - grid.steps))

                prof_start_tracker = get_time()
                profiler["solver"] += prof_start_tracker - prof_start_solve

        except StopIteration as err:
            # iteration has been interrupted by a tracker
            msg_level, msg = handle_stop_iteration(err, grid.steps)
            self.diagnostics["last_tracker_step"] = grid.steps

        except KeyboardInterrupt:
            # iteration has been interrupted by the user
            self.info["successful"] = False
            self.info["stop_reason"] = "User interrupted simulation"
            msg = f"Simulation interrupted at step {grid.steps}"
            msg_level = logging.INFO
            self.diagnostics["last_tracker_step"] = grid.steps

        except Exception:
            # any other exception
            self.diagnostics["last_tracker_step"] = grid.steps
            raise

        else:
            # reached final step
            self.info["successful"] = True
            self.info["stop_reason"] = "Reached final step"
            msg = f"Simulation finished at step {steps_end}."
            msg_level = logging.INFO

            # handle trackers one more time when the final step is reached
            try:
                self.trackers.handle(grid.temperature, grid.steps)
            except StopIteration as err:
                # error detected in the final handling of the tracker
                msg_level, msg = handle_stop_iteration(err, grid.steps)

        # calculate final statistics
        profiler["tracker"] += get_time() - prof_start_tracker
        self.info["solver_duration"] = str(datetime.datetime.now() - solver_start)
        self.info["steps_final"] = grid.steps
        self.info["jit_count"] = int(JIT_COUNT) - jit_count_base
        self.trackers.finalize(info=self.diagnostics)

        # show information after a potential progress bar has been closed to not mess
        # up the display
        _logger.log(msg_level, msg)
        if profiler["tracker"] > max(profiler["solver"], 1):
            _logger.warning(
                "Spent more time on handling trackers (%.3g) than on the actual "
                "simulation (%.3g)",
                profiler["tracker"],
                profiler["solver"],
            )

        return grid.temperature.copy()
