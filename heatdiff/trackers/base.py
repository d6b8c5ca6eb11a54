"""Base classes for trackers.

Trackers are called periodically while a simulation runs. They can analyze the
temperature, display information, and stop the simulation by raising
:class:`StopIteration`.
"""

from __future__ import annotations

import logging
import math
from abc import ABCMeta, abstractmethod
from collections.abc import Sequence
from typing import Any, Optional, Union

from ..fields.base import Field
from ..tools.docstrings import fill_in_docstring
from ..tools.misc import module_available

_base_logger = logging.getLogger(__name__.rsplit(".", 1)[0])
""":class:`logging.Logger`: Base logger for trackers."""

InfoDict = Optional[dict[str, Any]]
TrackerDataType = Union["TrackerBase", str]


class FinishedSimulation(StopIteration):
    """Exception for signaling that simulation finished successfully."""


def parse_interrupt(interrupts: int) -> int:
    """Check that `interrupts` is a positive number of steps."""
    try:
        steps = int(interrupts)
    except (TypeError, ValueError) as err:
        raise ValueError(f"Interrupts must be an integer, not {interrupts!r}") from err
    if steps < 1 or steps != interrupts:
        raise ValueError(f"Interrupts must be a positive integer, not {interrupts!r}")
    return steps


class TrackerBase(metaclass=ABCMeta):
    """Base class for implementing trackers."""

    _logger: logging.Logger
    _subclasses: dict[str, type[TrackerBase]] = {}  # all inheriting classes

    @fill_in_docstring
    def __init__(self, interrupts: int = 1):
        """
        Args:
            interrupts (int):
                {ARG_TRACKER_INTERRUPT}
        """
        self.interrupt = parse_interrupt(interrupts)

    def __init_subclass__(cls, **kwargs):
        """Initialize class-level attributes of subclasses."""
        super().__init_subclass__(**kwargs)

        # create logger for this specific tracker class
        cls._logger = _base_logger.getChild(cls.__qualname__)

        # register all subclasses to reconstruct them later
        if hasattr(cls, "name"):
            assert cls.name != "auto"
            cls._subclasses[cls.name] = cls

    @classmethod
    def from_data(cls, data: TrackerDataType, **kwargs) -> TrackerBase:
        """Create tracker class from given data.

        Args:
            data (str or TrackerBase): Data describing the tracker

        Returns:
            :class:`TrackerBase`: An instance representing the tracker
        """
        if isinstance(data, TrackerBase):
            return data
        elif isinstance(data, str):
            try:
                tracker_cls = cls._subclasses[data]
            except KeyError as err:
                trackers = sorted(cls._subclasses.keys())
                raise ValueError(f"Tracker `{data}` is not in {trackers}") from err
            return tracker_cls(**kwargs)
        else:
            raise ValueError(f"Unsupported tracker format: `{data}`.")

    def initialize(self, field: Field, info: InfoDict = None) -> int:
        """Initialize the tracker with information about the simulation.

        Args:
            field (:class:`~heatdiff.fields.base.Field`):
                An example of the data that will be analyzed by the tracker
            info (dict):
                Extra information from the simulation

        Returns:
            int: The first step at which the tracker needs to handle data
        """
        if info is not None:
            return int(info.get("controller", {}).get("steps_start", 0))
        return 0

    @abstractmethod
    def handle(self, field: Field, step: int) -> None:
        """Handle data supplied to this tracker.

        Args:
            field (:class:`~heatdiff.fields.base.Field`):
                The current temperature of the simulation
            step (int):
                The number of steps performed so far
        """

    def finalize(self, info: InfoDict = None) -> None:
        """Finalize the tracker, supplying additional information.

        Args:
            info (dict):
                Extra information from the simulation
        """


TrackerCollectionDataType = Union[Sequence[TrackerDataType], TrackerDataType, None]


class TrackerCollection:
    """List of trackers providing methods to handle them efficiently.

    Attributes:
        trackers (list):
            List of the trackers in the collection
    """

    tracker_action_steps: list[int]
    """ list: Steps at which the trackers need to be handled next """
    step_next_action: float
    """ float: The step of the next interrupt of the simulation """

    def __init__(self, trackers: list[TrackerBase] | None = None):
        """
        Args:
            trackers: List of trackers that are to be handled.
        """
        if trackers is None:
            self.trackers: list[TrackerBase] = []
        elif not hasattr(trackers, "__iter__"):
            raise ValueError(f"`trackers` must be a list of trackers, not {trackers}")
        else:
            self.trackers = list(trackers)

        # do not check trackers before everything was initialized
        self.tracker_action_steps = []
        self.step_next_action = math.inf

    def __len__(self) -> int:
        """Returns the number of trackers in the collection."""
        return len(self.trackers)

    @classmethod
    def from_data(cls, data: TrackerCollectionDataType, **kwargs) -> TrackerCollection:
        """Create tracker collection from given data.

        Args:
            data: Data describing the tracker collection

        Returns:
            :class:`TrackerCollection`:
            An instance representing the tracker collection
        """
        if isinstance(data, str) and data == "auto":
            if module_available("tqdm"):
                data = ("progress", "consistency")
            else:
                data = "consistency"

        if data is None:
            trackers: list[TrackerBase] = []
        elif isinstance(data, TrackerCollection):
            trackers = data.trackers
        elif isinstance(data, TrackerBase):
            trackers = [data]
        elif isinstance(data, str):
            trackers = [TrackerBase.from_data(data, **kwargs)]
        elif isinstance(data, (list, tuple)):
            trackers = [TrackerBase.from_data(t) for t in data if t is not None]
        else:
            raise TypeError(f"Cannot initialize trackers from class `{data.__class__}`")

        return cls(trackers)

    def initialize(self, field: Field, info: InfoDict = None) -> float:
        """Initialize the trackers with information about the simulation.

        Args:
            field (:class:`~heatdiff.fields.base.Field`):
                An example of the data that will be analyzed by the trackers
            info (dict):
                Extra information from the simulation

        Returns:
            float: The first step at which a tracker needs to handle data
        """
        self.tracker_action_steps = [
            tracker.initialize(field, info) for tracker in self.trackers
        ]

        if self.trackers:
            self.step_next_action = min(self.tracker_action_steps)
        else:
            self.step_next_action = math.inf

        return self.step_next_action

    def handle(self, field: Field, step: int) -> float:
        """Handle all trackers that are due.

        Args:
            field (:class:`~heatdiff.fields.base.Field`):
                The current temperature of the simulation
            step (int):
                The number of steps performed so far

        Returns:
            float: The next step at which the simulation needs to be interrupted
        """
        stop_iteration_err = None
        for i, step_next in enumerate(self.tracker_action_steps):
            if step >= step_next:
                try:
                    self.trackers[i].handle(field, step)
                except StopIteration as err:
                    # This tracker requested to stop the iteration. We save this
                    # information for later, so we can first handle all trackers.
                    stop_iteration_err = err

                self.tracker_action_steps[i] = step + self.trackers[i].interrupt

        if stop_iteration_err is not None:
            raise stop_iteration_err

        if self.trackers:
            self.step_next_action = min(self.tracker_action_steps)
        return self.step_next_action

    def finalize(self, info: InfoDict = None) -> None:
        """Finalize the trackers, supplying additional information.

        Args:
            info (dict):
                Extra information from the simulation
        """
        for tracker in self.trackers:
            tracker.finalize(info=info)


def get_named_trackers() -> dict[str, type[TrackerBase]]:
    """Returns all named trackers.

    Returns:
        dict: a mapping of names to the actual tracker classes.
    """
    return TrackerBase._subclasses.copy()
