"""
Classes for tracking simulation results in controlled interrupts

Trackers are classes that periodically receive the temperature of the simulation to
analyze, display, or stop it.

.. autosummary::
   :nosignatures:

   ~trackers.CallbackTracker
   ~trackers.ProgressTracker
   ~trackers.ConsistencyTracker
   ~trackers.SteadyStateTracker
   ~trackers.DataTracker
"""

from .base import (
    FinishedSimulation,
    TrackerBase,
    TrackerCollection,
    get_named_trackers,
)
from .trackers import *  # noqa: F403

__all__ = [
    "get_named_trackers",
    "CallbackTracker",
    "ConsistencyTracker",
    "DataTracker",
    "ProgressTracker",
    "SteadyStateTracker",
]
