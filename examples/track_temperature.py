"""
Tracking the mean temperature
=============================

This example uses a tracker to record the mean temperature while the simulation runs.
"""

import numpy as np

from heatdiff import DataTracker, DiffusionGrid, SourceMap

data = np.zeros((40, 40))
data[18:22, 18:22] = 1
grid = DiffusionGrid(SourceMap((40, 40), data), alpha=0.2, backend="numpy")

tracker = DataTracker(lambda field: field.data.mean(), interrupts=50)
grid.run(500, tracker=tracker)

for step, mean in zip(tracker.times, tracker.data):
    print(f"{step:4d}: {mean:.5f}")
