"""
Stationary temperature
======================

This example runs a simulation until the temperature stops changing and plots the
resulting field.
"""

import numpy as np

from heatdiff import (
    DiffusionGrid,
    SourceMap,
    SteadyStateTracker,
    plot_temperature,
)

data = np.zeros((64, 48))
data[20:24, 10:38] = 1  # vertical bar
data[40:44, 10:38] = 0.5  # weaker vertical bar
source = SourceMap((64, 48), data)

grid = DiffusionGrid(source, alpha=0.25)
tracker = SteadyStateTracker(interrupts=100, atol=1e-7)
grid.run(100_000, tracker=["progress", tracker])

print(f"Reached steady state after {grid.steps} steps")
plot_temperature(grid, title="Stationary temperature")
