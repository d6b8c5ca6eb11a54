"""
Heat spreading from a single source
===================================

This example shows how heat spreads from a single clamped source on a tiny grid. The
source cell keeps its temperature, while its neighbors heat up one step later.
"""

import numpy as np

from heatdiff import DiffusionGrid, SourceMap

data = np.zeros((5, 5))  # source values indexed as data[x, y]
data[2, 2] = 0.8
source = SourceMap((5, 5), data)

grid = DiffusionGrid(source, alpha=0.2)  # define the simulation
for _ in range(2):
    grid.step()
    print(f"Step {grid.steps}:")
    print(np.round(grid.temperature.data.T[::-1], 3))  # show y axis pointing upward
