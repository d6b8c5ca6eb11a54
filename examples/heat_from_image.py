"""
Heat sources from an image
==========================

This example creates an image, uses its bright pixels as heat sources, and stores an
animation of the heat spreading over the grid.
"""

import tempfile
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

from heatdiff import DiffusionGrid, HeatViewer, SourceMap

# create a gray scale image showing a ring
y, x = np.ogrid[-1:1:60j, -1:1:80j]
radius = np.hypot(x, 0.75 * y)
image = np.where((radius > 0.5) & (radius < 0.6), 1.0, 0.0)

with tempfile.TemporaryDirectory() as folder:
    path = Path(folder) / "ring.png"
    plt.imsave(path, image, cmap="gray", vmin=0, vmax=1)

    source = SourceMap.from_image(path, shape=(120, 90), intensity=1)
    grid = DiffusionGrid(source, alpha=0.25)

    viewer = HeatViewer(grid, steps_per_frame=10, title="Ring of heat sources")
    viewer.save(Path(folder) / "ring.gif", frames=20, fps=10)

print(f"Simulated {grid.steps} steps")
