"""Functions and classes for visualizing simulations.

.. autosummary::
   :nosignatures:

   colors
   plotting
   viewer
"""

from .colors import INFERNO_ANCHORS, Colorizer, get_colorizer
from .plotting import plot_temperature, render_rgb, save_image
from .viewer import HeatViewer, run_app

__all__ = [
    "Colorizer",
    "HeatViewer",
    "plot_temperature",
    "render_rgb",
    "run_app",
    "save_image",
]
