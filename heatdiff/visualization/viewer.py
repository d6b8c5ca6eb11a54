"""
Interactive display of a running simulation

.. autosummary::
   :nosignatures:

   HeatViewer
   run_app
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ..fields.source import SourceMap
from ..simulation.diffusion import DiffusionGrid
from ..tools.docstrings import fill_in_docstring
from ..tools.misc import ensure_directory_exists
from .colors import get_colorizer
from .plotting import render_rgb

if TYPE_CHECKING:
    from ..tools.typing import BackendType, ShapeType
    from .colors import Colorizer

_logger = logging.getLogger(__name__)


class HeatViewer:
    """Animation advancing a :class:`~heatdiff.simulation.diffusion.DiffusionGrid`.

    Every frame advances the grid by `steps_per_frame` ticks and then renders the
    complete temperature, so the image never shows a partially updated field. The
    animation is driven by :class:`matplotlib.animation.FuncAnimation`, which also
    controls the pacing of the frames.
    """

    @fill_in_docstring
    def __init__(
        self,
        grid: DiffusionGrid,
        steps_per_frame: int = 1,
        interval: float = 30,
        *,
        colorizer: Colorizer | None = None,
        title: str | None = None,
    ):
        """
        Args:
            grid (:class:`~heatdiff.simulation.diffusion.DiffusionGrid`):
                The simulation that is shown
            steps_per_frame (int):
                The number of ticks performed between two frames
            interval (float):
                Delay between frames in milliseconds
            colorizer (:class:`~heatdiff.visualization.colors.Colorizer`, optional):
                {ARG_COLORIZER}
            title (str, optional):
                Title of the window
        """
        if steps_per_frame < 1:
            raise ValueError("At least one step needs to be performed per frame")
        self.grid = grid
        self.steps_per_frame = int(steps_per_frame)
        self.interval = interval
        self.colorizer = get_colorizer(colorizer)
        self.title = title
        self._fig = None
        self._image = None
        self._animation = None

    def _create_figure(self):
        """Create the figure showing the current temperature."""
        import matplotlib.pyplot as plt

        width, height = self.grid.shape
        fig, ax = plt.subplots(figsize=(6.4, 6.4 * height / width))
        self._image = ax.imshow(
            render_rgb(self.grid, self.colorizer), interpolation="nearest"
        )
        ax.set_axis_off()
        if self.title:
            ax.set_title(self.title)
        fig.tight_layout()
        self._fig = fig
        return fig

    def update(self, frame: int | None = None):
        """Advance the simulation and update the image.

        Args:
            frame (int): The index of the frame (ignored)

        Returns:
            tuple: The artists that were changed
        """
        self.grid.advance(self.steps_per_frame)
        self._image.set_data(render_rgb(self.grid, self.colorizer))  # type: ignore
        return (self._image,)

    def _create_animation(self, frames: int | None = None):
        """Create the animation object."""
        from matplotlib.animation import FuncAnimation

        fig = self._create_figure()
        self._animation = FuncAnimation(
            fig,
            self.update,
            frames=frames,
            interval=self.interval,
            blit=False,
            cache_frame_data=False,
        )
        return self._animation

    def show(self, frames: int | None = None) -> None:
        """Show the animation in a window until it is closed.

        Args:
            frames (int, optional):
                The number of frames after which the animation stops. The animation
                runs indefinitely if omitted.
        """
        import matplotlib.pyplot as plt

        self._create_animation(frames)
        _logger.info("Show simulation of %s grid", self.grid.shape)
        plt.show()

    def save(self, path: str | Path, frames: int = 100, fps: int = 30) -> None:
        """Store the animation in a file.

        Args:
            path (str or :class:`~pathlib.Path`):
                The location of the file. The writer is chosen based on the
                extension, e.g., `gif` files are written using Pillow.
            frames (int):
                The number of frames
            fps (int):
                The number of frames per second of the resulting movie
        """
        import matplotlib.pyplot as plt

        path = Path(path)
        ensure_directory_exists(path.parent)
        animation = self._create_animation(frames)
        writer = "pillow" if path.suffix.lower() == ".gif" else None
        try:
            animation.save(path, writer=writer, fps=fps)
        finally:
            plt.close(self._fig)
        _logger.info("Wrote animation with %d frames to `%s`", frames, path)


@fill_in_docstring
def run_app(
    image_path: str | Path,
    shape: ShapeType | None = None,
    alpha: float | None = None,
    intensity: float | None = None,
    *,
    steps_per_frame: int = 1,
    interval: float = 30,
    backend: BackendType | str = "auto",
    colorizer: Colorizer | None = None,
) -> HeatViewer:
    """Simulate heat diffusing from the bright parts of an image.

    The image is converted to a :class:`~heatdiff.fields.source.SourceMap`, which
    drives a :class:`~heatdiff.simulation.diffusion.DiffusionGrid` starting at zero
    temperature. The simulation is shown in a window until it is closed.

    Args:
        image_path (str or :class:`~pathlib.Path`):
            The image defining the heat sources
        shape (tuple, optional):
            {ARG_SHAPE}
        alpha (float, optional):
            {ARG_ALPHA}
        intensity (float, optional):
            {ARG_INTENSITY}
        steps_per_frame (int):
            The number of ticks performed between two frames
        interval (float):
            Delay between frames in milliseconds
        backend (str):
            {ARG_BACKEND}
        colorizer (:class:`~heatdiff.visualization.colors.Colorizer`, optional):
            {ARG_COLORIZER}

    Returns:
        :class:`HeatViewer`: The viewer after the window was closed
    """
    source = SourceMap.from_image(image_path, shape=shape, intensity=intensity)
    grid = DiffusionGrid(source, alpha, backend=backend)
    viewer = HeatViewer(
        grid,
        steps_per_frame=steps_per_frame,
        interval=interval,
        colorizer=colorizer,
        title=Path(image_path).name,
    )
    viewer.show()
    return viewer
