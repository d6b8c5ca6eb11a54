"""Defines the grid holding the temperature that diffuses away from heat sources.

.. autosummary::
   :nosignatures:

   DiffusionGrid
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from .. import config
from ..fields.base import DimensionError, Field
from ..fields.source import SourceMap
from ..tools.docstrings import fill_in_docstring
from ..tools.output import display_progress
from .stepper import get_backend_name, make_stepper

if TYPE_CHECKING:
    from ..tools.typing import ArrayLike, BackendType, RGBType, ShapeType
    from ..trackers.base import TrackerCollectionDataType
    from ..visualization.colors import Colorizer

_logger = logging.getLogger(__name__)
""":class:`logging.Logger`: Logger for diffusion grids."""

STABILITY_LIMIT = 0.25
"""float: largest diffusion coefficient for which the explicit 2d scheme is stable"""


class DiffusionGrid:
    r"""Temperature field evolving by diffusion and fixed heat sources.

    Every call to :meth:`step` advances the temperature :math:`T` by one tick. Interior
    cells that belong to a source are set to the source value :math:`S`, so sources act
    as reservoirs with a fixed temperature. All remaining interior cells evolve as

    .. math::
        T'_{x,y} = T_{x,y} + \alpha (T_{x-1,y} + T_{x+1,y} + T_{x,y-1} + T_{x,y+1}
                   - 4 T_{x,y})

    The cells on the edge of the grid are never updated and keep their initial value.

    The next temperature is always computed from a complete copy of the current one.
    Two buffers are used for this purpose, which are swapped after each step. Arrays
    obtained from :attr:`temperature` thus refer to memory that is overwritten by the
    second next step and should be copied if they need to be kept.
    """

    @fill_in_docstring
    def __init__(
        self,
        source: SourceMap,
        alpha: float | None = None,
        *,
        initial: Field | ArrayLike | None = None,
        backend: BackendType | str = "auto",
        label: str = "temperature",
    ):
        """
        Args:
            source (:class:`~heatdiff.fields.source.SourceMap`):
                The heat sources, which also determine the shape of the grid
            alpha (float, optional):
                {ARG_ALPHA}
            initial (:class:`~heatdiff.fields.base.Field`, optional):
                The initial temperature. All cells start at zero if omitted.
            backend (str):
                {ARG_BACKEND}
            label (str):
                Name of the temperature field
        """
        if not isinstance(source, SourceMap):
            raise TypeError(f"`source` must be a SourceMap, not {source.__class__}")
        if alpha is None:
            alpha = config["simulation.alpha"]
        alpha = float(alpha)
        if not alpha >= 0:
            raise ValueError(f"Diffusion coefficient must not be negative, not {alpha}")
        if alpha > STABILITY_LIMIT:
            _logger.warning(
                "Diffusion coefficient alpha=%g exceeds the stability limit %g",
                alpha,
                STABILITY_LIMIT,
            )

        self.source = source
        self.alpha = alpha
        self.backend = get_backend_name(backend)
        self.label = label

        self._initial = self._parse_initial(initial)
        self._current = Field(source.shape, self._initial, label=label)
        self._scratch = Field(source.shape, self._initial, label=label)
        self._stepper = make_stepper(source.data, alpha, backend=self.backend)
        self.steps = 0
        self.diagnostics: dict = {}

    def _parse_initial(self, initial: Field | ArrayLike | None) -> np.ndarray:
        """Return the initial temperature as an array matching the source."""
        if initial is None:
            return np.zeros(self.source.shape)
        if isinstance(initial, Field):
            data = initial.data
        else:
            data = np.asarray(initial, dtype=np.double)
        if data.shape != self.source.shape:
            raise DimensionError(
                f"Initial temperature of shape {data.shape} does not match source of "
                f"shape {self.source.shape}"
            )
        return np.array(data, dtype=np.double)

    def __repr__(self):
        return (
            f"{self.__class__.__name__}(shape={self.shape}, alpha={self.alpha}, "
            f"backend={self.backend!r}, steps={self.steps})"
        )

    @property
    def shape(self) -> ShapeType:
        """tuple: the number of cells `(width, height)`"""
        return self.source.shape

    @property
    def temperature(self) -> Field:
        """:class:`~heatdiff.fields.base.Field`: read-only view of the temperature"""
        return Field._wrap(self._current.readonly_view(), label=self.label)

    def step(self) -> None:
        """Advance the temperature by a single tick."""
        self._stepper(self._current.data, self._scratch.data)
        self._current, self._scratch = self._scratch, self._current
        self.steps += 1

    def advance(self, steps: int, *, progress: bool = False) -> None:
        """Advance the temperature by several ticks.

        Args:
            steps (int):
                The number of ticks
            progress (bool):
                Whether to display a progress bar
        """
        for _ in display_progress(range(steps), total=steps, enabled=progress):
            self.step()

    def run(self, steps: int, tracker: TrackerCollectionDataType = "auto") -> Field:
        """Advance the temperature under the supervision of trackers.

        Args:
            steps (int):
                The number of ticks
            tracker:
                Defines trackers that process the temperature during the simulation.
                The default value `auto` shows a progress bar and stops the simulation
                if the temperature diverges. More trackers are defined in
                :mod:`~heatdiff.trackers`.

        Returns:
            :class:`~heatdiff.fields.base.Field`: A copy of the final temperature
        """
        from .controller import Controller

        controller = Controller(self, steps, tracker=tracker)
        result = controller.run()
        self.diagnostics = controller.diagnostics
        return result

    def reset(self, initial: Field | ArrayLike | None = None) -> None:
        """Restore the initial temperature.

        Args:
            initial (:class:`~heatdiff.fields.base.Field`, optional):
                A new initial temperature. The initial temperature supplied at
                construction is used if omitted.
        """
        if initial is not None:
            self._initial = self._parse_initial(initial)
        self._current.data[...] = self._initial
        self._scratch.data[...] = self._initial
        self.steps = 0

    def read(self, x: int, y: int) -> float:
        """Return the current temperature of the cell at `(x, y)`"""
        return self._current.read(x, y)

    @fill_in_docstring
    def color(self, x: int, y: int, colorizer: Colorizer | None = None) -> RGBType:
        """Return the color representing the current temperature at `(x, y)`

        Args:
            x (int):
                The horizontal position of the cell
            y (int):
                The vertical position of the cell
            colorizer (:class:`~heatdiff.visualization.colors.Colorizer`, optional):
                {ARG_COLORIZER}

        Returns:
            tuple: The red, green, and blue components in `[0, 1]`
        """
        from ..visualization.colors import get_colorizer

        return get_colorizer(colorizer)(self.read(x, y))
