"""Mapping temperatures to displayable colors.

.. autosummary::
   :nosignatures:

   Colorizer
   get_colorizer
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

import numpy as np

if TYPE_CHECKING:
    from matplotlib.colors import LinearSegmentedColormap

    from ..tools.typing import ArrayLike, FloatingArray, RGBType

INFERNO_ANCHORS = (
    (0.02, 0.00, 0.06),
    (0.13, 0.05, 0.40),
    (0.48, 0.06, 0.33),
    (0.90, 0.35, 0.01),
    (1.00, 1.00, 0.65),
)
"""tuple: colors approximating the inferno colormap, evenly spaced over `[0, 1]`"""


class Colorizer:
    """Piecewise linear colormap mapping values in `[0, 1]` to RGB triples.

    The `N` anchor colors :math:`P_i` are placed at the evenly spaced positions
    :math:`i / (N - 1)`. A value :math:`t` is first clamped to `[0, 1]` and then
    interpolated linearly between the two neighboring anchors. The first and last
    anchor are returned exactly for `t <= 0` and `t >= 1`, respectively. `NaN` is
    mapped to the first anchor.

    Instances are immutable and can thus be shared freely.
    """

    def __init__(self, anchors: Sequence[Sequence[float]] = INFERNO_ANCHORS):
        """
        Args:
            anchors (list):
                At least two RGB triples with components in `[0, 1]`
        """
        anchors_arr = np.array(anchors, dtype=np.double)
        if anchors_arr.ndim != 2 or anchors_arr.shape[1] != 3:
            raise ValueError("Anchors must be a list of RGB triples")
        if len(anchors_arr) < 2:
            raise ValueError("Colorizer requires at least two anchors")
        if not np.all((0 <= anchors_arr) & (anchors_arr <= 1)):
            raise ValueError("Components of the anchor colors must be in [0, 1]")
        anchors_arr.flags.writeable = False
        self._anchors = anchors_arr

    def __repr__(self):
        return f"{self.__class__.__name__}(anchors={self._anchors.tolist()})"

    def __eq__(self, other):
        if not isinstance(other, Colorizer):
            return NotImplemented
        return np.array_equal(self._anchors, other._anchors)

    @property
    def anchors(self) -> FloatingArray:
        """:class:`~numpy.ndarray`: read-only array of the anchor colors"""
        return self._anchors

    @property
    def num_anchors(self) -> int:
        """int: the number of anchor colors"""
        return len(self._anchors)

    def _interpolate(self, values: np.ndarray) -> np.ndarray:
        """Interpolate the anchors at the given values.

        Args:
            values (:class:`~numpy.ndarray`): The values to be colored

        Returns:
            :class:`~numpy.ndarray`: The colors with an additional trailing axis
        """
        n = self.num_anchors
        t = np.clip(np.nan_to_num(values, nan=0.0), 0, 1)
        u = t * (n - 1)
        i = np.clip(np.floor(u).astype(int), 0, n - 2)
        f = np.expand_dims(u - i, -1)
        return (1 - f) * self._anchors[i] + f * self._anchors[i + 1]

    def __call__(self, value: float) -> RGBType:
        """Return the color of a single value.

        Args:
            value (float): The value, which will be clamped to `[0, 1]`

        Returns:
            tuple: The red, green, and blue components
        """
        r, g, b = self._interpolate(np.asarray(value, dtype=np.double))
        return (float(r), float(g), float(b))

    def apply(self, values: ArrayLike) -> FloatingArray:
        """Return the colors of an array of values.

        Args:
            values (:class:`~numpy.ndarray`): The values of arbitrary shape

        Returns:
            :class:`~numpy.ndarray`: Array with an additional trailing axis of length
            three holding the RGB components
        """
        return self._interpolate(np.asarray(values, dtype=np.double))

    def to_colormap(self, name: str = "heatdiff") -> LinearSegmentedColormap:
        """Create a matplotlib colormap using the same anchors.

        Args:
            name (str): The name of the colormap

        Returns:
            :class:`matplotlib.colors.LinearSegmentedColormap`
        """
        from matplotlib.colors import LinearSegmentedColormap

        positions = np.linspace(0, 1, self.num_anchors)
        return LinearSegmentedColormap.from_list(
            name, list(zip(positions, self._anchors.tolist()))
        )


_DEFAULT_COLORIZER = Colorizer()


def get_colorizer(colorizer: Colorizer | Sequence | None = None) -> Colorizer:
    """Return a colorizer instance.

    Args:
        colorizer (:class:`Colorizer` or list, optional):
            An existing colorizer or a list of anchor colors. The default inferno
            colorizer is returned if omitted.

    Returns:
        :class:`Colorizer`
    """
    if colorizer is None:
        return _DEFAULT_COLORIZER
    elif isinstance(colorizer, Colorizer):
        return colorizer
    return Colorizer(colorizer)
