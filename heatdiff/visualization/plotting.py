"""
Functions for rendering and plotting temperature fields

.. autosummary::
   :nosignatures:

   render_rgb
   save_image
   plot_temperature
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Union

import numpy as np

from ..fields.base import Field
from ..tools.docstrings import fill_in_docstring
from ..tools.misc import ensure_directory_exists
from ..tools.plotting import plot_on_axes
from .colors import get_colorizer

if TYPE_CHECKING:
    from ..simulation.diffusion import DiffusionGrid
    from ..tools.typing import FloatingArray
    from .colors import Colorizer

_logger = logging.getLogger(__name__)

FieldLike = Union[Field, "DiffusionGrid"]


def _get_field(field: FieldLike) -> Field:
    """Return the temperature field represented by `field`"""
    if isinstance(field, Field):
        return field
    try:
        return field.temperature  # type: ignore
    except AttributeError as err:
        raise TypeError(f"Cannot extract field from {field.__class__}") from err


@fill_in_docstring
def render_rgb(field: FieldLike, colorizer: Colorizer | None = None) -> FloatingArray:
    """Render a field as an RGB image.

    The image is in display orientation, i.e., the first row of the image holds the
    cells with the largest `y` coordinate.

    Args:
        field (:class:`~heatdiff.fields.base.Field`):
            The field, or a :class:`~heatdiff.simulation.diffusion.DiffusionGrid`
            whose current temperature is rendered
        colorizer (:class:`~heatdiff.visualization.colors.Colorizer`, optional):
            {ARG_COLORIZER}

    Returns:
        :class:`~numpy.ndarray`: Array of shape `(height, width, 3)` with components
        in `[0, 1]`
    """
    data = _get_field(field).data
    return get_colorizer(colorizer).apply(data.T[::-1, :])


@fill_in_docstring
def save_image(
    field: FieldLike, path: str | Path, colorizer: Colorizer | None = None
) -> None:
    """Write a field as a colored image file.

    Every cell corresponds to a single pixel. The image format is deduced from the
    file extension of `path`.

    Args:
        field (:class:`~heatdiff.fields.base.Field`):
            The field, or a :class:`~heatdiff.simulation.diffusion.DiffusionGrid`
            whose current temperature is stored
        path (str or :class:`~pathlib.Path`):
            The location of the image file
        colorizer (:class:`~heatdiff.visualization.colors.Colorizer`, optional):
            {ARG_COLORIZER}
    """
    import matplotlib.pyplot as plt

    path = Path(path)
    ensure_directory_exists(path.parent)
    plt.imsave(path, np.clip(render_rgb(field, colorizer), 0, 1))
    _logger.info("Wrote image to `%s`", path)


@plot_on_axes
@fill_in_docstring
def plot_temperature(
    field: FieldLike,
    colorizer: Colorizer | None = None,
    *,
    colorbar: bool = True,
    ax,
    **kwargs,
):
    """Visualize a temperature field using matplotlib.

    Values are colored by the same colormap that :func:`render_rgb` uses, with the
    color scale fixed to `[0, 1]`.

    Args:
        field (:class:`~heatdiff.fields.base.Field`):
            The field, or a :class:`~heatdiff.simulation.diffusion.DiffusionGrid`
            whose current temperature is plotted
        colorizer (:class:`~heatdiff.visualization.colors.Colorizer`, optional):
            {ARG_COLORIZER}
        colorbar (bool):
            Whether to add a colorbar
        {PLOT_ARGS}
        **kwargs:
            Additional arguments are passed to :func:`matplotlib.pyplot.imshow`

    Returns:
        :class:`matplotlib.image.AxesImage`: The image showing the field
    """
    field = _get_field(field)
    kwargs.setdefault("interpolation", "nearest")
    kwargs.setdefault("cmap", get_colorizer(colorizer).to_colormap())
    kwargs.setdefault("vmin", 0)
    kwargs.setdefault("vmax", 1)
    image = ax.imshow(np.asarray(field.data).T, origin="lower", **kwargs)
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    if colorbar:
        ax.figure.colorbar(image, ax=ax)
    if field.label:
        ax.set_title(field.label)
    return image
