"""Defines the immutable map of heat sources and the loading of source images.

.. autosummary::
   :nosignatures:

   SourceMap
   load_luminance
   ImageLoadError
   ImageTooLargeError
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

from .. import config
from ..tools.docstrings import fill_in_docstring
from .base import DimensionError, Field, _parse_shape

if TYPE_CHECKING:
    from ..tools.typing import ArrayLike, FloatingArray, ShapeType


# ITU-R BT.709 coefficients converting linear RGB values to luminance
LUMA_WEIGHTS = np.array([0.2126, 0.7152, 0.0722])


class ImageLoadError(RuntimeError):
    """Error indicating that an image file could not be read or decoded."""


class ImageTooLargeError(ValueError):
    """Error indicating that an image does not fit into the simulation grid."""


def load_luminance(path: Path | str) -> FloatingArray:
    """Read an image file and return its normalized luminance.

    Integer pixel values are divided by the largest value their data type can hold, so
    16-bit images are normalized by 65535. Color images are converted to luminance
    unless all color channels agree, and alpha channels are discarded.

    Args:
        path (:class:`~pathlib.Path` or str):
            The path to the image file

    Returns:
        :class:`~numpy.ndarray`: Luminance values in `[0, 1]` in image layout, i.e., the
        first axis enumerates rows from top to bottom.
    """
    from matplotlib.image import imread

    try:
        data = imread(str(path))
    except (OSError, SyntaxError, ValueError) as err:
        # Pillow reports corrupted PNG files with a `SyntaxError`
        raise ImageLoadError(f"Could not load image `{path}`") from err

    if np.issubdtype(data.dtype, np.integer):
        data = data / np.iinfo(data.dtype).max
    else:
        data = np.asarray(data, dtype=np.double)

    if data.ndim == 3:
        channels = data.shape[2]
        if channels in {1, 2}:
            data = data[..., 0]  # gray scale image, possibly with alpha channel
        elif channels in {3, 4}:
            rgb = data[..., :3]
            if np.all(rgb == rgb[..., :1]):
                data = rgb[..., 0]  # color image showing only gray values
            else:
                data = rgb @ LUMA_WEIGHTS
        else:
            raise ImageLoadError(f"Image `{path}` has {channels} color channels")
    elif data.ndim != 2:
        raise ImageLoadError(f"Image data has wrong shape: {data.shape}")

    if data.size == 0:
        raise ImageLoadError(f"Image `{path}` does not contain any pixels")
    return np.clip(data, 0, 1)


class SourceMap(Field):
    """Field marking where heat is injected and at which temperature.

    Cells with a positive value are held at that value in every step of the
    simulation, while cells with value zero do not inject heat. The data of a source
    map cannot be modified after construction.
    """

    def __init__(
        self,
        shape: ShapeType,
        data: ArrayLike | None = None,
        *,
        intensity: float | None = None,
        label: str | None = "source",
    ):
        """
        Args:
            shape (tuple):
                The number of cells `(width, height)`
            data (:class:`~numpy.ndarray`, optional):
                Source values of all cells, indexed as `data[x, y]`
            intensity (float, optional):
                The intensity factor used to create the data. The largest source value
                is used if omitted.
            label (str, optional):
                Name of the field
        """
        super().__init__(shape, data, label=label)
        if not np.all(np.isfinite(self._data)):
            raise ValueError("Source values must be finite")
        if not np.all(self._data >= 0):
            raise ValueError("Source values must not be negative")
        if intensity is None:
            intensity = float(self._data.max())
        elif not intensity >= 0:
            raise ValueError(f"Intensity must not be negative, not {intensity}")
        elif self._data.max() > intensity:
            raise ValueError(
                f"Source values must not exceed the intensity {intensity}, but the "
                f"largest value is {self._data.max()}"
            )
        self.intensity = float(intensity)
        self.freeze()

    @classmethod
    def empty(cls, shape: ShapeType) -> SourceMap:
        """Create a source map without any heat sources.

        Args:
            shape (tuple):
                The number of cells `(width, height)`
        """
        return cls(shape, intensity=0)

    @classmethod
    @fill_in_docstring
    def from_luminance(
        cls,
        luminance: ArrayLike,
        shape: ShapeType | None = None,
        intensity: float | None = None,
    ) -> SourceMap:
        """Create a source map from gray scale image data.

        The image is placed in the center of the grid, using integer division to
        determine the offsets when the remaining space cannot be split evenly. Since
        images store rows from top to bottom, while the `y` axis of the grid points
        upward, the image is flipped vertically.

        Args:
            luminance (:class:`~numpy.ndarray`):
                Luminance values in `[0, 1]` with shape `(h, w)`, where the first axis
                enumerates rows from top to bottom
            shape (tuple, optional):
                {ARG_SHAPE}
            intensity (float, optional):
                {ARG_INTENSITY}

        Returns:
            :class:`SourceMap`: The source map covering the entire grid
        """
        if shape is None:
            shape = config["simulation.grid_shape"]
        width, height = _parse_shape(shape)
        if intensity is None:
            intensity = config["source.intensity"]
        intensity = float(intensity)
        if not intensity >= 0:
            raise ValueError(f"Intensity must not be negative, not {intensity}")

        image = np.asarray(luminance, dtype=np.double)
        if image.ndim != 2:
            raise DimensionError(f"Luminance data must be 2d, not {image.ndim}d")
        if not np.all((image >= 0) & (image <= 1)):
            raise ValueError("Luminance values must lie in the interval [0, 1]")

        img_height, img_width = image.shape
        if img_width > width or img_height > height:
            raise ImageTooLargeError(
                f"Image of size {img_width}x{img_height} does not fit into grid of "
                f"size {width}x{height}"
            )
        offset_x = (width - img_width) // 2
        offset_y = (height - img_height) // 2

        # transpose data to use mathematical conventions for axes
        data = np.zeros((width, height))
        data[offset_x : offset_x + img_width, offset_y : offset_y + img_height] = (
            intensity * image.T[:, ::-1]
        )
        return cls((width, height), data, intensity=intensity)

    @classmethod
    @fill_in_docstring
    def from_image(
        cls,
        path: Path | str,
        shape: ShapeType | None = None,
        intensity: float | None = None,
    ) -> SourceMap:
        """Create a source map from an image file.

        Args:
            path (:class:`~pathlib.Path` or str):
                The path to the image file. All formats supported by
                :func:`matplotlib.image.imread` can be used.
            shape (tuple, optional):
                {ARG_SHAPE}
            intensity (float, optional):
                {ARG_INTENSITY}

        Returns:
            :class:`SourceMap`: The source map covering the entire grid
        """
        luminance = load_luminance(path)
        source = cls.from_luminance(luminance, shape=shape, intensity=intensity)
        cls._logger.info(
            "Loaded source image `%s` (%dx%d pixels) with %d source cells",
            path,
            luminance.shape[1],
            luminance.shape[0],
            source.num_cells,
        )
        return source

    @property
    def mask(self) -> np.ndarray:
        """:class:`~numpy.ndarray`: boolean array marking cells that inject heat"""
        return self._data > 0

    @property
    def num_cells(self) -> int:
        """int: the number of cells that inject heat"""
        return int(np.count_nonzero(self._data))
