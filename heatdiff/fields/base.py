"""Defines the two-dimensional scalar field underlying the simulation.

.. autosummary::
   :nosignatures:

   Field
   DimensionError
   FieldIndexError
   ReadOnlyFieldError
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeVar

import numpy as np

if TYPE_CHECKING:
    from ..tools.typing import ArrayLike, FloatingArray, ShapeType


_base_logger = logging.getLogger(__name__.rsplit(".", 1)[0])
""":class:`logging.Logger`: Base logger for fields."""

TField = TypeVar("TField", bound="Field")


class DimensionError(ValueError):
    """Error indicating that the shape of a field is not supported."""


class FieldIndexError(IndexError):
    """Error indicating that a cell outside of the field was accessed."""


class ReadOnlyFieldError(RuntimeError):
    """Error indicating that a frozen field was modified."""


def _parse_shape(shape) -> ShapeType:
    """Convert `shape` into a tuple of two positive integers."""
    try:
        width, height = (int(n) for n in shape)
    except (TypeError, ValueError) as err:
        raise DimensionError(f"Shape must be two integers, not {shape!r}") from err
    if width < 1 or height < 1:
        raise DimensionError(f"Shape must be positive, not {(width, height)}")
    return width, height


class Field:
    """Scalar values of type double on a fixed rectangular grid of cells.

    The data is stored in an array of shape `(width, height)`, so cells are addressed
    as `field[x, y]` with `x` running from left to right and `y` from bottom to top.
    """

    _logger: logging.Logger  # logger instance to output information

    def __init__(
        self,
        shape: ShapeType,
        data: ArrayLike | None = None,
        *,
        label: str | None = None,
    ):
        """
        Args:
            shape (tuple):
                The number of cells `(width, height)`
            data (:class:`~numpy.ndarray`, optional):
                Values of all cells, which are copied into the field. All cells are
                initialized with zero if omitted.
            label (str, optional):
                Name of the field
        """
        self._shape = _parse_shape(shape)
        self._data = np.zeros(self._shape, dtype=np.double)
        if data is not None:
            data_arr = np.asarray(data, dtype=np.double)
            if data_arr.shape != self._shape:
                raise DimensionError(
                    f"Data of shape {data_arr.shape} does not match field of shape "
                    f"{self._shape}"
                )
            self._data[...] = data_arr
        self.label = label

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._logger = _base_logger.getChild(cls.__qualname__)

    @classmethod
    def zeros(
        cls: type[TField], shape: ShapeType, *, label: str | None = None
    ) -> TField:
        """Create a field with all cells set to zero."""
        return cls(shape, label=label)

    @classmethod
    def from_array(
        cls: type[TField], data: ArrayLike, *, label: str | None = None
    ) -> TField:
        """Create a field from a two-dimensional array indexed as `data[x, y]`

        Args:
            data (:class:`~numpy.ndarray`):
                The values of all cells
            label (str, optional):
                Name of the field
        """
        data_arr = np.asarray(data, dtype=np.double)
        if data_arr.ndim != 2:
            raise DimensionError(f"Field data must be 2d, not {data_arr.ndim}d")
        return cls(data_arr.shape, data_arr, label=label)

    @classmethod
    def _wrap(
        cls: type[TField], data: FloatingArray, *, label: str | None = None
    ) -> TField:
        """Create a field that shares the memory of `data` without copying it."""
        obj = cls.__new__(cls)
        obj._shape = _parse_shape(data.shape)
        obj._data = data
        obj.label = label
        return obj

    @property
    def shape(self) -> ShapeType:
        """tuple: the number of cells `(width, height)`"""
        return self._shape

    @property
    def width(self) -> int:
        return self._shape[0]

    @property
    def height(self) -> int:
        return self._shape[1]

    @property
    def data(self) -> FloatingArray:
        """:class:`~numpy.ndarray`: the values of all cells"""
        return self._data

    @property
    def interior(self) -> FloatingArray:
        """:class:`~numpy.ndarray`: view of all cells that are not on the border"""
        return self._data[1:-1, 1:-1]

    @property
    def writeable(self) -> bool:
        """bool: whether the values of the field can be changed"""
        return bool(self._data.flags.writeable)

    def freeze(self: TField) -> TField:
        """Prevent any further modification of the field.

        Returns:
            The field itself, which allows chaining calls
        """
        self._data.flags.writeable = False
        return self

    def readonly_view(self) -> FloatingArray:
        """Return a view of the data that cannot be used to modify the field."""
        view = self._data.view()
        view.flags.writeable = False
        return view

    def _check_cell(self, x: int, y: int) -> tuple[int, int]:
        """Ensure the cell `(x, y)` lies within the field."""
        x, y = int(x), int(y)
        if not (0 <= x < self._shape[0] and 0 <= y < self._shape[1]):
            raise FieldIndexError(
                f"Cell ({x}, {y}) lies outside of field of shape {self._shape}"
            )
        return x, y

    def read(self, x: int, y: int) -> float:
        """Return the value of the cell at `(x, y)`"""
        return float(self._data[self._check_cell(x, y)])

    def __getitem__(self, index: tuple[int, int]) -> float:
        return self.read(*index)

    def __setitem__(self, index: tuple[int, int], value: float) -> None:
        if not self.writeable:
            raise ReadOnlyFieldError(f"{self.__class__.__name__} is read-only")
        self._data[self._check_cell(*index)] = value

    def is_border(self, x: int, y: int) -> bool:
        """Determine whether the cell `(x, y)` lies on the edge of the field."""
        x, y = self._check_cell(x, y)
        width, height = self._shape
        return x == 0 or y == 0 or x == width - 1 or y == height - 1

    def border_mask(self) -> np.ndarray:
        """Return a boolean array marking all cells on the edge of the field."""
        mask = np.ones(self._shape, dtype=bool)
        mask[1:-1, 1:-1] = False
        return mask

    def copy(self, *, label: str | None = None) -> Field:
        """Return a writeable copy of this field.

        Args:
            label (str, optional):
                Name of the copy. The label of the current field is used if omitted.
        """
        if label is None:
            label = self.label
        return Field(self._shape, self._data, label=label)

    def __eq__(self, other):
        if not isinstance(other, Field):
            return NotImplemented
        return self.shape == other.shape and np.array_equal(self.data, other.data)

    def __repr__(self):
        return (
            f"{self.__class__.__name__}(shape={self._shape}, label={self.label!r}, "
            f"min={self._data.min():.3g}, max={self._data.max():.3g})"
        )
