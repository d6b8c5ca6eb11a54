"""Handles configuration variables of the package.

.. autosummary::
   :nosignatures:

   Parameter
   Config
   get_package_versions
   environment
"""

from __future__ import annotations

import collections
import contextlib
import importlib.metadata
import logging
import sys
from typing import Any

_logger = logging.getLogger(__name__)
""":class:`logging.Logger`: Logger for the configuration."""


class Parameter:
    """Class representing a single configuration parameter."""

    def __init__(
        self,
        name: str,
        default_value=None,
        cls=object,
        description: str = "",
    ):
        """Initialize a parameter.

        Args:
            name (str):
                The name of the parameter
            default_value:
                The default value
            cls:
                The type of the parameter, which is used for conversion
            description (str):
                A string describing the impact of this parameter
        """
        self.name = name
        self.default_value = default_value
        self.cls = cls
        self.description = description

        if cls is not object and cls(default_value) != default_value:
            _logger.warning(
                "Default value `%s` does not seem to be of type `%s`",
                name,
                cls.__name__,
            )

    def __repr__(self):
        return (
            f'{self.__class__.__name__}(name="{self.name}", default_value='
            f'"{self.default_value}", cls="{self.cls.__name__}", '
            f'description="{self.description}")'
        )

    __str__ = __repr__

    def convert(self, value=None):
        """Converts a `value` into the correct type for this parameter.

        If `value` is not given, the default value is converted.

        Args:
            value: The value to convert

        Returns:
            The converted value, which is of type `self.cls`
        """
        if value is None:
            value = self.default_value

        if self.cls is object:
            return value
        try:
            return self.cls(value)
        except (TypeError, ValueError) as err:
            raise ValueError(
                f"Could not convert {value!r} to {self.cls.__name__} for parameter "
                f"'{self.name}'"
            ) from err


# define default parameter values
DEFAULT_CONFIG: list[Parameter] = [
    Parameter(
        "simulation.grid_shape",
        (320, 240),
        tuple,
        "Default number of cells `(width, height)` of the simulation grid.",
    ),
    Parameter(
        "simulation.alpha",
        0.25,
        float,
        "Default diffusion coefficient of the explicit 5-point scheme. Values larger "
        "than 1/4 lead to numerical instabilities.",
    ),
    Parameter(
        "simulation.default_backend",
        "auto",
        str,
        "Sets the backend used to advance the temperature field. Possible options are "
        "`numpy`, `scipy`, and `numba`. The default option `auto` selects `numba`.",
    ),
    Parameter(
        "source.intensity",
        1.0,
        float,
        "Default factor by which the normalized luminance of the source image is "
        "multiplied to obtain the clamped source temperature.",
    ),
    Parameter(
        "numba.debug",
        False,
        bool,
        "Determines whether numba uses the debug mode for compilation. If enabled, "
        "this emits extra information that might be useful for debugging.",
    ),
    Parameter(
        "numba.fastmath",
        False,
        bool,
        "Determines whether the fastmath flag is set during compilation. If enabled, "
        "the compiled stepper might be faster, but its results can deviate slightly "
        "from the numpy backend since floating point operations get reordered.",
    ),
]


class Config(collections.UserDict):
    """Class handling the package configuration."""

    def __init__(self, items: dict[str, Any] | None = None, mode: str = "update"):
        """
        Args:
            items (dict, optional):
                Configuration values that should be added or overwritten to initialize
                the configuration.
            mode (str):
                Defines the mode in which the configuration is used. Possible values are

                * `insert`: any new configuration key can be inserted
                * `update`: only the values of pre-existing items can be updated
                * `locked`: no values can be changed

                Note that the items specified by `items` will always be inserted,
                independent of the `mode`.
        """
        self.mode = "insert"  # temporarily allow inserting items
        super().__init__({p.name: p for p in DEFAULT_CONFIG})
        if items:
            self.update(items)
        self.mode = mode

    def __getitem__(self, key: str):
        """Retrieve item `key`"""
        parameter = self.data[key]
        if isinstance(parameter, Parameter):
            return parameter.convert()
        else:
            return parameter

    def _wrap_value(self, key: str, value):
        """Convert `value` using the parameter stored at `key`, if there is one.

        The result is again a :class:`Parameter`, so later assignments are checked
        as well.
        """
        parameter = self.data.get(key)
        if isinstance(parameter, Parameter):
            return Parameter(
                parameter.name,
                parameter.convert(value),
                parameter.cls,
                parameter.description,
            )
        return value

    def __setitem__(self, key: str, value):
        """Update item `key` with `value`"""
        if self.mode == "insert":
            self.data[key] = value

        elif self.mode == "update":
            if key not in self.data:
                raise KeyError(f"{key} is not present and config is not in insert mode")
            self.data[key] = self._wrap_value(key, value)

        elif self.mode == "locked":
            raise RuntimeError("Configuration is locked")

        else:
            raise ValueError(f"Unsupported configuration mode `{self.mode}`")

    def __delitem__(self, key: str):
        """Removes item `key`"""
        if self.mode == "insert":
            del self.data[key]
        else:
            raise RuntimeError("Configuration is not in `insert` mode")

    def to_dict(self) -> dict[str, Any]:
        """Convert the configuration to a simple dictionary.

        Returns:
            dict: A representation of the configuration in a normal :class:`dict`.
        """
        return dict(self.items())

    def __repr__(self) -> str:
        """Represent the configuration as a string."""
        return f"{self.__class__.__name__}({repr(self.to_dict())})"

    @contextlib.contextmanager
    def __call__(self, values: dict[str, Any] | None = None, **kwargs):
        """Context manager temporarily changing the configuration.

        Args:
            values (dict): New configuration parameters
            **kwargs: New configuration parameters
        """
        data_initial = self.data.copy()  # save old configuration
        if values is not None:
            kwargs = {**values, **kwargs}
        try:
            # set new configuration
            for key, value in kwargs.items():
                self.data[key] = self._wrap_value(key, value)
            yield  # return to caller
        finally:
            # restore old configuration
            self.data = data_initial


def get_package_versions(
    packages: list[str], *, na_str="not available"
) -> dict[str, str]:
    """Tries to determine the installed version of python packages.

    Args:
        packages (list): The names of all packages
        na_str (str): Text to return if package is not available

    Returns:
        dict: Dictionary with version for each package name
    """
    versions: dict[str, str] = {}
    for name in sorted(packages):
        try:
            versions[name] = importlib.metadata.version(name)
        except importlib.metadata.PackageNotFoundError:
            versions[name] = na_str
    return versions


def environment() -> dict[str, Any]:
    """Obtain information about the compute environment.

    Returns:
        dict: information about the python installation and packages
    """
    import matplotlib as mpl

    from .. import __version__ as package_version
    from .. import config
    from .numba import numba_environment

    result: dict[str, Any] = {}
    result["package version"] = package_version
    result["python version"] = sys.version
    result["platform"] = sys.platform
    result["config"] = config.to_dict()
    result["mandatory packages"] = get_package_versions(
        ["matplotlib", "numba", "numpy", "scipy", "tqdm"]
    )
    result["matplotlib environment"] = {"backend": mpl.get_backend()}
    result["numba environment"] = numba_environment()
    return result
