"""The py-heatdiff package simulates heat diffusing away from fixed sources."""

# determine the package version
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("py-heatdiff")
except PackageNotFoundError:
    # package is not installed, so we cannot determine any version
    __version__ = "unknown"
del PackageNotFoundError, version  # clean name space

# initialize the configuration
from .tools.config import Config, Parameter, environment  # noqa: F401

config = Config()  # initialize the default configuration

# import most common classes into main name space
from .fields import *  # noqa: F403
from .simulation import *  # noqa: F403
from .trackers import *  # noqa: F403
from .visualization import *  # noqa: F403

del Config  # clean name space
