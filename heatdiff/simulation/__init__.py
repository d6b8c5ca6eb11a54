"""Classes and functions that advance the temperature in time.

.. autosummary::
   :nosignatures:

   ~diffusion.DiffusionGrid
   ~controller.Controller
   ~stepper.make_stepper
   ~stepper.get_backend_name
"""

from .controller import Controller
from .diffusion import STABILITY_LIMIT, DiffusionGrid
from .stepper import BACKENDS, get_backend_name, make_stepper

__all__ = ["Controller", "DiffusionGrid"]
