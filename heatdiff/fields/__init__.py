"""
Defines the fields holding the temperature and the heat sources.

.. autosummary::
   :nosignatures:

   ~base.Field
   ~source.SourceMap
   ~source.load_luminance
"""

from .base import DimensionError, Field, FieldIndexError, ReadOnlyFieldError
from .source import ImageLoadError, ImageTooLargeError, SourceMap, load_luminance

__all__ = ["Field", "SourceMap"]
