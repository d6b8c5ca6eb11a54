"""
Package containing several tools required in py-heatdiff

.. autosummary::
   :nosignatures:

   config
   docstrings
   misc
   numba
   output
   plotting
   typing
"""
