"""Methods for automatic transformation of docstrings.

.. autosummary::
   :nosignatures:

   get_text_block
   replace_in_docstring
   fill_in_docstring
"""

from __future__ import annotations

import re
import textwrap
from typing import TypeVar

DOCSTRING_REPLACEMENTS = {
    # description of function arguments
    "ARG_ALPHA": """
        The diffusion coefficient of the explicit scheme. The 5-point stencil is
        only numerically stable for values up to 1/4, which is not enforced. If
        omitted, the value is read from the configuration `simulation.alpha`.
        """,
    "ARG_BACKEND": """
        Determines how the stepper is implemented. Possible values are `numpy`
        (vectorized array operations), `scipy` (convolution using
        :mod:`scipy.ndimage`), `numba` (compiled loops), and `auto`, which uses the
        configuration `simulation.default_backend`.
        """,
    "ARG_SHAPE": """
        The number of cells `(width, height)` of the simulation grid. If omitted,
        the configuration `simulation.grid_shape` is used.
        """,
    "ARG_INTENSITY": """
        Factor `k` multiplying the normalized luminance of the image, so source
        values lie in `[0, k]`. If omitted, the configuration `source.intensity`
        is used.
        """,
    "ARG_TRACKER_INTERRUPT": """
        Determines how often the tracker interrupts the simulation. A positive
        integer `n` means that the tracker handles the state every `n` steps.
        """,
    "ARG_COLORIZER": """
        The :class:`~heatdiff.visualization.colors.Colorizer` that maps
        temperatures to colors. The default inferno palette is used if omitted.
        """,
}
DOCSTRING_REPLACEMENTS = {k: v[1:-1] for k, v in DOCSTRING_REPLACEMENTS.items()}


def get_text_block(identifier: str) -> str:
    """Return a single text block.

    Args:
        identifier (str): The name of the text block

    Returns:
        str: the text block as one long line.
    """
    raw_text = DOCSTRING_REPLACEMENTS[identifier]
    return "".join(textwrap.dedent(raw_text))


TFunc = TypeVar("TFunc")


def replace_in_docstring(f: TFunc, token: str, value: str) -> TFunc:
    """Replace a token in a docstring keeping the indentation of the token.

    Args:
        f (callable): The function with the docstring to handle
        token (str): The token to search for
        value (str): The replacement string

    Returns:
        callable: The function with the modified docstring
    """
    if not f.__doc__:
        return f

    def repl(matchobj) -> str:
        """Helper function indenting the replacement."""
        bare_text = textwrap.dedent(value).strip()
        return textwrap.indent(bare_text, matchobj.group(1))

    f.__doc__ = re.sub(  # type: ignore
        f"^([ \t]*){re.escape(token)}", repl, f.__doc__, flags=re.MULTILINE
    )
    return f


def fill_in_docstring(f: TFunc) -> TFunc:
    """Decorator that replaces text in the docstring of a function."""
    if not f.__doc__:  # docstrings might have been stripped with -OO
        return f

    tw = textwrap.TextWrapper(
        width=88, expand_tabs=True, replace_whitespace=True, drop_whitespace=True
    )

    for name, value in DOCSTRING_REPLACEMENTS.items():

        def repl(matchobj) -> str:
            """Helper function replacing token in docstring."""
            tw.initial_indent = tw.subsequent_indent = matchobj.group(1)
            return tw.fill(textwrap.dedent(value))

        token = "{" + name + "}"
        f.__doc__ = re.sub(  # type: ignore
            f"^([ \t]*){token}",
            repl,
            f.__doc__,  # type: ignore
            flags=re.MULTILINE,
        )
    return f
