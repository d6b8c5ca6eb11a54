"""
Tools for plotting and controlling plot output

.. autosummary::
   :nosignatures:

   disable_interactive
   nested_plotting_check
   plot_on_axes
"""

from __future__ import annotations

import contextlib
import functools
import inspect
import warnings
from typing import Callable

from .docstrings import replace_in_docstring

_PLOT_ARGS_DOC = """
title (str):
    Title of the plot
filename (str, optional):
    If given, the plot is written to the specified file.
action (str):
    Decides what to do with the figure. If the argument is set to `show`
    :func:`matplotlib.pyplot.show` will be called to show the plot, if the value is
    `create`, the figure will be created, but not shown, and the value `close` closes
    the figure, after saving it to a file when `filename` is given. The default value
    `auto` implies that the plot is shown if a new figure was created by the
    outermost plotting call.
ax (:class:`matplotlib.axes.Axes`):
    Figure axes to be used for plotting. If `None`, a new figure with a single axes
    is created.
"""


class nested_plotting_check:
    """Context manager that checks whether it is the root plotting call.

    Example:
        The context manager can be used in plotting calls to check for nested
        plotting calls::

            with nested_plotting_check() as is_outermost_plot_call:
                make_plot(...)  # could potentially call other plotting methods
                if is_outermost_plot_call:
                    plt.show()
    """

    _is_plotting = False  # class variable keeping track of nesting

    def __init__(self):
        self.is_nested: bool | None = None

    def __enter__(self):
        self.is_nested = self.__class__._is_plotting
        self.__class__._is_plotting = True
        return not self.is_nested

    def __exit__(self, *exc):
        if not self.is_nested:
            self.__class__._is_plotting = False


@contextlib.contextmanager
def disable_interactive():
    """Context manager disabling the interactive mode of matplotlib.

    The previous state is restored afterwards.
    """
    import matplotlib.pyplot as plt

    if plt.isinteractive():
        plt.interactive(False)
        try:
            yield
        finally:
            plt.interactive(True)
    else:
        yield


def plot_on_axes(wrapped: Callable | None = None) -> Callable:
    """Decorator for a plotting function that draws on a single axes.

    The wrapped function must accept the keyword argument `ax`. The decorator adds the
    keyword arguments `title`, `filename`, `action`, and `ax`, which are described in
    the docstring of the wrapped function if it contains the placeholder
    `{PLOT_ARGS}`.

    Example:

        .. code-block:: python

            @plot_on_axes
            def make_plot(data, ax):
                return ax.imshow(data)

            make_plot(data, title="Data", action="close", filename="data.png")

    Args:
        wrapped (callable):
            Function to be wrapped
    """
    if wrapped is None:
        # handle the case where decorator was called without brackets
        return functools.partial(plot_on_axes)

    def wrapper(
        *args,
        title: str | None = None,
        filename: str | None = None,
        action: str = "auto",
        ax=None,
        **kwargs,
    ):
        import matplotlib.pyplot as plt

        with nested_plotting_check() as is_outermost_plot_call:
            with disable_interactive():
                created_figure = ax is None
                if created_figure:
                    fig, ax = plt.subplots()
                else:
                    fig = ax.get_figure()

                reference = wrapped(*args, ax=ax, **kwargs)

                if title is not None:
                    ax.set_title(title)
                if filename:
                    fig.savefig(filename)

            if action == "auto":
                if is_outermost_plot_call and created_figure:
                    action = "show"
                else:
                    action = "create"

            if action == "show":
                with warnings.catch_warnings():
                    # non-interactive backends warn that they cannot show figures
                    warnings.simplefilter("ignore")
                    plt.show()
            elif action == "close":
                plt.close(fig)
            elif action != "create":
                raise ValueError(f"Unknown action `{action}`")

        return reference

    # adjusting the signature of the wrapped function to include wrapper args
    sig_wrapped = inspect.signature(wrapped)
    parameters = tuple(
        arg
        for name, arg in sig_wrapped.parameters.items()
        if name not in {"ax", "kwargs"}
    )
    sig_wrapper = inspect.signature(wrapper)
    parameters += tuple(
        arg for name, arg in sig_wrapper.parameters.items() if name != "args"
    )
    wrapper.__signature__ = sig_wrapped.replace(  # type: ignore
        parameters=sorted(parameters, key=lambda p: p.kind)
    )

    functools.update_wrapper(wrapper, wrapped)
    replace_in_docstring(wrapper, "{PLOT_ARGS}", _PLOT_ARGS_DOC)

    return wrapper
