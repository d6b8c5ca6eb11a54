import pytest

from heatdiff.tools import misc
from heatdiff.tools.docstrings import fill_in_docstring, get_text_block
from heatdiff.tools.output import display_progress, get_progress_bar_class


def test_ensure_directory_exists(tmp_path):
    """Tests the ensure_directory_exists function."""
    # create temporary name
    path = tmp_path / "test_ensure_directory_exists"
    assert not path.exists()
    # create the folder
    misc.ensure_directory_exists(path)
    assert path.is_dir()
    # check that a second call has the same result
    misc.ensure_directory_exists(path)
    assert path.is_dir()
    # remove the folder again
    path.rmdir()
    assert not path.exists()


def test_module_available():
    """Test module_available function."""
    assert misc.module_available("numpy")
    assert not misc.module_available("nonexistent_module")


def test_decorator_arguments():
    """Test decorator_arguments function."""

    @misc.decorator_arguments
    def add_attribute(func, value=1):
        func.value = value
        return func

    @add_attribute
    def f1():
        pass

    @add_attribute(value=2)
    def f2():
        pass

    assert f1.value == 1
    assert f2.value == 2


def test_fill_in_docstring():
    """Test replacing tokens in docstrings."""

    @fill_in_docstring
    def func():
        """
        Args:
            alpha:
                {ARG_ALPHA}
        """

    assert "{ARG_ALPHA}" not in func.__doc__
    assert "stable" in func.__doc__
    assert "stable" in get_text_block("ARG_ALPHA")
    with pytest.raises(KeyError):
        get_text_block("UNDEFINED")


def test_progress_bar():
    """Test displaying progress bars."""
    assert get_progress_bar_class(fancy=False) is not None
    it = range(3)
    assert display_progress(it, enabled=False) is it
    assert list(display_progress(it, total=3, disable=True)) == [0, 1, 2]
