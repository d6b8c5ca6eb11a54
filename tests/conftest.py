"""This file is used to configure the test environment when running py.test."""

import matplotlib.pyplot as plt
import numpy as np
import pytest
from PIL import Image

from heatdiff import config

# ensure we use the Agg backend, so figures are not displayed
plt.switch_backend("agg")


@pytest.fixture(autouse=True)
def _setup_and_teardown():
    """Helper function adjusting environment before and after tests."""
    # raise all underflow errors
    np.seterr(all="raise", under="ignore")

    # run the actual test
    with config({"simulation.grid_shape": (32, 24)}):
        yield

    # clean up open matplotlib figures after the test
    plt.close("all")


@pytest.fixture(autouse=False, name="rng")
def init_random_number_generator():
    """Get a random number generator with a fixed seed."""
    return np.random.default_rng(0)


@pytest.fixture
def write_image(tmp_path):
    """Return a function that writes pixel data to an image file."""

    def _write_image(pixels, name="image.png"):
        path = tmp_path / name
        Image.fromarray(np.asarray(pixels)).save(path)
        return path

    return _write_image


def pytest_configure(config):
    """Add markers to the configuration."""
    config.addinivalue_line("markers", "slow: test runs slowly")


def pytest_addoption(parser):
    """Pytest hook to add command line options parsed by pytest."""
    parser.addoption(
        "--runslow",
        action="store_true",
        default=False,
        help="also run tests marked by `slow`",
    )


def pytest_collection_modifyitems(config, items):
    """Pytest hook to filter a collection of tests."""
    runslow = config.getoption("--runslow", default=False)
    skip_slow = pytest.mark.skip(reason="need --runslow option to run")
    for item in items:
        if "slow" in item.keywords and not runslow:
            item.add_marker(skip_slow)
