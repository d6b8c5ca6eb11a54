import numba
import numpy as np

from heatdiff import config
from heatdiff.tools.numba import JIT_COUNT, Counter, jit, numba_environment


def test_environment():
    """Test the numba environment."""
    env = numba_environment()
    assert isinstance(env, dict)
    assert env["version"] == numba.__version__


def test_counter():
    """Test Counter implementation."""
    c1 = Counter()
    assert int(c1) == 0
    assert c1 == 0
    assert str(c1) == "0"

    c1.increment()
    assert int(c1) == 1

    c1 += 2
    assert int(c1) == 3

    c2 = Counter(3)
    assert c1 is not c2
    assert c1 == c2


def test_jit():
    """Test compiling functions with the jit decorator."""
    count = int(JIT_COUNT)

    @jit
    def add(a, b):
        return a + b

    assert int(JIT_COUNT) == count + 1
    assert add(1, 2) == 3
    assert jit(add) is add
    assert int(JIT_COUNT) == count + 1

    with config({"numba.fastmath": True}):

        @jit(signature="f8(f8[:])")
        def total(arr):
            result = 0.0
            for value in arr:
                result += value
            return result

    assert total(np.arange(4.0)) == 6
    assert int(JIT_COUNT) == count + 2
