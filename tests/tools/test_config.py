import pytest

from heatdiff.tools.config import Config, Parameter, environment, get_package_versions


def test_environment():
    """Test the environment function."""
    env = environment()
    assert isinstance(env, dict)
    assert "numba environment" in env
    assert env["config"]["simulation.alpha"] == 0.25


def test_config_defaults():
    """Test the default values of the configuration."""
    c = Config()
    assert c["simulation.grid_shape"] == (320, 240)
    assert c["simulation.alpha"] == 0.25
    assert c["simulation.default_backend"] == "auto"
    assert c["source.intensity"] == 1
    assert not c["numba.fastmath"]

    assert "simulation.alpha" in c
    assert any(k == "simulation.alpha" and v > 0 for k, v in c.items())
    assert "simulation.alpha" in c.to_dict()
    assert isinstance(repr(c), str)


def test_config_modes():
    """Test configuration system running in different modes."""
    c = Config({"key": 3}, mode="insert")
    assert c["key"] > 0
    c["key"] = 0
    assert c["key"] == 0
    c["new_value"] = "value"
    assert c["new_value"] == "value"
    c.update({"new_value2": "value2"})
    assert c["new_value2"] == "value2"
    del c["new_value"]
    with pytest.raises(KeyError):
        c["new_value"]
    with pytest.raises(KeyError):
        c["undefined"]

    c = Config({"key": 3}, mode="update")
    assert c["key"] > 0
    c["key"] = 0
    c["simulation.alpha"] = "0.1"
    assert c["simulation.alpha"] == 0.1
    with pytest.raises(KeyError):
        c["new_value"] = "value"
    with pytest.raises(KeyError):
        c.update({"new_value": "value"})
    with pytest.raises(RuntimeError):
        del c["simulation.alpha"]
    with pytest.raises(ValueError):
        c["simulation.alpha"] = "fast"

    c = Config({"key": 3}, mode="locked")
    assert c["key"] > 0
    with pytest.raises(RuntimeError):
        c["key"] = 0
    with pytest.raises(RuntimeError):
        c.update({"key": 0})
    with pytest.raises(RuntimeError):
        del c["key"]

    c = Config({"key": 3}, mode="undefined")
    assert c["key"] > 0
    with pytest.raises(ValueError):
        c["key"] = 0


def test_config_contexts():
    """Test context manager temporarily changing configuration."""
    c = Config()

    assert c["simulation.alpha"] == 0.25
    with c({"simulation.alpha": 0.1}):
        assert c["simulation.alpha"] == 0.1
        with c({"simulation.alpha": 0.2}):
            assert c["simulation.alpha"] == 0.2
        assert c["simulation.alpha"] == 0.1
    assert c["simulation.alpha"] == 0.25

    with c(**{"source.intensity": 2}):
        assert c["source.intensity"] == 2
    assert c["source.intensity"] == 1

    with pytest.raises(RuntimeError):
        with c({"simulation.alpha": 0}):
            raise RuntimeError
    assert c["simulation.alpha"] == 0.25


def test_config_repeated_updates():
    """Test that values are converted after the first assignment."""
    c = Config()
    c["simulation.alpha"] = 0.2
    c["simulation.alpha"] = "0.15"
    assert c["simulation.alpha"] == 0.15
    with pytest.raises(ValueError):
        c["simulation.alpha"] = "fast"
    assert c["simulation.alpha"] == 0.15

    with c({"simulation.grid_shape": [8, 6]}):
        assert c["simulation.grid_shape"] == (8, 6)
        with pytest.raises(ValueError):
            c["simulation.alpha"] = "fast"
    with pytest.raises(ValueError):
        with c({"simulation.alpha": "fast"}):
            pass
    assert c["simulation.alpha"] == 0.15


def test_parameter():
    """Test the parameter class."""
    p = Parameter("a", 1, int, "description")
    assert p.convert() == 1
    assert p.convert("2") == 2
    assert isinstance(repr(p), str)
    with pytest.raises(ValueError):
        p.convert("a")

    assert Parameter("b", "text").convert(None) == "text"


def test_package_versions():
    """Test determining the versions of packages."""
    versions = get_package_versions(["numpy", "a-package-that-does-not-exist"])
    assert versions["numpy"] != "not available"
    assert versions["a-package-that-does-not-exist"] == "not available"
