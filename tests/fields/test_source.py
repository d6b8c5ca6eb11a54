import numpy as np
import pytest

from heatdiff import config
from heatdiff.fields import (
    DimensionError,
    ImageLoadError,
    ImageTooLargeError,
    ReadOnlyFieldError,
    SourceMap,
    load_luminance,
)


def test_source_centering(write_image):
    """Test that a white image is placed in the center of the grid."""
    path = write_image(np.full((4, 4), 255, dtype=np.uint8))
    source = SourceMap.from_image(path, shape=(10, 10), intensity=1)

    expected = np.zeros((10, 10))
    expected[3:7, 3:7] = 1
    np.testing.assert_array_equal(source.data, expected)
    assert source.num_cells == 16
    np.testing.assert_array_equal(source.mask, expected > 0)
    assert source.intensity == 1


def test_source_orientation():
    """Test that the image is flipped vertically and placed with floor offsets."""
    luminance = np.array([[1.0, 0.0, 0.0], [0.0, 0.0, 0.5]])  # two rows, three columns
    source = SourceMap.from_luminance(luminance, shape=(6, 5), intensity=2)

    # offsets are (6 - 3) // 2 = 1 and (5 - 2) // 2 = 1
    assert source[1, 2] == 2  # top left pixel ends up at the larger y value
    assert source[3, 1] == 1  # bottom right pixel
    assert source.num_cells == 2
    assert source.data.sum() == 3


def test_source_exact_fit():
    """Test images that exactly cover the grid."""
    luminance = np.linspace(0, 1, 12).reshape(3, 4)
    source = SourceMap.from_luminance(luminance, shape=(4, 3), intensity=1)
    np.testing.assert_allclose(source.data, luminance.T[:, ::-1])


@pytest.mark.parametrize("shape", [(3, 10), (10, 3), (3, 3)])
def test_source_too_large(shape):
    """Test that images larger than the grid are rejected."""
    with pytest.raises(ImageTooLargeError):
        SourceMap.from_luminance(np.ones((4, 4)), shape=shape)
    assert issubclass(ImageTooLargeError, ValueError)


def test_source_invalid_data():
    """Test that invalid data is rejected."""
    with pytest.raises(ValueError):
        SourceMap.from_luminance(np.ones((2, 2)), shape=(4, 4), intensity=-1)
    with pytest.raises(ValueError):
        SourceMap.from_luminance(np.full((2, 2), 1.5), shape=(4, 4))
    with pytest.raises(DimensionError):
        SourceMap.from_luminance(np.ones(4), shape=(4, 4))
    with pytest.raises(ValueError):
        SourceMap((3, 3), -np.ones((3, 3)))

    data = np.zeros((5, 5))
    for value in [np.inf, np.nan]:
        data[2, 2] = value
        with pytest.raises(ValueError):
            SourceMap((5, 5), data)

    data[2, 2] = 0.8
    with pytest.raises(ValueError):
        SourceMap((5, 5), data, intensity=-1)
    with pytest.raises(ValueError):
        SourceMap((5, 5), data, intensity=0.5)
    assert SourceMap((5, 5), data, intensity=0.8).intensity == 0.8
    assert SourceMap((5, 5), data).intensity == 0.8


def test_source_immutable():
    """Test that source maps cannot be modified."""
    source = SourceMap((4, 4), np.ones((4, 4)))
    assert not source.writeable
    with pytest.raises(ReadOnlyFieldError):
        source[1, 1] = 0
    with pytest.raises(ValueError):
        source.data[1, 1] = 0
    assert source.intensity == 1

    empty = SourceMap.empty((5, 4))
    assert empty.num_cells == 0
    assert empty.intensity == 0
    assert empty.label == "source"


def test_source_defaults():
    """Test that default values are taken from the configuration."""
    with config({"simulation.grid_shape": (7, 5), "source.intensity": 0.5}):
        source = SourceMap.from_luminance(np.ones((1, 1)))
    assert source.shape == (7, 5)
    assert source[3, 2] == 0.5
    assert source.num_cells == 1


def test_load_luminance_formats(write_image):
    """Test reading images with different pixel formats."""
    gray = np.array([[0, 255], [51, 102]], dtype=np.uint8)
    np.testing.assert_allclose(
        load_luminance(write_image(gray, "gray.png")), gray / 255, rtol=1e-6
    )

    gray16 = np.array([[0, 65535], [13107, 32768]], dtype=np.uint16)
    np.testing.assert_allclose(
        load_luminance(write_image(gray16, "gray16.png")), gray16 / 65535, rtol=1e-6
    )

    # color images showing gray values are not converted
    rgb = np.repeat(gray[..., np.newaxis], 3, axis=2)
    np.testing.assert_allclose(
        load_luminance(write_image(rgb, "rgb.png")), gray / 255, rtol=1e-6
    )

    # colored pixels are converted to luminance
    red = np.zeros((1, 1, 3), dtype=np.uint8)
    red[..., 0] = 255
    np.testing.assert_allclose(
        load_luminance(write_image(red, "red.png")), [[0.2126]], rtol=1e-6
    )


def test_load_luminance_errors(tmp_path):
    """Test that unreadable images raise errors."""
    with pytest.raises(ImageLoadError):
        load_luminance(tmp_path / "missing.png")

    path = tmp_path / "broken.png"
    path.write_bytes(b"this is not an image")
    with pytest.raises(ImageLoadError):
        SourceMap.from_image(path, shape=(10, 10))

    for name, content in [("empty.png", b""), ("broken.jpg", b"\xff\xd8 no data")]:
        path = tmp_path / name
        path.write_bytes(content)
        with pytest.raises(ImageLoadError):
            load_luminance(path)
