import matplotlib.pyplot as plt
import numpy as np
import pytest

from heatdiff import DiffusionGrid, Field, SourceMap
from heatdiff.visualization import (
    Colorizer,
    HeatViewer,
    plot_temperature,
    render_rgb,
    save_image,
)


def _make_grid() -> DiffusionGrid:
    """Helper function creating a grid with a source in the lower left corner."""
    data = np.zeros((6, 4))
    data[1, 1] = 1
    return DiffusionGrid(SourceMap((6, 4), data), alpha=0.25, backend="numpy")


def test_render_rgb():
    """Test rendering fields in display orientation."""
    field = Field((3, 2), [[0, 1], [0, 0], [0, 0]])
    image = render_rgb(field, Colorizer([(0, 0, 0), (1, 1, 1)]))
    assert image.shape == (2, 3, 3)
    # the cell (0, 1) is in the top left corner of the image
    np.testing.assert_array_equal(image[0, 0], 1)
    assert image.sum() == 3

    grid = _make_grid()
    grid.step()
    image = render_rgb(grid)
    assert image.shape == (4, 6, 3)
    np.testing.assert_allclose(image[2, 1], Colorizer()(1))

    with pytest.raises(TypeError):
        render_rgb(np.zeros((3, 3)))


def test_save_image(tmp_path):
    """Test writing fields to image files."""
    grid = _make_grid()
    grid.advance(3)
    path = tmp_path / "folder" / "image.png"
    save_image(grid, path)
    assert path.stat().st_size > 0

    image = plt.imread(path)
    assert image.shape[:2] == (4, 6)
    np.testing.assert_allclose(image[..., :3], render_rgb(grid), atol=2 / 255)


def test_plot_temperature(tmp_path):
    """Test plotting fields using matplotlib."""
    grid = _make_grid()
    grid.advance(2)
    path = tmp_path / "plot.png"
    image = plot_temperature(grid, title="Test", filename=path, action="close")
    assert path.stat().st_size > 0
    assert image.get_array().shape == (4, 6)
    assert image.axes.get_title() == "Test"

    fig, ax = plt.subplots()
    image = plot_temperature(grid.temperature, ax=ax, colorbar=False)
    assert image.axes is ax
    assert ax.get_title() == "temperature"

    with pytest.raises(ValueError):
        plot_temperature(grid, action="undefined")


def test_heat_viewer_update():
    """Test that the viewer advances the simulation."""
    grid = _make_grid()
    viewer = HeatViewer(grid, steps_per_frame=3)
    viewer._create_figure()
    (image,) = viewer.update(0)
    assert grid.steps == 3
    np.testing.assert_allclose(image.get_array(), render_rgb(grid))

    with pytest.raises(ValueError):
        HeatViewer(grid, steps_per_frame=0)


def test_heat_viewer_save(tmp_path):
    """Test storing an animation of the simulation."""
    pytest.importorskip("PIL")
    grid = _make_grid()
    path = tmp_path / "movie.gif"
    HeatViewer(grid, steps_per_frame=2).save(path, frames=4, fps=10)
    assert path.stat().st_size > 0
    assert grid.steps >= 8
