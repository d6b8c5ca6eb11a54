import numpy as np
import pytest

from heatdiff import DiffusionGrid, Field, SourceMap
from heatdiff.trackers import (
    CallbackTracker,
    ConsistencyTracker,
    DataTracker,
    FinishedSimulation,
    ProgressTracker,
    SteadyStateTracker,
    TrackerBase,
    TrackerCollection,
    get_named_trackers,
)
from heatdiff.tools.misc import module_available


def _make_grid(shape=(8, 8)) -> DiffusionGrid:
    """Helper function creating a grid with a source in the center."""
    data = np.zeros(shape)
    data[shape[0] // 2, shape[1] // 2] = 1
    return DiffusionGrid(SourceMap(shape, data), alpha=0.25, backend="numpy")


def test_named_trackers():
    """Test the registry of named trackers."""
    trackers = get_named_trackers()
    assert trackers["progress"] is ProgressTracker
    assert trackers["consistency"] is ConsistencyTracker
    assert trackers["steady_state"] is SteadyStateTracker
    assert isinstance(TrackerBase.from_data("steady_state"), SteadyStateTracker)
    with pytest.raises(ValueError):
        TrackerBase.from_data("undefined")
    with pytest.raises(ValueError):
        TrackerBase.from_data(1)


def test_tracker_collection():
    """Test creating tracker collections."""
    assert len(TrackerCollection.from_data(None)) == 0
    assert len(TrackerCollection.from_data("consistency")) == 1
    assert len(TrackerCollection.from_data(["consistency", None])) == 1

    tracker = ConsistencyTracker()
    collection = TrackerCollection.from_data(tracker)
    assert collection.trackers == [tracker]
    assert TrackerCollection.from_data(collection).trackers == [tracker]

    auto = TrackerCollection.from_data("auto")
    classes = [t.__class__ for t in auto.trackers]
    if module_available("tqdm"):
        assert classes == [ProgressTracker, ConsistencyTracker]

    with pytest.raises(TypeError):
        TrackerCollection.from_data(1)


@pytest.mark.parametrize("interrupts", [0, -1, 1.5, "a"])
def test_tracker_interrupts(interrupts):
    """Test that invalid interrupts are rejected."""
    with pytest.raises(ValueError):
        ConsistencyTracker(interrupts=interrupts)


def test_callback_tracker():
    """Test calling functions periodically."""
    data = []

    def store(field, step):
        assert isinstance(field, Field)
        data.append((step, field.data.max()))

    grid = _make_grid()
    grid.run(6, tracker=CallbackTracker(store, interrupts=2))
    assert [d[0] for d in data] == [0, 2, 4, 6]
    assert data[0][1] == 0
    assert data[1][1] == 1

    with pytest.raises(ValueError):
        CallbackTracker(lambda: None)
    with pytest.raises(ValueError):
        CallbackTracker(lambda a, b, c: None)


def test_data_tracker():
    """Test storing data during the simulation."""
    tracker = DataTracker(lambda field: field.data.mean(), interrupts=5)
    grid = _make_grid()
    grid.run(20, tracker=tracker)
    assert tracker.times == [0, 5, 10, 15, 20]
    assert tracker.data[0] == 0
    assert np.all(np.diff(tracker.data) > 0)  # heat accumulates in the grid


def test_data_tracker_dataframe():
    """Test exporting tracked data to pandas."""
    pytest.importorskip("pandas")
    tracker = DataTracker(lambda f, s: {"max": f.data.max(), "sum": f.data.sum()})
    _make_grid().run(3, tracker=tracker)
    df = tracker.dataframe
    assert list(df.columns) == ["step", "max", "sum"]
    assert list(df["step"]) == [0, 1, 2, 3]


def test_progress_tracker(capsys):
    """Test the progress bar."""
    tracker = ProgressTracker(interrupts=2, fancy=False)
    _make_grid().run(10, tracker=tracker)
    assert tracker.progress_bar.n == 10
    captured = capsys.readouterr()
    assert "10/10" in captured.err


def test_steady_state_tracker():
    """Test stopping simulations once the temperature stops changing."""
    grid = _make_grid((6, 6))
    tracker = SteadyStateTracker(interrupts=10, atol=1e-10, rtol=0)
    grid.run(100_000, tracker=tracker)
    info = grid.diagnostics["controller"]
    assert info["successful"]
    assert info["stop_reason"] == "Reached stationary state"
    assert grid.steps < 100_000

    # check that the stationary state solves the discrete Laplace equation
    data = grid.temperature.data
    lap = data[:-2, 1:-1] + data[2:, 1:-1] + data[1:-1, :-2] + data[1:-1, 2:]
    lap -= 4 * data[1:-1, 1:-1]
    lap[grid.source.interior > 0] = 0
    np.testing.assert_allclose(lap, 0, atol=1e-7)


def test_consistency_tracker():
    """Test detecting diverging simulations."""
    tracker = ConsistencyTracker()
    tracker.handle(Field((3, 3)), 0)
    with pytest.raises(StopIteration) as excinfo:
        tracker.handle(Field((3, 3), np.full((3, 3), np.inf)), 10)
    assert not isinstance(excinfo.value, FinishedSimulation)
