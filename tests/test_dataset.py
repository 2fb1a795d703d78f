import numpy as np
import pytest

from conftest import DEVICE_INI, build_dataset_dir
from transientview.model.dataset import (
    BANDSTRUCTURE,
    CHARGE_DENSITY,
    CURRENT,
    DRAIN_CURRENT,
    POTENTIAL,
    SOURCE_CURRENT,
    VOLTAGE,
    load_dataset,
)
from transientview.model.errors import DatasetError
from transientview.model.observable import SpatialObservable, TemporalObservable

ALL_TITLES = [POTENTIAL, BANDSTRUCTURE, CHARGE_DENSITY, CURRENT, SOURCE_CURRENT, DRAIN_CURRENT, VOLTAGE]


def test_complete_directory(dataset_dir):
    dataset = load_dataset(dataset_dir)

    assert dataset.titles == ALL_TITLES
    assert dataset.skipped == {}
    assert dataset.n_times == 4
    np.testing.assert_array_equal(dataset.x, [0.0, 1.0, 2.0])
    assert dataset.device.N_x == 3


def test_observable_variants(dataset_dir):
    by_title = {o.title: o for o in load_dataset(dataset_dir).observables}
    assert isinstance(by_title[POTENTIAL], SpatialObservable)
    assert isinstance(by_title[BANDSTRUCTURE], SpatialObservable)
    assert isinstance(by_title[SOURCE_CURRENT], TemporalObservable)
    assert isinstance(by_title[VOLTAGE], TemporalObservable)


def test_columns_are_time_steps(dataset_dir):
    potential = load_dataset(dataset_dir).observables[0]
    np.testing.assert_allclose(potential.series[0].frame(2), [0.2, 1.2, 2.2])


def test_terminal_currents_from_boundary_points(dataset_dir):
    by_title = {o.title: o for o in load_dataset(dataset_dir).observables}
    np.testing.assert_array_equal(by_title[SOURCE_CURRENT].series[0].samples, [5.0, 6.0, 7.0, 8.0])
    np.testing.assert_array_equal(by_title[DRAIN_CURRENT].series[0].samples, [9.0, 10.0, 11.0, 12.0])


def test_voltage_traces(dataset_dir):
    voltage = load_dataset(dataset_dir).observables[-1]
    assert [s.title for s in voltage.series] == ["V_s", "V_g", "V_d"]
    np.testing.assert_array_equal(voltage.series[1].samples, [0.0, 2.0, 4.0, 6.0])


def test_two_voltage_traces_drop_voltage_only(tmp_path):
    dataset = load_dataset(build_dataset_dir(tmp_path, v_traces=2))
    assert dataset.titles == ALL_TITLES[:-1]
    assert dataset.skipped[VOLTAGE].startswith("ShapeMismatchError")


def test_missing_charge_density(tmp_path):
    dataset = load_dataset(build_dataset_dir(tmp_path, skip=("n",)))
    assert CHARGE_DENSITY not in dataset.titles
    assert len(dataset) == 6
    assert dataset.skipped[CHARGE_DENSITY].startswith("MissingFileError")


def test_non_numeric_file_drops_its_observable(tmp_path):
    directory = build_dataset_dir(tmp_path, skip=("n",))
    np.save(directory / "n.npy", np.array(["a", "b"]))

    dataset = load_dataset(directory)
    assert dataset.titles == [t for t in ALL_TITLES if t != CHARGE_DENSITY]
    assert dataset.skipped[CHARGE_DENSITY].startswith("MissingFileError")


def test_missing_current_drops_all_dependents(tmp_path):
    dataset = load_dataset(build_dataset_dir(tmp_path, skip=("I",)))
    assert dataset.titles == [POTENTIAL, BANDSTRUCTURE, CHARGE_DENSITY, VOLTAGE]


@pytest.mark.parametrize("axis", ["xtics", "ttics"])
def test_missing_axis_aborts(tmp_path, axis):
    with pytest.raises(DatasetError):
        load_dataset(build_dataset_dir(tmp_path, skip=(axis,)))


def test_not_a_directory(tmp_path):
    with pytest.raises(DatasetError):
        load_dataset(tmp_path / "nowhere")


def test_missing_device_drops_bandstructure_only(tmp_path):
    dataset = load_dataset(build_dataset_dir(tmp_path, with_device=False))
    assert dataset.device is None
    assert dataset.titles == [t for t in ALL_TITLES if t != BANDSTRUCTURE]
    assert dataset.skipped[BANDSTRUCTURE].startswith("ConfigError")


def test_malformed_device_drops_bandstructure_only(tmp_path):
    dataset = load_dataset(build_dataset_dir(tmp_path, device_text="E_g = 1.0\n"))
    assert dataset.titles == [t for t in ALL_TITLES if t != BANDSTRUCTURE]


def test_device_grid_mismatch_drops_bandstructure(tmp_path):
    text = DEVICE_INI.replace("N_x = 3", "N_x = 4")
    dataset = load_dataset(build_dataset_dir(tmp_path, device_text=text))
    assert POTENTIAL in dataset.titles
    assert BANDSTRUCTURE not in dataset.titles
    assert dataset.skipped[BANDSTRUCTURE].startswith("ShapeMismatchError")


def test_potential_shape_mismatch(tmp_path):
    dataset = load_dataset(build_dataset_dir(tmp_path, phi_rows=4))
    assert POTENTIAL not in dataset.titles
    assert BANDSTRUCTURE not in dataset.titles
    assert CHARGE_DENSITY in dataset.titles
