import os
import sys

import numpy as np
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from skyflora.cellnoise import (
    CellularFeatureField,
    RarityCurve,
    Voronoi,
    int_value_noise_3d,
    value_noise_3d,
)


def test_int_value_noise_pinned():
    assert int(int_value_noise_3d(0, 0, 0, 0)) == 1376312589
    assert int(int_value_noise_3d(1, 2, 3, 4)) == 1991767149
    assert int(int_value_noise_3d(-5, -1, 7, -2004318072)) == 1359861063
    assert int(int_value_noise_3d(3, 0, -9, 424242)) == 657943553


def test_int_value_noise_array_matches_scalar():
    xs = np.array([0, 1, -5, 3])
    ys = np.array([0, 2, -1, 0])
    zs = np.array([0, 3, 7, -9])
    values = int_value_noise_3d(xs, ys, zs, 4)
    for i in range(len(xs)):
        assert values[i] == int_value_noise_3d(int(xs[i]), int(ys[i]), int(zs[i]), 4)


def test_value_noise_range():
    zz, yy, xx = np.mgrid[-10:10, -3:3, -10:10]
    values = value_noise_3d(xx, yy, zz, 99)
    assert values.min() >= 0.0
    assert values.max() <= 1.0


def test_voronoi_cells_stay_in_table():
    field = CellularFeatureField(8)
    zz, xx = np.mgrid[-200:200:3, -200:200:3]
    for seed in (0, 424242, -707883762):
        index = field.cell_index(xx, zz, seed)
        assert index.dtype == np.int64
        assert index.min() >= 0
        assert index.max() <= 7


def test_voronoi_cells_form_regions():
    # neighbouring columns mostly share a cell at frequency 0.1
    field = CellularFeatureField(8)
    zz, xx = np.mgrid[0:64, 0:64]
    index = field.cell_index(xx, zz, 12345)
    same = np.count_nonzero(index[:, 1:] == index[:, :-1])
    assert same > 0.7 * index[:, 1:].size
    assert len(np.unique(index)) > 1


def test_voronoi_scalar_matches_array():
    cells = Voronoi(frequency=0.1, displacement=7, enable_distance=False)
    zz, xx = np.mgrid[-8:8, -8:8]
    values = cells.get_value(xx, 0, zz, 31337)
    for x, z in [(-8, -8), (0, 0), (5, -2), (7, 7)]:
        value = cells(x, 0, z, 31337)
        assert isinstance(value, float)
        assert value == values[z + 8, x + 8]


def test_voronoi_deterministic_and_seeded():
    densities = Voronoi(frequency=0.1, displacement=0, enable_distance=True)
    zz, xx = np.mgrid[0:32, 0:32]
    a = densities(xx, 0, zz, 1)
    assert np.array_equal(a, densities(xx, 0, zz, 1))
    assert not np.array_equal(a, densities(xx, 0, zz, 2))


def test_distance_field_without_displacement():
    densities = Voronoi(frequency=0.1, displacement=0, enable_distance=True)
    zz, xx = np.mgrid[0:48, 0:48]
    values = densities(xx, 0, zz, 7)
    # sqrt(d)*sqrt(3) - 1, d the distance to the closest seed point
    assert values.min() >= -1.0
    assert np.isfinite(values).all()


def test_rarity_curve_range_and_monotonic():
    curve = RarityCurve(None, degree=4)
    density = np.linspace(0.0, 1.0, 1001)
    odds = curve.apply(density)
    assert odds.min() >= 0.0
    assert odds.max() <= 1.0
    assert (np.diff(odds) >= 0.0).all()
    assert curve.apply(0.0) == 0.0
    assert curve.apply(1.0) == 1.0
    assert curve.apply(0.5) == pytest.approx(1 - 0.5 ** 4)


def test_rarity_curve_degree_pushes_towards_one():
    density = np.linspace(0.05, 0.95, 19)
    low = RarityCurve(None, degree=2).apply(density)
    high = RarityCurve(None, degree=4).apply(density)
    assert (high >= low).all()


def test_rarity_curve_reads_source_each_call():
    densities = Voronoi(frequency=0.1, displacement=0, enable_distance=True)
    curve = RarityCurve(densities, degree=4)
    zz, xx = np.mgrid[0:16, 0:16]
    for seed in (3, 4):
        expected = 1 - (1 - densities(xx, 0, zz, seed)) ** 4
        assert np.allclose(curve(xx, 0, zz, seed), expected)


def test_feature_field_ties_displacement_to_table():
    field = CellularFeatureField(5)
    assert field.cells.displacement == 4
    assert field.densities.displacement == 0
    assert not field.cells.enable_distance
    assert field.densities.enable_distance
    with pytest.raises(ValueError):
        CellularFeatureField(0)


def test_cell_index_truncates():
    field = CellularFeatureField(8)
    zz, xx = np.mgrid[0:32, 0:32]
    raw = field.cells(xx, 0, zz, 5)
    assert np.array_equal(field.cell_index(xx, zz, 5), np.trunc(raw).astype(np.int64))
    assert field.cell_index(3, 4, 5) == int(raw[4, 3])
