import numpy as np
import pytest

from ghm_landscape.reclassify import (GHM_CLASS_NAMES, reclassify_array,
                                      reclassify_value)


@pytest.mark.parametrize("value, expected", [
    (0.0, 1), (0.005, 1), (0.0099, 1),
    (0.01, 2), (0.05, 2), (0.0999, 2),
    (0.1, 3), (0.25, 3), (0.3999, 3),
    (0.4, 4), (0.55, 4), (0.6999, 4),
    (0.7, 5), (0.95, 5), (1.0, 5),
])
def test_reclassify_value_bins(value, expected):
    assert reclassify_value(value) == expected


@pytest.mark.parametrize("value", [-0.01, 1.01, float('nan')])
def test_reclassify_value_rejects_values_outside_unit_interval(value):
    with pytest.raises(ValueError):
        reclassify_value(value)


def test_reclassify_array_agrees_with_scalar_lookup():
    values = np.linspace(0, 1, 201)
    expected = [reclassify_value(v) for v in values]
    assert reclassify_array(values).tolist() == expected


def test_reclassify_array_keeps_shape_and_marks_nan_as_nodata():
    values = np.array([[0.0, np.nan], [0.45, 1.0]])
    classes = reclassify_array(values, nodata=0)

    assert classes.shape == (2, 2)
    assert classes.dtype == np.uint8
    assert classes.tolist() == [[1, 0], [4, 5]]


def test_reclassify_array_custom_nodata():
    classes = reclassify_array(np.array([np.nan, 0.2]), nodata=255)
    assert classes.tolist() == [255, 3]


def test_reclassify_array_rejects_out_of_range_values():
    with pytest.raises(ValueError, match="outside"):
        reclassify_array(np.array([0.2, 1.5, np.nan]))


@pytest.mark.parametrize("nodata", [-1, 256, 0.5])
def test_reclassify_array_rejects_nodata_outside_uint8(nodata):
    with pytest.raises(ValueError, match="0 - 255"):
        reclassify_array(np.array([[0.2, np.nan]]), nodata=nodata)


def test_reclassify_array_rejects_nodata_clashing_with_a_class():
    with pytest.raises(ValueError, match="clashes"):
        reclassify_array(np.array([0.2]), nodata=3)


def test_class_names_cover_every_class():
    assert sorted(GHM_CLASS_NAMES) == [1, 2, 3, 4, 5]
