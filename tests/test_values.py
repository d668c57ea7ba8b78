import numpy as np

from grib_inspector.models.values import Array, Scalar, record_to_python


def masked_grid():
    return np.ma.array([[1.0, 9.999e20], [3.0, 4.0]], mask=[[False, True], [False, False]])


def test_masked_points_serialise_as_none():
    value = Array(masked_grid())
    assert value.masked
    assert value.shape == (2, 2)
    assert value.to_python() == [[1.0, None], [3.0, 4.0]]
    assert record_to_python({"values": value, "level": Scalar(500)}) == {
        "values": [[1.0, None], [3.0, 4.0]],
        "level": 500,
    }


def test_masked_array_is_copied():
    grid = masked_grid()
    value = Array(grid)
    grid[0, 0] = 99.0
    assert value.to_python()[0][0] == 1.0


def test_mask_takes_part_in_equality():
    assert Array(masked_grid()) == Array(masked_grid())
    assert Array(masked_grid()) != Array(np.ma.getdata(masked_grid()))
    # only unmasked points are compared
    other = masked_grid()
    other.data[0, 1] = -1.0
    assert Array(masked_grid()) == Array(other)


def test_plain_arrays_are_not_masked():
    value = Array([[1.0, 2.0]])
    assert not value.masked
    assert value.to_python() == [[1.0, 2.0]]
