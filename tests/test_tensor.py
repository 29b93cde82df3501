import pytest

from mmlinfer.tensor import Tensor, create_tensor


def test_create_with_values_keeps_shape_and_data():
    t = create_tensor([2, 3], [1, 2, 3, 4, 5, 6], dtype="float32")
    assert t.shape == (2, 3)
    assert t.size == 6
    assert t.tolist() == [1, 2, 3, 4, 5, 6]


def test_create_without_values_is_zero():
    t = create_tensor([2, 2])
    assert t.tolist() == [0, 0, 0, 0]


def test_empty_tensor_has_zero_size():
    t = create_tensor([0])
    assert t.size == 0
    assert t.tolist() == []


def test_wrong_number_of_values_raises():
    with pytest.raises(ValueError):
        create_tensor([2, 2], [1, 2, 3])


def test_negative_dimension_raises():
    with pytest.raises(ValueError):
        Tensor([-1, 2])


def test_flat_and_multi_index_agree():
    t = create_tensor([2, 3], [1, 2, 3, 4, 5, 6], dtype=int)
    assert t[5] == 6
    assert t[(1, 2)] == 6
    assert t[[0, 1]] == t[1]


def test_setitem_multi_index():
    t = create_tensor([2, 3], dtype=int)
    t[(1, 0)] = 9
    assert t[3] == 9


@pytest.mark.parametrize("index", [(2, 0), (0,)])
def test_multi_index_out_of_range_raises(index):
    t = create_tensor([2, 3], [1, 2, 3, 4, 5, 6], dtype=int)
    with pytest.raises(IndexError):
        _ = t[index]
    assert t.tolist() == [1, 2, 3, 4, 5, 6]
    assert t[(1, 2)] == 6


def test_equality_requires_shape_and_values():
    a = create_tensor([2, 2], [1, 2, 3, 4])
    b = create_tensor([2, 2], [1, 2, 3, 4])
    c = create_tensor([4], [1, 2, 3, 4])
    d = create_tensor([2, 2], [1, 2, 3, 5])
    assert a == b
    assert not (a == c)
    assert not (a == d)


def test_reshape_same_size_keeps_data():
    t = create_tensor([2, 3], [1, 2, 3, 4, 5, 6])
    t.reshape([3, 2])
    assert t.shape == (3, 2)
    assert t.tolist() == [1, 2, 3, 4, 5, 6]


def test_reshape_new_size_resizes():
    t = create_tensor([2], [1, 2])
    t.reshape([2, 2])
    assert t.size == 4
    assert t.shape == (2, 2)


def test_transpose_2d():
    t = create_tensor([2, 3], [1, 2, 3, 4, 5, 6])
    t.transpose()
    assert t.shape == (3, 2)
    assert t.tolist() == [1, 4, 2, 5, 3, 6]


def test_double_transpose_round_trip():
    original = create_tensor([2, 3, 4], range(24))
    t = original.copy()
    t.transpose()
    t.transpose()
    assert t == original


def test_copy_is_independent():
    a = create_tensor([2], [1, 2])
    b = a.copy()
    b[0] = 7
    assert a[0] == 1
    assert b[0] == 7


def test_fill_sets_every_element():
    t = create_tensor([3])
    t.fill(2.5)
    assert t.tolist() == [2.5, 2.5, 2.5]


def test_assign_takes_shape_and_values():
    a = create_tensor([2], [1, 2])
    b = create_tensor([2, 2], [5, 6, 7, 8])
    a.assign(b)
    assert a == b
    b[0] = 0
    assert a[0] == 5


def test_slice_access_round_trip():
    t = create_tensor([4], [1, 2, 3, 4])
    values = t[:]
    t[:] = values * 2
    assert t.tolist() == [2, 4, 6, 8]