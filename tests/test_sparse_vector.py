import math

import pytest

from features.sparse_vector import MutableSparseVector, SparseVector, cosine


def test_freeze_compacts_and_sorts_keys():
    work = MutableSparseVector()
    work.add(7, 2.0)
    work.add(3)
    work.add(7)
    frozen = work.freeze()

    assert list(frozen.keys) == [3, 7]
    assert frozen.to_dict() == {3: 1.0, 7: 3.0}
    assert len(frozen) == 2


def test_frozen_arrays_are_read_only():
    frozen = SparseVector([1, 2], [0.5, 0.5])
    with pytest.raises(ValueError):
        frozen.values[0] = 9.0
    with pytest.raises(ValueError):
        frozen.keys[0] = 9


def test_freeze_is_a_snapshot():
    work = MutableSparseVector({1: 1.0})
    frozen = work.freeze()
    work.add(2, 5.0)
    work.set(1, 4.0)
    assert frozen.to_dict() == {1: 1.0}


def test_absent_keys_are_zero():
    v = SparseVector([1, 4], [2.0, 3.0])
    assert 4 in v
    assert 2 not in v
    assert v.get(2) == 0.0
    assert v.get(4) == 3.0


def test_duplicate_keys_rejected():
    with pytest.raises(ValueError):
        SparseVector([1, 1], [1.0, 2.0])


def test_norm_and_sum():
    v = SparseVector([1, 2], [3.0, 4.0])
    assert v.norm() == pytest.approx(5.0)
    assert v.sum() == pytest.approx(7.0)
    assert SparseVector.empty().norm() == 0.0


def test_dot_uses_common_keys_only():
    u = SparseVector([1, 2, 3], [1.0, 2.0, 3.0])
    v = SparseVector([2, 3, 9], [10.0, 100.0, 1000.0])
    assert u.dot(v) == pytest.approx(320.0)
    assert u.dot(SparseVector([5], [1.0])) == 0.0


def test_multiply_treats_missing_keys_as_zero():
    work = MutableSparseVector({1: 2.0, 2: 3.0})
    work.multiply(SparseVector([1], [0.5]))
    assert work.get(1) == pytest.approx(1.0)
    assert work.get(2) == 0.0


def test_add_vector_scales():
    work = MutableSparseVector({1: 1.0})
    work.add_vector(SparseVector([1, 2], [1.0, 2.0]), -2.0)
    assert dict(work.items()) == {1: -1.0, 2: -4.0}


def test_normalize_unit_length():
    work = MutableSparseVector({1: 3.0, 2: 4.0})
    work.normalize()
    assert work.norm() == pytest.approx(1.0)
    assert work.get(1) == pytest.approx(0.6)


def test_normalize_zero_vector_becomes_empty():
    work = MutableSparseVector({1: 0.0, 2: 0.0})
    work.normalize()
    assert len(work) == 0
    assert work.freeze().norm() == 0.0


def test_discard_zeros():
    work = MutableSparseVector({1: 0.0, 2: 1.5})
    work.discard_zeros()
    assert list(work.keys()) == [2]


def test_cosine_self_is_one():
    v = SparseVector([1, 5, 9], [0.3, -2.0, 7.0])
    assert cosine(v, v) == pytest.approx(1.0)


def test_cosine_with_zero_vector_is_zero():
    v = SparseVector([1], [1.0])
    assert cosine(v, SparseVector.empty()) == 0.0
    assert cosine(SparseVector.empty(), SparseVector.empty()) == 0.0


def test_cosine_orthogonal_and_opposite():
    u = SparseVector([1], [2.0])
    assert cosine(u, SparseVector([2], [1.0])) == 0.0
    assert cosine(u, SparseVector([1], [-0.5])) == pytest.approx(-1.0)


def test_cosine_is_scale_invariant():
    u = SparseVector([1, 2], [1.0, 1.0])
    v = SparseVector([1], [10.0])
    assert cosine(u, v) == pytest.approx(1 / math.sqrt(2))


def test_cosine_with_undefined_norm_is_zero():
    undefined = SparseVector([1], [float("nan")])
    assert cosine(undefined, SparseVector([2], [1.0])) == 0.0
    assert cosine(SparseVector([1], [1.0]), undefined) == 0.0
