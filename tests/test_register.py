"""Tests for scoped qubit registers and the allocator arena."""

import pytest

from qsweep.errors import ParameterError, ResourceLifecycleError
from qsweep.register import Qubit, QubitAllocator


@pytest.fixture
def alloc():
    return QubitAllocator()


def test_contiguous_indices(alloc):
    a = alloc.allocate(3, "a")
    b = alloc.allocate(2, "b")
    assert a.indices == (0, 1, 2)
    assert b.indices == (3, 4)
    assert alloc.depth == 2


def test_peak_tracks_widest_point(alloc):
    a = alloc.allocate(2)
    b = alloc.allocate(3)
    alloc.release(b)
    c = alloc.allocate(1)
    assert c.indices == (2,)
    alloc.release(c)
    alloc.release(a)
    assert alloc.peak == 5
    assert alloc.depth == 0


def test_released_indices_are_reused(alloc):
    first = alloc.allocate(2)
    alloc.release(first)
    second = alloc.allocate(2)
    assert second.indices == (0, 1)
    assert alloc.peak == 2


@pytest.mark.parametrize("n", [0, -1, 1.5, True])
def test_invalid_size(alloc, n):
    with pytest.raises(ParameterError):
        alloc.allocate(n)


def test_parameter_error_is_value_error(alloc):
    with pytest.raises(ValueError):
        alloc.allocate(0)


def test_release_out_of_order(alloc):
    outer = alloc.allocate(2)
    alloc.allocate(1)
    with pytest.raises(ResourceLifecycleError):
        alloc.release(outer)


def test_double_release(alloc):
    reg = alloc.allocate(1)
    alloc.release(reg)
    with pytest.raises(ResourceLifecycleError):
        alloc.release(reg)


def test_release_foreign_register(alloc):
    other = QubitAllocator().allocate(1)
    with pytest.raises(ResourceLifecycleError):
        alloc.release(other)


def test_handle_invalid_after_release(alloc):
    reg = alloc.allocate(2)
    q = reg[1]
    assert q.index == 1
    alloc.release(reg)
    assert not reg.is_live
    with pytest.raises(ResourceLifecycleError):
        _ = q.index


def test_check_released(alloc):
    reg = alloc.allocate(1, "leaky")
    with pytest.raises(ResourceLifecycleError, match="leaky"):
        alloc.check_released()
    alloc.release(reg)
    alloc.check_released()


class TestRegisterSequence:

    def test_len_and_iteration(self, alloc):
        reg = alloc.allocate(4)
        assert len(reg) == 4
        assert all(isinstance(q, Qubit) for q in reg)
        assert [q.index for q in reg] == [0, 1, 2, 3]

    def test_slice_returns_list(self, alloc):
        reg = alloc.allocate(5)
        evens = reg[::2]
        assert isinstance(evens, list)
        assert [q.index for q in evens] == [0, 2, 4]

    def test_negative_index(self, alloc):
        reg = alloc.allocate(3)
        assert reg[-1].index == 2

    def test_repr(self, alloc):
        reg = alloc.allocate(2, "anc")
        assert "anc" in repr(reg)
        assert "live" in repr(reg)
        assert repr(reg[1]) == "Qubit(anc[1])"
