from __future__ import annotations
import random
import pytest # type: ignore
import numpy as np # type: ignore
from hllcount.lib.registers import (RegisterStore, MAX_REGISTER_VALUE,
                                    REGISTERS_PER_WORD)


def scalar_merge(target: RegisterStore, source: RegisterStore) -> None:
    for i in range(source.count):
        target.write_if_greater(i, source.read(i))


@pytest.mark.quick
class TestRegisterStoreQuick:
    """Quick tests for the packed register store."""

    def test_init(self):
        """A new store is all zeros."""
        store = RegisterStore(10)
        assert store.count == 10
        assert len(store) == 10
        assert store.zeros == 10
        assert all(store.read(i) == 0 for i in range(10))

    def test_packed_sequence(self):
        """Writing 0..9 at indices 0..9 leaves one zero register."""
        store = RegisterStore(10)
        for i in range(10):
            store.write_if_greater(i, i)
        assert store.zeros == 1
        for i in range(10):
            assert store[i] == i

    def test_layout(self):
        """Six registers per 32-bit word, rounded up."""
        assert REGISTERS_PER_WORD == 6
        assert RegisterStore(10).nbytes == 8
        assert RegisterStore(12).nbytes == 8
        assert RegisterStore(13).nbytes == 12
        assert RegisterStore(1 << 16).nbytes == 10923 * 4

    def test_write_only_if_greater(self):
        """Lower or equal values never overwrite a register."""
        store = RegisterStore(8)
        assert store.write_if_greater(3, 7)
        assert not store.write_if_greater(3, 7)
        assert not store.write_if_greater(3, 2)
        assert store[3] == 7
        assert store.write_if_greater(3, 9)
        assert store[3] == 9
        assert store.zeros == 7

    def test_zero_write_is_noop(self):
        """Writing 0 keeps a register at zero and zeros unchanged."""
        store = RegisterStore(4)
        assert not store.write_if_greater(0, 0)
        assert store.zeros == 4

    def test_neighbours_isolated(self):
        """Full-width values stay inside their own slot."""
        store = RegisterStore(18)
        for i in range(0, 18, 2):
            store.write_if_greater(i, MAX_REGISTER_VALUE)
        for i in range(18):
            expected = MAX_REGISTER_VALUE if i % 2 == 0 else 0
            assert store[i] == expected
        store.write_if_greater(5, 1)
        assert store[4] == MAX_REGISTER_VALUE
        assert store[5] == 1
        assert store[6] == MAX_REGISTER_VALUE

    def test_index_out_of_range(self):
        """Reads and writes outside the store raise IndexError."""
        store = RegisterStore(10)
        with pytest.raises(IndexError):
            store.read(10)
        with pytest.raises(IndexError):
            store.read(-1)
        with pytest.raises(IndexError):
            store.write_if_greater(10, 1)

    def test_value_out_of_range(self):
        """Values wider than 5 bits are rejected."""
        store = RegisterStore(10)
        with pytest.raises(ValueError):
            store.write_if_greater(0, MAX_REGISTER_VALUE + 1)
        with pytest.raises(ValueError):
            store.write_if_greater(0, -1)
        assert store.zeros == 10

    def test_non_integer_value_leaves_store_unchanged(self):
        """A rejected float does not touch the counter or the zero count."""
        store = RegisterStore(4)
        with pytest.raises(TypeError):
            store.write_if_greater(0, 3.0)
        assert store.zeros == 4
        assert store[0] == 0
        assert store.write_if_greater(0, 3)
        assert store.zeros == 3

    def test_invalid_count(self):
        with pytest.raises(ValueError):
            RegisterStore(0)

    def test_values(self):
        """values() unpacks the registers in index order."""
        store = RegisterStore(13)
        expected = np.zeros(13, dtype=np.uint8)
        for i, value in [(0, 3), (5, 31), (6, 1), (12, 17)]:
            store.write_if_greater(i, value)
            expected[i] = value
        values = store.values()
        assert values.dtype == np.uint8
        np.testing.assert_array_equal(values, expected)

    def test_merge_matches_scalar_writes(self):
        """merge_max equals write_if_greater over every index."""
        rng = random.Random(42)
        a = RegisterStore(100)
        b = RegisterStore(100)
        for i in range(100):
            a.write_if_greater(i, rng.choice([0, 0, rng.randint(1, 31)]))
            b.write_if_greater(i, rng.choice([0, 0, rng.randint(1, 31)]))

        expected = a.copy()
        scalar_merge(expected, b)
        changed = a.merge_max(b)

        assert a == expected
        assert a.zeros == expected.zeros
        assert a.zeros == int(np.count_nonzero(a.values() == 0))
        assert changed > 0

    def test_merge_idempotent(self):
        store = RegisterStore(20)
        store.write_if_greater(7, 4)
        assert store.merge_max(store.copy()) == 0
        assert store[7] == 4
        assert store.zeros == 19

    def test_merge_size_mismatch(self):
        with pytest.raises(ValueError):
            RegisterStore(10).merge_max(RegisterStore(11))

    def test_copy_is_independent(self):
        store = RegisterStore(10)
        store.write_if_greater(1, 5)
        clone = store.copy()
        clone.write_if_greater(2, 6)
        assert store[2] == 0
        assert store.zeros == 9
        assert clone.zeros == 8
        assert store != clone


@pytest.mark.quick
class TestRegisterInvariants:
    """Zero-count and monotonicity under random write sequences."""

    def test_zero_count_consistency(self):
        rng = random.Random(7)
        store = RegisterStore(64)
        for _ in range(500):
            store.write_if_greater(rng.randrange(64), rng.randint(0, 31))
            assert store.zeros == int(np.count_nonzero(store.values() == 0))

    def test_monotonic(self):
        rng = random.Random(11)
        store = RegisterStore(64)
        previous = store.values()
        for _ in range(500):
            store.write_if_greater(rng.randrange(64), rng.randint(0, 31))
            current = store.values()
            assert np.all(current >= previous)
            previous = current
