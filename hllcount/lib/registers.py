from __future__ import annotations
import operator
import numpy as np # type: ignore

REGISTER_WIDTH = 5
WORD_WIDTH = 32
REGISTERS_PER_WORD = WORD_WIDTH // REGISTER_WIDTH
REGISTER_MASK = (1 << REGISTER_WIDTH) - 1
MAX_REGISTER_VALUE = REGISTER_MASK

# Bit offset of each register slot inside a word
_SHIFTS = np.arange(REGISTERS_PER_WORD, dtype=np.uint32) * REGISTER_WIDTH


class RegisterStore:
    """Fixed-length array of 5-bit counters packed into 32-bit words.

    Six counters share each word, lowest slot in the lowest bits::

        Mask:                                  11111
        Word 0: 00 00000 00000 00000 00000 00000 00000
                       5     4     3     2     1     0
        Word 1: 00 00000 00000 00000 00000 00000 00000
                      11    10     9     8     7     6

    Counters only ever grow: write_if_greater is the sole mutator, and the
    number of zero counters is tracked as writes happen so it never needs
    a scan.
    """

    def __init__(self, count: int):
        """Create a store of zero-valued counters.

        Args:
            count: Number of counters

        Raises:
            ValueError: If count is not positive
        """
        count = operator.index(count)
        if count <= 0:
            raise ValueError(f"Register count must be positive, got {count}")
        self.count = count
        self._zeros = count
        num_words = (count + REGISTERS_PER_WORD - 1) // REGISTERS_PER_WORD
        self._buffer = np.zeros(num_words, dtype=np.uint32)

    @property
    def zeros(self) -> int:
        """Number of counters currently holding 0."""
        return self._zeros

    @property
    def nbytes(self) -> int:
        """Size of the packed word buffer in bytes."""
        return int(self._buffer.nbytes)

    def _locate(self, index: int):
        index = operator.index(index)
        if index < 0 or index >= self.count:
            raise IndexError(f"Register index {index} out of range for {self.count} registers")
        word_index, slot = divmod(index, REGISTERS_PER_WORD)
        return word_index, slot * REGISTER_WIDTH

    def read(self, index: int) -> int:
        """Return the counter at index."""
        word_index, shift = self._locate(index)
        return (int(self._buffer[word_index]) >> shift) & REGISTER_MASK

    def __getitem__(self, index: int) -> int:
        return self.read(index)

    def write_if_greater(self, index: int, value: int) -> bool:
        """Store value at index if it is strictly greater than the current counter.

        Args:
            index: Counter index
            value: Candidate value (0-31)

        Returns:
            True if the counter changed

        Raises:
            IndexError: If index is out of range
            TypeError: If value is not an integer
            ValueError: If value does not fit in a counter
        """
        word_index, shift = self._locate(index)
        value = operator.index(value)
        if value < 0 or value > MAX_REGISTER_VALUE:
            raise ValueError(f"Register value must be between 0 and {MAX_REGISTER_VALUE}, got {value}")

        word = int(self._buffer[word_index])
        current = (word >> shift) & REGISTER_MASK
        if value <= current:
            return False
        self._buffer[word_index] = (word & ~(REGISTER_MASK << shift)) | (value << shift)
        if current == 0:
            self._zeros -= 1
        return True

    def values(self) -> np.ndarray:
        """Unpack every counter into a uint8 array of length count."""
        unpacked = (self._buffer[:, np.newaxis] >> _SHIFTS) & REGISTER_MASK
        return unpacked.reshape(-1)[:self.count].astype(np.uint8)

    def _pack(self, values: np.ndarray) -> np.ndarray:
        padded = np.zeros(len(self._buffer) * REGISTERS_PER_WORD, dtype=np.uint32)
        padded[:self.count] = values
        words = padded.reshape(-1, REGISTERS_PER_WORD) << _SHIFTS
        return np.bitwise_or.reduce(words, axis=1).astype(np.uint32)

    def merge_max(self, other: 'RegisterStore') -> int:
        """Raise every counter to the matching counter of other, if larger.

        Same result as calling write_if_greater(i, other.read(i)) for every
        index, done on the unpacked arrays at once.

        Args:
            other: Store with the same number of counters

        Returns:
            Number of counters that changed

        Raises:
            ValueError: If the stores differ in size
        """
        if other.count != self.count:
            raise ValueError(f"Cannot merge register stores of size {self.count} and {other.count}")
        mine = self.values()
        theirs = other.values()
        grown = theirs > mine
        changed = int(np.count_nonzero(grown))
        if changed == 0:
            return 0
        self._zeros -= int(np.count_nonzero(grown & (mine == 0)))
        self._buffer = self._pack(np.maximum(mine, theirs))
        return changed

    def copy(self) -> 'RegisterStore':
        clone = RegisterStore(self.count)
        clone._zeros = self._zeros
        clone._buffer = self._buffer.copy()
        return clone

    def __len__(self) -> int:
        return self.count

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RegisterStore):
            return NotImplemented
        return self.count == other.count and bool(np.array_equal(self._buffer, other._buffer))

    def __repr__(self) -> str:
        return f"RegisterStore(count={self.count}, zeros={self._zeros})"
