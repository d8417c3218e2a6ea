from __future__ import annotations
import math
import operator

LOWEST_PRECISION = 4
DEFAULT_PRECISION = 12
HIGHEST_PRECISION = 16


class Precision(int):
    """Number of hash bits used to select a register.

    A precision of p gives m = 2**p registers. Valid values are 4 through 16;
    anything else is a configuration error and raises at construction time.
    Precision is an int, so it can be compared and shifted like one.
    """

    def __new__(cls, value: int = DEFAULT_PRECISION) -> 'Precision':
        if isinstance(value, Precision):
            return value
        value = operator.index(value)
        if value < LOWEST_PRECISION or value > HIGHEST_PRECISION:
            raise ValueError(
                f"Precision must be between {LOWEST_PRECISION} and "
                f"{HIGHEST_PRECISION}, got {value}")
        return super().__new__(cls, value)

    @classmethod
    def lowest(cls) -> 'Precision':
        return cls(LOWEST_PRECISION)

    @classmethod
    def default(cls) -> 'Precision':
        return cls(DEFAULT_PRECISION)

    @classmethod
    def highest(cls) -> 'Precision':
        return cls(HIGHEST_PRECISION)

    @property
    def num_registers(self) -> int:
        """Number of registers (m) for this precision."""
        return 1 << int(self)

    @property
    def standard_error(self) -> float:
        """Theoretical relative standard error, 1.04 / sqrt(m)."""
        return 1.04 / math.sqrt(self.num_registers)

    def __repr__(self) -> str:
        return f"Precision({int(self)})"

    def __str__(self) -> str:
        return str(int(self))
