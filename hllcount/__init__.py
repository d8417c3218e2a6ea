"""
hllcount - Approximate distinct counting with HyperLogLog
"""

from hllcount.lib.hyperloglog import HyperLogLog
from hllcount.lib.registers import RegisterStore
from hllcount.lib.precision import Precision
from hllcount.lib.exact import ExactCounter
from hllcount.lib.abstractsketch import AbstractSketch
from hllcount.lib.hashing import (CustomHasher, SketchHashable,
                                  xxh32_factory, xxh64_factory, builtin_hash_factory)

__version__ = '0.1.0'

__all__ = [
    'HyperLogLog',
    'RegisterStore',
    'Precision',
    'ExactCounter',
    'AbstractSketch',
    'CustomHasher',
    'SketchHashable',
    'xxh32_factory',
    'xxh64_factory',
    'builtin_hash_factory',
]
