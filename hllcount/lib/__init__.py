from .precision import Precision
from .hashing import (CustomHasher, SketchHashable, BuiltinHasher,
                      xxh32_factory, xxh64_factory, builtin_hash_factory)
from .registers import RegisterStore
from .abstractsketch import AbstractSketch
from .hyperloglog import HyperLogLog
from .exact import ExactCounter

__all__ = [
    'Precision',
    'CustomHasher',
    'SketchHashable',
    'BuiltinHasher',
    'xxh32_factory',
    'xxh64_factory',
    'builtin_hash_factory',
    'RegisterStore',
    'AbstractSketch',
    'HyperLogLog',
    'ExactCounter',
]
