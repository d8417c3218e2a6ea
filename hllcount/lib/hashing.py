"""Pluggable hashing for sketches.

A hasher is anything with ``update(bytes)`` and ``intdigest()``, which is
exactly the interface of the xxhash objects. Sketches take a zero-argument
factory and ask it for a fresh hasher per element.
"""
from __future__ import annotations
import functools
import struct
from typing import Any, Callable, List, Protocol
import numpy as np # type: ignore
import xxhash # type: ignore

DEFAULT_SEED = 42
HASH_BITS = 32
HASH_MASK = (1 << HASH_BITS) - 1


class CustomHasher(Protocol):
    """Incremental hash function."""

    def update(self, data: bytes) -> None:
        ...

    def intdigest(self) -> int:
        ...


class SketchHashable(Protocol):
    """Object that knows how to feed itself into a hasher."""

    def hash_into(self, hasher: CustomHasher) -> None:
        ...


HasherFactory = Callable[[], CustomHasher]


class BuiltinHasher:
    """Hasher backed by Python's own hash().

    Bytes are buffered until intdigest(), which hashes the whole buffer
    at once. The result changes between interpreter runs unless
    PYTHONHASHSEED is fixed.
    """

    def __init__(self):
        self._buffer = bytearray()

    def update(self, data: bytes) -> None:
        self._buffer += data

    def intdigest(self) -> int:
        return hash(bytes(self._buffer)) & 0xFFFFFFFFFFFFFFFF


def xxh32_factory(seed: int = DEFAULT_SEED) -> HasherFactory:
    """Factory producing seeded 32-bit xxhash hashers."""
    return functools.partial(xxhash.xxh32, seed=seed)


def xxh64_factory(seed: int = DEFAULT_SEED) -> HasherFactory:
    """Factory producing seeded 64-bit xxhash hashers.

    Sketches keep only the low 32 bits of the digest.
    """
    return functools.partial(xxhash.xxh64, seed=seed)


def builtin_hash_factory() -> HasherFactory:
    """Factory producing hashers backed by the interpreter's hash()."""
    return BuiltinHasher


@functools.singledispatch
def to_bytes(value: Any) -> bytes:
    """Encode a value as the bytes fed to a hasher.

    Args:
        value: str, bytes-like, int, float, None, or a tuple of
               those and objects with hash_into()

    Returns:
        Byte encoding of value

    Raises:
        TypeError: If the type has no encoding
    """
    raise TypeError(
        f"Cannot hash value of type {type(value).__name__}; "
        "encode it to bytes or give it a hash_into(hasher) method")


@to_bytes.register(str)
def _(value: str) -> bytes:
    return value.encode('utf-8')


@to_bytes.register(bytes)
@to_bytes.register(bytearray)
@to_bytes.register(memoryview)
def _(value) -> bytes:
    return bytes(value)


@to_bytes.register(int)
def _(value: int) -> bytes:
    value = int(value)
    length = max(8, (value.bit_length() + 8) // 8)
    return value.to_bytes(length, byteorder='little', signed=True)


@to_bytes.register(float)
def _(value: float) -> bytes:
    return struct.pack('<d', value)


@to_bytes.register(np.integer)
def _(value) -> bytes:
    return to_bytes(int(value))


@to_bytes.register(np.floating)
def _(value) -> bytes:
    return to_bytes(float(value))


@to_bytes.register(tuple)
def _(value: tuple) -> bytes:
    # Length prefixes keep ("ab", "c") and ("a", "bc") apart
    parts = []
    for item in value:
        encoded = encode_element(item)
        parts.append(len(encoded).to_bytes(4, byteorder='little'))
        parts.append(encoded)
    return b''.join(parts)


@to_bytes.register(type(None))
def _(value: None) -> bytes:
    return b''


def combine(hasher: CustomHasher, value: Any) -> None:
    """Feed value into hasher, preferring the value's own hash_into()."""
    hash_into = getattr(value, 'hash_into', None)
    if hash_into is not None:
        hash_into(hasher)
    else:
        hasher.update(to_bytes(value))


class _ByteSink:
    """Stand-in hasher that keeps the bytes fed to it."""

    def __init__(self):
        self.parts: List[bytes] = []

    def update(self, data: bytes) -> None:
        self.parts.append(bytes(data))


def encode_element(value: Any) -> bytes:
    """Bytes a sketch hashes for value, including any hash_into() output.

    Two elements are the same to a sketch exactly when these bytes match.
    """
    sink = _ByteSink()
    combine(sink, value)
    return b''.join(sink.parts)


def hash_element(factory: HasherFactory, value: Any) -> int:
    """Hash value with a fresh hasher and keep the low 32 bits."""
    hasher = factory()
    combine(hasher, value)
    return hasher.intdigest() & HASH_MASK
