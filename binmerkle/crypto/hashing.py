"""
Hashing Utilities
Digest primitive interface and hex helpers for Merkle commitments.

This module provides:
- Hasher: the stateful digest primitive contract (reset/absorb/finalize)
- HashlibHasher: a Hasher backed by any hashlib algorithm
- hash_once / hash_pair: the reset-then-use sequences the tree relies on
- Hex encoding/decoding with 0x prefix

Security/Determinism Notes:
- A Hasher is mutable; never share one instance across concurrent builds
- fork() hands out independent state for read-only consumers
- All operations are deterministic
"""
from __future__ import annotations

import hashlib
from typing import Callable, Protocol, runtime_checkable

from binmerkle.schemas.errors import HashPrimitiveException


DEFAULT_ALGORITHM = "sha256"

# Algorithms whose output length is chosen at construction time (min, max)
_VARIABLE_SIZE_ALGORITHMS: dict[str, tuple[int, int]] = {
    "blake2b": (1, 64),
    "blake2s": (1, 32),
}

# Extendable-output functions: the length is chosen at finalize time
_XOF_DEFAULT_SIZES: dict[str, int] = {
    "shake_128": 16,
    "shake_256": 32,
}


@runtime_checkable
class Hasher(Protocol):
    """
    Stateful digest primitive.

    The tree drives it strictly as reset -> absorb (one or more) -> finalize.
    """

    digest_size: int

    def reset(self) -> None:
        """Discard any absorbed input."""
        ...

    def absorb(self, data: bytes) -> None:
        """Feed bytes into the running state."""
        ...

    def finalize(self) -> bytes:
        """Return the digest of everything absorbed since the last reset."""
        ...

    def fork(self) -> "Hasher":
        """Return a fresh, independent hasher of the same algorithm and size."""
        ...


class HashlibHasher:
    """
    Hasher adapter over the standard hashlib constructors.

    Example:
        >>> h = HashlibHasher("sha256")
        >>> h.reset(); h.absorb(b"hello")
        >>> h.finalize().hex()[:16]
        '2cf24dba5fb0a30e'
    """

    def __init__(self, name: str = DEFAULT_ALGORITHM, digest_size: int | None = None) -> None:
        self.name = name.lower()
        self._factory, self.digest_size = self._resolve(self.name, digest_size)
        self._xof = self.name in _XOF_DEFAULT_SIZES
        self._state = self._factory()

    @staticmethod
    def _resolve(name: str, digest_size: int | None) -> tuple[Callable[[], "hashlib._Hash"], int]:
        if name in _VARIABLE_SIZE_ALGORITHMS:
            low, high = _VARIABLE_SIZE_ALGORITHMS[name]
            size = high if digest_size is None else digest_size
            if not low <= size <= high:
                raise HashPrimitiveException(
                    f"{name} digest size must be between {low} and {high}, got {size}",
                    algorithm=name,
                    details={"digest_size": size},
                )
            constructor = getattr(hashlib, name)
            return (lambda: constructor(digest_size=size)), size

        if name in _XOF_DEFAULT_SIZES:
            size = _XOF_DEFAULT_SIZES[name] if digest_size is None else digest_size
            if size < 1:
                raise HashPrimitiveException(
                    f"{name} output length must be positive, got {size}",
                    algorithm=name,
                    details={"digest_size": size},
                )
            return (lambda: hashlib.new(name)), size

        try:
            natural = hashlib.new(name).digest_size
        except ValueError as e:
            raise HashPrimitiveException(
                f"Unsupported hash algorithm: {name}", algorithm=name
            ) from e

        if digest_size is not None and digest_size != natural:
            raise HashPrimitiveException(
                f"{name} has a fixed digest size of {natural} bytes, got {digest_size}",
                algorithm=name,
                details={"digest_size": digest_size},
            )
        return (lambda: hashlib.new(name)), natural

    def reset(self) -> None:
        self._state = self._factory()

    def absorb(self, data: bytes) -> None:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise HashPrimitiveException(
                f"Hasher input must be bytes, got {type(data).__name__}",
                algorithm=self.name,
            )
        self._state.update(data)

    def finalize(self) -> bytes:
        if self._xof:
            return self._state.digest(self.digest_size)
        return self._state.digest()

    def fork(self) -> "HashlibHasher":
        return HashlibHasher(self.name, self.digest_size)

    def __repr__(self) -> str:
        return f"HashlibHasher(name={self.name!r}, digest_size={self.digest_size})"


def new_hasher(algorithm: str = DEFAULT_ALGORITHM, digest_size: int | None = None) -> HashlibHasher:
    """
    Create a hasher for the named algorithm.

    Args:
        algorithm: Any hashlib algorithm name (default sha256)
        digest_size: Output size in bytes; only adjustable for blake2 and shake

    Returns:
        A freshly reset HashlibHasher

    Raises:
        HashPrimitiveException: Unknown algorithm or unsupported digest size
    """
    return HashlibHasher(algorithm, digest_size)


def hash_once(hasher: Hasher, data: bytes) -> bytes:
    """Digest a single byte string: reset, absorb, finalize."""
    hasher.reset()
    hasher.absorb(data)
    return hasher.finalize()


def hash_pair(hasher: Hasher, left: bytes, right: bytes) -> bytes:
    """
    Digest the concatenation of two byte strings.

    Absorbing left then right into one finalize is the same as hashing
    left + right, which is how Merkle parent digests are formed.
    """
    hasher.reset()
    hasher.absorb(left)
    hasher.absorb(right)
    return hasher.finalize()


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert a hexadecimal string (0x prefix optional) to bytes.

    Raises:
        ValueError: If the string has odd length or contains invalid hex characters

    Example:
        >>> from_hex("0xdeadbeef").hex()
        'deadbeef'
    """
    hex_content = hex_string[2:] if hex_string.startswith(("0x", "0X")) else hex_string

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length, got length {len(hex_content)}"
        )

    # Decode (will raise ValueError for invalid hex chars)
    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


__all__ = [
    "DEFAULT_ALGORITHM",
    "Hasher",
    "HashlibHasher",
    "new_hasher",
    "hash_once",
    "hash_pair",
    "to_hex",
    "from_hex",
]
