"""
Cryptographic utilities.

Provides the digest primitive used to build and verify trees.
"""
from .hashing import (
    DEFAULT_ALGORITHM,
    Hasher,
    HashlibHasher,
    new_hasher,
    hash_once,
    hash_pair,
    to_hex,
    from_hex,
)

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
