"""
Schemas
File: __init__.py

Purpose: Export the public API for the schemas module.
"""

# Error models and exceptions
from .errors import (
    BuildException,
    ConfigurationException,
    DepthTooLargeException,
    DepthTooSmallException,
    ErrorCodes,
    HashPrimitiveException,
    HashSizeMismatchException,
    HashSizeTooLargeException,
    HashSizeTooSmallException,
    InvalidProofSizeException,
    LeafIndexOutOfRangeException,
    LeafSizeMismatchException,
    MerkleError,
    MerkleException,
    ProofException,
    ShapeException,
    TooManyLeavesException,
)

__all__ = [
    # Errors
    "ErrorCodes",
    "MerkleError",
    "MerkleException",
    "ShapeException",
    "BuildException",
    "ProofException",
    "DepthTooSmallException",
    "DepthTooLargeException",
    "HashSizeTooSmallException",
    "HashSizeTooLargeException",
    "HashSizeMismatchException",
    "ConfigurationException",
    "TooManyLeavesException",
    "LeafSizeMismatchException",
    "HashPrimitiveException",
    "LeafIndexOutOfRangeException",
    "InvalidProofSizeException",
]
