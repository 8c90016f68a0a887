"""
Schemas - Error Taxonomy
File: errors.py

Purpose: Standard error taxonomy for tree shape validation, tree
construction and membership proofs.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Shape & Configuration Errors
    DEPTH_TOO_SMALL = "DEPTH_TOO_SMALL"
    DEPTH_TOO_LARGE = "DEPTH_TOO_LARGE"
    HASH_SIZE_TOO_SMALL = "HASH_SIZE_TOO_SMALL"
    HASH_SIZE_TOO_LARGE = "HASH_SIZE_TOO_LARGE"
    HASH_SIZE_MISMATCH = "HASH_SIZE_MISMATCH"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Construction Errors
    TOO_MANY_LEAVES = "TOO_MANY_LEAVES"
    LEAF_SIZE_MISMATCH = "LEAF_SIZE_MISMATCH"
    HASH_PRIMITIVE_ERROR = "HASH_PRIMITIVE_ERROR"

    # Proof Errors
    LEAF_INDEX_OUT_OF_RANGE = "LEAF_INDEX_OUT_OF_RANGE"
    INVALID_PROOF_SIZE = "INVALID_PROOF_SIZE"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class MerkleError(BaseModel):
    """
    Error model for structured error communication.

    Used where an error has to be reported rather than raised, e.g. the
    CLI's JSON output.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.TOO_MANY_LEAVES],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "MerkleException":
        """Convert this error model to a raisable exception."""
        return MerkleException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class MerkleException(Exception):
    """
    Base exception for all tree and proof errors.

    Carries structured error information and can be converted to/from
    MerkleError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "MERKLE_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> MerkleError:
        """Convert this exception to a MerkleError model."""
        return MerkleError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class ShapeException(MerkleException):
    """Base for configuration errors raised while validating a tree shape."""


class BuildException(MerkleException):
    """Base for errors that abort a tree build."""


class ProofException(MerkleException):
    """Base for malformed proof inputs."""


class DepthTooSmallException(ShapeException):
    """Exception raised when the tree depth is below the minimum."""

    def __init__(self, depth: int, minimum: int) -> None:
        super().__init__(
            message=f"depth must be {minimum} or more, got {depth}",
            code=ErrorCodes.DEPTH_TOO_SMALL,
            details={"depth": depth, "minimum": minimum},
        )


class DepthTooLargeException(ShapeException):
    """Exception raised when the tree depth is above the maximum."""

    def __init__(self, depth: int, maximum: int) -> None:
        super().__init__(
            message=f"depth must be {maximum} or less, got {depth}",
            code=ErrorCodes.DEPTH_TOO_LARGE,
            details={"depth": depth, "maximum": maximum},
        )


class HashSizeTooSmallException(ShapeException):
    """Exception raised when the hash size is below the minimum."""

    def __init__(self, hash_size: int, minimum: int) -> None:
        super().__init__(
            message=f"hash size must be {minimum} bytes or more, got {hash_size}",
            code=ErrorCodes.HASH_SIZE_TOO_SMALL,
            details={"hash_size": hash_size, "minimum": minimum},
        )


class HashSizeTooLargeException(ShapeException):
    """Exception raised when the hash size is above the maximum."""

    def __init__(self, hash_size: int, maximum: int) -> None:
        super().__init__(
            message=f"hash size must be {maximum} bytes or less, got {hash_size}",
            code=ErrorCodes.HASH_SIZE_TOO_LARGE,
            details={"hash_size": hash_size, "maximum": maximum},
        )


class HashSizeMismatchException(ShapeException):
    """Exception raised when a hasher's digest size disagrees with the shape."""

    def __init__(self, hash_size: int, digest_size: int) -> None:
        super().__init__(
            message=(
                f"hasher produces {digest_size}-byte digests but the tree "
                f"expects {hash_size}-byte digests"
            ),
            code=ErrorCodes.HASH_SIZE_MISMATCH,
            details={"hash_size": hash_size, "digest_size": digest_size},
        )


class ConfigurationException(MerkleException):
    """Exception raised when configuration values cannot be parsed."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CONFIGURATION_ERROR,
            details=details,
            retryable=False,
        )


class TooManyLeavesException(BuildException):
    """Exception raised when more leaves are supplied than the tree can hold."""

    def __init__(self, leaf_count: int, leaf_capacity: int) -> None:
        super().__init__(
            message=(
                f"number of leaves {leaf_count} exceeds upper limit {leaf_capacity}"
            ),
            code=ErrorCodes.TOO_MANY_LEAVES,
            details={"leaf_count": leaf_count, "leaf_capacity": leaf_capacity},
        )


class LeafSizeMismatchException(BuildException):
    """Exception raised when a pre-hashed leaf is not exactly hash_size bytes."""

    def __init__(self, leaf_index: int, size: int, hash_size: int) -> None:
        super().__init__(
            message=(
                f"pre-hashed leaf {leaf_index} is {size} bytes, "
                f"expected {hash_size}"
            ),
            code=ErrorCodes.LEAF_SIZE_MISMATCH,
            details={"leaf_index": leaf_index, "size": size, "hash_size": hash_size},
        )


class HashPrimitiveException(BuildException):
    """Exception raised when the underlying digest primitive fails."""

    def __init__(
        self,
        message: str,
        algorithm: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if algorithm:
            full_details["algorithm"] = algorithm
        super().__init__(
            message=message,
            code=ErrorCodes.HASH_PRIMITIVE_ERROR,
            details=full_details,
            retryable=False,
        )


class LeafIndexOutOfRangeException(ProofException):
    """Exception raised when a leaf index falls outside [0, leaf_capacity)."""

    def __init__(self, leaf_index: int, leaf_capacity: int) -> None:
        super().__init__(
            message=(
                f"leaf index {leaf_index} out of range for "
                f"{leaf_capacity} leaf slots"
            ),
            code=ErrorCodes.LEAF_INDEX_OUT_OF_RANGE,
            details={"leaf_index": leaf_index, "leaf_capacity": leaf_capacity},
        )


class InvalidProofSizeException(ProofException):
    """Exception raised when a proof buffer is not depth * hash_size bytes."""

    def __init__(self, size: int, expected: int) -> None:
        super().__init__(
            message=f"invalid proof size {size}, expected {expected} bytes",
            code=ErrorCodes.INVALID_PROOF_SIZE,
            details={"size": size, "expected": expected},
        )
