"""
Schemas
File: errors.py

Purpose: Standard error taxonomy for the Merkle tree library.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the library."""

    # Construction Errors
    INVALID_HEIGHT = "INVALID_HEIGHT"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"

    # Access Errors
    INDEX_OUT_OF_BOUNDS = "INDEX_OUT_OF_BOUNDS"
    NODE_OUT_OF_RANGE = "NODE_OUT_OF_RANGE"
    UNINITIALIZED_TREE = "UNINITIALIZED_TREE"

    # Hashing Errors
    UNKNOWN_HASH_ALGORITHM = "UNKNOWN_HASH_ALGORITHM"

    # Merkle & Commitment Errors
    PROOF_FORMAT_ERROR = "PROOF_FORMAT_ERROR"
    MERKLE_PROOF_INVALID = "MERKLE_PROOF_INVALID"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class ArborError(BaseModel):
    """
    Base error model for structured error reporting.

    Used when errors need to be serialized (e.g. CLI JSON output)
    rather than raised.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INDEX_OUT_OF_BOUNDS],
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

    def to_exception(self) -> "ArborException":
        """Convert this error model to a raised exception."""
        return ArborException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class ArborException(Exception):
    """
    Base exception for all Merkle tree errors.

    This exception carries structured error information and can be
    converted to/from ArborError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "ARBOR_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> ArborError:
        """Convert this exception to an ArborError model."""
        return ArborError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InvalidHeightException(ArborException, ValueError):
    """Exception raised when a tree is constructed with height < 1."""

    def __init__(self, height: int) -> None:
        super().__init__(
            message=f"Tree height must be at least 1, got {height}",
            code=ErrorCodes.INVALID_HEIGHT,
            details={"height": height},
        )


class CapacityExceededException(ArborException, ValueError):
    """Exception raised when more blocks are supplied than the tree has leaves."""

    def __init__(self, count: int, capacity: int) -> None:
        super().__init__(
            message=f"{count} blocks exceed tree capacity of {capacity} leaves",
            code=ErrorCodes.CAPACITY_EXCEEDED,
            details={"count": count, "capacity": capacity},
        )


class IndexOutOfBoundsException(ArborException, IndexError):
    """Exception raised when a leaf index is outside [0, capacity)."""

    def __init__(self, index: int, capacity: int) -> None:
        super().__init__(
            message=f"Leaf index {index} out of range for {capacity} leaves",
            code=ErrorCodes.INDEX_OUT_OF_BOUNDS,
            details={"index": index, "capacity": capacity},
        )


class NodeOutOfRangeException(ArborException, IndexError):
    """Exception raised for invalid node store sizes or node indices."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.NODE_OUT_OF_RANGE,
            details=details,
        )


class UninitializedTreeException(ArborException, RuntimeError):
    """Exception raised when a tree is read before its first successful build."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            message=f"Cannot call {operation}() before the tree has been built",
            code=ErrorCodes.UNINITIALIZED_TREE,
            details={"operation": operation},
        )


class UnknownHashAlgorithmException(ArborException, ValueError):
    """Exception raised when a hash algorithm name cannot be resolved."""

    def __init__(self, name: str, supported: list[str] | None = None) -> None:
        details: dict[str, Any] = {"algorithm": name}
        if supported:
            details["supported"] = supported
        super().__init__(
            message=f"Unknown hash algorithm: {name!r}",
            code=ErrorCodes.UNKNOWN_HASH_ALGORITHM,
            details=details,
        )


class ProofFormatException(ArborException, ValueError):
    """Exception raised when a serialized proof cannot be decoded."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.PROOF_FORMAT_ERROR,
            details=details,
        )


class MerkleVerificationException(ArborException):
    """Exception raised by callers that require a proof to verify."""

    def __init__(
        self,
        message: str,
        leaf_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if leaf_index is not None:
            full_details["leaf_index"] = leaf_index
        super().__init__(
            message=message,
            code=ErrorCodes.MERKLE_PROOF_INVALID,
            details=full_details,
        )
