"""Reusable type definitions for memory commitments."""

from .base import BoundaryModel
from .byte_arrays import ZERO_HASH, ByteData, Bytes32
from .exceptions import InvalidProofError, InvalidRangeError, MemoryProofError

__all__ = [
    # Core types
    "Bytes32",
    "ByteData",
    "ZERO_HASH",
    "BoundaryModel",
    # Exceptions
    "MemoryProofError",
    "InvalidRangeError",
    "InvalidProofError",
]
