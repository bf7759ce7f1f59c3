"""
This package provides the streaming Merkle commitment to a VM memory and the
range-scoped contexts and proofs used to check a single disputed step.

It exposes the core data structures and the main interface.
"""

from .constants import PROD_CONFIG, TARGET_CONFIG, TEST_CONFIG, MemoryConfig
from .containers import ContextProof, MemoryContext, MemoryProof
from .frontier import Frontier
from .interface import (
    PROD_MEMORY_SCHEME,
    TARGET_MEMORY_SCHEME,
    TEST_MEMORY_SCHEME,
    MemoryCommitmentScheme,
)

__all__ = [
    "MemoryCommitmentScheme",
    "MemoryConfig",
    "MemoryContext",
    "MemoryProof",
    "ContextProof",
    "Frontier",
    "PROD_CONFIG",
    "TEST_CONFIG",
    "TARGET_CONFIG",
    "PROD_MEMORY_SCHEME",
    "TEST_MEMORY_SCHEME",
    "TARGET_MEMORY_SCHEME",
]
