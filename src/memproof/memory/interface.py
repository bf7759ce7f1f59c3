"""
Defines the public interface of the memory commitment scheme.

The scheme bundles the four components for one memory layout:

- `compute_root`: commit to a full memory (off-chain, once),
- `build_context`: produce the context and proof of a disputed range (off-chain),
- `verify` / `recompute`: check the root before and derive the root after a
  mutation of the range (the gas-bounded side).
"""

from __future__ import annotations

from memproof.types import Bytes32

from .builder import PROD_CONTEXT_BUILDER, TEST_CONTEXT_BUILDER, ContextProofBuilder
from .composer import PROD_ROOT_COMPOSER, TEST_ROOT_COMPOSER, RootComposer
from .constants import PROD_CONFIG, TARGET_CONFIG, TEST_CONFIG, MemoryConfig
from .containers import MemoryContext, MemoryProof
from .frontier import PROD_FRONTIER_ACCUMULATOR, TEST_FRONTIER_ACCUMULATOR, FrontierAccumulator
from .hasher import BlobHasher


class MemoryCommitmentScheme:
    """Instance of the memory commitment scheme for a given config."""

    def __init__(
        self,
        config: MemoryConfig,
        accumulator: FrontierAccumulator,
        builder: ContextProofBuilder,
        composer: RootComposer,
    ):
        """Initializes the scheme with the components of one memory layout."""
        self.config = config
        self.accumulator = accumulator
        self.builder = builder
        self.composer = composer

    @classmethod
    def for_config(cls, config: MemoryConfig) -> MemoryCommitmentScheme:
        """Builds a scheme with fresh components for a custom memory layout."""
        accumulator = FrontierAccumulator(BlobHasher(config))
        return cls(
            config,
            accumulator,
            ContextProofBuilder(accumulator),
            RootComposer(accumulator.hasher),
        )

    def compute_root(self, memory: bytes) -> Bytes32:
        """Computes the commitment to `memory` (at most `MEMORY_SIZE` bytes)."""
        return self.accumulator.compute_root(memory)

    def build_context(
        self, memory: bytes, offset: int, length: int
    ) -> tuple[MemoryContext, MemoryProof]:
        """Generates the context and proof of `memory[offset : offset + length]`."""
        return self.builder.build_context(memory, offset, length)

    def verify(self, root: Bytes32, context: MemoryContext, proof: MemoryProof) -> bool:
        """Checks a context and its proof against `root`."""
        return self.composer.verify(root, context, proof)

    def recompute(self, context: MemoryContext, proof: MemoryProof, new_data: bytes) -> Bytes32:
        """Derives the root after `new_data` replaces the proven range."""
        return self.composer.recompute(context, proof, new_data)

    def compose_root(self, context: MemoryContext, data: bytes) -> Bytes32:
        """Computes the root of the memory holding `data` in the context's range."""
        return self.composer.compose_root(context, data)

    def verify_range(self, root: Bytes32, context: MemoryContext, data: bytes) -> bool:
        """Checks that `data` sits in the context's range of the memory committed by `root`."""
        return self.composer.verify_range(root, context, data)

    def perform_copy(
        self,
        root: Bytes32,
        data: bytes,
        from_context: MemoryContext,
        to_context: MemoryContext,
        to_proof: MemoryProof,
    ) -> Bytes32:
        """Checks and applies a copy of `data` between two ranges, returning the new root."""
        return self.composer.perform_copy(root, data, from_context, to_context, to_proof)


PROD_MEMORY_SCHEME = MemoryCommitmentScheme(
    PROD_CONFIG,
    PROD_FRONTIER_ACCUMULATOR,
    PROD_CONTEXT_BUILDER,
    PROD_ROOT_COMPOSER,
)
"""An instance configured for the production memory layout."""

TEST_MEMORY_SCHEME = MemoryCommitmentScheme(
    TEST_CONFIG,
    TEST_FRONTIER_ACCUMULATOR,
    TEST_CONTEXT_BUILDER,
    TEST_ROOT_COMPOSER,
)
"""A lightweight instance for test environments."""

TARGET_MEMORY_SCHEME = TEST_MEMORY_SCHEME if TARGET_CONFIG is TEST_CONFIG else PROD_MEMORY_SCHEME
"""The instance selected by the `MEMPROOF_ENV` environment flag."""
