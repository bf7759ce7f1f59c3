"""
Builds the context and proof of a byte range from a full memory.

The builder replays the streaming pass of `FrontierAccumulator` in three phases,
each over its own frontier:

1.  **Left** `[0, start_index)`: an ordinary pass. Its peaks become the
    context's `start_buffer`.

2.  **Touched** `[start_index, end_index)`: a partially covered first or last
    blob is recorded as its in-range bytes (`start_bytes` / `end_bytes`), since
    a verifier must re-hash it together with the pads. The fully covered blobs
    in between are recorded as the digests of their aligned subtrees (`hashes`).

3.  **Right** `[end_index, MEMORY_SIZE)`: the blobs are grouped into aligned
    subtrees, and the digest of each becomes an entry of `end_buffer`.

A verifier that pushes `start_buffer`, then the touched contribution, then
`end_buffer` onto one frontier ends in exactly the state of the full pass.
"""

from __future__ import annotations

import logging
from typing import Sequence

from memproof.types import ByteData, Bytes32, InvalidRangeError

from .containers import MemoryContext, MemoryProof
from .frontier import (
    PROD_FRONTIER_ACCUMULATOR,
    TEST_FRONTIER_ACCUMULATOR,
    Frontier,
    FrontierAccumulator,
)
from .layout import AlignedNode, Window

logger = logging.getLogger(__name__)


class ContextProofBuilder:
    """Produces `(MemoryContext, MemoryProof)` pairs for ranges of a memory."""

    def __init__(self, accumulator: FrontierAccumulator):
        """Initializes with the accumulator of the target memory layout."""
        self.accumulator = accumulator
        self.hasher = accumulator.hasher
        self.config = accumulator.config

    def _subtree_roots(
        self, leaves: Sequence[Bytes32], nodes: Sequence[AlignedNode]
    ) -> list[Bytes32]:
        """
        Computes the digest of every aligned node over a run of leaves.

        Args:
            leaves: The leaf digests, the first of which is leaf `nodes[0].position`.
            nodes: Consecutive aligned nodes covering exactly `leaves`.
        """
        if not nodes:
            return []
        base = nodes[0].position
        roots: list[Bytes32] = []
        for node in nodes:
            # Each subtree gets a fresh frontier; a complete subtree leaves one peak.
            frontier = Frontier()
            for leaf in leaves[node.position - base : node.end - base]:
                frontier.push(leaf)
            roots.append(frontier.root())
        return roots

    def build_context(
        self, memory: bytes, offset: int, length: int
    ) -> tuple[MemoryContext, MemoryProof]:
        """
        Generates the context and proof for `memory[offset : offset + length]`.

        Args:
            memory: The full memory, exactly `MEMORY_SIZE` bytes.
            offset: The first byte of the range.
            length: The number of bytes in the range.

        Returns:
            The context (reused to recompute the root after a mutation) and the
            proof (authenticating the old contents of the range).

        Raises:
            InvalidRangeError: If the memory has the wrong size or the range is malformed.
        """
        config = self.config
        if len(memory) != config.MEMORY_SIZE:
            raise InvalidRangeError(
                0,
                len(memory),
                config.MEMORY_SIZE,
                detail="a context requires the full memory",
            )
        window = Window.for_range(offset, length, config)
        blob_size = config.BLOB_SIZE
        view = memoryview(memory)

        # LEFT PHASE: ordinary accumulation up to the window.
        left = self.accumulator.accumulate(view[: window.start_index])
        start_buffer = left.peaks()

        # TOUCHED PHASE: edge bytes for partial blobs, subtree digests for the rest.
        start_bytes = view[offset : offset + window.head_bytes_length]
        tail_start = window.range_end - window.tail_bytes_length
        end_bytes = view[tail_start : window.range_end]

        interior_start, interior_end = window.interior_leaves
        interior_leaves = self.hasher.hash_blobs(
            view[interior_start * blob_size : min(interior_end * blob_size, config.MEMORY_SIZE)]
        )
        hashes = self._subtree_roots(interior_leaves, window.interior_nodes())

        # RIGHT PHASE: subtree digests for everything after the window.
        right_leaves = self.hasher.hash_blobs(view[window.end_index :])
        end_buffer = self._subtree_roots(right_leaves, window.right_nodes())

        logger.debug(
            "Built context for [%d, %d): %d left peaks, %d proof hashes, %d right nodes",
            offset,
            window.range_end,
            len(start_buffer),
            len(hashes),
            len(end_buffer),
        )

        context = MemoryContext(
            offset=offset,
            start_pad=ByteData(view[window.start_index : offset]),
            end_pad=ByteData(view[window.range_end : window.end_index]),
            start_buffer=start_buffer,
            end_buffer=end_buffer,
        )
        proof = MemoryProof(
            length=length,
            start_bytes=ByteData(start_bytes),
            end_bytes=ByteData(end_bytes),
            hashes=hashes,
        )
        return context, proof


PROD_CONTEXT_BUILDER = ContextProofBuilder(PROD_FRONTIER_ACCUMULATOR)
"""A context builder for the production memory layout."""

TEST_CONTEXT_BUILDER = ContextProofBuilder(TEST_FRONTIER_ACCUMULATOR)
"""A context builder for the test memory layout."""
