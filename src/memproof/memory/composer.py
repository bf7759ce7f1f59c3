"""
Recombines contexts and proofs into memory roots.

This is the checking half of a dispute step. Its cost depends only on the
length of the touched range and the depth of the tree, never on the size of
the memory:

- `verify` checks that a context and proof agree with a published root,
  without the bytes of the range,
- `recompute` derives the root after new bytes are written to the range,
- `compose_root` / `verify_range` commit to a range given its bytes,
- `perform_copy` checks and applies a memory-to-memory copy.

Shape problems (wrong pad, buffer or byte lengths) are attributed to whoever
submitted the context and proof. `verify` reports them as `False`; the other
operations raise `InvalidProofError` or `InvalidRangeError`.
"""

from __future__ import annotations

import logging

from memproof.types import Bytes32, InvalidProofError, MemoryProofError

from .containers import MemoryContext, MemoryProof
from .frontier import Frontier
from .hasher import PROD_BLOB_HASHER, TEST_BLOB_HASHER, BlobHasher
from .layout import Window

logger = logging.getLogger(__name__)


class RootComposer:
    """Verifies and recomputes memory roots from range contexts."""

    def __init__(self, hasher: BlobHasher):
        """Initializes with the blob hasher of the target memory layout."""
        self.hasher = hasher
        self.config = hasher.config

    def _window(self, context: MemoryContext, length: int) -> Window:
        """
        Validates the shape of `context` for a range of `length` bytes.

        Raises:
            InvalidRangeError: If the range does not fit the memory.
            InvalidProofError: If a pad or buffer has the wrong size.
        """
        window = Window.for_range(context.offset, length, self.config)
        if len(context.start_pad) != window.start_pad_length:
            raise InvalidProofError(
                "startPad", expected=window.start_pad_length, actual=len(context.start_pad)
            )
        if len(context.end_pad) != window.end_pad_length:
            raise InvalidProofError(
                "endPad", expected=window.end_pad_length, actual=len(context.end_pad)
            )
        if len(context.start_buffer) != window.left_peak_count:
            raise InvalidProofError(
                "startBuffer", expected=window.left_peak_count, actual=len(context.start_buffer)
            )
        right_count = len(window.right_nodes())
        if len(context.end_buffer) != right_count:
            raise InvalidProofError(
                "endBuffer", expected=right_count, actual=len(context.end_buffer)
            )
        return window

    def _finish(self, frontier: Frontier, window: Window, context: MemoryContext) -> Bytes32:
        """Pushes the subtrees right of the window and folds the root."""
        for node, digest in zip(window.right_nodes(), context.end_buffer, strict=True):
            frontier.push(digest, node.level)
        return frontier.root()

    def compose_root(self, context: MemoryContext, data: bytes) -> Bytes32:
        """
        Computes the root of the memory holding `data` at `context.offset`.

        Every touched blob is re-hashed from `start_pad + data + end_pad`; all
        other blobs are represented by the context's buffers.

        Raises:
            InvalidRangeError: If the range does not fit the memory.
            InvalidProofError: If the context has the wrong shape for the range.
        """
        window = self._window(context, len(data))
        frontier = Frontier.from_peaks(window.first_leaf, context.start_buffer)
        for leaf in self.hasher.hash_blobs(context.start_pad + bytes(data) + context.end_pad):
            frontier.push(leaf)
        return self._finish(frontier, window, context)

    def verify_range(self, root: Bytes32, context: MemoryContext, data: bytes) -> bool:
        """
        Checks that `data` sits at `context.offset` in the memory committed by `root`.

        Returns:
            `True` if the composed root matches, `False` otherwise (including
            when the context is malformed).
        """
        try:
            return self.compose_root(context, data) == root
        except MemoryProofError as e:
            logger.debug("Rejected range of %d bytes: %s", len(data), e)
            return False

    def recompute(self, context: MemoryContext, proof: MemoryProof, new_data: bytes) -> Bytes32:
        """
        Derives the root after `new_data` replaces the proven range.

        Raises:
            InvalidProofError: If `new_data` does not have `proof.length` bytes,
                or the context has the wrong shape.
            InvalidRangeError: If the range does not fit the memory.
        """
        if len(new_data) != proof.length:
            raise InvalidProofError(
                "length",
                detail=f"proof covers {proof.length} bytes, got {len(new_data)} new bytes",
            )
        return self.compose_root(context, new_data)

    def _proof_root(self, context: MemoryContext, proof: MemoryProof) -> Bytes32:
        """Replays the full pass using only the context and the proof."""
        window = self._window(context, proof.length)
        if len(proof.start_bytes) != window.head_bytes_length:
            raise InvalidProofError(
                "startBytes", expected=window.head_bytes_length, actual=len(proof.start_bytes)
            )
        if len(proof.end_bytes) != window.tail_bytes_length:
            raise InvalidProofError(
                "endBytes", expected=window.tail_bytes_length, actual=len(proof.end_bytes)
            )
        interior = window.interior_nodes()
        if len(proof.hashes) != len(interior):
            raise InvalidProofError("hashes", expected=len(interior), actual=len(proof.hashes))

        frontier = Frontier.from_peaks(window.first_leaf, context.start_buffer)

        # First blob, completed by its pads.
        if window.head_is_partial:
            blob = context.start_pad + proof.start_bytes
            if window.is_single_blob:
                blob += context.end_pad
            frontier.push(self.hasher.hash_blob(blob))

        # Fully covered blobs, one digest per aligned subtree.
        for node, digest in zip(interior, proof.hashes, strict=True):
            frontier.push(digest, node.level)

        # Last blob, completed by the end pad.
        if window.tail_is_partial:
            frontier.push(self.hasher.hash_blob(proof.end_bytes + context.end_pad))

        return self._finish(frontier, window, context)

    def verify(self, root: Bytes32, context: MemoryContext, proof: MemoryProof) -> bool:
        """
        Checks a context and its proof against a published root.

        A mismatch is an expected outcome: the claimed root is wrong, or the
        submitted context or proof is. Neither case raises.

        Returns:
            `True` if the replayed root equals `root`, `False` otherwise.
        """
        try:
            computed = self._proof_root(context, proof)
        except MemoryProofError as e:
            logger.debug("Rejected proof at offset %d: %s", context.offset, e)
            return False
        return computed == root

    def perform_copy(
        self,
        root: Bytes32,
        data: bytes,
        from_context: MemoryContext,
        to_context: MemoryContext,
        to_proof: MemoryProof,
    ) -> Bytes32:
        """
        Checks and applies a copy of `data` from one range of memory to another.

        The source range must hold `data` in the memory committed by `root`, and
        the destination context must verify against `root`.

        Args:
            root: The root before the copy.
            data: The copied bytes, as found at `from_context.offset`.
            from_context: The context of the source range.
            to_context: The context of the destination range.
            to_proof: The proof of the destination range.

        Returns:
            The root after the copy.

        Raises:
            InvalidProofError: If the source or destination does not verify.
        """
        if not self.verify_range(root, from_context, data):
            raise InvalidProofError("fromContext", detail="source bytes are not committed by root")
        if not self.verify(root, to_context, to_proof):
            raise InvalidProofError("toContext", detail="destination proof does not match root")
        new_root = self.recompute(to_context, to_proof, data)
        logger.debug(
            "Copied %d bytes from %d to %d", len(data), from_context.offset, to_context.offset
        )
        return new_root


PROD_ROOT_COMPOSER = RootComposer(PROD_BLOB_HASHER)
"""A root composer for the production memory layout."""

TEST_ROOT_COMPOSER = RootComposer(TEST_BLOB_HASHER)
"""A root composer for the test memory layout."""
