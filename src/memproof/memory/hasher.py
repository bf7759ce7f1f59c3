"""
Leaf and node hashing for memory commitments.

Every digest in the tree is a SHA-256 output:

- a **leaf** is the hash of one blob of `BLOB_SIZE` bytes,
- a **node** is the hash of its two children concatenated, earlier byte range first.
"""

from __future__ import annotations

import hashlib

from memproof.types import Bytes32

from .constants import PROD_CONFIG, TEST_CONFIG, MemoryConfig


def hash_nodes(node_a: Bytes32, node_b: Bytes32) -> Bytes32:
    """Hashes two 32-byte nodes together using SHA-256."""
    return Bytes32(hashlib.sha256(node_a + node_b).digest())


class BlobHasher:
    """Hashes fixed-size memory blobs into leaf digests for a given config."""

    def __init__(self, config: MemoryConfig):
        """Initializes with a config."""
        self.config = config

    def hash_blob(self, blob: bytes) -> Bytes32:
        """
        Hashes one blob into a leaf digest.

        A blob shorter than `BLOB_SIZE` is zero-padded before hashing. This only
        happens for the final blob of a memory whose size is not a multiple of
        the blob size.

        Raises:
            ValueError: If the blob is longer than `BLOB_SIZE`.
        """
        blob_size = self.config.BLOB_SIZE
        if len(blob) > blob_size:
            raise ValueError(f"Blob of {len(blob)} bytes exceeds BLOB_SIZE {blob_size}")
        if len(blob) < blob_size:
            blob = bytes(blob) + b"\x00" * (blob_size - len(blob))
        return Bytes32(hashlib.sha256(blob).digest())

    def hash_blobs(self, data: bytes) -> list[Bytes32]:
        """Hashes `data` in consecutive `BLOB_SIZE` strides, padding the last one."""
        blob_size = self.config.BLOB_SIZE
        view = memoryview(data)
        return [self.hash_blob(view[i : i + blob_size]) for i in range(0, len(data), blob_size)]


PROD_BLOB_HASHER = BlobHasher(PROD_CONFIG)
"""A blob hasher for the production memory layout."""

TEST_BLOB_HASHER = BlobHasher(TEST_CONFIG)
"""A blob hasher for the test memory layout."""
