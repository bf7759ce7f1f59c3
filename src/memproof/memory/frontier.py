"""
Streaming Merkle frontier over the leaves of a memory.

### The frontier

A streaming pass never holds the whole tree. After `n` leaves it only keeps the
roots of the complete subtrees that have no sibling yet, one per set bit of `n`:

```
    n = 6 = 0b110        peaks:  level 2 -> leaves [0, 4)
                                 level 1 -> leaves [4, 6)
```

Pushing a new leaf works like incrementing a binary counter. The leaf lands at
level 0, and while a peak already sits at that level the two are merged into a
single peak one level up, the earlier byte range always hashed first. A run of
set bits turns into one higher bit.

### The root

Once every leaf has been pushed, the surviving peaks are folded into the root
starting from the lowest level: the accumulator is hashed *behind* each next
higher peak, `acc = H(peak || acc)`. For a power-of-two leaf count a single peak
survives and is the root itself.

### Aligned nodes

A complete subtree of height `h` may be pushed in one step instead of leaf by
leaf, provided the frontier currently covers a multiple of `2**h` leaves. The
resulting state is identical, which is what lets proofs stand in a single
digest for a whole block of untouched memory.
"""

from __future__ import annotations

from typing import Sequence

from memproof.types import ZERO_HASH, Bytes32, InvalidProofError, InvalidRangeError

from .hasher import PROD_BLOB_HASHER, TEST_BLOB_HASHER, BlobHasher, hash_nodes


class Frontier:
    """
    A level-indexed map of peak digests and the number of leaves they cover.

    Invariant: `level in peaks` iff bit `level` of `count` is set.
    """

    def __init__(self, count: int = 0, peaks: dict[int, Bytes32] | None = None):
        """Initializes an empty frontier, or one at `count` leaves holding `peaks`."""
        self.count = count
        self._peaks: dict[int, Bytes32] = dict(peaks or {})

    @classmethod
    def from_peaks(cls, count: int, peaks: Sequence[Bytes32]) -> Frontier:
        """
        Rebuilds the frontier of a pass that has consumed `count` leaves.

        Args:
            count: The number of leaves the peaks cover.
            peaks: The peak digests, highest level (earliest bytes) first.

        Raises:
            InvalidProofError: If the number of peaks does not match the set bits of `count`.
        """
        levels = cls.levels_for(count)
        if len(peaks) != len(levels):
            raise InvalidProofError("startBuffer", expected=len(levels), actual=len(peaks))
        return cls(count, dict(zip(levels, peaks, strict=True)))

    @staticmethod
    def levels_for(count: int) -> list[int]:
        """The levels holding a peak after `count` leaves, highest first."""
        return [level for level in reversed(range(count.bit_length())) if count >> level & 1]

    def push(self, node: Bytes32, level: int = 0) -> None:
        """
        Appends a complete subtree of height `level` and carry-merges equal peaks.

        Raises:
            ValueError: If the frontier is not aligned to a multiple of `2**level` leaves.
        """
        if self.count % (1 << level) != 0:
            raise ValueError(
                f"Cannot push a level-{level} node after {self.count} leaves: not aligned"
            )

        self.count += 1 << level

        # Carry: each occupied level absorbs the new node as its right child.
        while level in self._peaks:
            node = hash_nodes(self._peaks.pop(level), node)
            level += 1
        self._peaks[level] = node

    def peaks(self) -> list[Bytes32]:
        """The current peak digests, highest level (earliest bytes) first."""
        return [self._peaks[level] for level in sorted(self._peaks, reverse=True)]

    def root(self) -> Bytes32:
        """
        Folds the surviving peaks into a single digest.

        Returns `ZERO_HASH` for a frontier that has not consumed any leaf.
        """
        if not self._peaks:
            return ZERO_HASH
        levels = sorted(self._peaks)
        acc = self._peaks[levels[0]]
        for level in levels[1:]:
            acc = hash_nodes(self._peaks[level], acc)
        return acc

    def copy(self) -> Frontier:
        """Returns an independent snapshot of this frontier."""
        return Frontier(self.count, self._peaks)

    def __len__(self) -> int:
        """The number of peaks currently held."""
        return len(self._peaks)

    def __repr__(self) -> str:
        return f"Frontier(count={self.count}, levels={sorted(self._peaks, reverse=True)})"


class FrontierAccumulator:
    """Computes the root of a whole memory in one streaming pass."""

    def __init__(self, hasher: BlobHasher):
        """Initializes with the blob hasher of the target memory layout."""
        self.hasher = hasher
        self.config = hasher.config

    def accumulate(self, memory: bytes, frontier: Frontier | None = None) -> Frontier:
        """
        Pushes every blob of `memory` onto `frontier` (a fresh one by default).

        Returns:
            The frontier after the last blob.
        """
        frontier = Frontier() if frontier is None else frontier
        for leaf in self.hasher.hash_blobs(memory):
            frontier.push(leaf)
        return frontier

    def compute_root(self, memory: bytes) -> Bytes32:
        """
        Computes the commitment to `memory`.

        Raises:
            InvalidRangeError: If `memory` is larger than `MEMORY_SIZE`.
        """
        if len(memory) > self.config.MEMORY_SIZE:
            raise InvalidRangeError(
                0, len(memory), self.config.MEMORY_SIZE, detail="memory exceeds the address space"
            )
        return self.accumulate(memory).root()


PROD_FRONTIER_ACCUMULATOR = FrontierAccumulator(PROD_BLOB_HASHER)
"""A frontier accumulator for the production memory layout."""

TEST_FRONTIER_ACCUMULATOR = FrontierAccumulator(TEST_BLOB_HASHER)
"""A frontier accumulator for the test memory layout."""
