"""
Blob-alignment arithmetic for byte ranges.

A range `[offset, offset + length)` rarely starts or ends on a blob boundary.
The *window* is the smallest run of whole blobs covering it:

```
        start_index     offset              offset+length     end_index
            |-- start pad --|====== range =======|-- end pad --|
            |    blob a     |  ...     ...       |  blob b-1   |
```

Both pads are bytes outside the range that still belong to a touched blob.
They are committed to unchanged by every mutation of the range.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from memproof.types import InvalidRangeError

from .constants import MemoryConfig


@dataclass(frozen=True)
class AlignedNode:
    """A complete subtree of `2**level` leaves starting at leaf `position`."""

    position: int
    level: int

    @property
    def size(self) -> int:
        """The number of leaves covered."""
        return 1 << self.level

    @property
    def end(self) -> int:
        """The leaf index one past the last covered leaf."""
        return self.position + self.size


def aligned_nodes(start: int, end: int) -> Iterator[AlignedNode]:
    """
    Splits the leaf range `[start, end)` into maximal aligned complete subtrees.

    At every step the largest node that both starts on a multiple of its own
    size and still fits in the range is taken. The nodes come out in leaf order.

    Examples:
        [0, 8)  -> (0, 3)
        [3, 11) -> (3, 0), (4, 2), (8, 1), (10, 0)
    """
    position = start
    while position < end:
        # Largest level that still fits in what remains.
        level = (end - position).bit_length() - 1
        # Leaf 0 is aligned to every level; otherwise cap by the trailing zeros.
        if position:
            level = min(level, (position & -position).bit_length() - 1)
        yield AlignedNode(position, level)
        position += 1 << level


@dataclass(frozen=True)
class Window:
    """The blob-aligned window of a byte range inside a memory layout."""

    offset: int
    length: int
    config: MemoryConfig

    @classmethod
    def for_range(cls, offset: int, length: int, config: MemoryConfig) -> Window:
        """
        Validates a byte range and builds its window.

        Raises:
            InvalidRangeError: If the range is empty, negative, or exceeds `MEMORY_SIZE`.
        """
        size = config.MEMORY_SIZE
        if offset < 0 or length < 0:
            raise InvalidRangeError(offset, length, size, detail="negative offset or length")
        if length == 0:
            raise InvalidRangeError(offset, length, size, detail="empty range")
        if offset + length > size:
            raise InvalidRangeError(offset, length, size, detail="range exceeds the address space")
        return cls(offset, length, config)

    @property
    def range_end(self) -> int:
        """The byte index one past the last byte of the range."""
        return self.offset + self.length

    @property
    def start_index(self) -> int:
        """The first byte of the first touched blob."""
        return self.offset - self.offset % self.config.BLOB_SIZE

    @property
    def end_index(self) -> int:
        """The first byte after the last touched blob, clamped to the memory end."""
        blob_size = self.config.BLOB_SIZE
        rounded = -(-self.range_end // blob_size) * blob_size
        return min(rounded, self.config.MEMORY_SIZE)

    @property
    def first_leaf(self) -> int:
        """The leaf index of the first touched blob."""
        return self.start_index // self.config.BLOB_SIZE

    @property
    def end_leaf(self) -> int:
        """The leaf index one past the last touched blob."""
        return -(-self.end_index // self.config.BLOB_SIZE)

    @property
    def start_pad_length(self) -> int:
        """The number of bytes between the first touched blob and the range."""
        return self.offset - self.start_index

    @property
    def end_pad_length(self) -> int:
        """The number of bytes between the range and the end of the last touched blob."""
        return self.end_index - self.range_end

    @property
    def is_single_blob(self) -> bool:
        """Whether the whole range falls inside one blob."""
        return self.end_leaf - self.first_leaf == 1

    @property
    def head_is_partial(self) -> bool:
        """
        Whether the first touched blob holds bytes outside the range.

        A single-blob window counts as partial when either pad is non-empty.
        """
        if self.is_single_blob:
            return self.start_pad_length > 0 or self.end_pad_length > 0
        return self.start_pad_length > 0

    @property
    def tail_is_partial(self) -> bool:
        """Whether a last touched blob distinct from the first holds bytes outside the range."""
        return not self.is_single_blob and self.end_pad_length > 0

    @property
    def interior_leaves(self) -> tuple[int, int]:
        """The leaf range of the touched blobs fully covered by the range."""
        start = self.first_leaf + int(self.head_is_partial)
        end = self.end_leaf - int(self.tail_is_partial)
        return start, max(start, end)

    @property
    def head_bytes_length(self) -> int:
        """The number of in-range bytes of a partial first blob, 0 when it is fully covered."""
        if not self.head_is_partial:
            return 0
        if self.is_single_blob:
            return self.length
        return self.start_index + self.config.BLOB_SIZE - self.offset

    @property
    def tail_bytes_length(self) -> int:
        """The number of in-range bytes of a partial last blob, 0 when not applicable."""
        if not self.tail_is_partial:
            return 0
        return self.range_end - (self.end_leaf - 1) * self.config.BLOB_SIZE

    @property
    def left_peak_count(self) -> int:
        """The number of frontier peaks left of the window."""
        return self.first_leaf.bit_count()

    def interior_nodes(self) -> list[AlignedNode]:
        """The aligned nodes of the fully covered touched blobs."""
        return list(aligned_nodes(*self.interior_leaves))

    def right_nodes(self) -> list[AlignedNode]:
        """The aligned nodes of all blobs right of the window."""
        return list(aligned_nodes(self.end_leaf, self.config.NUM_BLOBS))
