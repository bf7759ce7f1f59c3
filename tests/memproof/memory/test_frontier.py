"""Tests for the streaming Merkle frontier and whole-memory roots."""

from __future__ import annotations

import hashlib

import pytest

from memproof.memory import TEST_CONFIG, Frontier, MemoryCommitmentScheme, MemoryConfig
from memproof.memory.frontier import TEST_FRONTIER_ACCUMULATOR
from memproof.memory.hasher import TEST_BLOB_HASHER, hash_nodes
from memproof.memory.layout import aligned_nodes
from memproof.types import ZERO_HASH, Bytes32, InvalidProofError, InvalidRangeError


def _leaf(i: int) -> Bytes32:
    return Bytes32(hashlib.sha256(i.to_bytes(4, "little")).digest())


def _perfect_root(leaves: list[Bytes32]) -> Bytes32:
    """Pairwise hashing of a power-of-two layer down to one node."""
    layer = list(leaves)
    while len(layer) > 1:
        layer = [hash_nodes(layer[i], layer[i + 1]) for i in range(0, len(layer), 2)]
    return layer[0]


def reference_root(leaves: list[Bytes32]) -> Bytes32:
    """
    Independent root computation over a leaf list.

    The peaks are the perfect subtrees of the binary decomposition of the leaf
    count; they are folded from the last (lowest) one backwards.
    """
    if not leaves:
        return ZERO_HASH
    peaks = [
        _perfect_root(leaves[node.position : node.end]) for node in aligned_nodes(0, len(leaves))
    ]
    acc = peaks[-1]
    for peak in reversed(peaks[:-1]):
        acc = hash_nodes(peak, acc)
    return acc


def _push_all(count: int) -> Frontier:
    frontier = Frontier()
    for i in range(count):
        frontier.push(_leaf(i))
    return frontier


L = [_leaf(i) for i in range(8)]
H = hash_nodes


@pytest.mark.parametrize(
    "count, expected",
    [
        (1, L[0]),
        (2, H(L[0], L[1])),
        (3, H(H(L[0], L[1]), L[2])),
        (4, H(H(L[0], L[1]), H(L[2], L[3]))),
        (5, H(H(H(L[0], L[1]), H(L[2], L[3])), L[4])),
        (6, H(H(H(L[0], L[1]), H(L[2], L[3])), H(L[4], L[5]))),
        (7, H(H(H(L[0], L[1]), H(L[2], L[3])), H(H(L[4], L[5]), L[6]))),
        (8, H(H(H(L[0], L[1]), H(L[2], L[3])), H(H(L[4], L[5]), H(L[6], L[7])))),
    ],
    ids=[f"{n}-leaves" for n in range(1, 9)],
)
def test_hand_built_roots(count: int, expected: Bytes32) -> None:
    """Small roots match trees written out by hand, pinning merge and fold order."""
    assert _push_all(count).root() == expected


@pytest.mark.parametrize("count", [9, 31, 64, 79, 100, 255, 256])
def test_matches_reference_root(count: int) -> None:
    """Larger roots match the independent decomposition-based computation."""
    assert _push_all(count).root() == reference_root([_leaf(i) for i in range(count)])


def test_empty_frontier() -> None:
    """A frontier without leaves commits to the zero hash."""
    frontier = Frontier()
    assert frontier.root() == ZERO_HASH
    assert frontier.peaks() == []
    assert len(frontier) == 0


def test_peaks_follow_set_bits() -> None:
    """After six leaves the peaks sit at levels 2 and 1, highest first."""
    frontier = _push_all(6)
    assert Frontier.levels_for(6) == [2, 1]
    assert frontier.count == 6
    assert frontier.peaks() == [H(H(L[0], L[1]), H(L[2], L[3])), H(L[4], L[5])]
    assert repr(frontier) == "Frontier(count=6, levels=[2, 1])"


def test_aligned_push_equals_leaf_pushes() -> None:
    """Pushing a complete subtree in one step leaves the same state as its leaves."""
    by_leaf = _push_all(8)

    by_node = _push_all(4)
    by_node.push(H(H(L[4], L[5]), H(L[6], L[7])), level=2)

    assert by_node.count == by_leaf.count == 8
    assert by_node.peaks() == by_leaf.peaks()


def test_misaligned_push_is_rejected() -> None:
    """A level-1 node cannot follow an odd number of leaves."""
    frontier = _push_all(1)
    with pytest.raises(ValueError, match="not aligned"):
        frontier.push(H(L[1], L[2]), level=1)


def test_from_peaks_restores_state() -> None:
    """A frontier rebuilt from its peaks continues exactly like the original."""
    original = _push_all(5)
    restored = Frontier.from_peaks(5, original.peaks())
    for frontier in (original, restored):
        frontier.push(_leaf(5))
    assert restored.peaks() == original.peaks()
    assert restored.root() == original.root()


def test_from_peaks_rejects_wrong_count() -> None:
    """Five leaves leave two peaks, not three."""
    with pytest.raises(InvalidProofError) as excinfo:
        Frontier.from_peaks(5, [L[0], L[1], L[2]])
    assert excinfo.value.field == "startBuffer"
    assert excinfo.value.expected == 2
    assert excinfo.value.actual == 3


def test_frontier_depth_is_bounded() -> None:
    """The worst-case leaf count never exceeds MAX_FRONTIER_DEPTH peaks."""
    frontier = _push_all(TEST_CONFIG.NUM_BLOBS - 1)
    assert len(frontier) == TEST_CONFIG.NUM_BLOBS.bit_length() - 1
    assert len(frontier) <= TEST_CONFIG.MAX_FRONTIER_DEPTH


def test_compute_root_of_memory(test_memory: bytes) -> None:
    """The root of a full memory is the reference root of its blob digests."""
    leaves = TEST_BLOB_HASHER.hash_blobs(test_memory)
    assert len(leaves) == TEST_CONFIG.NUM_BLOBS
    assert TEST_FRONTIER_ACCUMULATOR.compute_root(test_memory) == reference_root(leaves)


def test_compute_root_of_ragged_memory() -> None:
    """A memory size that is not a multiple of the blob size zero-pads the last blob."""
    scheme = MemoryCommitmentScheme.for_config(MemoryConfig(MEMORY_SIZE=5000, BLOB_SIZE=64))
    memory = bytes((7 * i + 3) % 256 for i in range(5000))
    leaves = [hashlib.sha256(memory[i : i + 64]).digest() for i in range(0, 4992, 64)]
    leaves.append(hashlib.sha256(memory[4992:] + b"\x00" * 56).digest())
    assert scheme.compute_root(memory) == reference_root([Bytes32(leaf) for leaf in leaves])


def test_compute_root_of_empty_memory() -> None:
    """An empty memory commits to the zero hash."""
    assert TEST_FRONTIER_ACCUMULATOR.compute_root(b"") == ZERO_HASH


def test_compute_root_rejects_oversized_memory() -> None:
    """A memory larger than the address space cannot be committed."""
    with pytest.raises(InvalidRangeError):
        TEST_FRONTIER_ACCUMULATOR.compute_root(b"\x00" * (TEST_CONFIG.MEMORY_SIZE + 1))


def test_copy_is_independent() -> None:
    """Pushing onto a copy leaves the original untouched."""
    original = _push_all(3)
    snapshot = original.copy()
    snapshot.push(_leaf(3))

    assert original.count == 3
    assert original.peaks() == [H(L[0], L[1]), L[2]]
    assert snapshot.peaks() == [H(H(L[0], L[1]), H(L[2], L[3]))]
