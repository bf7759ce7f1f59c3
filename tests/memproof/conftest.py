"""Shared fixtures for memory commitment tests."""

from __future__ import annotations

from typing import Callable

import pytest

from memproof.memory import TEST_MEMORY_SCHEME, MemoryCommitmentScheme

GOLDEN_SEED = 18465164
"""Initial seed of the deterministic test memory."""


def generate_test_memory(size: int, seed: int = GOLDEN_SEED) -> bytes:
    """
    Generates the deterministic test memory.

    Each byte is taken after advancing `seed = seed * 7193 % 10247693`.
    """
    memory = bytearray(size)
    for i in range(size):
        seed = seed * 7193 % 10247693
        memory[i] = seed & 0xFF
    return bytes(memory)


def write_range(memory: bytes, offset: int, data: bytes) -> bytes:
    """Returns a copy of `memory` with `data` written at `offset`."""
    return memory[:offset] + data + memory[offset + len(data) :]


def flip_byte(data: bytes, index: int = 0) -> bytes:
    """Returns a copy of `data` with one bit of byte `index` flipped."""
    flipped = bytearray(data)
    flipped[index] ^= 0x01
    return bytes(flipped)


@pytest.fixture
def scheme() -> MemoryCommitmentScheme:
    """The scheme for the test memory layout (16 KiB in 64-byte blobs)."""
    return TEST_MEMORY_SCHEME


@pytest.fixture(scope="session")
def test_memory() -> bytes:
    """A full deterministic memory for the test layout."""
    return generate_test_memory(TEST_MEMORY_SCHEME.config.MEMORY_SIZE)


@pytest.fixture(scope="session")
def make_memory() -> Callable[..., bytes]:
    """The deterministic memory generator."""
    return generate_test_memory


@pytest.fixture(scope="session")
def write() -> Callable[[bytes, int, bytes], bytes]:
    """Writes bytes into a copy of a memory."""
    return write_range


@pytest.fixture(scope="session")
def flip() -> Callable[..., bytes]:
    """Flips one bit of a byte string."""
    return flip_byte
