"""Streaming Merkle commitments to VM memory with range-scoped proofs."""
