"""
Data containers exchanged between the prover and the verifier of a range.

Both containers are immutable pydantic models. In JSON they use camelCase keys
and `0x`-prefixed hex strings, the shape the dispute contract consumes:

```
Context {offset, startPad, endPad, startBuffer[], endBuffer[]}
Proof   {length, startBytes, endBytes, hashes[]}
```
"""

from __future__ import annotations

from pydantic import Field

from memproof.types import ByteData, Bytes32, BoundaryModel


class MemoryContext(BoundaryModel):
    """
    Everything around a touched range that a mutation of the range leaves intact.

    The context is reused verbatim when the root is recomputed after new bytes
    are written to the range.
    """

    offset: int = Field(ge=0, description="The first byte of the range.")

    start_pad: ByteData = Field(
        default=ByteData(),
        description="Bytes of the first touched blob that precede the range.",
    )

    end_pad: ByteData = Field(
        default=ByteData(),
        description="Bytes of the last touched blob that follow the range.",
    )

    start_buffer: list[Bytes32] = Field(
        default_factory=list,
        description="Frontier peaks of all blobs left of the window, highest level first.",
    )

    end_buffer: list[Bytes32] = Field(
        default_factory=list,
        description="Aligned subtree digests of all blobs right of the window, in byte order.",
    )


class MemoryProof(BoundaryModel):
    """
    The minimal data authenticating the old contents of a touched range.

    With it a verifier checks a context against a published root without being
    given the bytes of the range itself.
    """

    length: int = Field(gt=0, description="The number of bytes in the range.")

    start_bytes: ByteData = Field(
        default=ByteData(),
        description="In-range bytes of a partially covered first blob.",
    )

    end_bytes: ByteData = Field(
        default=ByteData(),
        description="In-range bytes of a partially covered last blob.",
    )

    hashes: list[Bytes32] = Field(
        default_factory=list,
        description="Aligned subtree digests of the fully covered blobs, in byte order.",
    )


class ContextProof(BoundaryModel):
    """A context and its proof, bundled for storage in a single JSON document."""

    context: MemoryContext
    proof: MemoryProof
