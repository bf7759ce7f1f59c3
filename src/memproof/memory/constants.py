"""
Defines the memory layout constants and configuration presets.

The production preset commits a 64 MiB address space in 1 KiB blobs, the layout
used by the dispute contract. The test preset keeps the same shape at a size
that pure-Python tests can hash in milliseconds.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing_extensions import Final, Self

from memproof.config import MEMPROOF_ENV


class MemoryConfig(BaseModel):
    """A model holding the layout constants for a memory commitment preset."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    MEMORY_SIZE: int = Field(gt=0)
    """The total number of bytes in the committed address space, `L`."""

    BLOB_SIZE: int = Field(gt=0)
    """The number of bytes hashed into a single leaf, `B`."""

    @model_validator(mode="after")
    def _check_blob_fits(self) -> Self:
        """A blob can never be larger than the memory it subdivides."""
        if self.BLOB_SIZE > self.MEMORY_SIZE:
            raise ValueError("BLOB_SIZE must not exceed MEMORY_SIZE")
        return self

    @property
    def NUM_BLOBS(self) -> int:  # noqa: N802
        """
        The number of leaves of a full memory, `ceil(L / B)`.

        The final blob is zero-padded when `L` is not a multiple of `B`.
        """
        return -(-self.MEMORY_SIZE // self.BLOB_SIZE)

    @property
    def MAX_FRONTIER_DEPTH(self) -> int:  # noqa: N802
        """
        The maximum number of peaks a streaming pass can hold at once.

        Equal to `ceil(log2(NUM_BLOBS)) + 1`, which is 17 for the production preset.
        """
        return (self.NUM_BLOBS - 1).bit_length() + 1


PROD_CONFIG: Final = MemoryConfig(
    MEMORY_SIZE=2**26,
    BLOB_SIZE=2**10,
)


TEST_CONFIG: Final = MemoryConfig(
    MEMORY_SIZE=2**14,
    BLOB_SIZE=2**6,
)


TARGET_CONFIG: Final = TEST_CONFIG if MEMPROOF_ENV == "test" else PROD_CONFIG
"""The preset selected by the `MEMPROOF_ENV` environment flag."""

DIGEST_LENGTH: Final = 32
"""The length in bytes of every leaf, peak and root digest."""
