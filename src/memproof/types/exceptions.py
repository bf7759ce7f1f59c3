"""Exception hierarchy for memory commitments and range proofs."""

from __future__ import annotations


class MemoryProofError(Exception):
    """
    Base exception for all memory commitment errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class InvalidRangeError(MemoryProofError):
    """
    Raised when a byte range does not fit the committed memory.

    Attributes:
        offset: The first byte of the range.
        length: The number of bytes in the range.
        memory_size: The total size of the committed memory.
    """

    def __init__(
        self,
        offset: int,
        length: int,
        memory_size: int,
        *,
        detail: str | None = None,
    ) -> None:
        self.offset = offset
        self.length = length
        self.memory_size = memory_size

        msg = f"Invalid range [{offset}, {offset + length}) for memory of {memory_size} bytes"
        if detail:
            msg = f"{msg}: {detail}"

        super().__init__(msg)


class InvalidProofError(MemoryProofError):
    """
    Raised when a context or proof has the wrong shape for its range.

    The dispute protocol attributes this failure to the submitting party.

    Attributes:
        field: The offending field (camelCase boundary name).
        expected: The expected length or count.
        actual: The length or count received.
    """

    def __init__(
        self,
        field: str,
        *,
        expected: int | None = None,
        actual: int | None = None,
        detail: str | None = None,
    ) -> None:
        self.field = field
        self.expected = expected
        self.actual = actual

        if expected is not None and actual is not None:
            msg = f"Invalid proof: {field} requires {expected} entries, got {actual}"
        elif detail:
            msg = f"Invalid proof: {field}: {detail}"
        else:
            msg = f"Invalid proof: malformed {field}"

        super().__init__(msg)
