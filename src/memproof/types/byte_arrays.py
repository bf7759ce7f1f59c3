"""
Byte string types used at the proof boundary.

- `Bytes32`:  a digest of exactly 32 bytes (leaves, peaks, roots).
- `ByteData`: a byte string of any length (pads and edge blob bytes).

Both are immutable `bytes` subclasses. Inside pydantic models they accept raw
bytes or hex strings and serialize to `0x`-prefixed hex in JSON.
"""

from __future__ import annotations

from typing import Any, ClassVar, Iterable, SupportsIndex

from pydantic.annotated_handlers import GetCoreSchemaHandler
from pydantic_core import core_schema
from typing_extensions import Self


def _to_bytes(value: Any) -> bytes:
    """
    Normalize a byte-like value.

    Buffers (`bytes`, `bytearray`, `memoryview`) are copied, strings are read
    as hex with an optional `0x` prefix, and other iterables must yield
    integers in `[0, 255]`.

    Raises:
        ValueError: If the value has none of these forms.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        return bytes.fromhex(value.removeprefix("0x"))
    if isinstance(value, Iterable):
        return bytes(bytearray(value))
    raise ValueError(f"Cannot read {type(value).__name__} as bytes")


class ByteData(bytes):
    """
    An immutable byte string of any length.

    Lengths are checked against the window arithmetic by whoever consumes the
    value, not by the type.
    """

    def __new__(cls, value: Any = b"") -> Self:
        return super().__new__(cls, _to_bytes(value))

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """Accept instances as is, build everything else through the constructor."""
        return core_schema.union_schema(
            [
                core_schema.is_instance_schema(cls),
                core_schema.no_info_plain_validator_function(cls),
            ],
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda value: "0x" + bytes(value).hex(), when_used="json"
            ),
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.hex()})"

    def __hash__(self) -> int:
        return hash((type(self), bytes(self)))

    def hex(self, sep: str | bytes | None = None, bytes_per_sep: SupportsIndex = 1) -> str:
        """Lowercase hex of the raw bytes, without a prefix."""
        raw = bytes(self)
        return raw.hex() if sep is None else raw.hex(sep, bytes_per_sep)


class Bytes32(ByteData):
    """A 32-byte SHA-256 digest."""

    LENGTH: ClassVar[int] = 32

    def __new__(cls, value: Any = b"") -> Self:
        """
        Build a digest, rejecting any other length.

        Raises:
            ValueError: If the value is not exactly 32 bytes.
        """
        raw = _to_bytes(value)
        if len(raw) != cls.LENGTH:
            raise ValueError(f"{cls.__name__} expects exactly {cls.LENGTH} bytes, got {len(raw)}")
        return super().__new__(cls, raw)

    @classmethod
    def zero(cls) -> Self:
        """The all-zero digest."""
        return cls(b"\x00" * cls.LENGTH)


ZERO_HASH: Bytes32 = Bytes32.zero()
"""The root of an empty memory."""
