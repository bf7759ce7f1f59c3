"""Base model for data exchanged with the dispute contract."""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BoundaryModel(BaseModel):
    """
    A strict, frozen model whose JSON form uses camelCase keys.

    The field `start_buffer` is emitted as `startBuffer`, the name the contract
    decodes. Python callers may construct models with either name.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_default=True,
        extra="forbid",
        frozen=True,
        strict=True,
    )

    def replace(self, **changes: Any) -> Self:
        """Returns a re-validated copy with `changes` applied by field name."""
        return type(self).model_validate(self.model_dump() | changes)
