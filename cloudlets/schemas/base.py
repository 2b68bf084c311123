from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class CloudletsModel(BaseModel):
    """
    Base for every wire model.

    Fields are snake_case in Python and camelCase on the wire. Unknown wire
    fields are dropped. A JSON null on any field falls back to the field's
    default, so ``"matchURL": null`` reads as an empty string.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def normalize_input(cls, data: Any) -> Any:
        """Drop null values and unwrap enum members before field validation."""
        if not isinstance(data, dict):
            return data
        return {
            key: value.value if isinstance(value, Enum) else value
            for key, value in data.items()
            if value is not None
        }
