"""
Second-level tagged union carried by match criteria in ``objectMatchValue``.

The ``type`` field selects one of three shapes:
- simple: a list of strings
- range: a pair of integers (Application Segmentation only)
- object: a named attribute with an options block
"""

from __future__ import annotations

from typing import Any, ClassVar, Union

from pydantic import Field, StrictBool, StrictInt, StrictStr

from cloudlets.core.errors import ObjectMatchValueTypeError
from cloudlets.domain.enums import ObjectMatchValueType
from cloudlets.schemas.base import CloudletsModel


class ObjectMatchValueSimple(CloudletsModel):
    kind: ClassVar[ObjectMatchValueType] = ObjectMatchValueType.SIMPLE

    type: StrictStr = ObjectMatchValueType.SIMPLE.value
    value: list[StrictStr] = Field(default_factory=list)


class ObjectMatchValueRange(CloudletsModel):
    kind: ClassVar[ObjectMatchValueType] = ObjectMatchValueType.RANGE

    type: StrictStr = ObjectMatchValueType.RANGE.value
    value: list[StrictInt] = Field(default_factory=list)


class ObjectMatchValueObjectOptions(CloudletsModel):
    value: list[StrictStr] = Field(default_factory=list)
    value_has_wildcard: StrictBool = False
    value_case_sensitive: StrictBool = False
    value_escaped: StrictBool = False


class ObjectMatchValueObject(CloudletsModel):
    kind: ClassVar[ObjectMatchValueType] = ObjectMatchValueType.OBJECT

    name: StrictStr = ""
    type: StrictStr = ObjectMatchValueType.OBJECT.value
    name_case_sensitive: StrictBool = False
    name_has_wildcard: StrictBool = False
    options: ObjectMatchValueObjectOptions | None = None


ObjectMatchValue = Union[ObjectMatchValueSimple, ObjectMatchValueRange, ObjectMatchValueObject]

OBJECT_MATCH_VALUE_HANDLERS: dict[str, type[CloudletsModel]] = {
    ObjectMatchValueType.SIMPLE.value: ObjectMatchValueSimple,
    ObjectMatchValueType.RANGE.value: ObjectMatchValueRange,
    ObjectMatchValueType.OBJECT.value: ObjectMatchValueObject,
}


def json_kind(value: Any) -> str:
    """Name the JSON kind of a decoded value, as used in decode error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "map"
    return type(value).__name__


def resolve_object_match_value_type(value: Any) -> str:
    """
    Read the discriminator of a raw objectMatchValue.

    Args:
        value: The decoded JSON value found under ``objectMatchValue``

    Returns:
        The ``type`` string, which may still be a kind the caller rejects

    Raises:
        ObjectMatchValueTypeError: If the value is not an object, has no
            ``type`` or ``type`` is not a string
    """
    if not isinstance(value, dict):
        raise ObjectMatchValueTypeError(
            f"structure of objectMatchValue should be 'map', but was '{json_kind(value)}'"
        )
    if "type" not in value:
        raise ObjectMatchValueTypeError("objectMatchValue should contain 'type' field")
    type_name = value["type"]
    if not isinstance(type_name, str):
        raise ObjectMatchValueTypeError("'type' should be a string")
    return type_name
