"""
Encoding of typed match rules into wire JSON.

The API distinguishes between fields it wants to see even when empty (for
example ``forwardSettings``, ``statusCode`` or ``passThroughPercent``) and
fields that are left out when they carry no value. The tables below list,
per model, the fields dropped when empty; every other field is always sent.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel

from cloudlets.schemas.match_rule import (
    ForwardSettingsFR,
    MatchCriteria,
    MatchRuleBase,
    MatchRuleER,
)
from cloudlets.schemas.object_match_value import (
    ObjectMatchValueObject,
    ObjectMatchValueObjectOptions,
    ObjectMatchValueRange,
    ObjectMatchValueSimple,
)

_RULE_OMIT_EMPTY = frozenset(
    {"name", "type", "start", "end", "id", "matches", "match_url", "disabled", "matches_always"}
)

# Looked up through the model's MRO, most specific class first
OMIT_EMPTY: dict[type[BaseModel], frozenset[str]] = {
    MatchRuleER: _RULE_OMIT_EMPTY | {"use_relative_url"},
    MatchRuleBase: _RULE_OMIT_EMPTY,
    ForwardSettingsFR: frozenset({"path_and_qs", "use_incoming_query_string", "origin_id"}),
    MatchCriteria: frozenset(
        {"match_type", "match_value", "match_operator", "check_ips", "object_match_value"}
    ),
    ObjectMatchValueSimple: frozenset({"value"}),
    ObjectMatchValueRange: frozenset({"value"}),
    ObjectMatchValueObject: frozenset({"options"}),
    ObjectMatchValueObjectOptions: frozenset(
        {"value", "value_has_wildcard", "value_case_sensitive", "value_escaped"}
    ),
}


def _omit_empty_fields(model_cls: type[BaseModel]) -> frozenset[str]:
    for cls in model_cls.__mro__:
        if cls in OMIT_EMPTY:
            return OMIT_EMPTY[cls]
    return frozenset()


def is_empty(value: Any) -> bool:
    """
    Whether a value is the zero value of its wire type (models never are).

    Shared by the encoder, which omits such fields, and the validator, which
    treats them as blank.
    """
    if isinstance(value, BaseModel):
        return False
    return value is None or value == "" or value == 0 or value is False or value == []


def encode_value(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return encode_model(value)
    if isinstance(value, list):
        return [encode_value(item) for item in value]
    if isinstance(value, Enum):
        return value.value
    return value


def encode_model(model: BaseModel) -> dict[str, Any]:
    """
    Encode a wire model into a JSON-ready dict keyed by wire names.

    Args:
        model: Any match rule, criteria, settings or objectMatchValue model

    Returns:
        Dict with wire field names, empty optional fields removed
    """
    omit = _omit_empty_fields(type(model))
    encoded: dict[str, Any] = {}
    for name, field in type(model).model_fields.items():
        value = getattr(model, name)
        if name in omit and is_empty(value):
            continue
        encoded[field.alias or name] = encode_value(value)
    return encoded


def encode_match_rules(rules: list[MatchRuleBase]) -> list[dict[str, Any]]:
    """Encode a ruleset, preserving rule order."""
    return [encode_model(rule) for rule in rules]


def dumps_match_rules(rules: list[MatchRuleBase]) -> str:
    """Encode a ruleset as JSON text."""
    return json.dumps(encode_match_rules(rules))
