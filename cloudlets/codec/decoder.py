"""
Decoding of wire JSON into typed match rules.

Decoding is fail-fast: the first structural problem aborts the whole
ruleset and no partial result is returned. Semantic problems (bad status
code, percent out of range...) are left to the validator.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import pydantic

from cloudlets.core.errors import (
    DecodeError,
    InvalidDiscriminatorTypeError,
    MatchRulesDecodeError,
    MissingDiscriminatorError,
    UnsupportedRuleTypeError,
)
from cloudlets.schemas.match_rule import MATCH_RULE_HANDLERS, MatchRule, MatchRuleBase
from cloudlets.schemas.object_match_value import json_kind

logger = logging.getLogger(__name__)


def describe_pydantic_error(error: pydantic.ValidationError) -> str:
    """Render a pydantic error as a single line naming the first offending field."""
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    if location:
        return f"{location}: {first['msg']}"
    return first["msg"]


def decode_match_rule(entry: Any, index: int = 0) -> MatchRule:
    """
    Decode one element of a MatchRules array.

    Args:
        entry: The decoded JSON object of the rule
        index: Position of the rule in its array, used in error messages

    Returns:
        The typed rule selected by the entry's ``type`` field

    Raises:
        MatchRulesDecodeError: If the entry has no usable discriminator or
            its fields do not decode
    """
    if not isinstance(entry, dict):
        raise MatchRulesDecodeError(
            f"match rule entry should be a 'map', but was '{json_kind(entry)}'", index
        )
    if "type" not in entry:
        raise MissingDiscriminatorError(index)

    rule_type = entry["type"]
    if not isinstance(rule_type, str):
        raise InvalidDiscriminatorTypeError(index, rule_type)

    model = MATCH_RULE_HANDLERS.get(rule_type)
    if model is None:
        raise UnsupportedRuleTypeError(index, rule_type)

    try:
        return model.model_validate(entry)
    except DecodeError as e:
        raise MatchRulesDecodeError(e.message, index, e.details) from e
    except pydantic.ValidationError as e:
        raise MatchRulesDecodeError(describe_pydantic_error(e), index) from e


def decode_match_rules(data: str | bytes | list[Any]) -> list[MatchRule]:
    """
    Decode a MatchRules array.

    Accepts either raw JSON text or an already parsed list. Malformed JSON
    text raises the JSON parser's own error unchanged.

    Args:
        data: JSON text of the array, or the parsed array

    Returns:
        Typed rules in the order they appear on the wire

    Raises:
        json.JSONDecodeError: If the text is not valid JSON
        MatchRulesDecodeError: On the first entry that cannot be decoded
    """
    if isinstance(data, (str, bytes, bytearray)):
        data = json.loads(data)

    if data is None:
        return []
    if not isinstance(data, list):
        raise MatchRulesDecodeError(f"expected an array of match rules, but was '{json_kind(data)}'")

    rules = [decode_match_rule(entry, index) for index, entry in enumerate(data)]
    logger.debug("Decoded match rules", extra={"rule_count": len(rules)})
    return rules


def coerce_match_rules(value: Any) -> Any:
    """
    Accept typed rules as they are and decode anything else.

    Used by request and response models whose ``matchRules`` field may be
    populated either from Python objects or from wire JSON.
    """
    if value is None:
        return []
    if isinstance(value, list):
        return [
            rule if isinstance(rule, MatchRuleBase) else decode_match_rule(rule, index)
            for index, rule in enumerate(value)
        ]
    return decode_match_rules(value)
