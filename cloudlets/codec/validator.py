"""
Validation of typed match rules.

Unlike decoding, validation never stops at the first problem: every rule
and every criteria entry is checked and all violations are collected into
one error tree, rendered by ``format_validation_errors``.

Each field is checked against an ordered list of checks and only the first
failing check is reported for that field. Checks other than ``required``
skip empty values, so an optional field that is left empty never fails a
length or range check.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from enum import Enum
from typing import Any

from cloudlets.codec.encoder import is_empty
from cloudlets.codec.report import ErrorTree, format_validation_errors, prune_errors
from cloudlets.core.errors import ValidationError
from cloudlets.domain.enums import (
    REDIRECT_STATUS_CODES,
    AllowDeny,
    CheckIPs,
    MatchOperator,
    MatchType,
    ObjectMatchValueType,
    UseRelativeURL,
)
from cloudlets.schemas.match_rule import (
    MatchCriteria,
    MatchCriteriaAP,
    MatchCriteriaAS,
    MatchCriteriaER,
    MatchCriteriaFR,
    MatchCriteriaPR,
    MatchCriteriaRC,
    MatchRuleAP,
    MatchRuleAS,
    MatchRuleBase,
    MatchRuleER,
    MatchRuleFR,
    MatchRulePR,
    MatchRuleRC,
)
from cloudlets.schemas.object_match_value import (
    ObjectMatchValueObject,
    ObjectMatchValueRange,
    ObjectMatchValueSimple,
)

logger = logging.getLogger(__name__)

MAX_MATCH_RULES = 5000
MAX_FIELD_LENGTH = 8192

Check = Callable[[Any], "str | None"]


# ============================================================================
# Field checks
# ============================================================================


def _text(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def required(message: str = "cannot be blank") -> Check:
    return lambda value: message if is_empty(value) else None


def required_when(condition: bool, message: str) -> Check:
    return lambda value: message if condition and is_empty(value) else None


def empty_when(condition: bool, message: str) -> Check:
    return lambda value: message if condition and not is_empty(value) else None


def length(minimum: int, maximum: int) -> Check:
    if minimum == 0:
        message = f"the length must be no more than {maximum}"
    else:
        message = f"the length must be between {minimum} and {maximum}"

    def check(value: Any) -> str | None:
        if is_empty(value):
            return None
        return message if not minimum <= len(value) <= maximum else None

    return check


def min_value(threshold: int) -> Check:
    return lambda value: (
        f"must be no less than {threshold}" if not is_empty(value) and value < threshold else None
    )


def max_value(threshold: int) -> Check:
    return lambda value: (
        f"must be no greater than {threshold}" if not is_empty(value) and value > threshold else None
    )


def one_of(allowed: Sequence[Any], message: str) -> Check:
    values = {_text(item) for item in allowed}
    return lambda value: message if not is_empty(value) and _text(value) not in values else None


def check(value: Any, *checks: Check) -> str | None:
    """Run checks in order and return the first failure message."""
    for rule in checks:
        message = rule(value)
        if message:
            return message
    return None


def _type_literal(value: str, literal: str) -> str | None:
    return check(
        value,
        required(),
        one_of([literal], f"value '{_text(value)}' is invalid. Must be: '{literal}'"),
    )


def _quoted(values: Sequence[Any]) -> str:
    return ", ".join(f"'{_text(item)}'" for item in values)


# ============================================================================
# Object match values
# ============================================================================


def _validate_simple(value: ObjectMatchValueSimple) -> ErrorTree:
    return {
        "Type": check(
            value.type,
            one_of(["simple"], f"value '{_text(value.type)}' is invalid. Must be: 'simple'"),
        )
    }


def _validate_range(value: ObjectMatchValueRange) -> ErrorTree:
    return {
        "Type": check(
            value.type,
            one_of(["range"], f"value '{_text(value.type)}' is invalid. Must be: 'range'"),
        )
    }


def _validate_object(value: ObjectMatchValueObject) -> ErrorTree:
    return {
        "Name": check(value.name, required(), length(0, MAX_FIELD_LENGTH)),
        "Type": check(
            value.type,
            required(),
            one_of(["object"], f"value '{_text(value.type)}' is invalid. Must be: 'object'"),
        ),
    }


OBJECT_MATCH_VALUE_VALIDATORS: dict[type, Callable[[Any], ErrorTree]] = {
    ObjectMatchValueSimple: _validate_simple,
    ObjectMatchValueRange: _validate_range,
    ObjectMatchValueObject: _validate_object,
}


# ============================================================================
# Match criteria
# ============================================================================

_BASIC_MATCH_TYPES = (
    MatchType.HEADER,
    MatchType.HOSTNAME,
    MatchType.PATH,
    MatchType.EXTENSION,
    MatchType.QUERY,
    MatchType.COOKIE,
    MatchType.DEVICE_CHARACTERISTICS,
    MatchType.CLIENT_IP,
    MatchType.CONTINENT,
    MatchType.COUNTRY_CODE,
    MatchType.REGION_CODE,
    MatchType.PROTOCOL,
    MatchType.METHOD,
    MatchType.PROXY,
)
_REGEX_MATCH_TYPES = _BASIC_MATCH_TYPES[:5] + (MatchType.REGEX,) + _BASIC_MATCH_TYPES[5:]
_RANGE_MATCH_TYPES = _BASIC_MATCH_TYPES[:5] + (MatchType.RANGE, MatchType.REGEX) + _BASIC_MATCH_TYPES[5:]

# criteria model -> (allowed match types, match type required, empty listed as allowed)
CRITERIA_MATCH_TYPES: dict[type[MatchCriteria], tuple[tuple[MatchType, ...], bool, bool]] = {
    MatchCriteriaPR: (_BASIC_MATCH_TYPES, False, False),
    MatchCriteriaER: (_REGEX_MATCH_TYPES, False, True),
    MatchCriteriaFR: (_REGEX_MATCH_TYPES, True, False),
    MatchCriteriaAP: (_BASIC_MATCH_TYPES, False, False),
    MatchCriteriaAS: (_RANGE_MATCH_TYPES, False, False),
    MatchCriteriaRC: (_BASIC_MATCH_TYPES, True, False),
}

_OBJECT_MATCH_VALUE_CLASSES = {
    ObjectMatchValueType.SIMPLE: ObjectMatchValueSimple,
    ObjectMatchValueType.RANGE: ObjectMatchValueRange,
    ObjectMatchValueType.OBJECT: ObjectMatchValueObject,
}


def _kinds_sentence(kinds: Sequence[ObjectMatchValueType]) -> str:
    quoted = [f"'{kind.value}'" for kind in kinds]
    return ", ".join(quoted[:-1]) + f" or {quoted[-1]}"


def _object_match_value_kind(criteria: MatchCriteria) -> Check:
    allowed = tuple(_OBJECT_MATCH_VALUE_CLASSES[kind] for kind in criteria.object_match_value_kinds)
    message = "type {} is invalid. Must be one of: " + _kinds_sentence(criteria.object_match_value_kinds)
    return lambda value: (
        message.format(type(value).__name__)
        if value is not None and not isinstance(value, allowed)
        else None
    )


def validate_match_criteria(criteria: MatchCriteria) -> ErrorTree:
    """Collect the errors of a single criteria entry."""
    match_types, type_required, empty_allowed = CRITERIA_MATCH_TYPES[type(criteria)]
    match_type_message = f"value '{_text(criteria.match_type)}' is invalid. Must be one of: {_quoted(match_types)}"
    if empty_allowed:
        match_type_message += " or '' (empty)"
    match_type_checks: list[Check] = [required()] if type_required else []
    match_type_checks.append(one_of(match_types, match_type_message))

    has_object_value = criteria.object_match_value is not None
    has_match_value = not is_empty(criteria.match_value)

    errors: ErrorTree = {
        "MatchType": check(criteria.match_type, *match_type_checks),
        "MatchValue": check(
            criteria.match_value,
            length(1, MAX_FIELD_LENGTH),
            required_when(not has_object_value, "cannot be blank when ObjectMatchValue is blank"),
            empty_when(has_object_value, "must be blank when ObjectMatchValue is set"),
        ),
        "MatchOperator": check(
            criteria.match_operator,
            one_of(
                list(MatchOperator),
                f"value '{_text(criteria.match_operator)}' is invalid. "
                "Must be one of: 'contains', 'exists', 'equals' or '' (empty)",
            ),
        ),
        "CheckIPs": check(
            criteria.check_ips,
            one_of(
                list(CheckIPs),
                f"value '{_text(criteria.check_ips)}' is invalid. "
                "Must be one of: 'CONNECTING_IP', 'XFF_HEADERS', 'CONNECTING_IP XFF_HEADERS' or '' (empty)",
            ),
        ),
    }

    omv = criteria.object_match_value
    omv_error = check(
        omv,
        required_when(not has_match_value, "cannot be blank when MatchValue is blank"),
        empty_when(has_match_value, "must be blank when MatchValue is set"),
        _object_match_value_kind(criteria),
    )
    if omv_error:
        errors["ObjectMatchValue"] = omv_error
    elif omv is not None:
        errors["ObjectMatchValue"] = OBJECT_MATCH_VALUE_VALIDATORS[type(omv)](omv)

    return prune_errors(errors)


# ============================================================================
# Match rules
# ============================================================================


def _common_rule_errors(rule: MatchRuleBase) -> ErrorTree:
    errors: ErrorTree = {
        "Type": _type_literal(rule.type, rule.rule_type.value),
        "Name": check(rule.name, length(0, MAX_FIELD_LENGTH)),
        "Start": check(rule.start, min_value(0)),
        "End": check(rule.end, min_value(0)),
        "MatchURL": check(rule.match_url, length(0, MAX_FIELD_LENGTH)),
        "Matches": {
            index: validate_match_criteria(criteria) for index, criteria in enumerate(rule.matches)
        },
    }
    if rule.matches and rule.matches_always:
        errors["Matches/MatchesAlways"] = 'only one of [ "Matches", "MatchesAlways" ] can be specified'
    return errors


def _validate_pr(rule: MatchRulePR) -> ErrorTree:
    settings = rule.forward_settings
    return {
        "ForwardSettings.OriginID": check(settings.origin_id, required(), length(0, MAX_FIELD_LENGTH)),
        "ForwardSettings.Percent": check(settings.percent, required(), min_value(1), max_value(100)),
    }


def _validate_er(rule: MatchRuleER) -> ErrorTree:
    return {
        "RedirectURL": check(rule.redirect_url, required(), length(1, MAX_FIELD_LENGTH)),
        "UseRelativeURL": check(
            rule.use_relative_url,
            one_of(
                list(UseRelativeURL),
                f"value '{_text(rule.use_relative_url)}' is invalid. "
                "Must be one of: 'none', 'copy_scheme_hostname', 'relative_url' or '' (empty)",
            ),
        ),
        "StatusCode": check(
            rule.status_code,
            required(),
            one_of(
                REDIRECT_STATUS_CODES,
                f"value '{_text(rule.status_code)}' is invalid. Must be one of: 301, 302, 303, 307 or 308",
            ),
        ),
    }


def _validate_forward_rewrite(rule: MatchRuleFR | MatchRuleAS) -> ErrorTree:
    settings = rule.forward_settings
    return {
        "ForwardSettings.PathAndQS": check(settings.path_and_qs, length(1, MAX_FIELD_LENGTH)),
        "ForwardSettings.OriginID": check(settings.origin_id, length(0, MAX_FIELD_LENGTH)),
    }


def _pass_through_percent(value: float | None) -> str | None:
    if value is None:
        return "cannot be blank"
    if value < -1:
        return "must be no less than -1"
    if value > 100:
        return "must be no greater than 100"
    return None


def _validate_ap(rule: MatchRuleAP) -> ErrorTree:
    return {"PassThroughPercent": _pass_through_percent(rule.pass_through_percent)}


def _validate_rc(rule: MatchRuleRC) -> ErrorTree:
    return {
        "AllowDeny": check(
            rule.allow_deny,
            required(),
            one_of(
                list(AllowDeny),
                f"value '{_text(rule.allow_deny)}' is invalid. Must be one of: 'allow', 'deny' or 'denybranded'",
            ),
        )
    }


RULE_VALIDATORS: dict[type[MatchRuleBase], Callable[[Any], ErrorTree]] = {
    MatchRulePR: _validate_pr,
    MatchRuleER: _validate_er,
    MatchRuleFR: _validate_forward_rewrite,
    MatchRuleAP: _validate_ap,
    MatchRuleAS: _validate_forward_rewrite,
    MatchRuleRC: _validate_rc,
}


def collect_match_rule_errors(rule: MatchRuleBase) -> ErrorTree:
    """Collect the errors of one rule and its criteria, keyed by field name."""
    validate_variant = RULE_VALIDATORS.get(type(rule))
    if validate_variant is None:
        return {"Type": f"type {type(rule).__name__} is not a supported match rule"}
    errors = _common_rule_errors(rule)
    errors.update(validate_variant(rule))
    return prune_errors(errors)


def collect_match_rules_errors(rules: Sequence[MatchRuleBase]) -> ErrorTree:
    """
    Collect the errors of a whole ruleset.

    Returns:
        ``{"MatchRules": ...}`` holding either the ruleset length error or
        the per-rule trees keyed by rule index; empty when the ruleset is valid
    """
    length_error = check(list(rules), length(0, MAX_MATCH_RULES))
    if length_error:
        return {"MatchRules": length_error}
    return prune_errors(
        {"MatchRules": {index: collect_match_rule_errors(rule) for index, rule in enumerate(rules)}}
    )


def validate_match_rule(rule: MatchRuleBase) -> None:
    """
    Validate a single match rule.

    Raises:
        ValidationError: With every violation found in the rule
    """
    errors = collect_match_rule_errors(rule)
    if errors:
        raise ValidationError(format_validation_errors(errors), details={"errors": errors})


def validate_match_rules(rules: Sequence[MatchRuleBase]) -> None:
    """
    Validate a whole ruleset.

    Every rule and criteria entry is checked; returning normally is the only
    success signal.

    Raises:
        ValidationError: With every violation found, in rule index order
    """
    errors = collect_match_rules_errors(rules)
    if errors:
        logger.debug("Match rules failed validation", extra={"rule_count": len(rules)})
        raise ValidationError(format_validation_errors(errors), details={"errors": errors})
