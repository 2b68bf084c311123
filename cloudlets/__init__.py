"""
Cloudlets SDK: cloudlet policy versions and their match-rule rulesets.

Usage:
    from cloudlets import MatchRuleER, decode_match_rules, validate_match_rules

    rules = decode_match_rules(payload)
    validate_match_rules(rules)
"""

from cloudlets.codec import (
    decode_match_rule,
    decode_match_rules,
    dumps_match_rules,
    encode_match_rules,
    format_validation_errors,
    validate_match_rule,
    validate_match_rules,
)
from cloudlets.core.errors import (
    APIError,
    CloudletsError,
    DecodeError,
    MatchCriteriaDecodeError,
    MatchRulesDecodeError,
    RequestError,
    ValidationError,
)
from cloudlets.core.session import Session
from cloudlets.schemas import (
    ForwardSettingsAS,
    ForwardSettingsFR,
    ForwardSettingsPR,
    MatchCriteriaAP,
    MatchCriteriaAS,
    MatchCriteriaER,
    MatchCriteriaFR,
    MatchCriteriaPR,
    MatchCriteriaRC,
    MatchRule,
    MatchRuleAP,
    MatchRuleAS,
    MatchRuleER,
    MatchRuleFR,
    MatchRulePR,
    MatchRuleRC,
    MatchRules,
    ObjectMatchValueObject,
    ObjectMatchValueObjectOptions,
    ObjectMatchValueRange,
    ObjectMatchValueSimple,
)
from cloudlets.schemas.policy_version import (
    CreatePolicyVersionRequest,
    DeletePolicyVersionRequest,
    GetPolicyVersionRequest,
    ListPolicyVersions,
    ListPolicyVersionsRequest,
    PolicyVersion,
    UpdatePolicyVersionRequest,
)
from cloudlets.services import PolicyVersions

__all__ = [
    "APIError",
    "CloudletsError",
    "CreatePolicyVersionRequest",
    "DecodeError",
    "DeletePolicyVersionRequest",
    "ForwardSettingsAS",
    "ForwardSettingsFR",
    "ForwardSettingsPR",
    "GetPolicyVersionRequest",
    "ListPolicyVersions",
    "ListPolicyVersionsRequest",
    "MatchCriteriaAP",
    "MatchCriteriaAS",
    "MatchCriteriaDecodeError",
    "MatchCriteriaER",
    "MatchCriteriaFR",
    "MatchCriteriaPR",
    "MatchCriteriaRC",
    "MatchRule",
    "MatchRuleAP",
    "MatchRuleAS",
    "MatchRuleER",
    "MatchRuleFR",
    "MatchRulePR",
    "MatchRuleRC",
    "MatchRules",
    "MatchRulesDecodeError",
    "ObjectMatchValueObject",
    "ObjectMatchValueObjectOptions",
    "ObjectMatchValueRange",
    "ObjectMatchValueSimple",
    "PolicyVersion",
    "PolicyVersions",
    "RequestError",
    "Session",
    "UpdatePolicyVersionRequest",
    "ValidationError",
    "decode_match_rule",
    "decode_match_rules",
    "dumps_match_rules",
    "encode_match_rules",
    "format_validation_errors",
    "validate_match_rule",
    "validate_match_rules",
]
