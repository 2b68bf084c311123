"""
Ruleset codec for cloudlet match rules.

Key Components:
- decoder: wire JSON -> typed rules, fail-fast
- encoder: typed rules -> wire JSON, omitting empty optional fields
- validator: aggregated field and cross-field checks
- report: deterministic rendering of validation error trees
"""

from cloudlets.codec.decoder import decode_match_rule, decode_match_rules
from cloudlets.codec.encoder import dumps_match_rules, encode_match_rules, encode_model
from cloudlets.codec.report import format_validation_errors
from cloudlets.codec.validator import (
    collect_match_rules_errors,
    validate_match_rule,
    validate_match_rules,
)

__all__ = [
    "decode_match_rule",
    "decode_match_rules",
    "dumps_match_rules",
    "encode_match_rules",
    "encode_model",
    "format_validation_errors",
    "collect_match_rules_errors",
    "validate_match_rule",
    "validate_match_rules",
]
