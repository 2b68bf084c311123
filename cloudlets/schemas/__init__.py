"""
Pydantic models for cloudlet match rules.

Policy version models live in ``cloudlets.schemas.policy_version``; they
decode rules through the codec package, which itself builds on the models
exported here.
"""

# Re-export schemas for convenient imports.
from .match_rule import ForwardSettingsAS as ForwardSettingsAS
from .match_rule import ForwardSettingsFR as ForwardSettingsFR
from .match_rule import ForwardSettingsPR as ForwardSettingsPR
from .match_rule import MatchCriteriaAP as MatchCriteriaAP
from .match_rule import MatchCriteriaAS as MatchCriteriaAS
from .match_rule import MatchCriteriaER as MatchCriteriaER
from .match_rule import MatchCriteriaFR as MatchCriteriaFR
from .match_rule import MatchCriteriaPR as MatchCriteriaPR
from .match_rule import MatchCriteriaRC as MatchCriteriaRC
from .match_rule import MatchRule as MatchRule
from .match_rule import MatchRuleAP as MatchRuleAP
from .match_rule import MatchRuleAS as MatchRuleAS
from .match_rule import MatchRuleER as MatchRuleER
from .match_rule import MatchRuleFR as MatchRuleFR
from .match_rule import MatchRulePR as MatchRulePR
from .match_rule import MatchRuleRC as MatchRuleRC
from .match_rule import MatchRules as MatchRules
from .object_match_value import ObjectMatchValueObject as ObjectMatchValueObject
from .object_match_value import (
    ObjectMatchValueObjectOptions as ObjectMatchValueObjectOptions,
)
from .object_match_value import ObjectMatchValueRange as ObjectMatchValueRange
from .object_match_value import ObjectMatchValueSimple as ObjectMatchValueSimple
