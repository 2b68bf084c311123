"""
Typed match rules for the six supported cloudlets.

A ruleset (``MatchRules``) is an ordered list whose entries are tagged by
their ``type`` field. Each cloudlet has its own rule model and its own
criteria model; criteria models differ in which objectMatchValue kinds they
accept when decoding.

Fields that hold enumerated wire values (``allowDeny``, ``matchOperator``,
``useRelativeUrl``...) are plain strings so that a value the API does not
accept can still be represented and reported by validation.

Scalar fields are strict: a wire value of the wrong JSON type (``"301"``
for ``statusCode``, ``"true"`` for ``disabled``) fails the decode instead
of being converted. Integers are accepted where a float is expected.
"""

from __future__ import annotations

from typing import Any, ClassVar, Union

from pydantic import Field, StrictBool, StrictFloat, StrictInt, StrictStr, field_validator

from cloudlets.core.errors import MatchCriteriaDecodeError, ObjectMatchValueTypeError
from cloudlets.domain.enums import MatchRuleType, ObjectMatchValueType
from cloudlets.schemas.base import CloudletsModel
from cloudlets.schemas.object_match_value import (
    OBJECT_MATCH_VALUE_HANDLERS,
    ObjectMatchValue,
    ObjectMatchValueObject,
    ObjectMatchValueRange,
    ObjectMatchValueSimple,
    resolve_object_match_value_type,
)

_SIMPLE_OR_OBJECT = (ObjectMatchValueType.SIMPLE, ObjectMatchValueType.OBJECT)


# ============================================================================
# Match criteria
# ============================================================================


class MatchCriteria(CloudletsModel):
    """Fields shared by the criteria of every cloudlet."""

    variant: ClassVar[str] = ""
    object_match_value_kinds: ClassVar[tuple[ObjectMatchValueType, ...]] = _SIMPLE_OR_OBJECT

    match_type: StrictStr = ""
    match_value: StrictStr = ""
    match_operator: StrictStr = ""
    case_sensitive: StrictBool = False
    negate: StrictBool = False
    check_ips: StrictStr = Field(default="", alias="checkIPs")
    object_match_value: ObjectMatchValue | None = None

    @field_validator("object_match_value", mode="before")
    @classmethod
    def decode_object_match_value(cls, value: Any) -> Any:
        """
        Turn a raw objectMatchValue into the model its ``type`` names.

        Model instances are kept as given; validation reports a kind the
        cloudlet does not accept. Raw values must carry a kind from this
        criteria's allow-list, anything else fails the decode.
        """
        if isinstance(value, (ObjectMatchValueSimple, ObjectMatchValueRange, ObjectMatchValueObject)):
            return value
        try:
            type_name = resolve_object_match_value_type(value)
        except ObjectMatchValueTypeError as e:
            raise MatchCriteriaDecodeError(cls.variant, e.message) from e

        allowed = {kind.value for kind in cls.object_match_value_kinds}
        if type_name not in allowed:
            raise MatchCriteriaDecodeError(
                cls.variant, f"objectMatchValue has unexpected type: '{type_name}'"
            )
        return OBJECT_MATCH_VALUE_HANDLERS[type_name].model_validate(value)


class MatchCriteriaPR(MatchCriteria):
    variant: ClassVar[str] = "PR"


class MatchCriteriaER(MatchCriteria):
    variant: ClassVar[str] = "ER"


class MatchCriteriaFR(MatchCriteria):
    variant: ClassVar[str] = "FR"


class MatchCriteriaAP(MatchCriteria):
    variant: ClassVar[str] = "AP"


class MatchCriteriaAS(MatchCriteria):
    variant: ClassVar[str] = "AS"
    object_match_value_kinds: ClassVar[tuple[ObjectMatchValueType, ...]] = (
        ObjectMatchValueType.SIMPLE,
        ObjectMatchValueType.RANGE,
        ObjectMatchValueType.OBJECT,
    )


class MatchCriteriaRC(MatchCriteria):
    variant: ClassVar[str] = "RC"


# ============================================================================
# Forward settings
# ============================================================================


class ForwardSettingsPR(CloudletsModel):
    origin_id: StrictStr = ""
    percent: StrictInt = 0


class ForwardSettingsFR(CloudletsModel):
    path_and_qs: StrictStr = Field(default="", alias="pathAndQS")
    use_incoming_query_string: StrictBool = False
    origin_id: StrictStr = ""


class ForwardSettingsAS(ForwardSettingsFR):
    pass


# ============================================================================
# Match rules
# ============================================================================


class MatchRuleBase(CloudletsModel):
    """Fields shared by the rules of every cloudlet."""

    rule_type: ClassVar[MatchRuleType]

    name: StrictStr = ""
    type: StrictStr = ""
    start: StrictInt = 0
    end: StrictInt = 0
    id: StrictInt = 0
    match_url: StrictStr = Field(default="", alias="matchURL")
    matches_always: StrictBool = False
    disabled: StrictBool = False

    @property
    def cloudlet_type(self) -> str:
        """Wire literal this model is meant to carry in ``type``."""
        return self.rule_type.value


class MatchRulePR(MatchRuleBase):
    """Phased Release rule: splits traffic to an origin by percentage."""

    rule_type: ClassVar[MatchRuleType] = MatchRuleType.PR

    type: StrictStr = MatchRuleType.PR.value
    matches: list[MatchCriteriaPR] = Field(default_factory=list)
    forward_settings: ForwardSettingsPR = Field(default_factory=ForwardSettingsPR)


class MatchRuleER(MatchRuleBase):
    """Edge Redirector rule: answers with a redirect."""

    rule_type: ClassVar[MatchRuleType] = MatchRuleType.ER

    type: StrictStr = MatchRuleType.ER.value
    matches: list[MatchCriteriaER] = Field(default_factory=list)
    use_relative_url: StrictStr = ""
    status_code: StrictInt = 0
    redirect_url: StrictStr = Field(default="", alias="redirectURL")
    use_incoming_query_string: StrictBool = False
    use_incoming_scheme_and_host: StrictBool = False


class MatchRuleFR(MatchRuleBase):
    """Forward Rewrite rule: rewrites the path and forwards to an origin."""

    rule_type: ClassVar[MatchRuleType] = MatchRuleType.FR

    type: StrictStr = MatchRuleType.FR.value
    matches: list[MatchCriteriaFR] = Field(default_factory=list)
    forward_settings: ForwardSettingsFR = Field(default_factory=ForwardSettingsFR)


class MatchRuleAP(MatchRuleBase):
    """API Prioritization rule: lets a percentage of requests through."""

    rule_type: ClassVar[MatchRuleType] = MatchRuleType.AP

    type: StrictStr = MatchRuleType.AP.value
    matches: list[MatchCriteriaAP] = Field(default_factory=list)
    pass_through_percent: StrictFloat | None = None


class MatchRuleAS(MatchRuleBase):
    """Application Segmentation rule: forwards to an origin, supports ranges."""

    rule_type: ClassVar[MatchRuleType] = MatchRuleType.AS

    type: StrictStr = MatchRuleType.AS.value
    matches: list[MatchCriteriaAS] = Field(default_factory=list)
    forward_settings: ForwardSettingsAS = Field(default_factory=ForwardSettingsAS)


class MatchRuleRC(MatchRuleBase):
    """Request Control rule: allows or denies matching requests."""

    rule_type: ClassVar[MatchRuleType] = MatchRuleType.RC

    type: StrictStr = MatchRuleType.RC.value
    matches: list[MatchCriteriaRC] = Field(default_factory=list)
    allow_deny: StrictStr = ""


MatchRule = Union[MatchRulePR, MatchRuleER, MatchRuleFR, MatchRuleAP, MatchRuleAS, MatchRuleRC]

MatchRules = list[MatchRule]

# Closed dispatch table keyed by the wire discriminator
MATCH_RULE_HANDLERS: dict[str, type[MatchRuleBase]] = {
    model.rule_type.value: model
    for model in (MatchRulePR, MatchRuleER, MatchRuleFR, MatchRuleAP, MatchRuleAS, MatchRuleRC)
}
