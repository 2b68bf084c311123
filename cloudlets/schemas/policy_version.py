from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from cloudlets.codec.decoder import coerce_match_rules
from cloudlets.schemas.base import CloudletsModel
from cloudlets.schemas.match_rule import MatchRule


def _match_rules(value: Any) -> Any:
    """Keep typed rules and decode wire JSON through the ruleset decoder."""
    return coerce_match_rules(value)


# ============================================================================
# Responses
# ============================================================================


class Link(CloudletsModel):
    href: str = ""
    rel: str = ""


class Page(CloudletsModel):
    number: int = 0
    size: int = 0
    total_elements: int = 0
    total_pages: int = 0


class MatchRulesWarning(CloudletsModel):
    detail: str = ""
    json_pointer: str = ""
    title: str = ""
    type: str = ""


class PolicyVersionSummary(CloudletsModel):
    """One entry of a policy version listing; carries no rules."""

    created_by: str = ""
    created_date: datetime | None = None
    description: str | None = None
    id: int = 0
    immutable: bool = False
    links: list[Link] = Field(default_factory=list)
    modified_by: str = ""
    modified_date: datetime | None = None
    policy_id: int = 0
    version: int = 0


class ListPolicyVersions(CloudletsModel):
    content: list[PolicyVersionSummary] = Field(default_factory=list)
    links: list[Link] = Field(default_factory=list)
    page: Page = Field(default_factory=Page)


class PolicyVersion(CloudletsModel):
    """Policy version returned by get, create and update."""

    created_by: str = ""
    created_date: datetime | None = None
    description: str | None = None
    id: int = 0
    immutable: bool = False
    match_rules: list[MatchRule] = Field(default_factory=list)
    match_rules_warnings: list[MatchRulesWarning] = Field(default_factory=list)
    modified_by: str = ""
    modified_date: datetime | None = None
    policy_id: int = 0
    version: int = 0

    @field_validator("match_rules", mode="before")
    @classmethod
    def decode_match_rules(cls, v: Any) -> Any:
        return _match_rules(v)


# ============================================================================
# Requests
# ============================================================================


class ListPolicyVersionsRequest(CloudletsModel):
    policy_id: int = 0
    page: int = 0
    size: int = 0


class GetPolicyVersionRequest(CloudletsModel):
    policy_id: int = 0
    policy_version: int = 0


class CreatePolicyVersionRequest(CloudletsModel):
    """Parameters and body of a new policy version."""

    policy_id: int = 0
    description: str | None = None
    match_rules: list[MatchRule] = Field(default_factory=list)

    @field_validator("match_rules", mode="before")
    @classmethod
    def decode_match_rules(cls, v: Any) -> Any:
        return _match_rules(v)


class UpdatePolicyVersionRequest(CreatePolicyVersionRequest):
    """Parameters and body replacing an existing, mutable policy version."""

    policy_version: int = 0


class DeletePolicyVersionRequest(CloudletsModel):
    policy_id: int = 0
    policy_version: int = 0
