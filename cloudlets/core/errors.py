"""
Exceptions raised by the Cloudlets SDK.

Three families reach callers:
- ValidationError: aggregated report of every invalid field in a request or
  ruleset, rendered as a deterministic tree.
- DecodeError and its subclasses: the first structural problem found while
  turning wire JSON into typed match rules.
- RequestError / APIError: transport failures and non-success HTTP answers.

CloudletsError deliberately does not derive from ValueError so that decode
errors raised from inside pydantic validators reach the caller unchanged.
"""

from __future__ import annotations

import json
from typing import Any


class CloudletsError(Exception):
    """Base exception for all Cloudlets SDK errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(CloudletsError):
    """
    Raised when a ruleset or request fails validation.

    The message is the rendered report; ``details["errors"]`` keeps the
    nested error tree it was rendered from.
    """

    @property
    def errors(self) -> dict[str, Any]:
        return self.details.get("errors", {})


class DecodeError(CloudletsError):
    """Raised when wire JSON cannot be turned into typed match rules."""

    pass


class ObjectMatchValueTypeError(DecodeError):
    """
    Raised by the objectMatchValue discriminator resolver.

    Examples:
    - objectMatchValue is a string or list instead of an object
    - objectMatchValue has no ``type`` field
    - ``type`` is not a string
    """

    pass


class MatchCriteriaDecodeError(DecodeError):
    """Raised when a single match criteria entry cannot be decoded."""

    def __init__(self, variant: str, detail: str, details: dict[str, Any] | None = None):
        self.variant = variant
        self.detail = detail
        super().__init__(f"unmarshalling MatchCriteria{variant}: {detail}", details)


class MatchRulesDecodeError(DecodeError):
    """
    Raised when an entry of a MatchRules array cannot be decoded.

    ``index`` is the position of the offending rule in the array.
    """

    def __init__(self, detail: str, index: int | None = None, details: dict[str, Any] | None = None):
        self.detail = detail
        self.index = index
        details = dict(details or {})
        if index is not None:
            details.setdefault("index", index)
        super().__init__(f"unmarshalling MatchRules: {detail}", details)


class MissingDiscriminatorError(MatchRulesDecodeError):
    """Raised when a match rule entry has no ``type`` field."""

    def __init__(self, index: int):
        super().__init__(f"match rule entry {index} should contain 'type' field", index)


class InvalidDiscriminatorTypeError(MatchRulesDecodeError):
    """Raised when a match rule ``type`` field is not a string."""

    def __init__(self, index: int, value: Any):
        super().__init__(
            "'type' field on match rule entry should be a string",
            index,
            {"type": value},
        )


class UnsupportedRuleTypeError(MatchRulesDecodeError):
    """Raised when a match rule ``type`` is not one of the known literals."""

    def __init__(self, index: int, rule_type: str):
        self.rule_type = rule_type
        super().__init__(f"unsupported match rule type: {rule_type}", index, {"type": rule_type})


class RequestError(CloudletsError):
    """
    Raised when a request could not be sent or its answer could not be read.

    The message is prefixed with the operation name, e.g.
    ``get policy versions: request failed: connection refused``.
    """

    def __init__(self, operation: str, reason: str, details: dict[str, Any] | None = None):
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation}: {reason}", details)


class APIError(CloudletsError):
    """
    Raised when the API answers with an unexpected HTTP status.

    Fields follow the problem-details document the API returns. When
    ``operation`` is set the message is prefixed with it, e.g.
    ``get policy versions: API error: ...``.
    """

    def __init__(
        self,
        status_code: int,
        type: str = "",
        title: str = "",
        detail: str = "",
        instance: str = "",
        errors: list[dict[str, Any]] | None = None,
        operation: str = "",
    ):
        self.status_code = status_code
        self.type = type
        self.title = title
        self.detail = detail
        self.instance = instance
        self.errors = errors or []
        self.operation = operation
        super().__init__(self._render(), self.to_dict())

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "type": self.type,
            "title": self.title,
            "detail": self.detail,
            "instance": self.instance,
            "status": self.status_code,
        }
        if self.errors:
            body["errors"] = self.errors
        return body

    def _render(self) -> str:
        rendered = "API error: \n" + json.dumps(self.to_dict(), indent=2)
        if self.operation:
            return f"{self.operation}: {rendered}"
        return rendered

    @classmethod
    def from_body(cls, status_code: int, body: bytes | str, operation: str = "") -> APIError:
        """Build an APIError from a response body, keeping raw text when it is not JSON."""
        text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
        try:
            payload = json.loads(text) if text else {}
        except json.JSONDecodeError:
            payload = None
        if not isinstance(payload, dict):
            return cls(
                status_code,
                title="Failed to unmarshal error body",
                detail=text,
                operation=operation,
            )

        status = payload.get("status")
        errors = payload.get("errors")
        return cls(
            status if isinstance(status, int) and status else status_code,
            type=str(payload.get("type") or ""),
            title=str(payload.get("title") or ""),
            detail=str(payload.get("detail") or ""),
            instance=str(payload.get("instance") or ""),
            errors=errors if isinstance(errors, list) else None,
            operation=operation,
        )
