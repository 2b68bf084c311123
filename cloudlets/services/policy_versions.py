"""
Cloudlets v3 policy version resource.

Every operation follows the same steps: validate the request (all problems
reported at once), build the path, send through the session, check the
expected status and return the decoded body. The match rules of a version
travel in ``matchRules`` and go through the ruleset codec both ways.
"""

from __future__ import annotations

import httpx

from cloudlets.codec.encoder import encode_match_rules
from cloudlets.codec.report import ErrorTree, format_validation_errors, prune_errors
from cloudlets.codec.validator import (
    check,
    collect_match_rules_errors,
    length,
    min_value,
    required,
)
from cloudlets.core.errors import DecodeError, RequestError, ValidationError
from cloudlets.core.session import Session
from cloudlets.schemas.policy_version import (
    CreatePolicyVersionRequest,
    DeletePolicyVersionRequest,
    GetPolicyVersionRequest,
    ListPolicyVersions,
    ListPolicyVersionsRequest,
    PolicyVersion,
    UpdatePolicyVersionRequest,
)

MAX_DESCRIPTION_LENGTH = 255

# Operation names prefixed to every error
LIST_POLICY_VERSIONS = "list policy versions"
GET_POLICY_VERSION = "get policy versions"
CREATE_POLICY_VERSION = "create policy versions"
UPDATE_POLICY_VERSION = "update policy versions"
DELETE_POLICY_VERSION = "delete policy versions"


# ============================================================================
# Request validation
# ============================================================================


def _raise_if_invalid(operation: str, errors: ErrorTree) -> None:
    errors = prune_errors(errors)
    if errors:
        raise ValidationError(
            f"{operation}: struct validation:\n{format_validation_errors(errors)}",
            details={"errors": errors},
        )


def validate_list_request(request: ListPolicyVersionsRequest) -> None:
    _raise_if_invalid(
        LIST_POLICY_VERSIONS,
        {
            "PolicyID": check(request.policy_id, required()),
            "Size": check(request.size, min_value(10)),
            "Page": check(request.page, min_value(0)),
        },
    )


def validate_get_request(request: GetPolicyVersionRequest) -> None:
    _raise_if_invalid(
        GET_POLICY_VERSION,
        {
            "PolicyID": check(request.policy_id, required()),
            "PolicyVersion": check(request.policy_version, required()),
        },
    )


def _body_errors(request: CreatePolicyVersionRequest) -> ErrorTree:
    errors: ErrorTree = {
        "PolicyID": check(request.policy_id, required()),
        "Description": check(request.description, length(0, MAX_DESCRIPTION_LENGTH)),
    }
    errors.update(collect_match_rules_errors(request.match_rules))
    return errors


def validate_create_request(request: CreatePolicyVersionRequest) -> None:
    """Check the path parameter, description and every match rule."""
    _raise_if_invalid(CREATE_POLICY_VERSION, _body_errors(request))


def validate_update_request(request: UpdatePolicyVersionRequest) -> None:
    errors = _body_errors(request)
    errors["PolicyVersion"] = check(request.policy_version, required())
    _raise_if_invalid(UPDATE_POLICY_VERSION, errors)


def validate_delete_request(request: DeletePolicyVersionRequest) -> None:
    _raise_if_invalid(
        DELETE_POLICY_VERSION,
        {
            "PolicyID": check(request.policy_id, required()),
            "PolicyVersion": check(request.policy_version, required()),
        },
    )


def _version_body(request: CreatePolicyVersionRequest) -> dict:
    body: dict = {"matchRules": encode_match_rules(request.match_rules)}
    if request.description is not None:
        body["description"] = request.description
    return body


# ============================================================================
# Resource
# ============================================================================


class PolicyVersions:
    """
    Policy version operations of the Cloudlets v3 API.

    Example:
        >>> async with Session(base_url="https://akab-xxx.luna.akamaiapis.net") as session:
        ...     versions = PolicyVersions(session)
        ...     version = await versions.get_policy_version(
        ...         GetPolicyVersionRequest(policy_id=276858, policy_version=1)
        ...     )
    """

    def __init__(self, session: Session):
        self.session = session

    async def _exec(self, operation: str, method: str, path: str, expected_status: int, **kwargs):
        try:
            response, result = await self.session.exec(method, path, **kwargs)
        except (httpx.HTTPError, ValueError, DecodeError) as e:
            raise RequestError(operation, f"request failed: {e}") from e

        if response.status_code != expected_status:
            self.session.log(operation).debug(f"unexpected status {response.status_code}")
            raise self.session.error(response, operation)
        return result

    async def list_policy_versions(self, request: ListPolicyVersionsRequest) -> ListPolicyVersions:
        """
        List the versions of a policy, one page at a time.

        Raises:
            ValidationError: If the request is invalid
            RequestError: If the request could not be sent or read
            APIError: If the API does not answer 200
        """
        self.session.log(LIST_POLICY_VERSIONS).debug("ListPolicyVersions")
        validate_list_request(request)

        params = {"page": request.page}
        if request.size != 0:
            params["size"] = request.size

        return await self._exec(
            LIST_POLICY_VERSIONS,
            "GET",
            f"/cloudlets/v3/policies/{request.policy_id}/versions",
            200,
            result_type=ListPolicyVersions,
            params=params,
        )

    async def get_policy_version(self, request: GetPolicyVersionRequest) -> PolicyVersion:
        """Fetch one policy version with its match rules."""
        self.session.log(GET_POLICY_VERSION).debug("GetPolicyVersion")
        validate_get_request(request)

        return await self._exec(
            GET_POLICY_VERSION,
            "GET",
            f"/cloudlets/v3/policies/{request.policy_id}/versions/{request.policy_version}",
            200,
            result_type=PolicyVersion,
        )

    async def create_policy_version(self, request: CreatePolicyVersionRequest) -> PolicyVersion:
        """
        Create a new version of a policy.

        The match rules are validated before anything is sent; the API
        answers 201 with the stored version.
        """
        self.session.log(CREATE_POLICY_VERSION).debug("CreatePolicyVersion")
        validate_create_request(request)

        return await self._exec(
            CREATE_POLICY_VERSION,
            "POST",
            f"/cloudlets/v3/policies/{request.policy_id}/versions",
            201,
            result_type=PolicyVersion,
            body=_version_body(request),
        )

    async def update_policy_version(self, request: UpdatePolicyVersionRequest) -> PolicyVersion:
        """Replace the description and match rules of a mutable version."""
        self.session.log(UPDATE_POLICY_VERSION).debug("UpdatePolicyVersion")
        validate_update_request(request)

        return await self._exec(
            UPDATE_POLICY_VERSION,
            "PUT",
            f"/cloudlets/v3/policies/{request.policy_id}/versions/{request.policy_version}",
            200,
            result_type=PolicyVersion,
            body=_version_body(request),
        )

    async def delete_policy_version(self, request: DeletePolicyVersionRequest) -> None:
        self.session.log(DELETE_POLICY_VERSION).debug("DeletePolicyVersion")
        validate_delete_request(request)

        await self._exec(
            DELETE_POLICY_VERSION,
            "DELETE",
            f"/cloudlets/v3/policies/{request.policy_id}/versions/{request.policy_version}",
            204,
        )
