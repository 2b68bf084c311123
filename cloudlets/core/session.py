"""
HTTP session shared by Cloudlets resources.

Wraps an ``httpx.AsyncClient``: resources hand it a method, a path, an
optional JSON body and the model to decode a successful answer into, and
get back the raw response alongside the decoded result. Status handling is
left to the resource, which knows which status it expects; ``error`` turns
any other answer into an APIError.

Request signing and retries are the client's business: pass a configured
``httpx.AsyncClient`` to plug them in.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel

from cloudlets.core.config import settings
from cloudlets.core.errors import APIError
from cloudlets.core.observability import generate_request_id, get_request_id

logger = logging.getLogger(__name__)


class Session:
    """Async HTTP session for the Cloudlets API."""

    def __init__(
        self,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
        request_id_header: str | None = None,
        user_agent: str | None = None,
    ):
        """
        Initialize the session.

        Args:
            base_url: API host, defaults to settings.cloudlets_base_url
            client: Preconfigured client; the session does not close it
            timeout: Request timeout in seconds for the client it creates
            request_id_header: Header carrying the correlation ID
            user_agent: User-Agent sent with every request
        """
        self.base_url = (base_url or settings.cloudlets_base_url).rstrip("/")
        self.request_id_header = request_id_header or settings.cloudlets_request_id_header
        self.user_agent = user_agent or settings.cloudlets_user_agent
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout or settings.cloudlets_request_timeout)
        )

    def log(self, operation: str) -> logging.LoggerAdapter:
        """Logger bound to an operation name and the current request ID."""
        return logging.LoggerAdapter(
            logging.getLogger("cloudlets"),
            {"operation": operation, "request_id": get_request_id()},
        )

    async def exec(
        self,
        method: str,
        path: str,
        *,
        result_type: type[BaseModel] | None = None,
        params: dict[str, Any] | None = None,
        body: Any = None,
    ) -> tuple[httpx.Response, Any]:
        """
        Send a request and decode a successful answer.

        Args:
            method: HTTP verb
            path: Path below the base URL, starting with "/"
            result_type: Model the 2xx body is validated into
            params: Query parameters
            body: JSON-ready request body

        Returns:
            (response, result) where result is None unless result_type was
            given and the answer was a 2xx with a body

        Raises:
            httpx.HTTPError: If the request could not be sent
            ValueError: If a 2xx body is not valid JSON or does not fit result_type
        """
        request_id = get_request_id() or generate_request_id()
        headers = {
            "Accept": "application/json",
            "User-Agent": self.user_agent,
            self.request_id_header: request_id,
        }
        response = await self._client.request(
            method,
            f"{self.base_url}{path}",
            params=params,
            json=body,
            headers=headers,
        )
        logger.debug(
            f"{method} {path} -> {response.status_code}",
            extra={"request_id": request_id, "status_code": response.status_code},
        )

        result = None
        if result_type is not None and response.is_success and response.content:
            result = result_type.model_validate(response.json())
        return response, result

    def error(self, response: httpx.Response, operation: str = "") -> APIError:
        """Build the APIError describing an unexpected answer."""
        return APIError.from_body(response.status_code, response.content, operation)

    async def aclose(self) -> None:
        """Close the underlying client if the session created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> Session:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
