"""
Pytest configuration and shared fixtures for the Cloudlets SDK tests.

Provides:
- anyio backend selection for async tests
- Wire JSON samples of every match rule type
- A Session factory backed by httpx.MockTransport (no network)
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

ROOT = Path(__file__).resolve().parents[1]

# Add the package root to path for imports
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import httpx  # noqa: E402 (import after path setup)
import pytest  # noqa: E402 (import after path setup)

from cloudlets.core.session import Session  # noqa: E402 (import after path setup)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def mixed_rules_json() -> list[dict[str, Any]]:
    """One rule of every supported cloudlet, in wire form."""
    return [
        {
            "type": "cdMatchRule",
            "name": "phased",
            "start": 0,
            "end": 0,
            "id": 0,
            "matchURL": None,
            "forwardSettings": {"originId": "origin-a", "percent": 25},
            "matches": [
                {
                    "matchType": "hostname",
                    "matchValue": "example.com",
                    "matchOperator": "equals",
                    "caseSensitive": False,
                    "negate": False,
                }
            ],
        },
        {
            "type": "erMatchRule",
            "name": "redirect",
            "matchURL": "/old",
            "redirectURL": "https://example.com/new",
            "statusCode": 301,
            "useRelativeUrl": "copy_scheme_hostname",
            "useIncomingQueryString": True,
            "useIncomingSchemeAndHost": False,
        },
        {
            "type": "frMatchRule",
            "name": "rewrite",
            "forwardSettings": {"pathAndQS": "/new", "originId": "origin-b"},
            "matches": [
                {
                    "matchType": "header",
                    "matchOperator": "equals",
                    "caseSensitive": False,
                    "negate": False,
                    "objectMatchValue": {
                        "type": "object",
                        "name": "Accept",
                        "nameCaseSensitive": False,
                        "nameHasWildcard": False,
                        "options": {"value": ["text/html*"], "valueHasWildcard": True},
                    },
                }
            ],
        },
        {
            "type": "apMatchRule",
            "name": "prioritize",
            "passThroughPercent": 50.5,
            "matchesAlways": True,
        },
        {
            "type": "asMatchRule",
            "name": "segment",
            "forwardSettings": {"originId": "origin-c"},
            "matches": [
                {
                    "matchType": "range",
                    "caseSensitive": False,
                    "negate": False,
                    "objectMatchValue": {"type": "range", "value": [1, 50]},
                }
            ],
        },
        {
            "type": "igMatchRule",
            "name": "deny-bots",
            "allowDeny": "denybranded",
            "matches": [
                {
                    "matchType": "method",
                    "caseSensitive": False,
                    "negate": True,
                    "objectMatchValue": {"type": "simple", "value": ["POST", "PUT"]},
                }
            ],
        },
    ]


@pytest.fixture
def session_factory() -> Callable[[Callable[[httpx.Request], httpx.Response]], Session]:
    """Build a Session whose requests are answered by the given handler."""

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> Session:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return Session(base_url="https://cloudlets.test", client=client)

    return factory
