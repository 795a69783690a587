"""
Shared pytest fixtures for all tests.

This module provides a scripted fake of the health service (served through
httpx.MockTransport), settings and connections wired to it.
"""

import asyncio
import base64
from collections import defaultdict, deque
from datetime import datetime, timezone
from typing import Dict, List, Optional
from uuid import UUID
from xml.etree import ElementTree

import httpx
import pytest
import pytest_asyncio

from healthvault.config import HealthVaultSettings
from healthvault.connection import HealthVaultConnection
from healthvault.models import HealthRecordInfo
from healthvault.utils import child_text, strip_namespaces

APP_ID = UUID("8a3f1c2e-5b6d-4e7f-9a0b-1c2d3e4f5a6b")
RECORD_ID = UUID("11111111-2222-3333-4444-555555555555")
APP_SECRET = base64.b64encode(b"application-secret").decode("ascii")
SERVICE_URL = "https://platform.test/platform/wildcat.ashx"
FIXED_TIME = datetime(2024, 5, 1, 12, 30, 15, 250000, tzinfo=timezone.utc)

CREATE_SESSION = "CreateAuthenticatedSessionToken"
SESSION_EXPIRED = 65


def response_xml(status_code: int = 0, info: Optional[str] = None, error: Optional[str] = None) -> str:
    """Build a service response document."""
    parts = [f"<response><status><code>{status_code}</code>"]
    if error:
        parts.append(f"<error><message>{error}</message></error>")
    parts.append("</status>")
    if info is not None:
        parts.append(f'<wc:info xmlns:wc="urn:com.microsoft.wc.methods.response">{info}</wc:info>')
    parts.append("</response>")
    return "".join(parts)


# ============================================================================
# FAKE HEALTH SERVICE
# ============================================================================


class FakeHealthService:
    """
    Scripted stand-in for the health service.

    - Every CreateAuthenticatedSessionToken call issues a new token
      ("token-1", "token-2", ...).
    - Tokens listed in expired_tokens are answered with status 65.
    - script[method] is a queue of status codes consumed one per call;
      an empty queue means success.
    - info[method] is the <info> payload returned on success.
    """

    def __init__(self):
        self.auth_calls = 0
        self.calls: List[dict] = []
        self.script: Dict[str, deque] = defaultdict(deque)
        self.info: Dict[str, str] = {}
        self.expired_tokens = set()
        self.expire_every_token = False
        self.auth_status = 0
        self.auth_delay = 0.0
        self.call_delay = 0.0
        self.active_auth = 0
        self.max_concurrent_auth = 0

    def calls_to(self, method: str) -> List[dict]:
        return [c for c in self.calls if c["method"] == method]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        root = strip_namespaces(ElementTree.fromstring(request.content))
        header = root.find("header")
        call = {
            "method": child_text(header, "method"),
            "version": child_text(header, "method-version"),
            "token": child_text(header, "auth-session/auth-token"),
            "app_id": child_text(header, "app-id"),
            "record_id": child_text(header, "record-id"),
            "root": root,
        }
        self.calls.append(call)

        if call["method"] == CREATE_SESSION:
            return await self._authenticate()

        if self.call_delay:
            await asyncio.sleep(self.call_delay)

        token = call["token"]
        if token is not None and (self.expire_every_token or token in self.expired_tokens):
            return httpx.Response(200, text=response_xml(SESSION_EXPIRED, error="Session expired"))

        queue = self.script[call["method"]]
        if queue:
            status = queue.popleft()
            if status != 0:
                return httpx.Response(200, text=response_xml(status, error=f"Scripted failure {status}"))
        return httpx.Response(200, text=response_xml(0, self.info.get(call["method"], "")))

    async def _authenticate(self) -> httpx.Response:
        self.active_auth += 1
        self.max_concurrent_auth = max(self.max_concurrent_auth, self.active_auth)
        try:
            self.auth_calls += 1
            if self.auth_delay:
                await asyncio.sleep(self.auth_delay)
            if self.auth_status:
                return httpx.Response(200, text=response_xml(self.auth_status, error="Invalid application"))
            secret = base64.b64encode(f"session-secret-{self.auth_calls}".encode()).decode()
            info = (
                f"<token>token-{self.auth_calls}</token>"
                f"<shared-secret>{secret}</shared-secret>"
                f"<token-ttl>1800</token-ttl>"
            )
            return httpx.Response(200, text=response_xml(0, info))
        finally:
            self.active_auth -= 1


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def fake_service() -> FakeHealthService:
    return FakeHealthService()


@pytest.fixture
def settings() -> HealthVaultSettings:
    return HealthVaultSettings(
        application_id=APP_ID,
        application_shared_secret=APP_SECRET,
        health_service_url=SERVICE_URL,
        shell_url="https://account.test/",
    )


@pytest.fixture
def record() -> HealthRecordInfo:
    return HealthRecordInfo(record_id=RECORD_ID, name="Jane Doe")


@pytest_asyncio.fixture
async def http_client(fake_service):
    client = httpx.AsyncClient(transport=httpx.MockTransport(fake_service.handler))
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def connection(settings, http_client):
    connection = HealthVaultConnection(
        settings,
        http_client=http_client,
        clock=lambda: FIXED_TIME,
    )
    yield connection
    await connection.close()


@pytest_asyncio.fixture
async def authenticated(connection):
    await connection.authenticate()
    return connection
