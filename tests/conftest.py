"""
Shared fixtures: an in-process fake OAuth2 server, settings, and an app wired
with in-memory collaborators.
"""

import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

from fakes import FakeOAuth2Server
from oauth2_gateway.app import create_app
from oauth2_gateway.configs import GatewaySettings
from oauth2_gateway.consent.in_memory_consent_store import InMemoryConsentStore
from oauth2_gateway.server.server_factory import CallableServerFactory
from oauth2_gateway.user_id.request_user_id_provider import RequestUserIdProvider


def build_request(
    method: str = "GET",
    path: str = "/oauth",
    query_string: str = "",
    headers: dict[str, str] | None = None,
    body: bytes = b"",
    session: dict | None = None,
) -> Request:
    """Build a Starlette request directly from an ASGI scope."""
    scope = {
        "type": "http",
        "method": method,
        "scheme": "http",
        "server": ("testserver", 80),
        "client": ("127.0.0.1", 12345),
        "root_path": "",
        "path": path,
        "query_string": query_string.encode(),
        "headers": [
            (name.lower().encode(), value.encode()) for name, value in (headers or {}).items()
        ],
    }
    if session is not None:
        scope["session"] = session

    async def receive():
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, receive)


@pytest.fixture
def make_request():
    return build_request


@pytest.fixture
def fake_server():
    return FakeOAuth2Server()


@pytest.fixture
def settings():
    return GatewaySettings(_env_file=None, session_secret_key="test-session-secret")


@pytest.fixture
def consent_store():
    return InMemoryConsentStore()


@pytest.fixture
def app(settings, fake_server, consent_store):
    return create_app(
        settings,
        server_factory=CallableServerFactory(lambda server_type: fake_server),
        user_id_provider=RequestUserIdProvider(),
        consent_store=consent_store,
    )


@pytest.fixture
def client(app):
    return TestClient(app)
