"""API test fixtures: TestClient over a Workspace on the in-memory store."""

from unittest.mock import Mock

import pytest
from starlette.testclient import TestClient

from api.app import create_app
from clients.llm_client import LLMResponse
from core.workspace import Workspace


# =============================================================================
# WORKSPACE
# =============================================================================


@pytest.fixture
def llm():
    """Stand-in LLM client; returns a fixed sentence."""
    client = Mock()
    client.generate.return_value = LLMResponse(content="Generated by the model.")
    return client


@pytest.fixture
def workspace(seeded_store, config, clock):
    """Workspace with one invoice ('inv-1') and the starter catalogue."""
    ws = Workspace(seeded_store, config, clock=clock)
    ws.refresh()
    return ws


@pytest.fixture
def services(workspace):
    return workspace.services()


# =============================================================================
# APP & CLIENT FIXTURES
# =============================================================================


@pytest.fixture
def app(services):
    """FastAPI app with error handlers, middleware, and data/actions routes."""
    return create_app(services)


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def act(client):
    """POST an action and return the response."""

    def post(domain: str, action: str, data: dict | None = None):
        return client.post("/api/actions", json={
            "domain": domain,
            "action": action,
            "data": data or {},
        })

    return post
