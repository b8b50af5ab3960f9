"""Tests for api/errors.py - exception to envelope mapping."""

import pytest
from fastapi import FastAPI
from starlette.testclient import TestClient

from api.errors import register_error_handlers
from api.middleware import RequestIDMiddleware
from clients.record_store import ColumnMissingError, PersistenceError, SchemaMissingError


@pytest.fixture
def client():
    app = FastAPI()
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)

    errors = {
        "not-found": ValueError("Invoice x not found"),
        "bad": ValueError("Amount must be greater than zero"),
        "schema": SchemaMissingError("Table 'invoices' does not exist", "invoice"),
        "column": ColumnMissingError("Column missing on 'invoices': x", "invoice", column="x"),
        "store": PersistenceError("connection reset", "invoice"),
        "boom": RuntimeError("boom"),
    }

    @app.get("/raise/{kind}")
    async def raise_error(kind: str):
        raise errors[kind]

    return TestClient(app, raise_server_exceptions=False)


@pytest.mark.parametrize("kind,status,code", [
    ("not-found", 404, "NOT_FOUND"),
    ("bad", 400, "INVALID_REQUEST"),
    ("schema", 503, "DATA_SOURCE_UNAVAILABLE"),
    ("column", 502, "PERSISTENCE_FAILED"),
    ("store", 502, "PERSISTENCE_FAILED"),
    ("boom", 500, "INTERNAL_ERROR"),
])
def test_error_mapping(client, kind, status, code):
    response = client.get(f"/raise/{kind}")

    assert response.status_code == status
    body = response.json()
    assert body["success"] is False
    assert body["data"] is None
    assert body["error"]["code"] == code


def test_internal_error_hides_details(client):
    response = client.get("/raise/boom")

    assert response.json()["error"]["message"] == "An internal error occurred"


def test_request_id_carried_into_error(client):
    response = client.get("/raise/bad", headers={"X-Request-ID": "abc"})

    assert response.json()["meta"]["request_id"] == "abc"
    assert response.headers["X-Request-ID"] == "abc"
