"""Tests for API middleware: correlation ID, actor required, response headers."""

import json
import logging

import pytest
from httpx import ASGITransport, AsyncClient

from medtrace.main import app


@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.mark.asyncio
async def test_correlation_id_generated(client: AsyncClient):
    """When X-Correlation-ID is not sent, response has a generated correlation ID."""
    r = await client.get("/health", headers={"X-Actor-ID": "a1"})
    assert r.status_code == 200
    assert "X-Correlation-ID" in r.headers
    assert len(r.headers["X-Correlation-ID"]) > 0


@pytest.mark.asyncio
async def test_correlation_id_preserved_when_passed(client: AsyncClient):
    """When X-Correlation-ID is sent, the same value is returned in response."""
    correlation_id = "my-correlation-123"
    r = await client.get(
        "/health",
        headers={"X-Actor-ID": "a1", "X-Correlation-ID": correlation_id},
    )
    assert r.status_code == 200
    assert r.headers.get("X-Correlation-ID") == correlation_id
    assert r.json().get("correlation_id") == correlation_id


@pytest.mark.asyncio
async def test_actor_required(client: AsyncClient):
    """When X-Actor-ID is missing on a ledger route, response is 400."""
    r = await client.get("/costs/")
    assert r.status_code == 400
    assert "detail" in r.json()


@pytest.mark.asyncio
async def test_health_exempt_from_actor_header(client: AsyncClient):
    """Liveness checks pass without an actor and still get a correlation ID."""
    r = await client.get("/health")
    assert r.status_code == 200
    assert "X-Correlation-ID" in r.headers
    assert "actor_id" not in r.json()


@pytest.mark.asyncio
async def test_actor_accepted_on_ledger_route(client: AsyncClient):
    r = await client.get("/costs/", headers={"X-Actor-ID": "a1"})
    assert r.status_code == 200


def _audit_lines(caplog):
    return [
        json.loads(r.getMessage())
        for r in caplog.records
        if r.name == "medtrace.api.middleware" and "request_audit" in r.getMessage()
    ]


@pytest.mark.asyncio
async def test_audit_names_product_on_read(client: AsyncClient, caplog):
    caplog.set_level(logging.INFO, logger="medtrace.api.middleware")
    r = await client.get("/products/UNKNOWN-1", headers={"X-Actor-ID": "a1"})
    assert r.status_code == 404
    (line,) = _audit_lines(caplog)
    assert line["product_id"] == "UNKNOWN-1"
    assert line["actor_id"] == "a1"
    assert line["ledger_write"] is False


@pytest.mark.asyncio
async def test_audit_flags_ledger_write(client: AsyncClient, caplog):
    caplog.set_level(logging.INFO, logger="medtrace.api.middleware")
    await client.post("/products/UNKNOWN-2/assign", json={}, headers={"X-Actor-ID": "a1"})
    (line,) = _audit_lines(caplog)
    assert line["ledger_write"] is True
    assert line["product_id"] == "UNKNOWN-2"
