"""Fixtures for API unit tests: fresh in-memory ledger, simulated settler, AsyncClient."""

import pytest
from httpx import ASGITransport, AsyncClient

from medtrace.infrastructure.payment.simulated_settler import SimulatedSettler
from medtrace.ledger.ledger import Ledger
from medtrace.main import app


@pytest.fixture
def ledger():
    return Ledger()


@pytest.fixture
def settler():
    return SimulatedSettler()


@pytest.fixture
def app_with_overrides(ledger, settler):
    """App with ledger and settler overridden for testing."""
    from medtrace.api import dependencies

    app.dependency_overrides[dependencies.get_ledger] = lambda: ledger
    app.dependency_overrides[dependencies.get_settler] = lambda: settler
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(app_with_overrides):
    """Async HTTP client for testing; uses overridden app."""
    transport = ASGITransport(app=app_with_overrides)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def manufacturer_headers():
    return {"X-Actor-ID": "mfg@x"}


@pytest.fixture
def product_body():
    return {
        "name": "Insulin Glargine",
        "batch_number": "BATCH-001",
        "expiration_date": "2026-12-31",
        "description": "100 units/ml",
    }
