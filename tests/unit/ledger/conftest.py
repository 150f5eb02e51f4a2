"""Fixtures for ledger tests."""

import pytest

from medtrace.domain.models.product import ProductData
from medtrace.ledger.ledger import Ledger


@pytest.fixture
def ledger():
    return Ledger()


@pytest.fixture
def product_data():
    return ProductData(
        name="Insulin Glargine",
        batch_number="BATCH-001",
        expiration_date="2026-12-31",
        description="100 units/ml",
    )
