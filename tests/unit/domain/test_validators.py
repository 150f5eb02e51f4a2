"""Domain validators: required fields on creation, assignment and sale."""

import pytest

from medtrace.domain.exceptions import DomainValidationError
from medtrace.domain.models.product import ProductData
from medtrace.domain.validators.product_validator import (
    validate_actor_id,
    validate_assignment,
    validate_product_data,
    validate_sale,
)


def test_valid_product_data_passes():
    validate_product_data(ProductData(name="Amoxicillin", batch_number="B-1", expiration_date="2026-01-01"))


@pytest.mark.parametrize("field", ["name", "batch_number", "expiration_date"])
def test_blank_required_field_rejected(field):
    values = {"name": "Amoxicillin", "batch_number": "B-1", "expiration_date": "2026-01-01"}
    values[field] = "   "
    with pytest.raises(DomainValidationError) as exc_info:
        validate_product_data(ProductData(**values))
    assert field in exc_info.value.message


def test_description_optional():
    validate_product_data(ProductData(name="n", batch_number="b", expiration_date="e", description=""))


def test_assignment_requires_distributor_and_date():
    with pytest.raises(DomainValidationError):
        validate_assignment("", "2024-01-01")
    with pytest.raises(DomainValidationError):
        validate_assignment("dist@y", None)


def test_sale_and_actor_required():
    with pytest.raises(DomainValidationError):
        validate_sale(" ")
    with pytest.raises(DomainValidationError):
        validate_actor_id(None)
