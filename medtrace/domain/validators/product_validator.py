"""Validators for custody transitions. Pure functions, no infrastructure or ledger access."""

from typing import Optional

from medtrace.domain.exceptions import DomainValidationError
from medtrace.domain.models.product import ProductData


def _require(value: Optional[str], field_name: str) -> None:
    if value is None or not value.strip():
        raise DomainValidationError(f"{field_name} must not be empty")


def validate_actor_id(actor_id: Optional[str], field_name: str = "actor_id") -> None:
    """Resolved identities are opaque but must be present."""
    _require(actor_id, field_name)


def validate_product_data(data: ProductData) -> None:
    """Name, batch number and expiration date are required; description is optional."""
    _require(data.name, "name")
    _require(data.batch_number, "batch_number")
    _require(data.expiration_date, "expiration_date")


def validate_assignment(distributor_id: Optional[str], dispatch_date: Optional[str]) -> None:
    _require(distributor_id, "distributor_id")
    _require(dispatch_date, "dispatch_date")


def validate_sale(healthcare_provider_id: Optional[str]) -> None:
    _require(healthcare_provider_id, "healthcare_provider_id")
