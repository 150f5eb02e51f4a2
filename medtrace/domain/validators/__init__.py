"""Domain validators. Pure functions raising DomainValidationError."""

from medtrace.domain.validators.product_validator import (
    validate_actor_id,
    validate_assignment,
    validate_product_data,
    validate_sale,
)

__all__ = [
    "validate_actor_id",
    "validate_assignment",
    "validate_product_data",
    "validate_sale",
]
