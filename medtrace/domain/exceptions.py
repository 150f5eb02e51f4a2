"""Domain-specific exceptions. Pure domain layer — no infrastructure."""


class DomainError(Exception):
    """Base for all domain-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DomainValidationError(DomainError):
    """Raised when a required field is missing or blank. No state is written."""


class ProductNotFoundError(DomainError):
    """Raised when a transition targets an unknown product id. No log entry is written."""

    def __init__(self, product_id: str) -> None:
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found")


class RegistryInconsistencyError(DomainError):
    """Raised when an event cannot be applied to the registry (e.g. transition before creation)."""
