"""Domain layer: models, schemas, validators, identifiers, exceptions. Pure business logic only."""

from medtrace.domain.exceptions import (
    DomainError,
    DomainValidationError,
    ProductNotFoundError,
    RegistryInconsistencyError,
)
from medtrace.domain.identifiers import IdentifierGenerator, parse_qr_code
from medtrace.domain.models import (
    Product,
    ProductData,
    ProductStatus,
    SettlementRef,
    Transaction,
    TransactionDraft,
    TransactionKind,
)

__all__ = [
    "DomainError",
    "DomainValidationError",
    "IdentifierGenerator",
    "Product",
    "ProductData",
    "ProductNotFoundError",
    "ProductStatus",
    "RegistryInconsistencyError",
    "SettlementRef",
    "Transaction",
    "TransactionDraft",
    "TransactionKind",
    "parse_qr_code",
]
