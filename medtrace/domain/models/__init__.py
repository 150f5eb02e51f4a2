"""Domain models. Pure business entities."""

from medtrace.domain.models.product import Product, ProductData, ProductStatus
from medtrace.domain.models.transaction import (
    SettlementRef,
    Transaction,
    TransactionDraft,
    TransactionKind,
)

__all__ = [
    "Product",
    "ProductData",
    "ProductStatus",
    "SettlementRef",
    "Transaction",
    "TransactionDraft",
    "TransactionKind",
]
