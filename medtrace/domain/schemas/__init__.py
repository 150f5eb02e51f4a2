"""Pydantic schemas for the custody API."""

from medtrace.domain.schemas.product import (
    AssignRequest,
    CostResponse,
    IntegrityResponse,
    ProductCreateRequest,
    ProductResponse,
    SellRequest,
    SellResponse,
    SettlementRefSchema,
    TransactionResponse,
    VerifyRequest,
    VerifyResponse,
)

__all__ = [
    "AssignRequest",
    "CostResponse",
    "IntegrityResponse",
    "ProductCreateRequest",
    "ProductResponse",
    "SellRequest",
    "SellResponse",
    "SettlementRefSchema",
    "TransactionResponse",
    "VerifyRequest",
    "VerifyResponse",
]
