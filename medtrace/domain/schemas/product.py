"""Pydantic schemas for the custody API and serialization. No ledger or infrastructure access."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from medtrace.domain.models.product import Product, ProductData, ProductStatus
from medtrace.domain.models.transaction import SettlementRef, Transaction, TransactionKind


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------

class SettlementRefSchema(BaseModel):
    """Already-settled external payment reference supplied by the caller."""

    transaction_id: str = Field(..., min_length=1, description="Opaque payment transaction id")
    cost: str = Field(..., description="Cost paid, as reported by the payment provider")

    def to_domain(self) -> SettlementRef:
        return SettlementRef(transaction_id=self.transaction_id, cost=self.cost)

    @classmethod
    def from_domain(cls, ref: Optional[SettlementRef]) -> Optional["SettlementRefSchema"]:
        if ref is None:
            return None
        return cls(transaction_id=ref.transaction_id, cost=ref.cost)


class _TransitionRequest(BaseModel):
    settlement: Optional[SettlementRefSchema] = Field(
        None, description="Reference of a payment already settled by the caller"
    )
    pay: bool = Field(False, description="Ask the service to settle the transition cost first")


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class ProductCreateRequest(_TransitionRequest):
    """Request schema for registering a new product. Blank required fields are rejected by the domain."""

    name: str
    batch_number: str
    expiration_date: str
    description: str = ""

    def to_domain(self) -> ProductData:
        return ProductData(
            name=self.name,
            batch_number=self.batch_number,
            expiration_date=self.expiration_date,
            description=self.description,
        )


class AssignRequest(_TransitionRequest):
    distributor_id: str
    dispatch_date: str


class SellRequest(_TransitionRequest):
    healthcare_provider_id: str


class VerifyRequest(_TransitionRequest):
    pass


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class ProductResponse(BaseModel):
    """Product snapshot as returned to callers."""

    id: str
    name: str
    batch_number: str
    expiration_date: str
    description: str
    manufacturer_id: str
    current_holder_id: str
    status: ProductStatus
    qr_code: Optional[str] = None
    settlement: Optional[SettlementRefSchema] = None

    @classmethod
    def from_domain(cls, product: Product) -> "ProductResponse":
        return cls(
            id=product.id,
            name=product.name,
            batch_number=product.batch_number,
            expiration_date=product.expiration_date,
            description=product.description,
            manufacturer_id=product.manufacturer_id,
            current_holder_id=product.current_holder_id,
            status=product.status,
            qr_code=product.qr_code,
            settlement=SettlementRefSchema.from_domain(product.settlement_ref),
        )


class TransactionResponse(BaseModel):
    """Ledger event as returned to callers."""

    id: str
    product_id: str
    kind: TransactionKind
    timestamp: datetime
    actor_from: Optional[str] = None
    actor_to: Optional[str] = None
    payload: Dict[str, Any]
    integrity_hash: str
    previous_hash: str
    settlement: Optional[SettlementRefSchema] = None

    @classmethod
    def from_domain(cls, txn: Transaction) -> "TransactionResponse":
        return cls(
            id=txn.id,
            product_id=txn.product_id,
            kind=txn.kind,
            timestamp=txn.timestamp,
            actor_from=txn.actor_from,
            actor_to=txn.actor_to,
            payload=dict(txn.payload),
            integrity_hash=txn.integrity_hash,
            previous_hash=txn.previous_hash,
            settlement=SettlementRefSchema.from_domain(txn.settlement_ref),
        )


class SellResponse(BaseModel):
    product_id: str
    qr_code: str


class VerifyResponse(BaseModel):
    """Negative verification (unknown product) is a valid result, not an error."""

    found: bool
    product: Optional[ProductResponse] = None
    history: List[TransactionResponse] = Field(default_factory=list)


class IntegrityResponse(BaseModel):
    product_id: str
    valid: bool
    events: int


class CostResponse(BaseModel):
    action: str
    amount: str
    display: str
    description: str
