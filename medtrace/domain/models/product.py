"""Domain model for products under custody. Pure business semantics — no ORM or infrastructure."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from medtrace.domain.models.transaction import SettlementRef


class ProductStatus(str, Enum):
    """Custody status. Changed only by the custody state machine."""

    MANUFACTURED = "manufactured"
    ASSIGNED = "assigned"
    SOLD = "sold"
    # Kept for compatibility with existing clients; verification never changes status.
    VERIFIED = "verified"


@dataclass(frozen=True)
class Product:
    """
    Snapshot of one physical batch/unit under traceability.
    The registry replaces snapshots on each accepted transition; snapshots themselves never change.
    """

    id: str
    name: str
    batch_number: str
    expiration_date: str
    description: str
    manufacturer_id: str
    current_holder_id: str
    status: ProductStatus
    qr_code: Optional[str] = None
    settlement_ref: Optional[SettlementRef] = None


@dataclass(frozen=True)
class ProductData:
    """Descriptive fields supplied by the manufacturer at creation."""

    name: str
    batch_number: str
    expiration_date: str
    description: str = ""

    def to_payload(self) -> dict:
        return {
            "name": self.name,
            "batch_number": self.batch_number,
            "expiration_date": self.expiration_date,
            "description": self.description,
        }
