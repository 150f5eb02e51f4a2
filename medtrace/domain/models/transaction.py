"""Domain model for ledger events. Transactions are immutable once appended."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class TransactionKind(str, Enum):
    """Kind of custody event recorded in the transaction log."""

    CREATED = "created"
    ASSIGNED = "assigned"
    SOLD = "sold"
    VERIFIED = "verified"


@dataclass(frozen=True)
class SettlementRef:
    """
    Reference to an externally settled value transfer: opaque transaction id and the cost paid.
    Stored verbatim; the ledger never interprets either value.
    """

    transaction_id: str
    cost: str

    def to_dict(self) -> Dict[str, str]:
        return {"transaction_id": self.transaction_id, "cost": self.cost}


@dataclass(frozen=True)
class TransactionDraft:
    """Partial event description handed to the transaction log; the log assigns id, timestamp and hashes."""

    product_id: str
    kind: TransactionKind
    actor_from: Optional[str] = None
    actor_to: Optional[str] = None
    payload: Dict[str, Any] = field(default_factory=dict)
    settlement_ref: Optional[SettlementRef] = None


@dataclass(frozen=True)
class Transaction:
    """Immutable record of one state change."""

    id: str
    product_id: str
    kind: TransactionKind
    timestamp: datetime
    actor_from: Optional[str]
    actor_to: Optional[str]
    payload: Dict[str, Any]
    integrity_hash: str
    previous_hash: str
    sequence: int
    settlement_ref: Optional[SettlementRef] = None
