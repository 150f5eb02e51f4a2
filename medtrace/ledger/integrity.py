"""
Content-addressed integrity hashes for ledger events.

Each event hash covers the event's own fields plus the hash of the previous
event for the same product, so altering or reordering any event in a
product's history breaks every hash after it.
"""

import hashlib
import json
from datetime import datetime
from typing import Any, Dict, Iterable, Mapping, Optional

from medtrace.domain.models.transaction import SettlementRef, Transaction, TransactionKind

GENESIS_HASH = "GENESIS"


def event_fields(
    *,
    transaction_id: str,
    product_id: str,
    kind: TransactionKind,
    timestamp: datetime,
    actor_from: Optional[str],
    actor_to: Optional[str],
    payload: Mapping[str, Any],
    settlement_ref: Optional[SettlementRef],
) -> Dict[str, Any]:
    """Canonical field set covered by the integrity hash."""
    return {
        "id": transaction_id,
        "product_id": product_id,
        "kind": kind.value,
        "timestamp": timestamp.isoformat(),
        "actor_from": actor_from,
        "actor_to": actor_to,
        "payload": dict(payload),
        "settlement_ref": settlement_ref.to_dict() if settlement_ref else None,
    }


def compute_hash(previous_hash: str, fields: Dict[str, Any]) -> str:
    block = json.dumps(
        {"previous_hash": previous_hash, "event": fields},
        sort_keys=True,
        default=str,
    )
    return hashlib.sha256(block.encode("utf-8")).hexdigest()


def hash_transaction(txn: Transaction, previous_hash: str) -> str:
    return compute_hash(
        previous_hash,
        event_fields(
            transaction_id=txn.id,
            product_id=txn.product_id,
            kind=txn.kind,
            timestamp=txn.timestamp,
            actor_from=txn.actor_from,
            actor_to=txn.actor_to,
            payload=txn.payload,
            settlement_ref=txn.settlement_ref,
        ),
    )


def verify_chain(events: Iterable[Transaction]) -> bool:
    """True if every event links to its predecessor and its hash matches its content."""
    prev = GENESIS_HASH
    for txn in events:
        if txn.previous_hash != prev or txn.integrity_hash != hash_transaction(txn, prev):
            return False
        prev = txn.integrity_hash
    return True
