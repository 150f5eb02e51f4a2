"""Append-only transaction log: the single source of truth for product history."""

import threading
from dataclasses import replace
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Callable, Dict, List, Optional, Tuple

from medtrace.domain.identifiers import IdentifierGenerator
from medtrace.domain.models.transaction import Transaction, TransactionDraft
from medtrace.ledger.integrity import GENESIS_HASH, compute_hash, event_fields, verify_chain
from medtrace.ledger.store import TransactionStore


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _freeze_payload(txn: Transaction) -> Transaction:
    """Stored events come back with plain dicts; the log only hands out read-only payloads."""
    if isinstance(txn.payload, MappingProxyType):
        return txn
    return replace(txn, payload=MappingProxyType(dict(txn.payload)))


class TransactionLog:
    """
    Stores ledger events in append order. Events are never mutated or removed.
    Appends are visible to subsequent reads immediately; when a store is configured
    an event is written to it before it becomes visible.
    """

    def __init__(
        self,
        identifiers: Optional[IdentifierGenerator] = None,
        store: Optional[TransactionStore] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._identifiers = identifiers or IdentifierGenerator()
        self._store = store
        self._clock = clock
        self._lock = threading.Lock()
        self._events: List[Transaction] = []
        self._by_product: Dict[str, List[Transaction]] = {}
        self._ids: set[str] = set()
        if store is not None:
            for txn in store.load():
                self._index(_freeze_payload(txn))

    def _index(self, txn: Transaction) -> None:
        self._events.append(txn)
        self._by_product.setdefault(txn.product_id, []).append(txn)
        self._ids.add(txn.id)

    def _new_transaction_id(self) -> str:
        txn_id = self._identifiers.transaction_id()
        while txn_id in self._ids:
            txn_id = self._identifiers.transaction_id()
        return txn_id

    def append(self, draft: TransactionDraft) -> Transaction:
        """Assign id, timestamp and integrity hash to `draft` and store it."""
        with self._lock:
            previous = self._by_product.get(draft.product_id)
            last = previous[-1] if previous else None

            timestamp = self._clock()
            # Per-product history stays non-decreasing even if the wall clock steps back.
            if last is not None and timestamp < last.timestamp:
                timestamp = last.timestamp

            txn_id = self._new_transaction_id()
            previous_hash = last.integrity_hash if last is not None else GENESIS_HASH
            payload = MappingProxyType(dict(draft.payload))
            integrity_hash = compute_hash(
                previous_hash,
                event_fields(
                    transaction_id=txn_id,
                    product_id=draft.product_id,
                    kind=draft.kind,
                    timestamp=timestamp,
                    actor_from=draft.actor_from,
                    actor_to=draft.actor_to,
                    payload=payload,
                    settlement_ref=draft.settlement_ref,
                ),
            )
            txn = Transaction(
                id=txn_id,
                product_id=draft.product_id,
                kind=draft.kind,
                timestamp=timestamp,
                actor_from=draft.actor_from,
                actor_to=draft.actor_to,
                payload=payload,
                integrity_hash=integrity_hash,
                previous_hash=previous_hash,
                sequence=len(self._events),
                settlement_ref=draft.settlement_ref,
            )
            if self._store is not None:
                self._store.append(txn)
            self._index(txn)
            return txn

    def history(self, product_id: str) -> Tuple[Transaction, ...]:
        """All events for `product_id` in append order; empty if there are none."""
        with self._lock:
            return tuple(self._by_product.get(product_id, ()))

    def all(self) -> Tuple[Transaction, ...]:
        """Every event in global append order."""
        with self._lock:
            return tuple(self._events)

    def verify_integrity(self, product_id: str) -> bool:
        return verify_chain(self.history(product_id))

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
