"""TransactionLog: append assigns ids/timestamps/hashes, per-product ordering, integrity chain."""

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from medtrace.domain.models.transaction import SettlementRef, TransactionDraft, TransactionKind
from medtrace.ledger.integrity import GENESIS_HASH, verify_chain
from medtrace.ledger.transaction_log import TransactionLog


def _draft(product_id="P1", kind=TransactionKind.CREATED, **kwargs):
    return TransactionDraft(product_id=product_id, kind=kind, actor_from="mfg@x", **kwargs)


def test_append_assigns_fields():
    log = TransactionLog()
    txn = log.append(_draft(payload={"name": "n"}))
    assert txn.id
    assert txn.timestamp.tzinfo == timezone.utc
    assert txn.previous_hash == GENESIS_HASH
    assert len(txn.integrity_hash) == 64
    assert txn.sequence == 0
    assert len(log) == 1


def test_history_empty_for_unknown_product():
    assert TransactionLog().history("nope") == ()


def test_history_in_append_order_per_product():
    log = TransactionLog()
    a1 = log.append(_draft("A"))
    b1 = log.append(_draft("B"))
    a2 = log.append(_draft("A", TransactionKind.ASSIGNED))
    assert log.history("A") == (a1, a2)
    assert log.history("B") == (b1,)
    assert a2.previous_hash == a1.integrity_hash
    assert [t.sequence for t in log.all()] == [0, 1, 2]


def test_timestamps_never_decrease_within_product():
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    times = iter([base, base - timedelta(seconds=5)])
    log = TransactionLog(clock=lambda: next(times))
    first = log.append(_draft())
    second = log.append(_draft(kind=TransactionKind.ASSIGNED))
    assert second.timestamp == first.timestamp


def test_payload_cannot_be_mutated_after_append():
    log = TransactionLog()
    payload = {"dispatch_date": "2024-01-01"}
    txn = log.append(_draft(payload=payload))
    payload["dispatch_date"] = "changed"
    assert txn.payload["dispatch_date"] == "2024-01-01"
    with pytest.raises(TypeError):
        txn.payload["dispatch_date"] = "x"  # type: ignore[index]


def test_settlement_ref_stored_verbatim():
    log = TransactionLog()
    ref = SettlementRef(transaction_id="0xabc", cost="0.0008")
    txn = log.append(_draft(settlement_ref=ref))
    assert txn.settlement_ref is ref


def test_integrity_chain_detects_tampering():
    log = TransactionLog()
    log.append(_draft(payload={"name": "n"}))
    log.append(_draft(kind=TransactionKind.ASSIGNED, payload={"dispatch_date": "d"}))
    history = log.history("P1")
    assert log.verify_integrity("P1") is True

    tampered = replace(history[1], payload={"dispatch_date": "forged"})
    assert verify_chain((history[0], tampered)) is False
    assert verify_chain((history[1], history[0])) is False


class RecordingStore:
    def __init__(self, preloaded=()):
        self.appended = []
        self._preloaded = list(preloaded)

    def append(self, txn):
        self.appended.append(txn)

    def load(self):
        return iter(self._preloaded)


def test_append_writes_through_to_store():
    store = RecordingStore()
    log = TransactionLog(store=store)
    txn = log.append(_draft())
    assert store.appended == [txn]


def test_log_loads_existing_events_from_store():
    source = TransactionLog()
    first = source.append(_draft())
    reopened = TransactionLog(store=RecordingStore(preloaded=[first]))
    assert reopened.history("P1") == (first,)
    second = reopened.append(_draft(kind=TransactionKind.ASSIGNED))
    assert second.sequence == 1
    assert second.previous_hash == first.integrity_hash


def test_payload_read_only_after_loading_from_store():
    source = TransactionLog()
    first = source.append(_draft(payload={"name": "n"}))
    stored = replace(first, payload={"name": "n"})
    reopened = TransactionLog(store=RecordingStore(preloaded=[stored]))

    (loaded,) = reopened.history("P1")
    with pytest.raises(TypeError):
        loaded.payload["name"] = "forged"  # type: ignore[index]
    assert loaded.payload["name"] == "n"
    assert reopened.verify_integrity("P1") is True
