"""ProductRegistry: event application, queries, replay and rebuild."""

import pytest

from medtrace.domain.exceptions import RegistryInconsistencyError
from medtrace.domain.models.product import ProductStatus
from medtrace.domain.models.transaction import SettlementRef, TransactionDraft, TransactionKind
from medtrace.ledger.product_registry import ProductRegistry
from medtrace.ledger.transaction_log import TransactionLog

CREATED_PAYLOAD = {
    "name": "Saline",
    "batch_number": "S-1",
    "expiration_date": "2027-01-01",
    "description": "",
}


@pytest.fixture
def log():
    return TransactionLog()


def _created(log, product_id="P1", manufacturer="mfg@x", settlement_ref=None):
    return log.append(
        TransactionDraft(
            product_id=product_id,
            kind=TransactionKind.CREATED,
            actor_from=manufacturer,
            payload=CREATED_PAYLOAD,
            settlement_ref=settlement_ref,
        )
    )


def test_created_event_creates_product(log):
    registry = ProductRegistry()
    registry.upsert_from_event(_created(log))
    product = registry.get("P1")
    assert product.status == ProductStatus.MANUFACTURED
    assert product.manufacturer_id == "mfg@x"
    assert product.current_holder_id == "mfg@x"
    assert product.qr_code is None


def test_get_unknown_returns_none():
    assert ProductRegistry().get("missing") is None


def test_transition_on_unknown_product_is_inconsistent(log):
    event = log.append(
        TransactionDraft(product_id="P9", kind=TransactionKind.ASSIGNED, actor_to="dist@y")
    )
    with pytest.raises(RegistryInconsistencyError):
        ProductRegistry().upsert_from_event(event)


def test_duplicate_creation_is_inconsistent(log):
    registry = ProductRegistry()
    registry.upsert_from_event(_created(log))
    with pytest.raises(RegistryInconsistencyError):
        registry.upsert_from_event(_created(log))


def test_verified_keeps_status_but_records_settlement(log):
    registry = ProductRegistry()
    registry.upsert_from_event(_created(log))
    ref = SettlementRef(transaction_id="0xfeed", cost="0.0002")
    registry.upsert_from_event(
        log.append(
            TransactionDraft(
                product_id="P1",
                kind=TransactionKind.VERIFIED,
                actor_from="verification_system",
                payload={"verified": True},
                settlement_ref=ref,
            )
        )
    )
    product = registry.get("P1")
    assert product.status == ProductStatus.MANUFACTURED
    assert product.settlement_ref == ref


def test_reapplying_an_event_is_a_noop(log):
    registry = ProductRegistry()
    created = _created(log)
    registry.upsert_from_event(created)
    assigned = log.append(
        TransactionDraft(
            product_id="P1", kind=TransactionKind.ASSIGNED, actor_from="mfg@x", actor_to="dist@y"
        )
    )
    registry.upsert_from_event(assigned)
    registry.upsert_from_event(created)
    assert registry.get("P1").current_holder_id == "dist@y"


def test_list_by_and_qr_lookup(log):
    registry = ProductRegistry()
    registry.upsert_from_event(_created(log, "P1", "mfg@a"))
    registry.upsert_from_event(_created(log, "P2", "mfg@b"))
    registry.upsert_from_event(
        log.append(
            TransactionDraft(
                product_id="P2",
                kind=TransactionKind.SOLD,
                actor_from="mfg@b",
                actor_to="clinic@z",
                payload={"qr_code": "QR-P2-1"},
            )
        )
    )
    assert [p.id for p in registry.list_by(lambda p: True)] == ["P1", "P2"]
    assert [p.id for p in registry.list_by(lambda p: p.manufacturer_id == "mfg@a")] == ["P1"]
    assert registry.find_by_qr_code("QR-P2-1").id == "P2"
    assert registry.find_by_qr_code("QR-unknown") is None


def test_replay_and_rebuild_match_live_state(log):
    live = ProductRegistry()
    for event in (
        _created(log, "P1"),
        log.append(
            TransactionDraft(
                product_id="P1", kind=TransactionKind.ASSIGNED, actor_from="mfg@x", actor_to="dist@y"
            )
        ),
    ):
        live.upsert_from_event(event)

    assert ProductRegistry.replay(log.all()).get("P1") == live.get("P1")

    expected = live.get("P1")
    live.rebuild(log.all)
    assert live.get("P1") == expected
    assert len(live) == 1
