from decimal import Decimal

from models.atm_ledgers import AccountKey, AtmLedger
from models.atm_transactions import AtmTransaction
from models.providers import Provider
from realtime.broker import ChangeBroker, ChangeEvent, broker
from realtime.collections import COLLECTIONS
from realtime.mirror import CollectionMirror
from utils import local_now

TENANT = "tenant-a"
OTHER_TENANT = "tenant-b"


def test_broker_routes_events_by_collection_and_tenant():
    local_broker = ChangeBroker()
    received = []
    unsubscribe = local_broker.subscribe("providers", TENANT, received.append)

    local_broker.publish(ChangeEvent("providers", TENANT, "INSERT", 1))
    local_broker.publish(ChangeEvent("providers", OTHER_TENANT, "INSERT", 2))
    local_broker.publish(ChangeEvent("vouchers", TENANT, "INSERT", 3))
    unsubscribe()
    unsubscribe()
    local_broker.publish(ChangeEvent("providers", TENANT, "DELETE", 1))

    assert [event.record_id for event in received] == [1]
    assert local_broker.subscriber_count("providers", TENANT) == 0


def test_failing_listener_does_not_block_others():
    local_broker = ChangeBroker()
    received = []

    def broken(event):
        raise RuntimeError("boom")

    local_broker.subscribe("vouchers", TENANT, broken)
    local_broker.subscribe("vouchers", TENANT, received.append)
    local_broker.publish(ChangeEvent("vouchers", TENANT, "UPDATE", 7))

    assert len(received) == 1


def test_changes_are_published_only_after_commit(db):
    received = []
    unsubscribe = broker.subscribe("providers", TENANT, received.append)
    try:
        db.add(Provider(name="XL", original_id=4, tenant_id=TENANT))
        db.flush()
        assert received == []
        db.commit()
        assert [(e.action, e.collection) for e in received] == [("INSERT", "providers")]

        db.add(Provider(name="Axis", original_id=5, tenant_id=TENANT))
        db.flush()
        db.rollback()
        assert len(received) == 1
    finally:
        unsubscribe()


def test_mirror_follows_committed_changes(session_factory, db):
    snapshots = []
    spec = COLLECTIONS["providers"]
    mirror = CollectionMirror(
        session_factory,
        spec.model,
        TENANT,
        order_by=spec.order_by(),
        serializer=spec.serialize,
        on_snapshot=snapshots.append,
    ).start()
    try:
        assert mirror.loaded
        assert snapshots == [[]]

        db.add_all([
            Provider(name="Three", original_id=3, tenant_id=TENANT),
            Provider(name="Telkomsel", original_id=1, tenant_id=TENANT),
            Provider(name="Elsewhere", original_id=1, tenant_id=OTHER_TENANT),
        ])
        db.commit()

        assert [item["name"] for item in mirror.items] == ["Telkomsel", "Three"]
        assert snapshots[-1] == mirror.items
    finally:
        mirror.stop()

    db.add(Provider(name="XL", original_id=4, tenant_id=TENANT))
    db.commit()
    assert len(mirror.items) == 2


def test_mirror_applies_filters(session_factory, db):
    first = AtmLedger(name="A", initial_balance={}, current_balance={}, tenant_id=TENANT)
    second = AtmLedger(name="B", initial_balance={}, current_balance={}, tenant_id=TENANT)
    db.add_all([first, second])
    db.commit()
    for ledger in (first, second):
        db.add(AtmTransaction(
            ledger_id=ledger.id, type_id=1, type_name="Tarik Tunai", amount=Decimal("1000"),
            source_account=AccountKey.CASH, destination_account=AccountKey.BRI, profit_destination=AccountKey.CASH,
            timestamp=local_now(), tenant_id=TENANT,
        ))
    db.commit()

    mirror = CollectionMirror(session_factory, AtmTransaction, TENANT, filters={"ledger_id": first.id}).start()
    mirror.stop()

    assert [tx.ledger_id for tx in mirror.items] == [first.id]


def test_mirror_keeps_last_snapshot_on_error(session_factory):
    errors = []
    mirror = CollectionMirror(session_factory, Provider, TENANT, on_error=errors.append)
    mirror.refresh()
    mirror.items = ["kept"]

    def failing_factory():
        raise RuntimeError("database is gone")

    mirror.session_factory = failing_factory
    assert mirror.refresh() is False
    assert mirror.items == ["kept"]
    assert len(errors) == 1
