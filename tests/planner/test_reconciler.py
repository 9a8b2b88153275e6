from clusterplan.config.models import ETCDSnapshotCreate, SnapshotPhase
from clusterplan.errors import ConflictError
from clusterplan.observers.dispatcher import EventBus
from clusterplan.observers.events import SnapshotReconciled
from clusterplan.planner.outcome import Outcome
from clusterplan.planner.reconciler import build_snapshot_reconciler
from clusterplan.stores.memory import InMemoryControlPlaneStore, InMemorySecretStore

from conftest import FakeTransport, make_cluster_plan, make_control_plane


def _reconciler(store, transport, bus=None):
    return build_snapshot_reconciler(
        store=store, secrets=InMemorySecretStore(), transport=transport, bus=bus
    )


def test_reconcile_persists_each_phase_until_finished(capture):
    store = InMemoryControlPlaneStore(make_control_plane())
    r = _reconciler(store, FakeTransport(), EventBus([capture]))
    plan = make_cluster_plan(3)

    outcomes = [r.reconcile("fleet-default", "c1", plan) for _ in range(4)]

    assert [o.kind.value for o in outcomes] == ["waiting", "waiting", "waiting", "progressed"]
    assert store.get("fleet-default", "c1").status.etcd_snapshot_create_phase == SnapshotPhase.FINISHED
    assert store.writes == 3
    reconciled = [e for e in capture.events if isinstance(e, SnapshotReconciled)]
    assert [e.persisted for e in reconciled] == [True, True, True, False]


def test_unchanged_status_is_not_written():
    req = ETCDSnapshotCreate(generation=1)
    store = InMemoryControlPlaneStore(
        make_control_plane(request=req, etcd_snapshot_create_phase=SnapshotPhase.FINISHED, etcd_snapshot_create=req)
    )
    outcome = _reconciler(store, FakeTransport()).reconcile("fleet-default", "c1", make_cluster_plan())
    assert outcome.ok
    assert store.writes == 0


def test_conflict_becomes_waiting():
    class RacingStore(InMemoryControlPlaneStore):
        def update_status(self, control_plane, status):
            raise ConflictError("controlplane fleet-default/c1: the object has been modified")

    store = RacingStore(make_control_plane())
    outcome = _reconciler(store, FakeTransport()).reconcile("fleet-default", "c1", make_cluster_plan())
    assert outcome.retryable
    assert "has been modified" in outcome.message


def test_missing_control_plane_is_noop():
    t = FakeTransport()
    outcome = _reconciler(InMemoryControlPlaneStore(), t).reconcile("fleet-default", "gone", make_cluster_plan())
    assert outcome.ok
    assert t.calls == []


def test_node_failure_ends_in_failed_phase():
    store = InMemoryControlPlaneStore(make_control_plane())
    r = _reconciler(store, FakeTransport({"m2": Outcome.terminal("m2 failed")}))
    plan = make_cluster_plan(3)

    first = r.reconcile("fleet-default", "c1", plan)    # -> Started
    second = r.reconcile("fleet-default", "c1", plan)   # -> Failed
    third = r.reconcile("fleet-default", "c1", plan)    # terminal phase, no-op

    assert first.retryable and second.retryable
    assert "m2 failed" in second.message
    assert third.ok
    assert store.get("fleet-default", "c1").status.etcd_snapshot_create_phase == SnapshotPhase.FAILED
