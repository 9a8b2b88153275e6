from clusterplan.config.models import ControlPlaneStatus, ETCDSnapshotCreate, SnapshotPhase
from clusterplan.planner.phase import reset_state, set_state, start_or_restart


def test_set_state_change_returns_waiting_and_new_status():
    req = ETCDSnapshotCreate(generation=1)
    status = ControlPlaneStatus()
    new, outcome = set_state(status, req, SnapshotPhase.STARTED)
    assert outcome.retryable
    assert new.etcd_snapshot_create_phase == SnapshotPhase.STARTED
    assert new.etcd_snapshot_create == req
    # the input status is untouched
    assert status.etcd_snapshot_create is None


def test_set_state_is_idempotent():
    req = ETCDSnapshotCreate(generation=1)
    status, first = set_state(ControlPlaneStatus(), req, SnapshotPhase.STARTED)
    again, second = set_state(status, ETCDSnapshotCreate(generation=1), SnapshotPhase.STARTED)
    assert first.retryable
    assert second.ok
    assert again is status


def test_reset_state_noop_when_empty():
    status = ControlPlaneStatus()
    new, outcome = reset_state(status)
    assert outcome.ok
    assert new is status


def test_reset_state_clears_and_waits():
    status = ControlPlaneStatus(
        etcd_snapshot_create_phase=SnapshotPhase.FINISHED,
        etcd_snapshot_create=ETCDSnapshotCreate(generation=3),
    )
    new, outcome = reset_state(status)
    assert outcome.retryable
    assert new.etcd_snapshot_create is None
    assert new.etcd_snapshot_create_phase == SnapshotPhase.NONE


def test_start_or_restart_on_new_request():
    new, outcome = start_or_restart(ControlPlaneStatus(), ETCDSnapshotCreate(generation=1))
    assert outcome.retryable
    assert new.etcd_snapshot_create_phase == SnapshotPhase.STARTED


def test_start_or_restart_same_request_keeps_terminal_phase():
    req = ETCDSnapshotCreate(generation=1)
    status = ControlPlaneStatus(etcd_snapshot_create_phase=SnapshotPhase.FINISHED, etcd_snapshot_create=req)
    new, outcome = start_or_restart(status, ETCDSnapshotCreate(generation=1))
    assert outcome.ok
    assert new.etcd_snapshot_create_phase == SnapshotPhase.FINISHED


def test_start_or_restart_different_request_restarts():
    status = ControlPlaneStatus(
        etcd_snapshot_create_phase=SnapshotPhase.FINISHED,
        etcd_snapshot_create=ETCDSnapshotCreate(generation=1),
    )
    b = ETCDSnapshotCreate(generation=2)
    new, outcome = start_or_restart(status, b)
    assert outcome.retryable
    assert new.etcd_snapshot_create_phase == SnapshotPhase.STARTED
    assert new.etcd_snapshot_create == b
