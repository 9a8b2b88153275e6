# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/clusterplan/planner/etcd_create.py

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from ..config.models import ControlPlane, ControlPlaneStatus, ETCDSnapshotCreate, SnapshotPhase
from ..errors import InitNodeError
from ..observers.dispatcher import EventBus
from ..observers.events import SnapshotNodeFailed, SnapshotPhaseChanged, SnapshotSkipped, new_ctx
from .entries import ClusterPlan, find_init_node
from .fleet import FleetCoordinator
from .outcome import Outcome, join_messages
from .phase import reset_state, set_state, start_or_restart

log = logging.getLogger("clusterplan")


class EtcdSnapshotCreator:
    """
    Drives the etcd snapshot create phases:

        ""  -> Started -> RestartCluster -> Finished
                     \\-> Failed

    One call does at most one step. Every status change comes back with a
    WAITING outcome; the caller persists the status and requeues.
    """

    def __init__(self, fleet: FleetCoordinator, bus: Optional[EventBus] = None):
        self.fleet = fleet
        self.bus = bus or EventBus()

    def _changed(self, run_ctx: Dict, before: ControlPlaneStatus, after: ControlPlaneStatus) -> None:
        if before.etcd_snapshot_create_phase != after.etcd_snapshot_create_phase:
            self.bus.emit(
                SnapshotPhaseChanged(
                    previous=before.etcd_snapshot_create_phase,
                    phase=after.etcd_snapshot_create_phase,
                    **run_ctx,
                )
            )

    def _set(
        self,
        run_ctx: Dict,
        status: ControlPlaneStatus,
        snapshot: ETCDSnapshotCreate,
        phase: SnapshotPhase,
    ) -> Tuple[ControlPlaneStatus, Outcome]:
        new_status, outcome = set_state(status, snapshot, phase)
        self._changed(run_ctx, status, new_status)
        return new_status, outcome

    def create_etcd_snapshot(
        self, control_plane: ControlPlane, cluster_plan: ClusterPlan
    ) -> Tuple[ControlPlaneStatus, Outcome]:
        status = control_plane.status
        snapshot = control_plane.spec.etcd_snapshot_create
        if snapshot is None:
            return reset_state(status)

        # no snapshot until the cluster is up
        if not status.initialized or not status.bootstrapped:
            return status, Outcome.progressed()

        run_ctx = new_ctx(cluster=control_plane.key)

        try:
            found, join_server, _ = find_init_node(cluster_plan)
        except InitNodeError as exc:
            log.error(
                "[planner] cluster %s: error encountered while searching for init node during etcd snapshot creation: %s",
                control_plane.key, exc,
            )
            return status, Outcome.terminal(str(exc))
        if not found or not join_server:
            log.warning(
                "[planner] cluster %s: skipping etcd snapshot creation as cluster does not have an init node",
                control_plane.key,
            )
            self.bus.emit(SnapshotSkipped(reason="no init node", **run_ctx))
            return status, Outcome.progressed()

        started, outcome = start_or_restart(status, snapshot)
        self._changed(run_ctx, status, started)
        if not outcome.ok:
            return started, outcome
        status = started

        phase = status.etcd_snapshot_create_phase
        if phase == SnapshotPhase.STARTED:
            failures = self.fleet.run_snapshot_create(control_plane, cluster_plan, join_server)
            if failures:
                return self._fail(run_ctx, status, snapshot, failures)
            return self._set(run_ctx, status, snapshot, SnapshotPhase.RESTART_CLUSTER_SERVICES)

        if phase == SnapshotPhase.RESTART_CLUSTER_SERVICES:
            outcome = self.fleet.run_service_restart(
                control_plane, cluster_plan, join_server, "etcd snapshot creation"
            )
            if not outcome.ok:
                return status, outcome
            return self._set(run_ctx, status, snapshot, SnapshotPhase.FINISHED)

        if phase in (SnapshotPhase.FAILED, SnapshotPhase.FINISHED):
            return status, Outcome.progressed()

        return self._set(run_ctx, status, snapshot, SnapshotPhase.STARTED)

    def _fail(
        self,
        run_ctx: Dict,
        status: ControlPlaneStatus,
        snapshot: ETCDSnapshotCreate,
        failures: List[Outcome],
    ) -> Tuple[ControlPlaneStatus, Outcome]:
        """
        Mark the phase Failed once if any node failed for good. The result is
        still reported as WAITING so the outer reconcile keeps running; the
        failure is visible through the phase.
        """
        collected: List[Outcome] = list(failures)
        state_set = False
        for failure in failures:
            if failure.retryable:
                continue
            self.bus.emit(SnapshotNodeFailed(error=failure.message, **run_ctx))
            if not state_set:
                status, outcome = self._set(run_ctx, status, snapshot, SnapshotPhase.FAILED)
                if not outcome.ok:
                    collected.append(outcome)
                state_set = True
        return status, Outcome.waiting(join_messages(collected))
