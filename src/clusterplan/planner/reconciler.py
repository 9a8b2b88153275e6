# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/clusterplan/planner/reconciler.py

from __future__ import annotations

import logging
from typing import Optional

from ..config.models import PlannerSettings
from ..errors import ConflictError, NotFoundError
from ..observers.dispatcher import EventBus
from ..observers.events import SnapshotReconciled, new_ctx
from ..stores.interface import ControlPlaneStore, SecretStore
from .credentials import CredentialResolver
from .entries import ClusterPlan
from .etcd_create import EtcdSnapshotCreator
from .fleet import FleetCoordinator
from .outcome import Outcome, OutcomeKind
from .plangen import BasePlanBuilder, PlanGenerator
from .s3args import S3Args
from .transport import PlanTransport

log = logging.getLogger("clusterplan")


class SnapshotReconciler:
    """
    One reconcile pass: read the control plane, step the snapshot state
    machine, write the status back if it changed.
    """

    def __init__(
        self,
        store: ControlPlaneStore,
        creator: EtcdSnapshotCreator,
        bus: Optional[EventBus] = None,
    ):
        self.store = store
        self.creator = creator
        self.bus = bus or EventBus()

    def reconcile(self, namespace: str, name: str, cluster_plan: ClusterPlan) -> Outcome:
        try:
            cp = self.store.get(namespace, name)
        except NotFoundError:
            log.debug("[planner] cluster %s/%s is gone, nothing to do", namespace, name)
            return Outcome.progressed()

        status, outcome = self.creator.create_etcd_snapshot(cp, cluster_plan)

        persisted = False
        if status != cp.status:
            try:
                self.store.update_status(cp, status)
                persisted = True
            except ConflictError as exc:
                outcome = Outcome.waiting(str(exc))

        if outcome.kind is OutcomeKind.TERMINAL:
            log.error("[planner] cluster %s: etcd snapshot create: %s", cp.key, outcome.message)
        elif outcome.kind is OutcomeKind.WAITING:
            log.debug("[planner] cluster %s: etcd snapshot create waiting: %s", cp.key, outcome.message)

        self.bus.emit(
            SnapshotReconciled(
                phase=status.etcd_snapshot_create_phase,
                outcome=outcome.kind.value,
                persisted=persisted,
                message=outcome.message or None,
                **new_ctx(cluster=cp.key),
            )
        )
        return outcome


def build_snapshot_reconciler(
    *,
    store: ControlPlaneStore,
    secrets: SecretStore,
    transport: PlanTransport,
    settings: Optional[PlannerSettings] = None,
    base: Optional[BasePlanBuilder] = None,
    bus: Optional[EventBus] = None,
) -> SnapshotReconciler:
    """Wire resolver -> S3 args -> plan generator -> fleet -> creator -> reconciler."""
    settings = settings or PlannerSettings()
    bus = bus or EventBus()
    generator = PlanGenerator(S3Args(CredentialResolver(secrets)), base=base, settings=settings)
    fleet = FleetCoordinator(generator, transport, settings=settings)
    return SnapshotReconciler(store, EtcdSnapshotCreator(fleet, bus=bus), bus=bus)
