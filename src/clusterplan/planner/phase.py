# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/clusterplan/planner/phase.py

from __future__ import annotations

from typing import Optional, Tuple

from ..config.models import ControlPlaneStatus, ETCDSnapshotCreate, SnapshotPhase
from .outcome import Outcome

REFRESHING = "refreshing etcd create state"


def set_state(
    status: ControlPlaneStatus,
    request: Optional[ETCDSnapshotCreate],
    phase: SnapshotPhase,
) -> Tuple[ControlPlaneStatus, Outcome]:
    """
    Store *request* and *phase* on the status.

    Any actual change yields WAITING: the caller must stop and let the next
    reconcile observe the persisted status before doing more work.
    """
    if status.etcd_snapshot_create_phase != phase or status.etcd_snapshot_create != request:
        status = status.model_copy(
            update={"etcd_snapshot_create_phase": phase.value, "etcd_snapshot_create": request}
        )
        return status, Outcome.waiting(REFRESHING)
    return status, Outcome.progressed()


def reset_state(status: ControlPlaneStatus) -> Tuple[ControlPlaneStatus, Outcome]:
    if status.etcd_snapshot_create is None and status.etcd_snapshot_create_phase == SnapshotPhase.NONE:
        return status, Outcome.progressed()
    return set_state(status, None, SnapshotPhase.NONE)


def start_or_restart(
    status: ControlPlaneStatus, request: ETCDSnapshotCreate
) -> Tuple[ControlPlaneStatus, Outcome]:
    if status.etcd_snapshot_create is None or status.etcd_snapshot_create != request:
        return set_state(status, request, SnapshotPhase.STARTED)
    return status, Outcome.progressed()
