# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/clusterplan/observers/events.py

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Dict, Any, Optional
from datetime import datetime, timezone
import uuid


# ---------------------------------------------------------------------
# Base context and helper
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class BaseEvent:
    ts: str           # ISO timestamp
    run_id: str       # correlates all events of one reconcile pass
    cluster: str      # <namespace>/<name>

    def dict(self) -> Dict[str, Any]:
        return asdict(self)


def new_ctx(cluster: str, run_id: Optional[str] = None) -> Dict[str, Any]:
    return {
        "ts": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
        "run_id": run_id or str(uuid.uuid4()),
        "cluster": cluster,
    }


# ---------------------------------------------------------------------
# etcd snapshot create
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class SnapshotPhaseChanged(BaseEvent):
    previous: str
    phase: str

@dataclass(frozen=True)
class SnapshotSkipped(BaseEvent):
    reason: str

@dataclass(frozen=True)
class SnapshotNodeFailed(BaseEvent):
    error: str

@dataclass(frozen=True)
class SnapshotReconciled(BaseEvent):
    phase: str
    outcome: str                # "progressed" | "waiting" | "terminal"
    persisted: bool
    message: Optional[str] = None


# ---------------------------------------------------------------------
# Hosted cluster operators
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class LegacyOperatorRemoved(BaseEvent):
    app: str

@dataclass(frozen=True)
class OperatorChartEnsured(BaseEvent):
    namespace: str
    chart: str
