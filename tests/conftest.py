from __future__ import annotations

import pytest

from clusterplan.config.models import (
    ControlPlane,
    ControlPlaneSpec,
    ControlPlaneStatus,
    ETCDSnapshotCreate,
)
from clusterplan.planner.entries import ClusterPlan, PlanEntry
from clusterplan.planner.outcome import Outcome


class Capture:
    def __init__(self): self.events = []
    def notify(self, ev): self.events.append(ev)

    def kinds(self):
        return [e.__class__.__name__ for e in self.events]


class FakeTransport:
    """
    Returns a canned outcome per machine name (PROGRESSED by default) and
    records every delivery.
    """
    def __init__(self, outcomes=None):
        self.outcomes = outcomes or {}
        self.calls = []

    def assign_and_check_plan(self, description, entry, plan, join_server, min_success, max_fail):
        self.calls.append(
            {
                "description": description,
                "entry": entry,
                "plan": plan,
                "join_server": join_server,
                "min_success": min_success,
                "max_fail": max_fail,
            }
        )
        return self.outcomes.get(entry.name, Outcome.progressed())


def make_control_plane(
    *,
    version="v1.27.4+rke2r1",
    request=ETCDSnapshotCreate(generation=1),
    initialized=True,
    bootstrapped=True,
    etcd=None,
    **status,
) -> ControlPlane:
    return ControlPlane(
        namespace="fleet-default",
        name="c1",
        resource_version="1",
        spec=ControlPlaneSpec(kubernetes_version=version, etcd=etcd, etcd_snapshot_create=request),
        status=ControlPlaneStatus(initialized=initialized, bootstrapped=bootstrapped, **status),
    )


def make_cluster_plan(n_etcd=3, with_init=True) -> ClusterPlan:
    entries = [
        PlanEntry(
            namespace="fleet-default",
            name=f"m{i}",
            node_name=f"node-{i}",
            etcd=True,
            control_plane=True,
            init_node=with_init and i == 0,
            join_url="https://10.0.0.10:9345" if i == 0 else "",
        )
        for i in range(n_etcd)
    ]
    entries.append(PlanEntry(namespace="fleet-default", name="w0", worker=True))
    return ClusterPlan(entries=entries)


@pytest.fixture
def capture():
    return Capture()
