# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/clusterplan/planner/entries.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from ..errors import InitNodeError


@dataclass(frozen=True)
class PlanEntry:
    """
    One cluster member as seen during a single reconcile pass.
    """
    namespace: str                # machine namespace
    name: str                     # machine name
    node_name: Optional[str] = None   # node ref, once the node registered
    etcd: bool = False
    control_plane: bool = False
    worker: bool = False
    init_node: bool = False
    join_url: str = ""            # e.g. https://10.0.0.10:9345
    deleting: bool = False

    def describe(self) -> str:
        if self.node_name:
            return f"node {self.node_name}"
        return f"machine {self.namespace}/{self.name}"


@dataclass
class ClusterPlan:
    entries: List[PlanEntry] = field(default_factory=list)


def is_etcd(entry: PlanEntry) -> bool:
    return entry.etcd


def is_init_node(entry: PlanEntry) -> bool:
    return entry.init_node


def collect(cluster_plan: ClusterPlan, pred: Callable[[PlanEntry], bool]) -> List[PlanEntry]:
    return [e for e in cluster_plan.entries if pred(e)]


def find_init_node(cluster_plan: ClusterPlan) -> Tuple[bool, str, Optional[PlanEntry]]:
    """
    Return (found, join_server, entry) for the init node.

    More than one init node is an error. A deleting init node counts as not
    found so that the operation waits for a new one to be elected.
    """
    candidates = [e for e in collect(cluster_plan, is_init_node) if not e.deleting]
    if len(candidates) > 1:
        names = ", ".join(sorted(f"{e.namespace}/{e.name}" for e in candidates))
        raise InitNodeError(f"multiple init nodes found: {names}")
    if not candidates:
        return False, "", None
    entry = candidates[0]
    return True, entry.join_url, entry
