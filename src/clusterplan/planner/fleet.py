# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/clusterplan/planner/fleet.py

from __future__ import annotations

import logging
from typing import List

from ..config.models import ControlPlane, PlannerSettings
from ..errors import PlannerError
from .entries import ClusterPlan, collect, is_etcd
from .outcome import Outcome, combine
from .plangen import PlanGenerator
from .transport import PlanTransport

log = logging.getLogger("clusterplan")


class FleetCoordinator:
    """
    Fans a plan out to every etcd member and gathers the per-node outcomes.
    """

    def __init__(
        self,
        generator: PlanGenerator,
        transport: PlanTransport,
        settings: PlannerSettings | None = None,
    ):
        self.generator = generator
        self.transport = transport
        self.settings = settings or PlannerSettings()

    def run_snapshot_create(
        self, control_plane: ControlPlane, cluster_plan: ClusterPlan, join_server: str
    ) -> List[Outcome]:
        """
        Returns the non-PROGRESSED outcomes; an empty list means every node
        took its snapshot.
        """
        servers = collect(cluster_plan, is_etcd)
        if not servers:
            return [Outcome.terminal("failed to find node to perform etcd snapshot")]

        outcomes: List[Outcome] = []
        for server in servers:
            try:
                plan, joined = self.generator.generate_snapshot_create_plan(control_plane, server, join_server)
            except PlannerError as exc:
                return [Outcome.terminal(str(exc))]

            outcome = self.transport.assign_and_check_plan(
                f"etcd snapshot on {server.describe()}",
                server,
                plan,
                joined,
                self.settings.success_threshold,
                self.settings.failure_threshold,
            )
            if not outcome.ok:
                outcomes.append(outcome)
        return outcomes

    def run_service_restart(
        self,
        control_plane: ControlPlane,
        cluster_plan: ClusterPlan,
        join_server: str,
        description: str,
    ) -> Outcome:
        """
        Restart the runtime server on every etcd member, init node first. The
        other members are left alone until the init node has come back.
        """
        servers = collect(cluster_plan, is_etcd)
        if not servers:
            return Outcome.terminal(f"failed to find node to restart services after {description}")
        servers.sort(key=lambda e: not e.init_node)

        outcomes: List[Outcome] = []
        for server in servers:
            try:
                plan, joined = self.generator.generate_service_restart_plan(control_plane, server, join_server)
            except PlannerError as exc:
                return Outcome.terminal(str(exc))

            outcome = self.transport.assign_and_check_plan(
                f"restart services on {server.describe()} after {description}",
                server,
                plan,
                joined,
                self.settings.restart_success_threshold,
                self.settings.restart_failure_threshold,
            )
            if server.init_node and not outcome.ok:
                log.debug("[planner] waiting on init node %s before restarting the rest", server.describe())
                return outcome
            outcomes.append(outcome)
        return combine(outcomes)
