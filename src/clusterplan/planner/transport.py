# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/clusterplan/planner/transport.py

from __future__ import annotations

import json
import logging
from typing import Protocol

from .entries import PlanEntry
from .outcome import Outcome
from .plan import NodePlan

log = logging.getLogger("clusterplan")


class PlanTransport(Protocol):
    def assign_and_check_plan(
        self,
        description: str,
        entry: PlanEntry,
        plan: NodePlan,
        join_server: str,
        min_success: int,
        max_fail: int,
    ) -> Outcome:
        """
        Deliver *plan* to the node and report where it stands: PROGRESSED once
        it has applied *min_success* times, TERMINAL after *max_fail*
        failures, WAITING otherwise.
        """
        ...


class DryRunTransport:
    """Logs each plan and reports it as applied."""

    def __init__(self, logger: logging.Logger | None = None):
        self.log = logger or log
        self.delivered: list[tuple[str, dict]] = []

    def assign_and_check_plan(
        self,
        description: str,
        entry: PlanEntry,
        plan: NodePlan,
        join_server: str,
        min_success: int,
        max_fail: int,
    ) -> Outcome:
        doc = plan.to_document()
        self.delivered.append((description, doc))
        self.log.info("[dry-run] %s (join=%s)", description, join_server or "-")
        self.log.debug(json.dumps(doc, indent=2))
        return Outcome.progressed()
