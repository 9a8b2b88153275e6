# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/clusterplan/stores/file.py

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from ..config.loader import load_yaml
from ..config.models import ControlPlane, ControlPlaneStatus
from ..errors import ConflictError, NotFoundError
from ..planner.entries import ClusterPlan, PlanEntry
from .memory import InMemorySecretStore

log = logging.getLogger("clusterplan")


class FileStateStore:
    """
    A single control plane, its machines and its secrets kept in one YAML
    file. Status writes are persisted back to the file, so repeated CLI runs
    behave like successive reconcile passes.

        control_plane: {namespace, name, spec, status}
        machines: [{namespace, name, node_name, etcd, init_node, join_url, ...}]
        secrets: [{namespace, name, data: {key: value}}]
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._data = load_yaml(self.path)
        if "control_plane" not in self._data:
            raise ValueError(f"{self.path}: missing 'control_plane'")
        self._secrets = InMemorySecretStore()
        for s in self._data.get("secrets") or []:
            self._secrets.add(s["namespace"], s["name"], s.get("data") or {})

    # ------------------------- ControlPlaneStore -------------------------

    def control_plane(self) -> ControlPlane:
        return ControlPlane.model_validate(self._data["control_plane"])

    def get(self, namespace: str, name: str) -> ControlPlane:
        cp = self.control_plane()
        if (cp.namespace, cp.name) != (namespace, name):
            raise NotFoundError("controlplane", namespace, name)
        return cp

    def update_status(self, control_plane: ControlPlane, status: ControlPlaneStatus) -> ControlPlane:
        current = self.get(control_plane.namespace, control_plane.name)
        if control_plane.resource_version != current.resource_version:
            raise ConflictError(f"controlplane {control_plane.key}: resource version is stale")
        updated = current.model_copy(
            update={
                "status": status,
                "resource_version": str(int(current.resource_version or "0") + 1),
            }
        )
        self._data["control_plane"] = updated.model_dump(mode="json")
        self.path.write_text(yaml.safe_dump(self._data, sort_keys=False))
        log.debug("wrote status of %s to %s", updated.key, self.path)
        return updated

    # ------------------------- SecretStore -------------------------

    @property
    def secrets(self) -> InMemorySecretStore:
        return self._secrets

    # ------------------------- topology -------------------------

    def cluster_plan(self) -> ClusterPlan:
        return ClusterPlan(entries=[PlanEntry(**m) for m in self._data.get("machines") or []])
