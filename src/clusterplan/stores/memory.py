# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/clusterplan/stores/memory.py

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union

from ..config.models import ControlPlane, ControlPlaneStatus
from ..errors import ConflictError, NotFoundError
from .interface import Secret


def _to_bytes(v: Union[str, bytes, bool, int, float]) -> bytes:
    if isinstance(v, bytes):
        return v
    if isinstance(v, bool):
        # YAML true/false, stored the way a Secret would carry it
        return b"true" if v else b"false"
    return str(v).encode()


class InMemorySecretStore:
    def __init__(self):
        self._secrets: Dict[Tuple[str, str], Secret] = {}
        self.gets = 0

    def add(self, namespace: str, name: str, data: Dict[str, Any]) -> Secret:
        secret = Secret(namespace, name, {k: _to_bytes(v) for k, v in data.items()})
        self._secrets[(namespace, name)] = secret
        return secret

    def get(self, namespace: str, name: str) -> Secret:
        self.gets += 1
        try:
            return self._secrets[(namespace, name)]
        except KeyError:
            raise NotFoundError("secret", namespace, name) from None


class InMemoryControlPlaneStore:
    """
    Keeps control planes in a dict. resource_version is a counter bumped on
    every status write.
    """

    def __init__(self, *control_planes: ControlPlane):
        self._items: Dict[Tuple[str, str], ControlPlane] = {}
        self.writes = 0
        for cp in control_planes:
            self.put(cp)

    def put(self, cp: ControlPlane) -> ControlPlane:
        if cp.resource_version is None:
            cp = cp.model_copy(update={"resource_version": "1"})
        self._items[(cp.namespace, cp.name)] = cp
        return cp

    def get(self, namespace: str, name: str) -> ControlPlane:
        try:
            return self._items[(namespace, name)].model_copy(deep=True)
        except KeyError:
            raise NotFoundError("controlplane", namespace, name) from None

    def update_status(self, control_plane: ControlPlane, status: ControlPlaneStatus) -> ControlPlane:
        current = self.get(control_plane.namespace, control_plane.name)
        if control_plane.resource_version != current.resource_version:
            raise ConflictError(
                f"controlplane {control_plane.key}: resource version "
                f"{control_plane.resource_version} is stale (current {current.resource_version})"
            )
        self.writes += 1
        updated = current.model_copy(
            update={
                "status": status,
                "resource_version": str(int(current.resource_version or "0") + 1),
            }
        )
        self._items[(updated.namespace, updated.name)] = updated
        return updated.model_copy(deep=True)


class InMemoryAppStore:
    def __init__(self, apps: Optional[Dict[Tuple[str, str], dict]] = None):
        self._apps: Dict[Tuple[str, str], dict] = dict(apps or {})
        self.deleted: list[Tuple[str, str]] = []

    def get(self, namespace: str, name: str) -> dict:
        try:
            return self._apps[(namespace, name)]
        except KeyError:
            raise NotFoundError("app", namespace, name) from None

    def delete(self, namespace: str, name: str) -> None:
        if self._apps.pop((namespace, name), None) is None:
            raise NotFoundError("app", namespace, name)
        self.deleted.append((namespace, name))
