# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/clusterplan/stores/interface.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Protocol

from ..config.models import ControlPlane, ControlPlaneStatus


@dataclass(frozen=True)
class Secret:
    namespace: str
    name: str
    data: Dict[str, bytes] = field(default_factory=dict)


class SecretStore(Protocol):
    def get(self, namespace: str, name: str) -> Secret:
        """Raise NotFoundError when the secret does not exist."""
        ...


class ControlPlaneStore(Protocol):
    def get(self, namespace: str, name: str) -> ControlPlane: ...

    def update_status(self, control_plane: ControlPlane, status: ControlPlaneStatus) -> ControlPlane:
        """Raise ConflictError when control_plane.resource_version is stale."""
        ...


class AppStore(Protocol):
    def get(self, namespace: str, name: str) -> dict: ...

    def delete(self, namespace: str, name: str) -> None: ...
