# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/clusterplan/hostedcluster/models.py

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class HostedProvider(str, Enum):
    AKS = "aks"
    EKS = "eks"
    GKE = "gke"


class HostedCluster(BaseModel):
    """
    A cluster as far as the operator charts care: which hosted provider (if
    any) manages it. ``provider`` is None for clusters we provision ourselves.
    """

    name: str
    provider: Optional[HostedProvider] = None
    provider_config: Dict[str, Any] = Field(default_factory=dict)
    deleting: bool = False

    @classmethod
    def from_configs(
        cls,
        name: str,
        aks_config: Optional[Dict[str, Any]] = None,
        eks_config: Optional[Dict[str, Any]] = None,
        gke_config: Optional[Dict[str, Any]] = None,
        deleting: bool = False,
    ) -> "HostedCluster":
        """Build from the three optional per-provider config blocks; at most one may be set."""
        given = {
            p: c
            for p, c in (
                (HostedProvider.AKS, aks_config),
                (HostedProvider.EKS, eks_config),
                (HostedProvider.GKE, gke_config),
            )
            if c is not None
        }
        if len(given) > 1:
            raise ValueError(
                f"cluster {name}: more than one provider config set: "
                + ", ".join(sorted(p.value for p in given))
            )
        if not given:
            return cls(name=name, deleting=deleting)
        provider, cfg = next(iter(given.items()))
        return cls(name=name, provider=provider, provider_config=cfg, deleting=deleting)
