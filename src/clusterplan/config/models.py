# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/clusterplan/config/models.py

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class SnapshotPhase(str, Enum):
    NONE = ""
    STARTED = "Started"
    RESTART_CLUSTER_SERVICES = "RestartCluster"
    FINISHED = "Finished"
    FAILED = "Failed"


class ETCDSnapshotS3(BaseModel):
    """S3 target for etcd snapshots. Any field may be blank."""

    model_config = ConfigDict(frozen=True)

    bucket: str = ""
    endpoint: str = ""
    endpoint_ca: str = ""
    skip_ssl_verify: bool = False
    region: str = ""
    folder: str = ""
    cloud_credential_name: str = ""


class ETCDSnapshotCreate(BaseModel):
    """
    Operator request for a snapshot. Bumping ``generation`` (or changing the
    S3 override) makes it a new request.
    """

    model_config = ConfigDict(frozen=True)

    generation: int = 0
    s3: Optional[ETCDSnapshotS3] = None


class ETCDConfig(BaseModel):
    s3: Optional[ETCDSnapshotS3] = None
    disable_snapshots: bool = False


class ControlPlaneSpec(BaseModel):
    kubernetes_version: str
    etcd: Optional[ETCDConfig] = None
    etcd_snapshot_create: Optional[ETCDSnapshotCreate] = None


class ControlPlaneStatus(BaseModel):
    initialized: bool = False
    bootstrapped: bool = False
    # plain string: a phase written by another controller version must still
    # load, and is compared against SnapshotPhase members
    etcd_snapshot_create_phase: str = SnapshotPhase.NONE.value
    etcd_snapshot_create: Optional[ETCDSnapshotCreate] = None


class ControlPlane(BaseModel):
    namespace: str
    name: str
    resource_version: Optional[str] = None
    spec: ControlPlaneSpec
    status: ControlPlaneStatus = Field(default_factory=ControlPlaneStatus)

    @property
    def key(self) -> str:
        return f"{self.namespace}/{self.name}"


# ---------------------------------------------------------------------
# Planner settings
# ---------------------------------------------------------------------

class PlannerSettings(BaseModel):
    """Tunables for the snapshot planner."""

    # assign_and_check_plan thresholds for the snapshot create plan
    success_threshold: int = 3
    failure_threshold: int = 3
    # thresholds for the service restart plan
    restart_success_threshold: int = 1
    restart_failure_threshold: int = 1

    installer_image_prefix: str = "rancher/system-agent-installer-"
    secret_key_in_env: bool = True
    s3_arg_prefix: str = ""


class ChartDefinition(BaseModel):
    release_namespace: str = "cattle-system"
    chart_name: str


class OperatorCharts(BaseModel):
    crd: ChartDefinition
    operator: ChartDefinition


def _default_operator_charts() -> Dict[str, OperatorCharts]:
    return {
        provider: OperatorCharts(
            crd=ChartDefinition(chart_name=f"rancher-{provider}-operator-crd"),
            operator=ChartDefinition(chart_name=f"rancher-{provider}-operator"),
        )
        for provider in ("aks", "eks", "gke")
    }


class OperatorChartSettings(BaseModel):
    """Charts installed for hosted (AKS/EKS/GKE) clusters."""

    charts: Dict[Literal["aks", "eks", "gke"], OperatorCharts] = Field(
        default_factory=_default_operator_charts
    )
    chart_version: Optional[str] = None
    system_namespace: str = "cattle-system"
    legacy_operator_app_name_format: str = "rancher-{provider}-operator"
    additional_ca_secret: str = "tls-ca-additional"
    additional_ca_key: str = "ca-additional.pem"
    system_default_registry: str = ""


class PlannerConfig(BaseModel):
    settings: PlannerSettings = Field(default_factory=PlannerSettings)
    operator_charts: OperatorChartSettings = Field(default_factory=OperatorChartSettings)
    kube_context: Optional[str] = None
    chart_repo: Optional[str] = None
    log_dir: Optional[str] = None
    observers: List[Literal["console", "logger", "jsonfile"]] = Field(
        default_factory=lambda: ["logger"]
    )
