# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/clusterplan/hostedcluster/handler.py

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

from ..config.models import OperatorChartSettings
from ..errors import NotFoundError
from ..helm.interface import ChartInstaller
from ..observers.dispatcher import EventBus
from ..observers.events import LegacyOperatorRemoved, OperatorChartEnsured, new_ctx
from ..stores.interface import AppStore, SecretStore
from .models import HostedCluster

log = logging.getLogger("clusterplan")


class HostedClusterHandler:
    """
    Keeps the provider operator (CRD chart + operator chart) installed for
    AKS/EKS/GKE clusters. Called on every cluster change; safe to repeat.
    """

    def __init__(
        self,
        *,
        installer: ChartInstaller,
        apps: AppStore,
        secrets: SecretStore,
        system_project_namespace: str,
        settings: Optional[OperatorChartSettings] = None,
        bus: Optional[EventBus] = None,
    ):
        self.installer = installer
        self.apps = apps
        self.secrets = secrets
        self.system_project_namespace = system_project_namespace
        self.settings = settings or OperatorChartSettings()
        self.bus = bus or EventBus()

    def on_cluster_change(self, cluster: Optional[HostedCluster]) -> Optional[HostedCluster]:
        if cluster is None or cluster.deleting:
            return cluster
        if cluster.provider is None:
            return cluster

        provider = cluster.provider.value
        charts = self.settings.charts[provider]
        run_ctx = new_ctx(cluster=cluster.name)

        self.remove_legacy_operator_if_exists(provider, run_ctx)

        self.installer.ensure(
            charts.crd.release_namespace, charts.crd.chart_name, self.settings.chart_version, None, True
        )
        self.bus.emit(
            OperatorChartEnsured(namespace=charts.crd.release_namespace, chart=charts.crd.chart_name, **run_ctx)
        )

        additional_ca = self.get_additional_ca()
        values = self.chart_values(additional_ca is not None)

        self.installer.ensure(
            charts.operator.release_namespace,
            charts.operator.chart_name,
            self.settings.chart_version,
            values,
            True,
        )
        self.bus.emit(
            OperatorChartEnsured(
                namespace=charts.operator.release_namespace, chart=charts.operator.chart_name, **run_ctx
            )
        )
        log.info("[hosted] cluster %s: %s operator charts ensured", cluster.name, provider)
        return cluster

    def chart_values(self, additional_trusted_cas: bool) -> Dict[str, Any]:
        return {
            "global": {
                "cattle": {"systemDefaultRegistry": self.settings.system_default_registry},
            },
            "httpProxy": os.environ.get("HTTP_PROXY", ""),
            "httpsProxy": os.environ.get("HTTPS_PROXY", ""),
            "noProxy": os.environ.get("NO_PROXY", ""),
            "additionalTrustedCAs": additional_trusted_cas,
        }

    def remove_legacy_operator_if_exists(self, provider: str, run_ctx: Dict[str, Any]) -> None:
        app = self.settings.legacy_operator_app_name_format.format(provider=provider)
        try:
            self.apps.get(self.system_project_namespace, app)
        except NotFoundError:
            return
        self.apps.delete(self.system_project_namespace, app)
        log.info("[hosted] removed legacy operator app %s/%s", self.system_project_namespace, app)
        self.bus.emit(LegacyOperatorRemoved(app=app, **run_ctx))

    def get_additional_ca(self) -> Optional[bytes]:
        try:
            secret = self.secrets.get(self.settings.system_namespace, self.settings.additional_ca_secret)
        except NotFoundError:
            return None
        return secret.data.get(self.settings.additional_ca_key)
