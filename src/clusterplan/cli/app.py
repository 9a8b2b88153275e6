# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/clusterplan/cli/app.py
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from clusterplan.config.loader import load_config
from clusterplan.config.models import PlannerConfig
from clusterplan.errors import PlannerError
from clusterplan.helm.cli_runner import HelmCliRunner
from clusterplan.helm.errors import HelmError
from clusterplan.hostedcluster.handler import HostedClusterHandler
from clusterplan.hostedcluster.models import HostedCluster, HostedProvider
from clusterplan.k8s.client import KubeAppStore, KubeSecretStore, load_kube_config
from clusterplan.logging.log import init_logging
from clusterplan.observers.console import ConsoleObserver
from clusterplan.observers.dispatcher import EventBus
from clusterplan.observers.jsonfile import JsonFileObserver
from clusterplan.observers.logger import LoggerObserver
from clusterplan.planner.reconciler import build_snapshot_reconciler
from clusterplan.planner.transport import DryRunTransport
from clusterplan.stores.file import FileStateStore


# ------------------------------------------------------------------------------
# CLI setup
# ------------------------------------------------------------------------------

app = typer.Typer(help="Cluster provisioning planner")
snapshot_app = typer.Typer(help="etcd snapshot create state machine")
hosted_app = typer.Typer(help="Hosted cluster operator charts")
app.add_typer(snapshot_app, name="snapshot")
app.add_typer(hosted_app, name="hosted")


def _setup(command: str, config: Optional[Path], log_dir: Optional[Path], verbose: bool):
    cfg = load_config(config)
    base_dir = log_dir or (Path(cfg.log_dir) if cfg.log_dir else None)
    logger, run_id, log_path = init_logging(base_dir=base_dir, command=command, verbose=verbose)
    return cfg, logger, run_id, log_path


def _bus(cfg: PlannerConfig, logger, run_id: str, log_path: Path) -> EventBus:
    observers: List = []
    for name in cfg.observers:
        if name == "console":
            observers.append(ConsoleObserver())
        elif name == "logger":
            observers.append(LoggerObserver(logger))
        elif name == "jsonfile":
            observers.append(JsonFileObserver(log_path.parent / f"{run_id}.jsonl"))
    return EventBus(observers)


# ------------------------------------------------------------------------------
# snapshot
# ------------------------------------------------------------------------------

@snapshot_app.command("reconcile")
def snapshot_reconcile(
    state_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="YAML cluster state"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Planner config YAML"),
    passes: int = typer.Option(1, "--passes", min=1, help="Reconcile passes to run"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """
    Run reconcile passes against a state file with a dry-run transport.
    Status changes are written back to the file.
    """
    cfg, logger, run_id, log_path = _setup("snapshot-reconcile", config, log_dir, verbose)
    store = FileStateStore(state_file)
    cp = store.control_plane()

    reconciler = build_snapshot_reconciler(
        store=store,
        secrets=store.secrets,
        transport=DryRunTransport(logger),
        settings=cfg.settings,
        bus=_bus(cfg, logger, run_id, log_path),
    )

    for i in range(1, passes + 1):
        try:
            outcome = reconciler.reconcile(cp.namespace, cp.name, store.cluster_plan())
        except PlannerError as exc:
            typer.echo(f"pass {i}: error: {exc}", err=True)
            raise typer.Exit(1)
        typer.echo(f"pass {i}: {outcome}")
        if outcome.terminal_failure:
            raise typer.Exit(1)
        if outcome.ok:
            break

    _echo_status(store)


@snapshot_app.command("status")
def snapshot_status(
    state_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="YAML cluster state"),
):
    """Show the persisted snapshot phase and request."""
    _echo_status(FileStateStore(state_file))


def _echo_status(store: FileStateStore) -> None:
    status = store.control_plane().status
    typer.echo(f"phase: {status.etcd_snapshot_create_phase or '<none>'}")
    request = status.etcd_snapshot_create
    typer.echo(f"request: {request.model_dump_json() if request else '<none>'}")


# ------------------------------------------------------------------------------
# hosted
# ------------------------------------------------------------------------------

@hosted_app.command("ensure")
def hosted_ensure(
    cluster: str = typer.Argument(..., help="Cluster name"),
    provider: HostedProvider = typer.Option(..., "--provider", case_sensitive=False),
    system_project: str = typer.Option(..., "--system-project", help="Namespace of the system project"),
    config: Optional[Path] = typer.Option(None, "--config", "-c"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Install the provider operator charts for a hosted cluster."""
    cfg, logger, run_id, log_path = _setup("hosted-ensure", config, log_dir, verbose)
    load_kube_config(cfg.kube_context)

    handler = HostedClusterHandler(
        installer=HelmCliRunner(kube_context=cfg.kube_context, repo=cfg.chart_repo),
        apps=KubeAppStore(),
        secrets=KubeSecretStore(),
        system_project_namespace=system_project,
        settings=cfg.operator_charts,
        bus=_bus(cfg, logger, run_id, log_path),
    )
    try:
        handler.on_cluster_change(HostedCluster(name=cluster, provider=provider))
    except (HelmError, PlannerError) as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(1)
    typer.echo(f"{provider.value} operator charts ensured for {cluster}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
