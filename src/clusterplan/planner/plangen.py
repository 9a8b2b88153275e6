# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/clusterplan/planner/plangen.py

from __future__ import annotations

from typing import Protocol, Tuple

import yaml

from ..config.models import ControlPlane, PlannerSettings
from .entries import PlanEntry
from .plan import NodePlan, OneTimeInstruction, PlanFile
from .runtime import (
    get_runtime,
    get_runtime_command,
    get_runtime_env_prefix,
    get_runtime_server_unit,
    installer_image,
)
from .s3args import S3Args


class BasePlanBuilder(Protocol):
    def build(
        self, control_plane: ControlPlane, entry: PlanEntry, join_server: str
    ) -> Tuple[NodePlan, str]:
        """Return the node's base plan and the server it joins."""
        ...


class ConfigFilePlanBuilder:
    """
    Base plan carrying only the runtime drop-in config. The init node joins
    nobody; every other node joins *join_server*.
    """

    def build(
        self, control_plane: ControlPlane, entry: PlanEntry, join_server: str
    ) -> Tuple[NodePlan, str]:
        runtime = get_runtime(control_plane.spec.kubernetes_version)
        joined = "" if entry.init_node else join_server

        config = {}
        if joined:
            config["server"] = joined
        if entry.node_name:
            config["node-name"] = entry.node_name

        path = f"/etc/rancher/{runtime}/config.yaml.d/50-clusterplan.yaml"
        plan = NodePlan(files=[PlanFile.from_text(path, yaml.safe_dump(config, sort_keys=True))])
        return plan, joined


class PlanGenerator:
    def __init__(
        self,
        s3: S3Args,
        base: BasePlanBuilder | None = None,
        settings: PlannerSettings | None = None,
    ):
        self.s3 = s3
        self.base = base or ConfigFilePlanBuilder()
        self.settings = settings or PlannerSettings()

    def install_instruction_with_skip_start(self, control_plane: ControlPlane) -> OneTimeInstruction:
        version = control_plane.spec.kubernetes_version
        env_prefix = get_runtime_env_prefix(version)
        return OneTimeInstruction(
            name="install",
            image=installer_image(self.settings.installer_image_prefix, version),
            command="sh",
            args=["-c", "run.sh"],
            env=[
                f"INSTALL_{env_prefix}_SKIP_START=true",
                f"INSTALL_{env_prefix}_EXEC=server",
            ],
        )

    def generate_snapshot_create_plan(
        self, control_plane: ControlPlane, entry: PlanEntry, join_server: str
    ) -> Tuple[NodePlan, str]:
        """
        Base plan + install (without starting the service) + one-time
        ``etcd-snapshot save``, with S3 flags when a target is configured.
        """
        plan, joined = self.base.build(control_plane, entry, join_server)

        request = control_plane.spec.etcd_snapshot_create
        target = request.s3 if request is not None and request.s3 is not None else None
        if target is None and control_plane.spec.etcd is not None:
            target = control_plane.spec.etcd.s3

        s3 = self.s3.to_args(
            target,
            control_plane,
            prefix=self.settings.s3_arg_prefix,
            secret_key_in_env=self.settings.secret_key_in_env,
        )
        plan.add_files(s3.files)
        plan.instructions.append(self.install_instruction_with_skip_start(control_plane))
        plan.instructions.append(
            OneTimeInstruction(
                name="create",
                command=get_runtime_command(control_plane.spec.kubernetes_version),
                args=["etcd-snapshot", "save"] + s3.args,
                env=s3.env,
            )
        )
        return plan, joined

    def generate_service_restart_plan(
        self, control_plane: ControlPlane, entry: PlanEntry, join_server: str
    ) -> Tuple[NodePlan, str]:
        plan, joined = self.base.build(control_plane, entry, join_server)
        plan.instructions.append(
            OneTimeInstruction(
                name="restart",
                command="systemctl",
                args=["restart", get_runtime_server_unit(control_plane.spec.kubernetes_version)],
            )
        )
        return plan, joined
