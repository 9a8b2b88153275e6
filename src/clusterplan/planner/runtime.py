# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/clusterplan/planner/runtime.py

from __future__ import annotations

import hashlib
import posixpath

RUNTIME_RKE2 = "rke2"
RUNTIME_K3S = "k3s"


def get_runtime(kubernetes_version: str) -> str:
    if RUNTIME_RKE2 in kubernetes_version:
        return RUNTIME_RKE2
    return RUNTIME_K3S


def get_runtime_command(kubernetes_version: str) -> str:
    return get_runtime(kubernetes_version)


def get_runtime_server_unit(kubernetes_version: str) -> str:
    return f"{get_runtime(kubernetes_version)}-server"


def get_runtime_env_prefix(kubernetes_version: str) -> str:
    return get_runtime(kubernetes_version).upper()


def installer_image(prefix: str, kubernetes_version: str) -> str:
    # image tags cannot carry "+"
    tag = kubernetes_version.replace("+", "-")
    return f"{prefix}{get_runtime(kubernetes_version)}:{tag}"


def config_file(kubernetes_version: str, filename: str) -> str:
    """On-node path for a planner managed config file."""
    return posixpath.join(
        "/var/lib/rancher", get_runtime(kubernetes_version), "etc", "config-files", filename
    )


def name_hex(value: str, n: int) -> str:
    """First *n* hex digits of the sha256 of *value*."""
    return hashlib.sha256(value.encode()).hexdigest()[:n]
