# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/clusterplan/k8s/client.py
from __future__ import annotations

import base64
from typing import Any, Dict, Optional

from kubernetes import client, config
from kubernetes.client.rest import ApiException

from ..config.models import (
    ControlPlane,
    ControlPlaneSpec,
    ControlPlaneStatus,
    ETCDConfig,
    ETCDSnapshotCreate,
    ETCDSnapshotS3,
)
from ..errors import ConflictError, NotFoundError, PlannerError
from ..stores.interface import Secret

CONTROL_PLANE_GROUP = "rke.cattle.io"
CONTROL_PLANE_VERSION = "v1"
CONTROL_PLANE_PLURAL = "rkecontrolplanes"

APP_GROUP = "project.cattle.io"
APP_VERSION = "v3"
APP_PLURAL = "apps"

# python field -> CRD field
_S3_FIELDS = {
    "bucket": "bucket",
    "endpoint": "endpoint",
    "endpoint_ca": "endpointCA",
    "skip_ssl_verify": "skipSSLVerify",
    "region": "region",
    "folder": "folder",
    "cloud_credential_name": "cloudCredentialName",
}


def load_kube_config(kube_context: Optional[str] = None) -> None:
    if kube_context:
        config.load_kube_config(context=kube_context)
    else:
        config.load_kube_config()


def _api_error(exc: ApiException, kind: str, namespace: str, name: str) -> PlannerError:
    if exc.status == 404:
        return NotFoundError(kind, namespace, name)
    if exc.status == 409:
        return ConflictError(f"{kind} {namespace}/{name}: {exc.reason}")
    return PlannerError(f"{kind} {namespace}/{name}: {exc.status} {exc.reason}")


# ---------------------------------------------------------------------
# CRD <-> model conversion
# ---------------------------------------------------------------------

def _s3_from_obj(obj: Optional[Dict[str, Any]]) -> Optional[ETCDSnapshotS3]:
    if obj is None:
        return None
    return ETCDSnapshotS3(**{py: obj[crd] for py, crd in _S3_FIELDS.items() if crd in obj})


def _s3_to_obj(s3: Optional[ETCDSnapshotS3]) -> Optional[Dict[str, Any]]:
    if s3 is None:
        return None
    return {crd: getattr(s3, py) for py, crd in _S3_FIELDS.items() if getattr(s3, py)}


def _create_from_obj(obj: Optional[Dict[str, Any]]) -> Optional[ETCDSnapshotCreate]:
    if obj is None:
        return None
    return ETCDSnapshotCreate(generation=obj.get("generation", 0), s3=_s3_from_obj(obj.get("s3")))


def _create_to_obj(create: Optional[ETCDSnapshotCreate]) -> Optional[Dict[str, Any]]:
    if create is None:
        return None
    out: Dict[str, Any] = {"generation": create.generation}
    if create.s3 is not None:
        out["s3"] = _s3_to_obj(create.s3)
    return out


def control_plane_from_obj(obj: Dict[str, Any]) -> ControlPlane:
    meta = obj.get("metadata", {})
    spec = obj.get("spec", {})
    status = obj.get("status", {})

    etcd = spec.get("etcd")
    bootstrapped = any(
        c.get("type") == "Bootstrapped" and c.get("status") == "True"
        for c in status.get("conditions", [])
    )
    return ControlPlane(
        namespace=meta["namespace"],
        name=meta["name"],
        resource_version=meta.get("resourceVersion"),
        spec=ControlPlaneSpec(
            kubernetes_version=spec.get("kubernetesVersion", ""),
            etcd=ETCDConfig(
                s3=_s3_from_obj(etcd.get("s3")),
                disable_snapshots=etcd.get("disableSnapshots", False),
            ) if etcd is not None else None,
            etcd_snapshot_create=_create_from_obj(spec.get("etcdSnapshotCreate")),
        ),
        status=ControlPlaneStatus(
            initialized=status.get("initialized", False),
            bootstrapped=bootstrapped,
            etcd_snapshot_create_phase=status.get("etcdSnapshotCreatePhase", ""),
            etcd_snapshot_create=_create_from_obj(status.get("etcdSnapshotCreate")),
        ),
    )


def snapshot_status_patch(cp: ControlPlane, status: ControlPlaneStatus) -> Dict[str, Any]:
    """Merge patch for the snapshot fields; resourceVersion makes it conditional."""
    return {
        "metadata": {"resourceVersion": cp.resource_version},
        "status": {
            "etcdSnapshotCreatePhase": status.etcd_snapshot_create_phase,
            "etcdSnapshotCreate": _create_to_obj(status.etcd_snapshot_create),
        },
    }


# ---------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------

class KubeSecretStore:
    def __init__(self, api: Optional[client.CoreV1Api] = None):
        self.api = api or client.CoreV1Api()

    def get(self, namespace: str, name: str) -> Secret:
        try:
            obj = self.api.read_namespaced_secret(name, namespace)
        except ApiException as exc:
            raise _api_error(exc, "secret", namespace, name) from exc
        data = {k: base64.b64decode(v) for k, v in (obj.data or {}).items()}
        return Secret(namespace=namespace, name=name, data=data)


class KubeControlPlaneStore:
    def __init__(self, api: Optional[client.CustomObjectsApi] = None):
        self.api = api or client.CustomObjectsApi()

    def get(self, namespace: str, name: str) -> ControlPlane:
        try:
            obj = self.api.get_namespaced_custom_object(
                CONTROL_PLANE_GROUP, CONTROL_PLANE_VERSION, namespace, CONTROL_PLANE_PLURAL, name
            )
        except ApiException as exc:
            raise _api_error(exc, "controlplane", namespace, name) from exc
        return control_plane_from_obj(obj)

    def update_status(self, control_plane: ControlPlane, status: ControlPlaneStatus) -> ControlPlane:
        try:
            obj = self.api.patch_namespaced_custom_object_status(
                CONTROL_PLANE_GROUP,
                CONTROL_PLANE_VERSION,
                control_plane.namespace,
                CONTROL_PLANE_PLURAL,
                control_plane.name,
                snapshot_status_patch(control_plane, status),
            )
        except ApiException as exc:
            raise _api_error(exc, "controlplane", control_plane.namespace, control_plane.name) from exc
        return control_plane_from_obj(obj)


class KubeAppStore:
    def __init__(self, api: Optional[client.CustomObjectsApi] = None):
        self.api = api or client.CustomObjectsApi()

    def get(self, namespace: str, name: str) -> dict:
        try:
            return self.api.get_namespaced_custom_object(APP_GROUP, APP_VERSION, namespace, APP_PLURAL, name)
        except ApiException as exc:
            raise _api_error(exc, "app", namespace, name) from exc

    def delete(self, namespace: str, name: str) -> None:
        try:
            self.api.delete_namespaced_custom_object(APP_GROUP, APP_VERSION, namespace, APP_PLURAL, name)
        except ApiException as exc:
            raise _api_error(exc, "app", namespace, name) from exc
