# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/clusterplan/planner/credentials.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from ..errors import CredentialResolutionError, PlannerError
from ..stores.interface import SecretStore


@dataclass(frozen=True)
class S3Credential:
    access_key: str = ""
    secret_key: str = ""
    region: str = ""
    endpoint: str = ""
    endpoint_ca: str = ""
    skip_ssl_verify: bool = False
    bucket: str = ""
    folder: str = ""


def rsplit_key(key: str, sep: str = "-") -> Tuple[str, str]:
    """Split on the last *sep*. A key without *sep* comes back as ("", key)."""
    head, found, tail = key.rpartition(sep)
    if not found:
        return "", key.strip()
    return head.strip(), tail.strip()


def parse_reference(namespace: str, name: str) -> Tuple[str, str]:
    """``other-ns:secret`` points outside the control plane's namespace."""
    ref_ns, sep, ref_name = name.partition(":")
    if sep and ref_ns and ref_name:
        return ref_ns, ref_name
    return namespace, name


class CredentialResolver:
    """Projects a cloud credential secret into an S3Credential."""

    def __init__(self, secrets: SecretStore):
        self.secrets = secrets

    def resolve(self, namespace: str, name: str) -> S3Credential:
        if not name:
            return S3Credential()

        ns, secret_name = parse_reference(namespace, name)
        try:
            secret = self.secrets.get(ns, secret_name)
        except PlannerError as exc:
            raise CredentialResolutionError(
                f"failed to lookup etcdSnapshotCloudCredentialName: {exc}"
            ) from exc

        data: Dict[str, bytes] = {}
        for k, v in secret.data.items():
            _, k = rsplit_key(k)
            data[k] = v

        def s(key: str) -> str:
            # secret data is arbitrary bytes
            return data.get(key, b"").decode(errors="replace")

        return S3Credential(
            access_key=s("accessKey"),
            secret_key=s("secretKey"),
            region=s("defaultRegion"),
            endpoint=s("defaultEndpoint"),
            endpoint_ca=s("defaultEndpointCA"),
            skip_ssl_verify=s("defaultSkipSSLVerify") == "true",
            bucket=s("defaultBucket"),
            folder=s("defaultFolder"),
        )
