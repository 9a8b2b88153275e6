# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/clusterplan/planner/s3args.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..config.models import ControlPlane, ETCDSnapshotS3
from .credentials import CredentialResolver
from .plan import PlanFile
from .runtime import config_file, name_hex

CA_SUFFIX = ".crt"


@dataclass
class S3Render:
    args: List[str] = field(default_factory=list)
    env: List[str] = field(default_factory=list)
    files: List[PlanFile] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.args or self.env or self.files)


def first(one: str, two: str) -> str:
    """First non-blank of the two, left to right."""
    return one if one else two


def s3_enabled(s3: Optional[ETCDSnapshotS3]) -> bool:
    if s3 is None:
        return False
    return bool(s3.bucket or s3.endpoint or s3.folder or s3.cloud_credential_name or s3.region)


def endpoint_ca_filename(ca: str) -> str:
    return f"s3-endpoint-ca-{name_hex(ca, 5)}{CA_SUFFIX}"


class S3Args:
    """
    Renders etcd S3 flags for the runtime CLI.

    Request fields win over the credential's defaults. Access and secret keys
    only ever come from the credential. CA content is always shipped as a
    file and referenced by path.
    """

    def __init__(self, resolver: CredentialResolver):
        self.resolver = resolver

    def to_args(
        self,
        s3: Optional[ETCDSnapshotS3],
        control_plane: ControlPlane,
        prefix: str = "",
        secret_key_in_env: bool = False,
    ) -> S3Render:
        out = S3Render()
        if not s3_enabled(s3):
            return out

        cred_name = s3.cloud_credential_name
        etcd = control_plane.spec.etcd
        if not cred_name and etcd is not None and etcd.s3 is not None:
            cred_name = etcd.s3.cloud_credential_name

        cred = self.resolver.resolve(control_plane.namespace, cred_name)
        version = control_plane.spec.kubernetes_version
        args = out.args

        if s3.bucket or cred.bucket:
            args.append(f"--{prefix}s3-bucket={first(s3.bucket, cred.bucket)}")
        if cred.access_key:
            args.append(f"--{prefix}s3-access-key={cred.access_key}")
        if cred.secret_key:
            if secret_key_in_env:
                out.env.append(f"AWS_SECRET_ACCESS_KEY={cred.secret_key}")
            else:
                args.append(f"--{prefix}s3-secret-key={cred.secret_key}")
        if v := first(s3.region, cred.region):
            args.append(f"--{prefix}s3-region={v}")
        if v := first(s3.folder, cred.folder):
            args.append(f"--{prefix}s3-folder={v}")
        if v := first(s3.endpoint, cred.endpoint):
            args.append(f"--{prefix}s3-endpoint={v}")
        if s3.skip_ssl_verify or cred.skip_ssl_verify:
            args.append(f"--{prefix}s3-skip-ssl-verify")

        if v := first(s3.endpoint_ca, cred.endpoint_ca):
            if v == s3.endpoint_ca and v.endswith(CA_SUFFIX):
                # path of a CA file written by an earlier plan
                args.append(f"--{prefix}s3-endpoint-ca={v}")
                if cred.endpoint_ca:
                    path = config_file(version, endpoint_ca_filename(cred.endpoint_ca))
                    if path == v:
                        out.files.append(PlanFile.from_text(path, cred.endpoint_ca))
            else:
                path = config_file(version, endpoint_ca_filename(v))
                out.files.append(PlanFile.from_text(path, v))
                args.append(f"--{prefix}s3-endpoint-ca={path}")

        if args:
            args.append(f"--{prefix}s3")
        return out
