# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/clusterplan/helm/cli_runner.py

from __future__ import annotations

import logging
import subprocess
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import HelmError

log = logging.getLogger("clusterplan")


class HelmCliRunner:
    """
    Chart installer backed by the `helm` CLI.
    - ensure() is `helm upgrade --install`, so repeating it is harmless.
    - Testable by mocking subprocess.run.
    """

    def __init__(
        self,
        kube_context: str | None = None,
        repo: str | None = None,
        env: dict[str, str] | None = None,
        timeout_seconds: int = 600,
    ):
        self.kube_context = kube_context
        self.repo = repo
        self.env = env or {}
        self.timeout_seconds = timeout_seconds

    # ------------------------- internal helpers -------------------------

    def _base(self) -> list[str]:
        cmd = ["helm"]
        if self.kube_context:
            cmd += ["--kube-context", self.kube_context]
        return cmd

    def _run(self, argv: List[str], allow_rc: set[int] | None = None) -> subprocess.CompletedProcess:
        allow_rc = allow_rc or {0}
        cp = subprocess.run(
            argv,
            check=False,
            text=True,
            capture_output=True,
            env=self.env or None,
        )
        if cp.returncode not in allow_rc:
            stderr = getattr(cp, "stderr", "") or ""
            raise HelmError(f"helm failed (rc={cp.returncode}) for {argv!r}\n{stderr}")
        return cp

    def _chart_ref(self, name: str) -> str:
        return f"{self.repo}/{name}" if self.repo else name

    # ------------------------- ChartInstaller -------------------------

    def ensure(
        self,
        namespace: str,
        name: str,
        version: Optional[str] = None,
        values: Optional[Dict[str, Any]] = None,
        wait: bool = False,
    ) -> None:
        argv = self._base() + [
            "upgrade", "--install", name, self._chart_ref(name),
            "-n", namespace, "--create-namespace",
        ]
        if version:
            argv += ["--version", version]
        if wait:
            argv += ["--wait", "--timeout", f"{self.timeout_seconds}s"]

        values_file = None
        if values:
            # inline values go through a temp file
            with tempfile.NamedTemporaryFile("w", suffix=".yaml", delete=False) as tf:
                yaml.safe_dump(values, tf)
                values_file = tf.name
            argv += ["-f", values_file]

        log.debug("ensuring chart %s in %s", name, namespace)
        try:
            self._run(argv)
        finally:
            if values_file:
                Path(values_file).unlink(missing_ok=True)
