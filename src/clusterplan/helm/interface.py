# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/clusterplan/helm/interface.py
from __future__ import annotations

from typing import Any, Dict, Optional, Protocol


class ChartInstaller(Protocol):
    def ensure(
        self,
        namespace: str,
        name: str,
        version: Optional[str],
        values: Optional[Dict[str, Any]],
        wait: bool,
    ) -> None:
        """Install or upgrade the release so it matches; idempotent."""
        ...
