# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations
import logging
from .events import BaseEvent, SnapshotNodeFailed


class LoggerObserver:
    """Writes events to the run log. Node failures go out as warnings."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def notify(self, event: BaseEvent) -> None:
        d = event.dict()
        etype = event.__class__.__name__
        msg = ", ".join(f"{k}={v}" for k, v in d.items() if k not in ("ts", "run_id", "cluster"))
        level = logging.WARNING if isinstance(event, SnapshotNodeFailed) else logging.INFO
        self.logger.log(level, "[event] %s %s run=%s: %s", etype, d["cluster"], d["run_id"], msg)
