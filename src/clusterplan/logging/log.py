# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/clusterplan/logging/log.py

from __future__ import annotations

import logging
import os
from pathlib import Path
from datetime import datetime, timezone
import uuid

# chatty below WARNING on every API call
_QUIET = ("kubernetes", "urllib3")


def _log_root(base_dir: Path | None) -> Path:
    if base_dir is not None:
        return base_dir
    env = os.environ.get("CLUSTERPLAN_LOG_DIR")
    if env:
        return Path(env)
    return Path.home() / ".clusterplan" / "logs"


def init_logging(
    *,
    base_dir: Path | None = None,
    command: str = "run",
    name: str = "clusterplan",
    verbose: bool = False,
) -> tuple[logging.Logger, str, Path]:
    """
    One log file per CLI invocation, grouped by command:

        <base_dir>/snapshot-reconcile/20261019-101500-1a2b3c4d.log

    The file gets every plan and phase change (DEBUG); the console gets INFO,
    or DEBUG with verbose. Returns the run_id so observers can reuse it.
    """
    run_id = str(uuid.uuid4())

    run_dir = _log_root(base_dir) / command
    run_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    log_path = run_dir / f"{ts}-{run_id[:8]}.log"

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    for h in logger.handlers:
        h.close()
    logger.handlers.clear()
    logger.propagate = False

    fh = logging.FileHandler(log_path)
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(
        logging.Formatter(
            "%(asctime)s | %(levelname)-7s | %(module)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    ch = logging.StreamHandler()
    ch.setLevel(logging.DEBUG if verbose else logging.INFO)
    ch.setFormatter(logging.Formatter("%(levelname)-7s %(message)s"))

    logger.addHandler(fh)
    logger.addHandler(ch)

    for noisy in _QUIET:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger.debug("command=%s run_id=%s log_file=%s", command, run_id, log_path)

    return logger, run_id, log_path
