# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/clusterplan/observers/console.py
import typer

from .events import BaseEvent


class ConsoleObserver:
    def notify(self, event: BaseEvent) -> None:
        d = event.dict()
        k = event.__class__.__name__
        typer.echo(f"[{d['ts']}] {k} run={d['run_id']} cluster={d['cluster']} data={{"
                   + ", ".join(f"{x}={y}" for x, y in d.items() if x not in ('ts', 'run_id', 'cluster')) + "}")
