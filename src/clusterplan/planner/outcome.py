# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/clusterplan/planner/outcome.py

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable


class OutcomeKind(str, Enum):
    PROGRESSED = "progressed"
    WAITING = "waiting"
    TERMINAL = "terminal"


@dataclass(frozen=True)
class Outcome:
    """
    Result of one planner step.

    PROGRESSED  the step is done, the caller may continue
    WAITING     state was written or work is in flight, requeue and retry
    TERMINAL    the step failed, retry only per the caller's backoff
    """

    kind: OutcomeKind
    message: str = ""

    @classmethod
    def progressed(cls) -> "Outcome":
        return cls(OutcomeKind.PROGRESSED)

    @classmethod
    def waiting(cls, message: str) -> "Outcome":
        return cls(OutcomeKind.WAITING, message)

    @classmethod
    def terminal(cls, message: str) -> "Outcome":
        return cls(OutcomeKind.TERMINAL, message)

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.PROGRESSED

    @property
    def retryable(self) -> bool:
        return self.kind is OutcomeKind.WAITING

    @property
    def terminal_failure(self) -> bool:
        return self.kind is OutcomeKind.TERMINAL

    def __str__(self) -> str:
        if self.ok:
            return "ok"
        return f"{self.kind.value}: {self.message}"


def join_messages(outcomes: Iterable[Outcome]) -> str:
    """Composite message of the non-PROGRESSED outcomes, independent of order."""
    return ", ".join(sorted(o.message for o in outcomes if not o.ok))


def combine(outcomes: Iterable[Outcome]) -> Outcome:
    """
    Fold many outcomes into one. TERMINAL wins over WAITING, WAITING over
    PROGRESSED. The message lists every failure, sorted.
    """
    outcomes = [o for o in outcomes if not o.ok]
    if not outcomes:
        return Outcome.progressed()
    message = join_messages(outcomes)
    if any(o.terminal_failure for o in outcomes):
        return Outcome.terminal(message)
    return Outcome.waiting(message)
