# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/clusterplan/errors.py


class PlannerError(RuntimeError):
    """Base class for planner failures."""


class NotFoundError(PlannerError):
    """Raised by stores when the requested object does not exist."""

    def __init__(self, kind: str, namespace: str, name: str):
        super().__init__(f'{kind} "{namespace}/{name}" not found')
        self.kind = kind
        self.namespace = namespace
        self.name = name


class ConflictError(PlannerError):
    """Raised by stores when a write loses an optimistic-concurrency race."""


class CredentialResolutionError(PlannerError):
    """Raised when a referenced cloud credential cannot be resolved."""


class InitNodeError(PlannerError):
    """Raised when the init node cannot be determined unambiguously."""
