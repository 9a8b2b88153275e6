# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/clusterplan/helm/errors.py
class HelmError(RuntimeError):
    """Base class for Helm-related failures."""
