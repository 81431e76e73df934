"""Helpers deciding whether pods keep a namespace in use."""

from __future__ import annotations

from collections import Counter
from typing import Any

ACTIVE_POD_PHASES: frozenset[str] = frozenset({"Running", "Pending", "Unknown"})


def count_pods_by_phase(pods: dict[str, Any], namespace: str) -> dict[str, int]:
    """Aggregate pod counters by phase for one namespace."""
    phases: Counter[str] = Counter()
    for pod in pods.get("items", []):
        metadata = pod.get("metadata", {})
        if metadata.get("namespace", namespace) != namespace:
            continue
        phases[pod.get("status", {}).get("phase", "Unknown")] += 1
    return dict(phases)


def has_active_pods(pods: dict[str, Any], namespace: str) -> bool:
    """Return whether any pod in namespace is running, pending or unknown."""
    phases = count_pods_by_phase(pods, namespace)
    return any(phases.get(phase, 0) for phase in ACTIVE_POD_PHASES)
