"""kubectl-backed check for workloads still running in a namespace."""

import logging
from collections.abc import Mapping
from pathlib import Path

from nsreg.application.ports import NamespaceStore
from nsreg.domain.errors import NotFoundError
from nsreg.domain.workload_policy import has_active_pods
from nsreg.infrastructure.cluster_gateway import resolve_context
from nsreg.infrastructure.kubectl_client import KubectlError, kubectl_json

logger = logging.getLogger(__name__)


class KubectlWorkloadCheck:
    """Report namespaces whose pods are still running on the cluster.

    When the cluster cannot be queried the namespace is reported as in use,
    so de-registration is blocked until the check can be answered.
    """

    def __init__(
        self,
        namespaces: NamespaceStore,
        contexts: Mapping[int, str],
        *,
        kubeconfig: Path | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self.namespaces = namespaces
        self.contexts = dict(contexts)
        self.kubeconfig = kubeconfig
        self.timeout_seconds = timeout_seconds

    def has_active_dependents(self, namespace_id: int) -> bool:
        """Return whether the registered namespace has active pods."""
        namespace = self.namespaces.find_by_id(namespace_id)
        if namespace is None:
            return False
        try:
            context = resolve_context(self.contexts, namespace.cluster_code)
        except NotFoundError:
            logger.info(
                "Cluster %s not configured; skipping workload check for %s",
                namespace.cluster_code,
                namespace.name,
            )
            return False
        try:
            pods = kubectl_json(
                f"get pods -n {namespace.name}",
                context=context,
                kubeconfig=self.kubeconfig,
                timeout=self.timeout_seconds,
            )
        except KubectlError as exc:
            logger.warning(
                "Cannot list pods of %s on cluster %s: %s",
                namespace.name,
                namespace.cluster_code,
                exc,
            )
            return True
        return has_active_pods(pods, namespace.name)
