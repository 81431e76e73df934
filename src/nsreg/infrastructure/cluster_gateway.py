"""kubectl-backed gateway to the live cluster control plane."""

import logging
from collections.abc import Mapping
from pathlib import Path

from nsreg.domain.errors import ExternalCreateError, NotFoundError
from nsreg.infrastructure.kubectl_client import (
    KubectlAlreadyExistsError,
    KubectlError,
    KubectlNotFoundError,
    kubectl_json,
    kubectl_text,
)

logger = logging.getLogger(__name__)


def resolve_context(contexts: Mapping[int, str], cluster_code: int) -> str:
    """Return the kubectl context configured for a cluster code."""
    try:
        return contexts[cluster_code]
    except KeyError as exc:
        raise NotFoundError(f"cluster {cluster_code} is not configured") from exc


class KubectlClusterGateway:
    """Check and create namespaces on clusters addressed by kubectl context."""

    def __init__(
        self,
        contexts: Mapping[int, str],
        *,
        kubeconfig: Path | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self.contexts = dict(contexts)
        self.kubeconfig = kubeconfig
        self.timeout_seconds = timeout_seconds

    def exists(self, cluster_code: int, name: str) -> bool:
        """Return whether namespace ``name`` exists on the cluster.

        Raises
        ------
        NotFoundError
            Cluster is not configured or cannot be reached.
        """
        context = resolve_context(self.contexts, cluster_code)
        try:
            kubectl_json(
                f"get namespace {name}",
                context=context,
                kubeconfig=self.kubeconfig,
                timeout=self.timeout_seconds,
            )
        except KubectlNotFoundError:
            return False
        except KubectlError as exc:
            logger.warning("Cluster %s unreachable: %s", cluster_code, exc)
            raise NotFoundError(
                f"cluster {cluster_code} is unreachable: {exc}"
            ) from exc
        return True

    def create(self, cluster_code: int, name: str) -> None:
        """Create namespace ``name`` on the cluster.

        A namespace created concurrently by someone else counts as success.

        Raises
        ------
        NotFoundError
            Cluster is not configured.
        ExternalCreateError
            kubectl failed to create the namespace.
        """
        context = resolve_context(self.contexts, cluster_code)
        try:
            kubectl_text(
                f"create namespace {name}",
                context=context,
                kubeconfig=self.kubeconfig,
                timeout=self.timeout_seconds,
            )
        except KubectlAlreadyExistsError:
            logger.info("Namespace %s already exists on cluster %s", name, cluster_code)
            return
        except KubectlError as exc:
            logger.warning(
                "Failed to create namespace %s on cluster %s: %s",
                name,
                cluster_code,
                exc,
            )
            raise ExternalCreateError(
                f"failed to create namespace {name} on cluster {cluster_code}: {exc}"
            ) from exc
        logger.info("Created namespace %s on cluster %s", name, cluster_code)
