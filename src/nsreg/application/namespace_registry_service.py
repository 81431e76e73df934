"""Create, verify and de-register namespaces."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from nsreg.application.ports import ClusterGateway, NamespaceStore, WorkloadReferenceCheck
from nsreg.domain.access_policy import can_manage
from nsreg.domain.errors import ConflictError, ForbiddenError, InUseError, NotFoundError
from nsreg.domain.models import Namespace, UserContext
from nsreg.domain.namespace_policy import normalize_namespace_name, require_cluster_code

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class NamespaceRegistryService:
    """Register namespaces against clusters, keeping (name, cluster) unique."""

    def __init__(
        self,
        namespaces: NamespaceStore,
        gateway: ClusterGateway,
        workloads: WorkloadReferenceCheck,
        *,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.namespaces = namespaces
        self.gateway = gateway
        self.workloads = workloads
        self._clock = clock

    def create_or_register(
        self,
        caller: UserContext,
        namespace_name: str,
        cluster_code: int,
    ) -> Namespace:
        """Register a namespace, creating it on the cluster when absent.

        Safe to retry after a partial failure: the retry finds the namespace
        already on the cluster and only registers it.

        Raises
        ------
        InvalidArgumentError
            Name is empty or not a valid namespace name.
        ConflictError
            (name, cluster) is already registered.
        NotFoundError
            Cluster is unknown or unreachable.
        ExternalCreateError
            Cluster refused to create the namespace.
        """
        name = normalize_namespace_name(namespace_name)
        cluster_code = require_cluster_code(cluster_code)

        if self.namespaces.find_by_name_and_cluster(name, cluster_code) is not None:
            raise ConflictError(
                f"namespace {name} is already registered on cluster {cluster_code}"
            )

        if self.gateway.exists(cluster_code, name):
            logger.info(
                "Namespace %s exists on cluster %s; registering only", name, cluster_code
            )
        else:
            self.gateway.create(cluster_code, name)

        now = self._clock()
        registered = self.namespaces.insert(
            Namespace(
                name=name,
                cluster_code=cluster_code,
                owner_id=caller.user_id,
                owner_name=caller.user_name,
                created_at=now,
                updated_at=now,
            )
        )
        logger.info(
            "Registered namespace %s on cluster %s as id %s for user %s",
            name,
            cluster_code,
            registered.id,
            caller.user_id,
        )
        return registered

    def verify_unique(self, namespace_name: str, cluster_code: int) -> bool:
        """Return True when (name, cluster) is not registered yet."""
        name = normalize_namespace_name(namespace_name)
        cluster_code = require_cluster_code(cluster_code)
        return self.namespaces.find_by_name_and_cluster(name, cluster_code) is None

    def delete_by_id(self, caller: UserContext, namespace_id: int) -> Namespace:
        """De-register namespace; the object on the cluster is left in place."""
        namespace = self.namespaces.find_by_id(namespace_id)
        if namespace is None:
            raise NotFoundError(f"namespace {namespace_id} does not exist")
        if not can_manage(caller, namespace):
            raise ForbiddenError(
                f"user {caller.user_id} may not delete namespace {namespace.name}"
            )
        if self.workloads.has_active_dependents(namespace_id):
            raise InUseError(
                f"namespace {namespace.name} on cluster {namespace.cluster_code} "
                "still has active workloads"
            )
        self.namespaces.delete(namespace_id)
        logger.info(
            "De-registered namespace %s on cluster %s (id %s) by user %s",
            namespace.name,
            namespace.cluster_code,
            namespace_id,
            caller.user_id,
        )
        return namespace
