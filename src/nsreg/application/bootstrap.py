"""Wire registry services from configuration."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from nsreg.application.access_partitioner import AccessPartitioner
from nsreg.application.namespace_registry_service import NamespaceRegistryService
from nsreg.config import RegistryConfig
from nsreg.infrastructure.cluster_gateway import KubectlClusterGateway
from nsreg.infrastructure.database import create_session_factory
from nsreg.infrastructure.grant_store import SqlGrantStore
from nsreg.infrastructure.namespace_store import SqlNamespaceStore
from nsreg.infrastructure.workload_check import KubectlWorkloadCheck

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistryServices:
    """Services and stores sharing one database."""

    registry: NamespaceRegistryService
    partitioner: AccessPartitioner
    namespaces: SqlNamespaceStore
    grants: SqlGrantStore


def build_services(config: RegistryConfig) -> RegistryServices:
    """Build SQL stores, kubectl collaborators and the two services."""
    if not config.has_clusters:
        logger.warning(
            "NSREG_CLUSTERS is empty; creating namespaces will fail with not found"
        )
    session_factory = create_session_factory(
        config.database_url, echo=config.database.echo
    )
    namespaces = SqlNamespaceStore(session_factory)
    grants = SqlGrantStore(session_factory)
    gateway = KubectlClusterGateway(
        config.cluster_contexts,
        kubeconfig=config.kubeconfig,
        timeout_seconds=config.kubectl.timeout_seconds,
    )
    workloads = KubectlWorkloadCheck(
        namespaces,
        config.cluster_contexts,
        kubeconfig=config.kubeconfig,
        timeout_seconds=config.kubectl.timeout_seconds,
    )
    return RegistryServices(
        registry=NamespaceRegistryService(namespaces, gateway, workloads),
        partitioner=AccessPartitioner(namespaces, grants),
        namespaces=namespaces,
        grants=grants,
    )
