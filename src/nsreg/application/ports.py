"""Collaborator contracts consumed by the registry services."""

from __future__ import annotations

from typing import Protocol

from nsreg.domain.models import Namespace


class ClusterGateway(Protocol):
    def exists(self, cluster_code: int, name: str) -> bool: ...

    def create(self, cluster_code: int, name: str) -> None: ...


class NamespaceStore(Protocol):
    def insert(self, namespace: Namespace) -> Namespace: ...

    def find_by_name_and_cluster(
        self, name: str, cluster_code: int
    ) -> Namespace | None: ...

    def find_by_id(self, namespace_id: int) -> Namespace | None: ...

    def list_all(self) -> list[Namespace]: ...

    def delete(self, namespace_id: int) -> None: ...


class GrantStore(Protocol):
    def list_grants_for_user(self, user_id: int) -> frozenset[int]: ...


class WorkloadReferenceCheck(Protocol):
    def has_active_dependents(self, namespace_id: int) -> bool: ...
