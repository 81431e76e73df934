"""Shared fixtures backed by in-memory SQLite."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from nsreg.application.access_partitioner import AccessPartitioner
from nsreg.application.namespace_registry_service import NamespaceRegistryService
from nsreg.domain.models import Namespace, UserContext
from nsreg.infrastructure.database import create_session_factory
from nsreg.infrastructure.grant_store import SqlGrantStore
from nsreg.infrastructure.namespace_store import SqlNamespaceStore

from fakes import ADMIN, FakeClusterGateway, FakeWorkloadCheck, StepClock, Stores


@pytest.fixture
def stores() -> Stores:
    session_factory = create_session_factory("sqlite://")
    return SqlNamespaceStore(session_factory), SqlGrantStore(session_factory)


@pytest.fixture
def gateway() -> FakeClusterGateway:
    return FakeClusterGateway()


@pytest.fixture
def workloads() -> FakeWorkloadCheck:
    return FakeWorkloadCheck()


@pytest.fixture
def registry(
    stores: Stores,
    gateway: FakeClusterGateway,
    workloads: FakeWorkloadCheck,
) -> NamespaceRegistryService:
    return NamespaceRegistryService(stores[0], gateway, workloads, clock=StepClock())


@pytest.fixture
def partitioner(stores: Stores) -> AccessPartitioner:
    return AccessPartitioner(*stores)


@pytest.fixture
def make_namespace() -> Callable[..., Namespace]:
    clock = StepClock()

    def _make(name: str, cluster_code: int = 100, owner: UserContext = ADMIN) -> Namespace:
        now = clock()
        return Namespace(
            name=name,
            cluster_code=cluster_code,
            owner_id=owner.user_id,
            owner_name=owner.user_name,
            created_at=now,
            updated_at=now,
        )

    return _make
