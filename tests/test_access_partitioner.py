"""Tests for permission-filtered namespace queries."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import fields

import pytest

from nsreg.application.access_partitioner import AccessPartitioner
from nsreg.domain.errors import ForbiddenError, InvalidArgumentError
from nsreg.domain.models import Namespace, UserContext

from fakes import ADMIN, ALICE, BOB, Stores


def _ids(namespaces: tuple[Namespace, ...]) -> set[int | None]:
    return {ns.id for ns in namespaces}


def _seed(
    stores: Stores, make_namespace: Callable[..., Namespace]
) -> dict[str, Namespace]:
    namespace_store = stores[0]
    seeded = [
        make_namespace("alice-dev", owner=ALICE),
        make_namespace("bob-dev", owner=BOB),
        make_namespace("shared-prod", owner=ADMIN),
        make_namespace("platform", owner=ADMIN),
    ]
    return {ns.name: namespace_store.insert(ns) for ns in seeded}


def test_partition_is_complete_and_disjoint(
    stores: Stores,
    partitioner: AccessPartitioner,
    make_namespace: Callable[..., Namespace],
) -> None:
    _seed(stores, make_namespace)
    all_ids = {ns.id for ns in stores[0].list_all()}

    for user in (ADMIN, ALICE, BOB, UserContext(user_id=99)):
        partition = partitioner.partition(user)
        authorized = _ids(partition.authorized)
        unauthorized = _ids(partition.unauthorized)
        assert authorized | unauthorized == all_ids
        assert not authorized & unauthorized


def test_partition_holds_only_the_two_sides(
    stores: Stores,
    partitioner: AccessPartitioner,
    make_namespace: Callable[..., Namespace],
) -> None:
    _seed(stores, make_namespace)
    partition = partitioner.partition(ALICE)

    assert [f.name for f in fields(partition)] == ["authorized", "unauthorized"]


def test_partition_uses_ownership_admin_and_grants(
    stores: Stores,
    partitioner: AccessPartitioner,
    make_namespace: Callable[..., Namespace],
) -> None:
    seeded = _seed(stores, make_namespace)
    stores[1].grant(ALICE.user_id, seeded["shared-prod"].id)

    alice = partitioner.partition(ALICE)
    assert [ns.name for ns in alice.authorized] == ["alice-dev", "shared-prod"]
    assert [ns.name for ns in alice.unauthorized] == ["bob-dev", "platform"]

    admin = partitioner.partition(ADMIN)
    assert len(admin.authorized) == 4
    assert admin.unauthorized == ()


def test_grant_moves_namespace_for_that_user_only(
    stores: Stores,
    partitioner: AccessPartitioner,
    make_namespace: Callable[..., Namespace],
) -> None:
    seeded = _seed(stores, make_namespace)
    target = seeded["platform"]
    before_bob = partitioner.partition(BOB)
    before_admin = partitioner.partition(ADMIN)
    assert target.id in _ids(partitioner.partition(ALICE).unauthorized)

    stores[1].grant(ALICE.user_id, target.id)

    after_alice = partitioner.partition(ALICE)
    assert target.id in _ids(after_alice.authorized)
    assert target.id not in _ids(after_alice.unauthorized)
    assert partitioner.partition(BOB) == before_bob
    assert partitioner.partition(ADMIN) == before_admin


def test_authorized_and_unauthorized_for_require_admin(
    stores: Stores,
    partitioner: AccessPartitioner,
    make_namespace: Callable[..., Namespace],
) -> None:
    _seed(stores, make_namespace)

    assert [ns.name for ns in partitioner.authorized_for(ADMIN, BOB)] == ["bob-dev"]
    assert [ns.name for ns in partitioner.unauthorized_for(ADMIN, BOB)] == [
        "alice-dev",
        "shared-prod",
        "platform",
    ]
    with pytest.raises(ForbiddenError):
        partitioner.authorized_for(ALICE, BOB)
    with pytest.raises(ForbiddenError):
        partitioner.unauthorized_for(ALICE, BOB)


def test_available_for_orders_oldest_first(
    stores: Stores,
    partitioner: AccessPartitioner,
    make_namespace: Callable[..., Namespace],
) -> None:
    seeded = _seed(stores, make_namespace)
    stores[1].grant(BOB.user_id, seeded["platform"].id)
    stores[1].grant(BOB.user_id, seeded["alice-dev"].id)

    assert [ns.name for ns in partitioner.available_for(BOB)] == [
        "alice-dev",
        "bob-dev",
        "platform",
    ]
    assert [ns.name for ns in partitioner.available_for(ADMIN)] == [
        "alice-dev",
        "bob-dev",
        "shared-prod",
        "platform",
    ]


def test_paged_list_pagination(
    stores: Stores,
    partitioner: AccessPartitioner,
    make_namespace: Callable[..., Namespace],
) -> None:
    for i in range(25):
        stores[0].insert(make_namespace(f"ns-{i:02d}"))

    first = partitioner.paged_list(ADMIN, None, 1, 10)
    third = partitioner.paged_list(ADMIN, None, 3, 10)
    beyond = partitioner.paged_list(ADMIN, None, 4, 10)

    assert len(first.items) == 10
    assert len(third.items) == 5
    assert beyond.items == ()
    assert first.total == third.total == beyond.total == 25
    assert first.total_pages == 3
    assert first.items[0].name == "ns-24"
    assert third.items[-1].name == "ns-00"


def test_paged_list_search_is_case_insensitive(
    stores: Stores,
    partitioner: AccessPartitioner,
    make_namespace: Callable[..., Namespace],
) -> None:
    for name in ("prod-team-a", "team-prod", "staging-b"):
        stores[0].insert(make_namespace(name))

    page = partitioner.paged_list(ADMIN, "PROD", 1, 10)

    assert [ns.name for ns in page.items] == ["team-prod", "prod-team-a"]
    assert page.total == 2


def test_paged_list_hides_unauthorized_from_regular_users(
    stores: Stores,
    partitioner: AccessPartitioner,
    make_namespace: Callable[..., Namespace],
) -> None:
    _seed(stores, make_namespace)

    page = partitioner.paged_list(ALICE, "", 1, 10)

    assert [ns.name for ns in page.items] == ["alice-dev"]
    assert page.total == 1


@pytest.mark.parametrize(("page_no", "page_size"), [(0, 10), (1, 0), (-1, -1), (1, 1001)])
def test_paged_list_rejects_bad_paging(
    partitioner: AccessPartitioner, page_no: int, page_size: int
) -> None:
    with pytest.raises(InvalidArgumentError):
        partitioner.paged_list(ADMIN, None, page_no, page_size)
