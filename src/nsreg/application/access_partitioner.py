"""Permission-filtered namespace queries."""

from __future__ import annotations

from nsreg.application.ports import GrantStore, NamespaceStore
from nsreg.domain.access_policy import creation_order_key, is_authorized, matches_search
from nsreg.domain.errors import ForbiddenError, InvalidArgumentError
from nsreg.domain.models import Namespace, NamespacePage, NamespacePartition, UserContext

MAX_PAGE_SIZE = 1000


class AccessPartitioner:
    """Split registered namespaces by what a user may access."""

    def __init__(self, namespaces: NamespaceStore, grants: GrantStore) -> None:
        self.namespaces = namespaces
        self.grants = grants

    def _authorized(self, user: UserContext) -> list[Namespace]:
        granted = self.grants.list_grants_for_user(user.user_id)
        return [ns for ns in self.namespaces.list_all() if is_authorized(user, ns, granted)]

    def partition(self, user: UserContext) -> NamespacePartition:
        """Return authorized and unauthorized namespaces, oldest first."""
        granted = self.grants.list_grants_for_user(user.user_id)
        authorized: list[Namespace] = []
        unauthorized: list[Namespace] = []
        for ns in sorted(self.namespaces.list_all(), key=creation_order_key):
            if is_authorized(user, ns, granted):
                authorized.append(ns)
            else:
                unauthorized.append(ns)
        return NamespacePartition(
            authorized=tuple(authorized),
            unauthorized=tuple(unauthorized),
        )

    def authorized_for(
        self, caller: UserContext, user: UserContext
    ) -> tuple[Namespace, ...]:
        """Return namespaces user may access; admin callers only."""
        _require_admin(caller)
        return self.partition(user).authorized

    def unauthorized_for(
        self, caller: UserContext, user: UserContext
    ) -> tuple[Namespace, ...]:
        """Return namespaces not yet granted to user; admin callers only."""
        _require_admin(caller)
        return self.partition(user).unauthorized

    def available_for(self, user: UserContext) -> tuple[Namespace, ...]:
        """Return namespaces user may submit work to, oldest first."""
        seen: set[tuple[str, int]] = set()
        available: list[Namespace] = []
        for ns in sorted(self._authorized(user), key=creation_order_key):
            if ns.key in seen:
                continue
            seen.add(ns.key)
            available.append(ns)
        return tuple(available)

    def paged_list(
        self,
        user: UserContext,
        search_term: str | None,
        page_no: int,
        page_size: int,
    ) -> NamespacePage:
        """Return one page of visible namespaces, newest first.

        Parameters
        ----------
        user : UserContext
            Caller; admins see every namespace, others their authorized ones.
        search_term : str | None
            Case-insensitive substring filter on the namespace name.
        page_no : int
            1-based page number.
        page_size : int
            Items per page, between 1 and ``MAX_PAGE_SIZE``.

        Returns
        -------
        NamespacePage
            Requested slice and the filtered total.
        """
        if page_no < 1:
            raise InvalidArgumentError(f"page number must be >= 1: {page_no}")
        if page_size < 1:
            raise InvalidArgumentError(f"page size must be >= 1: {page_size}")
        if page_size > MAX_PAGE_SIZE:
            raise InvalidArgumentError(
                f"page size must be <= {MAX_PAGE_SIZE}: {page_size}"
            )

        visible = self.namespaces.list_all() if user.is_admin else self._authorized(user)
        matched = sorted(
            (ns for ns in visible if matches_search(ns, search_term)),
            key=creation_order_key,
            reverse=True,
        )
        offset = (page_no - 1) * page_size
        return NamespacePage(
            items=tuple(matched[offset : offset + page_size]),
            total=len(matched),
            page_no=page_no,
            page_size=page_size,
        )


def _require_admin(caller: UserContext) -> None:
    if not caller.is_admin:
        raise ForbiddenError(f"user {caller.user_id} is not an administrator")
