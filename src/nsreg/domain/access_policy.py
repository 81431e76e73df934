"""Authorization predicate shared by every namespace listing."""

from __future__ import annotations

from collections.abc import Collection
from typing import Literal

from nsreg.domain.models import Namespace, UserContext

AccessReason = Literal["owner", "admin", "grant"]


def authorization_reason(
    user: UserContext,
    namespace: Namespace,
    granted_ids: Collection[int],
) -> AccessReason | None:
    """Return why ``user`` may access ``namespace``, or None when it may not."""
    if namespace.owner_id == user.user_id:
        return "owner"
    if user.is_admin:
        return "admin"
    if namespace.id is not None and namespace.id in granted_ids:
        return "grant"
    return None


def is_authorized(
    user: UserContext,
    namespace: Namespace,
    granted_ids: Collection[int],
) -> bool:
    """Return whether user owns, administers, or was granted the namespace."""
    return authorization_reason(user, namespace, granted_ids) is not None


def can_manage(user: UserContext, namespace: Namespace) -> bool:
    """Return whether user may de-register the namespace (owner or admin)."""
    return user.is_admin or namespace.owner_id == user.user_id


def matches_search(namespace: Namespace, search_term: str | None) -> bool:
    """Case-insensitive substring match on namespace name."""
    term = (search_term or "").strip().lower()
    return not term or term in namespace.name.lower()


def creation_order_key(namespace: Namespace) -> tuple[object, int]:
    """Sort key by creation time with id as tie-break."""
    return namespace.created_at, namespace.id or 0
