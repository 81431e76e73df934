"""Namespace registry domain records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class UserContext:
    """Identity and role of a user, resolved by the request layer."""

    user_id: int
    user_name: str = ""
    is_admin: bool = False


@dataclass(frozen=True)
class Namespace:
    """Namespace registered against a cluster."""

    name: str
    cluster_code: int
    owner_id: int
    owner_name: str
    created_at: datetime
    updated_at: datetime
    id: int | None = None

    @property
    def key(self) -> tuple[str, int]:
        """Return the (name, cluster) pair that identifies the namespace."""
        return self.name, self.cluster_code


@dataclass(frozen=True)
class NamespacePartition:
    """Split of all namespaces by whether a user may access them."""

    authorized: tuple[Namespace, ...]
    unauthorized: tuple[Namespace, ...]


@dataclass(frozen=True)
class NamespacePage:
    """One page of a filtered namespace listing."""

    items: tuple[Namespace, ...]
    total: int
    page_no: int
    page_size: int

    @property
    def total_pages(self) -> int:
        """Return number of pages for the filtered total."""
        return (self.total + self.page_size - 1) // self.page_size
