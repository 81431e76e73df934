"""Namespace store backed by the ``k8s_namespace`` table."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from nsreg.domain.errors import ConflictError, NotFoundError
from nsreg.domain.models import Namespace
from nsreg.infrastructure.database import NamespaceRow, NamespaceUserRow


def _to_namespace(row: NamespaceRow) -> Namespace:
    return Namespace(
        id=row.id,
        name=row.namespace,
        cluster_code=row.cluster_code,
        owner_id=row.user_id,
        owner_name=row.user_name,
        created_at=row.create_time,
        updated_at=row.update_time,
    )


class SqlNamespaceStore:
    """Persist registered namespaces; the table enforces (name, cluster) uniqueness."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def insert(self, namespace: Namespace) -> Namespace:
        """Insert namespace and return it with its assigned id."""
        row = NamespaceRow(
            namespace=namespace.name,
            cluster_code=namespace.cluster_code,
            user_id=namespace.owner_id,
            user_name=namespace.owner_name,
            create_time=namespace.created_at,
            update_time=namespace.updated_at,
        )
        with self._session_factory() as session:
            session.add(row)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise ConflictError(
                    f"namespace {namespace.name} is already registered "
                    f"on cluster {namespace.cluster_code}"
                ) from exc
            return _to_namespace(row)

    def find_by_name_and_cluster(self, name: str, cluster_code: int) -> Namespace | None:
        with self._session_factory() as session:
            row = session.scalars(
                select(NamespaceRow).where(
                    NamespaceRow.namespace == name,
                    NamespaceRow.cluster_code == cluster_code,
                )
            ).first()
            return _to_namespace(row) if row is not None else None

    def find_by_id(self, namespace_id: int) -> Namespace | None:
        with self._session_factory() as session:
            row = session.get(NamespaceRow, namespace_id)
            return _to_namespace(row) if row is not None else None

    def list_all(self) -> list[Namespace]:
        """Return all namespaces ordered by creation time."""
        with self._session_factory() as session:
            rows = session.scalars(
                select(NamespaceRow).order_by(NamespaceRow.create_time, NamespaceRow.id)
            ).all()
            return [_to_namespace(row) for row in rows]

    def delete(self, namespace_id: int) -> None:
        """Delete namespace and its grant edges."""
        with self._session_factory() as session:
            row = session.get(NamespaceRow, namespace_id)
            if row is None:
                raise NotFoundError(f"namespace {namespace_id} does not exist")
            session.execute(
                delete(NamespaceUserRow).where(
                    NamespaceUserRow.namespace_id == namespace_id
                )
            )
            session.delete(row)
            session.commit()
