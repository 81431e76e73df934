"""Grant store backed by the ``k8s_namespace_user`` table."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from nsreg.domain.errors import NotFoundError
from nsreg.infrastructure.database import NamespaceRow, NamespaceUserRow


class SqlGrantStore:
    """User to namespace authorization edges."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def list_grants_for_user(self, user_id: int) -> frozenset[int]:
        """Return ids of namespaces explicitly granted to user."""
        with self._session_factory() as session:
            ids = session.scalars(
                select(NamespaceUserRow.namespace_id).where(
                    NamespaceUserRow.user_id == user_id
                )
            ).all()
            return frozenset(ids)

    def grant(self, user_id: int, namespace_id: int) -> bool:
        """Add grant edge; return False when it already existed."""
        with self._session_factory() as session:
            if session.get(NamespaceRow, namespace_id) is None:
                raise NotFoundError(f"namespace {namespace_id} does not exist")
            session.add(
                NamespaceUserRow(
                    user_id=user_id,
                    namespace_id=namespace_id,
                    create_time=datetime.now(UTC),
                )
            )
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                return False
            return True

    def revoke(self, user_id: int, namespace_id: int) -> bool:
        """Remove grant edge; return False when there was none."""
        with self._session_factory() as session:
            result = session.execute(
                delete(NamespaceUserRow).where(
                    NamespaceUserRow.user_id == user_id,
                    NamespaceUserRow.namespace_id == namespace_id,
                )
            )
            session.commit()
            return bool(result.rowcount)
