"""SQLAlchemy schema and session factory for the registry tables."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    BigInteger,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool


class Base(DeclarativeBase):
    pass


class NamespaceRow(Base):
    __tablename__ = "k8s_namespace"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    namespace: Mapped[str] = mapped_column(String(63), nullable=False)
    cluster_code: Mapped[int] = mapped_column(BigInteger, nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    user_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    create_time: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    update_time: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        UniqueConstraint(
            "namespace", "cluster_code", name="uq_k8s_namespace_name_cluster"
        ),
    )


class NamespaceUserRow(Base):
    __tablename__ = "k8s_namespace_user"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    namespace_id: Mapped[int] = mapped_column(
        ForeignKey("k8s_namespace.id", ondelete="CASCADE"), nullable=False
    )
    create_time: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        UniqueConstraint("user_id", "namespace_id", name="uq_k8s_namespace_user"),
    )


def _is_memory_sqlite(url: str) -> bool:
    return url in {"sqlite://", "sqlite:///:memory:"}


def create_session_factory(url: str, *, echo: bool = False) -> sessionmaker[Session]:
    """Create engine, ensure registry tables exist and return a session factory.

    In-memory SQLite is bound to a single shared connection so every session
    sees the same database.
    """
    if _is_memory_sqlite(url):
        engine = create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(url, echo=echo)
    Base.metadata.create_all(engine)
    return sessionmaker(engine, expire_on_commit=False)
