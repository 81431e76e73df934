"""Application configuration and environment loading."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_DATABASE_URL = "sqlite:///nsreg.db"
DEFAULT_KUBECTL_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class DatabaseConfig:
    """Namespace and grant store connection settings."""

    url: str = DEFAULT_DATABASE_URL
    echo: bool = False


@dataclass(frozen=True)
class KubectlConfig:
    """kubectl invocation settings shared by gateway and workload check."""

    kubeconfig: Path | None = None
    timeout_seconds: float = DEFAULT_KUBECTL_TIMEOUT_SECONDS
    cluster_contexts: dict[int, str] = field(default_factory=dict)


@dataclass(frozen=True)
class RegistryConfig:
    """Top-level config for the namespace registry."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    kubectl: KubectlConfig = field(default_factory=KubectlConfig)
    log_level: str = "WARNING"

    @property
    def database_url(self) -> str:
        """Return SQLAlchemy database URL."""
        return self.database.url

    @property
    def kubeconfig(self) -> Path | None:
        """Return kubeconfig path passed to kubectl."""
        return self.kubectl.kubeconfig

    @property
    def cluster_contexts(self) -> dict[int, str]:
        """Return cluster code to kubectl context mapping."""
        return self.kubectl.cluster_contexts

    @property
    def has_clusters(self) -> bool:
        """Return whether at least one cluster is configured."""
        return bool(self.kubectl.cluster_contexts)


def parse_cluster_contexts(raw: str | None) -> dict[int, str]:
    """Parse ``code=context`` pairs separated by commas.

    Parameters
    ----------
    raw : str | None
        Raw value of ``NSREG_CLUSTERS``, e.g. ``"100=prod-eu,200=staging"``.

    Returns
    -------
    dict[int, str]
        Cluster code to kubectl context name.
    """
    contexts: dict[int, str] = {}
    if not raw:
        return contexts
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        code_raw, sep, context = item.partition("=")
        if not sep or not context.strip():
            raise ValueError(f"NSREG_CLUSTERS entry must be code=context: {item!r}")
        try:
            code = int(code_raw.strip())
        except ValueError as exc:
            raise ValueError(
                f"NSREG_CLUSTERS cluster code is not an integer: {code_raw!r}"
            ) from exc
        contexts[code] = context.strip()
    return contexts


def _parse_bool(raw: str | None) -> bool:
    return (raw or "").strip().lower() in {"1", "true", "yes", "on"}


def _parse_timeout(raw: str | None) -> float:
    if not raw:
        return DEFAULT_KUBECTL_TIMEOUT_SECONDS
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"NSREG_KUBECTL_TIMEOUT is not a number: {raw!r}") from exc
    if value <= 0:
        raise ValueError("NSREG_KUBECTL_TIMEOUT must be positive")
    return value


def load_config(env_path: Path = Path(".env")) -> RegistryConfig:
    """Load config from environment and optional .env file."""
    load_dotenv(env_path, override=False)
    kubeconfig_raw = os.getenv("KUBECONFIG")
    return RegistryConfig(
        database=DatabaseConfig(
            url=os.getenv("NSREG_DATABASE_URL") or DEFAULT_DATABASE_URL,
            echo=_parse_bool(os.getenv("NSREG_DATABASE_ECHO")),
        ),
        kubectl=KubectlConfig(
            kubeconfig=Path(kubeconfig_raw) if kubeconfig_raw else None,
            timeout_seconds=_parse_timeout(os.getenv("NSREG_KUBECTL_TIMEOUT")),
            cluster_contexts=parse_cluster_contexts(os.getenv("NSREG_CLUSTERS")),
        ),
        log_level=(os.getenv("NSREG_LOG_LEVEL") or "WARNING").upper(),
    )
