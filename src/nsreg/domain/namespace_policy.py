"""Validation rules for namespace names and cluster references."""

import re

from nsreg.domain.errors import InvalidArgumentError

MAX_NAMESPACE_LENGTH = 63

_DNS1123_LABEL = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")


def normalize_namespace_name(raw: str | None) -> str:
    """Return a validated namespace name.

    Kubernetes namespace names are RFC 1123 labels: lowercase alphanumerics
    and '-', starting and ending with an alphanumeric, at most 63 characters.
    """
    name = (raw or "").strip()
    if not name:
        raise InvalidArgumentError("namespace name must not be empty")
    if len(name) > MAX_NAMESPACE_LENGTH:
        raise InvalidArgumentError(
            f"namespace name must be at most {MAX_NAMESPACE_LENGTH} characters: {name!r}"
        )
    if not _DNS1123_LABEL.match(name):
        raise InvalidArgumentError(
            f"namespace name must be a lowercase RFC 1123 label: {name!r}"
        )
    return name


def require_cluster_code(cluster_code: int | None) -> int:
    """Return cluster code or raise when it is missing or not positive."""
    if cluster_code is None or isinstance(cluster_code, bool):
        raise InvalidArgumentError("cluster code is required")
    if cluster_code <= 0:
        raise InvalidArgumentError(f"cluster code must be positive: {cluster_code}")
    return cluster_code
