"""Error kinds raised by the namespace registry core."""


class NamespaceRegistryError(RuntimeError):
    """Base class for request-scoped registry failures."""

    kind = "registry_error"


class InvalidArgumentError(NamespaceRegistryError, ValueError):
    """Malformed pagination parameters or empty required fields."""

    kind = "invalid_argument"


class NotFoundError(NamespaceRegistryError):
    """Referenced cluster or namespace does not exist."""

    kind = "not_found"


class ConflictError(NamespaceRegistryError):
    """Namespace is already registered on the cluster."""

    kind = "conflict"


class ForbiddenError(NamespaceRegistryError):
    """Caller lacks permission for the operation."""

    kind = "forbidden"


class InUseError(NamespaceRegistryError):
    """Namespace still has active workloads."""

    kind = "in_use"


class ExternalCreateError(NamespaceRegistryError):
    """Cluster gateway failed to create the namespace."""

    kind = "external_create_failure"
