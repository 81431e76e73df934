"""Application facade exports for stable service API."""

from nsreg.application.access_audit_use_case import execute_access_audit
from nsreg.application.access_partitioner import MAX_PAGE_SIZE, AccessPartitioner
from nsreg.application.namespace_registry_service import NamespaceRegistryService
from nsreg.application.run_writer import RunResult

__all__ = [
    "AccessPartitioner",
    "MAX_PAGE_SIZE",
    "NamespaceRegistryService",
    "RunResult",
    "execute_access_audit",
]
