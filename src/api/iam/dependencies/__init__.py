"""FastAPI dependencies for the IAM bounded context."""

from iam.dependencies.tenant_context import (
    TenantResolver,
    get_tenant_context_probe,
    get_tenant_resolver,
)

__all__ = [
    "TenantResolver",
    "get_tenant_context_probe",
    "get_tenant_resolver",
]
