"""Tenant context value objects for resolved shop identification.

This module contains the pure value objects that represent the outcome of
tenant resolution. They are framework-agnostic and contain no business
logic, making them safe for the shared kernel.

The actual resolution logic (app proxy signature verification, query
parameter fallback) lives in the IAM bounded context's dependency layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class TenantContext:
    """Resolved tenant context for the current request.

    This is a shared kernel value object used across bounded contexts
    to carry the resolved shop identity.

    Attributes:
        tenant_id: The shop domain (e.g. ``example.myshopify.com``).
        source: How the tenant was resolved - 'session' if from a verified
            app proxy signature, 'parameter' if taken from the unsigned
            ``shop`` query parameter.
    """

    tenant_id: str
    source: Literal["session", "parameter"]


@dataclass(frozen=True)
class TenantUnresolved:
    """Outcome of tenant resolution when no shop could be identified.

    Attributes:
        reason: Short machine-readable reason, for logging only.
    """

    reason: str
