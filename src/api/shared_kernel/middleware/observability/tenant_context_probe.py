"""Domain probe for tenant context resolution.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to resolving the shop a storefront
request belongs to.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantContextProbe(Protocol):
    """Domain probe for tenant context resolution operations."""

    def tenant_resolved_from_session(self, tenant_id: str) -> None:
        """Record that the shop was resolved from a verified proxy signature."""
        ...

    def tenant_resolved_from_parameter(self, tenant_id: str) -> None:
        """Record that the shop was taken from the unsigned query parameter."""
        ...

    def proxy_signature_invalid(self, shop: str | None) -> None:
        """Record that a request carried a signature that did not verify."""
        ...

    def tenant_unresolved(self, reason: str) -> None:
        """Record that no shop could be resolved for the request."""
        ...

    def with_context(self, context: ObservationContext) -> TenantContextProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantContextProbe:
    """Default implementation of TenantContextProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultTenantContextProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantContextProbe(logger=self._logger, context=context)

    def tenant_resolved_from_session(self, tenant_id: str) -> None:
        """Record that the shop was resolved from a verified proxy signature."""
        self._logger.debug(
            "tenant_context_resolved_from_session",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenant_resolved_from_parameter(self, tenant_id: str) -> None:
        """Record that the shop was taken from the unsigned query parameter."""
        self._logger.info(
            "tenant_context_resolved_from_parameter",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def proxy_signature_invalid(self, shop: str | None) -> None:
        """Record that a request carried a signature that did not verify."""
        self._logger.warning(
            "tenant_context_signature_invalid",
            shop=shop,
            message="App proxy signature did not verify, falling back to shop parameter",
            **self._get_context_kwargs(),
        )

    def tenant_unresolved(self, reason: str) -> None:
        """Record that no shop could be resolved for the request."""
        self._logger.error(
            "tenant_context_unresolved",
            reason=reason,
            **self._get_context_kwargs(),
        )
