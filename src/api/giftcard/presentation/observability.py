"""Domain probe for storefront proxy requests.

Following Domain-Oriented Observability patterns, this probe records how
each proxy request ended, so storefront-facing failures can be told apart
from Admin API failures in the logs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ProxyRequestProbe(Protocol):
    """Domain probe for the lookup and convert routes."""

    def request_handled(self, route: str, success: bool, message: str | None) -> None:
        """Record that a request finished with a handled outcome."""
        ...

    def request_failed(self, route: str, kind: str, message: str) -> None:
        """Record that a request ended with a typed redemption error."""
        ...

    def unexpected_error(self, route: str, error: Exception) -> None:
        """Record that a request failed with an unexpected exception."""
        ...

    def with_context(self, context: ObservationContext) -> ProxyRequestProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultProxyRequestProbe:
    """Default implementation of ProxyRequestProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultProxyRequestProbe:
        """Create a new probe with observation context bound."""
        return DefaultProxyRequestProbe(logger=self._logger, context=context)

    def request_handled(self, route: str, success: bool, message: str | None) -> None:
        self._logger.info(
            "proxy_request_handled",
            route=route,
            success=success,
            message=message,
            **self._get_context_kwargs(),
        )

    def request_failed(self, route: str, kind: str, message: str) -> None:
        self._logger.warning(
            "proxy_request_failed",
            route=route,
            kind=kind,
            message=message,
            **self._get_context_kwargs(),
        )

    def unexpected_error(self, route: str, error: Exception) -> None:
        self._logger.error(
            "proxy_request_unexpected_error",
            route=route,
            error=str(error),
            error_type=type(error).__name__,
            exc_info=error,
            **self._get_context_kwargs(),
        )
