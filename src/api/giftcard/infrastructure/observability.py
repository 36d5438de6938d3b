"""Domain probes for gift card infrastructure.

Following Domain-Oriented Observability patterns, these probes capture
domain-significant events when talking to the Admin API and when reading
stored shop credentials.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AuthorityClientProbe(Protocol):
    """Domain probe for Admin API calls."""

    def request_sent(self, operation: str, shop: str) -> None:
        """Record that a GraphQL operation was sent."""
        ...

    def request_completed(self, operation: str, shop: str, elapsed_ms: float) -> None:
        """Record that a GraphQL operation returned usable data."""
        ...

    def request_failed(
        self,
        operation: str,
        shop: str,
        reason: str,
        status_code: int | None = None,
    ) -> None:
        """Record that a GraphQL operation failed at transport or protocol level."""
        ...

    def user_errors_returned(self, operation: str, shop: str, messages: list[str]) -> None:
        """Record that the Admin API rejected a mutation's input."""
        ...

    def with_context(self, context: ObservationContext) -> AuthorityClientProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAuthorityClientProbe:
    """Default implementation of AuthorityClientProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultAuthorityClientProbe:
        """Create a new probe with observation context bound."""
        return DefaultAuthorityClientProbe(logger=self._logger, context=context)

    def request_sent(self, operation: str, shop: str) -> None:
        self._logger.debug(
            "admin_api_request_sent",
            operation=operation,
            shop=shop,
            **self._get_context_kwargs(),
        )

    def request_completed(self, operation: str, shop: str, elapsed_ms: float) -> None:
        self._logger.info(
            "admin_api_request_completed",
            operation=operation,
            shop=shop,
            elapsed_ms=round(elapsed_ms, 2),
            **self._get_context_kwargs(),
        )

    def request_failed(
        self,
        operation: str,
        shop: str,
        reason: str,
        status_code: int | None = None,
    ) -> None:
        self._logger.error(
            "admin_api_request_failed",
            operation=operation,
            shop=shop,
            reason=reason,
            status_code=status_code,
            **self._get_context_kwargs(),
        )

    def user_errors_returned(self, operation: str, shop: str, messages: list[str]) -> None:
        self._logger.warning(
            "admin_api_user_errors",
            operation=operation,
            shop=shop,
            messages=messages,
            **self._get_context_kwargs(),
        )


class CredentialStoreProbe(Protocol):
    """Domain probe for stored shop credential lookups."""

    def credentials_found(self, shop: str) -> None:
        """Record that offline credentials exist for a shop."""
        ...

    def credentials_missing(self, shop: str) -> None:
        """Record that no offline credentials exist for a shop."""
        ...

    def credentials_expired(self, shop: str) -> None:
        """Record that the stored offline credentials have expired."""
        ...

    def lookup_failed(self, shop: str, error: Exception) -> None:
        """Record that the credential store could not be queried."""
        ...

    def with_context(self, context: ObservationContext) -> CredentialStoreProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultCredentialStoreProbe:
    """Default implementation of CredentialStoreProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultCredentialStoreProbe:
        """Create a new probe with observation context bound."""
        return DefaultCredentialStoreProbe(logger=self._logger, context=context)

    def credentials_found(self, shop: str) -> None:
        self._logger.debug(
            "shop_credentials_found",
            shop=shop,
            **self._get_context_kwargs(),
        )

    def credentials_missing(self, shop: str) -> None:
        self._logger.error(
            "shop_credentials_missing",
            shop=shop,
            **self._get_context_kwargs(),
        )

    def credentials_expired(self, shop: str) -> None:
        self._logger.error(
            "shop_credentials_expired",
            shop=shop,
            **self._get_context_kwargs(),
        )

    def lookup_failed(self, shop: str, error: Exception) -> None:
        self._logger.error(
            "shop_credentials_lookup_failed",
            shop=shop,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )
