"""Domain probes for gift card application services.

Following Domain-Oriented Observability patterns, these probes capture
domain-significant events during verification and discount issuance.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class VerificationProbe(Protocol):
    """Domain probe for gift card verification."""

    def candidates_searched(
        self, tenant_id: str, suffix: str, candidate_count: int
    ) -> None:
        """Record the result size of a suffix search."""
        ...

    def ambiguous_suffix_match(
        self, tenant_id: str, suffix: str, eligible_count: int, selected_id: str
    ) -> None:
        """Record that several redeemable cards share the suffix."""
        ...

    def card_verified(self, tenant_id: str, suffix: str, external_id: str) -> None:
        """Record that a single card was selected for the code."""
        ...

    def card_not_found(
        self,
        tenant_id: str,
        suffix: str,
        candidate_count: int,
        rejected: list[dict[str, Any]],
    ) -> None:
        """Record that no redeemable card matched the suffix."""
        ...

    def with_context(self, context: ObservationContext) -> VerificationProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultVerificationProbe:
    """Default implementation of VerificationProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultVerificationProbe:
        """Create a new probe with observation context bound."""
        return DefaultVerificationProbe(logger=self._logger, context=context)

    def candidates_searched(
        self, tenant_id: str, suffix: str, candidate_count: int
    ) -> None:
        self._logger.info(
            "gift_card_candidates_searched",
            tenant_id=tenant_id,
            suffix=suffix,
            candidate_count=candidate_count,
            **self._get_context_kwargs(),
        )

    def ambiguous_suffix_match(
        self, tenant_id: str, suffix: str, eligible_count: int, selected_id: str
    ) -> None:
        self._logger.warning(
            "gift_card_ambiguous_suffix_match",
            tenant_id=tenant_id,
            suffix=suffix,
            eligible_count=eligible_count,
            selected_id=selected_id,
            **self._get_context_kwargs(),
        )

    def card_verified(self, tenant_id: str, suffix: str, external_id: str) -> None:
        self._logger.info(
            "gift_card_verified",
            tenant_id=tenant_id,
            suffix=suffix,
            external_id=external_id,
            **self._get_context_kwargs(),
        )

    def card_not_found(
        self,
        tenant_id: str,
        suffix: str,
        candidate_count: int,
        rejected: list[dict[str, Any]],
    ) -> None:
        self._logger.warning(
            "gift_card_not_found",
            tenant_id=tenant_id,
            suffix=suffix,
            candidate_count=candidate_count,
            rejected=rejected,
            **self._get_context_kwargs(),
        )


class IssuanceProbe(Protocol):
    """Domain probe for converting a gift card balance into a discount."""

    def issuance_requested(
        self, tenant_id: str, suffix: str, cart_total: Decimal | None
    ) -> None:
        """Record that a conversion was requested."""
        ...

    def discount_amount_computed(
        self, tenant_id: str, balance: Decimal, cart_total: Decimal | None, amount: Decimal
    ) -> None:
        """Record the bounded discount amount."""
        ...

    def invalid_amount(self, tenant_id: str, amount: Decimal | None) -> None:
        """Record that the computed amount was not positive."""
        ...

    def credential_issued(
        self, tenant_id: str, code: str, amount: Decimal, currency: str
    ) -> None:
        """Record that a discount code was created."""
        ...

    def issuance_rejected(self, tenant_id: str, code: str, reason: str) -> None:
        """Record that the Admin API rejected the discount."""
        ...

    def with_context(self, context: ObservationContext) -> IssuanceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultIssuanceProbe:
    """Default implementation of IssuanceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultIssuanceProbe:
        """Create a new probe with observation context bound."""
        return DefaultIssuanceProbe(logger=self._logger, context=context)

    def issuance_requested(
        self, tenant_id: str, suffix: str, cart_total: Decimal | None
    ) -> None:
        self._logger.info(
            "discount_issuance_requested",
            tenant_id=tenant_id,
            suffix=suffix,
            cart_total=str(cart_total) if cart_total is not None else None,
            **self._get_context_kwargs(),
        )

    def discount_amount_computed(
        self, tenant_id: str, balance: Decimal, cart_total: Decimal | None, amount: Decimal
    ) -> None:
        self._logger.debug(
            "discount_amount_computed",
            tenant_id=tenant_id,
            balance=str(balance),
            cart_total=str(cart_total) if cart_total is not None else None,
            amount=str(amount),
            **self._get_context_kwargs(),
        )

    def invalid_amount(self, tenant_id: str, amount: Decimal | None) -> None:
        self._logger.warning(
            "discount_amount_invalid",
            tenant_id=tenant_id,
            amount=str(amount),
            **self._get_context_kwargs(),
        )

    def credential_issued(
        self, tenant_id: str, code: str, amount: Decimal, currency: str
    ) -> None:
        self._logger.info(
            "discount_credential_issued",
            tenant_id=tenant_id,
            code=code,
            amount=str(amount),
            currency=currency,
            **self._get_context_kwargs(),
        )

    def issuance_rejected(self, tenant_id: str, code: str, reason: str) -> None:
        self._logger.error(
            "discount_issuance_rejected",
            tenant_id=tenant_id,
            code=code,
            reason=reason,
            **self._get_context_kwargs(),
        )
