"""Repository interfaces (ports) for the gift card redemption context.

These protocols define the contracts for reaching the Admin API and the
stored shop credentials without specifying implementation details.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from giftcard.domain.value_objects import (
    CardCandidate,
    DiscountRequest,
    IssuedCredential,
)
from giftcard.ports.credential_models import AdminCredentials
from shared_kernel.middleware.tenant_context import TenantContext


@runtime_checkable
class IGiftCardAuthority(Protocol):
    """The remote service that owns gift card balances and discounts.

    Implementations translate between the domain model and the remote
    query/mutation shapes. They do not cache results and do not retry.
    """

    async def find_candidates_by_suffix(
        self,
        tenant: TenantContext,
        suffix: str,
        limit: int,
    ) -> list[CardCandidate]:
        """Return up to ``limit`` gift cards whose last characters equal ``suffix``.

        Raises:
            TenantUnresolvedError: If the shop has no stored credentials.
            AuthorityError: If the remote service fails or answers unexpectedly.
        """
        ...

    async def create_fixed_amount_discount(
        self,
        tenant: TenantContext,
        request: DiscountRequest,
    ) -> IssuedCredential:
        """Create a single-use fixed amount discount code.

        Raises:
            TenantUnresolvedError: If the shop has no stored credentials.
            IssuanceRejectedError: If the remote service rejects the input.
            AuthorityError: If the remote service fails or answers unexpectedly.
        """
        ...


@runtime_checkable
class ICredentialStore(Protocol):
    """Read-only access to Admin API credentials maintained by the install flow."""

    async def get_offline_credentials(self, shop: str) -> AdminCredentials | None:
        """Return the offline (non user-bound) credentials for a shop, if any."""
        ...
