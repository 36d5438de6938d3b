"""Application services for gift card redemption.

``VerificationService`` matches a code against the Admin API by suffix and
applies the trust policy. ``IssuanceService`` re-verifies, bounds the amount
by the cart and mints a single-use discount code.
"""

from __future__ import annotations

import secrets
import string
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable

from giftcard.application.observability import (
    DefaultIssuanceProbe,
    DefaultVerificationProbe,
    IssuanceProbe,
    VerificationProbe,
)
from giftcard.domain.exceptions import InvalidAmountError, IssuanceRejectedError
from giftcard.domain.value_objects import (
    DiscountRequest,
    IssuedCredential,
    NormalizedCode,
    NotFound,
    VerifiedMatch,
)
from giftcard.ports.repositories import IGiftCardAuthority
from shared_kernel.middleware.tenant_context import TenantContext

DISCOUNT_CODE_PREFIX = "GC"
DISCOUNT_VALIDITY = timedelta(hours=1)
_DISAMBIGUATOR_ALPHABET = string.ascii_uppercase + string.digits
_DISAMBIGUATOR_LENGTH = 4


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def generate_discount_code(suffix: str) -> str:
    """Build a discount code such as ``GC-AB12-7QX3``.

    The prefix and suffix let operators spot gift card discounts in bulk
    listings. The random part is the only collision mitigation; existing
    codes are not checked.
    """
    unique = "".join(
        secrets.choice(_DISAMBIGUATOR_ALPHABET) for _ in range(_DISAMBIGUATOR_LENGTH)
    )
    return f"{DISCOUNT_CODE_PREFIX}-{suffix}-{unique}"


def compute_discount_amount(balance: Decimal, cart_total: Decimal | None) -> Decimal:
    """Bound the discount by the cart total.

    An absent or non-positive cart total means the cart is not populated yet,
    so the full balance is offered.

    Raises:
        InvalidAmountError: If the resulting amount is not positive.
    """
    if cart_total is None or cart_total <= 0:
        amount = balance
    else:
        amount = min(balance, cart_total)

    if amount <= 0:
        raise InvalidAmountError("Invalid discount amount", amount=amount)
    return amount


class VerificationService:
    """Matches a normalized code to a single redeemable gift card.

    The Admin API never reveals full codes, so two enabled, funded cards that
    share the last four characters cannot be told apart. When that happens
    the first card in the order the API returned is selected. This is an
    accepted false-acceptance risk; the ambiguity is reported through the
    probe.
    """

    def __init__(
        self,
        authority: IGiftCardAuthority,
        probe: VerificationProbe | None = None,
        default_limit: int = 10,
    ):
        """Initialize the service.

        Args:
            authority: Adapter for the Admin API.
            probe: Optional domain probe for observability.
            default_limit: Candidate page size when the caller gives none.
        """
        self._authority = authority
        self._probe = probe or DefaultVerificationProbe()
        self._default_limit = default_limit

    async def verify(
        self,
        tenant: TenantContext,
        code: NormalizedCode,
        limit: int | None = None,
    ) -> VerifiedMatch | NotFound:
        """Find the gift card a code refers to.

        Args:
            tenant: Shop the search is scoped to.
            code: Normalized customer input.
            limit: Maximum candidates to fetch. Larger result sets are not
                paginated further.

        Returns:
            VerifiedMatch with the selected card, or NotFound with the
            searched suffix and the number of candidates returned.

        Raises:
            TenantUnresolvedError: If the shop has no stored credentials.
            AuthorityError: If the Admin API fails. Not retried.
        """
        candidates = await self._authority.find_candidates_by_suffix(
            tenant=tenant,
            suffix=code.suffix,
            limit=limit or self._default_limit,
        )
        self._probe.candidates_searched(
            tenant_id=tenant.tenant_id,
            suffix=code.suffix,
            candidate_count=len(candidates),
        )

        # The search already filters by suffix server-side; re-check anyway.
        eligible = [
            candidate
            for candidate in candidates
            if candidate.is_redeemable and candidate.suffix == code.suffix
        ]

        if not eligible:
            self._probe.card_not_found(
                tenant_id=tenant.tenant_id,
                suffix=code.suffix,
                candidate_count=len(candidates),
                rejected=[
                    {
                        "suffix": c.suffix,
                        "enabled": c.enabled,
                        "balance": str(c.balance_amount),
                    }
                    for c in candidates
                ],
            )
            return NotFound(suffix=code.suffix, candidate_count=len(candidates))

        selected = eligible[0]
        if len(eligible) > 1:
            self._probe.ambiguous_suffix_match(
                tenant_id=tenant.tenant_id,
                suffix=code.suffix,
                eligible_count=len(eligible),
                selected_id=selected.external_id,
            )

        self._probe.card_verified(
            tenant_id=tenant.tenant_id,
            suffix=code.suffix,
            external_id=selected.external_id,
        )
        return VerifiedMatch(candidate=selected)


class IssuanceService:
    """Converts a verified gift card balance into a one-time discount code.

    Each call re-verifies against the Admin API's current state. The service
    keeps no record of what it issued: the Admin API is the system of record
    and enforces the usage limit of one. A failed mint leaves nothing behind,
    so callers may simply retry the whole flow.
    """

    def __init__(
        self,
        verification: VerificationService,
        authority: IGiftCardAuthority,
        probe: IssuanceProbe | None = None,
        candidate_limit: int = 20,
        code_generator: Callable[[str], str] = generate_discount_code,
        clock: Callable[[], datetime] = _utc_now,
    ):
        """Initialize the service.

        Args:
            verification: Service used to re-verify the code.
            authority: Adapter for the Admin API.
            probe: Optional domain probe for observability.
            candidate_limit: Candidate page size for re-verification.
            code_generator: Builds a discount code from a suffix.
            clock: Returns the current UTC time.
        """
        self._verification = verification
        self._authority = authority
        self._probe = probe or DefaultIssuanceProbe()
        self._candidate_limit = candidate_limit
        self._code_generator = code_generator
        self._clock = clock

    async def issue(
        self,
        tenant: TenantContext,
        code: NormalizedCode,
        cart_total: Decimal | None = None,
    ) -> IssuedCredential | NotFound:
        """Mint a discount code worth the card balance, capped at the cart total.

        Args:
            tenant: Shop the discount is created in.
            code: Normalized customer input.
            cart_total: Current cart total, or None when unknown.

        Returns:
            IssuedCredential on success, NotFound if no card matched.

        Raises:
            InvalidAmountError: If the computed amount is not positive.
            IssuanceRejectedError: If the Admin API rejects the discount.
            TenantUnresolvedError: If the shop has no stored credentials.
            AuthorityError: If the Admin API fails.
        """
        self._probe.issuance_requested(
            tenant_id=tenant.tenant_id,
            suffix=code.suffix,
            cart_total=cart_total,
        )

        outcome = await self._verification.verify(
            tenant, code, limit=self._candidate_limit
        )
        if isinstance(outcome, NotFound):
            return outcome

        try:
            amount = compute_discount_amount(outcome.balance, cart_total)
        except InvalidAmountError as e:
            self._probe.invalid_amount(tenant_id=tenant.tenant_id, amount=e.amount)
            raise
        self._probe.discount_amount_computed(
            tenant_id=tenant.tenant_id,
            balance=outcome.balance,
            cart_total=cart_total,
            amount=amount,
        )

        starts_at = self._clock()
        request = DiscountRequest(
            tenant_id=tenant.tenant_id,
            suffix=code.suffix,
            code=self._code_generator(code.suffix),
            title=f"Gift Card {code.suffix}",
            amount=amount,
            currency=outcome.currency,
            starts_at=starts_at,
            expires_at=starts_at + DISCOUNT_VALIDITY,
        )

        try:
            credential = await self._authority.create_fixed_amount_discount(
                tenant=tenant,
                request=request,
            )
        except IssuanceRejectedError as e:
            self._probe.issuance_rejected(
                tenant_id=tenant.tenant_id,
                code=request.code,
                reason=e.message,
            )
            raise

        self._probe.credential_issued(
            tenant_id=tenant.tenant_id,
            code=credential.code,
            amount=credential.amount,
            currency=credential.currency,
        )
        return credential
