"""Value objects for gift card redemption.

All of these live for a single request. None of them are persisted by this
service; the Admin API is the system of record for cards and discounts.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

SUFFIX_LENGTH = 4
"""Number of trailing characters the Admin API discloses for a gift card."""


@dataclass(frozen=True)
class NormalizedCode:
    """A customer-entered code in canonical form.

    Attributes:
        canonical: Uppercased code with whitespace and hyphens removed.
        suffix: The last four characters of ``canonical``.
    """

    canonical: str
    suffix: str


@dataclass(frozen=True)
class CardCandidate:
    """A gift card returned by a suffix search.

    Several candidates may share the same suffix.
    """

    external_id: str
    suffix: str
    enabled: bool
    balance_amount: Decimal
    currency: str

    @property
    def is_redeemable(self) -> bool:
        """Whether the card is enabled and still holds a balance."""
        return self.enabled and self.balance_amount > 0


@dataclass(frozen=True)
class VerifiedMatch:
    """The single candidate selected for a code."""

    candidate: CardCandidate

    @property
    def balance(self) -> Decimal:
        return self.candidate.balance_amount

    @property
    def currency(self) -> str:
        return self.candidate.currency


@dataclass(frozen=True)
class NotFound:
    """No enabled, funded candidate matched the suffix.

    Attributes:
        suffix: The suffix that was searched for.
        candidate_count: How many candidates the Admin API returned before
            filtering. Diagnostic only.
    """

    suffix: str
    candidate_count: int


@dataclass(frozen=True)
class DiscountRequest:
    """Everything needed to mint a single-use fixed amount discount."""

    tenant_id: str
    suffix: str
    code: str
    title: str
    amount: Decimal
    currency: str
    starts_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class IssuedCredential:
    """A discount code minted from a verified gift card balance."""

    code: str
    amount: Decimal
    currency: str
    expires_at: datetime
    usage_limit: int = 1
