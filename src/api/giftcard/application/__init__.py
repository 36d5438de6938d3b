"""Application services for gift card redemption."""

from giftcard.application.services import (
    IssuanceService,
    VerificationService,
    compute_discount_amount,
    generate_discount_code,
)

__all__ = [
    "IssuanceService",
    "VerificationService",
    "compute_discount_amount",
    "generate_discount_code",
]
