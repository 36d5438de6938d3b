"""Domain layer for gift card redemption."""

from giftcard.domain.code import normalize_code
from giftcard.domain.exceptions import (
    AuthorityError,
    ErrorKind,
    GiftCardError,
    InvalidAmountError,
    InvalidFormatError,
    IssuanceRejectedError,
    TenantUnresolvedError,
)
from giftcard.domain.value_objects import (
    CardCandidate,
    DiscountRequest,
    IssuedCredential,
    NormalizedCode,
    NotFound,
    VerifiedMatch,
)

__all__ = [
    "AuthorityError",
    "CardCandidate",
    "DiscountRequest",
    "ErrorKind",
    "GiftCardError",
    "InvalidAmountError",
    "InvalidFormatError",
    "IssuanceRejectedError",
    "IssuedCredential",
    "NormalizedCode",
    "NotFound",
    "TenantUnresolvedError",
    "VerifiedMatch",
    "normalize_code",
]
