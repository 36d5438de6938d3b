"""Typed error taxonomy for gift card redemption.

Every error carries an ``ErrorKind`` and a human-readable message so the
presentation layer can decide how to render it without string matching.
"Not found" is not an error here: verification reports it as a ``NotFound``
outcome.
"""

from __future__ import annotations

from decimal import Decimal
from enum import StrEnum


class ErrorKind(StrEnum):
    """Classification of redemption failures."""

    INVALID_FORMAT = "invalid_format"
    TENANT_UNRESOLVED = "tenant_unresolved"
    NOT_FOUND = "not_found"
    INVALID_AMOUNT = "invalid_amount"
    AUTHORITY_ERROR = "authority_error"
    ISSUANCE_REJECTED = "issuance_rejected"


class GiftCardError(Exception):
    """Base exception for redemption failures."""

    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidFormatError(GiftCardError):
    """Raised when a code is too short to carry a four character suffix.

    User-correctable: the storefront should ask for the code again.
    """

    kind = ErrorKind.INVALID_FORMAT


class TenantUnresolvedError(GiftCardError):
    """Raised when a shop has no usable stored Admin API credentials."""

    kind = ErrorKind.TENANT_UNRESOLVED


class InvalidAmountError(GiftCardError):
    """Raised when the computed discount amount is not positive."""

    kind = ErrorKind.INVALID_AMOUNT

    def __init__(self, message: str, amount: Decimal | None = None):
        super().__init__(message)
        self.amount = amount


class AuthorityError(GiftCardError):
    """Raised when the Admin API is unreachable or answers unexpectedly."""

    kind = ErrorKind.AUTHORITY_ERROR

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class IssuanceRejectedError(GiftCardError):
    """Raised when the Admin API rejects a discount creation.

    The Admin API's own validation messages are preserved.
    """

    kind = ErrorKind.ISSUANCE_REJECTED

    def __init__(self, message: str, fields: list[str] | None = None):
        super().__init__(message)
        self.fields = fields or []
