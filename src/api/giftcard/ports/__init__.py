"""Ports (interfaces) for the gift card redemption context."""

from giftcard.ports.credential_models import AdminCredentials
from giftcard.ports.repositories import ICredentialStore, IGiftCardAuthority

__all__ = [
    "AdminCredentials",
    "ICredentialStore",
    "IGiftCardAuthority",
]
