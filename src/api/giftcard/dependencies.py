"""FastAPI dependencies for the gift card bounded context.

Everything here is request scoped: each request gets its own HTTP client,
database session and authority adapter. Credentials are looked up per shop
on demand.
"""

from collections.abc import AsyncIterator
from typing import Annotated

import httpx
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from giftcard.application.observability import (
    DefaultIssuanceProbe,
    DefaultVerificationProbe,
    IssuanceProbe,
    VerificationProbe,
)
from giftcard.application.services import IssuanceService, VerificationService
from giftcard.infrastructure.admin_api_client import AdminApiGiftCardAuthority
from giftcard.infrastructure.credential_store import SqlCredentialStore
from giftcard.ports.repositories import ICredentialStore, IGiftCardAuthority
from giftcard.presentation.observability import (
    DefaultProxyRequestProbe,
    ProxyRequestProbe,
)
from infrastructure.database.dependencies import get_read_session
from infrastructure.settings import (
    AuthoritySettings,
    RedemptionSettings,
    get_authority_settings,
    get_redemption_settings,
)


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    """Provide an HTTP client that is closed when the request ends.

    Yields:
        httpx.AsyncClient for Admin API calls
    """
    async with httpx.AsyncClient() as client:
        yield client


def get_credential_store(
    session: Annotated[AsyncSession, Depends(get_read_session)],
) -> ICredentialStore:
    """Get the credential store backed by the Session table.

    Args:
        session: Async database session

    Returns:
        SqlCredentialStore instance
    """
    return SqlCredentialStore(session=session)


def get_gift_card_authority(
    http_client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
    credential_store: Annotated[ICredentialStore, Depends(get_credential_store)],
    settings: Annotated[AuthoritySettings, Depends(get_authority_settings)],
) -> IGiftCardAuthority:
    """Get the Admin API adapter for the current request.

    Args:
        http_client: Request scoped HTTP client
        credential_store: Source of per-shop access tokens
        settings: Admin API settings

    Returns:
        AdminApiGiftCardAuthority instance
    """
    return AdminApiGiftCardAuthority(
        http_client=http_client,
        credential_store=credential_store,
        settings=settings,
    )


def get_verification_probe() -> VerificationProbe:
    """Get VerificationProbe instance."""
    return DefaultVerificationProbe()


def get_issuance_probe() -> IssuanceProbe:
    """Get IssuanceProbe instance."""
    return DefaultIssuanceProbe()


def get_proxy_request_probe() -> ProxyRequestProbe:
    """Get ProxyRequestProbe instance."""
    return DefaultProxyRequestProbe()


def get_verification_service(
    authority: Annotated[IGiftCardAuthority, Depends(get_gift_card_authority)],
    settings: Annotated[RedemptionSettings, Depends(get_redemption_settings)],
    probe: Annotated[VerificationProbe, Depends(get_verification_probe)],
) -> VerificationService:
    """Get VerificationService using the lookup page size."""
    return VerificationService(
        authority=authority,
        probe=probe,
        default_limit=settings.lookup_candidate_limit,
    )


def get_issuance_service(
    verification: Annotated[VerificationService, Depends(get_verification_service)],
    authority: Annotated[IGiftCardAuthority, Depends(get_gift_card_authority)],
    settings: Annotated[RedemptionSettings, Depends(get_redemption_settings)],
    probe: Annotated[IssuanceProbe, Depends(get_issuance_probe)],
) -> IssuanceService:
    """Get IssuanceService using the convert page size."""
    return IssuanceService(
        verification=verification,
        authority=authority,
        probe=probe,
        candidate_limit=settings.convert_candidate_limit,
    )
