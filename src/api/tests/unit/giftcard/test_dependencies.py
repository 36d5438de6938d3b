"""Unit tests for gift card dependency providers."""

from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from giftcard.application.observability import IssuanceProbe, VerificationProbe
from giftcard.application.services import IssuanceService, VerificationService
from giftcard.domain.code import normalize_code
from giftcard.dependencies import (
    get_credential_store,
    get_gift_card_authority,
    get_http_client,
    get_issuance_service,
    get_verification_service,
)
from giftcard.infrastructure.admin_api_client import AdminApiGiftCardAuthority
from giftcard.infrastructure.credential_store import SqlCredentialStore
from giftcard.ports.repositories import ICredentialStore
from infrastructure.settings import AuthoritySettings, RedemptionSettings


class TestProviders:
    """Tests for the request scoped providers."""

    @pytest.mark.asyncio
    async def test_http_client_is_closed_after_request(self):
        provider = get_http_client()
        client = await provider.__anext__()

        assert isinstance(client, httpx.AsyncClient)
        assert client.is_closed is False

        with pytest.raises(StopAsyncIteration):
            await provider.__anext__()
        assert client.is_closed is True

    def test_credential_store_wraps_session(self):
        store = get_credential_store(session=AsyncMock())

        assert isinstance(store, SqlCredentialStore)

    def test_authority_is_built_from_request_dependencies(self):
        authority = get_gift_card_authority(
            http_client=Mock(spec=httpx.AsyncClient),
            credential_store=Mock(spec=ICredentialStore),
            settings=AuthoritySettings(),
        )

        assert isinstance(authority, AdminApiGiftCardAuthority)

    @pytest.mark.asyncio
    async def test_services_use_configured_page_sizes(self, mock_authority, tenant):
        settings = RedemptionSettings(lookup_candidate_limit=7, convert_candidate_limit=13)

        verification = get_verification_service(
            authority=mock_authority,
            settings=settings,
            probe=Mock(spec=VerificationProbe),
        )
        issuance = get_issuance_service(
            verification=verification,
            authority=mock_authority,
            settings=settings,
            probe=Mock(spec=IssuanceProbe),
        )

        assert isinstance(verification, VerificationService)
        assert isinstance(issuance, IssuanceService)

        await verification.verify(tenant, normalize_code("AB12"))
        assert mock_authority.find_candidates_by_suffix.await_args.kwargs["limit"] == 7

        await issuance.issue(tenant, normalize_code("AB12"))
        assert mock_authority.find_candidates_by_suffix.await_args.kwargs["limit"] == 13
