"""Unit test fixtures with mocked dependencies."""

from decimal import Decimal
from unittest.mock import AsyncMock, create_autospec

import pytest

from giftcard.domain.value_objects import CardCandidate
from giftcard.ports.repositories import IGiftCardAuthority
from shared_kernel.middleware.tenant_context import TenantContext

TEST_SHOP = "test-shop.myshopify.com"


def make_candidate(
    suffix: str = "AB12",
    balance: str = "50.00",
    enabled: bool = True,
    currency: str = "USD",
    external_id: str = "gid://shopify/GiftCard/1",
) -> CardCandidate:
    """Build a CardCandidate with sensible defaults."""
    return CardCandidate(
        external_id=external_id,
        suffix=suffix,
        enabled=enabled,
        balance_amount=Decimal(balance),
        currency=currency,
    )


@pytest.fixture
def tenant() -> TenantContext:
    """Provide a tenant resolved from the shop parameter."""
    return TenantContext(tenant_id=TEST_SHOP, source="parameter")


@pytest.fixture
def mock_authority():
    """Provide an autospecced gift card authority with async methods."""
    authority = create_autospec(IGiftCardAuthority, instance=True)
    authority.find_candidates_by_suffix = AsyncMock(return_value=[])
    authority.create_fixed_amount_discount = AsyncMock()
    return authority


@pytest.fixture
def candidate_factory():
    """Provide the CardCandidate builder to tests."""
    return make_candidate
