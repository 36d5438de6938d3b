"""Unit tests for VerificationService and IssuanceService."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, Mock

import pytest

from giftcard.application.observability import IssuanceProbe, VerificationProbe
from giftcard.application.services import (
    DISCOUNT_VALIDITY,
    IssuanceService,
    VerificationService,
    compute_discount_amount,
    generate_discount_code,
)
from giftcard.domain.code import normalize_code
from giftcard.domain.exceptions import (
    AuthorityError,
    InvalidAmountError,
    IssuanceRejectedError,
)
from giftcard.domain.value_objects import (
    DiscountRequest,
    IssuedCredential,
    NotFound,
    VerifiedMatch,
)

FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def verification_probe():
    return Mock(spec=VerificationProbe)


@pytest.fixture
def issuance_probe():
    return Mock(spec=IssuanceProbe)


@pytest.fixture
def verification_service(mock_authority, verification_probe):
    return VerificationService(authority=mock_authority, probe=verification_probe)


@pytest.fixture
def issuance_service(mock_authority, verification_service, issuance_probe):
    async def echo_request(tenant, request: DiscountRequest) -> IssuedCredential:
        return IssuedCredential(
            code=request.code,
            amount=request.amount,
            currency=request.currency,
            expires_at=request.expires_at,
        )

    mock_authority.create_fixed_amount_discount = AsyncMock(side_effect=echo_request)
    return IssuanceService(
        verification=verification_service,
        authority=mock_authority,
        probe=issuance_probe,
        code_generator=lambda suffix: f"GC-{suffix}-TEST",
        clock=lambda: FIXED_NOW,
    )


class TestGenerateDiscountCode:
    """Tests for discount code generation."""

    def test_code_has_prefix_suffix_and_random_part(self):
        code = generate_discount_code("AB12")

        prefix, suffix, unique = code.split("-")
        assert prefix == "GC"
        assert suffix == "AB12"
        assert len(unique) == 4
        assert unique.isalnum()
        assert unique == unique.upper()


class TestComputeDiscountAmount:
    """Tests for the cart-bounded amount rule."""

    def test_cart_total_caps_the_balance(self):
        assert compute_discount_amount(Decimal("25.00"), Decimal("10.00")) == Decimal("10.00")

    def test_balance_caps_a_larger_cart(self):
        assert compute_discount_amount(Decimal("25.00"), Decimal("80.00")) == Decimal("25.00")

    def test_missing_cart_total_uses_full_balance(self):
        assert compute_discount_amount(Decimal("25.00"), None) == Decimal("25.00")

    @pytest.mark.parametrize("cart_total", ["0", "-5.00"])
    def test_non_positive_cart_total_uses_full_balance(self, cart_total):
        """An empty cart is treated as not yet populated."""
        assert compute_discount_amount(Decimal("25.00"), Decimal(cart_total)) == Decimal("25.00")

    @pytest.mark.parametrize(
        ("balance", "cart_total"),
        [("1", "1"), ("0.01", "100"), ("75.50", "75.49"), ("300", "299.99")],
    )
    def test_result_is_min_of_balance_and_cart(self, balance, cart_total):
        amount = compute_discount_amount(Decimal(balance), Decimal(cart_total))

        assert amount == min(Decimal(balance), Decimal(cart_total))
        assert amount > 0

    def test_zero_balance_is_rejected(self):
        with pytest.raises(InvalidAmountError) as exc_info:
            compute_discount_amount(Decimal("0"), None)

        assert exc_info.value.message == "Invalid discount amount"
        assert exc_info.value.amount == Decimal("0")


class TestVerificationService:
    """Tests for VerificationService.verify."""

    @pytest.mark.asyncio
    async def test_single_matching_candidate_is_verified(
        self, verification_service, mock_authority, tenant, candidate_factory
    ):
        """A lone enabled, funded card with the suffix is selected."""
        mock_authority.find_candidates_by_suffix.return_value = [
            candidate_factory(suffix="AB12", balance="25.00")
        ]

        outcome = await verification_service.verify(tenant, normalize_code("ab-1234 ab12"))

        assert isinstance(outcome, VerifiedMatch)
        assert outcome.balance == Decimal("25.00")
        assert outcome.currency == "USD"
        mock_authority.find_candidates_by_suffix.assert_awaited_once_with(
            tenant=tenant, suffix="AB12", limit=10
        )

    @pytest.mark.asyncio
    async def test_empty_candidate_list_is_not_found(
        self, verification_service, mock_authority, tenant, verification_probe
    ):
        mock_authority.find_candidates_by_suffix.return_value = []

        outcome = await verification_service.verify(tenant, normalize_code("ZZ99"))

        assert outcome == NotFound(suffix="ZZ99", candidate_count=0)
        verification_probe.card_not_found.assert_called_once()

    @pytest.mark.asyncio
    async def test_disabled_and_empty_cards_are_never_selected(
        self, verification_service, mock_authority, tenant, candidate_factory
    ):
        mock_authority.find_candidates_by_suffix.return_value = [
            candidate_factory(enabled=False, external_id="disabled"),
            candidate_factory(balance="0.00", external_id="empty"),
        ]

        outcome = await verification_service.verify(tenant, normalize_code("AB12"))

        assert outcome == NotFound(suffix="AB12", candidate_count=2)

    @pytest.mark.asyncio
    async def test_candidates_with_other_suffix_are_ignored(
        self, verification_service, mock_authority, tenant, candidate_factory
    ):
        mock_authority.find_candidates_by_suffix.return_value = [
            candidate_factory(suffix="XX12")
        ]

        outcome = await verification_service.verify(tenant, normalize_code("AB12"))

        assert isinstance(outcome, NotFound)

    @pytest.mark.asyncio
    async def test_ineligible_candidates_are_skipped_before_selection(
        self, verification_service, mock_authority, tenant, candidate_factory
    ):
        mock_authority.find_candidates_by_suffix.return_value = [
            candidate_factory(enabled=False, external_id="first"),
            candidate_factory(balance="5.00", external_id="second"),
        ]

        outcome = await verification_service.verify(tenant, normalize_code("AB12"))

        assert isinstance(outcome, VerifiedMatch)
        assert outcome.candidate.external_id == "second"

    @pytest.mark.asyncio
    async def test_shared_suffix_selects_first_listed_candidate(
        self,
        verification_service,
        mock_authority,
        tenant,
        candidate_factory,
        verification_probe,
    ):
        """Two funded cards ending in CD34: the first one listed always wins."""
        mock_authority.find_candidates_by_suffix.return_value = [
            candidate_factory(suffix="CD34", balance="10.00", external_id="first"),
            candidate_factory(suffix="CD34", balance="90.00", external_id="second"),
        ]

        outcomes = [
            await verification_service.verify(tenant, normalize_code("cd34"))
            for _ in range(3)
        ]

        assert all(o.candidate.external_id == "first" for o in outcomes)
        assert verification_probe.ambiguous_suffix_match.call_count == 3

    @pytest.mark.asyncio
    async def test_explicit_limit_overrides_default(
        self, verification_service, mock_authority, tenant
    ):
        await verification_service.verify(tenant, normalize_code("AB12"), limit=20)

        mock_authority.find_candidates_by_suffix.assert_awaited_once_with(
            tenant=tenant, suffix="AB12", limit=20
        )

    @pytest.mark.asyncio
    async def test_authority_errors_propagate(
        self, verification_service, mock_authority, tenant
    ):
        mock_authority.find_candidates_by_suffix.side_effect = AuthorityError("down")

        with pytest.raises(AuthorityError):
            await verification_service.verify(tenant, normalize_code("AB12"))


class TestIssuanceService:
    """Tests for IssuanceService.issue."""

    @pytest.mark.asyncio
    async def test_cart_total_caps_discount(
        self, issuance_service, mock_authority, tenant, candidate_factory
    ):
        mock_authority.find_candidates_by_suffix.return_value = [
            candidate_factory(suffix="AB12", balance="25.00")
        ]

        credential = await issuance_service.issue(
            tenant, normalize_code("ab-1234 ab12"), cart_total=Decimal("10.00")
        )

        assert isinstance(credential, IssuedCredential)
        assert credential.amount == Decimal("10.00")

    @pytest.mark.asyncio
    async def test_missing_cart_total_uses_full_balance(
        self, issuance_service, mock_authority, tenant, candidate_factory
    ):
        mock_authority.find_candidates_by_suffix.return_value = [
            candidate_factory(suffix="AB12", balance="25.00")
        ]

        credential = await issuance_service.issue(tenant, normalize_code("ab-1234 ab12"))

        assert credential.amount == Decimal("25.00")

    @pytest.mark.asyncio
    async def test_discount_request_is_single_use_and_short_lived(
        self, issuance_service, mock_authority, tenant, candidate_factory
    ):
        mock_authority.find_candidates_by_suffix.return_value = [
            candidate_factory(suffix="AB12", balance="25.00", currency="EUR")
        ]

        credential = await issuance_service.issue(tenant, normalize_code("AB12"))

        request = mock_authority.create_fixed_amount_discount.await_args.kwargs["request"]
        assert request.tenant_id == tenant.tenant_id
        assert request.code == "GC-AB12-TEST"
        assert request.title == "Gift Card AB12"
        assert request.currency == "EUR"
        assert request.starts_at == FIXED_NOW
        assert request.expires_at == FIXED_NOW + DISCOUNT_VALIDITY
        assert DISCOUNT_VALIDITY == timedelta(hours=1)
        assert credential.usage_limit == 1
        assert credential.code == "GC-AB12-TEST"

    @pytest.mark.asyncio
    async def test_reverifies_with_convert_page_size(
        self, issuance_service, mock_authority, tenant, candidate_factory
    ):
        mock_authority.find_candidates_by_suffix.return_value = [candidate_factory()]

        await issuance_service.issue(tenant, normalize_code("AB12"))

        mock_authority.find_candidates_by_suffix.assert_awaited_once_with(
            tenant=tenant, suffix="AB12", limit=20
        )

    @pytest.mark.asyncio
    async def test_not_found_is_returned_without_minting(
        self, issuance_service, mock_authority, tenant
    ):
        outcome = await issuance_service.issue(tenant, normalize_code("ZZ99"))

        assert outcome == NotFound(suffix="ZZ99", candidate_count=0)
        mock_authority.create_fixed_amount_discount.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rejection_is_reported_and_reraised(
        self, issuance_service, mock_authority, tenant, candidate_factory, issuance_probe
    ):
        mock_authority.find_candidates_by_suffix.return_value = [candidate_factory()]
        mock_authority.create_fixed_amount_discount.side_effect = IssuanceRejectedError(
            "Code must be unique"
        )

        with pytest.raises(IssuanceRejectedError):
            await issuance_service.issue(tenant, normalize_code("AB12"))

        issuance_probe.issuance_rejected.assert_called_once_with(
            tenant_id=tenant.tenant_id,
            code="GC-AB12-TEST",
            reason="Code must be unique",
        )
        issuance_probe.credential_issued.assert_not_called()

    @pytest.mark.asyncio
    async def test_issued_credential_is_reported(
        self, issuance_service, mock_authority, tenant, candidate_factory, issuance_probe
    ):
        mock_authority.find_candidates_by_suffix.return_value = [candidate_factory()]

        await issuance_service.issue(tenant, normalize_code("AB12"))

        issuance_probe.credential_issued.assert_called_once_with(
            tenant_id=tenant.tenant_id,
            code="GC-AB12-TEST",
            amount=Decimal("50.00"),
            currency="USD",
        )
