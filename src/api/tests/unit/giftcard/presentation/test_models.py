"""Unit tests for proxy request and response models."""

from decimal import Decimal

import pytest

from giftcard.presentation.models import (
    ConvertRequest,
    ConvertResponse,
    LookupResponse,
)


class TestConvertRequest:
    """Tests for ConvertRequest parsing."""

    def test_reads_camel_case_fields(self):
        body = ConvertRequest.model_validate({"code": "ab12", "cartTotal": "19.99"})

        assert body.code == "ab12"
        assert body.cart_total == Decimal("19.99")

    def test_numeric_cart_total_is_accepted(self):
        body = ConvertRequest.model_validate({"code": "ab12", "cartTotal": 42.5})

        assert body.cart_total == Decimal("42.5")

    @pytest.mark.parametrize("cart_total", ["", "   ", "abc", None, "NaN", "Infinity", True, [1]])
    def test_unusable_cart_total_means_no_cap(self, cart_total):
        body = ConvertRequest.model_validate({"code": "ab12", "cartTotal": cart_total})

        assert body.cart_total is None

    def test_missing_fields_default_to_none(self):
        body = ConvertRequest.model_validate({})

        assert body.code is None
        assert body.cart_total is None

    def test_numeric_code_is_coerced_to_string(self):
        assert ConvertRequest.model_validate({"code": 12345678}).code == "12345678"

    def test_unknown_fields_are_ignored(self):
        body = ConvertRequest.model_validate({"code": "ab12", "currency": "USD"})

        assert body.code == "ab12"


class TestResponses:
    """Tests for response serialization."""

    def test_convert_response_uses_camel_case_and_string_amounts(self):
        response = ConvertResponse(
            ok=True,
            discount_code="GC-AB12-7QX3",
            discount_amount=Decimal("10.00"),
            message="Gift card applied",
        )

        assert response.model_dump(mode="json", by_alias=True) == {
            "ok": True,
            "discountCode": "GC-AB12-7QX3",
            "discountAmount": "10.00",
            "message": "Gift card applied",
        }

    def test_lookup_response_omits_unset_fields(self):
        response = LookupResponse(valid=False, message="Code Required")

        assert response.model_dump(mode="json", by_alias=True, exclude_none=True) == {
            "valid": False,
            "message": "Code Required",
        }
