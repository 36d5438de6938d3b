"""Unit tests for app proxy signature utilities.

Note: Secrets in this file are synthetic test data, not real secrets.
"""

import hashlib
import hmac

SECRET = "hush"


class TestBuildSignatureMessage:
    """Tests for build_signature_message function."""

    def test_sorts_keys_and_concatenates_without_separator(self):
        """Pairs are sorted by key and joined with no delimiter."""
        from iam.application.security import build_signature_message

        message = build_signature_message(
            [
                ("shop", "some-shop.myshopify.com"),
                ("path_prefix", "/apps/gc"),
                ("timestamp", "1317327555"),
            ]
        )

        assert message == (
            "path_prefix=/apps/gcshop=some-shop.myshopify.comtimestamp=1317327555"
        )

    def test_excludes_signature_parameter(self):
        """The signature itself is never part of the signed message."""
        from iam.application.security import build_signature_message

        message = build_signature_message([("signature", "abc"), ("shop", "a")])

        assert message == "shop=a"

    def test_joins_repeated_values_with_commas(self):
        """Repeated parameters are signed as one comma-joined value."""
        from iam.application.security import build_signature_message

        message = build_signature_message([("ids", "1"), ("ids", "2"), ("a", "x")])

        assert message == "a=xids=1,2"


class TestComputeProxySignature:
    """Tests for compute_proxy_signature function."""

    def test_is_hex_hmac_sha256_of_message(self):
        """Signature should be the lowercase hex HMAC-SHA256 digest."""
        from iam.application.security import compute_proxy_signature

        params = [("shop", "a.myshopify.com"), ("timestamp", "1")]
        expected = hmac.new(
            SECRET.encode(),
            b"shop=a.myshopify.comtimestamp=1",
            hashlib.sha256,
        ).hexdigest()

        assert compute_proxy_signature(params, SECRET) == expected


class TestVerifyProxySignature:
    """Tests for verify_proxy_signature function."""

    def _signed(self, params):
        from iam.application.security import compute_proxy_signature

        return [*params, ("signature", compute_proxy_signature(params, SECRET))]

    def test_accepts_valid_signature(self):
        from iam.application.security import verify_proxy_signature

        params = self._signed([("shop", "a.myshopify.com"), ("timestamp", "1")])

        assert verify_proxy_signature(params, SECRET) is True

    def test_accepts_uppercase_hex(self):
        from iam.application.security import verify_proxy_signature

        params = self._signed([("shop", "a.myshopify.com")])
        params[-1] = ("signature", params[-1][1].upper())

        assert verify_proxy_signature(params, SECRET) is True

    def test_rejects_tampered_parameters(self):
        from iam.application.security import verify_proxy_signature

        params = self._signed([("shop", "a.myshopify.com")])
        params[0] = ("shop", "b.myshopify.com")

        assert verify_proxy_signature(params, SECRET) is False

    def test_rejects_wrong_secret(self):
        from iam.application.security import verify_proxy_signature

        params = self._signed([("shop", "a.myshopify.com")])

        assert verify_proxy_signature(params, "other") is False

    def test_rejects_missing_signature(self):
        from iam.application.security import verify_proxy_signature

        assert verify_proxy_signature([("shop", "a.myshopify.com")], SECRET) is False

    def test_rejects_when_secret_is_empty(self):
        from iam.application.security import verify_proxy_signature

        params = self._signed([("shop", "a.myshopify.com")])

        assert verify_proxy_signature(params, "") is False

    def test_rejects_non_ascii_signature(self):
        """Garbage signatures are rejected rather than raising."""
        from iam.application.security import verify_proxy_signature

        params = [("shop", "a.myshopify.com"), ("signature", "ü" * 64)]

        assert verify_proxy_signature(params, SECRET) is False
