"""Security utilities for storefront app proxy requests.

The storefront platform signs every request it forwards through the app
proxy. The signature is an HMAC-SHA256 hex digest, keyed with the app
secret, over the sorted query parameters (excluding ``signature`` itself)
rendered as ``key=value`` pairs concatenated without a separator. Repeated
parameters have their values joined with commas.
"""

import hashlib
import hmac
from collections.abc import Iterable

SIGNATURE_PARAM = "signature"


def build_signature_message(params: Iterable[tuple[str, str]]) -> str:
    """Render query parameters in the canonical form that gets signed.

    Args:
        params: Query parameters as (key, value) pairs, repeated keys allowed

    Returns:
        The message string, e.g. ``"path_prefix=/apps/gcshop=a.myshopify.com"``
    """
    grouped: dict[str, list[str]] = {}
    for key, value in params:
        if key == SIGNATURE_PARAM:
            continue
        grouped.setdefault(key, []).append(value)

    return "".join(f"{key}={','.join(grouped[key])}" for key in sorted(grouped))


def compute_proxy_signature(params: Iterable[tuple[str, str]], secret: str) -> str:
    """Compute the hex HMAC-SHA256 signature for query parameters.

    Args:
        params: Query parameters as (key, value) pairs
        secret: The app secret

    Returns:
        Lowercase hex digest
    """
    message = build_signature_message(params)
    return hmac.new(secret.encode(), message.encode(), hashlib.sha256).hexdigest()


def verify_proxy_signature(params: Iterable[tuple[str, str]], secret: str) -> bool:
    """Verify the ``signature`` parameter using constant-time comparison.

    Args:
        params: Query parameters as (key, value) pairs, including ``signature``
        secret: The app secret

    Returns:
        True if a signature is present and matches, False otherwise
    """
    items = list(params)
    provided = next((value for key, value in items if key == SIGNATURE_PARAM), None)
    if not provided or not secret:
        return False

    expected = compute_proxy_signature(items, secret)
    return hmac.compare_digest(expected.encode(), provided.lower().encode())
