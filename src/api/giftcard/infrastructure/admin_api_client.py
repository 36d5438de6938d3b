"""Admin GraphQL API implementation of IGiftCardAuthority.

Searches gift cards by their last characters and creates single-use fixed
amount discount codes. The HTTP client and the credential store are passed
in per request; this module holds no authenticated client of its own.
"""

from __future__ import annotations

import time
from decimal import Decimal, InvalidOperation
from typing import Any

import httpx

from giftcard.domain.exceptions import (
    AuthorityError,
    IssuanceRejectedError,
    TenantUnresolvedError,
)
from giftcard.domain.value_objects import (
    CardCandidate,
    DiscountRequest,
    IssuedCredential,
)
from giftcard.infrastructure.observability import (
    AuthorityClientProbe,
    DefaultAuthorityClientProbe,
)
from giftcard.ports.credential_models import AdminCredentials
from giftcard.ports.repositories import ICredentialStore, IGiftCardAuthority
from infrastructure.settings import AuthoritySettings
from shared_kernel.middleware.tenant_context import TenantContext

ACCESS_TOKEN_HEADER = "X-Shopify-Access-Token"

GIFT_CARD_SEARCH_QUERY = """
query giftCards($first: Int!, $query: String!) {
  giftCards(first: $first, query: $query) {
    edges {
      node {
        id
        lastCharacters
        enabled
        balance {
          amount
          currencyCode
        }
      }
    }
  }
}
"""

CREATE_DISCOUNT_MUTATION = """
mutation createDiscount($basicCodeDiscount: DiscountCodeBasicInput!) {
  discountCodeBasicCreate(basicCodeDiscount: $basicCodeDiscount) {
    codeDiscountNode {
      codeDiscount {
        ... on DiscountCodeBasic {
          codes(first: 1) {
            nodes {
              code
            }
          }
        }
      }
    }
    userErrors {
      field
      message
    }
  }
}
"""


class AdminApiGiftCardAuthority(IGiftCardAuthority):
    """Talks to the Admin GraphQL API on behalf of one request."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        credential_store: ICredentialStore,
        settings: AuthoritySettings,
        probe: AuthorityClientProbe | None = None,
    ):
        self._http_client = http_client
        self._credential_store = credential_store
        self._settings = settings
        self._probe = probe or DefaultAuthorityClientProbe()
        # Instances live for one request, so this never outlives it.
        self._credentials: dict[str, AdminCredentials] = {}

    async def find_candidates_by_suffix(
        self,
        tenant: TenantContext,
        suffix: str,
        limit: int,
    ) -> list[CardCandidate]:
        data = await self._execute(
            tenant,
            operation="giftCards",
            query=GIFT_CARD_SEARCH_QUERY,
            variables={"first": limit, "query": f"last_characters:{suffix}"},
        )

        connection = data.get("giftCards") or {}
        try:
            edges = connection.get("edges") or []
            return [_parse_candidate(edge["node"]) for edge in edges]
        except (AttributeError, KeyError, TypeError, InvalidOperation) as e:
            self._probe.request_failed(
                operation="giftCards",
                shop=tenant.tenant_id,
                reason=f"unexpected gift card payload: {e!r}",
            )
            raise AuthorityError("Admin API returned an unexpected gift card payload") from e

    async def create_fixed_amount_discount(
        self,
        tenant: TenantContext,
        request: DiscountRequest,
    ) -> IssuedCredential:
        data = await self._execute(
            tenant,
            operation="discountCodeBasicCreate",
            query=CREATE_DISCOUNT_MUTATION,
            variables={"basicCodeDiscount": _discount_input(request)},
        )

        payload = data.get("discountCodeBasicCreate")
        if not isinstance(payload, dict):
            self._probe.request_failed(
                operation="discountCodeBasicCreate",
                shop=tenant.tenant_id,
                reason="missing discountCodeBasicCreate payload",
            )
            raise AuthorityError("Admin API returned no discount payload")

        user_errors = payload.get("userErrors") or []
        if user_errors:
            messages = _format_graphql_errors(user_errors).split("; ")
            fields = [
                ".".join(str(part) for part in err.get("field") or [])
                for err in user_errors
                if isinstance(err, dict)
            ]
            self._probe.user_errors_returned(
                operation="discountCodeBasicCreate",
                shop=tenant.tenant_id,
                messages=messages,
            )
            raise IssuanceRejectedError("; ".join(messages), fields=fields)

        return IssuedCredential(
            code=_created_code(payload) or request.code,
            amount=request.amount,
            currency=request.currency,
            expires_at=request.expires_at,
            usage_limit=1,
        )

    async def _credentials_for(self, tenant: TenantContext) -> AdminCredentials:
        cached = self._credentials.get(tenant.tenant_id)
        if cached is not None:
            return cached

        credentials = await self._credential_store.get_offline_credentials(
            tenant.tenant_id
        )
        if credentials is None:
            raise TenantUnresolvedError("Session Missing")

        self._credentials[tenant.tenant_id] = credentials
        return credentials

    async def _execute(
        self,
        tenant: TenantContext,
        operation: str,
        query: str,
        variables: dict[str, Any],
    ) -> dict[str, Any]:
        """Run a GraphQL operation and return its ``data`` object.

        Raises:
            TenantUnresolvedError: If the shop has no stored credentials.
            AuthorityError: On transport errors, non-200 responses, top-level
                GraphQL errors or a response without data.
        """
        credentials = await self._credentials_for(tenant)
        shop = credentials.shop
        url = self._settings.endpoint_for(shop)

        self._probe.request_sent(operation=operation, shop=shop)
        start_time = time.perf_counter()

        try:
            response = await self._http_client.post(
                url,
                json={"query": query, "variables": variables},
                headers={
                    ACCESS_TOKEN_HEADER: credentials.access_token.get_secret_value(),
                    "Content-Type": "application/json",
                },
                timeout=self._settings.timeout_seconds,
            )
        except httpx.HTTPError as e:
            self._probe.request_failed(operation=operation, shop=shop, reason=repr(e))
            raise AuthorityError(f"Admin API request failed: {e}") from e

        if response.status_code != 200:
            self._probe.request_failed(
                operation=operation,
                shop=shop,
                reason="HTTP error",
                status_code=response.status_code,
            )
            raise AuthorityError(
                f"Admin API returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            self._probe.request_failed(
                operation=operation, shop=shop, reason="invalid JSON"
            )
            raise AuthorityError("Admin API returned invalid JSON") from e

        if not isinstance(body, dict):
            self._probe.request_failed(
                operation=operation, shop=shop, reason="unexpected response shape"
            )
            raise AuthorityError("Admin API returned an unexpected response")

        errors = body.get("errors")
        if errors:
            message = _format_graphql_errors(errors)
            self._probe.request_failed(operation=operation, shop=shop, reason=message)
            raise AuthorityError(f"Admin API error: {message}")

        data = body.get("data")
        if not isinstance(data, dict):
            self._probe.request_failed(
                operation=operation, shop=shop, reason="response without data"
            )
            raise AuthorityError("Admin API response contained no data")

        self._probe.request_completed(
            operation=operation,
            shop=shop,
            elapsed_ms=(time.perf_counter() - start_time) * 1000,
        )
        return data


def _parse_candidate(node: dict[str, Any]) -> CardCandidate:
    balance = node["balance"]
    return CardCandidate(
        external_id=str(node["id"]),
        suffix=str(node["lastCharacters"]),
        enabled=bool(node["enabled"]),
        balance_amount=Decimal(str(balance["amount"])),
        currency=str(balance["currencyCode"]),
    )


def _discount_input(request: DiscountRequest) -> dict[str, Any]:
    return {
        "title": request.title,
        "code": request.code,
        "startsAt": request.starts_at.isoformat(),
        "endsAt": request.expires_at.isoformat(),
        "customerSelection": {"all": True},
        "customerGets": {
            "value": {
                "discountAmount": {
                    "amount": str(request.amount),
                    "appliesOnEachItem": False,
                }
            },
            "items": {"all": True},
        },
        "usageLimit": 1,
    }


def _created_code(payload: dict[str, Any]) -> str | None:
    try:
        nodes = payload["codeDiscountNode"]["codeDiscount"]["codes"]["nodes"]
        return nodes[0]["code"]
    except (KeyError, IndexError, TypeError):
        return None


def _format_graphql_errors(errors: Any) -> str:
    if isinstance(errors, str):
        return errors
    if isinstance(errors, dict):
        errors = [errors]
    if not isinstance(errors, list):
        return str(errors)
    return "; ".join(
        str(err.get("message", err)) if isinstance(err, dict) else str(err)
        for err in errors
    )
