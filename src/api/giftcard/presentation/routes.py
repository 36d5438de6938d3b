"""HTTP routes for the storefront gift card proxy.

Both routes answer HTTP 200 with a structured body for every outcome the
storefront widget can act on, including unexpected faults. Only a wrong
method on ``/convert`` gets a different status.
"""

from __future__ import annotations

import uuid
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from giftcard.application.services import IssuanceService, VerificationService
from giftcard.dependencies import (
    get_issuance_service,
    get_proxy_request_probe,
    get_verification_service,
)
from giftcard.domain.code import normalize_code
from giftcard.domain.exceptions import ErrorKind, GiftCardError
from giftcard.domain.value_objects import NotFound
from giftcard.presentation.models import (
    ConvertRequest,
    ConvertResponse,
    LookupResponse,
)
from giftcard.presentation.observability import ProxyRequestProbe
from iam.dependencies.tenant_context import TenantResolver, get_tenant_resolver
from shared_kernel.middleware.tenant_context import TenantUnresolved
from shared_kernel.observability_context import ObservationContext

REQUEST_ID_HEADER = "X-Request-ID"

NO_SHOP_CONTEXT = "No Shop Context"
CODE_REQUIRED = "Code Required"
GIFT_CARD_APPLIED = "Gift card applied"
METHOD_NOT_ALLOWED = "Method not allowed"

router = APIRouter(tags=["giftcard"])


def _observation_context(request: Request) -> ObservationContext:
    request_id = getattr(request.state, "request_id", None)
    if request_id is None:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    return ObservationContext(request_id=request_id)


def error_message(error: GiftCardError) -> str:
    """Render a typed redemption error as the message shown to shoppers."""
    if error.kind is ErrorKind.AUTHORITY_ERROR:
        return f"Gift card service unavailable: {error.message}"
    if error.kind is ErrorKind.ISSUANCE_REJECTED:
        return f"Could not create discount: {error.message}"
    return error.message


async def _read_convert_body(request: Request) -> ConvertRequest:
    # A missing or malformed body is the same as a body without a code.
    try:
        payload: Any = await request.json()
    except ValueError:
        payload = {}
    if not isinstance(payload, dict):
        payload = {}
    return ConvertRequest.model_validate(payload)


@router.get("/lookup", response_model_exclude_none=True)
async def lookup(
    request: Request,
    resolver: Annotated[TenantResolver, Depends(get_tenant_resolver)],
    service: Annotated[VerificationService, Depends(get_verification_service)],
    probe: Annotated[ProxyRequestProbe, Depends(get_proxy_request_probe)],
) -> LookupResponse:
    """Check whether a gift card code is valid and report its balance.

    Query parameters:
        code: The gift card code as the shopper typed it
        shop: The shop domain, signed by the app proxy when available

    Returns:
        LookupResponse with ``valid`` plus balance and currency, or a
        message explaining why the code was not accepted
    """
    context = _observation_context(request)
    probe = probe.with_context(context)

    try:
        tenant = resolver.resolve(request.query_params)
        if isinstance(tenant, TenantUnresolved):
            probe.request_handled(route="lookup", success=False, message=NO_SHOP_CONTEXT)
            return LookupResponse(valid=False, message=NO_SHOP_CONTEXT)

        probe = probe.with_context(context.with_tenant(tenant.tenant_id))

        raw_code = request.query_params.get("code") or ""
        if not raw_code.strip():
            probe.request_handled(route="lookup", success=False, message=CODE_REQUIRED)
            return LookupResponse(valid=False, message=CODE_REQUIRED)

        outcome = await service.verify(tenant, normalize_code(raw_code))

        if isinstance(outcome, NotFound):
            message = (
                f"Card not found (Shop: {tenant.tenant_id}, "
                f"Search: {outcome.suffix}, Scanned: {outcome.candidate_count})"
            )
            probe.request_handled(route="lookup", success=False, message=message)
            return LookupResponse(valid=False, message=message)

        probe.request_handled(route="lookup", success=True, message=None)
        return LookupResponse(
            valid=True,
            balance=outcome.balance,
            currency=outcome.currency,
        )

    except GiftCardError as e:
        message = error_message(e)
        probe.request_failed(route="lookup", kind=e.kind.value, message=message)
        return LookupResponse(valid=False, message=message)

    except Exception as e:
        probe.unexpected_error(route="lookup", error=e)
        return LookupResponse(valid=False, message=f"System Error: {e}")


@router.post("/convert", response_model_exclude_none=True)
async def convert(
    request: Request,
    resolver: Annotated[TenantResolver, Depends(get_tenant_resolver)],
    service: Annotated[IssuanceService, Depends(get_issuance_service)],
    probe: Annotated[ProxyRequestProbe, Depends(get_proxy_request_probe)],
) -> ConvertResponse:
    """Convert a gift card balance into a single-use discount code.

    Body:
        code: The gift card code as the shopper typed it
        cartTotal: Optional cart total that caps the discount amount

    Returns:
        ConvertResponse with the discount code and amount, or a message
        explaining why no discount was created
    """
    context = _observation_context(request)
    probe = probe.with_context(context)

    try:
        tenant = resolver.resolve(request.query_params)
        if isinstance(tenant, TenantUnresolved):
            probe.request_handled(route="convert", success=False, message=NO_SHOP_CONTEXT)
            return ConvertResponse(ok=False, message=NO_SHOP_CONTEXT)

        probe = probe.with_context(context.with_tenant(tenant.tenant_id))

        body = await _read_convert_body(request)
        outcome = await service.issue(
            tenant,
            normalize_code(body.code or ""),
            cart_total=body.cart_total,
        )

        if isinstance(outcome, NotFound):
            message = (
                f"Gift card not found (Search: {outcome.suffix}, "
                f"Candidates: {outcome.candidate_count})"
            )
            probe.request_handled(route="convert", success=False, message=message)
            return ConvertResponse(ok=False, message=message)

        probe.request_handled(route="convert", success=True, message=GIFT_CARD_APPLIED)
        return ConvertResponse(
            ok=True,
            discount_code=outcome.code,
            discount_amount=outcome.amount,
            message=GIFT_CARD_APPLIED,
        )

    except GiftCardError as e:
        message = error_message(e)
        probe.request_failed(route="convert", kind=e.kind.value, message=message)
        return ConvertResponse(ok=False, message=message)

    except Exception as e:
        probe.unexpected_error(route="convert", error=e)
        return ConvertResponse(ok=False, message=f"System Error: {e}")


@router.api_route(
    "/convert",
    methods=["GET", "HEAD", "OPTIONS", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def convert_method_not_allowed() -> JSONResponse:
    """Reject anything but POST on the convert route."""
    return JSONResponse(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        content={"ok": False, "message": METHOD_NOT_ALLOWED},
        headers={"Allow": "POST"},
    )
