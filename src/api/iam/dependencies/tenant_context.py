"""Tenant resolution for storefront app proxy requests.

Resolves the shop a request belongs to, in order of trust:

1. An authenticated session: the request carries a valid app proxy
   signature, so its ``shop`` parameter was set by the platform.
2. The unsigned ``shop`` query parameter. This fallback is kept for
   contexts where the signed handshake is not available (for example a
   widget calling the service directly). It is a known trust relaxation.

If neither yields a shop the outcome is ``TenantUnresolved``. Both branches
produce typed outcomes; nothing is raised and swallowed.

Usage in FastAPI routes:
    @router.get("/example")
    async def example(
        request: Request,
        resolver: Annotated[TenantResolver, Depends(get_tenant_resolver)],
    ):
        outcome = resolver.resolve(request.query_params)
        ...
"""

from __future__ import annotations

from typing import Annotated, Protocol

from fastapi import Depends

from iam.application.security import verify_proxy_signature
from infrastructure.settings import AppProxySettings, get_app_proxy_settings
from shared_kernel.middleware.observability.tenant_context_probe import (
    DefaultTenantContextProbe,
    TenantContextProbe,
)
from shared_kernel.middleware.tenant_context import TenantContext, TenantUnresolved

SHOP_PARAM = "shop"


class QueryParamsLike(Protocol):
    """The subset of Starlette's ``QueryParams`` the resolver needs."""

    def multi_items(self) -> list[tuple[str, str]]: ...

    def get(self, key: str, default: str | None = None) -> str | None: ...


class TenantResolver:
    """Two-branch shop resolver for app proxy requests."""

    def __init__(
        self,
        app_secret: str | None,
        probe: TenantContextProbe | None = None,
    ):
        """Initialize the resolver.

        Args:
            app_secret: Secret used to verify proxy signatures. When empty,
                the session branch is skipped.
            probe: Optional domain probe for observability.
        """
        self._app_secret = app_secret or ""
        self._probe = probe or DefaultTenantContextProbe()

    def resolve(self, query_params: QueryParamsLike) -> TenantContext | TenantUnresolved:
        """Resolve the shop for a request.

        Args:
            query_params: The request's query parameters.

        Returns:
            TenantContext with source 'session' or 'parameter', or
            TenantUnresolved if no shop could be identified.
        """
        shop = (query_params.get(SHOP_PARAM) or "").strip()

        session_context = self._resolve_from_session(query_params, shop)
        if session_context is not None:
            return session_context

        if shop:
            self._probe.tenant_resolved_from_parameter(tenant_id=shop)
            return TenantContext(tenant_id=shop, source="parameter")

        self._probe.tenant_unresolved(reason="no_shop")
        return TenantUnresolved(reason="no_shop")

    def _resolve_from_session(
        self, query_params: QueryParamsLike, shop: str
    ) -> TenantContext | None:
        if not self._app_secret or not shop:
            return None

        params = query_params.multi_items()
        if not any(key == "signature" for key, _ in params):
            return None

        if not verify_proxy_signature(params, self._app_secret):
            self._probe.proxy_signature_invalid(shop=shop)
            return None

        self._probe.tenant_resolved_from_session(tenant_id=shop)
        return TenantContext(tenant_id=shop, source="session")


def get_tenant_context_probe() -> TenantContextProbe:
    """Get TenantContextProbe instance."""
    return DefaultTenantContextProbe()


def get_tenant_resolver(
    settings: Annotated[AppProxySettings, Depends(get_app_proxy_settings)],
    probe: Annotated[TenantContextProbe, Depends(get_tenant_context_probe)],
) -> TenantResolver:
    """Provide a TenantResolver configured with the app secret.

    Returns:
        TenantResolver for the current request
    """
    return TenantResolver(
        app_secret=settings.app_secret.get_secret_value(),
        probe=probe,
    )
