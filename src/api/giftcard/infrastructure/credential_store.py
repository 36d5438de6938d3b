"""PostgreSQL implementation of ICredentialStore.

Reads offline Admin API credentials from the ``Session`` table. The table is
owned by the app's install flow; nothing here writes to it.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from pydantic import SecretStr
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from giftcard.infrastructure.models import ShopSessionModel
from giftcard.infrastructure.observability import (
    CredentialStoreProbe,
    DefaultCredentialStoreProbe,
)
from giftcard.ports.credential_models import AdminCredentials
from giftcard.ports.repositories import ICredentialStore
from infrastructure.database.exceptions import DatabaseConnectionError


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SqlCredentialStore(ICredentialStore):
    """Read-only lookup of stored shop credentials."""

    def __init__(
        self,
        session: AsyncSession,
        probe: CredentialStoreProbe | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize store with a database session.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
            clock: Returns the current UTC time, used for expiry checks
        """
        self._session = session
        self._probe = probe or DefaultCredentialStoreProbe()
        self._clock = clock

    async def get_offline_credentials(self, shop: str) -> AdminCredentials | None:
        """Return the offline credentials for a shop.

        Args:
            shop: The shop domain

        Returns:
            AdminCredentials, or None if the shop has no offline session or
            the stored token has expired

        Raises:
            DatabaseConnectionError: If the credential store cannot be queried
        """
        stmt = (
            select(ShopSessionModel)
            .where(ShopSessionModel.shop == shop)
            .where(ShopSessionModel.is_online.is_(False))
            .limit(1)
        )
        try:
            result = await self._session.execute(stmt)
        except (SQLAlchemyError, OSError) as e:
            self._probe.lookup_failed(shop=shop, error=e)
            raise DatabaseConnectionError(
                f"Credential store unavailable: {type(e).__name__}"
            ) from e
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.credentials_missing(shop=shop)
            return None

        if model.expires is not None and _as_utc(model.expires) <= self._clock():
            self._probe.credentials_expired(shop=shop)
            return None

        self._probe.credentials_found(shop=shop)
        return AdminCredentials(
            shop=model.shop,
            access_token=SecretStr(model.access_token),
            scope=model.scope,
        )


def _as_utc(value: datetime) -> datetime:
    # Rows written without a zone are stored in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
