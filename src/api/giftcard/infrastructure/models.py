"""SQLAlchemy ORM model for the externally owned ``Session`` table.

The app's install flow writes one row per shop session. This service only
reads the offline row to obtain the Admin API access token.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base


class ShopSessionModel(Base):
    """ORM model for the ``Session`` table.

    Column names follow the install flow's schema (camelCase), mapped to
    snake_case attributes.
    """

    __tablename__ = "Session"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    shop: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    is_online: Mapped[bool] = mapped_column(
        "isOnline", Boolean, nullable=False, default=False
    )
    access_token: Mapped[str] = mapped_column("accessToken", Text, nullable=False)
    scope: Mapped[str | None] = mapped_column(Text, nullable=True)
    expires: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<ShopSessionModel(id={self.id}, shop={self.shop}, is_online={self.is_online})>"
