from pydantic import BaseModel, ConfigDict, SecretStr


class AdminCredentials(BaseModel):
    """Long-lived Admin API credentials stored for a shop."""

    model_config = ConfigDict(frozen=True)

    shop: str
    access_token: SecretStr
    scope: str | None = None
