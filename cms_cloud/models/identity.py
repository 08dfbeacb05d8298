"""
Identity provider result models.

Dependencies: pydantic
System role: Values returned by the identity bridge
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class AuthResult(BaseModel):
    """Tokens issued by a successful password-grant exchange."""

    model_config = ConfigDict(frozen=True)

    access_token: str = Field(default="", repr=False)
    refresh_token: str = Field(default="", repr=False)
    id_token: str = Field(default="", repr=False)
    expires_in: int | None = None
    token_type: str | None = None

    def token_fields(self) -> dict[str, str]:
        """Tokens keyed by the local user record field that stores them."""
        fields = {
            "cognitoAccessToken": self.access_token,
            "cognitoRefreshToken": self.refresh_token,
            "cognitoIdToken": self.id_token,
        }
        return {name: value for name, value in fields.items() if value}


class UserInfo(BaseModel):
    """Remote profile resolved from an access token."""

    username: str
    attributes: dict[str, str] = Field(default_factory=dict)

    @property
    def email(self) -> str | None:
        return self.attributes.get("email")


class RemoteUser(BaseModel):
    """User entry from the provider's admin listing."""

    username: str
    attributes: dict[str, str] = Field(default_factory=dict)
    enabled: bool = True
    status: str | None = None
    created_at: datetime | None = None

    @property
    def email(self) -> str | None:
        return self.attributes.get("email")
