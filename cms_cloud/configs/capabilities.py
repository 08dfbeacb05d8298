"""
Cloud capability configuration.

Flat AWS_* values for S3 storage, SES mail and Cognito identity, plus the
frozen per-capability snapshots derived from them.

``CapabilityValues`` validates an explicit mapping and never looks at the
process. ``CapabilitySettings`` adds the environment and .env sources and is
the only class that reads them.

Dependencies: pydantic, pydantic_settings
System role: Raw settings source and typed capability configs
"""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_REGION = "us-east-1"

_TRUE_VALUES = {"1", "t", "true", "y", "yes", "on"}

_FLAG_FIELDS = {"aws_s3_enabled", "aws_ses_enabled", "aws_cognito_enabled"}


class CapabilityValues(BaseModel):
    """Flat AWS capability values, validated from a plain mapping."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    # Shared credential pair used when a capability has none of its own
    aws_access_key_id: str = Field(default="", description="Shared AWS access key")
    aws_secret_access_key: str = Field(default="", repr=False, description="Shared AWS secret key")

    aws_s3_enabled: bool = Field(default=False, description="Enable S3 file storage")
    aws_s3_bucket: str = Field(default="", description="S3 bucket for record files")
    aws_s3_region: str = Field(default=DEFAULT_REGION, description="AWS region for S3 bucket")
    aws_s3_access_key_id: str = Field(default="", description="S3-specific access key")
    aws_s3_secret_access_key: str = Field(default="", repr=False, description="S3-specific secret key")
    aws_s3_endpoint: str = Field(default="", description="Custom S3-compatible endpoint")
    aws_s3_public_url: str = Field(default="", description="Public base URL override")

    aws_ses_enabled: bool = Field(default=False, description="Enable SES mail transport")
    aws_ses_region: str = Field(default=DEFAULT_REGION, description="AWS region for SES")
    aws_ses_access_key_id: str = Field(default="", description="SES-specific access key")
    aws_ses_secret_access_key: str = Field(default="", repr=False, description="SES-specific secret key")
    aws_ses_from_address: str = Field(default="", description="Default sender address")

    aws_cognito_enabled: bool = Field(default=False, description="Enable Cognito auth bridge")
    aws_cognito_user_pool_id: str = Field(default="", description="Cognito user pool ID")
    aws_cognito_client_id: str = Field(default="", description="Cognito app client ID")
    aws_cognito_client_secret: str = Field(default="", repr=False, description="Cognito app client secret")
    aws_cognito_region: str = Field(default=DEFAULT_REGION, description="AWS region for Cognito")
    aws_cognito_access_key_id: str = Field(default="", description="Cognito-specific access key")
    aws_cognito_secret_access_key: str = Field(default="", repr=False, description="Cognito-specific secret key")
    aws_cognito_auth_collection: str = Field(
        default="users",
        description="Host collection whose auth requests are bridged to Cognito",
    )

    @field_validator("*", mode="before")
    @classmethod
    def _blank_is_unset(cls, value: Any, info: ValidationInfo) -> Any:
        """Treat empty strings as unset and parse flags leniently."""
        default = cls.model_fields[info.field_name].default
        if value is None or (isinstance(value, str) and not value.strip()):
            return default
        if info.field_name in _FLAG_FIELDS and not isinstance(value, bool):
            # Unparseable flags fall back to disabled instead of failing startup
            return str(value).strip().lower() in _TRUE_VALUES
        return value


class CapabilitySettings(BaseSettings, CapabilityValues):
    """Capability values read from the process environment and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )


def _first_set(*values: str) -> str:
    for value in values:
        if value:
            return value
    return ""


class _CapabilityConfig(BaseModel, ABC):
    """Common fields of a per-capability snapshot."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    region: str = DEFAULT_REGION
    access_key: str = ""
    secret_key: str = Field(default="", repr=False)

    @property
    def has_static_credentials(self) -> bool:
        """True when both halves of the credential pair are set."""
        return bool(self.access_key and self.secret_key)

    @abstractmethod
    def missing_fields(self) -> list[str]:
        """Names of mandatory settings that are empty."""


class StorageConfig(_CapabilityConfig):
    """S3 storage snapshot."""

    bucket: str = ""
    endpoint: str = ""
    public_url: str = ""

    def missing_fields(self) -> list[str]:
        missing = []
        if not self.bucket:
            missing.append("AWS_S3_BUCKET")
        if not self.region:
            missing.append("AWS_S3_REGION")
        return missing

    @property
    def resolved_public_url(self) -> str:
        """Configured public URL, or the virtual-hosted bucket URL."""
        if self.public_url:
            return self.public_url
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com"

    @classmethod
    def from_settings(cls, settings: CapabilityValues) -> "StorageConfig":
        return cls(
            enabled=settings.aws_s3_enabled,
            bucket=settings.aws_s3_bucket,
            region=settings.aws_s3_region,
            access_key=_first_set(settings.aws_s3_access_key_id, settings.aws_access_key_id),
            secret_key=_first_set(settings.aws_s3_secret_access_key, settings.aws_secret_access_key),
            endpoint=settings.aws_s3_endpoint,
            public_url=settings.aws_s3_public_url,
        )


class MailConfig(_CapabilityConfig):
    """SES mail snapshot."""

    from_address: str = ""

    def missing_fields(self) -> list[str]:
        missing = []
        if not self.region:
            missing.append("AWS_SES_REGION")
        if not self.from_address:
            missing.append("AWS_SES_FROM_ADDRESS")
        return missing

    @classmethod
    def from_settings(cls, settings: CapabilityValues) -> "MailConfig":
        return cls(
            enabled=settings.aws_ses_enabled,
            region=settings.aws_ses_region,
            access_key=_first_set(settings.aws_ses_access_key_id, settings.aws_access_key_id),
            secret_key=_first_set(settings.aws_ses_secret_access_key, settings.aws_secret_access_key),
            from_address=settings.aws_ses_from_address,
        )


class IdentityConfig(_CapabilityConfig):
    """Cognito identity snapshot."""

    user_pool_id: str = ""
    client_id: str = ""
    client_secret: str = Field(default="", repr=False)
    auth_collection: str = "users"

    def missing_fields(self) -> list[str]:
        missing = []
        if not self.user_pool_id:
            missing.append("AWS_COGNITO_USER_POOL_ID")
        if not self.client_id:
            missing.append("AWS_COGNITO_CLIENT_ID")
        if not self.region:
            missing.append("AWS_COGNITO_REGION")
        return missing

    @classmethod
    def from_settings(cls, settings: CapabilityValues) -> "IdentityConfig":
        return cls(
            enabled=settings.aws_cognito_enabled,
            region=settings.aws_cognito_region,
            access_key=_first_set(settings.aws_cognito_access_key_id, settings.aws_access_key_id),
            secret_key=_first_set(
                settings.aws_cognito_secret_access_key, settings.aws_secret_access_key
            ),
            user_pool_id=settings.aws_cognito_user_pool_id,
            client_id=settings.aws_cognito_client_id,
            client_secret=settings.aws_cognito_client_secret,
            auth_collection=settings.aws_cognito_auth_collection,
        )
