"""
Cognito identity bridge adapter.

Password-grant authentication, token introspection and admin user
provisioning against a Cognito user pool. Holds no session state; every call
is independent.

Dependencies: boto3, botocore
System role: Identity capability backing the host's auth-request hook
"""

import base64
import hashlib
import hmac
import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from cms_cloud.boundary.aws.clients import (
    READ_TIMEOUT,
    WRITE_TIMEOUT,
    build_client,
    build_session,
    close_clients,
    error_code,
    remote_call,
)
from cms_cloud.configs.capabilities import IdentityConfig
from cms_cloud.core.exceptions import (
    ConfigInvalidError,
    ConstructionFailedError,
    PartialProvisioningError,
    RemoteCallFailedError,
)
from cms_cloud.models.identity import AuthResult, RemoteUser, UserInfo

logger = logging.getLogger(__name__)

# Codes meaning "this token is not valid", as opposed to a failed call
_REJECTED_TOKEN_CODES = {"NotAuthorizedException", "UserNotFoundException"}

# Cognito rejects ListUsers limits above 60
MAX_LIST_LIMIT = 60


def _attributes_to_dict(attributes: list[dict[str, str]] | None) -> dict[str, str]:
    return {item["Name"]: item.get("Value", "") for item in attributes or []}


class CognitoBridge:
    """Authenticate and provision users against a Cognito user pool."""

    def __init__(self, config: IdentityConfig, session: Any = None) -> None:
        """
        Initialize Cognito Identity Provider clients.

        Args:
            config: Identity configuration snapshot
            session: Optional boto3 session (built from config when omitted)

        Raises:
            ConstructionFailedError: Identity disabled or client setup failed
            ConfigInvalidError: User pool ID or client ID missing
        """
        if not config.enabled:
            raise ConstructionFailedError("identity", "Cognito is not enabled")
        missing = config.missing_fields()
        if missing:
            raise ConfigInvalidError("identity", missing)

        self._user_pool_id = config.user_pool_id
        self._client_id = config.client_id
        self._client_secret = config.client_secret
        self._region = config.region

        if session is None:
            session = build_session(
                "identity", config.region, config.access_key, config.secret_key
            )
        self._read_client = build_client(
            session, "cognito-idp", "identity", config.region, READ_TIMEOUT
        )
        self._write_client = build_client(
            session, "cognito-idp", "identity", config.region, WRITE_TIMEOUT
        )

    @property
    def user_pool_id(self) -> str:
        return self._user_pool_id

    @property
    def region(self) -> str:
        return self._region

    def secret_hash(self, username: str) -> str:
        """SECRET_HASH parameter for app clients that have a client secret."""
        digest = hmac.new(
            self._client_secret.encode("utf-8"),
            (username + self._client_id).encode("utf-8"),
            hashlib.sha256,
        ).digest()
        return base64.b64encode(digest).decode("ascii")

    def authenticate(self, username: str, password: str) -> AuthResult:
        """
        Exchange username/password for tokens (USER_PASSWORD_AUTH).

        Returns:
            AuthResult: Access, refresh and ID tokens

        Raises:
            RemoteCallFailedError: Credentials rejected, challenge required,
                or the call failed
        """
        auth_params = {"USERNAME": username, "PASSWORD": password}
        if self._client_secret:
            auth_params["SECRET_HASH"] = self.secret_hash(username)

        with remote_call("Cognito", "authenticate", username=username):
            response = self._write_client.initiate_auth(
                AuthFlow="USER_PASSWORD_AUTH",
                ClientId=self._client_id,
                AuthParameters=auth_params,
            )

        result = response.get("AuthenticationResult")
        if not result:
            challenge = response.get("ChallengeName", "unknown")
            raise RemoteCallFailedError(
                f"Cognito requires challenge {challenge} for {username}",
                operation="authenticate",
                error_code=challenge,
                details={"username": username},
            )

        return AuthResult(
            access_token=result.get("AccessToken", ""),
            refresh_token=result.get("RefreshToken", ""),
            id_token=result.get("IdToken", ""),
            expires_in=result.get("ExpiresIn"),
            token_type=result.get("TokenType"),
        )

    def introspect(self, access_token: str) -> UserInfo:
        """
        Resolve an access token to the remote user profile.

        Raises:
            RemoteCallFailedError: Token rejected or call failed
        """
        with remote_call("Cognito", "introspect"):
            response = self._read_client.get_user(AccessToken=access_token)
        return UserInfo(
            username=response["Username"],
            attributes=_attributes_to_dict(response.get("UserAttributes")),
        )

    def verify_token(self, access_token: str) -> bool:
        """
        Check whether an access token is currently valid.

        Returns:
            bool: True if valid, False if the provider rejects it

        Raises:
            RemoteCallFailedError: The check itself could not be performed
        """
        try:
            self.introspect(access_token)
            return True
        except RemoteCallFailedError as e:
            if e.error_code in _REJECTED_TOKEN_CODES:
                return False
            raise

    def list_users(self, limit: int = MAX_LIST_LIMIT) -> list[RemoteUser]:
        """
        List users of the pool (first page).

        Args:
            limit: Maximum users to return (1-60)

        Raises:
            RemoteCallFailedError: Call failed
        """
        limit = max(1, min(limit, MAX_LIST_LIMIT))
        with remote_call("Cognito", "list_users", limit=limit):
            response = self._write_client.list_users(
                UserPoolId=self._user_pool_id, Limit=limit
            )
        return [
            RemoteUser(
                username=user["Username"],
                attributes=_attributes_to_dict(user.get("Attributes")),
                enabled=user.get("Enabled", True),
                status=user.get("UserStatus"),
                created_at=user.get("UserCreateDate"),
            )
            for user in response.get("Users", [])
        ]

    def create_user(
        self,
        email: str,
        password: str,
        attributes: dict[str, str] | None = None,
    ) -> None:
        """
        Provision a confirmed user with a permanent password.

        Two steps: AdminCreateUser with a temporary password and the welcome
        message suppressed, then AdminSetUserPassword(Permanent=True). A
        failure in step two leaves the remote user in place.

        Args:
            email: Email, also used as username
            password: Password to set
            attributes: Extra user attributes

        Raises:
            RemoteCallFailedError: User creation failed
            PartialProvisioningError: User created but password not set
        """
        user_attributes = [
            {"Name": "email", "Value": email},
            {"Name": "email_verified", "Value": "true"},
        ]
        for name, value in (attributes or {}).items():
            user_attributes.append({"Name": name, "Value": value})

        with remote_call("Cognito", "create_user", username=email):
            self._write_client.admin_create_user(
                UserPoolId=self._user_pool_id,
                Username=email,
                UserAttributes=user_attributes,
                TemporaryPassword=password,
                MessageAction="SUPPRESS",
            )

        try:
            self._write_client.admin_set_user_password(
                UserPoolId=self._user_pool_id,
                Username=email,
                Password=password,
                Permanent=True,
            )
        except ClientError as e:
            raise PartialProvisioningError(
                email, f"Failed to set user password: {e}", error_code=error_code(e)
            ) from e
        except BotoCoreError as e:
            raise PartialProvisioningError(
                email, f"Failed to set user password: {e}", error_code=type(e).__name__
            ) from e

        logger.info(f"{__name__}:create_user - Provisioned user={email}")

    def close(self) -> None:
        close_clients(self._read_client, self._write_client)
