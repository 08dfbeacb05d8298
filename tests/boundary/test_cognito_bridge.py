"""
Unit tests for CognitoBridge.

Tests password-grant authentication, token checks, user listing and the
two-step user provisioning flow.
Dependencies: pytest, unittest.mock, botocore
System role: Identity adapter validation
"""

import base64
from datetime import datetime
import hashlib
import hmac

import pytest

from cms_cloud.boundary.aws.cognito_bridge import CognitoBridge
from cms_cloud.configs.capabilities import IdentityConfig
from cms_cloud.core.exceptions import (
    ConfigInvalidError,
    PartialProvisioningError,
    RemoteCallFailedError,
)


@pytest.fixture
def bridge(identity_config, fake_session):
    return CognitoBridge(identity_config, session=fake_session)


class TestAuthenticate:
    """USER_PASSWORD_AUTH exchange."""

    def test_success_returns_tokens(self, bridge, cognito_client):
        result = bridge.authenticate("u@example.com", "pw")

        assert result.access_token == "access-123"
        assert result.refresh_token == "refresh-123"
        assert result.id_token == "id-123"
        assert result.expires_in == 3600
        kwargs = cognito_client.initiate_auth.call_args.kwargs
        assert kwargs["AuthFlow"] == "USER_PASSWORD_AUTH"
        assert kwargs["ClientId"] == "client-abc"
        assert kwargs["AuthParameters"] == {"USERNAME": "u@example.com", "PASSWORD": "pw"}

    def test_tokens_hidden_from_repr(self, bridge):
        assert "access-123" not in repr(bridge.authenticate("u@example.com", "pw"))

    def test_secret_hash_sent_with_client_secret(self, fake_session, cognito_client):
        """Test app clients with a secret get an HMAC SECRET_HASH, not the raw secret."""
        config = IdentityConfig(
            enabled=True,
            user_pool_id="pool",
            client_id="client-abc",
            client_secret="s3cr3t",
        )
        bridge = CognitoBridge(config, session=fake_session)

        bridge.authenticate("u@example.com", "pw")

        expected = base64.b64encode(
            hmac.new(b"s3cr3t", b"u@example.comclient-abc", hashlib.sha256).digest()
        ).decode()
        params = cognito_client.initiate_auth.call_args.kwargs["AuthParameters"]
        assert params["SECRET_HASH"] == expected

    def test_rejected_credentials_raise(self, bridge, cognito_client, client_error):
        cognito_client.initiate_auth.side_effect = client_error(
            "NotAuthorizedException", "InitiateAuth"
        )

        with pytest.raises(RemoteCallFailedError) as exc_info:
            bridge.authenticate("u@example.com", "wrong")

        assert exc_info.value.error_code == "NotAuthorizedException"

    def test_challenge_is_failure(self, bridge, cognito_client):
        """Test a challenge response is not treated as a login."""
        cognito_client.initiate_auth.return_value = {
            "ChallengeName": "NEW_PASSWORD_REQUIRED",
            "Session": "sess",
        }

        with pytest.raises(RemoteCallFailedError) as exc_info:
            bridge.authenticate("u@example.com", "pw")

        assert exc_info.value.error_code == "NEW_PASSWORD_REQUIRED"


class TestTokens:
    """Introspection and verification."""

    def test_introspect_returns_profile(self, bridge, cognito_client):
        info = bridge.introspect("access-123")

        assert info.username == "u@example.com"
        assert info.email == "u@example.com"
        assert info.attributes["email_verified"] == "true"
        cognito_client.get_user.assert_called_once_with(AccessToken="access-123")

    def test_verify_valid_token(self, bridge):
        assert bridge.verify_token("access-123") is True

    def test_verify_rejected_token(self, bridge, cognito_client, client_error):
        cognito_client.get_user.side_effect = client_error("NotAuthorizedException", "GetUser")

        assert bridge.verify_token("expired") is False

    def test_verify_propagates_other_failures(self, bridge, cognito_client, client_error):
        """Test an unreachable provider is not reported as an invalid token."""
        cognito_client.get_user.side_effect = client_error(
            "InternalErrorException", "GetUser", 500
        )

        with pytest.raises(RemoteCallFailedError):
            bridge.verify_token("access-123")


class TestAdmin:
    """Listing and provisioning."""

    def test_list_users(self, bridge, cognito_client):
        created = datetime(2024, 1, 2, 3, 4, 5)
        cognito_client.list_users.return_value = {
            "Users": [
                {
                    "Username": "u1",
                    "Attributes": [{"Name": "email", "Value": "u1@example.com"}],
                    "Enabled": True,
                    "UserStatus": "CONFIRMED",
                    "UserCreateDate": created,
                }
            ]
        }

        users = bridge.list_users()

        assert len(users) == 1
        assert users[0].email == "u1@example.com"
        assert users[0].status == "CONFIRMED"
        assert users[0].created_at == created

    @pytest.mark.parametrize("requested,sent", [(0, 1), (10, 10), (500, 60)])
    def test_list_users_limit_clamped(self, bridge, cognito_client, requested, sent):
        cognito_client.list_users.return_value = {"Users": []}

        bridge.list_users(limit=requested)

        assert cognito_client.list_users.call_args.kwargs["Limit"] == sent

    def test_create_user_two_steps(self, bridge, cognito_client):
        bridge.create_user("new@example.com", "pw", {"name": "New"})

        create_kwargs = cognito_client.admin_create_user.call_args.kwargs
        assert create_kwargs["Username"] == "new@example.com"
        assert create_kwargs["MessageAction"] == "SUPPRESS"
        assert {"Name": "email_verified", "Value": "true"} in create_kwargs["UserAttributes"]
        assert {"Name": "name", "Value": "New"} in create_kwargs["UserAttributes"]
        cognito_client.admin_set_user_password.assert_called_once_with(
            UserPoolId="eu-west-1_pool",
            Username="new@example.com",
            Password="pw",
            Permanent=True,
        )

    def test_create_failure_skips_password_step(self, bridge, cognito_client, client_error):
        cognito_client.admin_create_user.side_effect = client_error(
            "UsernameExistsException", "AdminCreateUser"
        )

        with pytest.raises(RemoteCallFailedError) as exc_info:
            bridge.create_user("new@example.com", "pw")

        assert not isinstance(exc_info.value, PartialProvisioningError)
        cognito_client.admin_set_user_password.assert_not_called()

    def test_password_failure_is_partial(self, bridge, cognito_client, client_error):
        """Test a failed second step reports the orphaned remote user."""
        cognito_client.admin_set_user_password.side_effect = client_error(
            "InvalidPasswordException", "AdminSetUserPassword"
        )

        with pytest.raises(PartialProvisioningError) as exc_info:
            bridge.create_user("new@example.com", "weak")

        assert exc_info.value.username == "new@example.com"
        assert exc_info.value.error_code == "InvalidPasswordException"
        cognito_client.admin_delete_user.assert_not_called()


class TestSetup:
    """Construction."""

    def test_missing_pool_rejected(self, fake_session):
        with pytest.raises(ConfigInvalidError):
            CognitoBridge(IdentityConfig(enabled=True, client_id="c"), session=fake_session)

    def test_read_and_write_clients(self, bridge, fake_session):
        assert [service for service, _ in fake_session.client_calls] == [
            "cognito-idp",
            "cognito-idp",
        ]
