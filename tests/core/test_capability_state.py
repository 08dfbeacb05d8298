"""
Unit tests for capability state and the exception hierarchy.
"""

import pytest

from cms_cloud.core.capability import Capability, CapabilityState, CapabilityStatus
from cms_cloud.core.exceptions import (
    ConfigInvalidError,
    IntegrationException,
    ObjectNotFoundError,
    PartialProvisioningError,
    RemoteCallFailedError,
)


class TestCapabilityState:
    """Test suite for CapabilityState."""

    def test_disabled_has_no_handle(self):
        state = CapabilityState.disabled(Capability.MAIL)

        assert state.status is CapabilityStatus.DISABLED
        assert state.handle is None
        assert not state.is_active

    def test_failed_keeps_error(self):
        error = ConfigInvalidError("storage", ["AWS_S3_BUCKET"])
        state = CapabilityState.failed(Capability.STORAGE, error)

        assert state.status is CapabilityStatus.FAILED_INIT
        assert state.error is error
        assert not state.is_active

    def test_active_carries_handle(self):
        handle = object()
        state = CapabilityState.active(Capability.IDENTITY, handle)

        assert state.is_active
        assert state.handle is handle

    def test_active_without_handle_rejected(self):
        with pytest.raises(ValueError):
            CapabilityState.active(Capability.STORAGE, None)

    def test_capability_from_string(self):
        assert Capability("identity") is Capability.IDENTITY


class TestExceptions:
    """Test suite for the exception hierarchy."""

    def test_config_invalid_message_lists_missing(self):
        error = ConfigInvalidError("mail", ["AWS_SES_FROM_ADDRESS"])

        assert error.message == "mail capability is enabled but missing: AWS_SES_FROM_ADDRESS"
        assert error.details["missing"] == ["AWS_SES_FROM_ADDRESS"]
        assert isinstance(error, IntegrationException)

    def test_str_includes_details(self):
        error = RemoteCallFailedError("boom", operation="put", error_code="AccessDenied")

        assert "boom" in str(error)
        assert "AccessDenied" in str(error)

    def test_object_not_found_is_remote_failure(self):
        error = ObjectNotFoundError("posts/r1/a.png")

        assert isinstance(error, RemoteCallFailedError)
        assert error.key == "posts/r1/a.png"
        assert error.error_code == "NoSuchKey"

    def test_partial_provisioning_marks_remote_user(self):
        error = PartialProvisioningError("u@example.com", "password not set")

        assert error.details["remote_user_created"] is True
        assert error.operation == "create_user"
