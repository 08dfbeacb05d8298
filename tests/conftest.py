"""
Shared test fixtures and configuration for entire test suite.

Provides: fake boto3 session/clients, fake host records, local files and user store
Dependencies: pytest, botocore
System role: Test infrastructure and fixture management
"""

import io
from dataclasses import dataclass, field
from typing import Any
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from cms_cloud.configs.capabilities import IdentityConfig, MailConfig, StorageConfig


def make_client_error(code: str, operation: str, status: int = 400) -> ClientError:
    """Build a botocore ClientError the way the SDK raises it."""
    return ClientError(
        {
            "Error": {"Code": code, "Message": f"{code} raised by fake"},
            "ResponseMetadata": {"HTTPStatusCode": status},
        },
        operation,
    )


class FakeS3Client:
    """In-memory S3 client implementing the calls the storage adapter makes."""

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], tuple[bytes, str]] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.closed = False

    def put_object(self, Bucket, Key, Body, ContentType):
        self.calls.append(("put_object", {"Bucket": Bucket, "Key": Key, "ContentType": ContentType}))
        data = Body if isinstance(Body, bytes) else Body.read()
        self.objects[(Bucket, Key)] = (data, ContentType)
        return {"ETag": '"fake"'}

    def get_object(self, Bucket, Key):
        self.calls.append(("get_object", {"Bucket": Bucket, "Key": Key}))
        if (Bucket, Key) not in self.objects:
            raise make_client_error("NoSuchKey", "GetObject", 404)
        data, content_type = self.objects[(Bucket, Key)]
        return {"Body": io.BytesIO(data), "ContentType": content_type}

    def head_object(self, Bucket, Key):
        self.calls.append(("head_object", {"Bucket": Bucket, "Key": Key}))
        if (Bucket, Key) not in self.objects:
            raise make_client_error("404", "HeadObject", 404)
        data, content_type = self.objects[(Bucket, Key)]
        return {"ContentLength": len(data), "ContentType": content_type}

    def delete_object(self, Bucket, Key):
        # S3 answers 204 whether or not the key existed
        self.calls.append(("delete_object", {"Bucket": Bucket, "Key": Key}))
        self.objects.pop((Bucket, Key), None)
        return {}

    def copy_object(self, Bucket, CopySource, Key):
        self.calls.append(("copy_object", {"Bucket": Bucket, "CopySource": CopySource, "Key": Key}))
        source = (CopySource["Bucket"], CopySource["Key"])
        if source not in self.objects:
            raise make_client_error("NoSuchKey", "CopyObject", 404)
        self.objects[(Bucket, Key)] = self.objects[source]
        return {}

    def close(self):
        self.closed = True


class FakeSession:
    """Stands in for boto3.session.Session; hands out one client per service."""

    def __init__(self, **clients: Any) -> None:
        self.clients = clients
        self.client_calls: list[tuple[str, dict[str, Any]]] = []

    def client(self, service: str, **kwargs: Any) -> Any:
        self.client_calls.append((service, kwargs))
        return self.clients[service.replace("-", "_")]


@dataclass
class FakeRecord:
    """Host record with file fields flattened to a list of names."""

    collection_name: str
    id: str
    files: list[str] = field(default_factory=list)

    def file_names(self) -> list[str]:
        return list(self.files)


class FakeLocalFiles:
    """Host local storage keyed by (collection, record id, file name)."""

    def __init__(self) -> None:
        self.files: dict[tuple[str, str, str], bytes] = {}

    def add(self, record: FakeRecord, file_name: str, data: bytes) -> None:
        self.files[(record.collection_name, record.id, file_name)] = data

    def open(self, record, file_name):
        key = (record.collection_name, record.id, file_name)
        if key not in self.files:
            raise FileNotFoundError(f"{record.collection_name}/{record.id}/{file_name}")
        return io.BytesIO(self.files[key])


class FakeUser:
    """Local user record storing arbitrary fields."""

    def __init__(self, user_id: str, email: str, verified: bool) -> None:
        self.id = user_id
        self.email = email
        self.fields: dict[str, Any] = {"email": email, "verified": verified}

    def set(self, field_name: str, value: Any) -> None:
        self.fields[field_name] = value


class FakeUserStore:
    """In-memory user collection with call counters."""

    def __init__(self) -> None:
        self.users: dict[tuple[str, str], FakeUser] = {}
        self.created: list[FakeUser] = []
        self.saved: list[FakeUser] = []

    def find_by_email(self, collection: str, email: str):
        return self.users.get((collection, email.lower()))

    def create(self, collection: str, email: str, *, verified: bool):
        user = FakeUser(f"user-{len(self.created) + 1}", email, verified)
        self.users[(collection, email.lower())] = user
        self.created.append(user)
        return user

    def save(self, record) -> None:
        self.saved.append(record)


@pytest.fixture
def s3_client():
    """In-memory S3 client."""
    return FakeS3Client()


@pytest.fixture
def ses_client():
    """Mock SES client returning a message ID."""
    client = MagicMock()
    client.send_email.return_value = {"MessageId": "msg-0001"}
    return client


@pytest.fixture
def cognito_client():
    """Mock Cognito Identity Provider client with a successful login."""
    client = MagicMock()
    client.initiate_auth.return_value = {
        "AuthenticationResult": {
            "AccessToken": "access-123",
            "RefreshToken": "refresh-123",
            "IdToken": "id-123",
            "ExpiresIn": 3600,
            "TokenType": "Bearer",
        }
    }
    client.get_user.return_value = {
        "Username": "u@example.com",
        "UserAttributes": [
            {"Name": "email", "Value": "u@example.com"},
            {"Name": "email_verified", "Value": "true"},
        ],
    }
    return client


@pytest.fixture
def fake_session(s3_client, ses_client, cognito_client):
    """Session handing out the fake clients."""
    return FakeSession(s3=s3_client, ses=ses_client, cognito_idp=cognito_client)


@pytest.fixture
def storage_config():
    return StorageConfig(enabled=True, bucket="cms-files", region="eu-west-1")


@pytest.fixture
def mail_config():
    return MailConfig(enabled=True, region="eu-west-1", from_address="noreply@example.com")


@pytest.fixture
def identity_config():
    return IdentityConfig(
        enabled=True,
        region="eu-west-1",
        user_pool_id="eu-west-1_pool",
        client_id="client-abc",
    )


@pytest.fixture
def local_files():
    return FakeLocalFiles()


@pytest.fixture
def user_store():
    return FakeUserStore()


@pytest.fixture
def make_record():
    """Factory for host records."""
    return FakeRecord


@pytest.fixture
def client_error():
    """Factory for botocore ClientErrors."""
    return make_client_error
