"""
Host application collaborators.

The CMS record model, its local filesystem and its user collection live in
the host. Only the surface the integration layer touches is described here.

Dependencies: typing
System role: Interface boundary between the integration layer and the host
"""

from typing import Any, BinaryIO, Protocol, runtime_checkable


@runtime_checkable
class HostRecord(Protocol):
    """A persisted record that may own files."""

    @property
    def collection_name(self) -> str: ...

    @property
    def id(self) -> str: ...

    def file_names(self) -> list[str]:
        """Names of all files attached through the record's file fields."""
        ...


class LocalFileSource(Protocol):
    """Host's default (local) file storage."""

    def open(self, record: HostRecord, file_name: str) -> BinaryIO:
        """Open a record's stored file for reading. Caller closes it."""
        ...


class UserRecord(Protocol):
    """Local user record of the host's auth collection."""

    @property
    def id(self) -> str: ...

    @property
    def email(self) -> str: ...

    def set(self, field: str, value: Any) -> None: ...


class UserStore(Protocol):
    """Lookup and persistence for local user records."""

    def find_by_email(self, collection: str, email: str) -> UserRecord | None: ...

    def create(self, collection: str, email: str, *, verified: bool) -> UserRecord: ...

    def save(self, record: UserRecord) -> None: ...
