"""Catalog service client abstraction.

This module provides:
- CatalogClient: Protocol for the edit, upload and draft operations publishing
  needs (injectable for tests)
- MockCatalogClient: Recording implementation for testing

The production implementation lives in ``pstore.publish.google_play``.
"""

from __future__ import annotations

import hashlib
from typing import BinaryIO, Protocol, runtime_checkable

from pstore.core.result import Err, Ok, Result
from pstore.publish.errors import CatalogOperation, RemoteCallFailed
from pstore.publish.model import UploadResult

__all__ = ["CatalogClient", "MockCatalogClient"]


@runtime_checkable
class CatalogClient(Protocol):
    """Operations against the remote app catalog.

    Every call may block on the network and may fail; failures come back as
    ``Err(RemoteCallFailed)``. Transport-level retries are the implementation's
    business, callers never retry.
    """

    def create_edit(self, package_name: str) -> Result[str, RemoteCallFailed]:
        """Open an edit and return its id."""
        ...

    def validate_edit(self, package_name: str, edit_id: str) -> Result[None, RemoteCallFailed]:
        ...

    def commit_edit(self, package_name: str, edit_id: str) -> Result[None, RemoteCallFailed]:
        ...

    def delete_edit(self, package_name: str, edit_id: str) -> Result[None, RemoteCallFailed]:
        ...

    def upload_bundle(
        self, stream: BinaryIO, package_name: str, edit_id: str
    ) -> Result[UploadResult, RemoteCallFailed]:
        """Upload an .aab and return its version code and remote SHA-256."""
        ...

    def upload_apk(
        self, stream: BinaryIO, package_name: str, edit_id: str
    ) -> Result[UploadResult, RemoteCallFailed]:
        """Upload an .apk and return its version code and remote SHA-256."""
        ...

    def upload_proguard_mapping(
        self, stream: BinaryIO, package_name: str, edit_id: str, version_code: int
    ) -> Result[None, RemoteCallFailed]:
        """Attach a ProGuard mapping file to an uploaded version."""
        ...

    def create_draft(
        self,
        package_name: str,
        edit_id: str,
        track: str,
        version_codes: tuple[int, ...],
    ) -> Result[None, RemoteCallFailed]:
        """Assign version codes to a draft release on a track."""
        ...


class MockCatalogClient:
    """Mock catalog for testing.

    Records every call and the bytes each upload received. By default the
    reported remote hash is the SHA-256 of the received bytes, so uploads
    verify; set ``remote_sha256`` to force a mismatch.

    Usage:
        client = MockCatalogClient(version_code=42)
        client.fail("commit_edit", "edit conflict")
        result = client.commit_edit("com.sample.app", "edit-1")
        assert isinstance(result, Err)
    """

    def __init__(
        self,
        *,
        edit_id: str = "edit-1",
        version_code: int = 1,
        remote_sha256: str | None = None,
    ) -> None:
        self.edit_id = edit_id
        self.version_code = version_code
        self.remote_sha256 = remote_sha256
        self.calls: list[tuple[str, ...]] = []
        self.uploads: list[bytes] = []
        self.mapping_version_codes: list[int] = []
        self.drafts: list[tuple[str, tuple[int, ...]]] = []
        self._failures: dict[str, RemoteCallFailed] = {}

    def fail(self, operation: CatalogOperation, message: str = "mock failure", status: int = 500) -> None:
        """Make every later call to ``operation`` fail."""
        self._failures[operation] = RemoteCallFailed(operation=operation, message=message, status=status)

    def count(self, operation: str) -> int:
        return sum(1 for call in self.calls if call[0] == operation)

    @property
    def operations(self) -> list[str]:
        return [call[0] for call in self.calls]

    def _record(self, operation: str, *args: str) -> RemoteCallFailed | None:
        self.calls.append((operation, *args))
        return self._failures.get(operation)

    def create_edit(self, package_name: str) -> Result[str, RemoteCallFailed]:
        failure = self._record("create_edit", package_name)
        if failure is not None:
            return Err(failure)
        return Ok(self.edit_id)

    def validate_edit(self, package_name: str, edit_id: str) -> Result[None, RemoteCallFailed]:
        failure = self._record("validate_edit", package_name, edit_id)
        return Err(failure) if failure is not None else Ok(None)

    def commit_edit(self, package_name: str, edit_id: str) -> Result[None, RemoteCallFailed]:
        failure = self._record("commit_edit", package_name, edit_id)
        return Err(failure) if failure is not None else Ok(None)

    def delete_edit(self, package_name: str, edit_id: str) -> Result[None, RemoteCallFailed]:
        failure = self._record("delete_edit", package_name, edit_id)
        return Err(failure) if failure is not None else Ok(None)

    def _upload(
        self, operation: CatalogOperation, stream: BinaryIO, package_name: str, edit_id: str
    ) -> Result[UploadResult, RemoteCallFailed]:
        failure = self._record(operation, package_name, edit_id)
        try:
            data = stream.read()
        except OSError as e:
            # same mapping as the real client
            return Err(RemoteCallFailed(operation=operation, message=str(e)))
        self.uploads.append(data)
        if failure is not None:
            return Err(failure)
        sha256 = self.remote_sha256
        if sha256 is None:
            sha256 = hashlib.sha256(data).hexdigest()
        return Ok(UploadResult(version_code=self.version_code, sha256=sha256))

    def upload_bundle(
        self, stream: BinaryIO, package_name: str, edit_id: str
    ) -> Result[UploadResult, RemoteCallFailed]:
        return self._upload("upload_bundle", stream, package_name, edit_id)

    def upload_apk(
        self, stream: BinaryIO, package_name: str, edit_id: str
    ) -> Result[UploadResult, RemoteCallFailed]:
        return self._upload("upload_apk", stream, package_name, edit_id)

    def upload_proguard_mapping(
        self, stream: BinaryIO, package_name: str, edit_id: str, version_code: int
    ) -> Result[None, RemoteCallFailed]:
        failure = self._record("upload_proguard_mapping", package_name, edit_id, str(version_code))
        try:
            self.uploads.append(stream.read())
        except OSError as e:
            return Err(RemoteCallFailed(operation="upload_proguard_mapping", message=str(e)))
        self.mapping_version_codes.append(version_code)
        return Err(failure) if failure is not None else Ok(None)

    def create_draft(
        self,
        package_name: str,
        edit_id: str,
        track: str,
        version_codes: tuple[int, ...],
    ) -> Result[None, RemoteCallFailed]:
        failure = self._record("create_draft", package_name, edit_id, track)
        self.drafts.append((track, version_codes))
        return Err(failure) if failure is not None else Ok(None)
