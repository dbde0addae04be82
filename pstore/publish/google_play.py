"""Google Play Android Publisher (v3) implementation of CatalogClient.

Handles:
- service account credentials from a JSON key file
- resumable media uploads with client-side chunk retries
- mapping API errors to RemoteCallFailed
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, BinaryIO

from pstore.core.result import Err, Ok, Result
from pstore.core.structured import as_str_dict
from pstore.publish.config import (
    ANDROID_PUBLISHER_SCOPE,
    DEOBFUSCATION_FILE_PROGUARD,
    MEDIA_MIME_TYPE,
    STATUS_DRAFT,
    UPLOAD_CHUNK_SIZE,
    UPLOAD_NUM_RETRIES,
)
from pstore.publish.errors import CatalogOperation, RemoteCallFailed
from pstore.publish.model import UploadResult

if TYPE_CHECKING:
    from googleapiclient.http import MediaIoBaseUpload

__all__ = ["GooglePlayCatalogClient"]


class GooglePlayCatalogClient:
    """CatalogClient backed by google-api-python-client.

    Usage:
        result = GooglePlayCatalogClient.from_service_account_file("play.json")
        if isinstance(result, Ok):
            client = result.value
    """

    def __init__(
        self,
        edits: Any,
        *,
        chunk_size: int = UPLOAD_CHUNK_SIZE,
        num_retries: int = UPLOAD_NUM_RETRIES,
    ) -> None:
        """Initialize the client.

        Args:
            edits: The ``service.edits()`` resource of an androidpublisher v3 service
            chunk_size: Resumable upload chunk size in bytes
            num_retries: Retries per request on transient HTTP errors
        """
        self._edits = edits
        self._chunk_size = chunk_size
        self._num_retries = num_retries

    @classmethod
    def from_service_account_file(cls, path: str) -> Result[GooglePlayCatalogClient, RemoteCallFailed]:
        from google.auth.exceptions import GoogleAuthError
        from google.oauth2 import service_account
        from googleapiclient.discovery import build
        from googleapiclient.errors import Error as ApiClientError

        try:
            credentials = service_account.Credentials.from_service_account_file(
                path, scopes=[ANDROID_PUBLISHER_SCOPE]
            )
            service = build("androidpublisher", "v3", credentials=credentials, cache_discovery=False)
        except (OSError, ValueError, GoogleAuthError, ApiClientError) as e:
            return Err(
                RemoteCallFailed(
                    operation="connect",
                    message=f"cannot create Google Play service from '{path}': {e}",
                )
            )
        return Ok(cls(service.edits()))

    def _execute(self, operation: CatalogOperation, request: Any) -> Result[dict[str, Any], RemoteCallFailed]:
        from google.auth.exceptions import GoogleAuthError
        from googleapiclient.errors import Error as ApiClientError
        from googleapiclient.errors import HttpError
        from httplib2 import HttpLib2Error

        try:
            response: object = request.execute(num_retries=self._num_retries)
        except HttpError as e:
            message = e.reason or str(e)
            return Err(RemoteCallFailed(operation=operation, message=message, status=e.status_code or 0))
        except ApiClientError as e:
            return Err(RemoteCallFailed(operation=operation, message=str(e)))
        except GoogleAuthError as e:
            # token refresh during a long upload
            return Err(RemoteCallFailed(operation=operation, message=f"authentication failed: {e}"))
        except (HttpLib2Error, OSError) as e:
            # DNS, redirects, socket errors, TLS failures and timeouts
            return Err(RemoteCallFailed(operation=operation, message=str(e) or type(e).__name__))

        # delete returns an empty body
        return Ok(as_str_dict(response) or {})

    def _media(self, stream: BinaryIO) -> MediaIoBaseUpload:
        from googleapiclient.http import MediaIoBaseUpload

        return MediaIoBaseUpload(
            stream,
            mimetype=MEDIA_MIME_TYPE,
            chunksize=self._chunk_size,
            resumable=True,
        )

    def create_edit(self, package_name: str) -> Result[str, RemoteCallFailed]:
        result = self._execute("create_edit", self._edits.insert(packageName=package_name, body={}))
        if isinstance(result, Err):
            return result
        edit_id = result.value.get("id")
        if not isinstance(edit_id, str) or not edit_id:
            return Err(RemoteCallFailed(operation="create_edit", message="response has no edit id"))
        return Ok(edit_id)

    def validate_edit(self, package_name: str, edit_id: str) -> Result[None, RemoteCallFailed]:
        request = self._edits.validate(packageName=package_name, editId=edit_id)
        return self._execute("validate_edit", request).map(lambda _: None)

    def commit_edit(self, package_name: str, edit_id: str) -> Result[None, RemoteCallFailed]:
        request = self._edits.commit(packageName=package_name, editId=edit_id)
        return self._execute("commit_edit", request).map(lambda _: None)

    def delete_edit(self, package_name: str, edit_id: str) -> Result[None, RemoteCallFailed]:
        request = self._edits.delete(packageName=package_name, editId=edit_id)
        return self._execute("delete_edit", request).map(lambda _: None)

    def upload_bundle(
        self, stream: BinaryIO, package_name: str, edit_id: str
    ) -> Result[UploadResult, RemoteCallFailed]:
        request = self._edits.bundles().upload(
            packageName=package_name,
            editId=edit_id,
            media_body=self._media(stream),
            media_mime_type=MEDIA_MIME_TYPE,
        )
        result = self._execute("upload_bundle", request)
        if isinstance(result, Err):
            return result
        return _upload_result("upload_bundle", result.value, result.value.get("sha256"))

    def upload_apk(
        self, stream: BinaryIO, package_name: str, edit_id: str
    ) -> Result[UploadResult, RemoteCallFailed]:
        request = self._edits.apks().upload(
            packageName=package_name,
            editId=edit_id,
            media_body=self._media(stream),
            media_mime_type=MEDIA_MIME_TYPE,
        )
        result = self._execute("upload_apk", request)
        if isinstance(result, Err):
            return result
        # Apk responses nest digests under "binary".
        binary = as_str_dict(result.value.get("binary")) or {}
        return _upload_result("upload_apk", result.value, binary.get("sha256"))

    def upload_proguard_mapping(
        self, stream: BinaryIO, package_name: str, edit_id: str, version_code: int
    ) -> Result[None, RemoteCallFailed]:
        request = self._edits.deobfuscationfiles().upload(
            packageName=package_name,
            editId=edit_id,
            apkVersionCode=version_code,
            deobfuscationFileType=DEOBFUSCATION_FILE_PROGUARD,
            media_body=self._media(stream),
            media_mime_type=MEDIA_MIME_TYPE,
        )
        return self._execute("upload_proguard_mapping", request).map(lambda _: None)

    def create_draft(
        self,
        package_name: str,
        edit_id: str,
        track: str,
        version_codes: tuple[int, ...],
    ) -> Result[None, RemoteCallFailed]:
        body = {
            "track": track,
            "releases": [
                {
                    "status": STATUS_DRAFT,
                    "versionCodes": [str(code) for code in version_codes],
                }
            ],
        }
        request = self._edits.tracks().update(
            packageName=package_name, editId=edit_id, track=track, body=body
        )
        return self._execute("create_draft", request).map(lambda _: None)


def _upload_result(
    operation: CatalogOperation, payload: dict[str, Any], sha256: object
) -> Result[UploadResult, RemoteCallFailed]:
    version_code = payload.get("versionCode")
    if not isinstance(version_code, int) or not isinstance(sha256, str):
        return Err(
            RemoteCallFailed(
                operation=operation,
                message="upload response is missing versionCode or sha256",
            )
        )
    return Ok(UploadResult(version_code=version_code, sha256=sha256))
