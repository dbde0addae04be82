"""Edit lifecycle orchestration.

A publish run is one Google Play edit:

1. create the edit
2. for each binary, in request order: upload it, compare the catalog's
   SHA-256 with the local one, then upload its mapping file if any
3. validate the edit
4. commit the edit

Any failure after the edit exists deletes it (once, best effort) and returns
the original error. Nothing is retried here; transport retries belong to the
catalog client.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from functools import partial
from typing import TYPE_CHECKING, BinaryIO, cast

from pstore.core.result import Err, Ok, Result
from pstore.output.console import ConsoleProtocol, Style
from pstore.publish.config import PROGRESS_INTERVAL_SECONDS
from pstore.publish.errors import (
    FileUnreadable,
    IntegrityMismatch,
    NoService,
    PublishError,
)
from pstore.publish.integrity import sha256_hex
from pstore.publish.model import (
    BinaryEntry,
    EditState,
    PublishOutcome,
    PublishRequest,
    can_transition,
)
from pstore.publish.progress import ProgressReader, SourceReader, format_bytes

if TYPE_CHECKING:
    from collections.abc import Callable

    from pstore.platform.files import FileSystem
    from pstore.publish.catalog import CatalogClient

__all__ = ["EditSession", "Publisher"]


def _empty_history() -> list[EditState]:
    return [EditState.OPEN]


@dataclass
class EditSession:
    """A remote edit owned by one publish run."""

    package_name: str
    edit_id: str
    history: list[EditState] = field(default_factory=_empty_history)

    @property
    def state(self) -> EditState:
        return self.history[-1]

    def advance(self, target: EditState) -> None:
        """Move to ``target``.

        Raises:
            ValueError: If the lifecycle does not allow the transition.
        """
        if not can_transition(self.state, target):
            raise ValueError(f"edit {self.edit_id}: cannot go from {self.state.value} to {target.value}")
        self.history.append(target)


class Publisher:
    """Runs publish requests against a catalog client.

    Usage:
        publisher = Publisher(fs=LocalFileSystem(), console=RichConsole())
        result = publisher.run(request, client)
        if isinstance(result, Err):
            print_publish_error(result.error, console)
    """

    def __init__(
        self,
        *,
        fs: FileSystem,
        console: ConsoleProtocol,
        progress_interval: float = PROGRESS_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._fs = fs
        self._console = console
        self._progress_interval = progress_interval
        self._clock = clock
        self.session: EditSession | None = None

    def run(
        self, request: PublishRequest, client: CatalogClient | None
    ) -> Result[PublishOutcome, PublishError]:
        """Upload, verify, validate and commit every binary in one edit.

        Returns:
            Ok(PublishOutcome) once the edit is committed, otherwise Err with
            the first error met (the edit has then been deleted, best effort)
        """
        if client is None:
            return Err(NoService())

        self._console.debug(f"starting upload for {request.package_name} ({request.track})")
        created = client.create_edit(request.package_name)
        if isinstance(created, Err):
            return created

        session = EditSession(package_name=request.package_name, edit_id=created.value)
        self.session = session
        self._console.debug(f"created edit {session.edit_id}")

        try:
            result = self._stage_and_commit(session, request, client)
        except BaseException:
            # Ctrl-C or an unexpected client exception still discards the edit.
            self._abort(session, client)
            raise

        if isinstance(result, Err):
            self._abort(session, client)
        return result

    def _stage_and_commit(
        self, session: EditSession, request: PublishRequest, client: CatalogClient
    ) -> Result[PublishOutcome, PublishError]:
        session.advance(EditState.UPLOADING)

        version_codes: list[int] = []
        for entry in request.binaries:
            uploaded = self._upload_binary(entry, request, session, client)
            if isinstance(uploaded, Err):
                return uploaded
            version_code = uploaded.value
            version_codes.append(version_code)

            if not entry.has_mapping:
                self._console.debug(f"no mapping for {entry.file_path}, skipping mapping upload")
                continue

            mapped = self._upload_mapping(entry, version_code, session, client)
            if isinstance(mapped, Err):
                return mapped

        self._console.debug(f"validating edit {session.edit_id}")
        validated = client.validate_edit(session.package_name, session.edit_id)
        if isinstance(validated, Err):
            return validated
        session.advance(EditState.VALIDATED)

        committed = client.commit_edit(session.package_name, session.edit_id)
        if isinstance(committed, Err):
            return committed
        session.advance(EditState.COMMITTED)
        self._console.debug(f"committed edit {session.edit_id}")

        return Ok(PublishOutcome(edit_id=session.edit_id, version_codes=tuple(version_codes)))

    def _upload_binary(
        self,
        entry: BinaryEntry,
        request: PublishRequest,
        session: EditSession,
        client: CatalogClient,
    ) -> Result[int, PublishError]:
        path = entry.file_path
        self._console.debug(f"uploading {path}")

        upload = client.upload_apk if request.is_apk else client.upload_bundle
        try:
            handle = self._fs.open_binary(path)
        except OSError as e:
            return Err(_unreadable(path, e))

        with handle:
            try:
                local_sha256 = sha256_hex(handle)
                handle.seek(0)
            except OSError as e:
                return Err(_unreadable(path, e))
            reader = ProgressReader(
                handle,
                total=self._fs.size(path) or 0,
                report=partial(self._report_progress, path),
                interval=self._progress_interval,
                clock=self._clock,
            )
            uploaded = upload(cast(BinaryIO, reader), session.package_name, session.edit_id)

        # A local read failure wins over whatever the client made of it.
        if reader.read_error is not None:
            return Err(_unreadable(path, reader.read_error))
        if isinstance(uploaded, Err):
            return uploaded

        remote = uploaded.value
        self._console.debug(f"uploaded {path} as version code {remote.version_code}, verifying integrity")
        if remote.sha256 != local_sha256:
            return Err(IntegrityMismatch(path=path, local=local_sha256, remote=remote.sha256))
        self._console.debug(f"integrity check passed with sha256 {local_sha256}")
        return Ok(remote.version_code)

    def _upload_mapping(
        self,
        entry: BinaryEntry,
        version_code: int,
        session: EditSession,
        client: CatalogClient,
    ) -> Result[None, PublishError]:
        path = entry.mapping_path
        self._console.debug(f"uploading mapping {path} for version code {version_code}")
        try:
            handle = self._fs.open_binary(path)
        except OSError as e:
            return Err(_unreadable(path, e))

        with handle:
            reader = SourceReader(handle)
            mapped = client.upload_proguard_mapping(
                cast(BinaryIO, reader), session.package_name, session.edit_id, version_code
            )

        if reader.read_error is not None:
            return Err(_unreadable(path, reader.read_error))
        if isinstance(mapped, Err):
            return mapped
        self._console.debug(f"mapping {path} uploaded")
        return Ok(None)

    def _abort(self, session: EditSession, client: CatalogClient) -> None:
        if session.state.is_terminal:
            return
        session.advance(EditState.ABORTED)
        deleted = client.delete_edit(session.package_name, session.edit_id)
        if isinstance(deleted, Err):
            self._console.warning(f"could not delete edit {session.edit_id}: {deleted.error.message}")
            return
        self._console.debug(f"deleted edit {session.edit_id}")

    def _report_progress(self, path: str, done: int, total: int) -> None:
        self._console.print(f"{path}: {format_bytes(done)} / {format_bytes(total)}", Style.DIM)


def _unreadable(path: str, error: OSError) -> FileUnreadable:
    return FileUnreadable(path=path, reason=error.strerror or str(error))
